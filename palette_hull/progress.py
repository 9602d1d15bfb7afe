from __future__ import annotations

"""
Progress for long transfers.

PixelCounter      : monotonically increasing count of finished pixels
EtaEstimator      : smoothed ETA that avoids early zeros and oscillation
ProgressReporter  : polling thread that prints '[transfer]  42% (ETA 3s)' lines

The mapper only advances the counter. The reporter reads it on a fixed
interval and stops by itself once the counter reaches the total.
"""

import threading
import time
from typing import Callable, Optional

from .constants import PROGRESS_INTERVAL
from .utils import format_eta, print_progress_line


class PixelCounter:
    """Lock-protected integer; read only for display."""

    def __init__(self) -> None:
        self._value = 0
        self._lock = threading.Lock()

    def add(self, n: int = 1) -> int:
        if n < 0:
            raise ValueError("counter only moves forward")
        with self._lock:
            self._value += int(n)
            return self._value

    @property
    def value(self) -> int:
        return self._value


class EtaEstimator:
    """
    ETA from (done, elapsed) samples.
    Blends fast/slow EWMAs of the per-pixel cost and enforces a floor from overall pace.
    """

    def __init__(self, total: int, alpha_fast: float = 0.25, alpha_slow: float = 0.08):
        self.total = max(1, int(total))
        self.done = 0
        self.elapsed = 0.0
        self.ema_fast: Optional[float] = None
        self.ema_slow: Optional[float] = None
        self.display_eta: Optional[float] = None
        self.af = alpha_fast
        self.aslow = alpha_slow

    def update(self, done: int, elapsed: float) -> Optional[float]:
        delta = int(done) - self.done
        dt = float(elapsed) - self.elapsed
        if delta <= 0 or dt <= 0.0:
            return self.display_eta
        per_px = dt / delta
        self.done = int(done)
        self.elapsed = float(elapsed)
        self.ema_fast = (
            per_px
            if self.ema_fast is None
            else (1 - self.af) * self.ema_fast + self.af * per_px
        )
        self.ema_slow = (
            per_px
            if self.ema_slow is None
            else (1 - self.aslow) * self.ema_slow + self.aslow * per_px
        )

        left = max(0, self.total - self.done)
        eta_raw = left * max(self.ema_fast, self.ema_slow)
        naive = self.elapsed * (self.total / max(1, self.done) - 1.0)
        eta = max(eta_raw, max(0.0, 0.9 * naive))
        self.display_eta = (
            eta if self.display_eta is None else 0.3 * eta + 0.7 * self.display_eta
        )
        return self.display_eta


class ProgressReporter:
    """
    Poll a PixelCounter every `interval` seconds on a daemon thread.

    Prints once per whole percent. Ends when the counter reaches `total` or on
    stop(). As a context manager it starts on enter and stops on exit.
    """

    def __init__(
        self,
        counter: PixelCounter,
        total: int,
        *,
        interval: float = PROGRESS_INTERVAL,
        label: str = "transfer",
        enabled: bool = True,
        write: Callable[[str, bool], None] = print_progress_line,
    ) -> None:
        self.counter = counter
        self.total = max(0, int(total))
        self.interval = float(interval)
        self.label = label
        self.enabled = enabled
        self._write = write
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._last_pct = -1
        self._eta = EtaEstimator(self.total)
        self._t0 = 0.0

    def _emit(self, done: int, final: bool) -> None:
        if not self.enabled:
            return
        pct = 100 if self.total == 0 else max(0, min(100, (100 * done) // self.total))
        if not final and pct <= self._last_pct:
            return
        eta = 0.0 if done >= self.total else self._eta.update(done, time.perf_counter() - self._t0)
        self._write(f"[{self.label}] {pct:3d}% (ETA {format_eta(eta)})", final)
        self._last_pct = pct

    def _run(self) -> None:
        while True:
            done = self.counter.value
            if done >= self.total:
                break
            self._emit(done, final=False)
            if self._stop.wait(self.interval):
                break
        self._emit(self.counter.value, final=True)

    def start(self) -> "ProgressReporter":
        self._t0 = time.perf_counter()
        self._thread = threading.Thread(target=self._run, name="progress", daemon=True)
        self._thread.start()
        return self

    def stop(self) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join()
            self._thread = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def __enter__(self) -> "ProgressReporter":
        return self.start()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()


__all__ = ["PixelCounter", "EtaEstimator", "ProgressReporter"]
