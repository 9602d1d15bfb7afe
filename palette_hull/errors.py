# palette_hull/errors.py
"""
Exception types.

PaletteError and its subclasses are raised at construction time and are meant
for the caller. InternalGeometryInvariantError signals a defect and is never
caught inside the package.
"""


class PaletteError(ValueError):
    """Palette input cannot be used."""


class InvalidHexError(PaletteError):
    """A palette entry is not a valid hex colour."""


class DegenerateHullError(PaletteError):
    """The palette does not span a positive-volume convex region."""


class InternalGeometryInvariantError(RuntimeError):
    """A nearest-point query landed outside the search margin."""


class TransferCancelled(RuntimeError):
    """Mapping was aborted through the cancel event."""


__all__ = [
    "PaletteError",
    "InvalidHexError",
    "DegenerateHullError",
    "InternalGeometryInvariantError",
    "TransferCancelled",
]
