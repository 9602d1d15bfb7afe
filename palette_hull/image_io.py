from __future__ import annotations

import io
from pathlib import Path
from typing import Optional, Tuple

import numpy as np
from PIL import Image, ImageCms, ImageOps

"""
Image I/O helpers (RGB in sRGB) and output path / format derivation.

Output format: the output path's extension if Pillow knows it, else the input
image's format, else JPEG. Default output name: out.<ext> for that format.
"""

FALLBACK_FORMAT = "JPEG"

_PREFERRED_EXT = {
    "JPEG": ".jpg",
    "PNG": ".png",
    "WEBP": ".webp",
    "BMP": ".bmp",
    "GIF": ".gif",
    "TIFF": ".tiff",
}


def _convert_to_srgb_rgb(im: Image.Image) -> Image.Image:
    im = ImageOps.exif_transpose(im)
    icc_bytes = im.info.get("icc_profile")

    if icc_bytes:
        try:
            src_prof = ImageCms.ImageCmsProfile(io.BytesIO(icc_bytes))
            dst_prof = ImageCms.createProfile("sRGB")
            im2 = ImageCms.profileToProfile(
                im.convert("RGB"),
                src_prof,
                dst_prof,
                renderingIntent=ImageCms.Intent.PERCEPTUAL,
                outputMode="RGB",
            )
            if im2 is not None:
                return im2
        except (ImageCms.PyCMSError, OSError, ValueError):
            pass

    return im.convert("RGB")


def load_image_rgb(path: Path) -> Tuple[np.ndarray, Optional[str]]:
    """Load an image as uint8 [H,W,3] sRGB; also returns Pillow's format name (or None)."""
    with Image.open(path) as im0:
        fmt = im0.format
        im = _convert_to_srgb_rgb(im0)
        arr = np.array(im, dtype=np.uint8)
    return arr, fmt


def format_from_path(path: Optional[Path]) -> Optional[str]:
    """Pillow format name for a path's extension, or None when unknown."""
    if path is None or not path.suffix:
        return None
    return Image.registered_extensions().get(path.suffix.lower())


def extension_for_format(fmt: str) -> str:
    """Preferred file extension (with dot) for a Pillow format name."""
    fmt = fmt.upper()
    if fmt in _PREFERRED_EXT:
        return _PREFERRED_EXT[fmt]
    for ext, name in Image.registered_extensions().items():
        if name == fmt:
            return ext
    return _PREFERRED_EXT[FALLBACK_FORMAT]


def resolve_output(
    output: Optional[Path], input_format: Optional[str]
) -> Tuple[Path, str]:
    """
    Decide the output path and format.

    Format: from `output`'s extension, else `input_format`, else JPEG.
    Path: `output` when given, else out.<ext> in the working directory.
    """
    fmt = format_from_path(output) or (input_format.upper() if input_format else None)
    if fmt is None:
        fmt = FALLBACK_FORMAT
    if output is None or str(output) == "":
        output = Path(f"out{extension_for_format(fmt)}")
    return output, fmt


def save_image_rgb(path: Path, rgb: np.ndarray, fmt: str) -> Path:
    """Write a uint8 [H,W,3] buffer with the given Pillow format."""
    Image.fromarray(np.ascontiguousarray(rgb, dtype=np.uint8)).save(path, format=fmt)
    return path


__all__ = [
    "FALLBACK_FORMAT",
    "load_image_rgb",
    "format_from_path",
    "extension_for_format",
    "resolve_output",
    "save_image_rgb",
]
