"""Decode and encode image files to and from pixel buffers."""

from __future__ import annotations

import os
from typing import Union

import numpy as np
import pillow_heif
from PIL import Image, ImageOps, UnidentifiedImageError

from house_recolor.errors import InvalidImageError
from house_recolor.types import PixelBuffer

MAX_UPLOAD_BYTES = 10 * 1024 * 1024
SUPPORTED_EXTENSIONS = (".jpg", ".jpeg", ".png", ".heif", ".heic")

PathLike = Union[str, "os.PathLike[str]"]

# HEIF/HEIC decoding (phone photos) comes from the pillow-heif plugin.
pillow_heif.register_heif_opener()


def validate_image_file(path: PathLike) -> None:
    """Reject files that are missing, too large, or of an unsupported type."""

    path = os.fspath(path)
    if not os.path.isfile(path):
        raise InvalidImageError(f"Image file not found: {path}")
    extension = os.path.splitext(path)[1].lower()
    if extension not in SUPPORTED_EXTENSIONS:
        raise InvalidImageError(
            f"Unsupported image type {extension!r}; expected one of {', '.join(SUPPORTED_EXTENSIONS)}."
        )
    if os.path.getsize(path) > MAX_UPLOAD_BYTES:
        raise InvalidImageError(f"Image exceeds {MAX_UPLOAD_BYTES // (1024 * 1024)}MB: {path}")


def load_pixels(path: PathLike, validate: bool = True) -> PixelBuffer:
    """Decode an image file into an RGBA pixel buffer.

    EXIF orientation is applied so phone photos come out upright.
    """

    if validate:
        validate_image_file(path)
    try:
        with Image.open(os.fspath(path)) as image:
            image = ImageOps.exif_transpose(image)
            pixels = np.asarray(image.convert("RGBA"))
    except (UnidentifiedImageError, OSError) as exc:
        raise InvalidImageError(f"Failed to read image: {path}") from exc
    return PixelBuffer(pixels)


def save_pixels(path: PathLike, pixels: PixelBuffer) -> None:
    """Encode a pixel buffer; JPEG and HEIF targets drop the alpha channel."""

    path = os.fspath(path)
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    image = Image.fromarray(pixels.copy_pixels())
    if os.path.splitext(path)[1].lower() in (".jpg", ".jpeg", ".heif", ".heic"):
        image = image.convert("RGB")
    image.save(path)


def save_mask(path: PathLike, mask: np.ndarray) -> None:
    """Write a label mask as an 8-bit PNG with selected pixels at 255."""

    path = os.fspath(path)
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    Image.fromarray(np.where(mask > 0, 255, 0).astype("uint8")).save(path)
