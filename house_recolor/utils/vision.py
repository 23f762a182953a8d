"""Utility helpers for image resampling and window sums."""

from typing import Tuple

import cv2
import numpy as np


def scaled_size(width: int, height: int, scale: float) -> Tuple[int, int]:
    """Return ``(width, height)`` scaled down, never below one pixel."""

    return max(1, int(np.floor(width * scale))), max(1, int(np.floor(height * scale)))


def resize_area(image: np.ndarray, size: Tuple[int, int]) -> np.ndarray:
    """Area-resample an image to ``size = (height, width)``.

    Area resampling averages every source pixel that falls into a target
    pixel, which is the right filter for shrinking photos.
    """

    height, width = size
    if image.shape[:2] == (height, width):
        return image.copy()
    if not image.flags.writeable:
        image = image.copy()
    return cv2.resize(image, (width, height), interpolation=cv2.INTER_AREA)


def resize_nearest(mask: np.ndarray, size: Tuple[int, int]) -> np.ndarray:
    """Point-sample a label map to ``size = (height, width)``.

    Target pixel ``(x, y)`` takes the source pixel
    ``(floor(x * W / width), floor(y * H / height))`` so class ids are never
    mixed.
    """

    height, width = size
    src_height, src_width = mask.shape[:2]
    y_indices = np.floor(np.arange(height) * (src_height / height)).astype(int)
    x_indices = np.floor(np.arange(width) * (src_width / width)).astype(int)
    y_indices = np.minimum(y_indices, src_height - 1)
    x_indices = np.minimum(x_indices, src_width - 1)
    return mask[np.ix_(y_indices, x_indices)]


def resize_bilinear(image: np.ndarray, size: Tuple[int, int]) -> np.ndarray:
    """Bilinear resize to ``size = (height, width)``, used to enlarge previews."""

    height, width = size
    if not image.flags.writeable:
        image = image.copy()
    return cv2.resize(image, (width, height), interpolation=cv2.INTER_LINEAR)


def box_sum(mask: np.ndarray, radius: int) -> np.ndarray:
    """Sum of a float map over a ``(2r + 1)`` square window, zero outside."""

    ksize = 2 * radius + 1
    return cv2.boxFilter(
        mask.astype("float32"),
        ddepth=-1,
        ksize=(ksize, ksize),
        normalize=False,
        borderType=cv2.BORDER_CONSTANT,
    )
