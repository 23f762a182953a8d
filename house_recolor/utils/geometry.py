"""Rasterization of manual selections into label masks."""

from __future__ import annotations

import math
from typing import Sequence

import cv2
import numpy as np


def as_point_array(points: Sequence) -> np.ndarray:
    """Normalize ``[x0, y0, x1, y1, ...]`` or ``[(x0, y0), ...]`` to an Nx2 float array."""

    array = np.asarray(points, dtype="float64")
    if array.size == 0:
        return array.reshape(0, 2)
    if array.ndim == 1:
        if array.size % 2:
            raise ValueError("Flat point lists need an even number of coordinates.")
        return array.reshape(-1, 2)
    if array.ndim == 2 and array.shape[1] == 2:
        return array
    raise ValueError(f"Unsupported point layout with shape {array.shape}.")


def polygon_to_mask(points: Sequence, width: int, height: int, class_id: int) -> np.ndarray:
    """Scanline-fill a polygon into an HxW uint8 mask.

    For every integer row ``y`` an edge contributes an intersection when
    ``y1 <= y < y2`` (or the reverse), with the last vertex closing back to
    the first. Sorted intersections are paired: the first of each pair opens
    a span, the second closes it, and pixel ``x`` is filled when
    ``start <= x < end``. Self-intersecting polygons therefore fill with the
    even-odd rule.

    Args:
        points: Polygon vertices in pixel coordinates.
        width: Mask width.
        height: Mask height.
        class_id: Value written into filled pixels.

    Returns:
        uint8 array holding ``class_id`` inside the polygon and 0 elsewhere.
    """

    mask = np.zeros((height, width), dtype=np.uint8)
    vertices = as_point_array(points)
    if len(vertices) < 3:
        return mask

    x1, y1 = vertices[:, 0], vertices[:, 1]
    x2, y2 = np.roll(x1, -1), np.roll(y1, -1)
    non_horizontal = y1 != y2
    x1, y1, x2, y2 = x1[non_horizontal], y1[non_horizontal], x2[non_horizontal], y2[non_horizontal]
    if x1.size == 0:
        return mask

    row_start = max(0, int(math.floor(min(y1.min(), y2.min()))))
    row_stop = min(height, int(math.ceil(max(y1.max(), y2.max()))) + 1)
    for y in range(row_start, row_stop):
        crossing = ((y1 <= y) & (y < y2)) | ((y2 <= y) & (y < y1))
        if not crossing.any():
            continue
        cx1, cy1, cx2, cy2 = x1[crossing], y1[crossing], x2[crossing], y2[crossing]
        intersections = np.sort(cx1 + (y - cy1) * (cx2 - cx1) / (cy2 - cy1))
        for start_x, end_x in zip(intersections[0::2], intersections[1::2]):
            start = max(0, int(math.ceil(start_x)))
            end = min(width, int(math.ceil(end_x)))
            if end > start:
                mask[y, start:end] = class_id
    return mask


def stroke_to_mask(points: Sequence, width: int, height: int, class_id: int, size: int) -> np.ndarray:
    """Rasterize a brush stroke as a round-capped polyline of diameter ``size``."""

    mask = np.zeros((height, width), dtype=np.uint8)
    vertices = as_point_array(points)
    if len(vertices) == 0:
        return mask
    thickness = max(1, int(size))
    pixels = np.floor(vertices + 0.5).astype(np.int32)
    if len(pixels) == 1:
        x, y = pixels[0]
        cv2.circle(mask, (int(x), int(y)), max(1, thickness // 2), int(class_id), thickness=-1)
        return mask
    for (x0, y0), (x1, y1) in zip(pixels[:-1], pixels[1:]):
        cv2.line(mask, (int(x0), int(y0)), (int(x1), int(y1)), int(class_id), thickness=thickness)
    return mask
