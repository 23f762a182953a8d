"""Low-level analysis passes feeding the region classifier.

Each pass is a pure function of the RGB samples:

* color regions: 4-connected flood fill against the seed color,
* edges: Sobel gradient magnitude of the channel mean,
* luminance: perceptual brightness in [0, 1].
"""

from __future__ import annotations

from typing import List, Tuple

import cv2
import numpy as np


def color_regions(rgb: np.ndarray, threshold: float = 30.0) -> Tuple[np.ndarray, np.ndarray]:
    """Label connected areas of similar color.

    Pixels are visited in raster order; every unlabeled pixel seeds a new
    region that grows through 4-neighbours whose Euclidean RGB distance to
    the seed color is at most ``threshold``.

    Args:
        rgb: HxWx3 uint8 array.
        threshold: Maximum distance to the seed color.

    Returns:
        ``(labels, sizes)``: an HxW int32 label map starting at 0 and the
        pixel count of every label.
    """

    height, width = rgb.shape[:2]
    total = height * width
    flat = rgb.reshape(-1, 3).astype(np.int32)
    reds = flat[:, 0].tolist()
    greens = flat[:, 1].tolist()
    blues = flat[:, 2].tolist()
    labels = [-1] * total
    limit = float(threshold) ** 2
    sizes: List[int] = []

    for seed in range(total):
        if labels[seed] != -1:
            continue
        label = len(sizes)
        seed_r, seed_g, seed_b = reds[seed], greens[seed], blues[seed]
        labels[seed] = label
        stack = [seed]
        count = 0
        while stack:
            index = stack.pop()
            count += 1
            column = index % width
            neighbours = []
            if index >= width:
                neighbours.append(index - width)
            if index + width < total:
                neighbours.append(index + width)
            if column > 0:
                neighbours.append(index - 1)
            if column < width - 1:
                neighbours.append(index + 1)
            for other in neighbours:
                if labels[other] != -1:
                    continue
                dr = reds[other] - seed_r
                dg = greens[other] - seed_g
                db = blues[other] - seed_b
                if dr * dr + dg * dg + db * db <= limit:
                    labels[other] = label
                    stack.append(other)
        sizes.append(count)

    label_map = np.asarray(labels, dtype=np.int32).reshape(height, width)
    return label_map, np.asarray(sizes, dtype=np.int64)


def grayscale(rgb: np.ndarray) -> np.ndarray:
    """Unweighted channel mean, float32."""

    return rgb[..., :3].astype("float32").mean(axis=-1)


def sobel_magnitude(gray: np.ndarray) -> np.ndarray:
    """3x3 Sobel gradient magnitude; the outermost pixel ring is zero."""

    gray = gray.astype("float32")
    grad_x = cv2.Sobel(gray, cv2.CV_32F, 1, 0, ksize=3)
    grad_y = cv2.Sobel(gray, cv2.CV_32F, 0, 1, ksize=3)
    magnitude = np.sqrt(grad_x * grad_x + grad_y * grad_y)
    magnitude[0, :] = 0.0
    magnitude[-1, :] = 0.0
    magnitude[:, 0] = 0.0
    magnitude[:, -1] = 0.0
    return magnitude


def edge_map(rgb: np.ndarray, threshold: float = 50.0) -> np.ndarray:
    """Boolean map of pixels whose gradient magnitude exceeds ``threshold``."""

    return sobel_magnitude(grayscale(rgb)) > threshold


def luminance(rgb: np.ndarray) -> np.ndarray:
    """Perceptual luminance ``0.299 R + 0.587 G + 0.114 B`` scaled to [0, 1]."""

    rgb = rgb[..., :3].astype("float32")
    return (0.299 * rgb[..., 0] + 0.587 * rgb[..., 1] + 0.114 * rgb[..., 2]) / 255.0


def near_edges(edges: np.ndarray, radius: int) -> np.ndarray:
    """True where an edge pixel lies within ``radius`` pixels (disc)."""

    if radius <= 0:
        return edges.astype(bool)
    kernel = cv2.getStructuringElement(cv2.MORPH_ELLIPSE, (2 * radius + 1, 2 * radius + 1))
    return cv2.dilate(edges.astype("uint8"), kernel) > 0


def vertical_edge_support(edges: np.ndarray, rows: int) -> np.ndarray:
    """True where the same column holds an edge pixel within ``rows`` rows."""

    if rows <= 0:
        return edges.astype(bool)
    kernel = np.ones((2 * rows + 1, 1), dtype="uint8")
    return cv2.dilate(edges.astype("uint8"), kernel) > 0
