"""Combination, hit-testing and display of class masks.

Heuristic masks are expected to be disjoint but nothing enforces it, so
overlaps are resolved by ``CLASS_PRIORITY``: small, detailed elements win
over the large surfaces that surround them.
"""

from __future__ import annotations

from typing import Iterable, List, Sequence, Tuple, Union

import numpy as np

from house_recolor.types import (
    BACKGROUND_ID,
    DOORS_ID,
    LANDSCAPE_ID,
    ROOF_ID,
    SKY_ID,
    TRIM_ID,
    WALLS_ID,
    WINDOWS_ID,
    ClassificationResult,
    ClassMask,
    ManualSelection,
    get_class,
)
from house_recolor.utils.color import hex_to_rgb
from house_recolor.utils.geometry import polygon_to_mask, stroke_to_mask
from house_recolor.utils.vision import box_sum

# Highest priority first.
CLASS_PRIORITY: Tuple[int, ...] = (
    DOORS_ID,
    WINDOWS_ID,
    TRIM_ID,
    ROOF_ID,
    WALLS_ID,
    LANDSCAPE_ID,
    SKY_ID,
)

MaskSource = Union[ClassificationResult, Sequence[ClassMask]]


def _as_masks(source: MaskSource) -> List[ClassMask]:
    if isinstance(source, ClassificationResult):
        return list(source.masks)
    return list(source)


def _priority_rank(class_id: int, priority: Sequence[int]) -> int:
    try:
        return priority.index(class_id)
    except ValueError:
        return len(priority)


def _validate_selection(selected_ids: Iterable[int]) -> List[int]:
    ids = []
    for class_id in selected_ids:
        get_class(class_id)
        if class_id == BACKGROUND_ID:
            raise ValueError("Background (class 0) cannot be selected.")
        ids.append(int(class_id))
    return ids


def combine_masks(
    source: MaskSource,
    selected_ids: Iterable[int],
    priority: Sequence[int] = CLASS_PRIORITY,
) -> np.ndarray:
    """Overlay the masks of the selected classes into one label map.

    Args:
        source: Classification result or list of class masks.
        selected_ids: Class ids chosen by the user. Ids without a mask (not
            detected) contribute nothing.
        priority: Class ids ordered from highest to lowest priority; on
            overlap the higher-priority class owns the pixel.

    Returns:
        HxW uint8 array holding the owning class id, 0 where unselected.
    """

    masks = _as_masks(source)
    wanted = set(_validate_selection(selected_ids))
    if isinstance(source, ClassificationResult):
        shape = (source.height, source.width)
    elif masks:
        shape = masks[0].data.shape
    else:
        raise ValueError("No class masks to combine.")
    combined = np.zeros(shape, dtype=np.uint8)
    chosen = [mask for mask in masks if mask.class_id in wanted]
    # Paint lowest priority first so higher-priority classes overwrite it.
    chosen.sort(key=lambda mask: _priority_rank(mask.class_id, priority), reverse=True)
    for mask in chosen:
        if mask.data.shape != combined.shape:
            raise ValueError("Class masks have mismatched shapes.")
        combined[mask.data > 0] = mask.class_id
    return combined


def label_map(source: MaskSource, priority: Sequence[int] = CLASS_PRIORITY) -> np.ndarray:
    """Label map of every detected class under the priority policy."""

    return combine_masks(source, [mask.class_id for mask in _as_masks(source)], priority)


def class_at_pixel(source: MaskSource, x: int, y: int, priority: Sequence[int] = CLASS_PRIORITY) -> int:
    """Class id owning pixel ``(x, y)``; 0 when no detected class covers it."""

    masks = _as_masks(source)
    if isinstance(source, ClassificationResult):
        height, width = source.height, source.width
    elif masks:
        height, width = masks[0].data.shape
    else:
        raise ValueError("No class masks to hit-test.")
    if not (0 <= x < width and 0 <= y < height):
        raise ValueError(f"Pixel ({x}, {y}) is outside the {width}x{height} image.")
    owners = [mask.class_id for mask in masks if mask.data[y, x] > 0]
    if not owners:
        return BACKGROUND_ID
    return min(owners, key=lambda class_id: _priority_rank(class_id, priority))


def rasterize_selection(selection: ManualSelection, width: int, height: int) -> np.ndarray:
    """Rasterize a manual selection into a boolean HxW coverage map."""

    if selection.tool == "polygon":
        covered = polygon_to_mask(selection.points, width, height, 1)
    else:
        covered = stroke_to_mask(selection.points, width, height, 1, selection.size)
    return covered > 0


def apply_selection(mask: np.ndarray, selection: ManualSelection) -> np.ndarray:
    """Return a copy of ``mask`` with a manual selection painted in.

    Polygons and brush strokes write their class id; eraser strokes clear
    the covered pixels back to 0.
    """

    height, width = mask.shape
    covered = rasterize_selection(selection, width, height)
    updated = mask.copy()
    updated[covered] = BACKGROUND_ID if selection.tool == "eraser" else selection.class_id
    return updated


def render_overlay(
    source: MaskSource,
    alpha: int = 120,
    min_alpha: int = 60,
    min_edge_strength: float = 0.4,
) -> np.ndarray:
    """Render detected classes in their legend colors as an RGBA layer.

    Alpha is scaled by the share of same-class 8-neighbours, so boundaries
    fade slightly; it never drops below ``min_alpha`` inside a mask and is 0
    outside all masks.
    """

    labels = label_map(source)
    overlay = np.zeros(labels.shape + (4,), dtype=np.uint8)
    in_bounds = box_sum(np.ones(labels.shape, dtype="float32"), 1) - 1.0
    for mask in _as_masks(source):
        owned = labels == mask.class_id
        if not owned.any():
            continue
        same = box_sum(owned.astype("float32"), 1) - owned
        ratio = np.where(in_bounds > 0, same / np.maximum(in_bounds, 1.0), 1.0)
        strength = np.maximum(min_edge_strength, ratio)
        layer_alpha = np.maximum(min_alpha, np.floor(alpha * strength))
        overlay[owned, :3] = hex_to_rgb(get_class(mask.class_id).color)
        overlay[owned, 3] = layer_alpha[owned].astype(np.uint8)
    return overlay
