"""Shared type definitions for the house recolor pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import List, Optional, Sequence, Tuple

import numpy as np

from house_recolor.errors import InvalidImageError


def _readonly(array: np.ndarray) -> np.ndarray:
    array.setflags(write=False)
    return array


@dataclass(frozen=True)
class PixelBuffer:
    """Immutable HxWx4 uint8 RGBA image, row-major.

    RGB input gets an opaque alpha channel. The wrapped array is a private
    read-only copy, so callers may keep mutating their own array.
    """

    data: np.ndarray

    def __post_init__(self) -> None:
        data = np.asarray(self.data)
        if data.ndim != 3 or data.shape[-1] not in (3, 4):
            raise InvalidImageError(f"Expected an HxWx3 or HxWx4 array, got shape {data.shape}.")
        if data.shape[0] == 0 or data.shape[1] == 0:
            raise InvalidImageError("Pixel buffer has zero area.")
        if data.dtype != np.uint8:
            data = np.clip(data, 0, 255).astype(np.uint8)
        if data.shape[-1] == 3:
            alpha = np.full(data.shape[:2] + (1,), 255, dtype=np.uint8)
            data = np.concatenate([data, alpha], axis=-1)
        else:
            data = data.copy()
        object.__setattr__(self, "data", _readonly(np.ascontiguousarray(data)))

    @property
    def width(self) -> int:
        return int(self.data.shape[1])

    @property
    def height(self) -> int:
        return int(self.data.shape[0])

    @property
    def shape(self) -> Tuple[int, int]:
        return self.height, self.width

    @property
    def rgb(self) -> np.ndarray:
        return self.data[..., :3]

    @property
    def alpha(self) -> np.ndarray:
        return self.data[..., 3]

    def copy_pixels(self) -> np.ndarray:
        """Return a writable copy of the RGBA samples."""

        return self.data.copy()


@dataclass(frozen=True)
class SemanticClass:
    """Entry of the fixed architectural class catalog."""

    id: int
    name: str
    display_name: str
    color: str


SEMANTIC_CLASSES: Tuple[SemanticClass, ...] = (
    SemanticClass(0, "background", "Background", "#000000"),
    SemanticClass(1, "walls", "Walls", "#FF6B6B"),
    SemanticClass(2, "roof", "Roof", "#4ECDC4"),
    SemanticClass(3, "windows", "Windows", "#45B7D1"),
    SemanticClass(4, "doors", "Doors", "#96CEB4"),
    SemanticClass(5, "trim", "Trim & Details", "#FFEAA7"),
    SemanticClass(6, "landscape", "Landscape", "#DDA0DD"),
    SemanticClass(7, "sky", "Sky", "#87CEEB"),
)

BACKGROUND_ID = 0
WALLS_ID = 1
ROOF_ID = 2
WINDOWS_ID = 3
DOORS_ID = 4
TRIM_ID = 5
LANDSCAPE_ID = 6
SKY_ID = 7

_CLASSES_BY_ID = {cls.id: cls for cls in SEMANTIC_CLASSES}
_CLASSES_BY_NAME = {cls.name: cls for cls in SEMANTIC_CLASSES}


def get_class(class_id: int) -> SemanticClass:
    try:
        return _CLASSES_BY_ID[int(class_id)]
    except KeyError as exc:
        raise ValueError(f"Unknown class id: {class_id}") from exc


def get_class_by_name(name: str) -> SemanticClass:
    try:
        return _CLASSES_BY_NAME[name.strip().lower()]
    except KeyError as exc:
        raise ValueError(f"Unknown class name: {name}") from exc


def selectable_classes() -> List[SemanticClass]:
    """Catalog entries a user may select (everything but background)."""

    return [cls for cls in SEMANTIC_CLASSES if cls.id != BACKGROUND_ID]


@dataclass(frozen=True)
class ClassMask:
    """Per-class mask holding 0 or ``class_id`` for every pixel."""

    class_id: int
    data: np.ndarray
    confidence: float

    def __post_init__(self) -> None:
        data = np.asarray(self.data)
        if data.ndim != 2:
            raise ValueError(f"Class mask must be 2-D, got shape {data.shape}.")
        data = np.where(data > 0, self.class_id, 0).astype(np.uint8)
        object.__setattr__(self, "data", _readonly(data))

    @property
    def class_name(self) -> str:
        return get_class(self.class_id).name

    @property
    def width(self) -> int:
        return int(self.data.shape[1])

    @property
    def height(self) -> int:
        return int(self.data.shape[0])

    @property
    def pixel_count(self) -> int:
        return int(np.count_nonzero(self.data))


@dataclass
class ClassificationResult:
    """Masks for the detected classes plus the full class catalog."""

    masks: List[ClassMask]
    width: int
    height: int
    classes: List[SemanticClass] = field(default_factory=lambda: list(SEMANTIC_CLASSES))

    def get_mask(self, class_id: int) -> Optional[ClassMask]:
        for mask in self.masks:
            if mask.class_id == class_id:
                return mask
        return None

    def detected_class_ids(self) -> List[int]:
        return [mask.class_id for mask in self.masks]


@dataclass(frozen=True)
class ColorChangeOptions:
    """Parameters of a single recolor request.

    Attributes:
        new_color: Target color as ``#RRGGBB``.
        preserve_texture: Keep original lightness and damp saturation in
            shadows and highlights.
        blend_edges: Soften the transition at mask boundaries.
        intensity: Strength of the change in [0, 1].
    """

    new_color: str
    preserve_texture: bool = True
    blend_edges: bool = True
    intensity: float = 1.0

    def __post_init__(self) -> None:
        if not 0.0 <= float(self.intensity) <= 1.0:
            raise ValueError(f"intensity must be within [0, 1], got {self.intensity}.")

    def with_blend_edges(self, blend_edges: bool) -> "ColorChangeOptions":
        return replace(self, blend_edges=blend_edges)


@dataclass
class ProcessingResult:
    """Output of a transform together with its wall-clock duration."""

    pixels: PixelBuffer
    processing_time_ms: float


MANUAL_TOOLS = ("polygon", "brush", "eraser")


@dataclass
class ManualSelection:
    """Points drawn by the manual selection tools.

    Attributes:
        points: Flat ``[x0, y0, x1, y1, ...]`` list or a sequence of pairs.
        class_id: Class assigned to the painted pixels.
        tool: "polygon", "brush" or "eraser".
        size: Brush diameter in pixels (ignored for polygons).
    """

    points: Sequence
    class_id: int
    tool: str = "polygon"
    size: int = 10

    def __post_init__(self) -> None:
        if self.tool not in MANUAL_TOOLS:
            raise ValueError(f"Unknown selection tool: {self.tool}")
        if self.tool != "eraser" and self.class_id == BACKGROUND_ID:
            raise ValueError("Background cannot be selected.")
        get_class(self.class_id)
