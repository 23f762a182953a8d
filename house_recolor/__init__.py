"""House photo segmentation and recoloring.

A heuristic classifier splits a house photo into architectural regions
(walls, roof, windows, doors, trim, landscape, sky); the color transform
engine then changes the hue of the selected regions while keeping the
per-pixel lightness that carries shadows and texture.
"""

from house_recolor.classifier import RegionClassifier
from house_recolor.config import (
    ClassifierConfig,
    PipelineConfig,
    SessionConfig,
    TemplateConfig,
    TransformConfig,
)
from house_recolor.errors import (
    HouseRecolorError,
    InvalidImageError,
    RenderInProgressError,
    ServiceNotReadyError,
)
from house_recolor.lifecycle import ServiceState
from house_recolor.masks import CLASS_PRIORITY, apply_selection, class_at_pixel, combine_masks, render_overlay
from house_recolor.pipeline import HouseRecolorPipeline
from house_recolor.session import PreviewScheduler, PreviewUpdate, RecolorSession
from house_recolor.template import TemplateClassifier
from house_recolor.transform import ColorTransformEngine, upscale_for_display
from house_recolor.types import (
    SEMANTIC_CLASSES,
    ClassificationResult,
    ClassMask,
    ColorChangeOptions,
    ManualSelection,
    PixelBuffer,
    ProcessingResult,
    SemanticClass,
)
from house_recolor.utils.geometry import polygon_to_mask, stroke_to_mask

__all__ = [
    "HouseRecolorPipeline",
    "RegionClassifier",
    "TemplateClassifier",
    "ColorTransformEngine",
    "PreviewScheduler",
    "PreviewUpdate",
    "RecolorSession",
    "ServiceState",
    "ClassifierConfig",
    "PipelineConfig",
    "SessionConfig",
    "TemplateConfig",
    "TransformConfig",
    "HouseRecolorError",
    "InvalidImageError",
    "RenderInProgressError",
    "ServiceNotReadyError",
    "CLASS_PRIORITY",
    "apply_selection",
    "class_at_pixel",
    "combine_masks",
    "render_overlay",
    "upscale_for_display",
    "polygon_to_mask",
    "stroke_to_mask",
    "SEMANTIC_CLASSES",
    "ClassificationResult",
    "ClassMask",
    "ColorChangeOptions",
    "ManualSelection",
    "PixelBuffer",
    "ProcessingResult",
    "SemanticClass",
]
