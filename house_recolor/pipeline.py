"""End-to-end house recolor pipeline."""

from __future__ import annotations

from typing import Optional, Union

import numpy as np

from house_recolor.classifier import RegionClassifier
from house_recolor.config import PipelineConfig
from house_recolor.session import RecolorSession
from house_recolor.template import TemplateClassifier
from house_recolor.transform import ColorTransformEngine
from house_recolor.types import ClassificationResult, ColorChangeOptions, PixelBuffer, ProcessingResult

Classifier = Union[RegionClassifier, TemplateClassifier]


class HouseRecolorPipeline:
    """Wires the region classifier and the color transform engine.

    Flow:
        1) Segmentation: classify every pixel of the photo into walls, roof,
           windows, doors, landscape and sky.
        2) Preview: recolor the selected classes on a downsampled copy while
           the user adjusts color and intensity.
        3) Render: recolor at full resolution with soft mask edges once the
           user commits.
    """

    def __init__(
        self,
        config: Optional[PipelineConfig] = None,
        classifier: Optional[Classifier] = None,
        engine: Optional[ColorTransformEngine] = None,
    ) -> None:
        self.config = config or PipelineConfig()
        self.classifier = classifier or self._build_classifier()
        self.engine = engine or ColorTransformEngine(self.config.transform)
        self.classifier.initialize()
        self.engine.initialize()

    def _build_classifier(self) -> Classifier:
        mode = self.config.classifier.mode
        if mode == "heuristic":
            return RegionClassifier(self.config.classifier)
        if mode == "template":
            return TemplateClassifier(self.config.template)
        raise ValueError(f"Unknown classifier mode: {mode}")

    def segment(self, pixels: PixelBuffer) -> ClassificationResult:
        return self.classifier.classify(pixels)

    def preview(
        self,
        pixels: PixelBuffer,
        mask: np.ndarray,
        options: ColorChangeOptions,
        scale: Optional[float] = None,
    ) -> ProcessingResult:
        return self.engine.create_preview(pixels, mask, options, scale)

    def render(self, pixels: PixelBuffer, mask: np.ndarray, options: ColorChangeOptions) -> ProcessingResult:
        return self.engine.apply_color_change(pixels, mask, options)

    def new_session(self, pixels: PixelBuffer) -> RecolorSession:
        return RecolorSession(self, pixels)
