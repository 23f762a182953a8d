"""Template classifier producing a canned house-shaped overlay.

This is a demo/fallback mode: it never looks at pixel content and lays a
typical frontal house layout (sky, roof, walls, two windows, a door and a
lawn) over the image. Use ``RegionClassifier`` for content-based results.
"""

from __future__ import annotations

import logging
from typing import Optional

import numpy as np

from house_recolor.config import TemplateConfig
from house_recolor.lifecycle import ManagedService
from house_recolor.types import (
    DOORS_ID,
    LANDSCAPE_ID,
    ROOF_ID,
    SKY_ID,
    WALLS_ID,
    WINDOWS_ID,
    ClassificationResult,
    ClassMask,
    PixelBuffer,
)

logger = logging.getLogger(__name__)

# (left, top, width, height) as fractions of the image.
WINDOW_BOXES = ((0.2, 0.45, 0.12, 0.15), (0.68, 0.45, 0.12, 0.15))


class TemplateClassifier(ManagedService):
    """Lay a canned house layout over an image of any content."""

    def __init__(self, config: Optional[TemplateConfig] = None) -> None:
        super().__init__()
        self.config = config or TemplateConfig()

    def _boundary(self, width: int, waves: float, rng: np.random.Generator) -> np.ndarray:
        amplitude = self.config.boundary_noise
        if amplitude <= 0:
            return np.zeros(width)
        phase = np.arange(width) / float(width) * np.pi * waves
        return amplitude * (2.0 * np.sin(phase) + rng.uniform(-1.0, 1.0, size=width))

    @staticmethod
    def _paint(composite: np.ndarray, region: np.ndarray, class_id: int, overwrite: bool) -> None:
        if not overwrite:
            region = region & (composite == 0)
        composite[region] = class_id

    def layout(self, width: int, height: int, rng: Optional[np.random.Generator] = None) -> np.ndarray:
        """Return the composite HxW label map of the template house."""

        rng = rng if rng is not None else np.random.default_rng(self.config.seed)
        composite = np.zeros((height, width), dtype=np.uint8)
        rows = np.arange(height, dtype="float64")[:, None]
        cols = np.arange(width, dtype="float64")[None, :]

        sky_edge = np.floor(height * 0.25) + self._boundary(width, 4.0, rng)
        self._paint(composite, rows < sky_edge[None, :], SKY_ID, overwrite=True)

        roof_top, roof_bottom = np.floor(height * 0.2), np.floor(height * 0.4)
        progress = (rows - roof_top) / max(roof_bottom - roof_top, 1.0)
        roof_half = width * (0.15 + progress * 0.7) / 2.0
        roof = (
            (rows >= roof_top)
            & (rows < roof_bottom)
            & (cols >= np.floor(width / 2.0 - roof_half))
            & (cols < np.floor(width / 2.0 + roof_half))
        )
        self._paint(composite, roof, ROOF_ID, overwrite=False)

        walls = (
            (rows >= np.floor(height * 0.35))
            & (rows < np.floor(height * 0.8))
            & (cols >= np.floor(width * 0.1))
            & (cols < np.floor(width * 0.9))
        )
        self._paint(composite, walls, WALLS_ID, overwrite=False)

        for left, top, box_w, box_h in WINDOW_BOXES:
            window = (
                (rows >= np.floor(top * height))
                & (rows < np.floor((top + box_h) * height))
                & (cols >= np.floor(left * width))
                & (cols < np.floor((left + box_w) * width))
            )
            self._paint(composite, window, WINDOWS_ID, overwrite=True)

        door_half = np.floor(width * 0.08) / 2.0
        door = (
            (rows >= np.floor(height * 0.55))
            & (rows < np.floor(height * 0.8))
            & (cols >= np.floor(width / 2.0 - door_half))
            & (cols < np.floor(width / 2.0 + door_half))
        )
        self._paint(composite, door, DOORS_ID, overwrite=True)

        ground_edge = np.floor(height * 0.8) + self._boundary(width, 6.0, rng)
        self._paint(composite, rows >= ground_edge[None, :], LANDSCAPE_ID, overwrite=False)
        return composite

    def classify(self, pixels: PixelBuffer, rng: Optional[np.random.Generator] = None) -> ClassificationResult:
        self._require_ready()
        composite = self.layout(pixels.width, pixels.height, rng)
        area = float(pixels.width * pixels.height)
        masks = []
        for class_id in (WALLS_ID, ROOF_ID, WINDOWS_ID, DOORS_ID, LANDSCAPE_ID, SKY_ID):
            selected = composite == class_id
            coverage = float(np.count_nonzero(selected)) / area
            if coverage > self.config.min_coverage:
                masks.append(ClassMask(class_id=class_id, data=selected, confidence=coverage))
        logger.info("Template layout for %dx%d image with %d classes", pixels.width, pixels.height, len(masks))
        return ClassificationResult(masks=masks, width=pixels.width, height=pixels.height)
