"""Heuristic region classifier.

The classifier runs three analysis passes over the photo (color regions,
Sobel edges, luminance) and combines them with per-class rules tied to
where each architectural element usually sits in a frontal house photo.
It is a deterministic heuristic, not a trained model: atypical photos may
legitimately yield few or no classes.
"""

from __future__ import annotations

import logging
from typing import Dict, Optional, Tuple

import numpy as np

from house_recolor import analysis
from house_recolor.config import ClassifierConfig
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
    get_class,
)
from house_recolor.utils.vision import resize_area, resize_nearest

logger = logging.getLogger(__name__)

Band = Tuple[float, float]


def _channels(rgb: np.ndarray) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    rgb = rgb.astype(np.int32)
    return rgb[..., 0], rgb[..., 1], rgb[..., 2]


def _spread(rgb: np.ndarray) -> np.ndarray:
    rgb = rgb.astype(np.int32)
    return rgb.max(axis=-1) - rgb.min(axis=-1)


def _blue_dominant(rgb: np.ndarray) -> np.ndarray:
    r, g, b = _channels(rgb)
    return (b > r) & (b > g)


def _greenish(rgb: np.ndarray) -> np.ndarray:
    r, g, b = _channels(rgb)
    return (g > r) & (g > b)


def _reddish(rgb: np.ndarray) -> np.ndarray:
    r, g, b = _channels(rgb)
    return (r > g + 15) & (r > b + 15)


def _brownish(rgb: np.ndarray, lum: np.ndarray) -> np.ndarray:
    r, g, b = _channels(rgb)
    return (r > g) & (g > b) & (r - b > 30) & (lum < 0.6)


def _near_white(rgb: np.ndarray) -> np.ndarray:
    return (rgb[..., :3] > 200).all(axis=-1)


def _near_black(rgb: np.ndarray) -> np.ndarray:
    return (rgb[..., :3] < 50).all(axis=-1)


class RegionClassifier(ManagedService):
    """Assign photo pixels to walls, roof, windows, doors, landscape and sky."""

    def __init__(self, config: Optional[ClassifierConfig] = None) -> None:
        super().__init__()
        self.config = config or ClassifierConfig()

    # ---- spatial bands -------------------------------------------------
    def _jitter(self, width: int, rng: Optional[np.random.Generator]) -> np.ndarray:
        amplitude = self.config.jitter_amplitude
        if rng is None or amplitude <= 0:
            return np.zeros(width, dtype="float64")
        phase = np.arange(width) / max(width, 1) * np.pi * 4.0
        noise = rng.uniform(-1.0, 1.0, size=width)
        return amplitude * (0.75 * np.sin(phase + rng.uniform(0.0, np.pi)) + 0.25 * noise)

    def _row_band(
        self, height: int, width: int, band: Band, rng: Optional[np.random.Generator]
    ) -> np.ndarray:
        top, bottom = band
        rows = np.arange(height, dtype="float64")[:, None]
        top_edge = np.full(width, top * height)
        bottom_edge = np.full(width, bottom * height)
        if 0.0 < top < 1.0:
            top_edge = top_edge + self._jitter(width, rng)
        if 0.0 < bottom < 1.0:
            bottom_edge = bottom_edge + self._jitter(width, rng)
        return (rows >= top_edge[None, :]) & (rows < bottom_edge[None, :])

    @staticmethod
    def _column_band(height: int, width: int, band: Band) -> np.ndarray:
        columns = np.arange(width, dtype="float64")[None, :]
        inside = (columns >= band[0] * width) & (columns < band[1] * width)
        return np.broadcast_to(inside, (height, width))

    # ---- detection -----------------------------------------------------
    def detect(self, rgb: np.ndarray, rng: Optional[np.random.Generator] = None) -> Dict[int, np.ndarray]:
        """Run the analysis passes and per-class rules on an RGB array.

        Returns:
            Boolean HxW candidate mask per class id.
        """

        cfg = self.config
        height, width = rgb.shape[:2]
        labels, sizes = analysis.color_regions(rgb, cfg.color_threshold)
        edges = analysis.edge_map(rgb, cfg.edge_threshold)
        lum = analysis.luminance(rgb)

        blue = _blue_dominant(rgb)
        green = _greenish(rgb)
        brown = _brownish(rgb, lum)
        spread = _spread(rgb)
        sky_colored = blue & (lum > cfg.sky_brightness)

        sky = (self._row_band(height, width, cfg.sky_band, rng) & sky_colored) | (
            self._row_band(height, width, cfg.bright_sky_band, rng) & (lum > cfg.very_bright)
        )

        roof = (
            self._row_band(height, width, cfg.roof_band, rng)
            & (lum < cfg.roof_max_brightness)
            & (_reddish(rgb) | (spread <= 30))
        )

        wall_band = self._row_band(height, width, cfg.wall_band, rng)
        large_region = (sizes / float(height * width) >= cfg.wall_region_fraction)[labels]
        walls = wall_band & large_region & ~edges & ~sky_colored & ~green

        windows = (
            wall_band
            & (lum > cfg.window_brightness)
            & analysis.near_edges(edges, cfg.window_edge_radius)
            & (blue | (spread <= 25))
        )

        rows = np.arange(height, dtype="float64")[:, None]
        doors = (
            self._row_band(height, width, cfg.door_band, rng)
            & self._column_band(height, width, cfg.door_columns)
            & (rows >= cfg.door_min_row * height)
            & analysis.vertical_edge_support(edges, cfg.door_edge_rows)
            & (brown | _near_white(rgb) | _near_black(rgb))
        )

        landscape = self._row_band(height, width, cfg.landscape_band, rng) & (green | brown)

        candidates = {
            WALLS_ID: walls,
            ROOF_ID: roof,
            WINDOWS_ID: windows,
            DOORS_ID: doors,
            LANDSCAPE_ID: landscape,
            SKY_ID: sky,
        }
        if rng is not None and cfg.hole_probability > 0:
            for class_id in sorted(candidates):
                holes = rng.random((height, width)) < cfg.hole_probability
                candidates[class_id] = candidates[class_id] & ~holes
        return candidates

    def _analysis_rgb(self, pixels: PixelBuffer) -> np.ndarray:
        max_side = self.config.analysis_max_side
        longest = max(pixels.width, pixels.height)
        if not max_side or longest <= max_side:
            return pixels.rgb
        scale = max_side / float(longest)
        size = (max(1, int(pixels.height * scale)), max(1, int(pixels.width * scale)))
        logger.debug("Analysing %dx%d image at %dx%d", pixels.width, pixels.height, size[1], size[0])
        return resize_area(np.ascontiguousarray(pixels.rgb), size)

    def classify(self, pixels: PixelBuffer, rng: Optional[np.random.Generator] = None) -> ClassificationResult:
        """Classify every pixel of ``pixels`` into the architectural classes.

        Args:
            pixels: Image to analyse.
            rng: Random source for boundary jitter and texture holes. When
                omitted and jitter is configured, a generator seeded with
                ``config.seed`` is used so runs stay reproducible.

        Returns:
            Masks of the classes whose coverage exceeds ``min_confidence``.
        """

        self._require_ready()
        jitter_enabled = self.config.jitter_amplitude > 0 or self.config.hole_probability > 0
        if rng is None and jitter_enabled:
            rng = np.random.default_rng(self.config.seed)
        if not jitter_enabled:
            rng = None

        rgb = self._analysis_rgb(pixels)
        candidates = self.detect(rgb, rng)
        area = float(pixels.width * pixels.height)
        masks = []
        for class_id in sorted(candidates):
            candidate = candidates[class_id]
            if candidate.shape != pixels.shape:
                candidate = resize_nearest(candidate, pixels.shape)
            confidence = float(np.count_nonzero(candidate)) / area
            logger.debug("%s coverage %.3f", get_class(class_id).name, confidence)
            if confidence > self.config.min_confidence:
                masks.append(ClassMask(class_id=class_id, data=candidate, confidence=confidence))

        logger.info(
            "Classified %dx%d image: %s",
            pixels.width,
            pixels.height,
            ", ".join(f"{m.class_name}={m.confidence:.2f}" for m in masks) or "no classes detected",
        )
        return ClassificationResult(masks=masks, width=pixels.width, height=pixels.height)
