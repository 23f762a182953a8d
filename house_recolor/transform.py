"""HSL-domain color transform engine.

Selected pixels get the target hue while their lightness, which carries
shadow and texture detail, is kept. Two paths share the same kernel: a
downsampled preview for live feedback and a full-resolution final render.
"""

from __future__ import annotations

import logging
import time
from typing import Optional, Tuple

import numpy as np

from house_recolor.config import TransformConfig
from house_recolor.lifecycle import ManagedService
from house_recolor.types import ColorChangeOptions, PixelBuffer, ProcessingResult
from house_recolor.utils.color import hex_to_rgb, hsl_to_rgb_array, rgb_to_hsl, rgb_to_hsl_array
from house_recolor.utils.vision import box_sum, resize_area, resize_bilinear, resize_nearest, scaled_size

logger = logging.getLogger(__name__)


def _elapsed_ms(start: float) -> float:
    return max(0.0, (time.perf_counter() - start) * 1000.0)


class ColorTransformEngine(ManagedService):
    """Recolor masked pixels of an immutable original."""

    def __init__(self, config: Optional[TransformConfig] = None) -> None:
        super().__init__()
        self.config = config or TransformConfig()

    def _candidate_hsl(
        self,
        original: Tuple[np.ndarray, np.ndarray, np.ndarray],
        target: Tuple[float, float, float],
        preserve_texture: bool,
    ) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        orig_h, orig_s, orig_l = original
        target_h, target_s, target_l = target
        hue = np.full_like(orig_h, target_h)
        if not preserve_texture:
            return hue, np.full_like(orig_s, target_s), np.full_like(orig_l, target_l)

        cfg = self.config
        midtone = np.maximum(
            orig_s * cfg.midtone_original_weight + target_s * (1.0 - cfg.midtone_original_weight),
            cfg.midtone_min_saturation,
        )
        saturation = np.where(
            orig_l < cfg.shadow_lightness,
            np.minimum(orig_s, cfg.shadow_max_saturation),
            np.where(
                orig_l > cfg.highlight_lightness,
                np.minimum(orig_s, cfg.highlight_max_saturation),
                midtone,
            ),
        )
        return hue, saturation, orig_l.copy()

    def edge_blend_factors(self, selected: np.ndarray) -> np.ndarray:
        """Share of selected pixels around each pixel, floored at ``min_edge_blend``.

        The window is ``2 * edge_blend_radius + 1`` pixels square and only
        counts in-bounds neighbours, the centre included.
        """

        radius = self.config.edge_blend_radius
        counts = box_sum(selected.astype("float32"), radius)
        totals = box_sum(np.ones(selected.shape, dtype="float32"), radius)
        return np.maximum(self.config.min_edge_blend, counts / totals)

    def _recolor(self, original: PixelBuffer, mask: np.ndarray, options: ColorChangeOptions) -> PixelBuffer:
        output = original.copy_pixels()
        selected = mask > 0
        if options.intensity <= 0 or not selected.any():
            return PixelBuffer(output)

        target = rgb_to_hsl(*hex_to_rgb(options.new_color))
        source = original.rgb[selected].astype("float64")
        orig_h, orig_s, orig_l = rgb_to_hsl_array(source)
        hue, saturation, lightness = self._candidate_hsl(
            (orig_h, orig_s, orig_l), target, options.preserve_texture
        )

        intensity = float(options.intensity)
        if intensity < 1.0:
            hue = orig_h + (hue - orig_h) * intensity
            saturation = orig_s + (saturation - orig_s) * intensity

        recolored = np.floor(hsl_to_rgb_array(hue, saturation, lightness) + 0.5)
        if options.blend_edges:
            factor = self.edge_blend_factors(selected)[selected][:, None]
            recolored = np.floor(source + (recolored - source) * factor + 0.5)

        output[selected, :3] = np.clip(recolored, 0, 255).astype(np.uint8)
        return PixelBuffer(output)

    def _check_mask(self, original: PixelBuffer, mask: np.ndarray) -> np.ndarray:
        mask = np.asarray(mask)
        if mask.shape != original.shape:
            raise ValueError(f"Mask shape {mask.shape} does not match image shape {original.shape}.")
        return mask

    def apply_color_change(
        self, original: PixelBuffer, mask: np.ndarray, options: ColorChangeOptions
    ) -> ProcessingResult:
        """Full-resolution recolor honoring ``options.blend_edges``.

        Args:
            original: Source image; never modified.
            mask: HxW array, non-zero where pixels are selected.
            options: Target color and blending parameters.

        Returns:
            New pixel buffer plus the processing time in milliseconds.
        """

        self._require_ready()
        start = time.perf_counter()
        mask = self._check_mask(original, mask)
        pixels = self._recolor(original, mask, options)
        elapsed = _elapsed_ms(start)
        logger.debug(
            "Recolored %dx%d image to %s in %.1f ms", original.width, original.height, options.new_color, elapsed
        )
        return ProcessingResult(pixels=pixels, processing_time_ms=elapsed)

    def create_preview(
        self,
        original: PixelBuffer,
        mask: np.ndarray,
        options: ColorChangeOptions,
        scale: Optional[float] = None,
    ) -> ProcessingResult:
        """Cheap low-resolution recolor for live feedback.

        The image is area-resampled and the mask point-sampled to
        ``scale`` times the original size; edge blending is always off.
        Callers upscale the result for display.
        """

        self._require_ready()
        scale = self.config.preview_scale if scale is None else float(scale)
        if not 0.0 < scale <= 1.0:
            raise ValueError(f"Preview scale must be within (0, 1], got {scale}.")
        start = time.perf_counter()
        mask = self._check_mask(original, mask)
        width, height = scaled_size(original.width, original.height, scale)
        small = PixelBuffer(resize_area(original.data, (height, width)))
        small_mask = resize_nearest(mask, (height, width))
        pixels = self._recolor(small, small_mask, options.with_blend_edges(False))
        elapsed = _elapsed_ms(start)
        logger.debug("Preview %dx%d in %.1f ms", width, height, elapsed)
        return ProcessingResult(pixels=pixels, processing_time_ms=elapsed)


def upscale_for_display(pixels: PixelBuffer, width: int, height: int) -> PixelBuffer:
    """Enlarge a preview back to display size with bilinear filtering."""

    if (height, width) == pixels.shape:
        return pixels
    return PixelBuffer(resize_bilinear(pixels.data, (height, width)))
