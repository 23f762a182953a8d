import unittest

import numpy as np

from house_recolor.errors import ServiceNotReadyError
from house_recolor.transform import ColorTransformEngine, upscale_for_display
from house_recolor.types import ColorChangeOptions, PixelBuffer
from house_recolor.utils.color import rgb_to_hsl


def _engine() -> ColorTransformEngine:
    engine = ColorTransformEngine()
    engine.initialize()
    return engine


def _lightness(rgb: np.ndarray) -> np.ndarray:
    rgb = rgb.astype("float64")
    return (rgb.max(axis=-1) + rgb.min(axis=-1)) / 2.0


class ApplyColorChangeTest(unittest.TestCase):
    def setUp(self) -> None:
        self.engine = _engine()
        rng = np.random.default_rng(5)
        self.noise = PixelBuffer(rng.integers(0, 256, size=(32, 48, 3), dtype=np.uint8))

    def test_unselected_pixels_pass_through(self) -> None:
        mask = np.zeros(self.noise.shape, dtype=np.uint8)
        mask[8:16, 8:16] = 1
        result = self.engine.apply_color_change(self.noise, mask, ColorChangeOptions("#FF0000"))

        changed = result.pixels.data
        outside = mask == 0
        self.assertTrue(np.array_equal(changed[outside], self.noise.data[outside]))
        self.assertGreaterEqual(result.processing_time_ms, 0.0)

    def test_original_is_not_modified(self) -> None:
        before = self.noise.copy_pixels()
        mask = np.ones(self.noise.shape, dtype=np.uint8)
        self.engine.apply_color_change(self.noise, mask, ColorChangeOptions("#00AA55"))
        self.assertTrue(np.array_equal(self.noise.data, before))

    def test_texture_keeps_lightness(self) -> None:
        mask = np.ones(self.noise.shape, dtype=np.uint8)
        options = ColorChangeOptions("#3366CC", preserve_texture=True, blend_edges=False)
        result = self.engine.apply_color_change(self.noise, mask, options)

        delta = np.abs(_lightness(result.pixels.rgb) - _lightness(self.noise.rgb))
        self.assertLessEqual(delta.max(), 1.0)

    def test_zero_intensity_is_identity(self) -> None:
        mask = np.ones(self.noise.shape, dtype=np.uint8)
        options = ColorChangeOptions("#FF0000", intensity=0.0)
        result = self.engine.apply_color_change(self.noise, mask, options)
        self.assertTrue(np.array_equal(result.pixels.data, self.noise.data))

    def test_full_intensity_without_texture_is_target(self) -> None:
        mask = np.ones(self.noise.shape, dtype=np.uint8)
        options = ColorChangeOptions("#3366CC", preserve_texture=False, blend_edges=False)
        result = self.engine.apply_color_change(self.noise, mask, options)
        self.assertTrue((result.pixels.rgb == (0x33, 0x66, 0xCC)).all())

    def test_gray_wall_to_red(self) -> None:
        gray = PixelBuffer(np.full((10, 10, 3), 128, dtype=np.uint8))
        mask = np.ones(gray.shape, dtype=np.uint8)
        options = ColorChangeOptions("#FF0000", preserve_texture=True, blend_edges=False)
        result = self.engine.apply_color_change(gray, mask, options)

        self.assertTrue((result.pixels.rgb == (204, 52, 52)).all())
        self.assertTrue((_lightness(result.pixels.rgb) == 128).all())

    def test_alpha_is_untouched(self) -> None:
        rgba = np.zeros((6, 6, 4), dtype=np.uint8)
        rgba[..., :3] = 90
        rgba[..., 3] = 17
        pixels = PixelBuffer(rgba)
        mask = np.ones(pixels.shape, dtype=np.uint8)
        result = self.engine.apply_color_change(pixels, mask, ColorChangeOptions("#FF8800"))
        self.assertTrue((result.pixels.alpha == 17).all())

    def test_mask_shape_must_match(self) -> None:
        with self.assertRaises(ValueError):
            self.engine.apply_color_change(
                self.noise, np.ones((4, 4), dtype=np.uint8), ColorChangeOptions("#FF0000")
            )

    def test_malformed_color_renders_black(self) -> None:
        gray = PixelBuffer(np.full((4, 4, 3), 128, dtype=np.uint8))
        mask = np.ones(gray.shape, dtype=np.uint8)
        options = ColorChangeOptions("not-a-color", preserve_texture=False, blend_edges=False)
        with self.assertLogs("house_recolor.utils.color", level="WARNING"):
            result = self.engine.apply_color_change(gray, mask, options)
        self.assertTrue((result.pixels.rgb == 0).all())

    def test_intensity_out_of_range(self) -> None:
        with self.assertRaises(ValueError):
            ColorChangeOptions("#FF0000", intensity=1.5)

    def test_requires_ready_engine(self) -> None:
        with self.assertRaises(ServiceNotReadyError):
            ColorTransformEngine().apply_color_change(
                self.noise, np.ones(self.noise.shape), ColorChangeOptions("#FF0000")
            )


class TextureRulesTest(unittest.TestCase):
    def setUp(self) -> None:
        self.engine = _engine()

    def _recolor_pixel(self, rgb, color: str, intensity: float = 1.0) -> tuple:
        pixels = PixelBuffer(np.full((3, 3, 3), rgb, dtype=np.uint8))
        mask = np.ones(pixels.shape, dtype=np.uint8)
        options = ColorChangeOptions(color, preserve_texture=True, blend_edges=False, intensity=intensity)
        result = self.engine.apply_color_change(pixels, mask, options)
        return tuple(int(c) for c in result.pixels.rgb[1, 1])

    def test_shadow_saturation_is_capped(self) -> None:
        # Lightness about 10%, saturation 40%: capped to 20%.
        out = self._recolor_pixel((35, 15, 15), "#FF0000")
        self.assertEqual(out, (30, 20, 20))
        self.assertAlmostEqual(rgb_to_hsl(*out)[1], 20.0, delta=0.5)

    def test_highlight_saturation_is_capped(self) -> None:
        # Lightness about 92%, saturation 100%: capped to 30%.
        out = self._recolor_pixel((255, 215, 215), "#FF0000")
        self.assertEqual(out, (241, 229, 229))
        self.assertAlmostEqual(rgb_to_hsl(*out)[1], 30.0, delta=0.5)

    def test_midtone_saturation_floor(self) -> None:
        # Gray with a pale blue target: 0.4 * 0 + 0.6 * 14.4 is raised to 25%.
        out = self._recolor_pixel((128, 128, 128), "#8080A0")
        self.assertEqual(out, (96, 96, 160))
        hue, saturation, lightness = rgb_to_hsl(*out)
        self.assertAlmostEqual(hue, 240.0, delta=0.5)
        self.assertAlmostEqual(saturation, 25.0, delta=0.5)

    def test_half_intensity_blends_hue_and_saturation(self) -> None:
        source = (64, 64, 192)
        orig_h, orig_s, orig_l = rgb_to_hsl(*source)
        target_s = max(orig_s * 0.4 + 100.0 * 0.6, 25.0)

        out = self._recolor_pixel(source, "#00FF00", intensity=0.5)
        hue, saturation, lightness = rgb_to_hsl(*out)

        self.assertAlmostEqual(orig_h, 240.0, places=6)
        self.assertAlmostEqual(hue, 180.0, delta=1.0)
        self.assertAlmostEqual(saturation, (orig_s + target_s) / 2.0, delta=1.0)
        self.assertAlmostEqual(lightness, orig_l, delta=0.5)
        self.assertEqual(out[1], out[2])
        self.assertLess(out[0], out[1])


class EdgeBlendTest(unittest.TestCase):
    def test_blend_factors_for_left_half(self) -> None:
        selected = np.zeros((10, 10), dtype=bool)
        selected[:, :5] = True
        factors = _engine().edge_blend_factors(selected)

        self.assertAlmostEqual(float(factors[5, 4]), 0.6, places=5)
        self.assertAlmostEqual(float(factors[5, 0]), 1.0, places=5)
        self.assertAlmostEqual(float(factors[0, 0]), 1.0, places=5)
        self.assertAlmostEqual(float(factors[5, 9]), 0.5, places=5)

    def test_blending_softens_boundary(self) -> None:
        gray = PixelBuffer(np.full((10, 10, 3), 128, dtype=np.uint8))
        mask = np.zeros(gray.shape, dtype=np.uint8)
        mask[:, :5] = 1
        engine = _engine()
        sharp = engine.apply_color_change(gray, mask, ColorChangeOptions("#FF0000", blend_edges=False))
        soft = engine.apply_color_change(gray, mask, ColorChangeOptions("#FF0000", blend_edges=True))

        self.assertTrue(np.array_equal(sharp.pixels.data[:, 0], soft.pixels.data[:, 0]))
        self.assertLess(int(soft.pixels.data[5, 4, 0]), int(sharp.pixels.data[5, 4, 0]))


class PreviewTest(unittest.TestCase):
    def setUp(self) -> None:
        self.engine = _engine()
        self.pixels = PixelBuffer(np.full((400, 400, 3), 128, dtype=np.uint8))
        self.mask = np.ones(self.pixels.shape, dtype=np.uint8)

    def test_preview_is_downsampled(self) -> None:
        result = self.engine.create_preview(self.pixels, self.mask, ColorChangeOptions("#FF0000"))
        self.assertEqual(result.pixels.shape, (100, 100))
        self.assertGreaterEqual(result.processing_time_ms, 0.0)
        self.assertTrue((result.pixels.rgb == (204, 52, 52)).all())

    def test_custom_scale(self) -> None:
        result = self.engine.create_preview(self.pixels, self.mask, ColorChangeOptions("#FF0000"), scale=0.5)
        self.assertEqual(result.pixels.shape, (200, 200))

    def test_scale_must_be_in_range(self) -> None:
        for scale in (0.0, -0.5, 1.5):
            with self.assertRaises(ValueError):
                self.engine.create_preview(self.pixels, self.mask, ColorChangeOptions("#FF0000"), scale=scale)

    def test_upscale_for_display(self) -> None:
        preview = self.engine.create_preview(self.pixels, self.mask, ColorChangeOptions("#FF0000"))
        display = upscale_for_display(preview.pixels, 400, 400)
        self.assertEqual(display.shape, (400, 400))
        self.assertTrue((display.rgb == (204, 52, 52)).all())
        self.assertIs(upscale_for_display(display, 400, 400), display)


if __name__ == "__main__":
    unittest.main()
