import unittest

import numpy as np

from house_recolor.errors import InvalidImageError
from house_recolor.types import (
    SEMANTIC_CLASSES,
    ClassMask,
    ColorChangeOptions,
    PixelBuffer,
    get_class,
    get_class_by_name,
    selectable_classes,
)


class PixelBufferTest(unittest.TestCase):
    def test_rgb_input_gets_opaque_alpha(self) -> None:
        pixels = PixelBuffer(np.zeros((3, 5, 3), dtype=np.uint8))
        self.assertEqual(pixels.data.shape, (3, 5, 4))
        self.assertEqual((pixels.width, pixels.height), (5, 3))
        self.assertTrue((pixels.alpha == 255).all())

    def test_buffer_is_an_immutable_snapshot(self) -> None:
        source = np.full((2, 2, 4), 10, dtype=np.uint8)
        pixels = PixelBuffer(source)
        source[:] = 99

        self.assertTrue((pixels.data == 10).all())
        with self.assertRaises(ValueError):
            pixels.data[0, 0, 0] = 1
        copy = pixels.copy_pixels()
        copy[0, 0, 0] = 1
        self.assertEqual(int(pixels.data[0, 0, 0]), 10)

    def test_bad_shapes(self) -> None:
        with self.assertRaises(InvalidImageError):
            PixelBuffer(np.zeros((4, 4), dtype=np.uint8))
        with self.assertRaises(InvalidImageError):
            PixelBuffer(np.zeros((4, 4, 2), dtype=np.uint8))


class CatalogTest(unittest.TestCase):
    def test_catalog_is_fixed(self) -> None:
        self.assertEqual([cls.name for cls in SEMANTIC_CLASSES][:3], ["background", "walls", "roof"])
        self.assertEqual(get_class(5).display_name, "Trim & Details")
        self.assertEqual(get_class_by_name(" Sky ").id, 7)
        with self.assertRaises(ValueError):
            get_class(8)

    def test_background_is_not_selectable(self) -> None:
        ids = [cls.id for cls in selectable_classes()]
        self.assertEqual(ids, [1, 2, 3, 4, 5, 6, 7])

    def test_class_mask_holds_class_id(self) -> None:
        mask = ClassMask(class_id=3, data=np.array([[True, False]]), confidence=0.5)
        self.assertEqual(mask.data.tolist(), [[3, 0]])
        self.assertEqual(mask.class_name, "windows")


class ColorChangeOptionsTest(unittest.TestCase):
    def test_defaults_and_copy(self) -> None:
        options = ColorChangeOptions("#FF0000")
        self.assertTrue(options.preserve_texture)
        self.assertTrue(options.blend_edges)
        self.assertFalse(options.with_blend_edges(False).blend_edges)
        self.assertTrue(options.blend_edges)


if __name__ == "__main__":
    unittest.main()
