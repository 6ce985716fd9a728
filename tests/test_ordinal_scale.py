from __future__ import annotations

import unittest

from tickscale import OrdinalScale, validate_scale_defaults
from tickscale.errors import InvalidRangeError, ScaleConfigError


class OrdinalScaleTests(unittest.TestCase):
    def test_bands_cover_the_range(self) -> None:
        scale = OrdinalScale.new(["a", "b", "c", "d"]).set_range(0.0, 100.0)
        band, gap = scale.band_layout()
        self.assertAlmostEqual(gap, 2.5)
        self.assertAlmostEqual(band, 23.125)
        self.assertAlmostEqual(4 * band + 3 * gap, 100.0)

        spans = [scale.get_band(c) for c in scale.domain]
        self.assertEqual(spans[0][0], 0.0)
        self.assertAlmostEqual(spans[-1][1], 100.0)
        for (_, end), (start, _) in zip(spans, spans[1:]):
            self.assertLess(end, start)
            self.assertAlmostEqual(start - end, gap)

    def test_band_centres(self) -> None:
        scale = OrdinalScale.new(["a", "b", "c", "d"]).set_range(0.0, 100.0)
        self.assertAlmostEqual(scale.domain_to_range("a"), 11.5625)
        self.assertAlmostEqual(scale.domain_to_range("d"), 88.4375)
        self.assertEqual(scale.ticks_domain(), ["a", "b", "c", "d"])
        self.assertEqual(len(scale.ticks_range()), 4)

    def test_inverted_range(self) -> None:
        scale = OrdinalScale.new(["a", "b", "c", "d"]).set_range(100.0, 0.0)
        self.assertAlmostEqual(scale.domain_to_range("a"), 88.4375)
        self.assertAlmostEqual(scale.domain_to_range("d"), 11.5625)
        start, end = scale.get_band("a")
        self.assertEqual(start, 100.0)
        self.assertAlmostEqual(end, 76.875)

    def test_unknown_category_is_absent(self) -> None:
        scale = OrdinalScale.new(["a", "b"])
        self.assertIsNone(scale.domain_to_range("z"))
        self.assertIsNone(scale.get_band("z"))
        self.assertIsNone(scale.domain_to_range(["unhashable"]))

    def test_categories_keep_first_appearance_order(self) -> None:
        scale = OrdinalScale.new(["b", "a", "b", "c", "a"])
        self.assertEqual(scale.domain, ("b", "a", "c"))
        self.assertEqual(scale.index_of("c"), 2)

    def test_range_to_domain(self) -> None:
        scale = OrdinalScale.new(["a", "b", "c", "d"]).set_range(0.0, 100.0)
        self.assertEqual(scale.range_to_domain(10.0), "a")
        self.assertEqual(scale.range_to_domain(30.0), "b")
        self.assertEqual(scale.range_to_domain(99.0), "d")
        self.assertIsNone(scale.range_to_domain(24.0))
        self.assertIsNone(scale.range_to_domain(-5.0))
        self.assertIsNone(scale.range_to_domain(150.0))

    def test_zero_padding_makes_flush_bands(self) -> None:
        scale = OrdinalScale.new(["x", "y"], padding=0).set_range(0.0, 10.0)
        self.assertEqual(scale.get_band("x"), (0.0, 5.0))
        self.assertEqual(scale.get_band("y"), (5.0, 10.0))

    def test_empty_domain(self) -> None:
        scale = OrdinalScale.new([])
        self.assertEqual(scale.band_layout(), (0.0, 0.0))
        self.assertIsNone(scale.range_to_domain(0.5))
        self.assertEqual(scale.ticks_domain(), [])

    def test_formatting_uses_str(self) -> None:
        scale = OrdinalScale.new([2021, 2022])
        self.assertEqual(scale.get_formatted_tick(2021), "2021")

    def test_padding_validation(self) -> None:
        with self.assertRaises(ScaleConfigError):
            OrdinalScale.new(["a"], padding=1.0)
        with self.assertRaises(ScaleConfigError):
            OrdinalScale.new(["a"]).with_padding(-0.1)
        with self.assertRaises(InvalidRangeError):
            OrdinalScale.new(["a"]).set_range(0.0, None)  # type: ignore[arg-type]

    def test_defaults_padding(self) -> None:
        defaults = validate_scale_defaults({"ordinal_padding": 0.0})
        scale = OrdinalScale.new(["a", "b"], defaults=defaults)
        self.assertEqual(scale.padding, 0.0)


if __name__ == "__main__":
    unittest.main()
