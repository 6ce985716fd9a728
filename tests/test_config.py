from __future__ import annotations

import unittest

from tickscale.config import DEFAULT_SCALE_DEFAULTS, ScaleDefaults, validate_scale_defaults
from tickscale.errors import ScaleConfigError


class ScaleDefaultsTests(unittest.TestCase):
    def test_builtin_defaults(self) -> None:
        defaults = validate_scale_defaults()
        self.assertEqual(defaults, DEFAULT_SCALE_DEFAULTS)
        self.assertEqual(defaults.interval_count, 10)
        self.assertEqual(defaults.time_interval_count, 11)
        self.assertEqual(defaults.ordinal_padding, 0.1)
        self.assertEqual(defaults.log_base, "base_2")
        self.assertEqual(defaults.negative_numbers, "clip")
        self.assertEqual(defaults.range, (0.0, 1.0))

    def test_overrides_are_merged(self) -> None:
        defaults = validate_scale_defaults({"log_base": "base_10", "range": [0, 640]})
        self.assertIsInstance(defaults, ScaleDefaults)
        self.assertEqual(defaults.log_base, "base_10")
        self.assertEqual(defaults.range, (0.0, 640.0))
        self.assertEqual(defaults.interval_count, 10)

    def test_invalid_overrides(self) -> None:
        bad = [
            {"colour": "red"},
            {"interval_count": 1},
            {"interval_count": True},
            {"ordinal_padding": 1.0},
            {"log_base": "base_3"},
            {"negative_numbers": "wrap"},
            {"range": (0, "x")},
            {"max_display_decimals": 40},
        ]
        for overrides in bad:
            with self.assertRaises(ScaleConfigError):
                validate_scale_defaults(overrides)


if __name__ == "__main__":
    unittest.main()
