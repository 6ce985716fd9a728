from __future__ import annotations

from decimal import Decimal
import unittest

from tickscale.errors import InvalidDomainError, InvalidTicksError, ScaleConfigError
from tickscale.nice import (
    compute_nice_settings,
    display_decimals,
    format_number,
    format_tick,
    next_nice_step,
    nice_step,
    widen_degenerate,
)


class NiceSettingsTests(unittest.TestCase):
    def test_fixed_ticks_keep_caller_domain(self) -> None:
        settings = compute_nice_settings(0, 80, [0, 10, 50, 90, 130])
        self.assertEqual(settings.ticks, (0, 10, 50))
        self.assertEqual(settings.nice_domain, (0.0, 80.0))
        self.assertIsNone(settings.interval_size)
        self.assertEqual(settings.interval_count, 2)

    def test_fixed_ticks_are_sorted(self) -> None:
        settings = compute_nice_settings(0, 100, [50, 0, 25])
        self.assertEqual(settings.ticks, (0, 25, 50))

    def test_computed_ticks_step_by_twenty(self) -> None:
        settings = compute_nice_settings(0, 100, None, 5)
        self.assertEqual(settings.ticks, (0.0, 20.0, 40.0, 60.0, 80.0, 100.0))
        self.assertEqual(settings.interval_size, 20.0)
        self.assertEqual(settings.display_decimals, 0)

    def test_fractional_step_produces_clean_ticks(self) -> None:
        settings = compute_nice_settings(1.2, 2.2, None, 9)
        self.assertEqual(settings.interval_size, 0.2)
        self.assertEqual(settings.ticks, (1.2, 1.4, 1.6, 1.8, 2.0, 2.2))
        self.assertEqual(settings.display_decimals, 1)

    def test_small_magnitudes_survive(self) -> None:
        settings = compute_nice_settings(0.0, 0.0001, None, 9)
        self.assertEqual(settings.nice_domain, (0.0, 0.0001))
        self.assertEqual(settings.interval_size, 0.00002)
        self.assertEqual(settings.display_decimals, 5)

    def test_reversed_bounds_are_reordered(self) -> None:
        settings = compute_nice_settings(100, 0, None, 5)
        self.assertEqual(settings.nice_domain, (0.0, 100.0))

    def test_nice_domain_contains_raw_domain(self) -> None:
        for vmin, vmax in [(0.3, 8.7), (-12.5, 47.0), (1e-4, 3e-4), (1234, 98765), (0.5, 9.4), (-0.1, 10)]:
            settings = compute_nice_settings(vmin, vmax, None, 9)
            self.assertLessEqual(settings.nice_domain[0], vmin)
            self.assertGreaterEqual(settings.nice_domain[1], vmax)
            self.assertLessEqual(settings.interval_count, 9)

    def test_renicing_is_idempotent(self) -> None:
        for vmin, vmax, count in [(0.3, 8.7, 9), (-12.5, 47.0, 9), (0.5, 9.4, 9), (1234, 98765, 5), (0.0, 0.0001, 9)]:
            first = compute_nice_settings(vmin, vmax, None, count)
            again = compute_nice_settings(*first.nice_domain, None, count)
            self.assertEqual(again.nice_domain, first.nice_domain)
            self.assertEqual(again.ticks, first.ticks)

    def test_degenerate_domains_are_widened(self) -> None:
        self.assertEqual(widen_degenerate(5.0, 5.0), (0.0, 5.0))
        self.assertEqual(widen_degenerate(-3.0, -3.0), (-3.0, 0.0))
        self.assertEqual(widen_degenerate(0.0, 0.0), (0.0, 1.0))
        self.assertEqual(widen_degenerate(1.0, 2.0), (1.0, 2.0))
        settings = compute_nice_settings(5, 5, None, 5)
        self.assertEqual(settings.nice_domain, (0.0, 5.0))

    def test_single_interval_across_zero_terminates(self) -> None:
        settings = compute_nice_settings(-1, 1, None, 1)
        self.assertEqual(settings.nice_domain, (-2.0, 2.0))
        self.assertEqual(settings.interval_count, 2)

    def test_invalid_inputs_raise(self) -> None:
        with self.assertRaises(InvalidDomainError):
            compute_nice_settings(0, float("inf"))
        with self.assertRaises(InvalidDomainError):
            compute_nice_settings("a", 1)  # type: ignore[arg-type]
        with self.assertRaises(InvalidTicksError):
            compute_nice_settings(0, 10, [1, "x"])  # type: ignore[list-item]
        with self.assertRaises(ScaleConfigError):
            compute_nice_settings(0, 10, None, 0)

    def test_errors_are_value_errors(self) -> None:
        with self.assertRaises(ValueError):
            compute_nice_settings(0, float("nan"))


class NiceStepTests(unittest.TestCase):
    def test_step_mantissas(self) -> None:
        self.assertEqual(nice_step(10, 10), Decimal(1))
        self.assertEqual(nice_step(10, 6), Decimal(2))
        self.assertEqual(nice_step(10, 3), Decimal(5))
        self.assertEqual(nice_step(10, 1), Decimal(10))
        self.assertEqual(nice_step(0.9, 9), Decimal("0.1"))

    def test_next_step_walks_the_ladder(self) -> None:
        self.assertEqual(next_nice_step(Decimal("0.2")), Decimal("0.5"))
        self.assertEqual(next_nice_step(Decimal("0.5")), Decimal(1))
        self.assertEqual(next_nice_step(Decimal(1)), Decimal(2))
        self.assertEqual(next_nice_step(Decimal(50)), Decimal(100))


class FormattingTests(unittest.TestCase):
    def test_display_decimals(self) -> None:
        self.assertEqual(display_decimals([0.0, 0.1, 0.2]), 1)
        self.assertEqual(display_decimals([0.0, 0.25, 0.5]), 2)
        self.assertEqual(display_decimals([0.0, 50.0, 100.0]), 0)
        self.assertEqual(display_decimals([]), 0)

    def test_format_number(self) -> None:
        self.assertEqual(format_number(1.4, 1), "1.4")
        self.assertEqual(format_number(2.0, 1), "2.0")
        self.assertEqual(format_number(-0.0001, 2), "0.00")
        self.assertEqual(format_number(0.00002, 5), "0.00002")

    def test_format_tick(self) -> None:
        self.assertEqual(format_tick(5, 3), "5")
        self.assertEqual(format_tick(1.25, 2), "1.25")
        self.assertEqual(format_tick(7.0, None), "7")
        self.assertEqual(format_tick("n/a", 2), "n/a")


if __name__ == "__main__":
    unittest.main()
