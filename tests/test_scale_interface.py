from __future__ import annotations

import datetime as dt
import unittest

import tickscale
from tickscale import (
    AxisTick,
    ContinuousLinearScale,
    ContinuousLogScale,
    OrdinalScale,
    Scale,
    ScaleKind,
    TimeScale,
    axis_ticks,
)


class ScaleInterfaceTests(unittest.TestCase):
    def _scales(self) -> list[Scale]:
        return [
            ContinuousLinearScale.new().with_domain(0, 10),
            ContinuousLogScale.new(domain=(1, 1000), log_base="base_10"),
            OrdinalScale.new(["a", "b", "c"]),
            TimeScale.new().with_domain(dt.datetime(2020, 1, 1), dt.datetime(2020, 1, 11)),
        ]

    def test_every_kind_answers_the_protocol(self) -> None:
        kinds = [scale.kind for scale in self._scales()]
        self.assertEqual(kinds, [ScaleKind.LINEAR, ScaleKind.LOG, ScaleKind.ORDINAL, ScaleKind.TIME])
        for scale in self._scales():
            moved = tickscale.set_range(scale, 0.0, 200.0)
            self.assertEqual(tickscale.get_range(moved), (0.0, 200.0))
            self.assertEqual(tickscale.get_range(scale), (0.0, 1.0))
            ticks = tickscale.ticks_domain(moved)
            self.assertTrue(ticks)
            positions = tickscale.ticks_range(moved)
            self.assertEqual(len(positions), len(ticks))
            self.assertEqual(tickscale.domain_to_range(moved, ticks[0]), positions[0])
            self.assertEqual(tickscale.domain_to_range_fn(moved)(ticks[-1]), positions[-1])
            self.assertIsInstance(tickscale.get_formatted_tick(moved, ticks[0]), str)

    def test_range_to_domain_inverts_mapping(self) -> None:
        linear = ContinuousLinearScale.new().with_domain(0, 10).set_range(0.0, 100.0)
        self.assertAlmostEqual(tickscale.range_to_domain(linear, 40.0), 4.0)
        ordinal = OrdinalScale.new(["a", "b", "c"]).set_range(0.0, 90.0)
        self.assertEqual(tickscale.range_to_domain(ordinal, ordinal.domain_to_range("b")), "b")

    def test_axis_ticks(self) -> None:
        scale = ContinuousLinearScale.new().with_domain(0, 10).set_range(0.0, 100.0)
        ticks = axis_ticks(scale)
        self.assertEqual(ticks[0], AxisTick(value=0.0, position=0.0, label="0"))
        self.assertEqual([t.label for t in ticks], ["0", "2", "4", "6", "8", "10"])
        self.assertEqual([t.position for t in ticks], [0.0, 20.0, 40.0, 60.0, 80.0, 100.0])


if __name__ == "__main__":
    unittest.main()
