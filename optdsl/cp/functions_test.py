#!/usr/bin/env python3
# Copyright 2010-2025 Google LLC
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Tests for optdsl.cp.functions."""

import math

from absl.testing import absltest

from optdsl.cp import functions
from optdsl.cp.functions import NumToNumSegmentFunction, NumToNumStepFunction, Segment


class NumToNumStepFunctionTest(absltest.TestCase):

    def test_default(self) -> None:
        f = NumToNumStepFunction()
        self.assertEqual(-math.inf, f.definition_interval_min)
        self.assertEqual(math.inf, f.definition_interval_max)
        self.assertEqual(0, f.get_value(12345))
        self.assertEqual(1, f.number_of_segments)
        with self.assertRaises(ValueError):
            NumToNumStepFunction(10, 10)

    def test_set_value(self) -> None:
        f = NumToNumStepFunction(0, 100, 100, "calendar")
        f.set_value(10, 20, 50)
        self.assertEqual(100, f.get_value(9))
        self.assertEqual(50, f.get_value(10))
        self.assertEqual(50, f.get_value(19))
        self.assertEqual(100, f.get_value(20))
        self.assertEqual(3, f.number_of_segments)
        self.assertEqual(50, f.get_min())
        self.assertEqual(100, f.get_max(0, 10))
        self.assertEqual(100 * 90 + 50 * 10, f.get_area())
        self.assertEqual(50 * 5, f.get_area(12, 17))
        self.assertStartsWith(str(f), "calendar = {[0, 10): 100")

    def test_merges_equal_values(self) -> None:
        f = NumToNumStepFunction(0, 100, 0)
        f.set_value(10, 20, 5)
        f.set_value(20, 30, 5)
        self.assertEqual([Segment(0, 10, 0), Segment(10, 30, 5), Segment(30, 100, 0)], list(f))
        f.set_value(10, 30, 0)
        self.assertEqual(1, f.number_of_segments)

    def test_outside_definition_interval(self) -> None:
        f = NumToNumStepFunction(0, 100)
        with self.assertRaises(ValueError):
            f.set_value(-1, 5, 1)
        with self.assertRaises(ValueError):
            f.set_value(5, 1, 1)
        with self.assertRaises(ValueError):
            f.get_value(100)

    def test_add_value(self) -> None:
        f = NumToNumStepFunction(0, 100, 100)
        f.set_value(10, 20, 50)
        f.add_value(15, 30, 10)
        self.assertEqual(
            [
                Segment(0, 10, 100),
                Segment(10, 15, 50),
                Segment(15, 20, 60),
                Segment(20, 30, 110),
                Segment(30, 100, 100),
            ],
            list(f),
        )

    def test_set_min_max(self) -> None:
        f = NumToNumStepFunction(0, 100, 0)
        f.set_value(10, 20, 5)
        f.set_min(0, 30, 3)
        self.assertEqual(
            [Segment(0, 10, 3), Segment(10, 20, 5), Segment(20, 30, 3), Segment(30, 100, 0)],
            list(f),
        )
        f.set_max(0, 100, 4)
        self.assertEqual(4, f.get_value(15))
        self.assertEqual(3, f.get_value(25))

    def test_from_steps(self) -> None:
        f = NumToNumStepFunction.from_steps([10, 20], [0, 1, 0])
        self.assertEqual(0, f.get_value(5))
        self.assertEqual(1, f.get_value(15))
        self.assertEqual(0, f.get_value(25))
        self.assertEqual(3, f.number_of_segments)
        with self.assertRaises(ValueError):
            NumToNumStepFunction.from_steps([10, 20], [0, 1])
        with self.assertRaises(ValueError):
            NumToNumStepFunction.from_steps([20, 10], [0, 1, 0])

    def test_set_periodic(self) -> None:
        week = NumToNumStepFunction(0, 7, 100)
        week.set_value(5, 7, 0)
        f = NumToNumStepFunction(0, 28)
        f.set_periodic(week, 0, 4)
        self.assertEqual(100, f.get_value(0))
        self.assertEqual(0, f.get_value(6))
        self.assertEqual(100, f.get_value(8))
        self.assertEqual(0, f.get_value(26))
        self.assertEqual(8, f.number_of_segments)
        with self.assertRaises(ValueError):
            f.set_periodic(NumToNumStepFunction(), 0)

    def test_set_periodic_shifted_pattern(self) -> None:
        f = NumToNumStepFunction(5, 15, 0)
        f.set_value(5, 10, 1)
        g = NumToNumStepFunction(0, 200, 7)
        g.set_periodic(f, 100, 1)
        self.assertEqual(1, g.get_value(100))
        self.assertEqual(1, g.get_value(104))
        self.assertEqual(0, g.get_value(105))
        self.assertEqual(0, g.get_value(109))
        self.assertEqual(0, g.get_value(110))
        self.assertEqual(0, g.get_value(99))
        h = NumToNumStepFunction(0, 200, 7)
        h.set_periodic_value(20, 40, f, 5)
        self.assertEqual(7, h.get_value(19))
        self.assertEqual(0, h.get_value(20))
        self.assertEqual(1, h.get_value(25))
        self.assertEqual(0, h.get_value(30))
        self.assertEqual(1, h.get_value(35))
        self.assertEqual(7, h.get_value(40))

    def test_set_periodic_value(self) -> None:
        week = NumToNumStepFunction(0, 7, 100)
        week.set_value(5, 7, 0)
        f = NumToNumStepFunction(0, 100, 100)
        f.set_periodic_value(14, 28, week)
        self.assertEqual(100, f.get_value(14))
        self.assertEqual(0, f.get_value(19))
        self.assertEqual(0, f.get_value(27))
        self.assertEqual(100, f.get_value(28))
        self.assertEqual(100, f.get_value(5))

    def test_shift_dilate_prod(self) -> None:
        f = NumToNumStepFunction(0, 100, 0)
        f.set_value(10, 20, 5)
        f.shift(5)
        self.assertEqual(0, f.get_value(12))
        self.assertEqual(5, f.get_value(16))
        self.assertEqual(5, f.get_value(24))
        self.assertEqual(0, f.get_value(25))
        f.dilate(2)
        self.assertEqual(200, f.definition_interval_max)
        self.assertEqual(5, f.get_value(30))
        self.assertEqual(0, f.get_value(50))
        f.prod(3)
        self.assertEqual(15, f.get_value(30))
        with self.assertRaises(ValueError):
            f.dilate(0)

    def test_add_sub(self) -> None:
        f = NumToNumStepFunction(0, 100, 1)
        g = NumToNumStepFunction(50, 200, 2)
        f.add(g)
        self.assertEqual(1, f.get_value(10))
        self.assertEqual(3, f.get_value(60))
        f.sub(g)
        self.assertEqual(1, f.number_of_segments)

    def test_copy(self) -> None:
        f = NumToNumStepFunction(0, 100, 1)
        g = f.copy()
        g.set_value(0, 10, 0)
        self.assertEqual(1, f.get_value(5))
        self.assertEqual(0, g.get_value(5))

    def test_segments(self) -> None:
        f = NumToNumStepFunction.from_steps([10, 20], [0, 1, 0])
        self.assertEqual(
            [Segment(5, 10, 0), Segment(10, 20, 1), Segment(20, 25, 0)],
            list(f.segments(5, 25)),
        )
        self.assertEqual([], list(f.segments(5, 5)))


class NumToNumSegmentFunctionTest(absltest.TestCase):

    def test_set_slope(self) -> None:
        f = NumToNumSegmentFunction(0, 100)
        f.set_slope(10, 20, 0, 1)
        self.assertEqual(0, f.get_value(5))
        self.assertEqual(5, f.get_value(15))
        self.assertEqual(0, f.get_value(20))
        self.assertEqual(3, f.number_of_segments)
        self.assertEqual(10, f.get_max())
        self.assertEqual(0, f.get_min())
        self.assertAlmostEqual(50.0, f.get_area())
        segment = list(f)[1]
        self.assertEqual(10, segment.start)
        self.assertEqual(20, segment.end)
        self.assertEqual(1.0, segment.slope)
        with self.assertRaises(ValueError):
            NumToNumSegmentFunction().set_slope(-math.inf, 0, 0, 1)

    def test_set_value(self) -> None:
        f = NumToNumSegmentFunction(0, 100, 2)
        f.set_value(10, 20, 7)
        self.assertEqual(7, f.get_value(10))
        self.assertEqual(2, f.get_value(20))
        with self.assertRaises(ValueError):
            f.get_value(100)

    def test_set_min(self) -> None:
        f = NumToNumSegmentFunction(0, 100)
        f.set_slope(10, 20, 0, 1)
        f.set_min(0, 100, 3)
        self.assertEqual(3, f.get_value(5))
        self.assertEqual(3, f.get_value(11))
        self.assertEqual(5, f.get_value(15))
        self.assertEqual(3, f.get_value(50))

    def test_set_max(self) -> None:
        f = NumToNumSegmentFunction(0, 100)
        f.set_slope(0, 100, 0, 1)
        f.set_max(0, 100, 40)
        self.assertEqual(10, f.get_value(10))
        self.assertEqual(40, f.get_value(60))
        self.assertEqual(40, f.get_max())

    def test_add_value(self) -> None:
        f = NumToNumSegmentFunction(0, 100)
        f.set_slope(0, 10, 0, 2)
        f.add_value(5, 15, 1)
        self.assertEqual(2, f.get_value(1))
        self.assertEqual(13, f.get_value(6))
        self.assertEqual(1, f.get_value(12))
        self.assertEqual(0, f.get_value(15))

    def test_arithmetic(self) -> None:
        f = NumToNumSegmentFunction(0, 100, 1)
        g = NumToNumSegmentFunction(0, 100)
        g.set_slope(0, 100, 0, 1)
        h = f + g
        self.assertEqual(11, h.get_value(10))
        self.assertEqual(1, f.get_value(10))
        self.assertEqual(-9, (f - g).get_value(10))
        self.assertEqual(20, (2 * g).get_value(10))
        f += g
        self.assertEqual(11, f.get_value(10))
        f *= 3
        self.assertEqual(33, f.get_value(10))

    def test_shift(self) -> None:
        f = NumToNumSegmentFunction(0, 100)
        f.set_slope(10, 20, 0, 1)
        f.shift(10)
        self.assertEqual(0, f.get_value(15))
        self.assertEqual(5, f.get_value(25))
        self.assertEqual(0, f.get_value(30))

    def test_dilate(self) -> None:
        f = NumToNumSegmentFunction(0, 100)
        f.set_slope(10, 20, 0, 1)
        f.dilate(2)
        self.assertEqual(200, f.definition_interval_max)
        self.assertEqual(5, f.get_value(30))

    def test_set_periodic(self) -> None:
        tooth = NumToNumSegmentFunction(0, 10)
        tooth.set_slope(0, 10, 0, 1)
        f = NumToNumSegmentFunction(0, 100)
        f.set_periodic(tooth, 0, 3)
        self.assertEqual(5, f.get_value(5))
        self.assertEqual(5, f.get_value(25))
        self.assertEqual(0, f.get_value(30))
        self.assertEqual(0, f.get_value(50))

    def test_is_semi_convex(self) -> None:
        earliness = functions.piecewise_linear_function([10], [-2, 0], 10, 0)
        self.assertTrue(earliness.is_semi_convex())
        bump = NumToNumSegmentFunction(0, 100)
        bump.set_value(10, 20, 5)
        self.assertFalse(bump.is_semi_convex())


class PiecewiseLinearFunctionTest(absltest.TestCase):

    def test_earliness(self) -> None:
        f = functions.piecewise_linear_function([10], [-2, 0], 10, 0, "earliness")
        self.assertEqual(20, f.get_value(0))
        self.assertEqual(0, f.get_value(10))
        self.assertEqual(0, f.get_value(15))
        self.assertEqual("earliness", f.name)

    def test_reference_point(self) -> None:
        f = functions.piecewise_linear_function([0, 10], [1, 2, 3], 0, 5)
        self.assertEqual(4, f.get_value(-1))
        self.assertEqual(5, f.get_value(0))
        self.assertEqual(25, f.get_value(10))
        self.assertEqual(31, f.get_value(12))

    def test_step(self) -> None:
        f = functions.piecewise_linear_function([5, 5], [0, 10, 0], 0, 0)
        self.assertEqual(0, f.get_value(4))
        self.assertEqual(10, f.get_value(5))
        self.assertEqual(10, f.get_value(50))

    def test_no_points(self) -> None:
        f = functions.piecewise_linear_function([], [2], 1, 3)
        self.assertEqual(3, f.get_value(1))
        self.assertEqual(7, f.get_value(3))

    def test_errors(self) -> None:
        with self.assertRaises(ValueError):
            functions.piecewise_linear_function([1, 2], [0, 0], 0, 0)
        with self.assertRaises(ValueError):
            functions.piecewise_linear_function([2, 1], [0, 0, 0], 0, 0)


if __name__ == "__main__":
    absltest.main()
