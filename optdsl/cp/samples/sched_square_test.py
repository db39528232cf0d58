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

"""Tests for the square packing sample."""

import itertools

from absl.testing import absltest

from optdsl.cp.samples import sched_square


class SchedSquareTest(absltest.TestCase):

    def test_placements(self) -> None:
        # These squares tile a 5 x 5 square exactly.
        size = 5
        sizes = [3, 2, 2, 2, 1, 1, 1, 1]
        placements = sched_square.solve_sched_square(
            time_limit=30.0, size_square=size, sizes=sizes
        )
        self.assertIsNotNone(placements)
        self.assertLen(placements, len(sizes))
        for (x0, x1, y0, y1), side in zip(placements, sizes):
            self.assertEqual(side, x1 - x0)
            self.assertEqual(side, y1 - y0)
            self.assertTrue(0 <= x0 and x1 <= size and 0 <= y0 and y1 <= size)
        for p, q in itertools.combinations(placements, 2):
            disjoint = p[1] <= q[0] or q[1] <= p[0] or p[3] <= q[2] or q[3] <= p[2]
            self.assertTrue(disjoint, f"{p} overlaps {q}")


if __name__ == "__main__":
    absltest.main()
