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

"""Tests for the Golomb ruler sample."""

import itertools

from absl.testing import absltest

from optdsl.cp.samples import golomb


class GolombTest(absltest.TestCase):

    def test_small_rulers(self) -> None:
        for order, length in ((4, 6), (6, 17)):
            positions = golomb.solve_golomb(order, time_limit=30.0)
            self.assertIsNotNone(positions)
            self.assertLen(positions, order)
            self.assertEqual(0, positions[0])
            self.assertEqual(length, positions[-1])
            differences = [b - a for a, b in itertools.combinations(positions, 2)]
            self.assertLen(set(differences), len(differences))


if __name__ == "__main__":
    absltest.main()
