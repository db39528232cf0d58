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

"""Tests for the facility location sample."""

from absl.testing import absltest

from optdsl.cp.samples import facility


class FacilityTest(absltest.TestCase):

    def test_optimal_cost(self) -> None:
        result = facility.solve_facility()
        self.assertIsNotNone(result)
        cost, locations = result
        self.assertEqual(1383, cost)
        for j, capacity in enumerate(facility.CAPACITY):
            self.assertLessEqual(list(locations).count(j), capacity)
        opened = set(locations)
        expected = sum(facility.FIXED_COST[j] for j in opened) + sum(
            facility.COST[i][j] for i, j in enumerate(locations)
        )
        self.assertEqual(expected, cost)


if __name__ == "__main__":
    absltest.main()
