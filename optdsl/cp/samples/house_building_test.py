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

"""Tests for the house building sample."""

from absl.testing import absltest

from optdsl.cp.samples import house_building


class HouseBuildingTest(absltest.TestCase):

    def test_schedule(self) -> None:
        result = house_building.solve_house_building(nb_houses=2, time_limit=20.0)
        self.assertIsNotNone(result)
        objective, schedule = result
        self.assertGreater(objective, 0)
        self.assertLen(schedule, 2 * len(house_building.TASKS))
        for h in (1, 2):
            for before, after in house_building.PRECEDENCES:
                self.assertLessEqual(schedule[h, before][1], schedule[h, after][0])
            for t, d in house_building.TASKS.items():
                start, end = schedule[h, t]
                self.assertEqual(d, end - start)


if __name__ == "__main__":
    absltest.main()
