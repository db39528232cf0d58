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

"""Tests for the time penalties scheduling sample."""

from absl.testing import absltest

from optdsl.cp.samples import sched_time


class SchedTimeTest(absltest.TestCase):

    def test_piecewise_costs(self) -> None:
        result = sched_time.solve_sched_time(time_limit=20.0)
        self.assertIsNotNone(result)
        objective, starts = result
        self.assertAlmostEqual(5000.0, objective)
        durations = dict(sched_time.TASKS)
        self.assertCountEqual(durations, starts)
        for before, after in sched_time.PRECEDENCES:
            self.assertLessEqual(starts[before] + durations[before], starts[after])
        self.assertEqual(20, starts["masonry"])
        self.assertEqual(105, starts["moving"])

    def test_max_costs(self) -> None:
        result = sched_time.solve_sched_time(time_limit=20.0, use_function=False)
        self.assertIsNotNone(result)
        self.assertAlmostEqual(5000.0, result[0])


if __name__ == "__main__":
    absltest.main()
