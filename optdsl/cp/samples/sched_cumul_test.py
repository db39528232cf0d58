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

"""Tests for the cumulative scheduling sample."""

from absl.testing import absltest

from optdsl.cp.samples import sched_cumul


class SchedCumulTest(absltest.TestCase):

    def test_makespan(self) -> None:
        objective = sched_cumul.solve_sched_cumul(time_limit=20.0)
        self.assertIsNotNone(objective)
        self.assertBetween(objective, 285, sched_cumul.HORIZON)


if __name__ == "__main__":
    absltest.main()
