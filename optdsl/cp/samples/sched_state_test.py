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

"""Tests for the state function scheduling sample."""

from absl.testing import absltest

from optdsl.cp.samples import sched_state


class SchedStateTest(absltest.TestCase):

    def test_makespan(self) -> None:
        objective = sched_state.solve_sched_state(time_limit=20.0)
        self.assertIsNotNone(objective)
        self.assertGreaterEqual(objective, 210)


if __name__ == "__main__":
    absltest.main()
