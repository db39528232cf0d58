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

"""Tests for the talent scheduling sample."""

from absl.testing import absltest

from optdsl.cp.samples import talent


class TalentTest(absltest.TestCase):

    def test_read_data(self) -> None:
        data = talent.read_data(talent.DEFAULT_DATA)
        self.assertLen(data.actor_pay, data.num_actors)
        self.assertLen(data.actor_in_scene, data.num_actors)
        for scenes in data.actor_in_scene:
            self.assertTrue(all(0 <= s < data.num_scenes for s in scenes))

    def test_idle_cost(self) -> None:
        objective = talent.solve_talent(time_limit=20.0)
        self.assertIsNotNone(objective)
        self.assertEqual(17, objective)


if __name__ == "__main__":
    absltest.main()
