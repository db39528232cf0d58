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

"""Tests for the scheduling with calendars sample."""

from absl.testing import absltest

from optdsl.cp.samples import sched_calendar


class SchedCalendarTest(absltest.TestCase):

    def test_one_house(self) -> None:
        result = sched_calendar.solve_sched_calendar(time_limit=20.0, nb_houses=1)
        self.assertIsNotNone(result)
        self.assertEqual(0, result["masonry_start"])
        self.assertEqual(54, result["masonry_end"])
        self.assertEqual(35, result["masonry_size"])
        self.assertEqual(54, result["masonry_length"])
        self.assertBetween(result["objective"], 54, sched_calendar.HORIZON)


if __name__ == "__main__":
    absltest.main()
