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

"""Tests for the piecewise linear Sailco sample."""

from absl.testing import absltest

from optdsl.mp.samples import sailco_pw


class SailcoTest(absltest.TestCase):

    def test_optimal_plan(self) -> None:
        result = sailco_pw.solve_sailco()
        self.assertIsNotNone(result)
        self.assertAlmostEqual(78450.0, result["cost"], places=3)
        self.assertAlmostEqual(
            result["cost"],
            result["Total production cost"] + result["Total inventory cost"],
            places=3,
        )


if __name__ == "__main__":
    absltest.main()
