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

"""Tests for optdsl.cp.search."""

from absl.testing import absltest

from optdsl.cp import search
from optdsl.cp.cp_model import CpModel


class SearchPhaseTest(absltest.TestCase):

    def test_variables(self) -> None:
        model = CpModel()
        x = model.int_var(0, 10, "x")
        a = model.interval_var(3, name="a")
        phase = model.search_phase([a, x, x + 1])
        self.assertLen(phase.variables, 3)
        self.assertIs(a.start, phase.variables[0])
        self.assertEqual(search.CHOOSE_FIRST, phase.var_strategy)
        self.assertEqual(search.SELECT_MIN_VALUE, phase.value_strategy)
        self.assertEqual("SearchPhase([a.start, x, x + 1])", str(phase))
        with self.assertRaises(TypeError):
            model.search_phase([x, "y"])

    def test_phases_are_posted(self) -> None:
        model = CpModel()
        x = model.int_var(0, 10, "x")
        y = model.int_var(0, 10, "y")
        model.add(x + y <= 12)
        model.set_search_phases(
            model.search_phase([x], search.CHOOSE_FIRST, search.SELECT_MAX_VALUE),
            model.search_phase([y]),
        )
        self.assertTrue(
            model.solve(
                params="search_branching: FIXED_SEARCH, num_workers: 1,"
                " cp_model_presolve: false"
            )
        )
        self.assertLen(model._extract().proto.search_strategy, 2)
        self.assertEmpty(model.native.proto.search_strategy)
        self.assertEqual(10, model.get_value(x))
        self.assertEqual(0, model.get_value(y))
        model.set_search_phases()
        self.assertTrue(model.solve())
        self.assertEmpty(model._extract().proto.search_strategy)

    def test_expression_phase_is_created_once(self) -> None:
        model = CpModel()
        x = model.int_var(0, 10, "x")
        y = model.int_var(0, 10, "y")
        model.set_search_phases(model.search_phase([x + y]))
        self.assertTrue(model.solve())
        count = len(model.native.proto.variables)
        self.assertEqual(3, count)
        self.assertTrue(model.solve())
        self.assertLen(model.native.proto.variables, count)


if __name__ == "__main__":
    absltest.main()
