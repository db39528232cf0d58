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

"""Tests for optdsl.mp.mp_model."""

import os
import tempfile

from absl.testing import absltest

from optdsl import modeler
from optdsl.mp import mp_model
from optdsl.mp.mp_model import MpModel


class MpModelTest(absltest.TestCase):
    NUM_PLACES = 5

    def test_lp(self) -> None:
        model = MpModel("lp")
        x = model.num_var(0.0, 10.0, "x")
        y = model.num_var(0.0, 10.0, "y")
        model.add(x + 2 * y <= 14, name="c1")
        model.add(3 * x - y >= 0, name="c2")
        model.add(x - y <= 2, name="c3")
        model.maximize(3 * x + 4 * y)
        self.assertTrue(model.solve())
        self.assertEqual(mp_model.SolveStatus.OPTIMAL, model.get_status())
        self.assertAlmostEqual(34.0, model.get_objective_value(), places=self.NUM_PLACES)
        self.assertAlmostEqual(6.0, model.get_value(x), places=self.NUM_PLACES)
        self.assertAlmostEqual(4.0, model.get_value(y), places=self.NUM_PLACES)
        self.assertAlmostEqual(
            34.0, model.get_value(3 * x + 4 * y), places=self.NUM_PLACES
        )

    def test_mip(self) -> None:
        model = MpModel("knapsack")
        weights = [3, 4, 5, 8]
        values = [4, 5, 7, 10]
        take = model.bool_vars(range(4), namer=modeler.default_namer("take"))
        model.add(model.scal_prod(take.values(), weights) <= 12)
        model.maximize(model.scal_prod(values, take.values()))
        self.assertTrue(model.solve())
        self.assertAlmostEqual(16.0, model.get_objective_value(), places=self.NUM_PLACES)
        values = model.get_values(take)
        self.assertEqual([0, 1, 2, 3], list(values.index))
        self.assertAlmostEqual(1.0, values[0], places=self.NUM_PLACES)
        self.assertAlmostEqual(1.0, values[2], places=self.NUM_PLACES)
        self.assertAlmostEqual(0.0, values[3], places=self.NUM_PLACES)

    def test_infeasible(self) -> None:
        model = MpModel()
        x = model.num_var(0.0, 1.0, "x")
        model.add(x >= 2)
        model.minimize(x)
        self.assertFalse(model.solve())
        self.assertNotEqual(mp_model.SolveStatus.OPTIMAL, model.get_status())
        with self.assertRaises(modeler.NoSolutionError):
            model.get_value(x)
        with self.assertRaises(modeler.NoSolutionError):
            model.get_objective_value()

    def test_no_solve(self) -> None:
        model = MpModel()
        x = model.num_var(0.0, 1.0, "x")
        self.assertIsNone(model.get_status())
        with self.assertRaises(modeler.NoSolutionError):
            model.get_value(x)

    def test_range(self) -> None:
        model = MpModel()
        x = model.num_var(0.0, 100.0, "x")
        model.add_range(2.0, 2 * x, 8.0, "r")
        model.minimize(x)
        self.assertTrue(model.solve())
        self.assertAlmostEqual(1.0, model.get_objective_value(), places=self.NUM_PLACES)
        model.maximize(x)
        self.assertTrue(model.solve())
        self.assertAlmostEqual(4.0, model.get_objective_value(), places=self.NUM_PLACES)
        with self.assertRaises(ValueError):
            model.range(3.0, x, 2.0)

    def test_relational_helpers(self) -> None:
        model = MpModel()
        x = model.num_var(0.0, 100.0, "x")
        y = model.num_var(0.0, 100.0, "y")
        model.add(model.ge(x, 3.0))
        model.add(model.eq(y, x + 1.0))
        model.add(model.le(x + y, 20.0))
        model.minimize(y)
        self.assertTrue(model.solve())
        self.assertAlmostEqual(4.0, model.get_value(y), places=self.NUM_PLACES)
        ct = model.le(x, y, "named")
        self.assertEqual("named", ct.name)
        self.assertEqual(0.0, ct.ub)

    def test_bounds(self) -> None:
        model = MpModel()
        x = model.num_var(name="x")
        model.set_lb(x, 2.0)
        model.set_ub(x, 5.0)
        model.maximize(x)
        self.assertTrue(model.solve())
        self.assertAlmostEqual(5.0, model.get_value(x), places=self.NUM_PLACES)
        self.assertEqual(x.index, model.get_var_by_name("x").index)
        self.assertIsNone(model.get_var_by_name("y"))

    def test_int_var_default_bounds(self) -> None:
        model = MpModel()
        n = model.int_var(name="n")
        self.assertEqual(0.0, n.lower_bound)
        self.assertEqual(modeler.INT_MAX, n.upper_bound)
        counts = model.int_vars(3, namer=modeler.default_namer("count"))
        self.assertLen(counts, 3)
        self.assertEqual(modeler.INT_MAX, counts[2].upper_bound)

    def test_if_then(self) -> None:
        model = MpModel()
        b = model.bool_var("b")
        x = model.num_var(0.0, 10.0, "x")
        model.add(model.if_then(b == 0, x <= 0))
        model.add(model.if_then(b == 1, model.ge(x, 3.0)))
        model.add(x >= 1)
        model.minimize(x + b)
        self.assertTrue(model.solve())
        self.assertAlmostEqual(1.0, model.get_value(b), places=self.NUM_PLACES)
        self.assertAlmostEqual(3.0, model.get_value(x), places=self.NUM_PLACES)

    def test_if_then_uses_variable_bounds(self) -> None:
        model = MpModel()
        b = model.bool_var("b")
        x = model.num_var(0.0, 10.0, "x")
        self.assertLen(model.add(model.if_then(b == 0, model.eq(x, 0.0))), 1)
        self.assertLen(model.add(model.if_then(b, model.range(2.0, x, 4.0))), 2)
        self.assertEmpty(model.add(model.if_then(b, x <= 10.0)))
        model.add(x >= 1.0)
        model.maximize(x)
        self.assertTrue(model.solve())
        self.assertAlmostEqual(1.0, model.get_value(b), places=self.NUM_PLACES)
        self.assertAlmostEqual(4.0, model.get_value(x), places=self.NUM_PLACES)
        y = model.num_var(0.0, modeler.INFINITY, "y")
        with self.assertRaises(ValueError):
            model.add(model.if_then(b, y <= 5.0))
        model.add(model.if_then(b, y >= 5.0))

    def test_if_then_condition(self) -> None:
        model = MpModel()
        b = model.bool_var("b")
        x = model.num_var(0.0, 10.0, "x")
        indicator = model.if_then(b, x <= 1)
        self.assertTrue(indicator.value)
        self.assertFalse(model.if_then(b <= 0, x <= 1).value)
        with self.assertRaises(TypeError):
            model.if_then(x == 1, x <= 1)
        with self.assertRaises(TypeError):
            model.if_then(2 * b == 1, x <= 1)
        with self.assertRaises(TypeError):
            model.if_then(True, x <= 1)

    def test_piecewise_evaluate(self) -> None:
        model = MpModel()
        f = model.piecewise_linear(1.0, [(0.0, 0.0), (10.0, 20.0), (10.0, 30.0)], 0.5)
        self.assertEqual(-2.0, f.evaluate(-2.0))
        self.assertEqual(10.0, f.evaluate(5.0))
        self.assertEqual(30.0, f.evaluate(10.0))
        self.assertEqual(32.0, f.evaluate(14.0))
        with self.assertRaises(ValueError):
            model.piecewise_linear(0.0, [(1.0, 0.0), (0.0, 0.0)], 0.0)
        with self.assertRaises(ValueError):
            model.piecewise_linear(0.0, [], 0.0)

    def test_piecewise_convex(self) -> None:
        model = MpModel()
        x = model.num_var(0.0, 100.0, "x")
        f = model.piecewise_linear(1.0, [(10.0, 10.0)], 3.0)
        y = f(x)
        model.add(x >= 20)
        model.minimize(y)
        self.assertTrue(model.solve())
        self.assertAlmostEqual(40.0, model.get_objective_value(), places=self.NUM_PLACES)

    def test_piecewise_concave(self) -> None:
        model = MpModel()
        x = model.num_var(0.0, 100.0, "x")
        # Volume discount: 5 per unit up to 10, then 1 per unit.
        f = model.piecewise_linear(5.0, [(10.0, 50.0)], 1.0)
        y = f(x)
        model.add(x >= 30)
        model.minimize(y)
        self.assertTrue(model.solve())
        self.assertAlmostEqual(70.0, model.get_objective_value(), places=self.NUM_PLACES)

    def test_piecewise_step(self) -> None:
        model = MpModel()
        x = model.num_var(0.0, 20.0, "x")
        f = model.piecewise_linear(0.0, [(10.0, 0.0), (10.0, 100.0)], 0.0)
        y = f(x)
        model.maximize(x - y)
        self.assertTrue(model.solve())
        self.assertLessEqual(model.get_value(x), 10.0 + 1e-6)
        self.assertAlmostEqual(0.0, model.get_value(y), places=self.NUM_PLACES)

    def test_piecewise_unbounded(self) -> None:
        model = MpModel()
        x = model.num_var(0.0, modeler.INFINITY, "x")
        f = model.piecewise_linear(0.0, [(0.0, 0.0), (10.0, 10.0)], 2.0)
        with self.assertRaises(ValueError):
            f(x)

    def test_static_lex(self) -> None:
        model = MpModel()
        x = model.num_var(0.0, 10.0, "x")
        y = model.num_var(0.0, 10.0, "y")
        model.add(x + y >= 10)
        first = model.minimize(x, "first")
        second = model.minimize(-y, "second")
        model.minimize(model.static_lex([first, second], name="lex"))
        self.assertTrue(model.solve())
        values = model.get_objective_values()
        self.assertLen(values, 2)
        self.assertAlmostEqual(0.0, values[0], places=self.NUM_PLACES)
        self.assertAlmostEqual(-10.0, values[1], places=self.NUM_PLACES)
        self.assertAlmostEqual(0.0, model.get_objective_value(), places=self.NUM_PLACES)

    def test_static_lex_priorities_and_tolerance(self) -> None:
        model = MpModel()
        x = model.num_var(0.0, 10.0, "x")
        y = model.num_var(0.0, 10.0, "y")
        model.add(x + y >= 10)
        # y has the higher priority; x may degrade it by 2.
        model.minimize(
            model.static_lex([x, y], priorities=[1, 2], abs_tols=[0.0, 2.0])
        )
        self.assertTrue(model.solve())
        values = model.get_objective_values()
        self.assertAlmostEqual(2.0, values[0], places=self.NUM_PLACES)
        self.assertAlmostEqual(8.0, values[1], places=self.NUM_PLACES)

    def test_static_lex_levels(self) -> None:
        model = MpModel()
        x = model.num_var(0.0, 10.0, "x")
        lex = model.static_lex([x, x, x], priorities=[1, 3, 1])
        self.assertEqual([[1], [0, 2]], lex.levels())
        self.assertEqual([1.0, 1.0, 1.0], lex.weights)
        with self.assertRaises(ValueError):
            model.static_lex([x, x], weights=[1.0])
        with self.assertRaises(ValueError):
            model.static_lex([])

    def test_kpis(self) -> None:
        model = MpModel()
        x = model.num_var(0.0, 10.0, "x")
        y = model.num_var(0.0, 10.0, "y")
        total = model.add_kpi(x + y, "total")
        model.add_kpi(2 * x)
        with self.assertRaises(ValueError):
            model.add_kpi(x, "total")
        model.add(x >= 3)
        model.add(y >= 1)
        model.minimize(total)
        self.assertTrue(model.solve())
        kpis = model.report_kpis()
        self.assertEqual(["total", "kpi2"], list(kpis))
        self.assertAlmostEqual(4.0, kpis["total"], places=self.NUM_PLACES)
        self.assertAlmostEqual(6.0, model.get_kpi_value("kpi2"), places=self.NUM_PLACES)
        with self.assertRaises(ValueError):
            model.get_kpi_value("missing")

    def test_export_import(self) -> None:
        model = MpModel("exported")
        x = model.num_var(0.0, 10.0, "x")
        y = model.int_var(0, 10, "y")
        model.add(x + y >= 3.5, name="c")
        model.minimize(x + 2 * y)
        with tempfile.TemporaryDirectory() as tmpdir:
            for suffix in (".lp", ".mps"):
                filename = os.path.join(tmpdir, "model" + suffix)
                self.assertTrue(model.export_model(filename))
                copy = MpModel("imported")
                self.assertTrue(copy.import_model(filename))
                self.assertLen(copy.get_variables(), 2)
        with self.assertRaises(ValueError):
            model.export_model("model.txt")

    def test_print_information(self) -> None:
        model = MpModel("info")
        model.num_var(0.0, 1.0, "x")
        model.bool_var("b")
        model.print_information()


if __name__ == "__main__":
    absltest.main()
