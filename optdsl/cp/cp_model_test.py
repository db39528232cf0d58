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

"""Tests for optdsl.cp.cp_model."""

import os
import tempfile

from absl.testing import absltest
from ortools.sat.python import cp_model as sat

from optdsl import modeler
from optdsl.cp import cp_model
from optdsl.cp.cp_model import CpModel


class GlobalConstraintTest(absltest.TestCase):

    def test_all_diff(self) -> None:
        model = CpModel()
        xs = model.int_vars(3, 0, 2)
        ct = model.all_diff(xs)
        model.add(ct)
        model.add(model.all_diff(xs[0], xs[1] + 1))
        model.add(xs[0] == 1)
        self.assertTrue(model.solve())
        values = [model.get_value(x) for x in xs]
        self.assertEqual([1, 2, 0], values)
        self.assertEqual(1, model.get_value(ct))

    def test_allowed_assignments(self) -> None:
        model = CpModel()
        x = model.int_var(0, 10, "x")
        y = model.int_var(0, 10, "y")
        model.add(model.allowed_assignments([x, y], [(1, 2), (3, 4), (5, 0)]))
        model.maximize(x + y)
        self.assertTrue(model.solve())
        self.assertEqual(7, model.get_objective_value())
        self.assertEqual(3, model.get_value(x))
        with self.assertRaises(ValueError):
            model.allowed_assignments([x, y], [(1, 2, 3)])

    def test_pack(self) -> None:
        model = CpModel()
        loads = model.int_vars(3, 0, 10)
        where = model.int_vars(4, 0, 2)
        used = model.int_var(0, 3, "used")
        weights = [4, 3, 3, 2]
        ct = model.pack(loads, where, weights, used)
        model.add(ct)
        model.minimize(used)
        self.assertTrue(model.solve())
        self.assertEqual(2, model.get_value(used))
        self.assertEqual(12, sum(model.get_value(load) for load in loads))
        for j, load in enumerate(loads):
            expected = sum(
                w for x, w in zip(where, weights) if model.get_value(x) == j
            )
            self.assertEqual(expected, model.get_value(load))
        self.assertTrue(ct.evaluate(model.value_of))
        with self.assertRaises(ValueError):
            model.pack(loads, where, [1, 2])

    def test_inverse(self) -> None:
        model = CpModel()
        f = model.int_vars(3, 0, 2)
        g = model.int_vars(3, 0, 2)
        model.add(model.inverse(f, g))
        model.add(f[0] == 2)
        model.add(f[1] == 0)
        self.assertTrue(model.solve())
        self.assertEqual([1, 2, 0], [model.get_value(y) for y in g])

    def test_inverse_of_different_lengths(self) -> None:
        model = CpModel()
        f = model.int_vars(2, 0, 5)
        g = model.int_vars(3, 0, 5)
        ct = model.inverse(f, g)
        model.add(ct)
        model.add(f[0] == 2)
        model.add(f[1] == 0)
        self.assertTrue(model.solve())
        self.assertEqual(1, model.get_value(g[0]))
        self.assertEqual(0, model.get_value(g[2]))
        self.assertGreaterEqual(model.get_value(g[1]), 2)
        self.assertTrue(ct.evaluate(model.value_of))
        model.add(g[1] <= 1)
        self.assertFalse(model.solve())


class ObjectiveTest(absltest.TestCase):

    def test_static_lex(self) -> None:
        model = CpModel()
        x = model.int_var(0, 10, "x")
        y = model.int_var(0, 10, "y")
        model.add(x + y >= 10)
        lex = model.static_lex(x, -y)
        self.assertLen(lex, 2)
        model.minimize(lex)
        self.assertTrue(model.solve())
        self.assertEqual([0.0, -10.0], model.get_objective_values())
        self.assertEqual(0.0, model.get_objective_value())
        self.assertEqual(10, model.get_value(y))

    def test_static_lex_maximize(self) -> None:
        model = CpModel()
        x = model.int_var(0, 10, "x")
        y = model.int_var(0, 10, "y")
        model.add(2 * x + y <= 12)
        model.maximize(model.static_lex([x, y]))
        self.assertTrue(model.solve())
        self.assertEqual([6.0, 0.0], model.get_objective_values())
        model.maximize(model.static_lex([y, x]))
        self.assertTrue(model.solve())
        self.assertEqual([10.0, 1.0], model.get_objective_values())

    def test_static_lex_needs_integer_criteria(self) -> None:
        model = CpModel()
        x = model.int_var(0, 10, "x")
        model.minimize(model.static_lex(1.5 * x))
        with self.assertRaises(TypeError):
            model.solve()
        with self.assertRaises(ValueError):
            model.static_lex()

    def test_objective_of_a_constraint(self) -> None:
        model = CpModel()
        xs = model.int_vars(4, 0, 3)
        model.add(model.all_diff(xs))
        model.maximize(model.sum(x >= 2 for x in xs))
        self.assertTrue(model.solve())
        self.assertEqual(2, model.get_objective_value())


class SolveTest(absltest.TestCase):

    def test_status(self) -> None:
        model = CpModel("status")
        x = model.int_var(0, 5, "x")
        self.assertEqual(sat.UNKNOWN, model.get_status())
        self.assertEqual(0, model.get_min(x))
        self.assertEqual(5, model.get_max(x))
        self.assertFalse(model.is_fixed(x))
        model.minimize(x)
        self.assertTrue(model.solve(time_limit=10))
        self.assertEqual(sat.OPTIMAL, model.get_status())
        self.assertEqual("OPTIMAL", model.get_status_name())
        self.assertEqual(0.0, model.get_best_objective_bound())
        self.assertEqual(0, model.get_min(x))
        self.assertTrue(model.is_fixed(x))

    def test_no_solution(self) -> None:
        model = CpModel()
        x = model.int_var(0, 5, "x")
        with self.assertRaises(modeler.NoSolutionError):
            model.get_value(x)
        model.add(x > 5)
        self.assertFalse(model.solve())
        self.assertEqual(sat.INFEASIBLE, model.get_status())
        with self.assertRaises(modeler.NoSolutionError):
            model.get_value(x)
        with self.assertRaises(modeler.NoSolutionError):
            model.solution()

    def test_expression_created_after_solve(self) -> None:
        model = CpModel()
        x = model.int_var(2, 5, "x")
        self.assertTrue(model.solve())
        self.assertEqual(model.get_value(x) + 1, model.get_value(x + 1))
        with self.assertRaises(modeler.NoSolutionError):
            model.get_value(x * x)

    def test_solution_limit(self) -> None:
        model = CpModel()
        xs = model.int_vars(5, 0, 9)
        model.add(model.all_diff(xs))
        self.assertTrue(model.solve(solution_limit=1, fail_limit=1000))

    def test_parameters(self) -> None:
        model = CpModel()
        x = model.int_var(0, 5, "x")
        model.maximize(x)
        self.assertTrue(model.solve(params="num_workers: 1", log_period=1))
        self.assertEqual(5, model.get_value(x))

    def test_enumeration(self) -> None:
        model = CpModel()
        x = model.int_var(0, 2, "x")
        y = model.int_var(0, 2, "y")
        model.add(x + y == 2)
        with self.assertRaises(RuntimeError):
            model.next()
        model.start_new_search()
        found = set()
        while model.next():
            found.add((model.get_value(x), model.get_value(y)))
        model.end_search()
        self.assertEqual({(0, 2), (1, 1), (2, 0)}, found)

    def test_enumeration_with_objective(self) -> None:
        model = CpModel()
        xs = model.int_vars(3, 0, 4)
        model.add(model.all_diff(xs))
        model.maximize(model.sum(xs))
        model.start_new_search(solution_limit=100)
        last = None
        while model.next():
            value = model.get_value(model.sum(xs))
            if last is not None:
                self.assertGreater(value, last)
            last = value
        model.end_search()
        self.assertEqual(9, last)

    def test_solution_and_restore(self) -> None:
        model = CpModel()
        x = model.int_var(0, 4, "x")
        model.minimize(x)
        self.assertTrue(model.solve())
        best = model.solution()
        self.assertLen(best, len(model.native.proto.variables))
        model.maximize(x)
        self.assertTrue(model.solve())
        self.assertEqual(4, model.get_value(x))
        model.restore(best)
        self.assertEqual(0, model.get_value(x))
        self.assertEqual(0.0, model.get_objective_value())

    def test_starting_point(self) -> None:
        model = CpModel()
        x = model.int_var(0, 4, "x")
        a = model.interval_var(2, end_max=10, name="a")
        model.set_starting_point({x: 3, a: 1})
        hint = model.native.proto.solution_hint
        self.assertEqual([x.index, a.start.index], list(hint.vars))
        self.assertEqual([3, 1], list(hint.values))
        self.assertTrue(model.solve())
        model.set_starting_point(model.solution())
        proto = model.native.proto
        self.assertLen(proto.solution_hint.vars, len(proto.variables))
        model.clear_starting_point()
        self.assertEmpty(model.native.proto.solution_hint.vars)


class ToolingTest(absltest.TestCase):

    def test_export_model(self) -> None:
        model = CpModel("exported")
        x = model.int_var(0, 4, "x")
        model.add(model.interval_var(2, name="a").start >= 1)
        model.minimize(x)
        with tempfile.TemporaryDirectory() as tmpdir:
            filename = os.path.join(tmpdir, "model.pb.txt")
            self.assertTrue(model.export_model(filename))
            self.assertTrue(os.path.exists(filename))

    def test_print_information(self) -> None:
        model = CpModel("info")
        a = model.interval_var(3, name="a")
        model.interval_sequence_var([a])
        model.print_information()
        self.assertTrue(model.solve())
        model.print_information()

    def test_module_constants(self) -> None:
        self.assertEqual(2**30 - 1, cp_model.INTERVAL_MAX)
        self.assertEqual(-1, cp_model.NO_STATE)


if __name__ == "__main__":
    absltest.main()
