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

"""Tests for optdsl.cp.expressions."""

from absl.testing import absltest

from optdsl.cp import expressions
from optdsl.cp.cp_model import CpModel


def fixed(model: CpModel, value: int, lb: int = -100, ub: int = 100, name=None):
    x = model.int_var(lb, ub, name)
    model.add(x == value)
    return x


class IntExprTest(absltest.TestCase):

    def test_linear(self) -> None:
        model = CpModel()
        x = model.int_var(0, 10, "x")
        y = model.int_var(-5, 5, "y")
        e = x + 2 * y - 3
        self.assertIsInstance(e, expressions.IntExpr)
        self.assertEqual({x.index: 1, y.index: 2}, e.terms)
        self.assertEqual(-3, e.offset)
        self.assertEqual((-13, 17), e.bounds())
        self.assertEqual("x + 2 * y - 3", str(e))
        self.assertEqual({y.index: 2}, (e - x).terms)
        self.assertEqual({}, (x - x).terms)
        self.assertEqual(({x.index: -1}, 4), ((4 - x).terms, (4 - x).offset))
        self.assertEqual({x.index: -3}, (-3 * x).terms)

    def test_float_coefficients(self) -> None:
        model = CpModel()
        x = model.int_var(0, 10, "x")
        e = 1.5 * x + 1
        self.assertIsInstance(e, expressions.NumExpr)
        self.assertEqual({x.index: 1.5}, e.terms)
        self.assertEqual(1.0, e.offset)
        self.assertIsInstance(e / 2, expressions.NumExpr)

    def test_comparisons(self) -> None:
        model = CpModel()
        x = model.int_var(0, 10, "x")
        y = model.int_var(0, 10, "y")
        self.assertIsInstance(x <= y, expressions.DomainConstraint)
        self.assertIsInstance(x == 3, expressions.DomainConstraint)
        self.assertEqual("x >= 1", str(x > 0))
        with self.assertRaises(TypeError):
            bool(x == y)
        with self.assertRaises(TypeError):
            if x <= y:
                pass

    def test_var_bounds(self) -> None:
        model = CpModel()
        x = model.int_var(0, 10, "x")
        x.set_lb(2)
        x.ub = 8
        self.assertEqual(2, x.lb)
        self.assertEqual(8, x.ub)
        x.set_bounds(0, 5)
        self.assertEqual((2, 5), x.bounds())
        self.assertEqual("IntVar(x, 2..5)", repr(x))

    def test_narrowed_bounds_are_solved(self) -> None:
        model = CpModel()
        x = model.int_var(0, 10, "x")
        x.set_lb(4)
        model.minimize(x)
        self.assertTrue(model.solve())
        self.assertEqual(4, model.get_value(x))
        x.set_ub(6)
        model.maximize(x)
        self.assertTrue(model.solve())
        self.assertEqual(6, model.get_value(x))
        self.assertEqual([0, 10], list(model.native.proto.variables[x.index].domain))
        x.restrict(expressions.Domain.from_values([0, 5, 9]))
        self.assertEqual([5, 5], x.domain.flattened_intervals())
        self.assertTrue(model.solve())
        self.assertEqual(5, model.get_value(x))
        x.set_ub(4)
        self.assertFalse(model.solve())

    def test_var_from_values(self) -> None:
        model = CpModel()
        x = model.int_var([1, 3, 5], name="x")
        self.assertEqual((1, 5), x.bounds())
        model.add(x >= 2)
        model.minimize(x)
        self.assertTrue(model.solve())
        self.assertEqual(3, model.get_value(x))
        with self.assertRaises(ValueError):
            model.int_var([], name="empty")
        with self.assertRaises(ValueError):
            model.int_var(3, 2, "empty")

    def test_in_domain(self) -> None:
        model = CpModel()
        x = model.int_var(0, 10, "x")
        model.add(x.in_domain([2, 7, 9]))
        model.add(x >= 3)
        model.minimize(x)
        self.assertTrue(model.solve())
        self.assertEqual(7, model.get_value(x))


class NonlinearTest(absltest.TestCase):

    def test_product(self) -> None:
        model = CpModel()
        x = fixed(model, -3)
        y = fixed(model, 7)
        p = x * y
        self.assertEqual((-10000, 10000), p.bounds())
        self.assertTrue(model.solve())
        self.assertEqual(-21, model.get_value(p))

    def test_division_truncates(self) -> None:
        model = CpModel()
        x = fixed(model, -7)
        q = x // 2
        r = x % 3
        self.assertTrue(model.solve())
        self.assertEqual(-3, model.get_value(q))
        self.assertEqual(-1, model.get_value(r))

    def test_constant_division(self) -> None:
        model = CpModel()
        c = model.sum(-7)
        self.assertEqual(-3, (c // 2).offset)
        self.assertEqual(-1, (c % 3).offset)
        with self.assertRaises(ZeroDivisionError):
            c // 0

    def test_division_by_variable(self) -> None:
        model = CpModel()
        x = fixed(model, 17)
        y = fixed(model, -3, -3, 3)
        q = x // y
        self.assertTrue(model.solve())
        self.assertEqual(-5, model.get_value(q))

    def test_modulo_by_negative_divisor(self) -> None:
        model = CpModel()
        x = fixed(model, 7)
        y = fixed(model, -7)
        d = model.sum(-3)
        r1 = x % d
        r2 = y % d
        self.assertEqual(-1, (model.sum(-7) % d).offset)
        self.assertTrue(model.solve())
        self.assertEqual(1, model.get_value(r1))
        self.assertEqual(-1, model.get_value(r2))

    def test_modulo_by_variable_spanning_zero(self) -> None:
        model = CpModel()
        x = fixed(model, 17)
        y = fixed(model, -3, -3, 3)
        z = fixed(model, 4, -3, 5)
        r1 = x % y
        r2 = x % z
        self.assertTrue(model.solve())
        self.assertEqual(2, model.get_value(r1))
        self.assertEqual(1, model.get_value(r2))

    def test_abs(self) -> None:
        model = CpModel()
        x = fixed(model, -4, -5, 3)
        a = model.abs(x)
        b = abs(x)
        self.assertEqual((0, 5), a.bounds())
        self.assertTrue(model.solve())
        self.assertEqual(4, model.get_value(a))
        self.assertEqual(4, model.get_value(b))

    def test_min_max(self) -> None:
        model = CpModel()
        xs = [fixed(model, v) for v in (4, -2, 9)]
        self.assertIs(xs[0], model.max(xs[0]))
        lo = model.min(xs)
        hi = model.max(*xs)
        self.assertTrue(model.solve())
        self.assertEqual(-2, model.get_value(lo))
        self.assertEqual(9, model.get_value(hi))
        with self.assertRaises(ValueError):
            model.max([])

    def test_element(self) -> None:
        model = CpModel()
        i = fixed(model, 2, 0, 3)
        x = fixed(model, 11)
        e = model.element([10, 20, 30, 40], i)
        f = model.element([1, x, 3], i - 1)
        self.assertEqual((10, 40), e.bounds())
        self.assertTrue(model.solve())
        self.assertEqual(30, model.get_value(e))
        self.assertEqual(11, model.get_value(f))
        self.assertEqual(20, model.element([10, 20, 30], 1).offset)

    def test_element_constant_index_out_of_range(self) -> None:
        model = CpModel()
        with self.assertRaises(IndexError):
            model.element([1, 2, 3], -1)
        with self.assertRaises(IndexError):
            model.element([1, 2, 3], 3)


class ConstraintTest(absltest.TestCase):

    def test_as_int_expr(self) -> None:
        model = CpModel()
        xs = [model.int_var(0, 5, f"x{i}") for i in range(4)]
        model.add(model.count(xs, 2) == 3)
        model.add(model.sum((x >= 4) for x in xs) >= 1)
        self.assertTrue(model.solve())
        values = [model.get_value(x) for x in xs]
        self.assertEqual(3, values.count(2))
        self.assertTrue(any(v >= 4 for v in values))

    def test_constraint_times_int(self) -> None:
        model = CpModel()
        x = model.int_var(0, 10, "x")
        e = 5 * (x >= 3) + (x <= 1) * 2
        model.add(x == 7)
        self.assertTrue(model.solve())
        self.assertEqual(5, model.get_value(e))
        self.assertEqual(1, model.get_value(x >= 3))
        self.assertEqual(0, model.get_value(x <= 1))

    def test_or(self) -> None:
        model = CpModel()
        x = model.int_var(0, 10, "x")
        model.add((x <= 2) | (x >= 8))
        model.add(x >= 3)
        model.minimize(x)
        self.assertTrue(model.solve())
        self.assertEqual(8, model.get_value(x))

    def test_and_not(self) -> None:
        model = CpModel()
        x = model.int_var(0, 10, "x")
        model.add(~((x >= 2) & (x <= 6)))
        model.add(x >= 1)
        model.maximize(x)
        model.add(x <= 9)
        self.assertTrue(model.solve())
        self.assertEqual(9, model.get_value(x))
        model.add(x <= 6)
        model.minimize(x)
        self.assertTrue(model.solve())
        self.assertEqual(1, model.get_value(x))

    def test_if_then(self) -> None:
        model = CpModel()
        b = model.bool_var("b")
        x = model.int_var(0, 10, "x")
        model.add(model.if_then(b, x >= 5))
        model.add(model.if_then(x >= 5, b))
        model.add(b == 1)
        model.minimize(x)
        self.assertTrue(model.solve())
        self.assertEqual(5, model.get_value(x))

    def test_if_then_else(self) -> None:
        model = CpModel()
        b = model.bool_var("b")
        x = model.int_var(0, 10, "x")
        model.add(model.if_then_else(b, x == 3, x == 7))
        model.add(~b)
        self.assertTrue(model.solve())
        self.assertEqual(7, model.get_value(x))

    def test_only_enforce_if(self) -> None:
        model = CpModel()
        b = model.bool_var("b")
        x = model.int_var(0, 10, "x")
        model.add((x >= 8).only_enforce_if(b))
        model.add(b)
        model.minimize(x)
        self.assertTrue(model.solve())
        self.assertEqual(8, model.get_value(x))

    def test_constant_constraints(self) -> None:
        model = CpModel()
        self.assertIsInstance(model.constraint(True), expressions.TrueConstraint)
        self.assertIsInstance(model.constraint(False), expressions.FalseConstraint)
        x = model.int_var(0, 10, "x")
        model.add((x == 4) | False)
        self.assertTrue(model.solve())
        self.assertEqual(4, model.get_value(x))
        model.add(False)
        self.assertFalse(model.solve())

    def test_global_constraint_cannot_be_negated(self) -> None:
        model = CpModel()
        xs = model.int_vars(3, 0, 2)
        with self.assertRaises(TypeError):
            model.add(~model.all_diff(xs))
        with self.assertRaises(TypeError):
            model.add(model.all_diff(xs) | (xs[0] == 1))

    def test_evaluate(self) -> None:
        model = CpModel()
        x = model.int_var(0, 10, "x")
        y = model.int_var(0, 10, "y")
        ct = (x + y == 7) & (x < y)
        values = {x.index: 3, y.index: 4}
        self.assertTrue(ct.evaluate(values.get))
        values[x.index] = 4
        self.assertFalse(ct.evaluate(values.get))
        self.assertTrue((~ct).evaluate(values.get))


if __name__ == "__main__":
    absltest.main()
