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

"""Tests for optdsl.cp.interval and the interval constraints of CpModel."""

from absl.testing import absltest

from optdsl.cp import interval
from optdsl.cp.cp_model import CpModel


def fixed_interval(model: CpModel, start: int, size: int, name: str, **kwargs):
    return model.interval_var(
        size, start_min=start, start_max=start, name=name, **kwargs
    )


class IntervalVarTest(absltest.TestCase):

    def test_bounds(self) -> None:
        model = CpModel()
        a = model.interval_var(5, start_min=2, end_max=20, name="a")
        self.assertEqual(2, a.start_min)
        self.assertEqual(20, a.end_max)
        self.assertEqual(5, a.size_min)
        self.assertEqual(5, a.size_max)
        self.assertEqual(5, a.length_min)
        a.set_start_max(10)
        a.end_min = 9
        self.assertEqual(10, a.start_max)
        self.assertEqual(9, a.end_min)
        self.assertEqual("a", str(a))
        self.assertEqual(
            "IntervalVar(a, present, start=2..10, end=9..20, size=5..5)", repr(a)
        )
        self.assertEqual("a.start", a.start.name)
        with self.assertRaises(ValueError):
            model.interval_var(size_min=3, size_max=2)

    def test_presence(self) -> None:
        model = CpModel()
        a = model.interval_var(3, optional=True, name="a")
        self.assertTrue(a.is_optional())
        self.assertFalse(a.is_present())
        a.set_present()
        self.assertTrue(a.is_present())
        a.set_absent()
        self.assertTrue(a.is_absent())
        self.assertFalse(a.is_optional())
        a.set_optional()
        self.assertTrue(a.is_optional())

    def test_presence_is_solved(self) -> None:
        model = CpModel()
        a = model.interval_var(3, name="a")
        b = model.interval_var(3, optional=True, name="b")
        model.maximize(model.presence_of(a) + model.presence_of(b))
        a.set_optional()
        b.set_absent()
        self.assertTrue(model.solve())
        self.assertTrue(model.is_present(a))
        self.assertFalse(model.is_present(b))
        a.set_absent()
        b.set_present()
        a.start_min = 4
        self.assertTrue(model.solve())
        self.assertTrue(model.is_absent(a))
        self.assertTrue(model.is_present(b))

    def test_interval_vars(self) -> None:
        model = CpModel()
        tasks = model.interval_vars(
            ["a", "b"], size={"a": 2, "b": 7}, namer=str, end_max=50
        )
        self.assertEqual(7, tasks["b"].size_min)
        self.assertEqual(50, tasks["a"].end_max)
        self.assertEqual("b", tasks["b"].name)
        self.assertLen(model.interval_vars(3, size=1), 3)

    def test_solution(self) -> None:
        model = CpModel()
        a = model.interval_var(5, name="a")
        b = model.interval_var(3, name="b")
        model.add(a < b)
        model.minimize(model.end_of(b))
        self.assertTrue(model.solve())
        self.assertEqual(0, model.get_start(a))
        self.assertEqual(5, model.get_start(b))
        self.assertEqual(8, model.get_end(b))
        self.assertEqual(3, model.get_size(b))
        self.assertEqual(3, model.get_length(b))
        self.assertEqual("a: [0 -- 5 --> 5)", model.get_domain(a))

    def test_optional_precedence(self) -> None:
        model = CpModel()
        a = model.interval_var(5, name="a")
        b = model.interval_var(3, start_max=2, optional=True, name="b")
        model.add(model.end_before_start(a, b))
        model.maximize(model.presence_of(b))
        self.assertTrue(model.solve())
        self.assertTrue(model.is_absent(b))
        self.assertEqual("b: absent", model.get_domain(b))
        with self.assertRaises(ValueError):
            model.get_start(b)

    def test_start_before_start(self) -> None:
        model = CpModel()
        a = fixed_interval(model, 4, 2, "a")
        b = model.interval_var(1, name="b")
        model.add(a <= b)
        model.add(model.end_at_end(a, b, 3))
        self.assertTrue(model.solve())
        self.assertEqual(8, model.get_start(b))
        self.assertEqual(9, model.get_end(b))
        model.add(model.start_before_end(b, a))
        self.assertFalse(model.solve())

    def test_absent_value(self) -> None:
        model = CpModel()
        a = model.interval_var(3, optional=True, name="a")
        a.set_absent()
        self.assertEqual(-1, model.start_of(a, -1).offset)
        b = model.interval_var(3, optional=True, name="b")
        end = model.end_of(b, 99)
        model.add(b.presence == 0)
        self.assertTrue(model.solve())
        self.assertEqual(99, model.get_value(end))

    def test_overlap_length(self) -> None:
        model = CpModel()
        a = fixed_interval(model, 0, 10, "a")
        b = fixed_interval(model, 5, 15, "b")
        both = model.overlap_length(a, b)
        window = model.overlap_length(a, 8, 30)
        outside = model.overlap_length(a, 40, 50)
        self.assertTrue(model.solve())
        self.assertEqual(5, model.get_value(both))
        self.assertEqual(2, model.get_value(window))
        self.assertEqual(0, model.get_value(outside))

    def test_start_eval(self) -> None:
        model = CpModel()
        f = model.num_to_num_step_function(0, 100, 3)
        f.set_value(0, 10, 7)
        a = fixed_interval(model, 12, 2, "a")
        b = fixed_interval(model, 4, 2, "b")
        fa = model.start_eval(a, f)
        fb = model.start_eval(b, f)
        fc = model.end_eval(b, f)
        self.assertTrue(model.solve())
        self.assertEqual(3, model.get_value(fa))
        self.assertEqual(7, model.get_value(fb))
        self.assertEqual(7, model.get_value(fc))

    def test_forbid_start(self) -> None:
        model = CpModel()
        f = model.num_to_num_step_function(0, 100, 1)
        f.set_value(0, 5, 0)
        a = model.interval_var(2, end_max=100, name="a")
        model.add(model.forbid_start(a, f))
        model.minimize(a.start)
        self.assertTrue(model.solve())
        self.assertEqual(5, model.get_start(a))

    def test_forbid_extent(self) -> None:
        model = CpModel()
        f = model.num_to_num_step_function(0, 100, 1)
        f.set_value(3, 4, 0)
        a = model.interval_var(4, end_max=100, name="a")
        b = model.interval_var(2, end_max=100, name="b")
        model.add(model.forbid_extent(a, f))
        model.add(model.forbid_extent(b, f))
        model.minimize(a.start + b.start)
        self.assertTrue(model.solve())
        self.assertEqual(4, model.get_start(a))
        self.assertEqual(0, model.get_start(b))

    def test_intensity(self) -> None:
        model = CpModel()
        f = model.num_to_num_step_function(0, 200, 100)
        f.set_value(10, 20, 50)
        a = model.interval_var(
            10, start_min=5, start_max=5, end_max=100, intensity=f, name="a"
        )
        model.minimize(a.end)
        self.assertTrue(model.solve())
        self.assertEqual(20, model.get_end(a))
        self.assertEqual(10, model.get_size(a))
        self.assertEqual(15, model.get_length(a))
        with self.assertRaises(ValueError):
            a.set_intensity(f)

    def test_intensity_out_of_range(self) -> None:
        model = CpModel()
        f = model.num_to_num_step_function(0, 100, 150)
        a = model.interval_var(10, name="a")
        with self.assertRaises(ValueError):
            a.set_intensity(f)
        a.set_intensity(f, granularity=200)
        self.assertEqual(200, a.granularity)


class TransitionDistanceTest(absltest.TestCase):

    def test_values(self) -> None:
        tdist = interval.TransitionDistance(3, "setup")
        self.assertEqual(3, tdist.size)
        self.assertEqual(0, tdist.get_value(1, 2))
        tdist.set_value(1, 2, 4)
        self.assertEqual(4, tdist[1, 2])
        self.assertEqual(0, tdist[2, 1])
        with self.assertRaises(ValueError):
            tdist.set_value(0, 0, -1)

    def test_table(self) -> None:
        tdist = interval.TransitionDistance([[0, 1], [2, 0]])
        self.assertEqual(2, tdist.get_value(1, 0))
        with self.assertRaises(ValueError):
            interval.TransitionDistance([[0, 1, 2], [1, 0, 2]])
        with self.assertRaises(ValueError):
            interval.TransitionDistance([[0, -1], [1, 0]])


class SequenceTest(absltest.TestCase):

    def test_positions_and_types(self) -> None:
        model = CpModel()
        tasks = [model.interval_var(1, name=f"t{i}") for i in range(3)]
        seq = model.interval_sequence_var(tasks, [1, 0, 1], name="seq")
        self.assertLen(seq, 3)
        self.assertEqual(2, seq.position_of(tasks[2]))
        self.assertEqual(0, seq.type_of(tasks[1]))
        with self.assertRaises(ValueError):
            seq.position_of(model.interval_var(1, name="other"))
        with self.assertRaises(ValueError):
            model.interval_sequence_var(tasks, [0, 1])
        self.assertEqual([0, 1, 2], model.interval_sequence_var(tasks).types)

    def test_no_overlap_with_transition_distance(self) -> None:
        model = CpModel()
        a = model.interval_var(2, end_max=100, name="a")
        b = model.interval_var(2, end_max=100, name="b")
        seq = model.interval_sequence_var([a, b], [0, 1])
        model.add(model.no_overlap(seq, interval.TransitionDistance([[0, 5], [5, 0]])))
        model.minimize(model.max(a.end, b.end))
        self.assertTrue(model.solve())
        self.assertEqual(9, model.get_objective_value())
        first = model.get_first(seq)
        last = model.get_last(seq)
        self.assertIsNot(first, last)
        self.assertEqual(model.get_end(first) + 5, model.get_start(last))
        self.assertIs(last, model.get_next(seq, first))
        self.assertIs(first, model.get_prev(seq, last))
        self.assertIsNone(model.get_next(seq, last))

    def test_transition_distance_needs_sequence(self) -> None:
        model = CpModel()
        tasks = [model.interval_var(1) for _ in range(2)]
        with self.assertRaises(TypeError):
            model.no_overlap(tasks, interval.TransitionDistance(2))

    def test_direct_transition_distance(self) -> None:
        # Types 0 and 2 need a gap of 10 between them.
        table = [[0, 0, 10], [0, 0, 0], [10, 0, 0]]
        for direct, makespan in ((False, 12), (True, 3)):
            model = CpModel()
            tasks = [model.interval_var(1, end_max=100, name=f"t{i}") for i in range(3)]
            seq = model.interval_sequence_var(tasks, [0, 1, 2])
            model.add(
                model.no_overlap(seq, interval.TransitionDistance(table), direct)
            )
            model.minimize(model.max(*(t.end for t in tasks)))
            self.assertTrue(model.solve())
            self.assertEqual(makespan, model.get_objective_value())
            self.assertLen(model.get_sequence(seq), 3)

    def test_absent_intervals_leave_the_sequence(self) -> None:
        model = CpModel()
        tasks = [
            model.interval_var(2, end_max=100, optional=True, name=f"t{i}")
            for i in range(3)
        ]
        seq = model.interval_sequence_var(tasks)
        model.add(model.no_overlap(seq, interval.TransitionDistance(3), direct=True))
        model.add(tasks[1].presence == 0)
        self.assertTrue(model.solve())
        order = model.get_sequence(seq)
        self.assertNotIn(tasks[1], order)
        self.assertEqual(
            [t for t in tasks if model.is_present(t)], sorted(order, key=tasks.index)
        )

    def test_type_of_next(self) -> None:
        model = CpModel()
        tasks = [
            fixed_interval(model, 0, 2, "a"),
            fixed_interval(model, 5, 2, "b"),
        ]
        seq = model.interval_sequence_var(tasks, [3, 4])
        model.add(model.no_overlap(seq, interval.TransitionDistance(5), direct=True))
        after_a = model.type_of_next(seq, tasks[0], last_value=-1)
        after_b = model.type_of_next(seq, tasks[1], last_value=-1)
        before_b = model.start_of_previous(seq, tasks[1], first_value=-1)
        self.assertTrue(model.solve())
        self.assertEqual(4, model.get_value(after_a))
        self.assertEqual(-1, model.get_value(after_b))
        self.assertEqual(0, model.get_value(before_b))

    def test_same_sequence(self) -> None:
        model = CpModel()
        first = [model.interval_var(1, end_max=20, name=f"x{i}") for i in range(3)]
        second = [model.interval_var(1, end_max=20, name=f"y{i}") for i in range(3)]
        seq1 = model.interval_sequence_var(first)
        seq2 = model.interval_sequence_var(second)
        model.add(model.no_overlap(seq1))
        model.add(model.no_overlap(seq2))
        model.add(model.same_sequence(seq1, seq2))
        model.add(first[2] < first[0])
        model.add(first[0] < first[1])
        self.assertTrue(model.solve())
        order = [second.index(y) for y in model.get_sequence(seq2)]
        self.assertEqual([2, 0, 1], order)
        with self.assertRaises(ValueError):
            model.same_sequence(seq1, model.interval_sequence_var(second[:2]))


class StructureTest(absltest.TestCase):

    def test_span(self) -> None:
        model = CpModel()
        a = model.interval_var(name="a")
        b1 = fixed_interval(model, 3, 2, "b1")
        b2 = fixed_interval(model, 10, 4, "b2")
        b3 = model.interval_var(1, optional=True, name="b3")
        b3.set_absent()
        model.add(model.span(a, [b1, b2, b3]))
        self.assertTrue(model.solve())
        self.assertEqual(3, model.get_start(a))
        self.assertEqual(14, model.get_end(a))
        self.assertEqual(11, model.get_size(a))

    def test_alternative(self) -> None:
        model = CpModel()
        a = model.interval_var(name="a")
        b1 = model.interval_var(5, optional=True, name="b1")
        b2 = model.interval_var(3, optional=True, name="b2")
        model.add(model.alternative(a, [b1, b2]))
        model.minimize(a.end)
        self.assertTrue(model.solve())
        self.assertTrue(model.is_present(b2))
        self.assertTrue(model.is_absent(b1))
        self.assertEqual(3, model.get_end(a))

    def test_optional_alternative(self) -> None:
        model = CpModel()
        a = model.interval_var(optional=True, name="a")
        bs = [model.interval_var(2, optional=True) for _ in range(3)]
        model.add(model.alternative(a, bs))
        model.add(a.presence == 0)
        model.maximize(model.sum(model.presence_of(b) for b in bs))
        self.assertTrue(model.solve())
        self.assertEqual(0, model.get_objective_value())

    def test_no_overlap(self) -> None:
        model = CpModel()
        tasks = [model.interval_var(d, end_max=100) for d in (3, 4, 5)]
        model.add(model.no_overlap(tasks))
        model.minimize(model.max(*(t.end for t in tasks)))
        self.assertTrue(model.solve())
        self.assertEqual(12, model.get_objective_value())


if __name__ == "__main__":
    absltest.main()
