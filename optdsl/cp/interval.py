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

"""Interval variables, sequences of intervals and transition distances.

An interval variable is a task with a start, an end, a size and a presence
status. It is represented by three integer variables and a presence literal.
The CP-SAT interval is only created when the interval is first used by a
global constraint, or when the model is solved. Until then, the intensity of
the interval can be changed.

When an interval has an intensity function F (in percent of the granularity
g), its size and its length differ:

    size * g <= integral(F, start, end) <= size * g + g - 1

A sequence variable orders a set of intervals. When the order is needed
explicitly (direct transition distances, next/previous expressions), it is
modelled with a circuit over the present intervals, the node 0 standing for
the beginning and the end of the sequence.
"""

from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple, Union

import numpy as np

from ortools.sat.python import cp_model

from optdsl.cp import expressions
from optdsl.cp import functions
from optdsl.modeler import IntegralT, NumberT

# Bounds of the time line of interval variables.
INTERVAL_MIN = -(2**30 - 1)
INTERVAL_MAX = 2**30 - 1

# One piece (start, end, value at start, slope) of a piecewise linear function
# of an integer variable. Pieces are half open: [start, end).
PieceT = Tuple[int, int, NumberT, NumberT]


def piecewise_value(
    model: Any,
    t: expressions.IntExpr,
    pieces: Sequence[PieceT],
    presence: Optional[expressions.IntExpr] = None,
    absent_value: NumberT = 0,
) -> Union[expressions.IntExpr, expressions.NumExpr]:
    """Returns f(t) for a piecewise linear function f of an integer expression.

    One boolean z[k] selects the piece of t, and w[k] = t - start[k] when
    z[k] is true, 0 otherwise. Then t = sum(start[k] * z[k] + w[k]) and
    f(t) = sum(f(start[k]) * z[k] + slope[k] * w[k]). The values of t outside
    the pieces are forbidden.

    When `presence` is given, t is only constrained when it is 1, and the
    result is `absent_value` when it is 0.

    Args:
      model: the CpModel.
      t: the integer expression.
      pieces: the sorted, disjoint, pieces of f.
      presence: an optional 0/1 expression.
      absent_value: the value of the result when presence is 0.

    Returns:
      An IntExpr if all the values and slopes are integers, a NumExpr
      otherwise.
    """
    if not pieces:
        raise ValueError("the function is not defined on the domain")
    native = model.native
    value: Any = 0
    position: Any = 0
    selectors = []
    for x0, x1, v0, slope in pieces:
        z = model.new_aux_bool_var()
        w = model.new_aux_int_var(0, x1 - x0 - 1)
        native.add(w.native() <= (x1 - x0 - 1) * z.native())
        selectors.append(z.native())
        value = value + v0 * z + slope * w
        position = position + x0 * z + w
    if presence is None:
        native.add_exactly_one(selectors)
        native.add(t.native() == position.native())
        return value
    native.add(sum(selectors) == presence.native())
    presence_lit = expressions.as_literal(presence)
    native.add(t.native() == position.native()).only_enforce_if(presence_lit)
    return value + absent_value * (1 - presence)


def integral_value(
    model: Any,
    t: expressions.IntExpr,
    pieces: Sequence[PieceT],
    presence: Optional[expressions.IntExpr] = None,
) -> expressions.IntVar:
    """Returns G(t) for a non decreasing piecewise linear G with integer values.

    One literal b[k] <=> t >= start[k] per piece but the first, so the piece of
    t is the last k with b[k] true, and G(t) is linear on that piece. While t
    is not fixed, G(start[k]) and G(start[k] - 1) bound G(t) on each side of
    the breakpoint. The values of t outside the pieces are forbidden.

    When `presence` is given, t is only constrained when it is 1.
    """
    if not pieces:
        raise ValueError("the function is not defined on the domain")
    native = model.native
    enforcement = [] if presence is None else [expressions.as_literal(presence)]
    last = pieces[-1]
    g = model.new_aux_int_var(
        int(pieces[0][2]), int(last[2] + last[3] * (last[1] - 1 - last[0]))
    )
    domain = cp_model.Domain.from_intervals([[x0, x1 - 1] for x0, x1, _, _ in pieces])
    native.add_linear_expression_in_domain(t.native(), domain).only_enforce_if(
        enforcement
    )
    after: List[Optional[cp_model.IntVar]] = [None]
    for k in range(1, len(pieces)):
        x0, _, v0, _ = pieces[k]
        p0, p1, pv0, pslope = pieces[k - 1]
        b = model.new_aux_bool_var().native()
        native.add(t.native() >= x0).only_enforce_if(b)
        native.add(t.native() < x0).only_enforce_if(~b)
        native.add(g.native() >= int(v0)).only_enforce_if(b)
        native.add(g.native() <= int(pv0 + pslope * (p1 - 1 - p0))).only_enforce_if(~b)
        after.append(b)
    after.append(None)
    for k, (x0, _, v0, slope) in enumerate(pieces):
        lits = list(enforcement)
        if after[k] is not None:
            lits.append(after[k])
        if after[k + 1] is not None:
            lits.append(~after[k + 1])
        native.add(
            g.native() == int(v0) + int(slope) * (t.native() - x0)
        ).only_enforce_if(lits)
    return g


def _clip(x: NumberT, lo: int, hi: int) -> int:
    return int(max(lo, min(hi, x)))


def step_pieces(
    f: functions.NumToNumStepFunction, lo: int, hi: int
) -> List[PieceT]:
    """Returns the pieces of f on the integers of [lo, hi]."""
    pieces = []
    for s in f.segments(lo, hi + 1):
        x0 = _clip(s.start, lo, hi + 1)
        x1 = _clip(s.end, lo, hi + 1)
        if x0 < x1:
            pieces.append((x0, x1, s.value, 0))
    return pieces


def integral_pieces(
    f: functions.NumToNumStepFunction, lo: int, hi: int
) -> List[PieceT]:
    """Returns the pieces of G(t) = integral(f, lo, t) on the integers of [lo, hi]."""
    pieces = []
    area = 0
    for x0, x1, v, _ in step_pieces(f, lo, hi):
        pieces.append((x0, x1, area, int(v)))
        area += int(v) * (x1 - x0)
    return pieces


def segment_pieces(
    f: functions.NumToNumSegmentFunction, lo: int, hi: int
) -> List[PieceT]:
    """Returns the pieces of f on the integers of [lo, hi]."""
    pieces = []
    for start, end, intercept, slope in f.pieces():
        x0 = _clip(start, lo, hi + 1)
        x1 = _clip(end, lo, hi + 1)
        if x0 < x1:
            pieces.append((x0, x1, intercept + slope * x0, slope))
    return pieces


class IntervalVar:
    """An interval variable of a CpModel.

    Created by `CpModel.interval_var()`. The bound setters narrow the domains
    of the underlying variables and must be used before solving.
    """

    def __init__(
        self,
        model: Any,
        start_min: IntegralT = 0,
        start_max: IntegralT = INTERVAL_MAX,
        end_min: IntegralT = 0,
        end_max: IntegralT = INTERVAL_MAX,
        size_min: IntegralT = 0,
        size_max: IntegralT = INTERVAL_MAX,
        optional: bool = False,
        intensity: Optional[functions.NumToNumStepFunction] = None,
        granularity: int = 100,
        name: Optional[str] = None,
    ) -> None:
        if size_min > size_max:
            raise ValueError(f"interval {name}: size_min > size_max")
        self._model = model
        self.__name = name
        self.__start = model.int_var(start_min, start_max, self.__part("start"))
        self.__end = model.int_var(end_min, end_max, self.__part("end"))
        self.__size = model.int_var(size_min, size_max, self.__part("size"))
        self.__presence = model.int_var(0, 1, self.__part("presence"))
        if not optional:
            self.__set_presence_domain(1, 1)
        self.__length_min: int = 0
        self.__length_max: int = INTERVAL_MAX
        self.__intensity = intensity
        self.__granularity = granularity
        self.__native: Optional[cp_model.IntervalVar] = None

    def __part(self, part: str) -> Optional[str]:
        return f"{self.__name}.{part}" if self.__name else None

    @property
    def model(self) -> Any:
        return self._model

    @property
    def name(self) -> Optional[str]:
        return self.__name

    @name.setter
    def name(self, name: str) -> None:
        self.__name = name

    # Variables.

    @property
    def start(self) -> expressions.IntVar:
        return self.__start

    @property
    def end(self) -> expressions.IntVar:
        return self.__end

    @property
    def size(self) -> expressions.IntVar:
        return self.__size

    @property
    def length(self) -> expressions.IntExpr:
        return self.__end - self.__start

    @property
    def presence(self) -> expressions.IntVar:
        return self.__presence

    def presence_literal(self) -> cp_model.LiteralT:
        return self.__presence.native()

    # Bounds.

    @property
    def start_min(self) -> int:
        return self.__start.lb

    @start_min.setter
    def start_min(self, value: IntegralT) -> None:
        self.__start.set_lb(value)

    @property
    def start_max(self) -> int:
        return self.__start.ub

    @start_max.setter
    def start_max(self, value: IntegralT) -> None:
        self.__start.set_ub(value)

    @property
    def end_min(self) -> int:
        return self.__end.lb

    @end_min.setter
    def end_min(self, value: IntegralT) -> None:
        self.__end.set_lb(value)

    @property
    def end_max(self) -> int:
        return self.__end.ub

    @end_max.setter
    def end_max(self, value: IntegralT) -> None:
        self.__end.set_ub(value)

    @property
    def size_min(self) -> int:
        return self.__size.lb

    @size_min.setter
    def size_min(self, value: IntegralT) -> None:
        self.__size.set_lb(value)

    @property
    def size_max(self) -> int:
        return self.__size.ub

    @size_max.setter
    def size_max(self, value: IntegralT) -> None:
        self.__size.set_ub(value)

    @property
    def length_min(self) -> int:
        if self.__intensity is None:
            return self.size_min
        return max(self.__length_min, self.end_min - self.start_max, 0)

    @length_min.setter
    def length_min(self, value: IntegralT) -> None:
        if self.__intensity is None:
            self.size_min = value
        else:
            self.__check_not_extracted("length")
            self.__length_min = max(self.__length_min, int(value))

    @property
    def length_max(self) -> int:
        if self.__intensity is None:
            return self.size_max
        return min(self.__length_max, self.end_max - self.start_min)

    @length_max.setter
    def length_max(self, value: IntegralT) -> None:
        if self.__intensity is None:
            self.size_max = value
        else:
            self.__check_not_extracted("length")
            self.__length_max = min(self.__length_max, int(value))

    # Pre PEP8 setters, one per bound.

    def set_start_min(self, value: IntegralT) -> None:
        self.start_min = value

    def set_start_max(self, value: IntegralT) -> None:
        self.start_max = value

    def set_end_min(self, value: IntegralT) -> None:
        self.end_min = value

    def set_end_max(self, value: IntegralT) -> None:
        self.end_max = value

    def set_size_min(self, value: IntegralT) -> None:
        self.size_min = value

    def set_size_max(self, value: IntegralT) -> None:
        self.size_max = value

    def set_length_min(self, value: IntegralT) -> None:
        self.length_min = value

    def set_length_max(self, value: IntegralT) -> None:
        self.length_max = value

    # Presence.

    def __set_presence_domain(self, lo: int, hi: int) -> None:
        self._model.set_var_domain(
            self.__presence.index, expressions.Domain(lo, hi)
        )

    def set_present(self) -> None:
        self.__set_presence_domain(1, 1)

    def set_absent(self) -> None:
        self.__set_presence_domain(0, 0)

    def set_optional(self) -> None:
        self.__set_presence_domain(0, 1)

    def is_present(self) -> bool:
        """Returns True if the interval is known to be present."""
        return self.__presence.lb == 1

    def is_absent(self) -> bool:
        """Returns True if the interval is known to be absent."""
        return self.__presence.ub == 0

    def is_optional(self) -> bool:
        return self.__presence.lb == 0 and self.__presence.ub == 1

    # Intensity.

    @property
    def intensity(self) -> Optional[functions.NumToNumStepFunction]:
        return self.__intensity

    @property
    def granularity(self) -> int:
        return self.__granularity

    def set_intensity(
        self, intensity: functions.NumToNumStepFunction, granularity: int = 100
    ) -> None:
        """Sets the intensity function, in percent of `granularity`."""
        self.__check_not_extracted("intensity")
        if intensity.get_min() < 0 or intensity.get_max() > granularity:
            raise ValueError(
                f"interval {self.__name}: intensity values must be in [0,"
                f" {granularity}]"
            )
        self.__intensity = intensity
        self.__granularity = granularity

    def __check_not_extracted(self, what: str) -> None:
        if self.__native is not None:
            raise ValueError(
                f"the {what} of interval {self.__name} cannot be changed once the"
                " interval is used by a global constraint or the model is solved"
            )

    # CP-SAT interval.

    def native(self) -> cp_model.IntervalVar:
        """Returns the CP-SAT interval, creating it on first use."""
        if self.__native is None:
            native = self._model.native
            presence = self.presence_literal()
            if self.__intensity is None:
                length = self.__size
            else:
                length = self._model.new_aux_int_var(
                    self.__length_min, self.__length_max
                )
                self.__post_intensity()
            self.__native = native.new_optional_interval_var(
                self.__start.native(),
                length.native(),
                self.__end.native(),
                presence,
                self.__name or "",
            )
        return self.__native

    def __post_intensity(self) -> None:
        model = self._model
        g = self.__granularity
        lo = min(self.__start.lb, self.__end.lb)
        hi = max(self.__start.ub, self.__end.ub)
        pieces = integral_pieces(self.__intensity, lo, hi)
        presence = self.__presence
        work_start = integral_value(model, self.__start, pieces, presence)
        work_end = integral_value(model, self.__end, pieces, presence)
        work = work_end - work_start - g * self.__size
        model.native.add_linear_expression_in_domain(
            work.native(), cp_model.Domain(0, g - 1)
        ).only_enforce_if(self.presence_literal())

    def __lt__(self, other: "IntervalVar") -> expressions.Constraint:
        """Returns the constraint end_before_start(self, other)."""
        return self._model.end_before_start(self, other)

    def __le__(self, other: "IntervalVar") -> expressions.Constraint:
        """Returns the constraint start_before_start(self, other)."""
        return self._model.start_before_start(self, other)

    def __str__(self) -> str:
        return self.__name or "IntervalVar"

    def __repr__(self) -> str:
        status = "optional" if self.is_optional() else (
            "absent" if self.is_absent() else "present"
        )
        return (
            f"IntervalVar({self.__name}, {status},"
            f" start={self.start_min}..{self.start_max},"
            f" end={self.end_min}..{self.end_max},"
            f" size={self.size_min}..{self.size_max})"
        )


class TransitionDistance:
    """A square matrix of minimal distances between interval types."""

    def __init__(
        self,
        size_or_table: Union[int, Sequence[Sequence[IntegralT]]],
        name: Optional[str] = None,
    ) -> None:
        if isinstance(size_or_table, (int, np.integer)):
            self.__table = np.zeros((int(size_or_table), int(size_or_table)), dtype=np.int64)
        else:
            self.__table = np.array(size_or_table, dtype=np.int64)
            if self.__table.ndim != 2 or self.__table.shape[0] != self.__table.shape[1]:
                raise ValueError(
                    f"a transition distance needs a square table, got shape"
                    f" {self.__table.shape}"
                )
        if np.any(self.__table < 0):
            raise ValueError("transition distances must be non negative")
        self.__name = name

    @property
    def name(self) -> Optional[str]:
        return self.__name

    @property
    def size(self) -> int:
        return self.__table.shape[0]

    def set_value(self, i: int, j: int, value: IntegralT) -> None:
        if value < 0:
            raise ValueError("transition distances must be non negative")
        self.__table[i, j] = value

    def get_value(self, i: int, j: int) -> int:
        return int(self.__table[i, j])

    def __getitem__(self, key: Tuple[int, int]) -> int:
        return int(self.__table[key])

    def __str__(self) -> str:
        return f"TransitionDistance({self.__name or ''}, {self.__table.tolist()})"


class IntervalSequenceVar:
    """An ordering of a set of interval variables.

    Each interval of the sequence has an integer type, used to look up
    transition distances. By default, the type of an interval is its position.
    """

    def __init__(
        self,
        model: Any,
        intervals: Sequence[IntervalVar],
        types: Optional[Sequence[IntegralT]] = None,
        name: Optional[str] = None,
    ) -> None:
        self._model = model
        self.__intervals = list(intervals)
        if types is None:
            types = range(len(self.__intervals))
        self.__types = [int(t) for t in types]
        if len(self.__types) != len(self.__intervals):
            raise ValueError(
                f"sequence {name}: {len(self.__intervals)} intervals but"
                f" {len(self.__types)} types"
            )
        self.__positions = {id(a): i for i, a in enumerate(self.__intervals)}
        self.__name = name
        # Arc literals of the successor model, keyed by (from, to) nodes.
        self.__arcs: Optional[Dict[Tuple[int, int], cp_model.LiteralT]] = None

    @property
    def model(self) -> Any:
        return self._model

    @property
    def name(self) -> Optional[str]:
        return self.__name

    @property
    def intervals(self) -> List[IntervalVar]:
        return self.__intervals

    @property
    def types(self) -> List[int]:
        return self.__types

    def __len__(self) -> int:
        return len(self.__intervals)

    def position_of(self, interval: IntervalVar) -> int:
        try:
            return self.__positions[id(interval)]
        except KeyError:
            raise ValueError(
                f"interval {interval.name} is not in sequence {self.__name}"
            ) from None

    def type_of(self, interval: IntervalVar) -> int:
        return self.__types[self.position_of(interval)]

    def has_successor_model(self) -> bool:
        return self.__arcs is not None

    def arcs(self) -> Dict[Tuple[int, int], cp_model.LiteralT]:
        """Returns the arcs of the successor model, creating it on first use.

        Node 0 is the beginning and the end of the sequence, node i + 1 is the
        i-th interval. The arc (i + 1, j + 1) is true iff interval j
        immediately follows interval i. An absent interval has a self loop.
        """
        if self.__arcs is not None:
            return self.__arcs
        model = self._model
        native = model.native
        arcs: Dict[Tuple[int, int], cp_model.LiteralT] = {}
        n = len(self.__intervals)
        for i, a in enumerate(self.__intervals):
            presence = a.presence_literal()
            arcs[(0, i + 1)] = model.new_aux_bool_var().native()
            arcs[(i + 1, 0)] = model.new_aux_bool_var().native()
            arcs[(i + 1, i + 1)] = ~presence
            for j, b in enumerate(self.__intervals):
                if i == j:
                    continue
                lit = model.new_aux_bool_var().native()
                arcs[(i + 1, j + 1)] = lit
                native.add(a.end.native() <= b.start.native()).only_enforce_if(lit)
        empty = model.new_aux_bool_var().native()
        arcs[(0, 0)] = empty
        for a in self.__intervals:
            native.add_implication(empty, ~a.presence_literal())
        if n:
            native.add_circuit([(i, j, lit) for (i, j), lit in arcs.items()])
        self.__arcs = arcs
        return arcs

    def order(self, value_of: expressions.ValueOfT) -> List[IntervalVar]:
        """Returns the present intervals of a solution, in sequence order."""
        present = [
            a for a in self.__intervals if value_of(a.presence.index) == 1
        ]
        if self.__arcs is not None:
            successor = {}
            for (i, j), lit in self.__arcs.items():
                if i != j and expressions.LiteralConstraint(
                    self._model, lit
                ).evaluate(value_of):
                    successor[i] = j
            result = []
            node = successor.get(0, 0)
            while node != 0 and len(result) <= len(self.__intervals):
                result.append(self.__intervals[node - 1])
                node = successor.get(node, 0)
            return result
        return sorted(
            present,
            key=lambda a: (
                value_of(a.start.index),
                value_of(a.end.index),
                self.__positions[id(a)],
            ),
        )

    def __iter__(self) -> Iterator[IntervalVar]:
        """Iterates over the present intervals of the current solution."""
        return iter(self._model.get_sequence(self))

    def __str__(self) -> str:
        return self.__name or "IntervalSequenceVar"

    def __repr__(self) -> str:
        names = ", ".join(str(a) for a in self.__intervals)
        return f"IntervalSequenceVar({self.__name}, [{names}])"


def present_value(
    interval: IntervalVar, expr: expressions.IntExpr, absent_value: IntegralT = 0
) -> expressions.IntExpr:
    """Returns `expr` if the interval is present, `absent_value` otherwise."""
    model = interval.model
    if interval.is_present():
        return expr
    if interval.is_absent():
        return expressions.IntExpr(model, {}, int(absent_value))
    lo, hi = expr.bounds()
    target = model.new_aux_int_var(min(lo, absent_value), max(hi, absent_value))
    lit = interval.presence_literal()
    model.native.add(target.native() == expr.native()).only_enforce_if(lit)
    model.native.add(target.native() == int(absent_value)).only_enforce_if(~lit)
    return target
