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

"""Cumul function expressions.

A cumul function is the sum of elementary functions of time:

* pulse(a, h): h on [start(a), end(a)), 0 elsewhere;
* step_at_start(a, h): h from start(a) on;
* step_at_end(a, h): h from end(a) on;
* step(t, h): h from the fixed time t on;
* pulse(t0, t1, h): h on the fixed window [t0, t1).

The height h is either fixed, or a variable chosen in [hmin, hmax]. The
contribution of an absent interval is 0. A cumul function is 0 before its
first event.

Constraints on cumul functions are encoded on top of CP-SAT as follows:

* `f <= c` where f is a sum of non negative pulses: `add_cumulative`;
* `f <= c` or `f >= c` where all heights are fixed: a reservoir constraint;
* everything else: the level of f is checked at each event time, with one
  literal per pair of events telling if the first one precedes the second.
"""

import dataclasses
from typing import Any, List, Optional, Sequence, Tuple, Union

from absl import logging
from ortools.sat.python import cp_model

from optdsl.cp import expressions
from optdsl.cp import functions
from optdsl.cp import interval as interval_lib
from optdsl.modeler import IntegralT, is_integral

PULSE = "pulse"
STEP_AT_START = "step_at_start"
STEP_AT_END = "step_at_end"
STEP = "step"
FIXED_PULSE = "fixed_pulse"


@dataclasses.dataclass(frozen=True, eq=False)
class Atom:
    """An elementary cumul function, with its sign in the sum."""

    kind: str
    height: expressions.IntExpr
    interval: Optional[interval_lib.IntervalVar] = None
    start: int = 0
    end: int = 0
    sign: int = 1

    def negated(self) -> "Atom":
        return dataclasses.replace(self, sign=-self.sign)

    def signed_height(self) -> expressions.IntExpr:
        return self.height if self.sign > 0 else -self.height

    def is_fixed(self) -> bool:
        return self.height.is_constant()


@dataclasses.dataclass(frozen=True, eq=False)
class Event:
    """A change of level of a cumul function."""

    time: expressions.IntExpr
    height: expressions.IntExpr
    interval: Optional[interval_lib.IntervalVar]

    def active_literal(self) -> Optional[cp_model.LiteralT]:
        if self.interval is None or self.interval.is_present():
            return None
        return self.interval.presence_literal()


def _events(atom: Atom) -> List[Event]:
    h = atom.signed_height()
    a = atom.interval
    if atom.kind == PULSE:
        return [Event(a.start, h, a), Event(a.end, -h, a)]
    if atom.kind == STEP_AT_START:
        return [Event(a.start, h, a)]
    if atom.kind == STEP_AT_END:
        return [Event(a.end, h, a)]
    model = h.model
    if atom.kind == STEP:
        return [Event(expressions.IntExpr(model, {}, atom.start), h, None)]
    return [
        Event(expressions.IntExpr(model, {}, atom.start), h, None),
        Event(expressions.IntExpr(model, {}, atom.end), -h, None),
    ]


class CumulFunctionExpr:
    """A sum of elementary cumul functions.

    Cumul functions are immutable: `f + g` and `f - g` return new functions,
    so that `f += pulse(a, 1)` rebinds f.
    """

    def __init__(self, model: Any, atoms: Sequence[Atom] = ()) -> None:
        self._model = model
        self.__atoms: Tuple[Atom, ...] = tuple(atoms)
        self.__name: Optional[str] = None

    @property
    def model(self) -> Any:
        return self._model

    @property
    def atoms(self) -> Tuple[Atom, ...]:
        return self.__atoms

    @property
    def name(self) -> Optional[str]:
        return self.__name

    @name.setter
    def name(self, name: str) -> None:
        self.__name = name

    def events(self) -> List[Event]:
        result = []
        for atom in self.__atoms:
            result.extend(_events(atom))
        return result

    def __add__(self, other: Any) -> "CumulFunctionExpr":
        if isinstance(other, CumulFunctionExpr):
            return CumulFunctionExpr(self._model, self.__atoms + other.atoms)
        if is_integral(other) and other == 0:
            return self
        return NotImplemented

    def __radd__(self, other: Any) -> "CumulFunctionExpr":
        return self.__add__(other)

    def __sub__(self, other: Any) -> "CumulFunctionExpr":
        if isinstance(other, CumulFunctionExpr):
            return self + (-other)
        if is_integral(other) and other == 0:
            return self
        return NotImplemented

    def __neg__(self) -> "CumulFunctionExpr":
        return CumulFunctionExpr(self._model, [a.negated() for a in self.__atoms])

    def __le__(self, vmax: Any) -> expressions.Constraint:
        """Returns the constraint f(t) <= vmax for all t."""
        return _bound_constraint(self, vmax, upper=True)

    def __ge__(self, vmin: Any) -> expressions.Constraint:
        """Returns the constraint f(t) >= vmin for all t."""
        return _bound_constraint(self, vmin, upper=False)

    def __str__(self) -> str:
        if self.__name:
            return self.__name
        parts = []
        for atom in self.__atoms:
            what = atom.interval.name if atom.interval is not None else (
                f"{atom.start}" if atom.kind == STEP else f"{atom.start}, {atom.end}"
            )
            sign = "-" if atom.sign < 0 else "+"
            parts.append(f"{sign} {atom.kind}({what}, {atom.height})")
        return " ".join(parts).lstrip("+ ") or "0"

    def __repr__(self) -> str:
        return f"CumulFunctionExpr({self})"

    def segments(self, value_of: expressions.ValueOfT) -> List[functions.Segment]:
        """Returns the constant pieces of the function in a solution."""
        changes = {}
        for e in self.events():
            if e.interval is not None and not value_of(e.interval.presence.index):
                continue
            t = e.time.evaluate(value_of)
            changes[t] = changes.get(t, 0) + e.height.evaluate(value_of)
        f = functions.NumToNumStepFunction(
            interval_lib.INTERVAL_MIN, interval_lib.INTERVAL_MAX + 1
        )
        for t, dh in changes.items():
            if dh:
                f.add_value(t, interval_lib.INTERVAL_MAX + 1, dh)
        return list(f)


def _height(model: Any, hmin: Any, hmax: Any = None) -> expressions.IntExpr:
    if isinstance(hmin, expressions.IntExpr) and hmax is None:
        return hmin
    if hmax is None or hmax == hmin:
        return expressions.IntExpr(model, {}, int(hmin))
    if hmin > hmax:
        raise ValueError(f"empty height range [{hmin}, {hmax}]")
    return model.new_aux_int_var(int(hmin), int(hmax))


def pulse(
    model: Any, a: Any, b: Any, c: Any = None, d: Any = None
) -> CumulFunctionExpr:
    """pulse(a, h), pulse(a, hmin, hmax) or pulse(start, end, h)."""
    if isinstance(a, interval_lib.IntervalVar):
        atom = Atom(PULSE, _height(model, b, c), a)
    else:
        if d is not None or c is None:
            raise TypeError("pulse(start, end, h) expects three integers")
        atom = Atom(
            FIXED_PULSE, _height(model, c), None, start=int(a), end=int(b)
        )
    return CumulFunctionExpr(model, [atom])


def step_at_start(
    model: Any, a: interval_lib.IntervalVar, hmin: Any, hmax: Any = None
) -> CumulFunctionExpr:
    return CumulFunctionExpr(model, [Atom(STEP_AT_START, _height(model, hmin, hmax), a)])


def step_at_end(
    model: Any, a: interval_lib.IntervalVar, hmin: Any, hmax: Any = None
) -> CumulFunctionExpr:
    return CumulFunctionExpr(model, [Atom(STEP_AT_END, _height(model, hmin, hmax), a)])


def step(model: Any, t: IntegralT, h: IntegralT) -> CumulFunctionExpr:
    return CumulFunctionExpr(model, [Atom(STEP, _height(model, h), None, start=int(t))])


# Level probing.


def _precedes(
    model: Any, e: Event, tau: expressions.IntExpr
) -> Optional[expressions.Constraint]:
    """Returns the condition of event e being counted at time tau.

    None means always, False never.
    """
    diff = e.time - tau
    conditions: List[expressions.Constraint] = []
    if diff.is_constant():
        if diff.offset > 0:
            return False
    else:
        conditions.append(diff <= 0)
    lit = e.active_literal()
    if lit is not None:
        conditions.append(expressions.LiteralConstraint(model, lit))
    if not conditions:
        return None
    if len(conditions) == 1:
        return conditions[0]
    return expressions.AndConstraint(model, conditions)


def level_at(
    f: CumulFunctionExpr, tau: expressions.IntExpr
) -> expressions.IntExpr:
    """Returns the level of f at time tau as an integer expression."""
    model = f.model
    level = expressions.IntExpr(model, {}, 0)
    for e in f.events():
        cond = _precedes(model, e, tau)
        if cond is False:
            continue
        if cond is None:
            level = level + e.height
        elif e.height.is_constant():
            level = level + e.height.offset * cond
        else:
            lo, hi = e.height.bounds()
            z = model.new_aux_int_var(min(lo, 0), max(hi, 0))
            lit = cond.literal
            model.native.add(z.native() == e.height.native()).only_enforce_if(lit)
            model.native.add(z.native() == 0).only_enforce_if(~lit)
            level = level + z
    return level


def _post_level_bounds(
    f: CumulFunctionExpr,
    tau: expressions.IntExpr,
    vmin: Optional[expressions.IntExpr],
    vmax: Optional[expressions.IntExpr],
    enforcement: List[cp_model.LiteralT],
) -> None:
    level = level_at(f, tau)
    for ct in (
        None if vmin is None else level >= vmin,
        None if vmax is None else level <= vmax,
    ):
        if ct is not None:
            ct.enforce(enforcement)


def _post_probes(
    f: CumulFunctionExpr,
    vmin: Optional[expressions.IntExpr],
    vmax: Optional[expressions.IntExpr],
    window: Optional[Tuple[expressions.IntExpr, expressions.IntExpr]] = None,
    enforcement: Sequence[cp_model.LiteralT] = (),
) -> None:
    """Bounds the level of f at the events, within an optional window."""
    model = f.model
    probes: List[Tuple[expressions.IntExpr, List[cp_model.LiteralT]]] = []
    if window is not None:
        probes.append((window[0], list(enforcement)))
    for e in f.events():
        conditions: List[expressions.Constraint] = []
        lit = e.active_literal()
        if lit is not None:
            conditions.append(expressions.LiteralConstraint(model, lit))
        if window is not None:
            start, end = window
            conditions.append(e.time >= start)
            conditions.append(e.time < end)
        lits = [c.literal for c in conditions] + list(enforcement)
        probes.append((e.time, lits))
    for tau, lits in probes:
        _post_level_bounds(f, tau, vmin, vmax, lits)


def _as_bound(model: Any, v: Any) -> expressions.IntExpr:
    if isinstance(v, expressions.IntExpr):
        return v
    if is_integral(v):
        return expressions.IntExpr(model, {}, int(v))
    raise TypeError(f"a cumul function bound must be an integer, not {type(v).__name__}")


def _bound_constraint(
    f: CumulFunctionExpr, v: Any, upper: bool
) -> expressions.Constraint:
    model = f.model
    bound = _as_bound(model, v)
    description = f"{f} {'<=' if upper else '>='} {bound}"

    def post() -> Optional[cp_model.Constraint]:
        native = model.native
        atoms = f.atoms
        # The level is 0 before the first event.
        zero = expressions.IntExpr(model, {}, 0)
        (zero <= bound if upper else zero >= bound).enforce([])
        if bound.is_constant() and (bound.offset < 0 if upper else bound.offset > 0):
            logging.warning("cumul %s cannot be satisfied", description)
            return None
        if upper and all(
            a.kind in (PULSE, FIXED_PULSE) and a.sign > 0 and a.height.lb >= 0
            for a in atoms
        ):
            logging.vlog(1, "cumul %s: cumulative encoding", description)
            intervals = []
            demands = []
            for a in atoms:
                if a.kind == PULSE:
                    intervals.append(a.interval.native())
                else:
                    intervals.append(
                        native.new_fixed_size_interval_var(
                            a.start, a.end - a.start, ""
                        )
                    )
                demands.append(a.height.affine())
            return native.add_cumulative(intervals, demands, bound.affine())
        if bound.is_constant() and all(a.is_fixed() for a in atoms):
            logging.vlog(1, "cumul %s: reservoir encoding", description)
            events = f.events()
            total = sum(abs(e.height.offset) for e in events)
            times = [e.time.affine() for e in events]
            changes = [e.height.offset for e in events]
            actives = [
                True if e.active_literal() is None else e.active_literal()
                for e in events
            ]
            if upper:
                return native.add_reservoir_constraint_with_active(
                    times, changes, actives, min(-total, 0), bound.offset
                )
            return native.add_reservoir_constraint_with_active(
                times, changes, actives, bound.offset, max(total, 0)
            )
        logging.vlog(1, "cumul %s: event encoding", description)
        if upper:
            _post_probes(f, None, bound)
        else:
            _post_probes(f, bound, None)
        return None

    return expressions.GlobalConstraint(model, description, post)


def always_in(
    f: CumulFunctionExpr,
    start: Union[IntegralT, interval_lib.IntervalVar],
    end: Any,
    vmin: Any = None,
    vmax: Any = None,
) -> expressions.Constraint:
    """always_in(f, start, end, vmin, vmax) or always_in(f, a, vmin, vmax)."""
    model = f.model
    if isinstance(start, interval_lib.IntervalVar):
        a = start
        vmin, vmax = end, vmin
        window = (a.start, a.end)
        enforcement = [] if a.is_present() else [a.presence_literal()]
        description = f"always_in({f}, {a}, {vmin}, {vmax})"
    else:
        window = (
            expressions.IntExpr(model, {}, int(start)),
            expressions.IntExpr(model, {}, int(end)),
        )
        enforcement = []
        description = f"always_in({f}, {start}, {end}, {vmin}, {vmax})"
    lo = _as_bound(model, vmin)
    hi = _as_bound(model, vmax)

    def post() -> None:
        _post_probes(f, lo, hi, window, enforcement)

    return expressions.GlobalConstraint(model, description, post)


def height_at(
    a: interval_lib.IntervalVar,
    f: CumulFunctionExpr,
    absent_value: IntegralT,
    at_start: bool,
) -> expressions.IntExpr:
    """Returns the contribution of a to f at its start (or at its end)."""
    model = f.model
    kinds = (PULSE, STEP_AT_START) if at_start else (STEP_AT_START, STEP_AT_END)
    total = expressions.IntExpr(model, {}, 0)
    for atom in f.atoms:
        if atom.interval is a and atom.kind in kinds:
            total = total + atom.signed_height()
    return interval_lib.present_value(a, total, absent_value)
