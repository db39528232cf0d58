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

"""State functions.

A state function is a function of time taking non negative integer states, or
no state at all (NO_STATE). It is constrained by requests over intervals:
always_equal, always_constant, always_in and always_no_state. Requests are
collected on the function and posted when the model is solved:

* two requests with different states never overlap, and the transition
  distance between their states separates them;
* two overlapping requests with the same state may ask to be aligned on the
  start or on the end of their common segment;
* a no-state request never overlaps a request with a state.

always_in(vmin, vmax) asks for a single state in [vmin, vmax] over the whole
window.
"""

import dataclasses
import itertools
from typing import Any, List, Optional, Tuple

from absl import logging
from ortools.sat.python import cp_model

from optdsl.cp import expressions
from optdsl.cp import functions
from optdsl.cp import interval as interval_lib
from optdsl.modeler import IntegralT

NO_STATE = -1


@dataclasses.dataclass(eq=False)
class Request:
    """A request on a window of a state function.

    `value` is an int for always_equal, None for always_no_state, and a
    variable created at posting time otherwise.
    """

    start: expressions.IntExpr
    end: expressions.IntExpr
    interval: Optional[interval_lib.IntervalVar]
    vmin: Optional[int]
    vmax: Optional[int]
    start_align: bool = False
    end_align: bool = False
    value: Any = None

    def has_state(self) -> bool:
        return self.vmin is not None

    def is_fixed(self) -> bool:
        return self.vmin is not None and self.vmin == self.vmax

    def presence(self) -> List[cp_model.LiteralT]:
        if self.interval is None or self.interval.is_present():
            return []
        return [self.interval.presence_literal()]


class StateFunction:
    """A state function, with an optional transition distance between states."""

    def __init__(
        self,
        model: Any,
        tdist: Optional[interval_lib.TransitionDistance] = None,
        name: Optional[str] = None,
    ) -> None:
        self._model = model
        self.__tdist = tdist
        self.__name = name
        self.__requests: List[Request] = []
        self.__posted = 0

    @property
    def model(self) -> Any:
        return self._model

    @property
    def name(self) -> Optional[str]:
        return self.__name

    @name.setter
    def name(self, name: str) -> None:
        self.__name = name

    @property
    def transition_distance(self) -> Optional[interval_lib.TransitionDistance]:
        return self.__tdist

    @property
    def requests(self) -> List[Request]:
        return self.__requests

    def add_request(
        self,
        window: Tuple[Any, ...],
        vmin: Optional[IntegralT],
        vmax: Optional[IntegralT],
        start_align: bool = False,
        end_align: bool = False,
    ) -> expressions.Constraint:
        """Records a request and returns the constraint that posts it.

        Args:
          window: either (interval,) or (start, end).
          vmin: the smallest allowed state, None for no state.
          vmax: the largest allowed state, None for any state.
          start_align: whether the request starts with its state segment.
          end_align: whether the request ends with its state segment.

        Returns:
          A constraint. Adding it to the model records the request.
        """
        if len(window) == 1:
            a = window[0]
            request = Request(a.start, a.end, a, None, None)
            what = str(a)
        else:
            start, end = (int(x) for x in window)
            if start > end:
                raise ValueError(f"invalid window [{start}, {end})")
            request = Request(
                expressions.IntExpr(self._model, {}, start),
                expressions.IntExpr(self._model, {}, end),
                None,
                None,
                None,
            )
            what = f"{start}, {end}"
        if vmin is not None:
            vmin = int(vmin)
            if vmin < 0:
                raise ValueError(f"states are non negative, got {vmin}")
            request.vmin = vmin
            request.vmax = self.__max_state() if vmax is None else int(vmax)
            request.start_align = start_align
            request.end_align = end_align
        kind = "always_no_state" if vmin is None else (
            "always_equal" if request.is_fixed() else "always_in"
        )
        description = f"{kind}({self}, {what}, {vmin}, {vmax})"

        def post() -> None:
            self.__requests.append(request)

        return expressions.GlobalConstraint(self._model, description, post)

    def __max_state(self) -> int:
        states = [r.vmax for r in self.__requests if r.vmax is not None]
        if self.__tdist is not None:
            states.append(self.__tdist.size - 1)
        return max(states + [0]) if states else 2**20

    def __distance(
        self, r1: Request, r2: Request
    ) -> Tuple[expressions.IntExpr, expressions.IntExpr]:
        model = self._model
        zero = expressions.IntExpr(model, {}, 0)
        if self.__tdist is None or not (r1.has_state() and r2.has_state()):
            return zero, zero
        n = self.__tdist.size
        if r1.is_fixed() and r2.is_fixed():
            return (
                expressions.IntExpr(model, {}, self.__tdist[r1.vmin, r2.vmin]),
                expressions.IntExpr(model, {}, self.__tdist[r2.vmin, r1.vmin]),
            )
        table = [
            expressions.IntExpr(model, {}, self.__tdist[i, j])
            for i in range(n)
            for j in range(n)
        ]
        d12 = expressions.element(table, r1.value * n + r2.value)
        d21 = expressions.element(table, r2.value * n + r1.value)
        return d12, d21

    def post(self) -> None:
        """Posts the requests recorded since the last call."""
        model = self._model
        new = self.__requests[self.__posted:]
        for r in new:
            if r.has_state() and not r.is_fixed():
                r.value = model.new_aux_int_var(r.vmin, r.vmax)
            elif r.is_fixed():
                r.value = expressions.IntExpr(model, {}, r.vmin)
        logging.vlog(
            1, "state function %s: %d requests", self, len(self.__requests)
        )
        for i, j in itertools.combinations(range(len(self.__requests)), 2):
            if j < self.__posted:
                continue
            self.__post_pair(self.__requests[i], self.__requests[j])
        self.__posted = len(self.__requests)

    def __post_pair(self, r1: Request, r2: Request) -> None:
        model = self._model
        presences = r1.presence() + r2.presence()
        if not r1.has_state() and not r2.has_state():
            return
        d12, d21 = self.__distance(r1, r2)
        disjoint = expressions.OrConstraint(
            model, [r1.end + d12 <= r2.start, r2.end + d21 <= r1.start]
        )
        if not (r1.has_state() and r2.has_state()):
            disjoint.enforce(presences)
            return
        if r1.is_fixed() and r2.is_fixed():
            if r1.vmin != r2.vmin:
                disjoint.enforce(presences)
                return
            same = None
        else:
            same = r1.value == r2.value
            expressions.OrConstraint(model, [same, disjoint]).enforce(presences)
        self.__post_alignment(r1, r2, same, presences)

    def __post_alignment(
        self,
        r1: Request,
        r2: Request,
        same: Optional[expressions.Constraint],
        presences: List[cp_model.LiteralT],
    ) -> None:
        if not (r1.start_align or r1.end_align or r2.start_align or r2.end_align):
            return
        overlap = (r1.start < r2.end) & (r2.start < r1.end)
        conditions = [overlap] if same is None else [overlap, same]
        lits = [c.literal for c in conditions] + presences
        if r1.start_align:
            (r1.start <= r2.start).enforce(lits)
        if r2.start_align:
            (r2.start <= r1.start).enforce(lits)
        if r1.end_align:
            (r1.end >= r2.end).enforce(lits)
        if r2.end_align:
            (r2.end >= r1.end).enforce(lits)

    def segments(self, value_of: expressions.ValueOfT) -> List[functions.Segment]:
        """Returns the state segments of a solution."""
        f = functions.NumToNumStepFunction(
            interval_lib.INTERVAL_MIN, interval_lib.INTERVAL_MAX + 1, NO_STATE
        )
        for r in self.__requests:
            if not r.has_state():
                continue
            if r.interval is not None and not value_of(r.interval.presence.index):
                continue
            start = r.start.evaluate(value_of)
            end = r.end.evaluate(value_of)
            if start < end:
                f.set_value(start, end, r.value.evaluate(value_of))
        return list(f)

    def __str__(self) -> str:
        return self.__name or "StateFunction"

    def __repr__(self) -> str:
        return f"StateFunction({self}, {len(self.__requests)} requests)"
