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

"""Constraint programming and scheduling models solved with CP-SAT.

A `CpModel` is the entry point of the CP layer:

    model = CpModel("golomb")
    marks = model.int_vars(8, 0, 100, default_namer("m"))
    model.add(model.all_diff(marks))
    model.minimize(marks[-1])
    if model.solve(time_limit=10):
        print(model.get_objective_value())

* [`CpModel`](#cp_model.CpModel): variables, constraints, objectives, search
  and solution queries.
* [`StaticLex`](#cp_model.StaticLex): a lexicographic list of criteria, used
  with `minimize()` or `maximize()`.
* [`CpSolution`](#cp_model.CpSolution): a snapshot of the values of a
  solution, usable as a starting point.

Interval variables, cumul functions and state functions are translated to
CP-SAT constraints when the model is solved.
"""

import math
from typing import (
    Any,
    Callable,
    Dict,
    Iterable,
    List,
    Optional,
    Sequence,
    Tuple,
    Union,
)

from absl import logging
from google.protobuf import text_format
from ortools.sat import cp_model_pb2
from ortools.sat.python import cp_model

from optdsl import modeler
from optdsl.cp import cumul
from optdsl.cp import expressions
from optdsl.cp import functions
from optdsl.cp import interval as interval_lib
from optdsl.cp import search
from optdsl.cp import state
from optdsl.modeler import INFINITY, INT_MAX, INT_MIN, IntegralT, NumberT

INTERVAL_MIN = interval_lib.INTERVAL_MIN
INTERVAL_MAX = interval_lib.INTERVAL_MAX
NO_STATE = state.NO_STATE

IntExpr = expressions.IntExpr
IntVar = expressions.IntVar
NumExpr = expressions.NumExpr
Constraint = expressions.Constraint
IntervalVar = interval_lib.IntervalVar
IntervalSequenceVar = interval_lib.IntervalSequenceVar
TransitionDistance = interval_lib.TransitionDistance
CumulFunctionExpr = cumul.CumulFunctionExpr
StateFunction = state.StateFunction
SearchPhase = search.SearchPhase

_FEASIBLE = (cp_model.OPTIMAL, cp_model.FEASIBLE)


class StaticLex:
    """Criteria optimized in lexicographic order, the first one first."""

    def __init__(self, criteria: Sequence[Any]) -> None:
        if not criteria:
            raise ValueError("static_lex needs at least one criterion")
        self.__criteria = list(criteria)

    @property
    def criteria(self) -> List[Any]:
        return self.__criteria

    def __len__(self) -> int:
        return len(self.__criteria)

    def __str__(self) -> str:
        return f"static_lex({', '.join(str(c) for c in self.__criteria)})"


class CpSolution:
    """The values of all the variables of a model in one solution."""

    def __init__(
        self, values: Sequence[int], objective_values: Sequence[float]
    ) -> None:
        self.__values = list(values)
        self.__objective_values = list(objective_values)

    @property
    def values(self) -> List[int]:
        return self.__values

    @property
    def objective_values(self) -> List[float]:
        return self.__objective_values

    def value_of(self, index: int) -> int:
        return self.__values[index]

    def __len__(self) -> int:
        return len(self.__values)


class _SolutionCollector(cp_model.CpSolverSolutionCallback):
    """Counts the solutions, keeps them if asked, and enforces a limit."""

    def __init__(self, limit: int, keep: bool) -> None:
        super().__init__()
        self.__limit = limit
        self.__keep = keep
        self.__count = 0
        self.solutions: List[CpSolution] = []

    @property
    def count(self) -> int:
        return self.__count

    def on_solution_callback(self) -> None:
        self.__count += 1
        response = self.response_proto
        logging.vlog(
            1,
            "solution %d, objective %s, time %.2fs",
            self.__count,
            response.objective_value,
            self.wall_time,
        )
        if self.__keep:
            self.solutions.append(
                CpSolution(response.solution, [response.objective_value])
            )
        if self.__count >= self.__limit:
            self.stop_search()


def _int_expr(model: "CpModel", x: Any) -> IntExpr:
    if isinstance(x, IntExpr):
        return x
    if isinstance(x, Constraint):
        return x.as_int_expr()
    if modeler.is_integral(x):
        return IntExpr(model, {}, int(x))
    raise TypeError(f"expected an integer expression, got {type(x).__name__}")


def _flatten(args: Sequence[Any]) -> List[Any]:
    if len(args) == 1 and not isinstance(args[0], (IntExpr, Constraint)):
        try:
            return list(args[0])
        except TypeError:
            pass
    return list(args)


class CpModel(modeler.Modeler):
    """A constraint programming model, solved with CP-SAT.

    The methods of this class follow the usual CP scheduling vocabulary:
    interval variables, precedences, cumul functions, state functions and
    sequences. They all build expressions and constraints of the
    `expressions` module; nothing is posted until `add()` is called.
    """

    def __init__(self, name: Optional[str] = None) -> None:
        super().__init__(name)
        self.__native: Optional[cp_model.CpModel] = cp_model.CpModel()
        if name:
            self.__native.name = name
        self.__var_cache: Dict[int, cp_model.IntVar] = {}
        self.__domains: Dict[int, cp_model.Domain] = {}
        self.__intervals: List[IntervalVar] = []
        self.__sequences: List[IntervalSequenceVar] = []
        self.__state_functions: List[StateFunction] = []
        self.__phases: List[SearchPhase] = []
        self.__objective: Optional[modeler.Objective] = None
        self.__solver: Optional[cp_model.CpSolver] = None
        self.__status: int = cp_model.UNKNOWN
        self.__values: Optional[List[int]] = None
        self.__objective_values: List[float] = []
        self.__best_bound: float = 0.0
        self.__search_solutions: Optional[List[CpSolution]] = None
        self.__search_started = False
        self.__search_model: Optional[cp_model.CpModel] = None
        self.__search_args: Tuple[float, int, Optional[str]] = (INFINITY, INT_MAX, None)

    # Native model access. These methods are used by the expression layer.

    @property
    def native(self) -> cp_model.CpModel:
        """Returns the underlying CP-SAT model."""
        self.check_alive()
        return self.__native

    def native_var(self, index: int) -> cp_model.IntVar:
        var = self.__var_cache.get(index)
        if var is None:
            var = self.native.get_int_var_from_proto_index(index)
            self.__var_cache[index] = var
        return var

    def var_domain(self, index: int) -> cp_model.Domain:
        """Returns the current domain of a variable, narrowed by set_var_domain()."""
        domain = self.__domains.get(index)
        if domain is None:
            domain = cp_model.Domain.from_flat_intervals(
                list(self.native.proto.variables[index].domain)
            )
        return domain

    def set_var_domain(self, index: int, domain: cp_model.Domain) -> None:
        """Replaces the domain of a variable.

        The declared domain of the CP-SAT variable is kept. The new domain is
        posted on the copy of the model built for each solve.
        """
        self.check_alive()
        self.__domains[index] = domain

    def var_bounds(self, index: int) -> Tuple[int, int]:
        domain = self.var_domain(index)
        if domain.is_empty():
            return 0, -1
        return domain.min(), domain.max()

    def var_name(self, index: int) -> str:
        name = self.native.proto.variables[index].name
        return name if name else f"_x{index}"

    def __register(self, var: cp_model.IntVar) -> IntVar:
        self.__var_cache[var.index] = var
        return IntVar(self, var.index)

    def new_aux_int_var(self, lb: int, ub: int) -> IntVar:
        return self.__register(self.native.new_int_var(int(lb), int(ub), ""))

    def new_aux_int_var_from_domain(self, domain: cp_model.Domain) -> IntVar:
        return self.__register(self.native.new_int_var_from_domain(domain, ""))

    def new_aux_bool_var(self) -> IntVar:
        return self.__register(self.native.new_bool_var(""))

    def _release(self) -> None:
        self.__native = None
        self.__solver = None
        self.__var_cache.clear()
        self.__domains.clear()
        self.__values = None

    # Integer variables.

    def int_var(
        self,
        lb: Union[IntegralT, Iterable[IntegralT]] = 0,
        ub: IntegralT = INT_MAX,
        name: Optional[str] = None,
    ) -> IntVar:
        """Creates an integer variable with domain [lb, ub], or with the given values.

        `int_var([1, 3, 5], name="x")` creates a variable taking one of the
        listed values.
        """
        native = self.native
        if modeler.is_integral(lb):
            if lb > ub:
                raise ValueError(f"empty domain [{lb}, {ub}] for {name}")
            var = native.new_int_var(int(lb), int(ub), name or "")
        else:
            values = [int(v) for v in lb]
            if not values:
                raise ValueError(f"empty domain for {name}")
            var = native.new_int_var_from_domain(
                cp_model.Domain.from_values(values), name or ""
            )
        return self.__register(var)

    def bool_var(self, name: Optional[str] = None) -> IntVar:
        return self.__register(self.native.new_bool_var(name or ""))

    # Expressions.

    def _sum(self, exprs: List[Any]) -> Any:
        if any(isinstance(e, CumulFunctionExpr) for e in exprs):
            return CumulFunctionExpr(
                self, [a for e in exprs if not modeler.is_integral(e) for a in e.atoms]
            )
        terms: Dict[int, int] = {}
        offset = 0
        floats: List[Any] = []
        for e in exprs:
            if isinstance(e, Constraint):
                e = e.as_int_expr()
            if isinstance(e, IntExpr):
                for index, coef in e.terms.items():
                    terms[index] = terms.get(index, 0) + coef
                offset += e.offset
            elif modeler.is_integral(e):
                offset += int(e)
            else:
                floats.append(e)
        result: Any = IntExpr(self, {i: c for i, c in terms.items() if c}, offset)
        for e in floats:
            result = result + e
        return result

    def lt(self, e1: Any, e2: Any) -> Constraint:
        return e1 < e2

    def gt(self, e1: Any, e2: Any) -> Constraint:
        return e1 > e2

    def neq(self, e1: Any, e2: Any) -> Constraint:
        return e1 != e2

    def max(self, *exprs: Any) -> IntExpr:
        """max(e1, e2, ...) or max(collection)."""
        return expressions.maximum([_int_expr(self, e) for e in _flatten(exprs)])

    def min(self, *exprs: Any) -> IntExpr:
        """min(e1, e2, ...) or min(collection)."""
        return expressions.minimum([_int_expr(self, e) for e in _flatten(exprs)])

    def abs(self, expr: Any) -> IntExpr:
        return expressions.absolute(_int_expr(self, expr))

    def count(self, exprs: Iterable[Any], value: IntegralT) -> IntExpr:
        """Returns the number of expressions equal to `value`."""
        return self._sum([_int_expr(self, e) == value for e in exprs])

    def element(self, values: Sequence[Any], index: Any) -> IntExpr:
        """Returns values[index], where values are integers or expressions."""
        return expressions.element(
            [_int_expr(self, v) for v in values], _int_expr(self, index)
        )

    # Logical combinations.

    def and_(self, *cts: Any) -> Constraint:
        return expressions.AndConstraint(self, [self.constraint(c) for c in _flatten(cts)])

    def or_(self, *cts: Any) -> Constraint:
        return expressions.OrConstraint(self, [self.constraint(c) for c in _flatten(cts)])

    def not_(self, ct: Any) -> Constraint:
        return self.constraint(ct).negation()

    def if_then(self, antecedent: Any, consequent: Any) -> Constraint:
        return expressions.if_then(
            self.constraint(antecedent), self.constraint(consequent)
        )

    def if_then_else(self, condition: Any, then_ct: Any, else_ct: Any) -> Constraint:
        return expressions.if_then_else(
            self.constraint(condition),
            self.constraint(then_ct),
            self.constraint(else_ct),
        )

    def constraint(self, x: Any) -> Constraint:
        """Returns x as a constraint. Booleans give constant constraints."""
        if isinstance(x, Constraint):
            return x
        if isinstance(x, bool):
            return expressions.TrueConstraint(self) if x else expressions.FalseConstraint(self)
        if isinstance(x, IntExpr):
            return expressions.LiteralConstraint(self, expressions.as_literal(x))
        raise TypeError(f"not a constraint: {type(x).__name__}")

    # Global constraints.

    def all_diff(self, *exprs: Any) -> Constraint:
        """All the expressions take different values."""
        items = [_int_expr(self, e) for e in _flatten(exprs)]

        def check(value_of: expressions.ValueOfT) -> bool:
            values = [e.evaluate(value_of) for e in items]
            return len(set(values)) == len(values)

        return expressions.GlobalConstraint(
            self,
            f"all_diff({', '.join(str(e) for e in items)})",
            lambda: self.native.add_all_different([e.affine() for e in items]),
            check,
        )

    def allowed_assignments(
        self, exprs: Sequence[Any], tuples: Iterable[Sequence[IntegralT]]
    ) -> Constraint:
        """The tuple of values of the expressions is one of `tuples`."""
        items = [_int_expr(self, e) for e in exprs]
        allowed = [tuple(int(v) for v in t) for t in tuples]
        for t in allowed:
            if len(t) != len(items):
                raise ValueError(
                    f"allowed_assignments: tuple {t} does not have {len(items)} values"
                )

        def check(value_of: expressions.ValueOfT) -> bool:
            return tuple(e.evaluate(value_of) for e in items) in set(allowed)

        return expressions.GlobalConstraint(
            self,
            f"allowed_assignments({len(items)} expressions, {len(allowed)} tuples)",
            lambda: self.native.add_allowed_assignments(
                [e.as_var().native() for e in items], allowed
            ),
            check,
        )

    def pack(
        self,
        load: Sequence[Any],
        where: Sequence[Any],
        weights: Sequence[IntegralT],
        used: Any = None,
    ) -> Constraint:
        """Assigns items to bins.

        Item i, of weight weights[i], is put in bin where[i]; load[j] is the
        total weight in bin j; `used`, if given, is the number of non empty
        bins.
        """
        loads = [_int_expr(self, x) for x in load]
        bins = [_int_expr(self, x) for x in where]
        sizes = [int(w) for w in weights]
        if len(bins) != len(sizes):
            raise ValueError(
                f"pack: {len(bins)} items but {len(sizes)} weights"
            )
        used_expr = None if used is None else _int_expr(self, used)

        def post() -> None:
            native = self.native
            m = len(loads)
            for b in bins:
                expressions.DomainConstraint(b, cp_model.Domain(0, m - 1)).enforce([])
            nonempty = []
            for j, l in enumerate(loads):
                lits = [(b == j).literal for b in bins]
                native.add(
                    l.native()
                    == cp_model.LinearExpr.weighted_sum(lits, sizes)
                )
                if used_expr is not None:
                    z = self.new_aux_bool_var().native()
                    native.add_bool_or(lits).only_enforce_if(z)
                    for lit in lits:
                        native.add_implication(lit, z)
                    nonempty.append(z)
            if used_expr is not None:
                native.add(used_expr.native() == sum(nonempty))

        def check(value_of: expressions.ValueOfT) -> bool:
            totals = [0] * len(loads)
            filled = set()
            for b, w in zip(bins, sizes):
                j = b.evaluate(value_of)
                if not 0 <= j < len(loads):
                    return False
                totals[j] += w
                filled.add(j)
            if any(l.evaluate(value_of) != t for l, t in zip(loads, totals)):
                return False
            if used_expr is not None:
                return used_expr.evaluate(value_of) == len(filled)
            return True

        return expressions.GlobalConstraint(
            self, f"pack({len(bins)} items, {len(loads)} bins)", post, check
        )

    def inverse(self, f: Sequence[Any], invf: Sequence[Any]) -> Constraint:
        """invf[f[i]] == i and f[invf[j]] == j.

        The arrays may differ in length. A value of f that is not an index of
        invf (or a value of invf that is not an index of f) is unconstrained.
        """
        fs = [_int_expr(self, x) for x in f]
        gs = [_int_expr(self, x) for x in invf]

        def post() -> Any:
            native = self.native
            if len(fs) == len(gs):
                return native.add_inverse(
                    [x.as_var().native() for x in fs],
                    [x.as_var().native() for x in gs],
                )
            for i, x in enumerate(fs):
                for j, y in enumerate(gs):
                    a = (x == j).literal
                    b = (y == i).literal
                    native.add_implication(a, b)
                    native.add_implication(b, a)
            return None

        def check(value_of: expressions.ValueOfT) -> bool:
            fv = [x.evaluate(value_of) for x in fs]
            gv = [y.evaluate(value_of) for y in gs]
            return all(
                gv[fv[i]] == i for i in range(len(fv)) if 0 <= fv[i] < len(gv)
            ) and all(fv[gv[j]] == j for j in range(len(gv)) if 0 <= gv[j] < len(fv))

        return expressions.GlobalConstraint(
            self, f"inverse({len(fs)}, {len(gs)})", post, check
        )

    # Interval variables.

    def interval_var(
        self,
        size: Optional[IntegralT] = None,
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
    ) -> IntervalVar:
        """Creates an interval variable.

        Args:
          size: a fixed size. Overrides size_min and size_max.
          start_min: the earliest start.
          start_max: the latest start.
          end_min: the earliest end.
          end_max: the latest end.
          size_min: the smallest size.
          size_max: the largest size.
          optional: whether the interval may be absent.
          intensity: an optional step function, in percent of `granularity`.
          granularity: the scale of the intensity function.
          name: the name of the interval.

        Returns:
          The new interval variable.
        """
        self.check_alive()
        if size is not None:
            size_min = size_max = size
        a = IntervalVar(
            self,
            start_min,
            start_max,
            end_min,
            end_max,
            size_min,
            size_max,
            optional,
            None,
            granularity,
            name,
        )
        if intensity is not None:
            a.set_intensity(intensity, granularity)
        self.__intervals.append(a)
        return a

    def interval_vars(
        self,
        keys: Union[IntegralT, Iterable[Any]],
        size: Union[None, IntegralT, Dict[Any, IntegralT]] = None,
        optional: bool = False,
        namer: Optional[Callable[[Any], str]] = None,
        **bounds: Any,
    ) -> Union[List[IntervalVar], Dict[Any, IntervalVar]]:
        """Creates interval variables, one per key (or `keys` of them).

        `size` is either a fixed size for all the intervals or a mapping from
        keys to sizes. The other bounds are passed to `interval_var()`.
        """
        namer = namer or modeler.default_namer(None)

        def make(key: Any) -> IntervalVar:
            s = size[key] if isinstance(size, dict) else size
            return self.interval_var(s, optional=optional, name=namer(key), **bounds)

        if modeler.is_integral(keys):
            return [make(i) for i in range(int(keys))]
        return {k: make(k) for k in keys}

    def interval_sequence_var(
        self,
        intervals: Sequence[IntervalVar],
        types: Optional[Sequence[IntegralT]] = None,
        name: Optional[str] = None,
    ) -> IntervalSequenceVar:
        self.check_alive()
        seq = IntervalSequenceVar(self, intervals, types, name)
        self.__sequences.append(seq)
        return seq

    def transition_distance(
        self,
        size_or_table: Union[int, Sequence[Sequence[IntegralT]]],
        name: Optional[str] = None,
    ) -> TransitionDistance:
        return TransitionDistance(size_or_table, name)

    # Functions of time.

    def num_to_num_step_function(
        self,
        xmin: NumberT = -INFINITY,
        xmax: NumberT = INFINITY,
        value: NumberT = 0,
        name: Optional[str] = None,
    ) -> functions.NumToNumStepFunction:
        return functions.NumToNumStepFunction(xmin, xmax, value, name)

    def num_to_num_segment_function(
        self,
        xmin: NumberT = -INFINITY,
        xmax: NumberT = INFINITY,
        value: NumberT = 0,
        name: Optional[str] = None,
    ) -> functions.NumToNumSegmentFunction:
        return functions.NumToNumSegmentFunction(xmin, xmax, value, name)

    def piecewise_linear_function(
        self,
        points: Sequence[NumberT],
        slopes: Sequence[NumberT],
        a: NumberT,
        fa: NumberT,
        name: Optional[str] = None,
    ) -> functions.NumToNumSegmentFunction:
        return functions.piecewise_linear_function(points, slopes, a, fa, name)

    # Interval expressions.

    def presence_of(self, a: IntervalVar) -> Constraint:
        """The constraint "a is present". Used as a 0/1 expression in sums."""
        return expressions.DomainConstraint(a.presence, cp_model.Domain(1, 1))

    def start_of(self, a: IntervalVar, absent_value: IntegralT = 0) -> IntExpr:
        return interval_lib.present_value(a, a.start, absent_value)

    def end_of(self, a: IntervalVar, absent_value: IntegralT = 0) -> IntExpr:
        return interval_lib.present_value(a, a.end, absent_value)

    def size_of(self, a: IntervalVar, absent_value: IntegralT = 0) -> IntExpr:
        return interval_lib.present_value(a, a.size, absent_value)

    def length_of(self, a: IntervalVar, absent_value: IntegralT = 0) -> IntExpr:
        return interval_lib.present_value(a, a.length, absent_value)

    def __both_present(self, *intervals: IntervalVar) -> List[Any]:
        return [a.presence for a in intervals if not a.is_present()]

    def overlap_length(
        self,
        a: IntervalVar,
        b: Union[IntervalVar, IntegralT],
        end: Optional[IntegralT] = None,
        absent_value: IntegralT = 0,
    ) -> IntExpr:
        """overlap_length(a, b, absent_value=0) or overlap_length(a, start, end, absent_value=0).

        The length of the intersection of a with b (or with the fixed window
        [start, end)), `absent_value` when an interval is absent.
        """
        zero = IntExpr(self, {}, 0)
        if isinstance(b, IntervalVar):
            if end is not None:
                absent_value = end
            intervals = [a, b]
            lo = expressions.maximum([a.start, b.start])
            hi = expressions.minimum([a.end, b.end])
        else:
            intervals = [a]
            lo = expressions.maximum([a.start, IntExpr(self, {}, int(b))])
            hi = expressions.minimum([a.end, IntExpr(self, {}, int(end))])
        overlap = expressions.maximum([hi - lo, zero])
        lits = self.__both_present(*intervals)
        if any(x.is_absent() for x in intervals):
            return IntExpr(self, {}, int(absent_value))
        if not lits:
            return overlap
        present = expressions.AndConstraint(
            self, [expressions.DomainConstraint(p, cp_model.Domain(1, 1)) for p in lits]
        ).literal
        olo, ohi = overlap.bounds()
        target = self.new_aux_int_var(min(olo, absent_value), max(ohi, absent_value))
        self.native.add(target.native() == overlap.native()).only_enforce_if(present)
        self.native.add(target.native() == int(absent_value)).only_enforce_if(~present)
        return target

    def __eval(
        self,
        a: IntervalVar,
        t: IntExpr,
        f: Union[functions.NumToNumSegmentFunction, functions.NumToNumStepFunction],
        absent_value: NumberT,
    ) -> Union[IntExpr, NumExpr]:
        lo, hi = t.bounds()
        if isinstance(f, functions.NumToNumStepFunction):
            pieces = interval_lib.step_pieces(f, lo, hi)
        else:
            pieces = interval_lib.segment_pieces(f, lo, hi)
        if a.is_absent():
            return NumExpr(self, {}, float(absent_value))
        presence = None if a.is_present() else a.presence
        return interval_lib.piecewise_value(self, t, pieces, presence, absent_value)

    def start_eval(
        self, a: IntervalVar, f: Any, absent_value: NumberT = 0
    ) -> Union[IntExpr, NumExpr]:
        """Returns f(start(a)), or `absent_value` if a is absent."""
        return self.__eval(a, a.start, f, absent_value)

    def end_eval(
        self, a: IntervalVar, f: Any, absent_value: NumberT = 0
    ) -> Union[IntExpr, NumExpr]:
        """Returns f(end(a)), or `absent_value` if a is absent."""
        return self.__eval(a, a.end, f, absent_value)

    def size_eval(
        self, a: IntervalVar, f: Any, absent_value: NumberT = 0
    ) -> Union[IntExpr, NumExpr]:
        """Returns f(size(a)), or `absent_value` if a is absent."""
        return self.__eval(a, a.size, f, absent_value)

    def length_eval(
        self, a: IntervalVar, f: Any, absent_value: NumberT = 0
    ) -> Union[IntExpr, NumExpr]:
        """Returns f(length(a)), or `absent_value` if a is absent."""
        return self.__eval(a, a.length, f, absent_value)

    @staticmethod
    def __nonzero_domain(
        f: functions.NumToNumStepFunction, lo: int, hi: int, shift: int = 0
    ) -> cp_model.Domain:
        intervals = []
        for x0, x1, v, _ in interval_lib.step_pieces(f, lo - shift, hi - shift):
            if v != 0:
                intervals.append([x0 + shift, x1 - 1 + shift])
        return cp_model.Domain.from_intervals(intervals)

    def forbid_start(
        self, a: IntervalVar, f: functions.NumToNumStepFunction
    ) -> Constraint:
        """If a is present, it cannot start where f is 0."""
        lo, hi = a.start.bounds()
        ct = expressions.DomainConstraint(a.start, self.__nonzero_domain(f, lo, hi))
        return ct.only_enforce_if(*self.__both_present(a))

    def forbid_end(
        self, a: IntervalVar, f: functions.NumToNumStepFunction
    ) -> Constraint:
        """If a is present, it cannot end at t when f(t - 1) is 0."""
        lo, hi = a.end.bounds()
        ct = expressions.DomainConstraint(a.end, self.__nonzero_domain(f, lo, hi, 1))
        return ct.only_enforce_if(*self.__both_present(a))

    def forbid_extent(
        self, a: IntervalVar, f: functions.NumToNumStepFunction
    ) -> Constraint:
        """If a is present, it cannot overlap a point where f is 0."""
        lo = a.start.lb
        hi = a.end.ub
        cts: List[Constraint] = []
        for x0, x1, v, _ in interval_lib.step_pieces(f, lo, hi):
            if v == 0:
                cts.append((a.end <= x0) | (a.start >= x1))
        if not cts:
            return expressions.TrueConstraint(self)
        return expressions.AndConstraint(self, cts).only_enforce_if(
            *self.__both_present(a)
        )

    # Precedences. Each one only applies when both intervals are present.

    def __precedence(self, ct: Constraint, a: IntervalVar, b: IntervalVar) -> Constraint:
        lits = self.__both_present(a, b)
        return ct.only_enforce_if(*lits) if lits else ct

    def start_before_start(self, a: IntervalVar, b: IntervalVar, delay: Any = 0) -> Constraint:
        return self.__precedence(a.start + delay <= b.start, a, b)

    def start_before_end(self, a: IntervalVar, b: IntervalVar, delay: Any = 0) -> Constraint:
        return self.__precedence(a.start + delay <= b.end, a, b)

    def end_before_start(self, a: IntervalVar, b: IntervalVar, delay: Any = 0) -> Constraint:
        return self.__precedence(a.end + delay <= b.start, a, b)

    def end_before_end(self, a: IntervalVar, b: IntervalVar, delay: Any = 0) -> Constraint:
        return self.__precedence(a.end + delay <= b.end, a, b)

    def start_at_start(self, a: IntervalVar, b: IntervalVar, delay: Any = 0) -> Constraint:
        return self.__precedence(a.start + delay == b.start, a, b)

    def start_at_end(self, a: IntervalVar, b: IntervalVar, delay: Any = 0) -> Constraint:
        return self.__precedence(a.start + delay == b.end, a, b)

    def end_at_start(self, a: IntervalVar, b: IntervalVar, delay: Any = 0) -> Constraint:
        return self.__precedence(a.end + delay == b.start, a, b)

    def end_at_end(self, a: IntervalVar, b: IntervalVar, delay: Any = 0) -> Constraint:
        return self.__precedence(a.end + delay == b.end, a, b)

    # Interval structures.

    def span(self, a: IntervalVar, bs: Sequence[IntervalVar]) -> Constraint:
        """a starts with the first present b and ends with the last one.

        a is present if and only if one of the bs is present.
        """
        bs = list(bs)

        def post() -> None:
            native = self.native
            pa = a.presence_literal()
            native.add_max_equality(a.presence.native(), [b.presence.native() for b in bs])
            first = []
            last = []
            for b in bs:
                pb = b.presence_literal()
                native.add(a.start.native() <= b.start.native()).only_enforce_if(pb)
                native.add(b.end.native() <= a.end.native()).only_enforce_if(pb)
                s = self.new_aux_bool_var().native()
                e = self.new_aux_bool_var().native()
                native.add_implication(s, pb)
                native.add_implication(e, pb)
                native.add(a.start.native() == b.start.native()).only_enforce_if(s)
                native.add(a.end.native() == b.end.native()).only_enforce_if(e)
                first.append(s)
                last.append(e)
            native.add_bool_or(first).only_enforce_if(pa)
            native.add_bool_or(last).only_enforce_if(pa)

        return expressions.GlobalConstraint(
            self, f"span({a}, [{', '.join(str(b) for b in bs)}])", post
        )

    def alternative(
        self,
        a: IntervalVar,
        bs: Sequence[IntervalVar],
        cardinality: Any = 1,
    ) -> Constraint:
        """If a is present, `cardinality` of the bs are present and synchronized with a.

        If a is absent, all the bs are absent.
        """
        bs = list(bs)
        card = _int_expr(self, cardinality)

        def post() -> None:
            native = self.native
            pa = a.presence_literal()
            presences = sum(b.presence.native() for b in bs)
            native.add(presences == card.native()).only_enforce_if(pa)
            native.add(presences == 0).only_enforce_if(~pa)
            for b in bs:
                pb = b.presence_literal()
                native.add_implication(pb, pa)
                native.add(a.start.native() == b.start.native()).only_enforce_if(pb)
                native.add(a.end.native() == b.end.native()).only_enforce_if(pb)

        return expressions.GlobalConstraint(
            self, f"alternative({a}, [{', '.join(str(b) for b in bs)}], {card})", post
        )

    def no_overlap(
        self,
        intervals: Union[IntervalSequenceVar, Sequence[IntervalVar]],
        tdist: Optional[TransitionDistance] = None,
        direct: bool = False,
    ) -> Constraint:
        """The intervals, or the intervals of a sequence, do not overlap.

        With a transition distance, tdist[type(a), type(b)] separates a from a
        later b: any later b when `direct` is False, only the next one
        otherwise.
        """
        if isinstance(intervals, IntervalSequenceVar):
            seq = intervals
        else:
            if tdist is not None:
                raise TypeError("a transition distance needs a sequence variable")
            seq = None
        members = list(seq.intervals if seq is not None else intervals)

        def post() -> None:
            native = self.native
            ct = native.add_no_overlap([b.native() for b in members])
            if tdist is None:
                return ct
            types = seq.types
            for t in types:
                if not 0 <= t < tdist.size:
                    raise ValueError(
                        f"type {t} of sequence {seq} is not in the transition distance"
                    )
            if direct:
                arcs = seq.arcs()
                for (i, j), lit in arcs.items():
                    if i == 0 or j == 0 or i == j:
                        continue
                    d = tdist[types[i - 1], types[j - 1]]
                    if d:
                        native.add(
                            members[i - 1].end.native() + d <= members[j - 1].start.native()
                        ).only_enforce_if(lit)
                return ct
            for i, a in enumerate(members):
                for j in range(i + 1, len(members)):
                    b = members[j]
                    dab = tdist[types[i], types[j]]
                    dba = tdist[types[j], types[i]]
                    if not dab and not dba:
                        continue
                    expressions.OrConstraint(
                        self, [a.end + dab <= b.start, b.end + dba <= a.start]
                    ).enforce(
                        [x.presence_literal() for x in (a, b) if not x.is_present()]
                    )
            return ct

        name = str(seq) if seq is not None else f"[{', '.join(str(b) for b in members)}]"
        return expressions.GlobalConstraint(self, f"no_overlap({name})", post)

    def same_sequence(
        self,
        seq1: IntervalSequenceVar,
        seq2: IntervalSequenceVar,
        intervals1: Optional[Sequence[IntervalVar]] = None,
        intervals2: Optional[Sequence[IntervalVar]] = None,
    ) -> Constraint:
        """Corresponding intervals of two sequences appear in the same order.

        intervals1[k] corresponds to intervals2[k]. Both lists must cover all
        the intervals of their sequence; by default they are the intervals of
        the sequences, in order.
        """
        a1 = list(seq1.intervals if intervals1 is None else intervals1)
        a2 = list(seq2.intervals if intervals2 is None else intervals2)
        if not len(a1) == len(a2) == len(seq1) == len(seq2):
            raise ValueError(
                f"same_sequence: {len(a1)} intervals against {len(a2)}, for"
                f" sequences of {len(seq1)} and {len(seq2)} intervals"
            )

        def post() -> None:
            native = self.native
            arcs1 = seq1.arcs()
            arcs2 = seq2.arcs()
            node1 = {0: 0}
            node2 = {0: 0}
            for k, (x, y) in enumerate(zip(a1, a2)):
                node1[seq1.position_of(x) + 1] = k + 1
                node2[k + 1] = seq2.position_of(y) + 1
                native.add(x.presence.native() == y.presence.native())
            for (i, j), lit1 in arcs1.items():
                if i not in node1 or j not in node1 or i == j or (i, j) == (0, 0):
                    continue
                lit2 = arcs2[(node2[node1[i]], node2[node1[j]])]
                native.add_implication(lit1, lit2)
                native.add_implication(lit2, lit1)

        return expressions.GlobalConstraint(
            self, f"same_sequence({seq1}, {seq2})", post
        )

    def __neighbor(
        self,
        seq: IntervalSequenceVar,
        a: IntervalVar,
        value: Callable[[IntervalVar], IntExpr],
        boundary_value: IntegralT,
        absent_value: IntegralT,
        forward: bool,
    ) -> IntExpr:
        node = seq.position_of(a) + 1
        candidates: List[Tuple[cp_model.LiteralT, IntExpr]] = []
        for (i, j), lit in seq.arcs().items():
            other = j if forward else i
            if (i if forward else j) != node:
                continue
            if other == node:
                candidates.append((lit, IntExpr(self, {}, int(absent_value))))
            elif other == 0:
                candidates.append((lit, IntExpr(self, {}, int(boundary_value))))
            else:
                candidates.append((lit, value(seq.intervals[other - 1])))
        bounds = [e.bounds() for _, e in candidates]
        target = self.new_aux_int_var(
            min(lo for lo, _ in bounds), max(hi for _, hi in bounds)
        )
        for lit, e in candidates:
            self.native.add(target.native() == e.native()).only_enforce_if(lit)
        return target

    def type_of_next(self, seq, a, last_value: IntegralT = 0, absent_value: IntegralT = 0) -> IntExpr:
        return self.__neighbor(
            seq, a, lambda b: IntExpr(self, {}, seq.type_of(b)), last_value, absent_value, True
        )

    def type_of_previous(self, seq, a, first_value: IntegralT = 0, absent_value: IntegralT = 0) -> IntExpr:
        return self.__neighbor(
            seq, a, lambda b: IntExpr(self, {}, seq.type_of(b)), first_value, absent_value, False
        )

    def start_of_next(self, seq, a, last_value: IntegralT = 0, absent_value: IntegralT = 0) -> IntExpr:
        return self.__neighbor(seq, a, lambda b: b.start, last_value, absent_value, True)

    def start_of_previous(self, seq, a, first_value: IntegralT = 0, absent_value: IntegralT = 0) -> IntExpr:
        return self.__neighbor(seq, a, lambda b: b.start, first_value, absent_value, False)

    def end_of_next(self, seq, a, last_value: IntegralT = 0, absent_value: IntegralT = 0) -> IntExpr:
        return self.__neighbor(seq, a, lambda b: b.end, last_value, absent_value, True)

    def end_of_previous(self, seq, a, first_value: IntegralT = 0, absent_value: IntegralT = 0) -> IntExpr:
        return self.__neighbor(seq, a, lambda b: b.end, first_value, absent_value, False)

    def size_of_next(self, seq, a, last_value: IntegralT = 0, absent_value: IntegralT = 0) -> IntExpr:
        return self.__neighbor(seq, a, lambda b: b.size, last_value, absent_value, True)

    def size_of_previous(self, seq, a, first_value: IntegralT = 0, absent_value: IntegralT = 0) -> IntExpr:
        return self.__neighbor(seq, a, lambda b: b.size, first_value, absent_value, False)

    def length_of_next(self, seq, a, last_value: IntegralT = 0, absent_value: IntegralT = 0) -> IntExpr:
        return self.__neighbor(seq, a, lambda b: b.length, last_value, absent_value, True)

    def length_of_previous(self, seq, a, first_value: IntegralT = 0, absent_value: IntegralT = 0) -> IntExpr:
        return self.__neighbor(seq, a, lambda b: b.length, first_value, absent_value, False)

    # Cumul functions.

    def cumul_function_expr(self) -> CumulFunctionExpr:
        """Returns the cumul function equal to 0 everywhere."""
        return CumulFunctionExpr(self)

    def pulse(self, a: Any, b: Any, c: Any = None, d: Any = None) -> CumulFunctionExpr:
        """pulse(a, h), pulse(a, hmin, hmax) or pulse(start, end, h)."""
        return cumul.pulse(self, a, b, c, d)

    def step_at_start(self, a: IntervalVar, hmin: Any, hmax: Any = None) -> CumulFunctionExpr:
        return cumul.step_at_start(self, a, hmin, hmax)

    def step_at_end(self, a: IntervalVar, hmin: Any, hmax: Any = None) -> CumulFunctionExpr:
        return cumul.step_at_end(self, a, hmin, hmax)

    def step(self, t: IntegralT, h: IntegralT) -> CumulFunctionExpr:
        return cumul.step(self, t, h)

    def height_at_start(
        self, a: IntervalVar, f: CumulFunctionExpr, absent_value: IntegralT = 0
    ) -> IntExpr:
        return cumul.height_at(a, f, absent_value, at_start=True)

    def height_at_end(
        self, a: IntervalVar, f: CumulFunctionExpr, absent_value: IntegralT = 0
    ) -> IntExpr:
        return cumul.height_at(a, f, absent_value, at_start=False)

    # State functions.

    def state_function(
        self, tdist: Optional[TransitionDistance] = None, name: Optional[str] = None
    ) -> StateFunction:
        self.check_alive()
        f = StateFunction(self, tdist, name)
        self.__state_functions.append(f)
        return f

    @staticmethod
    def __window(args: Sequence[Any]) -> Tuple[Tuple[Any, ...], List[Any]]:
        if not args:
            raise TypeError("expected an interval variable or a start and an end")
        if isinstance(args[0], IntervalVar):
            return (args[0],), list(args[1:])
        if len(args) < 2:
            raise TypeError("expected a start and an end")
        return (args[0], args[1]), list(args[2:])

    def always_in(self, f: Any, *args: Any) -> Constraint:
        """always_in(f, a, vmin, vmax) or always_in(f, start, end, vmin, vmax).

        f is a cumul function or a state function.
        """
        window, rest = self.__window(args)
        if len(rest) != 2:
            raise TypeError(f"always_in expects vmin and vmax, got {len(rest)} values")
        vmin, vmax = rest
        if isinstance(f, StateFunction):
            return f.add_request(window, vmin, vmax)
        if len(window) == 1:
            return cumul.always_in(f, window[0], vmin, vmax)
        return cumul.always_in(f, window[0], window[1], vmin, vmax)

    def always_equal(
        self, f: Any, *args: Any, start_align: bool = False, end_align: bool = False
    ) -> Constraint:
        """always_equal(f, a, v) or always_equal(f, start, end, v).

        For a state function, `start_align` and `end_align` ask the window to
        start (end) with a segment of state v.
        """
        window, rest = self.__window(args)
        if len(rest) != 1:
            raise TypeError("always_equal expects one value")
        v = rest[0]
        if isinstance(f, StateFunction):
            return f.add_request(window, v, v, start_align, end_align)
        return self.always_in(f, *window, v, v)

    def always_constant(
        self,
        f: StateFunction,
        *args: Any,
        start_align: bool = False,
        end_align: bool = False,
    ) -> Constraint:
        """The state function keeps a single state over the window."""
        window, rest = self.__window(args)
        if rest:
            raise TypeError("always_constant takes no value")
        return f.add_request(window, 0, None, start_align, end_align)

    def always_no_state(self, f: StateFunction, *args: Any) -> Constraint:
        """The state function has no state over the window."""
        window, rest = self.__window(args)
        if rest:
            raise TypeError("always_no_state takes no value")
        return f.add_request(window, None, None)

    # Constraints and objectives.

    def add(self, ct: Any, name: Optional[str] = None) -> Any:
        """Adds a constraint (or a list of constraints, or an objective)."""
        self.check_alive()
        if isinstance(ct, modeler.Objective):
            self._set_objective(ct)
            return ct
        if isinstance(ct, (list, tuple)):
            return [self.add(c, name) for c in ct]
        ct = self.constraint(ct)
        if name:
            ct.with_name(name)
        ct.enforce([])
        return ct

    def _set_objective(self, objective: modeler.Objective) -> None:
        self.__objective = objective

    @property
    def objective(self) -> Optional[modeler.Objective]:
        return self.__objective

    def static_lex(self, *criteria: Any) -> StaticLex:
        """Returns criteria to optimize in order, for minimize() or maximize()."""
        return StaticLex(_flatten(criteria))

    # Search.

    def search_phase(
        self,
        variables: Sequence[Any],
        var_strategy: int = search.CHOOSE_FIRST,
        value_strategy: int = search.SELECT_MIN_VALUE,
    ) -> SearchPhase:
        return SearchPhase(variables, var_strategy, value_strategy)

    def set_search_phases(self, *phases: SearchPhase) -> None:
        self.__phases = _flatten(phases)

    def set_starting_point(
        self, values: Union[CpSolution, Dict[Any, IntegralT]]
    ) -> None:
        """Gives the search a hint, from a solution or from {variable: value}.

        An interval variable in the dictionary hints its start.
        """
        native = self.native
        native.clear_hints()
        if isinstance(values, CpSolution):
            for index, v in enumerate(values.values):
                native.add_hint(self.native_var(index), v)
            return
        for x, v in values.items():
            if isinstance(x, IntervalVar):
                x = x.start
            native.add_hint(_int_expr(self, x).as_var().native(), int(v))

    def clear_starting_point(self) -> None:
        self.native.clear_hints()

    # Solving.

    def _extract(self) -> cp_model.CpModel:
        """Posts the pending requests and returns the model to solve.

        The returned model is a copy of the CP-SAT model, with the narrowed
        domains and the search phases added.
        """
        native = self.native
        for a in self.__intervals:
            a.native()
        for f in self.__state_functions:
            f.post()
        for phase in self.__phases:
            phase.decision_vars()
        work = native.clone()
        for index, domain in self.__domains.items():
            work.add_linear_expression_in_domain(
                work.get_int_var_from_proto_index(index), domain
            )
        for phase in self.__phases:
            phase.post(work)
        logging.vlog(
            1,
            "model %s: %d variables, %d constraints, %d intervals",
            self.name or "<anonymous>",
            len(work.proto.variables),
            len(work.proto.constraints),
            len(self.__intervals),
        )
        return work

    def __linear(
        self, native: cp_model.CpModel, expr: Any
    ) -> cp_model.LinearExprT:
        """Rebuilds expr on the variables of `native`, a copy of the model."""
        if isinstance(expr, Constraint):
            expr = expr.as_int_expr()
        if isinstance(expr, (IntExpr, NumExpr)):
            if not expr.terms:
                return expr.offset
            variables = [native.get_int_var_from_proto_index(i) for i in expr.terms]
            return (
                cp_model.LinearExpr.weighted_sum(variables, list(expr.terms.values()))
                + expr.offset
            )
        if modeler.is_a_number(expr):
            return expr
        raise TypeError(f"cannot optimize a {type(expr).__name__}")

    def __set_native_objective(
        self, native: cp_model.CpModel, expr: Any, sense: modeler.ObjectiveSense
    ) -> None:
        linear = self.__linear(native, expr)
        if sense.is_minimize():
            native.minimize(linear)
        else:
            native.maximize(linear)

    def __new_solver(
        self,
        time_limit: float,
        fail_limit: int,
        log_period: int,
        params: Optional[str],
    ) -> cp_model.CpSolver:
        solver = cp_model.CpSolver()
        if params:
            text_format.Merge(params, solver.parameters)
        if time_limit < INFINITY:
            solver.parameters.max_time_in_seconds = time_limit
        if fail_limit > 0:
            solver.parameters.max_number_of_conflicts = fail_limit
        if log_period >= 0:
            solver.parameters.log_search_progress = True
        return solver

    def __run(
        self,
        native: cp_model.CpModel,
        solver: cp_model.CpSolver,
        solution_limit: int,
        keep: bool = False,
    ) -> _SolutionCollector:
        collector = _SolutionCollector(solution_limit, keep)
        self.__status = solver.solve(native, collector)
        self.__solver = solver
        logging.vlog(
            1,
            "solve %s: %s after %.2fs, %d solutions",
            self.name or "<anonymous>",
            solver.status_name(self.__status),
            solver.wall_time,
            collector.count,
        )
        if self.__status in _FEASIBLE:
            self.__values = list(solver.response_proto.solution)
            self.__best_bound = solver.best_objective_bound
        else:
            self.__values = None
        return collector

    def solve(
        self,
        time_limit: float = INFINITY,
        fail_limit: int = 0,
        solution_limit: int = INT_MAX,
        log_period: int = INT_MIN,
        params: Optional[str] = None,
    ) -> bool:
        """Solves the model.

        Args:
          time_limit: the time limit in seconds.
          fail_limit: the maximum number of conflicts, 0 for no limit.
          solution_limit: stops the search after that many solutions.
          log_period: logs the search progress when non negative.
          params: additional SatParameters in text format, for example
            "num_workers: 8".

        Returns:
          True if a solution was found. It is optimal if get_status() is
          OPTIMAL.
        """
        self.check_alive()
        native = self._extract()
        self.__search_solutions = None
        objective = self.__objective
        if objective is not None and isinstance(objective.expr, StaticLex):
            return self.__solve_lex(
                native,
                objective,
                time_limit,
                fail_limit,
                solution_limit,
                log_period,
                params,
            )
        if objective is None:
            native.clear_objective()
        else:
            self.__set_native_objective(native, objective.expr, objective.sense)
        solver = self.__new_solver(time_limit, fail_limit, log_period, params)
        self.__run(native, solver, solution_limit)
        if self.__values is None:
            self.__objective_values = []
            return False
        self.__objective_values = [solver.objective_value] if objective else []
        return True

    def __integer_criterion(self, expr: Any) -> IntExpr:
        if isinstance(expr, NumExpr):
            if any(c != int(c) for c in expr.terms.values()):
                raise TypeError(
                    f"static_lex criterion {expr} must have integer coefficients"
                )
            return IntExpr(
                self, {i: int(c) for i, c in expr.terms.items()}, int(expr.offset)
            )
        return _int_expr(self, expr)

    def __solve_lex(
        self,
        native: cp_model.CpModel,
        objective: modeler.Objective,
        time_limit: float,
        fail_limit: int,
        solution_limit: int,
        log_period: int,
        params: Optional[str],
    ) -> bool:
        criteria = [self.__integer_criterion(c) for c in objective.expr.criteria]
        minimize = objective.sense.is_minimize()
        found: List[int] = []
        for k, criterion in enumerate(criteria):
            work = native.clone()
            for previous, value in zip(criteria, found):
                linear = self.__linear(work, previous)
                work.add(linear <= value if minimize else linear >= value)
            self.__set_native_objective(work, criterion, objective.sense)
            solver = self.__new_solver(time_limit, fail_limit, log_period, params)
            self.__run(work, solver, solution_limit)
            if self.__values is None:
                logging.warning(
                    "static_lex: no solution for criterion %d (%s)", k, criterion
                )
                self.__objective_values = []
                return False
            found.append(criterion.evaluate(self.__value_of))
            logging.vlog(1, "static_lex: criterion %d = %d", k, found[-1])
        self.__objective_values = [float(v) for v in found]
        return True

    def start_new_search(
        self,
        time_limit: float = INFINITY,
        solution_limit: int = INT_MAX,
        params: Optional[str] = None,
    ) -> None:
        """Starts enumerating solutions with next().

        Without objective, next() returns the solutions of the model. With an
        objective, each solution is strictly better than the previous one.
        """
        self.check_alive()
        self.__search_model = self._extract()
        self.__search_started = True
        self.__search_solutions = None
        self.__search_args = (time_limit, solution_limit, params)

    def next(self) -> bool:
        """Moves to the next solution. Returns False when there is none."""
        if not self.__search_started:
            raise RuntimeError("next() called without start_new_search()")
        if self.__search_solutions is None:
            time_limit, solution_limit, params = self.__search_args
            native = self.__search_model
            objective = self.__objective
            solver = self.__new_solver(time_limit, 0, INT_MIN, params)
            if objective is None:
                native.clear_objective()
                solver.parameters.enumerate_all_solutions = True
                solver.parameters.num_workers = 1
            else:
                self.__set_native_objective(native, objective.expr, objective.sense)
            collector = self.__run(native, solver, solution_limit, keep=True)
            self.__search_solutions = list(collector.solutions)
        if not self.__search_solutions:
            return False
        current = self.__search_solutions.pop(0)
        self.restore(current)
        return True

    def end_search(self) -> None:
        self.__search_started = False
        self.__search_solutions = None
        self.__search_model = None

    def solution(self) -> CpSolution:
        """Returns a snapshot of the current solution."""
        if self.__values is None:
            raise modeler.NoSolutionError("no solution available")
        return CpSolution(self.__values, self.__objective_values)

    def restore(self, solution: CpSolution) -> None:
        """Makes `solution` the current solution of the model."""
        self.__values = list(solution.values)
        self.__objective_values = list(solution.objective_values)

    # Solution queries.

    def __value_of(self, index: int) -> int:
        if self.__values is None:
            raise modeler.NoSolutionError("no solution available")
        if index >= len(self.__values):
            raise modeler.NoSolutionError(
                f"{self.var_name(index)} was created after the last solve"
            )
        return self.__values[index]

    @property
    def value_of(self) -> expressions.ValueOfT:
        return self.__value_of

    def get_status(self) -> int:
        return self.__status

    def get_status_name(self) -> str:
        return cp_model_pb2.CpSolverStatus.Name(self.__status)

    def get_objective_value(self) -> float:
        if self.__values is None:
            raise modeler.NoSolutionError("no solution available")
        if not self.__objective_values:
            return 0.0
        return self.__objective_values[0]

    def get_objective_values(self) -> List[float]:
        if self.__values is None:
            raise modeler.NoSolutionError("no solution available")
        return list(self.__objective_values)

    def get_best_objective_bound(self) -> float:
        return self.__best_bound

    def get_value(self, x: Any, t: Optional[IntegralT] = None) -> Any:
        """Returns the value of an expression, or of a function at time t."""
        if isinstance(x, (CumulFunctionExpr, StateFunction)):
            if t is None:
                raise TypeError("the value of a function needs a time")
            for s in x.segments(self.__value_of):
                if s.start <= t < s.end:
                    return s.value
            raise ValueError(f"{t} is outside the definition interval of {x}")
        if isinstance(x, Constraint):
            return int(x.evaluate(self.__value_of))
        if isinstance(x, (IntExpr, NumExpr)):
            return x.evaluate(self.__value_of)
        if modeler.is_a_number(x):
            return x
        raise TypeError(f"no value for a {type(x).__name__}")

    def get_min(self, x: IntExpr) -> int:
        if self.__values is None:
            return x.lb
        return self.get_value(x)

    def get_max(self, x: IntExpr) -> int:
        if self.__values is None:
            return x.ub
        return self.get_value(x)

    def is_fixed(self, x: Union[IntExpr, IntervalVar]) -> bool:
        if self.__values is not None:
            return True
        if isinstance(x, IntervalVar):
            return not x.is_optional() and x.start_min == x.start_max and x.end_min == x.end_max
        lo, hi = x.bounds()
        return lo == hi

    def is_present(self, a: IntervalVar) -> bool:
        return self.__value_of(a.presence.index) == 1

    def is_absent(self, a: IntervalVar) -> bool:
        return not self.is_present(a)

    def __present_value(self, a: IntervalVar, x: IntExpr) -> int:
        if not self.is_present(a):
            raise ValueError(f"interval {a} is absent in the solution")
        return x.evaluate(self.__value_of)

    def get_start(self, a: IntervalVar) -> int:
        return self.__present_value(a, a.start)

    def get_end(self, a: IntervalVar) -> int:
        return self.__present_value(a, a.end)

    def get_size(self, a: IntervalVar) -> int:
        return self.__present_value(a, a.size)

    def get_length(self, a: IntervalVar) -> int:
        return self.__present_value(a, a.length)

    def get_domain(self, a: IntervalVar) -> str:
        """Returns a description of the interval in the solution."""
        if not self.is_present(a):
            return f"{a}: absent"
        return (
            f"{a}: [{self.get_start(a)} -- {self.get_size(a)} -->"
            f" {self.get_end(a)})"
        )

    # Sequences.

    def get_sequence(self, seq: IntervalSequenceVar) -> List[IntervalVar]:
        """Returns the present intervals of the sequence, in order."""
        return seq.order(self.__value_of)

    def get_first(self, seq: IntervalSequenceVar) -> Optional[IntervalVar]:
        order = self.get_sequence(seq)
        return order[0] if order else None

    def get_last(self, seq: IntervalSequenceVar) -> Optional[IntervalVar]:
        order = self.get_sequence(seq)
        return order[-1] if order else None

    def get_next(self, seq: IntervalSequenceVar, a: IntervalVar) -> Optional[IntervalVar]:
        order = self.get_sequence(seq)
        k = self.__rank(order, a)
        return order[k + 1] if k + 1 < len(order) else None

    def get_prev(self, seq: IntervalSequenceVar, a: IntervalVar) -> Optional[IntervalVar]:
        order = self.get_sequence(seq)
        k = self.__rank(order, a)
        return order[k - 1] if k > 0 else None

    @staticmethod
    def __rank(order: List[IntervalVar], a: IntervalVar) -> int:
        for k, b in enumerate(order):
            if b is a:
                return k
        raise ValueError(f"interval {a} is not present in the sequence")

    # Functions in the solution.

    def __segments(self, f: Union[CumulFunctionExpr, StateFunction]) -> List[functions.Segment]:
        return f.segments(self.__value_of)

    def get_number_of_segments(self, f: Union[CumulFunctionExpr, StateFunction]) -> int:
        return len(self.__segments(f))

    def get_segment_start(self, f: Union[CumulFunctionExpr, StateFunction], i: int) -> int:
        return int(self.__segments(f)[i].start)

    def get_segment_end(self, f: Union[CumulFunctionExpr, StateFunction], i: int) -> int:
        return int(self.__segments(f)[i].end)

    def get_segment_value(self, f: Union[CumulFunctionExpr, StateFunction], i: int) -> int:
        return int(self.__segments(f)[i].value)

    # Tooling.

    def export_model(self, filename: str) -> bool:
        """Writes the CP-SAT model, in text format if the name ends with 'txt'."""
        native = self._extract()
        objective = self.__objective
        if objective is not None and not isinstance(objective.expr, StaticLex):
            self.__set_native_objective(native, objective.expr, objective.sense)
        return native.export_to_file(filename)

    def print_information(self) -> None:
        """Logs model and search statistics."""
        proto = self.native.proto
        logging.info("Model: %s", self.name or "<anonymous>")
        logging.info("Number of variables: %d", len(proto.variables))
        logging.info("Number of constraints: %d", len(proto.constraints))
        logging.info("Number of interval variables: %d", len(self.__intervals))
        logging.info("Number of sequence variables: %d", len(self.__sequences))
        solver = self.__solver
        if solver is None:
            return
        logging.info("Status: %s", solver.status_name(self.__status))
        logging.info("Number of branches: %d", solver.num_branches)
        logging.info("Number of conflicts: %d", solver.num_conflicts)
        logging.info("Time in last solve: %.2fs", solver.wall_time)
        if not math.isnan(self.__best_bound):
            logging.info("Best objective bound: %s", self.__best_bound)
