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

"""Linear and mixed integer programming models solved with model_builder.

Variables and expressions are the ones of `model_builder`: they support the
usual operators, and comparisons build bounded linear expressions.

    model = MpModel("production")
    inside = model.num_vars(products, namer=default_namer("inside"))
    model.add(inside["kluski"] + outside["kluski"] >= 100)
    model.minimize(model.sum(inside[p] * cost[p] for p in products))
    model.solve()

On top of model_builder, an `MpModel` provides:

* range constraints, and indicator constraints built with `if_then()`;
* piecewise linear functions of expressions (`piecewise_linear()`);
* lexicographic multi-objectives with tolerances (`static_lex()`);
* key performance indicators (`add_kpi()`, `report_kpis()`);
* LP and MPS export and import.
"""

import dataclasses
import math
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple, Union

from absl import logging
import numpy as np
import pandas as pd

from ortools.linear_solver.python import model_builder as mb
from ortools.linear_solver.python import model_builder_helper as mbh

from optdsl import modeler
from optdsl.modeler import INFINITY, INT_MAX, IntegralT, NumberT

Variable = mb.Variable
LinearExpr = mb.LinearExpr
LinearExprT = mb.LinearExprT
SolveStatus = mb.SolveStatus

_FEASIBLE = (mb.SolveStatus.OPTIMAL, mb.SolveStatus.FEASIBLE)


@dataclasses.dataclass
class RangeConstraint:
    """The constraint lb <= expr <= ub, posted by `MpModel.add()`."""

    lb: NumberT
    expr: Any
    ub: NumberT
    name: Optional[str] = None

    def __str__(self) -> str:
        return f"{self.lb} <= {self.expr} <= {self.ub}"


@dataclasses.dataclass
class IndicatorConstraint:
    """The constraint (var == value) => consequent."""

    var: Variable
    value: bool
    consequent: Any
    name: Optional[str] = None

    def __str__(self) -> str:
        return f"({self.var} == {int(self.value)}) => {self.consequent}"


@dataclasses.dataclass
class StaticLex:
    """Objectives optimized by decreasing priority.

    Objectives of equal priority are blended with their weights. Once a
    priority level is optimized, its blended value may degrade by at most
    max(abs_tol, rel_tol * |value|) in the later levels.
    """

    objectives: List[Any]
    weights: List[float]
    priorities: List[int]
    abs_tols: List[float]
    rel_tols: List[float]
    name: Optional[str] = None

    def levels(self) -> List[List[int]]:
        """Returns the positions of the objectives, grouped by priority."""
        order = modeler.lexicographic_order(self.priorities, len(self.objectives))
        levels: List[List[int]] = []
        for i in order:
            if levels and self.priorities[levels[-1][0]] == self.priorities[i]:
                levels[-1].append(i)
            else:
                levels.append([i])
        return levels

    def __str__(self) -> str:
        return f"static_lex({', '.join(str(o) for o in self.objectives)})"


def _bounds(expr: Any) -> Tuple[float, float]:
    """Returns the bounds of a linear expression from the bounds of its variables."""
    if modeler.is_a_number(expr):
        return float(expr), float(expr)
    flat = mbh.FlatExpr(expr)
    lo = hi = flat.offset
    for var, coef in zip(flat.vars, flat.coeffs):
        if coef > 0:
            lo += coef * var.lower_bound
            hi += coef * var.upper_bound
        else:
            lo += coef * var.upper_bound
            hi += coef * var.lower_bound
    return lo, hi


class PiecewiseLinearFunction:
    """A piecewise linear function: slopes before and after a list of breakpoints.

    Two consecutive breakpoints with the same x define a step. Applying the
    function to an expression returns a variable equal to f(expr). The
    encoding selects one segment with a binary variable per segment, so the
    expression must be bounded on the sides where the outer slopes apply.
    """

    def __init__(
        self,
        model: "MpModel",
        preslope: NumberT,
        points: Sequence[Tuple[NumberT, NumberT]],
        postslope: NumberT,
        name: Optional[str] = None,
    ) -> None:
        if not points:
            raise ValueError("a piecewise linear function needs at least one point")
        xs = [float(x) for x, _ in points]
        if any(b < a for a, b in zip(xs, xs[1:])):
            raise ValueError(f"breakpoints must be sorted, got {xs}")
        self.__model = model
        self.__preslope = float(preslope)
        self.__points = [(float(x), float(y)) for x, y in points]
        self.__postslope = float(postslope)
        self.__name = name

    @property
    def name(self) -> Optional[str]:
        return self.__name

    @property
    def points(self) -> List[Tuple[float, float]]:
        return self.__points

    def evaluate(self, x: NumberT) -> float:
        """Returns f(x). At a step, the value after the step."""
        points = self.__points
        if x < points[0][0]:
            return points[0][1] + self.__preslope * (x - points[0][0])
        for (x0, y0), (x1, y1) in zip(points, points[1:]):
            if x0 <= x < x1:
                return y0 + (y1 - y0) * (x - x0) / (x1 - x0)
        xn, yn = points[-1]
        return yn + self.__postslope * (x - xn)

    def segments(self, lo: float, hi: float) -> List[Tuple[float, float, float, float]]:
        """Returns the pieces (x0, x1, f(x0), slope) of f on [lo, hi]."""
        points = self.__points
        pieces = []
        (xa, ya) = points[0]
        if lo < xa:
            if math.isinf(lo):
                raise ValueError(
                    f"piecewise function {self.__name or ''}: the expression has"
                    " no lower bound"
                )
            pieces.append((lo, xa, ya - self.__preslope * (xa - lo), self.__preslope))
        for (x0, y0), (x1, y1) in zip(points, points[1:]):
            if x1 > x0:
                pieces.append((x0, x1, y0, (y1 - y0) / (x1 - x0)))
        (xn, yn) = points[-1]
        if hi > xn:
            if math.isinf(hi):
                raise ValueError(
                    f"piecewise function {self.__name or ''}: the expression has"
                    " no upper bound"
                )
            pieces.append((xn, hi, yn, self.__postslope))
        clipped = []
        for x0, x1, y0, slope in pieces:
            a = max(x0, lo)
            b = min(x1, hi)
            if a < b or (a == b and lo == hi):
                clipped.append((a, b, y0 + slope * (a - x0), slope))
        return clipped

    def __call__(self, expr: Any) -> Variable:
        """Returns a variable equal to f(expr)."""
        model = self.__model
        native = model.native
        lo, hi = _bounds(expr)
        pieces = self.segments(lo, hi)
        y = native.new_num_var(-INFINITY, INFINITY, None)
        if not pieces:
            native.add(y == self.evaluate(lo))
            return y
        if len(pieces) == 1:
            x0, _, y0, slope = pieces[0]
            native.add(y == y0 + slope * (expr - x0))
            return y
        selectors = []
        position: List[Any] = []
        value: List[Any] = []
        for x0, x1, y0, slope in pieces:
            z = native.new_bool_var(None)
            w = native.new_num_var(0.0, x1 - x0, None)
            native.add(w <= (x1 - x0) * z)
            selectors.append(z)
            position.append(x0 * z + w)
            value.append(y0 * z + slope * w)
        native.add(LinearExpr.sum(selectors) == 1)
        native.add(expr == LinearExpr.sum(position))
        native.add(y == LinearExpr.sum(value))
        logging.vlog(1, "piecewise %s: %d segments", self.__name, len(pieces))
        return y

    def __str__(self) -> str:
        return (
            f"piecewise({self.__preslope}, {self.__points}, {self.__postslope})"
        )


class MpModel(modeler.Modeler):
    """A linear or mixed integer program, solved by a model_builder backend.

    Args:
      name: the name of the model.
      solver_name: the model_builder backend, "scip" by default. "glop" and
        "pdlp" solve linear programs and give duals.
    """

    def __init__(self, name: Optional[str] = None, solver_name: str = "scip") -> None:
        super().__init__(name)
        self.__model: Optional[mb.Model] = mb.Model()
        if name:
            self.__model.name = name
        self.__solver_name = solver_name
        self.__solver: Optional[mb.Solver] = None
        self.__status: Optional[SolveStatus] = None
        self.__objective: Optional[modeler.Objective] = None
        self.__objective_values: List[float] = []
        self.__kpis: Dict[str, Any] = {}

    @property
    def native(self) -> mb.Model:
        """Returns the underlying model_builder model."""
        self.check_alive()
        return self.__model

    @property
    def solver_name(self) -> str:
        return self.__solver_name

    def _release(self) -> None:
        self.__model = None
        self.__solver = None

    # Variables.

    def num_var(
        self,
        lb: NumberT = 0.0,
        ub: NumberT = INFINITY,
        name: Optional[str] = None,
    ) -> Variable:
        return self.native.new_num_var(lb, ub, name)

    def int_var(
        self,
        lb: IntegralT = 0,
        ub: NumberT = INT_MAX,
        name: Optional[str] = None,
    ) -> Variable:
        return self.native.new_int_var(lb, ub, name)

    def bool_var(self, name: Optional[str] = None) -> Variable:
        return self.native.new_bool_var(name)

    def int_vars(
        self,
        keys: Union[IntegralT, Iterable[Any]],
        lb: IntegralT = 0,
        ub: NumberT = INT_MAX,
        namer: Optional[Callable[[Any], str]] = None,
    ) -> Union[List[Variable], Dict[Any, Variable]]:
        return super().int_vars(keys, lb, ub, namer)

    def set_lb(self, var: Variable, lb: NumberT) -> None:
        self.check_alive()
        var.lower_bound = lb

    def set_ub(self, var: Variable, ub: NumberT) -> None:
        self.check_alive()
        var.upper_bound = ub

    def get_variables(self) -> List[Variable]:
        """Returns all the variables of the model, imported ones included."""
        native = self.native
        return [native.var_from_index(i) for i in range(native.num_variables)]

    def get_var_by_name(self, name: str) -> Optional[Variable]:
        for var in self.get_variables():
            if var.name == name:
                return var
        return None

    # Expressions.

    def _sum(self, exprs: List[Any]) -> Any:
        if not exprs:
            return 0.0
        return LinearExpr.sum(exprs)

    # Constraints.

    def le(self, e1: Any, e2: Any, name: Optional[str] = None) -> RangeConstraint:
        return RangeConstraint(-INFINITY, e1 - e2, 0.0, name)

    def ge(self, e1: Any, e2: Any, name: Optional[str] = None) -> RangeConstraint:
        return RangeConstraint(0.0, e1 - e2, INFINITY, name)

    def eq(self, e1: Any, e2: Any, name: Optional[str] = None) -> RangeConstraint:
        return RangeConstraint(0.0, e1 - e2, 0.0, name)

    def range(
        self, lb: NumberT, expr: Any, ub: NumberT, name: Optional[str] = None
    ) -> RangeConstraint:
        """Returns the constraint lb <= expr <= ub, to be added with add()."""
        if lb > ub:
            raise ValueError(f"empty range [{lb}, {ub}] for {name}")
        return RangeConstraint(lb, expr, ub, name)

    def add_range(
        self, lb: NumberT, expr: Any, ub: NumberT, name: Optional[str] = None
    ) -> Any:
        return self.add(self.range(lb, expr, ub, name))

    def add_eq(self, e1: Any, e2: Any, name: Optional[str] = None) -> Any:
        return self.add(self.eq(e1, e2, name))

    def if_then(self, antecedent: Any, consequent: Any) -> IndicatorConstraint:
        """Returns the indicator constraint antecedent => consequent.

        The antecedent fixes a binary variable: `x == 1`, `x == 0`, `x >= 1`,
        `x <= 0`, or the variable x alone, meaning `x == 1`.
        """
        var, value = self.__indicator(antecedent)
        return IndicatorConstraint(var, value, consequent)

    @staticmethod
    def __indicator(antecedent: Any) -> Tuple[Variable, bool]:
        if isinstance(antecedent, Variable):
            var, lb, ub = antecedent, 1.0, 1.0
        elif isinstance(antecedent, mbh.BoundedLinearExpression):
            variables = list(antecedent.vars)
            coeffs = list(antecedent.coeffs)
            if len(variables) != 1 or coeffs[0] != 1:
                raise TypeError(
                    f"an if_then condition must be on a single binary variable, got"
                    f" {antecedent}"
                )
            var = variables[0]
            lb, ub = antecedent.lower_bound, antecedent.upper_bound
        else:
            raise TypeError(
                f"an if_then condition must fix a binary variable, not a"
                f" {type(antecedent).__name__}"
            )
        if not (var.is_integral and var.lower_bound >= 0 and var.upper_bound <= 1):
            raise TypeError(f"{var.name} is not a binary variable")
        if lb >= 1:
            return var, True
        if ub <= 0:
            return var, False
        raise TypeError(f"the condition {antecedent} does not fix {var.name}")

    def add(self, ct: Any, name: Optional[str] = None) -> Any:
        """Adds a constraint, a list of constraints or an objective."""
        native = self.native
        if isinstance(ct, modeler.Objective):
            self._set_objective(ct)
            return ct
        if isinstance(ct, (list, tuple)):
            return [self.add(c, name) for c in ct]
        if isinstance(ct, RangeConstraint):
            return native.add_linear_constraint(ct.expr, ct.lb, ct.ub, name or ct.name)
        if isinstance(ct, IndicatorConstraint):
            return self.__add_indicator(ct, name or ct.name)
        if isinstance(ct, (mbh.BoundedLinearExpression, bool, np.bool_)):
            return native.add(bool(ct) if isinstance(ct, np.bool_) else ct, name)
        raise TypeError(f"cannot add a {type(ct).__name__} to an MpModel")

    def __add_indicator(
        self, ct: IndicatorConstraint, name: Optional[str]
    ) -> List[Any]:
        """Posts (var == value) => lb <= expr <= ub as big-M linear constraints.

        The big-M coefficients come from the bounds of the variables of expr
        when the constraint is added. Returns the posted constraints.
        """
        consequent = ct.consequent
        if isinstance(consequent, RangeConstraint):
            expr, lb, ub = consequent.expr, consequent.lb, consequent.ub
            name = name or consequent.name
        elif isinstance(consequent, mbh.BoundedLinearExpression):
            expr = LinearExpr.weighted_sum(
                list(consequent.vars), list(consequent.coeffs)
            )
            lb, ub = consequent.lower_bound, consequent.upper_bound
        else:
            raise TypeError(
                f"an if_then consequent must be linear, not a"
                f" {type(consequent).__name__}"
            )
        active = ct.var if ct.value else 1 - ct.var
        lo, hi = _bounds(expr)
        native = self.native
        posted = []
        if ub < hi:
            if math.isinf(hi):
                raise ValueError(f"if_then: {consequent} has no finite upper bound")
            posted.append(
                native.add_linear_constraint(
                    expr + (hi - ub) * active, -INFINITY, hi, name
                )
            )
        if lb > lo:
            if math.isinf(lo):
                raise ValueError(f"if_then: {consequent} has no finite lower bound")
            posted.append(
                native.add_linear_constraint(
                    expr + (lo - lb) * active, lo, INFINITY, name
                )
            )
        logging.vlog(1, "if_then %s: %d big-M constraints", ct, len(posted))
        return posted

    # Piecewise linear functions.

    def piecewise_linear(
        self,
        preslope: NumberT,
        points: Sequence[Tuple[NumberT, NumberT]],
        postslope: NumberT,
        name: Optional[str] = None,
    ) -> PiecewiseLinearFunction:
        return PiecewiseLinearFunction(self, preslope, points, postslope, name)

    # Objectives.

    def _set_objective(self, objective: modeler.Objective) -> None:
        self.__objective = objective

    @property
    def objective(self) -> Optional[modeler.Objective]:
        return self.__objective

    def static_lex(
        self,
        objectives: Sequence[Any],
        weights: Optional[Sequence[NumberT]] = None,
        priorities: Optional[Sequence[int]] = None,
        abs_tols: Optional[Sequence[NumberT]] = None,
        rel_tols: Optional[Sequence[NumberT]] = None,
        name: Optional[str] = None,
    ) -> StaticLex:
        """Returns a lexicographic multi-objective for minimize() or maximize().

        Args:
          objectives: expressions, or objectives whose expressions are used.
          weights: the weight of each objective in its priority level.
          priorities: higher priorities are optimized first. By default, the
            objectives are optimized in order.
          abs_tols: the absolute degradation allowed for each level.
          rel_tols: the relative degradation allowed for each level.
          name: the name of the multi-objective.

        Returns:
          A StaticLex, to pass to minimize() or maximize().
        """
        exprs = [
            o.expr if isinstance(o, modeler.Objective) else o for o in objectives
        ]
        n = len(exprs)
        if not n:
            raise ValueError("static_lex needs at least one objective")

        def column(values: Optional[Sequence[Any]], default: Any, what: str) -> List[Any]:
            if values is None:
                return [default] * n
            values = list(values)
            if len(values) != n:
                raise ValueError(f"static_lex: expected {n} {what}, got {len(values)}")
            return values

        if priorities is None:
            priorities = list(range(n, 0, -1))
        return StaticLex(
            exprs,
            [float(w) for w in column(weights, 1.0, "weights")],
            [int(p) for p in column(priorities, 0, "priorities")],
            [float(t) for t in column(abs_tols, 0.0, "absolute tolerances")],
            [float(t) for t in column(rel_tols, 0.0, "relative tolerances")],
            name,
        )

    # KPIs.

    def add_kpi(self, expr: Any, name: Optional[str] = None) -> Any:
        """Records an expression to report after solve."""
        name = name or f"kpi{len(self.__kpis) + 1}"
        if name in self.__kpis:
            raise ValueError(f"duplicate KPI name {name!r}")
        self.__kpis[name] = expr
        return expr

    def get_kpis(self) -> Dict[str, Any]:
        return dict(self.__kpis)

    def get_kpi_value(self, name: str) -> float:
        try:
            return self.get_value(self.__kpis[name])
        except KeyError:
            raise ValueError(f"no KPI named {name!r}") from None

    def report_kpis(self) -> Dict[str, float]:
        """Logs the KPI values of the solution and returns them."""
        values = {name: self.get_value(expr) for name, expr in self.__kpis.items()}
        for name, value in values.items():
            logging.info("KPI %s = %g", name, value)
        return values

    # Solving.

    def __new_solver(
        self,
        solver_name: Optional[str],
        time_limit: Optional[float],
        params: Optional[str],
        log: bool,
    ) -> mb.Solver:
        name = solver_name or self.__solver_name
        solver = mb.Solver(name)
        if not solver.solver_is_supported():
            raise RuntimeError(f"the {name} solver is not available")
        if time_limit is not None:
            solver.set_time_limit_in_seconds(time_limit)
        if params:
            solver.set_solver_specific_parameters(params)
        solver.enable_output(log)
        return solver

    def __run(self, native: mb.Model, solver: mb.Solver) -> bool:
        self.__status = solver.solve(native)
        self.__solver = solver
        logging.vlog(
            1,
            "solve %s: %s after %.2fs",
            self.name or "<anonymous>",
            self.__status.name,
            solver.wall_time,
        )
        return self.__status in _FEASIBLE

    def __set_native_objective(
        self, native: mb.Model, expr: Any, sense: modeler.ObjectiveSense
    ) -> None:
        if sense.is_minimize():
            native.minimize(expr)
        else:
            native.maximize(expr)

    def solve(
        self,
        time_limit: Optional[float] = None,
        solver_name: Optional[str] = None,
        params: Optional[str] = None,
        log: bool = False,
    ) -> bool:
        """Solves the model.

        Args:
          time_limit: the time limit in seconds, of each level for a
            multi-objective.
          solver_name: overrides the backend given to the constructor.
          params: backend specific parameters, in the backend's format.
          log: whether the backend logs its search.

        Returns:
          True if a feasible solution was found.
        """
        native = self.native
        objective = self.__objective
        self.__objective_values = []
        if objective is not None and isinstance(objective.expr, StaticLex):
            return self.__solve_lex(objective, time_limit, solver_name, params, log)
        if objective is None:
            native.minimize(0.0)
        else:
            self.__set_native_objective(native, objective.expr, objective.sense)
        solver = self.__new_solver(solver_name, time_limit, params, log)
        if not self.__run(native, solver):
            return False
        if objective is not None:
            self.__objective_values = [float(solver.objective_value)]
        return True

    def __solve_lex(
        self,
        objective: modeler.Objective,
        time_limit: Optional[float],
        solver_name: Optional[str],
        params: Optional[str],
        log: bool,
    ) -> bool:
        lex: StaticLex = objective.expr
        minimize = objective.sense.is_minimize()
        bounds: List[Tuple[Any, float]] = []
        blends = []
        for k, level in enumerate(lex.levels()):
            blend = LinearExpr.sum(
                [lex.weights[i] * lex.objectives[i] for i in level]
            )
            work = self.native.clone()
            for previous, limit in bounds:
                work.add(previous <= limit if minimize else previous >= limit)
            self.__set_native_objective(work, blend, objective.sense)
            solver = self.__new_solver(solver_name, time_limit, params, log)
            if not self.__run(work, solver):
                logging.warning("static_lex: level %d has no solution", k)
                return False
            value = float(solver.objective_value)
            tol = max(
                max(lex.abs_tols[i] for i in level),
                max(lex.rel_tols[i] for i in level) * abs(value),
            )
            logging.vlog(1, "static_lex: level %d = %g (tolerance %g)", k, value, tol)
            bounds.append((blend, value + tol if minimize else value - tol))
            blends.append(blend)
        self.__objective_values = [float(self.__solver.value(b)) for b in blends]
        return True

    # Solution queries.

    def __check_solution(self) -> mb.Solver:
        if self.__solver is None or self.__status not in _FEASIBLE:
            raise modeler.NoSolutionError("no solution available")
        return self.__solver

    def get_status(self) -> Optional[SolveStatus]:
        return self.__status

    def get_objective_value(self) -> float:
        """Returns the objective value, the first level of a multi-objective."""
        self.__check_solution()
        return self.__objective_values[0] if self.__objective_values else 0.0

    def get_objective_values(self) -> List[float]:
        """Returns the value of each level of a multi-objective."""
        self.__check_solution()
        return list(self.__objective_values)

    def get_best_objective_value(self) -> float:
        return float(self.__check_solution().best_objective_bound)

    def get_value(self, expr: Any) -> float:
        return float(self.__check_solution().value(expr))

    def get_values(self, variables: Any) -> pd.Series:
        """Returns the values of variables (or expressions) as a pandas Series.

        A dictionary gives a Series indexed by its keys.
        """
        solver = self.__check_solution()
        if isinstance(variables, (pd.Index, pd.Series)):
            return solver.values(variables)
        if isinstance(variables, dict):
            return pd.Series(
                [float(solver.value(v)) for v in variables.values()],
                index=list(variables.keys()),
                dtype=float,
            )
        return pd.Series([float(solver.value(v)) for v in variables], dtype=float)

    def get_dual(self, ct: Any) -> float:
        """Returns the dual value of a linear constraint (LP backends only)."""
        return float(self.__check_solution().dual_value(ct))

    def get_reduced_cost(self, var: Variable) -> float:
        """Returns the reduced cost of a variable (LP backends only)."""
        return float(self.__check_solution().reduced_cost(var))

    # Export and import.

    def __apply_objective(self) -> None:
        objective = self.__objective
        if objective is not None and not isinstance(objective.expr, StaticLex):
            self.__set_native_objective(self.native, objective.expr, objective.sense)

    def export_model(self, filename: str) -> bool:
        """Writes the model in LP (.lp) or MPS (.mps) format."""
        native = self.native
        self.__apply_objective()
        if filename.endswith(".lp"):
            with open(filename, "w") as f:
                f.write(native.export_to_lp_string(False))
            return True
        if filename.endswith(".mps"):
            return native.write_to_mps_file(filename)
        raise ValueError(f"unknown model format for {filename}; use .lp or .mps")

    def import_model(self, filename: str) -> bool:
        """Reads a model in LP (.lp) or MPS (.mps) format into this model."""
        native = self.native
        if filename.endswith(".lp"):
            ok = native.import_from_lp_file(filename)
        elif filename.endswith(".mps"):
            ok = native.import_from_mps_file(filename)
        else:
            raise ValueError(f"unknown model format for {filename}; use .lp or .mps")
        if ok:
            self.__objective = None
        return ok

    def print_information(self) -> None:
        """Logs the size of the model."""
        native = self.native
        variables = self.get_variables()
        integers = sum(1 for v in variables if v.is_integral)
        binaries = sum(
            1
            for v in variables
            if v.is_integral and v.lower_bound >= 0 and v.upper_bound <= 1
        )
        logging.info("Model: %s", self.name or "<anonymous>")
        logging.info(
            " - number of variables: %d (%d integer, %d binary)",
            native.num_variables,
            integers,
            binaries,
        )
        logging.info(" - number of constraints: %d", native.num_constraints)
        if self.__objective is not None:
            logging.info(" - objective: %s", self.__objective)
