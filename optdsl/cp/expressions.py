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

"""Integer and numeric expressions, and constraints, of a CpModel.

Expressions are built with the usual operators:

    x + 2 * y - 3 <= z
    abs(x - y) != 2
    (x == 0) | (y == 0)

* [`IntExpr`](#expressions.IntExpr): an integer linear form over the
  variables of a model. Products, divisions, modulos and absolute values of
  non constant expressions introduce auxiliary variables.
* [`IntVar`](#expressions.IntVar): an integer (or boolean) decision variable.
* [`NumExpr`](#expressions.NumExpr): a linear form with floating point
  coefficients, used in objectives.
* [`Constraint`](#expressions.Constraint): a relation between expressions.
  Constraints can be combined with `&`, `|` and `~`, reified, and used as
  0/1 integer expressions.

Nothing is sent to CP-SAT until a constraint is added to its model with
`CpModel.add()`. The model is reached through the small set of methods in the
"Native model access" section of `CpModel`.
"""

import math
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple, Union

from ortools.sat.python import cp_model

from optdsl.modeler import IntegralT, NumberT, is_a_number, is_integral

Domain = cp_model.Domain

# Bounds of the auxiliary variables introduced by nonlinear expressions.
AUX_MIN = -(2**48)
AUX_MAX = 2**48

ValueOfT = Callable[[int], int]


def _clamp(x: float) -> int:
    return int(max(AUX_MIN, min(AUX_MAX, x)))


def _term_name(model: Any, index: int, coef: NumberT) -> str:
    name = model.var_name(index)
    if coef == 1:
        return name
    if coef == -1:
        return f"-{name}"
    return f"{coef} * {name}"


def _linear_str(model: Any, terms: Dict[int, NumberT], offset: NumberT) -> str:
    parts = [_term_name(model, i, c) for i, c in terms.items()]
    if offset or not parts:
        parts.append(str(offset))
    return " + ".join(parts).replace("+ -", "- ")


class IntExpr:
    """An integer linear form: sum(coef * var) + offset.

    Variables are referenced by their index in the CP-SAT model. Bounds are
    computed from the current domains of the variables.
    """

    def __init__(
        self, model: Any, terms: Optional[Dict[int, int]] = None, offset: int = 0
    ) -> None:
        self._model = model
        self._terms: Dict[int, int] = terms if terms is not None else {}
        self._offset: int = offset

    @property
    def model(self) -> Any:
        return self._model

    @property
    def terms(self) -> Dict[int, int]:
        return self._terms

    @property
    def offset(self) -> int:
        return self._offset

    def is_constant(self) -> bool:
        return not self._terms

    def bounds(self) -> Tuple[int, int]:
        """Returns (min, max) of the expression over the current domains."""
        lo = hi = self._offset
        for index, coef in self._terms.items():
            vlo, vhi = self._model.var_bounds(index)
            if coef > 0:
                lo += coef * vlo
                hi += coef * vhi
            else:
                lo += coef * vhi
                hi += coef * vlo
        return lo, hi

    @property
    def lb(self) -> int:
        return self.bounds()[0]

    @property
    def ub(self) -> int:
        return self.bounds()[1]

    def native(self) -> cp_model.LinearExprT:
        """Returns the expression as a CP-SAT linear expression."""
        if not self._terms:
            return self._offset
        if len(self._terms) == 1 and self._offset == 0:
            (index, coef), = self._terms.items()
            if coef == 1:
                return self._model.native_var(index)
        variables = [self._model.native_var(i) for i in self._terms]
        return (
            cp_model.LinearExpr.weighted_sum(variables, list(self._terms.values()))
            + self._offset
        )

    def var_index(self) -> Optional[int]:
        """Returns the variable index if the expression is a single variable."""
        if len(self._terms) == 1 and self._offset == 0:
            (index, coef), = self._terms.items()
            if coef == 1:
                return index
        return None

    def as_var(self) -> "IntVar":
        """Returns a variable equal to the expression, creating one if needed."""
        index = self.var_index()
        if index is not None:
            return IntVar(self._model, index)
        lo, hi = self.bounds()
        var = self._model.new_aux_int_var(lo, hi)
        self._model.native.add(var.native() == self.native())
        return var

    def affine(self) -> cp_model.LinearExprT:
        """Returns the expression as an affine CP-SAT expression a * x + b."""
        if len(self._terms) <= 1:
            return self.native()
        return self.as_var().native()

    def evaluate(self, value_of: ValueOfT) -> int:
        return self._offset + sum(c * value_of(i) for i, c in self._terms.items())

    # Arithmetic.

    def _coerce(self, other: Any) -> Optional["IntExpr"]:
        if isinstance(other, IntExpr):
            return other
        if isinstance(other, Constraint):
            return other.as_int_expr()
        if isinstance(other, bool):
            return IntExpr(self._model, {}, int(other))
        if is_integral(other):
            return IntExpr(self._model, {}, int(other))
        return None

    def _linear(self, other: "IntExpr", sign: int) -> "IntExpr":
        terms = dict(self._terms)
        for index, coef in other._terms.items():
            c = terms.get(index, 0) + sign * coef
            if c:
                terms[index] = c
            else:
                terms.pop(index, None)
        return IntExpr(self._model, terms, self._offset + sign * other._offset)

    def _scale(self, k: int) -> "IntExpr":
        if k == 0:
            return IntExpr(self._model, {}, 0)
        return IntExpr(
            self._model,
            {i: c * k for i, c in self._terms.items()},
            self._offset * k,
        )

    def to_num_expr(self) -> "NumExpr":
        return NumExpr(
            self._model,
            {i: float(c) for i, c in self._terms.items()},
            float(self._offset),
        )

    def __add__(self, other: Any) -> Union["IntExpr", "NumExpr"]:
        o = self._coerce(other)
        if o is not None:
            return self._linear(o, 1)
        if isinstance(other, NumExpr) or is_a_number(other):
            return self.to_num_expr() + other
        return NotImplemented

    def __radd__(self, other: Any) -> Union["IntExpr", "NumExpr"]:
        return self.__add__(other)

    def __sub__(self, other: Any) -> Union["IntExpr", "NumExpr"]:
        o = self._coerce(other)
        if o is not None:
            return self._linear(o, -1)
        if isinstance(other, NumExpr) or is_a_number(other):
            return self.to_num_expr() - other
        return NotImplemented

    def __rsub__(self, other: Any) -> Union["IntExpr", "NumExpr"]:
        o = self._coerce(other)
        if o is not None:
            return o._linear(self, -1)
        if isinstance(other, NumExpr) or is_a_number(other):
            return other - self.to_num_expr()
        return NotImplemented

    def __neg__(self) -> "IntExpr":
        return self._scale(-1)

    def __pos__(self) -> "IntExpr":
        return self

    def __mul__(self, other: Any) -> Union["IntExpr", "NumExpr"]:
        o = self._coerce(other)
        if o is not None:
            if o.is_constant():
                return self._scale(o._offset)
            if self.is_constant():
                return o._scale(self._offset)
            return product(self, o)
        if is_a_number(other):
            return self.to_num_expr() * other
        return NotImplemented

    def __rmul__(self, other: Any) -> Union["IntExpr", "NumExpr"]:
        return self.__mul__(other)

    def __floordiv__(self, other: Any) -> "IntExpr":
        """Integer division, rounded toward zero."""
        o = self._coerce(other)
        if o is None:
            return NotImplemented
        return division(self, o)

    def __rfloordiv__(self, other: Any) -> "IntExpr":
        o = self._coerce(other)
        if o is None:
            return NotImplemented
        return division(o, self)

    def __mod__(self, other: Any) -> "IntExpr":
        """Remainder of the integer division rounded toward zero."""
        o = self._coerce(other)
        if o is None:
            return NotImplemented
        return modulo(self, o)

    def __rmod__(self, other: Any) -> "IntExpr":
        o = self._coerce(other)
        if o is None:
            return NotImplemented
        return modulo(o, self)

    def __abs__(self) -> "IntExpr":
        return absolute(self)

    # Comparisons.

    def _compare(self, other: Any, domain: Domain) -> "Constraint":
        o = self._coerce(other)
        if o is None:
            return NotImplemented
        return DomainConstraint(self._linear(o, -1), domain)

    def _check_compare(self, result: Any, other: Any) -> "Constraint":
        if result is NotImplemented:
            raise TypeError(
                f"cannot compare {type(self).__name__} with {type(other).__name__}"
            )
        return result

    def __le__(self, other: Any) -> "Constraint":
        return self._compare(other, Domain(cp_model.INT_MIN, 0))

    def __lt__(self, other: Any) -> "Constraint":
        return self._compare(other, Domain(cp_model.INT_MIN, -1))

    def __ge__(self, other: Any) -> "Constraint":
        return self._compare(other, Domain(0, cp_model.INT_MAX))

    def __gt__(self, other: Any) -> "Constraint":
        return self._compare(other, Domain(1, cp_model.INT_MAX))

    def __eq__(self, other: Any) -> "Constraint":  # type: ignore[override]
        return self._check_compare(self._compare(other, Domain(0, 0)), other)

    def __ne__(self, other: Any) -> "Constraint":  # type: ignore[override]
        return self._check_compare(
            self._compare(other, Domain(0, 0).complement()), other
        )

    __hash__ = object.__hash__

    def in_domain(self, values: Iterable[IntegralT]) -> "Constraint":
        """Returns the constraint `self in values`."""
        return DomainConstraint(
            self, Domain.from_values([int(v) for v in values])
        )

    def __bool__(self) -> bool:
        raise TypeError(
            f"evaluating a {type(self).__name__} as a Boolean value is not supported"
        )

    def __str__(self) -> str:
        return _linear_str(self._model, self._terms, self._offset)

    def __repr__(self) -> str:
        return f"IntExpr({self})"


class IntVar(IntExpr):
    """An integer decision variable of a CpModel."""

    def __init__(self, model: Any, index: int) -> None:
        super().__init__(model, {index: 1}, 0)
        self.__index = index

    @property
    def index(self) -> int:
        return self.__index

    @property
    def name(self) -> str:
        return self._model.var_name(self.__index)

    def native(self) -> cp_model.IntVar:
        return self._model.native_var(self.__index)

    def is_boolean(self) -> bool:
        return self.native().is_boolean

    @property
    def domain(self) -> Domain:
        return self._model.var_domain(self.__index)

    @property
    def lb(self) -> int:
        return self._model.var_bounds(self.__index)[0]

    @lb.setter
    def lb(self, value: IntegralT) -> None:
        self.set_lb(value)

    @property
    def ub(self) -> int:
        return self._model.var_bounds(self.__index)[1]

    @ub.setter
    def ub(self, value: IntegralT) -> None:
        self.set_ub(value)

    def set_lb(self, value: IntegralT) -> None:
        """Removes the values smaller than `value` from the domain."""
        self.restrict(Domain(int(value), cp_model.INT_MAX))

    def set_ub(self, value: IntegralT) -> None:
        """Removes the values larger than `value` from the domain."""
        self.restrict(Domain(cp_model.INT_MIN, int(value)))

    def set_bounds(self, lb: IntegralT, ub: IntegralT) -> None:
        self.restrict(Domain(int(lb), int(ub)))

    def restrict(self, domain: Domain) -> None:
        """Intersects the domain of the variable with `domain`."""
        self._model.set_var_domain(
            self.__index, self.domain.intersection_with(domain)
        )

    def __invert__(self) -> "Constraint":
        """Returns the negation of a boolean variable, as a constraint."""
        return LiteralConstraint(self._model, ~as_literal(self))

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        lo, hi = self.bounds()
        return f"IntVar({self.name}, {lo}..{hi})"


class NumExpr:
    """A linear form with floating point coefficients."""

    def __init__(
        self,
        model: Any,
        terms: Optional[Dict[int, float]] = None,
        offset: float = 0.0,
    ) -> None:
        self._model = model
        self._terms: Dict[int, float] = terms if terms is not None else {}
        self._offset: float = offset

    @property
    def model(self) -> Any:
        return self._model

    @property
    def terms(self) -> Dict[int, float]:
        return self._terms

    @property
    def offset(self) -> float:
        return self._offset

    def native(self) -> cp_model.LinearExprT:
        if not self._terms:
            return self._offset
        variables = [self._model.native_var(i) for i in self._terms]
        return (
            cp_model.LinearExpr.weighted_sum(variables, list(self._terms.values()))
            + self._offset
        )

    def evaluate(self, value_of: ValueOfT) -> float:
        return self._offset + sum(c * value_of(i) for i, c in self._terms.items())

    def _coerce(self, other: Any) -> Optional["NumExpr"]:
        if isinstance(other, NumExpr):
            return other
        if isinstance(other, IntExpr):
            return other.to_num_expr()
        if isinstance(other, Constraint):
            return other.as_int_expr().to_num_expr()
        if is_a_number(other):
            return NumExpr(self._model, {}, float(other))
        return None

    def _linear(self, other: "NumExpr", sign: float) -> "NumExpr":
        terms = dict(self._terms)
        for index, coef in other._terms.items():
            c = terms.get(index, 0.0) + sign * coef
            if c:
                terms[index] = c
            else:
                terms.pop(index, None)
        return NumExpr(self._model, terms, self._offset + sign * other._offset)

    def __add__(self, other: Any) -> "NumExpr":
        o = self._coerce(other)
        if o is None:
            return NotImplemented
        return self._linear(o, 1.0)

    def __radd__(self, other: Any) -> "NumExpr":
        return self.__add__(other)

    def __sub__(self, other: Any) -> "NumExpr":
        o = self._coerce(other)
        if o is None:
            return NotImplemented
        return self._linear(o, -1.0)

    def __rsub__(self, other: Any) -> "NumExpr":
        o = self._coerce(other)
        if o is None:
            return NotImplemented
        return o._linear(self, -1.0)

    def __neg__(self) -> "NumExpr":
        return self * -1.0

    def __mul__(self, other: Any) -> "NumExpr":
        if not is_a_number(other):
            return NotImplemented
        k = float(other)
        if k == 0:
            return NumExpr(self._model, {}, 0.0)
        return NumExpr(
            self._model,
            {i: c * k for i, c in self._terms.items()},
            self._offset * k,
        )

    def __rmul__(self, other: Any) -> "NumExpr":
        return self.__mul__(other)

    def __truediv__(self, other: Any) -> "NumExpr":
        if not is_a_number(other):
            return NotImplemented
        return self * (1.0 / float(other))

    def __str__(self) -> str:
        return _linear_str(self._model, self._terms, self._offset)

    def __repr__(self) -> str:
        return f"NumExpr({self})"


LiteralT = Union[IntVar, "Constraint", bool]


def as_literal(x: Any) -> cp_model.LiteralT:
    """Returns the CP-SAT literal of a boolean variable or of a constraint."""
    if isinstance(x, Constraint):
        return x.literal
    if isinstance(x, IntVar):
        lo, hi = x.bounds()
        if lo < 0 or hi > 1:
            raise TypeError(f"{x.name} is not a boolean variable")
        native = x.native()
        if native.is_boolean:
            return native
        return (x == 1).literal
    if isinstance(x, IntExpr):
        return (x != 0).literal
    if isinstance(x, bool):
        raise TypeError("a constant cannot be used as a literal")
    raise TypeError(f"not a literal: {type(x).__name__}")


class Constraint:
    """Base class of the constraints of a CpModel.

    A constraint is posted by `CpModel.add()`. It can also be combined with
    other constraints, enforced by literals, or used as a 0/1 expression, in
    which case it is reified through a boolean variable.
    """

    def __init__(self, model: Any) -> None:
        self._model = model
        self.__literal: Optional[cp_model.LiteralT] = None
        self.__name: Optional[str] = None

    @property
    def model(self) -> Any:
        return self._model

    @property
    def name(self) -> Optional[str]:
        return self.__name

    @name.setter
    def name(self, name: str) -> None:
        self.__name = name

    def with_name(self, name: Optional[str]) -> "Constraint":
        self.__name = name
        return self

    def enforce(self, enforcement: List[cp_model.LiteralT]) -> None:
        """Posts `and(enforcement) => self` in the CP-SAT model."""
        raise NotImplementedError

    def negation(self) -> "Constraint":
        raise NotImplementedError

    def evaluate(self, value_of: ValueOfT) -> bool:
        raise NotImplementedError

    @property
    def literal(self) -> cp_model.LiteralT:
        """Returns a literal equivalent to the constraint."""
        if self.__literal is None:
            negation = self.negation()
            b = self._model.new_aux_bool_var().native()
            self.enforce([b])
            negation.enforce([~b])
            self.__literal = b
        return self.__literal

    def as_int_expr(self) -> IntExpr:
        """Returns the 0/1 expression equal to 1 iff the constraint holds."""
        lit = self.literal
        if lit.index >= 0:
            return IntExpr(self._model, {lit.index: 1}, 0)
        return IntExpr(self._model, {-lit.index - 1: -1}, 1)

    def only_enforce_if(self, *literals: Any) -> "Constraint":
        """Returns the constraint enforced by all the given literals."""
        lits: List[Any] = []
        for x in literals:
            if isinstance(x, (list, tuple)):
                lits.extend(x)
            else:
                lits.append(x)
        return EnforcedConstraint(self, [as_literal(x) for x in lits])

    # Logical combinations.

    def __and__(self, other: Any) -> "Constraint":
        return AndConstraint(self._model, [self, _as_constraint(self._model, other)])

    def __rand__(self, other: Any) -> "Constraint":
        return AndConstraint(self._model, [_as_constraint(self._model, other), self])

    def __or__(self, other: Any) -> "Constraint":
        return OrConstraint(self._model, [self, _as_constraint(self._model, other)])

    def __ror__(self, other: Any) -> "Constraint":
        return OrConstraint(self._model, [_as_constraint(self._model, other), self])

    def __invert__(self) -> "Constraint":
        return self.negation()

    # Use as a 0/1 expression.

    def __add__(self, other: Any) -> Any:
        return self.as_int_expr() + other

    def __radd__(self, other: Any) -> Any:
        return other + self.as_int_expr()

    def __sub__(self, other: Any) -> Any:
        return self.as_int_expr() - other

    def __rsub__(self, other: Any) -> Any:
        return other - self.as_int_expr()

    def __mul__(self, other: Any) -> Any:
        return self.as_int_expr() * other

    def __rmul__(self, other: Any) -> Any:
        return other * self.as_int_expr()

    def __neg__(self) -> IntExpr:
        return -self.as_int_expr()

    def __le__(self, other: Any) -> "Constraint":
        return self.as_int_expr() <= other

    def __lt__(self, other: Any) -> "Constraint":
        return self.as_int_expr() < other

    def __ge__(self, other: Any) -> "Constraint":
        return self.as_int_expr() >= other

    def __gt__(self, other: Any) -> "Constraint":
        return self.as_int_expr() > other

    def __eq__(self, other: Any) -> "Constraint":  # type: ignore[override]
        return self.as_int_expr() == other

    def __ne__(self, other: Any) -> "Constraint":  # type: ignore[override]
        return self.as_int_expr() != other

    __hash__ = object.__hash__

    def __bool__(self) -> bool:
        raise TypeError(
            f"evaluating a {type(self).__name__} as a Boolean value is not"
            " supported; use & | ~ to combine constraints"
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self})"


def _as_constraint(model: Any, x: Any) -> Constraint:
    if isinstance(x, Constraint):
        return x
    if isinstance(x, bool):
        return TrueConstraint(model) if x else FalseConstraint(model)
    if isinstance(x, IntVar):
        return LiteralConstraint(model, as_literal(x))
    raise TypeError(f"not a constraint: {type(x).__name__}")


def _forbid(model: Any, enforcement: List[cp_model.LiteralT]) -> None:
    """Posts `not(and(enforcement))`."""
    model.native.add_bool_or([~lit for lit in enforcement])


class DomainConstraint(Constraint):
    """The constraint `expr in domain`."""

    def __init__(self, expr: IntExpr, domain: Domain) -> None:
        super().__init__(expr.model)
        self.__expr = expr
        self.__domain = domain

    @property
    def expr(self) -> IntExpr:
        return self.__expr

    @property
    def domain(self) -> Domain:
        return self.__domain

    def enforce(self, enforcement: List[cp_model.LiteralT]) -> None:
        if self.__expr.is_constant():
            if not self.__domain.contains(self.__expr.offset):
                _forbid(self._model, enforcement)
            return
        ct = self._model.native.add_linear_expression_in_domain(
            self.__expr.native(), self.__domain
        )
        if enforcement:
            ct.only_enforce_if(enforcement)
        if self.name:
            ct.with_name(self.name)

    def negation(self) -> Constraint:
        return DomainConstraint(self.__expr, self.__domain.complement())

    @property
    def literal(self) -> cp_model.LiteralT:
        index = self.__expr.var_index()
        if index is not None:
            var = self._model.native_var(index)
            if var.is_boolean:
                values = self.__domain.intersection_with(Domain(0, 1))
                if values.flattened_intervals() == [1, 1]:
                    return var
                if values.flattened_intervals() == [0, 0]:
                    return ~var
        return super().literal

    def evaluate(self, value_of: ValueOfT) -> bool:
        return self.__domain.contains(self.__expr.evaluate(value_of))

    def __str__(self) -> str:
        intervals = self.__domain.flattened_intervals()
        if len(intervals) == 2:
            lo, hi = intervals
            if lo == hi:
                return f"{self.__expr} == {lo}"
            if lo <= cp_model.INT_MIN:
                return f"{self.__expr} <= {hi}"
            if hi >= cp_model.INT_MAX:
                return f"{self.__expr} >= {lo}"
            return f"{lo} <= {self.__expr} <= {hi}"
        return f"{self.__expr} in {self.__domain}"


class LiteralConstraint(Constraint):
    """The constraint `literal == true`."""

    def __init__(self, model: Any, literal: cp_model.LiteralT) -> None:
        super().__init__(model)
        self.__lit = literal

    @property
    def literal(self) -> cp_model.LiteralT:
        return self.__lit

    def enforce(self, enforcement: List[cp_model.LiteralT]) -> None:
        ct = self._model.native.add_bool_and([self.__lit])
        if enforcement:
            ct.only_enforce_if(enforcement)

    def negation(self) -> Constraint:
        return LiteralConstraint(self._model, ~self.__lit)

    def evaluate(self, value_of: ValueOfT) -> bool:
        index = self.__lit.index
        if index >= 0:
            return bool(value_of(index))
        return not value_of(-index - 1)

    def __str__(self) -> str:
        return str(self.__lit)


class AndConstraint(Constraint):
    """The conjunction of constraints."""

    def __init__(self, model: Any, constraints: Sequence[Constraint]) -> None:
        super().__init__(model)
        self.__cts: List[Constraint] = []
        for ct in constraints:
            if isinstance(ct, AndConstraint):
                self.__cts.extend(ct.constraints)
            else:
                self.__cts.append(ct)

    @property
    def constraints(self) -> List[Constraint]:
        return self.__cts

    def enforce(self, enforcement: List[cp_model.LiteralT]) -> None:
        for ct in self.__cts:
            ct.enforce(enforcement)

    def negation(self) -> Constraint:
        return OrConstraint(self._model, [ct.negation() for ct in self.__cts])

    def evaluate(self, value_of: ValueOfT) -> bool:
        return all(ct.evaluate(value_of) for ct in self.__cts)

    def __str__(self) -> str:
        return " & ".join(f"({ct})" for ct in self.__cts)


class OrConstraint(Constraint):
    """The disjunction of constraints."""

    def __init__(self, model: Any, constraints: Sequence[Constraint]) -> None:
        super().__init__(model)
        self.__cts: List[Constraint] = []
        for ct in constraints:
            if isinstance(ct, OrConstraint):
                self.__cts.extend(ct.constraints)
            else:
                self.__cts.append(ct)

    @property
    def constraints(self) -> List[Constraint]:
        return self.__cts

    def enforce(self, enforcement: List[cp_model.LiteralT]) -> None:
        if len(self.__cts) == 1:
            self.__cts[0].enforce(enforcement)
            return
        ct = self._model.native.add_bool_or([c.literal for c in self.__cts])
        if enforcement:
            ct.only_enforce_if(enforcement)

    def negation(self) -> Constraint:
        return AndConstraint(self._model, [ct.negation() for ct in self.__cts])

    def evaluate(self, value_of: ValueOfT) -> bool:
        return any(ct.evaluate(value_of) for ct in self.__cts)

    def __str__(self) -> str:
        return " | ".join(f"({ct})" for ct in self.__cts)


class TrueConstraint(Constraint):
    """A constraint that always holds."""

    def enforce(self, enforcement: List[cp_model.LiteralT]) -> None:
        pass

    def negation(self) -> Constraint:
        return FalseConstraint(self._model)

    def evaluate(self, value_of: ValueOfT) -> bool:
        return True

    def __str__(self) -> str:
        return "true"


class FalseConstraint(Constraint):
    """A constraint that never holds."""

    def enforce(self, enforcement: List[cp_model.LiteralT]) -> None:
        _forbid(self._model, enforcement)

    def negation(self) -> Constraint:
        return TrueConstraint(self._model)

    def evaluate(self, value_of: ValueOfT) -> bool:
        return False

    def __str__(self) -> str:
        return "false"


class EnforcedConstraint(Constraint):
    """A constraint that only applies when all its literals are true."""

    def __init__(
        self, constraint: Constraint, literals: List[cp_model.LiteralT]
    ) -> None:
        super().__init__(constraint.model)
        self.__ct = constraint
        self.__lits = literals

    def enforce(self, enforcement: List[cp_model.LiteralT]) -> None:
        self.__ct.enforce(list(enforcement) + self.__lits)

    def negation(self) -> Constraint:
        return AndConstraint(
            self._model,
            [LiteralConstraint(self._model, lit) for lit in self.__lits]
            + [self.__ct.negation()],
        )

    def evaluate(self, value_of: ValueOfT) -> bool:
        for lit in self.__lits:
            if not LiteralConstraint(self._model, lit).evaluate(value_of):
                return True
        return self.__ct.evaluate(value_of)

    def __str__(self) -> str:
        lits = ", ".join(str(lit) for lit in self.__lits)
        return f"{self.__ct} if [{lits}]"


class GlobalConstraint(Constraint):
    """A constraint posted by a CP-SAT builder, such as all_different.

    Global constraints are only added unconditionally. They cannot be negated,
    reified or combined with other constraints.
    """

    def __init__(
        self,
        model: Any,
        description: str,
        poster: Callable[[], Any],
        checker: Optional[Callable[[ValueOfT], bool]] = None,
    ) -> None:
        super().__init__(model)
        self.__description = description
        self.__poster = poster
        self.__checker = checker

    def enforce(self, enforcement: List[cp_model.LiteralT]) -> None:
        if enforcement:
            raise TypeError(f"{self.__description} cannot be enforced or reified")
        ct = self.__poster()
        if self.name and ct is not None:
            ct.with_name(self.name)

    def negation(self) -> Constraint:
        raise TypeError(f"{self.__description} cannot be negated")

    def evaluate(self, value_of: ValueOfT) -> bool:
        if self.__checker is None:
            return True
        return self.__checker(value_of)

    def __str__(self) -> str:
        return self.__description


def if_then(antecedent: Constraint, consequent: Constraint) -> Constraint:
    """Returns the constraint `antecedent => consequent`."""
    model = antecedent.model
    return OrConstraint(model, [antecedent.negation(), consequent])


def if_then_else(
    condition: Constraint, then_ct: Constraint, else_ct: Constraint
) -> Constraint:
    """Returns `(condition => then_ct) & (~condition => else_ct)`."""
    model = condition.model
    return AndConstraint(
        model,
        [
            OrConstraint(model, [condition.negation(), then_ct]),
            OrConstraint(model, [condition, else_ct]),
        ],
    )


# Nonlinear expressions. Each one introduces an auxiliary variable.


def product(a: IntExpr, b: IntExpr) -> IntExpr:
    """Returns a variable equal to a * b."""
    model = a.model
    alo, ahi = a.bounds()
    blo, bhi = b.bounds()
    corners = [alo * blo, alo * bhi, ahi * blo, ahi * bhi]
    target = model.new_aux_int_var(_clamp(min(corners)), _clamp(max(corners)))
    model.native.add_multiplication_equality(
        target.native(), [a.affine(), b.affine()]
    )
    return target


def _without_zero(b: IntExpr) -> cp_model.LinearExprT:
    """Returns b as an affine expression whose domain excludes zero."""
    lo, hi = b.bounds()
    if lo > 0 or hi < 0:
        return b.affine()
    model = b.model
    var = model.new_aux_int_var_from_domain(
        Domain(lo, hi).intersection_with(Domain(0, 0).complement())
    )
    model.native.add(var.native() == b.native())
    return var.native()


def _positive(b: IntExpr) -> cp_model.LinearExprT:
    """Returns |b| as an affine expression whose domain excludes zero."""
    lo, hi = b.bounds()
    if lo > 0:
        return b.affine()
    if hi < 0:
        return (-b).affine()
    model = b.model
    var = model.new_aux_int_var(1, max(-lo, hi, 1))
    model.native.add_abs_equality(var.native(), b.native())
    return var.native()


def division(a: IntExpr, b: IntExpr) -> IntExpr:
    """Returns a variable equal to a / b, rounded toward zero."""
    model = a.model
    if b.is_constant():
        if b.offset == 0:
            raise ZeroDivisionError("integer division by zero")
        if a.is_constant():
            return IntExpr(model, {}, int(a.offset / b.offset))
    alo, ahi = a.bounds()
    m = max(abs(alo), abs(ahi))
    target = model.new_aux_int_var(-m, m)
    model.native.add_division_equality(target.native(), a.affine(), _without_zero(b))
    return target


def modulo(a: IntExpr, b: IntExpr) -> IntExpr:
    """Returns a variable equal to a % b, with the sign of a."""
    model = a.model
    if b.is_constant():
        if b.offset == 0:
            raise ZeroDivisionError("integer modulo by zero")
        if a.is_constant():
            return IntExpr(model, {}, int(math.fmod(a.offset, b.offset)))
    alo, ahi = a.bounds()
    blo, bhi = b.bounds()
    m = max(abs(blo), abs(bhi)) - 1
    target = model.new_aux_int_var(-m if alo < 0 else 0, m if ahi > 0 else 0)
    model.native.add_modulo_equality(target.native(), a.affine(), _positive(b))
    return target


def absolute(a: IntExpr) -> IntExpr:
    """Returns a variable equal to |a|."""
    model = a.model
    if a.is_constant():
        return IntExpr(model, {}, abs(a.offset))
    lo, hi = a.bounds()
    if lo >= 0:
        return a
    if hi <= 0:
        return -a
    target = model.new_aux_int_var(0, max(-lo, hi))
    model.native.add_abs_equality(target.native(), a.native())
    return target


def minimum(exprs: Sequence[IntExpr]) -> IntExpr:
    """Returns a variable equal to the minimum of the expressions."""
    if not exprs:
        raise ValueError("min of an empty collection")
    if len(exprs) == 1:
        return exprs[0]
    model = exprs[0].model
    bounds = [e.bounds() for e in exprs]
    target = model.new_aux_int_var(
        min(lo for lo, _ in bounds), min(hi for _, hi in bounds)
    )
    model.native.add_min_equality(target.native(), [e.native() for e in exprs])
    return target


def maximum(exprs: Sequence[IntExpr]) -> IntExpr:
    """Returns a variable equal to the maximum of the expressions."""
    if not exprs:
        raise ValueError("max of an empty collection")
    if len(exprs) == 1:
        return exprs[0]
    model = exprs[0].model
    bounds = [e.bounds() for e in exprs]
    target = model.new_aux_int_var(
        max(lo for lo, _ in bounds), max(hi for _, hi in bounds)
    )
    model.native.add_max_equality(target.native(), [e.native() for e in exprs])
    return target


def element(exprs: Sequence[IntExpr], index: IntExpr) -> IntExpr:
    """Returns a variable equal to exprs[index]."""
    if not exprs:
        raise ValueError("element of an empty collection")
    model = index.model
    if index.is_constant():
        if not 0 <= index.offset < len(exprs):
            raise IndexError(
                f"element index {index.offset} out of range [0, {len(exprs)})"
            )
        return exprs[index.offset]
    if all(e.is_constant() for e in exprs):
        values = [e.offset for e in exprs]
        lo, hi = min(values), max(values)
    else:
        bounds = [e.bounds() for e in exprs]
        lo, hi = min(b[0] for b in bounds), max(b[1] for b in bounds)
    target = model.new_aux_int_var(lo, hi)
    model.native.add_element(
        index.affine(), [e.affine() for e in exprs], target.native()
    )
    return target
