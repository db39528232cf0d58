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

"""Shared base of the optdsl model facades.

A `Modeler` collects variables, constraints and objectives and forwards the
solve to a native engine. The two concrete facades are:

* [`CpModel`](#cp_model.CpModel): constraint programming and scheduling on
  top of CP-SAT.
* [`MpModel`](#mp_model.MpModel): linear and mixed integer programming on top
  of model_builder.

This module holds the pieces both facades share: naming, the keyed variable
factories, the expression helpers (`sum`, `scal_prod`, ...), objectives and
the model lifetime (`end()` and the context manager protocol).
"""

import enum
import math
import numbers
from typing import (
    Any,
    Callable,
    Dict,
    Hashable,
    Iterable,
    List,
    Optional,
    TypeVar,
    Union,
)

from absl import logging
import numpy as np

NumberT = Union[int, float, numbers.Real, np.number]
IntegralT = Union[int, numbers.Integral, np.integer]
KeyT = TypeVar("KeyT", bound=Hashable)

# Bounds of integer variables when none are given.
INT_MIN = -(2**31 - 1)
INT_MAX = 2**31 - 1
INFINITY = math.inf


def is_integral(x: Any) -> bool:
    """Checks if x has an integral type (bool excluded)."""
    return isinstance(x, (numbers.Integral, np.integer)) and not isinstance(
        x, (bool, np.bool_)
    )


def is_a_number(x: Any) -> bool:
    """Checks if x is a python or numpy number (bool excluded)."""
    return isinstance(x, (numbers.Number, np.number)) and not isinstance(
        x, (bool, np.bool_)
    )


class ModelEndedError(RuntimeError):
    """Raised when a model is used after end() has been called."""


class NoSolutionError(RuntimeError):
    """Raised when a solution value is queried but no solution is available."""


class ObjectiveSense(enum.Enum):
    """Direction of an objective."""

    MINIMIZE = 1
    MAXIMIZE = 2

    def is_minimize(self) -> bool:
        return self is ObjectiveSense.MINIMIZE


class Objective:
    """An objective: an expression, a sense and an optional name.

    Objectives are created by `Modeler.minimize()` and `Modeler.maximize()`
    and are the current objective of their model until another objective is
    set.
    """

    def __init__(
        self,
        modeler: "Modeler",
        sense: ObjectiveSense,
        expr: Any,
        name: Optional[str] = None,
    ) -> None:
        self.__modeler = modeler
        self.__sense = sense
        self.__expr = expr
        self.__name = name

    @property
    def modeler(self) -> "Modeler":
        return self.__modeler

    @property
    def sense(self) -> ObjectiveSense:
        return self.__sense

    @sense.setter
    def sense(self, sense: ObjectiveSense) -> None:
        self.__sense = sense

    @property
    def expr(self) -> Any:
        return self.__expr

    @expr.setter
    def expr(self, expr: Any) -> None:
        self.__expr = expr

    def clear_expr(self) -> None:
        self.__expr = 0

    @property
    def name(self) -> Optional[str]:
        return self.__name

    @name.setter
    def name(self, name: str) -> None:
        self.__name = name

    def with_name(self, name: str) -> "Objective":
        self.__name = name
        return self

    def __str__(self) -> str:
        direction = "minimize" if self.__sense.is_minimize() else "maximize"
        if self.__name:
            return f"{self.__name}: {direction}({self.__expr})"
        return f"{direction}({self.__expr})"

    def __repr__(self) -> str:
        return f"Objective({self})"


def default_namer(prefix: Optional[str]) -> Callable[..., Optional[str]]:
    """Returns a namer building 'prefix[key]' names, or no names at all."""
    if not prefix:
        return lambda *keys: None

    def namer(*keys: Any) -> str:
        if len(keys) == 1:
            return f"{prefix}[{keys[0]}]"
        return f"{prefix}[{','.join(str(k) for k in keys)}]"

    return namer


class Modeler:
    """Base class of the model facades.

    Subclasses implement the three variable primitives (`num_var`, `int_var`,
    `bool_var`), the linear sum (`_sum`) and the release of the native model
    (`_release`). Everything else is written in terms of those.
    """

    def __init__(self, name: Optional[str] = None) -> None:
        self.__name: Optional[str] = name if name else None
        self.__ended: bool = False

    @property
    def name(self) -> Optional[str]:
        """Returns the name of the model, None if the model is anonymous."""
        return self.__name

    @name.setter
    def name(self, name: str) -> None:
        self.__name = name

    @property
    def ended(self) -> bool:
        return self.__ended

    def check_alive(self) -> None:
        """Raises ModelEndedError if end() has been called on this model."""
        if self.__ended:
            raise ModelEndedError(
                f"model {self.__name or '<anonymous>'!r} has been ended"
            )

    def end(self) -> None:
        """Releases the native model. The modeler cannot be used afterwards."""
        if self.__ended:
            return
        logging.vlog(1, "Ending model %s", self.__name or "<anonymous>")
        self._release()
        self.__ended = True

    def _release(self) -> None:
        pass

    def __enter__(self) -> "Modeler":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.end()

    # Variable primitives.

    def num_var(
        self,
        lb: NumberT = 0.0,
        ub: NumberT = INFINITY,
        name: Optional[str] = None,
    ) -> Any:
        raise NotImplementedError(f"{type(self).__name__} has no numeric variables")

    def int_var(
        self,
        lb: Union[IntegralT, Iterable[IntegralT]] = 0,
        ub: IntegralT = INT_MAX,
        name: Optional[str] = None,
    ) -> Any:
        raise NotImplementedError(f"{type(self).__name__} has no integer variables")

    def bool_var(self, name: Optional[str] = None) -> Any:
        raise NotImplementedError(f"{type(self).__name__} has no boolean variables")

    # Keyed variable factories.

    def num_vars(
        self,
        keys: Iterable[KeyT],
        lb: NumberT = 0.0,
        ub: NumberT = INFINITY,
        namer: Optional[Callable[[KeyT], str]] = None,
    ) -> Dict[KeyT, Any]:
        """Creates one numeric variable per key.

        Args:
          keys: the keys of the returned dictionary.
          lb: the lower bound of all the variables.
          ub: the upper bound of all the variables.
          namer: builds the name of a variable from its key.

        Returns:
          A dictionary mapping each key to its variable.
        """
        namer = namer or default_namer(None)
        return {k: self.num_var(lb, ub, namer(k)) for k in keys}

    def int_vars(
        self,
        keys: Union[IntegralT, Iterable[KeyT]],
        lb: IntegralT = 0,
        ub: IntegralT = INT_MAX,
        namer: Optional[Callable[[Any], str]] = None,
    ) -> Union[List[Any], Dict[KeyT, Any]]:
        """Creates integer variables.

        If `keys` is an integer, a list of that many variables is returned,
        and the namer receives the position of the variable. Otherwise a
        dictionary mapping each key to its variable is returned.
        """
        namer = namer or default_namer(None)
        if is_integral(keys):
            return [self.int_var(lb, ub, namer(i)) for i in range(int(keys))]
        return {k: self.int_var(lb, ub, namer(k)) for k in keys}

    def bool_vars(
        self,
        keys: Iterable[Any],
        keys2: Optional[Iterable[Any]] = None,
        namer: Optional[Callable[..., str]] = None,
    ) -> Dict[Any, Any]:
        """Creates boolean variables keyed by `keys`, or by pairs of keys.

        Args:
          keys: the first set of keys.
          keys2: an optional second set of keys. When given, the result is keyed
            by all pairs (k1, k2), and the namer receives both keys.
          namer: builds the name of a variable from its key(s).

        Returns:
          A dictionary mapping keys to boolean variables.
        """
        namer = namer or default_namer(None)
        if keys2 is None:
            return {k: self.bool_var(namer(k)) for k in keys}
        keys2 = list(keys2)
        return {
            (k1, k2): self.bool_var(namer(k1, k2)) for k1 in keys for k2 in keys2
        }

    # Expression helpers.

    def _sum(self, exprs: List[Any]) -> Any:
        result = 0
        for e in exprs:
            result = result + e
        return result

    def sum(self, *exprs: Any) -> Any:
        """Sums expressions, given either as arguments or as one iterable."""
        if len(exprs) == 1 and not is_a_number(exprs[0]):
            try:
                items = list(exprs[0])
            except TypeError:
                items = [exprs[0]]
        else:
            items = list(exprs)
        return self._sum(items)

    def scal_prod(self, left: Iterable[Any], right: Iterable[Any]) -> Any:
        """Returns sum(left[i] * right[i]). Values and variables can come in any order."""
        left = list(left)
        right = list(right)
        if len(left) != len(right):
            raise ValueError(
                f"scal_prod arguments have different lengths: {len(left)} !="
                f" {len(right)}"
            )
        return self._sum([a * b for a, b in zip(left, right)])

    def diff(self, e1: Any, e2: Any) -> Any:
        return e1 - e2

    def negative(self, e: Any) -> Any:
        return -e

    def prod(self, e1: Any, e2: Any) -> Any:
        return e1 * e2

    # Relational helpers.

    def le(self, e1: Any, e2: Any) -> Any:
        return e1 <= e2

    def ge(self, e1: Any, e2: Any) -> Any:
        return e1 >= e2

    def eq(self, e1: Any, e2: Any) -> Any:
        return e1 == e2

    # Objectives.

    def _set_objective(self, objective: Objective) -> None:
        raise NotImplementedError

    def minimize(self, expr: Any, name: Optional[str] = None) -> Objective:
        """Sets the objective of the model to minimize(expr) and returns it."""
        self.check_alive()
        objective = Objective(self, ObjectiveSense.MINIMIZE, expr, name)
        self._set_objective(objective)
        return objective

    def maximize(self, expr: Any, name: Optional[str] = None) -> Objective:
        """Sets the objective of the model to maximize(expr) and returns it."""
        self.check_alive()
        objective = Objective(self, ObjectiveSense.MAXIMIZE, expr, name)
        self._set_objective(objective)
        return objective

    def __str__(self) -> str:
        return f"{type(self).__name__}({self.__name or ''})"


def lexicographic_order(
    priorities: Optional[Iterable[int]], count: int
) -> List[int]:
    """Returns the positions of `count` objectives in decreasing priority.

    Objectives without explicit priorities keep their order. Equal priorities
    also keep their order.
    """
    if priorities is None:
        return list(range(count))
    priorities = list(priorities)
    if len(priorities) != count:
        raise ValueError(f"expected {count} priorities, got {len(priorities)}")
    return [i for _, i in sorted((-p, i) for i, p in enumerate(priorities))]
