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

"""Search phases: the order in which the solver fixes variables."""

from typing import Any, List, Optional, Sequence

from ortools.sat.python import cp_model

from optdsl.cp import expressions
from optdsl.cp import interval as interval_lib

# Variable selection strategies.
CHOOSE_FIRST = cp_model.CHOOSE_FIRST
CHOOSE_LOWEST_MIN = cp_model.CHOOSE_LOWEST_MIN
CHOOSE_HIGHEST_MAX = cp_model.CHOOSE_HIGHEST_MAX
CHOOSE_MIN_DOMAIN_SIZE = cp_model.CHOOSE_MIN_DOMAIN_SIZE
CHOOSE_MAX_DOMAIN_SIZE = cp_model.CHOOSE_MAX_DOMAIN_SIZE

# Value selection strategies.
SELECT_MIN_VALUE = cp_model.SELECT_MIN_VALUE
SELECT_MAX_VALUE = cp_model.SELECT_MAX_VALUE
SELECT_LOWER_HALF = cp_model.SELECT_LOWER_HALF
SELECT_UPPER_HALF = cp_model.SELECT_UPPER_HALF
SELECT_MEDIAN_VALUE = cp_model.SELECT_MEDIAN_VALUE


class SearchPhase:
    """A decision strategy over integer expressions or interval variables.

    Interval variables are fixed through their start.
    """

    def __init__(
        self,
        variables: Sequence[Any],
        var_strategy: int = CHOOSE_FIRST,
        value_strategy: int = SELECT_MIN_VALUE,
    ) -> None:
        self.__variables: List[expressions.IntExpr] = []
        for v in variables:
            if isinstance(v, interval_lib.IntervalVar):
                self.__variables.append(v.start)
            elif isinstance(v, expressions.IntExpr):
                self.__variables.append(v)
            else:
                raise TypeError(f"cannot search on a {type(v).__name__}")
        self.__var_strategy = var_strategy
        self.__value_strategy = value_strategy
        self.__decision_vars: Optional[List[expressions.IntVar]] = None

    @property
    def variables(self) -> List[expressions.IntExpr]:
        return self.__variables

    @property
    def var_strategy(self) -> int:
        return self.__var_strategy

    @property
    def value_strategy(self) -> int:
        return self.__value_strategy

    def decision_vars(self) -> List[expressions.IntVar]:
        """Returns the variables to branch on, created once for expressions."""
        if self.__decision_vars is None:
            self.__decision_vars = [v.as_var() for v in self.__variables]
        return self.__decision_vars

    def post(self, native: cp_model.CpModel) -> None:
        """Posts the phase on `native`, a copy of the model."""
        native.add_decision_strategy(
            [
                native.get_int_var_from_proto_index(v.index)
                for v in self.decision_vars()
            ],
            self.__var_strategy,
            self.__value_strategy,
        )

    def __str__(self) -> str:
        names = ", ".join(str(v) for v in self.__variables)
        return f"SearchPhase([{names}])"
