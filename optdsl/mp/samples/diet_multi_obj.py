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

"""The diet problem with two objectives.

First minimize the cost. Then, allowing the cost to grow by 0.5, maximize
the number of different foods in the diet.
"""

from typing import Dict, Optional, Sequence

from absl import app
from absl import flags

from optdsl.mp.mp_model import MpModel
from optdsl.mp.samples import diet

_SOLVER = flags.DEFINE_string(
    "solver", "scip", "The model_builder backend.", allow_override=True
)
_TIME_LIMIT = flags.DEFINE_float(
    "time_limit", 60.0, "Time limit of each level.", allow_override=True
)

# The smallest quantity of a food that counts as used.
MIN_QUANTITY = 0.1


def solve_diet_multi_obj(
    solver: str = "scip", time_limit: float = 60.0
) -> Optional[Dict[str, float]]:
    """Returns the cost and the number of foods of the diet."""
    with MpModel("diet", solver_name=solver) as model:
        qty_foods, qty_nutrients = diet.build_diet_model(model)

        cost = model.minimize(
            model.sum(
                qty_foods[f] * float(diet.FOODS.at[f, "unit_cost"])
                for f in diet.FOODS.index
            ),
            name="cost",
        )

        used = model.bool_vars(diet.FOODS.index, namer=lambda f: f"used {f}")
        for f in diet.FOODS.index:
            model.add(model.if_then(used[f] == 0, model.eq(qty_foods[f], 0)))
            model.add(model.if_then(used[f] == 1, model.ge(qty_foods[f], MIN_QUANTITY)))
        variety = model.maximize(model.sum(used.values()), name="number of foods")

        # Both levels minimize: the variety has a negative weight.
        model.minimize(
            model.static_lex(
                [cost, variety],
                weights=[1.0, -1.0],
                priorities=[2, 1],
                abs_tols=[0.5, 0.0],
                rel_tols=[0.0, 0.0],
                name="staticLex",
            )
        )
        model.print_information()

        if not model.solve(time_limit=time_limit):
            print("*** Problem has no solution!")
            return None
        print(f"Solution status = {model.get_status().name}")
        print(f"Objective values = {model.get_objective_values()}")
        result = {
            cost.name: model.get_value(cost.expr),
            variety.name: model.get_value(variety.expr),
        }
        for name, value in result.items():
            print(f"Solution value ({name}) = {value:g}")
        print("Foods:")
        for food, qty in model.get_values(qty_foods).items():
            print(f"\tFood {food}: {qty:g}")
        print("Nutrients:")
        for nutrient, amount in qty_nutrients.items():
            print(f"\tNutrient {nutrient}: {model.get_value(amount):g}")
        return result


def main(argv: Sequence[str]) -> None:
    if len(argv) > 1:
        raise app.UsageError("Too many command-line arguments.")
    solve_diet_multi_obj(_SOLVER.value, _TIME_LIMIT.value)


if __name__ == "__main__":
    app.run(main)
