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

"""The diet problem: the cheapest diet meeting nutritional needs."""

from typing import Any, Dict, Optional, Sequence, Tuple

from absl import app
from absl import flags
import pandas as pd

from optdsl.mp.mp_model import MpModel

_SOLVER = flags.DEFINE_string(
    "solver", "scip", "The model_builder backend.", allow_override=True
)

FOODS = pd.DataFrame(
    [
        ("Roasted Chicken", 0.84, 0, 10),
        ("Spaghetti W/ Sauce", 0.78, 0, 10),
        ("Tomato,Red,Ripe,Raw", 0.27, 0, 10),
        ("Apple,Raw,W/Skin", 0.24, 0, 10),
        ("Grapes", 0.32, 0, 10),
        ("Chocolate Chip Cookies", 0.03, 0, 10),
        ("Lowfat Milk", 0.23, 0, 10),
        ("Raisin Brn", 0.34, 0, 10),
        ("Hotdog", 0.31, 0, 10),
    ],
    columns=["food", "unit_cost", "qmin", "qmax"],
).set_index("food")

NUTRIENTS = pd.DataFrame(
    [
        ("Calories", 2000, 2500),
        ("Calcium", 800, 1600),
        ("Iron", 10, 30),
        ("Vit_A", 5000, 50000),
        ("Dietary_Fiber", 25, 100),
        ("Carbohydrates", 0, 300),
        ("Protein", 50, 100),
    ],
    columns=["nutrient", "qmin", "qmax"],
).set_index("nutrient")

# Nutrients per unit of food, one row per food.
FOOD_NUTRIENTS = pd.DataFrame(
    [
        [277.4, 21.9, 1.8, 77.4, 0.0, 0.0, 42.2],
        [358.2, 80.2, 2.3, 3055.2, 11.6, 58.3, 8.2],
        [25.8, 6.2, 0.6, 766.3, 1.4, 5.7, 1.0],
        [81.4, 9.7, 0.2, 73.1, 3.7, 21.0, 0.3],
        [15.1, 3.4, 0.1, 24.0, 0.2, 4.1, 0.2],
        [78.1, 6.2, 0.4, 101.8, 0.0, 9.3, 0.9],
        [121.2, 296.7, 0.1, 500.2, 0.0, 11.7, 8.1],
        [115.1, 12.9, 16.8, 1250.2, 4.0, 27.9, 4.0],
        [242.1, 23.5, 2.3, 0.0, 0.0, 18.0, 10.4],
    ],
    index=FOODS.index,
    columns=NUTRIENTS.index,
)


def build_diet_model(model: MpModel) -> Tuple[Dict[str, Any], Dict[str, Any]]:
    """Adds the diet variables and constraints, returns quantities and amounts."""
    qty_foods = model.num_vars(FOODS.index, namer=str)
    for food, row in FOODS.iterrows():
        model.set_lb(qty_foods[food], float(row.qmin))
        model.set_ub(qty_foods[food], float(row.qmax))

    qty_nutrients = {}
    for nutrient, row in NUTRIENTS.iterrows():
        amount = model.sum(
            qty_foods[f] * float(FOOD_NUTRIENTS.at[f, nutrient]) for f in FOODS.index
        )
        qty_nutrients[nutrient] = amount
        model.add_range(float(row.qmin), amount, float(row.qmax), name=nutrient)
        model.add_kpi(amount, f"Total {nutrient}")
    return qty_foods, qty_nutrients


def solve_diet(solver: str = "scip") -> Optional[float]:
    """Returns the cost of the cheapest diet."""
    with MpModel("diet", solver_name=solver) as model:
        qty_foods, qty_nutrients = build_diet_model(model)
        model.minimize(
            model.sum(qty_foods[f] * float(FOODS.at[f, "unit_cost"]) for f in FOODS.index),
            name="cost",
        )
        model.print_information()

        if not model.solve():
            print("*** Problem has no solution!")
            return None
        cost = model.get_objective_value()
        print("Solution found!")
        print(f"Total cost: {cost:g}")
        print("Foods:")
        for food, qty in model.get_values(qty_foods).items():
            print(f"\tFood {food}: {qty:g}")
        print("Nutrients:")
        for nutrient, amount in qty_nutrients.items():
            print(f"\tNutrient {nutrient}: {model.get_value(amount):g}")
        return cost


def main(argv: Sequence[str]) -> None:
    if len(argv) > 1:
        raise app.UsageError("Too many command-line arguments.")
    solve_diet(_SOLVER.value)


if __name__ == "__main__":
    app.run(main)
