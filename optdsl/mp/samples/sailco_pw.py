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

"""Sailco: how many sailboats to build in each period.

Boats built up to the regular capacity cost the regular cost, extra boats
cost more. Boats in inventory cost at each period. The production cost is a
piecewise linear function of the number of boats. Minimize the total cost.
"""

from typing import Dict, Optional, Sequence

from absl import app
from absl import flags

from optdsl.mp.mp_model import MpModel

_SOLVER = flags.DEFINE_string(
    "solver", "scip", "The model_builder backend.", allow_override=True
)

NB_PERIODS = 4
DEMANDS = {1: 40, 2: 60, 3: 75, 4: 25}

REGULAR_COST = 400.0
CAPACITY = 40
EXTRA_COST = 450.0

INITIAL_INVENTORY = 10
INVENTORY_COST = 20.0


def solve_sailco(solver: str = "scip") -> Optional[Dict[str, float]]:
    """Returns the total cost and the KPIs of the best plan."""
    periods0 = range(NB_PERIODS + 2)
    periods1 = range(1, NB_PERIODS + 2)
    max_boats = sum(DEMANDS.values())
    with MpModel("sailcopw", solver_name=solver) as model:
        boats = model.num_vars(periods1, ub=max_boats, namer=lambda t: f"boat {t}")
        inventory = model.num_vars(periods0, namer=lambda t: f"inventory {t}")

        # Free up to zero boats, then the regular cost up to the capacity, then
        # the extra cost.
        production_cost = model.piecewise_linear(
            0.0, [(0.0, 0.0), (CAPACITY, CAPACITY * REGULAR_COST)], EXTRA_COST
        )
        total_production_cost = model.add_kpi(
            model.sum(production_cost(boats[t]) for t in periods1),
            "Total production cost",
        )
        total_inventory_cost = model.add_kpi(
            INVENTORY_COST * model.sum(inventory[t] for t in periods1),
            "Total inventory cost",
        )
        model.minimize(total_production_cost + total_inventory_cost)

        model.add(inventory[0] == INITIAL_INVENTORY)
        for t in periods1:
            model.add(
                boats[t] + inventory[t - 1] == inventory[t] + DEMANDS.get(t, 0),
                name=f"balance_{t}",
            )
        model.print_information()

        if not model.solve():
            print("Problem has no solution")
            return None
        result = model.report_kpis()
        result["cost"] = model.get_objective_value()
        print(f"Total cost: {result['cost']:g}")
        for t in periods1:
            print(
                f"Period {t}: {model.get_value(boats[t]):g} boats,"
                f" {model.get_value(inventory[t]):g} in inventory"
            )
        return result


def main(argv: Sequence[str]) -> None:
    if len(argv) > 1:
        raise app.UsageError("Too many command-line arguments.")
    solve_sailco(_SOLVER.value)


if __name__ == "__main__":
    app.run(main)
