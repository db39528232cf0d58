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

"""Delivers orders with a single configurable truck.

Each order is a quantity of a product of a given color. The truck is
configured to carry one, two or three colors; the configuration sets its
capacity and its loading cost, and changing configuration has a cost. A
travel only serves one customer. Minimize first the configuration and loading
cost, then the number of travels.
"""

from typing import Dict, Optional, Sequence

from absl import app
from absl import flags

from optdsl.cp.cp_model import CpModel

_TIME_LIMIT = flags.DEFINE_float(
    "time_limit", 20.0, "Time limit in seconds.", allow_override=True
)
_LOG_PERIOD = flags.DEFINE_integer(
    "log_period", -1, "Logs the search when >= 0.", allow_override=True
)

NB_TRUCK_CONFIGS = 7
NB_ORDERS = 21
NB_CUSTOMERS = 3
NB_TRUCKS = 15  # Max number of travels.

MAX_TRUCK_CONFIG_LOAD = [11, 11, 11, 11, 10, 10, 10]
MAX_LOAD = max(MAX_TRUCK_CONFIG_LOAD)

CUSTOMER_OF_ORDER = [0, 0, 0, 0, 0, 0, 0, 1, 1, 1, 1, 1, 1, 1, 1, 2, 2, 2, 2, 2, 2]
VOLUMES = [3, 4, 3, 2, 5, 4, 11, 4, 5, 2, 4, 7, 3, 5, 2, 5, 6, 11, 1, 6, 3]
COLORS = [1, 2, 0, 1, 1, 1, 0, 0, 0, 0, 2, 2, 2, 0, 2, 1, 0, 2, 0, 0, 0]

# Cost of loading the truck in a given configuration.
TRUCK_COST = [2, 2, 2, 3, 3, 3, 4]

# Cost of switching from configuration i to configuration j.
TRANSITION_COST = [
    [0, 0, 0, 10, 10, 10, 15],
    [0, 0, 0, 10, 10, 10, 15],
    [0, 0, 0, 10, 10, 10, 15],
    [3, 3, 3, 0, 10, 10, 15],
    [3, 3, 3, 10, 0, 10, 15],
    [3, 3, 3, 10, 10, 0, 15],
    [3, 3, 3, 10, 10, 10, 0],
]

# Configurations able to carry each color.
ALLOWED_CONFIGS = [[0, 3, 4, 6], [1, 3, 5, 6], [2, 4, 5, 6]]


def solve_truck_fleet(
    time_limit: float = 20.0, log_period: int = -1
) -> Optional[Dict[str, int]]:
    """Returns the cost, the number of travels and the assignment of orders."""
    with CpModel("TruckFleet") as model:
        truck_configs = model.int_vars(
            NB_TRUCKS, 0, NB_TRUCK_CONFIGS - 1, lambda t: f"configOfTruck({t})"
        )
        where = model.int_vars(NB_ORDERS, 0, NB_TRUCKS - 1, lambda o: f"truckOfOrder({o})")
        load = model.int_vars(NB_TRUCKS, 0, MAX_LOAD, lambda t: f"loadOfTruck({t})")
        num_used = model.int_var(0, NB_TRUCKS, "numUsed")
        customer_of_truck = model.int_vars(
            NB_TRUCKS, 0, NB_CUSTOMERS, lambda t: f"customerOfTruck({t})"
        )
        transition_cost = model.int_vars(
            NB_TRUCKS - 1, 0, 1000, lambda t: f"costOfTruck({t})"
        )

        tuples = [
            (i, j, TRANSITION_COST[i][j])
            for i in range(NB_TRUCK_CONFIGS)
            for j in range(NB_TRUCK_CONFIGS)
        ]
        for t in range(1, NB_TRUCKS):
            model.add(
                model.allowed_assignments(
                    [truck_configs[t - 1], truck_configs[t], transition_cost[t - 1]],
                    tuples,
                )
            )

        model.add(model.pack(load, where, VOLUMES, num_used))
        for t in range(NB_TRUCKS):
            model.add(load[t] <= model.element(MAX_TRUCK_CONFIG_LOAD, truck_configs[t]))

        # The configuration of a truck carries the color of its orders.
        for o in range(NB_ORDERS):
            config = model.int_var(ALLOWED_CONFIGS[COLORS[o]], name=f"configOfOrder({o})")
            model.add(config == model.element(truck_configs, where[o]))

        # One customer per travel.
        for o in range(NB_ORDERS):
            model.add(model.element(customer_of_truck, where[o]) == CUSTOMER_OF_ORDER[o])

        # Unused trucks come last.
        for j in range(1, NB_TRUCKS):
            model.add((load[j - 1] > 0) | (load[j] == 0))

        # Dominance: unused trucks keep the last configuration.
        model.add(load[0] > 0)
        for i in range(1, NB_TRUCKS):
            model.add((load[i] > 0) | (truck_configs[i] == truck_configs[i - 1]))

        # Dominance: travels with the same configuration are grouped.
        for i in range(NB_TRUCKS - 2, 0, -1):
            ct = model.constraint(True)
            for p in range(i + 1, NB_TRUCKS):
                ct = (truck_configs[p] != truck_configs[i - 1]) & ct
                model.add((truck_configs[i] == truck_configs[i - 1]) | ct)

        obj1 = model.sum(
            model.element(TRUCK_COST, truck_configs[t]) * (load[t] != 0)
            for t in range(NB_TRUCKS)
        ) + model.sum(transition_cost)
        obj2 = num_used

        model.set_search_phases(model.search_phase(where))
        model.minimize(model.static_lex(obj1, obj2))

        if not model.solve(time_limit=time_limit, log_period=log_period):
            print("No solution found.")
            return None
        print(f"Objective values: {model.get_objective_values()}")
        result = {
            "cost": model.get_value(obj1),
            "travels": model.get_value(obj2),
        }
        for t in range(model.get_value(num_used)):
            orders = [o for o in range(NB_ORDERS) if model.get_value(where[o]) == t]
            print(
                f"Travel {t}: configuration {model.get_value(truck_configs[t])},"
                f" load {model.get_value(load[t])}, orders {orders}"
            )
        return result


def main(argv: Sequence[str]) -> None:
    if len(argv) > 1:
        raise app.UsageError("Too many command-line arguments.")
    solve_truck_fleet(_TIME_LIMIT.value, _LOG_PERIOD.value)


if __name__ == "__main__":
    app.run(main)
