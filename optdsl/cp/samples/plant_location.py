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

"""Plant location with capacities.

Each customer is served by one plant. A plant has a capacity, a fixed cost
when it is open, and a cost per customer served. Minimize the total cost.

The data file holds, as whitespace separated integers: the number of
customers and of locations, the cost matrix (one row per customer), the
demands, the fixed costs and the capacities.
"""

import dataclasses
import os
from typing import Iterator, List, Optional, Sequence

from absl import app
from absl import flags

from optdsl.cp.cp_model import CpModel
from optdsl.modeler import default_namer

DEFAULT_DATA = os.path.join(os.path.dirname(__file__), "data", "plant_location.data")

_INPUT = flags.DEFINE_string(
    "input", DEFAULT_DATA, "Input file.", allow_override=True
)
_TIME_LIMIT = flags.DEFINE_float(
    "time_limit", 10.0, "Time limit in seconds.", allow_override=True
)
_LOG_PERIOD = flags.DEFINE_integer(
    "log_period", -1, "Logs the search when >= 0.", allow_override=True
)


@dataclasses.dataclass
class PlantLocationData:
    costs: List[List[int]]
    demands: List[int]
    fixed_costs: List[int]
    capacities: List[int]

    @property
    def nb_customers(self) -> int:
        return len(self.demands)

    @property
    def nb_locations(self) -> int:
        return len(self.capacities)


def read_data(filename: str) -> PlantLocationData:
    with open(filename) as f:
        text = f.read()
    tokens: Iterator[int] = (int(t) for t in text.split())
    nb_customers = next(tokens)
    nb_locations = next(tokens)
    costs = [[next(tokens) for _ in range(nb_locations)] for _ in range(nb_customers)]
    demands = [next(tokens) for _ in range(nb_customers)]
    fixed_costs = [next(tokens) for _ in range(nb_locations)]
    capacities = [next(tokens) for _ in range(nb_locations)]
    return PlantLocationData(costs, demands, fixed_costs, capacities)


def _greedy_assignment(data: PlantLocationData) -> List[int]:
    """Sends each customer to its cheapest plant with room left."""
    room = list(data.capacities)
    assignment = []
    for c in range(data.nb_customers):
        candidates = [w for w in range(data.nb_locations) if room[w] >= data.demands[c]]
        w = min(candidates or range(data.nb_locations), key=lambda w: data.costs[c][w])
        room[w] -= data.demands[c]
        assignment.append(w)
    return assignment


def solve_plant_location(
    filename: str = DEFAULT_DATA, time_limit: float = 10.0, log_period: int = -1
) -> Optional[int]:
    """Returns the cost of the best plan found."""
    data = read_data(filename)
    print(f"Total demand: {sum(data.demands)}")
    with CpModel("PlantLocation") as model:
        cust = model.int_vars(
            data.nb_customers, 0, data.nb_locations - 1, default_namer("cust")
        )
        is_open = model.int_vars(data.nb_locations, 0, 1, default_namer("open"))
        load = [
            model.int_var(0, cap, f"load[{w}]") for w, cap in enumerate(data.capacities)
        ]

        for w in range(data.nb_locations):
            model.add(is_open[w] == (load[w] > 0))
        model.add(model.pack(load, cust, data.demands))

        fixed_cost = model.scal_prod(data.fixed_costs, is_open)
        supply_cost = model.sum(
            model.element(data.costs[c], cust[c]) for c in range(data.nb_customers)
        )
        model.minimize(fixed_cost + supply_cost)

        model.set_starting_point(
            {x: w for x, w in zip(cust, _greedy_assignment(data))}
        )

        if not model.solve(time_limit=time_limit, log_period=log_period):
            print("No solution found.")
            return None
        objective = int(model.get_objective_value())
        print(f"Solution with objective {objective}")
        used = 0
        for w in range(data.nb_locations):
            occupancy = model.get_value(load[w]) / data.capacities[w]
            if model.get_value(is_open[w]):
                used += data.capacities[w]
            print(f"Location {w}: open: {model.get_value(is_open[w])}; occupancy: {occupancy:.2f}")
        print(f"Mean occupancy: {sum(data.demands) / used:.2f}")
        return objective


def main(argv: Sequence[str]) -> None:
    if len(argv) > 1:
        raise app.UsageError("Too many command-line arguments.")
    solve_plant_location(_INPUT.value, _TIME_LIMIT.value, _LOG_PERIOD.value)


if __name__ == "__main__":
    app.run(main)
