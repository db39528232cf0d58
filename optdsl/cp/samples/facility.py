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

"""Capacitated facility location.

Each store is supplied by one open location. A location has a capacity in
number of stores and a fixed opening cost. Minimize the opening costs plus
the supply costs.
"""

from typing import Optional, Sequence, Tuple

from absl import app
from absl import flags

from optdsl.cp.cp_model import CpModel
from optdsl.modeler import default_namer

_TIME_LIMIT = flags.DEFINE_float(
    "time_limit", 30.0, "Time limit in seconds.", allow_override=True
)

CAPACITY = [3, 1, 2, 4, 1]
FIXED_COST = [480, 200, 320, 340, 300]
COST = [
    [24, 74, 31, 51, 84],
    [57, 54, 86, 61, 68],
    [57, 67, 29, 91, 71],
    [54, 54, 65, 82, 94],
    [98, 81, 16, 61, 27],
    [13, 92, 34, 94, 87],
    [54, 72, 41, 12, 78],
    [54, 64, 65, 89, 89],
]


def solve_facility(time_limit: float = 30.0) -> Optional[Tuple[int, Sequence[int]]]:
    """Returns the total cost and the location of each store."""
    nb_locations = len(CAPACITY)
    nb_stores = len(COST)
    with CpModel("Facility") as model:
        suppliers = model.int_vars(
            nb_stores, 0, nb_locations - 1, default_namer("supplier")
        )
        is_open = model.int_vars(nb_locations, 0, 1, default_namer("open"))

        for supplier in suppliers:
            model.add(model.element(is_open, supplier) == 1)

        for j in range(nb_locations):
            model.add(model.count(suppliers, j) <= CAPACITY[j])

        fixed_cost = model.scal_prod(FIXED_COST, is_open)
        variable_cost = model.sum(
            model.element(COST[s], suppliers[s]) for s in range(nb_stores)
        )
        model.minimize(fixed_cost + variable_cost)

        if not model.solve(time_limit=time_limit):
            print("No solution found.")
            return None
        objective = int(model.get_objective_value())
        print(f"Objective value: {objective}")
        for j in range(nb_locations):
            print(f"\tLocation {j}: {model.get_value(is_open[j])}")
        locations = [model.get_value(s) for s in suppliers]
        for s, j in enumerate(locations):
            print(f"\tSupplier of store {s}: location {j}")
        return objective, locations


def main(argv: Sequence[str]) -> None:
    if len(argv) > 1:
        raise app.UsageError("Too many command-line arguments.")
    solve_facility(_TIME_LIMIT.value)


if __name__ == "__main__":
    app.run(main)
