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

"""Transportation with a piecewise linear cost.

Ships goods from supplies to demands. The cost of a route is a piecewise
linear function of the quantity shipped: convex (the unit cost grows with the
quantity) or concave (volume discounts).
"""

from typing import List, Optional, Sequence, Tuple

from absl import app
from absl import flags

from optdsl.mp.mp_model import MpModel

_CONVEX = flags.DEFINE_bool("convex", True, "Convex or concave transport costs.")
_SOLVER = flags.DEFINE_string(
    "solver", "scip", "The model_builder backend.", allow_override=True
)

SUPPLIES = [1000.0, 850.0, 1250.0]
DEMANDS = [900.0, 1200.0, 600.0, 400.0]

# Unit costs below 200, between 200 and 400 and above 400.
CONVEX_COSTS = (30.0, 80.0, 130.0)
CONCAVE_COSTS = (120.0, 80.0, 50.0)


def solve_transport(
    convex: bool = True, solver: str = "scip"
) -> Optional[Tuple[float, List[List[float]]]]:
    """Returns the cost and the quantity shipped on each route."""
    with MpModel("transport", solver_name=solver) as model:
        x = [
            [model.num_var(0.0, supply, f"x[{s},{d}]") for d in range(len(DEMANDS))]
            for s, supply in enumerate(SUPPLIES)
        ]
        for s, supply in enumerate(SUPPLIES):
            model.add(model.sum(x[s]) == supply)
        for d, demand in enumerate(DEMANDS):
            model.add(model.sum(x[s][d] for s in range(len(SUPPLIES))) == demand)

        low, mid, high = CONVEX_COSTS if convex else CONCAVE_COSTS
        f = model.piecewise_linear(
            low, [(200.0, 200.0 * low), (400.0, 200.0 * low + 200.0 * mid)], high
        )
        y = [[f(x[s][d]) for d in range(len(DEMANDS))] for s in range(len(SUPPLIES))]
        model.minimize(model.sum(v for row in y for v in row))

        if not model.solve():
            print("Problem has no solution")
            return None
        cost = model.get_objective_value()
        print(f"Solution status: {model.get_status().name}")
        shipped = []
        for s, row in enumerate(x):
            values = [model.get_value(v) for v in row]
            print(f"   {s}: " + "\t".join(f"{v:g}" for v in values))
            shipped.append(values)
        print(f"   Cost = {cost:g}")
        return cost, shipped


def main(argv: Sequence[str]) -> None:
    if len(argv) > 1:
        raise app.UsageError("Too many command-line arguments.")
    solve_transport(_CONVEX.value, _SOLVER.value)


if __name__ == "__main__":
    app.run(main)
