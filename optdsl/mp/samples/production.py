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

"""Produce pasta inside, with limited resources, or buy it outside."""

import io
from typing import Optional, Sequence

from absl import app
from absl import flags
import pandas as pd

from optdsl.modeler import default_namer
from optdsl.mp.mp_model import MpModel

_SOLVER = flags.DEFINE_string(
    "solver", "scip", "The model_builder backend.", allow_override=True
)

_PRODUCTS = """
product    demand  inside_cost  outside_cost
kluski        100          0.6           0.8
capellini     200          0.8           0.9
fettucine     300          0.3           0.4
"""

_RESOURCES = """
resource  capacity
flour           20
eggs            40
"""

# Quantity of each resource needed to produce one unit of each product.
_CONSUMPTIONS = """
product    flour  eggs
kluski       0.5   0.2
capellini    0.4   0.4
fettucine    0.3   0.6
"""


def create_data_model():
    products = pd.read_table(io.StringIO(_PRODUCTS), index_col=0, sep=r"\s+")
    resources = pd.read_table(io.StringIO(_RESOURCES), index_col=0, sep=r"\s+")
    consumptions = pd.read_table(io.StringIO(_CONSUMPTIONS), index_col=0, sep=r"\s+")
    return products, resources, consumptions


def solve_production(solver: str = "scip") -> Optional[float]:
    """Returns the cost of the cheapest production plan."""
    products, resources, consumptions = create_data_model()
    with MpModel("production", solver_name=solver) as model:
        inside = model.num_vars(products.index, namer=default_namer("inside"))
        outside = model.num_vars(products.index, namer=default_namer("outside"))

        for p, demand in products.demand.items():
            model.add(inside[p] + outside[p] >= float(demand), name=f"demand_{p}")

        for r, capacity in resources.capacity.items():
            model.add(
                model.sum(inside[p] * float(consumptions.at[p, r]) for p in products.index)
                <= float(capacity),
                name=f"capacity_{r}",
            )

        total_inside_cost = model.add_kpi(
            model.scal_prod(inside.values(), products.inside_cost.astype(float)),
            "Total inside cost",
        )
        total_outside_cost = model.add_kpi(
            model.scal_prod(outside.values(), products.outside_cost.astype(float)),
            "Total outside cost",
        )
        model.minimize(total_inside_cost + total_outside_cost)
        model.print_information()

        if not model.solve():
            print("Problem has no solution")
            return None
        objective = model.get_objective_value()
        print(f"* Production model solved with objective: {objective:g}")
        print(f"* Total inside cost: {model.get_value(total_inside_cost):g}")
        for p, value in model.get_values(inside).items():
            print(f"Inside production of {p}: {value:g}")
        print(f"* Total outside cost: {model.get_value(total_outside_cost):g}")
        for p, value in model.get_values(outside).items():
            print(f"Outside production of {p}: {value:g}")
        return objective


def main(argv: Sequence[str]) -> None:
    if len(argv) > 1:
        raise app.UsageError("Too many command-line arguments.")
    solve_production(_SOLVER.value)


if __name__ == "__main__":
    app.run(main)
