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

"""The Golomb ruler problem.

Put marks on a ruler such that all the differences between marks are
different, and minimize the length of the ruler.
see: https://en.wikipedia.org/wiki/Golomb_ruler
"""

from typing import List, Optional, Sequence

from absl import app
from absl import flags

from optdsl.cp.cp_model import CpModel
from optdsl.modeler import default_namer

_ORDER = flags.DEFINE_integer("order", 8, "Number of marks.")
_TIME_LIMIT = flags.DEFINE_float(
    "time_limit", 60.0, "Time limit in seconds.", allow_override=True
)
_PARAMS = flags.DEFINE_string(
    "params", "", "Sat solver parameters.", allow_override=True
)


def solve_golomb(
    order: int, time_limit: float = 60.0, params: str = ""
) -> Optional[List[int]]:
    """Returns the positions of the marks of an optimal ruler."""
    max_length = (order - 1) * (order - 1)
    with CpModel("Golomb") as model:
        marks = model.int_vars(order, 0, max_length, default_namer("marks"))

        dist = [marks[i] - marks[j] for i in range(1, order) for j in range(i)]
        model.add(model.all_diff(dist))

        model.add(marks[0] == 0)
        for i in range(1, order):
            model.add(marks[i] > marks[i - 1])

        # symmetry breaking
        model.add(marks[1] - marks[0] < marks[order - 1] - marks[order - 2])

        model.minimize(marks[order - 1])

        print(f"Solving model {model}...")
        if not model.solve(time_limit=time_limit, params=params):
            print("No solution found.")
            return None
        print(f"Solution status: {model.get_status_name()}")
        positions = [model.get_value(m) for m in marks]
        print(f"Position of ruler marks: {positions}")
        return positions


def main(argv: Sequence[str]) -> None:
    if len(argv) > 1:
        raise app.UsageError("Too many command-line arguments.")
    solve_golomb(_ORDER.value, _TIME_LIMIT.value, _PARAMS.value)


if __name__ == "__main__":
    app.run(main)
