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

"""Places 21 squares of different sizes into a 112 x 112 square.

Each square is a pair of intervals, one on each axis. The squares fill the
large square exactly, so the sum of the heights of the squares crossing any
vertical (or horizontal) line is 112.
"""

from typing import List, Optional, Sequence, Tuple

from absl import app
from absl import flags

from optdsl.cp.cp_model import CpModel

_TIME_LIMIT = flags.DEFINE_float(
    "time_limit", 60.0, "Time limit in seconds.", allow_override=True
)
_PARAMS = flags.DEFINE_string(
    "params", "", "Sat solver parameters.", allow_override=True
)

SIZE_SQUARE = 112
SIZES = [50, 42, 37, 35, 33, 29, 27, 25, 24, 19, 18, 17, 16, 15, 11, 9, 8, 7, 6, 4, 2]

Placement = Tuple[int, int, int, int]


def solve_sched_square(
    time_limit: float = 60.0,
    params: str = "",
    size_square: int = SIZE_SQUARE,
    sizes: Sequence[int] = SIZES,
) -> Optional[List[Placement]]:
    """Returns the (x_start, x_end, y_start, y_end) of each square."""
    nb_squares = len(sizes)
    with CpModel("SchedSquare") as model:
        x = [
            model.interval_var(size=s, end_max=size_square, name=f"X({i})")
            for i, s in enumerate(sizes)
        ]
        y = [
            model.interval_var(size=s, end_max=size_square, name=f"Y({i})")
            for i, s in enumerate(sizes)
        ]
        rx = model.sum(model.pulse(x[i], sizes[i]) for i in range(nb_squares))
        ry = model.sum(model.pulse(y[i], sizes[i]) for i in range(nb_squares))

        for i in range(nb_squares):
            for j in range(i):
                model.add(
                    (model.end_of(x[i]) <= model.start_of(x[j]))
                    | (model.end_of(x[j]) <= model.start_of(x[i]))
                    | (model.end_of(y[i]) <= model.start_of(y[j]))
                    | (model.end_of(y[j]) <= model.start_of(y[i]))
                )

        model.add(model.always_in(rx, 0, size_square, size_square, size_square))
        model.add(model.always_in(ry, 0, size_square, size_square, size_square))

        model.set_search_phases(model.search_phase(x), model.search_phase(y))

        if not model.solve(time_limit=time_limit, params=params):
            print("No solution found.")
            return None
        placements = []
        for i in range(nb_squares):
            p = (
                model.get_start(x[i]),
                model.get_end(x[i]),
                model.get_start(y[i]),
                model.get_end(y[i]),
            )
            print(f"Square {i}: [{p[0]},{p[1]}] x [{p[2]},{p[3]}]")
            placements.append(p)
        return placements


def main(argv: Sequence[str]) -> None:
    if len(argv) > 1:
        raise app.UsageError("Too many command-line arguments.")
    solve_sched_square(_TIME_LIMIT.value, _PARAMS.value)


if __name__ == "__main__":
    app.run(main)
