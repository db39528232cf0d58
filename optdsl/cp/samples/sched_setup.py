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

"""Two machines with sequence dependent setup times.

Each task runs on one of two machines, with a duration depending on the
machine. Between two consecutive tasks, a machine needs a setup time that
depends on the types of the tasks; some transitions are forbidden. Minimize
the makespan.
"""

from typing import Optional, Sequence

from absl import app
from absl import flags

from optdsl.cp.cp_model import CpModel

_TIME_LIMIT = flags.DEFINE_float(
    "time_limit", 30.0, "Time limit in seconds.", allow_override=True
)
_PARAMS = flags.DEFINE_string(
    "params", "", "Sat solver parameters.", allow_override=True
)

NB_TYPES = 5

# -1 is a forbidden transition.
SETUP_M1 = [
    [0, 26, 8, 3, -1],
    [22, 0, -1, 4, 22],
    [28, 0, 0, 23, 9],
    [29, -1, -1, 0, 8],
    [26, 17, 11, 7, 0],
]
SETUP_M2 = [
    [0, 5, 28, -1, 2],
    [-1, 0, -1, 7, 10],
    [19, 22, 0, 28, 17],
    [7, 26, 13, 0, -1],
    [13, 17, 26, 20, 0],
]

TASK_TYPE = [
    3, 3, 1, 1, 1, 1, 2, 0, 0, 2,
    4, 4, 3, 3, 2, 3, 1, 4, 4, 2,
    2, 1, 4, 2, 2, 0, 3, 3, 2, 1,
    2, 1, 4, 3, 3, 0, 2, 0, 0, 3,
    2, 0, 3, 2, 2, 4, 1, 2, 4, 3,
]  # fmt: skip
TASK_DUR_M1 = [
    4, 17, 4, 7, 17, 14, 2, 14, 2, 8,
    11, 14, 4, 18, 3, 2, 9, 2, 9, 17,
    18, 19, 5, 8, 19, 12, 17, 11, 6, 3,
    13, 6, 19, 7, 1, 3, 13, 5, 3, 6,
    11, 16, 12, 14, 12, 17, 8, 8, 6, 6,
]  # fmt: skip
TASK_DUR_M2 = [
    12, 3, 12, 15, 4, 9, 14, 2, 5, 9,
    10, 14, 7, 1, 11, 3, 15, 19, 8, 2,
    18, 17, 19, 18, 15, 14, 6, 6, 1, 2,
    3, 19, 18, 2, 7, 16, 1, 18, 10, 14,
    2, 3, 14, 1, 1, 6, 19, 5, 17, 4,
]  # fmt: skip

HORIZON = 1000


def solve_sched_setup(time_limit: float = 30.0, params: str = "") -> Optional[int]:
    """Returns the makespan of the best schedule found."""
    nb_tasks = len(TASK_TYPE)
    with CpModel("SchedSetup") as model:
        setup1 = model.transition_distance(
            [[HORIZON if d < 0 else d for d in row] for row in SETUP_M1]
        )
        setup2 = model.transition_distance(
            [[HORIZON if d < 0 else d for d in row] for row in SETUP_M2]
        )

        a = model.interval_vars(
            nb_tasks, end_max=HORIZON, namer=lambda i: f"A{i}_TP{TASK_TYPE[i]}"
        )
        a1 = model.interval_vars(
            nb_tasks,
            optional=True,
            end_max=HORIZON,
            namer=lambda i: f"A{i}_M1_TP{TASK_TYPE[i]}",
        )
        a2 = model.interval_vars(
            nb_tasks,
            optional=True,
            end_max=HORIZON,
            namer=lambda i: f"A{i}_M2_TP{TASK_TYPE[i]}",
        )
        for i in range(nb_tasks):
            a1[i].size_min = TASK_DUR_M1[i]
            a2[i].size_min = TASK_DUR_M2[i]
            model.add(model.alternative(a[i], [a1[i], a2[i]]))

        s1 = model.interval_sequence_var(a1, TASK_TYPE, name="M1")
        s2 = model.interval_sequence_var(a2, TASK_TYPE, name="M2")
        model.add(model.no_overlap(s1, setup1, True))
        model.add(model.no_overlap(s2, setup2, True))

        model.minimize(model.max(model.end_of(x) for x in a))

        if not model.solve(time_limit=time_limit, params=params):
            print("No solution found.")
            return None
        makespan = int(model.get_objective_value())
        print(f"Solution with objective {makespan}")
        for machine, s in (("1", s1), ("2", s2)):
            print(f"Machine {machine}:")
            for x in s:
                print(model.get_domain(x))
        return makespan


def main(argv: Sequence[str]) -> None:
    if len(argv) > 1:
        raise app.UsageError("Too many command-line arguments.")
    solve_sched_setup(_TIME_LIMIT.value, _PARAMS.value)


if __name__ == "__main__":
    app.run(main)
