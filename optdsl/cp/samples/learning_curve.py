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

"""Two machines with setup times and a learning curve.

Each task runs on one of two machines. Switching between task types costs a
setup time, and some switches are forbidden. A machine learns: a run of tasks
of the same type gets faster as the run gets longer. The speed of a task
depends on the time elapsed since the first task of its run, its "offset".
Minimize the makespan.
"""

from typing import Optional, Sequence

from absl import app
from absl import flags

from optdsl.cp import cp_model
from optdsl.cp.cp_model import CpModel

_TIME_LIMIT = flags.DEFINE_float(
    "time_limit", 60.0, "Time limit in seconds.", allow_override=True
)
_PARAMS = flags.DEFINE_string(
    "params", "", "Sat solver parameters.", allow_override=True
)
_TASKS = flags.DEFINE_integer(
    "tasks", 50, "Number of tasks to schedule.", allow_override=True
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

# The speed, in percent, by time elapsed since the start of a run:
# (from, to, speed). The same curve for all the types.
LEARNING_CURVE = [(5 * k, 5 * k + 5, 60 + 5 * k) for k in range(8)] + [
    (40, cp_model.INTERVAL_MAX, 100)
]

INITIAL_TYPE = -1
LAST_PRODUCTION_TIME = 0
HORIZON = 2000


def _setup(model: CpModel, table: Sequence[Sequence[int]]) -> cp_model.TransitionDistance:
    setup = model.transition_distance(NB_TYPES)
    for i in range(NB_TYPES):
        for j in range(NB_TYPES):
            d = table[i][j]
            setup.set_value(i, j, HORIZON if d < 0 else d)
    return setup


def solve_learning_curve(
    time_limit: float = 60.0, params: str = "", nb_tasks: int = len(TASK_TYPE)
) -> Optional[int]:
    """Returns the makespan of the best schedule of the first nb_tasks tasks."""
    with CpModel("LearningCurve") as model:
        curves = []
        for _ in range(max(TASK_TYPE) + 1):
            f = model.num_to_num_step_function()
            f.set_value(0, cp_model.INTERVAL_MAX, 100)
            for start, end, speed in LEARNING_CURVE:
                f.set_value(start, end, speed)
            curves.append(f)
        setup1 = _setup(model, SETUP_M1)
        setup2 = _setup(model, SETUP_M2)

        def interval(name: str) -> cp_model.IntervalVar:
            return model.interval_var(start_max=HORIZON, end_max=HORIZON, name=name)

        a = [interval(f"A{i}_TP{TASK_TYPE[i]}") for i in range(nb_tasks)]
        a1 = [interval(f"A{i}_M1_TP{TASK_TYPE[i]}") for i in range(nb_tasks)]
        a2 = [interval(f"A{i}_M2_TP{TASK_TYPE[i]}") for i in range(nb_tasks)]
        lca1 = [interval(f"LCA{i}_M1_TP{TASK_TYPE[i]}") for i in range(nb_tasks)]
        lca2 = [interval(f"LCA{i}_M2_TP{TASK_TYPE[i]}") for i in range(nb_tasks)]
        offsets = [
            model.int_var(-HORIZON, HORIZON, f"O{i}_TP{TASK_TYPE[i]}") for i in range(nb_tasks)
        ]

        for i in range(nb_tasks):
            curve = curves[TASK_TYPE[i]]
            for x, lca, duration in ((a1[i], lca1[i], TASK_DUR_M1[i]), (a2[i], lca2[i], TASK_DUR_M2[i])):
                x.size_min = duration
                x.set_optional()
                # lca runs the learning curve from the offset of the task.
                lca.size_min = duration
                lca.set_optional()
                lca.set_intensity(curve)
                model.add(model.start_at_start(lca, x, offsets[i]))
                model.add(model.presence_of(lca) == model.presence_of(x))
                model.add(model.length_of(x) == model.length_of(lca))
            model.add(model.alternative(a[i], [a1[i], a2[i]]))

        s1 = model.interval_sequence_var(a1, TASK_TYPE[:nb_tasks], name="M1")
        s2 = model.interval_sequence_var(a2, TASK_TYPE[:nb_tasks], name="M2")
        model.add(model.no_overlap(s1, setup1, True))
        model.add(model.no_overlap(s2, setup2, True))
        si1 = model.interval_sequence_var(a1, name="M1 tasks")
        si2 = model.interval_sequence_var(a2, name="M2 tasks")
        model.add(model.no_overlap(si1))
        model.add(model.no_overlap(si2))
        model.add(model.same_sequence(s1, si1))
        model.add(model.same_sequence(s2, si2))

        for i in range(nb_tasks):
            for s, si, x in ((s1, si1, a1[i]), (s2, si2, a2[i])):
                t = TASK_TYPE[i]
                # A new run starts its learning curve with the task.
                model.add(
                    model.if_then(
                        model.type_of_previous(s, x, INITIAL_TYPE, t) != t,
                        offsets[i] == model.start_of(x),
                    )
                )
                # A run goes on with the offset of the previous task.
                previous_offset = model.element(
                    offsets, model.type_of_previous(si, x, i, i)
                )
                model.add(
                    model.if_then(
                        model.type_of_previous(s, x, INITIAL_TYPE, -1) == t,
                        offsets[i]
                        == previous_offset
                        + model.end_of_previous(s, x, LAST_PRODUCTION_TIME)
                        - model.start_of(x),
                    )
                )

        model.minimize(model.max(model.end_of(x) for x in a))
        model.set_search_phases(model.search_phase(a + a1 + a2))

        if not model.solve(time_limit=time_limit, params=params):
            print("No solution found.")
            return None
        makespan = int(model.get_objective_value())
        print(f"Solution with objective {makespan}")
        index = {id(x): i for i, x in enumerate(a1)}
        index.update({id(x): i for i, x in enumerate(a2)})
        for machine, si, durations in (("1", si1, TASK_DUR_M1), ("2", si2, TASK_DUR_M2)):
            print(f"Machine {machine}:")
            for x in si:
                i = index[id(x)]
                print(
                    f"{model.get_domain(x)}; nominal duration: {durations[i]};"
                    f" learning curve time offset: {model.get_value(offsets[i])}"
                )
        return makespan


def main(argv: Sequence[str]) -> None:
    if len(argv) > 1:
        raise app.UsageError("Too many command-line arguments.")
    solve_learning_curve(_TIME_LIMIT.value, _PARAMS.value, _TASKS.value)


if __name__ == "__main__":
    app.run(main)
