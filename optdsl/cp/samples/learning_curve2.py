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

"""Two machines with learning curves chosen by the previous type.

Each task runs on one of two machines that process it at different speeds. A
run of tasks of the same type gets faster as the run gets longer, following a
learning curve. Unlike the learning_curve sample, the curve of a run depends on
the machine, on the type of the run and on the type that precedes the run.
Each task picks its curve among alternative intervals, one per curve.
Minimize the makespan.
"""

from typing import Dict, List, Optional, Sequence

from absl import app
from absl import flags

from optdsl.cp import cp_model
from optdsl.cp.cp_model import CpModel
from optdsl.cp.samples.learning_curve import TASK_DUR_M1
from optdsl.cp.samples.learning_curve import TASK_DUR_M2
from optdsl.cp.samples.learning_curve import TASK_TYPE

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

# Speeds in percent by time elapsed since the start of a run: (from, to, speed).
# Curve 0 runs at full speed.
LEARNING_CURVES = [
    [(0, cp_model.INTERVAL_MAX, 100)],
    [(0, 5, 55), (5, 10, 65), (10, 15, 70), (15, 20, 73), (20, 25, 75),
     (25, 30, 77), (30, 35, 78), (35, 40, 80), (40, cp_model.INTERVAL_MAX, 100)],
    [(0, 5, 59), (5, 10, 69), (10, 15, 73), (15, 20, 76), (20, 25, 78),
     (25, 30, 80), (30, cp_model.INTERVAL_MAX, 100)],
    [(0, 5, 63), (5, 10, 73), (10, 15, 77), (15, 20, 79), (20, 25, 81),
     (25, cp_model.INTERVAL_MAX, 100)],
    [(0, 5, 68), (5, 10, 77), (10, 15, 80), (15, cp_model.INTERVAL_MAX, 100)],
]  # fmt: skip

# The curve of a run on a machine, by [previous type][type].
LEARNING_CURVE_M1 = [
    [0, 1, 3, 4, 1],
    [1, 0, 1, 4, 1],
    [3, 1, 0, 1, 2],
    [4, 4, 1, 0, 3],
    [1, 1, 3, 2, 0],
]
LEARNING_CURVE_M2 = [
    [0, 4, 1, 1, 4],
    [4, 0, 1, 3, 2],
    [1, 1, 0, 1, 1],
    [1, 3, 1, 0, 1],
    [4, 2, 1, 1, 0],
]

INITIAL_TYPE = -1
LAST_PRODUCTION_TIME = 0
HORIZON = 2000


def solve_learning_curve2(
    time_limit: float = 60.0, params: str = "", nb_tasks: int = len(TASK_TYPE)
) -> Optional[int]:
    """Returns the makespan of the best schedule of the first nb_tasks tasks."""
    types = TASK_TYPE[:nb_tasks]
    with CpModel("LearningCurve2") as model:
        curves = []
        for pieces in LEARNING_CURVES:
            f = model.num_to_num_step_function()
            f.set_value(0, cp_model.INTERVAL_MAX, 100)
            for start, end, speed in pieces:
                f.set_value(start, end, speed)
            curves.append(f)

        def interval(name: str) -> cp_model.IntervalVar:
            return model.interval_var(start_max=HORIZON, end_max=HORIZON, name=name)

        a = [interval(f"A{i}_TP{t}") for i, t in enumerate(types)]
        offsets = [
            model.int_var(-HORIZON, HORIZON, f"O{i}_TP{t}") for i, t in enumerate(types)
        ]
        prev_types = [
            model.int_var(0, NB_TYPES - 1, f"PrevType{i}_TP{t}")
            for i, t in enumerate(types)
        ]
        machines = []
        for m, durations, table in (
            ("M1", TASK_DUR_M1, LEARNING_CURVE_M1),
            ("M2", TASK_DUR_M2, LEARNING_CURVE_M2),
        ):
            x = [interval(f"A{i}_{m}_TP{t}") for i, t in enumerate(types)]
            lca = [interval(f"LCA{i}_{m}_TP{t}") for i, t in enumerate(types)]
            curve_of: List[cp_model.IntExpr] = []
            for i, t in enumerate(types):
                x[i].size_min = durations[i]
                x[i].set_optional()
                lca[i].size_min = durations[i]
                lca[i].set_optional()
                model.add(model.start_at_start(lca[i], x[i], offsets[i]))
                model.add(model.presence_of(lca[i]) == model.presence_of(x[i]))
                model.add(model.size_of(x[i]) == model.length_of(lca[i]))
                # One pattern per curve, the task picks the curve of its run.
                patterns = []
                for c, curve in enumerate(curves):
                    p = interval(f"LCA_{i}_{c}_{m}_TP{t}")
                    p.size_min = durations[i]
                    p.size_max = durations[i]
                    p.set_optional()
                    p.set_intensity(curve)
                    model.add(model.start_at_start(p, x[i], offsets[i]))
                    patterns.append(p)
                model.add(model.alternative(lca[i], patterns))
                curve_of.append(
                    model.element([table[prev][t] for prev in range(NB_TYPES)], prev_types[i])
                )
                model.add(
                    model.if_then(
                        model.presence_of(lca[i]),
                        model.element([p.presence for p in patterns], curve_of[i])
                        == 1,
                    )
                )
            s = model.interval_sequence_var(x, types, name=m)
            si = model.interval_sequence_var(x, name=f"{m} tasks")
            model.add(model.no_overlap(s))
            model.add(model.no_overlap(si))
            model.add(model.same_sequence(s, si))
            machines.append((m, x, s, si, durations, curve_of))

        for _, x, s, si, _, _ in machines:
            for i, t in enumerate(types):
                run_starts = model.type_of_previous(s, x[i], INITIAL_TYPE, t) != t
                run_goes_on = model.type_of_previous(s, x[i], INITIAL_TYPE, -1) == t
                previous = model.type_of_previous(si, x[i], i, i)
                # A new run starts its curve with the task, after the previous type.
                model.add(model.if_then(run_starts, offsets[i] == model.start_of(x[i])))
                first_type = t if INITIAL_TYPE < 0 else INITIAL_TYPE
                model.add(
                    model.if_then(
                        run_starts,
                        prev_types[i]
                        == model.type_of_previous(s, x[i], first_type, t),
                    )
                )
                # A run goes on with the offset and curve of the previous task.
                model.add(
                    model.if_then(
                        run_goes_on,
                        offsets[i]
                        == model.element(offsets, previous)
                        + model.end_of_previous(s, x[i], LAST_PRODUCTION_TIME)
                        - model.start_of(x[i]),
                    )
                )
                model.add(
                    model.if_then(
                        run_goes_on, prev_types[i] == model.element(prev_types, previous)
                    )
                )

        for i in range(len(types)):
            model.add(model.alternative(a[i], [machines[0][1][i], machines[1][1][i]]))

        model.minimize(model.max(model.end_of(x) for x in a))
        model.set_search_phases(
            model.search_phase(a + machines[0][1] + machines[1][1])
        )

        if not model.solve(time_limit=time_limit, params=params):
            print("No solution found.")
            return None
        makespan = int(model.get_objective_value())
        print(f"Solution with objective {makespan}")
        for m, x, _, si, durations, curve_of in machines:
            index: Dict[int, int] = {id(v): i for i, v in enumerate(x)}
            print(f"Machine {m}:")
            for v in si:
                i = index[id(v)]
                print(
                    f"{model.get_domain(v)}; nominal duration: {durations[i]};"
                    f" type: {types[i]}; previous type: {model.get_value(prev_types[i])};"
                    f" learning curve: {model.get_value(curve_of[i])};"
                    f" time offset: {model.get_value(offsets[i])}"
                )
        return makespan


def main(argv: Sequence[str]) -> None:
    if len(argv) > 1:
        raise app.UsageError("Too many command-line arguments.")
    solve_learning_curve2(_TIME_LIMIT.value, _PARAMS.value, _TASKS.value)


if __name__ == "__main__":
    app.run(main)
