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

"""Building a house with earliness and tardiness costs.

Some tasks cost when they start before their release date, moving costs when
it ends after the due date. Minimize the total cost.
"""

from typing import Dict, Optional, Sequence, Tuple

from absl import app
from absl import flags

from optdsl.cp.cp_model import CpModel, IntervalVar

_TIME_LIMIT = flags.DEFINE_float(
    "time_limit", 30.0, "Time limit in seconds.", allow_override=True
)
_USE_FUNCTION = flags.DEFINE_bool(
    "use_function", True, "Models the costs with piecewise linear functions."
)

HORIZON = 1000

TASKS = [
    ("masonry", 35),
    ("carpentry", 15),
    ("plumbing", 40),
    ("ceiling", 15),
    ("roofing", 5),
    ("painting", 10),
    ("windows", 5),
    ("facade", 10),
    ("garden", 5),
    ("moving", 5),
]

PRECEDENCES = [
    ("masonry", "carpentry"),
    ("masonry", "plumbing"),
    ("masonry", "ceiling"),
    ("carpentry", "roofing"),
    ("ceiling", "painting"),
    ("roofing", "windows"),
    ("roofing", "facade"),
    ("plumbing", "facade"),
    ("roofing", "garden"),
    ("plumbing", "garden"),
    ("windows", "moving"),
    ("facade", "moving"),
    ("garden", "moving"),
    ("painting", "moving"),
]

# task, release date, weight
EARLINESS = [("masonry", 25, 200), ("carpentry", 75, 300), ("ceiling", 75, 100)]
# task, due date, weight
TARDINESS = [("moving", 100, 400)]


def _earliness_cost(model: CpModel, task: IntervalVar, rd: int, weight: int, use_function: bool):
    if use_function:
        f = model.piecewise_linear_function([rd], [-weight, 0], rd, 0)
        return model.start_eval(task, f)
    return weight * model.max(0, rd - model.start_of(task))


def _tardiness_cost(model: CpModel, task: IntervalVar, dd: int, weight: int, use_function: bool):
    if use_function:
        f = model.piecewise_linear_function([dd], [0, weight], dd, 0)
        return model.end_eval(task, f)
    return weight * model.max(0, model.end_of(task) - dd)


def solve_sched_time(
    time_limit: float = 30.0, use_function: bool = True
) -> Optional[Tuple[float, Dict[str, int]]]:
    """Returns the cost and the start of each task."""
    with CpModel("SchedTime") as model:
        tasks = {
            name: model.interval_var(size=duration, end_max=HORIZON, name=name)
            for name, duration in TASKS
        }
        for before, after in PRECEDENCES:
            model.add(tasks[before] < tasks[after])

        cost = model.sum(
            [
                _earliness_cost(model, tasks[name], rd, weight, use_function)
                for name, rd, weight in EARLINESS
            ]
            + [
                _tardiness_cost(model, tasks[name], dd, weight, use_function)
                for name, dd, weight in TARDINESS
            ]
        )
        model.minimize(cost)

        if not model.solve(time_limit=time_limit):
            print("No solution found.")
            return None
        objective = model.get_objective_value()
        print(f"Solution with objective {objective}")
        for a in tasks.values():
            print(model.get_domain(a))
        return objective, {name: model.get_start(a) for name, a in tasks.items()}


def main(argv: Sequence[str]) -> None:
    if len(argv) > 1:
        raise app.UsageError("Too many command-line arguments.")
    solve_sched_time(_TIME_LIMIT.value, _USE_FUNCTION.value)


if __name__ == "__main__":
    app.run(main)
