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

"""House building with a pool of workers and a cash budget.

At most three workers are busy at any time. Each task costs 200 per day of
work, paid when it starts, and the cash received every 60 days must never go
negative. Minimize the date when the last house is delivered.
"""

from typing import List, Optional, Sequence

from absl import app
from absl import flags

from optdsl.cp.cp_model import CpModel, CumulFunctionExpr, IntervalVar

_TIME_LIMIT = flags.DEFINE_float(
    "time_limit", 30.0, "Time limit in seconds.", allow_override=True
)

NB_WORKERS = 3
HORIZON = 400
RELEASE_DATES = [31, 0, 90, 120, 90]

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


def solve_sched_cumul(time_limit: float = 30.0) -> Optional[int]:
    """Returns the delivery date of the last house."""
    with CpModel("SchedCumul") as model:
        workers_usage: CumulFunctionExpr = model.cumul_function_expr()
        cash: CumulFunctionExpr = model.cumul_function_expr()
        for p in range(5):
            cash += model.step(60 * p, 30000)

        all_tasks: List[IntervalVar] = []
        ends = []
        for house, release_date in enumerate(RELEASE_DATES):
            tasks = {
                name: model.interval_var(
                    size=duration, end_max=HORIZON, name=f"H{house}-{name}"
                )
                for name, duration in TASKS
            }
            workers_usage += model.sum(model.pulse(a, 1) for a in tasks.values())
            cash -= model.sum(
                model.step_at_start(a, 200 * a.size_min) for a in tasks.values()
            )
            tasks["masonry"].start_min = release_date
            for before, after in PRECEDENCES:
                model.add(tasks[before] < tasks[after])
            ends.append(model.end_of(tasks["moving"]))
            all_tasks.extend(tasks.values())

        model.add(cash >= 0)
        model.add(workers_usage <= NB_WORKERS)
        model.minimize(model.max(ends))

        if not model.solve(time_limit=time_limit):
            print("No solution found.")
            return None
        objective = int(model.get_objective_value())
        print(f"Solution with objective {objective}")
        for a in all_tasks:
            print(model.get_domain(a))
        for i in range(model.get_number_of_segments(cash)):
            print(
                f"Cash is {model.get_segment_value(cash, i)} in"
                f" [{model.get_segment_start(cash, i)} .."
                f" {model.get_segment_end(cash, i)})"
            )
        for i in range(model.get_number_of_segments(workers_usage)):
            print(
                f"# Workers is {model.get_segment_value(workers_usage, i)} in"
                f" [{model.get_segment_start(workers_usage, i)} .."
                f" {model.get_segment_end(workers_usage, i)})"
            )
        return objective


def main(argv: Sequence[str]) -> None:
    if len(argv) > 1:
        raise app.UsageError("Too many command-line arguments.")
    solve_sched_cumul(_TIME_LIMIT.value)


if __name__ == "__main__":
    app.run(main)
