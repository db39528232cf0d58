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

"""House building with clean and dirty houses.

Two workers build five houses. Plumbing, ceiling and painting need a clean
house while masonry, carpentry, roofing and windows make it dirty. Cleaning a
house takes one day. Minimize the date when the last house is delivered.
"""

from typing import Optional, Sequence

from absl import app
from absl import flags

from optdsl.cp import cp_model
from optdsl.cp.cp_model import CpModel

_TIME_LIMIT = flags.DEFINE_float(
    "time_limit", 30.0, "Time limit in seconds.", allow_override=True
)
_FAIL_LIMIT = flags.DEFINE_integer("fail_limit", 0, "Conflict limit, 0 for none.")

NB_WORKERS = 2
RELEASE_DATES = [31, 0, 90, 120, 90]

CLEAN = 0
DIRTY = 1

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

STATES = {
    "masonry": DIRTY,
    "carpentry": DIRTY,
    "plumbing": CLEAN,
    "ceiling": CLEAN,
    "roofing": DIRTY,
    "painting": CLEAN,
    "windows": DIRTY,
}


def _state_name(v: int) -> str:
    if v == CLEAN:
        return "Clean"
    if v == DIRTY:
        return "Dirty"
    if v == cp_model.NO_STATE:
        return "None"
    return "Unknown"


def solve_sched_state(time_limit: float = 30.0, fail_limit: int = 0) -> Optional[int]:
    """Returns the delivery date of the last house."""
    with CpModel("SchedState") as model:
        workers_usage = model.cumul_function_expr()
        all_tasks = []
        ends = []
        house_states = []
        for house, release_date in enumerate(RELEASE_DATES):
            tasks = {
                name: model.interval_var(size=duration, name=f"H{house}-{name}")
                for name, duration in TASKS
            }
            workers_usage += model.sum(model.pulse(a, 1) for a in tasks.values())
            tasks["masonry"].start_min = release_date
            for before, after in PRECEDENCES:
                model.add(tasks[before] < tasks[after])

            ttime = model.transition_distance(2)
            ttime.set_value(DIRTY, CLEAN, 1)
            house_state = model.state_function(ttime, name=f"house{house}")
            for name, state in STATES.items():
                model.add(model.always_equal(house_state, tasks[name], state))

            ends.append(model.end_of(tasks["moving"]))
            all_tasks.extend(tasks.values())
            house_states.append(house_state)

        model.add(workers_usage <= NB_WORKERS)
        model.minimize(model.max(ends))

        if not model.solve(time_limit=time_limit, fail_limit=fail_limit):
            print("No solution found.")
            return None
        objective = int(model.get_objective_value())
        print(f"Solution with objective {objective}")
        print("Tasks:")
        for a in all_tasks:
            print(model.get_domain(a))
        print("Workers usage:")
        for i in range(model.get_number_of_segments(workers_usage)):
            print(
                f"# Workers is {model.get_segment_value(workers_usage, i)} in"
                f" [{model.get_segment_start(workers_usage, i)} .."
                f" {model.get_segment_end(workers_usage, i)})"
            )
        print("House states:")
        for h, f in enumerate(house_states):
            for i in range(model.get_number_of_segments(f)):
                start = model.get_segment_start(f, i)
                end = model.get_segment_end(f, i)
                print(
                    f"House {h} has state {_state_name(model.get_segment_value(f, i))}"
                    f" from {'Min' if start == cp_model.INTERVAL_MIN else start}"
                    f" to {'Max' if end > cp_model.INTERVAL_MAX else end - 1}"
                )
        return objective


def main(argv: Sequence[str]) -> None:
    if len(argv) > 1:
        raise app.UsageError("Too many command-line arguments.")
    solve_sched_state(_TIME_LIMIT.value, _FAIL_LIMIT.value)


if __name__ == "__main__":
    app.run(main)
