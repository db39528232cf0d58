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

"""House building with worker calendars.

Two workers, Joe and Jim, build five houses. Each one has a calendar of week
ends and holidays: a task makes no progress on days off, and cannot start or
end on a day off. Minimize the date when the last house is delivered.
"""

from typing import Dict, List, Optional, Sequence, Tuple

from absl import app
from absl import flags

from optdsl.cp.cp_model import CpModel, IntervalVar

_TIME_LIMIT = flags.DEFINE_float(
    "time_limit", 30.0, "Time limit in seconds.", allow_override=True
)
_HOUSES = flags.DEFINE_integer(
    "houses", 5, "Number of houses.", allow_override=True
)

NB_HOUSES = 5
HORIZON = 2 * 365

# name, duration in working days
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

JOE_TASKS = ["masonry", "carpentry", "roofing", "facade", "garden"]

JOE_HOLIDAYS = [(5, 12), (124, 131), (215, 236), (369, 376), (495, 502), (579, 600)]
JIM_HOLIDAYS = [(26, 40), (201, 225), (306, 313), (397, 411), (565, 579)]


def _make_house(
    model: CpModel, house: int
) -> Tuple[Dict[str, IntervalVar], List[IntervalVar], List[IntervalVar]]:
    tasks = {
        name: model.interval_var(size=duration, end_max=HORIZON, name=f"H{house}-{name}")
        for name, duration in TASKS
    }
    for before, after in PRECEDENCES:
        model.add(tasks[before] < tasks[after])
    joe = [tasks[name] for name in JOE_TASKS]
    jim = [a for name, a in tasks.items() if name not in JOE_TASKS]
    return tasks, joe, jim


def _calendar(model: CpModel, holidays: Sequence[Tuple[int, int]]):
    calendar = model.num_to_num_step_function()
    calendar.set_value(0, HORIZON, 100)
    for w in range(2 * 52):
        calendar.set_value(5 + 7 * w, 7 + 7 * w, 0)
    for start, end in holidays:
        calendar.set_value(start, end, 0)
    return calendar


def solve_sched_calendar(
    time_limit: float = 30.0, nb_houses: int = NB_HOUSES
) -> Optional[Dict[str, int]]:
    """Returns the delivery date of the last house and the first masonry task."""
    with CpModel("SchedCalendar") as model:
        houses = [_make_house(model, h) for h in range(nb_houses)]
        joe_tasks = [a for _, joe, _ in houses for a in joe]
        jim_tasks = [a for _, _, jim in houses for a in jim]

        # Intensities are set before no_overlap creates the CP-SAT intervals.
        for tasks, calendar in (
            (joe_tasks, _calendar(model, JOE_HOLIDAYS)),
            (jim_tasks, _calendar(model, JIM_HOLIDAYS)),
        ):
            for a in tasks:
                a.set_intensity(calendar)
                model.add(model.forbid_start(a, calendar))
                model.add(model.forbid_end(a, calendar))

        model.add(model.no_overlap(joe_tasks))
        model.add(model.no_overlap(jim_tasks))

        model.minimize(model.max(model.end_of(tasks["moving"]) for tasks, _, _ in houses))

        if not model.solve(time_limit=time_limit):
            print("No solution found.")
            return None
        objective = int(model.get_objective_value())
        print(f"Solution with objective {objective}")
        for tasks, _, _ in houses:
            for a in tasks.values():
                print(model.get_domain(a))
        masonry = houses[0][0]["masonry"]
        return {
            "objective": objective,
            "masonry_start": model.get_start(masonry),
            "masonry_end": model.get_end(masonry),
            "masonry_size": model.get_size(masonry),
            "masonry_length": model.get_length(masonry),
        }


def main(argv: Sequence[str]) -> None:
    if len(argv) > 1:
        raise app.UsageError("Too many command-line arguments.")
    solve_sched_calendar(_TIME_LIMIT.value, _HOUSES.value)


if __name__ == "__main__":
    app.run(main)
