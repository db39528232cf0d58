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

"""Building houses with skilled workers.

Each task of each house is done by one worker who has the skill for it.
Maximize the sum of the skill levels of the workers doing the tasks. Some
workers who start a task must also do a follow up task.
"""

from typing import Dict, Optional, Sequence, Tuple

from absl import app
from absl import flags

from optdsl.cp.cp_model import CpModel

_HOUSES = flags.DEFINE_integer(
    "houses", 5, "Number of houses.", allow_override=True
)
_TIME_LIMIT = flags.DEFINE_float(
    "time_limit", 30.0, "Time limit in seconds.", allow_override=True
)

HORIZON = 318

# name, duration
TASKS = {
    "masonry": 35,
    "carpentry": 15,
    "plumbing": 40,
    "ceiling": 15,
    "roofing": 5,
    "painting": 10,
    "windows": 5,
    "facade": 10,
    "garden": 5,
    "moving": 5,
}

# before, after
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

# (worker, task): level
SKILLS = {
    ("Joe", "masonry"): 9,
    ("Joe", "carpentry"): 7,
    ("Joe", "ceiling"): 5,
    ("Joe", "roofing"): 6,
    ("Joe", "windows"): 8,
    ("Joe", "facade"): 5,
    ("Joe", "garden"): 5,
    ("Joe", "moving"): 6,
    ("Jack", "masonry"): 5,
    ("Jack", "plumbing"): 7,
    ("Jack", "ceiling"): 8,
    ("Jack", "roofing"): 7,
    ("Jack", "painting"): 9,
    ("Jack", "facade"): 5,
    ("Jack", "garden"): 5,
    ("Jim", "carpentry"): 5,
    ("Jim", "painting"): 6,
    ("Jim", "windows"): 5,
    ("Jim", "garden"): 9,
    ("Jim", "moving"): 8,
}

# A worker doing the first task of a pair also does the second one.
CONTINUITIES = [
    ("Joe", "masonry", "carpentry"),
    ("Jack", "roofing", "facade"),
    ("Joe", "carpentry", "roofing"),
    ("Jim", "garden", "moving"),
]


def solve_house_building(
    nb_houses: int = 5, time_limit: float = 30.0
) -> Optional[Tuple[int, Dict[Tuple[int, str], Tuple[int, int]]]]:
    """Returns the total skill and the (start, end) of each task of each house."""
    houses = range(1, nb_houses + 1)
    with CpModel("HouseBuilding") as model:
        tasks = {
            (h, t): model.interval_var(
                size=d, end_max=HORIZON, name=f"house {h} task {t}"
            )
            for h in houses
            for t, d in TASKS.items()
        }
        worker_tasks = {
            (h, skill): model.interval_var(
                optional=True, name=f"house {h} skill {skill}"
            )
            for h in houses
            for skill in SKILLS
        }

        model.maximize(
            model.sum(
                level * model.presence_of(worker_tasks[h, skill])
                for skill, level in SKILLS.items()
                for h in houses
            )
        )

        for h in houses:
            for before, after in PRECEDENCES:
                model.add(model.end_before_start(tasks[h, before], tasks[h, after]))
            for t in TASKS:
                model.add(
                    model.alternative(
                        tasks[h, t],
                        [worker_tasks[h, s] for s in SKILLS if s[1] == t],
                    )
                )
            for worker, task1, task2 in CONTINUITIES:
                model.add(
                    model.presence_of(worker_tasks[h, (worker, task1)])
                    == model.presence_of(worker_tasks[h, (worker, task2)])
                )

        model.print_information()
        if not model.solve(time_limit=time_limit):
            print("No solution found.")
            return None
        objective = int(model.get_objective_value())
        print(f"Objective value: {objective}")
        schedule = {}
        for (h, t), a in tasks.items():
            schedule[h, t] = (model.get_start(a), model.get_end(a))
            print(f"\tFrom {schedule[h, t][0]} to {schedule[h, t][1]}, {t} in house {h}")
        return objective, schedule


def main(argv: Sequence[str]) -> None:
    if len(argv) > 1:
        raise app.UsageError("Too many command-line arguments.")
    solve_house_building(_HOUSES.value, _TIME_LIMIT.value)


if __name__ == "__main__":
    app.run(main)
