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

"""Assigns nurses to the shifts of a week.

Each shift needs a number of nurses, some of them with a given skill. Nurses
have vacations, work at most 40 hours, cannot work overlapping shifts, and
some pairs of nurses must (or must not) work together. Minimize the salary
cost, the number of assignments and the deviation of work times from the
average.
"""

import dataclasses
import enum
from typing import Dict, List, Optional, Sequence

from absl import app
from absl import flags

from optdsl.mp.mp_model import MpModel

_SOLVER = flags.DEFINE_string(
    "solver", "scip", "The model_builder backend.", allow_override=True
)
_TIME_LIMIT = flags.DEFINE_float(
    "time_limit", 60.0, "Time limit in seconds.", allow_override=True
)


class WeekDay(enum.IntEnum):
    MONDAY = 0
    TUESDAY = 1
    WEDNESDAY = 2
    THURSDAY = 3
    FRIDAY = 4
    SATURDAY = 5
    SUNDAY = 6


MON, TUE, WED, THU, FRI, SAT, SUN = WeekDay

SKILLS = ["Anaesthesiology", "Cardiac Care", "Geriatrics", "Oncology", "Pediatrics"]

DEPTS = ["Consultation", "Emergency"]

# name, seniority, qualification, pay rate
NURSES = [
    ("Anne", 11, 1, 25),
    ("Bethanie", 4, 5, 28),
    ("Betsy", 2, 2, 17),
    ("Cathy", 2, 2, 17),
    ("Cecilia", 9, 5, 38),
    ("Chris", 11, 4, 38),
    ("Cindy", 5, 2, 21),
    ("David", 1, 2, 15),
    ("Debbie", 7, 2, 24),
    ("Dee", 3, 3, 21),
    ("Gloria", 8, 2, 25),
    ("Isabelle", 3, 1, 16),
    ("Jane", 3, 4, 23),
    ("Janelle", 4, 3, 22),
    ("Janice", 2, 2, 17),
    ("Jemma", 2, 4, 22),
    ("Joan", 5, 3, 24),
    ("Joyce", 8, 3, 29),
    ("Jude", 4, 3, 22),
    ("Julie", 6, 2, 22),
    ("Juliet", 7, 4, 31),
    ("Kate", 5, 3, 24),
    ("Nancy", 8, 4, 32),
    ("Nathalie", 9, 5, 38),
    ("Nicole", 0, 2, 14),
    ("Patricia", 1, 1, 13),
    ("Patrick", 6, 1, 19),
    ("Roberta", 3, 5, 26),
    ("Suzanne", 5, 1, 18),
    ("Vickie", 7, 1, 20),
    ("Wendie", 5, 2, 21),
    ("Zoe", 8, 3, 29),
]

# department, day, start hour, end hour, min and max number of nurses
SHIFTS = [
    ("Emergency", MON, 2, 8, 3, 5),
    ("Emergency", MON, 8, 12, 4, 7),
    ("Emergency", MON, 12, 18, 2, 5),
    ("Emergency", MON, 18, 2, 3, 7),
    ("Consultation", MON, 8, 12, 10, 13),
    ("Consultation", MON, 12, 18, 8, 12),
    ("Cardiac Care", MON, 8, 12, 10, 13),
    ("Cardiac Care", MON, 12, 18, 8, 12),
    ("Emergency", TUE, 8, 12, 4, 7),
    ("Emergency", TUE, 12, 18, 2, 5),
    ("Emergency", TUE, 18, 2, 3, 7),
    ("Consultation", TUE, 8, 12, 10, 13),
    ("Consultation", TUE, 12, 18, 8, 12),
    ("Cardiac Care", TUE, 8, 12, 4, 7),
    ("Cardiac Care", TUE, 12, 18, 2, 5),
    ("Cardiac Care", TUE, 18, 2, 3, 7),
    ("Emergency", WED, 2, 8, 3, 5),
    ("Emergency", WED, 8, 12, 4, 7),
    ("Emergency", WED, 12, 18, 2, 5),
    ("Emergency", WED, 18, 2, 3, 7),
    ("Consultation", WED, 8, 12, 10, 13),
    ("Consultation", WED, 12, 18, 8, 12),
    ("Emergency", THU, 2, 8, 3, 5),
    ("Emergency", THU, 8, 12, 4, 7),
    ("Emergency", THU, 12, 18, 2, 5),
    ("Emergency", THU, 18, 2, 3, 7),
    ("Consultation", THU, 8, 12, 10, 13),
    ("Consultation", THU, 12, 18, 8, 12),
    ("Emergency", FRI, 2, 8, 3, 5),
    ("Emergency", FRI, 8, 12, 4, 7),
    ("Emergency", FRI, 12, 18, 2, 5),
    ("Emergency", FRI, 18, 2, 3, 7),
    ("Consultation", FRI, 8, 12, 10, 13),
    ("Consultation", FRI, 12, 18, 8, 12),
    ("Emergency", SAT, 2, 12, 5, 7),
    ("Emergency", SAT, 12, 20, 7, 9),
    ("Emergency", SAT, 20, 2, 12, 12),
    ("Emergency", SUN, 2, 12, 5, 7),
    ("Emergency", SUN, 12, 20, 7, 9),
    ("Emergency", SUN, 20, 2, 12, 12),
    ("Geriatrics", SUN, 8, 10, 2, 5),
]

NURSE_SKILLS = {
    "Anne": ["Anaesthesiology", "Oncology", "Pediatrics"],
    "Betsy": ["Cardiac Care"],
    "Cathy": ["Anaesthesiology"],
    "Cecilia": ["Anaesthesiology", "Oncology", "Pediatrics"],
    "Chris": ["Cardiac Care", "Oncology", "Geriatrics"],
    "Gloria": ["Pediatrics"],
    "Jemma": ["Cardiac Care"],
    "Joyce": ["Anaesthesiology", "Pediatrics"],
    "Julie": ["Geriatrics"],
    "Juliet": ["Pediatrics"],
    "Kate": ["Pediatrics"],
    "Nancy": ["Cardiac Care"],
    "Nathalie": ["Anaesthesiology", "Geriatrics"],
    "Patrick": ["Oncology"],
    "Suzanne": ["Pediatrics"],
    "Wendie": ["Geriatrics"],
    "Zoe": ["Cardiac Care"],
}

VACATIONS = [
    ("Anne", FRI), ("Anne", SUN), ("Cathy", THU), ("Cathy", TUE),
    ("Joan", THU), ("Joan", SAT), ("Juliet", MON), ("Juliet", TUE),
    ("Juliet", THU), ("Nathalie", SUN), ("Nathalie", THU), ("Isabelle", MON),
    ("Isabelle", THU), ("Patricia", SAT), ("Patricia", WED), ("Nicole", FRI),
    ("Nicole", WED), ("Jude", TUE), ("Jude", FRI), ("Debbie", SAT),
    ("Debbie", WED), ("Joyce", SUN), ("Joyce", THU), ("Chris", THU),
    ("Chris", TUE), ("Cecilia", FRI), ("Cecilia", WED), ("Patrick", SAT),
    ("Patrick", SUN), ("Cindy", SUN), ("Dee", TUE), ("Dee", FRI),
    ("Jemma", FRI), ("Jemma", WED), ("Bethanie", WED), ("Bethanie", TUE),
    ("Betsy", MON), ("Betsy", THU), ("David", MON), ("Gloria", MON),
    ("Jane", SAT), ("Jane", SUN), ("Janelle", WED), ("Janelle", FRI),
    ("Julie", SUN), ("Kate", TUE), ("Kate", MON), ("Nancy", SUN),
    ("Roberta", FRI), ("Roberta", SAT), ("Janice", TUE), ("Janice", FRI),
    ("Suzanne", MON), ("Vickie", WED), ("Vickie", FRI), ("Wendie", THU),
    ("Wendie", SAT), ("Zoe", SAT), ("Zoe", SUN),
]  # fmt: skip

NURSE_ASSOCIATIONS = [("Isabelle", "Dee"), ("Anne", "Patrick")]

NURSE_INCOMPATIBILITIES = [
    ("Patricia", "Patrick"),
    ("Janice", "Wendie"),
    ("Suzanne", "Betsy"),
    ("Janelle", "Jane"),
    ("Gloria", "David"),
    ("Dee", "Jemma"),
    ("Bethanie", "Dee"),
    ("Roberta", "Zoe"),
    ("Nicole", "Patricia"),
    ("Vickie", "Dee"),
    ("Joan", "Anne"),
]

# department, skill, number of nurses with that skill in each shift
SKILL_REQUIREMENTS = [("Emergency", "Cardiac Care", 1)]

MAX_WORK_TIME = 40


@dataclasses.dataclass(frozen=True)
class Nurse:
    name: str
    seniority: int
    qualification: int
    pay_rate: int

    def __str__(self) -> str:
        return self.name


@dataclasses.dataclass(frozen=True)
class Shift:
    department: str
    day: WeekDay
    start_time: int
    end_time: int
    min_requirement: int
    max_requirement: int

    @property
    def start(self) -> int:
        """The start, in hours since Monday 0:00."""
        return 24 * self.day + self.start_time

    @property
    def end(self) -> int:
        """The end, in hours since Monday 0:00. A shift may end the next day."""
        day = self.day if self.end_time > self.start_time else self.day + 1
        return 24 * day + self.end_time

    @property
    def duration(self) -> int:
        return self.end - self.start

    def overlaps(self, other: "Shift") -> bool:
        return other.end > self.start and other.start < self.end

    def __str__(self) -> str:
        return f"{self.department[:4].upper()}-{self.day.name[:3].title()}-{self.start_time}"


def solve_nurses(
    solver: str = "scip", time_limit: Optional[float] = 60.0
) -> Optional[Dict[str, float]]:
    """Returns the KPIs of the best roster found."""
    nurses = [Nurse(*n) for n in NURSES]
    shifts = [Shift(*s) for s in SHIFTS]
    nurses_by_name = {n.name: n for n in nurses}
    vacations: Dict[Nurse, List[WeekDay]] = {n: [] for n in nurses}
    for name, day in VACATIONS:
        vacations[nurses_by_name[name]].append(day)

    with MpModel("Nurses", solver_name=solver) as model:
        assigned = model.bool_vars(
            nurses, shifts, namer=lambda n, s: f"nurse_{n}_assigned_to_shift_{s}"
        )
        work_time = model.num_vars(nurses, namer=lambda n: f"nurse_{n}_work_time")
        over_average = model.num_vars(
            nurses, namer=lambda n: f"nurse_{n}_over_average_work_time"
        )
        under_average = model.num_vars(
            nurses, namer=lambda n: f"nurse_{n}_under_average_work_time"
        )
        average = model.num_var(name="average_nurse_work_time")

        model.add(
            average * len(nurses) == model.sum(work_time.values()), name="average"
        )
        for n in nurses:
            model.add(
                work_time[n]
                == model.sum(assigned[n, s] * s.duration for s in shifts),
                name=f"work_time_{n}",
            )
            model.add(
                work_time[n] == average + over_average[n] - under_average[n],
                name=f"average_work_time_{n}",
            )
            model.add(work_time[n] <= MAX_WORK_TIME, name=f"max_time_{n}")

        for n in nurses:
            for day in vacations[n]:
                for s in shifts:
                    if s.day == day:
                        model.add(assigned[n, s] == 0, name=f"vacations_{n}_{day.name}_{s}")

        # A nurse cannot work overlapping shifts.
        nb_overlaps = 0
        for i, s1 in enumerate(shifts):
            for s2 in shifts[i + 1:]:
                if s1.overlaps(s2):
                    nb_overlaps += 1
                    for n in nurses:
                        model.add(
                            assigned[n, s1] + assigned[n, s2] <= 1,
                            name=f"overlapping_{s1}_{s2}_{n}",
                        )

        for s in shifts:
            model.add_range(
                s.min_requirement,
                model.sum(assigned[n, s] for n in nurses),
                s.max_requirement,
                name=f"shift_{s}",
            )

        for dept, skill, required in SKILL_REQUIREMENTS:
            if required <= 0:
                continue
            skilled = [n for n in nurses if skill in NURSE_SKILLS.get(n.name, [])]
            for s in shifts:
                if s.department == dept:
                    model.add(model.sum(assigned[n, s] for n in skilled) >= required)

        for id1, id2 in NURSE_ASSOCIATIONS:
            n1, n2 = nurses_by_name[id1], nurses_by_name[id2]
            for s in shifts:
                model.add(assigned[n1, s] == assigned[n2, s], name=f"assoc_{id1}_{id2}_{s}")

        for id1, id2 in NURSE_INCOMPATIBILITIES:
            n1, n2 = nurses_by_name[id1], nurses_by_name[id2]
            for s in shifts:
                model.add(
                    assigned[n1, s] + assigned[n2, s] <= 1,
                    name=f"incompat_{id1}_{id2}_{s}",
                )

        total_salary_cost = model.add_kpi(
            model.sum(
                assigned[n, s] * (n.pay_rate * s.duration) for n in nurses for s in shifts
            ),
            "Total salary cost",
        )
        total_assignments = model.add_kpi(
            model.sum(assigned.values()), "Total number of assignments"
        )
        model.add_kpi(average, "Average nurse work time")
        total_fairness = model.add_kpi(
            model.sum(over_average.values()) + model.sum(under_average.values()),
            "Total fairness",
        )
        model.minimize(total_salary_cost + total_assignments + total_fairness)

        print(f"#departments: {len(DEPTS)}")
        print(f"#skills: {len(SKILLS)}")
        print(f"#shifts: {len(shifts)}")
        print(f"#nurses: {len(nurses)}")
        print(f"#vacations: {len(VACATIONS)}")
        print(f"#overlapping shifts: {nb_overlaps}")
        model.print_information()

        if not model.solve(time_limit=time_limit):
            print("* model is infeasible")
            return None
        print(f"Solution for a cost of {model.get_objective_value():g}")
        kpis = model.report_kpis()
        for name, value in kpis.items():
            print(f"KPI: {name}={value:g}")

        values = {key: model.get_value(x) for key, x in assigned.items()}
        print("Allocation by department:")
        for d in DEPTS:
            count = sum(values[n, s] for n in nurses for s in shifts if s.department == d)
            print(f"\t{d}: {count:g}")
        print("Nurses assignments:")
        for n in sorted(nurses, key=lambda n: n.name):
            hours = sum(values[n, s] * s.duration for s in shifts)
            print(f"\t{n}: total hours: {hours:g}")
            for s in shifts:
                if values[n, s] > 0.5:
                    print(f"\t\t{s.day.name.title()}: {s.department} {s.start_time}-{s.end_time}")
        kpis["cost"] = model.get_objective_value()
        return kpis


def main(argv: Sequence[str]) -> None:
    if len(argv) > 1:
        raise app.UsageError("Too many command-line arguments.")
    solve_nurses(_SOLVER.value, _TIME_LIMIT.value)


if __name__ == "__main__":
    app.run(main)
