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

"""Schedules the games of a season between two divisions of teams.

Each team plays every other team of its division and every team of the other
division. A team plays once a week, and two teams do not meet on successive
weeks. Some intradivisional games are in the first half of the season, the
others are postponed as much as possible.
"""

from typing import List, Optional, Sequence, Tuple

from absl import app
from absl import flags

from optdsl.mp.mp_model import MpModel

_SOLVER = flags.DEFINE_string(
    "solver", "scip", "The model_builder backend.", allow_override=True
)
_TIME_LIMIT = flags.DEFINE_float(
    "time_limit", 60.0, "Time limit in seconds.", allow_override=True
)

NB_TEAMS_IN_DIVISION = 8
NB_INTRA_DIVISIONAL = 1
NB_INTER_DIVISIONAL = 1

TEAM_DIV1 = [
    "Baltimore Ravens", "Cincinnati Bengals", "Cleveland Browns",
    "Pittsburgh Steelers", "Houston Texans", "Indianapolis Colts",
    "Jacksonville Jaguars", "Tennessee Titans", "Buffalo Bills",
    "Miami Dolphins", "New England Patriots", "New York Jets",
    "Denver Broncos", "Kansas City Chiefs", "Oakland Raiders",
    "San Diego Chargers",
]  # fmt: skip

TEAM_DIV2 = [
    "Chicago Bears", "Detroit Lions", "Green Bay Packers",
    "Minnesota Vikings", "Atlanta Falcons", "Carolina Panthers",
    "New Orleans Saints", "Tampa Bay Buccaneers", "Dallas Cowboys",
    "New York Giants", "Philadelphia Eagles", "Washington Redskins",
    "Arizona Cardinals", "San Francisco 49ers", "Seattle Seahawks",
    "St. Louis Rams",
]  # fmt: skip

# team1, team2, whether the two teams are in the same division
Match = Tuple[int, int, bool]


def make_matches(nb_teams_in_division: int = NB_TEAMS_IN_DIVISION) -> List[Match]:
    """Returns all the pairings of teams 1 to 2N."""
    teams = range(1, 2 * nb_teams_in_division + 1)

    def same_division(t1: int, t2: int) -> bool:
        return t2 <= nb_teams_in_division or t1 > nb_teams_in_division

    return [(t1, t2, same_division(t1, t2)) for t1 in teams for t2 in teams if t1 < t2]


def solve_sport_scheduling(
    solver: str = "scip", time_limit: Optional[float] = 60.0
) -> Optional[Tuple[float, List[Tuple[int, Match]]]]:
    """Returns the objective and the (week, match) of every game."""
    n = NB_TEAMS_IN_DIVISION
    teams = TEAM_DIV1 + TEAM_DIV2
    team_range = range(1, 2 * n + 1)
    nb_weeks = (n - 1) * NB_INTRA_DIVISIONAL + n * NB_INTER_DIVISIONAL
    weeks = range(1, nb_weeks + 1)
    first_half_weeks = range(1, nb_weeks // 2 + 1)
    nb_first_half_games = nb_weeks // 3
    print(
        f"{nb_weeks} games, {(n - 1) * NB_INTRA_DIVISIONAL} intradivisional,"
        f" {n * NB_INTER_DIVISIONAL} interdivisional"
    )

    matches = make_matches(n)
    with MpModel("sportscheduling", solver_name=solver) as model:
        play = model.bool_vars(
            matches, weeks, namer=lambda m, w: f"play_{m[0]}_{m[1]}_w{w}"
        )

        for m in matches:
            nb_games = NB_INTRA_DIVISIONAL if m[2] else NB_INTER_DIVISIONAL
            model.add(
                model.sum(play[m, w] for w in weeks) == nb_games,
                name=f"correct_nb_games_{m[0]}_{m[1]}",
            )

        for w in weeks:
            for t in team_range:
                model.add(
                    model.sum(play[m, w] for m in matches if t in (m[0], m[1])) == 1,
                    name=f"plays_exactly_once_{w}_{t}",
                )
            if w < nb_weeks:
                for m in matches:
                    model.add(
                        play[m, w] + play[m, w + 1] <= 1,
                        name=f"no_successive_week_{m[0]}_{m[1]}_{w}",
                    )

        for t in team_range:
            model.add(
                model.sum(
                    play[m, w]
                    for w in first_half_weeks
                    for m in matches
                    if m[2] and t in (m[0], m[1])
                )
                >= nb_first_half_games,
                name=f"in_division_first_half_{t}",
            )

        # Postpone the divisional games: weight each game by the square of its week.
        model.maximize(
            model.sum(play[m, w] * (w * w) for w in weeks for m in matches if m[2])
        )

        if not model.solve(time_limit=time_limit):
            print("**** No solution found!")
            return None
        objective = model.get_objective_value()
        print(f"Found solution with objective {objective:g}")
        games = [
            (w, m) for w in weeks for m in matches if model.get_value(play[m, w]) >= 1 - 1e-6
        ]
        print("Intradivisional games are marked with a *")
        current_week = 0
        for w, (t1, t2, divisional) in games:
            if w != current_week:
                current_week = w
                print(" == == == == == == == == == == == == == == == == ")
                print(f"On week {w}")
            marker = "*" if divisional else " "
            print(f"\t{marker} {teams[t1 - 1]} will meet the {teams[t2 - 1]}")
        return objective, games


def main(argv: Sequence[str]) -> None:
    if len(argv) > 1:
        raise app.UsageError("Too many command-line arguments.")
    solve_sport_scheduling(_SOLVER.value, _TIME_LIMIT.value)


if __name__ == "__main__":
    app.run(main)
