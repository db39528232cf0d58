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

"""Talent hold cost scheduling.

Orders the scenes of a film so that the actors wait as little as possible.
An actor arrives for his or her first scene and leaves after the last one;
the pay of the actor is due for every scene shot in between.

The rehearsal problem (CSPLib prob039) is a specific case, with the data
file given by default. The file holds the number of actors, their pay, the
number of scenes, their durations and then, for each actor, a 0/1 row of
the scenes he or she plays in.
"""

import dataclasses
import os
from typing import Iterator, List, Optional, Sequence, Set

from absl import app
from absl import flags

from optdsl.cp.cp_model import CpModel
from optdsl.modeler import default_namer

DEFAULT_DATA = os.path.join(os.path.dirname(__file__), "data", "rehearsal.data")

_INPUT = flags.DEFINE_string(
    "input", DEFAULT_DATA, "Input file.", allow_override=True
)
_TIME_LIMIT = flags.DEFINE_float(
    "time_limit", 10.0, "Time limit in seconds.", allow_override=True
)


@dataclasses.dataclass
class TalentData:
    actor_pay: List[int]
    scene_duration: List[int]
    actor_in_scene: List[Set[int]]

    @property
    def num_actors(self) -> int:
        return len(self.actor_pay)

    @property
    def num_scenes(self) -> int:
        return len(self.scene_duration)


def read_data(filename: str) -> TalentData:
    with open(filename) as f:
        text = f.read()
    tokens: Iterator[int] = (int(t) for t in text.split())
    num_actors = next(tokens)
    actor_pay = [next(tokens) for _ in range(num_actors)]
    num_scenes = next(tokens)
    scene_duration = [next(tokens) for _ in range(num_scenes)]
    actor_in_scene = []
    for _ in range(num_actors):
        actor_in_scene.append({s for s in range(num_scenes) if next(tokens)})
    return TalentData(actor_pay, scene_duration, actor_in_scene)


def solve_talent(
    filename: str = DEFAULT_DATA, time_limit: float = 10.0
) -> Optional[int]:
    """Returns the idle cost of the best order found."""
    data = read_data(filename)
    n = data.num_scenes
    with CpModel("Talent") as model:
        scene = model.int_vars(n, 0, n - 1, default_namer("scene"))
        slot = model.int_vars(n, 0, n - 1, default_namer("slot"))
        model.add(model.inverse(scene, slot))

        idle_costs = []
        for a in range(data.num_actors):
            plays = data.actor_in_scene[a]
            positions = [slot[s] for s in sorted(plays)]
            first_slot = model.min(positions)
            last_slot = model.max(positions)
            actor_wait = model.sum(
                data.scene_duration[s]
                * ((first_slot <= slot[s]) & (slot[s] <= last_slot))
                for s in range(n)
                if s not in plays
            )
            idle_costs.append(data.actor_pay[a] * actor_wait)
        model.minimize(model.sum(idle_costs))

        if not model.solve(time_limit=time_limit):
            print("No solution found.")
            return None
        objective = int(model.get_objective_value())
        print(f"Solution with objective {objective}")
        order = [model.get_value(x) for x in scene]
        print("Order: " + " ".join(str(s + 1) for s in order))
        for a in range(data.num_actors):
            row = "|".join(
                ("X" if s in data.actor_in_scene[a] else ".") * data.scene_duration[s]
                for s in order
            )
            print(f"|{row}|  Rate = {data.actor_pay[a]}")
        return objective


def main(argv: Sequence[str]) -> None:
    if len(argv) > 1:
        raise app.UsageError("Too many command-line arguments.")
    solve_talent(_INPUT.value, _TIME_LIMIT.value)


if __name__ == "__main__":
    app.run(main)
