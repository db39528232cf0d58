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

"""Map coloring.

Color the countries of a map with at most four colors, such that neighboring
countries have different colors.
"""

from typing import Dict, Optional, Sequence

from absl import app

from optdsl.cp.cp_model import CpModel

COUNTRIES = ["Belgium", "Denmark", "France", "Germany", "Luxembourg", "Netherlands"]
COLORS = ["Yellow", "Red", "Green", "Blue"]
NEIGHBORS = [
    ("Belgium", "France"),
    ("Belgium", "Germany"),
    ("Belgium", "Netherlands"),
    ("Belgium", "Luxembourg"),
    ("Denmark", "Germany"),
    ("France", "Germany"),
    ("France", "Luxembourg"),
    ("Germany", "Luxembourg"),
    ("Germany", "Netherlands"),
]


def solve_color() -> Optional[Dict[str, str]]:
    """Returns a color per country."""
    with CpModel("Color") as model:
        colors = model.int_vars(COUNTRIES, 0, len(COLORS) - 1, namer=lambda c: c)
        for a, b in NEIGHBORS:
            model.add(colors[a] != colors[b])

        if not model.solve():
            print("No solution found.")
            return None
        print(f"Solution status: {model.get_status_name()}")
        solution = {c: COLORS[model.get_value(colors[c])] for c in COUNTRIES}
        for country, color in solution.items():
            print(f"\t{country}: {color}")
        return solution


def main(argv: Sequence[str]) -> None:
    if len(argv) > 1:
        raise app.UsageError("Too many command-line arguments.")
    solve_color()


if __name__ == "__main__":
    app.run(main)
