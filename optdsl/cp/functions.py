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

"""Numeric functions of one variable used by scheduling models.

* [`NumToNumStepFunction`](#functions.NumToNumStepFunction): a piecewise
  constant function. It is used as an intensity (calendar) of an interval
  variable, and by the forbid_start/forbid_end/forbid_extent constraints.
* [`NumToNumSegmentFunction`](#functions.NumToNumSegmentFunction): a
  piecewise linear function, possibly discontinuous. It is used by the
  start_eval/end_eval/size_eval/length_eval expressions.

Both functions are defined on a definition interval [xmin, xmax), which is
the whole real line by default, and are stored as sorted breakpoints. They
are plain data: nothing is sent to the solver until a function is used in a
model.
"""

import bisect
import dataclasses
import math
from typing import Iterator, List, Optional, Sequence, Tuple

from optdsl.modeler import NumberT


@dataclasses.dataclass(frozen=True)
class Segment:
    """A piece [start, end) on which a step function is constant."""

    start: NumberT
    end: NumberT
    value: NumberT


@dataclasses.dataclass(frozen=True)
class LinearSegment:
    """A piece [start, end) on which a segment function is linear.

    `start_value` is the value at `start`, `end_value` the limit at `end`.
    """

    start: NumberT
    end: NumberT
    start_value: float
    end_value: float

    @property
    def slope(self) -> float:
        if math.isinf(self.start) or math.isinf(self.end):
            return math.nan
        return (self.end_value - self.start_value) / (self.end - self.start)


def _format_bound(x: NumberT) -> str:
    if x == -math.inf:
        return "-inf"
    if x == math.inf:
        return "inf"
    return f"{x:g}" if isinstance(x, float) else str(x)


class NumToNumStepFunction:
    """A piecewise constant function from numbers to numbers.

    The function is stored as sorted breakpoints `x[i]` and values `v[i]`:
    f(x) = v[i] for x[i] <= x < x[i + 1]. Two consecutive pieces never have
    the same value.
    """

    def __init__(
        self,
        xmin: NumberT = -math.inf,
        xmax: NumberT = math.inf,
        value: NumberT = 0,
        name: Optional[str] = None,
    ) -> None:
        if xmin >= xmax:
            raise ValueError(f"empty definition interval [{xmin}, {xmax})")
        self.__xs: List[NumberT] = [xmin]
        self.__vs: List[NumberT] = [value]
        self.__xmax: NumberT = xmax
        self.__name: Optional[str] = name

    @classmethod
    def from_steps(
        cls,
        xs: Sequence[NumberT],
        vs: Sequence[NumberT],
        xmin: NumberT = -math.inf,
        xmax: NumberT = math.inf,
    ) -> "NumToNumStepFunction":
        """Builds a function taking value vs[i] on [xs[i - 1], xs[i])."""
        f = cls(xmin, xmax)
        f.set_steps(xs, vs)
        return f

    def copy(self) -> "NumToNumStepFunction":
        f = NumToNumStepFunction(self.__xs[0], self.__xmax, 0, self.__name)
        f.__xs = list(self.__xs)
        f.__vs = list(self.__vs)
        return f

    @property
    def name(self) -> Optional[str]:
        return self.__name

    @name.setter
    def name(self, name: str) -> None:
        self.__name = name

    @property
    def definition_interval_min(self) -> NumberT:
        return self.__xs[0]

    @property
    def definition_interval_max(self) -> NumberT:
        return self.__xmax

    @property
    def number_of_segments(self) -> int:
        return len(self.__xs)

    def __check_range(self, x0: NumberT, x1: NumberT) -> None:
        if x0 > x1:
            raise ValueError(f"invalid interval [{x0}, {x1})")
        if x0 < self.__xs[0] or x1 > self.__xmax:
            raise ValueError(
                f"interval [{x0}, {x1}) is outside the definition interval"
                f" [{_format_bound(self.__xs[0])}, {_format_bound(self.__xmax)})"
            )

    def __locate(self, x: NumberT) -> int:
        return bisect.bisect_right(self.__xs, x) - 1

    def __split(self, x: NumberT) -> int:
        """Makes x a breakpoint and returns its position."""
        if x >= self.__xmax:
            return len(self.__xs)
        i = bisect.bisect_left(self.__xs, x)
        if i < len(self.__xs) and self.__xs[i] == x:
            return i
        self.__xs.insert(i, x)
        self.__vs.insert(i, self.__vs[i - 1])
        return i

    def __normalize(self) -> None:
        xs = [self.__xs[0]]
        vs = [self.__vs[0]]
        for x, v in zip(self.__xs[1:], self.__vs[1:]):
            if v != vs[-1]:
                xs.append(x)
                vs.append(v)
        self.__xs = xs
        self.__vs = vs

    def __pieces(
        self, x0: NumberT, x1: NumberT
    ) -> Iterator[Tuple[NumberT, NumberT, NumberT]]:
        """Yields the pieces (start, end, value) clipped to [x0, x1)."""
        if x0 >= x1:
            return
        for i in range(max(self.__locate(x0), 0), len(self.__xs)):
            start = self.__xs[i]
            if start >= x1:
                break
            end = self.__xs[i + 1] if i + 1 < len(self.__xs) else self.__xmax
            yield max(start, x0), min(end, x1), self.__vs[i]

    def set_value(self, x0: NumberT, x1: NumberT, v: NumberT) -> None:
        """Sets the value of the function to v on [x0, x1)."""
        self.__check_range(x0, x1)
        if x0 == x1:
            return
        i0 = self.__split(x0)
        i1 = self.__split(x1)
        self.__xs[i0:i1] = [x0]
        self.__vs[i0:i1] = [v]
        self.__normalize()

    def add_value(self, x0: NumberT, x1: NumberT, dv: NumberT) -> None:
        """Adds dv to the function on [x0, x1)."""
        self.__check_range(x0, x1)
        if x0 == x1 or dv == 0:
            return
        i0 = self.__split(x0)
        i1 = self.__split(x1)
        for i in range(i0, i1):
            self.__vs[i] += dv
        self.__normalize()

    def set_min(self, x0: NumberT, x1: NumberT, v: NumberT) -> None:
        """Sets f(x) to max(f(x), v) on [x0, x1)."""
        self.__check_range(x0, x1)
        if x0 == x1:
            return
        i0 = self.__split(x0)
        i1 = self.__split(x1)
        for i in range(i0, i1):
            self.__vs[i] = max(self.__vs[i], v)
        self.__normalize()

    def set_max(self, x0: NumberT, x1: NumberT, v: NumberT) -> None:
        """Sets f(x) to min(f(x), v) on [x0, x1)."""
        self.__check_range(x0, x1)
        if x0 == x1:
            return
        i0 = self.__split(x0)
        i1 = self.__split(x1)
        for i in range(i0, i1):
            self.__vs[i] = min(self.__vs[i], v)
        self.__normalize()

    def set_steps(self, xs: Sequence[NumberT], vs: Sequence[NumberT]) -> None:
        """Redefines the function from its steps.

        The function takes value vs[0] on [xmin, xs[0]), vs[i] on
        [xs[i - 1], xs[i]) and vs[n] on [xs[n - 1], xmax).

        Args:
          xs: the n sorted step positions.
          vs: the n + 1 values.
        """
        if len(vs) != len(xs) + 1:
            raise ValueError(
                f"set_steps expects {len(xs) + 1} values, got {len(vs)}"
            )
        if any(a > b for a, b in zip(xs, xs[1:])):
            raise ValueError("set_steps expects sorted step positions")
        xmin = self.__xs[0]
        self.__xs = [xmin]
        self.__vs = [vs[0]]
        for x, v in zip(xs, vs[1:]):
            if x <= xmin:
                self.__vs[0] = v
            elif x < self.__xmax:
                if x == self.__xs[-1]:
                    self.__vs[-1] = v
                else:
                    self.__xs.append(x)
                    self.__vs.append(v)
        self.__normalize()

    def set_periodic(
        self,
        f: "NumToNumStepFunction",
        x0: NumberT,
        n: NumberT = math.inf,
        dval: NumberT = 0,
    ) -> None:
        """Repeats f n times from x0, and sets the value dval elsewhere."""
        period = f.definition_interval_max - f.definition_interval_min
        if math.isinf(period) or period <= 0:
            raise ValueError("set_periodic expects a function with a finite domain")
        xmin, xmax = self.__xs[0], self.__xmax
        end = min(x0 + n * period, xmax) if not math.isinf(n) else xmax
        if math.isinf(end):
            raise ValueError("set_periodic cannot repeat a function infinitely")
        self.__xs = [xmin]
        self.__vs = [dval]
        self.__repeat(f, max(x0, xmin), end, x0)

    def set_periodic_value(
        self,
        x0: NumberT,
        x1: NumberT,
        f: "NumToNumStepFunction",
        offset: NumberT = 0,
    ) -> None:
        """Sets the value on [x0, x1) to f((x - x0 + offset) modulo its period)."""
        self.__check_range(x0, x1)
        period = f.definition_interval_max - f.definition_interval_min
        if math.isinf(period) or period <= 0:
            raise ValueError(
                "set_periodic_value expects a function with a finite domain"
            )
        self.__repeat(f, x0, x1, x0 - offset)

    def __repeat(
        self, f: "NumToNumStepFunction", x0: NumberT, x1: NumberT, origin: NumberT
    ) -> None:
        """Copies f on [x0, x1), f's xmin being mapped to origin + k * period."""
        period = f.definition_interval_max - f.definition_interval_min
        k = math.floor((x0 - origin) / period)
        while origin + k * period < x1:
            shift = origin + k * period - f.definition_interval_min
            for segment in f:
                lo = max(segment.start + shift, x0)
                hi = min(segment.end + shift, x1)
                if lo < hi:
                    self.set_value(lo, hi, segment.value)
            k += 1

    def get_value(self, x: NumberT) -> NumberT:
        """Returns f(x)."""
        if x < self.__xs[0] or x >= self.__xmax:
            raise ValueError(f"{x} is outside the definition interval")
        return self.__vs[self.__locate(x)]

    def get_min(
        self, x0: Optional[NumberT] = None, x1: Optional[NumberT] = None
    ) -> NumberT:
        """Returns the minimum of the function on [x0, x1)."""
        x0 = self.__xs[0] if x0 is None else x0
        x1 = self.__xmax if x1 is None else x1
        return min(v for _, _, v in self.__pieces(x0, x1))

    def get_max(
        self, x0: Optional[NumberT] = None, x1: Optional[NumberT] = None
    ) -> NumberT:
        """Returns the maximum of the function on [x0, x1)."""
        x0 = self.__xs[0] if x0 is None else x0
        x1 = self.__xmax if x1 is None else x1
        return max(v for _, _, v in self.__pieces(x0, x1))

    def get_area(
        self, x0: Optional[NumberT] = None, x1: Optional[NumberT] = None
    ) -> NumberT:
        """Returns the integral of the function on [x0, x1)."""
        x0 = self.__xs[0] if x0 is None else x0
        x1 = self.__xmax if x1 is None else x1
        area = 0
        for start, end, v in self.__pieces(x0, x1):
            if v != 0:
                area += v * (end - start)
        return area

    def shift(self, dx: NumberT, dval: NumberT = 0) -> None:
        """Shifts the function by dx. Uncovered parts take the value dval."""
        if dx == 0:
            return
        pieces = [(s.start + dx, s.end + dx, s.value) for s in self]
        xmin, xmax = self.__xs[0], self.__xmax
        self.__xs = [xmin]
        self.__vs = [dval]
        for start, end, v in pieces:
            lo, hi = max(start, xmin), min(end, xmax)
            if lo < hi:
                self.set_value(lo, hi, v)

    def dilate(self, k: NumberT) -> None:
        """Multiplies the breakpoints and the definition interval by k > 0."""
        if k <= 0:
            raise ValueError(f"dilate expects a positive factor, got {k}")
        self.__xs = [x * k for x in self.__xs]
        self.__xmax *= k

    def prod(self, k: NumberT) -> None:
        """Multiplies the function by k."""
        self.__vs = [v * k for v in self.__vs]
        self.__normalize()

    def add(self, f: "NumToNumStepFunction") -> None:
        """Adds f to this function where both are defined."""
        for segment in f:
            lo = max(segment.start, self.__xs[0])
            hi = min(segment.end, self.__xmax)
            if lo < hi:
                self.add_value(lo, hi, segment.value)

    def sub(self, f: "NumToNumStepFunction") -> None:
        """Subtracts f from this function where both are defined."""
        for segment in f:
            lo = max(segment.start, self.__xs[0])
            hi = min(segment.end, self.__xmax)
            if lo < hi:
                self.add_value(lo, hi, -segment.value)

    def __iter__(self) -> Iterator[Segment]:
        for i, (x, v) in enumerate(zip(self.__xs, self.__vs)):
            end = self.__xs[i + 1] if i + 1 < len(self.__xs) else self.__xmax
            yield Segment(x, end, v)

    def segments(
        self, x0: NumberT, x1: NumberT
    ) -> Iterator[Segment]:
        """Yields the constant pieces of the function clipped to [x0, x1)."""
        for start, end, v in self.__pieces(x0, x1):
            yield Segment(start, end, v)

    def __str__(self) -> str:
        pieces = "; ".join(
            f"[{_format_bound(s.start)}, {_format_bound(s.end)}): {s.value}"
            for s in self
        )
        if self.__name:
            return f"{self.__name} = {{{pieces}}}"
        return f"{{{pieces}}}"

    def __repr__(self) -> str:
        return f"NumToNumStepFunction({self})"


class NumToNumSegmentFunction:
    """A piecewise linear function from numbers to numbers.

    Piece i starts at breakpoint x[i], and on that piece
    f(x) = a[i] + s[i] * x. Pieces need not connect, so the function may be
    discontinuous at breakpoints. It is right-continuous.
    """

    def __init__(
        self,
        xmin: NumberT = -math.inf,
        xmax: NumberT = math.inf,
        value: NumberT = 0,
        name: Optional[str] = None,
    ) -> None:
        if xmin >= xmax:
            raise ValueError(f"empty definition interval [{xmin}, {xmax})")
        self.__xs: List[NumberT] = [xmin]
        self.__as: List[float] = [value]
        self.__ss: List[float] = [0.0]
        self.__xmax: NumberT = xmax
        self.__name: Optional[str] = name

    @classmethod
    def from_lines(
        cls,
        lines: Sequence[Tuple[NumberT, float, float]],
        name: Optional[str] = None,
        xmax: NumberT = math.inf,
    ) -> "NumToNumSegmentFunction":
        """Builds a function from sorted pieces (start, intercept, slope)."""
        f = cls(lines[0][0], xmax, 0, name)
        f.__xs = [x for x, _, _ in lines]
        f.__as = [c for _, c, _ in lines]
        f.__ss = [s for _, _, s in lines]
        f.__normalize()
        return f

    def copy(self) -> "NumToNumSegmentFunction":
        f = NumToNumSegmentFunction(self.__xs[0], self.__xmax, 0, self.__name)
        f.__xs = list(self.__xs)
        f.__as = list(self.__as)
        f.__ss = list(self.__ss)
        return f

    @property
    def name(self) -> Optional[str]:
        return self.__name

    @name.setter
    def name(self, name: str) -> None:
        self.__name = name

    @property
    def definition_interval_min(self) -> NumberT:
        return self.__xs[0]

    @property
    def definition_interval_max(self) -> NumberT:
        return self.__xmax

    @property
    def number_of_segments(self) -> int:
        return len(self.__xs)

    def pieces(self) -> List[Tuple[NumberT, NumberT, float, float]]:
        """Returns the pieces as tuples (start, end, intercept, slope)."""
        return [
            (x, self.__end_of(i), a, s)
            for i, (x, a, s) in enumerate(zip(self.__xs, self.__as, self.__ss))
        ]

    def __end_of(self, i: int) -> NumberT:
        return self.__xs[i + 1] if i + 1 < len(self.__xs) else self.__xmax

    def __check_range(self, x0: NumberT, x1: NumberT) -> None:
        if x0 > x1:
            raise ValueError(f"invalid interval [{x0}, {x1})")
        if x0 < self.__xs[0] or x1 > self.__xmax:
            raise ValueError(
                f"interval [{x0}, {x1}) is outside the definition interval"
                f" [{_format_bound(self.__xs[0])}, {_format_bound(self.__xmax)})"
            )

    def __locate(self, x: NumberT) -> int:
        return bisect.bisect_right(self.__xs, x) - 1

    def __split(self, x: NumberT) -> int:
        if x >= self.__xmax:
            return len(self.__xs)
        i = bisect.bisect_left(self.__xs, x)
        if i < len(self.__xs) and self.__xs[i] == x:
            return i
        self.__xs.insert(i, x)
        self.__as.insert(i, self.__as[i - 1])
        self.__ss.insert(i, self.__ss[i - 1])
        return i

    def __normalize(self) -> None:
        xs, as_, ss = [self.__xs[0]], [self.__as[0]], [self.__ss[0]]
        for x, a, s in zip(self.__xs[1:], self.__as[1:], self.__ss[1:]):
            if a != as_[-1] or s != ss[-1]:
                xs.append(x)
                as_.append(a)
                ss.append(s)
        self.__xs, self.__as, self.__ss = xs, as_, ss

    @staticmethod
    def __eval(a: float, s: float, x: NumberT) -> float:
        if s == 0:
            return a
        return a + s * x

    def set_value(self, x0: NumberT, x1: NumberT, v: NumberT) -> None:
        """Sets the function to the constant v on [x0, x1)."""
        self.set_slope(x0, x1, v, 0.0)

    def set_slope(
        self, x0: NumberT, x1: NumberT, v: NumberT, slope: NumberT
    ) -> None:
        """Sets f(x) = v + slope * (x - x0) on [x0, x1)."""
        self.__check_range(x0, x1)
        if x0 == x1:
            return
        if slope != 0 and math.isinf(x0):
            raise ValueError("a sloped piece needs a finite start")
        i0 = self.__split(x0)
        i1 = self.__split(x1)
        self.__xs[i0:i1] = [x0]
        self.__as[i0:i1] = [v - slope * x0 if slope else v]
        self.__ss[i0:i1] = [slope]
        self.__normalize()

    def add_value(self, x0: NumberT, x1: NumberT, dv: NumberT) -> None:
        """Adds dv to the function on [x0, x1)."""
        self.__check_range(x0, x1)
        if x0 == x1 or dv == 0:
            return
        i0 = self.__split(x0)
        i1 = self.__split(x1)
        for i in range(i0, i1):
            self.__as[i] += dv
        self.__normalize()

    def __split_at_crossings(self, x0: NumberT, x1: NumberT, v: NumberT) -> None:
        i = 0
        while i < len(self.__xs):
            s = self.__ss[i]
            if s != 0:
                c = (v - self.__as[i]) / s
                if max(self.__xs[i], x0) < c < min(self.__end_of(i), x1):
                    self.__split(c)
            i += 1

    def __sample(self, i: int, x0: NumberT, x1: NumberT) -> NumberT:
        lo, hi = max(self.__xs[i], x0), min(self.__end_of(i), x1)
        if math.isinf(lo) and math.isinf(hi):
            return 0
        if math.isinf(lo):
            return hi - 1
        if math.isinf(hi):
            return lo + 1
        return (lo + hi) / 2

    def set_min(self, x0: NumberT, x1: NumberT, v: NumberT) -> None:
        """Sets f(x) to max(f(x), v) on [x0, x1)."""
        self.__check_range(x0, x1)
        if x0 == x1:
            return
        self.__split(x0)
        self.__split(x1)
        self.__split_at_crossings(x0, x1, v)
        for i in range(self.__locate(x0), self.__split(x1)):
            x = self.__sample(i, x0, x1)
            if self.__eval(self.__as[i], self.__ss[i], x) < v:
                self.__as[i], self.__ss[i] = v, 0.0
        self.__normalize()

    def set_max(self, x0: NumberT, x1: NumberT, v: NumberT) -> None:
        """Sets f(x) to min(f(x), v) on [x0, x1)."""
        self.__check_range(x0, x1)
        if x0 == x1:
            return
        self.__split(x0)
        self.__split(x1)
        self.__split_at_crossings(x0, x1, v)
        for i in range(self.__locate(x0), self.__split(x1)):
            x = self.__sample(i, x0, x1)
            if self.__eval(self.__as[i], self.__ss[i], x) > v:
                self.__as[i], self.__ss[i] = v, 0.0
        self.__normalize()

    def get_value(self, x: NumberT) -> float:
        """Returns f(x)."""
        if x < self.__xs[0] or x >= self.__xmax:
            raise ValueError(f"{x} is outside the definition interval")
        i = self.__locate(x)
        return self.__eval(self.__as[i], self.__ss[i], x)

    def __bounds_on(self, x0: NumberT, x1: NumberT) -> Iterator[float]:
        for i in range(max(self.__locate(x0), 0), len(self.__xs)):
            lo, hi = max(self.__xs[i], x0), min(self.__end_of(i), x1)
            if lo >= hi:
                if self.__xs[i] >= x1:
                    break
                continue
            a, s = self.__as[i], self.__ss[i]
            yield self.__eval(a, s, lo)
            yield self.__eval(a, s, hi)

    def get_min(
        self, x0: Optional[NumberT] = None, x1: Optional[NumberT] = None
    ) -> float:
        """Returns the infimum of the function on [x0, x1)."""
        x0 = self.__xs[0] if x0 is None else x0
        x1 = self.__xmax if x1 is None else x1
        return min(self.__bounds_on(x0, x1))

    def get_max(
        self, x0: Optional[NumberT] = None, x1: Optional[NumberT] = None
    ) -> float:
        """Returns the supremum of the function on [x0, x1)."""
        x0 = self.__xs[0] if x0 is None else x0
        x1 = self.__xmax if x1 is None else x1
        return max(self.__bounds_on(x0, x1))

    def get_area(
        self, x0: Optional[NumberT] = None, x1: Optional[NumberT] = None
    ) -> float:
        """Returns the integral of the function on [x0, x1)."""
        x0 = self.__xs[0] if x0 is None else x0
        x1 = self.__xmax if x1 is None else x1
        area = 0.0
        for i in range(max(self.__locate(x0), 0), len(self.__xs)):
            lo, hi = max(self.__xs[i], x0), min(self.__end_of(i), x1)
            if lo >= hi:
                continue
            a, s = self.__as[i], self.__ss[i]
            if a == 0 and s == 0:
                continue
            if math.isinf(lo) or math.isinf(hi):
                return math.inf
            area += a * (hi - lo) + s * (hi * hi - lo * lo) / 2
        return area

    def shift(self, dx: NumberT, dval: NumberT = 0) -> None:
        """Shifts the function by dx. Uncovered parts take the value dval."""
        if dx == 0:
            return
        xmin, xmax = self.__xs[0], self.__xmax
        pieces = [
            (x + dx, self.__end_of(i) + dx, a - s * dx, s)
            for i, (x, a, s) in enumerate(zip(self.__xs, self.__as, self.__ss))
        ]
        self.__xs, self.__as, self.__ss = [xmin], [dval], [0.0]
        for start, end, a, s in pieces:
            lo, hi = max(start, xmin), min(end, xmax)
            if lo < hi:
                i0 = self.__split(lo)
                i1 = self.__split(hi)
                self.__xs[i0:i1] = [lo]
                self.__as[i0:i1] = [a]
                self.__ss[i0:i1] = [s]
        self.__normalize()

    def dilate(self, k: NumberT) -> None:
        """Multiplies the breakpoints and the definition interval by k > 0."""
        if k <= 0:
            raise ValueError(f"dilate expects a positive factor, got {k}")
        self.__xs = [x * k for x in self.__xs]
        self.__ss = [s / k for s in self.__ss]
        self.__xmax *= k

    def set_periodic(
        self,
        f: "NumToNumSegmentFunction",
        x0: NumberT,
        n: NumberT = math.inf,
        dval: NumberT = 0,
    ) -> None:
        """Repeats f n times from x0, and sets the value dval elsewhere."""
        fmin, fmax = f.definition_interval_min, f.definition_interval_max
        period = fmax - fmin
        if math.isinf(period) or period <= 0:
            raise ValueError("set_periodic expects a function with a finite domain")
        xmin, xmax = self.__xs[0], self.__xmax
        end = min(x0 + n * period, xmax) if not math.isinf(n) else xmax
        if math.isinf(end):
            raise ValueError("set_periodic cannot repeat a function infinitely")
        self.__xs, self.__as, self.__ss = [xmin], [dval], [0.0]
        k = 0
        while x0 + k * period < end:
            shift = x0 + k * period - fmin
            for start, stop, a, s in f.pieces():
                lo = max(start + shift, xmin)
                hi = min(stop + shift, end)
                if lo < hi:
                    i0 = self.__split(lo)
                    i1 = self.__split(hi)
                    self.__xs[i0:i1] = [lo]
                    self.__as[i0:i1] = [a - s * shift]
                    self.__ss[i0:i1] = [s]
            k += 1
        self.__normalize()

    def __combine(
        self, other: "NumToNumSegmentFunction", sign: float
    ) -> "NumToNumSegmentFunction":
        result = self.copy()
        lo = max(self.__xs[0], other.definition_interval_min)
        hi = min(self.__xmax, other.definition_interval_max)
        for start, end, a, s in other.pieces():
            start, end = max(start, lo), min(end, hi)
            if start >= end:
                continue
            i0 = result.__split(start)
            i1 = result.__split(end)
            for i in range(i0, i1):
                result.__as[i] += sign * a
                result.__ss[i] += sign * s
        result.__normalize()
        return result

    def __add__(self, other: "NumToNumSegmentFunction") -> "NumToNumSegmentFunction":
        if not isinstance(other, NumToNumSegmentFunction):
            return NotImplemented
        return self.__combine(other, 1.0)

    def __sub__(self, other: "NumToNumSegmentFunction") -> "NumToNumSegmentFunction":
        if not isinstance(other, NumToNumSegmentFunction):
            return NotImplemented
        return self.__combine(other, -1.0)

    def __mul__(self, k: NumberT) -> "NumToNumSegmentFunction":
        result = self.copy()
        result.__as = [a * k for a in result.__as]
        result.__ss = [s * k for s in result.__ss]
        result.__normalize()
        return result

    __rmul__ = __mul__

    def __iadd__(self, other: "NumToNumSegmentFunction") -> "NumToNumSegmentFunction":
        combined = self + other
        self.__xs, self.__as, self.__ss = combined.__xs, combined.__as, combined.__ss
        return self

    def __isub__(self, other: "NumToNumSegmentFunction") -> "NumToNumSegmentFunction":
        combined = self - other
        self.__xs, self.__as, self.__ss = combined.__xs, combined.__as, combined.__ss
        return self

    def __imul__(self, k: NumberT) -> "NumToNumSegmentFunction":
        self.__as = [a * k for a in self.__as]
        self.__ss = [s * k for s in self.__ss]
        self.__normalize()
        return self

    def is_semi_convex(self) -> bool:
        """Checks that the function is non-increasing then non-decreasing."""
        values = []
        for segment in self:
            values.extend((segment.start_value, segment.end_value))
        values = [v for v in values if not math.isnan(v)]
        i = 0
        while i + 1 < len(values) and values[i + 1] <= values[i]:
            i += 1
        while i + 1 < len(values) and values[i + 1] >= values[i]:
            i += 1
        return i + 1 >= len(values)

    def __iter__(self) -> Iterator[LinearSegment]:
        for start, end, a, s in self.pieces():
            yield LinearSegment(
                start, end, self.__eval(a, s, start), self.__eval(a, s, end)
            )

    def __str__(self) -> str:
        pieces = "; ".join(
            f"[{_format_bound(s.start)}, {_format_bound(s.end)}):"
            f" {s.start_value:g} -> {s.end_value:g}"
            for s in self
        )
        if self.__name:
            return f"{self.__name} = {{{pieces}}}"
        return f"{{{pieces}}}"

    def __repr__(self) -> str:
        return f"NumToNumSegmentFunction({self})"


def piecewise_linear_function(
    points: Sequence[NumberT],
    slopes: Sequence[NumberT],
    a: NumberT,
    fa: NumberT,
    name: Optional[str] = None,
) -> NumToNumSegmentFunction:
    """Builds a piecewise linear function from its breakpoints and slopes.

    The function has slope slopes[0] before points[0], slope slopes[i] on
    [points[i - 1], points[i]) and slope slopes[n] after points[n - 1]. When
    two consecutive points are equal, the slope between them is the height of
    the discontinuity at that point. The function satisfies f(a) == fa.

    Args:
      points: the n sorted breakpoints.
      slopes: the n + 1 slopes.
      a: the abscissa of the reference point.
      fa: the value of the function at a.
      name: an optional name.

    Returns:
      A NumToNumSegmentFunction.
    """
    n = len(points)
    if len(slopes) != n + 1:
        raise ValueError(
            f"piecewise_linear_function expects {n + 1} slopes, got {len(slopes)}"
        )
    if any(p > q for p, q in zip(points, points[1:])):
        raise ValueError("piecewise_linear_function expects sorted points")
    if n == 0:
        return NumToNumSegmentFunction.from_lines(
            [(-math.inf, fa - slopes[0] * a, float(slopes[0]))], name
        )
    lines = [(-math.inf, -slopes[0] * points[0], float(slopes[0]))]
    jump = 0.0
    for i, p in enumerate(points):
        s = float(slopes[i + 1])
        if i + 1 < n and points[i + 1] == p:
            jump += s
            continue
        _, intercept, slope = lines[-1]
        value = intercept + slope * p + jump
        jump = 0.0
        lines.append((p, value - s * p, s))
    offset = fa - NumToNumSegmentFunction.from_lines(lines).get_value(a)
    return NumToNumSegmentFunction.from_lines(
        [(x, c + offset, s) for x, c, s in lines], name
    )
