"""Reincarnation lottery: a country by population weight and a gender."""

from __future__ import annotations

import bisect
import json
import random
from itertools import accumulate
from typing import Any, Iterable, Optional

SUCCESS = "投胎成功！\n您出生在 {}, 是 {}。"
FAILURE = "投胎失败！\n您没能活到出生，祝您下次好运！"


class WeightedChooser:
    """Picks items with probability proportional to integer weights."""

    def __init__(self, choices: Iterable[tuple[Any, int]]) -> None:
        items = sorted(choices, key=lambda c: c[1])
        for _, w in items:
            if w < 0:
                raise ValueError("weights must not be negative")
        self._items = [item for item, _ in items]
        self._totals = list(accumulate(int(w) for _, w in items))
        if not self._totals or self._totals[-1] < 1:
            raise ValueError("zero Choices with Weight >= 1")

    def pick(self, rng=None) -> Any:
        """Pick one item."""
        rng = rng if rng is not None else random
        r = rng.randrange(self._totals[-1]) + 1
        return self._items[bisect.bisect_left(self._totals, r)]


GENDER = WeightedChooser((("男孩子", 50707), ("女孩子", 48292), ("雌雄同体", 1001)))


def load_rates(data) -> list[tuple[str, int]]:
    """Parse the rate JSON into (country, integer weight) pairs."""
    if isinstance(data, (str, bytes, bytearray)):
        data = json.loads(data)
    return [(entry["name"], int(float(entry["weight"]) * 1e9)) for entry in data]


def reborn(countries: WeightedChooser, rng: Optional[random.Random] = None) -> str:
    """Roll a reincarnation and describe it."""
    rng = rng if rng is not None else random.Random()
    if rng.getrandbits(31) > 1 << 27:
        return SUCCESS.format(countries.pick(rng), GENDER.pick(rng))
    return FAILURE