"""Slacker's reminder: countdowns to the weekend and to public holidays."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Iterable

GREETING = (
    "上午好，摸鱼人！\n工作再累，一定不要忘记摸鱼哦！有事没事起身去茶水间，去厕所，"
    "去廊道走走别老在工位上坐着，钱是老板的,但命是自己的。\n"
)
CLOSING = "上班是帮老板赚钱，摸鱼是赚老板的钱！最后，祝愿天下所有摸鱼人，都能愉快的渡过每一天…"

HOLIDAY_NAMES = ("元旦", "春节", "清明节", "劳动节", "端午节", "中秋节", "国庆节")

_VALUE_RE = re.compile(r"^\s*(-?\d+)_(-?\d+)_(-?\d+)_(-?\d+)")


@dataclass(frozen=True)
class Holiday:
    """A named holiday starting on ``date`` and lasting ``dur``."""

    name: str
    date: datetime
    dur: timedelta

    def describe(self, now: datetime) -> str:
        """Describe how far ``now`` is from this holiday."""
        d = self.date - now
        if d >= timedelta(0):
            days = d.total_seconds() / 86400.0
            return f"距离{self.name}还有: {days:.2f}天！"
        if d + self.dur >= timedelta(0):
            return f"好好享受 {self.name} 假期吧!"
        return f"今年 {self.name} 假期已过"


def format_holiday(dur: int, year: int, month: int, day: int) -> str:
    """Encode a holiday as the registry stores it: ``dur_year_month_day``."""
    return f"{dur}_{year}_{month}_{day}"


def parse_holiday(name: str, value: str) -> Holiday:
    """Build a holiday from its registry value ``dur_year_month_day``."""
    m = _VALUE_RE.match(value)
    if m is None:
        raise ValueError(f"malformed holiday value for {name}: {value!r}")
    dur, year, month, day = (int(g) for g in m.groups())
    return Holiday(name=name, date=datetime(year, month, day), dur=timedelta(days=dur))


def weekend(now: datetime) -> str:
    """Tell how many days are left until the weekend."""
    wd = now.weekday()
    if wd >= 5:
        return "好好享受周末吧！"
    return f"距离周末还有:{4 - wd}天！"


def reminder(now: datetime, holidays: Iterable[Holiday]) -> str:
    """Compose the full daily reminder text."""
    parts = [now.strftime("%Y-%m-%d"), GREETING, weekend(now)]
    for h in holidays:
        parts.append("\n")
        parts.append(h.describe(now))
    parts.append("\n")
    parts.append(CLOSING)
    return "".join(parts)