"""Good-morning / good-night tracking per group."""

from __future__ import annotations

import sqlite3
import threading
from datetime import datetime, timedelta

_US_PER_SECOND = 1_000_000
_US_PER_MINUTE = 60 * _US_PER_SECOND
_US_PER_HOUR = 60 * _US_PER_MINUTE


def _stamp(dt: datetime) -> str:
    return dt.isoformat(sep=" ", timespec="microseconds")


def _tdiv(a: int, b: int) -> int:
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b >= 0) else -q


class SleepDB:
    """Last sleep/wake time of every user, per group."""

    def __init__(self, path) -> None:
        self._conn = sqlite3.connect(str(path), check_same_thread=False)
        self._lock = threading.Lock()
        with self._conn:
            self._conn.execute(
                "CREATE TABLE IF NOT EXISTS sleep_manage ("
                "id INTEGER PRIMARY KEY AUTOINCREMENT, group_id INTEGER, "
                "user_id INTEGER, sleep_time TEXT)"
            )

    def __enter__(self) -> "SleepDB":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying database."""
        with self._lock:
            self._conn.close()

    def _touch(self, gid: int, uid: int, now: datetime, since: datetime) -> tuple[int, timedelta]:
        elapsed = timedelta(0)
        with self._lock, self._conn:
            row = self._conn.execute(
                "SELECT sleep_time FROM sleep_manage WHERE group_id = ? AND user_id = ? "
                "ORDER BY id LIMIT 1",
                (gid, uid),
            ).fetchone()
            if row is None:
                self._conn.execute(
                    "INSERT INTO sleep_manage (group_id, user_id, sleep_time) VALUES (?, ?, ?)",
                    (gid, uid, _stamp(now)),
                )
            else:
                elapsed = now - datetime.fromisoformat(row[0])
                self._conn.execute(
                    "UPDATE sleep_manage SET sleep_time = ? WHERE group_id = ? AND user_id = ?",
                    (_stamp(now), gid, uid),
                )
            position = self._conn.execute(
                "SELECT COUNT(*) FROM sleep_manage WHERE group_id = ? "
                "AND sleep_time <= ? AND sleep_time >= ?",
                (gid, _stamp(now), _stamp(since)),
            ).fetchone()[0]
        return position, elapsed

    def sleep(self, gid: int, uid: int, now: datetime) -> tuple[int, timedelta]:
        """Record a good night; return rank tonight and time awake since last record."""
        if now.hour >= 21:
            since = now.replace(hour=21, minute=0, second=0)
        elif now.hour <= 3:
            since = now.replace(minute=0, second=0) - timedelta(hours=3 + now.hour)
        else:
            since = datetime.min
        return self._touch(gid, uid, now, since)

    def get_up(self, gid: int, uid: int, now: datetime) -> tuple[int, timedelta]:
        """Record a good morning; return rank today and time slept since last record."""
        since = now.replace(hour=6, minute=0, second=0)
        return self._touch(gid, uid, now, since)


def time_duration(delta: timedelta) -> tuple[int, int, int]:
    """Split a duration into whole hours, minutes and seconds, truncating toward zero."""
    us = delta // timedelta(microseconds=1)
    hour = _tdiv(us, _US_PER_HOUR)
    minute = _tdiv(us - hour * _US_PER_HOUR, _US_PER_MINUTE)
    second = _tdiv(us - hour * _US_PER_HOUR - minute * _US_PER_MINUTE, _US_PER_SECOND)
    return hour, minute, second


def is_morning(hour: int) -> bool:
    """Good mornings count from 6 to 12 o'clock."""
    return 6 <= hour <= 12


def is_evening(hour: int) -> bool:
    """Good nights count from 21 o'clock to 3 in the morning."""
    return hour >= 21 or hour <= 3


def _unknown(hour: int, minute: int, second: int) -> bool:
    return (hour == 0 and minute == 0 and second == 0) or hour >= 24


def morning_reply(position: int, delta: timedelta) -> str:
    """Reply text for a good morning."""
    h, m, s = time_duration(delta)
    if _unknown(h, m, s):
        return f"早安成功！你是今天第{position}个起床的"
    return f"早安成功！你的睡眠时长为{h}时{m}分{s}秒,你是今天第{position}个起床的"


def evening_reply(position: int, delta: timedelta) -> str:
    """Reply text for a good night."""
    h, m, s = time_duration(delta)
    if _unknown(h, m, s):
        return f"晚安成功！你是今天第{position}个睡觉的"
    return f"晚安成功！你的清醒时长为{h}时{m}分{s}秒,你是今天第{position}个睡觉的"