"""Daily sign-in with a capped cookie score and levels."""

from __future__ import annotations

import sqlite3
import threading
from dataclasses import dataclass
from datetime import datetime

SIGNIN_MAX = 1
SCOREMAX = 120
LEVELS = (0, 1, 2, 5, 10, 20, 35, 55, 75, 100, 120)
DAY_FORMAT = "%Y%m%d"


@dataclass(frozen=True)
class SignInResult:
    """Outcome of one sign-in attempt."""

    already_signed: bool
    score: int
    level: int
    next_level_score: int
    capped: bool
    hour_word: str
    month_word: str
    added: int = 1


def _stamp(dt: datetime) -> str:
    return dt.isoformat(sep=" ", timespec="microseconds")


class ScoreDB:
    """Scores and sign-in counts of users."""

    def __init__(self, path) -> None:
        self._conn = sqlite3.connect(str(path), check_same_thread=False)
        self._lock = threading.Lock()
        with self._conn:
            self._conn.execute(
                "CREATE TABLE IF NOT EXISTS score "
                "(uid INTEGER PRIMARY KEY, score INTEGER NOT NULL DEFAULT 0)"
            )
            self._conn.execute(
                "CREATE TABLE IF NOT EXISTS sign_in "
                "(uid INTEGER PRIMARY KEY, count INTEGER NOT NULL DEFAULT 0, updated_at TEXT)"
            )

    def __enter__(self) -> "ScoreDB":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying database."""
        with self._lock:
            self._conn.close()

    def get_score(self, uid: int) -> int:
        """Return the user's score, creating a zero entry if there is none."""
        with self._lock, self._conn:
            row = self._conn.execute("SELECT score FROM score WHERE uid = ?", (uid,)).fetchone()
            if row is not None:
                return row[0]
            self._conn.execute("INSERT INTO score (uid, score) VALUES (?, 0)", (uid,))
            return 0

    def set_score(self, uid: int, score: int) -> None:
        """Insert or update the user's score."""
        with self._lock, self._conn:
            self._conn.execute(
                "INSERT INTO score (uid, score) VALUES (?, ?) "
                "ON CONFLICT(uid) DO UPDATE SET score = excluded.score",
                (uid, score),
            )

    def get_sign_in(self, uid: int) -> tuple[int, datetime]:
        """Return the user's sign-in count and last update, creating an entry if needed."""
        with self._lock, self._conn:
            row = self._conn.execute(
                "SELECT count, updated_at FROM sign_in WHERE uid = ?", (uid,)
            ).fetchone()
            if row is not None:
                return row[0], datetime.fromisoformat(row[1])
            now = datetime.now()
            self._conn.execute(
                "INSERT INTO sign_in (uid, count, updated_at) VALUES (?, 0, ?)",
                (uid, _stamp(now)),
            )
            return 0, now

    def set_sign_in_count(self, uid: int, count: int, now: datetime) -> None:
        """Insert or update the user's sign-in count, stamping it with ``now``."""
        with self._lock, self._conn:
            self._conn.execute(
                "INSERT INTO sign_in (uid, count, updated_at) VALUES (?, ?, ?) "
                "ON CONFLICT(uid) DO UPDATE SET count = excluded.count, "
                "updated_at = excluded.updated_at",
                (uid, count, _stamp(now)),
            )

    def top_scores(self, n: int) -> list[tuple[int, int]]:
        """The ``n`` highest scores as (uid, score), highest first."""
        with self._lock:
            return [
                (uid, score)
                for uid, score in self._conn.execute(
                    "SELECT uid, score FROM score ORDER BY score DESC LIMIT ?", (n,)
                )
            ]


def get_level(count: int) -> int:
    """Level reached with ``count`` points; -1 when out of range."""
    for k, v in enumerate(LEVELS):
        if count == v:
            return k
        if count < v:
            return k - 1
    return -1


def get_hour_word(hour: int) -> str:
    """Greeting for an hour of the day."""
    if 6 <= hour < 12:
        return "早上好"
    if 12 <= hour < 14:
        return "中午好"
    if 14 <= hour < 19:
        return "下午好"
    if 19 <= hour < 24:
        return "晚上好"
    if 0 <= hour < 6:
        return "凌晨好"
    return ""


def next_level_score(level: int) -> int:
    """Points needed for the level after ``level``."""
    return LEVELS[level + 1] if level < 10 else SCOREMAX


def _result(already: bool, score: int, capped: bool, now: datetime,
            added: int = 1) -> SignInResult:
    level = get_level(score)
    return SignInResult(
        already_signed=already,
        score=score,
        level=level,
        next_level_score=next_level_score(level),
        capped=capped,
        hour_word=get_hour_word(now.hour),
        month_word=now.strftime("%m/%d"),
        added=added,
    )


def sign_in(db: ScoreDB, uid: int, now: datetime) -> SignInResult:
    """Sign ``uid`` in for the day of ``now`` and award a point."""
    today = now.strftime(DAY_FORMAT)
    count, updated = db.get_sign_in(uid)
    updated_day = updated.strftime(DAY_FORMAT)
    if count >= SIGNIN_MAX and updated_day == today:
        return _result(True, db.get_score(uid), False, now, added=0)
    if updated_day != today:
        db.set_sign_in_count(uid, 0, now)
    db.set_sign_in_count(uid, count + 1, now)
    add = 1
    score = db.get_score(uid) + add
    capped = False
    if score > SCOREMAX:
        score = SCOREMAX
        capped = True
    db.set_score(uid, score)
    return _result(False, score, capped, now, added=add)