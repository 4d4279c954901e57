"""Per-group marriage register backed by SQLite."""

from __future__ import annotations

import sqlite3
import threading
from dataclasses import dataclass
from datetime import date
from enum import IntEnum
from typing import Optional, Union

DATE_FORMAT = "%Y/%m/%d"
UPDATE_TABLE = "updateinfo"

Day = Union[str, date]


class Status(IntEnum):
    """Marital status of a user within a group."""

    WIFE = 0
    HUSBAND = 1
    SINGLE = 3


@dataclass(frozen=True)
class Marriage:
    """One row of the register: ``user`` married ``target``."""

    user: int
    target: int
    username: str
    targetname: str
    updatetime: str


def _format_day(today: Day) -> str:
    return today if isinstance(today, str) else today.strftime(DATE_FORMAT)


def _quote(name: str) -> str:
    return '"' + name.replace('"', '""') + '"'


class MarriageRegistry:
    """Marriage records, one table per group plus a table of last reset days."""

    def __init__(self, path) -> None:
        self._conn = sqlite3.connect(str(path), check_same_thread=False)
        self._lock = threading.Lock()

    def __enter__(self) -> "MarriageRegistry":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying database."""
        with self._lock:
            self._conn.close()

    def _create_update_table(self) -> None:
        self._conn.execute(
            f"CREATE TABLE IF NOT EXISTS {UPDATE_TABLE} "
            "(gid INTEGER PRIMARY KEY, updatetime TEXT NOT NULL)"
        )

    def _create_group(self, gid: str) -> None:
        self._conn.execute(
            f"CREATE TABLE IF NOT EXISTS {_quote(gid)} ("
            "user INTEGER PRIMARY KEY, target INTEGER NOT NULL, "
            "username TEXT NOT NULL, targetname TEXT NOT NULL, updatetime TEXT NOT NULL)"
        )

    def _record_update(self, gid: int, day: str) -> None:
        self._create_update_table()
        self._conn.execute(
            f"INSERT OR REPLACE INTO {UPDATE_TABLE} (gid, updatetime) VALUES (?, ?)",
            (gid, day),
        )

    def _find(self, gid: str, column: str, value: int) -> Optional[Marriage]:
        row = self._conn.execute(
            f"SELECT user, target, username, targetname, updatetime FROM {_quote(gid)} "
            f"WHERE {column} = ? LIMIT 1",
            (value,),
        ).fetchone()
        return Marriage(*row) if row else None

    def _insert(self, gid: str, m: Marriage) -> None:
        self._conn.execute(
            f"INSERT OR REPLACE INTO {_quote(gid)} "
            "(user, target, username, targetname, updatetime) VALUES (?, ?, ?, ?, ?)",
            (m.user, m.target, m.username, m.targetname, m.updatetime),
        )

    def check_update(self, gid: int, today: Day) -> str:
        """Return the day the group was last reset, recording ``today`` if unknown."""
        with self._lock, self._conn:
            self._create_update_table()
            row = self._conn.execute(
                f"SELECT updatetime FROM {UPDATE_TABLE} WHERE gid = ?", (gid,)
            ).fetchone()
            if row is not None:
                return row[0]
            day = _format_day(today)
            self._record_update(gid, day)
            return day

    def reset(self, gid, today: Day) -> None:
        """Clear a group's register, or every group's when ``gid`` is ``"ALL"``."""
        gid = str(gid)
        day = _format_day(today)
        with self._lock, self._conn:
            if gid != "ALL":
                try:
                    self._conn.execute(f"DROP TABLE {_quote(gid)}")
                except sqlite3.OperationalError:
                    self._create_group(gid)
                    return
                self._record_update(int(gid), day)
                return
            names = [
                r[0]
                for r in self._conn.execute(
                    "SELECT name FROM sqlite_master WHERE type = 'table'"
                )
                if r[0] != UPDATE_TABLE
            ]
            for name in names:
                self._conn.execute(f"DROP TABLE {_quote(name)}")
                if name.lstrip("-").isdigit():
                    self._record_update(int(name), day)

    def divorce_wife(self, gid: int, wife: int) -> None:
        """Remove the marriage in which ``wife`` is the target."""
        with self._lock, self._conn:
            self._conn.execute(f"DELETE FROM {_quote(str(gid))} WHERE target = ?", (wife,))

    def divorce_husband(self, gid: int, husband: int) -> None:
        """Remove the marriage in which ``husband`` is the user."""
        with self._lock, self._conn:
            self._conn.execute(f"DELETE FROM {_quote(str(gid))} WHERE user = ?", (husband,))

    def remarry(self, gid: int, uid: int, target: int, username: str, targetname: str,
                today: Day) -> Marriage:
        """Rewrite the marriage held by ``uid`` (or else ``target``) as uid → target."""
        g = str(gid)
        with self._lock, self._conn:
            found = self._find(g, "user", uid) or self._find(g, "user", target)
            if found is None:
                raise LookupError(f"no marriage record for {uid} or {target} in group {gid}")
            m = Marriage(uid, target, username, targetname, _format_day(today))
            self._insert(g, m)
            return m

    def roster(self, gid: int) -> tuple[list[tuple[str, str, str, str]], int]:
        """List couples as (username, user, targetname, target) and the row count.

        The count is zero when no actual couple is registered.
        """
        g = str(gid)
        with self._lock, self._conn:
            self._create_group(g)
            number = self._conn.execute(f"SELECT COUNT(*) FROM {_quote(g)}").fetchone()[0]
            if number <= 0:
                return [], number
            rows = self._conn.execute(
                f"SELECT username, user, targetname, target FROM {_quote(g)} "
                "GROUP BY user ORDER BY user"
            ).fetchall()
        entries = [
            (username, str(user), targetname, str(target))
            for username, user, targetname, target in rows
            if target != 0
        ]
        return entries, (number if entries else 0)

    def lookup(self, gid: int, uid: int) -> tuple[Optional[Marriage], Status]:
        """Find ``uid``'s marriage and the side of it they are on."""
        g = str(gid)
        with self._lock, self._conn:
            self._create_group(g)
            m = self._find(g, "user", uid)
            if m is not None:
                return m, Status.HUSBAND
            m = self._find(g, "target", uid)
            if m is not None:
                return m, Status.WIFE
        return None, Status.SINGLE

    def register(self, gid: int, uid: int, target: int, username: str, targetname: str,
                 today: Day) -> Marriage:
        """Record that ``uid`` married ``target`` on ``today``."""
        g = str(gid)
        m = Marriage(uid, target, username, targetname, _format_day(today))
        with self._lock, self._conn:
            self._create_group(g)
            self._insert(g, m)
        return m