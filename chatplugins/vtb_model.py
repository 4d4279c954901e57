"""Storage of vtuber quotation categories and voice clips."""

from __future__ import annotations

import json
import random
import re
import sqlite3
import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional
from urllib import parse, request

VTB_LIST_URL = "https://vtbkeyboard.moe/api/get_vtb_list"
VTB_PAGE_URL = "https://vtbkeyboard.moe/api/get_vtb_page?uid="
USER_AGENT = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/96.0.4664.110 Safari/537.36"
FETCH_TIMEOUT = 30.0

FIRST_HEADER = "请选择一个vtb并发送序号:\n"
SECOND_HEADER = "请选择一个语录类别并发送序号:\n"
THIRD_HEADER = "请选择一个语录并发送序号:\n"

_LAST_SEGMENT = re.compile(r".*/(.*)")
_ALIVE = "deleted_at IS NULL"


@dataclass(frozen=True)
class FirstCategory:
    """A vtuber."""

    index: int
    name: str
    uid: str
    description: str = ""
    icon_path: str = ""
    id: int = 0


@dataclass(frozen=True)
class SecondCategory:
    """A category of quotations of one vtuber."""

    index: int
    first_uid: str
    name: str
    author: str = ""
    description: str = ""
    id: int = 0


@dataclass(frozen=True)
class ThirdCategory:
    """One voice clip."""

    index: int
    second_index: int
    first_uid: str
    name: str
    path: str = ""
    author: str = ""
    description: str = ""
    id: int = 0


_SCHEMA = (
    "CREATE TABLE IF NOT EXISTS first_category ("
    "id INTEGER PRIMARY KEY AUTOINCREMENT, created_at datetime, updated_at datetime, "
    "deleted_at datetime, first_category_index bigint, first_category_name varchar(255), "
    "first_category_uid varchar(255), first_category_description varchar(1024), "
    "first_category_icon_path varchar(255))",
    "CREATE TABLE IF NOT EXISTS second_category ("
    "id INTEGER PRIMARY KEY AUTOINCREMENT, created_at datetime, updated_at datetime, "
    "deleted_at datetime, second_category_index bigint, first_category_uid varchar(255), "
    "second_category_name varchar(255), second_category_author varchar(255), "
    "second_category_description varchar(255))",
    "CREATE TABLE IF NOT EXISTS third_category ("
    "id INTEGER PRIMARY KEY AUTOINCREMENT, created_at datetime, updated_at datetime, "
    "deleted_at datetime, third_category_index bigint, second_category_index bigint, "
    "first_category_uid varchar(255), third_category_name varchar(255), "
    "third_category_path varchar(255), third_category_author varchar(255), "
    "third_category_description varchar(255))",
)

_FIRST_COLS = (
    "id, first_category_index, first_category_name, first_category_uid, "
    "first_category_description, first_category_icon_path"
)
_THIRD_COLS = (
    "id, third_category_index, second_category_index, first_category_uid, "
    "third_category_name, third_category_path, third_category_author, "
    "third_category_description"
)


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    return json.dumps(value, ensure_ascii=False)


def _get(obj: Any, *keys: str) -> Any:
    for key in keys:
        if not isinstance(obj, dict):
            return None
        obj = obj.get(key)
    return obj


def _stamp() -> str:
    return datetime.now().isoformat(sep=" ", timespec="microseconds")


def _first(row) -> FirstCategory:
    rid, index, name, uid, desc, icon = row
    return FirstCategory(index or 0, name or "", uid or "", desc or "", icon or "", rid)


def _third(row) -> ThirdCategory:
    rid, index, sindex, uid, name, path, author, desc = row
    return ThirdCategory(
        index or 0, sindex or 0, uid or "", name or "", path or "", author or "", desc or "", rid
    )


def escape_record_url(url: str) -> str:
    """Escape the file name part of a clip URL for download."""
    m = _LAST_SEGMENT.match(url)
    if m is None:
        return url
    last = m.group(1)
    url = url.replace(last, parse.quote_plus(last))
    return url.replace("+", "%20")


def fetch_json(url: str) -> Any:
    """Fetch a JSON document, decoding doubly escaped unicode sequences."""
    req = request.Request(url, headers={"User-Agent": USER_AGENT})
    with request.urlopen(req, timeout=FETCH_TIMEOUT) as resp:
        body = resp.read()
    text = body.decode("utf-8") if isinstance(body, (bytes, bytearray)) else str(body)
    return json.loads(text.replace("\\\\u", "\\u"))


class VtbDB:
    """Three-level catalogue: vtubers, quotation categories, voice clips."""

    def __init__(self, path) -> None:
        self._conn = sqlite3.connect(str(path), check_same_thread=False)
        self._lock = threading.Lock()
        with self._conn:
            for stmt in _SCHEMA:
                self._conn.execute(stmt)

    def __enter__(self) -> "VtbDB":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying database."""
        with self._lock:
            self._conn.close()

    def _first_uid(self, first_index: int) -> str:
        row = self._conn.execute(
            f"SELECT first_category_uid FROM first_category WHERE first_category_index = ? "
            f"AND {_ALIVE} ORDER BY id LIMIT 1",
            (first_index,),
        ).fetchone()
        return (row[0] or "") if row else ""

    def first_category_message(self) -> str:
        """Menu listing every vtuber."""
        with self._lock:
            rows = self._conn.execute(
                f"SELECT first_category_index, first_category_name FROM first_category "
                f"WHERE {_ALIVE} ORDER BY id"
            ).fetchall()
        return FIRST_HEADER + "".join(f"{i}. {n}\n" for i, n in rows)

    def second_category_message(self, first_index: int) -> str:
        """Menu of a vtuber's quotation categories, or "" when there are none."""
        with self._lock:
            uid = self._first_uid(first_index)
            rows = self._conn.execute(
                f"SELECT second_category_index, second_category_name FROM second_category "
                f"WHERE first_category_uid = ? AND {_ALIVE} ORDER BY id",
                (uid,),
            ).fetchall()
        if not rows:
            return ""
        return SECOND_HEADER + "".join(f"{i}. {n}\n" for i, n in rows)

    def third_category_message(self, first_index: int, second_index: int) -> str:
        """Menu of the clips in one category, or "" when there are none."""
        with self._lock:
            uid = self._first_uid(first_index)
            rows = self._conn.execute(
                f"SELECT third_category_index, third_category_name FROM third_category "
                f"WHERE first_category_uid = ? AND second_category_index = ? AND {_ALIVE} "
                "ORDER BY id",
                (uid, second_index),
            ).fetchall()
        if not rows:
            return ""
        return THIRD_HEADER + "".join(f"{i}. {n}\n" for i, n in rows)

    def third_category(self, first_index: int, second_index: int,
                       third_index: int) -> Optional[ThirdCategory]:
        """The clip chosen by the three menu indexes, if any."""
        with self._lock:
            uid = self._first_uid(first_index)
            row = self._conn.execute(
                f"SELECT {_THIRD_COLS} FROM third_category WHERE first_category_uid = ? "
                f"AND second_category_index = ? AND third_category_index = ? AND {_ALIVE} "
                "LIMIT 1",
                (uid, second_index, third_index),
            ).fetchone()
        return _third(row) if row else None

    def random_vtb(self, rng: Optional[random.Random] = None) -> Optional[ThirdCategory]:
        """A random clip, or None when the catalogue is empty."""
        rng = rng if rng is not None else random.Random()
        with self._lock:
            count = self._conn.execute(
                f"SELECT COUNT(*) FROM third_category WHERE {_ALIVE}"
            ).fetchone()[0]
            if count <= 0:
                return None
            row = self._conn.execute(
                f"SELECT {_THIRD_COLS} FROM third_category WHERE {_ALIVE} "
                "ORDER BY id LIMIT 1 OFFSET ?",
                (rng.randrange(count),),
            ).fetchone()
        return _third(row) if row else None

    def first_category_by_uid(self, uid: str) -> Optional[FirstCategory]:
        """The vtuber with the given uid, if any."""
        with self._lock:
            row = self._conn.execute(
                f"SELECT {_FIRST_COLS} FROM first_category WHERE first_category_uid = ? "
                f"AND {_ALIVE} LIMIT 1",
                (uid,),
            ).fetchone()
        return _first(row) if row else None

    def store_vtb_list(self, data) -> list[str]:
        """Insert or update the vtuber list; return their uids in order."""
        if isinstance(data, (str, bytes, bytearray)):
            data = json.loads(data)
        items = data if isinstance(data, list) else []
        uids = []
        with self._lock, self._conn:
            for i, item in enumerate(items):
                name = _text(_get(item, "name"))
                desc = _text(_get(item, "description"))
                icon = _text(_get(item, "icon_path"))
                uid = _text(_get(item, "uid"))
                now = _stamp()
                found = self._conn.execute(
                    f"SELECT id FROM first_category WHERE first_category_uid = ? AND {_ALIVE} "
                    "LIMIT 1",
                    (uid,),
                ).fetchone()
                if found is None:
                    self._conn.execute(
                        "INSERT INTO first_category (created_at, updated_at, "
                        "first_category_index, first_category_name, first_category_uid, "
                        "first_category_description, first_category_icon_path) "
                        "VALUES (?, ?, ?, ?, ?, ?, ?)",
                        (now, now, i, name, uid, desc, icon),
                    )
                else:
                    self._conn.execute(
                        "UPDATE first_category SET updated_at = ?, first_category_index = ?, "
                        "first_category_name = ?, first_category_description = ?, "
                        f"first_category_icon_path = ? WHERE first_category_uid = ? AND {_ALIVE}",
                        (now, i, name, desc, icon, uid),
                    )
                uids.append(uid)
        return uids

    def store_vtb(self, uid: str, data) -> None:
        """Insert or update one vtuber's categories and clips from its page document."""
        if isinstance(data, (str, bytes, bytearray)):
            data = json.loads(data)
        voices = _get(data, "data", "voices")
        voices = voices if isinstance(voices, list) else []
        with self._lock, self._conn:
            for si, second in enumerate(voices):
                self._store_second(uid, si, second)
                clips = _get(second, "voiceList")
                for ti, third in enumerate(clips if isinstance(clips, list) else []):
                    self._store_third(uid, si, ti, third)

    def _store_second(self, uid: str, si: int, item) -> None:
        name = _text(_get(item, "categoryName"))
        author = _text(_get(item, "author"))
        desc = _text(_get(item, "categoryDescription", "zh-CN"))
        now = _stamp()
        found = self._conn.execute(
            "SELECT id FROM second_category WHERE first_category_uid = ? "
            f"AND second_category_index = ? AND {_ALIVE} LIMIT 1",
            (uid, si),
        ).fetchone()
        if found is None:
            self._conn.execute(
                "INSERT INTO second_category (created_at, updated_at, second_category_index, "
                "first_category_uid, second_category_name, second_category_author, "
                "second_category_description) VALUES (?, ?, ?, ?, ?, ?, ?)",
                (now, now, si, uid, name, author, desc),
            )
        else:
            self._conn.execute(
                "UPDATE second_category SET updated_at = ?, second_category_name = ?, "
                "second_category_author = ?, second_category_description = ? "
                f"WHERE first_category_uid = ? AND second_category_index = ? AND {_ALIVE}",
                (now, name, author, desc, uid, si),
            )

    def _store_third(self, uid: str, si: int, ti: int, item) -> None:
        name = _text(_get(item, "name"))
        desc = _text(_get(item, "description", "zh-CN"))
        path = _text(_get(item, "path"))
        author = _text(_get(item, "author"))
        now = _stamp()
        found = self._conn.execute(
            "SELECT id FROM third_category WHERE first_category_uid = ? "
            f"AND second_category_index = ? AND third_category_index = ? AND {_ALIVE} LIMIT 1",
            (uid, si, ti),
        ).fetchone()
        if found is None:
            self._conn.execute(
                "INSERT INTO third_category (created_at, updated_at, third_category_index, "
                "second_category_index, first_category_uid, third_category_name, "
                "third_category_path, third_category_author, third_category_description) "
                "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)",
                (now, now, ti, si, uid, name, path, author, desc),
            )
        else:
            self._conn.execute(
                "UPDATE third_category SET updated_at = ?, third_category_name = ?, "
                "third_category_description = ?, third_category_path = ?, "
                "third_category_author = ? WHERE first_category_uid = ? "
                f"AND second_category_index = ? AND third_category_index = ? AND {_ALIVE}",
                (now, name, desc, path, author, uid, si, ti),
            )