"""Expand pinyin-initial abbreviations via an online guesser."""

from __future__ import annotations

import json
from urllib import parse, request

API_URL = "https://lab.magiconch.com/api/nbnhhsh/guess"


def _as_text(value) -> str:
    return value if isinstance(value, str) else json.dumps(value, ensure_ascii=False)


def parse_guess(body) -> list[str]:
    """Extract candidate expansions from the service reply."""
    data = json.loads(body)
    if not isinstance(data, list) or not data or not isinstance(data[0], dict):
        return []
    first = data[0]
    values = first.get("trans") if "trans" in first else first.get("inputting")
    if not isinstance(values, list):
        return []
    return [_as_text(v) for v in values]


def get_value(text: str) -> list[str]:
    """Ask the service for expansions of ``text``; failures come back as one message."""
    data = parse.urlencode({"text": text}).encode()
    req = request.Request(API_URL, data=data, method="POST")
    try:
        with request.urlopen(req) as resp:
            body = resp.read()
    except OSError as exc:
        return [str(exc)]
    try:
        return parse_guess(body)
    except ValueError as exc:
        return [str(exc)]