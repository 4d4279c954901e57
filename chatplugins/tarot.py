"""Tarot card draws, interpretations and spreads."""

from __future__ import annotations

import json
import random
from dataclasses import dataclass, field
from typing import Optional

BED = "https://gitcode.net/shudorcl/zbp-tarot/-/raw/master/"
POSITIONS = ("正位", "逆位")
MAX_DRAW = 20


class TarotError(Exception):
    """A draw, interpretation or spread could not be made."""


@dataclass(frozen=True)
class Card:
    """One tarot card with its upright and reversed meanings."""

    name: str
    description: str = ""
    reverse_description: str = ""
    img_url: str = ""


@dataclass(frozen=True)
class Formation:
    """A spread layout."""

    cards_num: int
    is_cut: bool = False
    represent: list = field(default_factory=list)


@dataclass(frozen=True)
class Draw:
    """A drawn card, its orientation and the spread slot it fills."""

    card: Card
    reverse: bool
    represent: str = ""

    @property
    def position(self) -> str:
        """Orientation text: upright or reversed."""
        return POSITIONS[1] if self.reverse else POSITIONS[0]


def card_range(kind: str) -> tuple[int, int]:
    """First card index and count of cards for a deck kind."""
    if "小" in kind:
        return 22, 55
    if kind == "混合":
        return 0, 77
    return 0, 22


def image_url(card: Card, reverse: bool) -> str:
    """Image URL of a card in the given orientation."""
    return f"{BED}/{'Reverse' if reverse else ''}/{card.img_url}"


def _loads(data):
    if isinstance(data, (str, bytes, bytearray)):
        return json.loads(data)
    return data


class TarotDeck:
    """Cards keyed by index and spreads keyed by name."""

    def __init__(self, cards: dict[str, Card], formations: dict[str, Formation]) -> None:
        self.cards = cards
        self.formations = formations
        self._by_name = {c.name: c for c in cards.values()}

    @classmethod
    def from_json(cls, cards_json, formations_json) -> "TarotDeck":
        """Build a deck from the card and formation JSON documents."""
        cards = {}
        for key, raw in _loads(cards_json).items():
            info = raw.get("info", {}) or {}
            cards[key] = Card(
                name=raw.get("name", ""),
                description=info.get("description", ""),
                reverse_description=info.get("reverseDescription", ""),
                img_url=info.get("imgUrl", ""),
            )
        formations = {
            name: Formation(
                cards_num=int(raw.get("cards_num", 0)),
                is_cut=bool(raw.get("is_cut", False)),
                represent=raw.get("represent", []) or [],
            )
            for name, raw in _loads(formations_json).items()
        }
        return cls(cards, formations)

    def _card(self, index: int) -> Card:
        try:
            return self.cards[str(index)]
        except KeyError:
            raise TarotError(f"card {index} missing from deck") from None

    def _distinct(self, n: int, kind: str, rng) -> list[tuple[Card, bool]]:
        start, length = card_range(kind)
        if n > length:
            raise TarotError("抽取张数过多")
        picks = []
        seen: set[int] = set()
        for _ in range(n):
            j = rng.randrange(length)
            while j in seen:
                j = rng.randrange(length)
            seen.add(j)
            picks.append((self._card(j + start), rng.randrange(2) == 1))
        return picks

    def draw(self, n: int, kind: str, rng: Optional[random.Random] = None) -> list[Draw]:
        """Draw ``n`` distinct cards of a deck kind."""
        rng = rng if rng is not None else random.Random()
        if n <= 0:
            raise TarotError("张数必须为正")
        if n > MAX_DRAW:
            raise TarotError("抽取张数过多")
        start, length = card_range(kind)
        if n == 1:
            i = rng.randrange(length) + start
            reverse = rng.randrange(2) == 1
            return [Draw(self._card(i), reverse)]
        return [Draw(card, rev) for card, rev in self._distinct(n, kind, rng)]

    def interpret(self, name: str) -> Card:
        """Look a card up by name."""
        try:
            return self._by_name[name]
        except KeyError:
            raise TarotError(f"没有找到{name}噢~") from None

    def spread(self, formation: str, kind: str, rng: Optional[random.Random] = None) -> list[Draw]:
        """Lay out a named spread with cards of a deck kind."""
        rng = rng if rng is not None else random.Random()
        info = self.formations.get(formation)
        if info is None:
            names = " ".join(self.formations)
            raise TarotError(f"没有找到{formation}噢~\n现有牌阵列表: {names}")
        slots = info.represent[0] if info.represent else []
        draws = []
        for i, (card, rev) in enumerate(self._distinct(info.cards_num, kind, rng)):
            represent = slots[i] if i < len(slots) else ""
            draws.append(Draw(card, rev, represent))
        return draws