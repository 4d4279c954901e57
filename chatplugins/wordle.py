"""Word guessing game with a rendered board."""

from __future__ import annotations

import io
from enum import Enum
from typing import Iterable

from PIL import Image, ImageDraw, ImageFont

SIDE = 20
SPACE = 10
WHITE = (255, 255, 255, 255)

CLASSES = {"": 5, "五阶": 5, "六阶": 6, "七阶": 7}


class Mark(Enum):
    """How a guessed letter relates to the target, with its board colour."""

    MATCH = (125, 166, 108, 255)
    EXIST = (199, 183, 96, 255)
    NOTEXIST = (123, 123, 123, 255)
    UNDONE = (219, 219, 219, 255)


class WordleError(Exception):
    """A guess was rejected or ended the game."""


class LengthNotEnough(WordleError):
    """The guess has the wrong length."""

    def __init__(self) -> None:
        super().__init__("length not enough")


class UnknownWord(WordleError):
    """The guess is not in the dictionary."""

    def __init__(self) -> None:
        super().__init__("unknown word")


class TimesRunOut(WordleError):
    """No guesses are left."""

    def __init__(self) -> None:
        super().__init__("times run out")


def grade(target: str, guess: str) -> list[Mark]:
    """Mark every letter of ``guess`` against ``target``."""
    marks = []
    for t, g in zip(target, guess):
        if g == t:
            marks.append(Mark.MATCH)
        elif g in target:
            marks.append(Mark.EXIST)
        else:
            marks.append(Mark.NOTEXIST)
    return marks


def load_words(text: str) -> list[str]:
    """Split a word list file into sorted lines."""
    return sorted(text.split("\n"))


def class_for(name: str) -> int:
    """Word length for a difficulty name such as ``六阶``."""
    return CLASSES[name]


class WordleGame:
    """One round: guess ``target`` in ``len(target) + 1`` tries."""

    def __init__(self, target: str, dictionary: Iterable[str]) -> None:
        self.target = target.lower()
        self._dictionary = frozenset(dictionary)
        self._record: list[str] = []

    @property
    def attempts(self) -> int:
        """Number of guesses allowed."""
        return len(self.target) + 1

    @property
    def history(self) -> tuple[str, ...]:
        """Accepted guesses so far."""
        return tuple(self._record)

    def guess(self, word: str) -> bool:
        """Submit a guess; True when it is the target.

        Raises LengthNotEnough or UnknownWord for rejected guesses, and
        TimesRunOut when the last allowed guess misses.
        """
        if not word:
            return False
        s = word.lower()
        win = s == self.target
        if not win:
            if len(s) != len(self.target):
                raise LengthNotEnough()
            if s not in self._dictionary:
                raise UnknownWord()
        self._record.append(s)
        if win:
            return True
        if len(self._record) >= self.attempts:
            raise TimesRunOut()
        return False

    def render(self) -> bytes:
        """Draw the board as PNG bytes."""
        n = len(self.target)
        step = SIDE + 4
        width = step * n + SPACE * 2 - 4
        height = step * (n + 1) + SPACE * 2 - 4
        img = Image.new("RGBA", (width, height), WHITE)
        draw = ImageDraw.Draw(img)
        font = ImageFont.load_default()
        for i in range(n + 1):
            marks = grade(self.target, self._record[i]) if i < len(self._record) else None
            for j in range(n):
                if marks is not None:
                    x = SPACE + j * step
                    y = SPACE + i * step
                    draw.rectangle([x, y, x + SIDE - 1, y + SIDE - 1], fill=marks[j].value)
                    letter = self._record[i][j].upper()
                    draw.text((10 + j * step + 7, 10 + i * step + 4), letter, fill=WHITE, font=font)
                else:
                    x = 10 + j * step + 1
                    y = 10 + i * step + 1
                    draw.rectangle(
                        [x, y, x + SIDE - 3, y + SIDE - 3], outline=Mark.UNDONE.value, width=1
                    )
        buf = io.BytesIO()
        img.save(buf, format="PNG")
        return buf.getvalue()