"""Verdicts on image classification scores."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

HSO_IMAGE = "https://gchat.qpic.cn/gchatpic_new//--4234EDEC5F147A4C319A41149D7E0EA9/0"


@dataclass(frozen=True)
class Picture:
    """Classifier probabilities for one image."""

    drawings: float = 0.0
    hentai: float = 0.0
    neutral: float = 0.0
    porn: float = 0.0
    sexy: float = 0.0


def _flags(p: Picture) -> list[str]:
    flags = []
    if p.hentai > 0.3:
        flags.append(" hentai")
    if p.porn > 0.3:
        flags.append(" porn")
    if p.sexy > 0.3:
        flags.append(" hso")
    return flags


def judge(p: Picture) -> str:
    """Verdict text for an explicit rating request."""
    if p.neutral > 0.3:
        return "普通哦"
    c = "二次元" if p.drawings > 0.3 or p.neutral < 0.3 else "三次元"
    return c + "".join(_flags(p))


def autojudge(p: Picture) -> Optional[str]:
    """Verdict for automatic review, or None when nothing should be said."""
    if p.neutral > 0.3:
        return None
    flags = _flags(p)
    if not flags:
        return None
    c = "二次元" if p.drawings > 0.3 else "三次元"
    return c + "".join(flags)