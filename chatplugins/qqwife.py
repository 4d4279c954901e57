"""Rules of the one-couple-per-day group marriage game."""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Callable, Iterable, Mapping, Optional

from chatplugins.qqwife_registry import DATE_FORMAT, Day, MarriageRegistry, Status

AVATAR_URL = "http://q4.qlogo.cn/g?b=qq&nk={}&s=640"
NAME_WIDTH_LIMIT = 350
CANDIDATE_WINDOW = 30

CONFESSION_SUCCESS = (
    "是个勇敢的孩子(*/ω＼*) 今天的运气都降临在你的身边~\n\n",
    "(´･ω･`)对方答应了你 并表示愿意当今天的CP\n\n",
)
CONFESSION_FAILURE = (
    "今天的运气有一点背哦~明天再试试叭",
    "_(:з」∠)_下次还有机会 咱抱抱你w",
    "今天失败了惹. 摸摸头~咱明天还有机会",
)
NTR_SUCCESS = ("因为你的个人魅力~~今天他就是你的了w\n\n",)
DIVORCE_FAILURE = (
    "打是情，骂是爱，,不打不亲不相爱。答应我不要分手。",
    "床头打架床尾和，夫妻没有隔夜仇。安啦安啦，不要闹变扭。",
)
DIVORCE_SUCCESS = (
    "离婚成功力\n天涯何处无芳草，何必单恋一枝花？不如再摘一支（bushi",
    "离婚成功力\n话说你不考虑当个1？",
)

GROUP_ONLY = "该功能只能在群组使用或者指定群组"


class SkillCooldown:
    """One skill use per group member per period."""

    def __init__(self, period: timedelta = timedelta(hours=12)) -> None:
        self.period = period
        self._last: dict[str, datetime] = {}

    def allow(self, gid: int, uid: int, now: datetime) -> bool:
        """Consume the member's skill use if it is available."""
        key = f"{gid}{uid}"
        last = self._last.get(key)
        if last is not None and now - last < self.period:
            return False
        self._last[key] = now
        return True


def avatar_url(qq: int) -> str:
    """URL of a user's avatar image."""
    return AVATAR_URL.format(qq)


def slicename(name: str, measure: Callable[[str], float]) -> str:
    """Shorten a name whose drawn width exceeds the column width."""
    width = 0
    last = 0
    for i, ch in enumerate(name):
        width += int(measure(ch))
        if width > NAME_WIDTH_LIMIT:
            break
        last = i
    if width > NAME_WIDTH_LIMIT:
        return name[: max(last - 1, 0)] + "......"
    return name


def _day(today: Day) -> str:
    return today if isinstance(today, str) else today.strftime(DATE_FORMAT)


def ensure_today(registry: MarriageRegistry, gid: int, today: Day) -> bool:
    """Reset the group's register if it dates from another day; True if reset."""
    day = _day(today)
    if registry.check_update(gid, day) != day:
        registry.reset(gid, day)
        return True
    return False


def check_single(registry: MarriageRegistry, gid: int, uid: int, fiancee: int,
                 today: Day) -> Optional[str]:
    """Check that both sides may marry; return the refusal text or None."""
    if ensure_today(registry, gid, today):
        return None
    user_m, user_status = registry.lookup(gid, uid)
    fiancee_m, fiancee_status = registry.lookup(gid, fiancee)
    user_target = user_m.target if user_m else 0
    fiancee_target = fiancee_m.target if fiancee_m else 0
    if user_status == Status.SINGLE and fiancee_status == Status.SINGLE:
        return None
    if user_target == fiancee:
        return "笨蛋~你们明明已经在一起了啊w"
    if user_status != Status.SINGLE and user_target == 0:
        return "今天的你是单身贵族噢"
    if user_status == Status.HUSBAND:
        return "笨蛋~你家里还有个吃白饭的w"
    if user_status == Status.WIFE:
        return "该是0就是0，当0有什么不好"
    if fiancee_status != Status.SINGLE and fiancee_target == 0:
        return "今天的ta是单身贵族噢"
    if fiancee_status == Status.HUSBAND:
        return "他有别的女人了，你该放下了"
    if fiancee_status == Status.WIFE:
        return "这是一个纯爱的世界，拒绝NTR"
    return None


def check_mistress(registry: MarriageRegistry, gid: int, uid: int, fiancee: int,
                   today: Day) -> Optional[str]:
    """Check that ``uid`` may steal ``fiancee``; return the refusal text or None."""
    if ensure_today(registry, gid, today):
        return "ta现在还是单身哦，快向ta表白吧！"
    user_m, user_status = registry.lookup(gid, uid)
    user_target = user_m.target if user_m else 0
    if user_target == fiancee:
        return "笨蛋~你们明明已经在一起了啊w"
    if user_status != Status.SINGLE and user_target == 0:
        return "今天的你是单身贵族哦"
    if fiancee == uid:
        return None
    if user_status == Status.HUSBAND:
        return "打灭，不给纳小妾！"
    if user_status == Status.WIFE:
        return "该是0就是0，当0有什么不好"
    fiancee_m, fiancee_status = registry.lookup(gid, fiancee)
    if fiancee_status == Status.SINGLE:
        return "ta现在还是单身哦，快向ta表白吧！"
    if fiancee_m is None or fiancee_m.target == 0:
        return "今天的ta是单身贵族哦"
    return None


def check_fiancee(registry: MarriageRegistry, gid: int, uid: int, today: Day) -> Optional[str]:
    """Check that ``uid`` is married and may ask for a divorce."""
    if ensure_today(registry, gid, today):
        return "今天你还没有结婚哦"
    _, status = registry.lookup(gid, uid)
    if status == Status.SINGLE:
        return "今天你还没有结婚哦"
    return None


def pick_candidates(registry: MarriageRegistry, gid: int,
                    members: Iterable[Mapping]) -> list[int]:
    """Single members among the most recently active ones, oldest activity first."""
    ordered = sorted(members, key=lambda m: int(m.get("last_sent_time", 0) or 0))
    recent = ordered[-CANDIDATE_WINDOW:]
    result = []
    for member in recent:
        uid = int(member.get("user_id", 0) or 0)
        _, status = registry.lookup(gid, uid)
        if status == Status.SINGLE:
            result.append(uid)
    return result


def reset_target(arg: str, group_id: int) -> str:
    """Resolve the argument of a reset command to a group id or ``"ALL"``."""
    if arg in ("", "本群"):
        if group_id == 0:
            raise ValueError(GROUP_ONLY)
        return str(group_id)
    if arg == "所有":
        return "ALL"
    return arg