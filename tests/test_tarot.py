import json
import random

import pytest

from chatplugins.tarot import (
    BED,
    Card,
    TarotDeck,
    TarotError,
    card_range,
    image_url,
)


@pytest.fixture
def deck():
    cards = {
        str(i): {
            "name": f"card{i}",
            "info": {
                "description": f"up{i}",
                "reverseDescription": f"down{i}",
                "imgUrl": f"{i}.png",
            },
        }
        for i in range(78)
    }
    formations = {
        "圣三角": {"cards_num": 3, "is_cut": False, "represent": [["过去", "现在", "未来"]]},
    }
    return TarotDeck.from_json(json.dumps(cards), json.dumps(formations))


def _index(draw):
    return int(draw.card.name[len("card"):])


def test_card_range():
    assert card_range("塔罗牌") == (0, 22)
    assert card_range("大阿尔卡纳") == (0, 22)
    assert card_range("小阿卡纳") == (22, 55)
    assert card_range("混合") == (0, 77)


def test_single_draw_major(deck):
    rng = random.Random(1)
    for _ in range(50):
        (d,) = deck.draw(1, "塔罗牌", rng)
        assert 0 <= _index(d) < 22
        assert d.position in ("正位", "逆位")


def test_multi_draw_minor_distinct(deck):
    draws = deck.draw(10, "小阿卡纳", random.Random(2))
    idx = [_index(d) for d in draws]
    assert len(idx) == 10
    assert len(set(idx)) == 10
    assert all(22 <= i < 77 for i in idx)


@pytest.mark.parametrize("n", [0, -1, 21])
def test_draw_count_errors(deck, n):
    with pytest.raises(TarotError):
        deck.draw(n, "塔罗牌", random.Random(0))


def test_interpret(deck):
    card = deck.interpret("card5")
    assert card.description == "up5"
    assert card.reverse_description == "down5"
    assert card.img_url == "5.png"


def test_interpret_unknown(deck):
    with pytest.raises(TarotError, match="nothing"):
        deck.interpret("nothing")


def test_spread(deck):
    draws = deck.spread("圣三角", "混合", random.Random(3))
    assert [d.represent for d in draws] == ["过去", "现在", "未来"]
    assert len({_index(d) for d in draws}) == 3
    assert all(0 <= _index(d) < 77 for d in draws)


def test_spread_unknown_lists_formations(deck):
    with pytest.raises(TarotError) as exc:
        deck.spread("六芒星", "塔罗", random.Random(0))
    assert "六芒星" in str(exc.value)
    assert "圣三角" in str(exc.value)


def test_image_url():
    card = Card(name="x", img_url="a.png")
    assert image_url(card, True) == BED + "/Reverse/a.png"
    assert image_url(card, False) == BED + "//a.png"


def test_reverse_position(deck):
    draws = deck.draw(20, "小阿卡纳", random.Random(4))
    for d in draws:
        assert d.position == ("逆位" if d.reverse else "正位")