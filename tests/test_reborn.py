import json
import random

import pytest

from chatplugins.reborn import FAILURE, GENDER, WeightedChooser, load_rates, reborn


class _FixedRng:
    def __init__(self, bits, index=0):
        self.bits = bits
        self.index = index

    def getrandbits(self, k):
        return self.bits

    def randrange(self, n):
        return min(self.index, n - 1)


def test_single_choice_always_picked():
    chooser = WeightedChooser([("only", 3)])
    rng = random.Random(0)
    assert {chooser.pick(rng) for _ in range(20)} == {"only"}


def test_zero_weight_never_picked():
    chooser = WeightedChooser([("a", 0), ("b", 5)])
    rng = random.Random(1)
    assert {chooser.pick(rng) for _ in range(100)} == {"b"}


@pytest.mark.parametrize("choices", [[], [("a", 0)], [("a", 0), ("b", 0)]])
def test_no_positive_weight_raises(choices):
    with pytest.raises(ValueError):
        WeightedChooser(choices)


def test_negative_weight_raises():
    with pytest.raises(ValueError):
        WeightedChooser([("a", -1), ("b", 5)])


def test_pick_covers_all_items():
    chooser = WeightedChooser([("a", 1), ("b", 1), ("c", 1)])
    rng = random.Random(2)
    assert {chooser.pick(rng) for _ in range(200)} == {"a", "b", "c"}


def test_gender_picks_known_values():
    rng = random.Random(3)
    assert {GENDER.pick(rng) for _ in range(50)} <= {"男孩子", "女孩子", "雌雄同体"}


def test_load_rates_scales_weights():
    data = json.dumps([{"name": "A", "weight": 0.5}, {"name": "B", "weight": 1}])
    rates = load_rates(data)
    assert [n for n, _ in rates] == ["A", "B"]
    assert rates[0][1] == 500000000
    assert rates[1][1] == 2 * rates[0][1]


def test_reborn_success():
    countries = WeightedChooser(load_rates([{"name": "X", "weight": 1.0}]))
    msg = reborn(countries, _FixedRng(bits=(1 << 31) - 1))
    assert msg.startswith("投胎成功！\n您出生在 X, 是 ")
    assert any(g in msg for g in ("男孩子", "女孩子", "雌雄同体"))


def test_reborn_failure():
    countries = WeightedChooser([("X", 1)])
    assert reborn(countries, _FixedRng(bits=0)) == FAILURE


def test_reborn_threshold_boundary():
    countries = WeightedChooser([("X", 1)])
    assert reborn(countries, _FixedRng(bits=1 << 27)) == FAILURE
    assert reborn(countries, _FixedRng(bits=(1 << 27) + 1)) != FAILURE