from datetime import date

import pytest

from chatplugins.qqwife_registry import Marriage, MarriageRegistry, Status

DAY1 = date(2022, 7, 28)
DAY2 = date(2022, 7, 29)


@pytest.fixture
def reg(tmp_path):
    r = MarriageRegistry(tmp_path / "reg.db")
    yield r
    r.close()


def test_check_update_records_first_day(reg):
    assert reg.check_update(100, DAY1) == "2022/07/28"
    assert reg.check_update(100, DAY2) == "2022/07/28"


def test_register_and_lookup_both_sides(reg):
    reg.register(100, 1, 2, "alice", "bob", DAY1)
    m, status = reg.lookup(100, 1)
    assert status is Status.HUSBAND
    assert m == Marriage(1, 2, "alice", "bob", "2022/07/28")
    m2, status2 = reg.lookup(100, 2)
    assert status2 is Status.WIFE
    assert m2 == m
    m3, status3 = reg.lookup(100, 3)
    assert status3 is Status.SINGLE
    assert m3 is None


def test_groups_are_separate(reg):
    reg.register(100, 1, 2, "a", "b", DAY1)
    _, status = reg.lookup(200, 1)
    assert status is Status.SINGLE


def test_single_noble_has_zero_target(reg):
    reg.register(100, 5, 0, "", "", DAY1)
    m, status = reg.lookup(100, 5)
    assert status is Status.HUSBAND
    assert m.target == 0


def test_divorce_wife_and_husband(reg):
    reg.register(100, 1, 2, "a", "b", DAY1)
    reg.register(100, 3, 4, "c", "d", DAY1)
    reg.divorce_wife(100, 2)
    assert reg.lookup(100, 1)[1] is Status.SINGLE
    assert reg.lookup(100, 2)[1] is Status.SINGLE
    reg.divorce_husband(100, 3)
    assert reg.lookup(100, 4)[1] is Status.SINGLE


def test_remarry_husband_replaces_wife(reg):
    reg.register(100, 1, 2, "a", "b", DAY1)
    m = reg.remarry(100, 1, 9, "a", "z", DAY2)
    assert m.target == 9
    assert reg.lookup(100, 9) == (m, Status.WIFE)
    assert reg.lookup(100, 2)[1] is Status.SINGLE


def test_remarry_without_record_raises(reg):
    reg.register(100, 1, 2, "a", "b", DAY1)
    with pytest.raises(LookupError):
        reg.remarry(100, 7, 8, "x", "y", DAY1)


def test_roster_skips_single_nobles(reg):
    reg.register(100, 1, 2, "a", "b", DAY1)
    reg.register(100, 5, 0, "", "", DAY1)
    entries, number = reg.roster(100)
    assert entries == [("a", "1", "b", "2")]
    assert number == 2


def test_roster_empty_and_only_nobles(reg):
    assert reg.roster(100) == ([], 0)
    reg.register(100, 5, 0, "", "", DAY1)
    assert reg.roster(100) == ([], 0)


def test_reset_group_clears_and_updates_day(reg):
    reg.check_update(100, DAY1)
    reg.register(100, 1, 2, "a", "b", DAY1)
    reg.reset(100, DAY2)
    assert reg.check_update(100, DAY1) == "2022/07/29"
    assert reg.lookup(100, 1)[1] is Status.SINGLE


def test_reset_missing_group_creates_table(reg):
    reg.reset("300", DAY2)
    assert reg.roster(300) == ([], 0)


def test_reset_all(reg):
    reg.register(100, 1, 2, "a", "b", DAY1)
    reg.register(200, 3, 4, "c", "d", DAY1)
    reg.reset("ALL", DAY2)
    assert reg.lookup(100, 1)[1] is Status.SINGLE
    assert reg.lookup(200, 3)[1] is Status.SINGLE
    assert reg.check_update(200, DAY1) == "2022/07/29"