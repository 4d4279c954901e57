from datetime import datetime, timedelta

import pytest

from chatplugins.sleep_manage import (
    SleepDB,
    evening_reply,
    is_evening,
    is_morning,
    morning_reply,
    time_duration,
)


@pytest.fixture
def db(tmp_path):
    d = SleepDB(tmp_path / "manage.db")
    yield d
    d.close()


def test_first_sleep_is_position_one(db):
    pos, delta = db.sleep(1, 10, datetime(2022, 7, 28, 22, 0, 0))
    assert pos == 1
    assert delta == timedelta(0)


def test_sleep_positions_and_awake_time(db):
    db.sleep(1, 10, datetime(2022, 7, 28, 22, 0, 0))
    pos, _ = db.sleep(1, 20, datetime(2022, 7, 28, 22, 30, 0))
    assert pos == 2
    pos, delta = db.sleep(1, 10, datetime(2022, 7, 28, 23, 0, 0))
    assert pos == 2
    assert delta == timedelta(hours=1)


def test_other_group_not_counted(db):
    db.sleep(1, 10, datetime(2022, 7, 28, 22, 0, 0))
    pos, _ = db.sleep(2, 20, datetime(2022, 7, 28, 22, 30, 0))
    assert pos == 1


def test_after_midnight_counts_previous_evening(db):
    db.sleep(1, 10, datetime(2022, 7, 28, 22, 0, 0))
    db.sleep(1, 20, datetime(2022, 7, 28, 23, 0, 0))
    pos, _ = db.sleep(1, 30, datetime(2022, 7, 29, 2, 0, 0))
    assert pos == 3


def test_get_up_reports_sleep_time(db):
    db.sleep(1, 10, datetime(2022, 7, 28, 23, 0, 0))
    db.sleep(1, 20, datetime(2022, 7, 28, 23, 30, 0))
    pos, delta = db.get_up(1, 10, datetime(2022, 7, 29, 7, 0, 0))
    assert pos == 1
    assert delta == timedelta(hours=8)
    pos, _ = db.get_up(1, 20, datetime(2022, 7, 29, 7, 30, 0))
    assert pos == 2


def test_time_duration_splits():
    assert time_duration(timedelta(hours=1, minutes=2, seconds=3)) == (1, 2, 3)
    assert time_duration(timedelta(hours=30, seconds=59.9)) == (30, 0, 59)


def test_time_duration_truncates_negative_toward_zero():
    assert time_duration(timedelta(seconds=-90)) == (0, -1, -30)


@pytest.mark.parametrize("hour,expected", [(5, False), (6, True), (12, True), (13, False)])
def test_is_morning(hour, expected):
    assert is_morning(hour) is expected


@pytest.mark.parametrize("hour,expected", [(3, True), (4, False), (20, False), (21, True), (0, True)])
def test_is_evening(hour, expected):
    assert is_evening(hour) is expected


def test_replies_without_duration():
    assert morning_reply(3, timedelta(0)) == "早安成功！你是今天第3个起床的"
    assert evening_reply(2, timedelta(hours=25)) == "晚安成功！你是今天第2个睡觉的"


def test_replies_with_duration():
    assert morning_reply(4, timedelta(hours=7, minutes=5, seconds=9)) == (
        "早安成功！你的睡眠时长为7时5分9秒,你是今天第4个起床的"
    )
    assert evening_reply(1, timedelta(hours=2)) == (
        "晚安成功！你的清醒时长为2时0分0秒,你是今天第1个睡觉的"
    )