import io
import json
from unittest import mock

import pytest

from chatplugins.wtf import API_PREFIX, TABLE, Wtf, WtfError, listing, new_wtf, parse_result


def test_new_wtf_bounds():
    assert new_wtf(0) == Wtf("你的意义是什么?", "mRIFuS")
    assert new_wtf(len(TABLE) - 1) == TABLE[-1]
    assert new_wtf(-1) is None
    assert new_wtf(len(TABLE)) is None


def test_listing_lines():
    lines = listing().splitlines()
    assert len(lines) == len(TABLE)
    assert lines[0] == "00. 你的意义是什么?"
    assert all(line.startswith(f"{i:02d}. ") for i, line in enumerate(lines))


def test_url_escapes_names():
    w = Wtf("x", "ZoGXQd")
    assert w.url() == API_PREFIX + "ZoGXQd"
    assert w.url("a b", "c/d") == API_PREFIX + "ZoGXQd/a+b/c%2Fd"


def test_parse_result_ok():
    data = json.dumps({"text": "hello", "ok": True, "msg": ""})
    assert parse_result("测测cp", data) == "> 测测cp\nhello"


def test_parse_result_failure():
    data = json.dumps({"text": "", "ok": False, "msg": "bad name"})
    with pytest.raises(WtfError, match="bad name"):
        parse_result("n", data)


def test_predict_uses_service():
    body = json.dumps({"text": "result", "ok": True}).encode()
    w = new_wtf(2)
    with mock.patch("urllib.request.urlopen", return_value=io.BytesIO(body)) as op:
        out = w.predict("alice", "bob")
    assert out == "> " + w.name + "\nresult"
    assert op.call_args[0][0] == w.url("alice", "bob")


def test_predict_network_error():
    w = new_wtf(0)
    with mock.patch("urllib.request.urlopen", side_effect=OSError("down")):
        with pytest.raises(WtfError):
            w.predict("alice")