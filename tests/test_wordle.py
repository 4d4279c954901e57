import io

import pytest
from PIL import Image

from chatplugins.wordle import (
    LengthNotEnough,
    Mark,
    TimesRunOut,
    UnknownWord,
    WordleError,
    WordleGame,
    class_for,
    grade,
    load_words,
)

DICT = ["apple", "paper", "grape", "lemon", "melon", "peach", "mango"]


def test_grade_exact_all_match():
    assert grade("apple", "apple") == [Mark.MATCH] * 5


def test_grade_absent_letters():
    marks = grade("apple", "xyzqw")
    assert marks == [Mark.NOTEXIST] * 5


def test_grade_misplaced_letter():
    marks = grade("lemon", "melon")
    assert marks[0] == Mark.EXIST
    assert marks[1] == Mark.MATCH
    assert marks[4] == Mark.MATCH


def test_win_returns_true():
    game = WordleGame("apple", DICT)
    assert game.guess("APPLE") is True
    assert game.history == ("apple",)


def test_miss_returns_false_and_records():
    game = WordleGame("apple", DICT)
    assert game.guess("grape") is False
    assert game.history == ("grape",)


def test_wrong_length_rejected():
    game = WordleGame("apple", DICT)
    with pytest.raises(LengthNotEnough):
        game.guess("app")
    assert game.history == ()


def test_unknown_word_rejected():
    game = WordleGame("apple", DICT)
    with pytest.raises(UnknownWord):
        game.guess("zzzzz")
    assert game.history == ()


def test_times_run_out_after_all_attempts():
    game = WordleGame("apple", DICT)
    assert game.attempts == 6
    for _ in range(5):
        assert game.guess("lemon") is False
    with pytest.raises(TimesRunOut):
        game.guess("melon")
    assert len(game.history) == 6


def test_errors_share_base():
    assert issubclass(TimesRunOut, WordleError)
    game = WordleGame("apple", DICT)
    with pytest.raises(WordleError):
        game.guess("zzzzz")
    with pytest.raises(WordleError):
        game.guess("ab")
    assert game.history == ()


def test_empty_guess_is_noop():
    game = WordleGame("apple", DICT)
    assert game.guess("") is False
    assert game.history == ()


def test_render_is_png_with_board_size():
    game = WordleGame("apple", DICT)
    game.guess("grape")
    img = Image.open(io.BytesIO(game.render()))
    assert img.format == "PNG"
    assert img.size == (136, 160)


def test_render_changes_with_guesses():
    game = WordleGame("apple", DICT)
    empty = game.render()
    game.guess("grape")
    assert game.render() != empty


def test_load_words_sorted():
    words = load_words("pear\napple\nmango")
    assert words == sorted(["pear", "apple", "mango"])


def test_class_for():
    assert class_for("") == 5
    assert class_for("五阶") == 5
    assert class_for("六阶") == 6
    assert class_for("七阶") == 7
    with pytest.raises(KeyError):
        class_for("八阶")