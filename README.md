# chatplugins

The logic behind a set of chat-bot features, kept apart from any chat
protocol so that a bot of your own can drive it. Every module takes plain
Python values (user and group ids, texts, naive `datetime` objects, random
generators) and gives back plain values or raises an exception; sending the
result to a chat is up to the caller.

Install with `pip install .` (add `.[test]` for pytest). The only runtime
dependency is Pillow, used to draw the Wordle board.

## Modules

| Module | What it does |
| --- | --- |
| `chatplugins.moyu` | Slacker's reminder: days until the weekend and until public holidays (`Holiday`, `parse_holiday`, `format_holiday`, `weekend`, `reminder`). |
| `chatplugins.runcode` | Language table, hello-world templates and output trimming for an online compiler service, plus the call itself (`lookup_language`, `template_for`, `clear_newline_suffix`, `cut_too_long`, `parse_response`, `run_code`, `RunType`, `RunCodeError`). |
| `chatplugins.nsfw` | Turns image-classifier scores into a short verdict (`Picture`, `judge`, `autojudge`). |
| `chatplugins.nbnhhsh` | Looks up the meaning of pinyin-initial abbreviations (`parse_guess`, `get_value`). |
| `chatplugins.qqwife_registry` | SQLite marriage register, one table per group plus the day each group was last reset (`MarriageRegistry`, `Marriage`, `Status`). |
| `chatplugins.qqwife` | Rules of the one-couple-per-day group marriage game on top of the register (`ensure_today`, `check_single`, `check_mistress`, `check_fiancee`, `pick_candidates`, `reset_target`, `slicename`, `avatar_url`, `SkillCooldown`). |
| `chatplugins.sleep_manage` | Good-morning / good-night ranking with sleep and awake durations (`SleepDB`, `time_duration`, `is_morning`, `is_evening`, `morning_reply`, `evening_reply`). |
| `chatplugins.score` | Daily sign-in with a score capped at 120 and levels (`ScoreDB`, `sign_in`, `SignInResult`, `get_level`, `get_hour_word`, `next_level_score`). |
| `chatplugins.wtf` | A catalogue of online personality-test generators and parsing of their replies (`TABLE`, `new_wtf`, `listing`, `Wtf`, `parse_result`, `WtfError`). |
| `chatplugins.wordle` | Word guessing with 5-, 6- and 7-letter words and a PNG board (`WordleGame`, `grade`, `load_words`, `class_for`, `Mark`, `LengthNotEnough`, `UnknownWord`, `TimesRunOut`). |
| `chatplugins.tarot` | Tarot draws, interpretations and spreads from JSON card and formation data (`TarotDeck`, `Card`, `Formation`, `Draw`, `card_range`, `image_url`, `TarotError`). |
| `chatplugins.reborn` | Reincarnation lottery: a weighted pick of a country and a gender (`WeightedChooser`, `load_rates`, `reborn`). |
| `chatplugins.vtb_model` | SQLite catalogue of vtubers, quotation categories and voice clips (`VtbDB`, `FirstCategory`, `SecondCategory`, `ThirdCategory`, `escape_record_url`, `fetch_json`). |
| `chatplugins.word_count` | Hot-word counting over already segmented chat text with stop words (`StopWords`, `is_chinese_word`, `count_words`, `rank_by_word_count`, `clamp_message_count`). |

## Examples

A Wordle round:

```python
from chatplugins.wordle import WordleGame, load_words, UnknownWord

dictionary = load_words("apple\ngrape\nlemon\nmelon\n")
game = WordleGame("lemon", dictionary)
try:
    won = game.guess("melon")   # False: a valid word, but not the target
except UnknownWord:
    won = False
png = game.render()             # PNG bytes of the board
```

A daily sign-in:

```python
from datetime import datetime
from chatplugins.score import ScoreDB, sign_in

with ScoreDB("score.db") as db:
    result = sign_in(db, 123456, datetime.now())
    print(result.score, result.level, result.already_signed)
```

The holiday reminder:

```python
from datetime import datetime
from chatplugins.moyu import parse_holiday, reminder

holidays = [parse_holiday("国庆节", "7_2022_10_1")]
print(reminder(datetime.now(), holidays))
```

Trimming a program's output before posting it:

```python
from chatplugins.runcode import clear_newline_suffix, cut_too_long

raw_output = "line\n" * 50
text = cut_too_long(clear_newline_suffix(raw_output))
```

## Network access

Only a few functions go online, through `urllib`:

- `runcode.run_code` posts to the compiler service and raises `RunCodeError`
  on a non-200 reply, a network failure or an error reported by the service.
  The form token is read from the `RUNCODE_TOKEN` environment variable.
- `nbnhhsh.get_value` never raises: a failure comes back as a one-element list
  holding the error message.
- `Wtf.predict` raises `WtfError` on network failure or a reply that is not ok.
- `vtb_model.fetch_json` lets `urllib` and `json` errors propagate.

Everything else works offline; the database classes only need a file path.

## What this package does not do

- It does not connect to any chat platform, parse chat commands or send
  messages; there is no command-line entry point or bot runner.
- Apart from the Wordle board, it draws no images: sign-in cards, ranking
  charts and text-to-image rendering are left to the caller.
- It ships no data files. Tarot card and formation JSON, Wordle word lists,
  stop-word lists, country rates and holiday values must be supplied by the
  caller, and holidays are not fetched from any remote registry.
- `word_count` counts words in text that has already been split into words;
  it does no word segmentation and does not fetch chat history.