"""Run code snippets through an online compiler service."""

from __future__ import annotations

import json
import os
from typing import NamedTuple
from urllib import error, parse, request

API_URL = "https://tool.runoob.com/compile2.php"
REFERER = "https://c.runoob.com/"
USER_AGENT = "Mozilla/5.0 (Windows NT 6.1; Win64; x64; rv:87.0) Gecko/20100101 Firefox/87.0"
TRUNCATION = "\n............\n............"


class RunType(NamedTuple):
    """Service language id and file extension."""

    language_id: str
    file_ext: str


class RunCodeError(Exception):
    """The service reported a failure."""


_CS = (
    "using System;\nnamespace HelloWorldApplication\n{\n   class HelloWorld\n   {\n"
    "      static void Main(string[] args)\n      {\n         Console.WriteLine(\"Hello World!\");\n"
    "      }\n   }\n}"
)
_CPP = "#include <iostream>\nusing namespace std;\n\nint main()\n{\n   cout << \"Hello World\";\n   return 0;\n}"
_JS = "console.log(\"Hello World!\");"
_RS = "fn main() {\n    println!(\"Hello World!\");\n}"
_KT = "fun main(args : Array<String>){\n    println(\"Hello World!\")\n}"
_TS = "const hello : string = \"Hello World!\"\nconsole.log(hello)"
_PY = "print(\"Hello, World!\")"
_SH = "echo 'Hello World!'"
_RB = "puts \"Hello World!\";"

TEMPLATES: dict[str, str] = {
    "py2": "print 'Hello World!'",
    "ruby": _RB,
    "rb": _RB,
    "php": "<?php\n\techo 'Hello World!';\n?>",
    "javascript": _JS,
    "js": _JS,
    "node.js": _JS,
    "scala": "object Main {\n  def main(args:Array[String])\n  {\n    println(\"Hello World!\")\n  }\n\t\t\n}",
    "go": "package main\n\nimport \"fmt\"\n\nfunc main() {\n   fmt.Println(\"Hello, World!\")\n}",
    "c": "#include <stdio.h>\n\nint main()\n{\n   printf(\"Hello, World! \n\");\n   return 0;\n}",
    "c++": _CPP,
    "cpp": _CPP,
    "java": (
        "public class HelloWorld {\n    public static void main(String []args) {\n"
        "       System.out.println(\"Hello World!\");\n    }\n}"
    ),
    "rust": _RS,
    "rs": _RS,
    "c#": _CS,
    "cs": _CS,
    "csharp": _CS,
    "shell": _SH,
    "bash": _SH,
    "erlang": "% escript will ignore the first line\n\nmain(_) ->\n    io:format(\"Hello World!~n\").",
    "perl": "print \"Hello, World!\n\";",
    "python": _PY,
    "py": _PY,
    "swift": "var myString = \"Hello, World!\"\nprint(myString)",
    "lua": "var myString = \"Hello, World!\"\nprint(myString)",
    "pascal": "runcode Hello;\nbegin\n  writeln ('Hello, world!')\nend.",
    "kotlin": _KT,
    "kt": _KT,
    "r": "myString <- \"Hello, World!\"\nprint ( myString)",
    "vb": (
        "Module Module1\n\n    Sub Main()\n        Console.WriteLine(\"Hello World!\")\n"
        "    End Sub\n\nEnd Module"
    ),
    "typescript": _TS,
    "ts": _TS,
}

TABLE: dict[str, RunType] = {
    "py2": RunType("0", "py"),
    "ruby": RunType("1", "rb"),
    "rb": RunType("1", "rb"),
    "php": RunType("3", "php"),
    "javascript": RunType("4", "js"),
    "js": RunType("4", "js"),
    "node.js": RunType("4", "js"),
    "scala": RunType("5", "scala"),
    "go": RunType("6", "go"),
    "c": RunType("7", "c"),
    "c++": RunType("7", "cpp"),
    "cpp": RunType("7", "cpp"),
    "java": RunType("8", "java"),
    "rust": RunType("9", "rs"),
    "rs": RunType("9", "rs"),
    "c#": RunType("10", "cs"),
    "cs": RunType("10", "cs"),
    "csharp": RunType("10", "cs"),
    "shell": RunType("10", "sh"),
    "bash": RunType("10", "sh"),
    "erlang": RunType("12", "erl"),
    "perl": RunType("14", "pl"),
    "python": RunType("15", "py3"),
    "py": RunType("15", "py3"),
    "swift": RunType("16", "swift"),
    "lua": RunType("17", "lua"),
    "pascal": RunType("18", "pas"),
    "kotlin": RunType("19", "kt"),
    "kt": RunType("19", "kt"),
    "r": RunType("80", "r"),
    "vb": RunType("84", "vb"),
    "typescript": RunType("1010", "ts"),
    "ts": RunType("1010", "ts"),
}


def lookup_language(language: str) -> RunType:
    """Return the run type for a language name; KeyError if unsupported."""
    key = language.lower()
    if key not in TABLE:
        raise KeyError(f"unsupported language: {language}")
    return TABLE[key]


def template_for(language: str) -> str:
    """Return the hello-world template for a language."""
    return TEMPLATES[language.lower()]


def clear_newline_suffix(text: str) -> str:
    """Strip all trailing newlines."""
    return text.rstrip("\n")


def cut_too_long(text: str) -> str:
    """Truncate output with more than 30 line breaks or over 1000 characters."""
    count = 0
    last = len(text) - 1
    for i, ch in enumerate(text):
        if ch == "\r" and i < last and text[i + 1] == "\n":
            pass
        elif ch in "\n\r":
            count += 1
        if count > 30 or i > 1000:
            return text[: i - 1] + TRUNCATION
    return text


def _str_field(payload: dict, key: str) -> str:
    value = payload.get(key)
    return value if isinstance(value, str) else ""


def parse_response(payload) -> str:
    """Extract the program output from a service reply, raising on errors."""
    if isinstance(payload, (bytes, str)):
        payload = json.loads(payload)
    if not isinstance(payload, dict):
        payload = {}
    errors = _str_field(payload, "errors")
    if errors != "\n\n":
        raise RunCodeError(cut_too_long(clear_newline_suffix(errors)))
    return cut_too_long(clear_newline_suffix(_str_field(payload, "output")))


def run_code(code: str, run_type: RunType, timeout: float = 15.0) -> str:
    """Send code to the compiler service and return its output."""
    form = {
        "code": code,
        "token": os.environ.get("RUNCODE_TOKEN", "token"),
        "stdin": "",
        "language": run_type[0],
        "fileext": run_type[1],
    }
    req = request.Request(
        API_URL,
        data=parse.urlencode(form).encode(),
        method="POST",
        headers={
            "Content-Type": "application/x-www-form-urlencoded; charset=UTF-8",
            "Referer": REFERER,
            "User-Agent": USER_AGENT,
        },
    )
    try:
        with request.urlopen(req, timeout=timeout) as resp:
            if resp.status != 200:
                raise RunCodeError("code not 200")
            body = resp.read()
    except error.HTTPError as exc:
        raise RunCodeError("code not 200") from exc
    except error.URLError as exc:
        raise RunCodeError(str(exc.reason)) from exc
    return parse_response(body)