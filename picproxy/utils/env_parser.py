""".env file loading."""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Optional

_DOUBLE_QUOTE_ESCAPES = {"n": "\n", "r": "\r", "t": "\t", "\\": "\\", '"': '"'}


def _read_quoted(value: str, quote: str) -> tuple[str, bool]:
    """Unescape a quoted value; the flag tells whether the closing quote was seen."""

    out: list[str] = []
    chars = iter(value[1:])
    for ch in chars:
        if ch == quote:
            return "".join(out), True
        if ch == "\\":
            nxt = next(chars, "")
            if quote == '"' and nxt in _DOUBLE_QUOTE_ESCAPES:
                out.append(_DOUBLE_QUOTE_ESCAPES[nxt])
            elif quote == "'" and nxt in {"\\", "'"}:
                out.append(nxt)
            else:
                out.append(ch + nxt)
            continue
        out.append(ch)
    return "".join(out), False


def _read_unquoted(value: str) -> str:
    # "#" only starts a comment after whitespace
    for idx, ch in enumerate(value):
        if ch == "#" and idx > 0 and value[idx - 1].isspace():
            return value[:idx].strip()
    return value.strip()


def _split_assignment(line: str) -> Optional[tuple[str, str]]:
    raw = line.strip()
    if not raw or raw.startswith("#"):
        return None
    if raw.startswith("export "):
        raw = raw[len("export ") :].lstrip()
    key, sep, value = raw.partition("=")
    key = key.strip()
    if not sep or not key:
        return None
    return key, value.strip()


def parse_env_text(text: str) -> list[tuple[str, str]]:
    """Return the ``(key, value)`` assignments of a .env document in order.

    A quoted value without its closing quote continues on the following
    lines; an unterminated value runs to the end of the text.
    """

    lines = text.splitlines()
    pairs: list[tuple[str, str]] = []
    idx = 0
    while idx < len(lines):
        assignment = _split_assignment(lines[idx])
        idx += 1
        if assignment is None:
            continue
        key, value = assignment
        if value[:1] not in ("'", '"'):
            pairs.append((key, _read_unquoted(value)))
            continue
        quote = value[0]
        parsed, closed = _read_quoted(value, quote)
        while not closed and idx < len(lines):
            value += "\n" + lines[idx]
            idx += 1
            parsed, closed = _read_quoted(value, quote)
        pairs.append((key, parsed))
    return pairs


def parse_env_line(line: str) -> Optional[tuple[str, str]]:
    """Return ``(key, value)`` for an assignment line, None for anything else."""

    pairs = parse_env_text(line)
    return pairs[0] if pairs else None


def load_env_file(path: Path) -> None:
    """Parse a .env-like file and set missing values into os.environ."""

    try:
        text = path.read_text(encoding="utf-8", errors="ignore")
    except FileNotFoundError:
        return
    except OSError as e:
        print(f"[config] failed to read env file '{path}': {e}", file=sys.stderr)
        return

    for key, value in parse_env_text(text):
        os.environ.setdefault(key, value)
