"""
Line tokenizer and word expansion.

`tokenize` splits a logical line into raw words without removing quotes;
`expand` then applies escapes, `$NAME` and `~` substitution to one word.
Words that begin with a single quote are left untouched by `expand`.

Example:
    >>> tokenize('echo "a b" c')
    ['echo', '"a b"', 'c']
"""

from __future__ import annotations

import logging
import string
from typing import Callable, Optional

from msh.core.exceptions import UnterminatedQuoteError

logger = logging.getLogger(__name__)

WHITESPACE = " \t"
VAR_CHARS = frozenset(string.ascii_letters + string.digits + "_")

# Looks up an environment variable, None when unset
Getenv = Callable[[str], Optional[str]]


def tokenize(line: str) -> list[str]:
    """Split a line into raw words.

    Quote characters stay part of the word; a backslash outside single
    quotes hides the next character from word splitting.

    Raises:
        UnterminatedQuoteError: If the line ends inside a quoted region.
    """
    words = []
    pos = 0
    end = len(line)

    while pos < end:
        if line[pos] in WHITESPACE:
            pos += 1
            continue
        start = pos
        pos = _scan_word(line, pos)
        words.append(line[start:pos])

    return words


def _scan_word(line: str, pos: int) -> int:
    """Return the index just past the word starting at `pos`."""
    end = len(line)
    while pos < end:
        ch = line[pos]
        if ch in WHITESPACE:
            break
        if ch == '"':
            pos = _skip_double_quoted(line, pos + 1)
        elif ch == "'":
            pos = _skip_single_quoted(line, pos + 1)
        elif ch == "\\":
            pos += 2
        else:
            pos += 1
    return min(pos, end)


def _skip_double_quoted(line: str, pos: int) -> int:
    end = len(line)
    while pos < end:
        ch = line[pos]
        if ch == '"':
            return pos + 1
        # escaped character, even a quote
        pos += 2 if ch == "\\" else 1
    raise UnterminatedQuoteError("double")


def _skip_single_quoted(line: str, pos: int) -> int:
    closing = line.find("'", pos)
    if closing == -1:
        raise UnterminatedQuoteError("single")
    return closing + 1


def expand(word: str, getenv: Getenv, home: str) -> str:
    """Apply escapes, variable and tilde substitution to a raw word.

    Args:
        word: A raw word produced by `tokenize`.
        getenv: Variable lookup; unset variables are kept as `$NAME`.
        home: Replacement text for `~`.

    Returns:
        The expanded word. Single-quoted words are returned verbatim.
    """
    if word.startswith("'"):
        return word

    out = []
    pos = 0
    end = len(word)

    while pos < end:
        ch = word[pos]
        if ch == "\\":
            # A lone trailing backslash is kept as is
            if pos + 1 < end:
                out.append(word[pos + 1])
                pos += 2
            else:
                out.append(ch)
                pos += 1
        elif ch == "$":
            pos += 1
            name_start = pos
            while pos < end and word[pos] in VAR_CHARS:
                pos += 1
            name = word[name_start:pos]
            value = getenv(name) if name else None
            expansion = value if value is not None else f"${name}"
            logger.debug(f"Expanded ${name} to {expansion}")
            out.append(expansion)
        elif ch == "~":
            out.append(home)
            pos += 1
        else:
            out.append(ch)
            pos += 1

    return "".join(out)


def expand_line(line: str, getenv: Getenv, home: str) -> list[str]:
    """Tokenize a line and expand every word."""
    words = tokenize(line)
    expanded = [expand(word, getenv, home) for word in words]
    logger.debug(f"Expanded line {line!r} -> {expanded!r}")
    return expanded


def continuation_prefix(line: str) -> Optional[str]:
    """Return the line without its continuation backslash, or None.

    A line continues when it ends with an odd number of backslashes; an
    even run is a sequence of escaped backslashes.
    """
    trailing = len(line) - len(line.rstrip("\\"))
    if trailing % 2 == 1:
        return line[:-1]
    return None
