"""Split a partially typed command line into words.

The line is treated as ending at the cursor. Quoting follows POSIX shell
rules via :mod:`shlex`; a line that cannot be parsed (an unclosed quote
while the user is still typing) falls back to plain whitespace splitting so
completion keeps working.
"""

from __future__ import annotations

import logging
import shlex
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Tokens:
    """Words of a command line, split at the cursor.

    Attributes:
        words: Completed words before the one being typed.
        current: The word under the cursor; ``""`` when the line is empty
            or ends in whitespace.
    """

    words: tuple[str, ...]
    current: str

    def has_word_starting_with(self, prefix: str) -> bool:
        return any(word.startswith(prefix) for word in self.words)


def split_line(line: str) -> list[str]:
    try:
        return shlex.split(line)
    except ValueError as exc:
        logger.debug("Falling back to whitespace split: %s", exc)
        return line.split()


def tokenize(line: str) -> Tokens:
    """Split *line* into completed words and the word under the cursor.

    Example::

        >>> tokenize("http https://api.example.com/us")
        Tokens(words=('http',), current='https://api.example.com/us')
        >>> tokenize("http ")
        Tokens(words=('http',), current='')
    """
    parts = split_line(line)
    if not line or line[-1].isspace() or not parts:
        return Tokens(words=tuple(parts), current="")
    return Tokens(words=tuple(parts[:-1]), current=parts[-1])
