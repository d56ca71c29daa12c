"""
Command Tokenizer Module

Splits a raw input line into command segments at the top-level
delimiters ``|`` (pipe) and ``;`` (sequence).

Author: YSNRFD
Version: 1.0.0
"""

from dataclasses import dataclass
from enum import Enum
from typing import List


class Separator(Enum):
    """What follows a command segment."""
    PIPE = "|"
    SEQUENCE = ";"
    END = ""


DELIMITERS = {
    '|': Separator.PIPE,
    ';': Separator.SEQUENCE,
}


@dataclass(frozen=True)
class Segment:
    """A command text and the delimiter that immediately followed it."""
    text: str
    separator: Separator

    @property
    def pipes_out(self) -> bool:
        return self.separator is Separator.PIPE


class Tokenizer:
    """
    Splits shell input lines into segments.

    There is no quoting or escaping: every ``|`` and ``;`` in the line is
    a delimiter. Empty segments between delimiters are kept so the
    pipeline builder can decide what to do with them.

    Example:
        >>> Tokenizer().tokenize("ls -l | wc -l ; pwd")
        [Segment(text='ls -l', separator=<Separator.PIPE: '|'>),
         Segment(text='wc -l', separator=<Separator.SEQUENCE: ';'>),
         Segment(text='pwd', separator=<Separator.END: ''>)]
    """

    def tokenize(self, line: str) -> List[Segment]:
        """
        Scan a line left to right.

        Args:
            line: Raw input line (a trailing newline is fine)

        Returns:
            Ordered segments; empty if the line holds only whitespace
        """
        if not line or line.isspace():
            return []

        segments = []
        start = 0

        for i, char in enumerate(line):
            separator = DELIMITERS.get(char)
            if separator is None:
                continue
            segments.append(Segment(line[start:i].strip(), separator))
            start = i + 1

        segments.append(Segment(line[start:].strip(), Separator.END))

        return segments
