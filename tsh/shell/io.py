"""
Shell I/O Module

Where input lines come from and where prompts go.

Author: YSNRFD
Version: 1.0.0
"""

import os
from abc import ABC, abstractmethod
from typing import Iterable, Optional, TextIO, Union


class LineSource(ABC):
    """Produces one line of input per call."""

    @abstractmethod
    def read_line(self) -> Optional[str]:
        """
        Read the next line.

        Returns:
            The line without its trailing newline, or None at end of input
        """


class Presenter(ABC):
    """Shows the prompt before each read."""

    @abstractmethod
    def show(self, prompt: str) -> None:
        """Display a prompt string."""


class StreamLineSource(LineSource):
    """Reads lines from a text stream such as ``sys.stdin``."""

    def __init__(self, stream: TextIO):
        self._stream = stream

    def read_line(self) -> Optional[str]:
        line = self._stream.readline()
        if line == "":
            return None
        return line.rstrip("\n")


class FdLineSource(LineSource):
    """
    Reads lines straight from a file descriptor, one byte at a time.

    Nothing past the newline is consumed, so programs started by the shell
    can read the rest of a piped-in input themselves.
    """

    def __init__(self, fd: int = 0, encoding: str = "utf-8"):
        self._fd = fd
        self._encoding = encoding

    def read_line(self) -> Optional[str]:
        buf = bytearray()
        while True:
            byte = os.read(self._fd, 1)
            if not byte:
                if not buf:
                    return None
                break
            if byte == b"\n":
                break
            buf += byte
        return buf.decode(self._encoding, errors="replace")


class ScriptLineSource(LineSource):
    """Serves lines from a string or an iterable of strings."""

    def __init__(self, lines: Union[str, Iterable[str]]):
        if isinstance(lines, str):
            lines = lines.splitlines()
        self._lines = iter(lines)

    def read_line(self) -> Optional[str]:
        return next(self._lines, None)


class StreamPresenter(Presenter):
    """Writes the prompt to a text stream and flushes it."""

    def __init__(self, stream: TextIO):
        self._stream = stream

    def show(self, prompt: str) -> None:
        self._stream.write(prompt)
        self._stream.flush()


class NullPresenter(Presenter):
    """Shows nothing. Used for scripts and ``-c``."""

    def show(self, prompt: str) -> None:
        return None
