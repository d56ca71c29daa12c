"""
Stage Module

A single command of a pipeline: its argv and how it is connected to
its neighbours.

Author: YSNRFD
Version: 1.0.0
"""

from dataclasses import dataclass
from typing import Any, List, Optional, Tuple

from tsh.core.config_loader import ShellConfig
from tsh.exceptions import EmptyCommandError, ArgumentLimitError


DEFAULT_MAX_ARGS = ShellConfig.max_args
DEFAULT_QUIT_KEYWORD = ShellConfig.quit_keyword


def split_command(text: str, max_args: int = DEFAULT_MAX_ARGS) -> List[str]:
    """
    Split a command text into argv tokens on runs of whitespace.

    Raises:
        EmptyCommandError: If the text holds no tokens
        ArgumentLimitError: If it holds more than ``max_args`` tokens
    """
    tokens = text.split()

    if not tokens:
        raise EmptyCommandError(text)

    if len(tokens) > max_args:
        raise ArgumentLimitError(text, count=len(tokens), limit=max_args)

    return tokens


@dataclass(frozen=True)
class Stage:
    """
    One command to execute.

    Attributes:
        raw: Command text as it appeared in the input line
        argv: Non-empty token tuple; ``argv[0]`` is the program
        reads_from_previous: stdin comes from the previous stage's pipe
        writes_to_next: stdout feeds the next stage's pipe
    """
    raw: str
    argv: Tuple[str, ...]
    reads_from_previous: bool = False
    writes_to_next: bool = False

    @classmethod
    def create(
        cls,
        raw: str,
        reads_from_previous: bool = False,
        writes_to_next: bool = False,
        max_args: int = DEFAULT_MAX_ARGS
    ) -> 'Stage':
        """
        Build a stage from command text.

        Raises:
            EmptyCommandError: If ``raw`` holds no tokens
            ArgumentLimitError: If ``raw`` holds too many tokens
        """
        argv = split_command(raw, max_args)
        return cls(
            raw=raw.strip(),
            argv=tuple(argv),
            reads_from_previous=reads_from_previous,
            writes_to_next=writes_to_next,
        )

    @property
    def program(self) -> str:
        return self.argv[0]

    def __str__(self) -> str:
        return " ".join(self.argv)


def is_termination_request(
    stage: Optional[Any],
    keyword: str = DEFAULT_QUIT_KEYWORD
) -> bool:
    """
    Check whether a stage asks the shell to stop.

    The first token is compared literally (case-sensitive) with the
    keyword. Anything that is not a stage with a non-empty argv is not a
    termination request.
    """
    argv = getattr(stage, 'argv', None)
    if not argv:
        return False
    try:
        return argv[0] == keyword
    except (TypeError, IndexError, KeyError):
        return False
