"""
Stage Process States Module

Lifecycle of the child process that runs one pipeline stage.

Author: YSNRFD
Version: 1.0.0
"""

import os
from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional, Union

from tsh.exceptions import ExecFailure
from tsh.shell.stage import Stage


class StageState(Enum):
    """
    Stage process lifecycle states.

    State transitions:
        PENDING -> FORKED: fork() returned in the parent
        FORKED -> RUNNING: the child replaced its image with the program
        FORKED -> EXEC_FAILED: the child could not exec and exited
        RUNNING -> REAPED: waitpid() collected the exit status
        EXEC_FAILED -> REAPED: waitpid() collected the exit status
    """

    PENDING = auto()
    """Stage has not been forked yet."""

    FORKED = auto()
    """Child exists; exec outcome not known yet."""

    RUNNING = auto()
    """Child is running the requested program."""

    EXEC_FAILED = auto()
    """Child could not exec its program and is exiting with status 1."""

    REAPED = auto()
    """Exit status collected; no zombie remains."""


# Status a child exits with when exec fails.
EXEC_FAILURE_STATUS = 1


@dataclass(frozen=True)
class Spawned:
    """Fork succeeded; the child is identified by ``pid``."""
    pid: int


@dataclass(frozen=True)
class SpawnFailed:
    """Fork could not be performed."""
    reason: str
    errno: Optional[int] = None


SpawnOutcome = Union[Spawned, SpawnFailed]


@dataclass
class StageProcess:
    """Parent-side record of one stage's child process."""
    stage: Stage
    index: int
    pid: Optional[int] = None
    state: StageState = StageState.PENDING
    exit_status: Optional[int] = None
    failure: Optional[ExecFailure] = None

    @property
    def reaped(self) -> bool:
        return self.state is StageState.REAPED

    @property
    def succeeded(self) -> bool:
        return self.reaped and self.exit_status == 0

    def mark_reaped(self, wait_status: int) -> None:
        """Record a raw ``waitpid`` status."""
        self.exit_status = exit_status_from(wait_status)
        self.state = StageState.REAPED


def exit_status_from(wait_status: int) -> int:
    """
    Convert a raw wait status to an exit code.

    Death by signal is reported as ``-signum``.
    """
    return os.waitstatus_to_exitcode(wait_status)
