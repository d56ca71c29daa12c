"""
Process Exceptions

Exceptions related to spawning and wiring child processes: pipe and fork
failures, failed program replacement, and abandoned pipelines.

Author: YSNRFD
Version: 1.0.0
"""

import os
from typing import Optional, Any


class ProcessException(Exception):
    """
    Base exception for all process-related errors.

    Attributes:
        message: Human-readable error description
        pid: Process ID associated with the error (if applicable)
        error_code: Numeric error code for programmatic handling
    """

    def __init__(
        self,
        message: str,
        pid: Optional[int] = None,
        error_code: Optional[int] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        super().__init__(message)
        self.message = message
        self.pid = pid
        self.error_code = error_code or 2000
        self.context = context or {}
        if pid is not None:
            self.context["pid"] = pid

    def __str__(self) -> str:
        base = f"[Error {self.error_code}] {self.message}"
        if self.pid is not None:
            base = f"{base} (pid={self.pid})"
        return base


class ResourceFailure(ProcessException):
    """
    The operating system refused a resource the executor needs.

    Attributes:
        errno: OS error number, if known
    """

    def __init__(
        self,
        message: str,
        errno: Optional[int] = None,
        error_code: Optional[int] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        ctx = context or {}
        if errno is not None:
            ctx["errno"] = errno
        super().__init__(
            message=message,
            error_code=error_code or 2100,
            context=ctx
        )
        self.errno = errno


class ForkError(ResourceFailure):
    """
    Error during fork() system call.

    Common causes include:
    - Process limit exceeded (EAGAIN)
    - Memory allocation failure for the child (ENOMEM)

    Example:
        >>> raise ForkError("Resource temporarily unavailable", errno=11)
    """

    def __init__(
        self,
        message: str,
        errno: Optional[int] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        super().__init__(
            message=message,
            errno=errno,
            error_code=2101,
            context=context
        )


class PipeCreationError(ResourceFailure):
    """
    Error during pipe() system call.

    Usually means the descriptor table is full (EMFILE/ENFILE).
    """

    def __init__(
        self,
        message: str,
        errno: Optional[int] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        super().__init__(
            message=message,
            errno=errno,
            error_code=2102,
            context=context
        )


class ExecFailure(ProcessException):
    """
    A child could not replace its image with the requested program.

    The child reports the errno back to the shell and exits with status 1.
    The shell records this on the stage's process record instead of
    raising it.

    Example:
        >>> ExecFailure("nosuchprogram", errno=2, pid=4242)
    """

    def __init__(
        self,
        program: str,
        errno: int,
        pid: Optional[int] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        ctx = context or {}
        ctx["program"] = program
        ctx["errno"] = errno
        super().__init__(
            message=f"{program}: {self.describe(errno)}",
            pid=pid,
            error_code=2200,
            context=ctx
        )
        self.program = program
        self.errno = errno

    @staticmethod
    def describe(errno: int) -> str:
        """Short user-facing reason for an exec errno."""
        if errno == 2:  # ENOENT
            return "command not found"
        return os.strerror(errno)


class PipelineError(ProcessException):
    """
    A pipeline was abandoned because of a resource failure.

    All descriptors created for the pipeline have been closed and all
    children already spawned have been reaped by the time this is raised.

    Attributes:
        stage_index: Index of the stage being set up when the failure hit
    """

    def __init__(
        self,
        message: str,
        stage_index: Optional[int] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        ctx = context or {}
        if stage_index is not None:
            ctx["stage_index"] = stage_index
        super().__init__(
            message=message,
            error_code=2300,
            context=ctx
        )
        self.stage_index = stage_index
