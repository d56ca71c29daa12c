"""
Shell Exceptions

Exceptions raised while configuring the shell and turning input text into
runnable stages. None of these are fatal: the read-eval loop recovers from
all of them.

Author: YSNRFD
Version: 1.0.0
"""

from typing import Optional, Any


class ShellException(Exception):
    """
    Base exception for shell front-end errors.

    Attributes:
        message: Human-readable error description
        error_code: Numeric error code for programmatic handling
        context: Additional context about the error
    """

    def __init__(
        self,
        message: str,
        error_code: Optional[int] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        super().__init__(message)
        self.message = message
        self.error_code = error_code or 1000
        self.context = context or {}

    def __str__(self) -> str:
        base = f"[Error {self.error_code}] {self.message}"
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            base = f"{base} ({context_str})"
        return base

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"error_code={self.error_code})"
        )


class ConfigError(ShellException):
    """
    Configuration could not be loaded or is invalid.

    Example:
        >>> raise ConfigError("Configuration file not found", path="tsh.json")
    """

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        key: Optional[str] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        ctx = context or {}
        if path:
            ctx["path"] = path
        if key:
            ctx["key"] = key
        super().__init__(
            message=message,
            error_code=1001,
            context=ctx
        )
        self.path = path
        self.key = key


class StageError(ShellException):
    """
    A command segment could not be turned into a runnable stage.

    The pipeline builder drops the offending segment and keeps going.
    """

    def __init__(
        self,
        message: str,
        raw: str = "",
        error_code: Optional[int] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        ctx = context or {}
        ctx["raw"] = repr(raw)
        super().__init__(
            message=message,
            error_code=error_code or 1100,
            context=ctx
        )
        self.raw = raw


class EmptyCommandError(StageError):
    """
    A command segment contained no tokens.

    Typical sources are stray delimiters such as ``ls ; ; pwd`` or a
    trailing ``|``.

    Example:
        >>> raise EmptyCommandError("   ")
    """

    def __init__(
        self,
        raw: str = "",
        context: Optional[dict[str, Any]] = None
    ) -> None:
        super().__init__(
            message="Empty command",
            raw=raw,
            error_code=1101,
            context=context
        )


class ArgumentLimitError(StageError):
    """
    A command segment has more tokens than the configured limit.

    Example:
        >>> raise ArgumentLimitError("echo ...", count=2000, limit=1024)
    """

    def __init__(
        self,
        raw: str,
        count: int,
        limit: int,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        ctx = context or {}
        ctx["count"] = count
        ctx["limit"] = limit
        super().__init__(
            message=f"Too many arguments ({count} > {limit})",
            raw=raw,
            error_code=1102,
            context=ctx
        )
        self.count = count
        self.limit = limit
