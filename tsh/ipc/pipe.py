"""
OS Pipe Module

Owned wrapper around an ``os.pipe()`` descriptor pair.

Each end is closed at most once; once closed the attribute is set to
None so a stale descriptor number (possibly reused by the kernel for
something else) is never closed a second time.

Author: YSNRFD
Version: 1.0.0
"""

import os
from dataclasses import dataclass
from typing import Optional

from tsh.exceptions import PipeCreationError
from tsh.logger import get_logger


_logger = get_logger('ipc')


@dataclass
class OsPipe:
    """A one-way OS pipe between two adjacent stages."""
    read_fd: Optional[int]
    write_fd: Optional[int]

    @classmethod
    def open(cls) -> 'OsPipe':
        """
        Create a new pipe.

        Both descriptors are non-inheritable; a child that needs one
        duplicates it onto stdin/stdout, which makes the copy inheritable.

        Raises:
            PipeCreationError: If the OS refuses to create the pipe
        """
        try:
            read_fd, write_fd = os.pipe()
        except OSError as e:
            raise PipeCreationError(
                f"Cannot create pipe: {e.strerror}",
                errno=e.errno
            ) from e

        _logger.debug(
            "Created pipe",
            context={'read_fd': read_fd, 'write_fd': write_fd}
        )
        return cls(read_fd=read_fd, write_fd=write_fd)

    def close_read(self) -> None:
        """Close the read end if it is still open."""
        if self.read_fd is not None:
            fd, self.read_fd = self.read_fd, None
            os.close(fd)

    def close_write(self) -> None:
        """Close the write end if it is still open."""
        if self.write_fd is not None:
            fd, self.write_fd = self.write_fd, None
            os.close(fd)

    def close(self) -> None:
        """Close both ends."""
        try:
            self.close_read()
        finally:
            self.close_write()

    @property
    def closed(self) -> bool:
        return self.read_fd is None and self.write_fd is None

    def __enter__(self) -> 'OsPipe':
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
