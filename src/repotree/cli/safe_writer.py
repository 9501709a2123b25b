"""Safe output writing utilities for the repotree CLI.

This module provides a writing interface that reports a closed output pipe (for
example when piping into ``head``) as BrokenPipeError instead of a raw OSError.
"""

import errno
import os
import types
from pathlib import Path
from typing import Optional, Type, Union

from repotree.types import PathType


class SafeWriter:
    """Writer for CLI output to a file descriptor or a file path.

    Attributes:
        file: Either a file path or file descriptor for output.
        fd: The actual file descriptor being written to.

    Example:
        >>> import tempfile
        >>> with tempfile.TemporaryDirectory() as tmpdir:
        ...     target = Path(tmpdir) / "out.txt"
        ...     with SafeWriter(target) as writer:
        ...         writer.write("repo\\n")
        ...     target.read_text()
        'repo\\n'
    """

    def __init__(self, file: Union[int, PathType]):
        """Initialize the safe writer.

        Args:
            file: Either a file descriptor (int) or a path to open for writing.

        Raises:
            TypeError: If file is neither a descriptor nor a path.
        """
        self.file = file
        self._closed = False

        if isinstance(file, int):
            self.fd = file
            self._file_obj = None
        elif isinstance(file, (str, os.PathLike)):
            self._file_obj = Path(file).open("w", encoding="utf-8")
            self.fd = self._file_obj.fileno()
        else:
            raise TypeError(f"Expected int, str, or PathLike, got {type(file).__name__}")

    def write(self, data: str) -> None:
        """Write data, translating a closed pipe into BrokenPipeError.

        Raises:
            BrokenPipeError: If the reading end of the output pipe was closed.
            OSError: If another I/O error occurs during writing.
            ValueError: If attempting to write to a closed writer.
        """
        if self._closed:
            raise ValueError("Cannot write to closed SafeWriter")

        payload = data.encode("utf-8")
        try:
            while payload:
                written = os.write(self.fd, payload)
                payload = payload[written:]
        except OSError as e:
            if e.errno == errno.EPIPE:
                raise BrokenPipeError()
            raise

    def close(self) -> None:
        """Close the file if it was opened by this writer."""
        if self._closed:
            return

        if self._file_obj is not None:
            try:
                self._file_obj.close()
            except OSError as e:
                if e.errno != errno.EPIPE:
                    raise

        self._closed = True

    def __enter__(self) -> "SafeWriter":
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc_val: Optional[BaseException],
        exc_tb: Optional[types.TracebackType],
    ) -> None:
        try:
            self.close()
        except OSError:
            # An exception from the with block takes priority over a close error
            if exc_type is None:
                raise
