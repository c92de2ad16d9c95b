"""
Filesystem adapter definitions.

Defines the interface File and Directory handles use to reach the disk,
plus the local implementation that runs the blocking os/shutil calls
on worker threads so they can be awaited from the event loop.
"""

from __future__ import annotations

import asyncio
import logging
import os
import shutil
from functools import wraps
from typing import Protocol, runtime_checkable

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 64 * 1024


def operation(fn):
    """Decorator for adapter coroutines - provides logging."""
    name = fn.__name__

    @wraps(fn)
    async def wrapper(self, *args, **kwargs):
        try:
            result = await fn(self, *args, **kwargs)
            logger.debug("%s %s: OK", name, args[0] if args else "")
            return result
        except Exception as exc:
            logger.debug("%s %s: FAIL - %s", name, args[0] if args else "", exc)
            raise

    return wrapper


@runtime_checkable
class FileSystemAdapter(Protocol):
    """Protocol defining the primitive filesystem operations.

    Any class implementing these coroutines can back a File or Directory
    handle. Implementations raise OSError subclasses unchanged; they never
    retry.
    """

    async def read_file(self, path: str) -> bytes:
        """Read the whole file.

        Raises:
            FileNotFoundError: If path does not exist.
            PermissionError: If access denied.
        """
        ...

    async def write_file(self, path: str, data: bytes) -> None:
        """Create or truncate the file and write data."""
        ...

    async def append_file(self, path: str, data: bytes) -> None:
        """Append data, creating the file if needed."""
        ...

    async def unlink(self, path: str) -> None:
        """Delete a file."""
        ...

    async def stat(self, path: str) -> os.stat_result:
        """Get metadata for a file or directory."""
        ...

    async def link(self, path: str, new_path: str) -> None:
        """Create a hard link new_path pointing at path."""
        ...

    async def mkdir(self, path: str) -> None:
        """Create a single directory.

        Raises:
            FileNotFoundError: If the parent directory is missing.
            FileExistsError: If path already exists.
        """
        ...

    async def listdir(self, path: str) -> list[str]:
        """List entry names of a directory."""
        ...

    async def copy(self, source: str, target: str) -> None:
        """Stream the bytes of source into target."""
        ...


class LocalFileSystem:
    """
    FileSystemAdapter over the local disk.

    Every call is dispatched with asyncio.to_thread, so the event loop is
    never blocked by disk I/O.
    """

    def __init__(self, chunk_size: int = DEFAULT_CHUNK_SIZE):
        self.chunk_size = chunk_size

    @operation
    async def read_file(self, path: str) -> bytes:
        return await asyncio.to_thread(self._read, path)

    @operation
    async def write_file(self, path: str, data: bytes) -> None:
        await asyncio.to_thread(self._write, path, data, "wb")

    @operation
    async def append_file(self, path: str, data: bytes) -> None:
        await asyncio.to_thread(self._write, path, data, "ab")

    @operation
    async def unlink(self, path: str) -> None:
        await asyncio.to_thread(os.unlink, path)

    @operation
    async def stat(self, path: str) -> os.stat_result:
        return await asyncio.to_thread(os.stat, path)

    @operation
    async def link(self, path: str, new_path: str) -> None:
        await asyncio.to_thread(os.link, path, new_path)

    @operation
    async def mkdir(self, path: str) -> None:
        await asyncio.to_thread(os.mkdir, path)

    @operation
    async def listdir(self, path: str) -> list[str]:
        return await asyncio.to_thread(os.listdir, path)

    @operation
    async def copy(self, source: str, target: str) -> None:
        await asyncio.to_thread(self._copy_stream, source, target)

    @staticmethod
    def _read(path: str) -> bytes:
        with open(path, "rb") as f:
            return f.read()

    @staticmethod
    def _write(path: str, data: bytes, mode: str) -> None:
        with open(path, mode) as f:
            f.write(data)

    def _copy_stream(self, source: str, target: str) -> None:
        # Source is opened first so a missing source leaves target untouched
        with open(source, "rb") as src:
            with open(target, "wb") as dst:
                shutil.copyfileobj(src, dst, self.chunk_size)


# Shared default adapter; never reconfigured in place
local_fs = LocalFileSystem()
