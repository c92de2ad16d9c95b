"""
Directory handle.

A Directory creates File handles beneath its path that inherit its
``file_options``, and wraps directory creation and listing.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from typing import Any

from .file import Data, File
from .filesystem import FileSystemAdapter
from .options import CacheOptions, CacheShorthand

logger = logging.getLogger(__name__)


class Directory:
    """
    A reference to a directory.

    Args:
        path: Path of the directory, resolved to an absolute path.
        file_options: Defaults copied into every File obtained through
            this directory.
        fs: Filesystem adapter; File.default_fs when omitted.
    """

    def __init__(
        self,
        path: str | os.PathLike,
        file_options: CacheOptions | Mapping[str, Any] | None = None,
        fs: FileSystemAdapter | None = None,
    ):
        self.path = os.path.abspath(os.fspath(path))
        if isinstance(file_options, CacheOptions):
            self.file_options = file_options.copy()
        elif isinstance(file_options, Mapping):
            self.file_options = CacheOptions().merged(file_options)
        else:
            self.file_options = CacheOptions()
        self.fs = fs if fs is not None else File.default_fs

    def _file(self, name: str | os.PathLike, inherit_options: bool = True) -> File:
        defaults = self.file_options if inherit_options else None
        return File(os.path.join(self.path, os.fspath(name)), defaults=defaults, fs=self.fs)

    async def list_dir(self) -> list[str]:
        """Return the names of the entries in the directory."""
        return await self.fs.listdir(self.path)

    async def read_file(
        self, name: str | os.PathLike, options: CacheShorthand = None
    ) -> tuple[File, bytes]:
        """
        Read a file in the directory into a new, cached File.

        Args:
            name: Path of the file relative to the directory.
            options: Options for the read; caching is enabled when omitted.

        Returns:
            The File handle and the data read.
        """
        file = self._file(name)
        data = await file.read(True if options is None else options)
        return file, data

    async def write_file(
        self, name: str | os.PathLike, data: Data, cache: CacheShorthand = False
    ) -> File:
        """Write data to a file in the directory and return its handle."""
        file = self._file(name)
        return await file.write(data, cache)

    def get_file_reference(self, name: str | os.PathLike, inherit_options: bool = True) -> File:
        """Make a File for a path relative to the directory without touching the disk."""
        return self._file(name, inherit_options)

    async def mkdir(self, name: str | os.PathLike, recursive: bool = False) -> Directory:
        """Create a subdirectory; the new Directory inherits file_options."""
        return await Directory.make(
            os.path.join(self.path, os.fspath(name)),
            recursive,
            fs=self.fs,
            file_options=self.file_options,
        )

    @classmethod
    async def make(
        cls,
        path: str | os.PathLike,
        recursive: bool = False,
        *,
        fs: FileSystemAdapter | None = None,
        file_options: CacheOptions | None = None,
    ) -> Directory:
        """
        Create a directory and return a handle to it.

        With recursive set, missing ancestors are created first: each path
        whose parent is missing is pushed on a stack and the parent is tried
        instead; after every success the most recently pushed path is
        retried until the stack is empty.

        Raises:
            FileExistsError: If the directory already exists.
            FileNotFoundError: If the parent is missing and recursive is
                not set, or if the filesystem root was reached.
        """
        fs = fs if fs is not None else File.default_fs
        target = os.path.abspath(os.fspath(path))

        if not recursive:
            await fs.mkdir(target)
            return cls(target, file_options, fs)

        pending: list[str] = []
        current = target
        while True:
            try:
                await fs.mkdir(current)
            except FileNotFoundError:
                parent = os.path.dirname(current)
                if parent == current:
                    raise
                pending.append(current)
                current = parent
                continue
            if not pending:
                break
            current = pending.pop()

        logger.debug("Created directory %s", target)
        return cls(target, file_options, fs)

    def __fspath__(self) -> str:
        return self.path

    def __repr__(self):
        return f"Directory({self.path!r})"
