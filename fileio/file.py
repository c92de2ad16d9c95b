"""
File handle with an optional, expiring read/write cache.

A File wraps a path and exposes every filesystem operation as a coroutine.
Reads, writes and appends may store their result in ``File.cache`` depending
on the resolved CacheOptions; an expiration timer clears the cache again
after ``expires`` milliseconds.
"""

from __future__ import annotations

import logging
import math
import os
from collections.abc import Mapping
from numbers import Real
from typing import Any, Union

from .cache import CacheSlot, CacheValue, ExpirationTimer
from .filesystem import FileSystemAdapter, LocalFileSystem, local_fs
from .options import CacheOptions, CacheShorthand, resolve_options

logger = logging.getLogger(__name__)

Data = Union[str, bytes, bytearray, memoryview]

_DATA_TYPES = (str, bytes, bytearray, memoryview)


def _check_path(value, where: str) -> str:
    if isinstance(value, File):
        return value.path
    if isinstance(value, (str, os.PathLike)):
        return os.path.abspath(os.fspath(value))
    raise TypeError(
        f"Invalid type of target in {where}: expected str, PathLike or File, "
        f"got {type(value).__name__}"
    )


def _as_unit(value) -> int:
    if isinstance(value, bool) or not isinstance(value, Real):
        return 0
    if not math.isfinite(value) or value < 0 or value != int(value):
        return 0
    return int(value)


class File:
    """
    A reference to a file.

    Args:
        path: Path of the file, resolved to an absolute path.
        defaults: Default options for this handle's operations. A copy of
            File.default_options is used when omitted.
        fs: Filesystem adapter; File.default_fs when omitted.
        encoding: Encoding used to turn str data into bytes.
    """

    default_options = CacheOptions()
    default_encoding = "utf-8"
    default_fs: FileSystemAdapter = local_fs

    def __init__(
        self,
        path: str | os.PathLike,
        defaults: CacheOptions | Mapping[str, Any] | None = None,
        fs: FileSystemAdapter | None = None,
        encoding: str | None = None,
    ):
        self.path = os.path.abspath(os.fspath(path))
        if isinstance(defaults, CacheOptions):
            self.defaults = defaults.copy()
        elif isinstance(defaults, Mapping):
            self.defaults = File.default_options.merged(defaults)
        else:
            self.defaults = File.default_options.copy()
        self.options: CacheOptions | Mapping[str, Any] | None = None
        self.fs = fs if fs is not None else File.default_fs
        self._slot = CacheSlot(encoding or File.default_encoding)

    @classmethod
    def configure(cls, config) -> None:
        """
        Apply an AppConfig to the process-wide File defaults.

        A new LocalFileSystem with the configured chunk size becomes
        File.default_fs; the shared local_fs instance is left unchanged.
        """
        cls.default_options = CacheOptions(
            cache=config.cache.enabled,
            expires=config.cache.expires_ms,
            from_cache=config.cache.from_cache,
            reset_timer=config.cache.reset_timer,
        )
        cls.default_encoding = config.io.encoding
        cls.default_fs = LocalFileSystem(config.io.chunk_size)
        logger.debug("File defaults configured: %s", cls.default_options)

    @property
    def encoding(self) -> str:
        """Encoding for str data; shared with the cache so both encode alike."""
        return self._slot.encoding

    @encoding.setter
    def encoding(self, value: str) -> None:
        self._slot.encoding = value

    @property
    def cache(self) -> CacheValue | None:
        """The cached contents, or None.

        Assigning replaces the value but leaves an armed timer running.
        """
        return self._slot.value

    @cache.setter
    def cache(self, value: CacheValue | None) -> None:
        self._slot.value = value

    @property
    def cache_timer(self) -> ExpirationTimer | None:
        return self._slot.timer

    def clear_cache(self) -> None:
        """Drop the cached value and cancel the expiration timer."""
        self._slot.clear()

    def resolve(self, options: CacheShorthand = None) -> CacheOptions:
        """Resolve call-site options against this handle's defaults."""
        return resolve_options(options, self.defaults, self.options)

    def _to_bytes(self, data: Data) -> bytes:
        if isinstance(data, str):
            return data.encode(self.encoding)
        return bytes(data)

    def _check_data(self, data, where: str) -> CacheValue:
        if not isinstance(data, _DATA_TYPES):
            raise TypeError(
                f"Invalid type of data in {where}: expected str or bytes, "
                f"got {type(data).__name__}"
            )
        if isinstance(data, (bytearray, memoryview)):
            return bytes(data)
        return data

    async def read(self, options: CacheShorthand = None) -> CacheValue:
        """
        Read the file.

        Args:
            options: CacheOptions, a mapping of option fields, a bool for
                ``cache`` or a number of milliseconds for ``expires``.

        Returns:
            The file contents as bytes, or the cached value when
            ``from_cache`` is set and the cache is populated.
        """
        resolved = self.resolve(options)
        cached = self._slot.lookup(resolved)
        if cached is not None:
            return cached

        data = await self.fs.read_file(self.path)
        self._slot.store(data, resolved)
        return data

    async def write(self, data: Data, options: CacheShorthand = None) -> File:
        """
        Write data to the file, replacing its contents.

        Raises:
            TypeError: If data is not str or bytes-like.
        """
        data = self._check_data(data, "File.write")
        resolved = self.resolve(options)
        await self.fs.write_file(self.path, self._to_bytes(data))
        self._slot.store(data, resolved)
        return self

    async def append(self, data: Data, options: CacheShorthand = None) -> File:
        """
        Append data to the file.

        The cache is only extended when it already holds a value.

        Raises:
            TypeError: If data is not str or bytes-like.
        """
        data = self._check_data(data, "File.append")
        resolved = self.resolve(options)
        await self.fs.append_file(self.path, self._to_bytes(data))
        self._slot.extend(data, resolved)
        return self

    async def append_file(
        self, source: File | str | os.PathLike, options: CacheShorthand = None
    ) -> File:
        """
        Append the contents of another file.

        A source File with a populated cache is appended from memory;
        otherwise the source is read first.
        """
        if isinstance(source, File):
            if source.cache is not None:
                data = source.cache
            else:
                data = await source.read()
        elif isinstance(source, (str, os.PathLike)):
            data = await File(source, fs=self.fs, encoding=self.encoding).read()
        else:
            raise TypeError(
                "Invalid type of source in File.append_file: expected str, PathLike or File, "
                f"got {type(source).__name__}"
            )
        return await self.append(data, options)

    async def copy_to(self, target: File | str | os.PathLike) -> File:
        """Copy the file to target. The cache is not affected."""
        target_path = _check_path(target, "File.copy_to")
        await self.fs.copy(self.path, target_path)
        return self

    async def move_to(self, target: File | str | os.PathLike) -> File:
        """
        Move the file to target.

        The handle itself is updated to point at the new path.
        """
        target_path = _check_path(target, "File.move_to")
        await self.copy_to(target_path)
        await self.remove()
        logger.debug("Moved %s -> %s", self.path, target_path)
        self.path = target_path
        return self

    async def remove(self) -> File:
        await self.fs.unlink(self.path)
        return self

    async def stat(self) -> os.stat_result:
        return await self.fs.stat(self.path)

    async def exists(self) -> bool:
        try:
            await self.stat()
        except FileNotFoundError:
            return False
        return True

    async def get_size(self, unit: int = 0) -> int | float:
        """
        Get the size of the file.

        Args:
            unit: Power of 1000 to divide by: bytes=0, kilobytes=1, megabytes=2 ...
                Integral floats such as 1.0 are accepted; anything else
                (fractional, negative, non-numeric) falls back to bytes.
        """
        unit = _as_unit(unit)
        stats = await self.stat()
        if unit == 0:
            return stats.st_size
        return stats.st_size / 1000**unit

    async def link(self, target: str | os.PathLike) -> File:
        """
        Create a hard link to the file.

        Raises:
            TypeError: If target is not a path string.
        """
        if not isinstance(target, (str, os.PathLike)):
            raise TypeError(
                f"Expected link target in File.link to be a path, got {type(target).__name__}"
            )
        await self.fs.link(self.path, os.fspath(target))
        return self

    def __fspath__(self) -> str:
        return self.path

    def __repr__(self):
        return f"File({self.path!r}, cached={self._slot.populated})"
