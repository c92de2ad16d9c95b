"""
Shared pytest fixtures for fileio tests.
"""

import os
from collections.abc import Generator
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

from fileio.file import File
from fileio.filesystem import LocalFileSystem
from fileio.options import CacheOptions

ADAPTER_METHODS = (
    "read_file",
    "write_file",
    "append_file",
    "unlink",
    "stat",
    "link",
    "mkdir",
    "listdir",
    "copy",
)


@pytest.fixture(autouse=True)
def restore_file_defaults() -> Generator[None, None, None]:
    """Undo File.configure() calls made by a test."""
    options = File.default_options
    encoding = File.default_encoding
    fs = File.default_fs
    yield
    File.default_options = options
    File.default_encoding = encoding
    File.default_fs = fs


@pytest.fixture
def tmp_config_file(tmp_path: Path) -> Generator[Path, None, None]:
    """
    Creates a temporary INI configuration file for config tests.

    Returns:
        Path to the temporary config file.
    """
    config_content = """[cache]
enabled = true
expires_ms = 1500
from_cache = yes
reset_timer = false

[io]
encoding = latin-1
chunk_size = 4096

[logging]
level = DEBUG
file = test.log
console = false
"""
    config_path = tmp_path / "test_config.ini"
    config_path.write_text(config_content, encoding="utf-8")
    yield config_path


@pytest.fixture
def minimal_config_file(tmp_path: Path) -> Generator[Path, None, None]:
    """
    Creates a minimal INI configuration file with a single value.

    Returns:
        Path to the temporary config file.
    """
    config_content = """[cache]
enabled = true
"""
    config_path = tmp_path / "minimal_config.ini"
    config_path.write_text(config_content, encoding="utf-8")
    yield config_path


@pytest.fixture
def mock_fs() -> Generator[MagicMock, None, None]:
    """
    Creates a fully mocked filesystem adapter.

    Returns:
        Mocked LocalFileSystem whose coroutines are AsyncMocks.
    """
    mock = MagicMock(spec=LocalFileSystem)
    for name in ADAPTER_METHODS:
        setattr(mock, name, AsyncMock(name=name))

    mock.read_file.return_value = b"test file content"
    mock.listdir.return_value = ["file1.txt", "folder1"]
    mock.stat.return_value = os.stat_result((0o100644, 0, 0, 1, 0, 0, 12345, 0, 0, 0))

    yield mock


@pytest.fixture
def sample_file(tmp_path: Path) -> Path:
    """Creates a small file on disk."""
    path = tmp_path / "sample.txt"
    path.write_bytes(b"sample content")
    return path


@pytest.fixture
def cached_options() -> CacheOptions:
    """Options that cache without expiring."""
    return CacheOptions(cache=True, expires=0, from_cache=True, reset_timer=True)
