__version__ = "0.3.0"

# Public API exports
from .cache import CacheSlot, ExpirationTimer
from .config import AppConfig, CacheConfig, IOConfig, LogConfig, load_config
from .directory import Directory
from .file import File
from .filesystem import FileSystemAdapter, LocalFileSystem, local_fs
from .logger import setup_logging
from .options import CacheOptions, resolve_options

__all__ = [
    "__version__",
    # Configuration
    "AppConfig",
    "CacheConfig",
    "IOConfig",
    "LogConfig",
    "load_config",
    "setup_logging",
    # Filesystem adapters
    "FileSystemAdapter",
    "LocalFileSystem",
    "local_fs",
    # Cache
    "CacheOptions",
    "resolve_options",
    "CacheSlot",
    "ExpirationTimer",
    # Handles
    "File",
    "Directory",
]
