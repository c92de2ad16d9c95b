import configparser
from dataclasses import dataclass
from pathlib import Path

from .filesystem import DEFAULT_CHUNK_SIZE

_TRUE_VALUES = ("true", "1", "yes")
_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class CacheConfig:
    enabled: bool = False
    expires_ms: int = 0  # 0 = cache never expires
    from_cache: bool = False
    reset_timer: bool = True


@dataclass
class IOConfig:
    encoding: str = "utf-8"
    chunk_size: int = DEFAULT_CHUNK_SIZE  # copy_to stream buffer


@dataclass
class LogConfig:
    level: str = "INFO"
    file: str = ""
    console: bool = True
    cache_events: bool = True  # DEBUG records for every cache store/expire


@dataclass
class AppConfig:
    cache: CacheConfig
    io: IOConfig
    logging: LogConfig


def _parse_int(section: configparser.SectionProxy, key: str) -> int:
    try:
        return int(section.get(key))
    except ValueError:
        raise ValueError(
            f"Invalid {key} value in config: '{section.get(key)}' - must be an integer"
        )


def _parse_bool(section: configparser.SectionProxy, key: str) -> bool:
    return section.get(key, "false").lower() in _TRUE_VALUES


def load_config(config_path: str | None = None, **overrides) -> AppConfig:
    """
    Load configuration from an INI file and/or keyword overrides.
    Overrides take precedence over the config file.

    Args:
        config_path: Path to the INI configuration file.
        **overrides: Key-value pairs, e.g. cache=True, expires_ms=500, debug=True.

    Returns:
        AppConfig: The populated configuration object.

    Raises:
        FileNotFoundError: If config_path is provided but does not exist.
        ValueError: If a numeric or level value is malformed or out of range.
    """
    # Initialize with defaults
    cache_config = {
        "enabled": False,
        "expires_ms": 0,
        "from_cache": False,
        "reset_timer": True,
    }
    io_config = {
        "encoding": "utf-8",
        "chunk_size": DEFAULT_CHUNK_SIZE,
    }
    log_config = {
        "level": "INFO",
        "file": "",
        "console": True,
        "cache_events": True,
    }

    # Parse INI file if provided
    if config_path is not None:
        config_file = Path(config_path)
        if not config_file.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        parser = configparser.ConfigParser()
        parser.read(config_file, encoding="utf-8")

        # Load [cache] section
        if parser.has_section("cache"):
            cache_section = parser["cache"]
            if cache_section.get("enabled"):
                cache_config["enabled"] = _parse_bool(cache_section, "enabled")
            if cache_section.get("expires_ms"):
                cache_config["expires_ms"] = _parse_int(cache_section, "expires_ms")
            if cache_section.get("from_cache"):
                cache_config["from_cache"] = _parse_bool(cache_section, "from_cache")
            if cache_section.get("reset_timer"):
                cache_config["reset_timer"] = _parse_bool(cache_section, "reset_timer")

        # Load [io] section
        if parser.has_section("io"):
            io_section = parser["io"]
            if io_section.get("encoding"):
                io_config["encoding"] = io_section.get("encoding")
            if io_section.get("chunk_size"):
                io_config["chunk_size"] = _parse_int(io_section, "chunk_size")

        # Load [logging] section
        if parser.has_section("logging"):
            log_section = parser["logging"]
            if log_section.get("level"):
                log_config["level"] = log_section.get("level")
            if log_section.get("file"):
                log_config["file"] = log_section.get("file")
            if log_section.get("console"):
                log_config["console"] = _parse_bool(log_section, "console")
            if log_section.get("cache_events"):
                log_config["cache_events"] = _parse_bool(log_section, "cache_events")

    # Override with keyword arguments
    if overrides.get("cache") is not None:
        cache_config["enabled"] = bool(overrides["cache"])
    if overrides.get("expires_ms") is not None:
        cache_config["expires_ms"] = int(overrides["expires_ms"])
    if overrides.get("from_cache") is not None:
        cache_config["from_cache"] = bool(overrides["from_cache"])
    if overrides.get("reset_timer") is not None:
        cache_config["reset_timer"] = bool(overrides["reset_timer"])
    if overrides.get("encoding") is not None:
        io_config["encoding"] = overrides["encoding"]
    if overrides.get("chunk_size") is not None:
        io_config["chunk_size"] = int(overrides["chunk_size"])
    if overrides.get("log_file") is not None:
        log_config["file"] = overrides["log_file"]
    if overrides.get("debug"):
        log_config["level"] = "DEBUG"
        log_config["console"] = True

    # Validate ranges
    if cache_config["expires_ms"] < 0:
        raise ValueError(f"Invalid expires_ms: {cache_config['expires_ms']}. Must be >= 0.")
    if io_config["chunk_size"] <= 0:
        raise ValueError(f"Invalid chunk_size: {io_config['chunk_size']}. Must be > 0.")
    level = log_config["level"].upper()
    if level not in _LOG_LEVELS:
        raise ValueError(f"Invalid log level: {log_config['level']}")

    return AppConfig(
        cache=CacheConfig(
            enabled=cache_config["enabled"],
            expires_ms=cache_config["expires_ms"],
            from_cache=cache_config["from_cache"],
            reset_timer=cache_config["reset_timer"],
        ),
        io=IOConfig(
            encoding=io_config["encoding"],
            chunk_size=io_config["chunk_size"],
        ),
        logging=LogConfig(
            level=level,
            file=log_config["file"],
            console=log_config["console"],
            cache_events=log_config["cache_events"],
        ),
    )
