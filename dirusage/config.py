import configparser
from dataclasses import dataclass, field
from pathlib import Path

_TRUE_VALUES = ("true", "1", "yes", "on")
_FALSE_VALUES = ("false", "0", "no", "off")


@dataclass
class CacheConfig:
    per_directory_locks: bool = True  # False serializes every query behind one lock


@dataclass
class LogConfig:
    level: str = "WARNING"
    file: str = ""
    console: bool = True


@dataclass
class AppConfig:
    cache: CacheConfig = field(default_factory=CacheConfig)
    logging: LogConfig = field(default_factory=LogConfig)


def _parse_bool(section: str, key: str, value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ValueError(f"Invalid {key} value in [{section}]: '{value}' - must be a boolean")


def load_config(config_path: str | None = None, **cli_args) -> AppConfig:
    """
    Load configuration from an INI file and/or CLI arguments.
    CLI arguments take precedence over config file.

    Args:
        config_path: Path to the INI configuration file.
        **cli_args: Key-value pairs from command line arguments.

    Returns:
        AppConfig: The populated configuration object.

    Raises:
        FileNotFoundError: If config_path is provided but does not exist.
        ValueError: If a value in the file cannot be parsed.
    """
    cache_config = {
        "per_directory_locks": True,
    }
    log_config = {
        "level": "WARNING",
        "file": "",
        "console": True,
    }

    # Parse INI file if provided
    if config_path is not None:
        config_file = Path(config_path)
        if not config_file.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        parser = configparser.ConfigParser()
        parser.read(config_file, encoding="utf-8")

        if parser.has_section("cache"):
            cache_section = parser["cache"]
            if cache_section.get("per_directory_locks"):
                cache_config["per_directory_locks"] = _parse_bool(
                    "cache", "per_directory_locks", cache_section["per_directory_locks"]
                )

        if parser.has_section("logging"):
            log_section = parser["logging"]
            if log_section.get("level"):
                log_config["level"] = log_section.get("level")
            if "file" in log_section:
                log_config["file"] = log_section.get("file", "").strip()
            if log_section.get("console"):
                log_config["console"] = _parse_bool("logging", "console", log_section["console"])

    # Override with CLI arguments
    if cli_args.get("per_directory_locks") is not None:
        cache_config["per_directory_locks"] = bool(cli_args["per_directory_locks"])
    if cli_args.get("log_file") is not None:
        log_config["file"] = cli_args["log_file"]
    if cli_args.get("debug"):
        log_config["level"] = "DEBUG"
        log_config["console"] = True

    return AppConfig(
        cache=CacheConfig(
            per_directory_locks=cache_config["per_directory_locks"],
        ),
        logging=LogConfig(
            level=log_config["level"],
            file=log_config["file"],
            console=log_config["console"],
        ),
    )
