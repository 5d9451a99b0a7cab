"""Application settings.

Settings are stored in ~/.config/diskclean/config.toml. Every key is
optional; a missing file yields the defaults.

Example:
    min_size_bytes = 1048576
    summary_limit = 20
    max_workers = 8
"""

import os
import tomllib
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Annotated

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from diskclean.core.paths import get_config_path

# Directories below this size are hidden in interactive mode
DEFAULT_MIN_SIZE_BYTES = 1024 * 1024


class AppConfig(BaseModel):
    """Presentation and scanning settings.

    Attributes:
        min_size_bytes: Smallest directory shown in interactive mode.
        summary_limit: Number of directories listed in the scan summary.
        max_workers: Threads used to list directories during a scan.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    min_size_bytes: Annotated[
        int,
        Field(ge=0, description="Smallest directory shown in interactive mode"),
    ] = DEFAULT_MIN_SIZE_BYTES
    summary_limit: Annotated[
        int,
        Field(ge=1, le=1000, description="Directories listed in the summary (1-1000)"),
    ] = 20
    max_workers: Annotated[
        int,
        Field(ge=1, le=64, description="Scanner threads (1-64)"),
    ] = 8


class ConfigError(Exception):
    """Raised when the settings file cannot be read, parsed or written."""


def load_config(path: Path | None = None) -> AppConfig:
    """Load settings from a TOML file.

    Args:
        path: Path to the config file. If None, uses the default path.

    Returns:
        Validated AppConfig; defaults if the file does not exist.

    Raises:
        ConfigError: If the file is unreadable, not TOML, or invalid.
    """
    config_path = path or get_config_path()

    if not config_path.exists():
        return AppConfig()

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML syntax in {config_path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read config {config_path}: {e}") from e

    try:
        return AppConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid config content in {config_path}: {e}") from e


def save_config(config: AppConfig, path: Path | None = None) -> Path:
    """Save settings to a TOML file atomically.

    Args:
        config: Settings to save.
        path: Path to save to. If None, uses the default path.

    Returns:
        Path where the config was saved.

    Raises:
        ConfigError: If the file cannot be written.
    """
    config_path = path or get_config_path()

    tmp_path: Path | None = None
    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with NamedTemporaryFile(
            mode="wb",
            dir=config_path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            tomli_w.dump(config.model_dump(), f)
        # os.replace() is atomic on POSIX
        os.replace(tmp_path, config_path)
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise ConfigError(f"Failed to write config: {e}") from e

    return config_path
