"""User configuration for birdnest.

Settings are stored in ~/.config/birdnest/config.toml:

    package_manager = "auto"   # "auto", "pikman" or "apt"
    auto_confirm = false
    flatpak_enabled = true

A missing file yields the defaults.
"""

import logging
import os
import tomllib
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Annotated, Literal

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from birdnest.core.paths import get_config_path
from birdnest.utils.shell import command_exists

logger = logging.getLogger(__name__)

PackageManagerSetting = Literal["auto", "pikman", "apt"]
PackageManager = Literal["pikman", "apt"]


class BirdnestConfig(BaseModel):
    """Persistent user settings.

    Attributes:
        package_manager: System manager to use; "auto" detects it.
        auto_confirm: Skip the confirmation step of install/remove.
        flatpak_enabled: Offer Flatpak results and operations.
    """

    model_config = ConfigDict(extra="forbid")

    package_manager: Annotated[
        PackageManagerSetting,
        Field(description="System package manager (auto, pikman, apt)"),
    ] = "auto"
    auto_confirm: Annotated[
        bool,
        Field(description="Skip confirmation before install/remove"),
    ] = False
    flatpak_enabled: Annotated[
        bool,
        Field(description="Enable Flatpak support"),
    ] = True


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigParseError(ConfigError):
    """Raised when the config file cannot be parsed."""


def load_config(path: Path | None = None) -> BirdnestConfig:
    """Load configuration from a TOML file.

    Args:
        path: Path to the config file. If None, uses the default path.

    Returns:
        Validated BirdnestConfig; defaults when the file does not exist.

    Raises:
        ConfigParseError: If the TOML syntax is invalid.
        ConfigError: If the file cannot be read or fails validation.
    """
    config_path = path or get_config_path()

    if not config_path.exists():
        logger.debug("No config at %s, using defaults", config_path)
        return BirdnestConfig()

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigParseError(f"Invalid TOML syntax: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read config: {e}") from e

    try:
        return BirdnestConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid config content: {e}") from e


def save_config(config: BirdnestConfig, path: Path | None = None) -> Path:
    """Save configuration to a TOML file.

    The file is written to a temporary file in the same directory and
    moved into place with os.replace().

    Args:
        config: Settings to save.
        path: Destination. If None, uses the default path.

    Returns:
        Path where the config was saved.

    Raises:
        ConfigError: If the file cannot be written.
    """
    config_path = path or get_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)

    tmp_path: Path | None = None
    try:
        with NamedTemporaryFile(
            mode="wb",
            dir=config_path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            tomli_w.dump(config.model_dump(), f)
        os.replace(str(tmp_path), str(config_path))
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise ConfigError(f"Failed to write config: {e}") from e

    return config_path


def detect_package_manager(config: BirdnestConfig | None = None) -> PackageManager:
    """Decide which system package manager to drive.

    An explicit setting wins. With "auto", pikman is preferred when it is
    on PATH, and apt is the fallback.

    Args:
        config: Loaded settings. If None, defaults are used.

    Returns:
        "pikman" or "apt".
    """
    setting = (config or BirdnestConfig()).package_manager
    if setting != "auto":
        return setting
    if command_exists("pikman"):
        return "pikman"
    return "apt"
