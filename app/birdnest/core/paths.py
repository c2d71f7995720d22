"""XDG-compliant path management for birdnest.

This module provides standardized paths following the XDG Base Directory
Specification. Both the configuration file and the installed-package
cache live under the config directory:

- Config: ~/.config/birdnest/config.toml
- Cache:  ~/.config/birdnest/installed_packages.cache
"""

import os
from pathlib import Path

# Application identifier for directory naming
APP_NAME = "birdnest"

# dpkg's record of installed packages; its mtime validates the cache
DPKG_STATUS_PATH = Path("/var/lib/dpkg/status")


def _get_xdg_dir(env_var: str, default_subdir: str) -> Path:
    """Get XDG directory respecting environment variable override.

    Args:
        env_var: XDG environment variable name (e.g., "XDG_CONFIG_HOME").
        default_subdir: Default subdirectory under home (e.g., ".config").

    Returns:
        Path to the application-specific directory.
    """
    base = os.environ.get(env_var)
    if base:
        return Path(base) / APP_NAME
    return Path.home() / default_subdir / APP_NAME


def get_config_dir() -> Path:
    """Get the configuration directory path.

    Returns:
        Path to ~/.config/birdnest/ (or XDG_CONFIG_HOME/birdnest/).
    """
    return _get_xdg_dir("XDG_CONFIG_HOME", ".config")


def get_config_path() -> Path:
    """Get the configuration file path.

    Returns:
        Path to ~/.config/birdnest/config.toml.
    """
    return get_config_dir() / "config.toml"


def get_cache_path() -> Path:
    """Get the installed-package cache file path.

    Returns:
        Path to ~/.config/birdnest/installed_packages.cache.
    """
    return get_config_dir() / "installed_packages.cache"
