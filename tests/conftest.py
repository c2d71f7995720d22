"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

import os
from pathlib import Path
from unittest.mock import patch

import pytest


@pytest.fixture
def mock_apt_search_output() -> str:
    """Sample apt-cache search output for testing."""
    return """firefox - Safe and easy web browser from Mozilla
firefox-esr - Mozilla Firefox web browser - Extended Support Release
vim - Vi IMproved - enhanced vi editor
firefox - duplicate entry from another pocket
webext-ublock-origin-firefox - lightweight and efficient ads blocker"""


@pytest.fixture
def mock_apt_show_output() -> str:
    """Sample apt show output for testing."""
    return """Package: vim
Version: 2:9.1.0016-1ubuntu7
Priority: optional
Section: editors
Installed-Size: 4,096 kB
Depends: vim-common, vim-runtime, libc6
Description: Vi IMproved - enhanced vi editor
 Vim is an almost compatible version of the UNIX editor Vi.
 .
 Many new features have been added.
"""


@pytest.fixture
def mock_dpkg_status() -> str:
    """Sample /var/lib/dpkg/status contents for testing."""
    return """Package: vim
Status: install ok installed
Priority: optional
Version: 2:9.1.0016-1ubuntu7
Description: Vi IMproved

Package: nano
Status: deinstall ok config-files
Version: 7.2-2

Package: emacs
Status: purge ok not-installed
Version: 29.3

Package: curl
Status: install ok installed
Version: 8.5.0-2ubuntu10
"""


@pytest.fixture
def mock_flatpak_search_output() -> str:
    """Sample flatpak search output for testing."""
    return (
        "Firefox\tFast, Private & Safe Web Browser\torg.mozilla.firefox\t128.0\tstable\tflathub\n"
        "Calculator\t\torg.gnome.Calculator\t46.1\tstable\tflathub\n"
        "Spotify\tOnline music streaming service\tcom.spotify.Client\t1.2.31\tstable\tflathub\n"
    )


@pytest.fixture
def mock_flatpak_info_output() -> str:
    """Sample flatpak info output for testing."""
    return """
Firefox - Fast, Private & Safe Web Browser

          ID: org.mozilla.firefox
         Ref: app/org.mozilla.firefox/x86_64/stable
        Arch: x86_64
      Branch: stable
     Version: 128.0
      Origin: flathub
Installation: system
   Installed: 265.4 MB
     Runtime: org.freedesktop.Platform/x86_64/23.08
"""


@pytest.fixture
def mock_aur_search_output() -> str:
    """Sample pikman --aur search output for testing."""
    return """aur/yay 12.3.5-1 (3.1 MiB 8.9 MiB) [installed]
    Yet another yogurt. Pacman wrapper and AUR helper written in go.
aur/paru 2.0.3-1 (2.6 MiB 7.1 MiB)
    Feature packed AUR helper
extra/neovim 0.10.0-1 (8.2 MiB)
    Fork of Vim aiming to improve user experience, plugins, and GUIs
"""


@pytest.fixture
def mock_fedora_search_output() -> str:
    """Sample pikman --fedora search output for testing."""
    return (
        "Updating and loading repositories:\n"
        "Matched fields: name, summary\n"
        "neovim.x86_64\tVim-fork focused on extensibility and agility\n"
        "python3-neovim.noarch\tPython client to Neovim\n"
        "vim-enhanced.x86_64 A version of the VIM editor which includes recent enhancements\n"
    )


@pytest.fixture
def mock_alpine_search_output() -> str:
    """Sample pikman --alpine search output for testing."""
    return """neovim-0.10.0-r0
neovim-doc-0.10.0-r0
busybox-extras
"""


@pytest.fixture
def mock_pikman_search_output() -> str:
    """Sample pikman search output for the host repositories."""
    return """firefox/noble 128.0 Mozilla Firefox
  web browser from Mozilla
vim/noble 9.1 Vi IMproved
"""


@pytest.fixture
def mock_unmet_dependencies_output() -> str:
    """Sample apt-get output for a removal with unmet dependencies."""
    return """Reading package lists...
Building dependency tree...
Reading state information...
Some packages could not be installed. This may mean that you have
requested an impossible situation.
The following packages have unmet dependencies:
 ubuntu-desktop : Depends: firefox but it is not going to be installed
E: Unmet dependencies. Try 'apt --fix-broken install' with no packages (or specify a solution).
"""


@pytest.fixture
def isolated_config_home(tmp_path: Path):
    """Point XDG_CONFIG_HOME at a temporary directory."""
    with patch.dict(os.environ, {"XDG_CONFIG_HOME": str(tmp_path)}):
        yield tmp_path
