"""Parsers turning package manager output into records.

All functions are pure: they take the captured text and return records,
skipping lines they cannot interpret.
"""

from birdnest.parsers.apt import (
    format_installed_size,
    parse_apt_search,
    parse_apt_show,
    parse_apt_upgradable,
    parse_dpkg_query,
    parse_dpkg_status,
    rank_by_query,
)
from birdnest.parsers.flatpak import (
    parse_flatpak_info,
    parse_flatpak_list,
    parse_flatpak_search,
    parse_flatpak_updates,
)
from birdnest.parsers.pikman import parse_pikman_search, parse_pikman_show

__all__ = [
    "format_installed_size",
    "parse_apt_search",
    "parse_apt_show",
    "parse_apt_upgradable",
    "parse_dpkg_query",
    "parse_dpkg_status",
    "parse_flatpak_info",
    "parse_flatpak_list",
    "parse_flatpak_search",
    "parse_flatpak_updates",
    "parse_pikman_search",
    "parse_pikman_show",
    "rank_by_query",
]
