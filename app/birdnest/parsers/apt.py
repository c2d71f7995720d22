"""Parsers for apt, apt-cache and dpkg output.

Covers `apt-cache search`, `apt show`, `apt list --upgradable`, the
dpkg status file and `dpkg-query -W` listings.
"""

import logging
import re

from birdnest.models.package import (
    InstalledPackage,
    PackageDetail,
    PackageRecord,
    SourceTag,
    UpgradablePackage,
)
from birdnest.parsers.base import RecordBuilder, RecordCollector, is_banner, is_indented

logger = logging.getLogger(__name__)

# "123", "1,234 kB", "56.5 KB"
_INSTALLED_SIZE_PATTERN = re.compile(r"^\s*([\d.,]+)\s*(?:[kK][bB])?\s*$")

# Status values dpkg uses for packages that are present on the system
_INSTALLED_MARKERS: tuple[str, ...] = ("install ok installed", "install ok config-files")

# "firefox/noble-updates 128.0 amd64 [upgradable from: 127.0]"
_UPGRADABLE_PATTERN = re.compile(
    r"^(?P<name>[^/\s]+)/\S+\s+(?P<version>\S+)(?:\s+[^\s\[]+)?(?:\s+\[upgradable from: (?P<current>[^\]]+)\])?"
)


def parse_apt_search(output: str) -> list[PackageRecord]:
    """Parse `apt-cache search` output.

    Lines have the shape ``name - description`` or
    ``name/version - description``. Names are deduplicated, keeping the
    first occurrence (case-sensitive).

    Args:
        output: Raw command output.

    Returns:
        Records in first-seen order, all tagged as System.
    """
    collector = RecordCollector(SourceTag.SYSTEM, unique=True)

    for raw in output.splitlines():
        line = raw.strip()
        if not line:
            collector.close()
            continue
        if is_banner(line):
            continue

        if is_indented(raw) and collector.has_open_record:
            collector.extend(line)
            continue

        name_part, sep, description = line.partition(" - ")
        if not sep:
            logger.debug("Skipping malformed apt-cache line: %r", line[:100])
            continue

        name, _, version = name_part.strip().partition("/")
        collector.open(RecordBuilder(name=name, version=version, description=description))

    return collector.finish()


def rank_by_query(records: list[PackageRecord], query: str) -> list[PackageRecord]:
    """Order search results so that name matches come first.

    Names starting with the query sort first, then names containing it,
    then everything else; ties are broken alphabetically.

    Args:
        records: Search results.
        query: The search term.

    Returns:
        A new, sorted list.
    """
    needle = query.lower()

    def key(record: PackageRecord) -> tuple[int, str]:
        name = record.name.lower()
        if name.startswith(needle):
            return (0, record.name)
        if needle in name:
            return (1, record.name)
        return (2, record.name)

    return sorted(records, key=key)


def format_installed_size(value: str) -> str:
    """Render an `Installed-Size` value (in KB) for display.

    Args:
        value: Field value, e.g. "2048" or "1,234 kB".

    Returns:
        "x.xx MB" from 1024 KB upwards, "N KB" below, or the raw value
        with a KB suffix when it is not numeric.
    """
    match = _INSTALLED_SIZE_PATTERN.match(value)
    if not match:
        return f"{value.strip()} KB"

    number = match.group(1).replace(",", "")
    try:
        kb = float(number)
    except ValueError:
        return f"{value.strip()} KB"

    if kb >= 1024:
        return f"{kb / 1024:.2f} MB"
    return f"{number} KB"


def parse_apt_show(name: str, output: str) -> PackageDetail:
    """Parse `apt show` output into display details.

    The description continues on indented lines after the
    ``Description:`` field; lone ``.`` lines are paragraph markers.

    Args:
        name: Package the details belong to.
        output: Raw command output.

    Returns:
        PackageDetail with placeholders for missing fields.
    """
    version = ""
    description = ""
    size = ""
    in_description = False

    for raw in output.splitlines():
        if in_description and is_indented(raw):
            text = raw.strip()
            if text and text != ".":
                description = f"{description} {text}" if description else text
            continue
        in_description = False

        key, sep, value = raw.partition(":")
        if not sep:
            continue
        value = value.strip()

        if key == "Version" and not version:
            version = value
        elif key == "Description" and not description:
            description = value
            in_description = True
        elif key == "Installed-Size":
            size = format_installed_size(value)

    return PackageDetail(
        name=name,
        version=version or "Unknown",
        description=description or "No description available",
        size=size or "Unknown",
        is_flatpak=False,
    )


def parse_dpkg_status(text: str) -> list[InstalledPackage]:
    """Parse the dpkg status file into the installed-package index.

    Entries are blank-line separated paragraphs. Only ``Package:``,
    ``Version:`` and ``Status:`` are read; an entry counts as installed
    when its status is ``install ok installed`` or
    ``install ok config-files``.

    Args:
        text: Contents of /var/lib/dpkg/status.

    Returns:
        Installed packages in file order.
    """
    packages: list[InstalledPackage] = []
    name = ""
    version = ""
    installed = False

    def flush() -> None:
        if installed and name:
            packages.append(InstalledPackage(name=name, version=version))

    for line in text.splitlines():
        if line.startswith("Package: "):
            flush()
            name = line[len("Package: ") :].strip()
            version = ""
            installed = False
        elif line.startswith("Version: "):
            version = line[len("Version: ") :].strip()
        elif line.startswith("Status: "):
            status = line[len("Status: ") :]
            installed = any(marker in status for marker in _INSTALLED_MARKERS)
        elif not line.strip():
            flush()
            name = ""
            version = ""
            installed = False

    flush()
    return packages


def parse_dpkg_query(output: str) -> list[InstalledPackage]:
    """Parse ``dpkg-query -W -f='${Package}\\t${Version}\\n'`` output.

    Args:
        output: Tab-separated name/version lines.

    Returns:
        Installed packages; lines without a tab or a name are skipped.
    """
    packages: list[InstalledPackage] = []
    for line in output.splitlines():
        if not line.strip():
            continue
        name, sep, version = line.partition("\t")
        name = name.strip()
        if not sep or not name:
            logger.debug("Skipping malformed dpkg-query line: %r", line[:100])
            continue
        packages.append(InstalledPackage(name=name, version=version.strip()))
    return packages


def parse_apt_upgradable(output: str) -> list[UpgradablePackage]:
    """Parse `apt list --upgradable` output.

    The ``Listing...`` header and any line without a ``name/suite``
    head are skipped.

    Args:
        output: Raw command output.

    Returns:
        Upgradable packages in listing order.
    """
    packages: list[UpgradablePackage] = []
    for line in output.splitlines():
        match = _UPGRADABLE_PATTERN.match(line.strip())
        if match is None:
            continue
        packages.append(
            UpgradablePackage(
                name=match["name"],
                new_version=match["version"],
                current_version=match["current"] or "",
            )
        )
    return packages
