"""Parsers for flatpak output."""

import logging

from birdnest.models.package import FlatpakRecord, PackageDetail, UpgradablePackage
from birdnest.parsers.base import is_banner, join_description

logger = logging.getLogger(__name__)

NO_DESCRIPTION = "No description"

# A search result line carries at least name, description and application ID
_MIN_SEARCH_FIELDS = 3


def parse_flatpak_search(output: str) -> list[FlatpakRecord]:
    """Parse `flatpak search` output.

    Each result is a tab-separated line of
    ``name, description, application_id, version, ...``. A line with
    fewer than three fields continues the previous record's description.

    Args:
        output: Raw command output.

    Returns:
        Records in output order. Records with an empty name are dropped.
    """
    records: list[FlatpakRecord] = []
    current: list[str] | None = None  # [name, description, app_id, version]

    def flush() -> None:
        nonlocal current
        if current is None:
            return
        name, description, application_id, version = current
        current = None
        if not name:
            logger.debug("Dropping flatpak search result without a name")
            return
        records.append(
            FlatpakRecord(
                display_name=name,
                application_id=application_id,
                description=description or NO_DESCRIPTION,
                version=version,
            )
        )

    for raw in output.splitlines():
        line = raw.strip()
        if not line:
            flush()
            continue
        if is_banner(line):
            continue

        fields = raw.split("\t")
        if len(fields) >= _MIN_SEARCH_FIELDS:
            flush()
            version = fields[3].strip() if len(fields) > 3 else ""
            current = [fields[0].strip(), fields[1].strip(), fields[2].strip(), version]
        elif current is not None:
            current[1] = join_description(current[1], line)
        else:
            logger.debug("Skipping flatpak search line: %r", line[:100])

    flush()
    return records


def parse_flatpak_list(output: str) -> list[FlatpakRecord]:
    """Parse `flatpak list --columns=name,application` output.

    Args:
        output: Tab-separated name and application ID lines.

    Returns:
        Installed applications. Lines without an application ID are skipped;
        an empty display name falls back to the application ID.
    """
    records: list[FlatpakRecord] = []
    for line in output.splitlines():
        if not line.strip():
            continue
        fields = line.split("\t")
        if len(fields) < 2 or not fields[1].strip():
            logger.debug("Skipping flatpak list line: %r", line[:100])
            continue
        application_id = fields[1].strip()
        records.append(
            FlatpakRecord(
                display_name=fields[0].strip() or application_id,
                application_id=application_id,
            )
        )
    return records


def parse_flatpak_info(application_id: str, output: str) -> PackageDetail:
    """Parse `flatpak info` output into display details.

    The first line that is not a ``Key: value`` field has the shape
    ``Name - Description``; the description is taken from it.

    Args:
        application_id: Application the details belong to.
        output: Raw command output.

    Returns:
        PackageDetail with placeholders for missing fields.
    """
    version = ""
    description = ""
    size = ""
    header_seen = False

    for raw in output.splitlines():
        line = raw.strip()
        if not line:
            continue

        if line.startswith("Version:"):
            version = line[len("Version:") :].strip()
        elif line.startswith("Installed size:"):
            size = line[len("Installed size:") :].strip()
        elif line.startswith("Installed:"):
            size = size or line[len("Installed:") :].strip()
        elif not header_seen:
            header_seen = True
            _, sep, summary = line.partition(" - ")
            if sep:
                description = summary.strip()

    return PackageDetail(
        name=application_id,
        version=version or "Unknown",
        description=description or "No description available",
        size=size or "Unknown",
        is_flatpak=True,
    )


def parse_flatpak_updates(output: str) -> list[UpgradablePackage]:
    """Parse `flatpak remote-ls --updates --columns=application,version`.

    Args:
        output: Tab-separated application ID and version lines.

    Returns:
        Applications with pending updates. Header or malformed lines,
        whose first column is not a reverse-DNS ID, are skipped.
    """
    updates: list[UpgradablePackage] = []
    for line in output.splitlines():
        fields = line.split("\t")
        application_id = fields[0].strip()
        if "." not in application_id or " " in application_id:
            continue
        version = fields[1].strip() if len(fields) > 1 else ""
        updates.append(UpgradablePackage(name=application_id, new_version=version))
    return updates
