"""Parsers for pikman output.

pikman prints a different search format for each guest distribution,
so the search parser dispatches once on the DistroFilter.
"""

import logging
from collections.abc import Callable

from birdnest.models.package import DistroFilter, PackageDetail, PackageRecord, SourceTag
from birdnest.parsers.base import RecordBuilder, RecordCollector, is_banner, is_indented

logger = logging.getLogger(__name__)


def _parse_default(output: str, source: SourceTag) -> list[PackageRecord]:
    """Parse ``name/version description`` headers with indented continuations."""
    collector = RecordCollector(source)

    for raw in output.splitlines():
        line = raw.strip()
        if not line:
            collector.close()
            continue
        if is_banner(line):
            continue

        if is_indented(raw) or "/" not in line:
            if collector.has_open_record:
                collector.extend(line)
            else:
                logger.debug("Skipping pikman line: %r", line[:100])
            continue

        head, _, description = line.partition(" ")
        name, _, version = head.partition("/")
        version = version.split("/", 1)[0]
        collector.open(RecordBuilder(name=name, version=version, description=description))

    return collector.finish()


def _parse_aur_header(line: str) -> RecordBuilder | None:
    """Parse ``repo/name version (download installed) [status]``."""
    head, _, rest = line.partition(" ")
    _, sep, name = head.partition("/")
    if not sep or not name:
        return None

    paren = rest.find("(")
    if paren == -1:
        version = rest.split("[", 1)[0].strip()
        return RecordBuilder(name=name, version=version)

    version = rest[:paren].strip()
    close = rest.find(")", paren)
    size = _format_aur_size(rest[paren + 1 : close]) if close != -1 else ""
    return RecordBuilder(name=name, version=version, size=size)


def _format_aur_size(content: str) -> str:
    """Render ``download installed`` sizes as ``"<download> / <installed>"``.

    Sizes may carry a unit token ("3.1 MiB 8.9 MiB") or not ("3.1 8.9").
    """
    tokens = content.split()
    if len(tokens) == 4 and tokens[1].isalpha() and tokens[3].isalpha():
        return f"{tokens[0]} {tokens[1]} / {tokens[2]} {tokens[3]}"
    if len(tokens) == 2 and tokens[1].isalpha():
        return f"{tokens[0]} {tokens[1]}"
    if len(tokens) >= 2:
        return f"{tokens[0]} / {tokens[1]}"
    return tokens[0] if tokens else ""


def _parse_aur(output: str, source: SourceTag) -> list[PackageRecord]:
    """Parse AUR search results; indented lines are the description."""
    collector = RecordCollector(source)

    for raw in output.splitlines():
        line = raw.strip()
        if not line:
            collector.close()
            continue
        if is_banner(line):
            continue

        if is_indented(raw):
            collector.extend(line)
            continue

        if "/" not in line:
            logger.debug("Skipping AUR line: %r", line[:100])
            continue

        builder = _parse_aur_header(line)
        if builder is None:
            logger.debug("Dropping AUR header without a name: %r", line[:100])
            collector.close()
            continue
        collector.open(builder)

    return collector.finish()


def _parse_fedora(output: str, source: SourceTag) -> list[PackageRecord]:
    """Parse ``name.arch<sep>description`` lines; version is left empty."""
    collector = RecordCollector(source)

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

        if "\t" in line:
            fields = [field.strip() for field in line.split("\t")]
        else:
            fields = line.split()
        name_arch = fields[0]
        description = " ".join(field for field in fields[1:] if field)

        dot = name_arch.rfind(".")
        name = name_arch[:dot] if dot != -1 else name_arch
        collector.open(RecordBuilder(name=name, description=description))

    return collector.finish()


def _parse_alpine(output: str, source: SourceTag) -> list[PackageRecord]:
    """Parse bare ``name-version`` tokens.

    The version is inferred: the last dash-separated segment is taken as
    the version only when it contains a digit. This is a best-effort
    heuristic. Alpine versions carry a release suffix, so
    ``musl-1.2.4-r2`` yields name ``musl-1.2.4`` and version ``r2``, and a
    name whose last segment happens to contain a digit is split wrongly.
    """
    collector = RecordCollector(source)

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

        token, _, rest = line.partition(" ")
        description = rest.strip().removeprefix("- ").strip()

        name, sep, last = token.rpartition("-")
        if sep and any(ch.isdigit() for ch in last):
            version = last
        else:
            name, version = token, ""
        collector.open(RecordBuilder(name=name, version=version, description=description))

    return collector.finish()


_SEARCH_PARSERS: dict[DistroFilter, Callable[[str, SourceTag], list[PackageRecord]]] = {
    DistroFilter.DEFAULT: _parse_default,
    DistroFilter.AUR: _parse_aur,
    DistroFilter.FEDORA: _parse_fedora,
    DistroFilter.ALPINE: _parse_alpine,
}


def parse_pikman_search(output: str, distro: DistroFilter = DistroFilter.DEFAULT) -> list[PackageRecord]:
    """Parse `pikman search` output in the dialect of the given distro.

    Args:
        output: Raw command output.
        distro: Guest distribution the search was run against.

    Returns:
        Records tagged with the distro's source.
    """
    return _SEARCH_PARSERS[distro](output, distro.source_tag)


def parse_pikman_show(name: str, output: str) -> PackageDetail:
    """Parse `pikman show` output into display details.

    Args:
        name: Package the details belong to.
        output: Raw command output.

    Returns:
        PackageDetail with placeholders for missing fields.
    """
    fields: dict[str, str] = {}
    for raw in output.splitlines():
        key, sep, value = raw.strip().partition(":")
        if sep and key in ("Version", "Description", "Size", "Repository"):
            fields.setdefault(key, value.strip())

    return PackageDetail(
        name=name,
        version=fields.get("Version") or "Unknown",
        description=fields.get("Description") or "No description available",
        size=fields.get("Size") or "Unknown",
        is_flatpak=False,
        repository=fields.get("Repository") or None,
    )
