"""Shared helpers for the text output parsers.

Every parser builds records line by line: a header line opens a record,
indented lines extend its description, and the record is emitted when a
blank line, the next header, or the end of input is reached.
"""

from dataclasses import dataclass

from birdnest.models.package import PackageRecord, SourceTag

# Informational lines printed by the package tools between records
BANNER_PREFIXES: tuple[str, ...] = (
    "Matched fields:",
    "!!!",
    "Warning:",
    "WARNING:",
    "Updating",
    "====",
)


def is_banner(line: str) -> bool:
    """Check if a stripped line is tool chatter rather than package data."""
    return line.startswith(BANNER_PREFIXES)


def is_indented(raw: str) -> bool:
    """Check if a raw line starts with whitespace."""
    return raw[:1] in (" ", "\t")


def join_description(description: str, continuation: str) -> str:
    """Append a continuation line to a description with a single space.

    Args:
        description: Description collected so far.
        continuation: Raw continuation text.

    Returns:
        The extended description.
    """
    text = continuation.strip()
    if not text:
        return description
    if not description:
        return text
    return f"{description} {text}"


@dataclass(slots=True)
class RecordBuilder:
    """Mutable record under construction."""

    name: str
    version: str = ""
    description: str = ""
    size: str = ""

    def extend(self, continuation: str) -> None:
        """Append a continuation line to the description."""
        self.description = join_description(self.description, continuation)

    def build(self, source: SourceTag) -> PackageRecord | None:
        """Freeze the record, or return None if its name is empty."""
        name = self.name.strip()
        if not name:
            return None
        return PackageRecord(
            name=name,
            version=self.version.strip(),
            description=self.description.strip(),
            size=self.size.strip(),
            source=source,
        )


class RecordCollector:
    """Accumulates finished records, holding at most one open record.

    Example:
        >>> collector = RecordCollector(SourceTag.SYSTEM)
        >>> collector.open(RecordBuilder(name="vim", description="Vi"))
        >>> collector.extend("IMproved")
        >>> [r.description for r in collector.finish()]
        ['Vi IMproved']
    """

    def __init__(self, source: SourceTag, *, unique: bool = False) -> None:
        self._source = source
        self._unique = unique
        self._seen: set[str] = set()
        self._records: list[PackageRecord] = []
        self._current: RecordBuilder | None = None

    @property
    def has_open_record(self) -> bool:
        """Check if a record is under construction."""
        return self._current is not None

    def open(self, builder: RecordBuilder) -> None:
        """Close any open record and start a new one."""
        self.close()
        self._current = builder

    def extend(self, continuation: str) -> None:
        """Append a continuation line to the open record, if there is one."""
        if self._current is not None:
            self._current.extend(continuation)

    def close(self) -> None:
        """Emit the open record unless its name is empty or already seen."""
        if self._current is None:
            return
        record = self._current.build(self._source)
        self._current = None
        if record is None:
            return
        if self._unique:
            if record.name in self._seen:
                return
            self._seen.add(record.name)
        self._records.append(record)

    def finish(self) -> list[PackageRecord]:
        """Close the open record and return everything collected."""
        self.close()
        return self._records
