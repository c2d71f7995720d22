"""Conflict models for failed install and remove operations."""

from dataclasses import dataclass
from enum import Enum


class ConflictCategory(Enum):
    """Kind of failure recognised in a package manager's output."""

    UNMET_DEPENDENCIES = "unmet_dependencies"
    PACKAGE_CONFLICT = "package_conflict"
    HELD_PACKAGE = "held_package"
    REMOVAL_BLOCKED = "removal_blocked"
    BROKEN_DEPENDENCIES = "broken_dependencies"
    GENERIC = "generic"


@dataclass(frozen=True, slots=True)
class ConflictReport:
    """Structured conflict extracted from a failed operation's output.

    Attributes:
        category: Recognised conflict kind.
        summary: Human-readable title for the conflict.
        details: Excerpt of the output supporting the summary.
    """

    category: ConflictCategory
    summary: str
    details: str = ""

    @property
    def message(self) -> str:
        """Return the summary followed by the supporting excerpt."""
        if not self.details:
            return self.summary
        return f"{self.summary}\n\nDetails:\n{self.details}"


@dataclass(frozen=True, slots=True)
class ConflictHandoff:
    """What a conflicted operation hands to the conflict presentation.

    Attributes:
        target_packages: Packages the operation was asked to act on.
        summary: Conflict summary line.
        output: Everything the command printed.
    """

    target_packages: tuple[str, ...]
    summary: str
    output: str
