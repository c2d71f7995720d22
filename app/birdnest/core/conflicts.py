"""Conflict classification for failed install and remove operations.

Scans the combined output of a package manager for known failure
signatures and turns the first match into a ConflictReport with a short
excerpt of the output as supporting detail.
"""

import logging

from birdnest.models.conflict import ConflictCategory, ConflictReport

logger = logging.getLogger(__name__)

SUMMARIES: dict[ConflictCategory, str] = {
    ConflictCategory.UNMET_DEPENDENCIES: (
        "The following packages have unmet dependencies or dependency conflicts"
    ),
    ConflictCategory.PACKAGE_CONFLICT: "Package conflicts detected",
    ConflictCategory.HELD_PACKAGE: "Package is held and cannot be changed",
    ConflictCategory.REMOVAL_BLOCKED: "Some packages could not be removed",
    ConflictCategory.BROKEN_DEPENDENCIES: "Broken packages or dependency problems detected",
    ConflictCategory.GENERIC: "Dependency or conflict error detected",
}

# Ordered signatures for the excerpt-based categories; first match wins
_SIGNATURES: tuple[tuple[ConflictCategory, tuple[str, ...]], ...] = (
    (ConflictCategory.PACKAGE_CONFLICT, ("conflicts with",)),
    (ConflictCategory.HELD_PACKAGE, ("held",)),
    (ConflictCategory.REMOVAL_BLOCKED, ("could not be removed", "cannot remove", "cannot be removed")),
    (ConflictCategory.BROKEN_DEPENDENCIES, ("broken packages", "dependency problems")),
)

_DEPENDENCY_MARKERS = ("unmet dependencies", "depends:")
_DEPENDENCY_BLOCK_START = ("unmet dependencies", "the following packages", "depends:", "predepends:")
_DEPENDENCY_BLOCK_END = ("you can run", "apt --fix-broken install")
_DEPENDENCY_BLOCK_LIMIT = 15

_EXCERPT_ANCHORS = ("conflict", "held", "cannot", "error")
_EXCERPT_BEFORE = 1
_EXCERPT_AFTER = 8


def extract_dependency_block(output: str) -> str:
    """Capture the dependency report from apt output.

    The block starts at the first dependency-listing line and runs through
    a suggested-fix line, or through a blank line once more than
    fifteen lines have been collected, or to the end of the output.

    Args:
        output: Combined command output.

    Returns:
        The block, or an empty string if no dependency line is present.
    """
    block: list[str] = []
    for line in output.splitlines():
        lowered = line.lower()
        if not block and not any(marker in lowered for marker in _DEPENDENCY_BLOCK_START):
            continue
        block.append(line)
        if any(marker in lowered for marker in _DEPENDENCY_BLOCK_END):
            break
        if len(block) > _DEPENDENCY_BLOCK_LIMIT and not line.strip():
            break
    return "\n".join(block)


def extract_excerpt(output: str) -> str:
    """Capture a short window of output around the first error line.

    The window starts one line before the first line mentioning a
    conflict, a hold, "cannot" or an error, and extends up to eight lines
    after it. Blank lines are dropped.

    Args:
        output: Combined command output.

    Returns:
        The excerpt, or an empty string if no anchor line is found.
    """
    lines = output.splitlines()
    for index, line in enumerate(lines):
        lowered = line.lower()
        if any(anchor in lowered for anchor in _EXCERPT_ANCHORS):
            window = lines[max(index - _EXCERPT_BEFORE, 0) : index + _EXCERPT_AFTER + 1]
            return "\n".join(entry for entry in window if entry.strip())
    return ""


def classify(output: str) -> ConflictReport | None:
    """Recognise a conflict in a failed operation's output.

    Matching is case-insensitive and the first matching category wins:
    unmet dependencies, explicit conflicts, held packages, blocked
    removals, broken dependencies, and finally any error that mentions a
    dependency or conflict.

    Args:
        output: Combined stdout and stderr of the operation.

    Returns:
        ConflictReport, or None if the output matches no signature.
    """
    lowered = output.lower()

    if any(marker in lowered for marker in _DEPENDENCY_MARKERS):
        return _report(ConflictCategory.UNMET_DEPENDENCIES, extract_dependency_block(output))

    for category, phrases in _SIGNATURES:
        if any(phrase in lowered for phrase in phrases):
            return _report(category, extract_excerpt(output))

    if "error" in lowered and ("dependency" in lowered or "conflict" in lowered):
        return _report(ConflictCategory.GENERIC, extract_excerpt(output))

    return None


def _report(category: ConflictCategory, details: str) -> ConflictReport:
    logger.debug("Classified output as %s", category.value)
    return ConflictReport(category=category, summary=SUMMARIES[category], details=details)
