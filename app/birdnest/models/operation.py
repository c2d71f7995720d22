"""Operation models for install, remove and upgrade workflows.

This module defines the phases an operation moves through and the
kinds of operation the state machine drives.
"""

from enum import Enum


class OperationKind(Enum):
    """Type of package management operation.

    Attributes:
        INSTALL: Install one or more packages.
        REMOVE: Remove one or more packages.
        UPGRADE: Upgrade the given packages, or everything if none are given.
    """

    INSTALL = "install"
    REMOVE = "remove"
    UPGRADE = "upgrade"

    @property
    def verb(self) -> str:
        """Return the capitalised noun used in status messages."""
        return _VERBS[self]

    @property
    def requires_targets(self) -> bool:
        """Check if the operation needs at least one target package."""
        return self is not OperationKind.UPGRADE


_VERBS: dict[OperationKind, str] = {
    OperationKind.INSTALL: "Installation",
    OperationKind.REMOVE: "Removal",
    OperationKind.UPGRADE: "Upgrade",
}


class OperationPhase(Enum):
    """Phase of an install or remove operation.

    Attributes:
        IDLE: Created, or a confirmation was declined.
        LOADING: Display details are being fetched.
        CONFIRMING: Waiting for the user to confirm.
        EXECUTING: The command is being launched.
        STREAMING_OUTPUT: Output lines are arriving.
        COMPLETE: The command succeeded.
        CONFLICT_DETECTED: The command failed with a recognised conflict.
        FAILED: The command failed, could not start, or authentication failed.
    """

    IDLE = "idle"
    LOADING = "loading"
    CONFIRMING = "confirming"
    EXECUTING = "executing"
    STREAMING_OUTPUT = "streaming_output"
    COMPLETE = "complete"
    CONFLICT_DETECTED = "conflict_detected"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        """Check if no further transition can happen from this phase."""
        return self in (
            OperationPhase.COMPLETE,
            OperationPhase.CONFLICT_DETECTED,
            OperationPhase.FAILED,
        )

    @property
    def is_running(self) -> bool:
        """Check if the external command is in flight."""
        return self in (OperationPhase.EXECUTING, OperationPhase.STREAMING_OUTPUT)
