"""Unit tests for operation models."""

import pytest
from birdnest.models.operation import OperationKind, OperationPhase


class TestOperationKind:
    """Tests for OperationKind."""

    def test_verbs(self) -> None:
        """Status messages use the noun form of the operation."""
        assert OperationKind.INSTALL.verb == "Installation"
        assert OperationKind.REMOVE.verb == "Removal"
        assert OperationKind.UPGRADE.verb == "Upgrade"

    def test_requires_targets(self) -> None:
        """Only an upgrade may run without naming packages."""
        assert OperationKind.INSTALL.requires_targets
        assert OperationKind.REMOVE.requires_targets
        assert not OperationKind.UPGRADE.requires_targets


class TestOperationPhase:
    """Tests for OperationPhase."""

    @pytest.mark.parametrize(
        "phase",
        [OperationPhase.COMPLETE, OperationPhase.CONFLICT_DETECTED, OperationPhase.FAILED],
    )
    def test_terminal_phases(self, phase: OperationPhase) -> None:
        """Finished phases are terminal and not running."""
        assert phase.is_terminal
        assert not phase.is_running

    @pytest.mark.parametrize("phase", [OperationPhase.EXECUTING, OperationPhase.STREAMING_OUTPUT])
    def test_running_phases(self, phase: OperationPhase) -> None:
        """Phases with a command in flight."""
        assert phase.is_running
        assert not phase.is_terminal

    @pytest.mark.parametrize(
        "phase",
        [OperationPhase.IDLE, OperationPhase.LOADING, OperationPhase.CONFIRMING],
    )
    def test_waiting_phases(self, phase: OperationPhase) -> None:
        """Phases before the command starts."""
        assert not phase.is_terminal
        assert not phase.is_running
