"""State machine for a single install, remove or upgrade operation.

An operation moves through these phases:

    IDLE -> LOADING -> CONFIRMING -> EXECUTING -> STREAMING_OUTPUT
        -> COMPLETE | CONFLICT_DETECTED | FAILED

Declining the confirmation returns it to IDLE. Terminal phases are
sticky. Stopping the caller does not terminate a running subprocess.
"""

import logging
import threading
from collections.abc import Callable, Iterator
from concurrent.futures import ThreadPoolExecutor
from typing import Protocol

from birdnest.backends.base import Backend
from birdnest.core.cache import InstalledCache
from birdnest.core.conflicts import classify
from birdnest.models.conflict import ConflictHandoff, ConflictReport
from birdnest.models.operation import OperationKind, OperationPhase
from birdnest.models.package import PackageDetail
from birdnest.operators.base import OperationCommand, Operator
from birdnest.utils.shell import (
    AUTH_FAILED_MESSAGE,
    AUTH_FAILURE_CODES,
    CommandLaunchError,
    StreamLine,
    run_streaming,
)

logger = logging.getLogger(__name__)

# Status text for lines that show the package manager's progress
PROGRESS_KEYWORDS: tuple[tuple[tuple[str, ...], str], ...] = (
    (("removing", "purging"), "Removing packages..."),
    (("reading",), "Reading package lists..."),
    (("building",), "Building dependency tree..."),
    (("installing", "unpacking", "setting up"), "Installing packages..."),
)

COMPLETION_KEYWORDS: tuple[str, ...] = (
    "complete",
    "done",
    "success",
    "finished",
    "0 upgraded, 0 newly installed",
)

MAX_DETAIL_WORKERS = 8


class OperationStateError(RuntimeError):
    """Raised when an operation is driven from the wrong phase."""


class StreamingRun(Protocol):
    """What the operation needs from a streaming command."""

    elevated: bool
    returncode: int | None

    @property
    def stderr(self) -> str: ...

    def __iter__(self) -> Iterator[StreamLine]: ...


Runner = Callable[..., StreamingRun]


class Operation:
    """Drives one install, remove or upgrade from detail loading to a terminal phase.

    Args:
        kind: Install, remove or upgrade.
        target_packages: Package names or Flatpak application IDs. May be
            empty only for an upgrade, which then upgrades everything.
        backend: Backend used to load display details.
        operator: Operator that builds the command.
        cache: Installed-package cache, invalidated before the command runs.
        runner: Factory for streaming commands, ``run_streaming`` by default.
        on_conflict: Called with the handoff when a conflict is detected.
        on_output: Called with every output line as it arrives.

    Example:
        >>> operation = Operation(OperationKind.REMOVE, ["vim"], AptBackend(), AptOperator())
        >>> operation.load_details()
        >>> operation.execute()
        <OperationPhase.COMPLETE: 'complete'>
    """

    def __init__(
        self,
        kind: OperationKind,
        target_packages: list[str],
        backend: Backend,
        operator: Operator,
        *,
        cache: InstalledCache | None = None,
        runner: Runner = run_streaming,
        on_conflict: Callable[[ConflictHandoff], None] | None = None,
        on_output: Callable[[str], None] | None = None,
    ) -> None:
        if kind.requires_targets and not target_packages:
            msg = "An operation needs at least one target package"
            raise ValueError(msg)

        self.kind = kind
        self.target_packages: tuple[str, ...] = tuple(target_packages)
        self.is_privileged_target = operator.requires_elevation
        self.phase = OperationPhase.IDLE
        self.accumulated_output = ""
        self.conflict: ConflictReport | None = None
        self.status = ""
        self.error: str | None = None
        self.exit_code: int | None = None
        self.details: list[PackageDetail] = []
        self.completion_seen = False

        self._backend = backend
        self._operator = operator
        self._cache = cache or InstalledCache()
        self._runner = runner
        self._on_conflict = on_conflict
        self._on_output = on_output
        self._pending_conflict: ConflictReport | None = None
        self._lock = threading.RLock()
        self._thread: threading.Thread | None = None

    def _transition(self, phase: OperationPhase) -> bool:
        with self._lock:
            if self.phase.is_terminal:
                logger.debug("Ignoring %s: operation already %s", phase.value, self.phase.value)
                return False
            logger.debug("Operation %s -> %s", self.phase.value, phase.value)
            self.phase = phase
            return True

    def _require(self, *phases: OperationPhase) -> None:
        if self.phase not in phases:
            allowed = ", ".join(phase.value for phase in phases)
            msg = f"Operation is {self.phase.value}, expected one of: {allowed}"
            raise OperationStateError(msg)

    def _fail(self, message: str) -> None:
        with self._lock:
            if self._transition(OperationPhase.FAILED):
                self.error = message
                self.status = f"{self.kind.verb} failed"
                logger.warning("%s failed: %s", self.kind.verb, message)

    def load_details(self) -> list[PackageDetail]:
        """Fetch display details for every target in parallel.

        A target whose details cannot be loaded is dropped from the display
        set but stays a target. If no details load at all, the operation
        fails. On success the operation waits for confirmation. An upgrade
        without targets has nothing to load and goes straight to
        confirmation.

        Returns:
            Details that loaded, in target order.

        Raises:
            OperationStateError: If the operation is not idle.
        """
        self._require(OperationPhase.IDLE)
        self._transition(OperationPhase.LOADING)
        self.status = "Loading package information..."

        if not self.target_packages:
            self._transition(OperationPhase.CONFIRMING)
            self.status = ""
            return []

        details: list[PackageDetail] = []
        workers = min(MAX_DETAIL_WORKERS, len(self.target_packages))
        with ThreadPoolExecutor(max_workers=workers) as pool:
            futures = [pool.submit(self._backend.details, name) for name in self.target_packages]
            for name, future in zip(self.target_packages, futures, strict=True):
                try:
                    details.append(future.result())
                except (RuntimeError, OSError) as e:
                    logger.warning("Failed to load details for %s: %s", name, e)

        if not details:
            self._fail("Failed to load package information")
            return details

        self.details = details
        self._transition(OperationPhase.CONFIRMING)
        self.status = ""
        return details

    def request_confirmation(self) -> None:
        """Ask for confirmation without loading details.

        Raises:
            OperationStateError: If the operation is not idle or loading.
        """
        self._require(OperationPhase.IDLE, OperationPhase.LOADING)
        self._transition(OperationPhase.CONFIRMING)

    def decline(self) -> None:
        """Cancel at the confirmation step and return to IDLE.

        Raises:
            OperationStateError: If no confirmation is pending.
        """
        self._require(OperationPhase.CONFIRMING)
        self._transition(OperationPhase.IDLE)
        self.status = f"{self.kind.verb} cancelled"

    def confirm(self) -> OperationCommand | None:
        """Accept the confirmation and prepare the command.

        The installed-package cache is invalidated first, whatever the
        outcome of the command.

        Returns:
            The command to stream, or None if it could not be built (the
            operation is then FAILED).

        Raises:
            OperationStateError: If no confirmation is pending.
        """
        self._require(OperationPhase.CONFIRMING)
        self._transition(OperationPhase.EXECUTING)
        self.status = f"Starting {self.kind.value}..."
        self._cache.invalidate()

        try:
            return self._operator.command_for(self.kind, list(self.target_packages))
        except (ValueError, RuntimeError) as e:
            self._fail(str(e))
            return None

    def feed(self, line: str) -> None:
        """Process one line of command output.

        The line is appended to the accumulated output and may update the
        status text. The whole accumulated output is re-classified after
        every line, since conflict text can span lines; a match is kept as
        the pending conflict until the exit code is known.

        Completion keywords only set ``completion_seen``; COMPLETE is
        reached in :meth:`finish` on exit code 0, since apt prints
        "Reading package lists... Done" before doing any work.

        Args:
            line: Output line without its newline.
        """
        with self._lock:
            self.accumulated_output += f"{line}\n"
            if self.phase is OperationPhase.EXECUTING:
                self._transition(OperationPhase.STREAMING_OUTPUT)

            lowered = line.lower()
            for keywords, status in PROGRESS_KEYWORDS:
                if any(keyword in lowered for keyword in keywords):
                    self.status = status
                    break
            else:
                if any(keyword in lowered for keyword in COMPLETION_KEYWORDS):
                    self.status = "Finishing..."

            if any(keyword in lowered for keyword in COMPLETION_KEYWORDS):
                self.completion_seen = True

            conflict = classify(self.accumulated_output)
            if conflict is not None:
                self._pending_conflict = conflict

        if self._on_output is not None:
            self._on_output(line)

    def finish(self, returncode: int, stderr: str = "", *, elevated: bool | None = None) -> None:
        """Settle the operation once the command has exited.

        Authentication failure of the elevation helper takes priority over
        everything else. A non-zero exit becomes a conflict if the output
        matches a conflict signature, otherwise a plain failure.

        Args:
            returncode: Exit code of the command.
            stderr: Captured standard error.
            elevated: Whether an elevation helper wrapped the command.
                Defaults to whether the target needs privileges.
        """
        self.exit_code = returncode
        via_helper = self.is_privileged_target if elevated is None else elevated

        if via_helper and returncode in AUTH_FAILURE_CODES:
            self._fail(AUTH_FAILED_MESSAGE)
            return

        if returncode == 0:
            with self._lock:
                if self._transition(OperationPhase.COMPLETE):
                    self.status = f"{self.kind.verb} complete!"
                    logger.info("%s of %s complete", self.kind.verb, ", ".join(self.target_packages))
            return

        conflict = self._pending_conflict or classify(self.accumulated_output)
        if conflict is None:
            stderr = stderr.rstrip("\n")
            if stderr.strip():
                self._fail(f"{self.kind.verb} failed: {stderr}\nExit code: {returncode}")
            else:
                self._fail(f"{self.kind.verb} failed with exit code: {returncode}")
            return

        with self._lock:
            if not self._transition(OperationPhase.CONFLICT_DETECTED):
                return
            self.conflict = conflict
            self.status = conflict.summary
        logger.info("%s hit a conflict: %s", self.kind.verb, conflict.summary)

        if self._on_conflict is not None:
            self._on_conflict(
                ConflictHandoff(
                    target_packages=self.target_packages,
                    summary=conflict.summary,
                    output=self.accumulated_output,
                )
            )

    def execute(self) -> OperationPhase:
        """Confirm, run the command and stream its output to a terminal phase.

        Returns:
            The terminal phase reached.

        Raises:
            OperationStateError: If no confirmation is pending.
        """
        command = self.confirm()
        if command is None:
            return self.phase

        try:
            stream = self._runner(list(command.args), elevate=command.elevate, env=command.env or None)
            for item in stream:
                self.feed(item.text)
        except CommandLaunchError as e:
            self._fail(str(e))
            return self.phase

        self.finish(
            stream.returncode if stream.returncode is not None else -1,
            stream.stderr,
            elevated=stream.elevated,
        )
        return self.phase

    def start(self) -> threading.Thread:
        """Run :meth:`execute` on a worker thread.

        Returns:
            The started thread.
        """
        self._require(OperationPhase.CONFIRMING)
        self._thread = threading.Thread(target=self.execute, name="birdnest-operation", daemon=True)
        self._thread.start()
        return self._thread

    def wait(self, timeout: float | None = None) -> OperationPhase:
        """Block until a started operation finishes.

        Args:
            timeout: Seconds to wait. None waits indefinitely.

        Returns:
            The current phase.
        """
        if self._thread is not None:
            self._thread.join(timeout)
        return self.phase
