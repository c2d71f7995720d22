"""Shell execution utilities.

Provides subprocess execution with privilege elevation, either capturing
output fully or streaming it line by line as the command emits it.
"""

import logging
import os
import queue
import shutil
import subprocess
import threading
from collections.abc import Iterator
from dataclasses import dataclass
from typing import IO

logger = logging.getLogger(__name__)

# Exit codes reported by pkexec/sudo when authentication is dismissed or fails
AUTH_FAILURE_CODES: frozenset[int] = frozenset({126, 127})

AUTH_FAILED_MESSAGE = "Authentication cancelled or failed. Please try again."

# Variables the graphical password prompt needs; pkexec clears the environment
FORWARDED_ENV_VARS: tuple[str, ...] = ("DISPLAY", "XAUTHORITY", "WAYLAND_DISPLAY", "PATH")


class CommandLaunchError(RuntimeError):
    """Raised when an external binary cannot be started at all."""


class AuthenticationError(RuntimeError):
    """Raised when privilege elevation was cancelled or failed."""


@dataclass(frozen=True, slots=True)
class CommandResult:
    """Result of a shell command execution.

    Attributes:
        stdout: Standard output from the command.
        stderr: Standard error from the command.
        returncode: Exit code of the command.
        elevated: Whether the command ran through an elevation helper.
    """

    stdout: str
    stderr: str
    returncode: int
    elevated: bool = False

    @property
    def success(self) -> bool:
        """Check if command executed successfully."""
        return self.returncode == 0

    @property
    def auth_failed(self) -> bool:
        """Check if the elevation helper reported a cancelled authentication."""
        return self.elevated and self.returncode in AUTH_FAILURE_CODES


@dataclass(frozen=True, slots=True)
class StreamLine:
    """A single line received from a streaming command.

    Attributes:
        stream: Name of the pipe the line came from ("stdout" or "stderr").
        text: Line content without the trailing newline.
    """

    stream: str
    text: str


def command_exists(name: str) -> bool:
    """Check if a command exists in the system PATH.

    Args:
        name: Command name to check.

    Returns:
        True if command exists, False otherwise.
    """
    return shutil.which(name) is not None


def is_elevated() -> bool:
    """Check if the current process already runs as root."""
    return os.geteuid() == 0


def has_graphical_session() -> bool:
    """Check if a windowing display is available for a GUI password prompt."""
    return bool(os.environ.get("DISPLAY") or os.environ.get("WAYLAND_DISPLAY"))


def build_elevated_command(
    args: list[str],
    env: dict[str, str] | None = None,
) -> tuple[list[str], bool]:
    """Wrap a command with the elevation helper suited to the session.

    Elevation is skipped when already running as root. In a graphical
    session pkexec is used and the display variables are passed to the
    child explicitly through ``env``, since pkexec does not inherit them.
    Otherwise sudo is used.

    Args:
        args: Command and arguments to elevate.
        env: Extra variables the elevated child must see.

    Returns:
        Tuple of (argv, via_helper) where via_helper tells whether an
        elevation helper wraps the command.

    Raises:
        CommandLaunchError: If sudo is needed but not installed.
    """
    extra = [f"{key}={value}" for key, value in (env or {}).items()]

    if is_elevated():
        return list(args), False

    if has_graphical_session():
        forwarded = [
            f"{name}={os.environ[name]}" for name in FORWARDED_ENV_VARS if name in os.environ
        ]
        logger.info("Elevated privileges required, using pkexec")
        return ["pkexec", "env", *forwarded, *extra, *args], True

    if not command_exists("sudo"):
        msg = "sudo is not available. Please install sudo or run as root."
        raise CommandLaunchError(msg)

    logger.info("Elevated privileges required, using sudo")
    if extra:
        return ["sudo", "env", *extra, *args], True
    return ["sudo", *args], True


def _prepare(
    args: list[str],
    elevate: bool,
    env: dict[str, str] | None,
) -> tuple[list[str], dict[str, str], bool]:
    """Resolve the final argv, process environment and helper flag."""
    full_env = {**os.environ, **(env or {})}
    if not elevate:
        return list(args), full_env, False
    argv, via_helper = build_elevated_command(args, env)
    return argv, full_env, via_helper


def run_command(
    args: list[str],
    *,
    elevate: bool = False,
    check: bool = False,
    timeout: float | None = None,
    cwd: str | None = None,
    env: dict[str, str] | None = None,
) -> CommandResult:
    """Execute a shell command and return the result.

    Args:
        args: Command and arguments to execute.
        elevate: Run the command with root privileges.
        check: If True, raise CalledProcessError on non-zero exit.
        timeout: Maximum time in seconds to wait. None waits indefinitely.
        cwd: Working directory for the command. If None, uses current directory.
        env: Additional environment variables (merged with current env).

    Returns:
        CommandResult with stdout, stderr, and returncode.

    Raises:
        CommandLaunchError: If the executable cannot be started.
        AuthenticationError: If elevation was cancelled (exit 126/127).
        subprocess.CalledProcessError: If check=True and command fails.
        subprocess.TimeoutExpired: If command exceeds timeout.
    """
    argv, full_env, via_helper = _prepare(args, elevate, env)
    logger.debug("Running command: %s", " ".join(argv))

    try:
        result = subprocess.run(
            argv,
            capture_output=True,
            text=True,
            errors="replace",
            check=check,
            timeout=timeout,
            cwd=cwd,
            env=full_env,
        )
    except OSError as e:
        msg = f"Failed to launch {argv[0]}: {e}"
        raise CommandLaunchError(msg) from e

    command_result = CommandResult(
        stdout=result.stdout,
        stderr=result.stderr,
        returncode=result.returncode,
        elevated=via_helper,
    )
    if command_result.auth_failed:
        raise AuthenticationError(AUTH_FAILED_MESSAGE)
    return command_result


def _pump(pipe: IO[str], stream: str, lines: "queue.Queue[StreamLine | None]") -> None:
    """Forward every line of a pipe into the shared queue, then a sentinel."""
    with pipe:
        for raw in pipe:
            lines.put(StreamLine(stream=stream, text=raw.rstrip("\r\n")))
    lines.put(None)


class StreamingCommand:
    """A command whose stdout and stderr lines are observed as they arrive.

    Iterating starts the process; each pipe is drained by its own reader
    thread into one queue, and the iterator yields whichever line is ready
    first. Ordering within a pipe is preserved; interleaving across the two
    pipes is best-effort. Once iteration ends, ``returncode`` is set.

    Example:
        >>> command = run_streaming(["apt-get", "remove", "-y", "vim"], elevate=True)
        >>> for line in command:
        ...     print(line.text)
        >>> command.returncode
        0
    """

    def __init__(
        self,
        args: list[str],
        *,
        elevate: bool = False,
        env: dict[str, str] | None = None,
    ) -> None:
        self.argv, self._env, self.elevated = _prepare(args, elevate, env)
        self.returncode: int | None = None
        self._stderr_lines: list[str] = []

    @property
    def stderr(self) -> str:
        """Return every stderr line received so far."""
        return "\n".join(self._stderr_lines)

    @property
    def auth_failed(self) -> bool:
        """Check if the elevation helper reported a cancelled authentication."""
        return self.elevated and self.returncode in AUTH_FAILURE_CODES

    def __iter__(self) -> Iterator[StreamLine]:
        logger.info("Streaming command: %s", " ".join(self.argv))
        try:
            process = subprocess.Popen(
                self.argv,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                errors="replace",
                bufsize=1,
                env=self._env,
            )
        except OSError as e:
            msg = f"Failed to launch {self.argv[0]}: {e}"
            raise CommandLaunchError(msg) from e

        lines: queue.Queue[StreamLine | None] = queue.Queue()
        readers = [
            threading.Thread(target=_pump, args=(process.stdout, "stdout", lines), daemon=True),
            threading.Thread(target=_pump, args=(process.stderr, "stderr", lines), daemon=True),
        ]
        for reader in readers:
            reader.start()

        open_streams = len(readers)
        while open_streams:
            item = lines.get()
            if item is None:
                open_streams -= 1
                continue
            if item.stream == "stderr":
                self._stderr_lines.append(item.text)
            yield item

        for reader in readers:
            reader.join()
        self.returncode = process.wait()
        logger.debug("Command %s exited with %d", self.argv[0], self.returncode)


def run_streaming(
    args: list[str],
    *,
    elevate: bool = False,
    env: dict[str, str] | None = None,
) -> StreamingCommand:
    """Prepare a command whose output lines are streamed incrementally.

    Args:
        args: Command and arguments to execute.
        elevate: Run the command with root privileges.
        env: Additional environment variables.

    Returns:
        StreamingCommand to iterate over.

    Raises:
        CommandLaunchError: If elevation is needed but no helper is installed.
    """
    return StreamingCommand(args, elevate=elevate, env=env)
