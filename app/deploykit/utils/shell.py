"""Shell execution utilities.

Package-manager collaborators run their commands through run_command so
tests can patch a single seam.
"""

import shlex
import shutil
import subprocess
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class CommandResult:
    """Captured outcome of an external command.

    Attributes:
        stdout: Standard output from the command.
        stderr: Standard error from the command.
        returncode: Exit code of the command.
    """

    stdout: str
    stderr: str
    returncode: int

    @property
    def success(self) -> bool:
        """Check if command executed successfully."""
        return self.returncode == 0

    def error_message(self, fallback: str) -> str:
        """Return stripped stderr, or ``fallback`` when stderr is empty."""
        return self.stderr.strip() or fallback


def run_command(
    args: list[str],
    *,
    timeout: float | None = 60.0,
    cwd: str | None = None,
    encoding: str = "utf-8",
) -> CommandResult:
    """Execute a command and capture its output.

    Undecodable bytes in the output are replaced rather than raising.

    Args:
        args: Command and arguments to execute.
        timeout: Maximum time in seconds to wait for command.
        cwd: Working directory for the command. If None, uses current directory.
        encoding: Encoding used to decode stdout and stderr.

    Returns:
        CommandResult with stdout, stderr, and returncode.

    Raises:
        subprocess.TimeoutExpired: If command exceeds timeout.
        FileNotFoundError: If command executable is not found.
    """
    result = subprocess.run(
        args,
        capture_output=True,
        text=True,
        encoding=encoding,
        errors="replace",
        check=False,
        timeout=timeout,
        cwd=cwd,
    )
    return CommandResult(
        stdout=result.stdout,
        stderr=result.stderr,
        returncode=result.returncode,
    )


def command_exists(name: str) -> bool:
    """Check if an executable can be found on PATH."""
    return shutil.which(name) is not None


def format_command(args: list[str]) -> str:
    """Render an argument list as a single shell-quoted string for logs."""
    return shlex.join(args)
