"""NI Package Manager collaborator.

Runs the ``nipkg`` command line to list packages and install them one
identifier at a time.
"""

import logging

from deploykit.operators.base import ListMode, PackageManager, PackageManagerError
from deploykit.utils.shell import CommandResult, command_exists, format_command, run_command

logger = logging.getLogger(__name__)


class NipkgManager(PackageManager):
    """Package manager backed by the ``nipkg`` executable.

    Attributes:
        executable: Command used to invoke the package manager.
        list_timeout: Seconds to wait for a listing query.
        install_timeout: Seconds to wait for a single install.
    """

    # Listing arguments per mode; output is "Field: value" blocks
    _LIST_ARGS: dict[ListMode, tuple[str, ...]] = {
        ListMode.INSTALLED: ("info", "--installed"),
        ListMode.AVAILABLE: ("info",),
    }
    _INSTALL_ARGS: tuple[str, ...] = ("install", "--accept-eulas", "-y")

    def __init__(
        self,
        executable: str = "nipkg",
        *,
        list_timeout: float = 120.0,
        install_timeout: float = 3600.0,
    ) -> None:
        self.executable = executable
        self.list_timeout = list_timeout
        self.install_timeout = install_timeout

    @property
    def name(self) -> str:
        return "NI Package Manager"

    def is_available(self) -> bool:
        """Check if the nipkg executable is on PATH."""
        return command_exists(self.executable)

    def list_packages(self, mode: ListMode) -> str:
        """Run a nipkg listing query.

        Args:
            mode: Installed or available packages.

        Returns:
            Raw listing text from standard output.

        Raises:
            PackageManagerError: If nipkg is unavailable or the query fails.
        """
        self.require_available()

        args = [self.executable, *self._LIST_ARGS[mode]]
        logger.debug("Listing %s packages: %s", mode.value, format_command(args))
        result = run_command(args, timeout=self.list_timeout)

        if not result.success:
            msg = f"nipkg {mode.value} listing failed: {result.error_message('unknown error')}"
            raise PackageManagerError(msg)

        return result.stdout

    def install(self, package: str) -> CommandResult:
        """Install a single package with EULAs accepted non-interactively.

        Args:
            package: Package identifier.

        Returns:
            CommandResult of the install command.

        Raises:
            PackageManagerError: If nipkg is unavailable.
        """
        self.require_available()

        args = [self.executable, *self._INSTALL_ARGS, package]
        logger.info("Installing %s: %s", package, format_command(args))
        return run_command(args, timeout=self.install_timeout)
