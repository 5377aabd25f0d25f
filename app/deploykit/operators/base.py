"""Abstract base class for package managers.

This module defines the PackageManager interface the installation driver
depends on: a listing query and a single-package install command.
"""

from abc import ABC, abstractmethod
from enum import Enum

from deploykit.utils.shell import CommandResult


class ListMode(str, Enum):
    """Which packages a listing query reports."""

    INSTALLED = "installed"
    AVAILABLE = "available"


class PackageManagerError(RuntimeError):
    """Raised when a package manager is unavailable or a query fails."""


class PackageManager(ABC):
    """Abstract base class for package-manager collaborators.

    Implementations only run commands and hand back raw output. Parsing
    and ordering happen in deploykit.manifest.

    Example:
        >>> manager = NipkgManager()
        >>> if manager.is_available():
        ...     text = manager.list_packages(ListMode.AVAILABLE)
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Return a short display name for the package manager."""

    @abstractmethod
    def is_available(self) -> bool:
        """Check if this package manager is available on the system.

        Returns:
            True if the package manager can be used, False otherwise.
        """

    @abstractmethod
    def list_packages(self, mode: ListMode) -> str:
        """Run a listing query and return its standard output.

        Args:
            mode: Installed or available packages.

        Returns:
            Raw listing text.

        Raises:
            PackageManagerError: If the manager is unavailable or the
                query exits non-zero.
        """

    @abstractmethod
    def install(self, package: str) -> CommandResult:
        """Install one package by identifier.

        Args:
            package: Package identifier as reported by the listing.

        Returns:
            CommandResult of the install command. A non-zero exit code is
            reported, not raised.

        Raises:
            PackageManagerError: If the manager is unavailable.
        """

    def require_available(self) -> None:
        """Raise PackageManagerError unless the manager can be used."""
        if not self.is_available():
            msg = f"{self.name} package manager is not available on this system"
            raise PackageManagerError(msg)
