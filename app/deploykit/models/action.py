"""Action models for package installation.

This module defines data structures for representing a single install
step of an installation plan and the outcome of running it.
"""

from dataclasses import dataclass

from deploykit.models.package import PackageCategory, PackageRecord


@dataclass(frozen=True, slots=True)
class InstallAction:
    """One package to install as part of a plan.

    Attributes:
        package: Package identifier handed to the package manager.
        category: Installation category the package belongs to.
        version: Version reported by the listing, if any.
    """

    package: str
    category: PackageCategory
    version: str | None = None

    def __post_init__(self) -> None:
        """Validate action data after initialization."""
        if not self.package:
            msg = "Package name cannot be empty"
            raise ValueError(msg)

    @classmethod
    def from_record(cls, record: PackageRecord) -> "InstallAction":
        """Create an install action from a categorized record.

        Raises:
            ValueError: If the record has no package identifier or its
                section is not an installation category.
        """
        return cls(
            package=record.package or "",
            category=PackageCategory(record.section),
            version=record.version,
        )


@dataclass(frozen=True, slots=True)
class ActionResult:
    """Result of running one install action.

    Attributes:
        action: The action that was executed.
        success: Whether the package manager reported success.
        returncode: Exit code of the install command (None for dry-run).
        message: Optional success message or additional information.
        error: Optional error message if the action failed.
    """

    action: InstallAction
    success: bool
    returncode: int | None = None
    message: str | None = None
    error: str | None = None

    @property
    def failed(self) -> bool:
        """Check if the action failed."""
        return not self.success
