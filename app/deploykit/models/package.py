"""Package models for manifest parsing.

This module defines the data structures produced when package-manager
listing output is split into blocks and parsed into records.
"""

from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from enum import Enum

# Distinguished record fields
PACKAGE_FIELD = "Package"
VERSION_FIELD = "Version"
SECTION_FIELD = "Section"


class PackageCategory(str, Enum):
    """Section values that map to an installation category."""

    PROGRAMMING_ENVIRONMENTS = "Programming Environments"
    DRIVERS = "Drivers"
    APPLICATION_SOFTWARE = "Application Software"
    UTILITIES = "Utilities"


@dataclass(frozen=True, slots=True)
class RawBlock:
    """A run of non-blank listing lines describing one package.

    Attributes:
        lines: Non-blank lines in source order.
    """

    lines: tuple[str, ...]

    def __len__(self) -> int:
        return len(self.lines)

    def __iter__(self) -> Iterator[str]:
        return iter(self.lines)


class PackageRecord(Mapping[str, str]):
    """Open-ended field mapping for one package.

    Field names are whatever the package manager printed, in the order
    they first appeared. The ``package``, ``version`` and ``section``
    properties are thin projections over the mapping.

    Example:
        >>> record = PackageRecord({"Package": "ni-daqmx", "Section": "Drivers"})
        >>> record.package, record.section, record.version
        ('ni-daqmx', 'Drivers', None)
    """

    __slots__ = ("_fields",)

    def __init__(self, fields: Mapping[str, str] | None = None) -> None:
        self._fields: dict[str, str] = dict(fields or {})

    def __getitem__(self, name: str) -> str:
        return self._fields[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._fields)

    def __len__(self) -> int:
        return len(self._fields)

    def __repr__(self) -> str:
        return f"PackageRecord({self._fields!r})"

    @property
    def package(self) -> str | None:
        """Package identifier used for display and installation."""
        return self._fields.get(PACKAGE_FIELD)

    @property
    def version(self) -> str | None:
        """Version string, used to break ordering ties."""
        return self._fields.get(VERSION_FIELD)

    @property
    def section(self) -> str | None:
        """Category the package manager files this package under."""
        return self._fields.get(SECTION_FIELD)

    @property
    def is_empty(self) -> bool:
        """Check if the block this record came from had no fields."""
        return not self._fields

    def to_dict(self) -> dict[str, str]:
        """Convert to a plain dictionary for serialization."""
        return dict(self._fields)
