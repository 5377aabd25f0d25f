"""Data models for deploykit.

This module exports the package and action data structures.
"""

from deploykit.models.action import ActionResult, InstallAction
from deploykit.models.package import (
    PACKAGE_FIELD,
    SECTION_FIELD,
    VERSION_FIELD,
    PackageCategory,
    PackageRecord,
    RawBlock,
)

__all__ = [
    "PACKAGE_FIELD",
    "SECTION_FIELD",
    "VERSION_FIELD",
    "ActionResult",
    "InstallAction",
    "PackageCategory",
    "PackageRecord",
    "RawBlock",
]
