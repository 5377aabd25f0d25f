"""Package-manager collaborators.

This module provides the PackageManager interface and the nipkg-backed
implementation used by the installation driver.
"""

from deploykit.operators.base import ListMode, PackageManager, PackageManagerError
from deploykit.operators.nipkg import NipkgManager

__all__ = ["ListMode", "NipkgManager", "PackageManager", "PackageManagerError"]
