"""Package listing parsing and install ordering.

This module exports the listing parser and the category ordering helpers.
"""

from deploykit.manifest.ordering import (
    INSTALL_ORDER,
    filter_by_section,
    group_by_category,
    install_order,
    sort_records,
    uncategorized,
)
from deploykit.manifest.parser import parse_block, parse_manifest, segment
from deploykit.models.package import PackageCategory

__all__ = [
    "INSTALL_ORDER",
    "PackageCategory",
    "filter_by_section",
    "group_by_category",
    "install_order",
    "parse_block",
    "parse_manifest",
    "segment",
    "sort_records",
    "uncategorized",
]
