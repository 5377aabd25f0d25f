"""Category filtering and install ordering for package records.

Installation runs category by category in INSTALL_ORDER so that
programming environments exist before the drivers that plug into them,
and drivers exist before the applications that use them. Inside a
category, packages install in ascending identifier order.
"""

from collections.abc import Iterable

from deploykit.models.package import PackageCategory, PackageRecord

INSTALL_ORDER: tuple[PackageCategory, ...] = (
    PackageCategory.PROGRAMMING_ENVIRONMENTS,
    PackageCategory.DRIVERS,
    PackageCategory.APPLICATION_SOFTWARE,
    PackageCategory.UTILITIES,
)


def _sort_key(record: PackageRecord) -> tuple[str, str]:
    # Plain str comparison is ordinal (code point) ordering
    return (record.package or "", record.version or "")


def sort_records(records: Iterable[PackageRecord]) -> list[PackageRecord]:
    """Sort records by package identifier, then version."""
    return sorted(records, key=_sort_key)


def filter_by_section(
    records: Iterable[PackageRecord],
    section: str | PackageCategory,
) -> list[PackageRecord]:
    """Select records of one section, sorted by package identifier.

    Records without a ``Section`` field never match.

    Args:
        records: Records to filter.
        section: Section name to keep.

    Returns:
        Matching records in ascending ``Package`` order.
    """
    name = section.value if isinstance(section, PackageCategory) else section
    return sort_records(r for r in records if r.section is not None and r.section == name)


def group_by_category(
    records: Iterable[PackageRecord],
) -> dict[PackageCategory, list[PackageRecord]]:
    """Bucket records into the installation categories.

    Returns:
        Mapping in INSTALL_ORDER of category to sorted records. Empty
        categories are omitted.
    """
    materialized = list(records)
    groups: dict[PackageCategory, list[PackageRecord]] = {}
    for category in INSTALL_ORDER:
        members = filter_by_section(materialized, category)
        if members:
            groups[category] = members
    return groups


def install_order(records: Iterable[PackageRecord]) -> list[PackageRecord]:
    """Flatten records into installation order.

    Records whose section is not one of the installation categories are
    left out.

    Example:
        >>> records = [
        ...     PackageRecord({"Package": "zeta", "Section": "Utilities"}),
        ...     PackageRecord({"Package": "alpha", "Section": "Drivers"}),
        ... ]
        >>> [r.package for r in install_order(records)]
        ['alpha', 'zeta']
    """
    ordered: list[PackageRecord] = []
    for members in group_by_category(records).values():
        ordered.extend(members)
    return ordered


def uncategorized(records: Iterable[PackageRecord]) -> list[PackageRecord]:
    """Return records that fall outside every installation category."""
    known = {category.value for category in PackageCategory}
    return [r for r in records if r.section not in known]
