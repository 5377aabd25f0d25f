"""Package listing parser.

Splits the standard output of a package-manager listing query into
per-package blocks and parses each block into a PackageRecord.

Listing format::

    Package: ni-visa
    Version: 24.0.0
    Section: Drivers



    Package: ni-labview-2024
    ...

Packages are separated by runs of three or more blank lines. Shorter
blank runs stay inside the current block.
"""

import logging
from collections.abc import Iterable

from deploykit.configstore.lines import split_lines
from deploykit.models.package import PackageRecord, RawBlock

logger = logging.getLogger(__name__)

# Consecutive blank lines that end a block
BLOCK_SEPARATOR_RUN = 3


def segment(text: str) -> list[RawBlock]:
    """Split listing text into blocks of non-blank lines.

    A run of BLOCK_SEPARATOR_RUN blank lines closes the current block.
    Longer runs close it only once and never produce empty blocks.
    Lines end only at CRLF, LF or CR. Form feeds and Unicode line
    separators inside a value stay part of that value.

    Args:
        text: Raw listing output.

    Returns:
        Blocks in source order.
    """
    blocks: list[RawBlock] = []
    buffer: list[str] = []
    blank_run = 0

    for line, _ in split_lines(text):
        if line.strip():
            buffer.append(line)
            blank_run = 0
            continue

        blank_run += 1
        if blank_run == BLOCK_SEPARATOR_RUN:
            if buffer:
                blocks.append(RawBlock(lines=tuple(buffer)))
                buffer = []
            blank_run = 0

    if buffer:
        blocks.append(RawBlock(lines=tuple(buffer)))

    return blocks


def parse_block(block: RawBlock | Iterable[str]) -> PackageRecord:
    """Parse one block into a record.

    Each line is split on its first colon. At most one space after the
    colon is dropped from the value. Lines without a colon are skipped,
    and a repeated field keeps its last value.

    Args:
        block: Block (or any iterable of lines) to parse.

    Returns:
        PackageRecord, empty if no line carried a field.
    """
    fields: dict[str, str] = {}
    for line in block:
        name, sep, value = line.partition(":")
        if not sep:
            logger.debug("Skipping listing line without field separator: %r", line[:100])
            continue
        if value.startswith(" "):
            value = value[1:]
        fields[name] = value

    if not fields:
        logger.debug("Listing block produced no fields")
    return PackageRecord(fields)


def parse_manifest(text: str) -> list[PackageRecord]:
    """Segment listing text and parse every block.

    Returns:
        One record per block, in source order.
    """
    return [parse_block(block) for block in segment(text)]
