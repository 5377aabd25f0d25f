"""In-memory configuration document.

A ConfigDocument is an immutable, ordered list of classified lines.
Mutations return a new document and leave every untouched line exactly
as it was parsed, so ``ConfigDocument.parse(text).serialize() == text``
holds for any input.

Section-qualified operations (get, set, remove) use the first header
with a matching name as the canonical target. A section block ends at
the next header line, whatever its name.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from enum import Enum

from deploykit.configstore.formatters import PlainFormatter, ValueFormatter
from deploykit.configstore.lines import (
    BOM,
    DEFAULT_NEWLINE,
    KeyValue,
    Line,
    Opaque,
    SectionHeader,
    classify_line,
    detect_newline,
    render,
    split_lines,
    with_ending,
)

logger = logging.getLogger(__name__)


class _ScanState(Enum):
    OUTSIDE = "outside-target-section"
    INSIDE = "inside-target-section"


@dataclass(frozen=True, slots=True)
class _SectionSpan:
    """Where a section and one of its keys sit in a document."""

    header_index: int | None
    end_index: int
    key_index: int | None

    @property
    def found(self) -> bool:
        return self.header_index is not None


@dataclass(frozen=True, slots=True)
class ConfigDocument:
    """Ordered section/key-value document.

    Attributes:
        lines: Classified lines in document order.
        formatter: Dialect used to recognize and render assignments.
        newline: Terminator used for lines added by mutations.
        bom: Byte order mark found before the first line, written back as is.
    """

    lines: tuple[Line, ...] = ()
    formatter: ValueFormatter = field(default_factory=PlainFormatter)
    newline: str = DEFAULT_NEWLINE
    bom: str = ""

    @classmethod
    def parse(cls, text: str, formatter: ValueFormatter | None = None) -> ConfigDocument:
        """Build a document from raw text.

        Args:
            text: Full file content.
            formatter: Assignment dialect. Defaults to PlainFormatter.

        Returns:
            Parsed ConfigDocument.
        """
        formatter = formatter or PlainFormatter()
        bom = ""
        if text.startswith(BOM):
            bom, text = BOM, text[len(BOM) :]
        lines: list[Line] = []
        for content, ending in split_lines(text):
            line = classify_line(content, ending, formatter)
            if isinstance(line, Opaque) and content.strip():
                logger.debug("Passing through unrecognized line: %r", content[:100])
            lines.append(line)
        return cls(
            lines=tuple(lines),
            formatter=formatter,
            newline=detect_newline(text),
            bom=bom,
        )

    @classmethod
    def empty(cls, formatter: ValueFormatter | None = None) -> ConfigDocument:
        """Create a document with no lines."""
        return cls(formatter=formatter or PlainFormatter())

    def serialize(self) -> str:
        """Render the document back to text."""
        return self.bom + "".join(render(line) for line in self.lines)

    def sections(self) -> list[str]:
        """Return distinct section names in order of first appearance."""
        names: list[str] = []
        for line in self.lines:
            if isinstance(line, SectionHeader) and line.name not in names:
                names.append(line.name)
        return names

    def has_section(self, section: str) -> bool:
        return self._scan(section, None).found

    def get(self, section: str, key: str) -> str | None:
        """Return the value of a key inside a section.

        Args:
            section: Section name, matched case-sensitively.
            key: Key name, matched case-sensitively.

        Returns:
            The first matching value, or None when the section or key is
            absent.
        """
        span = self._scan(section, key)
        if span.key_index is None:
            return None
        line = self.lines[span.key_index]
        assert isinstance(line, KeyValue)
        return self.formatter.decode(line.raw_value)

    def set(self, section: str, key: str, value: str) -> ConfigDocument:
        """Upsert a key inside a section.

        An existing key is rewritten in place. A missing key is added as
        the last line of its section. A missing section is appended to
        the end of the document, after a blank separator line when the
        document has content.

        Args:
            section: Target section name.
            key: Key to set.
            value: New value, rendered through the formatter.

        Returns:
            The updated document (``self`` when nothing changed).

        Raises:
            ValueError: If section or key is empty.
        """
        _require_name("section", section)
        _require_name("key", key)

        text = self.formatter.format_line(key, value)
        span = self._scan(section, key)

        if span.key_index is not None:
            current = self.lines[span.key_index]
            if current.text == text:
                return self
            lines = list(self.lines)
            lines[span.key_index] = self._classify(text, current.ending)
            return self._evolve(lines)

        if span.found:
            new_lines = [self._classify(text, self.newline)]
            return self._evolve(self._splice(span.end_index, new_lines))

        new_lines = [
            SectionHeader(name=section, text=f"[{section}]", ending=self.newline),
            self._classify(text, self.newline),
        ]
        if self.lines:
            new_lines.insert(0, Opaque(text="", ending=self.newline))
        return self._evolve(self._splice(len(self.lines), new_lines))

    def remove(self, section: str, key: str) -> tuple[ConfigDocument, bool]:
        """Drop a key from a section.

        Args:
            section: Section name.
            key: Key to remove.

        Returns:
            Tuple of (document, removed). When the key is absent the
            original document is returned with ``removed=False``.
        """
        span = self._scan(section, key)
        if span.key_index is None:
            return self, False
        lines = list(self.lines)
        del lines[span.key_index]
        return self._evolve(lines), True

    def get_all(self, section: str | None = None) -> dict[str, dict[str, str]]:
        """Collect every section's keys in one pass.

        Repeated keys in a section resolve to the last occurrence, and
        repeated section headers are merged. Keys before the first
        header belong to no section and are not reported.

        Args:
            section: Only report this section when given.

        Returns:
            Mapping of section name to mapping of key to value.
        """
        result: dict[str, dict[str, str]] = {}
        current: str | None = None
        for line in self.lines:
            if isinstance(line, SectionHeader):
                current = line.name
                if section is None or current == section:
                    result.setdefault(current, {})
            elif isinstance(line, KeyValue) and current is not None:
                if section is None or current == section:
                    result[current][line.key] = self.formatter.decode(line.raw_value)
        return result

    def _scan(self, section: str, key: str | None) -> _SectionSpan:
        state = _ScanState.OUTSIDE
        header_index: int | None = None
        key_index: int | None = None

        for index, line in enumerate(self.lines):
            if isinstance(line, SectionHeader):
                if state is _ScanState.INSIDE:
                    return _SectionSpan(header_index, index, key_index)
                if line.name == section:
                    state = _ScanState.INSIDE
                    header_index = index
                continue
            if (
                state is _ScanState.INSIDE
                and key_index is None
                and isinstance(line, KeyValue)
                and line.key == key
            ):
                key_index = index

        return _SectionSpan(header_index, len(self.lines), key_index)

    def _classify(self, text: str, ending: str) -> Line:
        return classify_line(text, ending, self.formatter)

    def _splice(self, index: int, new_lines: list[Line]) -> list[Line]:
        lines = list(self.lines)
        # Keep an unterminated last line unterminated after appending
        if index == len(lines) and lines and lines[-1].ending == "":
            lines[-1] = with_ending(lines[-1], self.newline)
            new_lines[-1] = with_ending(new_lines[-1], "")
        lines[index:index] = new_lines
        return lines

    def _evolve(self, lines: list[Line]) -> ConfigDocument:
        return replace(self, lines=tuple(lines))


def _require_name(kind: str, value: str) -> None:
    if not value:
        msg = f"Config {kind} cannot be empty"
        raise ValueError(msg)
