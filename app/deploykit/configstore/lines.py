"""Line model for section/key-value configuration text.

A document is an ordered sequence of classified lines. Every line keeps
its original text and terminator so that untouched lines serialize back
byte for byte.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from deploykit.configstore.formatters import ValueFormatter

DEFAULT_NEWLINE = "\n"

BOM = "\ufeff"

# Checked longest first so "\r\n" is not split into "\r" + "\n"
_TERMINATORS = ("\r\n", "\n", "\r")


@dataclass(frozen=True, slots=True)
class SectionHeader:
    """A ``[name]`` header line.

    Attributes:
        name: Section name between the brackets (case-sensitive).
        text: Original line text without terminator.
        ending: Line terminator ("" for a final unterminated line).
    """

    name: str
    text: str
    ending: str = DEFAULT_NEWLINE


@dataclass(frozen=True, slots=True)
class KeyValue:
    """A key/value assignment line.

    Attributes:
        key: Key as matched by the formatter.
        raw_value: Value text exactly as it appears after the separator.
        text: Original line text without terminator.
        ending: Line terminator.
    """

    key: str
    raw_value: str
    text: str
    ending: str = DEFAULT_NEWLINE


@dataclass(frozen=True, slots=True)
class Opaque:
    """Any line that is neither a header nor an assignment.

    Blank lines, comments and unrecognized content are carried through
    unchanged.
    """

    text: str
    ending: str = DEFAULT_NEWLINE


Line = SectionHeader | KeyValue | Opaque


def render(line: Line) -> str:
    """Return the exact serialized form of a line."""
    return line.text + line.ending


def with_ending(line: Line, ending: str) -> Line:
    """Return a copy of the line with a different terminator."""
    return replace(line, ending=ending)


def split_lines(text: str) -> list[tuple[str, str]]:
    """Split text into ``(content, terminator)`` pairs.

    Unlike ``str.splitlines`` this keeps the terminator separately and
    only recognizes ``\\n``, ``\\r\\n`` and ``\\r``.

    Args:
        text: Raw document text.

    Returns:
        List of (content, terminator) tuples. The last terminator is ""
        when the text does not end with a newline.
    """
    pairs: list[tuple[str, str]] = []
    start = 0
    index = 0
    length = len(text)
    while index < length:
        char = text[index]
        if char in "\r\n":
            ending = "\r\n" if text.startswith("\r\n", index) else char
            pairs.append((text[start:index], ending))
            index += len(ending)
            start = index
        else:
            index += 1
    if start < length:
        pairs.append((text[start:], ""))
    return pairs


def detect_newline(text: str) -> str:
    """Return the first line terminator used in the text, or ``\\n``."""
    for index, char in enumerate(text):
        if char in "\r\n":
            for terminator in _TERMINATORS:
                if text.startswith(terminator, index):
                    return terminator
    return DEFAULT_NEWLINE


def parse_header(text: str) -> str | None:
    """Return the section name if the text is exactly ``[name]``."""
    if len(text) > 2 and text.startswith("[") and text.endswith("]"):
        return text[1:-1]
    return None


def classify_line(text: str, ending: str, formatter: ValueFormatter) -> Line:
    """Classify one line of a configuration document.

    Args:
        text: Line content without terminator.
        ending: The line's terminator.
        formatter: Formatter deciding what an assignment looks like.

    Returns:
        SectionHeader, KeyValue or Opaque for the line.
    """
    name = parse_header(text)
    if name is not None:
        return SectionHeader(name=name, text=text, ending=ending)

    match = formatter.split(text)
    if match is not None:
        key, raw_value = match
        return KeyValue(key=key, raw_value=raw_value, text=text, ending=ending)

    return Opaque(text=text, ending=ending)
