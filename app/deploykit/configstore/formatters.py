"""Value formatting strategies for configuration documents.

The same section/key state machine serves two file dialects:

- Plain files written as ``Key=Value`` with values stored verbatim.
- CLI configuration files written as ``Key = Value`` where values that
  are not booleans, integers or already quoted are wrapped in double
  quotes.

A formatter decides how an assignment line is recognized, how it is
rendered, and how a stored value is read back.
"""

import re
from abc import ABC, abstractmethod

# Lines starting with these characters are comments, never assignments
COMMENT_PREFIXES = (";", "#")

_INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+")
_BARE_LITERALS = frozenset({"TRUE", "FALSE"})


class ValueFormatter(ABC):
    """Strategy for recognizing and rendering assignment lines."""

    @abstractmethod
    def split(self, text: str) -> tuple[str, str] | None:
        """Split an assignment line into ``(key, raw_value)``.

        Args:
            text: Line content without terminator.

        Returns:
            Tuple of key and raw value, or None if the line is not an
            assignment in this dialect.
        """

    @abstractmethod
    def format_line(self, key: str, value: str) -> str:
        """Render an assignment line (without terminator)."""

    def decode(self, raw_value: str) -> str:
        """Convert a stored raw value into the value handed to callers."""
        return raw_value

    # Formatters are stateless: two instances of a class are interchangeable
    def __eq__(self, other: object) -> bool:
        return type(self) is type(other)

    def __hash__(self) -> int:
        return hash(type(self))


class PlainFormatter(ValueFormatter):
    """``Key=Value`` lines, values stored and returned verbatim."""

    def split(self, text: str) -> tuple[str, str] | None:
        if text.startswith(COMMENT_PREFIXES):
            return None
        key, sep, value = text.partition("=")
        if not sep or not key:
            return None
        return key, value

    def format_line(self, key: str, value: str) -> str:
        return f"{key}={value}"


class QuotingFormatter(ValueFormatter):
    """``Key = Value`` lines with quote-if-needed value rendering.

    A value is emitted bare when it is exactly ``TRUE`` or ``FALSE``, an
    optionally signed integer, or already wrapped in double quotes.
    Everything else is wrapped in double quotes.

    Example:
        >>> fmt = QuotingFormatter()
        >>> fmt.format_line("Timeout", "180")
        'Timeout = 180'
        >>> fmt.format_line("Name", "hello world")
        'Name = "hello world"'
    """

    def split(self, text: str) -> tuple[str, str] | None:
        if text.lstrip().startswith(COMMENT_PREFIXES):
            return None
        key, sep, value = text.partition("=")
        key = key.strip()
        if not sep or not key:
            return None
        return key, value.strip()

    def format_line(self, key: str, value: str) -> str:
        return f"{key} = {quote_value(value)}"

    def decode(self, raw_value: str) -> str:
        # Keep quotes that stop the value from being a bare literal ("180", "TRUE")
        if is_quoted(raw_value) and quote_value(raw_value[1:-1]) == raw_value:
            return raw_value[1:-1]
        return raw_value


def is_quoted(value: str) -> bool:
    """Check if a value is already wrapped in double quotes."""
    return len(value) >= 2 and value.startswith('"') and value.endswith('"')


def quote_value(value: str) -> str:
    """Apply the CLI configuration quoting rule to a value."""
    if value in _BARE_LITERALS or _INTEGER_PATTERN.fullmatch(value) or is_quoted(value):
        return value
    return f'"{value}"'
