"""Section/key-value configuration text editing.

This module exports the document model and the file-backed store.
"""

from deploykit.configstore.document import ConfigDocument
from deploykit.configstore.formatters import PlainFormatter, QuotingFormatter, ValueFormatter
from deploykit.configstore.lines import KeyValue, Line, Opaque, SectionHeader
from deploykit.configstore.store import (
    ConfigNotFoundError,
    ConfigStore,
    ConfigStoreError,
    ConfigWriteError,
)

__all__ = [
    "ConfigDocument",
    "ConfigNotFoundError",
    "ConfigStore",
    "ConfigStoreError",
    "ConfigWriteError",
    "KeyValue",
    "Line",
    "Opaque",
    "PlainFormatter",
    "QuotingFormatter",
    "SectionHeader",
    "ValueFormatter",
]
