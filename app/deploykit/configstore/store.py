"""File-backed configuration store.

Every operation reads the file fresh, applies one change to a
ConfigDocument and writes the result back only when the text changed.
Nothing is cached between calls, so concurrent callers on the same path
must serialize access themselves.
"""

import logging
import os
import shutil
from collections.abc import Mapping
from pathlib import Path
from tempfile import NamedTemporaryFile

from deploykit.configstore.document import ConfigDocument
from deploykit.configstore.formatters import PlainFormatter, QuotingFormatter, ValueFormatter

logger = logging.getLogger(__name__)

ENCODING = "utf-8"

# Undecodable bytes pass through reads and writes unchanged
ENCODING_ERRORS = "surrogateescape"


def _new_file_mode() -> int:
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask


class ConfigStoreError(Exception):
    """Base exception for configuration store errors."""


class ConfigNotFoundError(ConfigStoreError):
    """Raised when a config file is missing and may not be created."""


class ConfigWriteError(ConfigStoreError):
    """Raised when a config file cannot be read or written."""


class ConfigStore:
    """Section/key store over plain-text configuration files.

    One implementation serves both the multi-section and the
    single-section form: pass ``default_section`` to let callers omit
    the section argument.

    Example:
        >>> store = ConfigStore.cli(default_section="Settings")
        >>> _ = store.set(Path("tool.cfg"), "Timeout", "180", create_if_missing=True)
        >>> store.get(Path("tool.cfg"), "Timeout")
        '180'
    """

    def __init__(
        self,
        formatter: ValueFormatter | None = None,
        *,
        default_section: str | None = None,
    ) -> None:
        """Initialize the store.

        Args:
            formatter: Assignment dialect. Defaults to PlainFormatter.
            default_section: Section used when an operation gets none.
        """
        self._formatter = formatter or PlainFormatter()
        self._default_section = default_section

    @classmethod
    def plain(cls, default_section: str | None = None) -> "ConfigStore":
        """Create a store for ``Key=Value`` files."""
        return cls(PlainFormatter(), default_section=default_section)

    @classmethod
    def cli(cls, default_section: str | None = None) -> "ConfigStore":
        """Create a store for quoted ``Key = "Value"`` files."""
        return cls(QuotingFormatter(), default_section=default_section)

    @property
    def formatter(self) -> ValueFormatter:
        return self._formatter

    @property
    def default_section(self) -> str | None:
        return self._default_section

    def load(self, path: Path, *, create_if_missing: bool = False) -> ConfigDocument:
        """Read and parse a config file.

        Args:
            path: File to read.
            create_if_missing: Start from an empty document when the
                file does not exist instead of failing.

        Returns:
            Parsed ConfigDocument.

        Raises:
            ConfigNotFoundError: If the file is missing and
                create_if_missing is False.
            ConfigWriteError: If the file exists but cannot be read.
        """
        if not path.exists():
            if create_if_missing:
                logger.debug("Config file %s missing, starting from empty document", path)
                return ConfigDocument.empty(self._formatter)
            raise ConfigNotFoundError(f"Config file not found: {path}")

        try:
            with open(path, encoding=ENCODING, errors=ENCODING_ERRORS, newline="") as f:
                text = f.read()
        except OSError as e:
            raise ConfigWriteError(f"Failed to read config file {path}: {e}") from e

        return ConfigDocument.parse(text, self._formatter)

    def save(self, document: ConfigDocument, path: Path) -> Path:
        """Write a document to disk atomically.

        A symlinked path is written through to its target. An existing file
        keeps its permission bits and a new one gets the umask default.

        Args:
            document: Document to serialize.
            path: Destination file.

        Returns:
            Path that was written.

        Raises:
            ConfigWriteError: If the file cannot be written.
        """
        target = path.resolve()
        target.parent.mkdir(parents=True, exist_ok=True)

        tmp_path: Path | None = None
        try:
            with NamedTemporaryFile(
                mode="w",
                encoding=ENCODING,
                errors=ENCODING_ERRORS,
                newline="",
                dir=target.parent,
                delete=False,
                suffix=".tmp",
            ) as f:
                tmp_path = Path(f.name)
                f.write(document.serialize())
            if target.exists():
                shutil.copymode(target, tmp_path)
            else:
                os.chmod(tmp_path, _new_file_mode())
            os.replace(str(tmp_path), str(target))
        except OSError as e:
            if tmp_path is not None and tmp_path.exists():
                tmp_path.unlink()
            raise ConfigWriteError(f"Failed to write config file {path}: {e}") from e

        logger.info("Wrote config file %s", path)
        return path

    def get(self, path: Path, key: str, section: str | None = None) -> str | None:
        """Read one value, or None when the key or section is absent."""
        document = self.load(path)
        return document.get(self._resolve_section(section), key)

    def get_all(self, path: Path, section: str | None = None) -> dict[str, dict[str, str]]:
        """Read every section (or only ``section``) as nested mappings."""
        return self.load(path).get_all(section)

    def set(
        self,
        path: Path,
        key: str,
        value: str,
        section: str | None = None,
        *,
        create_if_missing: bool = False,
    ) -> ConfigDocument:
        """Upsert one key and write the file back.

        Args:
            path: Config file to modify.
            key: Key to set.
            value: Value to store.
            section: Target section; falls back to the default section.
            create_if_missing: Create the file if it does not exist.

        Returns:
            The resulting document.

        Raises:
            ConfigNotFoundError: If the file is missing and
                create_if_missing is False.
            ValueError: If no section is given and no default is set.
        """
        target = self._resolve_section(section)
        original = self.load(path, create_if_missing=create_if_missing)
        updated = original.set(target, key, value)
        self._write_if_changed(original, updated, path)
        return updated

    def set_many(
        self,
        path: Path,
        values: Mapping[str, Mapping[str, str]],
        *,
        create_if_missing: bool = False,
    ) -> ConfigDocument:
        """Upsert several keys with a single read and write.

        Args:
            path: Config file to modify.
            values: Mapping of section name to mapping of key to value.
            create_if_missing: Create the file if it does not exist.

        Returns:
            The resulting document.
        """
        original = self.load(path, create_if_missing=create_if_missing)
        updated = original
        for section, pairs in values.items():
            for key, value in pairs.items():
                updated = updated.set(section, key, value)
        self._write_if_changed(original, updated, path)
        return updated

    def remove(self, path: Path, key: str, section: str | None = None) -> bool:
        """Remove one key and write the file back.

        Returns:
            True if the key was removed, False if it was not present.
        """
        target = self._resolve_section(section)
        original = self.load(path)
        updated, removed = original.remove(target, key)
        if not removed:
            logger.warning("Key %r not found in section [%s] of %s", key, target, path)
            return False
        self.save(updated, path)
        return True

    def _resolve_section(self, section: str | None) -> str:
        resolved = section if section is not None else self._default_section
        if resolved is None:
            msg = "No section given and the store has no default section"
            raise ValueError(msg)
        return resolved

    def _write_if_changed(
        self,
        original: ConfigDocument,
        updated: ConfigDocument,
        path: Path,
    ) -> None:
        if updated is original and path.exists():
            logger.debug("Config file %s already up to date", path)
            return
        self.save(updated, path)
