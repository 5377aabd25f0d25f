"""Deployment profile I/O and application.

Profiles are TOML files validated with Pydantic. Applying a profile
drives ConfigStore: each file is read once, every set and removal is
applied to the in-memory document, and the file is written back once if
anything changed.
"""

import logging
import os
import tomllib
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Any, Literal

import tomli_w
from pydantic import ValidationError
from rich.markup import escape

from deploykit.core.paths import get_profile_path
from deploykit.models.profile import DeploymentProfile, FileSettings, VariantType, store_for
from deploykit.utils.formatting import print_warning

logger = logging.getLogger(__name__)


class ProfileError(Exception):
    """Base exception for profile-related errors."""


class ProfileNotFoundError(ProfileError):
    """Raised when a profile file is not found."""


class ProfileParseError(ProfileError):
    """Raised when a profile file cannot be parsed."""


class ProfileValidationError(ProfileError):
    """Raised when profile content is invalid."""


@dataclass(frozen=True, slots=True)
class ProfileChange:
    """Outcome of one key operation while applying a profile.

    Attributes:
        path: Config file the key lives in.
        section: Section name.
        key: Key name.
        operation: "set" or "remove".
        applied: Whether the document changed.
        value: Value written, None for removals.
    """

    path: Path
    section: str
    key: str
    operation: Literal["set", "remove"]
    applied: bool
    value: str | None = None


def load_profile(path: Path) -> DeploymentProfile:
    """Load and validate a profile from a TOML file.

    Args:
        path: Path to the profile file.

    Returns:
        Validated DeploymentProfile.

    Raises:
        ProfileNotFoundError: If the file doesn't exist.
        ProfileParseError: If the TOML syntax is invalid.
        ProfileValidationError: If the content doesn't match the schema.
    """
    if not path.exists():
        raise ProfileNotFoundError(f"Profile not found: {path}")

    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ProfileParseError(f"Invalid TOML syntax: {e}") from e
    except OSError as e:
        raise ProfileError(f"Failed to read profile: {e}") from e

    try:
        return DeploymentProfile.model_validate(data)
    except ValidationError as e:
        raise ProfileValidationError(f"Invalid profile content: {e}") from e


def load_named_profile(name: str) -> DeploymentProfile:
    """Load a profile from the default profiles directory by name."""
    return load_profile(get_profile_path(name))


def save_profile(profile: DeploymentProfile, path: Path | None = None) -> Path:
    """Save a profile to a TOML file atomically.

    Args:
        profile: Profile to save.
        path: Destination. If None, uses the default path for the
            profile's name.

    Returns:
        Path where the profile was saved.

    Raises:
        ProfileError: If the file cannot be written.
    """
    profile_path = path or get_profile_path(profile.name)
    profile_path.parent.mkdir(parents=True, exist_ok=True)

    data = _profile_to_dict(profile)

    tmp_path: Path | None = None
    try:
        with NamedTemporaryFile(
            mode="wb",
            dir=profile_path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            tomli_w.dump(data, f)
        os.replace(str(tmp_path), str(profile_path))
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise ProfileError(f"Failed to write profile: {e}") from e

    return profile_path


def apply_profile(profile: DeploymentProfile, *, dry_run: bool = False) -> list[ProfileChange]:
    """Apply every file's settings and removals.

    A removal whose key is absent is reported as a warning and recorded
    with ``applied=False``; it never aborts the run.

    Args:
        profile: Profile to apply.
        dry_run: Compute changes without writing any file.

    Returns:
        One ProfileChange per key operation, in profile order.

    Raises:
        ConfigNotFoundError: If a file is missing and the profile does
            not allow creating it.
        ConfigWriteError: If a file cannot be written.
    """
    changes: list[ProfileChange] = []
    for entry in profile.files:
        changes.extend(_apply_file(entry, dry_run=dry_run))

    applied = sum(1 for c in changes if c.applied)
    logger.info("Applied profile %s: %d of %d change(s)", profile.name, applied, len(changes))
    return changes


def capture_profile(
    name: str,
    paths: Iterable[Path],
    *,
    variant: VariantType = "plain",
    description: str | None = None,
) -> DeploymentProfile:
    """Snapshot the current contents of config files into a profile.

    Args:
        name: Name of the new profile.
        paths: Existing config files to capture.
        variant: Dialect of the captured files.
        description: Optional profile description.

    Returns:
        DeploymentProfile whose application reproduces the captured keys.

    Raises:
        ConfigNotFoundError: If one of the files does not exist.
    """
    files: list[FileSettings] = []
    for path in paths:
        settings = store_for(variant).get_all(path)
        files.append(FileSettings(path=path, variant=variant, create=True, settings=settings))
    return DeploymentProfile(name=name, description=description, files=files)


def _apply_file(entry: FileSettings, *, dry_run: bool) -> list[ProfileChange]:
    store = entry.store()
    original = store.load(entry.path, create_if_missing=entry.create)
    document = original
    changes: list[ProfileChange] = []

    for section, pairs in entry.rendered_settings().items():
        for key, value in pairs.items():
            updated = document.set(section, key, value)
            changes.append(
                ProfileChange(
                    path=entry.path,
                    section=section,
                    key=key,
                    operation="set",
                    applied=updated is not document,
                    value=value,
                )
            )
            document = updated

    for section, keys in entry.removals.items():
        for key in keys:
            document, removed = document.remove(section, key)
            if not removed:
                logger.warning("Key %r not found in [%s] of %s", key, section, entry.path)
                message = f"{key} not found in [{section}] of {entry.path}, nothing removed"
                print_warning(escape(message))
            changes.append(
                ProfileChange(
                    path=entry.path,
                    section=section,
                    key=key,
                    operation="remove",
                    applied=removed,
                )
            )

    if dry_run:
        logger.debug("Dry run: not writing %s", entry.path)
    elif document is not original or not entry.path.exists():
        store.save(document, entry.path)

    return changes


def _profile_to_dict(profile: DeploymentProfile) -> dict[str, Any]:
    """Convert a profile to a dictionary suitable for TOML serialization.

    TOML has no null, so unset optional fields are left out.
    """
    return profile.model_dump(mode="json", exclude_none=True)
