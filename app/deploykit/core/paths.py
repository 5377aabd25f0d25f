"""Default file locations for deploykit.

Profiles live in the XDG configuration directory:
``$XDG_CONFIG_HOME/deploykit/profiles`` or ``~/.config/deploykit/profiles``.
"""

import os
from pathlib import Path

# Application identifier for directory naming
APP_NAME = "deploykit"

PROFILE_SUFFIX = ".toml"


def get_config_dir() -> Path:
    """Get the configuration directory path.

    Returns:
        Path to ~/.config/deploykit/ (or XDG_CONFIG_HOME/deploykit/).
    """
    base = os.environ.get("XDG_CONFIG_HOME")
    if base:
        return Path(base) / APP_NAME
    return Path.home() / ".config" / APP_NAME


def get_profiles_dir() -> Path:
    """Get the directory holding deployment profiles."""
    return get_config_dir() / "profiles"


def get_profile_path(name: str) -> Path:
    """Get the path of a named profile.

    Args:
        name: Profile name without suffix.

    Returns:
        Path to <profiles dir>/<name>.toml.

    Raises:
        ValueError: If the name is empty or contains a path separator.
    """
    if not name or "/" in name or "\\" in name:
        msg = f"Invalid profile name: {name!r}"
        raise ValueError(msg)
    return get_profiles_dir() / f"{name}{PROFILE_SUFFIX}"


def ensure_profiles_dir() -> Path:
    """Create the profiles directory if it doesn't exist.

    Returns:
        Path to the profiles directory.

    Raises:
        RuntimeError: If the directory cannot be created.
    """
    path = get_profiles_dir()
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        msg = f"Cannot create profiles directory {path}: {e}"
        raise RuntimeError(msg) from e
    return path


def list_profiles() -> list[str]:
    """Return names of the profiles in the profiles directory, sorted."""
    directory = get_profiles_dir()
    if not directory.is_dir():
        return []
    return sorted(p.stem for p in directory.glob(f"*{PROFILE_SUFFIX}") if p.is_file())
