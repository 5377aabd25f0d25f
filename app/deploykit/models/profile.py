"""Deployment profile models.

A deployment profile says which keys to set and remove in which
configuration files. Profiles are stored as TOML::

    name = "lab-bench"

    [[files]]
    path = "C:/ProgramData/Vendor/app.ini"
    variant = "plain"
    create = true

    [files.settings.Main]
    Timeout = 180
    Enabled = true

    [files.removals]
    Main = ["Obsolete"]
"""

from pathlib import Path
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from deploykit.configstore.store import ConfigStore

# Config file dialect: "plain" is Key=Value, "cli" is Key = "Value"
VariantType = Literal["plain", "cli"]

ProfileValue = bool | int | str


def store_for(variant: VariantType) -> ConfigStore:
    """Create a ConfigStore for a config file dialect."""
    return ConfigStore.cli() if variant == "cli" else ConfigStore.plain()


def to_config_text(value: ProfileValue) -> str:
    """Render a profile value the way config files spell it.

    Booleans become ``TRUE``/``FALSE`` and integers their decimal form.
    """
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    return str(value)


class FileSettings(BaseModel):
    """Changes to apply to one configuration file.

    Attributes:
        path: Config file to modify.
        variant: File dialect ("plain" or "cli").
        create: Create the file if it does not exist.
        settings: Section name to mapping of key to value.
        removals: Section name to keys that should be removed.
    """

    model_config = ConfigDict(extra="forbid")

    path: Annotated[Path, Field(description="Config file to modify")]
    variant: Annotated[VariantType, Field(description="Config file dialect")] = "plain"
    create: Annotated[bool, Field(description="Create the file if missing")] = False
    settings: Annotated[
        dict[str, dict[str, ProfileValue]],
        Field(default_factory=dict, description="Keys to set per section"),
    ]
    removals: Annotated[
        dict[str, list[str]],
        Field(default_factory=dict, description="Keys to remove per section"),
    ]

    @field_validator("settings", "removals")
    @classmethod
    def validate_names(cls, value: dict[str, object]) -> dict[str, object]:
        """Reject empty section names and empty keys."""
        for section, keys in value.items():
            if not section:
                msg = "Section names cannot be empty"
                raise ValueError(msg)
            if any(not key for key in keys):
                msg = f"Key names in section [{section}] cannot be empty"
                raise ValueError(msg)
        return value

    @model_validator(mode="after")
    def validate_no_conflicts(self) -> "FileSettings":
        """Validate that no key is both set and removed."""
        for section, keys in self.removals.items():
            conflicts = set(keys) & set(self.settings.get(section, {}))
            if conflicts:
                msg = f"Keys cannot be both set and removed in [{section}]: {sorted(conflicts)}"
                raise ValueError(msg)
        return self

    def store(self) -> ConfigStore:
        """Create a ConfigStore for this file's dialect."""
        return store_for(self.variant)

    def rendered_settings(self) -> dict[str, dict[str, str]]:
        """Return settings with every value rendered as config text."""
        return {
            section: {key: to_config_text(value) for key, value in pairs.items()}
            for section, pairs in self.settings.items()
        }


class DeploymentProfile(BaseModel):
    """Named set of configuration changes for one deployment.

    Attributes:
        name: Profile identifier.
        description: Optional human-readable description.
        files: Per-file changes, applied in order.
    """

    model_config = ConfigDict(extra="forbid")

    name: Annotated[str, Field(min_length=1, description="Profile identifier")]
    description: Annotated[str | None, Field(description="Profile description")] = None
    files: Annotated[
        list[FileSettings],
        Field(default_factory=list, description="Config files to modify"),
    ]
