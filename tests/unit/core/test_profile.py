"""Unit tests for deployment profile I/O and application."""

import os
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from deploykit.configstore.store import ConfigNotFoundError, ConfigStore
from deploykit.core.profile import (
    ProfileNotFoundError,
    ProfileParseError,
    ProfileValidationError,
    apply_profile,
    capture_profile,
    load_named_profile,
    load_profile,
    save_profile,
)
from deploykit.models.profile import DeploymentProfile, FileSettings


def read(path: Path) -> str:
    return path.read_bytes().decode("utf-8")


@pytest.fixture
def plain_file(tmp_path: Path, plain_config_text: str) -> Path:
    """Write the plain sample config to disk."""
    path = tmp_path / "vendor.ini"
    path.write_text(plain_config_text, encoding="utf-8", newline="")
    return path


class TestLoadProfile:
    """Tests for load_profile function."""

    def test_load_valid(self, tmp_path: Path) -> None:
        """A valid TOML profile loads into the model."""
        path = tmp_path / "bench.toml"
        path.write_text(
            'name = "bench"\n'
            "\n"
            "[[files]]\n"
            'path = "tool.cfg"\n'
            'variant = "cli"\n'
            "\n"
            "[files.settings.Settings]\n"
            "AutoUpdate = false\n"
            "Timeout = 180\n"
            "\n"
            "[files.removals]\n"
            'Settings = ["Legacy"]\n'
        )

        profile = load_profile(path)

        assert profile.name == "bench"
        entry = profile.files[0]
        assert entry.variant == "cli"
        assert entry.settings == {"Settings": {"AutoUpdate": False, "Timeout": 180}}
        assert entry.removals == {"Settings": ["Legacy"]}

    def test_missing_file(self, tmp_path: Path) -> None:
        """A missing profile raises ProfileNotFoundError."""
        with pytest.raises(ProfileNotFoundError):
            load_profile(tmp_path / "missing.toml")

    def test_invalid_toml(self, tmp_path: Path) -> None:
        """Broken TOML raises ProfileParseError."""
        path = tmp_path / "bad.toml"
        path.write_text("name = \n")

        with pytest.raises(ProfileParseError, match="Invalid TOML"):
            load_profile(path)

    def test_invalid_content(self, tmp_path: Path) -> None:
        """Schema violations raise ProfileValidationError."""
        path = tmp_path / "bad.toml"
        path.write_text('name = "x"\nunknown = 1\n')

        with pytest.raises(ProfileValidationError):
            load_profile(path)

    def test_load_named(self, tmp_path: Path) -> None:
        """Named profiles are read from the profiles directory."""
        directory = tmp_path / "deploykit" / "profiles"
        directory.mkdir(parents=True)
        (directory / "bench.toml").write_text('name = "bench"\n')

        with patch.dict(os.environ, {"XDG_CONFIG_HOME": str(tmp_path)}):
            assert load_named_profile("bench").name == "bench"


class TestSaveProfile:
    """Tests for save_profile function."""

    def test_save_and_reload(self, tmp_path: Path) -> None:
        """A saved profile loads back equal."""
        profile = DeploymentProfile(
            name="bench",
            files=[
                FileSettings(
                    path=Path("C:/ProgramData/Vendor/app.ini"),
                    settings={"Main": {"Enabled": True, "Timeout": 30, "Name": "lab"}},
                    removals={"Main": ["Obsolete"]},
                )
            ],
        )

        path = save_profile(profile, tmp_path / "bench.toml")

        assert load_profile(path) == profile

    def test_omits_missing_description(self, tmp_path: Path) -> None:
        """Unset optional fields are not written."""
        path = save_profile(DeploymentProfile(name="bench"), tmp_path / "bench.toml")

        assert "description" not in path.read_text()

    def test_default_path(self, tmp_path: Path) -> None:
        """Without a path the profile goes to the profiles directory."""
        with patch.dict(os.environ, {"XDG_CONFIG_HOME": str(tmp_path)}):
            path = save_profile(DeploymentProfile(name="bench"))

        assert path == tmp_path / "deploykit" / "profiles" / "bench.toml"
        assert path.exists()


class TestApplyProfile:
    """Tests for apply_profile function."""

    def test_sets_and_removes(self, plain_file: Path) -> None:
        """Settings and removals land in the file."""
        profile = DeploymentProfile(
            name="bench",
            files=[
                FileSettings(
                    path=plain_file,
                    settings={"General": {"Language": "de"}, "Licensing": {"Enabled": True}},
                    removals={"Network": ["Proxy"]},
                )
            ],
        )

        changes = apply_profile(profile)

        store = ConfigStore.plain()
        assert store.get(plain_file, "Language", "General") == "de"
        assert store.get(plain_file, "Enabled", "Licensing") == "TRUE"
        assert store.get(plain_file, "Proxy", "Network") is None
        assert [c.applied for c in changes] == [True, True, True]
        assert [c.operation for c in changes] == ["set", "set", "remove"]

    def test_idempotent(self, plain_file: Path) -> None:
        """Applying twice changes nothing the second time."""
        profile = DeploymentProfile(
            name="bench",
            files=[FileSettings(path=plain_file, settings={"General": {"Language": "de"}})],
        )
        apply_profile(profile)
        first = read(plain_file)

        changes = apply_profile(profile)

        assert read(plain_file) == first
        assert [c.applied for c in changes] == [False]

    def test_missing_removal_warns(self, plain_file: Path, plain_config_text: str) -> None:
        """An absent key is reported as a warning, not an error."""
        profile = DeploymentProfile(
            name="bench",
            files=[FileSettings(path=plain_file, removals={"General": ["Nope"]})],
        )

        with patch("deploykit.core.profile.print_warning") as mock_warning:
            changes = apply_profile(profile)

        mock_warning.assert_called_once()
        assert "Nope" in mock_warning.call_args[0][0]
        assert changes[0].applied is False
        assert read(plain_file) == plain_config_text

    def test_dry_run_writes_nothing(self, plain_file: Path, plain_config_text: str) -> None:
        """Dry runs report changes without touching the file."""
        profile = DeploymentProfile(
            name="bench",
            files=[FileSettings(path=plain_file, settings={"General": {"Language": "de"}})],
        )

        changes = apply_profile(profile, dry_run=True)

        assert changes[0].applied is True
        assert read(plain_file) == plain_config_text

    def test_missing_file_without_create(self, tmp_path: Path) -> None:
        """Missing files are an error unless the profile allows creation."""
        profile = DeploymentProfile(
            name="bench",
            files=[FileSettings(path=tmp_path / "new.cfg", settings={"S": {"k": "v"}})],
        )

        with pytest.raises(ConfigNotFoundError):
            apply_profile(profile)

    def test_missing_file_with_create(self, tmp_path: Path) -> None:
        """create = true writes a new file in the file's dialect."""
        path = tmp_path / "new.cfg"
        profile = DeploymentProfile(
            name="bench",
            files=[
                FileSettings(
                    path=path,
                    variant="cli",
                    create=True,
                    settings={"Settings": {"AutoUpdate": False, "Feed": "https://x/feed"}},
                )
            ],
        )

        apply_profile(profile)

        assert read(path) == '[Settings]\nAutoUpdate = FALSE\nFeed = "https://x/feed"\n'

    def test_single_write_per_file(self, plain_file: Path) -> None:
        """Each file is saved once no matter how many keys change."""
        profile = DeploymentProfile(
            name="bench",
            files=[
                FileSettings(
                    path=plain_file,
                    settings={"General": {"Language": "de", "Region": "EU"}},
                    removals={"Network": ["Port"]},
                )
            ],
        )

        with patch.object(ConfigStore, "save", autospec=True) as mock_save:
            apply_profile(profile)

        mock_save.assert_called_once()


class TestCaptureProfile:
    """Tests for capture_profile function."""

    def test_capture_reproduces_file(self, plain_file: Path, tmp_path: Path) -> None:
        """Applying a captured profile to an empty file recreates its keys."""
        profile = capture_profile("snapshot", [plain_file], description="before upgrade")

        assert profile.description == "before upgrade"
        assert profile.files[0].settings["Network"] == {"Proxy": "", "Port": "8080"}

        target = tmp_path / "copy.ini"
        replay = profile.model_copy(
            update={"files": [profile.files[0].model_copy(update={"path": target})]}
        )
        apply_profile(replay)

        store = ConfigStore.plain()
        assert store.get_all(target) == store.get_all(plain_file)

    def test_capture_missing_file(self, tmp_path: Path) -> None:
        """Capturing a missing file fails."""
        with pytest.raises(ConfigNotFoundError):
            capture_profile("snapshot", [tmp_path / "missing.ini"])

    def test_capture_uses_variant(self, tmp_path: Path, cli_config_text: str) -> None:
        """CLI files are captured with their quotes stripped."""
        path = tmp_path / "tool.cfg"
        path.write_text(cli_config_text, encoding="utf-8", newline="")

        profile = capture_profile("snapshot", [path], variant="cli")

        assert profile.files[0].settings["Settings"]["Feed"] == "https://download.example.com/feed"

    def test_capture_then_apply_keeps_quoted_literals(self, tmp_path: Path) -> None:
        """Quoted numbers and booleans stay quoted after capture and apply."""
        path = tmp_path / "tool.cfg"
        text = '[Settings]\nPort = "180"\nFlag = "TRUE"\nRetries = 3\n'
        path.write_text(text, encoding="utf-8", newline="")

        profile = capture_profile("snapshot", [path], variant="cli")
        apply_profile(profile)

        assert profile.files[0].settings["Settings"]["Port"] == '"180"'
        assert read(path) == text


def test_warning_escapes_markup(plain_file: Path) -> None:
    """Section names in warnings are not swallowed as rich markup."""
    profile = DeploymentProfile(
        name="bench",
        files=[FileSettings(path=plain_file, removals={"legacy": ["Nope"]})],
    )
    mock_warning = MagicMock()

    with patch("deploykit.core.profile.print_warning", mock_warning):
        apply_profile(profile)

    assert "\\[legacy]" in mock_warning.call_args[0][0]
