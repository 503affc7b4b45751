"""Tests for rcut.core.config."""

from __future__ import annotations

from pathlib import Path

import pytest

from rcut.core.config import (
    SIGNING_KEY_ENV,
    ArtifactsConfig,
    Config,
    ProjectConfig,
    load_config,
    load_config_or_default,
)
from rcut.core.result import Err, Ok


class TestDefaults:
    def test_project_defaults(self) -> None:
        project = ProjectConfig()
        assert project.version_file == "VERSION"
        assert project.changelog_file == "CHANGELOG.md"
        assert project.main_branch == "main"
        assert project.remote == "origin"

    def test_prefix_falls_back_to_directory_name(self, tmp_path: Path) -> None:
        root = tmp_path / "widget"
        assert ProjectConfig().prefix(root) == "widget"
        assert ProjectConfig(name="Widget").prefix(root) == "Widget"
        assert ProjectConfig(name="Widget", tag_prefix="apache-widget").prefix(root) == (
            "apache-widget"
        )

    def test_frozen(self) -> None:
        config = ArtifactsConfig()
        with pytest.raises(AttributeError):
            config.output_dir = "out"  # type: ignore[misc]


class TestFromDict:
    def test_full(self) -> None:
        config = Config.from_dict(
            {
                "project": {"name": "widget", "main_branch": "trunk", "repo_url": "https://x/y/"},
                "artifacts": {"output_dir": "build/release", "signing_key": "ABCD1234"},
                "dist": {"url": "https://dist.example.org/dev/widget/"},
                "vote": {"mailing_list": "dev@widget.example.org"},
            }
        )
        assert config.project.name == "widget"
        assert config.project.main_branch == "trunk"
        assert config.project.repo_url == "https://x/y"
        assert config.artifacts.output_dir == "build/release"
        assert config.artifacts.signing_key == "ABCD1234"
        assert config.dist.url == "https://dist.example.org/dev/widget"
        assert config.vote.mailing_list == "dev@widget.example.org"

    def test_blank_values_use_defaults(self) -> None:
        config = Config.from_dict({"project": {"version_file": "  "}})
        assert config.project.version_file == "VERSION"


class TestWithEnv:
    def test_signing_key_override(self) -> None:
        config = Config().with_env({SIGNING_KEY_ENV: " FEED "})
        assert config.artifacts.signing_key == "FEED"

    def test_blank_env_is_ignored(self) -> None:
        config = Config(artifacts=ArtifactsConfig(signing_key="KEEP"))
        assert config.with_env({SIGNING_KEY_ENV: ""}).artifacts.signing_key == "KEEP"


class TestLoadConfig:
    def test_valid_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv(SIGNING_KEY_ENV, raising=False)
        path = tmp_path / ".rcut.toml"
        path.write_text('[project]\nname = "widget"\n[dist]\nurl = "https://d/w"\n')

        result = load_config(path)

        assert isinstance(result, Ok)
        assert result.value.project.name == "widget"
        assert result.value.dist.url == "https://d/w"

    def test_missing_file(self, tmp_path: Path) -> None:
        result = load_config(tmp_path / "nope.toml")
        assert isinstance(result, Err)
        assert "not found" in result.error.message

    def test_invalid_toml(self, tmp_path: Path) -> None:
        path = tmp_path / ".rcut.toml"
        path.write_text("[project\n")
        result = load_config(path)
        assert isinstance(result, Err)
        assert "Invalid TOML" in result.error.message

    def test_unknown_key_rejected(self, tmp_path: Path) -> None:
        path = tmp_path / ".rcut.toml"
        path.write_text('[project]\nversionfile = "VERSION"\n')
        result = load_config(path)
        assert isinstance(result, Err)
        assert "versionfile" in result.error.message

    def test_unknown_section_rejected(self, tmp_path: Path) -> None:
        path = tmp_path / ".rcut.toml"
        path.write_text("[release]\n")
        result = load_config(path)
        assert isinstance(result, Err)
        assert "[release]" in result.error.message

    def test_or_default_without_file(self, tmp_path: Path) -> None:
        result = load_config_or_default(tmp_path / ".rcut.toml")
        assert isinstance(result, Ok)
        assert result.value.project == ProjectConfig()

    def test_or_default_still_reports_broken_file(self, tmp_path: Path) -> None:
        path = tmp_path / ".rcut.toml"
        path.write_text("not toml at all [")
        assert isinstance(load_config_or_default(path), Err)
