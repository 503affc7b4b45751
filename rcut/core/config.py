"""Typed configuration loading and access.

The optional ``.rcut.toml`` file at the repository root describes the
project being released. Every field has a default so a bare repository with
a ``VERSION`` file can be released without any configuration.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from pathlib import Path

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, check_keys, get_str, get_table

__all__ = [
    "ArtifactsConfig",
    "Config",
    "ConfigError",
    "DistConfig",
    "ProjectConfig",
    "VoteConfig",
    "CONFIG_FILE_NAME",
    "SIGNING_KEY_ENV",
    "load_config",
    "load_config_or_default",
]

CONFIG_FILE_NAME = ".rcut.toml"

# Overrides [artifacts].signing_key so keys need not be committed.
SIGNING_KEY_ENV = "RCUT_SIGNING_KEY"

_SECTION_KEYS: dict[str, frozenset[str]] = {
    "project": frozenset(
        {
            "name",
            "tag_prefix",
            "version_file",
            "changelog_file",
            "main_branch",
            "remote",
            "repo_url",
        }
    ),
    "artifacts": frozenset({"output_dir", "signing_key"}),
    "dist": frozenset({"url"}),
    "vote": frozenset({"mailing_list"}),
}


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when config cannot be loaded or parsed."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class ProjectConfig:
    """Identity of the released project and repository layout."""

    name: str | None = None
    tag_prefix: str | None = None
    version_file: str = "VERSION"
    changelog_file: str = "CHANGELOG.md"
    main_branch: str = "main"
    remote: str = "origin"
    repo_url: str | None = None

    def display_name(self, root: Path) -> str:
        return self.name or root.name

    def prefix(self, root: Path) -> str:
        """Tag prefix, falling back to the project name."""
        return self.tag_prefix or self.display_name(root)


@dataclass(frozen=True, slots=True)
class ArtifactsConfig:
    """Where archives go and which key signs them."""

    output_dir: str = "dist"
    signing_key: str | None = None


@dataclass(frozen=True, slots=True)
class DistConfig:
    """SVN distribution store receiving published candidates."""

    url: str | None = None


@dataclass(frozen=True, slots=True)
class VoteConfig:
    mailing_list: str | None = None


@dataclass(frozen=True, slots=True)
class Config:
    """Main configuration container."""

    project: ProjectConfig = field(default_factory=ProjectConfig)
    artifacts: ArtifactsConfig = field(default_factory=ArtifactsConfig)
    dist: DistConfig = field(default_factory=DistConfig)
    vote: VoteConfig = field(default_factory=VoteConfig)

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> Config:
        """Create Config from a mapping (parsed TOML)."""
        project: StrDict = get_table(data, "project") or {}
        artifacts: StrDict = get_table(data, "artifacts") or {}
        dist: StrDict = get_table(data, "dist") or {}
        vote: StrDict = get_table(data, "vote") or {}

        dist_url = get_str(dist, "url")
        repo_url = get_str(project, "repo_url")

        return cls(
            project=ProjectConfig(
                name=get_str(project, "name"),
                tag_prefix=get_str(project, "tag_prefix"),
                version_file=get_str(project, "version_file") or "VERSION",
                changelog_file=get_str(project, "changelog_file") or "CHANGELOG.md",
                main_branch=get_str(project, "main_branch") or "main",
                remote=get_str(project, "remote") or "origin",
                repo_url=repo_url.rstrip("/") if repo_url else None,
            ),
            artifacts=ArtifactsConfig(
                output_dir=get_str(artifacts, "output_dir") or "dist",
                signing_key=get_str(artifacts, "signing_key"),
            ),
            dist=DistConfig(url=dist_url.rstrip("/") if dist_url else None),
            vote=VoteConfig(mailing_list=get_str(vote, "mailing_list")),
        )

    def with_env(self, env: Mapping[str, str]) -> Config:
        """Apply environment overrides."""
        key = env.get(SIGNING_KEY_ENV, "").strip()
        if not key:
            return self
        return replace(self, artifacts=replace(self.artifacts, signing_key=key))


def _validate_sections(data: StrDict, path: Path) -> ConfigError | None:
    for section, value in data.items():
        allowed = _SECTION_KEYS.get(section)
        if allowed is None:
            return ConfigError(f"Unknown config section: [{section}]", path=path)
        table = as_str_dict(value)
        if table is None:
            return ConfigError(f"[{section}] must be a table", path=path)
        unknown = check_keys(table, allowed)
        if unknown:
            return ConfigError(
                f"Unknown key(s) in [{section}]: {', '.join(unknown)}",
                path=path,
            )
    return None


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    """Parse a TOML file, handling read and parse errors."""
    import tomllib

    try:
        content = path.read_bytes()
        data_obj: object = tomllib.loads(content.decode("utf-8"))
        data = as_str_dict(data_obj)
        if data is None:
            return Err(ConfigError("Config root must be a TOML table", path=path))
        return Ok(data)
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))


def load_config(path: Path) -> Result[Config, ConfigError]:
    """Load and parse configuration from a TOML file.

    Args:
        path: Path to the .rcut.toml file

    Returns:
        Ok(Config) on success, Err(ConfigError) on failure
    """
    result = _parse_toml(path)
    if isinstance(result, Err):
        return result

    invalid = _validate_sections(result.value, path)
    if invalid is not None:
        return Err(invalid)

    return Ok(Config.from_dict(result.value).with_env(os.environ))


def load_config_or_default(path: Path) -> Result[Config, ConfigError]:
    """Load config from file, or defaults if the file doesn't exist.

    A file that exists but cannot be parsed is still an error.
    """
    if not path.exists():
        return Ok(Config().with_env(os.environ))
    return load_config(path)
