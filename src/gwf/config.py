"""Configuration store.

The configuration lives in ``.gwf.toml`` at the repository root. A missing
file means defaults; missing sections or keys fall back to their defaults and
unknown keys are ignored. Syntax errors and invalid values raise
``ConfigParseError``.
"""

import json
import logging
import tomllib
from enum import Enum
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from gwf.errors import ConfigParseError

CONFIG_FILENAME = ".gwf.toml"

logger = logging.getLogger(__name__)


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


class SyncStrategy(str, Enum):
    """How a branch is reconciled with its remote counterpart."""

    REBASE = "rebase"
    MERGE = "merge"


class _Section(BaseModel):
    model_config = ConfigDict(extra="ignore")


class WorkflowConfig(_Section):
    """Branch naming and base branches."""

    feature_branch_prefix: str = "feature/"
    hotfix_branch_prefix: str = "hotfix/"
    release_branch_prefix: str = "release/"
    main_branch: str = Field(default="main", min_length=1)
    develop_branch: Optional[str] = "develop"

    blank_develop_branch = field_validator("develop_branch", mode="before")(_blank_to_none)


class CommitConfig(_Section):
    """Commit message conventions and signing."""

    conventional: bool = True
    sign_commits: bool = False
    gpg_key: Optional[str] = None

    blank_gpg_key = field_validator("gpg_key", mode="before")(_blank_to_none)


class SyncConfig(_Section):
    strategy: SyncStrategy = SyncStrategy.REBASE
    auto_stash: bool = True
    prune_on_fetch: bool = True


class CleanupConfig(_Section):
    delete_merged: bool = True
    days_until_stale: int = Field(default=30, ge=0)
    protect_branches: list[str] = Field(default_factory=lambda: ["main", "master", "develop", "production"])


class AiConfig(_Section):
    """Settings reserved for AI commit messages (not implemented yet)."""

    enabled: bool = False
    provider: str = ""
    model: str = ""
    api_key: Optional[str] = None

    blank_api_key = field_validator("api_key", mode="before")(_blank_to_none)


class Config(_Section):
    """The whole ``.gwf.toml`` document."""

    workflows: WorkflowConfig = Field(default_factory=WorkflowConfig)
    commits: CommitConfig = Field(default_factory=CommitConfig)
    sync: SyncConfig = Field(default_factory=SyncConfig)
    cleanup: CleanupConfig = Field(default_factory=CleanupConfig)
    ai: Optional[AiConfig] = None

    @property
    def base_branch(self) -> str:
        """Branch new features start from when none is given."""
        return self.workflows.develop_branch or self.workflows.main_branch


def config_path(root: Path) -> Path:
    return Path(root) / CONFIG_FILENAME


def load_config(root: Path) -> Config:
    """Load the configuration stored under ``root``, or defaults if absent."""
    path = config_path(root)
    if not path.exists():
        logger.debug("No %s in %s, using defaults", CONFIG_FILENAME, root)
        return Config()

    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except OSError as err:
        raise ConfigParseError(f"Failed to read configuration file {path}: {err}") from err
    except tomllib.TOMLDecodeError as err:
        raise ConfigParseError(f"Syntax error in {path}: {err}") from err

    try:
        config = Config.model_validate(data)
    except ValidationError as err:
        raise ConfigParseError(f"Invalid configuration in {path}: {err}") from err

    logger.debug("Loaded configuration from %s", path)
    return config


def _toml_value(value: Any) -> str:
    if isinstance(value, Enum):
        value = value.value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(_toml_value(item) for item in value) + "]"
    return json.dumps(str(value), ensure_ascii=False)


def render_config(config: Config) -> str:
    """Render the configuration as a TOML document."""
    lines: list[str] = ["# gwf configuration"]
    for section, values in config.model_dump().items():
        if values is None:
            continue
        lines.append("")
        lines.append(f"[{section}]")
        for key, value in values.items():
            # TOML has no null; an empty string reads back as unset
            lines.append(f"{key} = {_toml_value('' if value is None else value)}")
    return "\n".join(lines) + "\n"


def save_config(config: Config, root: Path) -> Path:
    """Write ``config`` to ``.gwf.toml`` under ``root`` and return the path."""
    path = config_path(root)
    try:
        path.write_text(render_config(config), encoding="utf-8")
    except OSError as err:
        raise ConfigParseError(f"Failed to write configuration file {path}: {err}") from err
    logger.info("Wrote configuration to %s", path)
    return path
