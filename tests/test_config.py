"""Tests for the configuration store."""

from pathlib import Path

import pytest

from gwf.config import (
    CONFIG_FILENAME,
    AiConfig,
    CommitConfig,
    Config,
    SyncStrategy,
    WorkflowConfig,
    load_config,
    render_config,
    save_config,
)
from gwf.errors import ConfigParseError


def test_missing_file_gives_defaults(tmp_path: Path) -> None:
    """Test the documented defaults."""
    config = load_config(tmp_path)
    assert config.workflows.feature_branch_prefix == "feature/"
    assert config.workflows.hotfix_branch_prefix == "hotfix/"
    assert config.workflows.release_branch_prefix == "release/"
    assert config.workflows.main_branch == "main"
    assert config.workflows.develop_branch == "develop"
    assert config.commits.conventional
    assert not config.commits.sign_commits
    assert config.sync.strategy is SyncStrategy.REBASE
    assert config.sync.auto_stash
    assert config.sync.prune_on_fetch
    assert config.cleanup.protect_branches == ["main", "master", "develop", "production"]
    assert config.cleanup.days_until_stale == 30
    assert config.ai is None


def test_save_and_load(tmp_path: Path) -> None:
    """Test that a saved configuration loads back unchanged."""
    config = Config(
        workflows=WorkflowConfig(main_branch="trunk", develop_branch=None),
        commits=CommitConfig(sign_commits=True, gpg_key="ABC123"),
        ai=AiConfig(enabled=True, provider="openai", model="gpt-4o"),
    )
    config.sync.strategy = SyncStrategy.MERGE

    path = save_config(config, tmp_path)

    assert path == tmp_path / CONFIG_FILENAME
    assert load_config(tmp_path) == config


def test_blank_api_key_loads_as_unset(tmp_path: Path) -> None:
    """Test that an empty api_key reads back as None after a save."""
    config = Config(ai=AiConfig(enabled=True, provider="anthropic"))
    save_config(config, tmp_path)
    assert 'api_key = ""' in (tmp_path / CONFIG_FILENAME).read_text()

    loaded = load_config(tmp_path)
    assert loaded.ai is not None
    assert loaded.ai.api_key is None


def test_partial_file_falls_back_to_defaults(tmp_path: Path) -> None:
    """Test that missing keys and sections take their defaults."""
    (tmp_path / CONFIG_FILENAME).write_text('[workflows]\nmain_branch = "master"\n\n[unknown]\nkey = 1\n')
    config = load_config(tmp_path)
    assert config.workflows.main_branch == "master"
    assert config.workflows.feature_branch_prefix == "feature/"
    assert config.sync.strategy is SyncStrategy.REBASE


def test_blank_develop_branch_means_none(tmp_path: Path) -> None:
    """Test that an empty develop branch disables it."""
    (tmp_path / CONFIG_FILENAME).write_text('[workflows]\ndevelop_branch = ""\n')
    config = load_config(tmp_path)
    assert config.workflows.develop_branch is None
    assert config.base_branch == "main"


def test_syntax_error(tmp_path: Path) -> None:
    """Test that malformed TOML is reported."""
    (tmp_path / CONFIG_FILENAME).write_text("[workflows\nmain_branch = ")
    with pytest.raises(ConfigParseError, match="Syntax error"):
        load_config(tmp_path)


@pytest.mark.parametrize(
    "content",
    [
        '[sync]\nstrategy = "squash"\n',
        '[workflows]\nmain_branch = ""\n',
        "[cleanup]\ndays_until_stale = -1\n",
        '[commits]\nconventional = "sometimes"\n',
    ],
)
def test_invalid_values(tmp_path: Path, content: str) -> None:
    """Test that values of the wrong kind are rejected."""
    (tmp_path / CONFIG_FILENAME).write_text(content)
    with pytest.raises(ConfigParseError, match="Invalid configuration"):
        load_config(tmp_path)


def test_render_config() -> None:
    """Test the written document layout."""
    text = render_config(Config())
    assert text.startswith("# gwf configuration\n")
    assert '[workflows]\nfeature_branch_prefix = "feature/"' in text
    assert 'strategy = "rebase"' in text
    assert 'protect_branches = ["main", "master", "develop", "production"]' in text
    assert 'gpg_key = ""' in text
    assert "[ai]" not in text
