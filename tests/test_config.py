"""Tests for codecontext.config."""

from __future__ import annotations

from pathlib import Path

import pytest

from codecontext.config import ConfigError, ContextConfig, load_config


def test_load_config_returns_defaults_when_missing(tmp_path: Path) -> None:
    config = load_config(tmp_path)

    assert isinstance(config, ContextConfig)
    assert config.root == tmp_path.resolve()
    assert config.languages == ["python", "rust"]
    assert config.exclude_paths == []
    assert config.store_dir == ".context"
    assert config.sync.rebuild_on_stats_change is False
    assert config.outline.templates_dir is None


def test_load_config_parses_expected_fields(tmp_path: Path) -> None:
    (tmp_path / ".context.yml").write_text(
        """
languages: [Python]
exclude_paths:
  - "generated/"
  - "*_pb2.py"
store_dir: ".cache/context"
sync:
  rebuild_on_stats_change: yes
outline:
  templates_dir: "docs/templates"
""",
        encoding="utf-8",
    )

    config = load_config(tmp_path / ".context.yml")

    assert config.languages == ["python"]
    assert config.exclude_paths == ["generated/", "*_pb2.py"]
    assert config.store_dir == ".cache/context"
    assert config.sync.rebuild_on_stats_change is True
    assert config.outline.templates_dir == tmp_path.resolve() / "docs" / "templates"


def test_empty_config_file_uses_defaults(tmp_path: Path) -> None:
    (tmp_path / ".context.yml").write_text("\n", encoding="utf-8")

    assert load_config(tmp_path).languages == ["python", "rust"]


@pytest.mark.parametrize(
    "content",
    [
        "- just\n- a list\n",
        "languages: [cobol]\n",
        "store_dir: ../outside\n",
        "key: [unterminated\n",
    ],
)
def test_invalid_config_raises(tmp_path: Path, content: str) -> None:
    (tmp_path / ".context.yml").write_text(content, encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(tmp_path)
