"""Configuration loading for codecontext (.context.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

CONFIG_FILENAME = ".context.yml"
DEFAULT_LANGUAGES = ("python", "rust")
DEFAULT_STORE_DIR = ".context"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class SyncConfig:
    """Controls how a stored index is reconciled with the working tree."""

    rebuild_on_stats_change: bool = False


@dataclass
class OutlineConfig:
    """Rendering options for the markdown outline."""

    templates_dir: Optional[Path] = None


@dataclass
class ContextConfig:
    """Represents the settings defined in .context.yml."""

    root: Path
    languages: List[str] = field(default_factory=lambda: list(DEFAULT_LANGUAGES))
    exclude_paths: List[str] = field(default_factory=list)
    store_dir: str = DEFAULT_STORE_DIR
    sync: SyncConfig = field(default_factory=SyncConfig)
    outline: OutlineConfig = field(default_factory=OutlineConfig)


def load_config(config_path: Path) -> ContextConfig:
    """Load configuration from disk, returning defaults when no file exists."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return ContextConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    config = ContextConfig(root=root)

    if "languages" in data:
        languages = [language.lower() for language in _as_str_list(data.get("languages"))]
        unknown = sorted(set(languages) - set(DEFAULT_LANGUAGES))
        if unknown:
            raise ConfigError(f"Unsupported languages in {CONFIG_FILENAME}: {', '.join(unknown)}")
        config.languages = languages

    config.exclude_paths = _as_str_list(data.get("exclude_paths"))

    store_dir = _as_str(data.get("store_dir"))
    if store_dir:
        if Path(store_dir).is_absolute() or ".." in Path(store_dir).parts:
            raise ConfigError("store_dir must be a relative path inside the repository")
        config.store_dir = store_dir

    sync_data = _as_dict(data.get("sync"))
    if sync_data:
        rebuild = _as_bool(sync_data.get("rebuild_on_stats_change"))
        config.sync.rebuild_on_stats_change = bool(rebuild)

    outline_data = _as_dict(data.get("outline"))
    templates_dir = _as_str(outline_data.get("templates_dir")) if outline_data else None
    if templates_dir:
        config.outline.templates_dir = root / templates_dir

    return config


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.name != CONFIG_FILENAME:
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"Failed to read {path.name}: {exc}") from exc
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float, bool)) else None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float, bool))]
    return []


__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "ContextConfig",
    "OutlineConfig",
    "SyncConfig",
    "load_config",
]
