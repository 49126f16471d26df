"""Repository walking, stats and content fingerprints."""

from __future__ import annotations

import hashlib
import os
from dataclasses import dataclass, field
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Sequence, Set

from .config import ContextConfig
from .extractors import registered_languages
from .extractors.base import count_lines
from .logging import get_logger
from .models import RepoStats

IGNORED_SEGMENTS = frozenset(
    {
        ".git",
        ".hg",
        ".svn",
        ".venv",
        "venv",
        "env",
        ".env",
        "__pycache__",
        "node_modules",
        "target",
        "dist",
        "build",
        ".out",
        ".cache",
        ".idea",
        ".vscode",
        ".context",
    }
)

LANGUAGE_BY_SUFFIX = {
    ".py": "python",
    ".pyi": "python",
    ".rs": "rust",
}

logger = get_logger("snapshot")


@dataclass
class IgnoreRule:
    """Exclude pattern from .context.yml with gitignore-like matching."""

    pattern: str
    directory_only: bool
    anchored: bool

    def matches(self, rel_path: str, is_dir: bool) -> bool:
        if not self.pattern:
            return False
        if self.directory_only and not is_dir:
            return False
        if self.anchored:
            return fnmatchcase(rel_path, self.pattern)
        return any(fnmatchcase(part, self.pattern) for part in rel_path.split("/"))


def build_ignore_rule(pattern: str) -> IgnoreRule | None:
    pattern = pattern.strip()
    if not pattern:
        return None

    directory_only = pattern.endswith("/")
    if directory_only:
        pattern = pattern[:-1]

    anchored = pattern.startswith("/")
    if anchored:
        pattern = pattern[1:]

    return IgnoreRule(
        pattern=pattern,
        directory_only=directory_only,
        anchored=anchored or "/" in pattern,
    )


@dataclass
class RepoSnapshot:
    """Read-only view of the indexable files currently on disk."""

    root: Path
    stats: RepoStats
    fingerprints: Dict[str, str] = field(default_factory=dict)
    languages: Dict[str, str] = field(default_factory=dict)


def should_ignore(rel_path: str, is_dir: bool, rules: Sequence[IgnoreRule] = ()) -> bool:
    if any(part in IGNORED_SEGMENTS for part in rel_path.split("/")):
        return True
    return any(rule.matches(rel_path, is_dir) for rule in rules)


def detect_language(path: Path | str, enabled: Optional[Set[str]] = None) -> str | None:
    language = LANGUAGE_BY_SUFFIX.get(Path(path).suffix.lower())
    if language is None:
        return None
    if enabled is not None and language not in enabled:
        return None
    return language


def hash_bytes(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


def _iter_files(root: Path, rules: Sequence[IgnoreRule]) -> Iterator[Path]:
    for dirpath, dirnames, filenames in os.walk(root):
        current_dir = Path(dirpath)
        rel_dir = current_dir.relative_to(root).as_posix() if current_dir != root else ""

        kept = []
        for name in sorted(dirnames):
            rel_path = f"{rel_dir}/{name}" if rel_dir else name
            if should_ignore(rel_path, True, rules):
                continue
            kept.append(name)
        dirnames[:] = kept

        for filename in sorted(filenames):
            rel_path = f"{rel_dir}/{filename}" if rel_dir else filename
            if should_ignore(rel_path, False, rules):
                continue
            yield current_dir / filename


class RepoScanner:
    """Walks the repository to collect stats and per-file fingerprints."""

    def scan(self, root: str | Path, config: ContextConfig | None = None) -> RepoSnapshot:
        root_path = Path(root).expanduser().resolve()
        if not root_path.exists():
            raise FileNotFoundError(f"Repository path not found: {root}")
        if not root_path.is_dir():
            raise NotADirectoryError(f"Repository path is not a directory: {root}")

        rules: List[IgnoreRule] = []
        enabled = set(registered_languages())
        if config is not None:
            rules = [rule for rule in map(build_ignore_rule, config.exclude_paths) if rule]
            enabled &= set(config.languages)

        stats = RepoStats()
        snapshot = RepoSnapshot(root=root_path, stats=stats)
        for path in _iter_files(root_path, rules):
            language = detect_language(path, enabled)
            if language is None or not path.is_file():
                continue
            rel_path = path.relative_to(root_path).as_posix()
            try:
                data = path.read_bytes()
            except OSError as exc:
                logger.debug("Skipping unreadable file %s: %s", rel_path, exc)
                continue

            stats.file_count += 1
            stats.total_bytes += len(data)
            try:
                stats.total_lines += count_lines(data.decode("utf-8"))
            except UnicodeDecodeError:
                logger.debug("Not counting lines of non UTF-8 file %s", rel_path)

            snapshot.fingerprints[rel_path] = hash_bytes(data)
            snapshot.languages[rel_path] = language

        logger.debug(
            "Snapshot of %s: %d files, %d bytes, %d lines",
            root_path,
            stats.file_count,
            stats.total_bytes,
            stats.total_lines,
        )
        return snapshot


__all__ = [
    "IGNORED_SEGMENTS",
    "IgnoreRule",
    "LANGUAGE_BY_SUFFIX",
    "RepoScanner",
    "RepoSnapshot",
    "build_ignore_rule",
    "detect_language",
    "hash_bytes",
    "should_ignore",
]
