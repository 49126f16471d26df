"""Load-or-build orchestration for a repository index."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

from .config import ContextConfig, load_config
from .logging import get_logger
from .models import Index, SyncMeta
from .resolver import resolve_calls
from .snapshot import RepoScanner, RepoSnapshot
from .stores import IndexStore
from .sync import FingerprintDelta, build_index, diff_fingerprints, synchronize

MODE_FULL = "full"
MODE_INCREMENTAL = "incremental"
MODE_FRESH = "fresh"


@dataclass
class SyncOutcome:
    """Result of bringing a repository index up to date."""

    index: Index
    mode: str
    delta: FingerprintDelta


class Orchestrator:
    """Coordinates snapshot, synchronisation and persistence for one run."""

    def __init__(
        self,
        scanner: RepoScanner | None = None,
        store_factory: Optional[Callable[[Path, str], IndexStore]] = None,
    ) -> None:
        self.scanner = scanner or RepoScanner()
        self._store_factory = store_factory or IndexStore
        self.logger = get_logger("orchestrator")

    def run(
        self,
        path: str | Path,
        *,
        force: bool = False,
        config: ContextConfig | None = None,
    ) -> SyncOutcome:
        repo_path = Path(path).expanduser().resolve()
        if config is None:
            config = load_config(repo_path)
        snapshot = self.scanner.scan(repo_path, config)
        store = self._store_factory(repo_path, config.store_dir)

        previous = None if force else self._load_previous(store)
        if previous is None:
            outcome = self._full_build(snapshot, reason="forced" if force else "no prior state")
        else:
            index, meta = previous
            stats_match = meta.stats == snapshot.stats
            if stats_match and meta.fingerprints == snapshot.fingerprints:
                resolve_calls(index.symbols)
                self.logger.info("Index for %s is up to date", repo_path)
                delta = diff_fingerprints(meta.fingerprints, snapshot.fingerprints)
                return SyncOutcome(index=index, mode=MODE_FRESH, delta=delta)
            if not stats_match and config.sync.rebuild_on_stats_change:
                outcome = self._full_build(snapshot, reason="repository stats changed")
            else:
                delta = synchronize(
                    repo_path,
                    index,
                    meta.fingerprints,
                    snapshot.fingerprints,
                    languages=snapshot.languages,
                    stats=snapshot.stats,
                )
                self.logger.info(
                    "Incremental sync for %s: %d re-extracted, %d removed",
                    repo_path,
                    len(delta.reextract),
                    len(delta.removed),
                )
                outcome = SyncOutcome(index=index, mode=MODE_INCREMENTAL, delta=delta)

        current = SyncMeta(stats=snapshot.stats, fingerprints=dict(snapshot.fingerprints))
        store.persist(outcome.index, current)
        self.logger.debug(
            "Persisted %d files and %d symbols to %s",
            len(outcome.index.files),
            len(outcome.index.symbols),
            store.directory,
        )
        return outcome

    def _full_build(self, snapshot: RepoSnapshot, *, reason: str) -> SyncOutcome:
        self.logger.info("Full index build for %s (%s)", snapshot.root, reason)
        index = build_index(
            snapshot.root,
            snapshot.fingerprints,
            snapshot.stats,
            languages=snapshot.languages,
        )
        delta = diff_fingerprints({}, snapshot.fingerprints)
        return SyncOutcome(index=index, mode=MODE_FULL, delta=delta)

    def _load_previous(self, store: IndexStore) -> Optional[tuple[Index, SyncMeta]]:
        index = store.load_index()
        meta = store.load_meta()
        if index is None or meta is None:
            return None
        indexed = {record.path for record in index.files}
        if not indexed.issubset(meta.fingerprints):
            self.logger.debug("Stored index describes files missing from metadata")
            return None
        if any(symbol.file not in indexed for symbol in index.symbols):
            self.logger.debug("Stored index has symbols without a file record")
            return None
        return index, meta


def load_or_build(
    root: str | Path, *, force: bool = False, config: ContextConfig | None = None
) -> Index:
    """Return an index for ``root`` that reflects the files currently on disk."""
    return Orchestrator().run(root, force=force, config=config).index


__all__ = [
    "MODE_FRESH",
    "MODE_FULL",
    "MODE_INCREMENTAL",
    "Orchestrator",
    "SyncOutcome",
    "load_or_build",
]
