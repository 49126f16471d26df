"""Full and incremental construction of the symbol index."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional, Tuple

from .extractors import extract_file
from .logging import get_logger
from .models import Index, RepoStats
from .resolver import resolve_calls
from .snapshot import detect_language

logger = get_logger("sync")


@dataclass(frozen=True)
class FingerprintDelta:
    """Paths grouped by how their fingerprint moved between two runs."""

    added: Tuple[str, ...] = ()
    changed: Tuple[str, ...] = ()
    removed: Tuple[str, ...] = ()
    unchanged: Tuple[str, ...] = ()

    @property
    def reextract(self) -> Tuple[str, ...]:
        """Paths whose symbols must be rebuilt from source."""
        return tuple(sorted(self.added + self.changed))

    @property
    def is_empty(self) -> bool:
        return not (self.added or self.changed or self.removed)


def diff_fingerprints(old: Mapping[str, str], new: Mapping[str, str]) -> FingerprintDelta:
    added = sorted(path for path in new if path not in old)
    changed = sorted(path for path, digest in new.items() if path in old and old[path] != digest)
    removed = sorted(path for path in old if path not in new)
    unchanged = sorted(path for path, digest in new.items() if old.get(path) == digest)
    return FingerprintDelta(
        added=tuple(added),
        changed=tuple(changed),
        removed=tuple(removed),
        unchanged=tuple(unchanged),
    )


def _extract_into(
    index: Index, root: Path, rel_path: str, languages: Optional[Mapping[str, str]]
) -> bool:
    language = (languages or {}).get(rel_path) or detect_language(rel_path)
    if language is None:
        return False
    extracted = extract_file(root / rel_path, rel_path, language)
    if extracted is None:
        return False
    record, symbols = extracted
    index.add_file(record, symbols)
    return True


def synchronize(
    root: Path,
    index: Index,
    old: Mapping[str, str],
    new: Mapping[str, str],
    *,
    languages: Optional[Mapping[str, str]] = None,
    stats: Optional[RepoStats] = None,
) -> FingerprintDelta:
    """Bring ``index`` in line with ``new`` by re-extracting only what moved.

    Records of removed and modified files are dropped before modified and
    added files are extracted again from scratch. Resolution always runs over
    the whole symbol set afterwards because a single new or vanished name can
    reclassify calls made from files that did not change.
    """
    delta = diff_fingerprints(old, new)
    index.remove_files(delta.removed + delta.reextract)

    skipped = 0
    for rel_path in delta.reextract:
        if not _extract_into(index, root, rel_path, languages):
            skipped += 1

    resolve_calls(index.symbols)
    index.normalize()
    if stats is not None:
        index.stats = stats

    logger.debug(
        "Synchronised %s: %d added, %d changed, %d removed, %d skipped",
        root,
        len(delta.added),
        len(delta.changed),
        len(delta.removed),
        skipped,
    )
    return delta


def build_index(
    root: Path,
    fingerprints: Mapping[str, str],
    stats: RepoStats,
    *,
    languages: Optional[Mapping[str, str]] = None,
) -> Index:
    """Extract every fingerprinted file into a fresh index."""
    index = Index(stats=stats)
    for rel_path in sorted(fingerprints):
        if not _extract_into(index, root, rel_path, languages):
            logger.debug("No symbols indexed for %s", rel_path)
    resolve_calls(index.symbols)
    index.normalize()
    return index


__all__ = ["FingerprintDelta", "build_index", "diff_fingerprints", "synchronize"]
