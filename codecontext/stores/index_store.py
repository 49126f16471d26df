"""Durable storage for the symbol index and its synchronisation metadata."""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Dict, Optional

from ..config import DEFAULT_STORE_DIR
from ..logging import get_logger
from ..models import Index, SyncMeta

CONTEXT_FILENAME = "context.json"
META_FILENAME = "meta.json"
_STORE_VERSION = 1

logger = get_logger("stores.index")


class IndexStoreError(RuntimeError):
    """Raised when the index cannot be written to disk."""


class IndexStore:
    """Reads and atomically rewrites ``context.json`` and ``meta.json``."""

    def __init__(self, root: Path, store_dir: str = DEFAULT_STORE_DIR) -> None:
        self.directory = Path(root) / store_dir
        self.context_path = self.directory / CONTEXT_FILENAME
        self.meta_path = self.directory / META_FILENAME

    def load_index(self) -> Optional[Index]:
        payload = self._read(self.context_path)
        if payload is None:
            return None
        try:
            return Index.from_dict(payload.get("index"))
        except ValueError as exc:
            logger.debug("Discarding malformed index %s: %s", self.context_path, exc)
            return None

    def load_meta(self) -> Optional[SyncMeta]:
        payload = self._read(self.meta_path)
        if payload is None:
            return None
        try:
            return SyncMeta.from_dict(payload.get("meta"))
        except ValueError as exc:
            logger.debug("Discarding malformed metadata %s: %s", self.meta_path, exc)
            return None

    def persist(self, index: Index, meta: SyncMeta) -> None:
        """Replace both store files; any failure is fatal to the caller."""
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            self._write(self.context_path, {"version": _STORE_VERSION, "index": index.to_dict()})
            self._write(self.meta_path, {"version": _STORE_VERSION, "meta": meta.to_dict()})
        except OSError as exc:
            raise IndexStoreError(f"Failed to persist index under {self.directory}: {exc}") from exc

    # ------------------------------------------------------------------
    # Internal helpers

    @staticmethod
    def _read(path: Path) -> Optional[Dict[str, object]]:
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError, json.JSONDecodeError):
            logger.debug("Ignoring unreadable store file %s", path)
            return None
        if not isinstance(data, dict) or data.get("version") != _STORE_VERSION:
            return None
        return data

    @staticmethod
    def _write(path: Path, payload: Dict[str, object]) -> None:
        text = json.dumps(payload, indent=2)
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(text)
                handle.write("\n")
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise


__all__ = ["CONTEXT_FILENAME", "IndexStore", "IndexStoreError", "META_FILENAME"]
