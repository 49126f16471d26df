"""Incremental index of functions, classes and call graphs across a source tree."""

from .models import FileRecord, Index, RepoStats, SymbolRecord, SyncMeta
from .orchestrator import Orchestrator, SyncOutcome, load_or_build

__all__ = [
    "FileRecord",
    "Index",
    "Orchestrator",
    "RepoStats",
    "SymbolRecord",
    "SyncMeta",
    "SyncOutcome",
    "load_or_build",
]
