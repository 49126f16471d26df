"""Core data models shared across codecontext components."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

UNKNOWN_TYPE = "unknown"

SYMBOL_KINDS = ("function", "class")


@dataclass
class RepoStats:
    """Aggregate counters over every indexed-language file."""

    file_count: int = 0
    total_bytes: int = 0
    total_lines: int = 0

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)

    @classmethod
    def from_dict(cls, payload: object) -> "RepoStats":
        data = _require_mapping(payload, "stats")
        return cls(
            file_count=_require_int(data, "file_count"),
            total_bytes=_require_int(data, "total_bytes"),
            total_lines=_require_int(data, "total_lines"),
        )


@dataclass
class FileRecord:
    """Metadata for an individual indexed file."""

    path: str
    language: str
    bytes: int
    lines: int

    def to_dict(self) -> Dict[str, object]:
        return asdict(self)

    @classmethod
    def from_dict(cls, payload: object) -> "FileRecord":
        data = _require_mapping(payload, "file")
        return cls(
            path=_require_str(data, "path"),
            language=_require_str(data, "language"),
            bytes=_require_int(data, "bytes"),
            lines=_require_int(data, "lines"),
        )


@dataclass
class SymbolRecord:
    """A top-level function or class declaration extracted from one file."""

    kind: str
    name: str
    file: str
    inputs: List[str] = field(default_factory=list)
    input_types: List[str] = field(default_factory=list)
    output: str = UNKNOWN_TYPE
    raw_calls: List[str] = field(default_factory=list)
    internal_calls: List[str] = field(default_factory=list)
    external_calls: List[str] = field(default_factory=list)
    called_by: List[str] = field(default_factory=list)
    doc: Optional[str] = None
    line_start: int = 0
    line_end: int = 0

    @property
    def signature(self) -> str:
        params = ", ".join(
            name if annotation == UNKNOWN_TYPE else f"{name}: {annotation}"
            for name, annotation in zip(self.inputs, self.input_types)
        )
        if self.kind == "class":
            return self.name
        if self.output == UNKNOWN_TYPE:
            return f"{self.name}({params})"
        return f"{self.name}({params}) -> {self.output}"

    def to_dict(self) -> Dict[str, object]:
        return asdict(self)

    @classmethod
    def from_dict(cls, payload: object) -> "SymbolRecord":
        data = _require_mapping(payload, "symbol")
        kind = _require_str(data, "kind")
        if kind not in SYMBOL_KINDS:
            raise ValueError(f"Unknown symbol kind: {kind!r}")
        doc = data.get("doc")
        if doc is not None and not isinstance(doc, str):
            raise ValueError("symbol.doc must be a string or null")
        inputs = _require_str_list(data, "inputs")
        input_types = _require_str_list(data, "input_types")
        if len(inputs) != len(input_types):
            raise ValueError("symbol.inputs and symbol.input_types are misaligned")
        return cls(
            kind=kind,
            name=_require_str(data, "name"),
            file=_require_str(data, "file"),
            inputs=inputs,
            input_types=input_types,
            output=_require_str(data, "output"),
            raw_calls=_require_str_list(data, "raw_calls"),
            internal_calls=_require_str_list(data, "internal_calls"),
            external_calls=_require_str_list(data, "external_calls"),
            called_by=_require_str_list(data, "called_by"),
            doc=doc,
            line_start=_require_int(data, "line_start"),
            line_end=_require_int(data, "line_end"),
        )


@dataclass
class Index:
    """In-memory arena of file and symbol records for one repository."""

    stats: RepoStats = field(default_factory=RepoStats)
    files: List[FileRecord] = field(default_factory=list)
    symbols: List[SymbolRecord] = field(default_factory=list)

    def remove_files(self, paths: Iterable[str]) -> None:
        """Drop the given files together with every symbol they define."""
        doomed = set(paths)
        if not doomed:
            return
        self.files = [record for record in self.files if record.path not in doomed]
        self.symbols = [symbol for symbol in self.symbols if symbol.file not in doomed]

    def add_file(self, record: FileRecord, symbols: Sequence[SymbolRecord]) -> None:
        self.files.append(record)
        self.symbols.extend(symbols)

    def normalize(self) -> None:
        """Put records in a canonical order so equal trees serialise identically."""
        self.files.sort(key=lambda record: record.path)
        self.symbols.sort(key=lambda symbol: (symbol.file, symbol.line_start, symbol.name))

    def symbols_named(self, name: str) -> List[SymbolRecord]:
        return [symbol for symbol in self.symbols if symbol.name == name]

    def symbols_in(self, path: str) -> List[SymbolRecord]:
        return [symbol for symbol in self.symbols if symbol.file == path]

    def file(self, path: str) -> Optional[FileRecord]:
        for record in self.files:
            if record.path == path:
                return record
        return None

    def to_dict(self) -> Dict[str, object]:
        return {
            "stats": self.stats.to_dict(),
            "files": [record.to_dict() for record in self.files],
            "symbols": [symbol.to_dict() for symbol in self.symbols],
        }

    @classmethod
    def from_dict(cls, payload: object) -> "Index":
        data = _require_mapping(payload, "index")
        files = data.get("files")
        symbols = data.get("symbols")
        if not isinstance(files, list) or not isinstance(symbols, list):
            raise ValueError("index.files and index.symbols must be lists")
        return cls(
            stats=RepoStats.from_dict(data.get("stats")),
            files=[FileRecord.from_dict(item) for item in files],
            symbols=[SymbolRecord.from_dict(item) for item in symbols],
        )


@dataclass
class SyncMeta:
    """Synchronisation state persisted next to the index."""

    stats: RepoStats
    fingerprints: Dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, object]:
        return {
            "stats": self.stats.to_dict(),
            "fingerprints": dict(sorted(self.fingerprints.items())),
        }

    @classmethod
    def from_dict(cls, payload: object) -> "SyncMeta":
        data = _require_mapping(payload, "meta")
        raw = data.get("fingerprints")
        if not isinstance(raw, dict):
            raise ValueError("meta.fingerprints must be a mapping")
        fingerprints: Dict[str, str] = {}
        for path, digest in raw.items():
            if not isinstance(path, str) or not isinstance(digest, str):
                raise ValueError("meta.fingerprints must map paths to digests")
            fingerprints[path] = digest
        return cls(stats=RepoStats.from_dict(data.get("stats")), fingerprints=fingerprints)


def _require_mapping(payload: object, label: str) -> Mapping[str, Any]:
    if not isinstance(payload, dict):
        raise ValueError(f"{label} must be a mapping")
    return payload


def _require_str(data: Mapping[str, Any], key: str) -> str:
    value = data.get(key)
    if not isinstance(value, str):
        raise ValueError(f"{key} must be a string")
    return value


def _require_int(data: Mapping[str, Any], key: str) -> int:
    value = data.get(key)
    if not isinstance(value, int) or isinstance(value, bool):
        raise ValueError(f"{key} must be an integer")
    return value


def _require_str_list(data: Mapping[str, Any], key: str) -> List[str]:
    value = data.get(key)
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ValueError(f"{key} must be a list of strings")
    return list(value)


__all__ = [
    "FileRecord",
    "Index",
    "RepoStats",
    "SYMBOL_KINDS",
    "SymbolRecord",
    "SyncMeta",
    "UNKNOWN_TYPE",
]
