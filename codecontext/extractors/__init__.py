"""Symbol extractor registry keyed by language tag."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Optional, Tuple

from ..logging import get_logger
from ..models import FileRecord, SymbolRecord
from ..parsing import parse
from .base import SymbolExtractor, count_lines
from .python import PythonExtractor
from .rust import RustExtractor

_REGISTRY: Dict[str, SymbolExtractor] = {}

logger = get_logger("extractors")


def register_extractor(extractor: SymbolExtractor) -> None:
    """Register ``extractor`` for its language tag, replacing any previous entry."""
    if not isinstance(extractor, SymbolExtractor):
        raise TypeError("Extractors must implement SymbolExtractor")
    if not extractor.language:
        raise ValueError("Extractors must declare a language tag")
    _REGISTRY[extractor.language] = extractor


def get_extractor(language: str) -> Optional[SymbolExtractor]:
    return _REGISTRY.get(language)


def registered_languages() -> List[str]:
    return sorted(_REGISTRY)


def extract_file(
    path: Path, rel_path: str, language: str
) -> Optional[Tuple[FileRecord, List[SymbolRecord]]]:
    """Read, parse and extract one file; ``None`` when any step fails."""
    extractor = get_extractor(language)
    if extractor is None:
        logger.debug("No extractor registered for %s (%s)", language, rel_path)
        return None
    try:
        source_bytes = path.read_bytes()
        source = source_bytes.decode("utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        logger.debug("Skipping unreadable file %s: %s", rel_path, exc)
        return None
    tree = parse(source_bytes, language)
    if tree is None:
        logger.debug("Skipping unparsable file %s", rel_path)
        return None
    try:
        symbols = extractor.extract(source_bytes, tree, rel_path)
    except (AttributeError, IndexError, ValueError) as exc:
        logger.debug("Extractor for %s failed on %s: %s", language, rel_path, exc)
        return None
    record = FileRecord(
        path=rel_path,
        language=language,
        bytes=len(source_bytes),
        lines=count_lines(source),
    )
    return record, symbols


register_extractor(PythonExtractor())
register_extractor(RustExtractor())


__all__ = [
    "SymbolExtractor",
    "extract_file",
    "get_extractor",
    "register_extractor",
    "registered_languages",
]
