"""Tree-sitter backed syntax source."""

from __future__ import annotations

from typing import Callable, Dict, Optional

import tree_sitter_python
import tree_sitter_rust
from tree_sitter import Language, Parser, Tree

from .logging import get_logger

_GRAMMARS: Dict[str, Callable[[], object]] = {
    "python": tree_sitter_python.language,
    "rust": tree_sitter_rust.language,
}

_PARSERS: Dict[str, Parser] = {}

logger = get_logger("parsing")


def get_parser(language: str) -> Optional[Parser]:
    """Return a cached parser for ``language`` or ``None`` when no grammar exists."""
    parser = _PARSERS.get(language)
    if parser is not None:
        return parser
    grammar = _GRAMMARS.get(language)
    if grammar is None:
        return None
    parser = Parser(Language(grammar()))
    _PARSERS[language] = parser
    return parser


def parse(source_bytes: bytes, language: str) -> Optional[Tree]:
    """Parse ``source_bytes`` with the grammar registered for ``language``."""
    parser = get_parser(language)
    if parser is None:
        logger.debug("No grammar registered for %s", language)
        return None
    try:
        return parser.parse(source_bytes)
    except (ValueError, RuntimeError) as exc:
        logger.debug("Parser for %s failed: %s", language, exc)
        return None


__all__ = ["get_parser", "parse"]
