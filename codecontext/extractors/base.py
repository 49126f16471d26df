"""Extraction contract and tree helpers shared by language extractors."""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from typing import Iterable, List, Optional, Set, Tuple

from tree_sitter import Node, Tree

from ..models import SymbolRecord

CALL_NODE_TYPES = frozenset({"call", "call_expression", "method_call_expression"})

_SEGMENT_SPLIT = re.compile(r"[.:]")


class SymbolExtractor(ABC):
    """Contract for turning a parsed file into symbol records."""

    language: str = ""

    @abstractmethod
    def extract(self, source_bytes: bytes, tree: Tree, file: str) -> List[SymbolRecord]:
        """Return records for the top-level declarations of ``tree``."""


def node_text(node: Optional[Node], source_bytes: bytes) -> str:
    if node is None:
        return ""
    return source_bytes[node.start_byte : node.end_byte].decode("utf-8", errors="ignore")


def line_span(node: Node) -> Tuple[int, int]:
    """Return the 1-based inclusive line range covered by ``node``."""
    return node.start_point[0] + 1, node.end_point[0] + 1


def call_name(callee_text: str) -> Optional[str]:
    """Reduce callee text such as ``module.obj.method`` to its last segment."""
    segments = [segment.strip() for segment in _SEGMENT_SPLIT.split(callee_text)]
    for segment in reversed(segments):
        if segment:
            # Subscripts and call results have no name to resolve.
            return segment if segment.isidentifier() else None
    return None


def count_lines(text: str) -> int:
    """Count newline-terminated lines, plus a trailing line without one."""
    if not text:
        return 0
    return text.count("\n") + (0 if text.endswith("\n") else 1)


def collect_calls(node: Node, source_bytes: bytes) -> Set[str]:
    """Collect call-target names found anywhere below ``node``."""
    calls: Set[str] = set()
    stack: List[Node] = list(reversed(node.children))
    while stack:
        current = stack.pop()
        if current.type in CALL_NODE_TYPES:
            callee = _callee(current)
            if callee is not None:
                name = call_name(node_text(callee, source_bytes))
                if name:
                    calls.add(name)
        stack.extend(reversed(current.children))
    return calls


def _callee(call: Node) -> Optional[Node]:
    callee = call.child_by_field_name("function")
    if callee is None:
        callee = call.child_by_field_name("method")
    if callee is None and call.child_count:
        callee = call.children[0]
    # foo::<T>() carries its path under a generic_function wrapper
    if callee is not None and callee.type == "generic_function":
        callee = callee.child_by_field_name("function") or callee
    return callee


def build_symbol(
    *,
    kind: str,
    name: str,
    file: str,
    node: Node,
    source_bytes: bytes,
    inputs: Iterable[Tuple[str, str]] = (),
    output: str,
    doc: Optional[str],
) -> SymbolRecord:
    params = list(inputs)
    line_start, line_end = line_span(node)
    return SymbolRecord(
        kind=kind,
        name=name,
        file=file,
        inputs=[param for param, _ in params],
        input_types=[kind_text for _, kind_text in params],
        output=output,
        raw_calls=sorted(collect_calls(node, source_bytes)),
        doc=doc,
        line_start=line_start,
        line_end=line_end,
    )


__all__ = [
    "CALL_NODE_TYPES",
    "SymbolExtractor",
    "build_symbol",
    "call_name",
    "collect_calls",
    "count_lines",
    "line_span",
    "node_text",
]
