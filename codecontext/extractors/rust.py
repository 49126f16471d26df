"""Rust symbol extractor."""

from __future__ import annotations

from typing import List, Optional, Tuple

from tree_sitter import Node, Tree

from ..models import UNKNOWN_TYPE, SymbolRecord
from .base import SymbolExtractor, build_symbol, node_text

_TYPE_ITEMS = frozenset({"struct_item", "enum_item", "trait_item", "union_item", "type_item"})


class RustExtractor(SymbolExtractor):
    """Extracts top-level functions and type declarations from Rust sources."""

    language = "rust"

    def extract(self, source_bytes: bytes, tree: Tree, file: str) -> List[SymbolRecord]:
        symbols: List[SymbolRecord] = []
        for node in tree.root_node.children:
            if node.type == "function_item":
                symbol = self._function(node, source_bytes, file)
            elif node.type in _TYPE_ITEMS:
                symbol = self._type(node, source_bytes, file)
            else:
                continue
            if symbol is not None:
                symbols.append(symbol)
        return symbols

    def _function(self, node: Node, source_bytes: bytes, file: str) -> Optional[SymbolRecord]:
        name = node_text(node.child_by_field_name("name"), source_bytes)
        if not name:
            return None
        return_type = node.child_by_field_name("return_type")
        return build_symbol(
            kind="function",
            name=name,
            file=file,
            node=node,
            source_bytes=source_bytes,
            inputs=self._parameters(node.child_by_field_name("parameters"), source_bytes),
            output=node_text(return_type, source_bytes) if return_type is not None else UNKNOWN_TYPE,
            doc=_doc_comment(node, source_bytes),
        )

    def _type(self, node: Node, source_bytes: bytes, file: str) -> Optional[SymbolRecord]:
        name = node_text(node.child_by_field_name("name"), source_bytes)
        if not name:
            return None
        return build_symbol(
            kind="class",
            name=name,
            file=file,
            node=node,
            source_bytes=source_bytes,
            output=UNKNOWN_TYPE,
            doc=_doc_comment(node, source_bytes),
        )

    @staticmethod
    def _parameters(params: Optional[Node], source_bytes: bytes) -> List[Tuple[str, str]]:
        if params is None:
            return []
        result: List[Tuple[str, str]] = []
        for param in params.named_children:
            if param.type == "self_parameter":
                result.append(("self", node_text(param, source_bytes)))
            elif param.type == "parameter":
                pattern = param.child_by_field_name("pattern")
                if pattern is None:
                    continue
                annotation = param.child_by_field_name("type")
                kind = node_text(annotation, source_bytes) if annotation is not None else ""
                result.append((node_text(pattern, source_bytes), kind or UNKNOWN_TYPE))
        return result


def _doc_comment(node: Node, source_bytes: bytes) -> Optional[str]:
    """Join the ``///`` lines stacked directly above ``node``."""
    lines: List[str] = []
    expected_row = node.start_point[0]
    sibling = node.prev_sibling
    while sibling is not None:
        if sibling.type == "attribute_item" and sibling.end_point[0] == expected_row - 1:
            expected_row = sibling.start_point[0]
        elif sibling.type == "line_comment" and sibling.start_point[0] == expected_row - 1:
            text = node_text(sibling, source_bytes)
            if not text.startswith("///") or text.startswith("////"):
                break
            lines.append(text[3:].strip())
            expected_row = sibling.start_point[0]
        else:
            break
        sibling = sibling.prev_sibling
    return "\n".join(reversed(lines)).strip() or None


__all__ = ["RustExtractor"]
