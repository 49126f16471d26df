"""Python symbol extractor."""

from __future__ import annotations

import re
from typing import List, Optional, Tuple

from tree_sitter import Node, Tree

from ..models import UNKNOWN_TYPE, SymbolRecord
from .base import SymbolExtractor, build_symbol, node_text

_STRING_PREFIX = re.compile(r"^[rRbBuUfF]+(?=['\"])")


class PythonExtractor(SymbolExtractor):
    """Extracts top-level functions and classes from Python modules."""

    language = "python"

    def extract(self, source_bytes: bytes, tree: Tree, file: str) -> List[SymbolRecord]:
        symbols: List[SymbolRecord] = []
        for child in tree.root_node.children:
            node = child
            if node.type == "decorated_definition":
                node = child.child_by_field_name("definition")
                if node is None:
                    continue
            if node.type == "function_definition":
                symbol = self._function(node, source_bytes, file)
            elif node.type == "class_definition":
                symbol = self._class(node, source_bytes, file)
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
            doc=_docstring(node, source_bytes),
        )

    def _class(self, node: Node, source_bytes: bytes, file: str) -> Optional[SymbolRecord]:
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
            doc=_docstring(node, source_bytes),
        )

    @staticmethod
    def _parameters(params: Optional[Node], source_bytes: bytes) -> List[Tuple[str, str]]:
        if params is None:
            return []
        result: List[Tuple[str, str]] = []
        for param in params.named_children:
            kind = param.type
            if kind in {"identifier", "list_splat_pattern", "dictionary_splat_pattern"}:
                result.append((node_text(param, source_bytes), UNKNOWN_TYPE))
            elif kind == "default_parameter":
                name = node_text(param.child_by_field_name("name"), source_bytes)
                if name:
                    result.append((name, UNKNOWN_TYPE))
            elif kind == "typed_default_parameter":
                name = node_text(param.child_by_field_name("name"), source_bytes)
                if name:
                    result.append((name, _type_text(param, source_bytes)))
            elif kind == "typed_parameter":
                # the annotated name has no field of its own: it is the first named child
                target = param.named_children[0] if param.named_children else None
                if target is not None and target.type != "type":
                    result.append((node_text(target, source_bytes), _type_text(param, source_bytes)))
        return result


def _type_text(param: Node, source_bytes: bytes) -> str:
    annotation = param.child_by_field_name("type")
    text = node_text(annotation, source_bytes).strip()
    return text or UNKNOWN_TYPE


def _docstring(node: Node, source_bytes: bytes) -> Optional[str]:
    body = node.child_by_field_name("body")
    if body is None:
        return None
    first = next((child for child in body.named_children if child.type != "comment"), None)
    if first is None or first.type != "expression_statement" or not first.named_children:
        return None
    literal = first.named_children[0]
    if literal.type != "string":
        return None
    text = _STRING_PREFIX.sub("", node_text(literal, source_bytes))
    width = 3 if text[:3] in ('"""', "'''") else 1
    if len(text) < 2 * width:
        return None
    return text[width:-width].strip() or None


__all__ = ["PythonExtractor"]
