"""Markdown outline rendering for a symbol index."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List

from jinja2 import Environment, FileSystemLoader

from .models import Index

OUTLINE_TEMPLATE = "outline.md.j2"


def _create_env(templates_dir: Path | None) -> Environment:
    directories: List[str] = []
    if templates_dir:
        directories.append(str(templates_dir))
    directories.append(str(Path(__file__).with_name("templates")))
    loader = FileSystemLoader(directories)
    return Environment(loader=loader, autoescape=False, trim_blocks=True, lstrip_blocks=True)


def render_outline(
    index: Index, *, project_name: str = "Repository", templates_dir: Path | None = None
) -> str:
    """Render ``index`` as a per-file markdown outline.

    A user templates directory shadows the packaged templates, so a project
    can override ``outline.md.j2`` without touching the rest.
    """
    grouped: Dict[str, List[Dict[str, object]]] = {record.path: [] for record in index.files}
    for symbol in index.symbols:
        grouped.setdefault(symbol.file, []).append(
            {
                "kind": symbol.kind,
                "name": symbol.name,
                "signature": symbol.signature,
                "summary": symbol.doc.splitlines()[0] if symbol.doc else "",
                "internal_calls": symbol.internal_calls,
                "called_by": symbol.called_by,
                "line_start": symbol.line_start,
                "line_end": symbol.line_end,
            }
        )
    files = [
        {
            "path": record.path,
            "language": record.language,
            "lines": record.lines,
            "symbols": grouped.get(record.path, []),
        }
        for record in index.files
    ]
    template = _create_env(templates_dir).get_template(OUTLINE_TEMPLATE)
    rendered = template.render(
        project_name=project_name,
        stats=index.stats,
        symbol_count=len(index.symbols),
        files=files,
    )
    return rendered.strip() + "\n"


__all__ = ["render_outline"]
