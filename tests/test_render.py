"""Tests for codecontext.render."""

from __future__ import annotations

from pathlib import Path

from codecontext.models import FileRecord, Index, RepoStats, SymbolRecord
from codecontext.render import render_outline


def _index() -> Index:
    return Index(
        stats=RepoStats(file_count=2, total_bytes=50, total_lines=6),
        files=[
            FileRecord(path="a.py", language="python", bytes=40, lines=5),
            FileRecord(path="empty.rs", language="rust", bytes=10, lines=1),
        ],
        symbols=[
            SymbolRecord(
                kind="function",
                name="main",
                file="a.py",
                inputs=["count"],
                input_types=["int"],
                output="None",
                internal_calls=["helper"],
                doc="Entry point.\n\nMore detail.",
                line_start=4,
                line_end=5,
            ),
            SymbolRecord(
                kind="function",
                name="helper",
                file="a.py",
                called_by=["main"],
                line_start=1,
                line_end=2,
            ),
        ],
    )


def test_outline_lists_files_and_symbols() -> None:
    outline = render_outline(_index(), project_name="demo")

    assert outline.startswith("# demo\n")
    assert "2 files, 6 lines, 2 symbols." in outline
    assert "## `a.py` (python, 5 lines)" in outline
    assert "`main(count: int) -> None` (L4-5)" in outline
    assert "Entry point." in outline
    assert "More detail." not in outline
    assert "calls: helper" in outline
    assert "called by: main" in outline
    assert "_No symbols._" in outline


def test_user_templates_override_packaged_ones(tmp_path: Path) -> None:
    (tmp_path / "outline.md.j2").write_text(
        "{% for file in files %}{{ file.path }};{% endfor %}", encoding="utf-8"
    )

    outline = render_outline(_index(), templates_dir=tmp_path)

    assert outline == "a.py;empty.rs;\n"
