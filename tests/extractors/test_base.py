"""Tests for shared extractor helpers."""

from __future__ import annotations

import pytest

from codecontext.extractors.base import call_name, count_lines


@pytest.mark.parametrize(
    ("callee", "expected"),
    [
        ("helper", "helper"),
        ("self.loop.run", "run"),
        ("std::fs::read", "read"),
        ("g()", None),
        ("d['a.b']", None),
        ("", None),
    ],
)
def test_call_name_keeps_last_identifier(callee: str, expected: str | None) -> None:
    assert call_name(callee) == expected


def test_count_lines_only_splits_on_newlines() -> None:
    assert count_lines("") == 0
    assert count_lines("x = 1\x0c\ny = 2\n") == 2
    assert count_lines("a\u2028b\n") == 1
    assert count_lines("a\nb") == 2
