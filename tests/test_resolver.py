"""Tests for codecontext.resolver."""

from __future__ import annotations

from codecontext.models import SymbolRecord
from codecontext.resolver import resolve_calls


def _symbol(name: str, file: str = "a.py", calls: list[str] | None = None) -> SymbolRecord:
    return SymbolRecord(kind="function", name=name, file=file, raw_calls=sorted(calls or []))


def test_partitions_calls_and_builds_reverse_edges() -> None:
    main = _symbol("main", calls=["helper", "print"])
    helper = _symbol("helper", calls=["len"])

    resolve_calls([main, helper])

    assert main.internal_calls == ["helper"]
    assert main.external_calls == ["print"]
    assert helper.internal_calls == []
    assert helper.external_calls == ["len"]
    assert helper.called_by == ["main"]
    assert main.called_by == []


def test_partition_is_exact_and_reverse_edges_are_symmetric() -> None:
    symbols = [
        _symbol("a", calls=["b", "c", "os"]),
        _symbol("b", calls=["a", "b"]),
        _symbol("c", file="c.rs", calls=["unwrap", "a"]),
    ]

    resolve_calls(symbols)

    for symbol in symbols:
        assert not set(symbol.internal_calls) & set(symbol.external_calls)
        assert set(symbol.internal_calls) | set(symbol.external_calls) == set(symbol.raw_calls)
    for caller in symbols:
        for callee in symbols:
            assert (callee.name in caller.internal_calls) == (caller.name in callee.called_by)


def test_same_name_across_files_shares_callers() -> None:
    main = _symbol("main", calls=["helper"])
    first = _symbol("helper", file="one.py")
    second = _symbol("helper", file="two.rs")

    resolve_calls([main, first, second])

    assert first.called_by == ["main"]
    assert second.called_by == ["main"]


def test_called_by_is_sorted_and_deduplicated() -> None:
    target = _symbol("target")
    callers = [_symbol("zeta", calls=["target"]), _symbol("alpha", calls=["target"])]
    duplicate = _symbol("alpha", file="b.py", calls=["target"])

    resolve_calls([target, *callers, duplicate])

    assert target.called_by == ["alpha", "zeta"]


def test_stale_fields_are_overwritten() -> None:
    symbol = _symbol("orphan", calls=["gone"])
    symbol.internal_calls = ["gone"]
    symbol.called_by = ["ghost"]

    resolve_calls([symbol])

    assert symbol.internal_calls == []
    assert symbol.external_calls == ["gone"]
    assert symbol.called_by == []
