"""Tests for the Python symbol extractor."""

from __future__ import annotations

import textwrap

from codecontext.extractors.python import PythonExtractor
from codecontext.parsing import parse

_SOURCE = textwrap.dedent(
    '''
    import os


    def helper(path: str, retries=3, *args, verbose: bool = False, **kwargs) -> bool:
        """Check the path."""
        return os.path.exists(path)


    @decorator
    def wrapped(x):
        return helper(x)


    class Service(Base):
        \'\'\'Runs things.\'\'\'

        def start(self):
            self.loop.run(wrapped(1))
    '''
).lstrip("\n")


def _extract(source: str, file: str = "pkg/mod.py"):
    source_bytes = source.encode("utf-8")
    tree = parse(source_bytes, "python")
    assert tree is not None
    return PythonExtractor().extract(source_bytes, tree, file)


def test_extracts_only_top_level_declarations() -> None:
    symbols = _extract(_SOURCE)

    assert [symbol.name for symbol in symbols] == ["helper", "wrapped", "Service"]
    assert all(symbol.file == "pkg/mod.py" for symbol in symbols)


def test_function_signature_doc_and_span() -> None:
    helper = _extract(_SOURCE)[0]

    assert helper.kind == "function"
    assert helper.inputs == ["path", "retries", "*args", "verbose", "**kwargs"]
    assert helper.input_types == ["str", "unknown", "unknown", "bool", "unknown"]
    assert helper.output == "bool"
    assert helper.doc == "Check the path."
    assert helper.raw_calls == ["exists"]
    assert (helper.line_start, helper.line_end) == (4, 6)


def test_decorated_function_is_indexed() -> None:
    wrapped = _extract(_SOURCE)[1]

    assert wrapped.inputs == ["x"]
    assert wrapped.input_types == ["unknown"]
    assert wrapped.output == "unknown"
    assert wrapped.doc is None
    assert wrapped.raw_calls == ["helper"]


def test_class_collects_calls_from_methods() -> None:
    service = _extract(_SOURCE)[2]

    assert service.kind == "class"
    assert service.inputs == []
    assert service.output == "unknown"
    assert service.doc == "Runs things."
    assert service.raw_calls == ["run", "wrapped"]
    assert (service.line_start, service.line_end) == (14, 18)


def test_nested_calls_in_arguments_are_collected() -> None:
    symbols = _extract("def outer():\n    return first(second(third.value()))\n")

    assert symbols[0].raw_calls == ["first", "second", "value"]


def test_docstring_must_be_first_statement() -> None:
    symbols = _extract('def late():\n    x = 1\n    "not a docstring"\n    return x\n')

    assert symbols[0].doc is None


def test_malformed_source_does_not_raise() -> None:
    symbols = _extract("def broken(:\n    pass\n\nclass (:\n")

    assert isinstance(symbols, list)


def test_empty_module_has_no_symbols() -> None:
    assert _extract("") == []


def test_docstring_keeps_quotes_inside_the_text() -> None:
    trailing = _extract('def f():\n    """Alias for \'foo\'"""\n')[0]
    leading = _extract('def g():\n    """\'Quoted\' start."""\n')[0]
    raw = _extract("def h():\n    r'single \"quoted\"'\n")[0]

    assert trailing.doc == "Alias for 'foo'"
    assert leading.doc == "'Quoted' start."
    assert raw.doc == 'single "quoted"'


def test_unnamed_callees_are_not_recorded() -> None:
    symbols = _extract("def f(d, g, obj):\n    g()()\n    d['a.b']()\n    obj.m()\n")

    assert symbols[0].raw_calls == ["g", "m"]
