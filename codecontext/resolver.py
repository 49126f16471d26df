"""Global call-graph resolution over the full symbol set.

Classification is name based: a raw call counts as internal when any symbol
anywhere in the repository carries that name, even an unrelated one in a
different file. Scope-aware resolution is out of reach for a syntax-only
index, so same-named symbols share their callers.
"""

from __future__ import annotations

from collections import defaultdict
from typing import Dict, List, Sequence, Set

from .models import SymbolRecord


def resolve_calls(symbols: Sequence[SymbolRecord]) -> None:
    """Rewrite ``internal_calls``, ``external_calls`` and ``called_by`` in place."""
    names: Set[str] = {symbol.name for symbol in symbols}
    callers: Dict[str, Set[str]] = defaultdict(set)

    for symbol in symbols:
        internal: List[str] = []
        external: List[str] = []
        for call in sorted(set(symbol.raw_calls)):
            if call in names:
                internal.append(call)
                callers[call].add(symbol.name)
            else:
                external.append(call)
        symbol.internal_calls = internal
        symbol.external_calls = external

    # callers are only complete once every symbol has been partitioned
    for symbol in symbols:
        symbol.called_by = sorted(callers.get(symbol.name, ()))


__all__ = ["resolve_calls"]
