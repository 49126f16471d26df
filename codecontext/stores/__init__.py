"""Persistent stores used by codecontext."""

from .index_store import IndexStore, IndexStoreError

__all__ = ["IndexStore", "IndexStoreError"]
