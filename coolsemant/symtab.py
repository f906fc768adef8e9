"""Interned string tables and a scoped symbol table."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Dict, Generic, Iterator, List, Optional, TypeVar

K = TypeVar("K")
V = TypeVar("V")


class StringTable:
    """A table of unique strings, kept in the order they were first added."""

    def __init__(self) -> None:
        self._entries: Dict[str, str] = {}

    def add_string(self, s: str, max_len: Optional[int] = None) -> str:
        """Add ``s`` (cut to ``max_len`` characters) and return the stored copy."""
        if max_len is not None:
            if max_len < 0:
                raise ValueError("max_len must not be negative")
            s = s[:max_len]
        return self._entries.setdefault(s, s)

    def lookup(self, s: str) -> str:
        """Return the stored string equal to ``s``; raise KeyError if absent."""
        try:
            return self._entries[s]
        except KeyError:
            raise KeyError(f"string not in table: {s!r}") from None

    def __contains__(self, s: object) -> bool:
        return s in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)


class SymbolTable(Generic[K, V]):
    """A stack of scopes mapping names to values; inner scopes shadow outer ones."""

    def __init__(self) -> None:
        self._scopes: List[Dict[K, V]] = []

    def enterscope(self) -> None:
        """Open a new, innermost scope."""
        self._scopes.append({})

    def exitscope(self) -> None:
        """Close the innermost scope."""
        if not self._scopes:
            raise RuntimeError("exitscope: no scope to exit")
        self._scopes.pop()

    def addid(self, name: K, value: V) -> None:
        """Bind ``name`` to ``value`` in the innermost scope."""
        if not self._scopes:
            raise RuntimeError("addid: no scope in symbol table")
        self._scopes[-1][name] = value

    def lookup(self, name: K) -> Optional[V]:
        """Return the value of the most closely nested ``name``, or None."""
        for scope in reversed(self._scopes):
            if name in scope:
                return scope[name]
        return None

    def probe(self, name: K) -> Optional[V]:
        """Return the value of ``name`` in the innermost scope only, or None."""
        if not self._scopes:
            raise RuntimeError("probe: no scope in symbol table")
        return self._scopes[-1].get(name)

    @contextmanager
    def scope(self) -> Iterator["SymbolTable[K, V]"]:
        """Enter a scope for the duration of a ``with`` block."""
        self.enterscope()
        try:
            yield self
        finally:
            self.exitscope()