# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Symbol table and string list produced by the resolver.

Both are append-only tables addressed by small integer handles. The CFG and
the interpreters only ever see the handles; names and string text are looked
up here when needed (output, diagnostics).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterator, List, Optional

SymbolHandle = int
StringIndex = int


class SymbolKind(Enum):
	VAR = "var"
	# Reserved: the surface language has no function definitions yet.
	FUNC = "func"


@dataclass(frozen=True)
class Symbol:
	name: str
	kind: SymbolKind = SymbolKind.VAR


class SymbolTable:
	"""Maps symbol handles to name/kind records (one handle per distinct name)."""

	def __init__(self) -> None:
		self._symbols: List[Symbol] = []
		self._by_name: Dict[str, SymbolHandle] = {}

	def declare(self, name: str, kind: SymbolKind = SymbolKind.VAR) -> SymbolHandle:
		"""Return the handle for `name`, creating it on first use."""
		handle = self._by_name.get(name)
		if handle is None:
			handle = len(self._symbols)
			self._symbols.append(Symbol(name=name, kind=kind))
			self._by_name[name] = handle
		return handle

	def lookup(self, name: str) -> Optional[SymbolHandle]:
		return self._by_name.get(name)

	def get(self, handle: SymbolHandle) -> Symbol:
		if not 0 <= handle < len(self._symbols):
			raise KeyError(f"unknown symbol handle {handle}")
		return self._symbols[handle]

	def name_of(self, handle: SymbolHandle) -> str:
		return self.get(handle).name

	def __len__(self) -> int:
		return len(self._symbols)

	def __iter__(self) -> Iterator[tuple[SymbolHandle, Symbol]]:
		return iter(enumerate(self._symbols))

	def format(self) -> str:
		lines = ["Symbol_table", "------------"]
		for handle, sym in self:
			lines.append(f"sym_{handle} = {sym.name} ({sym.kind.value})")
		return "\n".join(lines) + "\n"


class StringList:
	"""Interned string literals; equal literals share one index."""

	def __init__(self) -> None:
		self._strings: List[str] = []
		self._index: Dict[str, StringIndex] = {}

	def add(self, text: str) -> StringIndex:
		index = self._index.get(text)
		if index is None:
			index = len(self._strings)
			self._strings.append(text)
			self._index[text] = index
		return index

	def get(self, index: StringIndex) -> str:
		if not 0 <= index < len(self._strings):
			raise KeyError(f"unknown string index {index}")
		return self._strings[index]

	def __len__(self) -> int:
		return len(self._strings)

	def format(self) -> str:
		lines = ["String_list", "-----------"]
		for index, text in enumerate(self._strings):
			lines.append(f'str_{index} = "{text}"')
		return "\n".join(lines) + "\n"


__all__ = ["SymbolHandle", "StringIndex", "SymbolKind", "Symbol", "SymbolTable", "StringList"]
