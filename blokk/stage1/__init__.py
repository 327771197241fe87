# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""Stage1: symbol table, string list and the in-place resolution pass."""

from .symbols import SymbolHandle, StringIndex, SymbolKind, Symbol, SymbolTable, StringList
from .resolve import Resolution, resolve_tree

__all__ = [
	"SymbolHandle",
	"StringIndex",
	"SymbolKind",
	"Symbol",
	"SymbolTable",
	"StringList",
	"Resolution",
	"resolve_tree",
]
