# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
# author: Sławomir Liszniański; created: 2026-10-19
"""
Name resolution and string interning (stage1, in place).

Pipeline placement:
  parser → simplify → resolve (this file) → CFG builder / tree walker

Rewrites the tree's leaf tokens so nothing downstream sees raw names or raw
string text:
  - STRING nodes:   Token(STRING, "text")      → Token(STRING_INDEX, i)
  - VARIABLE nodes: Token(IDENTIFIER, "name")  → Token(SYMBOL_REF, handle)

Running the pass twice is harmless: already-resolved tokens are left alone.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from blokk.core.errors import MalformedInput
from blokk.stage0.tree import NodeKind, TokenKind, Tree
from .symbols import StringList, SymbolTable

logger = logging.getLogger(__name__)


@dataclass
class Resolution:
	"""Tables produced by resolution, consumed by the CFG builder and interpreters."""

	symbols: SymbolTable = field(default_factory=SymbolTable)
	strings: StringList = field(default_factory=StringList)


def resolve_tree(tree: Tree, resolution: Resolution | None = None) -> Resolution:
	"""Resolve identifiers and intern strings in `tree`; returns the tables."""
	res = resolution or Resolution()
	for nid in tree.walk():
		node = tree[nid]
		if node.kind is NodeKind.STRING:
			if node.token is None:
				raise MalformedInput("string node without a token", loc=node.span)
			if node.token.kind is TokenKind.STRING:
				index = res.strings.add(str(node.token.value))
				node.token = node.token.rekind(TokenKind.STRING_INDEX, index)
		elif node.kind is NodeKind.VARIABLE:
			if node.token is None:
				raise MalformedInput("variable node without a token", loc=node.span)
			if node.token.kind is TokenKind.IDENTIFIER:
				handle = res.symbols.declare(str(node.token.value))
				node.token = node.token.rekind(TokenKind.SYMBOL_REF, handle)
	logger.info("resolved %d symbols, %d strings", len(res.symbols), len(res.strings))
	return res


__all__ = ["Resolution", "resolve_tree"]
