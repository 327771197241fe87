# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Tree-walking evaluator over the resolved program tree.

Reference backend for the CFG pipeline: same integer semantics (int64 wrap,
truncating division) and the same error types, but it evaluates conditions
with every comparator instead of only `==`.
"""

from __future__ import annotations

import logging
import operator
from typing import Callable, Dict, List, Optional, TextIO

from blokk.core.errors import MalformedInput, UnresolvedReference, UnsupportedOperator
from blokk.core.int64 import arith
from blokk.stage0.simplify import normalize_comparator
from blokk.stage0.tree import Node, NodeId, NodeKind, TokenKind, Tree
from blokk.stage1.symbols import StringList, SymbolTable

logger = logging.getLogger(__name__)

COMPARATORS: Dict[str, Callable[[int, int], bool]] = {
	"==": operator.eq,
	"!=": operator.ne,
	"<": operator.lt,
	"<=": operator.le,
	">": operator.gt,
	">=": operator.ge,
}


def _token_int(node: Node) -> int:
	value = node.token.value
	if not isinstance(value, int) or isinstance(value, bool):
		raise MalformedInput(f"{node.kind.value} token value {value!r} is not an integer", loc=node.span)
	return value


class TreeWalker:
	def __init__(
		self,
		tree: Tree,
		symbols: SymbolTable,
		strings: StringList,
		out: Optional[TextIO] = None,
	) -> None:
		self.tree = tree
		self.symbols = symbols
		self.strings = strings
		self.out = out
		self.variables: Dict[int, int] = {}
		self.lines: List[str] = []

	def run(self) -> List[str]:
		logger.info("evaluating tree (%d nodes)", len(self.tree))
		if self.tree.root >= 0:
			self._exec(self.tree.root)
		return self.lines

	def _emit_line(self, line: str) -> None:
		self.lines.append(line)
		if self.out is not None:
			self.out.write(line + "\n")

	def _handle(self, node: Node) -> int:
		token = node.token
		if token is None or token.kind is not TokenKind.SYMBOL_REF:
			raise MalformedInput("unresolved variable; run resolve_tree() first", loc=node.span)
		return _token_int(node)

	# --- statements ---

	def _exec(self, nid: NodeId) -> None:
		node = self.tree[nid]
		kind = node.kind
		if kind in (NodeKind.PROGRAM, NodeKind.STATEMENT_LIST):
			for child in node.children:
				self._exec(child)
		elif kind is NodeKind.PRINT:
			(value_id,) = node.children
			value = self.tree[value_id]
			if value.kind is NodeKind.STRING:
				if value.token is None or value.token.kind is not TokenKind.STRING_INDEX:
					raise MalformedInput("unresolved string literal; run resolve_tree() first", loc=value.span)
				index = _token_int(value)
				try:
					text = self.strings.get(index)
				except KeyError:
					raise UnresolvedReference(f"string index {index} is not in the string list", loc=value.span) from None
				self._emit_line(text)
			else:
				self._emit_line(str(self._eval(value_id)))
		elif kind is NodeKind.ASSIGN:
			target_id, value_id = node.children
			self.variables[self._handle(self.tree[target_id])] = self._eval(value_id)
		elif kind is NodeKind.IF:
			cond_id, then_id, *rest = node.children
			if self._condition(cond_id):
				self._exec(then_id)
			elif rest:
				self._exec(rest[0])
		else:
			raise MalformedInput(f"{kind.value} node is not a statement", loc=node.span)

	def _condition(self, nid: NodeId) -> bool:
		node = self.tree[nid]
		symbol = normalize_comparator(node.text or "")
		compare = COMPARATORS.get(symbol)
		if compare is None:
			raise UnsupportedOperator(f"unsupported comparator '{node.text}'", loc=node.span)
		left_id, right_id = node.children
		return compare(self._eval(left_id), self._eval(right_id))

	# --- expressions ---

	def _eval(self, nid: NodeId) -> int:
		node = self.tree[nid]
		kind = node.kind
		if kind is NodeKind.LITERAL and node.token is not None:
			return _token_int(node)
		if kind is NodeKind.VARIABLE:
			handle = self._handle(node)
			if handle in self.variables:
				return self.variables[handle]
			try:
				name = self.symbols.name_of(handle)
			except KeyError:
				raise UnresolvedReference(f"symbol handle {handle} is not in the symbol table", loc=node.span) from None
			raise UnresolvedReference(f"variable '{name}' read before assignment", loc=node.span)
		if kind is NodeKind.BINARY:
			left_id, right_id = node.children
			left = self._eval(left_id)
			right = self._eval(right_id)
			return arith(node.text or "", left, right, loc=node.span)
		if kind is NodeKind.GROUP:
			(inner,) = node.children
			return self._eval(inner)
		if kind is NodeKind.STRING:
			raise MalformedInput("string literal cannot be used as a value", loc=node.span)
		raise MalformedInput(f"{kind.value} node is not a value expression", loc=node.span)


def evaluate_tree(
	tree: Tree,
	symbols: SymbolTable,
	strings: StringList,
	out: Optional[TextIO] = None,
) -> List[str]:
	"""Evaluate a resolved tree; returns the printed lines (also written to `out`)."""
	return TreeWalker(tree, symbols, strings, out=out).run()


__all__ = ["COMPARATORS", "TreeWalker", "evaluate_tree"]
