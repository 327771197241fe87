# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
# author: Sławomir Liszniański; created: 2026-10-19
"""
Program tree (stage0).

Pipeline placement:
  source → parser → program tree (this file) → simplify/resolve → CFG → interpreter

Nodes live in an arena (`Tree.nodes`) and refer to their children by integer
index, so later passes (simplify, resolve) can rewrite nodes in place instead of
cloning subtrees. A node carries a kind tag, an optional leaf token, an optional
free-form text (operator/comparator symbol) and an ordered list of child ids.

Shapes produced by the parser:
  PROGRAM        [STATEMENT_LIST]
  STATEMENT_LIST [stmt...]
  PRINT          [expr]
  ASSIGN         [VARIABLE, expr]
  IF             [CONDITION, STATEMENT_LIST] or [CONDITION, STATEMENT_LIST, STATEMENT_LIST]
  CONDITION      [expr, expr]           text = comparator
  BINARY         [expr, expr]           text = operator
  GROUP          [expr]                 (parenthesised; removed by simplify)
  LITERAL / STRING / VARIABLE           leaf, token set
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Iterator, List, Optional, Sequence, Union

from blokk.core.span import Span

NodeId = int


class NodeKind(Enum):
	PROGRAM = "Program"
	STATEMENT_LIST = "StatementList"
	PRINT = "Print"
	ASSIGN = "Assign"
	IF = "If"
	CONDITION = "Condition"
	BINARY = "Binary"
	GROUP = "Group"
	LITERAL = "Literal"
	STRING = "String"
	VARIABLE = "Variable"


class TokenKind(Enum):
	INT = "Int"
	STRING = "String"
	IDENTIFIER = "Identifier"
	# Produced by the resolver.
	STRING_INDEX = "StringIndex"
	SYMBOL_REF = "SymbolRef"


@dataclass(frozen=True)
class Token:
	"""Leaf token with its source position."""

	kind: TokenKind
	value: Union[int, str]
	line: Optional[int] = None
	column: Optional[int] = None

	def rekind(self, kind: TokenKind, value: Union[int, str]) -> "Token":
		"""Copy of this token with a new kind/value, keeping its position."""
		return replace(self, kind=kind, value=value)


@dataclass
class Node:
	kind: NodeKind
	token: Optional[Token] = None
	text: Optional[str] = None
	children: List[NodeId] = field(default_factory=list)
	loc: Optional[Span] = None

	@property
	def span(self) -> Span:
		if self.loc is not None:
			return self.loc
		return Span.from_loc(self.token)


class Tree:
	"""Arena of nodes plus the id of the root node."""

	def __init__(self) -> None:
		self.nodes: List[Node] = []
		self.root: NodeId = -1

	def add(
		self,
		kind: NodeKind,
		*,
		token: Optional[Token] = None,
		text: Optional[str] = None,
		children: Sequence[NodeId] = (),
		loc: Optional[Span] = None,
	) -> NodeId:
		"""Append a node to the arena and return its id."""
		self.nodes.append(Node(kind=kind, token=token, text=text, children=list(children), loc=loc))
		return len(self.nodes) - 1

	def __getitem__(self, nid: NodeId) -> Node:
		return self.nodes[nid]

	def __len__(self) -> int:
		return len(self.nodes)

	def walk(self, start: Optional[NodeId] = None) -> Iterator[NodeId]:
		"""Pre-order traversal of the nodes reachable from `start` (default: root)."""
		if start is None:
			if self.root < 0:
				return
			start = self.root
		stack = [start]
		while stack:
			nid = stack.pop()
			yield nid
			stack.extend(reversed(self.nodes[nid].children))

	def format(self) -> str:
		"""Indented dump of the reachable tree, one node per line."""
		lines: List[str] = []

		def visit(nid: NodeId, depth: int) -> None:
			node = self.nodes[nid]
			label = node.kind.value
			if node.text is not None:
				label += f" '{node.text}'"
			if node.token is not None:
				label += f" {node.token.kind.value}({node.token.value!r})"
			lines.append("  " * depth + label)
			for child in node.children:
				visit(child, depth + 1)

		if self.root >= 0:
			visit(self.root, 0)
		return "\n".join(lines)


def program_tree(statements: Sequence[NodeId], tree: Tree) -> Tree:
	"""Wrap top-level statement ids into PROGRAM/STATEMENT_LIST and set the root."""
	stmt_list = tree.add(NodeKind.STATEMENT_LIST, children=statements)
	tree.root = tree.add(NodeKind.PROGRAM, children=[stmt_list])
	return tree


__all__ = ["NodeId", "NodeKind", "TokenKind", "Token", "Node", "Tree", "program_tree"]
