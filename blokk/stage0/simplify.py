# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Tree simplification (stage0 → stage0, in place).

Normalizes the parser's output into the shapes the resolver and CFG builder
expect:
  - GROUP (parenthesised) nodes are replaced by their single child,
  - STATEMENT_LIST children that are themselves statement lists are spliced
    into their parent,
  - spelled comparators ("is equal to", "er lik", ...) become symbols ("==").

Values are never folded: `2 + 3` stays a BINARY node.
"""

from __future__ import annotations

import logging
from typing import Dict, List

from blokk.core.errors import MalformedInput
from .tree import NodeId, NodeKind, Tree

logger = logging.getLogger(__name__)

COMPARATOR_PHRASES: Dict[str, str] = {
	"is equal to": "==",
	"is not equal to": "!=",
	"is less than": "<",
	"is less than or equal to": "<=",
	"is greater than": ">",
	"is greater than or equal to": ">=",
	"er lik": "==",
	"er ikke lik": "!=",
	"er mindre enn": "<",
	"er mindre enn eller lik": "<=",
	"er større enn": ">",
	"er større enn eller lik": ">=",
}


def normalize_comparator(text: str) -> str:
	"""Map a spelled comparator to its symbol; symbols and unknown text pass through."""
	return COMPARATOR_PHRASES.get(" ".join(text.split()), text)


def _unwrap_group(tree: Tree, nid: NodeId) -> NodeId:
	while tree[nid].kind is NodeKind.GROUP:
		node = tree[nid]
		if len(node.children) != 1:
			raise MalformedInput(
				f"parenthesised expression must have exactly one child, got {len(node.children)}",
				loc=node.span,
			)
		nid = node.children[0]
	return nid


def _flatten_statements(tree: Tree, children: List[NodeId]) -> List[NodeId]:
	flat: List[NodeId] = []
	for child in children:
		if tree[child].kind is NodeKind.STATEMENT_LIST:
			flat.extend(_flatten_statements(tree, tree[child].children))
		else:
			flat.append(child)
	return flat


def simplify_tree(tree: Tree) -> Tree:
	"""Simplify `tree` in place and return it."""
	rewrites = 0
	for nid in list(tree.walk()):
		node = tree[nid]
		if node.kind is NodeKind.STATEMENT_LIST:
			flat = _flatten_statements(tree, node.children)
			if flat != node.children:
				rewrites += 1
				node.children = flat
		unwrapped = [_unwrap_group(tree, child) for child in node.children]
		if unwrapped != node.children:
			rewrites += 1
			node.children = unwrapped
		if node.kind is NodeKind.CONDITION and node.text is not None:
			node.text = normalize_comparator(node.text)
	if tree.root >= 0 and tree[tree.root].kind is NodeKind.GROUP:
		tree.root = _unwrap_group(tree, tree.root)
	logger.debug("simplify: %d node rewrites", rewrites)
	return tree


__all__ = ["COMPARATOR_PHRASES", "normalize_comparator", "simplify_tree"]
