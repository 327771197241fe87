# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""Stage0: arena program tree and its simplification pass."""

from .tree import NodeId, NodeKind, TokenKind, Token, Node, Tree, program_tree
from .simplify import COMPARATOR_PHRASES, normalize_comparator, simplify_tree

__all__ = [
	"NodeId",
	"NodeKind",
	"TokenKind",
	"Token",
	"Node",
	"Tree",
	"program_tree",
	"COMPARATOR_PHRASES",
	"normalize_comparator",
	"simplify_tree",
]
