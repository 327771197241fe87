# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
# author: Sławomir Liszniański; created: 2026-10-19
"""
Program tree → CFG lowering (stage2).

Pipeline placement:
  parser → simplify → resolve → CFG (this file) → verify → graph interpreter

Every instruction gets a block of its own, so the graph stays trivially
inspectable: one block per step of the program. Lowering walks the resolved
tree depth-first in source order and threads a "sequence tail" through it;
each visitor receives the block it must hang off and returns the last block it
produced.

  print <leaf>            Print leaf
  print <expr>            ...expr → tN ; Print tN
  let x be <expr>         ...expr → tN ; Set x, tN
  <literal>/<variable>    Set tN, leaf
  a <op> b                ...a → tA ; ...b → tB ; <op> tN, tA, tB
  a == b                  ...a → tA ; ...b → tB ; cmpeq tN, tA, tB
  if c ... else ...       anchor ; ...c → tC ; If tC ; then... | else... ; merge

Only `== + - * /` are lowered; other operators raise UnsupportedOperator.
Shape problems (wrong arity, strings used as values, unresolved tokens) raise
MalformedInput.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence, Tuple

from blokk.core.errors import MalformedInput, UnsupportedOperator
from blokk.stage0.simplify import normalize_comparator
from blokk.stage0.tree import Node, NodeId, NodeKind, TokenKind, Tree
from . import ir
from .cfg import BasicBlock, BlockId, Branch, CFG

logger = logging.getLogger(__name__)


class CfgBuilder:
	"""
	Build state for one CFG: the block table and the id counters.

	Entry point for this stage:
	  - create a CfgBuilder (the entry block exists right away)
	  - lower the tree with TreeToCFG, threading block ids
	  - call finish(tail) to append the exit block and get the CFG
	"""

	def __init__(self) -> None:
		self.blocks: Dict[BlockId, BasicBlock] = {}
		self._block_counter = 0
		self._temp_counter = 0
		self._instr_counter = 0
		self.entry = self.new_block(())

	def new_temp(self) -> ir.Temp:
		temp = ir.Temp(self._temp_counter)
		self._temp_counter += 1
		return temp

	def next_instr_id(self) -> int:
		iid = self._instr_counter
		self._instr_counter += 1
		return iid

	def new_block(self, preds: Sequence[BlockId]) -> BasicBlock:
		"""Create an empty block wired after `preds` (in the given order)."""
		block = BasicBlock(id=self._block_counter)
		self._block_counter += 1
		self.blocks[block.id] = block
		for pred in preds:
			self.link(pred, block.id)
		return block

	def link(self, pred: BlockId, succ: BlockId) -> None:
		self.blocks[pred].succs.append(succ)
		self.blocks[succ].preds.append(pred)

	def emit(self, pred: BlockId, opcode: ir.Opcode, operands: Sequence[ir.Operand], loc=None) -> BlockId:
		"""Append a new block after `pred` holding one instruction; returns its id."""
		instr = ir.make_instruction(self.next_instr_id(), opcode, operands, loc)
		block = self.new_block((pred,))
		block.instructions.append(instr)
		return block.id

	def finish(self, tail: BlockId) -> CFG:
		"""Append the exit block after `tail` and return the finished CFG."""
		exit_block = self.new_block((tail,))
		return CFG(
			blocks=self.blocks,
			entry=self.entry.id,
			exit=exit_block.id,
			block_count=self._block_counter,
			temp_count=self._temp_counter,
		)


class TreeToCFG:
	"""
	Lower a resolved, simplified program tree using per-kind visitors.

	Entry points:
	  - lower: lower a statement-level node after block `pred`, return the tail
	  - lower_expr: lower an expression into a fresh temp, return (temp, tail)
	"""

	def __init__(self, builder: CfgBuilder, tree: Tree) -> None:
		self.b = builder
		self.tree = tree

	# --- helpers ---

	def _node(self, nid: NodeId) -> Node:
		if not 0 <= nid < len(self.tree):
			raise MalformedInput(f"node id {nid} is out of range")
		return self.tree[nid]

	def _children(self, node: Node, *counts: int) -> List[NodeId]:
		if len(node.children) not in counts:
			expected = " or ".join(str(c) for c in counts)
			raise MalformedInput(
				f"{node.kind.value} node expects {expected} children, got {len(node.children)}",
				loc=node.span,
			)
		return list(node.children)

	@staticmethod
	def _token_int(node: Node) -> int:
		value = node.token.value
		if not isinstance(value, int) or isinstance(value, bool):
			raise MalformedInput(
				f"{node.kind.value} token value {value!r} is not an integer",
				loc=node.span,
			)
		return value

	def _leaf_operand(self, node: Node) -> ir.Operand:
		"""Operand for a LITERAL / STRING / VARIABLE leaf."""
		token = node.token
		if token is None:
			raise MalformedInput(f"{node.kind.value} node has no token", loc=node.span)
		if node.kind is NodeKind.LITERAL and token.kind is TokenKind.INT:
			return ir.Imm(self._token_int(node))
		if node.kind is NodeKind.VARIABLE and token.kind is TokenKind.SYMBOL_REF:
			return ir.Var(self._token_int(node))
		if node.kind is NodeKind.STRING and token.kind is TokenKind.STRING_INDEX:
			return ir.Str(self._token_int(node))
		if token.kind in (TokenKind.IDENTIFIER, TokenKind.STRING):
			raise MalformedInput(
				f"unresolved {token.kind.value.lower()} token {token.value!r}",
				loc=node.span,
				notes=["run resolve_tree() before building the CFG"],
			)
		raise MalformedInput(f"{node.kind.value} node cannot carry a {token.kind.value} token", loc=node.span)

	# --- statements ---

	def lower(self, nid: NodeId, pred: BlockId) -> BlockId:
		node = self._node(nid)
		method = getattr(self, f"_visit_{node.kind.name.lower()}", None)
		if method is None:
			raise MalformedInput(f"{node.kind.value} node is not a statement", loc=node.span)
		return method(node, pred)

	def _visit_program(self, node: Node, pred: BlockId) -> BlockId:
		(body,) = self._children(node, 1)
		if self._node(body).kind is not NodeKind.STATEMENT_LIST:
			raise MalformedInput("program body must be a statement list", loc=node.span)
		return self.lower(body, pred)

	def _visit_statement_list(self, node: Node, pred: BlockId) -> BlockId:
		tail = pred
		for child in node.children:
			tail = self.lower(child, tail)
		return tail

	def _visit_print(self, node: Node, pred: BlockId) -> BlockId:
		(value_id,) = self._children(node, 1)
		value = self._node(value_id)
		if value.kind in (NodeKind.LITERAL, NodeKind.VARIABLE, NodeKind.STRING):
			return self.b.emit(pred, ir.Opcode.PRINT, (self._leaf_operand(value),), node.span)
		temp, tail = self.lower_expr(value_id, pred)
		return self.b.emit(tail, ir.Opcode.PRINT, (temp,), node.span)

	def _visit_assign(self, node: Node, pred: BlockId) -> BlockId:
		target_id, value_id = self._children(node, 2)
		target = self._node(target_id)
		if target.kind is not NodeKind.VARIABLE:
			raise MalformedInput(f"cannot assign to a {target.kind.value} node", loc=target.span)
		var = self._leaf_operand(target)
		temp, tail = self.lower_expr(value_id, pred)
		return self.b.emit(tail, ir.Opcode.SET, (var, temp), node.span)

	def _visit_if(self, node: Node, pred: BlockId) -> BlockId:
		children = self._children(node, 2, 3)
		cond_node = self._node(children[0])
		if cond_node.kind is not NodeKind.CONDITION:
			raise MalformedInput("if statement must start with a condition", loc=node.span)
		for branch_id in children[1:]:
			branch = self._node(branch_id)
			if branch.kind is not NodeKind.STATEMENT_LIST or not branch.children:
				raise MalformedInput("if branches must be non-empty statement lists", loc=branch.span)

		anchor = self.b.new_block((pred,))
		cond, cond_tail = self._lower_condition(cond_node, anchor.id)
		if_block = self.b.new_block((cond_tail,))
		iid = self.b.next_instr_id()

		then_tail = self.lower(children[1], if_block.id)
		then_target = self._branch_target(if_block, then_tail, 0, children[1])
		if len(children) == 3:
			else_tail = self.lower(children[2], if_block.id)
			else_target = self._branch_target(if_block, else_tail, 1, children[2])
			merge = self.b.new_block((then_tail, else_tail))
		else:
			merge = self.b.new_block((then_tail, if_block.id))
			else_target = merge.id

		if_block.branch = Branch(then_target=then_target, else_target=else_target)
		if_block.instructions.append(
			ir.if_(iid, cond, ir.Label(then_target), ir.Label(else_target), loc=node.span)
		)
		logger.debug("bb%d: if t%d then bb%d else bb%d", if_block.id, cond.id, then_target, else_target)
		return merge.id

	def _branch_target(self, if_block: BasicBlock, tail: BlockId, slot: int, branch_id: NodeId) -> BlockId:
		# nested lists can be non-empty yet lower to nothing
		if tail == if_block.id or len(if_block.succs) <= slot:
			raise MalformedInput("if branch produced no statements", loc=self._node(branch_id).span)
		return if_block.succs[slot]

	def _lower_condition(self, node: Node, pred: BlockId) -> Tuple[ir.Temp, BlockId]:
		left_id, right_id = self._children(node, 2)
		comparator = normalize_comparator(node.text or "")
		if comparator != "==":
			raise UnsupportedOperator(
				f"unsupported comparator '{node.text}'",
				loc=node.span,
				notes=["only equality conditions can be lowered to the CFG; try --backend tree"],
			)
		left, tail = self.lower_expr(left_id, pred)
		right, tail = self.lower_expr(right_id, tail)
		dest = self.b.new_temp()
		return dest, self.b.emit(tail, ir.Opcode.CMP_EQ, (dest, left, right), node.span)

	# --- expressions ---

	def lower_expr(self, nid: NodeId, pred: BlockId) -> Tuple[ir.Temp, BlockId]:
		node = self._node(nid)
		method = getattr(self, f"_visit_expr_{node.kind.name.lower()}", None)
		if method is None:
			raise MalformedInput(f"{node.kind.value} node is not a value expression", loc=node.span)
		return method(node, pred)

	def _visit_expr_binary(self, node: Node, pred: BlockId) -> Tuple[ir.Temp, BlockId]:
		left_id, right_id = self._children(node, 2)
		if node.text not in ir.ARITH_OPCODES:
			raise UnsupportedOperator(f"unsupported operator '{node.text}'", loc=node.span)
		left, tail = self.lower_expr(left_id, pred)
		right, tail = self.lower_expr(right_id, tail)
		dest = self.b.new_temp()
		return dest, self.b.emit(tail, ir.ARITH_OPCODES[node.text], (dest, left, right), node.span)

	def _visit_expr_literal(self, node: Node, pred: BlockId) -> Tuple[ir.Temp, BlockId]:
		self._children(node, 0)
		dest = self.b.new_temp()
		return dest, self.b.emit(pred, ir.Opcode.SET, (dest, self._leaf_operand(node)), node.span)

	_visit_expr_variable = _visit_expr_literal

	def _visit_expr_string(self, node: Node, pred: BlockId) -> Tuple[ir.Temp, BlockId]:
		raise MalformedInput(
			"string literal cannot be used as a value",
			loc=node.span,
			notes=["strings can only be printed directly"],
		)


def build_cfg(tree: Tree, builder: Optional[CfgBuilder] = None) -> CFG:
	"""Lower a resolved program tree into a fresh CFG."""
	if tree.root < 0:
		raise MalformedInput("tree has no root node")
	b = builder or CfgBuilder()
	tail = TreeToCFG(b, tree).lower(tree.root, b.entry.id)
	cfg = b.finish(tail)
	logger.info("built CFG: %d blocks, %d temporaries", cfg.block_count, cfg.temp_count)
	return cfg


__all__ = ["CfgBuilder", "TreeToCFG", "build_cfg"]
