# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Basic blocks and the control-flow graph container.

Every block records its predecessors and its successors explicitly; a block
ending in `if` additionally carries a `Branch` naming the then/else targets, so
the interpreter never has to search for a block's successors.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Set

from .ir import Instruction, Opcode

BlockId = int


@dataclass(frozen=True)
class Branch:
	"""Successor slots of a block ending in `if`."""

	then_target: BlockId
	else_target: BlockId


@dataclass
class BasicBlock:
	id: BlockId
	instructions: List[Instruction] = field(default_factory=list)
	preds: List[BlockId] = field(default_factory=list)
	succs: List[BlockId] = field(default_factory=list)
	branch: Optional[Branch] = None

	@property
	def terminator(self) -> Optional[Instruction]:
		"""The trailing `if` instruction, when the block has one."""
		if self.instructions and self.instructions[-1].opcode is Opcode.IF:
			return self.instructions[-1]
		return None


@dataclass
class CFG:
	"""
	Blocks keyed by id plus the entry/exit ids.

	`block_count` and `temp_count` are the number of block ids and temporary ids
	issued while building; ids are dense from 0 and never reused. A CFG is not
	mutated after the builder hands it out.
	"""

	blocks: Dict[BlockId, BasicBlock]
	entry: BlockId
	exit: BlockId
	block_count: int = 0
	temp_count: int = 0

	def block(self, bid: BlockId) -> BasicBlock:
		return self.blocks[bid]

	def __len__(self) -> int:
		return len(self.blocks)

	def __iter__(self) -> Iterator[BasicBlock]:
		"""Blocks in id order."""
		for bid in sorted(self.blocks):
			yield self.blocks[bid]

	def instructions(self) -> Iterator[Instruction]:
		for block in self:
			yield from block.instructions

	def reachable(self, start: Optional[BlockId] = None) -> Set[BlockId]:
		"""Ids reachable from `start` (default: entry) along successor edges."""
		origin = self.entry if start is None else start
		seen = {origin}
		queue = deque([origin])
		while queue:
			for succ in self.blocks[queue.popleft()].succs:
				if succ in self.blocks and succ not in seen:
					seen.add(succ)
					queue.append(succ)
		return seen


__all__ = ["BlockId", "Branch", "BasicBlock", "CFG"]
