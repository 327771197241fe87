# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
# author: Sławomir Liszniański; created: 2026-10-19
"""
Structural checks for a built CFG.

Pipeline placement:
  CFG builder → verify (this file) → graph interpreter

The builder produces graphs that pass by construction; the verifier exists to
catch hand-built or post-processed CFGs before they are executed. It checks:
  - entry and exit exist and are empty; only the entry lacks predecessors,
    only the exit lacks successors
  - every pred edge has a matching succ edge and vice versa
  - `if` only appears last in a block; such blocks carry a Branch whose two
    targets are exactly the block's successors; other blocks have at most one
    successor
  - every block is reachable from the entry and the exit is reachable
  - temporaries are written once and are written on every path to each read
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Set

from blokk.core.errors import VerificationError
from .cfg import BasicBlock, BlockId, CFG
from .ir import Opcode, Temp

logger = logging.getLogger(__name__)


def _fail(message: str, block: Optional[BasicBlock] = None) -> VerificationError:
	loc = None
	if block is not None and block.instructions:
		loc = block.instructions[0].loc
	where = f"bb{block.id}: " if block is not None else ""
	return VerificationError(where + message, loc=loc)


def _check_shape(cfg: CFG) -> None:
	if cfg.entry not in cfg.blocks:
		raise _fail(f"entry block bb{cfg.entry} is missing")
	if cfg.exit not in cfg.blocks:
		raise _fail(f"exit block bb{cfg.exit} is missing")
	for bid in (cfg.entry, cfg.exit):
		if cfg.blocks[bid].instructions:
			raise _fail("entry and exit blocks must be empty", cfg.blocks[bid])

	for block in cfg:
		for succ in block.succs:
			if succ not in cfg.blocks:
				raise _fail(f"successor bb{succ} does not exist", block)
			if block.id not in cfg.blocks[succ].preds:
				raise _fail(f"edge to bb{succ} is missing from its predecessor list", block)
		for pred in block.preds:
			if pred not in cfg.blocks:
				raise _fail(f"predecessor bb{pred} does not exist", block)
			if block.id not in cfg.blocks[pred].succs:
				raise _fail(f"predecessor bb{pred} has no edge to this block", block)

		if block.id == cfg.entry:
			if block.preds:
				raise _fail("entry block must not have predecessors", block)
		elif not block.preds:
			raise _fail("block has no predecessors", block)
		if block.id == cfg.exit:
			if block.succs:
				raise _fail("exit block must not have successors", block)
		elif not block.succs:
			raise _fail("only the exit block may lack successors", block)

		for instr in block.instructions[:-1]:
			if instr.opcode is Opcode.IF:
				raise _fail(f"'if' (instruction {instr.id}) must be the last instruction", block)
		if block.terminator is not None:
			if block.branch is None:
				raise _fail("block ends in 'if' but has no then/else slots", block)
			targets = [block.branch.then_target, block.branch.else_target]
			if sorted(block.succs) != sorted(targets):
				raise _fail(f"branch targets {targets} do not match successors {block.succs}", block)
		else:
			if block.branch is not None:
				raise _fail("block has then/else slots but no 'if' instruction", block)
			if len(block.succs) > 1:
				raise _fail(f"block without 'if' has {len(block.succs)} successors", block)


def _check_reachability(cfg: CFG) -> None:
	reachable = cfg.reachable()
	if cfg.exit not in reachable:
		raise _fail(f"exit block bb{cfg.exit} is not reachable from the entry")
	unreachable = sorted(set(cfg.blocks) - reachable)
	if unreachable:
		raise _fail(f"unreachable blocks: {', '.join(f'bb{b}' for b in unreachable)}")


def _check_temps(cfg: CFG) -> None:
	writers: Dict[int, int] = {}
	for block in cfg:
		for instr in block.instructions:
			dest = instr.dest
			if isinstance(dest, Temp):
				if dest.id in writers:
					raise _fail(f"temporary t{dest.id} is written more than once", block)
				writers[dest.id] = instr.id

	# Must-defined temps on entry to each block, iterated to a fixpoint.
	order = _reverse_postorder(cfg)
	everything = set(writers)
	defined_in: Dict[BlockId, Set[int]] = {bid: set(everything) for bid in order}
	defined_in[cfg.entry] = set()
	changed = True
	while changed:
		changed = False
		for bid in order:
			block = cfg.blocks[bid]
			if bid != cfg.entry:
				incoming = [_defined_out(cfg.blocks[p], defined_in[p]) for p in block.preds if p in defined_in]
				new_in = set.intersection(*incoming) if incoming else set()
				if new_in != defined_in[bid]:
					defined_in[bid] = new_in
					changed = True

	for bid in order:
		block = cfg.blocks[bid]
		defined = set(defined_in[bid])
		for instr in block.instructions:
			for src in instr.sources:
				if isinstance(src, Temp) and src.id not in defined:
					raise _fail(
						f"temporary t{src.id} may be read before it is written (instruction {instr.id})",
						block,
					)
			if isinstance(instr.dest, Temp):
				defined.add(instr.dest.id)


def _defined_out(block: BasicBlock, defined_in: Set[int]) -> Set[int]:
	out = set(defined_in)
	for instr in block.instructions:
		if isinstance(instr.dest, Temp):
			out.add(instr.dest.id)
	return out


def _reverse_postorder(cfg: CFG) -> List[BlockId]:
	seen: Set[BlockId] = set()
	post: List[BlockId] = []
	stack = [(cfg.entry, iter(cfg.blocks[cfg.entry].succs))]
	seen.add(cfg.entry)
	while stack:
		bid, succs = stack[-1]
		for succ in succs:
			if succ not in seen:
				seen.add(succ)
				stack.append((succ, iter(cfg.blocks[succ].succs)))
				break
		else:
			stack.pop()
			post.append(bid)
	return list(reversed(post))


def verify_cfg(cfg: CFG) -> None:
	"""Raise VerificationError on the first structural violation found."""
	logger.info("verifying CFG (%d blocks)", len(cfg))
	_check_shape(cfg)
	_check_reachability(cfg)
	_check_temps(cfg)


__all__ = ["verify_cfg"]
