# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
# author: Sławomir Liszniański; created: 2026-10-19
"""
Graph interpreter: executes a CFG block by block.

Pipeline placement:
  CFG builder → verify → graph interpreter (this file) → output lines

State is two flat environments (variables by symbol handle, temporaries by
temp id) plus the current block id. Execution starts at the entry block and
stops when the exit block is reached. Control flow follows the block's
explicit successor slots: a block ending in `if` goes to its then/else target,
any other block to its single successor.

Every block transition costs one step; exceeding `max_steps` raises
StepBudgetExceeded, so a malformed (cyclic) CFG cannot hang the caller.
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, List, Optional, TextIO

from blokk.core.errors import StepBudgetExceeded, UnresolvedReference, VerificationError
from blokk.core.int64 import arith
from blokk.stage1.symbols import StringList, SymbolTable
from blokk.stage2 import ir
from blokk.stage2.cfg import BasicBlock, BlockId, CFG

logger = logging.getLogger(__name__)

DEFAULT_MAX_STEPS = 100_000


class GraphInterpreter:
	"""Run one CFG; a fresh instance per run."""

	def __init__(
		self,
		cfg: CFG,
		symbols: SymbolTable,
		strings: StringList,
		out: Optional[TextIO] = None,
		max_steps: int = DEFAULT_MAX_STEPS,
	) -> None:
		self.cfg = cfg
		self.symbols = symbols
		self.strings = strings
		self.out = out
		self.max_steps = max_steps
		self.variables: Dict[int, int] = {}
		self.temps: Dict[int, int] = {}
		self.lines: List[str] = []
		self.steps = 0
		self._handlers: Dict[ir.Opcode, Callable[[ir.Instruction, BasicBlock], Optional[bool]]] = {
			ir.Opcode.ADD: self._exec_arith,
			ir.Opcode.SUB: self._exec_arith,
			ir.Opcode.MUL: self._exec_arith,
			ir.Opcode.DIV: self._exec_arith,
			ir.Opcode.CMP_EQ: self._exec_cmp_eq,
			ir.Opcode.SET: self._exec_set,
			ir.Opcode.PRINT: self._exec_print,
			ir.Opcode.IF: self._exec_if,
		}

	def run(self) -> List[str]:
		"""Execute from entry to exit; returns the printed lines."""
		logger.info("running CFG (%d blocks, step budget %d)", len(self.cfg), self.max_steps)
		current = self.cfg.entry
		while current != self.cfg.exit:
			if self.steps >= self.max_steps:
				raise StepBudgetExceeded(
					f"step budget of {self.max_steps} block transitions exhausted at bb{current}",
					notes=["raise --max-steps if the program is expected to run longer"],
				)
			self.steps += 1
			block = self.cfg.blocks[current]
			logger.debug("bb%d: %d instructions", block.id, len(block.instructions))
			taken: Optional[bool] = None
			for instr in block.instructions:
				taken = self._handlers[instr.opcode](instr, block)
			current = self._next(block, taken)
		logger.info("run finished after %d steps, %d lines printed", self.steps, len(self.lines))
		return self.lines

	def _next(self, block: BasicBlock, taken: Optional[bool]) -> BlockId:
		if block.branch is not None:
			if taken is None:
				raise VerificationError(f"bb{block.id}: branch slots without an 'if' instruction")
			return block.branch.then_target if taken else block.branch.else_target
		if len(block.succs) != 1:
			raise VerificationError(f"bb{block.id}: expected exactly one successor, got {len(block.succs)}")
		return block.succs[0]

	# --- operands ---

	def _read(self, op: ir.Operand, instr: ir.Instruction, block: BasicBlock) -> int:
		if isinstance(op, ir.Imm):
			return op.value
		if isinstance(op, ir.Temp):
			try:
				return self.temps[op.id]
			except KeyError:
				raise UnresolvedReference(
					f"temporary t{op.id} read before it was written (instruction {instr.id}, bb{block.id})",
					loc=instr.loc,
				) from None
		if isinstance(op, ir.Var):
			if op.handle in self.variables:
				return self.variables[op.handle]
			try:
				name = self.symbols.name_of(op.handle)
			except KeyError:
				raise UnresolvedReference(
					f"symbol handle {op.handle} is not in the symbol table (instruction {instr.id}, bb{block.id})",
					loc=instr.loc,
				) from None
			raise UnresolvedReference(
				f"variable '{name}' read before assignment "
				f"(instruction {instr.id}, bb{block.id})",
				loc=instr.loc,
			)
		raise UnresolvedReference(f"operand {op!r} has no integer value (instruction {instr.id})", loc=instr.loc)

	def _write(self, dest: ir.Operand, value: int) -> None:
		if isinstance(dest, ir.Var):
			self.variables[dest.handle] = value
		else:
			self.temps[dest.id] = value  # type: ignore[attr-defined]

	def _emit_line(self, line: str) -> None:
		self.lines.append(line)
		if self.out is not None:
			self.out.write(line + "\n")

	# --- instructions ---

	def _exec_arith(self, instr: ir.Instruction, block: BasicBlock) -> None:
		dest, left, right = instr.operands
		value = arith(
			ir.ARITH_SYMBOLS[instr.opcode],
			self._read(left, instr, block),
			self._read(right, instr, block),
			loc=instr.loc,
		)
		self._write(dest, value)

	def _exec_cmp_eq(self, instr: ir.Instruction, block: BasicBlock) -> None:
		dest, left, right = instr.operands
		equal = self._read(left, instr, block) == self._read(right, instr, block)
		self._write(dest, 1 if equal else 0)

	def _exec_set(self, instr: ir.Instruction, block: BasicBlock) -> None:
		dest, source = instr.operands
		self._write(dest, self._read(source, instr, block))

	def _exec_print(self, instr: ir.Instruction, block: BasicBlock) -> None:
		(value,) = instr.operands
		if isinstance(value, ir.Str):
			try:
				text = self.strings.get(value.index)
			except KeyError:
				raise UnresolvedReference(
					f"string index {value.index} is not in the string list (instruction {instr.id}, bb{block.id})",
					loc=instr.loc,
				) from None
			self._emit_line(text)
		else:
			self._emit_line(str(self._read(value, instr, block)))

	def _exec_if(self, instr: ir.Instruction, block: BasicBlock) -> bool:
		return self._read(instr.operands[0], instr, block) != 0


def run_cfg(
	cfg: CFG,
	symbols: SymbolTable,
	strings: StringList,
	out: Optional[TextIO] = None,
	max_steps: int = DEFAULT_MAX_STEPS,
) -> List[str]:
	"""Execute `cfg` and return its output lines (also written to `out`)."""
	return GraphInterpreter(cfg, symbols, strings, out=out, max_steps=max_steps).run()


__all__ = ["DEFAULT_MAX_STEPS", "GraphInterpreter", "run_cfg"]
