# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Stable text listing of a CFG, used by `--dump-cfg` and the tests.

  cfg { entry = bb0, exit = bb6 }
  bb0:
  bb1 (preds: 0):
    t0 = set 3
  ...
  bb5 (preds: 4):
    print x

Variables print by name and strings by text when a Resolution is supplied;
otherwise as `v<handle>` / `str_<index>`.
"""

from __future__ import annotations

from typing import Optional

from blokk.stage1.resolve import Resolution
from . import ir
from .cfg import BasicBlock, CFG


def format_operand(op: ir.Operand, resolution: Optional[Resolution] = None) -> str:
	if isinstance(op, ir.Imm):
		return str(op.value)
	if isinstance(op, ir.Temp):
		return f"t{op.id}"
	if isinstance(op, ir.Var):
		if resolution is not None:
			return resolution.symbols.name_of(op.handle)
		return f"v{op.handle}"
	if isinstance(op, ir.Str):
		if resolution is not None:
			return f'"{resolution.strings.get(op.index)}"'
		return f"str_{op.index}"
	if isinstance(op, ir.Label):
		return f"bb{op.block}"
	return "<invalid operand>"


def format_instr(instr: ir.Instruction, resolution: Optional[Resolution] = None) -> str:
	ops = [format_operand(op, resolution) for op in instr.operands]
	if instr.opcode is ir.Opcode.IF:
		if len(ops) == 3:
			return f"if {ops[0]} then {ops[1]} else {ops[2]}"
		return f"if {ops[0]}"
	if instr.opcode is ir.Opcode.PRINT:
		return f"print {ops[0]}"
	return f"{ops[0]} = {instr.opcode.value} {', '.join(ops[1:])}"


def format_block(block: BasicBlock, resolution: Optional[Resolution] = None) -> str:
	header = f"bb{block.id}"
	if block.preds:
		header += f" (preds: {', '.join(str(p) for p in block.preds)})"
	lines = [header + ":"]
	for instr in block.instructions:
		lines.append("  " + format_instr(instr, resolution))
	return "\n".join(lines)


def format_cfg(cfg: CFG, resolution: Optional[Resolution] = None) -> str:
	header = f"cfg {{ entry = bb{cfg.entry}, exit = bb{cfg.exit} }}"
	return "\n".join([header] + [format_block(block, resolution) for block in cfg])


__all__ = ["format_operand", "format_instr", "format_block", "format_cfg"]
