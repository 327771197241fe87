# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""Stage2: IR, CFG container, tree → CFG builder, verifier and printers."""

from . import ir
from .ir import (
	Opcode,
	Operand,
	Imm,
	Temp,
	Var,
	Str,
	Label,
	Instruction,
	make_instruction,
)
from .cfg import BlockId, Branch, BasicBlock, CFG
from .builder import CfgBuilder, TreeToCFG, build_cfg
from .verify import verify_cfg
from .printer import format_operand, format_instr, format_block, format_cfg
from .dot import cfg_to_dot, tree_to_dot

__all__ = [
	"ir",
	"Opcode",
	"Operand",
	"Imm",
	"Temp",
	"Var",
	"Str",
	"Label",
	"Instruction",
	"make_instruction",
	"BlockId",
	"Branch",
	"BasicBlock",
	"CFG",
	"CfgBuilder",
	"TreeToCFG",
	"build_cfg",
	"verify_cfg",
	"format_operand",
	"format_instr",
	"format_block",
	"format_cfg",
	"cfg_to_dot",
	"tree_to_dot",
]
