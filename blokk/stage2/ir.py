# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
# author: Sławomir Liszniański; created: 2026-10-19
"""
Three-address instruction set executed by the graph interpreter.

Use this file as a reference for what the IR can express. An instruction is an
opcode plus an ordered operand tuple; which operand kinds each opcode accepts
is pinned in OPERAND_SHAPES and enforced when the instruction is built, so the
interpreter never has to re-check operand kinds.

  add/sub/mul/div  dest:Temp, left:value, right:value
  cmpeq            dest:Temp, left:value, right:value     (dest = 1 or 0)
  set              dest:Temp|Var, source:value
  print            Imm|Temp|Var|Str
  if               cond:Temp [, then:Label, else:Label]
  call/ret/push    reserved, never constructible

"value" is Imm, Temp or Var. Labels only document branch targets; control
flow is taken from the block's explicit successor slots.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Sequence, Tuple, Type

from blokk.core.errors import IRConstructionError
from blokk.core.int64 import fits_int64
from blokk.core.span import Span


class Opcode(Enum):
	ADD = "add"
	SUB = "sub"
	MUL = "mul"
	DIV = "div"
	CMP_EQ = "cmpeq"
	SET = "set"
	PRINT = "print"
	IF = "if"
	# Reserved for function support; no shape is accepted for these.
	CALL = "call"
	RET = "ret"
	PUSH = "push"


ARITH_OPCODES: Dict[str, Opcode] = {
	"+": Opcode.ADD,
	"-": Opcode.SUB,
	"*": Opcode.MUL,
	"/": Opcode.DIV,
}
ARITH_SYMBOLS: Dict[Opcode, str] = {op: sym for sym, op in ARITH_OPCODES.items()}


# Operands


class Operand:
	"""Base class for instruction operands."""

	__slots__ = ()


@dataclass(frozen=True)
class Imm(Operand):
	"""Signed 64-bit immediate."""

	value: int

	def __post_init__(self) -> None:
		if isinstance(self.value, bool) or not isinstance(self.value, int):
			raise IRConstructionError(f"immediate must be an integer, got {self.value!r}")
		if not fits_int64(self.value):
			raise IRConstructionError(f"immediate {self.value} does not fit in 64 bits")


@dataclass(frozen=True)
class Temp(Operand):
	"""Write-once temporary slot."""

	id: int


@dataclass(frozen=True)
class Var(Operand):
	"""Variable, by resolved symbol handle."""

	handle: int


@dataclass(frozen=True)
class Str(Operand):
	"""String-table index."""

	index: int


@dataclass(frozen=True)
class Label(Operand):
	"""Block reference (documentation only)."""

	block: int


_VALUE: Tuple[Type[Operand], ...] = (Imm, Temp, Var)

Shape = Tuple[Tuple[Type[Operand], ...], ...]

OPERAND_SHAPES: Dict[Opcode, Tuple[Shape, ...]] = {
	Opcode.ADD: (((Temp,), _VALUE, _VALUE),),
	Opcode.SUB: (((Temp,), _VALUE, _VALUE),),
	Opcode.MUL: (((Temp,), _VALUE, _VALUE),),
	Opcode.DIV: (((Temp,), _VALUE, _VALUE),),
	Opcode.CMP_EQ: (((Temp,), _VALUE, _VALUE),),
	Opcode.SET: (((Temp, Var), _VALUE),),
	Opcode.PRINT: (((Imm, Temp, Var, Str),),),
	Opcode.IF: (((Temp,),), ((Temp,), (Label,), (Label,))),
	Opcode.CALL: (),
	Opcode.RET: (),
	Opcode.PUSH: (),
}

# Opcodes whose first operand is the written destination.
DEST_OPCODES = frozenset({Opcode.ADD, Opcode.SUB, Opcode.MUL, Opcode.DIV, Opcode.CMP_EQ, Opcode.SET})


def _matches(shape: Shape, operands: Sequence[Operand]) -> bool:
	if len(shape) != len(operands):
		return False
	return all(isinstance(op, kinds) for kinds, op in zip(shape, operands))


# Instructions


@dataclass(frozen=True)
class Instruction:
	"""
	One IR instruction. Build through `make_instruction` (or the helpers below)
	so the operand shape is validated; the id is unique within one CFG build.
	"""

	id: int
	opcode: Opcode
	operands: Tuple[Operand, ...]
	loc: Optional[Span] = None

	@property
	def dest(self) -> Optional[Operand]:
		return self.operands[0] if self.opcode in DEST_OPCODES else None

	@property
	def sources(self) -> Tuple[Operand, ...]:
		"""Operands read by this instruction (labels excluded)."""
		if self.opcode in DEST_OPCODES:
			return self.operands[1:]
		return tuple(op for op in self.operands if not isinstance(op, Label))


def make_instruction(
	iid: int,
	opcode: Opcode,
	operands: Sequence[Operand],
	loc: Optional[Span] = None,
) -> Instruction:
	"""Build an instruction, rejecting operand kinds the opcode cannot interpret."""
	shapes = OPERAND_SHAPES[opcode]
	if not shapes:
		raise IRConstructionError(f"opcode '{opcode.value}' is reserved and cannot be emitted", loc=loc)
	ops = tuple(operands)
	if not any(_matches(shape, ops) for shape in shapes):
		kinds = ", ".join(type(op).__name__ for op in ops) or "no operands"
		raise IRConstructionError(f"'{opcode.value}' does not accept ({kinds})", loc=loc)
	return Instruction(id=iid, opcode=opcode, operands=ops, loc=loc)


def add(iid: int, dest: Temp, left: Operand, right: Operand, loc: Optional[Span] = None) -> Instruction:
	return make_instruction(iid, Opcode.ADD, (dest, left, right), loc)


def sub(iid: int, dest: Temp, left: Operand, right: Operand, loc: Optional[Span] = None) -> Instruction:
	return make_instruction(iid, Opcode.SUB, (dest, left, right), loc)


def mul(iid: int, dest: Temp, left: Operand, right: Operand, loc: Optional[Span] = None) -> Instruction:
	return make_instruction(iid, Opcode.MUL, (dest, left, right), loc)


def div(iid: int, dest: Temp, left: Operand, right: Operand, loc: Optional[Span] = None) -> Instruction:
	return make_instruction(iid, Opcode.DIV, (dest, left, right), loc)


def cmp_eq(iid: int, dest: Temp, left: Operand, right: Operand, loc: Optional[Span] = None) -> Instruction:
	return make_instruction(iid, Opcode.CMP_EQ, (dest, left, right), loc)


def set_(iid: int, dest: Operand, source: Operand, loc: Optional[Span] = None) -> Instruction:
	return make_instruction(iid, Opcode.SET, (dest, source), loc)


def print_(iid: int, value: Operand, loc: Optional[Span] = None) -> Instruction:
	return make_instruction(iid, Opcode.PRINT, (value,), loc)


def if_(
	iid: int,
	cond: Temp,
	then_label: Optional[Label] = None,
	else_label: Optional[Label] = None,
	loc: Optional[Span] = None,
) -> Instruction:
	operands: Tuple[Operand, ...] = (cond,)
	if then_label is not None or else_label is not None:
		operands = (cond, then_label, else_label)  # type: ignore[assignment]
	return make_instruction(iid, Opcode.IF, operands, loc)


__all__ = [
	"Opcode",
	"ARITH_OPCODES",
	"ARITH_SYMBOLS",
	"Operand",
	"Imm",
	"Temp",
	"Var",
	"Str",
	"Label",
	"OPERAND_SHAPES",
	"DEST_OPCODES",
	"Instruction",
	"make_instruction",
	"add",
	"sub",
	"mul",
	"div",
	"cmp_eq",
	"set_",
	"print_",
	"if_",
]
