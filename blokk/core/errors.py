# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
# author: Sławomir Liszniański; created: 2026-10-19
"""
Typed error taxonomy shared by every stage.

Construction errors (parser, builder, verifier) and execution errors
(interpreters) all derive from BlokkError. Nothing is recovered locally: the
first error aborts the stage and propagates to the driver, which renders it
via `to_diagnostic()`.
"""

from __future__ import annotations

from typing import Any, Iterable, Optional

from .diagnostics import Diagnostic
from .span import Span


class BlokkError(Exception):
	"""Base class for all pipeline errors."""

	phase = "internal"

	def __init__(self, message: str, *, loc: Any = None, notes: Optional[Iterable[str]] = None) -> None:
		super().__init__(message)
		self.message = message
		self.span = Span.from_loc(loc)
		self.notes = list(notes or [])

	def __str__(self) -> str:
		if self.span.line is None:
			return self.message
		return f"{self.message} (line {self.span.line}, column {self.span.column})"

	def to_diagnostic(self, file: Optional[str] = None) -> Diagnostic:
		return Diagnostic(
			message=self.message,
			phase=self.phase,
			severity="error",
			span=Span.from_loc(self.span, file=file),
			notes=list(self.notes),
		)


class ParseError(BlokkError):
	"""Source text does not match the grammar."""

	phase = "parser"


class MalformedInput(BlokkError):
	"""A tree node (or instruction) does not have the shape its kind requires."""

	phase = "cfg"


class IRConstructionError(MalformedInput):
	"""An instruction was built with an operand kind its opcode cannot interpret."""


class UnsupportedOperator(BlokkError):
	"""An operator or comparator symbol outside the lowered set."""

	phase = "cfg"


class VerificationError(BlokkError):
	"""A CFG violates a structural invariant."""

	phase = "verify"


class ExecutionError(BlokkError):
	"""Base class for failures while running a program."""

	phase = "run"


class UnresolvedReference(ExecutionError):
	"""A variable or temporary was read before any write reached it."""


class DivisionByZero(ExecutionError):
	"""Integer division with a zero divisor."""


class StepBudgetExceeded(ExecutionError):
	"""The interpreter took more block transitions than allowed."""


__all__ = [
	"BlokkError",
	"ParseError",
	"MalformedInput",
	"IRConstructionError",
	"UnsupportedOperator",
	"VerificationError",
	"ExecutionError",
	"UnresolvedReference",
	"DivisionByZero",
	"StepBudgetExceeded",
]
