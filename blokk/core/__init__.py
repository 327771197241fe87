# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""Shared plumbing: spans, diagnostics, error taxonomy and integer semantics."""

from .span import Span
from .diagnostics import Diagnostic
from .errors import (
	BlokkError,
	ParseError,
	MalformedInput,
	IRConstructionError,
	UnsupportedOperator,
	VerificationError,
	ExecutionError,
	UnresolvedReference,
	DivisionByZero,
	StepBudgetExceeded,
)
from .int64 import INT64_MIN, INT64_MAX, fits_int64, wrap_int64, arith

__all__ = [
	"Span",
	"Diagnostic",
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
	"INT64_MIN",
	"INT64_MAX",
	"fits_int64",
	"wrap_int64",
	"arith",
]
