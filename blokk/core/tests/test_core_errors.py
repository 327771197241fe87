# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Core plumbing tests: spans, diagnostics rendering, error phases and the
shared int64 arithmetic.
"""

from __future__ import annotations

import pytest

from blokk.core import (
	INT64_MAX,
	INT64_MIN,
	Diagnostic,
	DivisionByZero,
	IRConstructionError,
	MalformedInput,
	ParseError,
	Span,
	StepBudgetExceeded,
	UnresolvedReference,
	UnsupportedOperator,
	VerificationError,
	arith,
	fits_int64,
	wrap_int64,
)
from blokk.stage0.tree import Token, TokenKind


def test_span_from_token_and_str():
	tok = Token(TokenKind.INT, 3, line=2, column=5)
	span = Span.from_loc(tok, file="prog.blk")
	assert span == Span(file="prog.blk", line=2, column=5)
	assert str(span) == "prog.blk:2:5"
	assert str(Span()) == "<input>:?:?"


def test_span_from_span_fills_missing_file():
	span = Span(line=1, column=1)
	assert Span.from_loc(span, file="a.blk").file == "a.blk"
	assert Span.from_loc(Span(file="b.blk"), file="a.blk").file == "b.blk"


def test_diagnostic_render_and_json():
	diag = Diagnostic(message="boom", phase="run", span=Span(line=3, column=7), notes=["hint"])
	assert diag.render("x.blk") == "x.blk:3:7: error: boom\n  note: hint"
	assert diag.to_json("x.blk") == {
		"phase": "run",
		"message": "boom",
		"severity": "error",
		"file": "x.blk",
		"line": 3,
		"column": 7,
		"notes": ["hint"],
	}


@pytest.mark.parametrize(
	"cls, phase",
	[
		(ParseError, "parser"),
		(MalformedInput, "cfg"),
		(IRConstructionError, "cfg"),
		(UnsupportedOperator, "cfg"),
		(VerificationError, "verify"),
		(UnresolvedReference, "run"),
		(DivisionByZero, "run"),
		(StepBudgetExceeded, "run"),
	],
)
def test_error_phases(cls, phase):
	err = cls("msg", loc=Span(line=1, column=2))
	diag = err.to_diagnostic("f.blk")
	assert diag.phase == phase
	assert diag.span == Span(file="f.blk", line=1, column=2)
	assert str(err) == "msg (line 1, column 2)"


def test_ir_construction_error_is_malformed_input():
	assert issubclass(IRConstructionError, MalformedInput)


def test_wrap_int64():
	assert wrap_int64(INT64_MAX + 1) == INT64_MIN
	assert wrap_int64(INT64_MIN - 1) == INT64_MAX
	assert wrap_int64(-5) == -5
	assert fits_int64(INT64_MAX)
	assert not fits_int64(INT64_MAX + 1)


@pytest.mark.parametrize(
	"op, left, right, expected",
	[
		("+", 3, 4, 7),
		("-", 3, 4, -1),
		("*", -3, 4, -12),
		("/", 7, 2, 3),
		("/", -7, 2, -3),
		("/", 7, -2, -3),
		("/", -7, -2, 3),
		("+", INT64_MAX, 1, INT64_MIN),
		("*", INT64_MAX, 2, -2),
		("/", INT64_MIN, -1, INT64_MIN),
	],
)
def test_arith(op, left, right, expected):
	assert arith(op, left, right) == expected


def test_arith_division_by_zero():
	with pytest.raises(DivisionByZero):
		arith("/", 1, 0)


def test_arith_unknown_operator():
	with pytest.raises(UnsupportedOperator):
		arith("%", 5, 2)
