# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Signed 64-bit integer semantics shared by both interpreters.

Results wrap around (two's complement); division truncates toward zero.
"""

from __future__ import annotations

from typing import Any

from .errors import DivisionByZero, UnsupportedOperator

INT64_MIN = -(1 << 63)
INT64_MAX = (1 << 63) - 1


def fits_int64(value: int) -> bool:
	return INT64_MIN <= value <= INT64_MAX


def wrap_int64(value: int) -> int:
	"""Reduce an arbitrary Python int to the signed 64-bit range."""
	value &= (1 << 64) - 1
	if value > INT64_MAX:
		value -= 1 << 64
	return value


def _div(left: int, right: int) -> int:
	quotient = abs(left) // abs(right)
	if (left < 0) != (right < 0):
		quotient = -quotient
	return quotient


def arith(op: str, left: int, right: int, *, loc: Any = None) -> int:
	"""Apply `+ - * /` to two int64 values."""
	if op == "+":
		return wrap_int64(left + right)
	if op == "-":
		return wrap_int64(left - right)
	if op == "*":
		return wrap_int64(left * right)
	if op == "/":
		if right == 0:
			raise DivisionByZero(f"division by zero ({left} / 0)", loc=loc)
		# INT64_MIN / -1 wraps back to INT64_MIN.
		return wrap_int64(_div(left, right))
	raise UnsupportedOperator(f"unsupported arithmetic operator '{op}'", loc=loc)


__all__ = ["INT64_MIN", "INT64_MAX", "fits_int64", "wrap_int64", "arith"]
