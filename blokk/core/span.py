# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Lightweight source span representation used by diagnostics.

A Span carries best-effort file/line/column info. Tree tokens and lark
tokens both expose `line`/`column`, so either can be turned into a Span via
`Span.from_loc`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class Span:
	"""Represents a source position (best-effort file/line/column)."""

	file: Optional[str] = None
	line: Optional[int] = None
	column: Optional[int] = None

	@classmethod
	def from_loc(cls, loc: Any, file: Optional[str] = None) -> "Span":
		"""
		Construct a Span from a token or location object.

		If `loc` is already a Span it is returned unchanged (with `file`
		filled in when it was missing).
		"""
		if loc is None:
			return cls(file=file)
		if isinstance(loc, cls):
			if loc.file is None and file is not None:
				return cls(file=file, line=loc.line, column=loc.column)
			return loc
		return cls(
			file=getattr(loc, "file", None) or file,
			line=getattr(loc, "line", None),
			column=getattr(loc, "column", None),
		)

	def __str__(self) -> str:
		line = self.line if self.line is not None else "?"
		column = self.column if self.column is not None else "?"
		return f"{self.file or '<input>'}:{line}:{column}"


__all__ = ["Span"]
