# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Common diagnostic structure for the parser, builder and interpreter.

Errors raised anywhere in the pipeline convert into a Diagnostic so the
driver can render them uniformly (human-readable or JSON).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from .span import Span


@dataclass
class Diagnostic:
	"""Represents a pipeline diagnostic (error/warning/etc.)."""

	message: str
	# Pipeline phase that produced the diagnostic (parser, cfg, verify, run).
	phase: str | None = None
	severity: str = "error"
	span: Span = field(default_factory=Span)  # Span() denotes unknown location.
	notes: list[str] = field(default_factory=list)

	def __post_init__(self) -> None:
		if self.span is None:  # type: ignore[unreachable]
			self.span = Span()

	def render(self, default_file: Optional[str] = None) -> str:
		"""Render as `file:line:col: severity: message` (plus indented notes)."""
		span = Span.from_loc(self.span, file=default_file)
		lines = [f"{span}: {self.severity}: {self.message}"]
		for note in self.notes:
			lines.append(f"  note: {note}")
		return "\n".join(lines)

	def to_json(self, default_file: Optional[str] = None) -> dict:
		"""Render to a structured JSON-friendly dict."""
		return {
			"phase": self.phase,
			"message": self.message,
			"severity": self.severity,
			"file": self.span.file or default_file,
			"line": self.span.line,
			"column": self.span.column,
			"notes": list(self.notes),
		}


__all__ = ["Diagnostic"]
