# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Source front-end: lark grammar + conversion into the stage0 arena tree.
"""

from __future__ import annotations

from pathlib import Path

from blokk.stage0.tree import Tree
from .parser import IfCloser, parse_source


def parse_file(path: Path) -> Tree:
	"""Read and parse a source file; spans carry the file path."""
	return parse_source(path.read_text(encoding="utf-8"), file=str(path))


__all__ = ["IfCloser", "parse_source", "parse_file"]
