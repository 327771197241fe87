# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
# author: Sławomir Liszniański; created: 2026-10-19
"""
Pipeline orchestration shared by the CLI and library callers.

  compile_source: text → tree → simplify → resolve → CFG (→ verify)
  run_source:     compile_source + execute on the selected backend

Errors are not caught here; every stage raises a BlokkError subclass and the
caller decides how to render it (the CLI turns it into a Diagnostic).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, TextIO

from blokk.parser import parse_source
from blokk.stage0 import Tree, simplify_tree
from blokk.stage1 import Resolution, resolve_tree
from blokk.stage2 import CFG, build_cfg, verify_cfg
from blokk.stage3 import DEFAULT_MAX_STEPS, evaluate_tree, run_cfg

logger = logging.getLogger(__name__)

BACKENDS = ("cfg", "tree")


@dataclass
class RunOptions:
	"""Execution settings; the CLI builds one from its flags."""

	backend: str = "cfg"
	max_steps: int = DEFAULT_MAX_STEPS
	verify: bool = True

	def __post_init__(self) -> None:
		if self.backend not in BACKENDS:
			raise ValueError(f"unknown backend '{self.backend}' (expected one of {', '.join(BACKENDS)})")
		if self.max_steps < 1:
			raise ValueError("max_steps must be positive")


@dataclass
class Compilation:
	"""Everything the front-end produced for one source text."""

	tree: Tree
	resolution: Resolution
	cfg: Optional[CFG] = None


def compile_source(
	source: str,
	filename: Optional[str] = None,
	*,
	lower: bool = True,
	verify: bool = True,
) -> Compilation:
	"""
	Parse, simplify and resolve `source`; with `lower`, also build (and, with
	`verify`, check) the CFG.
	"""
	tree = parse_source(source, file=filename)
	logger.info("simplifying tree")
	simplify_tree(tree)
	logger.info("resolving names")
	resolution = resolve_tree(tree)
	cfg = None
	if lower:
		logger.info("building CFG")
		cfg = build_cfg(tree)
		if verify:
			verify_cfg(cfg)
	return Compilation(tree=tree, resolution=resolution, cfg=cfg)


def run_compilation(
	compilation: Compilation,
	options: Optional[RunOptions] = None,
	out: Optional[TextIO] = None,
) -> List[str]:
	"""Execute an already compiled program on the backend `options` selects."""
	opts = options or RunOptions()
	res = compilation.resolution
	if opts.backend == "tree":
		return evaluate_tree(compilation.tree, res.symbols, res.strings, out=out)
	cfg = compilation.cfg
	if cfg is None:
		cfg = build_cfg(compilation.tree)
		if opts.verify:
			verify_cfg(cfg)
		compilation.cfg = cfg
	return run_cfg(cfg, res.symbols, res.strings, out=out, max_steps=opts.max_steps)


def run_source(
	source: str,
	options: Optional[RunOptions] = None,
	out: Optional[TextIO] = None,
	filename: Optional[str] = None,
) -> List[str]:
	"""Compile and run `source`; returns the printed lines (also written to `out`)."""
	opts = options or RunOptions()
	compilation = compile_source(source, filename, lower=opts.backend == "cfg", verify=opts.verify)
	return run_compilation(compilation, opts, out=out)


__all__ = ["BACKENDS", "RunOptions", "Compilation", "compile_source", "run_compilation", "run_source"]
