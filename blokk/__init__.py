# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
blokk: a small statement language lowered to a one-instruction-per-block
control-flow graph and executed by a graph interpreter.

Stages:
  parser  source text → program tree (lark)
  stage0  arena program tree, simplification
  stage1  symbol table, string list, name resolution
  stage2  IR, CFG builder, verifier, printers
  stage3  graph interpreter, tree-walking evaluator
"""

from blokk.driver import Compilation, RunOptions, compile_source, run_compilation, run_source

__version__ = "0.1.0"

__all__ = ["Compilation", "RunOptions", "compile_source", "run_compilation", "run_source", "__version__"]
