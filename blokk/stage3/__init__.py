# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""Stage3: backends that execute a program (graph interpreter, tree walker)."""

from .interp import DEFAULT_MAX_STEPS, GraphInterpreter, run_cfg
from .treewalk import COMPARATORS, TreeWalker, evaluate_tree

__all__ = [
	"DEFAULT_MAX_STEPS",
	"GraphInterpreter",
	"run_cfg",
	"COMPARATORS",
	"TreeWalker",
	"evaluate_tree",
]
