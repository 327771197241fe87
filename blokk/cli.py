# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Command-line entry point: `blokk SOURCE [options]`.

Runs the program and writes its output to stdout. Any pipeline error becomes a
diagnostic: `file:line:col: error: message` on stderr, or with --json a single
`{"exit_code", "diagnostics", "output"}` object on stdout. Exit status is 0 on
success and 1 on any diagnostic.
"""

from __future__ import annotations

import argparse
import io
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from blokk.core.diagnostics import Diagnostic
from blokk.core.errors import BlokkError
from blokk.driver import BACKENDS, RunOptions, compile_source, run_compilation
from blokk.stage2 import cfg_to_dot, format_cfg, tree_to_dot
from blokk.stage3 import DEFAULT_MAX_STEPS

logger = logging.getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def _build_parser() -> argparse.ArgumentParser:
	parser = argparse.ArgumentParser(prog="blokk", description="Run a blokk program through its control-flow graph")
	parser.add_argument("source", type=Path, help="Path to the source file")
	parser.add_argument(
		"--backend",
		choices=BACKENDS,
		default="cfg",
		help="Execute via the CFG interpreter (default) or the tree-walking evaluator",
	)
	parser.add_argument(
		"--max-steps",
		type=int,
		default=DEFAULT_MAX_STEPS,
		help=f"Block transition budget for the CFG interpreter (default: {DEFAULT_MAX_STEPS})",
	)
	parser.add_argument("--no-verify", action="store_true", help="Skip CFG verification before running")
	parser.add_argument("--dump-cfg", action="store_true", help="Print the CFG listing to stderr before running")
	parser.add_argument("--emit-dot", type=Path, help="Write the CFG as Graphviz DOT to the given path")
	parser.add_argument("--emit-ast-dot", type=Path, help="Write the program tree as Graphviz DOT to the given path")
	parser.add_argument("--dump-strings", type=Path, help="Write the string list to the given path")
	parser.add_argument("--dump-symbols", type=Path, help="Write the symbol table to the given path")
	parser.add_argument("--json", action="store_true", help="Emit structured JSON diagnostics on stdout")
	parser.add_argument("-v", "--verbose", action="store_true", help="Log pipeline stages (INFO)")
	parser.add_argument("--log-level", choices=LOG_LEVELS, help="Explicit log level (overrides -v)")
	return parser


def _configure_logging(args: argparse.Namespace) -> None:
	level = args.log_level or ("INFO" if args.verbose else "WARNING")
	logging.basicConfig(
		level=getattr(logging, level),
		stream=sys.stderr,
		format="%(levelname)s %(name)s: %(message)s",
	)


def _report(diags: List[Diagnostic], args: argparse.Namespace, output: List[str]) -> int:
	exit_code = 1 if diags else 0
	source = str(args.source)
	if args.json:
		payload = {
			"exit_code": exit_code,
			"diagnostics": [d.to_json(source) for d in diags],
			"output": output,
		}
		print(json.dumps(payload))
	else:
		for d in diags:
			print(d.render(source), file=sys.stderr)
	return exit_code


def main(argv: Optional[List[str]] = None) -> int:
	"""Parse arguments, run the pipeline, render diagnostics; returns the exit status."""
	parser = _build_parser()
	args = parser.parse_args(argv)
	if args.max_steps < 1:
		parser.error("--max-steps must be positive")
	_configure_logging(args)

	source_path: Path = args.source
	try:
		logger.info("reading %s", source_path)
		text = source_path.read_text(encoding="utf-8")
	except OSError as err:
		return _report([Diagnostic(message=f"cannot read source: {err.strerror or err}", phase="io")], args, [])
	except UnicodeDecodeError as err:
		message = f"cannot decode source as UTF-8: {err.reason} at byte {err.start}"
		return _report([Diagnostic(message=message, phase="io")], args, [])

	options = RunOptions(backend=args.backend, max_steps=args.max_steps, verify=not args.no_verify)
	needs_cfg = options.backend == "cfg" or args.dump_cfg or args.emit_dot is not None
	# JSON mode keeps stdout for the payload; program output is collected instead.
	collected = io.StringIO()
	out = collected if args.json else sys.stdout
	try:
		compilation = compile_source(text, str(source_path), lower=needs_cfg, verify=options.verify)
		res = compilation.resolution
		if args.emit_ast_dot is not None:
			args.emit_ast_dot.write_text(tree_to_dot(compilation.tree, title=source_path.name) + "\n", encoding="utf-8")
		if args.dump_strings is not None:
			args.dump_strings.write_text(res.strings.format(), encoding="utf-8")
		if args.dump_symbols is not None:
			args.dump_symbols.write_text(res.symbols.format(), encoding="utf-8")
		if compilation.cfg is not None:
			if args.dump_cfg:
				print(format_cfg(compilation.cfg, res), file=sys.stderr)
			if args.emit_dot is not None:
				args.emit_dot.write_text(cfg_to_dot(compilation.cfg, res, title=source_path.name) + "\n", encoding="utf-8")
		run_compilation(compilation, options, out=out)
	except BlokkError as err:
		diags = [err.to_diagnostic(str(source_path))]
	except OSError as err:
		diags = [Diagnostic(message=f"cannot write output: {err.strerror or err}", phase="io")]
	else:
		diags = []
	return _report(diags, args, collected.getvalue().splitlines())


__all__ = ["main"]
