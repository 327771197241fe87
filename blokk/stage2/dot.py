# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""Graphviz DOT export for the CFG and the program tree."""

from __future__ import annotations

from typing import List, Optional

from blokk.stage0.tree import Tree
from blokk.stage1.resolve import Resolution
from .cfg import CFG
from .printer import format_instr


def _escape(text: str) -> str:
	return text.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")


def cfg_to_dot(cfg: CFG, resolution: Optional[Resolution] = None, title: Optional[str] = None) -> str:
	"""Return a DOT digraph with one box per block; branch edges are labelled."""
	lines = ["digraph CFG {"]
	if title:
		lines.append(f'  label="{_escape(title)}";')
	lines.append("  node [shape=box, fontname=monospace, fontsize=10];")
	for block in cfg:
		body = [f"bb{block.id}"]
		if block.id == cfg.entry:
			body.append("entry")
		elif block.id == cfg.exit:
			body.append("exit")
		body.extend(format_instr(instr, resolution) for instr in block.instructions)
		color = ""
		if block.id == cfg.entry:
			color = ', style=filled, fillcolor="#ccffcc"'
		elif block.id == cfg.exit:
			color = ', style=filled, fillcolor="#ffcccc"'
		lines.append(f'  bb{block.id} [label="{_escape(chr(10).join(body))}"{color}];')
	for block in cfg:
		for succ in block.succs:
			style = ""
			if block.branch is not None and succ == block.branch.then_target:
				style = ' [label="then", color=green, fontcolor=green]'
			elif block.branch is not None and succ == block.branch.else_target:
				style = ' [label="else", color=red, fontcolor=red]'
			lines.append(f"  bb{block.id} -> bb{succ}{style};")
	lines.append("}")
	return "\n".join(lines)


def tree_to_dot(tree: Tree, title: Optional[str] = None) -> str:
	"""Return a DOT digraph of the nodes reachable from the tree root."""
	lines: List[str] = ["digraph Tree {"]
	if title:
		lines.append(f'  label="{_escape(title)}";')
	lines.append("  node [shape=ellipse, fontname=monospace, fontsize=10];")
	if tree.root < 0:
		lines.append("}")
		return "\n".join(lines)
	for nid in tree.walk():
		node = tree[nid]
		label = node.kind.value
		if node.text is not None:
			label += f"\n{node.text}"
		if node.token is not None:
			label += f"\n{node.token.value!r}"
		lines.append(f'  n{nid} [label="{_escape(label)}"];')
		for child in node.children:
			lines.append(f"  n{nid} -> n{child};")
	lines.append("}")
	return "\n".join(lines)


__all__ = ["cfg_to_dot", "tree_to_dot"]
