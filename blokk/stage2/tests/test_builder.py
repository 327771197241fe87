# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
# author: Sławomir Liszniański; created: 2026-10-19
"""
Stage2 (tree → CFG) unit tests.

Programs are parsed, simplified and resolved, then lowered; the tests assert
on the exact blocks, instructions and edges emitted by TreeToCFG + CfgBuilder.
Malformed shapes are built by hand.
"""

from __future__ import annotations

import pytest

from blokk.core.errors import MalformedInput, UnsupportedOperator
from blokk.parser import parse_source
from blokk.stage0 import NodeKind, Token, TokenKind, Tree, program_tree, simplify_tree
from blokk.stage1 import resolve_tree
from blokk.stage2 import CfgBuilder, build_cfg, ir


def _lower(source: str):
	tree = simplify_tree(parse_source(source))
	res = resolve_tree(tree)
	return build_cfg(tree), res


def _only(cfg, bid):
	(instr,) = cfg.blocks[bid].instructions
	return instr


def test_empty_program_is_entry_then_exit():
	cfg, _ = _lower("")
	assert (cfg.entry, cfg.exit) == (0, 1)
	assert cfg.blocks[0].succs == [1]
	assert cfg.blocks[1].preds == [0]
	assert cfg.block_count == 2
	assert cfg.temp_count == 0


def test_let_addition_lowering():
	cfg, res = _lower("let x be 3 + 4. print x.")
	x = ir.Var(res.symbols.lookup("x"))
	t0, t1, t2 = ir.Temp(0), ir.Temp(1), ir.Temp(2)
	expected = [
		(ir.Opcode.SET, (t0, ir.Imm(3))),
		(ir.Opcode.SET, (t1, ir.Imm(4))),
		(ir.Opcode.ADD, (t2, t0, t1)),
		(ir.Opcode.SET, (x, t2)),
		(ir.Opcode.PRINT, (x,)),
	]
	got = [(_only(cfg, bid).opcode, _only(cfg, bid).operands) for bid in range(1, 6)]
	assert got == expected
	assert cfg.exit == 6
	assert cfg.blocks[0].instructions == [] and cfg.blocks[6].instructions == []
	for bid in range(1, 7):
		assert cfg.blocks[bid].preds == [bid - 1]
	assert cfg.temp_count == 3


def test_instruction_ids_are_unique_and_increasing():
	cfg, _ = _lower("let x be 3 + 4. print x. print 1 * 2.")
	ids = [instr.id for instr in cfg.instructions()]
	assert ids == sorted(ids)
	assert len(set(ids)) == len(ids)


@pytest.mark.parametrize("source, operand", [("print 5.", ir.Imm(5)), ('print "s".', ir.Str(0))])
def test_print_leaf_is_single_block(source, operand):
	cfg, _ = _lower(source)
	assert len(cfg) == 3
	assert _only(cfg, 1).operands == (operand,)


def test_print_compound_goes_through_temp():
	cfg, _ = _lower("print 2 * 3.")
	assert _only(cfg, 3).opcode is ir.Opcode.MUL
	assert _only(cfg, 4).operands == (ir.Temp(2),)


def test_left_operand_lowered_first():
	cfg, _ = _lower("print 10 - 4.")
	assert _only(cfg, 1).operands[1] == ir.Imm(10)
	assert _only(cfg, 2).operands[1] == ir.Imm(4)
	assert _only(cfg, 3).operands == (ir.Temp(2), ir.Temp(0), ir.Temp(1))


def test_if_else_structure():
	cfg, res = _lower('if 2 is equal to 2 do the following: print "yes". else do the following: print "no".')
	# bb1 anchor, bb2/bb3 operands, bb4 cmpeq, bb5 if, bb6 then, bb7 else, bb8 merge, bb9 exit
	assert cfg.blocks[1].instructions == []
	assert _only(cfg, 4).opcode is ir.Opcode.CMP_EQ
	if_block = cfg.blocks[5]
	cond = _only(cfg, 5)
	assert cond.opcode is ir.Opcode.IF
	assert cond.operands == (ir.Temp(2), ir.Label(6), ir.Label(7))
	assert (if_block.branch.then_target, if_block.branch.else_target) == (6, 7)
	assert if_block.succs == [6, 7]
	assert cfg.blocks[6].preds == [5] and cfg.blocks[7].preds == [5]
	assert _only(cfg, 6).operands == (ir.Str(res.strings.add("yes")),)
	assert cfg.blocks[8].instructions == []
	assert cfg.blocks[8].preds == [6, 7]
	assert cfg.exit == 9


def test_if_without_else_merges_from_if_block():
	cfg, _ = _lower("if 1 == 2 do the following: print 1.")
	if_block = cfg.blocks[5]
	assert if_block.branch.then_target == 6
	assert if_block.branch.else_target == 7
	assert cfg.blocks[7].preds == [6, 5]
	assert _only(cfg, 5).operands[1:] == (ir.Label(6), ir.Label(7))


def test_nested_if_tails_chain_through_merges():
	cfg, _ = _lower("if 1 == 1 do the following: if 2 == 2 do the following: print 1. ; print 2. ; print 3.")
	branches = [b for b in cfg if b.branch is not None]
	assert len(branches) == 2
	last_print = [b for b in cfg if b.instructions and b.instructions[0].opcode is ir.Opcode.PRINT][-1]
	assert last_print.instructions[0].operands == (ir.Imm(3),)
	assert last_print.succs == [cfg.exit]


def test_modulo_is_unsupported():
	with pytest.raises(UnsupportedOperator) as exc:
		_lower("let x be 5 % 2.")
	assert "%" in exc.value.message


@pytest.mark.parametrize("comparator", ["!=", "<", "is greater than", "er mindre enn"])
def test_non_equality_comparators_are_unsupported(comparator):
	with pytest.raises(UnsupportedOperator):
		_lower(f"if 1 {comparator} 2 do the following: print 1.")


@pytest.mark.parametrize(
	"source",
	['let x be "s".', 'print "a" + 1.', 'if "a" == 1 do the following: print 1.'],
)
def test_string_used_as_value(source):
	with pytest.raises(MalformedInput):
		_lower(source)


def test_unresolved_tree_is_rejected():
	tree = simplify_tree(parse_source("print x."))
	with pytest.raises(MalformedInput) as exc:
		build_cfg(tree)
	assert exc.value.notes


def test_wrong_arity_is_rejected():
	tree = Tree()
	lit = tree.add(NodeKind.LITERAL, token=Token(TokenKind.INT, 1))
	binary = tree.add(NodeKind.BINARY, text="+", children=[lit])
	program_tree([tree.add(NodeKind.PRINT, children=[binary])], tree)
	with pytest.raises(MalformedInput):
		build_cfg(tree)


def test_if_without_condition_is_rejected():
	tree = Tree()
	lit = tree.add(NodeKind.LITERAL, token=Token(TokenKind.INT, 1))
	body = tree.add(NodeKind.STATEMENT_LIST, children=[tree.add(NodeKind.PRINT, children=[lit])])
	program_tree([tree.add(NodeKind.IF, children=[lit, body])], tree)
	with pytest.raises(MalformedInput):
		build_cfg(tree)


def _equality(tree: Tree):
	left = tree.add(NodeKind.LITERAL, token=Token(TokenKind.INT, 1))
	right = tree.add(NodeKind.LITERAL, token=Token(TokenKind.INT, 1))
	return tree.add(NodeKind.CONDITION, text="==", children=[left, right])


@pytest.mark.parametrize("empty_slot", [1, 2])
def test_if_branch_of_nested_empty_lists_is_rejected(empty_slot):
	tree = Tree()
	cond = _equality(tree)
	lit = tree.add(NodeKind.LITERAL, token=Token(TokenKind.INT, 2))
	full = tree.add(NodeKind.STATEMENT_LIST, children=[tree.add(NodeKind.PRINT, children=[lit])])
	hollow = tree.add(NodeKind.STATEMENT_LIST, children=[tree.add(NodeKind.STATEMENT_LIST)])
	branches = [hollow, full] if empty_slot == 1 else [full, hollow]
	program_tree([tree.add(NodeKind.IF, children=[cond, *branches])], tree)
	with pytest.raises(MalformedInput, match="if branch produced no statements"):
		build_cfg(tree)


def test_nested_statement_lists_in_branch_still_lower():
	tree = Tree()
	cond = _equality(tree)
	lit = tree.add(NodeKind.LITERAL, token=Token(TokenKind.INT, 2))
	inner = tree.add(NodeKind.STATEMENT_LIST, children=[tree.add(NodeKind.PRINT, children=[lit])])
	body = tree.add(NodeKind.STATEMENT_LIST, children=[inner])
	program_tree([tree.add(NodeKind.IF, children=[cond, body])], tree)
	cfg = build_cfg(tree)
	(if_block,) = [b for b in cfg if b.instructions and b.instructions[0].opcode is ir.Opcode.IF]
	then_instr = _only(cfg, if_block.branch.then_target)
	assert (then_instr.opcode, then_instr.operands) == (ir.Opcode.PRINT, (ir.Imm(2),))
	assert if_block.branch.else_target == cfg.blocks[if_block.branch.then_target].succs[0]


@pytest.mark.parametrize(
	"kind, token",
	[
		(NodeKind.LITERAL, Token(TokenKind.INT, "abc")),
		(NodeKind.LITERAL, Token(TokenKind.INT, True)),
		(NodeKind.VARIABLE, Token(TokenKind.SYMBOL_REF, "x")),
		(NodeKind.STRING, Token(TokenKind.STRING_INDEX, 1.5)),
	],
)
def test_non_integer_token_values_are_rejected(kind, token):
	tree = Tree()
	leaf = tree.add(kind, token=token)
	program_tree([tree.add(NodeKind.PRINT, children=[leaf])], tree)
	with pytest.raises(MalformedInput, match="is not an integer"):
		build_cfg(tree)


def test_group_must_be_simplified_first():
	tree = parse_source("print (1).")
	with pytest.raises(MalformedInput):
		build_cfg(tree)


def test_builder_counters():
	b = CfgBuilder()
	assert b.entry.id == 0
	assert b.new_temp() == ir.Temp(0)
	assert b.new_temp() == ir.Temp(1)
	bid = b.emit(b.entry.id, ir.Opcode.PRINT, (ir.Imm(1),))
	cfg = b.finish(bid)
	assert cfg.temp_count == 2
	assert cfg.block_count == 3
	assert cfg.blocks[bid].succs == [cfg.exit]


def test_builder_emit_validates_operands():
	b = CfgBuilder()
	with pytest.raises(MalformedInput):
		b.emit(b.entry.id, ir.Opcode.SET, (ir.Imm(1), ir.Imm(2)))
