# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
# author: Sławomir Liszniański; created: 2026-10-19
"""
Parser tests: source text → stage0 tree shapes, keyword aliases, automatic
closing of trailing `if` blocks and ParseError reporting.
"""

from __future__ import annotations

import pytest

from blokk.core.errors import ParseError
from blokk.parser import parse_file, parse_source
from blokk.stage0.tree import NodeKind, TokenKind, Tree


def _statements(tree: Tree):
	program = tree[tree.root]
	assert program.kind is NodeKind.PROGRAM
	(body,) = program.children
	assert tree[body].kind is NodeKind.STATEMENT_LIST
	return [tree[nid] for nid in tree[body].children]


def test_empty_program():
	tree = parse_source("")
	assert _statements(tree) == []


def test_print_literal():
	tree = parse_source("print 42.")
	(stmt,) = _statements(tree)
	assert stmt.kind is NodeKind.PRINT
	(value,) = stmt.children
	assert tree[value].kind is NodeKind.LITERAL
	assert tree[value].token.kind is TokenKind.INT
	assert tree[value].token.value == 42


def test_print_string_strips_quotes():
	tree = parse_source('print "hello world".')
	(stmt,) = _statements(tree)
	leaf = tree[stmt.children[0]]
	assert leaf.kind is NodeKind.STRING
	assert leaf.token.value == "hello world"


def test_let_binary_precedence():
	tree = parse_source("let x be 1 + 2 * 3.")
	(stmt,) = _statements(tree)
	assert stmt.kind is NodeKind.ASSIGN
	target, value = stmt.children
	assert tree[target].token.value == "x"
	add = tree[value]
	assert add.kind is NodeKind.BINARY and add.text == "+"
	mul = tree[add.children[1]]
	assert mul.kind is NodeKind.BINARY and mul.text == "*"


def test_binary_is_left_associative():
	tree = parse_source("print 8 - 3 - 1.")
	(stmt,) = _statements(tree)
	outer = tree[stmt.children[0]]
	assert outer.text == "-"
	inner = tree[outer.children[0]]
	assert inner.kind is NodeKind.BINARY and inner.text == "-"
	assert tree[outer.children[1]].token.value == 1


def test_parenthesised_group():
	tree = parse_source("print (1 + 2) * 3.")
	(stmt,) = _statements(tree)
	mul = tree[stmt.children[0]]
	assert mul.text == "*"
	assert tree[mul.children[0]].kind is NodeKind.GROUP


def test_if_else_shape():
	tree = parse_source('if 2 is equal to 2 do the following: print "yes". else do the following: print "no". ;')
	(stmt,) = _statements(tree)
	assert stmt.kind is NodeKind.IF
	cond, then_list, else_list = stmt.children
	assert tree[cond].kind is NodeKind.CONDITION
	assert tree[cond].text == "is equal to"
	assert tree[then_list].kind is NodeKind.STATEMENT_LIST
	assert tree[else_list].kind is NodeKind.STATEMENT_LIST


def test_trailing_if_is_closed_at_end_of_input():
	tree = parse_source('if 2 is equal to 2 do the following: print "yes". else do the following: print "no".')
	(stmt,) = _statements(tree)
	assert len(stmt.children) == 3


def test_statements_after_closed_if_are_top_level():
	tree = parse_source("if 1 == 1 do the following: print 1. ; print 2.")
	kinds = [stmt.kind for stmt in _statements(tree)]
	assert kinds == [NodeKind.IF, NodeKind.PRINT]


def test_statements_after_open_if_join_its_branch():
	tree = parse_source("if 1 == 1 do the following: print 1. print 2.")
	(stmt,) = _statements(tree)
	then_list = tree[stmt.children[1]]
	assert len(then_list.children) == 2


def test_nested_if():
	tree = parse_source("if 1 == 1 do the following: if 2 == 2 do the following: print 1.")
	(outer,) = _statements(tree)
	then_list = tree[outer.children[1]]
	(inner,) = then_list.children
	assert tree[inner].kind is NodeKind.IF


def test_norwegian_keywords():
	source = 'la x være 2. dersom x er lik 2 gjør følgende: si "ja". ellers gjør følgende: si "nei".'
	tree = parse_source(source)
	assign, branch = _statements(tree)
	assert assign.kind is NodeKind.ASSIGN
	assert branch.kind is NodeKind.IF
	assert tree[branch.children[0]].text == "er lik"


@pytest.mark.parametrize(
	"comparator",
	["==", "!=", "<", "<=", ">", ">=", "is less than or equal to", "er større enn eller lik"],
)
def test_comparators(comparator):
	tree = parse_source(f"if 1 {comparator} 2 do the following: print 1.")
	(stmt,) = _statements(tree)
	assert tree[stmt.children[0]].text == comparator


def test_keywords_are_not_split_out_of_names():
	tree = parse_source("let letter be 1. print letter.")
	assign, stmt = _statements(tree)
	assert tree[assign.children[0]].token.value == "letter"
	assert tree[stmt.children[0]].token.value == "letter"


def test_comments_are_ignored():
	tree = parse_source("# leading comment\nprint 1. # trailing\n")
	assert len(_statements(tree)) == 1


def test_modulo_parses():
	tree = parse_source("print 5 % 2.")
	(stmt,) = _statements(tree)
	assert tree[stmt.children[0]].text == "%"


def test_positions_are_recorded():
	tree = parse_source("print 1.\nprint 2.", file="two.blk")
	_, second = _statements(tree)
	leaf = tree[second.children[0]]
	assert leaf.span.line == 2
	assert leaf.span.file == "two.blk"


def test_missing_terminator_reports_end_of_input():
	with pytest.raises(ParseError) as exc:
		parse_source("print 1")
	assert "end of input" in exc.value.message


def test_unexpected_character():
	with pytest.raises(ParseError) as exc:
		parse_source("print 1 @.")
	assert exc.value.span.line == 1
	assert exc.value.span.column == 9


def test_unexpected_token_lists_expected():
	with pytest.raises(ParseError) as exc:
		parse_source("let be 1.")
	assert exc.value.notes


def test_integer_literal_out_of_range():
	with pytest.raises(ParseError) as exc:
		parse_source("print 9223372036854775808.")
	assert "64 bits" in exc.value.message


def test_parse_file(tmp_path):
	path = tmp_path / "prog.blk"
	path.write_text("print 1.\n", encoding="utf-8")
	tree = parse_file(path)
	(stmt,) = _statements(tree)
	assert stmt.span.file == str(path)
