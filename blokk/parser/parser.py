# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
# author: Sławomir Liszniański; created: 2026-10-19
"""
lark front-end: source text → stage0 program tree.

The grammar lives next to this file (grammar.lark). Parsing is LALR with the
basic lexer so keywords are reserved everywhere; a post-lexer closes every
`if` that is still open at end of input.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator, List, Optional

from lark import Lark, Token, Tree as LarkTree
from lark.exceptions import UnexpectedCharacters, UnexpectedEOF, UnexpectedInput, UnexpectedToken

from blokk.core.errors import ParseError
from blokk.core.int64 import INT64_MAX
from blokk.core.span import Span
from blokk.stage0.tree import NodeId, NodeKind, Token as TreeToken, TokenKind, Tree, program_tree

logger = logging.getLogger(__name__)

_GRAMMAR_PATH = Path(__file__).with_name("grammar.lark")
_GRAMMAR_SRC = _GRAMMAR_PATH.read_text(encoding="utf-8")


class IfCloser:
	"""
	Post-lexer that appends the `;` closing every `if` left open at end of input.

	`if c do the following: print 1.` is therefore a complete program, and
	statements that follow an unclosed `if` belong to its last branch.
	"""

	always_accept = ()

	OPENERS = {"_IF", "_DERSOM"}
	CLOSER = "_END"

	def process(self, stream: Iterator[Token]) -> Iterator[Token]:
		depth = 0
		last: Optional[Token] = None
		for token in stream:
			if token.type in self.OPENERS:
				depth += 1
			elif token.type == self.CLOSER and depth:
				depth -= 1
			last = token
			yield token
		for _ in range(depth):
			yield Token.new_borrow_pos(self.CLOSER, ";", last)


_PARSER = Lark(
	_GRAMMAR_SRC,
	parser="lalr",
	lexer="basic",
	start="start",
	propagate_positions=True,
	maybe_placeholders=False,
	postlex=IfCloser(),
)


def _name(tree: LarkTree) -> str:
	return str(tree.data)


def _span(node: LarkTree | Token, file: Optional[str]) -> Span:
	if isinstance(node, Token):
		return Span(file=file, line=node.line, column=node.column)
	meta = node.meta
	return Span(file=file, line=getattr(meta, "line", None), column=getattr(meta, "column", None))


class _TreeBuilder:
	"""Copy a lark parse tree into the stage0 arena."""

	def __init__(self, file: Optional[str]) -> None:
		self.file = file
		self.tree = Tree()

	def build(self, root: LarkTree) -> Tree:
		statements = [self._stmt(child) for child in root.children]
		return program_tree(statements, self.tree)

	def _token(self, kind: TokenKind, value: int | str, tok: Token) -> TreeToken:
		return TreeToken(kind=kind, value=value, line=tok.line, column=tok.column)

	# --- statements ---

	def _stmt(self, node: LarkTree) -> NodeId:
		kind = _name(node)
		if kind == "print_stmt":
			(expr,) = node.children
			return self.tree.add(NodeKind.PRINT, children=[self._expr(expr)], loc=_span(node, self.file))
		if kind == "let_stmt":
			name_tok, expr = node.children
			target = self.tree.add(
				NodeKind.VARIABLE,
				token=self._token(TokenKind.IDENTIFIER, str(name_tok), name_tok),
				loc=_span(name_tok, self.file),
			)
			value = self._expr(expr)
			return self.tree.add(NodeKind.ASSIGN, children=[target, value], loc=_span(node, self.file))
		if kind == "if_stmt":
			children = [self._condition(node.children[0]), self._block(node.children[1])]
			if len(node.children) > 2:
				else_clause = node.children[2]
				children.append(self._block(else_clause.children[0]))
			return self.tree.add(NodeKind.IF, children=children, loc=_span(node, self.file))
		raise ParseError(f"unexpected statement '{kind}'", loc=_span(node, self.file))

	def _block(self, node: LarkTree) -> NodeId:
		statements = [self._stmt(child) for child in node.children]
		return self.tree.add(NodeKind.STATEMENT_LIST, children=statements, loc=_span(node, self.file))

	def _condition(self, node: LarkTree) -> NodeId:
		left, comparator, right = node.children
		text = " ".join(str(tok) for tok in comparator.children)
		return self.tree.add(
			NodeKind.CONDITION,
			text=text,
			children=[self._expr(left), self._expr(right)],
			loc=_span(comparator, self.file),
		)

	# --- expressions ---

	def _expr(self, node: LarkTree | Token) -> NodeId:
		kind = _name(node) if isinstance(node, LarkTree) else None
		if kind == "binary":
			left, op, right = node.children
			return self.tree.add(
				NodeKind.BINARY,
				text=str(op),
				children=[self._expr(left), self._expr(right)],
				loc=_span(op, self.file),
			)
		if kind == "group":
			(inner,) = node.children
			return self.tree.add(NodeKind.GROUP, children=[self._expr(inner)], loc=_span(node, self.file))
		if kind == "int_lit":
			(tok,) = node.children
			value = int(tok)
			if value > INT64_MAX:
				raise ParseError(f"integer literal {tok} does not fit in 64 bits", loc=_span(tok, self.file))
			return self.tree.add(NodeKind.LITERAL, token=self._token(TokenKind.INT, value, tok), loc=_span(tok, self.file))
		if kind == "string_lit":
			(tok,) = node.children
			text = str(tok)[1:-1]  # strip quotes
			return self.tree.add(NodeKind.STRING, token=self._token(TokenKind.STRING, text, tok), loc=_span(tok, self.file))
		if kind == "name":
			(tok,) = node.children
			return self.tree.add(
				NodeKind.VARIABLE,
				token=self._token(TokenKind.IDENTIFIER, str(tok), tok),
				loc=_span(tok, self.file),
			)
		raise ParseError(f"unexpected expression '{kind or node}'", loc=_span(node, self.file))


def _parse_error(err: UnexpectedInput, file: Optional[str]) -> ParseError:
	span = Span(file=file, line=getattr(err, "line", None), column=getattr(err, "column", None))
	if isinstance(err, UnexpectedEOF):
		return ParseError("unexpected end of input", loc=span)
	if isinstance(err, UnexpectedToken):
		if err.token.type == "$END":
			return ParseError("unexpected end of input", loc=span, notes=[f"expected one of: {', '.join(sorted(err.expected))}"])
		expected: List[str] = sorted(err.expected)
		return ParseError(f"unexpected '{err.token}'", loc=span, notes=[f"expected one of: {', '.join(expected)}"])
	if isinstance(err, UnexpectedCharacters):
		return ParseError(f"unexpected character {err.char!r}", loc=span)
	return ParseError(str(err), loc=span)


def parse_source(source: str, file: Optional[str] = None) -> Tree:
	"""Parse `source` into a stage0 tree. Raises ParseError on invalid input."""
	logger.info("parsing %s", file or "<input>")
	try:
		lark_tree = _PARSER.parse(source)
	except UnexpectedInput as err:
		raise _parse_error(err, file) from err
	tree = _TreeBuilder(file).build(lark_tree)
	logger.debug("parsed %d tree nodes", len(tree))
	return tree


__all__ = ["IfCloser", "parse_source"]
