# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
# author: Sławomir Liszniański; created: 2026-10-19
"""
Header/body splitting of a single fragment.

A fragment is a header (`using` / `global using` / `extern alias`
declarations, plus comments and `#` script directives between them) followed
by the executable body. Only the header is parsed; the body is matched as one
opaque token by the grammar, so arbitrary code after the header never
influences the result.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path

from lark import Lark, Tree
from lark.exceptions import UnexpectedCharacters, UnexpectedInput, UnexpectedToken

from mergec.core.lines import count_line_breaks, split_lines
from mergec.errors import ParseError

_GRAMMAR_PATH = Path(__file__).with_name("grammar.lark")
_GRAMMAR_SRC = _GRAMMAR_PATH.read_text()

_PARSER = Lark(
	_GRAMMAR_SRC,
	parser="lalr",
	lexer="contextual",
	start="start",
	propagate_positions=True,
	maybe_placeholders=False,
)

# Trivia that still belongs to the last declaration's line: blanks, inline
# block comments, a trailing line comment and the line break itself.
_TRAILING_TRIVIA = re.compile(r"[ \t]*(?:/\*[^\r\n]*?\*/[ \t]*)*(?://[^\r\n]*)?(?:\r\n|\n|\r)?")

_DECL_RULES = {"using_directive", "extern_alias"}


@dataclass(frozen=True)
class DirectiveSplit:
	"""Result of splitting one fragment."""

	header: str
	body: str
	header_line_count: int
	directives: tuple[str, ...] = ()

	@property
	def header_lines(self) -> list[str]:
		return split_lines(self.header)

	@property
	def body_lines(self) -> list[str]:
		return split_lines(self.body)


def _describe(err: UnexpectedInput) -> str:
	if isinstance(err, UnexpectedToken):
		if err.token.type == "$END":
			return "unexpected end of input in header declaration"
		return f"unexpected token '{err.token}' in header declaration"
	if isinstance(err, UnexpectedCharacters):
		return f"unexpected character '{err.char}' in header declaration"
	return "malformed header declaration"


def split_directives(text: str, *, path: str | None = None) -> DirectiveSplit:
	"""
	Split `text` into header declarations and body.

	The header ends right after the last declaration's line (trailing trivia
	on that line included). `header_line_count` counts the original lines
	lying entirely before the body, so `header_line_count + 1` is the original
	line number of the first body line, even when code shares a line with the
	last declaration. Text without declarations yields an empty header.

	Raises ParseError (naming `path`) when a declaration is malformed.
	"""
	try:
		tree = _PARSER.parse(text)
	except UnexpectedInput as err:
		# lark reports -1 for positions at end of input.
		line = getattr(err, "line", None)
		column = getattr(err, "column", None)
		raise ParseError(
			_describe(err),
			path=path,
			line=line if isinstance(line, int) and line > 0 else None,
			column=column if isinstance(column, int) and column > 0 else None,
		) from err

	decls = [c for c in tree.children if isinstance(c, Tree) and c.data in _DECL_RULES]
	if not decls:
		return DirectiveSplit(header="", body=text, header_line_count=0)

	end = decls[-1].meta.end_pos
	trailing = _TRAILING_TRIVIA.match(text, end)
	pos = trailing.end() if trailing is not None else end

	header = text[:pos].rstrip()
	directives = tuple(" ".join(text[d.meta.start_pos : d.meta.end_pos].split()) for d in decls)
	return DirectiveSplit(
		header=header,
		body=text[pos:],
		header_line_count=count_line_breaks(text[:pos]),
		directives=directives,
	)


__all__ = ["DirectiveSplit", "split_directives"]
