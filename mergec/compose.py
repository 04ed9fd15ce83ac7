# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
# author: Sławomir Liszniański; created: 2026-10-19
"""
Source composition: N fragments -> one synthetic compilation unit.

Layout of the composed document:

  <header lines of imported fragments>      (only with hoist_directives)
  #line 1 "<primary>"
  <primary fragment, unmodified>
  #line <headers + 1> "<imported 1>"
  <body of imported 1>
  ...

The `#line` markers make compilers that honour them report original
file/line pairs directly (and put the original paths into the symbol file).
The range map recorded alongside covers every non-marker line, so positions
reported against the synthetic document can still be mapped back.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Sequence

from mergec.directives import split_directives
from mergec.fragments import Fragment
from mergec.range_map import RangeMap

logger = logging.getLogger(__name__)


def line_marker(line: int, path: str) -> str:
	"""Position-reset marker: following lines belong to `path`, starting at `line`."""
	return f'#line {line} "{path}"'


@dataclass
class CompositionUnit:
	"""The synthetic document, built by appending; owned by one invocation."""

	lines: list[str] = field(default_factory=list)
	marker_lines: list[int] = field(default_factory=list)
	range_map: RangeMap = field(default_factory=RangeMap)

	def add_marker(self, line: int, path: str) -> None:
		self.marker_lines.append(len(self.lines))
		self.lines.append(line_marker(line, path))

	def add_code(self, source_file: str, code_lines: Sequence[str], line_offset: int) -> None:
		start = len(self.lines)
		self.lines.extend(code_lines)
		self.range_map.add(start, len(self.lines), source_file, line_offset)

	@property
	def text(self) -> str:
		return "\n".join(self.lines) + "\n" if self.lines else ""


def compose(
	primary: Fragment,
	imported: Sequence[Fragment] = (),
	*,
	hoist_directives: bool = True,
) -> tuple[CompositionUnit, RangeMap]:
	"""
	Merge `primary` and `imported` (in input order) into one CompositionUnit.

	The primary fragment is never split: it is appended whole with offset 0.
	Each imported fragment contributes its body with a constant offset equal
	to its header line count. With `hoist_directives` the imported headers are
	placed at the top of the document (offset 0); without it they are dropped
	and the back end must resolve imports through the reference set alone.

	Raises ParseError when an imported fragment's header cannot be parsed.
	"""
	splits = [(frag, split_directives(frag.text, path=frag.path)) for frag in imported]
	for frag, split in splits:
		logger.debug("%s: %d header line(s): %s", frag.path, split.header_line_count, " ".join(split.directives) or "<none>")

	unit = CompositionUnit()
	if hoist_directives:
		for frag, split in splits:
			unit.add_code(frag.path, split.header_lines, 0)

	unit.add_marker(1, primary.path)
	unit.add_code(primary.path, primary.lines, 0)

	for frag, split in splits:
		unit.add_marker(split.header_line_count + 1, frag.path)
		unit.add_code(frag.path, split.body_lines, split.header_line_count)

	logger.debug(
		"composed %d fragment(s) into %d line(s), %d range(s)",
		1 + len(splits),
		len(unit.lines),
		len(unit.range_map),
	)
	return unit, unit.range_map


__all__ = ["CompositionUnit", "compose", "line_marker"]
