# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Line splitting shared by the splitter and the composer.

Both sides must agree on what a line is, otherwise the range map drifts by
one line per disagreement. `\r\n`, `\r` and `\n` are line breaks; a trailing
break does not start an extra (empty) line.
"""

from __future__ import annotations

import re

_NEWLINE = re.compile(r"\r\n|\r|\n")


def split_lines(text: str) -> list[str]:
	if not text:
		return []
	lines = _NEWLINE.split(text)
	if lines[-1] == "":
		lines.pop()
	return lines


def count_line_breaks(text: str) -> int:
	return len(_NEWLINE.findall(text))


__all__ = ["count_line_breaks", "split_lines"]
