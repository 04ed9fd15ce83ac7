# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Source span used by diagnostics.

Lines and columns are 1-based. `Span()` (no file, no line) is the sentinel
for "no source anchor"; diagnostics about references, command lines or
compiler internals carry it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Span:
	"""Best-effort file/line/column of a diagnostic."""

	file: Optional[str] = None
	line: Optional[int] = None
	column: Optional[int] = None

	@property
	def is_in_source(self) -> bool:
		"""True when the span points at a line (file may still be unknown)."""
		return self.line is not None

	def format_location(self) -> str:
		"""Render as `file(line,column)`; empty string for the sentinel span."""
		if not self.is_in_source:
			return ""
		return f"{self.file or ''}({self.line},{self.column if self.column is not None else 1})"


__all__ = ["Span"]
