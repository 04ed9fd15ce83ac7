# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Interval index from synthetic-document lines back to original fragments.

All line numbers here are 0-based indices into the composed document (and
0-based original lines on the way out); the 1-based convention used by
diagnostics is applied by the translator.
"""

from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass, field
from typing import Iterator


@dataclass(frozen=True)
class RangeEntry:
	"""
	Lines `[start, end)` of the composed document came from `source_file`.

	Synthetic line L in the range maps to original line `L - start + line_offset`.
	"""

	start: int
	end: int
	source_file: str
	line_offset: int

	def __contains__(self, line: object) -> bool:
		return isinstance(line, int) and self.start <= line < self.end


@dataclass
class RangeMap:
	"""Non-overlapping ranges, appended in increasing line order."""

	entries: list[RangeEntry] = field(default_factory=list)
	_starts: list[int] = field(default_factory=list, repr=False)

	def add(self, start: int, end: int, source_file: str, line_offset: int) -> RangeEntry | None:
		"""Record `[start, end)`; empty ranges are not recorded."""
		if end <= start:
			return None
		if self.entries and start < self.entries[-1].end:
			raise ValueError(
				f"range [{start}, {end}) overlaps or precedes [{self.entries[-1].start}, {self.entries[-1].end})"
			)
		entry = RangeEntry(start=start, end=end, source_file=source_file, line_offset=line_offset)
		self.entries.append(entry)
		self._starts.append(start)
		return entry

	def lookup(self, line: int) -> RangeEntry | None:
		idx = bisect_right(self._starts, line) - 1
		if idx < 0:
			return None
		entry = self.entries[idx]
		return entry if line in entry else None

	def translate(self, line: int) -> tuple[str, int] | None:
		"""
		Map a synthetic line to `(source_file, original_line)`.

		None means the line is not owned by any fragment (a marker line or a
		position past the end); callers keep the position as reported.
		"""
		entry = self.lookup(line)
		if entry is None:
			return None
		return entry.source_file, line - entry.start + entry.line_offset

	def __iter__(self) -> Iterator[RangeEntry]:
		return iter(self.entries)

	def __len__(self) -> int:
		return len(self.entries)


__all__ = ["RangeEntry", "RangeMap"]
