# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Diagnostic translation: positions in the composed document -> original fragments.

Convention: diagnostics carry 1-based lines, the range map is 0-based. A
diagnostic is translated when it is anchored in the composed document, i.e.
its file is empty/unknown or the composed document's full path. Positions
reported against any other file (a compiler honouring the `#line`
markers) are kept, except that a bare file name is expanded to the full
fragment path it names.
"""

from __future__ import annotations

import os
from dataclasses import replace
from pathlib import Path
from typing import Iterable, Sequence

from mergec.core.diagnostics import Diagnostic
from mergec.core.span import Span
from mergec.range_map import RangeMap


def _same_path(a: str, b: str) -> bool:
	return os.path.normcase(os.path.normpath(a)) == os.path.normcase(os.path.normpath(b))


def _expand_file_name(file: str, fragment_paths: Sequence[str]) -> str:
	if not file or os.path.dirname(file):
		return file
	for path in fragment_paths:
		if Path(path).name == file:
			return path
	return file


def translate_span(
	span: Span,
	range_map: RangeMap,
	*,
	synthetic_path: str,
	fragment_paths: Sequence[str] = (),
) -> Span:
	if not span.is_in_source:
		return span
	file = span.file or ""
	in_document = not file or _same_path(file, synthetic_path)
	if not in_document:
		return replace(span, file=_expand_file_name(file, fragment_paths))
	hit = range_map.translate(span.line - 1)
	if hit is None:
		return span
	source_file, line = hit
	return replace(span, file=source_file, line=line + 1)


def translate_diagnostics(
	diagnostics: Iterable[Diagnostic],
	range_map: RangeMap,
	*,
	synthetic_path: str,
	fragment_paths: Sequence[str] = (),
) -> list[Diagnostic]:
	"""Return a new list with every source anchor rewritten; order is preserved."""
	out: list[Diagnostic] = []
	for diag in diagnostics:
		span = translate_span(diag.span, range_map, synthetic_path=synthetic_path, fragment_paths=fragment_paths)
		out.append(diag if span is diag.span else replace(diag, span=span))
	return out


__all__ = ["translate_diagnostics", "translate_span"]
