# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Fragments: the original source files of a multi-file script.

`select_fragments` is the caller-side filter applied before composition; the
composer itself never drops inputs.
"""

from __future__ import annotations

import codecs
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Sequence

from mergec.core.lines import split_lines
from mergec.errors import ArtifactIOError, ParseError

# Generated files carrying assembly-level attributes (not allowed in a script
# compilation unit).
_ATTRIBUTE_SUFFIXES = (".attr.g.cs", ".attr.g.vb")
# Debugger injection helpers; they declare extension methods, which a script
# compilation unit rejects.
_DBG_INJECT_PREFIX = "dbg.inject."


@dataclass(frozen=True)
class Fragment:
	"""One original source file, identified by its absolute path."""

	path: str
	text: str

	@property
	def name(self) -> str:
		return Path(self.path).name

	@property
	def lines(self) -> list[str]:
		return split_lines(self.text)


def read_fragment(path: Path | str) -> Fragment:
	p = Path(path).resolve()
	try:
		data = p.read_bytes()
	except OSError as err:
		raise ArtifactIOError(f"cannot read source file {p}: {err.strerror or err}") from err
	if data.startswith(codecs.BOM_UTF8):
		data = data[len(codecs.BOM_UTF8) :]
	try:
		text = data.decode("utf-8")
	except UnicodeDecodeError as err:
		line = data.count(b"\n", 0, err.start) + 1
		raise ParseError(f"source file is not valid UTF-8 (byte 0x{data[err.start]:02x})", path=str(p), line=line) from err
	return Fragment(path=str(p), text=text)


def is_mergeable(path: Path | str) -> bool:
	"""False for files that must not take part in a merged script compile."""
	name = Path(path).name.lower()
	if name.endswith(_ATTRIBUTE_SUFFIXES):
		return False
	if name.startswith(_DBG_INJECT_PREFIX):
		return False
	return True


def select_fragments(paths: Sequence[Path | str]) -> list[Path]:
	"""
	Apply the naming-convention filter to an ordered input list.

	The first path is the primary script and is always kept; imported files
	are dropped when `is_mergeable` rejects them. Duplicates of an earlier
	path are dropped as well.
	"""
	if not paths:
		return []
	primary = Path(paths[0])
	out: list[Path] = [primary]
	seen = {primary.resolve()}
	for raw in paths[1:]:
		p = Path(raw)
		if not is_mergeable(p):
			continue
		key = p.resolve()
		if key in seen:
			continue
		seen.add(key)
		out.append(p)
	return out


def read_fragments(paths: Iterable[Path | str]) -> list[Fragment]:
	return [read_fragment(p) for p in paths]


__all__ = ["Fragment", "is_mergeable", "read_fragment", "read_fragments", "select_fragments"]
