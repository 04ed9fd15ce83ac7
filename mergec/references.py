# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Reference-assembly resolution for a merged compile.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterable, Sequence

logger = logging.getLogger(__name__)


def _norm_dir(path: Path | str) -> str:
	return os.path.normcase(os.path.normpath(str(path)))


def _is_under(path: Path, dirs: Sequence[str]) -> bool:
	parent = _norm_dir(path.parent)
	return any(parent == d for d in dirs)


def resolve_references(
	references: Iterable[Path | str],
	*,
	platform_dirs: Sequence[Path | str] = (),
	host_dir: Path | str | None = None,
) -> list[Path]:
	"""
	Filter the caller's reference list down to what must be passed to the back end.

	- relative (unresolvable) paths are dropped,
	- assemblies living directly in a platform directory are implicitly
	  available and dropped,
	- assemblies living in the host directory are already bound by the hosting
	  runtime; passing them again produces duplicate-binding diagnostics,
	- duplicates are dropped, first occurrence wins.
	"""
	platform = [_norm_dir(d) for d in platform_dirs]
	host = [_norm_dir(host_dir)] if host_dir is not None else []

	out: list[Path] = []
	seen: set[str] = set()
	for raw in references:
		ref = Path(raw)
		if not ref.is_absolute():
			logger.debug("skipping non-rooted reference %s", ref)
			continue
		if _is_under(ref, platform) or _is_under(ref, host):
			continue
		key = _norm_dir(ref)
		if key in seen:
			continue
		seen.add(key)
		out.append(ref)
	return out


__all__ = ["resolve_references"]
