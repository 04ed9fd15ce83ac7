# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Build workspace lifecycle and artifact placement.

Workspace layout: `<cache_root>/.build/<session id>/<project>/`. The session
id is unique per invocation so concurrent compiles of the same script never
share a directory. The whole session directory is removed on exit, whatever
the outcome; removal problems are logged and never raised.
"""

from __future__ import annotations

import logging
import os
import secrets
import shutil
from pathlib import Path

from mergec.core.diagnostics import Diagnostic
from mergec.errors import ArtifactIOError

logger = logging.getLogger(__name__)

BINARY_SUFFIX = ".dll"
SYMBOLS_SUFFIX = ".pdb"
UNKNOWN_ERROR_CODE = "MERGEC0001"
MISSING_SYMBOLS_CODE = "MERGEC0007"


class Workspace:
	"""Disposable per-invocation build directory (use as a context manager)."""

	def __init__(self, cache_root: Path, project_name: str, *, session_id: str | None = None) -> None:
		self.session_id = session_id or secrets.token_hex(8)
		self.root = Path(cache_root) / ".build" / self.session_id
		self.path = self.root / project_name
		self.project_name = project_name

	def __enter__(self) -> "Workspace":
		try:
			if self.root.exists():
				shutil.rmtree(self.root)
			self.path.mkdir(parents=True)
		except OSError as err:
			raise ArtifactIOError(f"cannot create build workspace {self.path}: {err}") from err
		logger.debug("workspace %s", self.path)
		return self

	def __exit__(self, exc_type, exc, tb) -> bool:
		self.remove()
		return False

	def remove(self) -> bool:
		try:
			if self.root.exists():
				shutil.rmtree(self.root)
		except OSError as err:
			logger.warning("failed to remove build workspace %s: %s", self.root, err)
			return False
		return True


def write_artifacts(
	workspace: Workspace,
	binary: bytes,
	symbols: bytes | None = None,
) -> tuple[Path, Path | None]:
	"""Write `<project>.dll` (and `<project>.pdb`) into the workspace."""
	binary_path = workspace.path / f"{workspace.project_name}{BINARY_SUFFIX}"
	symbols_path = binary_path.with_suffix(SYMBOLS_SUFFIX) if symbols is not None else None
	try:
		binary_path.write_bytes(binary)
		if symbols_path is not None:
			symbols_path.write_bytes(symbols)  # type: ignore[arg-type]
	except OSError as err:
		raise ArtifactIOError(f"cannot write build output in {workspace.path}: {err}") from err
	return binary_path, symbols_path


def _replace_copy(src: Path, dst: Path) -> None:
	# Copy next to the destination first so readers never see a half-written file.
	dst.parent.mkdir(parents=True, exist_ok=True)
	tmp = dst.with_name(f".{dst.name}.{secrets.token_hex(4)}.tmp")
	try:
		shutil.copyfile(src, tmp)
		os.replace(tmp, dst)
	finally:
		if tmp.exists():
			tmp.unlink()


def publish_artifacts(
	binary_path: Path,
	output_path: Path,
	symbols_path: Path | None = None,
) -> tuple[Path, Path | None]:
	"""
	Copy the built binary (and symbols) to the caller's output path, overwriting.

	The symbol file lands next to the output with the `.pdb` suffix; without
	symbols, a stale `.pdb` left there by an earlier build is removed. If any
	step fails, files already published by this call are removed and
	ArtifactIOError is raised.
	"""
	published: list[Path] = []
	out_symbols = output_path.with_suffix(SYMBOLS_SUFFIX) if symbols_path is not None else None
	try:
		_replace_copy(binary_path, output_path)
		published.append(output_path)
		if symbols_path is not None and out_symbols is not None:
			_replace_copy(symbols_path, out_symbols)
			published.append(out_symbols)
		else:
			# Symbols from an earlier debug build no longer match the binary.
			output_path.with_suffix(SYMBOLS_SUFFIX).unlink(missing_ok=True)
	except OSError as err:
		for p in published:
			try:
				p.unlink()
			except OSError as cleanup_err:
				logger.warning("failed to remove partial output %s: %s", p, cleanup_err)
		raise ArtifactIOError(f"cannot copy build output to {output_path}: {err}") from err
	return output_path, out_symbols


def _log_tail(log: str) -> tuple[str, ...]:
	return tuple(line for line in log.strip().splitlines()[-5:] if line.strip())


def unknown_compiler_error(log: str = "") -> Diagnostic:
	"""Stand-in diagnostic for a failed compile that reported nothing."""
	return Diagnostic(message="Unknown compiler error", code=UNKNOWN_ERROR_CODE, severity="error", notes=_log_tail(log))


def missing_symbols_error(log: str = "") -> Diagnostic:
	"""Debug information was requested but the back end produced no symbol file."""
	return Diagnostic(
		message="Compiler produced no debug symbols",
		code=MISSING_SYMBOLS_CODE,
		severity="error",
		notes=_log_tail(log),
	)


__all__ = [
	"BINARY_SUFFIX",
	"MISSING_SYMBOLS_CODE",
	"SYMBOLS_SUFFIX",
	"UNKNOWN_ERROR_CODE",
	"Workspace",
	"missing_symbols_error",
	"publish_artifacts",
	"unknown_compiler_error",
	"write_artifacts",
]
