# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
# author: Sławomir Liszniański; created: 2026-10-19
"""
Merged compile driver.

Pipeline for one invocation (strictly sequential, nothing shared between
invocations):

  fragments -> compose (unit + range map)
            -> workspace: write unit, resolve references
            -> back end emit
            -> translate diagnostics / write + publish artifacts
            -> workspace removed (always)
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

from mergec.artifacts import (
	Workspace,
	missing_symbols_error,
	publish_artifacts,
	unknown_compiler_error,
	write_artifacts,
)
from mergec.backend import CommandBackend, CompilerBackend, EmitRequest, EmitResult
from mergec.compose import compose
from mergec.core.diagnostics import Diagnostic
from mergec.errors import ArtifactIOError, CompilationFailure, CompilerInvocationError
from mergec.fragments import read_fragments
from mergec.references import resolve_references
from mergec.settings import BuildSettings, CompileOptions, ensure_cache_root
from mergec.translate import translate_diagnostics

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CompileResult:
	"""
	Outcome of one merged compile.

	On success `binary_path` is the published output (and `symbols_path` the
	published symbol file when debug information was requested); on failure
	both are None and `diagnostics` holds at least one error.
	"""

	success: bool
	binary_path: Path | None = None
	symbols_path: Path | None = None
	diagnostics: tuple[Diagnostic, ...] = ()
	warnings: tuple[Diagnostic, ...] = ()

	def raise_for_failure(self) -> None:
		if not self.success:
			raise CompilationFailure(self.diagnostics)


def _emit(backend: CompilerBackend, request: EmitRequest) -> EmitResult:
	start = time.perf_counter()
	try:
		return backend.emit(request)
	except CompilerInvocationError:
		raise
	except Exception as err:
		raise CompilerInvocationError(f"compiler back end failed: {err}") from err
	finally:
		logger.info("compiler: %.3fs", time.perf_counter() - start)


def compile_fragments(
	paths: Sequence[Path | str],
	options: CompileOptions,
	*,
	settings: BuildSettings | None = None,
	backend: CompilerBackend | None = None,
	session_id: str | None = None,
) -> CompileResult:
	"""
	Compile `paths` (first = primary script) as one unit into `options.output_assembly`.

	Compilation errors come back as a failed CompileResult with diagnostics
	mapped to original file/line. ParseError, CompilerInvocationError and
	ArtifactIOError propagate; the workspace is removed in every case.
	"""
	if not paths:
		raise ValueError("no input files")
	settings = settings or BuildSettings()
	if backend is None:
		backend = CommandBackend(command=settings.compiler)

	fragments = read_fragments(paths)
	primary, imported = fragments[0], fragments[1:]
	project_name = Path(primary.path).stem

	ensure_cache_root(settings)
	with Workspace(settings.cache_root, project_name, session_id=session_id) as ws:
		unit, range_map = compose(primary, imported, hoist_directives=settings.hoist_directives)
		source_path = ws.path / primary.name
		try:
			source_path.write_text(unit.text, encoding="utf-8")
		except OSError as err:
			raise ArtifactIOError(f"cannot write composed source {source_path}: {err}") from err

		references = resolve_references(
			options.referenced_assemblies,
			platform_dirs=settings.platform_dirs,
			host_dir=settings.host_dir,
		)
		logger.debug("references: %s", ", ".join(str(r) for r in references) or "<none>")

		emitted = _emit(
			backend,
			EmitRequest(
				source_text=unit.text,
				source_path=source_path,
				project_name=project_name,
				references=tuple(references),
				debug=options.include_debug_information,
				scratch_dir=ws.path / "obj",
			),
		)

		fragment_paths = [f.path for f in fragments]

		def _translate(diags: Sequence[Diagnostic]) -> tuple[Diagnostic, ...]:
			return tuple(
				translate_diagnostics(
					diags,
					range_map,
					synthetic_path=str(source_path),
					fragment_paths=fragment_paths,
				)
			)

		if not emitted.success or emitted.binary is None:
			failures = _translate([d for d in emitted.diagnostics if d.is_failure])
			return CompileResult(success=False, diagnostics=failures or (unknown_compiler_error(emitted.log),))

		if options.include_debug_information and emitted.symbols is None:
			return CompileResult(success=False, diagnostics=(missing_symbols_error(emitted.log),))

		warnings = _translate([d for d in emitted.diagnostics if d.severity == "warning"])
		symbols = emitted.symbols if options.include_debug_information else None
		binary_path, symbols_path = write_artifacts(ws, emitted.binary, symbols)
		out_binary, out_symbols = publish_artifacts(binary_path, options.output_assembly, symbols_path)
		return CompileResult(success=True, binary_path=out_binary, symbols_path=out_symbols, warnings=warnings)


__all__ = ["CompileResult", "compile_fragments"]
