# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
# author: Sławomir Liszniański; created: 2026-10-19
"""
Compiler back-end interface plus the command-line (csc-compatible) back end.

A back end receives one composed source plus the resolved reference set and
returns either the emitted binary (and portable symbols when debug
information was requested) or its diagnostics. Diagnostics use 1-based
lines/columns; positions inside the composed document are reported with the
document's path (or an empty file name) and are mapped back by the translator.

A back end that cannot run at all raises (the driver turns any exception
into CompilerInvocationError); "ran and reported errors" is a normal
`EmitResult(success=False, ...)`.
"""

from __future__ import annotations

import re
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from mergec.core.diagnostics import Diagnostic
from mergec.core.span import Span
from mergec.errors import CompilerInvocationError


@dataclass(frozen=True)
class EmitRequest:
	source_text: str
	source_path: Path  # where the composed document was written
	project_name: str
	references: tuple[Path, ...] = ()
	debug: bool = False
	scratch_dir: Path | None = None


@dataclass(frozen=True)
class EmitResult:
	success: bool
	binary: bytes | None = None
	symbols: bytes | None = None
	diagnostics: tuple[Diagnostic, ...] = ()
	# Raw compiler output, kept for failures that produced no parseable diagnostics.
	log: str = ""


class CompilerBackend(Protocol):
	def emit(self, request: EmitRequest) -> EmitResult: ...


_LOCATED = re.compile(
	r"^(?P<file>.*?)\((?P<line>\d+),(?P<column>\d+)(?:,\d+,\d+)?\)\s*:\s*"
	r"(?P<severity>error|warning|info)\s+(?P<code>\w+)\s*:\s*(?P<message>.*)$"
)
_UNLOCATED = re.compile(
	r"^(?:[^:]*:\s*)?(?P<severity>error|warning|info)\s+(?P<code>[A-Za-z]+\d+)\s*:\s*(?P<message>.*)$"
)
# MSBuild-hosted compilers append the project file to every diagnostic line.
_PROJECT_SUFFIX = re.compile(r"\s+\[[^\]]+\.\w+proj\]$")


def parse_compiler_output(output: str) -> list[Diagnostic]:
	"""
	Parse MSBuild-format compiler output into diagnostics, in output order.

	Recognised shapes:
	  path/file.cs(12,5): error CS1002: ; expected
	  path/file.cs(12,5,12,9): warning CS0168: The variable 'x' is declared but never used
	  CSC : error CS2001: Source file 'x.cs' could not be found.
	  error CS0006: Metadata file 'lib.dll' could not be found

	Any other line (banners, summaries) is ignored.
	"""
	diags: list[Diagnostic] = []
	for raw in output.splitlines():
		line = _PROJECT_SUFFIX.sub("", raw.strip())
		if not line:
			continue
		m = _LOCATED.match(line)
		if m is not None:
			diags.append(
				Diagnostic(
					message=m.group("message").strip(),
					code=m.group("code"),
					severity=m.group("severity"),
					span=Span(file=m.group("file").strip(), line=int(m.group("line")), column=int(m.group("column"))),
				)
			)
			continue
		m = _UNLOCATED.match(line)
		if m is not None:
			diags.append(
				Diagnostic(message=m.group("message").strip(), code=m.group("code"), severity=m.group("severity"))
			)
	return diags


@dataclass(frozen=True)
class CommandBackend:
	"""
	Runs an external C# command-line compiler.

	`command` is the argv prefix (e.g. `["csc"]` or
	`["dotnet", "/usr/share/dotnet/sdk/8.0.100/Roslyn/bincore/csc.dll"]`); the
	first element is looked up on PATH unless it is an absolute path.
	"""

	command: tuple[str, ...] = ("csc",)
	extra_args: tuple[str, ...] = ()

	def _resolve_executable(self) -> str:
		if not self.command:
			raise CompilerInvocationError("no compiler command configured")
		exe = self.command[0]
		if Path(exe).is_absolute():
			if not Path(exe).exists():
				raise CompilerInvocationError(f"compiler not found: {exe}")
			return exe
		found = shutil.which(exe)
		if found is None:
			raise CompilerInvocationError(f"compiler not available on PATH: {exe}")
		return found

	def build_command(self, request: EmitRequest, out_path: Path) -> list[str]:
		cmd = [self._resolve_executable(), *self.command[1:], "-nologo", "-target:library", f"-out:{out_path}"]
		if request.debug:
			cmd += ["-debug:portable", "-optimize-"]
		else:
			cmd += ["-debug-", "-optimize+"]
		cmd += [f"-r:{ref}" for ref in request.references]
		cmd += list(self.extra_args)
		cmd.append(str(request.source_path))
		return cmd

	def emit(self, request: EmitRequest) -> EmitResult:
		scratch = request.scratch_dir or request.source_path.parent
		scratch.mkdir(parents=True, exist_ok=True)
		out_path = scratch / f"{request.project_name}.dll"
		pdb_path = out_path.with_suffix(".pdb")

		cmd = self.build_command(request, out_path)
		try:
			proc = subprocess.run(cmd, capture_output=True, text=True, cwd=scratch)
		except OSError as err:
			raise CompilerInvocationError(f"failed to run compiler: {err}") from err

		log = "\n".join(part for part in (proc.stdout.strip(), proc.stderr.strip()) if part)
		diags = tuple(parse_compiler_output(log))
		if proc.returncode != 0 or not out_path.exists():
			return EmitResult(success=False, diagnostics=diags, log=log)

		symbols = pdb_path.read_bytes() if request.debug and pdb_path.exists() else None
		return EmitResult(success=True, binary=out_path.read_bytes(), symbols=symbols, diagnostics=diags, log=log)


__all__ = [
	"CommandBackend",
	"CompilerBackend",
	"EmitRequest",
	"EmitResult",
	"parse_compiler_output",
]
