# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Error taxonomy for the merge-and-compile driver.

- ParseError: a fragment's header/body boundary cannot be located (fatal).
- CompilerInvocationError: the back end failed to run at all (fatal).
- CompilationFailure: the back end ran and reported errors. This is the
  expected failure path and is normally returned as a structured
  `CompileResult`; the exception exists for callers that prefer raising.
- ArtifactIOError: workspace or output copy failed.
"""

from __future__ import annotations

from typing import Any, Sequence

from mergec.core.diagnostics import Diagnostic, format_diagnostic


class MergecError(Exception):
	"""Base class for all errors raised by mergec."""

	code = "MERGEC0000"

	def to_dict(self) -> dict[str, Any]:
		return {"code": self.code, "message": str(self)}


class ParseError(MergecError, ValueError):
	"""
	Header declarations of a fragment could not be parsed.

	Carries the fragment path and a best-effort 1-based line/column so the CLI
	can render it like any other source diagnostic.
	"""

	code = "MERGEC0002"

	def __init__(self, reason: str, *, path: str | None, line: int | None = None, column: int | None = None) -> None:
		super().__init__(f"{path or '<fragment>'}: {reason}")
		self.reason = reason
		self.path = path
		self.line = line
		self.column = column

	def to_dict(self) -> dict[str, Any]:
		return {"code": self.code, "message": self.reason, "file": self.path, "line": self.line, "column": self.column}


class CompilerInvocationError(MergecError, RuntimeError):
	"""The compiler back end could not be run (as opposed to reporting diagnostics)."""

	code = "MERGEC0003"


class ArtifactIOError(MergecError, OSError):
	"""Creating the workspace or publishing the output artifacts failed."""

	code = "MERGEC0004"


class CompilationFailure(MergecError):
	"""Compilation finished with at least one error-severity diagnostic."""

	code = "MERGEC0005"

	def __init__(self, diagnostics: Sequence[Diagnostic]) -> None:
		self.diagnostics = list(diagnostics)
		super().__init__("\n".join(format_diagnostic(d) for d in self.diagnostics))


__all__ = [
	"ArtifactIOError",
	"CompilationFailure",
	"CompilerInvocationError",
	"MergecError",
	"ParseError",
]
