# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Common diagnostic structure shared by the back ends, the translator and the CLI.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .span import Span


@dataclass(frozen=True)
class Diagnostic:
	"""Represents a compiler diagnostic (error/warning/info)."""

	message: str
	code: str | None = None
	severity: str = "error"
	span: Span = field(default_factory=Span)  # Source location (Span() denotes unknown).
	# Set by back ends that report warnings promoted to errors (`-warnaserror`)
	# with their original severity.
	warning_as_error: bool = False
	notes: tuple[str, ...] = ()

	def __post_init__(self) -> None:
		# Normalize missing spans to the sentinel Span() so downstream tooling
		# can rely on a structured object instead of None.
		if self.span is None:  # type: ignore[unreachable]
			object.__setattr__(self, "span", Span())

	@property
	def is_failure(self) -> bool:
		"""True for diagnostics that make a compilation fail."""
		return self.severity == "error" or self.warning_as_error

	def to_dict(self) -> dict:
		return {
			"severity": self.severity,
			"code": self.code,
			"message": self.message,
			"file": self.span.file,
			"line": self.span.line,
			"column": self.span.column,
			"notes": list(self.notes),
		}


def format_diagnostic(diag: Diagnostic) -> str:
	"""
	Render one diagnostic in the MSBuild-style single-line format:

	  <file>(<line>,<column>): <severity> <code>: <message>

	The location prefix is omitted for diagnostics without a source anchor.
	"""
	loc = diag.span.format_location()
	prefix = f"{loc}: " if loc else ""
	code = f" {diag.code}" if diag.code else ""
	return f"{prefix}{diag.severity}{code}: {diag.message}"


__all__ = ["Diagnostic", "format_diagnostic"]
