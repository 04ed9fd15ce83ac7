# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import hashlib
import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

import pytest

from mergec.backend import EmitRequest, EmitResult
from mergec.core.diagnostics import Diagnostic
from mergec.core.span import Span
from mergec.settings import BuildSettings

ERROR_TOKEN = "@@error"
WARNING_TOKEN = "@@warning"


@dataclass
class FakeBackend:
	"""
	Deterministic in-process back end.

	Every line of the composed source containing `@@error` (or `@@warning`)
	yields a diagnostic anchored at that line of the composed document,
	exactly like a compiler that ignores `#line` markers. The "binary" is a
	hash of the source, so identical inputs give identical bytes.
	"""

	report_file: str | None = ""  # "" -> empty path; None -> request.source_path
	fail_without_diagnostics: bool = False
	omit_symbols: bool = False
	raise_error: Exception | None = None
	requests: list[EmitRequest] = field(default_factory=list)
	seen_workspaces: list[Path] = field(default_factory=list)

	def emit(self, request: EmitRequest) -> EmitResult:
		self.requests.append(request)
		self.seen_workspaces.append(request.source_path.parent)
		assert request.source_path.read_text(encoding="utf-8") == request.source_text
		if self.raise_error is not None:
			raise self.raise_error
		if self.fail_without_diagnostics:
			return EmitResult(success=False, log="internal compiler error")

		file = str(request.source_path) if self.report_file is None else self.report_file
		diags: list[Diagnostic] = []
		for idx, line in enumerate(request.source_text.splitlines()):
			for token, severity, code in ((ERROR_TOKEN, "error", "CS0103"), (WARNING_TOKEN, "warning", "CS0168")):
				col = line.find(token)
				if col >= 0:
					diags.append(
						Diagnostic(
							message=f"{severity} marker",
							code=code,
							severity=severity,
							span=Span(file=file, line=idx + 1, column=col + 1),
						)
					)
		diags.append(Diagnostic(message="informational", code="CS9999", severity="info"))
		if any(d.severity == "error" for d in diags):
			return EmitResult(success=False, diagnostics=tuple(diags))

		digest = hashlib.sha256(request.source_text.encode("utf-8")).digest()
		symbols = b"PDB" + digest if request.debug and not self.omit_symbols else None
		return EmitResult(success=True, binary=b"MZ" + digest, symbols=symbols, diagnostics=tuple(diags))


@pytest.fixture
def fake_backend() -> FakeBackend:
	return FakeBackend()


@pytest.fixture
def settings(tmp_path: Path) -> BuildSettings:
	return BuildSettings(cache_root=tmp_path / "cache", compiler=("csc",))


@pytest.fixture
def write_file(tmp_path: Path) -> Callable[[str, str], Path]:
	def _write(rel: str, text: str) -> Path:
		path = tmp_path / rel
		path.parent.mkdir(parents=True, exist_ok=True)
		path.write_text(text, encoding="utf-8")
		return path

	return _write


FAKE_CSC_ARGV_ENV = "FAKE_CSC_ARGV"

# Stand-in for a csc-compatible command-line compiler: reports every `@@error`
# line as an MSBuild-format error against the file it was given, otherwise
# writes `-out:` (and a .pdb with `-debug:portable`).
_FAKE_CSC = """
import json
import os
import sys
from pathlib import Path

args = sys.argv[1:]
argv_log = os.environ.get("FAKE_CSC_ARGV")
if argv_log:
	Path(argv_log).write_text(json.dumps(args), encoding="utf-8")
print("Fake C# Compiler version 0.0.0")
out = Path(next(a[len("-out:"):] for a in args if a.startswith("-out:")))
source = Path(args[-1])
failed = False
for idx, line in enumerate(source.read_text(encoding="utf-8").splitlines()):
	col = line.find("@@error")
	if col >= 0:
		print(f"{source}({idx + 1},{col + 1}): error CS0103: The name 'x' does not exist in the current context")
		failed = True
	col = line.find("@@warning")
	if col >= 0:
		print(f"{source}({idx + 1},{col + 1}): warning CS0168: The variable 'e' is declared but never used")
if failed:
	sys.exit(1)
out.write_bytes(b"MZ" + source.read_bytes())
if "-debug:portable" in args:
	out.with_suffix(".pdb").write_bytes(b"PDB")
"""


@pytest.fixture
def fake_compiler(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
	"""Executable fake compiler script; its argv is logged to `<tmp>/csc-argv.json`."""
	if os.name == "nt":
		pytest.skip("fake compiler script needs a POSIX shebang")
	script = tmp_path / "bin" / "fakecsc"
	script.parent.mkdir(parents=True, exist_ok=True)
	script.write_text(f"#!{sys.executable}\n{_FAKE_CSC.lstrip()}", encoding="utf-8")
	script.chmod(0o755)
	monkeypatch.setenv(FAKE_CSC_ARGV_ENV, str(tmp_path / "csc-argv.json"))
	return script
