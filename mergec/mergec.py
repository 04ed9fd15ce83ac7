# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
# author: Sławomir Liszniański; created: 2026-10-19
"""
`mergec` command line: compile a multi-file script as one assembly.

  python -m mergec main.cs helpers.cs -o out/main.dll -r /libs/Newtonsoft.Json.dll --debug

Diagnostics are printed to stderr as `file(line,column): error CODE: message`
with original file/line positions; `--json` prints one JSON object with the
exit code and structured diagnostics instead.

Exit codes: 0 success, 1 compilation failed, 2 tool error (bad header
declarations, compiler not runnable, workspace/output I/O, bad settings).
"""

from __future__ import annotations

import argparse
import json
import logging
import shlex
import sys
from dataclasses import replace
from pathlib import Path
from typing import Sequence

from mergec.core.diagnostics import Diagnostic, format_diagnostic
from mergec.core.span import Span
from mergec.driver import compile_fragments
from mergec.errors import MergecError, ParseError
from mergec.fragments import select_fragments
from mergec.settings import BuildSettings, CompileOptions, load_settings_json


def _build_parser() -> argparse.ArgumentParser:
	p = argparse.ArgumentParser(prog="mergec", description="Merge script files into one compilation unit and compile it")
	p.add_argument("source", type=Path, nargs="+", help="Script file(s); the first one is the primary script")
	p.add_argument("-o", "--output", type=Path, required=True, help="Path of the output assembly")
	p.add_argument(
		"-r",
		"--reference",
		dest="references",
		action="append",
		type=Path,
		default=None,
		help="Referenced assembly (repeatable)",
	)
	p.add_argument("--debug", action="store_true", help="Emit debug information (.pdb next to the output)")
	p.add_argument("--config", type=Path, default=None, help="Path to a mergec settings JSON file")
	p.add_argument("--cache-dir", type=Path, default=None, help="Cache root for build workspaces")
	p.add_argument("--compiler", type=str, default=None, help="Compiler command line prefix (e.g. 'dotnet /path/csc.dll')")
	p.add_argument(
		"--no-hoist",
		dest="hoist",
		action="store_false",
		default=None,
		help="Do not hoist imported files' using directives into the merged unit",
	)
	p.add_argument("--json", action="store_true", help="Emit diagnostics as JSON")
	p.add_argument("-v", "--verbose", action="count", default=0, help="Log progress (-v info, -vv debug)")
	return p


def _configure_logging(verbosity: int) -> None:
	level = logging.WARNING
	if verbosity == 1:
		level = logging.INFO
	elif verbosity > 1:
		level = logging.DEBUG
	logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s", stream=sys.stderr)


def _settings_from_args(args: argparse.Namespace) -> BuildSettings:
	settings = load_settings_json(args.config) if args.config is not None else BuildSettings()
	if args.cache_dir is not None:
		settings = replace(settings, cache_root=args.cache_dir)
	if args.compiler:
		settings = replace(settings, compiler=tuple(shlex.split(args.compiler)))
	if args.hoist is not None:
		settings = replace(settings, hoist_directives=args.hoist)
	return settings


def _error_diag(err: MergecError) -> Diagnostic:
	if isinstance(err, ParseError):
		return Diagnostic(
			message=err.reason,
			code=err.code,
			span=Span(file=err.path, line=err.line, column=err.column) if err.line is not None else Span(file=err.path),
		)
	return Diagnostic(message=str(err), code=err.code)


def _report(diags: Sequence[Diagnostic], *, exit_code: int, as_json: bool) -> int:
	if as_json:
		print(json.dumps({"exit_code": exit_code, "diagnostics": [d.to_dict() for d in diags]}))
	else:
		for d in diags:
			print(format_diagnostic(d), file=sys.stderr)
	return exit_code


def main(argv: list[str] | None = None) -> int:
	parser = _build_parser()
	args = parser.parse_args(argv)
	_configure_logging(args.verbose)

	try:
		settings = _settings_from_args(args)
	except (OSError, ValueError) as err:
		return _report([Diagnostic(message=f"invalid settings: {err}", code="MERGEC0006")], exit_code=2, as_json=args.json)

	options = CompileOptions(
		output_assembly=args.output,
		include_debug_information=bool(args.debug),
		referenced_assemblies=tuple(args.references or ()),
	)
	try:
		result = compile_fragments(select_fragments(args.source), options, settings=settings)
	except MergecError as err:
		return _report([_error_diag(err)], exit_code=2, as_json=args.json)

	if not result.success:
		return _report(result.diagnostics, exit_code=1, as_json=args.json)
	return _report(result.warnings, exit_code=0, as_json=args.json)


if __name__ == "__main__":
	sys.exit(main())
