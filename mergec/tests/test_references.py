# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

from pathlib import Path

from mergec.references import resolve_references


def test_platform_and_host_assemblies_are_dropped(tmp_path: Path) -> None:
	platform = tmp_path / "dotnet" / "shared"
	host = tmp_path / "host"
	refs = [
		platform / "System.Runtime.dll",
		host / "Host.Api.dll",
		tmp_path / "libs" / "Newtonsoft.Json.dll",
		platform / "nested" / "Other.dll",
	]
	out = resolve_references(refs, platform_dirs=[platform], host_dir=host)
	assert out == [tmp_path / "libs" / "Newtonsoft.Json.dll", platform / "nested" / "Other.dll"]


def test_relative_and_duplicate_references_are_dropped(tmp_path: Path) -> None:
	lib = tmp_path / "libs" / "A.dll"
	out = resolve_references([Path("B.dll"), lib, str(lib), tmp_path / "libs" / "." / "A.dll"])
	assert out == [lib]


def test_order_is_preserved(tmp_path: Path) -> None:
	refs = [tmp_path / "z.dll", tmp_path / "a.dll", tmp_path / "m.dll"]
	assert resolve_references(refs) == refs
