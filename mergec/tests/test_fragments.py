# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

from pathlib import Path

import pytest

from mergec.errors import ArtifactIOError, ParseError
from mergec.fragments import is_mergeable, read_fragment, select_fragments


def test_generated_and_injected_files_are_filtered(tmp_path: Path) -> None:
	paths = [
		tmp_path / "main.cs",
		tmp_path / "helper.cs",
		tmp_path / "AssemblyInfo.attr.g.cs",
		tmp_path / "DBG.Inject.Helpers.cs",
		tmp_path / "util.cs",
	]
	assert select_fragments(paths) == [tmp_path / "main.cs", tmp_path / "helper.cs", tmp_path / "util.cs"]


def test_primary_is_always_kept(tmp_path: Path) -> None:
	primary = tmp_path / "Props.attr.g.cs"
	assert not is_mergeable(primary)
	assert select_fragments([primary, tmp_path / "a.cs"]) == [primary, tmp_path / "a.cs"]


def test_duplicates_are_dropped(tmp_path: Path) -> None:
	paths = [tmp_path / "main.cs", tmp_path / "a.cs", tmp_path / "." / "a.cs", tmp_path / "main.cs"]
	assert select_fragments(paths) == [tmp_path / "main.cs", tmp_path / "a.cs"]


def test_empty_selection() -> None:
	assert select_fragments([]) == []


def test_read_fragment_strips_bom(tmp_path: Path) -> None:
	path = tmp_path / "main.cs"
	path.write_bytes(b"\xef\xbb\xbfusing System;\r\nvar x = 1;\r\n")
	frag = read_fragment(path)
	assert frag.path == str(path.resolve())
	assert frag.text.startswith("using System;")
	assert frag.lines == ["using System;", "var x = 1;"]
	assert frag.name == "main.cs"


def test_missing_fragment_is_artifact_error(tmp_path: Path) -> None:
	with pytest.raises(ArtifactIOError):
		read_fragment(tmp_path / "missing.cs")


def test_undecodable_fragment_is_located_parse_error(tmp_path: Path) -> None:
	path = tmp_path / "bad.cs"
	path.write_bytes(b"\xef\xbb\xbfusing System;\nvar s = \"\xff\xfe\x80\";\n")
	with pytest.raises(ParseError) as excinfo:
		read_fragment(path)
	err = excinfo.value
	assert err.path == str(path.resolve())
	assert err.line == 2
	assert "0xff" in err.reason
