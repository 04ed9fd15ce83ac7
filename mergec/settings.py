# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Configuration for merged compiles.

Two layers:
- `BuildSettings`: process-wide (cache root, compiler command, platform and
  host directories), optionally loaded from a JSON settings file.
- `CompileOptions`: per-invocation (output path, references, debug info).

The cache root is plain injected configuration: `ensure_cache_root` creates
it before first use, and it is safe to delete once no compile is running.
"""

from __future__ import annotations

import json
import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from mergec.errors import ArtifactIOError

CACHE_DIR_ENV = "MERGEC_CACHE_DIR"
SETTINGS_FORMAT = "mergec-settings"


def default_cache_root() -> Path:
	env = os.environ.get(CACHE_DIR_ENV)
	if env:
		return Path(env)
	return Path(tempfile.gettempdir()) / "mergec" / "cache"


@dataclass(frozen=True)
class BuildSettings:
	cache_root: Path = field(default_factory=default_cache_root)
	compiler: tuple[str, ...] = ("csc",)
	# Directories whose assemblies the compiler references implicitly.
	platform_dirs: tuple[Path, ...] = ()
	# Directory of the hosting runtime; its assemblies are already bound.
	host_dir: Path | None = None
	hoist_directives: bool = True


@dataclass(frozen=True)
class CompileOptions:
	output_assembly: Path
	include_debug_information: bool = False
	referenced_assemblies: tuple[Path, ...] = ()


def ensure_cache_root(settings: BuildSettings) -> Path:
	try:
		settings.cache_root.mkdir(parents=True, exist_ok=True)
	except OSError as err:
		raise ArtifactIOError(f"cannot create cache root {settings.cache_root}: {err}") from err
	return settings.cache_root


def _str_list(obj: Any, what: str) -> list[str]:
	if not isinstance(obj, list) or not all(isinstance(x, str) and x for x in obj):
		raise ValueError(f"{what} must be a list of non-empty strings")
	return list(obj)


def load_settings_json(path: Path) -> BuildSettings:
	"""
	Load build settings from a JSON file.

	Format (pinned, version 0):
	{
	  "format": "mergec-settings",
	  "version": 0,
	  "cache_root": "<dir>",            // optional
	  "compiler": ["csc"],              // optional argv prefix
	  "platform_dirs": ["<dir>", ...],  // optional
	  "host_dir": "<dir>",              // optional
	  "hoist_directives": true          // optional
	}

	Relative directories are resolved against the settings file's directory.
	"""
	obj = json.loads(path.read_text(encoding="utf-8"))
	if not isinstance(obj, dict):
		raise ValueError("settings must be a JSON object")
	if obj.get("format") != SETTINGS_FORMAT or obj.get("version") != 0:
		raise ValueError("unsupported settings format/version")

	base = path.parent

	def _dir(value: Any, what: str) -> Path:
		if not isinstance(value, str) or not value:
			raise ValueError(f"{what} must be a non-empty string")
		p = Path(value).expanduser()
		return p if p.is_absolute() else base / p

	kwargs: dict[str, Any] = {}
	if "cache_root" in obj:
		kwargs["cache_root"] = _dir(obj["cache_root"], "cache_root")
	if "compiler" in obj:
		compiler = _str_list(obj["compiler"], "compiler")
		if not compiler:
			raise ValueError("compiler must not be empty")
		kwargs["compiler"] = tuple(compiler)
	if "platform_dirs" in obj:
		kwargs["platform_dirs"] = tuple(_dir(d, "platform_dirs entry") for d in _str_list(obj["platform_dirs"], "platform_dirs"))
	if obj.get("host_dir") is not None:
		kwargs["host_dir"] = _dir(obj["host_dir"], "host_dir")
	if "hoist_directives" in obj:
		if not isinstance(obj["hoist_directives"], bool):
			raise ValueError("hoist_directives must be a boolean")
		kwargs["hoist_directives"] = obj["hoist_directives"]
	return BuildSettings(**kwargs)


__all__ = [
	"BuildSettings",
	"CACHE_DIR_ENV",
	"CompileOptions",
	"default_cache_root",
	"ensure_cache_root",
	"load_settings_json",
]
