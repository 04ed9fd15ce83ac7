# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
# author: Sławomir Liszniański; created: 2026-10-19
"""
mergec: multi-file script merge-and-compile driver.

Stages:
  directives: header/body split of one fragment
  compose: fragments -> one composition unit + range map
  driver: workspace, references, back end, translation, artifacts

The CLI entrypoint is `mergec.mergec:main` (`python -m mergec`).
"""

from mergec.driver import CompileResult, compile_fragments
from mergec.settings import BuildSettings, CompileOptions

__all__ = ["BuildSettings", "CompileOptions", "CompileResult", "compile_fragments"]
