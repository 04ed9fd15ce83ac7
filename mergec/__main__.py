# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
# author: Sławomir Liszniański; created: 2026-10-19
"""
CLI entrypoint for `python -m mergec`.
"""

from .mergec import main

if __name__ == "__main__":
	import sys
	sys.exit(main())
