"""
Directive splitting: locate the boundary between a fragment's header
declarations and its body without parsing the body.
"""

from .splitter import DirectiveSplit, split_directives

__all__ = ["DirectiveSplit", "split_directives"]
