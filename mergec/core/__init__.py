"""
mergec.core: shared diagnostic types used across stages.

Modules:
  - span: Span (file/line/column, 1-based)
  - diagnostics: Diagnostic + single-line formatting
"""

from .diagnostics import Diagnostic, format_diagnostic
from .span import Span

__all__ = ["Diagnostic", "Span", "format_diagnostic"]
