"""
Unified test infrastructure for the template compiler.

Modules:
- markup: Minimal component markup reader producing tagc node trees
- file_utils: Utilities for creating files and directories
- runtime_utils: Recording runtime helpers for compiled templates
"""

from .markup import MarkupReader, MarkupSyntaxError, read, read_fragment
from .file_utils import write
from .runtime_utils import RecordingRuntime, compile_markup

__all__ = [
    # Markup reader
    "MarkupReader", "MarkupSyntaxError", "read", "read_fragment",

    # File utilities
    "write",

    # Runtime helpers
    "RecordingRuntime", "compile_markup",
]
