"""
tagc - компилятор шаблонов компонентов.

Превращает дерево разметки компонента в скелет HTML с маркерами
и декларативный список привязок для исполняющей среды.
"""

from .errors import (
    TagCompilerError,
    EmptyExpressionError,
    ExpressionSyntaxError,
    ExpressionRuntimeError,
    InvalidTemplateError,
    MixedExportStyleError,
    ConfigError,
)
from .config import CompilerOptions, load_options
from .expressions import scopeify, merge_expressions
from .template import compile_template, CompiledTemplate, TemplateBuilder
from .component import check_export_style
from .version import tool_version

__all__ = [
    "TagCompilerError",
    "EmptyExpressionError",
    "ExpressionSyntaxError",
    "ExpressionRuntimeError",
    "InvalidTemplateError",
    "MixedExportStyleError",
    "ConfigError",
    "CompilerOptions",
    "load_options",
    "scopeify",
    "merge_expressions",
    "compile_template",
    "CompiledTemplate",
    "TemplateBuilder",
    "check_export_style",
    "tool_version",
]
