"""
Base exceptions for compile-time errors.

All expected errors that should be reported to the user as a failed
compilation of a component must inherit from TagCompilerError.

Programming errors and bugs should NOT inherit from TagCompilerError:
they will propagate with full tracebacks.
"""

from __future__ import annotations

from typing import Optional


class TagCompilerError(Exception):
    """
    Base class for all user-facing errors of the template compiler.

    These errors indicate problems in the component source that the user
    can fix: empty or malformed expressions, invalid directives, broken
    configuration, etc.
    """
    pass


class EmptyExpressionError(TagCompilerError):
    """Исходный текст выражения пуст или состоит только из пробелов."""

    def __init__(self, source: str = ""):
        self.source = source
        super().__init__("Expression source is empty")


class ExpressionSyntaxError(TagCompilerError):
    """Синтаксическая ошибка в тексте выражения."""

    def __init__(self, message: str, position: int, source: Optional[str] = None):
        self.message = message
        self.position = position
        self.source = source
        text = f"Syntax error at position {position}: {message}"
        if source is not None:
            text += f" in expression {source!r}"
        super().__init__(text)


class ExpressionRuntimeError(TagCompilerError):
    """Ошибка при вычислении скомпилированного выражения."""
    pass


class InvalidTemplateError(TagCompilerError):
    """Корень шаблона отсутствует там, где он обязателен, или имеет неверную форму."""
    pass


class MixedExportStyleError(TagCompilerError):
    """В секции скрипта одновременно используются legacy- и modern-экспорты."""
    pass


class ConfigError(TagCompilerError):
    """Некорректная конфигурация компилятора."""
    pass


__all__ = [
    "TagCompilerError",
    "EmptyExpressionError",
    "ExpressionSyntaxError",
    "ExpressionRuntimeError",
    "InvalidTemplateError",
    "MixedExportStyleError",
    "ConfigError",
]
