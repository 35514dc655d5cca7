"""
Слияние нескольких выражений одного текстового контекста.

Текст узла или значение атрибута может содержать несколько выражений,
перемежающихся обычным текстом: "{foo} + {bar}". Такой контекст
сворачивается в одну шаблонную строку `${foo} + ${bar}`, которая
воспроизводит интерполяцию, сохраняя пробелы и переводы строк.
"""

from __future__ import annotations

from typing import Optional, Sequence

from ..config import CompilerOptions
from ..markup.nodes import ExpressionSpan
from .scope import ScopedExpression, scopeify


def escape_template_text(text: str) -> str:
    """Экранирует литеральный фрагмент для вставки в шаблонную строку."""
    return text.replace("\\", "\\\\").replace("`", "\\`").replace("${", "\\${")


def merge_expressions(raw: str, spans: Sequence[ExpressionSpan]) -> str:
    """
    Сворачивает выражения текстового контекста в один исходный текст.

    Args:
        raw: Исходная строка контекста вместе со скобками выражений
        spans: Выражения в порядке следования

    Returns:
        Текст единственного выражения, если контекст состоит только из него,
        иначе исходный текст шаблонной строки
    """
    if len(spans) == 1:
        span = spans[0]
        if not raw[:span.start] and not raw[span.end:]:
            return span.text.strip()

    parts = ["`"]
    cursor = 0
    for span in spans:
        parts.append(escape_template_text(raw[cursor:span.start]))
        parts.append("${" + span.text.strip() + "}")
        cursor = span.end
    parts.append(escape_template_text(raw[cursor:]))
    parts.append("`")
    return "".join(parts)


def scopeify_merged(
    raw: str,
    spans: Sequence[ExpressionSpan],
    *,
    options: Optional[CompilerOptions] = None,
) -> ScopedExpression:
    """Сливает выражения контекста и переписывает результат через scope."""
    return scopeify(merge_expressions(raw, spans), options=options)


__all__ = ["escape_template_text", "merge_expressions", "scopeify_merged"]
