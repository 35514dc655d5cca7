"""
Проверки на границе со скриптом компонента.

Сам скрипт компилируется внешним инструментом. Здесь только проверка
стиля экспорта, которая должна прерывать компиляцию.
"""

from __future__ import annotations

import re
from typing import Iterator, Tuple

from .errors import MixedExportStyleError

_EXPORT_DEFAULT_RE = re.compile(r"\bexport\s+default\b")
_THIS_STATEMENT_RE = re.compile(r"this\s*[.\[]")


def _root_statements(script: str) -> Iterator[Tuple[int, str]]:
    """
    Возвращает (номер строки, текст) для строк, начинающихся на нулевой глубине скобок.

    Строки, шаблонные строки и комментарии при подсчёте глубины пропускаются.
    """
    depth = 0
    quote = ""
    block_comment = False

    for number, line in enumerate(script.splitlines(), start=1):
        if depth == 0 and not quote and not block_comment:
            yield number, line.strip()

        i = 0
        while i < len(line):
            ch = line[i]
            if block_comment:
                if line.startswith("*/", i):
                    block_comment = False
                    i += 1
            elif quote:
                if ch == "\\":
                    i += 1
                elif ch == quote:
                    quote = ""
            elif line.startswith("//", i):
                break
            elif line.startswith("/*", i):
                block_comment = True
                i += 1
            elif ch in "'\"`":
                quote = ch
            elif ch in "{([":
                depth += 1
            elif ch in "})]":
                depth = max(depth - 1, 0)
            i += 1

        # Обычные строки не переносятся
        if quote in ("'", '"'):
            quote = ""


def uses_export_default(script: str) -> bool:
    return any(_EXPORT_DEFAULT_RE.match(text) for _, text in _root_statements(script))


def uses_root_this(script: str) -> bool:
    return any(_THIS_STATEMENT_RE.match(text) for _, text in _root_statements(script))


def check_export_style(script: str) -> None:
    """
    Отклоняет скрипт, в котором ``export default {}`` смешан с корневыми ``this.``.

    Raises:
        MixedExportStyleError: Если используются оба стиля экспорта
    """
    if uses_export_default(script) and uses_root_this(script):
        raise MixedExportStyleError(
            'You can\'t use "export default {}" and root this statements in the same component'
        )


__all__ = ["check_export_style", "uses_export_default", "uses_root_this"]
