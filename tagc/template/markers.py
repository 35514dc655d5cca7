"""
Выдача маркеров-плейсхолдеров.

Маркер одновременно записывается атрибутом в скелет разметки (expr0)
и служит селектором привязки ([expr0]). Счётчик живёт в контексте одной
компиляции, поэтому повторная компиляция даёт те же маркеры.
"""

from __future__ import annotations


class MarkerAllocator:
    """Монотонный генератор маркеров в порядке обнаружения привязок."""

    def __init__(self, prefix: str = "expr"):
        self.prefix = prefix
        self._next = 0

    def next_marker(self) -> str:
        marker = f"{self.prefix}{self._next}"
        self._next += 1
        return marker

    @staticmethod
    def selector_for(marker: str) -> str:
        return f"[{marker}]"

    @property
    def allocated(self) -> int:
        """Сколько маркеров выдано с начала компиляции."""
        return self._next


__all__ = ["MarkerAllocator"]
