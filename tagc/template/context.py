"""
Контекст одной компиляции шаблона.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from ..config import CompilerOptions, DEFAULT_OPTIONS
from ..expressions.evaluator import Evaluator
from ..expressions.merge import scopeify_merged
from ..expressions.scope import scopeify
from ..markup.nodes import Attribute
from .markers import MarkerAllocator
from .policy import AttributePolicy


@dataclass
class BuildContext:
    """
    Состояние, разделяемое всеми уровнями рекурсии одной компиляции.

    Создаётся заново для каждой компиляции верхнего уровня и передаётся явно.
    """
    options: CompilerOptions
    markers: MarkerAllocator
    policy: AttributePolicy

    @classmethod
    def create(cls, options: Optional[CompilerOptions] = None,
               policy: Optional[AttributePolicy] = None) -> BuildContext:
        opts = options or DEFAULT_OPTIONS
        return cls(
            options=opts,
            markers=MarkerAllocator(opts.marker_prefix),
            policy=policy or AttributePolicy.from_options(opts),
        )

    def allocate(self) -> Tuple[str, str]:
        """Выдаёт очередной маркер и соответствующий ему селектор."""
        marker = self.markers.next_marker()
        return marker, self.markers.selector_for(marker)

    def compile_source(self, source: str) -> Evaluator:
        return scopeify(source, options=self.options).evaluate

    def compile_attribute(self, attribute: Attribute) -> Evaluator:
        """
        Компилирует значение директивы или динамического атрибута.

        Значение без выражений в скобках трактуется как исходный текст
        выражения: each="item in items" эквивалентно each={item in items}.
        """
        if attribute.is_dynamic:
            return scopeify_merged(attribute.value or "", attribute.expressions, options=self.options).evaluate
        return self.compile_source(attribute.value or "")


__all__ = ["BuildContext"]
