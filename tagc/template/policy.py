"""
Политика классификации атрибутов и тегов.

Какие атрибуты считаются обработчиками событий, какие привязываются к живому
значению контрола формы, и какой тег является вложенным компонентом,
определяется исполняющей средой. Политика собрана в один заменяемый объект.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import FrozenSet

from ..config import CompilerOptions
from ..markup.html import is_native
from ..markup.nodes import TagNode
from .model import ExpressionType


@dataclass(frozen=True)
class AttributePolicy:
    event_prefix: str = "on"
    value_attributes: FrozenSet[str] = frozenset({"value"})
    component_attribute: str = "is"
    # Дополнительные нативные теги (в нижнем регистре)
    native_elements: FrozenSet[str] = frozenset()

    @classmethod
    def from_options(cls, options: CompilerOptions) -> AttributePolicy:
        return cls(
            event_prefix=options.event_prefix,
            value_attributes=options.value_attributes,
            component_attribute=options.component_attribute,
            native_elements=frozenset(name.lower() for name in options.extra_void_elements),
        )

    def is_event(self, name: str) -> bool:
        return name.startswith(self.event_prefix) and len(name) > len(self.event_prefix)

    def classify(self, name: str) -> ExpressionType:
        """Определяет вид выражения для динамического атрибута."""
        if self.is_event(name):
            return ExpressionType.EVENT
        if name in self.value_attributes:
            return ExpressionType.VALUE
        return ExpressionType.ATTRIBUTE

    def is_component(self, node: TagNode) -> bool:
        """Тег является компонентом, если это не HTML/SVG-элемент или у него есть is="..."."""
        if node.has_attribute(self.component_attribute):
            return True
        return not is_native(node.name, self.native_elements)

    def component_name(self, node: TagNode) -> str:
        attribute = node.get_attribute(self.component_attribute)
        if attribute is not None and attribute.value and not attribute.is_dynamic:
            return attribute.value
        return node.name


__all__ = ["AttributePolicy"]
