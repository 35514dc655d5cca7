"""
IF-привязка: условный показ элемента.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ...markup.nodes import TagNode
from ..model import IfBinding

if TYPE_CHECKING:
    from ..builder import TemplateBuilder

IF_DIRECTIVE = "if"


def create_if_binding(node: TagNode, selector: str, builder: TemplateBuilder) -> IfBinding:
    """
    Строит IF-привязку.

    Значение условия не приводится к bool: исполняющая среда сама проверяет
    его истинность. Вложенный шаблон компилируется из узла без директивы if.
    """
    evaluate = builder.context.compile_attribute(node.get_attribute(IF_DIRECTIVE))
    template = builder.build(node.without_attributes(IF_DIRECTIVE))
    return IfBinding(selector=selector, evaluate=evaluate, template=template)


__all__ = ["IF_DIRECTIVE", "create_if_binding"]
