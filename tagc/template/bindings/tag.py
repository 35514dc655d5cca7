"""
TAG-привязка: вложенный компонент.

Атрибуты компонента передаются ему выражениями (статические как константы),
дети распределяются по слотам: slot="name" задаёт именованный слот,
остальные дети попадают в слот "default". Каждый слот компилируется
отдельно построителем.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Dict, List

from ...errors import InvalidTemplateError
from ...expressions.evaluator import Evaluator
from ...expressions.model import Literal
from ...markup.nodes import AnyNode, Attribute, TagNode, TextNode
from ..context import BuildContext
from ..model import Expression, Slot, TagBinding

if TYPE_CHECKING:
    from ..builder import TemplateBuilder

SLOT_ATTRIBUTE = "slot"
DEFAULT_SLOT = "default"


def constant_evaluator(value, context: BuildContext) -> Evaluator:
    """Вычислитель, всегда возвращающий одно и то же значение."""
    literal = Literal.of(value)
    return Evaluator(str(literal), literal, context.options.scope_name)


def component_attribute_expression(attribute: Attribute, context: BuildContext) -> Expression:
    if attribute.is_dynamic:
        evaluate = context.compile_attribute(attribute)
    elif attribute.is_boolean:
        evaluate = constant_evaluator(True, context)
    else:
        evaluate = constant_evaluator(attribute.value, context)
    return Expression(type=context.policy.classify(attribute.name), evaluate=evaluate, name=attribute.name)


def _slot_name(child: TagNode) -> str:
    attribute = child.get_attribute(SLOT_ATTRIBUTE)
    if attribute.is_dynamic or not attribute.value:
        raise InvalidTemplateError(
            f"Slot name of <{child.name}> must be a non-empty static string"
        )
    return attribute.value


def distribute_slots(children: List[AnyNode]) -> Dict[str, List[AnyNode]]:
    """
    Распределяет детей компонента по слотам.

    Порядок слотов определяется первым появлением, порядок детей внутри
    слота сохраняется. Текст из одних пробелов не создаёт слот default.
    """
    slots: Dict[str, List[AnyNode]] = {}
    pending: List[AnyNode] = []

    for child in children:
        if isinstance(child, TagNode) and child.has_attribute(SLOT_ATTRIBUTE):
            name = _slot_name(child)
            slots.setdefault(name, []).append(child.without_attributes(SLOT_ATTRIBUTE))
            continue

        if DEFAULT_SLOT in slots:
            slots[DEFAULT_SLOT].append(child)
        elif isinstance(child, TextNode) and child.is_blank:
            pending.append(child)
        else:
            slots[DEFAULT_SLOT] = pending + [child]
            pending = []

    return slots


def create_tag_binding(node: TagNode, selector: str, builder: TemplateBuilder) -> TagBinding:
    """Строит TAG-привязку вложенного компонента."""
    context = builder.context
    policy = context.policy

    attributes = tuple(
        component_attribute_expression(attribute, context)
        for attribute in node.attributes
        if attribute.name != policy.component_attribute
    )

    slots = []
    for slot_id, slot_children in distribute_slots(list(node.children)).items():
        template = builder.build_nodes(slot_children)
        slots.append(Slot(id=slot_id, html=template.html, bindings=template.bindings))

    return TagBinding(
        selector=selector,
        component=policy.component_name(node),
        attributes=attributes,
        slots=tuple(slots),
    )


__all__ = [
    "SLOT_ATTRIBUTE",
    "DEFAULT_SLOT",
    "constant_evaluator",
    "distribute_slots",
    "create_tag_binding",
]
