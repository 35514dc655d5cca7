"""
EACH-привязка: повторение элемента для коллекции.

Директива имеет вид "item in items" или "(item, index) in items" и может
быть задана как выражение в скобках, так и обычной строкой атрибута.
Дополнительно учитываются key (ключ элемента) и if (условие для элемента).
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from ...errors import InvalidTemplateError
from ...expressions.merge import merge_expressions
from ...markup.nodes import Attribute, TagNode
from ..model import EachBinding
from .conditional import IF_DIRECTIVE

if TYPE_CHECKING:
    from ..builder import TemplateBuilder

EACH_DIRECTIVE = "each"
KEY_DIRECTIVE = "key"

_NAME = r"[A-Za-z_$][\w$]*"
_EACH_RE = re.compile(
    rf"^\s*(?:\(\s*(?P<item>{_NAME})\s*(?:,\s*(?P<index>{_NAME})\s*)?\)"
    rf"|(?P<bare_item>{_NAME})(?:\s*,\s*(?P<bare_index>{_NAME}))?)"
    rf"\s+in\s+(?P<collection>\S.*?)\s*$",
    re.DOTALL,
)


@dataclass(frozen=True)
class EachDirective:
    """Разобранная директива each."""
    item_name: str
    index_name: Optional[str]
    collection: str


def directive_source(attribute: Attribute) -> str:
    """Исходный текст директивы независимо от формы записи."""
    if attribute.is_dynamic:
        return merge_expressions(attribute.value or "", attribute.expressions)
    return attribute.value or ""


def parse_each_directive(source: str) -> EachDirective:
    """
    Разбирает директиву each.

    Raises:
        InvalidTemplateError: Если директива не соответствует форме "item in items"
    """
    match = _EACH_RE.match(source)
    if not match:
        raise InvalidTemplateError(f"Invalid each directive: {source!r}")
    return EachDirective(
        item_name=match.group("item") or match.group("bare_item"),
        index_name=match.group("index") or match.group("bare_index"),
        collection=match.group("collection"),
    )


def create_each_binding(node: TagNode, selector: str, builder: TemplateBuilder) -> EachBinding:
    """
    Строит EACH-привязку.

    Имена элемента и индекса попадают в scope при вычислении key и if,
    поэтому они переписываются через scope как обычные свободные имена.
    """
    context = builder.context
    directive = parse_each_directive(directive_source(node.get_attribute(EACH_DIRECTIVE)))

    condition = None
    condition_attribute = node.get_attribute(IF_DIRECTIVE)
    if condition_attribute is not None:
        condition = context.compile_attribute(condition_attribute)

    get_key = None
    key_attribute = node.get_attribute(KEY_DIRECTIVE)
    if key_attribute is not None:
        get_key = context.compile_attribute(key_attribute)

    evaluate = context.compile_source(directive.collection)
    template = builder.build(node.without_attributes(EACH_DIRECTIVE, IF_DIRECTIVE, KEY_DIRECTIVE))

    return EachBinding(
        selector=selector,
        evaluate=evaluate,
        item_name=directive.item_name,
        index_name=directive.index_name,
        condition=condition,
        get_key=get_key,
        template=template,
    )


__all__ = [
    "EACH_DIRECTIVE",
    "KEY_DIRECTIVE",
    "EachDirective",
    "directive_source",
    "parse_each_directive",
    "create_each_binding",
]
