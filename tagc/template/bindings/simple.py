"""
SIMPLE-привязки: динамические атрибуты и текст одного элемента.
"""

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from ...expressions.merge import scopeify_merged
from ...markup.nodes import AnyNode, TagNode, TextNode
from ..context import BuildContext
from ..model import Expression, ExpressionType, SimpleBinding


def has_dynamic_content(node: TagNode) -> bool:
    """Есть ли у элемента динамические атрибуты или текст с выражениями среди детей."""
    if any(attribute.is_dynamic for attribute in node.attributes):
        return True
    return any(isinstance(child, TextNode) and child.expressions for child in node.children)


def attribute_expressions(node: TagNode, context: BuildContext) -> List[Expression]:
    """Выражения динамических атрибутов в исходном порядке."""
    expressions: List[Expression] = []
    for attribute in node.attributes:
        if not attribute.is_dynamic:
            continue
        evaluate = context.compile_attribute(attribute)
        expressions.append(Expression(
            type=context.policy.classify(attribute.name),
            evaluate=evaluate,
            name=attribute.name,
        ))
    return expressions


def text_expression(node: TextNode, index: int, context: BuildContext) -> Expression:
    """TEXT-выражение узла: все выражения текста сливаются в одно."""
    scoped = scopeify_merged(node.text, node.expressions, options=context.options)
    return Expression(type=ExpressionType.TEXT, evaluate=scoped.evaluate, child_node_index=index)


def text_expressions(children: Sequence[AnyNode], context: BuildContext) -> List[Expression]:
    return [
        text_expression(child, index, context)
        for index, child in enumerate(children)
        if isinstance(child, TextNode) and child.expressions
    ]


def create_simple_binding(node: TagNode, selector: Optional[str], context: BuildContext) -> SimpleBinding:
    """
    Строит SIMPLE-привязку элемента.

    Args:
        node: Элемент с динамическим содержимым
        selector: Селектор маркера элемента
        context: Контекст компиляции

    Returns:
        Привязка с выражениями атрибутов (в исходном порядке), затем текстов
    """
    expressions: Tuple[Expression, ...] = tuple(
        attribute_expressions(node, context) + text_expressions(node.children, context)
    )
    return SimpleBinding(selector=selector, expressions=expressions)


def create_fragment_text_binding(node: TextNode, index: int, context: BuildContext) -> SimpleBinding:
    """Текст с выражениями в корне фрагмента: привязка без селектора."""
    return SimpleBinding(selector=None, expressions=(text_expression(node, index, context),))


__all__ = [
    "has_dynamic_content",
    "attribute_expressions",
    "text_expression",
    "create_simple_binding",
    "create_fragment_text_binding",
]
