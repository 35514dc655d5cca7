"""
Построитель шаблона.

Рекурсивно обходит дерево разметки и одновременно формирует скелет HTML
с маркерами и упорядоченный список привязок. Для каждого элемента вид
привязки выбирается в порядке приоритета: EACH, IF, TAG, SIMPLE, статика.
Маркеры выдаются в порядке обхода документа, так что N-й маркер в скелете
всегда соответствует селектору N-й обнаруженной привязки.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from ..errors import InvalidTemplateError
from ..markup.html import PLACEHOLDER_COMMENT, is_void, render_close_tag, render_open_tag
from ..markup.nodes import AnyNode, TagNode, TextNode
from .bindings.conditional import IF_DIRECTIVE, create_if_binding
from .bindings.each import EACH_DIRECTIVE, KEY_DIRECTIVE, create_each_binding
from .bindings.simple import create_fragment_text_binding, create_simple_binding, has_dynamic_content
from .bindings.tag import create_tag_binding
from .context import BuildContext
from .model import EMPTY_TEMPLATE, Binding, Template

logger = logging.getLogger(__name__)


class TemplateBuilder:
    """
    Построитель скелета разметки и привязок.

    Не изменяет входное дерево: директивы удаляются через копии узлов.
    """

    def __init__(self, context: BuildContext):
        self.context = context

    def build(self, node: Optional[AnyNode]) -> Template:
        """
        Компилирует один корневой узел.

        Args:
            node: Корень шаблона или None

        Returns:
            Скелет и привязки; для None - пустой шаблон

        Raises:
            InvalidTemplateError: Если передан не узел разметки
        """
        if node is None:
            return EMPTY_TEMPLATE
        if not isinstance(node, (TagNode, TextNode)):
            raise InvalidTemplateError(f"Template root must be a markup node, got {type(node).__name__}")
        return self.build_nodes([node])

    def build_nodes(self, nodes: Iterable[AnyNode]) -> Template:
        """Компилирует фрагмент из нескольких узлов (например, содержимое слота)."""
        html: List[str] = []
        bindings: List[Binding] = []

        for index, node in enumerate(nodes):
            if isinstance(node, TextNode):
                if node.expressions:
                    bindings.append(create_fragment_text_binding(node, index, self.context))
                    html.append(PLACEHOLDER_COMMENT)
                else:
                    html.append(node.text)
            elif isinstance(node, TagNode):
                self._emit_tag(node, html, bindings)
            else:
                raise InvalidTemplateError(f"Unexpected node in template: {type(node).__name__}")

        return Template("".join(html), tuple(bindings))

    def _is_void(self, node: TagNode) -> bool:
        if is_void(node.name, self.context.options.extra_void_elements):
            return True
        return node.is_self_closing and not node.children

    def _emit_tag(self, node: TagNode, html: List[str], bindings: List[Binding]) -> None:
        if node.has_attribute(KEY_DIRECTIVE) and not node.has_attribute(EACH_DIRECTIVE):
            logger.warning("Ignoring 'key' on <%s> without 'each' directive", node.name)
            node = node.without_attributes(KEY_DIRECTIVE)

        if node.has_attribute(EACH_DIRECTIVE):
            marker, selector = self.context.allocate()
            bindings.append(create_each_binding(node, selector, self))
            self._emit_placeholder(node, marker, html)
        elif node.has_attribute(IF_DIRECTIVE):
            marker, selector = self.context.allocate()
            bindings.append(create_if_binding(node, selector, self))
            self._emit_placeholder(node, marker, html)
        elif self.context.policy.is_component(node):
            marker, selector = self.context.allocate()
            bindings.append(create_tag_binding(node, selector, self))
            self._emit_placeholder(node, marker, html)
        elif has_dynamic_content(node):
            marker, selector = self.context.allocate()
            bindings.append(create_simple_binding(node, selector, self.context))
            self._emit_element(node, marker, html, bindings)
        else:
            self._emit_element(node, None, html, bindings)

    def _emit_placeholder(self, node: TagNode, marker: str, html: List[str]) -> None:
        """Элемент, всё содержимое которого принадлежит привязке."""
        void = self._is_void(node)
        html.append(render_open_tag(node.name, marker=marker, void=void))
        if not void:
            html.append(render_close_tag(node.name))

    def _emit_element(self, node: TagNode, marker: Optional[str], html: List[str], bindings: List[Binding]) -> None:
        """Элемент со статическими атрибутами; динамический текст заменяется комментарием."""
        static_attributes = [a for a in node.attributes if not a.is_dynamic]
        void = self._is_void(node)
        html.append(render_open_tag(node.name, static_attributes, marker=marker, void=void))
        if void:
            if node.children:
                logger.warning("Dropping children of void element <%s>", node.name)
            return

        for child in node.children:
            if isinstance(child, TextNode):
                html.append(PLACEHOLDER_COMMENT if child.expressions else child.text)
            else:
                self._emit_tag(child, html, bindings)

        html.append(render_close_tag(node.name))


__all__ = ["TemplateBuilder"]
