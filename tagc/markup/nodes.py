"""
Узлы разобранной разметки компонента.

Определяет неизменяемую иерархию узлов, которую производит внешний парсер
разметки и которую потребляет построитель шаблонов. Узлы никогда не
изменяются на месте: все преобразования возвращают новые экземпляры.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, replace
from typing import Optional, Tuple, Union


class NodeKind(enum.Enum):
    """Виды узлов разметки."""
    TAG = "tag"
    TEXT = "text"
    EXPRESSION = "expression"


@dataclass(frozen=True)
class ExpressionSpan:
    """
    Выражение, встроенное в текст или значение атрибута.

    Attributes:
        text: Исходный текст выражения без скобок-разделителей
        start: Смещение начала (включая открывающую скобку) в исходной строке
        end: Смещение конца (после закрывающей скобки) в исходной строке
    """
    text: str
    start: int
    end: int


@dataclass(frozen=True)
class Attribute:
    """
    Атрибут тега.

    Значение None означает булев атрибут без значения (<video muted>).
    """
    name: str
    value: Optional[str] = None
    expressions: Tuple[ExpressionSpan, ...] = ()

    @property
    def is_dynamic(self) -> bool:
        return bool(self.expressions)

    @property
    def is_boolean(self) -> bool:
        return self.value is None


@dataclass(frozen=True)
class Node:
    """Базовый класс для всех узлов разметки."""

    @property
    def kind(self) -> NodeKind:
        raise NotImplementedError


@dataclass(frozen=True)
class TextNode(Node):
    """
    Текстовый узел.

    Если узел содержит встроенные выражения, он считается узлом-выражением
    (mustache) и требует TEXT-привязки.
    """
    text: str
    expressions: Tuple[ExpressionSpan, ...] = ()

    @property
    def kind(self) -> NodeKind:
        return NodeKind.EXPRESSION if self.expressions else NodeKind.TEXT

    @property
    def is_blank(self) -> bool:
        return not self.expressions and not self.text.strip()


@dataclass(frozen=True)
class TagNode(Node):
    """Элемент разметки: нативный тег или ссылка на вложенный компонент."""
    name: str
    attributes: Tuple[Attribute, ...] = ()
    children: Tuple[Union[TagNode, TextNode], ...] = ()
    is_self_closing: bool = False

    @property
    def kind(self) -> NodeKind:
        return NodeKind.TAG

    def get_attribute(self, name: str) -> Optional[Attribute]:
        for attribute in self.attributes:
            if attribute.name == name:
                return attribute
        return None

    def has_attribute(self, name: str) -> bool:
        return self.get_attribute(name) is not None

    def without_attributes(self, *names: str) -> TagNode:
        """Возвращает копию узла без указанных атрибутов."""
        kept = tuple(a for a in self.attributes if a.name not in names)
        return replace(self, attributes=kept)

    def with_children(self, children: Tuple[Union[TagNode, TextNode], ...]) -> TagNode:
        return replace(self, children=tuple(children))


AnyNode = Union[TagNode, TextNode]


def text(value: str, *spans: ExpressionSpan) -> TextNode:
    """Удобный конструктор текстового узла."""
    return TextNode(text=value, expressions=tuple(spans))


def element(
    name: str,
    *children: AnyNode,
    attributes: Tuple[Attribute, ...] = (),
    self_closing: bool = False,
) -> TagNode:
    """Удобный конструктор элемента."""
    return TagNode(
        name=name,
        attributes=tuple(attributes),
        children=tuple(children),
        is_self_closing=self_closing,
    )


__all__ = [
    "NodeKind",
    "ExpressionSpan",
    "Attribute",
    "Node",
    "TextNode",
    "TagNode",
    "AnyNode",
    "text",
    "element",
]
