"""
Модели скомпилированного шаблона.

Содержит дескрипторы выражений и привязок (SIMPLE, IF, EACH, TAG),
слоты вложенных компонентов и итоговый шаблон (скелет разметки + привязки).
Все модели неизменяемы после построения.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import NamedTuple, Optional, Tuple

from ..expressions.evaluator import Evaluator


class ExpressionType(Enum):
    """Виды выражений внутри SIMPLE- и TAG-привязок."""
    ATTRIBUTE = "attribute"
    VALUE = "value"
    EVENT = "event"
    TEXT = "text"


class BindingType(Enum):
    """Виды привязок."""
    SIMPLE = "simple"
    IF = "if"
    EACH = "each"
    TAG = "tag"


@dataclass(frozen=True)
class Expression:
    """
    Дескриптор одного динамического выражения.

    Attributes:
        type: Вид выражения
        evaluate: Вычислитель scope -> значение
        name: Имя атрибута или события (для TEXT отсутствует)
        child_node_index: Позиция плейсхолдера среди детей родителя (только TEXT)
    """
    type: ExpressionType
    evaluate: Evaluator
    name: Optional[str] = None
    child_node_index: Optional[int] = None


@dataclass(frozen=True)
class Binding(ABC):
    """
    Базовый класс привязок.

    selector строится из маркера ([expr0]); None означает корень фрагмента.
    """
    selector: Optional[str]

    @abstractmethod
    def get_type(self) -> BindingType:
        """Возвращает вид привязки."""
        pass

    @property
    def type(self) -> BindingType:
        return self.get_type()


class Template(NamedTuple):
    """Скелет разметки и упорядоченный список привязок."""
    html: str
    bindings: Tuple[Binding, ...]


EMPTY_TEMPLATE = Template("", ())


@dataclass(frozen=True)
class Slot:
    """Именованная область детей вложенного компонента."""
    id: str
    html: str
    bindings: Tuple[Binding, ...] = ()


@dataclass(frozen=True)
class SimpleBinding(Binding):
    """Атрибуты, события, значения и текст одного элемента."""
    expressions: Tuple[Expression, ...] = ()

    def get_type(self) -> BindingType:
        return BindingType.SIMPLE


@dataclass(frozen=True)
class IfBinding(Binding):
    """Условный показ вложенного шаблона."""
    evaluate: Evaluator
    template: Template

    def get_type(self) -> BindingType:
        return BindingType.IF


@dataclass(frozen=True)
class EachBinding(Binding):
    """
    Повторение вложенного шаблона для элементов коллекции.

    Attributes:
        evaluate: Вычислитель коллекции
        item_name: Имя переменной элемента
        template: Шаблон одного элемента
        index_name: Имя переменной индекса (необязательно)
        condition: Условие показа для каждого элемента (необязательно)
        get_key: Ключ элемента для сопоставления при обновлении (необязательно)
    """
    evaluate: Evaluator
    item_name: str
    template: Template
    index_name: Optional[str] = None
    condition: Optional[Evaluator] = None
    get_key: Optional[Evaluator] = None

    def get_type(self) -> BindingType:
        return BindingType.EACH


@dataclass(frozen=True)
class TagBinding(Binding):
    """Вложенный компонент: его атрибуты и распределённые по слотам дети."""
    component: str
    attributes: Tuple[Expression, ...] = ()
    slots: Tuple[Slot, ...] = ()

    def get_type(self) -> BindingType:
        return BindingType.TAG

    def get_slot(self, slot_id: str) -> Optional[Slot]:
        for slot in self.slots:
            if slot.id == slot_id:
                return slot
        return None


__all__ = [
    "ExpressionType",
    "BindingType",
    "Expression",
    "Binding",
    "Template",
    "EMPTY_TEMPLATE",
    "Slot",
    "SimpleBinding",
    "IfBinding",
    "EachBinding",
    "TagBinding",
]
