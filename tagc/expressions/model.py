"""
Модели данных для выражений шаблона.

Содержит классы минимального синтаксического дерева подмножества языка
выражений: литералы, идентификаторы, доступ к свойствам, вызовы, операторы,
объекты, массивы, функции и классы. Каждый узел умеет печатать себя
в каноническом виде исходного текста.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Tuple, Union


class SyntaxType(Enum):
    """Типы узлов синтаксического дерева выражений."""
    IDENTIFIER = "identifier"
    THIS = "this"
    LITERAL = "literal"
    TEMPLATE = "template"
    ARRAY = "array"
    OBJECT = "object"
    PROPERTY = "property"
    SPREAD = "spread"
    MEMBER = "member"
    CALL = "call"
    NEW = "new"
    UNARY = "unary"
    BINARY = "binary"
    CONDITIONAL = "conditional"
    ASSIGNMENT = "assignment"
    GROUP = "group"  # для явной группировки в скобках
    ARROW = "arrow"
    FUNCTION = "function"
    CLASS = "class"
    METHOD = "method"
    BLOCK = "block"
    RETURN = "return"
    EXPRESSION_STATEMENT = "expression_statement"
    VARIABLES = "variables"


@dataclass(frozen=True)
class Syntax(ABC):
    """Базовый абстрактный класс для всех узлов дерева."""

    @abstractmethod
    def get_type(self) -> SyntaxType:
        """Возвращает тип узла."""
        pass

    def __str__(self) -> str:
        """Строковое представление узла (исходный текст)."""
        return self._to_string()

    @abstractmethod
    def _to_string(self) -> str:
        """Внутренний метод для создания строкового представления."""
        pass


class Expression(Syntax, ABC):
    """Узел, вычисляющийся в значение."""
    pass


class Statement(Syntax, ABC):
    """Инструкция в теле функции."""
    pass


def _join(items: Tuple[Any, ...]) -> str:
    return ", ".join(str(item) for item in items)


def quote_string(value: str) -> str:
    """Печатает строку как литерал в одинарных кавычках."""
    escaped = (
        value.replace("\\", "\\\\")
        .replace("'", "\\'")
        .replace("\n", "\\n")
        .replace("\r", "\\r")
        .replace("\t", "\\t")
    )
    return f"'{escaped}'"


@dataclass(frozen=True)
class Identifier(Expression):
    """Ссылка на имя: foo"""
    name: str

    def get_type(self) -> SyntaxType:
        return SyntaxType.IDENTIFIER

    def _to_string(self) -> str:
        return self.name


@dataclass(frozen=True)
class ThisExpression(Expression):
    """Ссылка на экземпляр компонента: this"""

    def get_type(self) -> SyntaxType:
        return SyntaxType.THIS

    def _to_string(self) -> str:
        return "this"


@dataclass(frozen=True)
class Literal(Expression):
    """
    Литерал: число, строка, true/false, null.

    Исходное написание сохраняется в raw и используется при печати.
    """
    value: Any
    raw: str

    def get_type(self) -> SyntaxType:
        return SyntaxType.LITERAL

    def _to_string(self) -> str:
        return self.raw

    @classmethod
    def of(cls, value: Any) -> Literal:
        """Создаёт литерал из значения Python (str, bool, None, число)."""
        if isinstance(value, str):
            return cls(value=value, raw=quote_string(value))
        if isinstance(value, bool):
            return cls(value=value, raw="true" if value else "false")
        if value is None:
            return cls(value=None, raw="null")
        return cls(value=value, raw=repr(value))


@dataclass(frozen=True)
class TemplateLiteral(Expression):
    """
    Шаблонная строка: `text ${expr} text`

    quasis хранит сырые (неэкранированные) текстовые фрагменты,
    их всегда на один больше, чем подстановок.
    """
    quasis: Tuple[str, ...]
    expressions: Tuple[Expression, ...]

    def get_type(self) -> SyntaxType:
        return SyntaxType.TEMPLATE

    def _to_string(self) -> str:
        parts = ["`", self.quasis[0]]
        for expression, quasi in zip(self.expressions, self.quasis[1:]):
            parts.append("${" + str(expression) + "}")
            parts.append(quasi)
        parts.append("`")
        return "".join(parts)


@dataclass(frozen=True)
class SpreadElement(Expression):
    """Развёртка: ...items"""
    argument: Expression

    def get_type(self) -> SyntaxType:
        return SyntaxType.SPREAD

    def _to_string(self) -> str:
        return f"...{self.argument}"


@dataclass(frozen=True)
class ArrayExpression(Expression):
    """Литерал массива: [a, b]"""
    elements: Tuple[Expression, ...]

    def get_type(self) -> SyntaxType:
        return SyntaxType.ARRAY

    def _to_string(self) -> str:
        return f"[{_join(self.elements)}]"


@dataclass(frozen=True)
class Property(Syntax):
    """
    Свойство объектного литерала: key: value

    computed - ключ в квадратных скобках; shorthand - краткая запись {foo}.
    """
    key: Expression
    value: Expression
    computed: bool = False
    shorthand: bool = False

    def get_type(self) -> SyntaxType:
        return SyntaxType.PROPERTY

    def _to_string(self) -> str:
        if self.shorthand:
            return str(self.key)
        if self.computed:
            return f"[{self.key}]: {self.value}"
        return f"{self.key}: {self.value}"


@dataclass(frozen=True)
class ObjectExpression(Expression):
    """Объектный литерал: { foo: bar }"""
    properties: Tuple[Union[Property, SpreadElement], ...]

    def get_type(self) -> SyntaxType:
        return SyntaxType.OBJECT

    def _to_string(self) -> str:
        if not self.properties:
            return "{}"
        return "{ " + _join(self.properties) + " }"


@dataclass(frozen=True)
class MemberExpression(Expression):
    """
    Доступ к свойству: object.property, object[property], object?.property
    """
    object: Expression
    property: Expression
    computed: bool = False
    optional: bool = False

    def get_type(self) -> SyntaxType:
        return SyntaxType.MEMBER

    def _to_string(self) -> str:
        if self.computed:
            accessor = "?.[" if self.optional else "["
            return f"{self.object}{accessor}{self.property}]"
        accessor = "?." if self.optional else "."
        return f"{self.object}{accessor}{self.property}"


@dataclass(frozen=True)
class CallExpression(Expression):
    """Вызов: callee(arguments)"""
    callee: Expression
    arguments: Tuple[Expression, ...] = ()

    def get_type(self) -> SyntaxType:
        return SyntaxType.CALL

    def _to_string(self) -> str:
        return f"{self.callee}({_join(self.arguments)})"


@dataclass(frozen=True)
class NewExpression(Expression):
    """Создание экземпляра: new Callee(arguments)"""
    callee: Expression
    arguments: Tuple[Expression, ...] = ()

    def get_type(self) -> SyntaxType:
        return SyntaxType.NEW

    def _to_string(self) -> str:
        return f"new {self.callee}({_join(self.arguments)})"


@dataclass(frozen=True)
class UnaryExpression(Expression):
    """Унарная операция: !x, -x, typeof x, void x"""
    operator: str
    argument: Expression

    def get_type(self) -> SyntaxType:
        return SyntaxType.UNARY

    def _to_string(self) -> str:
        if self.operator.isalpha():
            return f"{self.operator} {self.argument}"
        return f"{self.operator}{self.argument}"


@dataclass(frozen=True)
class BinaryExpression(Expression):
    """
    Бинарная операция: left op right

    Включает арифметику, сравнения и логические операторы (&&, ||, ??).
    """
    operator: str
    left: Expression
    right: Expression

    def get_type(self) -> SyntaxType:
        return SyntaxType.BINARY

    def _to_string(self) -> str:
        return f"{self.left} {self.operator} {self.right}"


@dataclass(frozen=True)
class ConditionalExpression(Expression):
    """Тернарный оператор: test ? consequent : alternate"""
    test: Expression
    consequent: Expression
    alternate: Expression

    def get_type(self) -> SyntaxType:
        return SyntaxType.CONDITIONAL

    def _to_string(self) -> str:
        return f"{self.test} ? {self.consequent} : {self.alternate}"


@dataclass(frozen=True)
class AssignmentExpression(Expression):
    """Присваивание: target = value, target += value"""
    operator: str
    target: Expression
    value: Expression

    def get_type(self) -> SyntaxType:
        return SyntaxType.ASSIGNMENT

    def _to_string(self) -> str:
        return f"{self.target} {self.operator} {self.value}"


@dataclass(frozen=True)
class GroupExpression(Expression):
    """
    Выражение в скобках: (expression)

    Сохраняется в дереве, чтобы печать воспроизводила авторскую группировку.
    """
    expression: Expression

    def get_type(self) -> SyntaxType:
        return SyntaxType.GROUP

    def _to_string(self) -> str:
        return f"({self.expression})"


@dataclass(frozen=True)
class BlockStatement(Statement):
    """Тело функции: { statements }"""
    body: Tuple[Statement, ...] = ()

    def get_type(self) -> SyntaxType:
        return SyntaxType.BLOCK

    def _to_string(self) -> str:
        if not self.body:
            return "{}"
        return "{ " + " ".join(str(statement) for statement in self.body) + " }"


@dataclass(frozen=True)
class ReturnStatement(Statement):
    """return expression;"""
    argument: Optional[Expression] = None

    def get_type(self) -> SyntaxType:
        return SyntaxType.RETURN

    def _to_string(self) -> str:
        if self.argument is None:
            return "return;"
        return f"return {self.argument};"


@dataclass(frozen=True)
class ExpressionStatement(Statement):
    """expression;"""
    expression: Expression

    def get_type(self) -> SyntaxType:
        return SyntaxType.EXPRESSION_STATEMENT

    def _to_string(self) -> str:
        return f"{self.expression};"


@dataclass(frozen=True)
class VariableDeclarator:
    """Одно объявление внутри const/let/var."""
    name: str
    init: Optional[Expression] = None

    def __str__(self) -> str:
        if self.init is None:
            return self.name
        return f"{self.name} = {self.init}"


@dataclass(frozen=True)
class VariableDeclaration(Statement):
    """const a = 1, b = 2;"""
    kind: str
    declarations: Tuple[VariableDeclarator, ...]

    def get_type(self) -> SyntaxType:
        return SyntaxType.VARIABLES

    def _to_string(self) -> str:
        return f"{self.kind} {_join(self.declarations)};"


@dataclass(frozen=True)
class ArrowFunction(Expression):
    """
    Стрелочная функция: (a, b) => body

    Тело - выражение или блок. Стрелочная функция не связывает собственный this.
    """
    params: Tuple[str, ...]
    body: Union[Expression, BlockStatement]

    def get_type(self) -> SyntaxType:
        return SyntaxType.ARROW

    def _to_string(self) -> str:
        return f"({', '.join(self.params)}) => {self.body}"


@dataclass(frozen=True)
class FunctionExpression(Expression):
    """function name(params) { body }"""
    name: Optional[str]
    params: Tuple[str, ...]
    body: BlockStatement

    def get_type(self) -> SyntaxType:
        return SyntaxType.FUNCTION

    def _to_string(self) -> str:
        name = f" {self.name}" if self.name else ""
        return f"function{name}({', '.join(self.params)}) {self.body}"


@dataclass(frozen=True)
class MethodDefinition(Syntax):
    """Метод класса: name(params) { body }"""
    name: str
    params: Tuple[str, ...]
    body: BlockStatement
    is_static: bool = False

    def get_type(self) -> SyntaxType:
        return SyntaxType.METHOD

    def _to_string(self) -> str:
        prefix = "static " if self.is_static else ""
        return f"{prefix}{self.name}({', '.join(self.params)}) {self.body}"


@dataclass(frozen=True)
class ClassExpression(Expression):
    """class Name extends Base { methods }"""
    name: Optional[str]
    superclass: Optional[Expression] = None
    methods: Tuple[MethodDefinition, ...] = ()

    def get_type(self) -> SyntaxType:
        return SyntaxType.CLASS

    def _to_string(self) -> str:
        parts = ["class"]
        if self.name:
            parts.append(self.name)
        if self.superclass is not None:
            parts.append(f"extends {self.superclass}")
        if self.methods:
            parts.append("{ " + " ".join(str(method) for method in self.methods) + " }")
        else:
            parts.append("{}")
        return " ".join(parts)


__all__ = [
    "quote_string",
    "SyntaxType",
    "Syntax",
    "Expression",
    "Statement",
    "Identifier",
    "ThisExpression",
    "Literal",
    "TemplateLiteral",
    "SpreadElement",
    "ArrayExpression",
    "Property",
    "ObjectExpression",
    "MemberExpression",
    "CallExpression",
    "NewExpression",
    "UnaryExpression",
    "BinaryExpression",
    "ConditionalExpression",
    "AssignmentExpression",
    "GroupExpression",
    "BlockStatement",
    "ReturnStatement",
    "ExpressionStatement",
    "VariableDeclarator",
    "VariableDeclaration",
    "ArrowFunction",
    "FunctionExpression",
    "MethodDefinition",
    "ClassExpression",
]
