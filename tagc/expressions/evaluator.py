"""
Вычислитель выражений шаблона.

Проходит по AST выражения и вычисляет его значение с семантикой JavaScript
(см. runtime). Поддерживает замыкания стрелочных функций и функций,
простые классы с методами и наследованием.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union, cast

from ..errors import ExpressionRuntimeError
from .model import (
    ArrayExpression,
    ArrowFunction,
    AssignmentExpression,
    BinaryExpression,
    BlockStatement,
    CallExpression,
    ClassExpression,
    ConditionalExpression,
    Expression,
    ExpressionStatement,
    FunctionExpression,
    GroupExpression,
    Identifier,
    Literal,
    MemberExpression,
    NewExpression,
    ObjectExpression,
    Property,
    ReturnStatement,
    SpreadElement,
    Statement,
    SyntaxType,
    TemplateLiteral,
    UnaryExpression,
    VariableDeclaration,
)
from .lexer import unescape_string
from .runtime import (
    GLOBALS,
    HOST_GLOBALS,
    UNDEFINED,
    binary_operation,
    call_function,
    construct,
    get_member,
    is_nullish,
    iterate,
    property_key,
    set_member,
    to_number,
    to_string,
    truthy,
    typeof,
    normalize_number,
)

_NO_THIS = object()


class Environment:
    """
    Лексическое окружение: кадр переменных со ссылкой на родителя.

    Кадр функции хранит собственный this; стрелочные функции и блоки
    наследуют его от родителя.
    """

    def __init__(self, variables: Optional[Dict[str, Any]] = None,
                 parent: Optional[Environment] = None, this: Any = _NO_THIS):
        self.variables: Dict[str, Any] = dict(variables or {})
        self.parent = parent
        self._this = this

    def child(self, variables: Optional[Dict[str, Any]] = None, this: Any = _NO_THIS) -> Environment:
        return Environment(variables, self, this)

    def lookup(self, name: str) -> Any:
        env: Optional[Environment] = self
        while env is not None:
            if name in env.variables:
                return env.variables[name]
            env = env.parent
        if name in GLOBALS:
            return GLOBALS[name]
        if name in HOST_GLOBALS:
            raise ExpressionRuntimeError(f"{name} is not defined (provided by the host runtime only)")
        raise ExpressionRuntimeError(f"{name} is not defined")

    def is_defined(self, name: str) -> bool:
        env: Optional[Environment] = self
        while env is not None:
            if name in env.variables:
                return True
            env = env.parent
        return name in GLOBALS

    def declare(self, name: str, value: Any) -> None:
        self.variables[name] = value

    def assign(self, name: str, value: Any) -> Any:
        env: Optional[Environment] = self
        while env is not None:
            if name in env.variables:
                env.variables[name] = value
                return value
            env = env.parent
        raise ExpressionRuntimeError(f"Assignment to undeclared variable '{name}'")

    @property
    def this(self) -> Any:
        env: Optional[Environment] = self
        while env is not None:
            if env._this is not _NO_THIS:
                return env._this
            env = env.parent
        return UNDEFINED


class _Return(Exception):
    """Сигнал инструкции return, прерывающий выполнение тела функции."""

    def __init__(self, value: Any):
        super().__init__()
        self.value = value


class JSFunction:
    """
    Функция, созданная выражением (стрелочная или обычная).

    Вызывается как обычный Python callable: fn(a, b).
    """

    def __init__(self, node: Union[ArrowFunction, FunctionExpression, Any],
                 params: tuple, body: Union[Expression, BlockStatement],
                 closure: Environment, interpreter: Interpreter,
                 is_arrow: bool, name: Optional[str] = None):
        self.node = node
        self.params = params
        self.body = body
        self.closure = closure
        self.interpreter = interpreter
        self.is_arrow = is_arrow
        self.name = name or ""

    def __call__(self, *arguments: Any) -> Any:
        return self.js_call(UNDEFINED, list(arguments))

    def js_call(self, this: Any, arguments: List[Any]) -> Any:
        variables = {
            param: arguments[index] if index < len(arguments) else UNDEFINED
            for index, param in enumerate(self.params)
        }
        if self.is_arrow:
            env = self.closure.child(variables)
        else:
            env = self.closure.child(variables, this=this)

        if isinstance(self.body, BlockStatement):
            try:
                self.interpreter.execute_block(self.body, env)
            except _Return as signal:
                return signal.value
            return UNDEFINED

        return self.interpreter.evaluate(self.body, env)

    def js_get(self, key: str) -> Any:
        if key == "name":
            return self.name
        if key == "length":
            return len(self.params)
        return UNDEFINED

    def js_to_string(self) -> str:
        return str(self.node)

    def __repr__(self) -> str:
        return f"JSFunction({self.node})"


class BoundMethod:
    """Метод экземпляра, связанный с получателем this."""

    def __init__(self, function: JSFunction, receiver: Any):
        self.function = function
        self.receiver = receiver

    def __call__(self, *arguments: Any) -> Any:
        return self.function.js_call(self.receiver, list(arguments))

    def js_call(self, this: Any, arguments: List[Any]) -> Any:
        return self.function.js_call(self.receiver, arguments)

    def js_to_string(self) -> str:
        return self.function.js_to_string()


class JSClass:
    """Класс, объявленный выражением class."""

    def __init__(self, node: ClassExpression, superclass: Optional[JSClass],
                 methods: Dict[str, JSFunction], static_methods: Dict[str, JSFunction]):
        self.node = node
        self.name = node.name or ""
        self.superclass = superclass
        self.methods = methods
        self.static_methods = static_methods

    def find_method(self, name: str) -> Optional[JSFunction]:
        cls: Optional[JSClass] = self
        while cls is not None:
            if name in cls.methods:
                return cls.methods[name]
            cls = cls.superclass
        return None

    def js_construct(self, arguments: List[Any]) -> JSInstance:
        instance = JSInstance(self)
        constructor = self.find_method("constructor")
        if constructor is not None:
            constructor.js_call(instance, arguments)
        return instance

    def js_call(self, this: Any, arguments: List[Any]) -> Any:
        raise ExpressionRuntimeError(f"Class constructor {self.name} cannot be invoked without 'new'")

    def js_get(self, key: str) -> Any:
        if key == "name":
            return self.name
        cls: Optional[JSClass] = self
        while cls is not None:
            if key in cls.static_methods:
                return BoundMethod(cls.static_methods[key], self)
            cls = cls.superclass
        return UNDEFINED

    def js_instance_check(self, value: Any) -> bool:
        if not isinstance(value, JSInstance):
            return False
        cls: Optional[JSClass] = value.cls
        while cls is not None:
            if cls is self:
                return True
            cls = cls.superclass
        return False

    def js_to_string(self) -> str:
        return str(self.node)


class JSInstance:
    """Экземпляр класса: собственные свойства плюс методы цепочки классов."""

    def __init__(self, cls: JSClass):
        self.cls = cls
        self.properties: Dict[str, Any] = {}

    def js_get(self, key: str) -> Any:
        if key in self.properties:
            return self.properties[key]
        method = self.cls.find_method(key)
        if method is not None and key != "constructor":
            return BoundMethod(method, self)
        return UNDEFINED

    def js_set(self, key: str, value: Any) -> None:
        self.properties[key] = value

    def js_has(self, key: str) -> bool:
        return key in self.properties or self.cls.find_method(key) is not None

    def js_to_string(self) -> str:
        return "[object Object]"


class Interpreter:
    """
    Интерпретатор AST выражений.

    Не хранит состояния между вызовами: всё окружение передаётся явно.
    """

    def evaluate(self, node: Expression, env: Environment) -> Any:
        """
        Вычисляет значение узла выражения.

        Raises:
            ExpressionRuntimeError: При ошибке вычисления
        """
        node_type = node.get_type()

        if node_type == SyntaxType.LITERAL:
            return cast(Literal, node).value
        elif node_type == SyntaxType.IDENTIFIER:
            return env.lookup(cast(Identifier, node).name)
        elif node_type == SyntaxType.THIS:
            return env.this
        elif node_type == SyntaxType.TEMPLATE:
            return self._evaluate_template(cast(TemplateLiteral, node), env)
        elif node_type == SyntaxType.ARRAY:
            return self._evaluate_array(cast(ArrayExpression, node), env)
        elif node_type == SyntaxType.OBJECT:
            return self._evaluate_object(cast(ObjectExpression, node), env)
        elif node_type == SyntaxType.MEMBER:
            return self._evaluate_member(cast(MemberExpression, node), env)
        elif node_type == SyntaxType.CALL:
            return self._evaluate_call(cast(CallExpression, node), env)
        elif node_type == SyntaxType.NEW:
            return self._evaluate_new(cast(NewExpression, node), env)
        elif node_type == SyntaxType.UNARY:
            return self._evaluate_unary(cast(UnaryExpression, node), env)
        elif node_type == SyntaxType.BINARY:
            return self._evaluate_binary(cast(BinaryExpression, node), env)
        elif node_type == SyntaxType.CONDITIONAL:
            conditional = cast(ConditionalExpression, node)
            if truthy(self.evaluate(conditional.test, env)):
                return self.evaluate(conditional.consequent, env)
            return self.evaluate(conditional.alternate, env)
        elif node_type == SyntaxType.ASSIGNMENT:
            return self._evaluate_assignment(cast(AssignmentExpression, node), env)
        elif node_type == SyntaxType.GROUP:
            return self.evaluate(cast(GroupExpression, node).expression, env)
        elif node_type == SyntaxType.ARROW:
            arrow = cast(ArrowFunction, node)
            return JSFunction(arrow, arrow.params, arrow.body, env, self, is_arrow=True)
        elif node_type == SyntaxType.FUNCTION:
            return self._evaluate_function(cast(FunctionExpression, node), env)
        elif node_type == SyntaxType.CLASS:
            return self._evaluate_class(cast(ClassExpression, node), env)
        else:
            raise ExpressionRuntimeError(f"Cannot evaluate node of type: {node_type}")

    def execute_block(self, block: BlockStatement, env: Environment) -> None:
        """Выполняет тело функции; return сигнализируется исключением _Return."""
        for statement in block.body:
            self._execute(statement, env)

    def _execute(self, statement: Statement, env: Environment) -> None:
        statement_type = statement.get_type()

        if statement_type == SyntaxType.RETURN:
            argument = cast(ReturnStatement, statement).argument
            value = UNDEFINED if argument is None else self.evaluate(argument, env)
            raise _Return(value)
        elif statement_type == SyntaxType.VARIABLES:
            for declarator in cast(VariableDeclaration, statement).declarations:
                value = UNDEFINED if declarator.init is None else self.evaluate(declarator.init, env)
                env.declare(declarator.name, value)
        elif statement_type == SyntaxType.EXPRESSION_STATEMENT:
            self.evaluate(cast(ExpressionStatement, statement).expression, env)
        else:
            raise ExpressionRuntimeError(f"Cannot execute statement of type: {statement_type}")

    def _evaluate_template(self, node: TemplateLiteral, env: Environment) -> str:
        parts = [unescape_string(node.quasis[0])]
        for expression, quasi in zip(node.expressions, node.quasis[1:]):
            parts.append(to_string(self.evaluate(expression, env)))
            parts.append(unescape_string(quasi))
        return "".join(parts)

    def _evaluate_items(self, items, env: Environment) -> List[Any]:
        values: List[Any] = []
        for item in items:
            if isinstance(item, SpreadElement):
                values.extend(iterate(self.evaluate(item.argument, env)))
            else:
                values.append(self.evaluate(item, env))
        return values

    def _evaluate_array(self, node: ArrayExpression, env: Environment) -> List[Any]:
        return self._evaluate_items(node.elements, env)

    def _evaluate_object(self, node: ObjectExpression, env: Environment) -> Dict[str, Any]:
        result: Dict[str, Any] = {}
        for prop in node.properties:
            if isinstance(prop, SpreadElement):
                source = self.evaluate(prop.argument, env)
                if isinstance(source, dict):
                    result.update({property_key(k): v for k, v in source.items()})
                elif isinstance(source, (list, tuple, str)):
                    result.update({str(i): v for i, v in enumerate(source)})
                continue
            prop = cast(Property, prop)
            result[self._property_name(prop, env)] = self.evaluate(prop.value, env)
        return result

    def _property_name(self, prop: Property, env: Environment) -> str:
        if prop.computed:
            return property_key(self.evaluate(prop.key, env))
        if isinstance(prop.key, Identifier):
            return prop.key.name
        return property_key(cast(Literal, prop.key).value)

    def _member_key(self, node: MemberExpression, env: Environment) -> Any:
        if node.computed:
            return self.evaluate(node.property, env)
        return cast(Identifier, node.property).name

    def _evaluate_member(self, node: MemberExpression, env: Environment) -> Any:
        target = self.evaluate(node.object, env)
        if node.optional and is_nullish(target):
            return UNDEFINED
        return get_member(target, self._member_key(node, env))

    def _evaluate_call(self, node: CallExpression, env: Environment) -> Any:
        callee = node.callee
        this: Any = UNDEFINED

        if isinstance(callee, MemberExpression):
            this = self.evaluate(callee.object, env)
            if callee.optional and is_nullish(this):
                return UNDEFINED
            function = get_member(this, self._member_key(callee, env))
        else:
            function = self.evaluate(callee, env)

        arguments = self._evaluate_items(node.arguments, env)

        if is_nullish(function) or not (callable(function) or hasattr(function, "js_call")):
            raise ExpressionRuntimeError(f"{callee} is not a function")
        return call_function(function, arguments, this)

    def _evaluate_new(self, node: NewExpression, env: Environment) -> Any:
        constructor = self.evaluate(node.callee, env)
        return construct(constructor, self._evaluate_items(node.arguments, env))

    def _evaluate_unary(self, node: UnaryExpression, env: Environment) -> Any:
        operator = node.operator

        if operator == "typeof":
            # typeof для необъявленного имени не является ошибкой
            if isinstance(node.argument, Identifier) and not env.is_defined(node.argument.name):
                return "undefined"
            return typeof(self.evaluate(node.argument, env))

        value = self.evaluate(node.argument, env)
        if operator == "!":
            return not truthy(value)
        elif operator == "-":
            return normalize_number(-to_number(value))
        elif operator == "+":
            return to_number(value)
        elif operator == "void":
            return UNDEFINED
        raise ExpressionRuntimeError(f"Unknown unary operator: {operator}")

    def _evaluate_binary(self, node: BinaryExpression, env: Environment) -> Any:
        operator = node.operator
        left = self.evaluate(node.left, env)

        # Логические операторы вычисляются по короткой схеме и возвращают операнд
        if operator == "&&":
            return self.evaluate(node.right, env) if truthy(left) else left
        if operator == "||":
            return left if truthy(left) else self.evaluate(node.right, env)
        if operator == "??":
            return self.evaluate(node.right, env) if is_nullish(left) else left

        right = self.evaluate(node.right, env)
        return binary_operation(operator, left, right)

    def _evaluate_assignment(self, node: AssignmentExpression, env: Environment) -> Any:
        target = node.target
        operator = node.operator

        if isinstance(target, Identifier):
            value = self.evaluate(node.value, env)
            if operator != "=":
                value = binary_operation(operator[:-1], env.lookup(target.name), value)
            return env.assign(target.name, value)

        member = cast(MemberExpression, target)
        obj = self.evaluate(member.object, env)
        key = self._member_key(member, env)
        value = self.evaluate(node.value, env)
        if operator != "=":
            value = binary_operation(operator[:-1], get_member(obj, key), value)
        return set_member(obj, key, value)

    def _evaluate_function(self, node: FunctionExpression, env: Environment) -> JSFunction:
        # Имя функционального выражения видно только внутри её тела
        closure = env.child()
        function = JSFunction(node, node.params, node.body, closure, self, is_arrow=False, name=node.name)
        if node.name:
            closure.declare(node.name, function)
        return function

    def _evaluate_class(self, node: ClassExpression, env: Environment) -> JSClass:
        superclass: Optional[JSClass] = None
        if node.superclass is not None:
            base = self.evaluate(node.superclass, env)
            if not isinstance(base, JSClass):
                raise ExpressionRuntimeError(f"Class extends value {to_string(base)} is not a class")
            superclass = base

        closure = env.child()
        methods: Dict[str, JSFunction] = {}
        static_methods: Dict[str, JSFunction] = {}
        for method in node.methods:
            function = JSFunction(method, method.params, method.body, closure, self,
                                  is_arrow=False, name=method.name)
            (static_methods if method.is_static else methods)[method.name] = function

        cls = JSClass(node, superclass, methods, static_methods)
        if node.name:
            closure.declare(node.name, cls)
        return cls


@dataclass(frozen=True)
class Evaluator:
    """
    Скомпилированное выражение: функция от объекта scope.

    Хранит переписанный AST и его печатную форму. Ни от чего, кроме
    констант времени компиляции, не зависит.

    Attributes:
        source: Печатная форма переписанного выражения
        node: Корневой узел переписанного AST
        parameter: Имя параметра, через который передаётся scope
    """
    source: str
    node: Expression
    parameter: str = "scope"

    def __call__(self, scope: Any = UNDEFINED) -> Any:
        env = Environment({self.parameter: scope})
        return Interpreter().evaluate(self.node, env)

    def to_source(self) -> str:
        """Печатная форма в виде функции: scope => expression"""
        if isinstance(self.node, ObjectExpression):
            return f"{self.parameter} => ({self.source})"
        return f"{self.parameter} => {self.source}"

    def __str__(self) -> str:
        return self.to_source()


__all__ = ["Environment", "Interpreter", "JSFunction", "JSClass", "JSInstance", "Evaluator"]
