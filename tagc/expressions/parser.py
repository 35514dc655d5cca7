"""
Парсер выражений шаблона с рекурсивным спуском.

Строит абстрактное синтаксическое дерево (AST) из последовательности токенов.
Поддерживает приоритеты операторов, группировку в скобках, литералы
объектов и массивов, стрелочные функции, функции и классы.

Грамматика (упрощённо):
expression     → assignment
assignment     → arrow | conditional (ASSIGN_OP assignment)?
arrow          → (IDENTIFIER | "(" params ")") "=>" (block | assignment)
conditional    → binary ("?" assignment ":" assignment)?
binary         → unary (BINARY_OP unary)*        (по таблице приоритетов)
unary          → ("!" | "-" | "+" | "typeof" | "void") unary | postfix
postfix        → (new | primary) ("." name | "?." name | "[" expression "]" | arguments)*
primary        → NUMBER | STRING | TEMPLATE | "true" | "false" | "null" | "this"
               | IDENTIFIER | "(" expression ")" | array | object | function | class
"""

from __future__ import annotations

from typing import List, Optional, Tuple, Union

from ..errors import EmptyExpressionError, ExpressionSyntaxError
from .lexer import ExpressionLexer, Token, scan_substitution, unescape_string
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
    MethodDefinition,
    NewExpression,
    ObjectExpression,
    Property,
    ReturnStatement,
    SpreadElement,
    Statement,
    TemplateLiteral,
    ThisExpression,
    UnaryExpression,
    VariableDeclaration,
    VariableDeclarator,
)

# Приоритеты бинарных операторов (больше - связывает сильнее)
BINARY_PRECEDENCE = {
    "??": 1,
    "||": 2,
    "&&": 3,
    "==": 7, "!=": 7, "===": 7, "!==": 7,
    "<": 8, ">": 8, "<=": 8, ">=": 8, "in": 8, "instanceof": 8,
    "+": 10, "-": 10,
    "*": 11, "/": 11, "%": 11,
    "**": 12,
}

ASSIGNMENT_OPERATORS = {"=", "+=", "-=", "*=", "/=", "%=", "**="}

UNARY_OPERATORS = {"!", "-", "+"}
UNARY_KEYWORDS = {"typeof", "void"}

DECLARATION_KEYWORDS = {"const", "let", "var"}


def parse_number(raw: str) -> Union[int, float]:
    if raw[:2] in ("0x", "0X"):
        return int(raw, 16)
    if any(ch in raw for ch in ".eE"):
        return float(raw)
    return int(raw)


class ExpressionParser:
    """
    Парсер выражений с рекурсивным спуском.

    Преобразует список токенов в абстрактное синтаксическое дерево,
    соблюдая приоритеты операторов и правила группировки.
    """

    def __init__(self):
        self.lexer = ExpressionLexer()
        self._tokens: List[Token] = []
        self._position = 0
        self._source = ""

    def parse(self, source: str) -> Expression:
        """
        Парсит строку выражения в AST.

        Args:
            source: Исходный текст выражения

        Returns:
            Корневой узел AST

        Raises:
            EmptyExpressionError: Если выражение пустое
            ExpressionSyntaxError: При синтаксической ошибке
        """
        if source is None or not source.strip():
            raise EmptyExpressionError(source or "")

        self._source = source
        self._tokens = self.lexer.tokenize(source)
        self._position = 0

        result = self._parse_expression()

        # Проверяем, что мы достигли конца входных данных
        if not self._is_at_end():
            current = self._current_token()
            raise self._error(f"Unexpected token '{current.value}'", current)

        return result

    def _parse_expression(self) -> Expression:
        """Парсит полное выражение (начальный символ грамматики)."""
        return self._parse_assignment()

    def _parse_assignment(self) -> Expression:
        """Парсит присваивание или стрелочную функцию (низший приоритет)."""
        if self._is_arrow_start():
            return self._parse_arrow()

        left = self._parse_conditional()

        current = self._current_token()
        if current.type == 'PUNCTUATOR' and current.value in ASSIGNMENT_OPERATORS:
            if not isinstance(left, (Identifier, MemberExpression)):
                raise self._error("Invalid assignment target", current)
            self._advance()
            value = self._parse_assignment()  # Правая ассоциативность
            return AssignmentExpression(operator=current.value, target=left, value=value)

        return left

    def _parse_arrow(self) -> ArrowFunction:
        """Парсит стрелочную функцию: x => body или (a, b) => body"""
        if self._current_token().type == 'IDENTIFIER':
            params: Tuple[str, ...] = (self._advance().value,)
        else:
            params = self._parse_params()

        self._expect_punct("=>")

        if self._check_punct("{"):
            body: Union[Expression, BlockStatement] = self._parse_block()
        else:
            body = self._parse_assignment()

        return ArrowFunction(params=params, body=body)

    def _parse_conditional(self) -> Expression:
        """Парсит тернарный оператор."""
        test = self._parse_binary(1)

        if self._match_punct("?"):
            consequent = self._parse_assignment()
            self._expect_punct(":")
            alternate = self._parse_assignment()
            return ConditionalExpression(test=test, consequent=consequent, alternate=alternate)

        return test

    def _parse_binary(self, min_precedence: int) -> Expression:
        """Парсит бинарные операторы методом подъёма по приоритетам."""
        left = self._parse_unary()

        while True:
            operator = self._binary_operator(self._current_token())
            if operator is None:
                break
            precedence = BINARY_PRECEDENCE[operator]
            if precedence < min_precedence:
                break

            self._advance()
            # ** правоассоциативен, остальные - левоассоциативны
            next_min = precedence if operator == "**" else precedence + 1
            right = self._parse_binary(next_min)
            left = BinaryExpression(operator=operator, left=left, right=right)

        return left

    def _parse_unary(self) -> Expression:
        """Парсит унарные операторы (высокий приоритет)."""
        current = self._current_token()
        if current.type == 'PUNCTUATOR' and current.value in UNARY_OPERATORS:
            self._advance()
            return UnaryExpression(operator=current.value, argument=self._parse_unary())
        if current.type == 'KEYWORD' and current.value in UNARY_KEYWORDS:
            self._advance()
            return UnaryExpression(operator=current.value, argument=self._parse_unary())

        return self._parse_postfix()

    def _parse_postfix(self) -> Expression:
        """Парсит цепочки доступа к свойствам и вызовов."""
        if self._match_keyword("new"):
            expression = self._parse_new()
        else:
            expression = self._parse_primary()

        while True:
            if self._match_punct("."):
                name = self._consume_property_name("Expected property name after '.'")
                expression = MemberExpression(object=expression, property=Identifier(name))
            elif self._match_punct("?."):
                if self._match_punct("["):
                    prop = self._parse_expression()
                    self._expect_punct("]")
                    expression = MemberExpression(
                        object=expression, property=prop, computed=True, optional=True
                    )
                else:
                    name = self._consume_property_name("Expected property name after '?.'")
                    expression = MemberExpression(
                        object=expression, property=Identifier(name), optional=True
                    )
            elif self._match_punct("["):
                prop = self._parse_expression()
                self._expect_punct("]")
                expression = MemberExpression(object=expression, property=prop, computed=True)
            elif self._check_punct("("):
                expression = CallExpression(callee=expression, arguments=self._parse_arguments())
            else:
                break

        return expression

    def _parse_new(self) -> NewExpression:
        """Парсит создание экземпляра: new Callee(args)"""
        if self._match_keyword("new"):
            callee: Expression = self._parse_new()
        else:
            callee = self._parse_primary()

        # Аргументы относятся к new, поэтому вызовы в цепочке не разбираем
        while True:
            if self._match_punct("."):
                name = self._consume_property_name("Expected property name after '.'")
                callee = MemberExpression(object=callee, property=Identifier(name))
            elif self._match_punct("["):
                prop = self._parse_expression()
                self._expect_punct("]")
                callee = MemberExpression(object=callee, property=prop, computed=True)
            else:
                break

        arguments: Tuple[Expression, ...] = ()
        if self._check_punct("("):
            arguments = self._parse_arguments()
        return NewExpression(callee=callee, arguments=arguments)

    def _parse_arguments(self) -> Tuple[Expression, ...]:
        """Парсит список аргументов вызова."""
        self._expect_punct("(")
        arguments: List[Expression] = []

        while not self._check_punct(")"):
            if self._match_punct("..."):
                arguments.append(SpreadElement(argument=self._parse_assignment()))
            else:
                arguments.append(self._parse_assignment())
            if not self._match_punct(","):
                break

        self._expect_punct(")")
        return tuple(arguments)

    def _parse_primary(self) -> Expression:
        """Парсит первичное выражение (литералы, имена, группы в скобках)."""
        current = self._current_token()

        if current.type == 'NUMBER':
            self._advance()
            return Literal(value=parse_number(current.value), raw=current.value)

        if current.type == 'STRING':
            self._advance()
            return Literal(value=unescape_string(current.value[1:-1]), raw=current.value)

        if current.type == 'TEMPLATE':
            self._advance()
            return self._parse_template(current)

        if current.type == 'IDENTIFIER':
            self._advance()
            return Identifier(name=current.value)

        if current.type == 'KEYWORD':
            if current.value == "true":
                self._advance()
                return Literal(value=True, raw="true")
            if current.value == "false":
                self._advance()
                return Literal(value=False, raw="false")
            if current.value == "null":
                self._advance()
                return Literal(value=None, raw="null")
            if current.value == "this":
                self._advance()
                return ThisExpression()
            if current.value == "function":
                self._advance()
                return self._parse_function()
            if current.value == "class":
                self._advance()
                return self._parse_class()

        # Группировка в скобках
        if self._match_punct("("):
            expression = self._parse_expression()
            self._expect_punct(")")
            return GroupExpression(expression=expression)

        if self._match_punct("["):
            return self._parse_array()

        if self._match_punct("{"):
            return self._parse_object()

        # Если ничего не подошло, это ошибка
        if current.type == 'EOF':
            raise self._error("Unexpected end of expression", current)
        raise self._error(f"Unexpected token '{current.value}'", current)

    def _parse_template(self, token: Token) -> TemplateLiteral:
        """Разбивает шаблонную строку на текстовые фрагменты и подстановки."""
        raw = token.value
        end = len(raw) - 1
        quasis: List[str] = []
        expressions: List[Expression] = []

        start = 1
        i = 1
        while i < end:
            if raw[i] == "\\":
                i += 2
                continue
            if raw.startswith("${", i):
                quasis.append(raw[start:i])
                close = scan_substitution(raw, i + 2)
                expressions.append(ExpressionParser().parse(raw[i + 2:close - 1]))
                i = close
                start = close
                continue
            i += 1

        quasis.append(raw[start:end])
        return TemplateLiteral(quasis=tuple(quasis), expressions=tuple(expressions))

    def _parse_array(self) -> ArrayExpression:
        """Парсит литерал массива после открывающей скобки."""
        elements: List[Expression] = []

        while not self._check_punct("]"):
            if self._match_punct("..."):
                elements.append(SpreadElement(argument=self._parse_assignment()))
            else:
                elements.append(self._parse_assignment())
            if not self._match_punct(","):
                break

        self._expect_punct("]")
        return ArrayExpression(elements=tuple(elements))

    def _parse_object(self) -> ObjectExpression:
        """Парсит объектный литерал после открывающей фигурной скобки."""
        properties: List[Union[Property, SpreadElement]] = []

        while not self._check_punct("}"):
            if self._match_punct("..."):
                properties.append(SpreadElement(argument=self._parse_assignment()))
            else:
                properties.append(self._parse_property())
            if not self._match_punct(","):
                break

        self._expect_punct("}")
        return ObjectExpression(properties=tuple(properties))

    def _parse_property(self) -> Property:
        """Парсит одно свойство объектного литерала."""
        current = self._current_token()
        computed = False

        if self._match_punct("["):
            key: Expression = self._parse_assignment()
            self._expect_punct("]")
            computed = True
        elif current.type in ('IDENTIFIER', 'KEYWORD'):
            self._advance()
            key = Identifier(name=current.value)
        elif current.type == 'STRING':
            self._advance()
            key = Literal(value=unescape_string(current.value[1:-1]), raw=current.value)
        elif current.type == 'NUMBER':
            self._advance()
            key = Literal(value=parse_number(current.value), raw=current.value)
        else:
            raise self._error("Expected property name", current)

        if self._match_punct(":"):
            return Property(key=key, value=self._parse_assignment(), computed=computed)

        # Краткая запись { foo } допустима только для идентификаторов
        if not computed and current.type == 'IDENTIFIER':
            return Property(key=key, value=key, shorthand=True)

        raise self._error("Expected ':' after property name", self._current_token())

    def _parse_params(self) -> Tuple[str, ...]:
        """Парсит список параметров функции: (a, b)"""
        self._expect_punct("(")
        params: List[str] = []

        while not self._check_punct(")"):
            params.append(self._consume_identifier("Expected parameter name").value)
            if not self._match_punct(","):
                break

        self._expect_punct(")")
        return tuple(params)

    def _parse_function(self) -> FunctionExpression:
        """Парсит функцию после ключевого слова function."""
        name: Optional[str] = None
        if self._current_token().type == 'IDENTIFIER':
            name = self._advance().value

        params = self._parse_params()
        body = self._parse_block()
        return FunctionExpression(name=name, params=params, body=body)

    def _parse_class(self) -> ClassExpression:
        """Парсит класс после ключевого слова class."""
        name: Optional[str] = None
        if self._current_token().type == 'IDENTIFIER':
            name = self._advance().value

        superclass: Optional[Expression] = None
        if self._match_keyword("extends"):
            superclass = self._parse_postfix()

        self._expect_punct("{")
        methods: List[MethodDefinition] = []

        while not self._check_punct("}"):
            if self._match_punct(";"):
                continue
            methods.append(self._parse_method())

        self._expect_punct("}")
        return ClassExpression(name=name, superclass=superclass, methods=tuple(methods))

    def _parse_method(self) -> MethodDefinition:
        """Парсит метод класса: [static] name(params) { body }"""
        is_static = False
        current = self._current_token()
        if current.type == 'IDENTIFIER' and current.value == "static" and not self._peek_punct(1, "("):
            self._advance()
            is_static = True

        name = self._consume_property_name("Expected method name")
        params = self._parse_params()
        body = self._parse_block()
        return MethodDefinition(name=name, params=params, body=body, is_static=is_static)

    def _parse_block(self) -> BlockStatement:
        """Парсит блок инструкций в фигурных скобках."""
        self._expect_punct("{")
        statements: List[Statement] = []

        while not self._check_punct("}"):
            if self._is_at_end():
                raise self._error("Expected '}' to close block", self._current_token())
            if self._match_punct(";"):
                continue
            statements.append(self._parse_statement())

        self._expect_punct("}")
        return BlockStatement(body=tuple(statements))

    def _parse_statement(self) -> Statement:
        """Парсит одну инструкцию тела функции."""
        current = self._current_token()

        if self._match_keyword("return"):
            argument: Optional[Expression] = None
            if not self._check_punct(";") and not self._check_punct("}"):
                argument = self._parse_expression()
            self._match_punct(";")
            return ReturnStatement(argument=argument)

        if current.type == 'KEYWORD' and current.value in DECLARATION_KEYWORDS:
            self._advance()
            declarations: List[VariableDeclarator] = []
            while True:
                name = self._consume_identifier("Expected variable name").value
                init = self._parse_assignment() if self._match_punct("=") else None
                declarations.append(VariableDeclarator(name=name, init=init))
                if not self._match_punct(","):
                    break
            self._match_punct(";")
            return VariableDeclaration(kind=current.value, declarations=tuple(declarations))

        expression = self._parse_expression()
        self._match_punct(";")
        return ExpressionStatement(expression=expression)

    # Вспомогательные методы для работы с токенами

    def _is_arrow_start(self) -> bool:
        """Проверяет, начинается ли в текущей позиции стрелочная функция."""
        current = self._current_token()
        if current.type == 'IDENTIFIER':
            return self._peek_punct(1, "=>")
        if current.type != 'PUNCTUATOR' or current.value != "(":
            return False

        # Ищем парную закрывающую скобку и проверяем, что за ней следует =>
        depth = 0
        index = self._position
        while index < len(self._tokens):
            token = self._tokens[index]
            if token.type == 'PUNCTUATOR' and token.value in ("(", "[", "{"):
                depth += 1
            elif token.type == 'PUNCTUATOR' and token.value in (")", "]", "}"):
                depth -= 1
                if depth == 0:
                    following = self._tokens[index + 1] if index + 1 < len(self._tokens) else None
                    return (
                        following is not None
                        and following.type == 'PUNCTUATOR'
                        and following.value == "=>"
                    )
            elif token.type == 'EOF':
                return False
            index += 1
        return False

    def _binary_operator(self, token: Token) -> Optional[str]:
        if token.type == 'PUNCTUATOR' and token.value in BINARY_PRECEDENCE:
            return token.value
        if token.type == 'KEYWORD' and token.value in ("in", "instanceof"):
            return token.value
        return None

    def _current_token(self) -> Token:
        """Возвращает текущий токен без продвижения позиции."""
        if self._position >= len(self._tokens):
            # Возвращаем EOF если вышли за границы
            return Token(type='EOF', value='', position=len(self._source))
        return self._tokens[self._position]

    def _peek_punct(self, offset: int, symbol: str) -> bool:
        index = self._position + offset
        if index >= len(self._tokens):
            return False
        token = self._tokens[index]
        return token.type == 'PUNCTUATOR' and token.value == symbol

    def _is_at_end(self) -> bool:
        """Проверяет, достигли ли мы конца токенов."""
        return self._current_token().type == 'EOF'

    def _advance(self) -> Token:
        """Продвигает позицию и возвращает предыдущий токен."""
        token = self._current_token()
        if not self._is_at_end():
            self._position += 1
        return token

    def _match_keyword(self, keyword: str) -> bool:
        """Проверяет и потребляет ключевое слово."""
        current = self._current_token()
        if current.type == 'KEYWORD' and current.value == keyword:
            self._advance()
            return True
        return False

    def _check_punct(self, symbol: str) -> bool:
        current = self._current_token()
        return current.type == 'PUNCTUATOR' and current.value == symbol

    def _match_punct(self, symbol: str) -> bool:
        """Проверяет и потребляет знак пунктуации."""
        if self._check_punct(symbol):
            self._advance()
            return True
        return False

    def _expect_punct(self, symbol: str) -> Token:
        current = self._current_token()
        if not self._match_punct(symbol):
            found = current.value or "end of expression"
            raise self._error(f"Expected '{symbol}' but found '{found}'", current)
        return current

    def _consume_identifier(self, error_message: str) -> Token:
        """Потребляет идентификатор или выбрасывает ошибку."""
        current = self._current_token()
        if current.type == 'IDENTIFIER':
            return self._advance()
        raise self._error(error_message, current)

    def _consume_property_name(self, error_message: str) -> str:
        """Имя свойства может совпадать с ключевым словом (obj.class, obj.new)."""
        current = self._current_token()
        if current.type in ('IDENTIFIER', 'KEYWORD'):
            return self._advance().value
        raise self._error(error_message, current)

    def _error(self, message: str, token: Token) -> ExpressionSyntaxError:
        return ExpressionSyntaxError(message, token.position, self._source)


def parse_expression(source: str) -> Expression:
    """
    Удобная функция для разбора выражения из строки.

    Raises:
        EmptyExpressionError: Если выражение пустое
        ExpressionSyntaxError: При синтаксической ошибке
    """
    return ExpressionParser().parse(source)


__all__ = ["ExpressionParser", "parse_expression", "parse_number", "BINARY_PRECEDENCE"]
