"""
Переписывание свободных идентификаторов выражения на доступ через scope.

Каждое свободное имя (не объявленное локально, не глобальное и не имя
свойства) превращается в обращение к полю неявного параметра scope:
foo + bar -> scope.foo + scope.bar. Ссылка this вне собственных функций
и классов также заменяется на scope.
"""

from __future__ import annotations

import logging
from typing import FrozenSet, Iterable, NamedTuple, Optional, Union, cast

from ..config import CompilerOptions, DEFAULT_OPTIONS
from .evaluator import Evaluator
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
    MemberExpression,
    MethodDefinition,
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
    VariableDeclarator,
)
from .parser import ExpressionParser

logger = logging.getLogger(__name__)

# Глобальные имена, которые никогда не переписываются
GLOBAL_NAMES: FrozenSet[str] = frozenset({
    "Array", "Boolean", "Date", "Error", "Infinity", "JSON", "Map", "Math",
    "NaN", "Number", "Object", "Promise", "RegExp", "Set", "String", "Symbol",
    "console", "decodeURIComponent", "document", "encodeURIComponent",
    "globalThis", "isFinite", "isNaN", "parseFloat", "parseInt", "undefined",
    "window",
})


def _hoisted_names(block: BlockStatement) -> FrozenSet[str]:
    """Имена, объявленные через const/let/var непосредственно в блоке."""
    names = set()
    for statement in block.body:
        if isinstance(statement, VariableDeclaration):
            names.update(d.name for d in statement.declarations)
    return frozenset(names)


class ScopeRewriter:
    """
    Чистое рекурсивное преобразование AST.

    Множество объявленных имён и признак "this означает scope" передаются
    явно при каждом спуске, общего изменяемого состояния нет.
    """

    def __init__(self, scope_name: str = "scope", globals_: Iterable[str] = ()):
        self.scope_name = scope_name
        self.globals = GLOBAL_NAMES | frozenset(globals_)

    def rewrite(self, node: Expression) -> Expression:
        """Переписывает выражение верхнего уровня."""
        return self._rewrite(node, frozenset(), True)

    def _scoped(self, name: str) -> MemberExpression:
        return MemberExpression(object=Identifier(self.scope_name), property=Identifier(name))

    def _rewrite(self, node: Expression, declared: FrozenSet[str], this_is_scope: bool) -> Expression:
        node_type = node.get_type()

        if node_type == SyntaxType.IDENTIFIER:
            name = cast(Identifier, node).name
            if name in declared or name in self.globals:
                return node
            return self._scoped(name)

        if node_type == SyntaxType.THIS:
            return Identifier(self.scope_name) if this_is_scope else node

        if node_type == SyntaxType.LITERAL:
            return node

        def sub(child: Expression) -> Expression:
            return self._rewrite(child, declared, this_is_scope)

        if node_type == SyntaxType.TEMPLATE:
            template = cast(TemplateLiteral, node)
            return TemplateLiteral(
                quasis=template.quasis,
                expressions=tuple(sub(e) for e in template.expressions),
            )
        elif node_type == SyntaxType.SPREAD:
            return SpreadElement(argument=sub(cast(SpreadElement, node).argument))
        elif node_type == SyntaxType.ARRAY:
            return ArrayExpression(elements=tuple(sub(e) for e in cast(ArrayExpression, node).elements))
        elif node_type == SyntaxType.OBJECT:
            return ObjectExpression(properties=tuple(
                self._rewrite_property(p, declared, this_is_scope)
                for p in cast(ObjectExpression, node).properties
            ))
        elif node_type == SyntaxType.MEMBER:
            member = cast(MemberExpression, node)
            # Имя свойства после точки не является ссылкой на переменную
            prop = sub(member.property) if member.computed else member.property
            return MemberExpression(
                object=sub(member.object),
                property=prop,
                computed=member.computed,
                optional=member.optional,
            )
        elif node_type == SyntaxType.CALL:
            call = cast(CallExpression, node)
            return CallExpression(callee=sub(call.callee), arguments=tuple(sub(a) for a in call.arguments))
        elif node_type == SyntaxType.NEW:
            new = cast(NewExpression, node)
            return NewExpression(callee=sub(new.callee), arguments=tuple(sub(a) for a in new.arguments))
        elif node_type == SyntaxType.UNARY:
            unary = cast(UnaryExpression, node)
            return UnaryExpression(operator=unary.operator, argument=sub(unary.argument))
        elif node_type == SyntaxType.BINARY:
            binary = cast(BinaryExpression, node)
            return BinaryExpression(operator=binary.operator, left=sub(binary.left), right=sub(binary.right))
        elif node_type == SyntaxType.CONDITIONAL:
            conditional = cast(ConditionalExpression, node)
            return ConditionalExpression(
                test=sub(conditional.test),
                consequent=sub(conditional.consequent),
                alternate=sub(conditional.alternate),
            )
        elif node_type == SyntaxType.ASSIGNMENT:
            assignment = cast(AssignmentExpression, node)
            return AssignmentExpression(
                operator=assignment.operator,
                target=sub(assignment.target),
                value=sub(assignment.value),
            )
        elif node_type == SyntaxType.GROUP:
            return GroupExpression(expression=sub(cast(GroupExpression, node).expression))
        elif node_type == SyntaxType.ARROW:
            arrow = cast(ArrowFunction, node)
            inner = declared | frozenset(arrow.params)
            # Стрелочная функция наследует this окружения
            return ArrowFunction(params=arrow.params, body=self._rewrite_body(arrow.body, inner, this_is_scope))
        elif node_type == SyntaxType.FUNCTION:
            function = cast(FunctionExpression, node)
            inner = declared | frozenset(function.params)
            if function.name:
                inner |= {function.name}
            return FunctionExpression(
                name=function.name,
                params=function.params,
                body=cast(BlockStatement, self._rewrite_body(function.body, inner, False)),
            )
        elif node_type == SyntaxType.CLASS:
            return self._rewrite_class(cast(ClassExpression, node), declared)

        raise TypeError(f"Unsupported expression node: {node_type}")

    def _rewrite_property(
        self,
        prop: Union[Property, SpreadElement],
        declared: FrozenSet[str],
        this_is_scope: bool,
    ) -> Union[Property, SpreadElement]:
        if isinstance(prop, SpreadElement):
            return SpreadElement(argument=self._rewrite(prop.argument, declared, this_is_scope))

        key = self._rewrite(prop.key, declared, this_is_scope) if prop.computed else prop.key
        value = self._rewrite(prop.value, declared, this_is_scope)
        # {foo} с переписанным значением раскрывается в { foo: scope.foo }
        shorthand = prop.shorthand and value == prop.value
        return Property(key=key, value=value, computed=prop.computed, shorthand=shorthand)

    def _rewrite_class(self, node: ClassExpression, declared: FrozenSet[str]) -> ClassExpression:
        inner = declared | {node.name} if node.name else declared
        methods = tuple(
            MethodDefinition(
                name=method.name,
                params=method.params,
                body=cast(BlockStatement, self._rewrite_body(
                    method.body, inner | frozenset(method.params), False
                )),
                is_static=method.is_static,
            )
            for method in node.methods
        )
        return ClassExpression(name=node.name, superclass=node.superclass, methods=methods)

    def _rewrite_body(
        self,
        body: Union[Expression, BlockStatement],
        declared: FrozenSet[str],
        this_is_scope: bool,
    ) -> Union[Expression, BlockStatement]:
        if not isinstance(body, BlockStatement):
            return self._rewrite(body, declared, this_is_scope)

        inner = declared | _hoisted_names(body)
        return BlockStatement(body=tuple(
            self._rewrite_statement(statement, inner, this_is_scope) for statement in body.body
        ))

    def _rewrite_statement(self, statement: Statement, declared: FrozenSet[str], this_is_scope: bool) -> Statement:
        if isinstance(statement, ReturnStatement):
            if statement.argument is None:
                return statement
            return ReturnStatement(argument=self._rewrite(statement.argument, declared, this_is_scope))
        if isinstance(statement, VariableDeclaration):
            return VariableDeclaration(
                kind=statement.kind,
                declarations=tuple(
                    VariableDeclarator(
                        name=d.name,
                        init=None if d.init is None else self._rewrite(d.init, declared, this_is_scope),
                    )
                    for d in statement.declarations
                ),
            )
        expression_statement = cast(ExpressionStatement, statement)
        return ExpressionStatement(
            expression=self._rewrite(expression_statement.expression, declared, this_is_scope)
        )


class ScopedExpression(NamedTuple):
    """Результат scopeify: переписанный исходный текст и его вычислитель."""
    source: str
    evaluate: Evaluator


def scopeify(source: str, *, options: Optional[CompilerOptions] = None) -> ScopedExpression:
    """
    Переписывает выражение так, чтобы свободные имена разрешались через scope.

    Args:
        source: Исходный текст выражения
        options: Настройки компиляции (имя scope, дополнительные глобальные имена)

    Returns:
        Переписанный исходный текст и вычислитель scope -> значение

    Raises:
        EmptyExpressionError: Если выражение пустое
        ExpressionSyntaxError: При синтаксической ошибке
    """
    opts = options or DEFAULT_OPTIONS
    tree = ExpressionParser().parse(source)
    rewritten = ScopeRewriter(opts.scope_name, opts.extra_globals).rewrite(tree)
    printed = str(rewritten)
    logger.debug("scopeify %r -> %r", source, printed)
    return ScopedExpression(printed, Evaluator(printed, rewritten, opts.scope_name))


__all__ = ["GLOBAL_NAMES", "ScopeRewriter", "ScopedExpression", "scopeify"]
