"""
Язык выражений шаблонов: разбор, переписывание через scope и вычисление.
"""

from .lexer import ExpressionLexer, Token
from .parser import ExpressionParser, parse_expression
from .evaluator import Evaluator
from .runtime import UNDEFINED
from .scope import GLOBAL_NAMES, ScopeRewriter, ScopedExpression, scopeify
from .merge import merge_expressions, scopeify_merged

__all__ = [
    "ExpressionLexer",
    "Token",
    "ExpressionParser",
    "parse_expression",
    "Evaluator",
    "UNDEFINED",
    "GLOBAL_NAMES",
    "ScopeRewriter",
    "ScopedExpression",
    "scopeify",
    "merge_expressions",
    "scopeify_merged",
]
