"""
Лексер для разбора выражений шаблона.

Выполняет токенизацию строки выражения, разбивая её на значимые элементы:
- Числа и строки (включая шаблонные строки с подстановками)
- Ключевые слова (true, false, null, this, new, typeof, function, class, ...)
- Идентификаторы
- Операторы и знаки пунктуации
- Пробелы (игнорируются)
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List

from ..errors import ExpressionSyntaxError


@dataclass
class Token:
    """
    Токен выражения.

    Attributes:
        type: Тип токена (NUMBER, STRING, TEMPLATE, KEYWORD, IDENTIFIER, PUNCTUATOR, EOF)
        value: Исходный текст токена
        position: Позиция в исходной строке
    """
    type: str
    value: str
    position: int

    def __repr__(self):
        return f"Token({self.type}, '{self.value}', pos={self.position})"


def scan_template_literal(text: str, start: int) -> int:
    """
    Находит конец шаблонной строки, начинающейся с обратной кавычки.

    Учитывает экранирование и вложенные подстановки ${...}, внутри которых
    могут встречаться строки, фигурные скобки и другие шаблонные строки.

    Returns:
        Позиция сразу после закрывающей обратной кавычки
    """
    i = start + 1
    n = len(text)
    while i < n:
        ch = text[i]
        if ch == "\\":
            i += 2
            continue
        if ch == "`":
            return i + 1
        if ch == "$" and text.startswith("${", i):
            i = scan_substitution(text, i + 2)
            continue
        i += 1
    raise ExpressionSyntaxError("Unterminated template literal", start, text)


def scan_substitution(text: str, start: int) -> int:
    """
    Находит конец подстановки ${...}, начиная с позиции после "${".

    Returns:
        Позиция сразу после закрывающей фигурной скобки
    """
    depth = 1
    i = start
    n = len(text)
    while i < n:
        ch = text[i]
        if ch in "\"'":
            i = _scan_quoted(text, i)
            continue
        if ch == "`":
            i = scan_template_literal(text, i)
            continue
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return i + 1
        i += 1
    raise ExpressionSyntaxError("Unterminated template substitution", start - 2, text)


_SIMPLE_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "b": "\b",
    "f": "\f",
    "v": "\v",
    "0": "\0",
}


def unescape_string(body: str) -> str:
    """
    Раскрывает escape-последовательности строкового литерала.

    Неизвестная последовательность даёт сам символ (\\$ -> $, \\` -> `),
    экранированный перевод строки удаляется.
    """
    out = []
    i = 0
    n = len(body)
    while i < n:
        ch = body[i]
        if ch != "\\" or i + 1 >= n:
            out.append(ch)
            i += 1
            continue
        nxt = body[i + 1]
        if nxt in _SIMPLE_ESCAPES:
            out.append(_SIMPLE_ESCAPES[nxt])
            i += 2
        elif nxt == "x" and re.match(r"[0-9a-fA-F]{2}", body[i + 2:i + 4]):
            out.append(chr(int(body[i + 2:i + 4], 16)))
            i += 4
        elif nxt == "u" and body.startswith("{", i + 2):
            close = body.find("}", i + 3)
            out.append(chr(int(body[i + 3:close], 16)))
            i = close + 1
        elif nxt == "u" and re.match(r"[0-9a-fA-F]{4}", body[i + 2:i + 6]):
            out.append(chr(int(body[i + 2:i + 6], 16)))
            i += 6
        elif nxt == "\n":
            i += 2
        else:
            out.append(nxt)
            i += 2
    return "".join(out)


def _scan_quoted(text: str, start: int) -> int:
    quote = text[start]
    i = start + 1
    while i < len(text):
        if text[i] == "\\":
            i += 2
            continue
        if text[i] == quote:
            return i + 1
        i += 1
    raise ExpressionSyntaxError("Unterminated string literal", start, text)


class ExpressionLexer:
    """
    Лексер для разбиения строки выражения на токены.

    Поддерживаемые токены:
    - NUMBER: 1, 2.5, .5, 1e3, 0xff
    - STRING: 'text', "text"
    - TEMPLATE: `text ${expr}` (разбирается парсером)
    - KEYWORD: зарезервированные слова подмножества языка
    - IDENTIFIER: имена переменных и свойств
    - PUNCTUATOR: операторы и скобки
    - EOF: конец строки
    """

    # Спецификация токенов: (regex_pattern, token_type, ignore_flag)
    TOKEN_SPECS = [
        # Пробелы и переводы строк (игнорируем)
        (r'\s+', 'WHITESPACE', True),

        # Числа (шестнадцатеричные проверяем первыми)
        (r'0[xX][0-9a-fA-F]+', 'NUMBER', False),
        (r'(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?', 'NUMBER', False),

        # Строки в одинарных и двойных кавычках
        (r'"(?:[^"\\\n]|\\.)*"', 'STRING', False),
        (r"'(?:[^'\\\n]|\\.)*'", 'STRING', False),

        # Идентификаторы; ключевые слова определяем после захвата
        (r'[A-Za-z_$][\w$]*', 'IDENTIFIER', False),

        # Операторы: более длинные проверяются раньше
        (r'\.\.\.|===|!==|\*\*=|=>|==|!=|<=|>=|&&|\|\||\?\?|\?\.(?!\d)|\*\*|\+=|-=|\*=|/=|%=', 'PUNCTUATOR', False),
        (r'[+\-*/%<>!=?:.,;()\[\]{}]', 'PUNCTUATOR', False),

        # Неизвестный символ (ошибка)
        (r'.', 'UNKNOWN', False),
    ]

    KEYWORDS = {
        'true', 'false', 'null', 'this', 'new', 'typeof', 'void', 'instanceof',
        'in', 'function', 'class', 'extends', 'return', 'const', 'let', 'var',
    }

    def __init__(self):
        self._compiled_patterns = [
            (re.compile(pattern, re.DOTALL), token_type, ignore)
            for pattern, token_type, ignore in self.TOKEN_SPECS
        ]

    def tokenize(self, text: str) -> List[Token]:
        """
        Разбивает строку на токены.

        Args:
            text: Строка выражения для разбора

        Returns:
            Список токенов, включая EOF в конце

        Raises:
            ExpressionSyntaxError: При обнаружении неизвестного символа
                или незакрытой строки
        """
        tokens: List[Token] = []
        position = 0

        while position < len(text):
            if text[position] == '`':
                end = scan_template_literal(text, position)
                tokens.append(Token(type='TEMPLATE', value=text[position:end], position=position))
                position = end
                continue

            if text[position] in "\"'":
                # Проверяем незакрытые строки до общих шаблонов
                _scan_quoted(text, position)

            for pattern, token_type, ignore in self._compiled_patterns:
                match = pattern.match(text, position)
                if not match:
                    continue

                value = match.group(0)
                if not ignore:
                    if token_type == 'UNKNOWN':
                        raise ExpressionSyntaxError(f"Unexpected character '{value}'", position, text)

                    final_type = token_type
                    if token_type == 'IDENTIFIER' and value in self.KEYWORDS:
                        final_type = 'KEYWORD'

                    tokens.append(Token(type=final_type, value=value, position=position))

                position = match.end()
                break

        tokens.append(Token(type='EOF', value='', position=position))

        return tokens


__all__ = ["Token", "ExpressionLexer", "scan_template_literal", "scan_substitution", "unescape_string"]
