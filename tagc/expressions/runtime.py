"""
Семантика значений при вычислении выражений шаблона.

Выражения написаны на небольшом JavaScript-подобном языке, поэтому вычисляются
по правилам JavaScript, а не Python:
- отдельное значение ``undefined``, не совпадающее с ``None`` (null)
- истинность и оператор ``+`` как в JS
- числа печатаются так же, как в браузере
- доступ к членам единообразен для словарей, списков, строк и объектов
"""

from __future__ import annotations

import json
import logging
import math
import random
import re
import urllib.parse
from collections.abc import Mapping
from decimal import Decimal
from typing import Any, Callable, Dict, List, Optional

from ..errors import ExpressionRuntimeError

logger = logging.getLogger(__name__)


class _Undefined:
    """Значение ``undefined``, отличное от ``None`` (null)."""

    _instance: Optional[_Undefined] = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "undefined"


UNDEFINED = _Undefined()


def is_nullish(value: Any) -> bool:
    return value is None or value is UNDEFINED


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def normalize_number(value: float) -> Any:
    """Целые float приводятся к int, чтобы сравниваться и печататься как числа JS."""
    if isinstance(value, float) and value.is_integer() and abs(value) < 2 ** 53:
        if value == 0 and math.copysign(1.0, value) < 0:
            return value
        return int(value)
    return value


# ---- Преобразования -------------------------------------------------------

def truthy(value: Any) -> bool:
    if is_nullish(value):
        return False
    if isinstance(value, bool):
        return value
    if is_number(value):
        return value != 0 and not (isinstance(value, float) and math.isnan(value))
    if isinstance(value, str):
        return len(value) > 0
    return True


_NUMERIC_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def to_number(value: Any) -> Any:
    if value is UNDEFINED:
        return math.nan
    if value is None:
        return 0
    if isinstance(value, bool):
        return int(value)
    if is_number(value):
        return value
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return 0
        if re.fullmatch(r"0[xX][0-9a-fA-F]+", text):
            return int(text, 16)
        if text in ("Infinity", "+Infinity"):
            return math.inf
        if text == "-Infinity":
            return -math.inf
        if _NUMERIC_RE.fullmatch(text):
            return normalize_number(float(text))
        return math.nan
    if isinstance(value, (list, tuple)):
        return to_number(to_string(value))
    return math.nan


def number_to_string(value: Any) -> str:
    if isinstance(value, int):
        return str(value)
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    text = repr(value)
    if "e" in text:
        mantissa, exponent = text.split("e")
        power = int(exponent)
        if -7 < power < 21:
            return format(Decimal(text), "f")
        return f"{mantissa}e{'+' if power > 0 else '-'}{abs(power)}"
    return text


def to_string(value: Any) -> str:
    if value is UNDEFINED:
        return "undefined"
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if is_number(value):
        return number_to_string(value)
    if isinstance(value, str):
        return value
    if isinstance(value, (list, tuple)):
        return ",".join("" if is_nullish(item) else to_string(item) for item in value)
    if hasattr(value, "js_to_string"):
        return value.js_to_string()
    if isinstance(value, Mapping):
        return "[object Object]"
    return str(value)


def to_primitive(value: Any) -> Any:
    if isinstance(value, (list, tuple, Mapping)) or hasattr(value, "js_to_string"):
        return to_string(value)
    return value


def property_key(value: Any) -> Any:
    """Ключи объектов - строки, индексы массивов остаются целыми."""
    if isinstance(value, str):
        return value
    if is_number(value):
        return number_to_string(value)
    return to_string(value)


def _array_index(key: Any) -> Optional[int]:
    if isinstance(key, bool):
        return None
    if isinstance(key, int):
        return key
    if isinstance(key, float) and key.is_integer():
        return int(key)
    if isinstance(key, str) and key.isdigit():
        return int(key)
    return None


def typeof(value: Any) -> str:
    if value is UNDEFINED:
        return "undefined"
    if value is None:
        return "object"
    if isinstance(value, bool):
        return "boolean"
    if is_number(value):
        return "number"
    if isinstance(value, str):
        return "string"
    if (callable(value) or hasattr(value, "js_call")) and not isinstance(value, Mapping):
        return "function"
    return "object"


# ---- Операторы ------------------------------------------------------------

def strict_equals(left: Any, right: Any) -> bool:
    if left is UNDEFINED or right is UNDEFINED:
        return left is right
    if left is None or right is None:
        return left is right
    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool) and left == right
    if is_number(left) and is_number(right):
        return left == right
    if isinstance(left, str) and isinstance(right, str):
        return left == right
    return left is right


def loose_equals(left: Any, right: Any) -> bool:
    if is_nullish(left) or is_nullish(right):
        return is_nullish(left) and is_nullish(right)
    if isinstance(left, bool):
        return loose_equals(int(left), right)
    if isinstance(right, bool):
        return loose_equals(left, int(right))
    if is_number(left) and isinstance(right, str):
        return left == to_number(right)
    if isinstance(left, str) and is_number(right):
        return to_number(left) == right
    if isinstance(left, (list, tuple, Mapping)) and not isinstance(right, (list, tuple, Mapping)):
        return loose_equals(to_primitive(left), right)
    if isinstance(right, (list, tuple, Mapping)) and not isinstance(left, (list, tuple, Mapping)):
        return loose_equals(left, to_primitive(right))
    return strict_equals(left, right)


def js_add(left: Any, right: Any) -> Any:
    left = to_primitive(left)
    right = to_primitive(right)
    if isinstance(left, str) or isinstance(right, str):
        return to_string(left) + to_string(right)
    return normalize_number(to_number(left) + to_number(right))


def _divide(left: Any, right: Any) -> Any:
    if right == 0:
        if left == 0 or math.isnan(left):
            return math.nan
        sign = math.copysign(1.0, right) * math.copysign(1.0, left)
        return math.inf if sign > 0 else -math.inf
    return normalize_number(left / right)


def _remainder(left: Any, right: Any) -> Any:
    if right == 0 or math.isinf(left) or math.isnan(left) or math.isnan(right):
        return math.nan
    if math.isinf(right):
        return left
    return normalize_number(math.fmod(left, right))


def _power(left: Any, right: Any) -> Any:
    try:
        result = left ** right
    except (OverflowError, ZeroDivisionError):
        return math.inf
    if isinstance(result, complex):
        return math.nan
    return normalize_number(result)


def _compare(left: Any, right: Any) -> Optional[int]:
    left = to_primitive(left)
    right = to_primitive(right)
    if isinstance(left, str) and isinstance(right, str):
        return (left > right) - (left < right)
    left = to_number(left)
    right = to_number(right)
    if math.isnan(left) or math.isnan(right):
        return None
    return (left > right) - (left < right)


def has_property(container: Any, key: Any) -> bool:
    if hasattr(container, "js_has"):
        return container.js_has(property_key(key))
    if isinstance(container, Mapping):
        return property_key(key) in container
    if isinstance(container, (list, tuple)):
        index = _array_index(key)
        return (index is not None and 0 <= index < len(container)) or key == "length"
    if is_nullish(container) or isinstance(container, (str, int, float, bool)):
        raise ExpressionRuntimeError(f"Cannot use 'in' operator to search for '{to_string(key)}' in {to_string(container)}")
    return not str(key).startswith("_") and hasattr(container, str(key))


def instance_of(value: Any, constructor: Any) -> bool:
    if hasattr(constructor, "js_instance_check"):
        return constructor.js_instance_check(value)
    if isinstance(constructor, type):
        return isinstance(value, constructor)
    raise ExpressionRuntimeError("Right-hand side of 'instanceof' is not callable")


def binary_operation(operator: str, left: Any, right: Any) -> Any:
    """Применяет бинарный оператор (кроме логических) по правилам JS."""
    if operator == "+":
        return js_add(left, right)
    if operator == "-":
        return normalize_number(to_number(left) - to_number(right))
    if operator == "*":
        return normalize_number(to_number(left) * to_number(right))
    if operator == "/":
        return _divide(to_number(left), to_number(right))
    if operator == "%":
        return _remainder(to_number(left), to_number(right))
    if operator == "**":
        return _power(to_number(left), to_number(right))
    if operator == "==":
        return loose_equals(left, right)
    if operator == "!=":
        return not loose_equals(left, right)
    if operator == "===":
        return strict_equals(left, right)
    if operator == "!==":
        return not strict_equals(left, right)
    if operator in ("<", ">", "<=", ">="):
        result = _compare(left, right)
        if result is None:
            return False
        if operator == "<":
            return result < 0
        if operator == ">":
            return result > 0
        if operator == "<=":
            return result <= 0
        return result >= 0
    if operator == "in":
        return has_property(right, left)
    if operator == "instanceof":
        return instance_of(left, right)
    raise ExpressionRuntimeError(f"Unknown operator: {operator}")


# ---- Вызовы ---------------------------------------------------------------

def call_function(function: Any, arguments: List[Any], this: Any = UNDEFINED) -> Any:
    if hasattr(function, "js_call"):
        return function.js_call(this, arguments)
    if callable(function) and not isinstance(function, type):
        return function(*arguments)
    if isinstance(function, type):
        return function(*arguments)
    raise ExpressionRuntimeError(f"{to_string(function)} is not a function")


def construct(constructor: Any, arguments: List[Any]) -> Any:
    if hasattr(constructor, "js_construct"):
        return constructor.js_construct(arguments)
    if isinstance(constructor, type):
        return constructor(*arguments)
    raise ExpressionRuntimeError(f"{to_string(constructor)} is not a constructor")


def iterate(value: Any) -> List[Any]:
    """Элементы, которые даёт развёртка значения (...value)."""
    if isinstance(value, str):
        return list(value)
    if isinstance(value, Mapping) or is_nullish(value):
        raise ExpressionRuntimeError(f"{to_string(value)} is not iterable")
    try:
        return list(value)
    except TypeError:
        raise ExpressionRuntimeError(f"{to_string(value)} is not iterable") from None


class NativeFunction:
    """
    Функция среды, доступная выражениям.

    Помимо вызова может иметь статические члены (``Array.isArray``),
    работать как конструктор и отвечать на проверку ``instanceof``.
    """

    def __init__(
        self,
        name: str,
        function: Callable[..., Any],
        members: Optional[Dict[str, Any]] = None,
        instance_check: Optional[Callable[[Any], bool]] = None,
        constructor: Optional[Callable[..., Any]] = None,
    ):
        self.name = name
        self.function = function
        self.members = members or {}
        self.instance_check = instance_check
        self.constructor = constructor

    def __call__(self, *arguments: Any) -> Any:
        return self.function(*arguments)

    def js_call(self, this: Any, arguments: List[Any]) -> Any:
        return self.function(*arguments)

    def js_construct(self, arguments: List[Any]) -> Any:
        factory = self.constructor or self.function
        return factory(*arguments)

    def js_get(self, key: str) -> Any:
        if key == "name":
            return self.name
        return self.members.get(key, UNDEFINED)

    def js_has(self, key: str) -> bool:
        return key in self.members

    def js_instance_check(self, value: Any) -> bool:
        if self.instance_check is None:
            return False
        return self.instance_check(value)

    def js_to_string(self) -> str:
        return f"function {self.name}() {{ [native code] }}"

    def __repr__(self) -> str:
        return f"NativeFunction({self.name})"


def _bind(function: Callable[..., Any], receiver: Any, name: str) -> NativeFunction:
    return NativeFunction(name, lambda *arguments: function(receiver, *arguments))


def _optional_int(value: Any, default: int) -> int:
    if value is UNDEFINED:
        return default
    number = to_number(value)
    if isinstance(number, float) and math.isnan(number):
        return 0
    if isinstance(number, float) and math.isinf(number):
        return default if number > 0 else -default - 1
    return int(number)


def _relative_index(value: Any, length: int, default: int) -> int:
    index = _optional_int(value, default)
    if index < 0:
        return max(length + index, 0)
    return min(index, length)


# ---- Методы строк ---------------------------------------------------------

def _string_slice(text: str, start: Any = UNDEFINED, end: Any = UNDEFINED) -> str:
    length = len(text)
    return text[_relative_index(start, length, 0):_relative_index(end, length, length)]


def _string_substring(text: str, start: Any = UNDEFINED, end: Any = UNDEFINED) -> str:
    length = len(text)
    lower = min(max(_optional_int(start, 0), 0), length)
    upper = min(max(_optional_int(end, length), 0), length)
    if lower > upper:
        lower, upper = upper, lower
    return text[lower:upper]


def _string_split(text: str, separator: Any = UNDEFINED, limit: Any = UNDEFINED) -> List[str]:
    if separator is UNDEFINED:
        parts = [text]
    elif to_string(separator) == "":
        parts = list(text)
    else:
        parts = text.split(to_string(separator))
    if limit is not UNDEFINED:
        parts = parts[:_optional_int(limit, len(parts))]
    return parts


def _string_index_of(text: str, search: Any, start: Any = UNDEFINED) -> int:
    return text.find(to_string(search), max(_optional_int(start, 0), 0))


def _string_last_index_of(text: str, search: Any) -> int:
    return text.rfind(to_string(search))


def _string_pad(text: str, length: Any, fill: Any, at_start: bool) -> str:
    target = _optional_int(length, 0)
    pad = " " if fill is UNDEFINED else to_string(fill)
    if target <= len(text) or not pad:
        return text
    needed = target - len(text)
    padding = (pad * (needed // len(pad) + 1))[:needed]
    return padding + text if at_start else text + padding


STRING_METHODS: Dict[str, Callable[..., Any]] = {
    "toUpperCase": lambda s: s.upper(),
    "toLowerCase": lambda s: s.lower(),
    "trim": lambda s: s.strip(),
    "trimStart": lambda s: s.lstrip(),
    "trimEnd": lambda s: s.rstrip(),
    "includes": lambda s, search, start=UNDEFINED: to_string(search) in s[max(_optional_int(start, 0), 0):],
    "startsWith": lambda s, search, start=UNDEFINED: s.startswith(to_string(search), max(_optional_int(start, 0), 0)),
    "endsWith": lambda s, search: s.endswith(to_string(search)),
    "indexOf": _string_index_of,
    "lastIndexOf": _string_last_index_of,
    "slice": _string_slice,
    "substring": _string_substring,
    "split": _string_split,
    "replace": lambda s, old, new: s.replace(to_string(old), to_string(new), 1),
    "replaceAll": lambda s, old, new: s.replace(to_string(old), to_string(new)),
    "repeat": lambda s, count: s * max(_optional_int(count, 0), 0),
    "charAt": lambda s, index=UNDEFINED: (lambda i: s[i] if 0 <= i < len(s) else "")(_optional_int(index, 0)),
    "concat": lambda s, *rest: s + "".join(to_string(item) for item in rest),
    "padStart": lambda s, length, fill=UNDEFINED: _string_pad(s, length, fill, True),
    "padEnd": lambda s, length, fill=UNDEFINED: _string_pad(s, length, fill, False),
    "toString": lambda s: s,
}


# ---- Методы массивов ------------------------------------------------------

def _callback(function: Any, item: Any, index: int, items: List[Any]) -> Any:
    return call_function(function, [item, index, items])


def _array_join(items: List[Any], separator: Any = UNDEFINED) -> str:
    glue = "," if separator is UNDEFINED else to_string(separator)
    return glue.join("" if is_nullish(item) else to_string(item) for item in items)


def _array_index_of(items: List[Any], search: Any) -> int:
    for index, item in enumerate(items):
        if strict_equals(item, search):
            return index
    return -1


def _array_slice(items: List[Any], start: Any = UNDEFINED, end: Any = UNDEFINED) -> List[Any]:
    length = len(items)
    return list(items[_relative_index(start, length, 0):_relative_index(end, length, length)])


def _array_concat(items: List[Any], *rest: Any) -> List[Any]:
    result = list(items)
    for item in rest:
        if isinstance(item, (list, tuple)):
            result.extend(item)
        else:
            result.append(item)
    return result


def _array_find(items: List[Any], function: Any) -> Any:
    for index, item in enumerate(items):
        if truthy(_callback(function, item, index, items)):
            return item
    return UNDEFINED


def _array_find_index(items: List[Any], function: Any) -> int:
    for index, item in enumerate(items):
        if truthy(_callback(function, item, index, items)):
            return index
    return -1


def _array_reduce(items: List[Any], function: Any, *initial: Any) -> Any:
    values = list(items)
    if initial:
        accumulator = initial[0]
    elif values:
        accumulator = values.pop(0)
    else:
        raise ExpressionRuntimeError("Reduce of empty array with no initial value")
    offset = len(items) - len(values)
    for index, item in enumerate(values, start=offset):
        accumulator = call_function(function, [accumulator, item, index, items])
    return accumulator


def _array_for_each(items: List[Any], function: Any) -> Any:
    for index, item in enumerate(items):
        _callback(function, item, index, items)
    return UNDEFINED


def _array_push(items: List[Any], *values: Any) -> int:
    if not isinstance(items, list):
        raise ExpressionRuntimeError("Cannot push to an immutable sequence")
    items.extend(values)
    return len(items)


def _array_pop(items: List[Any]) -> Any:
    if not isinstance(items, list):
        raise ExpressionRuntimeError("Cannot pop from an immutable sequence")
    return items.pop() if items else UNDEFINED


ARRAY_METHODS: Dict[str, Callable[..., Any]] = {
    "join": _array_join,
    "includes": lambda items, search: any(
        strict_equals(item, search) or (item != item and search != search) for item in items
    ),
    "indexOf": _array_index_of,
    "slice": _array_slice,
    "concat": _array_concat,
    "map": lambda items, f: [_callback(f, item, i, items) for i, item in enumerate(items)],
    "filter": lambda items, f: [item for i, item in enumerate(items) if truthy(_callback(f, item, i, items))],
    "find": _array_find,
    "findIndex": _array_find_index,
    "some": lambda items, f: any(truthy(_callback(f, item, i, items)) for i, item in enumerate(items)),
    "every": lambda items, f: all(truthy(_callback(f, item, i, items)) for i, item in enumerate(items)),
    "reduce": _array_reduce,
    "forEach": _array_for_each,
    "push": _array_push,
    "pop": _array_pop,
    "toString": _array_join,
}


def _number_to_fixed(value: Any, digits: Any = UNDEFINED) -> str:
    return f"{to_number(value):.{max(_optional_int(digits, 0), 0)}f}"


NUMBER_METHODS: Dict[str, Callable[..., Any]] = {
    "toFixed": _number_to_fixed,
    "toString": lambda value: to_string(value),
}


# ---- Доступ к членам ------------------------------------------------------

def get_member(target: Any, key: Any) -> Any:
    """
    Читает ``target[key]`` по правилам JS.

    Raises:
        ExpressionRuntimeError: При чтении свойства у null или undefined
    """
    if is_nullish(target):
        raise ExpressionRuntimeError(
            f"Cannot read properties of {to_string(target)} (reading '{to_string(key)}')"
        )

    if hasattr(target, "js_get"):
        return target.js_get(property_key(key))

    if isinstance(target, Mapping):
        name = property_key(key)
        if name in target:
            return target[name]
        index = _array_index(key)
        if index is not None and index in target:
            return target[index]
        return UNDEFINED

    if isinstance(target, str):
        if key == "length":
            return len(target)
        index = _array_index(key)
        if index is not None:
            return target[index] if 0 <= index < len(target) else UNDEFINED
        if key in STRING_METHODS:
            return _bind(STRING_METHODS[key], target, key)
        return UNDEFINED

    if isinstance(target, (list, tuple)):
        if key == "length":
            return len(target)
        index = _array_index(key)
        if index is not None:
            return target[index] if 0 <= index < len(target) else UNDEFINED
        if key in ARRAY_METHODS:
            return _bind(ARRAY_METHODS[key], target, key)
        return UNDEFINED

    if is_number(target) or isinstance(target, bool):
        if key in NUMBER_METHODS:
            return _bind(NUMBER_METHODS[key], target, key)
        return UNDEFINED

    name = property_key(key)
    if name.startswith("_"):
        return UNDEFINED
    return getattr(target, name, UNDEFINED)


def set_member(target: Any, key: Any, value: Any) -> Any:
    """Записывает ``target[key] = value`` и возвращает присвоенное значение."""
    if is_nullish(target):
        raise ExpressionRuntimeError(
            f"Cannot set properties of {to_string(target)} (setting '{to_string(key)}')"
        )

    if hasattr(target, "js_set"):
        target.js_set(property_key(key), value)
        return value

    if isinstance(target, dict):
        target[property_key(key)] = value
        return value

    if isinstance(target, list):
        index = _array_index(key)
        if index is None or index < 0:
            raise ExpressionRuntimeError(f"Invalid array index: {to_string(key)}")
        if index >= len(target):
            target.extend([UNDEFINED] * (index + 1 - len(target)))
        target[index] = value
        return value

    name = property_key(key)
    if isinstance(target, (str, int, float, bool, tuple, Mapping)) or name.startswith("_"):
        raise ExpressionRuntimeError(f"Cannot assign to property '{name}' of {to_string(target)}")
    try:
        setattr(target, name, value)
    except AttributeError as e:
        raise ExpressionRuntimeError(f"Cannot assign to property '{name}': {e}") from e
    return value


# ---- Глобальные -----------------------------------------------------------

def _math_round(value: Any) -> Any:
    number = to_number(value)
    if math.isnan(number) or math.isinf(number):
        return number
    return int(math.floor(number + 0.5))


def _math_extreme(pick: Callable[..., Any], empty: float) -> Callable[..., Any]:
    def compute(*values: Any) -> Any:
        numbers = [to_number(value) for value in values]
        if any(isinstance(n, float) and math.isnan(n) for n in numbers):
            return math.nan
        return pick(numbers) if numbers else empty
    return compute


def _math_unary(function: Callable[[float], Any]) -> Callable[[Any], Any]:
    def compute(value: Any = UNDEFINED) -> Any:
        number = to_number(value)
        if isinstance(number, float) and (math.isnan(number) or math.isinf(number)):
            return number if function in (abs, math.floor, math.ceil, math.trunc) else math.nan
        try:
            return normalize_number(function(number))
        except ValueError:
            return math.nan
    return compute


MATH: Dict[str, Any] = {
    "PI": math.pi,
    "E": math.e,
    "abs": _math_unary(abs),
    "ceil": _math_unary(math.ceil),
    "floor": _math_unary(math.floor),
    "trunc": _math_unary(math.trunc),
    "sqrt": _math_unary(math.sqrt),
    "log": _math_unary(math.log),
    "sign": _math_unary(lambda n: (n > 0) - (n < 0)),
    "round": _math_round,
    "max": _math_extreme(max, -math.inf),
    "min": _math_extreme(min, math.inf),
    "pow": lambda base, exponent: binary_operation("**", base, exponent),
    "random": lambda: random.random(),
}


def _to_json_data(value: Any) -> Any:
    if isinstance(value, float) and (math.isnan(value) or math.isinf(value)):
        return None
    if isinstance(value, Mapping):
        return {
            property_key(k): _to_json_data(v)
            for k, v in value.items()
            if v is not UNDEFINED and not callable(v)
        }
    if isinstance(value, (list, tuple)):
        return [None if (v is UNDEFINED or callable(v)) else _to_json_data(v) for v in value]
    return value


def _json_stringify(value: Any, replacer: Any = UNDEFINED, indent: Any = UNDEFINED) -> Any:
    if value is UNDEFINED or callable(value):
        return UNDEFINED
    spaces = None if indent is UNDEFINED else _optional_int(indent, 0) or None
    separators = (",", ":") if spaces is None else (",", ": ")
    return json.dumps(_to_json_data(value), ensure_ascii=False, indent=spaces, separators=separators)


def _json_parse(text: Any) -> Any:
    try:
        return json.loads(to_string(text))
    except json.JSONDecodeError as e:
        raise ExpressionRuntimeError(f"JSON.parse: {e}") from e


JSON: Dict[str, Any] = {
    "stringify": _json_stringify,
    "parse": _json_parse,
}


def _parse_int(value: Any, radix: Any = UNDEFINED) -> Any:
    text = to_string(value).strip()
    base = _optional_int(radix, 10) or 10
    sign = 1
    if text and text[0] in "+-":
        sign = -1 if text[0] == "-" else 1
        text = text[1:]
    if base == 16 or radix is UNDEFINED:
        if text[:2].lower() == "0x":
            text = text[2:]
            base = 16
    if not 2 <= base <= 36:
        return math.nan
    digits = "0123456789abcdefghijklmnopqrstuvwxyz"[:base]
    prefix = ""
    for ch in text.lower():
        if ch not in digits:
            break
        prefix += ch
    if not prefix:
        return math.nan
    return sign * int(prefix, base)


def _parse_float(value: Any) -> Any:
    text = to_string(value).strip()
    if text.startswith(("Infinity", "+Infinity")):
        return math.inf
    if text.startswith("-Infinity"):
        return -math.inf
    match = _NUMERIC_RE.match(text)
    if not match:
        return math.nan
    return normalize_number(float(match.group(0)))


def _is_nan(value: Any = UNDEFINED) -> bool:
    number = to_number(value)
    return isinstance(number, float) and math.isnan(number)


def _is_finite(value: Any = UNDEFINED) -> bool:
    number = to_number(value)
    return not (isinstance(number, float) and (math.isnan(number) or math.isinf(number)))


def _object_keys(value: Any) -> List[str]:
    if isinstance(value, Mapping):
        return [property_key(k) for k in value.keys()]
    if isinstance(value, (list, tuple, str)):
        return [str(i) for i in range(len(value))]
    return []


def _object_values(value: Any) -> List[Any]:
    if isinstance(value, Mapping):
        return list(value.values())
    if isinstance(value, (list, tuple, str)):
        return list(value)
    return []


def _object_assign(target: Any, *sources: Any) -> Any:
    for source in sources:
        if isinstance(source, Mapping):
            for key, value in source.items():
                set_member(target, key, value)
    return target


def _array_from(value: Any = UNDEFINED, function: Any = UNDEFINED) -> List[Any]:
    if isinstance(value, Mapping) and "length" in value:
        items = [value.get(str(i), UNDEFINED) for i in range(_optional_int(value["length"], 0))]
    elif is_nullish(value):
        raise ExpressionRuntimeError(f"{to_string(value)} is not iterable")
    else:
        items = iterate(value)
    if function is not UNDEFINED:
        return [call_function(function, [item, index]) for index, item in enumerate(items)]
    return items


def _array_constructor(*arguments: Any) -> List[Any]:
    if len(arguments) == 1 and is_number(arguments[0]):
        return [UNDEFINED] * int(arguments[0])
    return list(arguments)


class JSError:
    """Объект, создаваемый ``Error(message)`` и ``new Error(message)``."""

    def __init__(self, message: Any = UNDEFINED):
        self.properties: Dict[str, Any] = {
            "name": "Error",
            "message": "" if message is UNDEFINED else to_string(message),
        }

    def js_get(self, key: str) -> Any:
        return self.properties.get(key, UNDEFINED)

    def js_set(self, key: str, value: Any) -> None:
        self.properties[key] = value

    def js_has(self, key: str) -> bool:
        return key in self.properties

    def js_to_string(self) -> str:
        name = to_string(self.properties["name"])
        message = to_string(self.properties["message"])
        return f"{name}: {message}" if message else name


def _console_method(level: int) -> Callable[..., Any]:
    def log(*values: Any) -> Any:
        logger.log(level, " ".join(to_string(value) for value in values))
        return UNDEFINED
    return log


# console.* пишет в журнал модуля
CONSOLE: Dict[str, Any] = {
    "log": _console_method(logging.INFO),
    "info": _console_method(logging.INFO),
    "debug": _console_method(logging.DEBUG),
    "warn": _console_method(logging.WARNING),
    "error": _console_method(logging.ERROR),
}


GLOBALS: Dict[str, Any] = {
    "undefined": UNDEFINED,
    "Infinity": math.inf,
    "NaN": math.nan,
    "Math": MATH,
    "JSON": JSON,
    "Number": NativeFunction(
        "Number",
        lambda value=0: to_number(value),
        members={
            "isInteger": lambda value=UNDEFINED: is_number(value) and _is_finite(value) and float(value).is_integer(),
            "isNaN": lambda value=UNDEFINED: is_number(value) and _is_nan(value),
            "isFinite": lambda value=UNDEFINED: is_number(value) and _is_finite(value),
            "parseInt": _parse_int,
            "parseFloat": _parse_float,
            "MAX_SAFE_INTEGER": 2 ** 53 - 1,
            "MIN_SAFE_INTEGER": -(2 ** 53 - 1),
        },
        instance_check=lambda value: False,
    ),
    "String": NativeFunction(
        "String",
        lambda value="": to_string(value),
        instance_check=lambda value: False,
    ),
    "Boolean": NativeFunction(
        "Boolean",
        lambda value=UNDEFINED: truthy(value),
        instance_check=lambda value: False,
    ),
    "Array": NativeFunction(
        "Array",
        _array_constructor,
        members={
            "isArray": lambda value=UNDEFINED: isinstance(value, (list, tuple)),
            "from": _array_from,
            "of": lambda *items: list(items),
        },
        instance_check=lambda value: isinstance(value, (list, tuple)),
    ),
    "Object": NativeFunction(
        "Object",
        lambda value=UNDEFINED: {} if is_nullish(value) else value,
        members={
            "keys": _object_keys,
            "values": _object_values,
            "entries": lambda value: [[k, v] for k, v in zip(_object_keys(value), _object_values(value))],
            "assign": _object_assign,
        },
        instance_check=lambda value: isinstance(value, (Mapping, list, tuple)) or hasattr(value, "js_get"),
    ),
    "parseInt": NativeFunction("parseInt", _parse_int),
    "parseFloat": NativeFunction("parseFloat", _parse_float),
    "isNaN": NativeFunction("isNaN", _is_nan),
    "isFinite": NativeFunction("isFinite", _is_finite),
    "encodeURIComponent": NativeFunction(
        "encodeURIComponent",
        lambda value=UNDEFINED: urllib.parse.quote(to_string(value), safe="-_.!~*'()"),
    ),
    "decodeURIComponent": NativeFunction(
        "decodeURIComponent",
        lambda value=UNDEFINED: urllib.parse.unquote(to_string(value)),
    ),
    "Error": NativeFunction(
        "Error",
        JSError,
        instance_check=lambda value: isinstance(value, JSError),
    ),
    "console": CONSOLE,
}
GLOBALS["globalThis"] = GLOBALS

# Защищены от переписывания в scope, но определяются только исполняющей средой
HOST_GLOBALS = frozenset({
    "Date", "Map", "Promise", "RegExp", "Set", "Symbol", "document", "window",
})


__all__ = [
    "UNDEFINED",
    "GLOBALS",
    "HOST_GLOBALS",
    "JSError",
    "NativeFunction",
    "is_nullish",
    "is_number",
    "normalize_number",
    "truthy",
    "to_number",
    "to_string",
    "property_key",
    "typeof",
    "strict_equals",
    "loose_equals",
    "js_add",
    "binary_operation",
    "call_function",
    "construct",
    "iterate",
    "get_member",
    "set_member",
]
