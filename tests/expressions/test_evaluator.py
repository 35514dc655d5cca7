"""
Tests for evaluating compiled expressions against a scope.
"""

import logging
import math

import pytest

from tagc.errors import ExpressionRuntimeError
from tagc.expressions import scopeify
from tagc.expressions.evaluator import Evaluator, JSClass, JSFunction
from tagc.expressions.parser import ExpressionParser
from tagc.expressions.runtime import UNDEFINED, to_string, typeof


def run(source, scope=None):
    return scopeify(source).evaluate({} if scope is None else scope)


class TestEvaluator:

    def setup_method(self):
        self.parser = ExpressionParser()

    def test_unscoped_evaluator(self):
        node = self.parser.parse("ctx.a * 2")
        evaluator = Evaluator("ctx.a * 2", node, "ctx")

        assert evaluator({"a": 21}) == 42
        assert str(evaluator) == "ctx => ctx.a * 2"

    def test_missing_property_is_undefined(self):
        assert run("foo") is UNDEFINED
        assert run("foo === undefined") is True

    def test_reading_property_of_undefined_raises(self):
        with pytest.raises(ExpressionRuntimeError, match="Cannot read properties of undefined"):
            run("foo.bar")

    def test_optional_chaining(self):
        assert run("foo?.bar") is UNDEFINED
        assert run("foo?.bar", {"foo": {"bar": 1}}) == 1

    def test_logical_operators_return_operands(self):
        assert run("a || 'fallback'", {"a": ""}) == "fallback"
        assert run("a && a.name", {"a": None}) is None
        assert run("a ?? 0", {"a": None}) == 0
        assert run("a ?? 0", {"a": False}) is False

    def test_arithmetic(self):
        assert run("7 / 2") == 3.5
        assert run("6 / 2") == 3
        assert isinstance(run("6 / 2"), int)
        assert run("7 % 3") == 1
        assert run("2 ** 10") == 1024
        assert run("1 / 0") == math.inf
        assert math.isnan(run("0 / 0"))

    def test_string_concatenation(self):
        assert run("'a' + 1") == "a1"
        assert run("1 + 2 + 'x'") == "3x"
        assert run("'n: ' + null") == "n: null"
        assert run("[1, 2] + ''") == "1,2"

    def test_equality(self):
        assert run("1 == '1'") is True
        assert run("1 === '1'") is False
        assert run("null == undefined") is True
        assert run("null === undefined") is False

    def test_comparisons(self):
        assert run("'b' > 'a'") is True
        assert run("2 >= 2") is True
        assert run("1 < undefined") is False

    def test_conditional(self):
        assert run("ok ? 'yes' : 'no'", {"ok": 1}) == "yes"
        assert run("ok ? 'yes' : 'no'", {"ok": 0}) == "no"

    def test_typeof(self):
        assert run("typeof 1") == "number"
        assert run("typeof 'a'") == "string"
        assert run("typeof null") == "object"
        assert run("typeof foo") == "undefined"
        assert run("typeof (() => 1)") == "function"

    def test_arrays_and_methods(self):
        scope = {"items": [1, 2, 3]}

        assert run("items.length", scope) == 3
        assert run("items.map(item => item * 2)", scope) == [2, 4, 6]
        assert run("items.filter(item => item > 1).join('-')", scope) == "2-3"
        assert run("items.reduce((sum, item) => sum + item, 0)", scope) == 6
        assert run("[...items, 4]", scope) == [1, 2, 3, 4]

    def test_string_methods(self):
        assert run("name.toUpperCase()", {"name": "tag"}) == "TAG"
        assert run("name.split(',')", {"name": "a,b"}) == ["a", "b"]
        assert run("name.length", {"name": "abc"}) == 3

    def test_objects(self):
        assert run("{ a: 1, [key]: 2 }", {"key": "b"}) == {"a": 1, "b": 2}
        assert run("{ ...base, b: 2 }", {"base": {"a": 1}}) == {"a": 1, "b": 2}

    def test_assignment_updates_scope(self):
        scope = {"count": 1}
        assert run("count += 2", scope) == 3
        assert scope["count"] == 3

    def test_globals(self):
        assert run("Math.max(1, 5, 3)") == 5
        assert run("parseInt('42px')") == 42
        assert run("JSON.stringify({ a: [1, 2] })") == '{"a":[1,2]}'
        assert run("Array.isArray(items)", {"items": []}) is True

    def test_closures_capture_scope(self):
        handler = run("(event) => event.type + ':' + label", {"label": "ok"})

        assert isinstance(handler, JSFunction)
        assert handler({"type": "click"}) == "click:ok"

    def test_block_body(self):
        total = run("(a, b) => { const sum = a + b; return sum * factor }", {"factor": 10})
        assert total(1, 2) == 30

    def test_function_without_return_is_undefined(self):
        assert run("(() => { const a = 1; })()") is UNDEFINED

    def test_missing_arguments_are_undefined(self):
        assert run("((a, b) => b)(1)") is UNDEFINED

    def test_classes(self):
        source = (
            "class Counter { constructor(start) { this.value = start } "
            "increment() { this.value += 1; return this.value } "
            "static create() { return new Counter(10) } }"
        )
        counter_class = run(source)
        assert isinstance(counter_class, JSClass)
        assert typeof(counter_class) == "function"

    def test_class_inheritance_and_instanceof(self):
        source = (
            "(() => { const Base = class Base { hello() { return 'hi ' + this.name } }; "
            "const Child = class Child extends Base { constructor(name) { this.name = name } }; "
            "const child = new Child('bob'); "
            "return [child.hello(), child instanceof Base, child instanceof Child]; })()"
        )
        assert run(source) == ["hi bob", True, True]

    def test_class_requires_new(self):
        with pytest.raises(ExpressionRuntimeError, match="cannot be invoked without 'new'"):
            run("(class Foo {})()")

    def test_not_a_function(self):
        with pytest.raises(ExpressionRuntimeError, match="is not a function"):
            run("foo()", {"foo": 1})

    def test_in_operator_on_primitive(self):
        with pytest.raises(ExpressionRuntimeError):
            run("'a' in 'abc'")

    def test_in_operator(self):
        assert run("'a' in obj", {"obj": {"a": 1}}) is True
        assert run("'b' in obj", {"obj": {"a": 1}}) is False

    def test_error_global(self):
        error = run("new Error('boom')")

        assert run("e.message", {"e": error}) == "boom"
        assert run("e instanceof Error", {"e": error}) is True
        assert to_string(error) == "Error: boom"
        assert run("Error('x').name") == "Error"

    def test_console_writes_to_log(self, caplog):
        with caplog.at_level(logging.INFO, logger="tagc.expressions.runtime"):
            assert run("console.log('hello', count)", {"count": 1}) is UNDEFINED

        assert "hello 1" in caplog.text

    def test_global_this(self):
        assert run("globalThis.Math.max(1, 2)") == 2

    def test_host_only_globals_are_not_defined(self):
        with pytest.raises(ExpressionRuntimeError, match="Date is not defined"):
            run("new Date()")
        assert scopeify("new Date()").source == "new Date()"


class TestRuntimeStrings:

    @pytest.mark.parametrize("value,expected", [
        (UNDEFINED, "undefined"),
        (None, "null"),
        (True, "true"),
        (1.0, "1"),
        (0.5, "0.5"),
        (math.inf, "Infinity"),
        (math.nan, "NaN"),
        ([1, None, "a"], "1,,a"),
        ({"a": 1}, "[object Object]"),
    ])
    def test_to_string(self, value, expected):
        assert to_string(value) == expected
