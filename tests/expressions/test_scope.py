"""
Тесты переписывания свободных идентификаторов через scope.
"""

import pytest

from tagc.config import CompilerOptions
from tagc.errors import EmptyExpressionError, ExpressionSyntaxError, TagCompilerError
from tagc.expressions import scopeify
from tagc.expressions.evaluator import Evaluator

def render(source, **options):
    opts = CompilerOptions(**options) if options else None
    return scopeify(source, options=opts).source

class TestScopeify:

    def test_free_identifier(self):
        assert render("foo") == "scope.foo"

    def test_empty_expression(self):
        with pytest.raises(EmptyExpressionError):
            scopeify("")
        with pytest.raises(EmptyExpressionError):
            scopeify("  ")

    def test_syntax_error_is_compiler_error(self):
        with pytest.raises(ExpressionSyntaxError) as exc:
            scopeify("foo +")
        assert isinstance(exc.value, TagCompilerError)

    @pytest.mark.parametrize("source", [
        "true", "1 > 2", "null", "'hello'", "undefined", "RegExp", "Number", "Boolean",
    ])
    def test_literals_and_globals_untouched(self, source):
        assert render(source) == source

    def test_binary_expression(self):
        assert render("foo + bar") == "scope.foo + scope.bar"

    def test_this_references(self):
        assert render("this.foo + this.bar") == "scope.foo + scope.bar"
        assert render("this + this") == "scope + scope"

    def test_this_and_free_identifier_are_equivalent(self):
        assert render("this.foo") == render("foo")

    def test_objects(self):
        assert render("{ foo: bar, buz: baz }") == "{ foo: scope.bar, buz: scope.baz }"
        assert (render("{ foo: { foo: bar, buz: baz }, buz: baz }")
                == "{ foo: { foo: scope.bar, buz: scope.baz }, buz: scope.baz }")

    def test_shorthand_property_expands(self):
        assert render("{ foo }") == "{ foo: scope.foo }"

    def test_computed_key_is_rewritten(self):
        assert render("{ [key]: value }") == "{ [scope.key]: scope.value }"

    def test_arrays(self):
        assert render("[foo, 'bar', baz]") == "[scope.foo, 'bar', scope.baz]"

    def test_classes(self):
        assert render("class Foo {}") == "class Foo {}"

    def test_class_superclass_is_kept(self):
        assert render("class Foo extends Bar {}") == "class Foo extends Bar {}"

    def test_class_methods_keep_own_receiver(self):
        source = "class Foo { get() { return this.x + y } }"
        assert render(source) == "class Foo { get() { return this.x + scope.y; } }"

    def test_new_expression(self):
        assert render("new Foo()") == "new scope.Foo()"

    def test_arrow_functions(self):
        assert render("(foo) => bar + foo") == "(foo) => scope.bar + foo"
        assert render("(foo) => (bar) => foo + bar + baz") == "(foo) => (bar) => foo + bar + scope.baz"

    def test_arrow_inherits_this(self):
        assert render("() => this.foo") == "() => scope.foo"

    def test_function_binds_own_this(self):
        assert render("function (a) { return this.b + a }") == "function(a) { return this.b + a; }"

    def test_block_declarations_are_local(self):
        source = "() => { const total = price * qty; return total }"
        assert render(source) == "() => { const total = scope.price * scope.qty; return total; }"

    def test_property_names_untouched(self):
        assert render("user.name.first") == "scope.user.name.first"
        assert render("items[index]") == "scope.items[scope.index]"

    def test_method_call(self):
        assert render("items.map(item => item.id)") == "scope.items.map((item) => item.id)"

    def test_template_literal(self):
        assert render("`${foo} + ${bar}`") == "`${scope.foo} + ${scope.bar}`"

    def test_typeof_and_assignment(self):
        assert render("typeof foo") == "typeof scope.foo"
        assert render("count += 1") == "scope.count += 1"

    def test_custom_scope_name(self):
        assert render("foo", scope_name="ctx") == "ctx.foo"

    def test_extra_globals(self):
        assert render("i18n.t('x') + foo", extra_globals=frozenset({"i18n"})) == "i18n.t('x') + scope.foo"

class TestScopedEvaluator:

    def test_evaluator_value_object(self):
        result = scopeify("foo + bar")

        assert isinstance(result.evaluate, Evaluator)
        assert result.evaluate.source == "scope.foo + scope.bar"
        assert result.evaluate.to_source() == "scope => scope.foo + scope.bar"

    def test_evaluate_against_scope(self):
        assert scopeify("foo").evaluate({"foo": "a"}) == "a"
        assert scopeify("foo + bar").evaluate({"foo": "a", "bar": "b"}) == "ab"

    def test_constant(self):
        assert scopeify("'hello'").evaluate() == "hello"

    def test_comparison_is_exactly_false(self):
        assert scopeify("1 > 2").evaluate() is False

    def test_object_source_is_wrapped(self):
        assert scopeify("{ a: b }").evaluate.to_source() == "scope => ({ a: scope.b })"

    def test_nested_arrow_closure(self):
        adder = scopeify("(foo) => (bar) => foo + bar + baz").evaluate({"baz": 3})
        assert adder(1)(2) == 6

    def test_class_method_uses_own_receiver(self):
        source = "new (class { constructor(x) { this.x = x } get() { return this.x + y } })(2).get()"
        assert scopeify(source).evaluate({"y": 1}) == 3
