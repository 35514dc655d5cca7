"""
Tests for merging several expressions of one text context.
"""

import pytest

from tagc.errors import ExpressionSyntaxError
from tagc.expressions import merge_expressions, scopeify_merged
from tagc.expressions.merge import escape_template_text
from tagc.markup.nodes import ExpressionSpan

from tests.infrastructure.markup import MarkupReader


class TestMergeExpressions:

    def setup_method(self):
        self.reader = MarkupReader()

    def merge(self, raw):
        return merge_expressions(raw, self.reader.find_spans(raw))

    def test_single_expression_is_unwrapped(self):
        assert self.merge("{foo}") == "foo"

    def test_single_expression_is_stripped(self):
        assert self.merge("{ foo + 1 }") == "foo + 1"

    def test_surrounding_text_keeps_template(self):
        assert self.merge("Hello {name}!") == "`Hello ${name}!`"

    def test_whitespace_counts_as_text(self):
        assert self.merge(" {foo}") == "` ${foo}`"

    def test_two_expressions(self):
        assert self.merge("{foo} + {bar}") == "`${foo} + ${bar}`"

    def test_adjacent_expressions(self):
        assert self.merge("{foo}{bar}") == "`${foo}${bar}`"

    def test_multiline_whitespace_is_preserved(self):
        raw = "\n      {foo}\n      {bar}\n    "
        assert self.merge(raw) == "`\n      ${foo}\n      ${bar}\n    `"

    def test_literal_text_is_escaped(self):
        assert self.merge("`{amount}` \\") == "`\\`${amount}\\` \\\\`"

    def test_custom_brackets(self):
        reader = MarkupReader(("[[[[", "]]]]"))
        raw = "[[[[foo]]]] + [[[[bar]]]]"
        assert merge_expressions(raw, reader.find_spans(raw)) == "`${foo} + ${bar}`"

    def test_explicit_spans(self):
        raw = "a{b}c"
        assert merge_expressions(raw, [ExpressionSpan("b", 1, 4)]) == "`a${b}c`"


class TestEscapeTemplateText:

    @pytest.mark.parametrize("text,expected", [
        ("plain", "plain"),
        ("back\\slash", "back\\\\slash"),
        ("`tick`", "\\`tick\\`"),
        ("${x}", "\\${x}"),
        ("$ {x}", "$ {x}"),
    ])
    def test_escape(self, text, expected):
        assert escape_template_text(text) == expected


class TestScopeifyMerged:

    def setup_method(self):
        self.reader = MarkupReader()

    def scoped(self, raw):
        return scopeify_merged(raw, self.reader.find_spans(raw))

    def test_merged_source_is_scoped(self):
        assert self.scoped("{foo} + {bar}").source == "`${scope.foo} + ${scope.bar}`"

    def test_merged_value(self):
        result = self.scoped("{foo} + {bar}")
        assert result.evaluate({"foo": "foo", "bar": "bar"}) == "foo + bar"

    def test_single_expression_keeps_value_type(self):
        result = self.scoped("{count}")
        assert result.evaluate({"count": 3}) == 3

    def test_numbers_are_stringified(self):
        result = self.scoped("{a} / {b}")
        assert result.evaluate({"a": 1, "b": 2.5}) == "1 / 2.5"

    def test_multiline_value(self):
        result = self.scoped("\n  {foo}\n  {bar}\n")
        assert result.evaluate({"foo": "x", "bar": "y"}) == "\n  x\n  y\n"

    def test_escaped_literal_survives(self):
        result = self.scoped("`{foo}` $ \\")
        assert result.evaluate({"foo": 1}) == "`1` $ \\"

    def test_invalid_part_raises(self):
        with pytest.raises(ExpressionSyntaxError):
            self.scoped("{foo +} {bar}")
