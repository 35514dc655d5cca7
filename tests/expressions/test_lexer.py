"""
Tests for the expression lexer.
"""

import pytest

from tagc.errors import ExpressionSyntaxError
from tagc.expressions.lexer import ExpressionLexer, Token, unescape_string


class TestExpressionLexer:

    def setup_method(self):
        self.lexer = ExpressionLexer()

    def _types(self, text):
        return [t.type for t in self.lexer.tokenize(text)]

    def _values(self, text):
        return [t.value for t in self.lexer.tokenize(text)][:-1]

    def test_empty_string(self):
        """Test tokenization of empty string"""
        tokens = self.lexer.tokenize("")
        assert len(tokens) == 1
        assert tokens[0].type == 'EOF'

    def test_whitespace_ignored(self):
        tokens = self.lexer.tokenize("  \n\t ")
        assert [t.type for t in tokens] == ['EOF']

    def test_member_access_positions(self):
        tokens = self.lexer.tokenize("foo.bar + 1")

        expected = [
            Token('IDENTIFIER', 'foo', 0),
            Token('PUNCTUATOR', '.', 3),
            Token('IDENTIFIER', 'bar', 4),
            Token('PUNCTUATOR', '+', 8),
            Token('NUMBER', '1', 10),
            Token('EOF', '', 11),
        ]

        assert len(tokens) == len(expected)
        for actual, expected_token in zip(tokens, expected):
            assert actual.type == expected_token.type
            assert actual.value == expected_token.value
            assert actual.position == expected_token.position

    def test_keywords(self):
        for keyword in ["true", "false", "null", "this", "new", "typeof", "function", "class", "extends"]:
            tokens = self.lexer.tokenize(keyword)
            assert tokens[0].type == 'KEYWORD'
            assert tokens[0].value == keyword

    def test_identifiers_with_dollar_and_underscore(self):
        assert self._values("$el _private item2") == ["$el", "_private", "item2"]
        assert self._types("$el _private item2") == ['IDENTIFIER'] * 3 + ['EOF']

    def test_undefined_is_identifier(self):
        assert self._types("undefined") == ['IDENTIFIER', 'EOF']

    def test_numbers(self):
        assert self._values("1 2.5 .5 1e3 0xff") == ["1", "2.5", ".5", "1e3", "0xff"]
        assert set(self._types("1 2.5 .5 1e3 0xff")[:-1]) == {'NUMBER'}

    def test_strings(self):
        tokens = self.lexer.tokenize("'hello' \"world\" 'it\\'s'")
        assert [t.type for t in tokens[:-1]] == ['STRING'] * 3
        assert tokens[0].value == "'hello'"
        assert tokens[2].value == "'it\\'s'"

    def test_longest_operator_wins(self):
        assert self._values("a === b !== c") == ["a", "===", "b", "!==", "c"]
        assert self._values("a => a ** 2") == ["a", "=>", "a", "**", "2"]
        assert self._values("a ?? b || c && d") == ["a", "??", "b", "||", "c", "&&", "d"]
        assert self._values("[...items]") == ["[", "...", "items", "]"]

    def test_optional_chaining_vs_conditional_number(self):
        assert self._values("a?.b") == ["a", "?.", "b"]
        assert self._values("a?.5:1") == ["a", "?", ".5", ":", "1"]

    def test_template_literal_is_single_token(self):
        tokens = self.lexer.tokenize("`${foo} + ${ {a: 1}.a }`")
        assert tokens[0].type == 'TEMPLATE'
        assert tokens[0].value == "`${foo} + ${ {a: 1}.a }`"
        assert tokens[1].type == 'EOF'

    def test_nested_template_literal(self):
        tokens = self.lexer.tokenize("`a ${`b ${c}`} d`")
        assert len(tokens) == 2
        assert tokens[0].type == 'TEMPLATE'

    def test_unterminated_string(self):
        with pytest.raises(ExpressionSyntaxError, match="Unterminated string"):
            self.lexer.tokenize("'open")

    def test_unterminated_template(self):
        with pytest.raises(ExpressionSyntaxError, match="Unterminated template"):
            self.lexer.tokenize("`open ${foo}")

    def test_unknown_character(self):
        with pytest.raises(ExpressionSyntaxError) as exc:
            self.lexer.tokenize("foo # bar")
        assert exc.value.position == 4
        assert "Syntax error at position 4" in str(exc.value)


class TestUnescapeString:

    def test_simple_escapes(self):
        assert unescape_string("a\\nb\\tc") == "a\nb\tc"

    def test_quotes_and_backslash(self):
        assert unescape_string("it\\'s \\\\ done") == "it's \\ done"

    def test_hex_and_unicode(self):
        assert unescape_string("\\x41\\u0042\\u{43}") == "ABC"

    def test_unknown_escape_yields_character(self):
        assert unescape_string("\\$\\`") == "$`"

    def test_line_continuation(self):
        assert unescape_string("a\\\nb") == "ab"
