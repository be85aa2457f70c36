"""Tests for the configuration tokenizer."""

import pytest
from infraexplain.errors import ParseError
from infraexplain.parser.lexer import TokenType, tokenize


def types(text):
    return [t.type for t in tokenize(text) if t.type != TokenType.NEWLINE]


def strings(text):
    return [t for t in tokenize(text) if t.type == TokenType.STRING]


class TestBasicTokens:
    def test_block_header(self):
        assert types('resource "aws_s3_bucket" "logs" {}') == [
            TokenType.IDENT, TokenType.STRING, TokenType.STRING,
            TokenType.LBRACE, TokenType.RBRACE,
        ]

    def test_attribute(self):
        tokens = tokenize('count = 3')
        assert [t.value for t in tokens] == ['count', '=', '3']
        assert tokens[1].type == TokenType.EQUALS

    def test_equality_operator_is_not_assignment(self):
        tokens = tokenize('a == b')
        assert tokens[1].type == TokenType.OPERATOR
        assert tokens[1].value == '=='

    def test_identifiers_with_dashes(self):
        tokens = tokenize('my-name_1')
        assert len(tokens) == 1
        assert tokens[0].value == 'my-name_1'

    def test_numbers(self):
        assert [t.value for t in tokenize('1 2.5 1e3 4.0E-2')] == ['1', '2.5', '1e3', '4.0E-2']

    def test_newlines_are_tokens(self):
        tokens = tokenize('a = 1\nb = 2\n')
        assert [t.type for t in tokens].count(TokenType.NEWLINE) == 2

    def test_line_and_column(self):
        tokens = tokenize('a = 1\n  b = 2')
        b = next(t for t in tokens if t.value == 'b')
        assert (b.line, b.column) == (2, 3)

    def test_empty_input(self):
        assert tokenize('') == []


class TestComments:
    def test_hash_comment(self):
        assert types('# resource "x" "y" {\na = 1') == [
            TokenType.IDENT, TokenType.EQUALS, TokenType.NUMBER,
        ]

    def test_slash_comment(self):
        assert types('a = 1 // trailing }') == [
            TokenType.IDENT, TokenType.EQUALS, TokenType.NUMBER,
        ]

    def test_block_comment_spanning_lines(self):
        tokens = tokenize('/* {\n } */ a')
        assert tokens[-1].value == 'a'
        assert tokens[-1].line == 2

    def test_unterminated_block_comment(self):
        with pytest.raises(ParseError) as exc_info:
            tokenize('a = 1 /* never closed')
        assert exc_info.value.line == 1


class TestStrings:
    def test_braces_inside_string(self):
        tokens = strings('x = "a { b } c"')
        assert tokens[0].value == 'a { b } c'
        assert types('x = "a { b } c"').count(TokenType.LBRACE) == 0

    def test_escaped_quote_does_not_end_string(self):
        tokens = strings(r'x = "say \"hi\" }"')
        assert tokens[0].value == 'say "hi" }'

    def test_escaped_backslash_before_quote(self):
        tokens = strings(r'x = "path\\" y = "z"')
        assert tokens[0].value == 'path\\'
        assert tokens[1].value == 'z'

    def test_escape_sequences(self):
        tokens = strings(r'x = "a\nb\tcé"')
        assert tokens[0].value == 'a\nb\tcé'

    def test_unknown_escape_keeps_character(self):
        tokens = strings(r'x = "a\qb"')
        assert tokens[0].value == 'aqb'

    def test_interpolation_marks_template(self):
        tokens = strings('x = "app-${var.name}"')
        assert tokens[0].has_template

    def test_interpolation_with_nested_quotes_and_braces(self):
        text = 'x = "${lookup({ a = "}" }, "a")}" y'
        tokens = tokenize(text)
        assert tokens[2].type == TokenType.STRING
        assert tokens[2].has_template
        assert tokens[-1].value == 'y'

    def test_escaped_interpolation_is_literal(self):
        tokens = strings('x = "$${not_a_template}"')
        assert tokens[0].value == '${not_a_template}'
        assert not tokens[0].has_template

    def test_unterminated_string(self):
        with pytest.raises(ParseError):
            tokenize('x = "never closed')

    def test_string_cannot_span_lines(self):
        with pytest.raises(ParseError):
            tokenize('x = "line one\nline two"')

    def test_unterminated_interpolation(self):
        with pytest.raises(ParseError):
            tokenize('x = "${var.a')

    def test_nested_template_strings(self):
        tokens = strings('x = "${"${"a"}"}"')
        assert len(tokens) == 1
        assert tokens[0].has_template

    def test_deeply_nested_templates_rejected(self):
        text = 'x = "' + '${"' * 3000
        with pytest.raises(ParseError, match="nested deeper") as exc_info:
            tokenize(text)
        assert exc_info.value.line == 1
        assert exc_info.value.column is not None


class TestHeredoc:
    def test_heredoc_is_one_string(self):
        text = 'policy = <<EOT\n{ "Action": "*" }\nEOT\n'
        tokens = strings(text)
        assert len(tokens) == 1
        assert tokens[0].value == '{ "Action": "*" }\n'
        assert types(text).count(TokenType.LBRACE) == 0

    def test_indented_heredoc_is_dedented(self):
        text = 'x = <<-EOT\n    a\n      b\n    EOT\n'
        assert strings(text)[0].value == 'a\n  b\n'

    def test_heredoc_with_template(self):
        text = 'x = <<EOT\nhello ${var.name}\nEOT\n'
        assert strings(text)[0].has_template

    def test_line_numbers_after_heredoc(self):
        text = 'x = <<EOT\none\ntwo\nEOT\ny = 1'
        y = next(t for t in tokenize(text) if t.value == 'y')
        assert y.line == 5

    def test_unterminated_heredoc(self):
        with pytest.raises(ParseError):
            tokenize('x = <<EOT\nno end marker\n')


class TestInvalidInput:
    def test_control_character(self):
        with pytest.raises(ParseError) as exc_info:
            tokenize('a = 1\n\x00')
        assert exc_info.value.line == 2

    def test_error_message_has_position(self):
        with pytest.raises(ParseError, match="line 1"):
            tokenize('a = "x')
