"""Test number and range-operator lexing."""

from marklet.tokens import TokenType

from .conftest import assert_types, assert_values


class TestNumbers:
    def test_integer(self, lex):
        tokens = lex("123")
        assert_types(tokens, [TokenType.NUMBER])
        assert_values(tokens, ["123"])

    def test_negative(self, lex):
        tokens = lex("-42")
        assert_types(tokens, [TokenType.NUMBER])
        assert_values(tokens, ["-42"])

    def test_zero(self, lex):
        assert_values(lex("0"), ["0"])


class TestRangeOperator:
    def test_closed_range(self, lex):
        tokens = lex("3..5")
        assert_types(tokens, [TokenType.NUMBER, TokenType.DOTDOT, TokenType.NUMBER])
        assert_values(tokens, ["3", "..", "5"])

    def test_open_range(self, lex):
        tokens = lex("0..")
        assert_types(tokens, [TokenType.NUMBER, TokenType.DOTDOT])

    def test_spaced_range(self, lex):
        tokens = lex("1 .. 10")
        assert_types(tokens, [TokenType.NUMBER, TokenType.DOTDOT, TokenType.NUMBER])

    def test_negative_bounds(self, lex):
        tokens = lex("-3..-1")
        assert_types(tokens, [TokenType.NUMBER, TokenType.DOTDOT, TokenType.NUMBER])
        assert_values(tokens, ["-3", "..", "-1"])

    def test_four_dots_are_two_operators(self, lex):
        tokens = lex("1....")
        assert_types(tokens, [TokenType.NUMBER, TokenType.DOTDOT, TokenType.DOTDOT])

    def test_range_in_list(self, lex):
        tokens = lex("[1, 3..5]")
        assert_types(
            tokens,
            [
                TokenType.LBRACKET,
                TokenType.NUMBER,
                TokenType.COMMA,
                TokenType.NUMBER,
                TokenType.DOTDOT,
                TokenType.NUMBER,
                TokenType.RBRACKET,
            ],
        )
