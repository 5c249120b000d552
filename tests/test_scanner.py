## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from px2.scanner import Scanner, Token, TokenKind, scan


def _kinds(source: str) -> list[TokenKind]:
    return [t.kind for t in scan(source)]


def test_scan_simple_program_positions():
    tokens = scan("3 4 + println")
    assert tokens == [
        Token(TokenKind.INT, '3', 1, 1, 1),
        Token(TokenKind.INT, '4', 1, 3, 1),
        Token(TokenKind.PLUS, '+', 1, 5, 1),
        Token(TokenKind.PRINTLN, 'println', 1, 7, 7),
        Token(TokenKind.END_OF_INPUT, '', 1, 14, 0),
    ]


def test_scan_all_keywords_and_operators():
    source = "dup drop false over println rot swap true + - * /"
    assert _kinds(source) == [
        TokenKind.DUP, TokenKind.DROP, TokenKind.FALSE, TokenKind.OVER, TokenKind.PRINTLN,
        TokenKind.ROT, TokenKind.SWAP, TokenKind.TRUE,
        TokenKind.PLUS, TokenKind.MINUS, TokenKind.STAR, TokenKind.SLASH,
        TokenKind.END_OF_INPUT,
    ]


def test_scan_tracks_lines_and_columns():
    tokens = scan("1\n  dup\r\n\n   swap")
    assert [(t.lexeme, t.line, t.column) for t in tokens[:3]] == [('1', 1, 1), ('dup', 2, 3), ('swap', 4, 4)]


def test_scan_identifiers_are_not_keywords():
    tokens = scan("Dup foo_bar1 truex")
    assert [t.kind for t in tokens[:3]] == [TokenKind.IDENTIFIER] * 3
    assert tokens[1].lexeme == 'foo_bar1'
    assert tokens[1].length == 8


def test_scan_digits_then_word_are_separate_tokens():
    tokens = scan("12abc")
    assert [(t.kind, t.lexeme) for t in tokens[:2]] == [(TokenKind.INT, '12'), (TokenKind.IDENTIFIER, 'abc')]
    assert tokens[1].column == 3


def test_scan_operators_split_words():
    assert _kinds("a-b") == [TokenKind.IDENTIFIER, TokenKind.MINUS, TokenKind.IDENTIFIER, TokenKind.END_OF_INPUT]


def test_scan_unrecognized_character_is_invalid_token():
    tokens = scan("1 @ 2")
    assert tokens[1] == Token(TokenKind.INVALID, '@', 1, 3, 1)
    # Scanning carries on after the invalid character.
    assert tokens[2].kind == TokenKind.INT


def test_scan_tab_and_underscore_are_invalid():
    tokens = scan("\t_x")
    assert [(t.kind, t.column) for t in tokens[:3]] == [
        (TokenKind.INVALID, 1), (TokenKind.INVALID, 2), (TokenKind.IDENTIFIER, 3)]


def test_scan_end_of_input_repeats():
    scanner = Scanner("dup")
    assert scanner.scan_token().kind == TokenKind.DUP
    end = scanner.scan_token()
    assert end.kind == TokenKind.END_OF_INPUT
    assert scanner.scan_token() == end
    assert scanner.scan_token() == end


def test_scan_empty_source():
    assert scan("") == [Token(TokenKind.END_OF_INPUT, '', 1, 1, 0)]
    assert scan(" \n ")[0].line == 2


def test_scan_is_idempotent():
    source = "1 2 over rot\nswap true println @ x"
    assert scan(source) == scan(source)


def test_token_display():
    token = scan("42")[0]
    assert str(token) == "Token [ kind: Int, line: 1, column: 1, length: 2, text: '42' ]"
