'''
Diagnostic rendering tests
'''

from multicurvas.compiler import compile_expression
from multicurvas.debug import (bytecode, format_bytecode, format_tokens,
                               hexdump, token_name)
from multicurvas.lexer import tokenize
from multicurvas.tokens import TokenType


def test_token_names():
    assert token_name(TokenType.PLUS) == '+'
    assert token_name(TokenType.LOG10) == 'log10'
    assert token_name(TokenType.VARIABLE_THETA) == 'theta'
    assert token_name(TokenType.NUMBER) == 'NUMBER'
    assert token_name(TokenType.END) == 'END'
    assert token_name(ord('+')) == '+'
    assert token_name(199) == 'UNKNOWN(199)'


def test_bytecode_one_byte_per_token():
    with tokenize('sin(x)*2').unwrap() as buffer:
        assert bytecode(buffer) == bytes([160, 40, 129, 41, 42, 128, 255])


def test_hexdump():
    assert hexdump(bytes(range(18))) == (
        '0000: 00 01 02 03 04 05 06 07 08 09 0A 0B 0C 0D 0E 0F\n'
        '0010: 10 11')
    assert hexdump(b'') == ''


def test_format_tokens():
    with compile_expression('2.5*x').unwrap() as buffer:
        assert format_tokens(buffer).splitlines() == [
            '--- TOKENS (4) ---',
            '[ 0] NUMBER       value=2.5',
            '[ 1] x            (byte: 129)',
            '[ 2] *            (byte: 42)',
            '[ 3] END',
        ]


def test_format_bytecode_leaves_buffer_alone():
    with tokenize('x+1').unwrap() as buffer:
        before = list(buffer.tokens), list(buffer.values)
        text = format_bytecode(buffer)
        assert (list(buffer.tokens), list(buffer.values)) == before
    assert 'Bytes: 81 2B 80 FF' in text
    assert '(value: 1)' in text
    assert '0000: 81 2B 80 FF' in text
