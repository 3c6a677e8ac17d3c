'''
Human readable renderings of token buffers, for inspection only.

Nothing in here changes the buffers it's given.
'''

from .tokens import KEYWORDS, TokenType


NAMES = {type_: name for name, type_ in KEYWORDS.items()}
NAMES.update({
    TokenType.PLUS: '+',
    TokenType.MINUS: '-',
    TokenType.MULT: '*',
    TokenType.DIV: '/',
    TokenType.POW: '^',
    TokenType.LPAREN: '(',
    TokenType.RPAREN: ')',
    TokenType.NEG: 'neg',
    TokenType.NUMBER: 'NUMBER',
    TokenType.END: 'END',
    TokenType.ERROR: 'ERROR',
})


def token_name(type_):
    '''
    Name of a token type, e.g. 'sin' or '+'; UNKNOWN(n) if it has none.
    '''
    return NAMES.get(type_, 'UNKNOWN({})'.format(int(type_)))


def bytecode(buffer):
    '''
    Pack a buffer into one byte per token: the low byte of its type.
    '''
    return bytes(token.type & 0xFF for token in buffer)


def hexdump(data, width=16):
    '''
    Hex dump, width bytes per line, each line prefixed by its offset.
    '''
    return '\n'.join('{:04X}: {}'.format(offset,
                                         ' '.join('{:02X}'.format(byte)
                                                  for byte
                                                  in data[offset:offset + width]))
                     for offset
                     in range(0, len(data), width))


def format_tokens(buffer):
    '''
    One line per token: position, name, and the literal or type code.
    '''
    lines = ['--- TOKENS ({}) ---'.format(len(buffer))]
    for i, token in enumerate(buffer):
        name = token_name(token.type)
        if token.type == TokenType.NUMBER:
            lines.append('[{:2d}] {:<12s} value={:.6g}'
                         .format(i, name, buffer.value(token)))
        elif token.type == TokenType.END:
            lines.append('[{:2d}] {}'.format(i, name))
        else:
            lines.append('[{:2d}] {:<12s} (byte: {:d})'
                         .format(i, name, int(token.type)))
    return '\n'.join(lines)


def format_bytecode(buffer):
    '''
    Packed bytecode of a buffer, its interpretation, and its hex dump.
    '''
    packed = bytecode(buffer)
    lines = ['--- BYTECODE ---',
             'Bytes: ' + ' '.join('{:02X}'.format(byte) for byte in packed),
             '',
             'Interpretation:']
    for i, (byte, token) in enumerate(zip(packed, buffer)):
        line = '  [{}] 0x{:02X} = {:3d}  <- {}'.format(i, byte, byte,
                                                       token_name(token.type))
        if token.type == TokenType.NUMBER:
            line += ' (value: {:.6g})'.format(buffer.value(token))
        lines.append(line)
    lines.extend(['', 'Hex dump:', hexdump(packed)])
    return '\n'.join(lines)
