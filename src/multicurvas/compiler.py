'''
Infix to postfix (RPN) conversion, by shunting yard.
'''

import logging

from .classifier import is_function, is_operand, is_operator
from .lexer import tokenize
from .tokens import Locale, TokenType
from .util import ParserError, ParseResult, recover_memory_errors


logger = logging.getLogger(__name__)


PRECEDENCE = {
    TokenType.PLUS: 2,
    TokenType.MINUS: 2,
    TokenType.MULT: 3,
    TokenType.DIV: 3,
    TokenType.POW: 4,
    TokenType.NEG: 4,
}
RIGHT_ASSOCIATIVE = frozenset({TokenType.POW, TokenType.NEG})
# Prefix operators have nothing on their left to reduce first.
PREFIX = frozenset({TokenType.NEG})


def _pops(top, incoming):
    '''
    Return True if operator top must be emitted before pushing incoming.
    '''
    if not is_operator(top):
        return False
    if incoming in RIGHT_ASSOCIATIVE:
        return PRECEDENCE[top] > PRECEDENCE[incoming]
    return PRECEDENCE[top] >= PRECEDENCE[incoming]


@recover_memory_errors
def to_rpn(buffer):
    '''
    Convert a validated infix TokenBuffer to a new, postfix one.

    The input is left untouched; the output gets its own copy of the literal
    pool, so either may be released first.
    '''
    rpn = buffer.clone_pool()
    try:
        error = _shunt(buffer, rpn)
    except MemoryError:
        rpn.release()
        raise
    if error:
        logger.debug('Cannot convert %r: %s', buffer, error.name)
        rpn.release()
        return ParseResult(error, None)
    return ParseResult(ParserError.OK, rpn)


def compile_expression(text, locale=Locale.POINT):
    '''
    Tokenize and convert text in one go, releasing the infix buffer.
    '''
    result = tokenize(text, locale)
    if not result.ok:
        return result
    with result.buffer as infix:
        return to_rpn(infix)


def _shunt(buffer, rpn):
    # Never deeper than the input is long.
    stack = []
    for token in buffer:
        type_ = token.type
        if type_ == TokenType.END:
            break
        elif is_operand(type_):
            rpn.append(*token)
        elif is_function(type_) or type_ == TokenType.LPAREN:
            stack.append(token)
        elif type_ == TokenType.RPAREN:
            while stack and stack[-1].type != TokenType.LPAREN:
                rpn.append(*stack.pop())
            if not stack:
                return ParserError.SYNTAX_ERROR
            stack.pop()
            # Attach a function to its just closed argument
            if stack and is_function(stack[-1].type):
                rpn.append(*stack.pop())
        elif is_operator(type_):
            if type_ not in PREFIX:
                while stack and _pops(stack[-1].type, type_):
                    rpn.append(*stack.pop())
            stack.append(token)
        else:
            return ParserError.SYNTAX_ERROR
    while stack:
        token = stack.pop()
        if token.type == TokenType.LPAREN:
            return ParserError.SYNTAX_ERROR
        rpn.append(*token)
    rpn.append(TokenType.END)
    return ParserError.OK
