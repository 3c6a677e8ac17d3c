'''
Token classification.

Every check is a constant-time membership test on the token type, never a
scan of the keyword table.
'''

from .tokens import (TokenType,
                     VARIABLE_START, VARIABLE_END,
                     CONST_START, CONST_END,
                     FUNCTION_START, FUNCTION_END)


BINARY_OPERATORS = frozenset({
    TokenType.PLUS,
    TokenType.MINUS,
    TokenType.MULT,
    TokenType.DIV,
    TokenType.POW,
})
OPERATORS = BINARY_OPERATORS | {TokenType.NEG}


def is_operator(type_):
    '''
    Return True for arithmetic operators, binary or unary. Not parentheses.
    '''
    return type_ in OPERATORS


def is_binary_operator(type_):
    return type_ in BINARY_OPERATORS


def is_function(type_):
    return FUNCTION_START <= type_ <= FUNCTION_END


def is_variable(type_):
    return VARIABLE_START <= type_ <= VARIABLE_END


def is_constant(type_):
    return CONST_START <= type_ <= CONST_END


def is_operand(type_):
    '''
    Return True for anything pushed straight to the output: literals,
    variables and constants.
    '''
    return (type_ == TokenType.NUMBER or
            is_variable(type_) or
            is_constant(type_))
