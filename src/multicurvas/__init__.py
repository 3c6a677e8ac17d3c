'''
Compiler and evaluator for mathematical expressions in one variable.

Text is tokenized (with either a decimal point or a decimal comma), converted
to postfix order, then evaluated as often as needed by a small stack machine:

    >>> rpn = compile_expression('2*sin(x)^2').unwrap()
    >>> eval_rpn(rpn, 0.5).value
    0.459...

Nothing here raises on bad input: every stage returns a result carrying
either its output or a ParserError/EvalError code.

Supports + - * / ^, unary minus, the constants pi and e, one of the variables
x, theta or t, and sin cos tan abs sqrt exp log log10 sinh cosh tanh asin
acos atan asinh acosh atanh ceil floor frac.
'''

from .compiler import compile_expression, to_rpn
from .lexer import Lexer, tokenize
from .machine import Machine, eval_rpn
from .tokens import Locale, Token, TokenBuffer, TokenType
from .util import (EvalError, EvalResult, ExpressionError, MulticurvasError,
                   ParseResult, ParserError)


__all__ = ('tokenize', 'to_rpn', 'eval_rpn', 'compile_expression',
           'Lexer', 'Machine', 'Locale', 'Token', 'TokenBuffer', 'TokenType',
           'ParserError', 'EvalError', 'ParseResult', 'EvalResult',
           'MulticurvasError', 'ExpressionError')
