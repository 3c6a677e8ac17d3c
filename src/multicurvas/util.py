from collections import namedtuple
from enum import Enum
from functools import wraps


class _Outcome(Enum):
    '''
    Error code enum whose OK member is falsy, so checks chain with ``or``.

    Codes of different subclasses never compare equal.
    '''
    def __bool__(self):
        return self.value != 0


class ParserError(_Outcome):
    '''
    Outcome of tokenizing or compiling an expression.
    '''
    OK = 0
    UNKNOWN_FUNCTION = 1
    UNKNOWN_VARIABLE = 2
    MIXED_VARIABLES = 3
    SYNTAX_ERROR = 4
    MEMORY_ERROR = 5


class EvalError(_Outcome):
    '''
    Outcome of evaluating a postfix expression.
    '''
    OK = 0
    DIVISION_BY_ZERO = 1
    DOMAIN_ERROR = 2
    MATH_ERROR = 3
    STACK_ERROR = 4


MESSAGES = {
    ParserError.UNKNOWN_FUNCTION: 'Unknown function',
    ParserError.UNKNOWN_VARIABLE: 'Unknown variable',
    ParserError.MIXED_VARIABLES: "Mixed variables (don't use x, theta and t "
                                 'together)',
    ParserError.SYNTAX_ERROR: 'Syntax error',
    ParserError.MEMORY_ERROR: 'Out of memory',
    EvalError.DIVISION_BY_ZERO: 'Division by zero',
    EvalError.DOMAIN_ERROR: 'Argument outside of domain',
    EvalError.MATH_ERROR: 'Math error (overflow/NaN)',
    EvalError.STACK_ERROR: 'Stack error (malformed expression)',
}


class MulticurvasError(Exception):
    pass


class ExpressionError(MulticurvasError):
    '''
    Raised by ``unwrap()`` on a failed result.

    The core never raises this itself; it's for callers that would rather
    handle an exception, like the CLI.
    '''
    def __init__(self, code, text=None):
        message = MESSAGES.get(code, 'Unknown error ({!r})'.format(code))
        if text is not None:
            message = '{}: {}'.format(message, text)
        super().__init__(message)
        self.code = code
        self.text = text


class ParseResult(namedtuple('ParseResult', 'error buffer')):
    '''
    Tokenizer/compiler result. ``buffer`` is None unless ``error`` is OK.
    '''
    __slots__ = ()

    @property
    def ok(self):
        return self.error == ParserError.OK

    def unwrap(self, text=None):
        if not self.ok:
            raise ExpressionError(self.error, text)
        return self.buffer


class EvalResult(namedtuple('EvalResult', 'error value')):
    '''
    Evaluator result. ``value`` is None unless ``error`` is OK.
    '''
    __slots__ = ()

    @property
    def ok(self):
        return self.error == EvalError.OK

    def unwrap(self, text=None):
        if not self.ok:
            raise ExpressionError(self.error, text)
        return self.value


def recover_memory_errors(f):
    '''
    Decorator turning a MemoryError into a MEMORY_ERROR ParseResult.

    Buffer growth past its limit is reported, not fatal. Everything else
    passes through.
    '''
    @wraps(f)
    def wrapper(*args, **kwargs):
        try:
            return f(*args, **kwargs)
        except MemoryError:
            return ParseResult(ParserError.MEMORY_ERROR, None)
    return wrapper
