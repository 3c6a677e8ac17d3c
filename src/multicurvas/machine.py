'''
Postfix stack machine.
'''

import operator

import numpy as np

from .classifier import (is_binary_operator, is_constant, is_function,
                         is_variable)
from .tokens import TokenType
from .util import EvalError, EvalResult


class Machine:
    '''
    Arithmetic stack machine for a compiled (postfix) expression.

    Reads the buffer, never changes or owns it. Calling the machine
    evaluates the expression for one value of its variable. Holds no state
    between calls.
    '''

    CONSTANTS = {
        TokenType.CONST_PI: np.pi,
        TokenType.CONST_E: np.e,
    }

    OPERATORS = {
        TokenType.PLUS: operator.__add__,
        TokenType.MINUS: operator.__sub__,
        TokenType.MULT: operator.__mul__,
        TokenType.DIV: operator.__truediv__,
        TokenType.POW: np.power,
    }

    FUNCTIONS = {
        TokenType.SIN: np.sin,
        TokenType.COS: np.cos,
        TokenType.TAN: np.tan,
        TokenType.ABS: np.fabs,
        TokenType.SQRT: np.sqrt,
        TokenType.EXP: np.exp,
        TokenType.LOG: np.log,
        TokenType.LOG10: np.log10,
        TokenType.SINH: np.sinh,
        TokenType.COSH: np.cosh,
        TokenType.TANH: np.tanh,
        TokenType.ASIN: np.arcsin,
        TokenType.ACOS: np.arccos,
        TokenType.ATAN: np.arctan,
        TokenType.ASINH: np.arcsinh,
        TokenType.ACOSH: np.arccosh,
        TokenType.ATANH: np.arctanh,
        TokenType.CEIL: np.ceil,
        TokenType.FLOOR: np.floor,
        TokenType.FRAC: lambda arg: arg - np.floor(arg),
    }

    # Arguments a function is defined for. Checked before calling it, so the
    # error doesn't depend on what the math library does with bad input.
    DOMAINS = {
        TokenType.SQRT: lambda arg: arg >= 0.0,
        TokenType.LOG: lambda arg: arg > 0.0,
        TokenType.LOG10: lambda arg: arg > 0.0,
        TokenType.ASIN: lambda arg: -1.0 <= arg <= 1.0,
        TokenType.ACOS: lambda arg: -1.0 <= arg <= 1.0,
        TokenType.ACOSH: lambda arg: arg >= 1.0,
        TokenType.ATANH: lambda arg: -1.0 < arg < 1.0,
    }

    def __init__(self, buffer):
        self.buffer = buffer

    def __call__(self, value):
        '''
        Evaluate for this value of the variable. Returns an EvalResult.
        '''
        tokens = self.buffer.tokens
        values = self.buffer.values
        # Can't hold more operands than there are tokens.
        stack = np.empty(len(tokens), dtype=np.float64)
        top = -1
        with np.errstate(all='ignore'):
            for token in tokens:
                type_ = token.type
                if type_ == TokenType.END:
                    break
                if type_ == TokenType.NUMBER:
                    index = token.value_index
                    if index is None or not 0 <= index < len(values):
                        return EvalResult(EvalError.STACK_ERROR, None)
                    pushed = values[index]
                    if not np.isfinite(pushed):
                        return EvalResult(EvalError.MATH_ERROR, None)
                elif is_variable(type_):
                    # Fails even where the expression would ignore it, e.g. 1^x
                    if not np.isfinite(value):
                        return EvalResult(EvalError.MATH_ERROR, None)
                    pushed = value
                elif is_constant(type_):
                    if type_ not in self.CONSTANTS:
                        return EvalResult(EvalError.MATH_ERROR, None)
                    pushed = self.CONSTANTS[type_]
                elif is_binary_operator(type_):
                    if top < 1:
                        return EvalResult(EvalError.STACK_ERROR, None)
                    right = stack[top]
                    left = stack[top - 1]
                    top -= 2
                    error, pushed = self._apply_operator(type_, left, right)
                    if error:
                        return EvalResult(error, None)
                elif type_ == TokenType.NEG:
                    if top < 0:
                        return EvalResult(EvalError.STACK_ERROR, None)
                    pushed = -stack[top]
                    top -= 1
                elif is_function(type_):
                    if top < 0:
                        return EvalResult(EvalError.STACK_ERROR, None)
                    arg = stack[top]
                    top -= 1
                    error, pushed = self._apply_function(type_, arg)
                    if error:
                        return EvalResult(error, None)
                else:
                    # Parentheses, ERROR: nothing a postfix buffer may hold
                    return EvalResult(EvalError.STACK_ERROR, None)
                top += 1
                stack[top] = pushed
        if top != 0:
            return EvalResult(EvalError.STACK_ERROR, None)
        return EvalResult(EvalError.OK, float(stack[0]))

    def _apply_operator(self, type_, left, right):
        if type_ == TokenType.DIV and right == 0.0:
            return EvalError.DIVISION_BY_ZERO, None
        result = self.OPERATORS[type_](left, right)
        # e.g. (-1)^0.5
        if type_ == TokenType.POW and np.isnan(result):
            return EvalError.DOMAIN_ERROR, None
        if not np.isfinite(result):
            return EvalError.MATH_ERROR, None
        return EvalError.OK, result

    def _apply_function(self, type_, arg):
        f = self.FUNCTIONS.get(type_)
        if f is None:
            # Reserved but unassigned slot
            return EvalError.MATH_ERROR, None
        domain = self.DOMAINS.get(type_)
        if domain is not None and not domain(arg):
            return EvalError.DOMAIN_ERROR, None
        result = f(arg)
        if not np.isfinite(result):
            return EvalError.MATH_ERROR, None
        return EvalError.OK, result


def eval_rpn(buffer, value):
    '''
    Evaluate a postfix TokenBuffer for this value of its variable.
    '''
    return Machine(buffer)(value)
