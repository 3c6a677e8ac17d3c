'''
Curve sampling on top of the expression engine.

A plot is described by one line of text:

- ``Y=sin(x)`` cartesian, y as a function of x
- ``R=1+cos(t)`` polar, radius as a function of the angle (t or theta)
- ``R^2=cos(2*t)`` (or ``R**2=``) polar, squared radius
- ``X=cos(t);Y=sin(t)`` parametric, in t

optionally followed by an interval, ``Y=sin(x):-3,3:``. The bounds are
constant expressions themselves, always with a decimal point, since the
comma separates them: ``R=t:0,2*pi:``.

Expressions are compiled once, then evaluated once per sample. A sample that
fails to evaluate is flagged, and sampling goes on.
'''

from collections import namedtuple
from enum import IntEnum
import logging
import math

import numpy as np
import regex

from .classifier import is_variable
from .compiler import to_rpn
from .lexer import tokenize
from .machine import Machine
from .tokens import Locale, TokenType
from .util import EvalError, EvalResult, ParserError, ParseResult


logger = logging.getLogger(__name__)


PLOT_DEFAULT_SAMPLES = 500


class PlotType(IntEnum):
    UNKNOWN = 0
    CARTESIAN = 1
    POLAR_R = 2
    POLAR_R2 = 3
    PARAMETRIC = 4


class PlotStatus(IntEnum):
    OK = 0
    PARSE_ERROR = 1
    INVALID_INTERVAL = 2


# Domain when the text gives none.
DEFAULT_INTERVALS = {
    PlotType.CARTESIAN: (-10.0, 10.0),
    PlotType.POLAR_R: (0.0, 2 * math.pi),
    PlotType.POLAR_R2: (0.0, 2 * math.pi),
    PlotType.PARAMETRIC: (0.0, 2 * math.pi),
}

# Variables each kind of plot may use.
VARIABLES = {
    PlotType.CARTESIAN: frozenset({TokenType.VARIABLE_X}),
    PlotType.POLAR_R: frozenset({TokenType.VARIABLE_T,
                                 TokenType.VARIABLE_THETA}),
    PlotType.POLAR_R2: frozenset({TokenType.VARIABLE_T,
                                  TokenType.VARIABLE_THETA}),
    PlotType.PARAMETRIC: frozenset({TokenType.VARIABLE_T}),
}

PLOT = regex.compile(r'''
    \s*
    (?<lhs>[XxYyRr](?:\s*(?:\^|\*\*)\s*2)?)
    \s*=\s*
    (?<expr1>[^;:]+)
    (?:
        ;\s*
        (?<lhs2>[Yy])
        \s*=\s*
        (?<expr2>[^;:]+)
    )?
    (?:
        :
        (?<start>[^,:]+)
        ,
        (?<end>[^,:]+)
        :?
    )?
    \s*
    ''', flags=regex.VERSION1 | regex.VERBOSE)


Plot = namedtuple('Plot', 'type expr1 expr2 start end has_interval samples')
PlotResult = namedtuple('PlotResult', 'status plot message')
SampleResult = namedtuple('SampleResult', 'error data')


class PlotData:
    '''
    Sampled points, as parallel arrays.

    ``status`` holds the EvalError code of each point; failed points have NaN
    coordinates where they couldn't be computed.
    '''

    def __init__(self, samples):
        self.x = np.full(samples, np.nan)
        self.y = np.full(samples, np.nan)
        self.status = np.zeros(samples, dtype=np.int8)

    @property
    def count(self):
        '''
        Number of valid points.
        '''
        return int(np.count_nonzero(self.status == EvalError.OK.value))

    @property
    def capacity(self):
        return len(self.status)

    def points(self):
        '''
        Yield (x, y) of every valid point, in order.
        '''
        valid = self.status == EvalError.OK.value
        yield from zip(self.x[valid].tolist(), self.y[valid].tolist())

    def errors(self):
        return [EvalError(code) for code in self.status.tolist()]


def _plot_type(lhs, lhs2):
    lhs = regex.sub(r'\s+', '', lhs).upper()
    if lhs2 is not None:
        return PlotType.PARAMETRIC if lhs == 'X' else PlotType.UNKNOWN
    return {
        'Y': PlotType.CARTESIAN,
        'R': PlotType.POLAR_R,
        'R^2': PlotType.POLAR_R2,
        'R**2': PlotType.POLAR_R2,
    }.get(lhs, PlotType.UNKNOWN)


def evaluate_constant(text):
    '''
    Evaluate a variable-free expression, e.g. an interval bound.

    Returns None if it doesn't compile, refers to a variable, or fails.
    '''
    result = tokenize(text, Locale.POINT)
    if not result.ok:
        return None
    with result.buffer as infix:
        if any(is_variable(token.type) for token in infix):
            return None
        result = to_rpn(infix)
    if not result.ok:
        return None
    with result.buffer as rpn:
        return Machine(rpn)(0.0).value


def parse_plot(text, samples=PLOT_DEFAULT_SAMPLES):
    '''
    Parse a plot description. Returns a PlotResult; ``plot`` is None unless
    ``status`` is OK, in which case ``message`` is None.
    '''
    match = PLOT.fullmatch(text)
    if match is None:
        return PlotResult(PlotStatus.PARSE_ERROR, None,
                          "Couldn't parse {!r}".format(text))
    type_ = _plot_type(match.group('lhs'), match.group('lhs2'))
    if type_ == PlotType.UNKNOWN:
        return PlotResult(PlotStatus.PARSE_ERROR, None,
                          'Unknown kind of plot {!r}'.format(text))
    expr2 = match.group('expr2')
    if expr2 is not None:
        expr2 = expr2.strip()
    has_interval = match.group('start') is not None
    if has_interval:
        start = evaluate_constant(match.group('start'))
        end = evaluate_constant(match.group('end'))
        if start is None or end is None:
            return PlotResult(PlotStatus.INVALID_INTERVAL, None,
                              'Bad interval bound in {!r}'.format(text))
    else:
        start, end = DEFAULT_INTERVALS[type_]
    if not start < end:
        return PlotResult(PlotStatus.INVALID_INTERVAL, None,
                          'Empty interval [{}, {}]'.format(start, end))
    if samples < 1:
        return PlotResult(PlotStatus.INVALID_INTERVAL, None,
                          'Need at least one sample, not {}'.format(samples))
    plot = Plot(type_, match.group('expr1').strip(), expr2,
                start, end, has_interval, samples)
    return PlotResult(PlotStatus.OK, plot, None)


def compile_for(text, type_, locale=Locale.POINT):
    '''
    Compile text, rejecting variables this kind of plot doesn't sample.
    '''
    result = tokenize(text, locale)
    if not result.ok:
        return result
    with result.buffer as infix:
        used = {token.type for token in infix if is_variable(token.type)}
        if used - VARIABLES[type_]:
            logger.debug('%r uses a variable %s plots lack',
                         text, type_.name)
            return ParseResult(ParserError.UNKNOWN_VARIABLE, None)
        return to_rpn(infix)


def generate_samples(plot, locale=Locale.POINT):
    '''
    Compile the plot's expressions and sample them over its interval.

    Returns a SampleResult; ``data`` is None unless ``error`` is OK.
    '''
    texts = [plot.expr1] if plot.expr2 is None else [plot.expr1, plot.expr2]
    buffers = []
    try:
        for text in texts:
            result = compile_for(text, plot.type, locale)
            if not result.ok:
                return SampleResult(result.error, None)
            buffers.append(result.buffer)
        machines = [Machine(buffer) for buffer in buffers]
        data = PlotData(plot.samples)
        parameters = np.linspace(plot.start, plot.end, plot.samples)
        for i, parameter in enumerate(parameters.tolist()):
            _sample(plot.type, machines, parameter, data, i)
    finally:
        for buffer in buffers:
            buffer.release()
    logger.debug('Sampled %d/%d points of %r',
                 data.count, data.capacity, plot)
    return SampleResult(ParserError.OK, data)


def _sample(type_, machines, parameter, data, i):
    first = machines[0](parameter)
    if type_ == PlotType.CARTESIAN:
        data.x[i] = parameter
        if first.ok:
            data.y[i] = first.value
        data.status[i] = first.error.value
        return
    if not first.ok:
        data.status[i] = first.error.value
        return
    if type_ == PlotType.PARAMETRIC:
        second = machines[1](parameter)
        if not second.ok:
            data.status[i] = second.error.value
            return
        data.x[i], data.y[i] = first.value, second.value
        return
    radius = first.value
    if type_ == PlotType.POLAR_R2:
        if radius < 0.0:
            data.status[i] = EvalError.DOMAIN_ERROR.value
            return
        radius = math.sqrt(radius)
    data.x[i] = radius * math.cos(parameter)
    data.y[i] = radius * math.sin(parameter)


def integrate(buffer, start, end, steps):
    '''
    Integrate a compiled expression over [start, end] by the trapezoid rule.

    Returns an EvalResult, failing with the error of the first sample that
    can't be evaluated.
    '''
    return trapezoid(Machine(buffer), start, end, steps)


def trapezoid(f, start, end, steps):
    '''
    Trapezoid rule over [start, end] for any f returning an EvalResult.
    '''
    if steps < 1:
        raise ValueError('Need at least one step, not {}'.format(steps))
    h = (end - start) / steps
    total = 0.0
    for i in range(steps + 1):
        result = f(start + i * h)
        if not result.ok:
            return result
        weight = 0.5 if i in (0, steps) else 1.0
        total += weight * result.value
    return EvalResult(EvalError.OK, total * h)
