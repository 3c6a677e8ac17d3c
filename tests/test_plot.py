'''
Sampling tests
'''

import math

from multicurvas.compiler import compile_expression
from multicurvas.plot import (PlotStatus, PlotType, evaluate_constant,
                              generate_samples, integrate, parse_plot,
                              trapezoid)
from multicurvas.tokens import Locale
from multicurvas.util import EvalError, EvalResult, ParserError

from pytest import approx, mark, raises


@mark.parametrize('text, type_', [
    ('Y=sin(x)', PlotType.CARTESIAN),
    ('y = x^2', PlotType.CARTESIAN),
    ('R=1+cos(t)', PlotType.POLAR_R),
    ('R^2=cos(2*t)', PlotType.POLAR_R2),
    ('R**2=cos(2*theta)', PlotType.POLAR_R2),
    ('X=cos(t);Y=sin(t)', PlotType.PARAMETRIC),
])
def test_plot_types(text, type_):
    status, plot, message = parse_plot(text)
    assert status == PlotStatus.OK
    assert message is None
    assert plot.type == type_
    assert not plot.has_interval


def test_interval():
    status, plot, _ = parse_plot('Y=sin(x):-3,3:')
    assert status == PlotStatus.OK
    assert plot.expr1 == 'sin(x)'
    assert (plot.start, plot.end) == (-3, 3)
    assert plot.has_interval


def test_interval_bounds_are_expressions():
    _, plot, _ = parse_plot('X=cos(t);Y=sin(t):0,2*pi:')
    assert plot.expr2 == 'sin(t)'
    assert plot.end == approx(2 * math.pi)


def test_default_intervals():
    assert parse_plot('Y=x').plot[3:5] == (-10, 10)
    assert parse_plot('R=t').plot[3:5] == approx((0, 2 * math.pi))


@mark.parametrize('text, status', [
    ('sin(x)', PlotStatus.PARSE_ERROR),
    ('Z=x', PlotStatus.PARSE_ERROR),
    ('Y=x;Y=x', PlotStatus.PARSE_ERROR),
    ('Y=x:3,-3:', PlotStatus.INVALID_INTERVAL),
    ('Y=x:1,1:', PlotStatus.INVALID_INTERVAL),
    ('Y=x:0,x:', PlotStatus.INVALID_INTERVAL),
    ('Y=x:0,1/0:', PlotStatus.INVALID_INTERVAL),
])
def test_bad_plots(text, status):
    result = parse_plot(text)
    assert result.status == status
    assert result.plot is None
    assert result.message


def test_evaluate_constant():
    assert evaluate_constant('2*pi') == approx(2 * math.pi)
    assert evaluate_constant('t') is None
    assert evaluate_constant('foo') is None


def test_cartesian_samples():
    _, plot, _ = parse_plot('Y=x^2:-1,1:', samples=5)
    error, data = generate_samples(plot)
    assert error == ParserError.OK
    assert data.count == 5
    assert data.x.tolist() == [-1, -0.5, 0, 0.5, 1]
    assert data.y.tolist() == [1, 0.25, 0, 0.25, 1]


def test_failed_samples_are_flagged():
    _, plot, _ = parse_plot('Y=1/x:-1,1:', samples=3)
    error, data = generate_samples(plot)
    assert error == ParserError.OK
    assert data.count == 2
    assert data.errors() == [EvalError.OK,
                                    EvalError.DIVISION_BY_ZERO,
                                    EvalError.OK]
    assert data.x[1] == 0
    assert math.isnan(data.y[1])
    assert list(data.points()) == [(-1, -1), (1, 1)]


def test_polar_samples():
    _, plot, _ = parse_plot('R=2:0,pi:', samples=3)
    _, data = generate_samples(plot)
    assert data.x.tolist() == approx([2, 0, -2])
    assert data.y.tolist() == approx([0, 2, 0])


def test_squared_radius_below_zero():
    _, plot, _ = parse_plot('R^2=cos(2*t):0,pi/2:', samples=3)
    _, data = generate_samples(plot)
    assert data.errors() == [EvalError.OK, EvalError.OK,
                                    EvalError.DOMAIN_ERROR]
    assert data.x[0] == approx(1)


def test_parametric_samples():
    _, plot, _ = parse_plot('X=cos(t);Y=sin(t):0,pi:', samples=3)
    _, data = generate_samples(plot)
    assert data.x.tolist() == approx([1, 0, -1])
    assert data.y.tolist() == approx([0, 1, 0], abs=1e-12)


def test_parametric_second_expression_fails():
    _, plot, _ = parse_plot('X=t;Y=sqrt(t):-1,1:', samples=3)
    _, data = generate_samples(plot)
    assert data.errors()[0] == EvalError.DOMAIN_ERROR
    assert data.count == 2


def test_wrong_variable_for_plot():
    _, plot, _ = parse_plot('Y=sin(t)')
    assert generate_samples(plot).error == ParserError.UNKNOWN_VARIABLE
    _, plot, _ = parse_plot('X=cos(x);Y=sin(x)')
    assert generate_samples(plot).error == ParserError.UNKNOWN_VARIABLE


def test_expression_errors():
    _, plot, _ = parse_plot('Y=cossecante(x)')
    result = generate_samples(plot)
    assert result.error == ParserError.UNKNOWN_FUNCTION
    assert result.data is None


def test_comma_locale_expressions():
    _, plot, _ = parse_plot('Y=0,5*x:0,2:', samples=3)
    assert plot.expr1 == '0,5*x'
    _, data = generate_samples(plot, Locale.COMMA)
    assert data.y.tolist() == [0, 0.5, 1]


def test_integrate():
    with compile_expression('x * x +1').unwrap() as rpn:
        result = integrate(rpn, 0.0, 1.0, 1000)
    assert result.error == EvalError.OK
    assert result.value == approx(4 / 3, rel=1e-5)


def test_integrate_fails_on_bad_sample():
    with compile_expression('1/x').unwrap() as rpn:
        assert integrate(rpn, 0.0, 1.0, 10).error == \
            EvalError.DIVISION_BY_ZERO
        with raises(ValueError):
            integrate(rpn, 0.0, 1.0, 0)


def test_trapezoid_takes_any_function():
    result = trapezoid(lambda x: EvalResult(EvalError.OK, 2 * x), 0.0, 1.0, 4)
    assert result == (EvalError.OK, approx(1.0))
    failing = trapezoid(lambda x: EvalResult(EvalError.MATH_ERROR, None),
                        0.0, 1.0, 4)
    assert failing.error == EvalError.MATH_ERROR
