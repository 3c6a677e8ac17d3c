from pytest import Item, fixture

from multicurvas import Locale, compile_expression, eval_rpn


@fixture
def evaluate():
    '''
    Compile text and evaluate it at value, releasing the compiled buffer.

    Returns the EvalResult. Raises ExpressionError if text doesn't compile.
    '''
    def evaluate(text, value=0.0, locale=Locale.POINT):
        with compile_expression(text, locale).unwrap(text) as rpn:
            return eval_rpn(rpn, value)
    return evaluate


def pytest_assertion_pass(item: Item,
                          lineno: int,
                          orig: str,
                          expl: str) -> None:
    '''
    Log every passing assertion, so a run over many expressions can be
    audited afterwards.

    Needs enable_assertion_pass_hook; use with pytest -rP.
    '''
    where = item.name + ':' + str(lineno)
    print('given', where, str(orig))  # no repr()!
    # Drop pytest's trailing full-diff hint
    print('actual', where, '\n'.join(str(expl).splitlines()[:-2]))
