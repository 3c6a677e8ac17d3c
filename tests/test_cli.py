'''
Command line interface tests
'''

from multicurvas.cli import CLI


def run(capsys, *args):
    status = CLI().run(args=list(args))
    out, err = capsys.readouterr()
    return status, out, err


def test_evaluate(capsys):
    # Everything after -e is an expression
    status, out, err = run(capsys, '-x', '2', '-e', '2^3^2', 'x+-3')
    assert status == 0
    assert out.splitlines() == ['512.0', '-1.0']
    assert err == ''


def test_comma_locale(capsys):
    status, out, _ = run(capsys, '-l', 'comma', '-e', '2,5*2')
    assert status == 0
    assert out.splitlines() == ['5.0']


def test_bad_line_reported_and_skipped(capsys):
    status, out, err = run(capsys, '-e', '1/0', 'x + theta', 'sqrt(4)')
    assert status == 1
    assert out.splitlines() == ['2.0']
    assert err.splitlines() == [
        'Division by zero: 1/0',
        "Mixed variables (don't use x, theta and t together): x + theta",
    ]


def test_dump(capsys):
    status, out, _ = run(capsys, '-D', '-e', 'sin(x)')
    assert status == 0
    assert "=== 'sin(x)'" in out
    assert 'Bytes: A0 28 81 29 FF' in out
    assert '[ 1] sin' in out


def test_sample(capsys):
    status, out, _ = run(capsys, '-S', '-n', '3', '-e', 'Y=1/x:-1,1:')
    assert status == 0
    lines = out.splitlines()
    assert lines[0] == '# CARTESIAN: 2/3 points'
    assert lines[2].split('\t') == ['0.0', 'nan', 'DIVISION_BY_ZERO']


def test_sample_bad_plot(capsys):
    status, _, err = run(capsys, '-S', '-e', 'Y=x:1,0:')
    assert status == 1
    assert 'Empty interval' in err


def test_benchmark(capsys):
    status, out, _ = run(capsys, '-B', '--steps', '10', '-e', 'x * x +1')
    assert status == 0
    lines = out.splitlines()
    assert lines[-1].startswith('result: 1.33')
    assert any(line.startswith('baseline x*x+1: ') and '1.33' in line
               for line in lines)
    assert any(line.startswith('overhead: ') for line in lines)


def test_raw_grammar(capsys):
    status, out, _ = run(capsys, '-G')
    assert status == 0
    assert '(?<number>' in out
