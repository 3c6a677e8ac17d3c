from os import isatty
import sys
from sys import stdin, stdout, exit
from argparse import ArgumentParser, REMAINDER, OPTIONAL
from time import perf_counter
import logging

from prompt_toolkit import PromptSession

from .compiler import compile_expression, to_rpn
from .debug import format_bytecode, format_tokens
from .lexer import Lexer
from .machine import Machine
from .plot import (generate_samples, integrate, parse_plot, trapezoid,
                   PLOT_DEFAULT_SAMPLES)
from .tokens import Locale
from .util import MulticurvasError, ExpressionError, EvalError, EvalResult


class InteractiveInput:
    def __init__(self, prompt):
        self.prompt = prompt

    def __iter__(self):
        try:
            session = PromptSession(message=self.prompt,
                                    enable_suspend=True,
                                    prompt_continuation=' ' * len(self.prompt),
                                    erase_when_done=False)
            while True:
                yield session.prompt()
        except EOFError:
            return


class CLI:
    '''
    Command line interface to the expression engine.

    Every action handles one input line; a line that fails is reported on
    stderr and the next one is run.
    '''

    DEFAULT_PROMPT = 'f> '
    LOCALES = {
        'point': Locale.POINT,
        'comma': Locale.COMMA,
    }

    def _compile(self, line):
        return compile_expression(line, self.locale).unwrap(line)

    def dumper(self, line):
        '''
        Dump tokens, bytecode and postfix tokens of an expression.
        '''
        print('=== {!r}'.format(line))
        with Lexer(self.locale).tokenize(line).unwrap(line) as tokens:
            print(format_tokens(tokens))
            print(format_bytecode(tokens))
            with to_rpn(tokens).unwrap(line) as rpn:
                print(format_tokens(rpn))

    def executor(self, line):
        '''
        Evaluate an expression at the given value of its variable.
        '''
        with self._compile(line) as rpn:
            print(Machine(rpn)(self.args.at).unwrap(line))

    def sampler(self, line):
        '''
        Sample a plot description, one point per output line.
        '''
        status, plot, message = parse_plot(line, samples=self.args.samples)
        if status:
            raise MulticurvasError(message)
        error, data = generate_samples(plot, self.locale)
        if error:
            raise ExpressionError(error, line)
        print('# {}: {}/{} points'.format(plot.type.name, data.count,
                                          data.capacity))
        for x, y, error in zip(data.x.tolist(), data.y.tolist(),
                               data.errors()):
            print(x, y, error.name, sep='\t')

    @staticmethod
    def baseline(x):
        '''
        x*x+1 written in Python, to time evaluation against.
        '''
        return EvalResult(EvalError.OK, x * x + 1.0)

    def benchmark(self, line):
        '''
        Time compiling an expression, then integrating it over an interval,
        next to integrating the baseline function.
        '''
        start, end, steps = self.args.start, self.args.end, self.args.steps
        started = perf_counter()
        native = trapezoid(self.baseline, start, end, steps)
        baseline_time = perf_counter() - started
        started = perf_counter()
        with self._compile(line) as rpn:
            compiled = perf_counter()
            result = integrate(rpn, start, end, steps)
            finished = perf_counter()
        parsed_time = finished - compiled
        print('{!r} over [{}, {}], {} steps'.format(line, start, end, steps))
        print('compile: {:.6f} s'.format(compiled - started))
        print('baseline x*x+1: {:.6f} s, result: {}'.format(baseline_time,
                                                            native.value))
        print('integrate: {:.6f} s ({:.1f} ns/evaluation)'.format(
            parsed_time, 1e9 * parsed_time / (steps + 1)))
        if baseline_time > 0:
            print('overhead: {:.2f}x baseline'.format(
                parsed_time / baseline_time))
        print('result:', result.unwrap(line))

    def raw_grammar(self):
        '''
        Print current internally defined grammar.
        '''
        print(Lexer(self.locale).pattern.pattern)

    def _prompting_input(self):
        '''
        Return prompting stdin.__iter__ decorator...

        If either:
        - prompt explicitly specified.
        - both stdin/out are a tty
        '''
        if self.args.prompt or \
           isatty(stdin.fileno()) and isatty(stdout.fileno()):
            return InteractiveInput(prompt=self.args.prompt or
                                    self.DEFAULT_PROMPT)
        else:
            return stdin

    def __init__(self):
        '''
        Create ready to run CLI.

        Does not run or parse command line arguments.
        '''
        self.argument_parser = ArgumentParser(
            description='Single variable expression compiler and evaluator')
        self.argument_parser.add_argument('-v', '--verbose',
                                          action='store_true')
        self.argument_parser.add_argument('-l', '--locale',
                                          choices=sorted(self.LOCALES),
                                          default='point',
                                          help='decimal marker of literals')
        self.argument_parser.add_argument('-x', '--at', type=float,
                                          default=1.0,
                                          help='value of the variable')
        self.argument_parser.add_argument('-n', '--samples', type=int,
                                          default=PLOT_DEFAULT_SAMPLES,
                                          help='points per plot, with -S')
        self.argument_parser.add_argument('--from', type=float, default=0.0,
                                          dest='start',
                                          help='lower bound, with -B')
        self.argument_parser.add_argument('--to', type=float, default=1.0,
                                          dest='end',
                                          help='upper bound, with -B')
        self.argument_parser.add_argument('--steps', type=int,
                                          default=1000000,
                                          help='integration steps, with -B')
        self.argument_parser.add_argument('-G', '--raw-grammar',
                                          action='store_true')
        int_nonint_groups = self.argument_parser.add_mutually_exclusive_group()
        int_nonint_groups.add_argument('-e', '--expression',
                                       nargs=REMAINDER,
                                       dest='expressions')
        int_nonint_groups.add_argument('-p', '--prompt',
                                       nargs=OPTIONAL,
                                       const=self.DEFAULT_PROMPT)
        main_groups = self.argument_parser.add_mutually_exclusive_group()
        for short_, long_, action in [('-D', '--dump', self.dumper),
                                      ('-S', '--sample', self.sampler),
                                      ('-B', '--benchmark', self.benchmark)]:
            main_groups.add_argument(short_, long_,
                                     action='store_const',
                                     const=action,
                                     dest='action')
        self.argument_parser.set_defaults(action=self.executor,
                                          expressions=stdin)

    def run(self, *, args=None):
        '''
        Run CLI, given these args, or previously passed CLI args.

        Returns the exit status: 1 if any line failed, 0 otherwise.
        '''
        self.args = self.argument_parser.parse_args(args)
        logging.basicConfig(
            level=logging.DEBUG if self.args.verbose else logging.WARNING,
            format='%(name)s: %(message)s',
            stream=sys.stderr)
        self.locale = self.LOCALES[self.args.locale]
        if self.args.raw_grammar:
            self.raw_grammar()
            return 0
        if self.args.expressions is stdin:
            self.args.expressions = self._prompting_input()
        failed = False
        try:
            for line in self.args.expressions:
                line = line.strip()
                if not line:
                    continue
                # Abort rest of line, carry on with the next one
                try:
                    self.args.action(line)
                except MulticurvasError as e:
                    failed = True
                    print(e.args[0], file=sys.stderr)
        except KeyboardInterrupt:
            return 1
        return int(failed)


def main():
    exit(CLI().run())
