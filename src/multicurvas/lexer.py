from functools import reduce
import logging
import operator

import regex

from .classifier import is_operator, is_variable
from .tokens import KEYWORDS, Locale, TokenBuffer, TokenType
from .util import ParserError, ParseResult, recover_memory_errors


logger = logging.getLogger(__name__)


class Lexer:
    '''
    Lexer for infix expressions in one variable.

    Holds the decimal marker convention for the literals it reads; one
    instance per locale, no other state.
    '''
    # Number, with {MARKER} as its decimal marker.
    # String formatting and regex is a tricky business, because of the braces.
    # It works here. Be careful in general!
    NUMBER = r'''
              (?:
                  # 1, 12, 1. (notice trailing marker), 1.3
                  [0-9]+
                  (?:
                      {MARKER}
                      [0-9]*
                  )?
              )|(?:
                  # .2
                  {MARKER}
                  [0-9]+
              )
              '''
    # Functions, constants and variables. Longest first, so that log10 is
    # never read as log, and only whole words: exp is not e followed by xp.
    KEYWORD = r'(?:' + \
              r'|'.join(map(regex.escape,
                            sorted(KEYWORDS, key=len, reverse=True))) + \
              r')(?![A-Za-z0-9])'
    # Any other word. Always an error, but a different one than junk.
    WORD = r'[A-Za-z][A-Za-z0-9]*'
    OPERATOR = r'(?:' + r'|'.join(map(regex.escape, '+-*/^()')) + r')'
    SPACE = r'\s+'

    # All possible lexemes. Alternatives are tried in order.
    LEXEME = r'(?<number>' + NUMBER + r')|' \
             r'(?<keyword>' + KEYWORD + r')|' \
             r'(?<word>' + WORD + r')|' \
             r'(?<operator>' + OPERATOR + r')|' \
             r'(?<space>' + SPACE + r')'
    # Default regex flags for matching lexemes
    FLAGS = reduce(operator.__or__,
                   {regex.VERSION1,
                    regex.VERBOSE},
                   0)

    # One compiled grammar per decimal marker.
    PATTERNS = dict()
    for locale in Locale:
        PATTERNS[locale] = regex.compile(
            LEXEME.format(MARKER=regex.escape(locale.value)),
            flags=FLAGS)
    del locale

    def __init__(self, locale=Locale.POINT):
        self.locale = locale
        self.pattern = type(self).PATTERNS[locale]

    def lex(self, text):
        '''
        Take an expression and yield all lexemes.

        Doesn't yield incomplete or incorrect lexemes, stopping on first bad.
        '''
        pos = 0
        while pos < len(text):
            match = self.pattern.match(text, pos)
            if match is None:
                break
            yield match
            pos = match.end()

    def convert(self, number):
        '''
        Convert a number lexeme to float, whatever the decimal marker.
        '''
        return float(number.replace(self.locale.value, '.'))

    @recover_memory_errors
    def tokenize(self, text):
        '''
        Tokenize and validate an expression.

        Returns a ParseResult owning a new TokenBuffer, terminated by END.
        '''
        buffer = TokenBuffer()
        try:
            error = (self._scan(text, buffer) or
                     check_variables(buffer) or
                     check_parentheses(buffer))
        except MemoryError:
            buffer.release()
            raise
        if error:
            logger.debug('Rejected %r: %s', text, error.name)
            buffer.release()
            return ParseResult(error, None)
        return ParseResult(ParserError.OK, buffer)

    def _scan(self, text, buffer):
        previous = None
        end = 0
        for match in self.lex(text):
            end = match.end()
            kind = match.lastgroup
            lexeme = match.group()
            if kind == 'space':
                continue
            elif kind == 'number':
                buffer.append_number(self.convert(lexeme))
            elif kind == 'keyword':
                buffer.append(KEYWORDS[lexeme])
            elif kind == 'word':
                logger.debug('Unknown name %r', lexeme)
                return ParserError.UNKNOWN_FUNCTION
            else:
                type_ = TokenType(ord(lexeme))
                if type_ == TokenType.MINUS and isunary(previous):
                    self._unary_minus(previous, buffer)
                else:
                    buffer.append(type_)
            previous = buffer[-1].type
        if end != len(text):
            logger.debug("Couldn't lex %r", text[end:])
            return ParserError.SYNTAX_ERROR
        buffer.append(TokenType.END)
        return ParserError.OK

    def _unary_minus(self, previous, buffer):
        '''
        Rewrite a leading unary minus as 0 - ..., and one following another
        operator as NEG, which binds tighter than * and / but not ^.
        '''
        if previous is None or previous == TokenType.LPAREN:
            buffer.append_number(0)
            buffer.append(TokenType.MINUS)
        else:
            buffer.append(TokenType.NEG)


def isunary(previous):
    '''
    Return True if a minus following this token type is a unary minus.
    '''
    return (previous is None or
            previous == TokenType.LPAREN or
            is_operator(previous))


def check_variables(buffer):
    '''
    Reject expressions referring to more than one variable, e.g. x + theta.
    '''
    found = None
    for token in buffer:
        if is_variable(token.type):
            if found is None:
                found = token.type
            elif found != token.type:
                return ParserError.MIXED_VARIABLES
    return ParserError.OK


def check_parentheses(buffer):
    '''
    Reject unbalanced parentheses.
    '''
    depth = 0
    for token in buffer:
        if token.type == TokenType.LPAREN:
            depth += 1
        elif token.type == TokenType.RPAREN:
            depth -= 1
            if depth < 0:
                return ParserError.SYNTAX_ERROR
    if depth != 0:
        return ParserError.SYNTAX_ERROR
    return ParserError.OK


def tokenize(text, locale=Locale.POINT):
    '''
    Tokenize text, reading decimal literals according to locale.
    '''
    return Lexer(locale).tokenize(text)
