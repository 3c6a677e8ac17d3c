'''
Token types, token records and the token buffer shared by every stage.

Token types are plain integers. Operators and parentheses are their own
character codes; everything else lives in a reserved band, so a new
function, constant or variable only needs a free slot in its band.
'''

from collections import namedtuple
from enum import Enum, IntEnum


class Locale(Enum):
    '''
    Decimal marker used by numeric literals. The value is the marker.
    '''
    POINT = '.'
    COMMA = ','


# Bands, inclusive on both ends.
VARIABLE_START = 129
VARIABLE_END = 138

CONST_START = 140
CONST_END = 159

FUNCTION_START = 160
FUNCTION_END = 199


class TokenType(IntEnum):
    # Operators, as their character code.
    PLUS = ord('+')
    MINUS = ord('-')
    MULT = ord('*')
    DIV = ord('/')
    POW = ord('^')
    LPAREN = ord('(')
    RPAREN = ord(')')
    # Unary minus. Never typed by the user, only produced by the lexer.
    NEG = ord('_')

    NUMBER = 128

    # Variables: 129-138. 132-138 are free.
    VARIABLE_X = 129
    VARIABLE_THETA = 130
    VARIABLE_T = 131

    # Constants: 140-159. 142-159 are free.
    CONST_PI = 140
    CONST_E = 141

    # Functions: 160-199. 180-199 are free.
    SIN = 160
    COS = 161
    TAN = 162
    ABS = 163
    SQRT = 164
    EXP = 165
    LOG = 166
    LOG10 = 167
    SINH = 168
    COSH = 169
    TANH = 170
    ASIN = 171
    ACOS = 172
    ATAN = 173
    ASINH = 174
    ACOSH = 175
    ATANH = 176
    CEIL = 177
    FLOOR = 178
    FRAC = 179

    END = 255
    ERROR = 256


# Keyword spelling to token type. The lexer tries longer names first.
KEYWORDS = {
    'sin': TokenType.SIN,
    'cos': TokenType.COS,
    'tan': TokenType.TAN,
    'abs': TokenType.ABS,
    'sqrt': TokenType.SQRT,
    'exp': TokenType.EXP,
    'log': TokenType.LOG,
    'log10': TokenType.LOG10,
    'sinh': TokenType.SINH,
    'cosh': TokenType.COSH,
    'tanh': TokenType.TANH,
    'asin': TokenType.ASIN,
    'acos': TokenType.ACOS,
    'atan': TokenType.ATAN,
    'asinh': TokenType.ASINH,
    'acosh': TokenType.ACOSH,
    'atanh': TokenType.ATANH,
    'ceil': TokenType.CEIL,
    'floor': TokenType.FLOOR,
    'frac': TokenType.FRAC,
    'pi': TokenType.CONST_PI,
    'e': TokenType.CONST_E,
    'theta': TokenType.VARIABLE_THETA,
    'x': TokenType.VARIABLE_X,
    't': TokenType.VARIABLE_T,
}


Token = namedtuple('Token', 'type value_index', defaults=(None,))


class TokenBuffer:
    '''
    Ordered tokens plus the pool of numeric literals they index into.

    Both grow independently, doubling. ``value_index`` is 16 bits wide, so
    neither may hold more than MAX_TOKENS entries; growing past that raises
    MemoryError, which the stages report as MEMORY_ERROR.

    Release with ``release()`` or by using the buffer as a context manager.
    '''

    INITIAL_CAPACITY = 64
    INITIAL_VALUES_CAPACITY = 16
    MAX_TOKENS = 1 << 16

    def __init__(self):
        self.tokens = []
        self.values = []
        self.capacity = self.INITIAL_CAPACITY
        self.values_capacity = self.INITIAL_VALUES_CAPACITY

    def _grow(self, capacity):
        capacity = capacity * 2 or self.INITIAL_CAPACITY
        if capacity > self.MAX_TOKENS:
            raise MemoryError('TokenBuffer limited to {} entries'
                              .format(self.MAX_TOKENS))
        return capacity

    def append(self, type_, value_index=None):
        '''
        Append a token of this type and return it.
        '''
        if len(self.tokens) >= self.capacity:
            self.capacity = self._grow(self.capacity)
        token = Token(type_, value_index)
        self.tokens.append(token)
        return token

    def append_number(self, value):
        '''
        Pool the literal and append a NUMBER token pointing at it.
        '''
        if len(self.values) >= self.values_capacity:
            self.values_capacity = self._grow(self.values_capacity)
        self.values.append(float(value))
        return self.append(TokenType.NUMBER, len(self.values) - 1)

    def clone_pool(self):
        '''
        Return a new, token-less buffer with a copy of this literal pool.

        The copy lets either buffer be released on its own.
        '''
        other = type(self)()
        other.values = list(self.values)
        other.values_capacity = self.values_capacity
        return other

    def value(self, token):
        return self.values[token.value_index]

    def release(self):
        self.tokens = []
        self.values = []
        self.capacity = 0
        self.values_capacity = 0

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.release()

    def __len__(self):
        return len(self.tokens)

    def __iter__(self):
        return iter(self.tokens)

    def __getitem__(self, index):
        return self.tokens[index]

    def __eq__(self, other):
        if not isinstance(other, TokenBuffer):
            return NotImplemented
        return self.tokens == other.tokens and self.values == other.values

    def __repr__(self):
        return '{}(tokens={!r}, values={!r})'.format(type(self).__name__,
                                                     self.tokens,
                                                     self.values)
