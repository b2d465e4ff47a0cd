import logging
from typing import List, NamedTuple, Optional

import ply.lex as lex

from errors import LexicalError

logger = logging.getLogger(__name__)


class Token(NamedTuple):
    kind: str
    text: str
    offset: int
    length: int
    value: Optional[int] = None


tokens = (
    'RESERVED',
    'NUMBER',
)

# Not a ply token type: appended by tokenize() as the end sentinel
EOF = 'EOF'


# Two-character comparisons come first so '<=' is never split into '<' '='
def t_RESERVED(t):
    r'==|!=|<=|>=|[-+*/()<>]'
    return t


def t_NUMBER(t):
    r'[0-9]+'
    t.value = int(t.value)
    return t


# Whitespace separates tokens and is never tokenized
t_ignore = ' \t\n\r\f\v'


def t_error(t):
    raise LexicalError(t.lexpos, 'invalid token')


# Build the lexer
lexer = lex.lex()


def tokenize(source: str) -> List[Token]:
    """Split ``source`` into tokens, ending with exactly one EOF token.

    Raises LexicalError at the offset of the first character that is not
    whitespace, an operator, or a digit.
    """
    scanner = lexer.clone()
    scanner.input(source)
    result = []
    while True:
        tok = scanner.token()
        if not tok:
            break
        # ply leaves lexpos just past the matched text
        length = scanner.lexpos - tok.lexpos
        text = source[tok.lexpos:scanner.lexpos]
        if tok.type == 'NUMBER':
            result.append(Token(tok.type, text, tok.lexpos, length, tok.value))
        else:
            result.append(Token(tok.type, text, tok.lexpos, length))
    result.append(Token(EOF, '', len(source), 0))
    logger.debug('tokenized %d characters into %d tokens', len(source), len(result))
    return result
