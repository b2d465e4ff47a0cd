"""Compile errors and their caret-style rendering.

Errors are plain values carrying the source offset that triggered them.
They are raised where the problem is detected and rendered exactly once,
by the driver, with ``format_error``.
"""


class CompileError(Exception):
    """Base class for fatal errors raised while compiling an expression."""

    kind = 'error'

    def __init__(self, offset: int, message: str):
        super().__init__(message)
        self.offset = offset
        self.message = message

    def __str__(self):
        return f'{self.kind} at offset {self.offset}: {self.message}'


class LexicalError(CompileError):
    kind = 'lexical error'


class ParseError(CompileError):
    # Python's own SyntaxError is left alone; this is the grammar error.
    kind = 'syntax error'


def format_error(source: str, error: CompileError) -> str:
    # source line, caret under the offending character, then the message
    lines = [source, ' ' * error.offset + '^ ' + error.message]
    return '\n'.join(lines)
