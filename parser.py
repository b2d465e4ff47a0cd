# Recursive-descent parser for integer expressions.
#
#   expr       = equality
#   equality   = relational (("==" | "!=") relational)*
#   relational = additive (("<" | "<=" | ">" | ">=") additive)*
#   additive   = term (("+" | "-") term)*
#   term       = unary (("*" | "/") unary)*
#   unary      = ("+" | "-")? primary
#   primary    = NUMBER | "(" expr ")"
#
# Every starred rule is a loop folding to the left, so equal-precedence
# operators associate left and the call depth only grows with parentheses.

import logging
from typing import List, Optional

from ast_node import ASTNode, NodeKind, new_binary, new_num
from config import DEFAULT_OPTIONS, CompilerOptions
from errors import ParseError
from lexer import EOF, Token

logger = logging.getLogger(__name__)


EQUALITY_OPERATORS = {
    '==': NodeKind.EQ,
    '!=': NodeKind.NE,
}

ADDITIVE_OPERATORS = {
    '+': NodeKind.ADD,
    '-': NodeKind.SUB,
}

TERM_OPERATORS = {
    '*': NodeKind.MUL,
    '/': NodeKind.DIV,
}


class Parser:
    """Parser state: the token list and a cursor that only moves forward."""

    def __init__(self, tokens: List[Token], options: Optional[CompilerOptions] = None):
        if not tokens or tokens[-1].kind != EOF:
            raise ValueError('token sequence must end with an EOF token')
        self.tokens = tokens
        self.pos = 0
        self.options = options or DEFAULT_OPTIONS
        self.nesting = 0

    # helper functions
    def peek(self) -> Token:
        return self.tokens[self.pos]

    def at_eof(self) -> bool:
        return self.peek().kind == EOF

    def consume(self, op: str) -> bool:
        tok = self.peek()
        if tok.kind != 'RESERVED' or tok.text != op:
            return False
        self.pos += 1
        return True

    def expect(self, op: str) -> None:
        if not self.consume(op):
            raise ParseError(self.peek().offset, f"expected '{op}'")

    def expect_number(self) -> int:
        tok = self.peek()
        if tok.kind != 'NUMBER':
            raise ParseError(tok.offset, 'expected a number')
        self.pos += 1
        return tok.value

    def binary(self, kind: NodeKind, left: ASTNode, right: ASTNode, at: Token) -> ASTNode:
        node = new_binary(kind, left, right)
        if node.depth > self.options.max_depth:
            if self.nesting:
                raise ParseError(at.offset, 'expression nested too deeply')
            raise ParseError(at.offset, 'expression too long')
        return node

    def match(self, table):
        # Returns (operator token, kind) when the lookahead is one of table's operators
        tok = self.peek()
        for op, kind in table.items():
            if self.consume(op):
                return tok, kind
        return None, None

    # grammar rules
    def expr(self) -> ASTNode:
        return self.equality()

    def equality(self) -> ASTNode:
        node = self.relational()
        while True:
            tok, kind = self.match(EQUALITY_OPERATORS)
            if kind is None:
                return node
            node = self.binary(kind, node, self.relational(), tok)
            logger.debug('relational %s relational -> equality', tok.text)

    def relational(self) -> ASTNode:
        node = self.additive()
        while True:
            tok = self.peek()
            # '<=' and '>=' are single tokens, so the order here does not matter
            if self.consume('<'):
                node = self.binary(NodeKind.LT, node, self.additive(), tok)
            elif self.consume('<='):
                node = self.binary(NodeKind.LE, node, self.additive(), tok)
            elif self.consume('>'):
                # a > b is rewritten as b < a; there is no greater-than node
                node = self.binary(NodeKind.LT, self.additive(), node, tok)
            elif self.consume('>='):
                node = self.binary(NodeKind.LE, self.additive(), node, tok)
            else:
                return node
            logger.debug('additive %s additive -> relational', tok.text)

    def additive(self) -> ASTNode:
        node = self.term()
        while True:
            tok, kind = self.match(ADDITIVE_OPERATORS)
            if kind is None:
                return node
            node = self.binary(kind, node, self.term(), tok)
            logger.debug('additive %s term -> additive', tok.text)

    def term(self) -> ASTNode:
        node = self.unary()
        while True:
            tok, kind = self.match(TERM_OPERATORS)
            if kind is None:
                return node
            node = self.binary(kind, node, self.unary(), tok)
            logger.debug('term %s unary -> term', tok.text)

    def unary(self) -> ASTNode:
        tok = self.peek()
        if self.consume('+'):
            return self.primary()
        if self.consume('-'):
            # -x is 0 - x
            return self.binary(NodeKind.SUB, new_num(0), self.primary(), tok)
        return self.primary()

    def primary(self) -> ASTNode:
        tok = self.peek()
        if self.consume('('):
            self.nesting += 1
            if self.nesting > self.options.max_nesting:
                raise ParseError(tok.offset, 'expression nested too deeply')
            node = self.expr()
            self.expect(')')
            self.nesting -= 1
            return node
        return new_num(self.expect_number())


def parse(tokens: List[Token], options: Optional[CompilerOptions] = None) -> ASTNode:
    """Parse one expression from ``tokens`` and return the tree's root.

    In strict mode anything left between the expression and EOF is a
    ParseError; otherwise trailing tokens are ignored.
    """
    parser = Parser(tokens, options)
    node = parser.expr()
    if parser.options.strict and not parser.at_eof():
        raise ParseError(parser.peek().offset, 'unexpected trailing input')
    if not parser.at_eof():
        logger.debug('ignoring %d trailing token(s)', len(tokens) - 1 - parser.pos)
    logger.debug('parsed tree of depth %d', node.depth)
    return node
