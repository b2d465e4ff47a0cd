import logging
from typing import List

from ast_node import ASTNode, NodeKind

logger = logging.getLogger(__name__)


WORD_BITS = 64

ARITHMETIC = {
    NodeKind.ADD: ['add rax, rdi'],
    NodeKind.SUB: ['sub rax, rdi'],
    NodeKind.MUL: ['imul rax, rdi'],
    # rdx:rax / rdi, quotient truncated toward zero
    NodeKind.DIV: ['cqo', 'idiv rdi'],
}

SETCC = {
    NodeKind.EQ: 'sete',
    NodeKind.NE: 'setne',
    NodeKind.LT: 'setl',
    NodeKind.LE: 'setle',
}


def to_word(value: int) -> int:
    """Wrap an integer to a signed machine word (two's complement)."""
    half = 1 << (WORD_BITS - 1)
    return ((value + half) % (1 << WORD_BITS)) - half


def fits_imm32(value: int) -> bool:
    return -(1 << 31) <= value < (1 << 31)


def generate_assembler(node: ASTNode) -> List[str]:
    """Emit stack-machine instructions for ``node`` in post-order.

    Each subtree leaves exactly one value on the stack. For an operator the
    right operand is on top, so it is popped into rdi first and the left
    operand into rax.
    """
    code: List[str] = []

    def emit(instr: str):
        code.append(f'  {instr}')

    def push_literal(value: int):
        value = to_word(value)
        if fits_imm32(value):
            emit(f'push {value}')
        else:
            # push only takes a sign-extended 32-bit immediate
            emit(f'mov rax, {value}')
            emit('push rax')

    def walk(n: ASTNode):
        if n.nodetype is NodeKind.NUM:
            push_literal(n.value)
            return

        walk(n.left)
        walk(n.right)

        emit('pop rdi')
        emit('pop rax')

        if n.nodetype in ARITHMETIC:
            for instr in ARITHMETIC[n.nodetype]:
                emit(instr)
        else:
            emit('cmp rax, rdi')
            emit(f'{SETCC[n.nodetype]} al')
            emit('movzb rax, al')

        emit('push rax')

    walk(node)
    logger.debug('generated %d instructions', len(code))
    return code


def render_program(node: ASTNode) -> str:
    """Wrap the generated code in a ``main`` routine returning its value."""
    asm: List[str] = []
    asm.append('.intel_syntax noprefix')
    asm.append('.global main')
    asm.append('main:')
    asm.extend(generate_assembler(node))
    # the whole expression's value is the only thing left on the stack
    asm.append('  pop rax')
    asm.append('  ret')
    return '\n'.join(asm) + '\n'
