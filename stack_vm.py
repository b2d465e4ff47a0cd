# stack_vm.py (interprets the generated x86-64 instruction subset)

import logging
from typing import Dict, List, Optional, Tuple

from assembler_generator import to_word

logger = logging.getLogger(__name__)


class VMError(Exception):
    pass


CONDITIONS = {
    'sete': lambda a, b: a == b,
    'setne': lambda a, b: a != b,
    'setl': lambda a, b: a < b,
    'setle': lambda a, b: a <= b,
}


class StackMachine:
    """Executes the instructions emitted by the code generator.

    Registers hold signed 64-bit values. The machine stack is a Python list
    whose end is the stack top. Execution stops at ``ret`` and the value of
    rax is returned.
    """

    def __init__(self):
        self.registers: Dict[str, int] = {'rax': 0, 'rdi': 0, 'rdx': 0}
        self.stack: List[int] = []
        self.flags: Optional[Tuple[int, int]] = None

    def read(self, operand: str) -> int:
        if operand in self.registers:
            return self.registers[operand]
        if operand == 'al':
            return self.registers['rax'] & 0xFF
        try:
            return to_word(int(operand))
        except ValueError:
            raise VMError(f'unknown operand {operand!r}') from None

    def write(self, register: str, value: int):
        if register == 'al':
            rax = self.registers['rax']
            self.registers['rax'] = to_word((rax & ~0xFF) | (value & 0xFF))
        elif register in self.registers:
            self.registers[register] = to_word(value)
        else:
            raise VMError(f'unknown register {register!r}')

    def pop(self) -> int:
        if not self.stack:
            raise VMError('pop from empty stack')
        return self.stack.pop()

    def divide(self, divisor: int):
        dividend = self.registers['rax']
        if divisor == 0:
            raise VMError('division by zero')
        quotient = abs(dividend) // abs(divisor)
        if (dividend < 0) != (divisor < 0):
            quotient = -quotient
        if quotient != to_word(quotient):
            raise VMError('division overflow')
        self.registers['rax'] = quotient
        self.registers['rdx'] = dividend - quotient * divisor

    def step(self, instr: str, operands: List[str]) -> bool:
        # Returns False once the routine has returned
        if instr == 'push':
            self.stack.append(self.read(operands[0]))
        elif instr == 'pop':
            self.write(operands[0], self.pop())
        elif instr == 'mov':
            self.write(operands[0], self.read(operands[1]))
        elif instr == 'add':
            self.write(operands[0], self.read(operands[0]) + self.read(operands[1]))
        elif instr == 'sub':
            self.write(operands[0], self.read(operands[0]) - self.read(operands[1]))
        elif instr == 'imul':
            self.write(operands[0], self.read(operands[0]) * self.read(operands[1]))
        elif instr == 'cqo':
            self.registers['rdx'] = -1 if self.registers['rax'] < 0 else 0
        elif instr == 'idiv':
            self.divide(self.read(operands[0]))
        elif instr == 'cmp':
            self.flags = (self.read(operands[0]), self.read(operands[1]))
        elif instr in CONDITIONS:
            if self.flags is None:
                raise VMError(f'{instr} before cmp')
            self.write(operands[0], 1 if CONDITIONS[instr](*self.flags) else 0)
        elif instr == 'movzb':
            self.write(operands[0], self.read(operands[1]))
        elif instr == 'ret':
            return False
        else:
            raise VMError(f'unsupported instruction {instr!r}')
        return True

    def run(self, text: str) -> int:
        for lineno, raw in enumerate(text.splitlines(), start=1):
            line = raw.strip()
            # directives and labels carry no behaviour here
            if not line or line.startswith('.') or line.endswith(':'):
                continue
            instr, _, rest = line.partition(' ')
            operands = [o.strip() for o in rest.split(',')] if rest else []
            try:
                running = self.step(instr, operands)
            except IndexError:
                raise VMError(f'line {lineno}: missing operand for {instr!r}') from None
            if not running:
                logger.debug('returned %d with %d value(s) left on the stack',
                             self.registers['rax'], len(self.stack))
                return self.registers['rax']
        raise VMError('program ended without ret')


def run_program(text: str) -> int:
    return StackMachine().run(text)
