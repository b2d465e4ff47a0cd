from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple


class NodeKind(Enum):
    ADD = 'Add'
    SUB = 'Sub'
    MUL = 'Mul'
    DIV = 'Div'
    EQ = 'Eq'
    NE = 'Ne'
    LT = 'Lt'
    LE = 'Le'
    NUM = 'Num'


@dataclass(frozen=True)
class ASTNode:
    """One node of the expression tree.

    A NUM node carries ``value`` and no children; every other kind has both
    ``left`` and ``right``. Nodes are frozen once built.
    """
    nodetype: NodeKind
    value: Optional[int] = None
    left: Optional['ASTNode'] = None
    right: Optional['ASTNode'] = None
    depth: int = field(init=False, compare=False, repr=False)

    def __post_init__(self):
        if self.nodetype is NodeKind.NUM:
            if self.value is None or self.left is not None or self.right is not None:
                raise ValueError('Num node takes a value and no children')
            depth = 1
        else:
            if self.left is None or self.right is None:
                raise ValueError(f'{self.nodetype.value} node needs two children')
            if self.value is not None:
                raise ValueError(f'{self.nodetype.value} node takes no value')
            depth = max(self.left.depth, self.right.depth) + 1
        object.__setattr__(self, 'depth', depth)

    @property
    def children(self) -> Tuple['ASTNode', ...]:
        if self.nodetype is NodeKind.NUM:
            return ()
        return (self.left, self.right)

    def to_lines(self, level=0):
        indent = '  ' * level
        val = f": {self.value}" if self.value is not None else ""
        lines = [f"{indent}{self.nodetype.value}{val}"]
        for c in self.children:
            lines.extend(c.to_lines(level + 1))
        return lines

    def to_string(self):
        return '\n'.join(self.to_lines())


def new_num(value: int) -> ASTNode:
    return ASTNode(NodeKind.NUM, value=value)


def new_binary(kind: NodeKind, left: ASTNode, right: ASTNode) -> ASTNode:
    return ASTNode(kind, left=left, right=right)
