"""AST DOT exporter.

Provides ASTDotExporter.to_dot(node), rendering an expression tree in
Graphviz DOT format: one box per node, edges to the left child first.
"""

from ast_node import ASTNode, NodeKind


class ASTDotExporter:
    """Export expression trees to Graphviz DOT format."""

    def __init__(self):
        # lines: DOT lines being built; counter: last generated node id
        self.lines = []
        self.counter = 0

    def new_id(self) -> str:
        self.counter += 1
        return f'n{self.counter}'

    def label(self, n: ASTNode) -> str:
        if n.nodetype is NodeKind.NUM:
            return f'Num\\n{n.value}'
        return n.nodetype.value

    def walk(self, n: ASTNode) -> str:
        # Emit the node, then recurse left and right; returns the node's id
        this_id = self.new_id()
        self.lines.append(f'  {this_id} [label="{self.label(n)}"];')
        for child in n.children:
            child_id = self.walk(child)
            self.lines.append(f'  {this_id} -> {child_id};')
        return this_id

    def to_dot(self, node: ASTNode) -> str:
        # Resets internal state so calling to_dot repeatedly produces fresh ids
        self.lines = ['digraph AST {', '  node [shape=box];']
        self.counter = 0
        self.walk(node)
        self.lines.append('}')
        return '\n'.join(self.lines)
