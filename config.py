from dataclasses import dataclass


@dataclass(frozen=True)
class CompilerOptions:
    """Knobs for a single compilation run.

    strict: reject tokens left over after the top-level expression instead
        of silently ignoring them.
    max_nesting: deepest allowed parenthesis nesting.
    max_depth: deepest allowed syntax tree (a leaf has depth 1).
    """
    strict: bool = False
    max_nesting: int = 64
    max_depth: int = 400

    def __post_init__(self):
        if self.max_nesting < 1:
            raise ValueError(f'max_nesting must be positive, got {self.max_nesting}')
        if self.max_depth < 1:
            raise ValueError(f'max_depth must be positive, got {self.max_depth}')


DEFAULT_OPTIONS = CompilerOptions()
