import argparse
import logging
import sys
from pathlib import Path

from assembler_generator import render_program
from ast_exporter import ASTDotExporter
from ast_node import ASTNode
from config import DEFAULT_OPTIONS, CompilerOptions
from errors import CompileError, format_error
from lexer import tokenize
from parser import parse
from stack_vm import VMError, run_program

logger = logging.getLogger('exprc')


class UsageErrorParser(argparse.ArgumentParser):
    # usage errors exit with 1, like compile errors
    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(1, f'{self.prog}: error: {message}\n')


def build_ast(source: str, options: CompilerOptions = DEFAULT_OPTIONS) -> ASTNode:
    return parse(tokenize(source), options)


def compile_expression(source: str, options: CompilerOptions = DEFAULT_OPTIONS) -> str:
    """Translate one expression into a complete assembly routine.

    Raises LexicalError or ParseError; nothing is produced on failure.
    """
    return render_program(build_ast(source, options))


# options taking a value; every other option is a plain flag
VALUE_OPTIONS = ('--max-nesting', '--max-depth', '--dot')
FLAG_OPTIONS = ('--strict', '--ast', '--run', '-v', '--verbose', '-h', '--help')


def split_argv(argv):
    """Separate the tool's own options from expression arguments.

    Anything that is not exactly one of our option strings is expression
    text, even when it starts with '-' (e.g. "-3+5" or "--1").
    """
    options, sources = [], []
    args = iter(argv)
    for arg in args:
        name = arg.partition('=')[0]
        if arg == '--':
            sources.extend(args)
        elif arg in FLAG_OPTIONS or (name in VALUE_OPTIONS and '=' in arg):
            options.append(arg)
        elif arg in VALUE_OPTIONS:
            options.append(arg)
            value = next(args, None)
            if value is not None:
                options.append(value)
        else:
            sources.append(arg)
    return options, sources


def build_arg_parser() -> argparse.ArgumentParser:
    ap = UsageErrorParser(
        prog='exprc',
        description='Compile an integer expression to x86-64 stack-machine assembly.',
        allow_abbrev=False,
    )
    ap.add_argument('expression', nargs='*', help='the expression to compile, e.g. "1+2*3"')
    ap.add_argument('--strict', action='store_true',
                    help='reject input left over after the expression')
    ap.add_argument('--max-nesting', type=int, default=DEFAULT_OPTIONS.max_nesting,
                    help='deepest allowed parenthesis nesting (default: %(default)s)')
    ap.add_argument('--max-depth', type=int, default=DEFAULT_OPTIONS.max_depth,
                    help='deepest allowed syntax tree (default: %(default)s)')
    ap.add_argument('--ast', action='store_true', help='print the syntax tree to stderr')
    ap.add_argument('--dot', type=Path, help='write the syntax tree as Graphviz DOT to this file')
    ap.add_argument('--run', action='store_true',
                    help='execute the generated code and print its value to stderr')
    ap.add_argument('-v', '--verbose', action='store_true', help='enable debug logging')
    return ap


def main(argv=None) -> int:
    ap = build_arg_parser()
    if argv is None:
        argv = sys.argv[1:]
    # an expression such as "-3+5" would look like an option to argparse
    options, sources = split_argv(argv)
    args = ap.parse_args(options + ['--'] + sources)
    sources = args.expression
    if len(sources) != 1:
        ap.error(f'expected exactly one expression argument, got {len(sources)}')
    source = sources[0]

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(levelname)s %(name)s: %(message)s',
        stream=sys.stderr,
    )

    try:
        options = CompilerOptions(
            strict=args.strict,
            max_nesting=args.max_nesting,
            max_depth=args.max_depth,
        )
    except ValueError as e:
        ap.error(str(e))

    try:
        ast = build_ast(source, options)
    except CompileError as e:
        logger.debug('compilation failed: %s', e)
        print(format_error(source, e), file=sys.stderr)
        return 1

    asm = render_program(ast)
    sys.stdout.write(asm)

    if args.ast:
        print(ast.to_string(), file=sys.stderr)
    if args.dot:
        args.dot.write_text(ASTDotExporter().to_dot(ast) + '\n', encoding='utf-8')
        logger.info('wrote AST DOT to %s', args.dot)
    if args.run:
        try:
            print(f'result: {run_program(asm)}', file=sys.stderr)
        except VMError as e:
            print(f'run failed: {e}', file=sys.stderr)
            return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
