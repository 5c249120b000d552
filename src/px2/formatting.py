## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import re

from .types import Stack, nil, stack_to_list


def write_without_ansi(write_fn):
    """Wrapper function that strips ANSI codes before calling the original writer."""
    ansi_re = re.compile(r'\033\[[0-9;]*m')
    return lambda text: write_fn(ansi_re.sub('', text))


def format_stack(stack: Stack) -> str:
    if stack is nil: return '∅'
    return ' '.join(str(s) for s in reversed(stack_to_list(stack)))

def show_stack(stack: Stack, width=72, end='\n', file=None):
    stack_str = format_stack(stack)
    if width is not None and len(stack_str) > width:
        stack_str = '… ' + stack_str[-width+2:]
    print(f"{stack_str:>{width}}" if width else stack_str, end=end, file=file)

def show_step(step: int, op, stack: Stack, width=48, file=None):
    print(f"\033[90m{step:>3} :\033[0m  ", end='', file=file)
    show_stack(stack, width=width, end='', file=file)
    print(f" \033[36m <=> \033[0m {op if op is not None else '∅'}", file=file)


def format_program(program) -> str:
    return '\n'.join(f"\033[90m{i:>4}\033[0m  {op}" for i, op in enumerate(program))


def source_line(source: str, line: int) -> str:
    # Only LF ends a line, matching the scanner's line count.
    lines = source.split('\n')
    return lines[line - 1] if 0 < line <= len(lines) else ''

def format_compile_error(exc, source: str) -> str:
    """Render a compiler error with the offending source line and a caret under the token."""
    token = exc.token
    lexeme = getattr(token, 'lexeme', '')
    result = [f"\033[30;41m COMPILER ERROR. \033[0m at '\033[1;97m{lexeme}\033[0m': {exc.message}"]
    if exc.line is None:
        return result[0]

    result.append(f"       --> {exc.filename}:{exc.line}:{exc.column}")
    result.append("        |")
    result.append(f"{exc.line:>7} | {source_line(source, exc.line)}")
    result.append("        | " + ' ' * (exc.column - 1) + "\033[31m" + '^' * max(exc.length, 1) + "\033[0m")
    return '\n'.join(result)
