## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from typing import Any
from pathlib import Path

from .types import Operation, OpCode, Program, Stack, Value, nil, list_to_stack as _list_to_stack, stack_to_list as _stack_to_list
from .errors import Px2FileError
from .compiler import compile_source
from .validating import check_stack_effect
from .interpreter import interpret, interpret_step


SOURCE_SUFFIX = '.px2'


class Runtime:
    """Minimal runtime facade: compile source to bytecode, then run it on a fresh stack."""

    def __init__(self, out=None):
        self.out = out

    # Assembly ────────────────────────────────────────────────────────────────────────────────
    def operation(self, name: str, value: Any = None) -> Operation:
        code = OpCode(name)
        return Operation(code, Value.of(value) if code is OpCode.PUSH else None)

    def constant(self, value: int | bool) -> Operation:
        return Operation(OpCode.PUSH, Value.of(value))

    def is_operation(self, x: Any) -> bool:
        return isinstance(x, Operation)

    # Compilation ─────────────────────────────────────────────────────────────────────────────
    def compile(self, source: str, filename: str | None = None, verbosity: int = 0) -> Program:
        return compile_source(source, filename=filename, verbosity=verbosity)

    def load_source_file(self, path: str | Path) -> str:
        path = Path(str(path).strip())
        if path.suffix != SOURCE_SUFFIX:
            raise Px2FileError(f"Given file \"{path}\" was not a '{SOURCE_SUFFIX}' file", filename=str(path))
        if not path.exists():
            raise Px2FileError(f"Given file \"{path}\" does not exist", filename=str(path))
        try:
            return path.read_text(encoding='utf-8')
        except (OSError, UnicodeDecodeError) as exc:
            raise Px2FileError(f"Error reading file: {exc}", filename=str(path)) from exc

    # Execution ───────────────────────────────────────────────────────────────────────────────
    def run(self, program: Program, stack: Stack | None = None,
            verbosity: int = 0, stats: dict | None = None) -> Stack:
        return interpret(program, stack=stack, out=self.out, verbosity=verbosity, stats=stats)

    def execute(self, source: str, filename: str | None = None,
                verbosity: int = 0, stats: dict | None = None) -> Stack:
        program = self.compile(source, filename=filename, verbosity=verbosity)
        return self.run(program, verbosity=verbosity, stats=stats)

    def can_step(self, op: Operation, stack: Stack) -> tuple[bool, str]:
        return check_stack_effect(op.code, stack)

    def do_step(self, op: Operation, stack: Stack) -> Stack:
        return interpret_step(op, stack, self.out)

    def apply(self, op_or_name: Operation | str, stack: Stack) -> Stack:
        op = op_or_name if isinstance(op_or_name, Operation) else self.operation(op_or_name)
        return self.do_step(op, stack)

    # Conversion ──────────────────────────────────────────────────────────────────────────────
    def to_stack(self, values: list) -> Stack:
        """Build a stack from Python ints and bools, first item on top."""
        return _list_to_stack([Value.of(v) for v in values])

    def from_stack(self, stack: Stack) -> list:
        return [v.to_python() for v in _stack_to_list(stack)]

    def is_empty(self, stack: Stack) -> bool:
        return stack is nil
