## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import sys
import operator

from .types import Operation, OpCode, Stack, Value, nil
from .errors import Px2RuntimeError
from .formatting import show_step


INT_MIN, INT_MAX = -2**63, 2**63 - 1


def _divide(a: int, b: int) -> int:
    if b == 0: raise Px2RuntimeError("division by zero")
    quotient = abs(a) // abs(b)
    return quotient if (a < 0) == (b < 0) else -quotient

_ARITHMETIC = {
    OpCode.ADD: operator.add,
    OpCode.SUBTRACT: operator.sub,
    OpCode.MULTIPLY: operator.mul,
    OpCode.DIVIDE: _divide,
}


def arithmetic(code: OpCode, a: Value, b: Value) -> Value:
    """Apply `a op b` where `a` is the deeper operand; results must fit in 64 bits."""
    result = _ARITHMETIC[code](a.data, b.data)
    if not INT_MIN <= result <= INT_MAX:
        raise Px2RuntimeError("integer overflow")
    return Value.from_int(result)


def shuffle(code: OpCode, stack: Stack) -> Stack:
    """Stack manipulations that only move items around, shared by values and types."""
    match code:
        case OpCode.DUPLICATE:
            return Stack(stack, stack.head)
        case OpCode.DROP:
            return stack.tail
        case OpCode.OVER:
            # a b => a b a
            return Stack(stack, stack.tail.head)
        case OpCode.SWAP:
            # a b => b a
            (rest, a), b = stack
            return rest.pushed(b, a)
        case OpCode.ROTATE:
            # a b c => b c a
            ((rest, a), b), c = stack
            return rest.pushed(b, c, a)
    raise NotImplementedError(f"`{code.value}` is not a stack shuffle.")


def interpret_step(op: Operation, stack: Stack, out=None) -> Stack:
    match op.code:
        case OpCode.PUSH:
            return Stack(stack, op.value)
        case OpCode.PRINTLN:
            rest, value = stack
            print(value, file=out or sys.stdout)
            return rest
        case OpCode.ADD | OpCode.SUBTRACT | OpCode.MULTIPLY | OpCode.DIVIDE:
            (rest, a), b = stack
            return Stack(rest, arithmetic(op.code, a, b))
        case _:
            return shuffle(op.code, stack)


def interpret(program, stack=None, out=None, verbosity=0, stats=None) -> Stack:
    """Execute an already verified program in order; no operand checks happen here."""
    stack = nil if stack is None else stack

    step = 0
    for op in program:
        if verbosity >= 2:
            show_step(step, op, stack, file=out)

        step += 1
        try:
            stack = interpret_step(op, stack, out)
        except Px2RuntimeError as exc:
            exc.op, exc.stack = op, stack
            raise

    if verbosity >= 2:
        show_step(step, None, stack, file=out)
    if stats is not None:
        stats['steps'] = stats.get('steps', 0) + step

    return stack
