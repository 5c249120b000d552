## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘
#
# px2: stack effects of every operation, checked before it is emitted or stepped.
#

from .types import DataType, OpCode, Stack, stack_depth


Int, Anything = DataType.INT, None

# Inputs and outputs are listed top-first; `None` accepts any type.
_STACK_EFFECTS = {
    OpCode.PUSH:      ([], [Anything]),
    OpCode.ADD:       ([Int, Int], [Int]),
    OpCode.SUBTRACT:  ([Int, Int], [Int]),
    OpCode.MULTIPLY:  ([Int, Int], [Int]),
    OpCode.DIVIDE:    ([Int, Int], [Int]),
    OpCode.DUPLICATE: ([Anything], [Anything, Anything]),
    OpCode.DROP:      ([Anything], []),
    OpCode.PRINTLN:   ([Anything], []),
    OpCode.OVER:      ([Anything, Anything], [Anything, Anything, Anything]),
    OpCode.SWAP:      ([Anything, Anything], [Anything, Anything]),
    OpCode.ROTATE:    ([Anything, Anything, Anything], [Anything, Anything, Anything]),
}

_ARITHMETIC_NOUNS = {
    OpCode.ADD: 'addition',
    OpCode.SUBTRACT: 'subtraction',
    OpCode.MULTIPLY: 'multiplication',
    OpCode.DIVIDE: 'division',
}

_POSITIONS = ('on top of the stack', 'one down from the top of the stack')


def get_stack_effect(code: OpCode) -> dict:
    inputs, outputs = _STACK_EFFECTS[code]
    return {
        'arity': len(inputs),
        'valency': len(outputs),
        'inputs': list(inputs),
        'outputs': list(outputs),
    }


def _type_of(item) -> DataType:
    return item if isinstance(item, DataType) else item.type


def check_stack_effect(code: OpCode, stack: Stack, depth: int | None = None) -> tuple[bool, str]:
    """Check if operation can be applied to a stack of types (compile time) or values (runtime)."""
    depth = stack_depth(stack) if depth is None else depth
    need = len(_STACK_EFFECTS[code][0])

    if code in _ARITHMETIC_NOUNS:
        noun = _ARITHMETIC_NOUNS[code]
        if depth < need:
            return False, f"expected {need} values on the stack to perform {noun}, found {depth}"
        for position, expected in zip(_POSITIONS, _STACK_EFFECTS[code][0]):
            if (actual := _type_of(stack.head)) != expected:
                return False, f"expected integer {position} to perform {noun}, found {actual}"
            stack = stack.tail
        return True, ""

    if depth >= need: return True, ""
    match code:
        case OpCode.PRINTLN:
            return False, "nothing on stack to print"
        case OpCode.DUPLICATE | OpCode.DROP:
            return False, f"no data on the stack to {code.value}"
        case _:
            return False, f"need {need} elements on the stack to perform {code.value} but found {depth}"
