## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from enum import Enum
from collections import namedtuple
from dataclasses import dataclass


class stack_list(list): pass


# Stack type is a namedtuple to save memory, yet provide tail/head accessors.
class Stack(namedtuple('Stack', ['tail', 'head'])):
    __slots__ = ()
    _nil_singleton = None

    def __new__(cls, tail, head):
        if tail is None and head is None:
            # Only one singleton creation is allowed, and it's the one just below.
            if cls._nil_singleton is None:
                self = super(Stack, cls).__new__(cls, tail, head)
                cls._nil_singleton = self
                return self
            # By convention, all other code should use `nil` explicitly.
            raise ValueError("Use the canonical `nil` instance for empty stacks")
        return super(Stack, cls).__new__(cls, tail, head)

    def __repr__(self):
        if self is nil:
            return "< nil >"

        items = []
        current = self
        while current is not nil:
            items.append(repr(current.head))
            current = current.tail
        return "< " + " ".join(reversed(items)) + " >"

    def __bool__(self):
        raise TypeError("Stack truth value is ambiguous; compare with `is nil` or `is not nil`.")

    def pushed(self, *items):
        """Push items in order of tail (left) to head (right) onto new Stack and return."""
        stack = self
        for it in items:
            stack = Stack(stack, it)
        return stack


# All checks for empty stack must be done by comparing to this.
nil = Stack(None, None)


def stack_to_list(stk: Stack) -> stack_list:
    """Top-first list of the items on the stack."""
    result = []
    while stk is not nil:
        stk, head = stk
        result.append(head)
    return stack_list(result)

def list_to_stack(values: list, base=None) -> Stack:
    stack = nil if base is None else base
    for value in reversed(values):
        stack = Stack(stack, value)
    return stack

def stack_depth(stk: Stack) -> int:
    depth = 0
    while stk is not nil:
        stk, depth = stk.tail, depth + 1
    return depth


class DataType(Enum):
    INT = 'Int'
    BOOL = 'Bool'

    def __str__(self):
        return self.value


@dataclass(frozen=True)
class Value:
    """Runtime datum tagged with its `DataType`; `data` is only read after matching on `type`."""
    type: DataType
    data: int | bool

    @classmethod
    def from_int(cls, value: int) -> "Value":
        return cls(DataType.INT, int(value))

    @classmethod
    def from_bool(cls, value: bool) -> "Value":
        return cls(DataType.BOOL, bool(value))

    @classmethod
    def of(cls, x) -> "Value":
        if isinstance(x, Value): return x
        if isinstance(x, bool): return cls.from_bool(x)
        if isinstance(x, int): return cls.from_int(x)
        raise TypeError(f"Cannot represent {type(x).__name__} as a px2 value.")

    def to_python(self) -> int | bool:
        match self.type:
            case DataType.INT: return int(self.data)
            case DataType.BOOL: return bool(self.data)

    def __str__(self):
        match self.type:
            case DataType.INT: return str(int(self.data))
            case DataType.BOOL: return 'true' if self.data else 'false'


class OpCode(Enum):
    PUSH = 'push'
    ADD = 'add'
    SUBTRACT = 'sub'
    MULTIPLY = 'mul'
    DIVIDE = 'div'
    DUPLICATE = 'dup'
    DROP = 'drop'
    OVER = 'over'
    ROTATE = 'rot'
    SWAP = 'swap'
    PRINTLN = 'println'


@dataclass(frozen=True)
class Operation:
    code: OpCode
    value: Value | None = None    # Only set for PUSH.

    def __str__(self):
        if self.code is OpCode.PUSH:
            return f"push {self.value}"
        return self.code.value


# Bytecode is append-only while compiling, then frozen into a tuple.
Program = tuple[Operation, ...]
