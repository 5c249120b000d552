## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘
#
# px2: single-pass compiler, one token in and one verified operation out.
#

from .types import DataType, Operation, OpCode, Program, Stack, Value, nil, stack_to_list
from .errors import (Px2CompileError, Px2LiteralError, Px2StackError, Px2SyntaxError,
                     Px2UnhandledDataError, Px2UnsupportedError)
from .scanner import Scanner, Token, TokenKind
from .validating import check_stack_effect, get_stack_effect
from .interpreter import INT_MIN, INT_MAX, shuffle


_TOKEN_OPCODES = {
    TokenKind.PLUS: OpCode.ADD,
    TokenKind.MINUS: OpCode.SUBTRACT,
    TokenKind.STAR: OpCode.MULTIPLY,
    TokenKind.SLASH: OpCode.DIVIDE,
    TokenKind.DUP: OpCode.DUPLICATE,
    TokenKind.DROP: OpCode.DROP,
    TokenKind.OVER: OpCode.OVER,
    TokenKind.ROT: OpCode.ROTATE,
    TokenKind.SWAP: OpCode.SWAP,
    TokenKind.PRINTLN: OpCode.PRINTLN,
}

_DIGITS = frozenset('0123456789')


def parse_int(text: str) -> int:
    """Parse a signed 64-bit integer literal, raising `Px2LiteralError` with the failure reason."""
    digits = text[1:] if text[:1] in ('+', '-') else text
    if text == '':
        raise Px2LiteralError("tried to parse int from empty string")
    if digits == '' or not set(digits) <= _DIGITS:
        raise Px2LiteralError("invalid digit found in string")

    # Anything past 19 significant digits is out of range either way.
    significant = digits.lstrip('0') or '0'
    value = int(significant) if len(significant) <= 19 else 10**19
    if text[0] == '-':
        if -value < INT_MIN: raise Px2LiteralError("negative integer out of range")
        return -value
    if value > INT_MAX: raise Px2LiteralError("positive integer out of range")
    return value


class Compiler:
    """Translates source into bytecode while tracking the types the stack will hold at runtime."""

    def __init__(self, source: str, filename: str | None = None, verbosity: int = 0):
        self.scanner = Scanner(source)
        self.filename = filename
        self.verbosity = verbosity
        self.types: Stack = nil
        self.depth = 0
        self.program: list[Operation] = []

    def compile(self) -> Program:
        while True:
            token = self.scanner.scan_token()
            if self.verbosity > 0:
                print(token)
            if token.kind is TokenKind.END_OF_INPUT:
                break

            try:
                self.emit(self.translate(token))
            except Px2CompileError as exc:
                exc.token = exc.token or token
                exc.filename = self.filename
                raise

        if self.types is not nil:
            raise Px2UnhandledDataError(types=reversed(stack_to_list(self.types)), filename=self.filename)
        return tuple(self.program)

    def translate(self, token: Token) -> Operation:
        match token.kind:
            case TokenKind.INT:
                return Operation(OpCode.PUSH, Value.from_int(parse_int(token.lexeme)))
            case TokenKind.TRUE | TokenKind.FALSE:
                return Operation(OpCode.PUSH, Value.from_bool(token.kind is TokenKind.TRUE))
            case TokenKind.IDENTIFIER:
                raise Px2UnsupportedError("identifiers are not implemented yet", token=token)
            case TokenKind.INVALID:
                raise Px2SyntaxError("invalid token", token=token)
        return Operation(_TOKEN_OPCODES[token.kind])

    def emit(self, op: Operation) -> None:
        ok, message = check_stack_effect(op.code, self.types, self.depth)
        if not ok:
            raise Px2StackError(message)

        match op.code:
            case OpCode.PUSH:
                self.types = Stack(self.types, op.value.type)
            case OpCode.ADD | OpCode.SUBTRACT | OpCode.MULTIPLY | OpCode.DIVIDE:
                self.types = Stack(self.types.tail.tail, DataType.INT)
            case OpCode.PRINTLN:
                self.types = self.types.tail
            case _:
                self.types = shuffle(op.code, self.types)

        effect = get_stack_effect(op.code)
        self.depth += effect['valency'] - effect['arity']
        self.program.append(op)


def compile_source(source: str, filename: str | None = None, verbosity: int = 0) -> Program:
    return Compiler(source, filename=filename, verbosity=verbosity).compile()
