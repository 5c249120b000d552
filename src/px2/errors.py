## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘


class Px2Error(Exception):
    def __init__(self, message: str = "", *, token=None, filename=None):
        """Base class for all px2-raised errors."""
        super().__init__(message)
        self.message: str = message
        self.token: object = token
        self.filename: str = filename


class Px2CompileError(Px2Error):
    """Raised by the compiler for the first offending token; location comes from the token."""

    @property
    def line(self) -> int | None:
        return getattr(self.token, 'line', None)

    @property
    def column(self) -> int | None:
        return getattr(self.token, 'column', None)

    @property
    def length(self) -> int:
        return getattr(self.token, 'length', 1)

class Px2SyntaxError(Px2CompileError):
    pass

class Px2UnsupportedError(Px2CompileError, NotImplementedError):
    pass

class Px2LiteralError(Px2CompileError, ValueError):
    def __init__(self, reason: str, *, token=None, filename=None):
        super().__init__(reason, token=token, filename=filename)
        self.reason = reason

class Px2StackError(Px2CompileError, TypeError):
    """Operation requested with too few operands, or operands of the wrong type."""
    pass


class Px2UnhandledDataError(Px2Error):
    def __init__(self, message: str = "Unhandled data on the stack", *, types=(), filename=None):
        super().__init__(message, filename=filename)
        self.types = list(types)


class Px2FileError(Px2Error, OSError):
    def __str__(self):
        return self.message


class Px2RuntimeError(Px2Error, ArithmeticError):
    """Execution faults the static checks cannot rule out, e.g. division by zero."""
    def __init__(self, message: str = "", *, op=None, stack=None):
        super().__init__(message)
        self.op = op
        self.stack = stack
