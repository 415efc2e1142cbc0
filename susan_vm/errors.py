"""
Error taxonomy for the Susan VM.

Three families mirror the three pipeline stages:

    LexError           character-level rules broken while tokenizing
    ParseError         token sequence does not match an instruction grammar
    SusanRuntimeError  an instruction failed while the interpreter ran it

Lexer errors travel through the parser untouched, so a caller can always
catch ``LexError`` to learn that a line failed at the character level.
Every error is terminal for the current run only.
"""

from __future__ import annotations
from typing import Optional

__all__ = [
    'SusanError', 'LoadError',
    'LexError', 'DelimiterError', 'RegisterRangeError', 'MissingRegisterIndexError',
    'IntegerOverflowError', 'IntegerUnderflowError', 'CommandLengthError',
    'UnknownCommandError', 'ShapeLengthError', 'UnknownShapeError',
    'MissingShapeError', 'CaseError', 'InvalidCharacterError',
    'UnrecognizedSymbolError',
    'ParseError', 'UnexpectedTokenError', 'UnknownInstructionError',
    'SusanRuntimeError', 'ReadOnlyRegisterError', 'InvalidRegisterError',
    'InfiniteLoopError', 'SegfaultError', 'InvalidShapeError',
    'VisualAddRangeError', 'InvalidOpcodeError',
]


class SusanError(Exception):
    """Base class for every error the VM reports.

    ``line_num`` / ``line_text`` are filled in by the machine while loading
    a program, ``address`` while interpreting one. Errors raised out of the
    parser also carry ``instruction``, an ErrorInstruction wrapping them.
    """

    instruction = None

    def __init__(self, message: str, line_num: Optional[int] = None,
                 line_text: str = "", address: Optional[int] = None):
        self.message = message
        self.line_num = line_num
        self.line_text = line_text
        self.address = address
        super().__init__(message)

    def locate(self, line_num: int, line_text: str = "") -> "SusanError":
        """Attach the source line the error came from. Returns self."""
        self.line_num = line_num
        self.line_text = line_text
        return self

    def at(self, address: int) -> "SusanError":
        """Attach the code-block address that failed. Returns self."""
        self.address = address
        return self

    def __str__(self) -> str:
        if self.line_num is not None:
            text = f" [{self.line_text.strip()}]" if self.line_text.strip() else ""
            return f"gvm: line {self.line_num}{text}: {self.message}"
        if self.address is not None:
            return f"gvm: addr {self.address}: {self.message}"
        return f"gvm: {self.message}"


class LoadError(SusanError):
    """Program file could not be opened or read."""


# ──────────────────────────────────────────────
# Lexer
# ──────────────────────────────────────────────

class LexError(SusanError):
    """Raised when a line breaks a character-level rule."""

    def __init__(self, message: str, position: int = 0, **kwargs):
        self.position = position
        super().__init__(message, **kwargs)


class DelimiterError(LexError):
    """Register, integer or shape not preceded by a space or comma."""


class RegisterRangeError(LexError):
    """Register index is not a single digit."""


class MissingRegisterIndexError(LexError):
    """Register marker with no digit after it."""


class IntegerOverflowError(LexError):
    pass


class IntegerUnderflowError(LexError):
    pass


class CommandLengthError(LexError):
    pass


class UnknownCommandError(LexError):
    pass


class ShapeLengthError(LexError):
    pass


class UnknownShapeError(LexError):
    pass


class MissingShapeError(LexError):
    pass


class CaseError(LexError):
    """Lowercase letter where the language only accepts uppercase."""


class InvalidCharacterError(LexError):
    """Punctuation or symbol other than ',' and '$'."""


class UnrecognizedSymbolError(LexError):
    pass


# ──────────────────────────────────────────────
# Parser
# ──────────────────────────────────────────────

class ParseError(SusanError):
    """Token sequence does not form a valid instruction."""


class UnexpectedTokenError(ParseError):
    def __init__(self, expected: str, got: str, **kwargs):
        self.expected = expected
        self.got = got
        super().__init__(f"syntax error: unexpected {got} (expected {expected})", **kwargs)


class UnknownInstructionError(ParseError):
    pass


# ──────────────────────────────────────────────
# Interpreter
# ──────────────────────────────────────────────

class SusanRuntimeError(SusanError):
    """Raised by the interpreter; aborts the run at the failing instruction."""


class ReadOnlyRegisterError(SusanRuntimeError):
    def __init__(self, **kwargs):
        super().__init__("write to R0: permission denied [R0 is read-only]", **kwargs)


class InvalidRegisterError(SusanRuntimeError):
    def __init__(self, register: int, **kwargs):
        self.register = register
        super().__init__(f"invalid register: R{register} [use registers R0:R9]", **kwargs)


class InfiniteLoopError(SusanRuntimeError):
    def __init__(self, pc: int, target: int, **kwargs):
        self.pc = pc
        self.target = target
        super().__init__(f"JUMP at addr {pc} to {target}: infinite loop warning", **kwargs)


class SegfaultError(SusanRuntimeError):
    def __init__(self, target: int, bound: int, **kwargs):
        self.target = target
        self.bound = bound
        super().__init__(
            f"JUMP addr {target} invalid: segmentation violation "
            f"[code block ends at {bound - 1}]", **kwargs)


class InvalidShapeError(SusanRuntimeError):
    def __init__(self, shape: int, **kwargs):
        self.shape = shape
        super().__init__(f"invalid shape id: {shape}", **kwargs)


class VisualAddRangeError(SusanRuntimeError):
    pass


class InvalidOpcodeError(SusanRuntimeError):
    pass
