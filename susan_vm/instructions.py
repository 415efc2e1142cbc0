"""
Bytecode instruction model.

One instruction per source line, in four shapes that share one interface:

    NullaryInstruction  PRINTR
    UnaryInstruction    STDOUT r1 / JUMP 3 / DRAW $heart
    BinaryInstruction   LDI r1,5 / ADD r1,r2
    ErrorInstruction    placeholder for a line that failed to parse

Every variant answers ``opcode``, ``arg1`` and ``arg2`` (absent arguments
read as 0) so the interpreter never has to ask which variant it holds.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Tuple

from .config import SHAPE_NAMES
from .opcodes import ARITY, Opcode

__all__ = ['Instruction', 'NullaryInstruction', 'UnaryInstruction',
           'BinaryInstruction', 'ErrorInstruction', 'make_instruction']


@dataclass(frozen=True)
class Instruction:
    """Base class. Subclasses override the fields they carry."""

    @property
    def opcode(self) -> int:
        return 0

    @property
    def arg1(self) -> int:
        return 0

    @property
    def arg2(self) -> int:
        return 0

    @property
    def args(self) -> Tuple[int, ...]:
        """The arguments this instruction was encoded with."""
        return ()

    @property
    def is_error(self) -> bool:
        return False

    def to_source(self) -> str:
        """Render the instruction back to Susan assembly."""
        op = Opcode(self.opcode)
        if op is Opcode.LDI:
            return f"{op.name} r{self.arg1},{self.arg2}"
        if op in (Opcode.ADD, Opcode.ADDV):
            return f"{op.name} r{self.arg1},r{self.arg2}"
        if op is Opcode.STDOUT:
            return f"{op.name} r{self.arg1}"
        if op in (Opcode.DRAW, Opcode.BLINK):
            return f"{op.name} ${SHAPE_NAMES.get(self.arg1, self.arg1)}"
        if op is Opcode.JUMP:
            return f"{op.name} {self.arg1}"
        return op.name


@dataclass(frozen=True)
class NullaryInstruction(Instruction):
    op: int

    @property
    def opcode(self) -> int:
        return self.op

    def __str__(self):
        return f"{{{self.op:#04x}}}"


@dataclass(frozen=True)
class UnaryInstruction(Instruction):
    op: int
    a1: int

    @property
    def opcode(self) -> int:
        return self.op

    @property
    def arg1(self) -> int:
        return self.a1

    @property
    def args(self) -> Tuple[int, ...]:
        return (self.a1,)

    def __str__(self):
        return f"{{{self.op:#04x},{self.a1}}}"


@dataclass(frozen=True)
class BinaryInstruction(Instruction):
    op: int
    a1: int
    a2: int

    @property
    def opcode(self) -> int:
        return self.op

    @property
    def arg1(self) -> int:
        return self.a1

    @property
    def arg2(self) -> int:
        return self.a2

    @property
    def args(self) -> Tuple[int, ...]:
        return (self.a1, self.a2)

    def __str__(self):
        return f"{{{self.op:#04x},{self.a1},{self.a2}}}"


@dataclass(frozen=True)
class ErrorInstruction(Instruction):
    """Carries the error that stopped a line from parsing."""
    cause: Optional[BaseException] = None

    @property
    def is_error(self) -> bool:
        return True

    def to_source(self) -> str:
        return f"; error: {self.cause}"

    def __str__(self):
        return f"E: {self.cause}"


def make_instruction(opcode: Opcode, *args: int) -> Instruction:
    """Build the variant that matches the opcode's arity."""
    expected = ARITY[Opcode(opcode)]
    if len(args) != expected:
        raise ValueError(f"{Opcode(opcode).name} takes {expected} argument(s), got {len(args)}")
    if expected == 0:
        return NullaryInstruction(int(opcode))
    if expected == 1:
        return UnaryInstruction(int(opcode), args[0])
    return BinaryInstruction(int(opcode), args[0], args[1])
