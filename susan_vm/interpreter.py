"""
Decode-and-dispatch interpreter for Susan bytecode.

Execution model:
  1. Read the bound (code length) from R0 once
  2. While PC < bound: fetch the instruction at PC, look up its opcode in
     the dispatch table, run the handler
  3. PC += 1 after every instruction. JUMP stores target - 1 so the
     increment lands on the target.
  4. Any handler error stops the run; registers keep what was written.

Register rules:
  R0     read-only, holds the bound
  R1-R9  general purpose
"""

from __future__ import annotations
import enum
import logging
from typing import Callable, Dict, List, Optional, Sequence

from .config import BOUND_REGISTER, NUM_REGISTERS, SHAPE_NAMES, VISUAL_ADD_LIMIT
from .errors import (InfiniteLoopError, InvalidOpcodeError, InvalidRegisterError,
                     InvalidShapeError, ReadOnlyRegisterError, SegfaultError,
                     SusanError, VisualAddRangeError)
from .instructions import Instruction
from .opcodes import Opcode
from .sinks import ConsoleOutput, DisplaySink, NullDisplay, OutputSink

__all__ = ['Interpreter', 'State', 'wrap32']

log = logging.getLogger(__name__)


def wrap32(value: int) -> int:
    """Truncate to a signed 32-bit integer (two's complement wraparound)."""
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value & 0x80000000 else value


class State(enum.Enum):
    RUNNING = 'RUNNING'
    HALTED = 'HALTED'


class Interpreter:
    """Runs a code block against a register file.

    Usage:
        regs = [0] * 10
        regs[0] = len(code)
        Interpreter(regs, code, output=RecordingOutput()).run()
    """

    def __init__(self, registers: List[int], code: Sequence[Instruction],
                 output: Optional[OutputSink] = None,
                 display: Optional[DisplaySink] = None):
        self.registers = registers
        self.code = code
        self.output = output if output is not None else ConsoleOutput()
        self.display = display if display is not None else NullDisplay()
        self.pc = 0
        self.steps = 0
        self._dispatch = self._build_dispatch()

    # ══════════════════════════════════════════════
    # Register access
    # ══════════════════════════════════════════════

    def read(self, register: int) -> int:
        if not 0 <= register < NUM_REGISTERS:
            raise InvalidRegisterError(register)
        return self.registers[register]

    def write(self, register: int, value: int) -> None:
        if register == BOUND_REGISTER:
            raise ReadOnlyRegisterError()
        if not 0 <= register < NUM_REGISTERS:
            raise InvalidRegisterError(register)
        self.registers[register] = value

    @property
    def bound(self) -> int:
        return self.read(BOUND_REGISTER)

    @property
    def state(self) -> State:
        return State.RUNNING if self.pc < self.bound else State.HALTED

    # ══════════════════════════════════════════════
    # Execution
    # ══════════════════════════════════════════════

    def check_jump(self, target: int) -> None:
        """Only strictly forward jumps to an existing instruction are allowed."""
        if target <= self.pc:
            raise InfiniteLoopError(self.pc, target)
        bound = self.bound
        if target > bound - 1:
            raise SegfaultError(target, bound)

    def reset(self) -> None:
        """Rewind to address 0. Registers and code are left to the owner."""
        self.pc = 0
        self.steps = 0

    def step(self) -> None:
        """Execute the instruction at PC and advance PC."""
        instr = self.code[self.pc]
        try:
            self.decode_and_dispatch(instr)
        except SusanError as err:
            if err.address is None:
                err.at(self.pc)
            raise
        self.pc += 1
        self.steps += 1

    def run(self) -> int:
        """Run until PC reaches the bound. Returns the instruction count."""
        bound = self.bound
        log.info("interpreting %d instruction(s)", bound)
        while self.pc < bound:
            self.step()
        log.info("halted after %d step(s)", self.steps)
        return self.steps

    def decode_and_dispatch(self, instr: Instruction) -> None:
        if instr.is_error:
            raise InvalidOpcodeError(f"cannot execute {instr}")
        handler = self._dispatch.get(instr.opcode)
        if handler is None:
            raise InvalidOpcodeError(f"invalid command {instr}")
        log.debug("%3d: %-6s %s", self.pc, Opcode(instr.opcode).name,
                  ",".join(str(a) for a in instr.args))
        handler(instr.arg1, instr.arg2)

    def _build_dispatch(self) -> Dict[int, Callable[[int, int], None]]:
        """Opcode -> handler. Every handler takes (arg1, arg2)."""
        return {
            Opcode.STDOUT: self._op_stdout,
            Opcode.LDI: self._op_ldi,
            Opcode.JUMP: self._op_jump,
            Opcode.ADD: self._op_add,
            Opcode.ADDV: self._op_addv,
            Opcode.DRAW: self._op_draw,
            Opcode.BLINK: self._op_blink,
            Opcode.PRINTR: self._op_printr,
        }

    # ══════════════════════════════════════════════
    # Instruction handlers
    # ══════════════════════════════════════════════

    def _op_ldi(self, register: int, value: int) -> None:
        self.write(register, value)

    def _op_jump(self, target: int, _unused: int) -> None:
        self.check_jump(target)
        self.pc = target - 1

    def _op_add(self, ri: int, rj: int) -> None:
        self.write(ri, wrap32(self.read(ri) + self.read(rj)))

    def _op_addv(self, ri: int, rj: int) -> None:
        a = self.read(ri)
        b = self.read(rj)
        if a > VISUAL_ADD_LIMIT or b > VISUAL_ADD_LIMIT:
            raise VisualAddRangeError(
                f"ADDV: please use values up to {VISUAL_ADD_LIMIT} for visual add mode "
                f"(got {a} and {b})")
        total = wrap32(a + b)
        self.write(ri, total)
        self.display.visual_add(a, b, total)

    def _op_stdout(self, register: int, _unused: int) -> None:
        self.output.emit(self.read(register))

    def _op_printr(self, _a: int, _b: int) -> None:
        for i in range(NUM_REGISTERS):
            self.output.emit_register(i, self.read(i))

    def _shape(self, shape: int, blink: bool) -> None:
        if shape not in SHAPE_NAMES:
            raise InvalidShapeError(shape)
        self.display.draw(shape, blink)

    def _op_draw(self, shape: int, _unused: int) -> None:
        self._shape(shape, blink=False)

    def _op_blink(self, shape: int, _unused: int) -> None:
        self._shape(shape, blink=True)
