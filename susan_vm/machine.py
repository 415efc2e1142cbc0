"""
Virtual machine: memory image + load phase + hand-off to the interpreter.

A run goes through two phases:

  load    every source line is parsed into one Instruction and appended to
          the code block. The first bad line aborts the run before anything
          executes.
  execute R0 is set to the code length and the interpreter takes over.

Each VirtualMachine owns its own registers and code block. Loading a
program clears both and rewinds the PC, so a machine can be reused.
"""

from __future__ import annotations
import contextlib
import logging
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Union

from .config import BOUND_REGISTER, NUM_REGISTERS
from .errors import LoadError, SusanError
from .instructions import Instruction
from .interpreter import Interpreter
from .parser import Parser
from .sinks import DisplaySink, OutputSink

__all__ = ['VirtualMemory', 'VirtualMachine', 'read_lines']

log = logging.getLogger(__name__)


def read_lines(path: Union[str, Path]) -> Iterator[str]:
    """Yield the lines of a program file without their line endings."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            for line in f:
                yield line.rstrip("\r\n")
    except OSError as e:
        raise LoadError(f"failed to open file: '{path}' ({e.strerror or e})") from e
    except UnicodeDecodeError as e:
        raise LoadError(f"failed to read file: '{path}' (not UTF-8 text)") from e


class VirtualMemory:
    """Register file plus the code block."""

    def __init__(self):
        self.registers: List[int] = [0] * NUM_REGISTERS
        self.code: List[Instruction] = []

    @property
    def code_size(self) -> int:
        return len(self.code)

    def __repr__(self):
        regs = " ".join(f"R{i}={v}" for i, v in enumerate(self.registers))
        return f"VirtualMemory({regs}, code={self.code_size})"


class VirtualMachine:
    """Loads a Susan program and runs it.

    Usage:
        vm = VirtualMachine(output=RecordingOutput())
        vm.execute("prog.susan")
        vm.output.values   # [9]
    """

    def __init__(self, output: Optional[OutputSink] = None,
                 display: Optional[DisplaySink] = None, strict: bool = False):
        self.vmem = VirtualMemory()
        self.interpreter = Interpreter(self.vmem.registers, self.vmem.code,
                                       output=output, display=display)
        self.strict = strict

    @property
    def registers(self) -> List[int]:
        return self.vmem.registers

    @property
    def code(self) -> List[Instruction]:
        return self.vmem.code

    @property
    def output(self) -> OutputSink:
        return self.interpreter.output

    @property
    def display(self) -> DisplaySink:
        return self.interpreter.display

    # ══════════════════════════════════════════════
    # Load phase
    # ══════════════════════════════════════════════

    def parse_instructions(self, lines: Iterable[str]) -> int:
        """Parse each line into the code block. Returns the code size."""
        for line_num, line in enumerate(lines):
            try:
                parser = Parser(line)
                instr = parser.parse_line() if self.strict else parser.parse_instruction()
            except SusanError as err:
                log.debug("line %d rejected: %s", line_num, err.message)
                raise err.locate(line_num, line)
            log.debug("line %d: %-18s -> %s", line_num, line.strip(), instr)
            self.vmem.code.append(instr)
        return self.vmem.code_size

    # ══════════════════════════════════════════════
    # Execute phase
    # ══════════════════════════════════════════════

    def reset(self) -> None:
        """Clear registers, code block and PC so a new program can be loaded."""
        self.vmem.registers[:] = [0] * NUM_REGISTERS
        self.vmem.code.clear()
        self.interpreter.reset()

    def run(self) -> int:
        """Seal R0 with the code size and interpret. Returns steps executed."""
        self.vmem.registers[BOUND_REGISTER] = self.vmem.code_size
        return self.interpreter.run()

    def load_source(self, source: str) -> int:
        """Replace the loaded program with ``source``."""
        self.reset()
        return self.parse_instructions(source.splitlines())

    def execute_source(self, source: str) -> int:
        """Load program text and run it."""
        self.load_source(source)
        return self.run()

    def execute(self, path: Union[str, Path]) -> int:
        """Load a program file and run it."""
        log.info("loading %s", path)
        self.reset()
        with contextlib.closing(read_lines(path)) as lines:
            size = self.parse_instructions(lines)
        log.info("loaded %d instruction(s) from %s", size, path)
        return self.run()
