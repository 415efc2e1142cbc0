"""
Susan VM
========
A virtual machine for Susan, a toy assembly language with ten 32-bit
registers.

Architecture:
    ┌──────────┐    ┌──────────┐    ┌──────────┐    ┌─────────────┐
    │  source  │───>│  Lexer   │───>│  Parser  │───>│ Interpreter │
    │  (line)  │    │ (tokens) │    │(bytecode)│    │ (dispatch)  │
    └──────────┘    └──────────┘    └──────────┘    └─────────────┘

    - lexer.py:        one line -> Tokens, delimiter and case rules
    - parser.py:       Tokens -> one Instruction per line
    - instructions.py: Nullary / Unary / Binary / Error instructions
    - interpreter.py:  register file, PC, jump and register checks
    - machine.py:      load phase + run phase for one program
    - sinks.py:        where STDOUT / PRINTR / DRAW / BLINK / ADDV output goes
"""

__version__ = "0.4.0"

from .errors import *
from .lexer import Lexer, Token, TokenType
from .opcodes import Opcode
from .instructions import (Instruction, NullaryInstruction, UnaryInstruction,
                           BinaryInstruction, ErrorInstruction, make_instruction)
from .parser import Parser, parse_line
from .interpreter import Interpreter, State
from .machine import VirtualMachine, VirtualMemory, read_lines
from .sinks import (ConsoleOutput, RecordingOutput, NullDisplay,
                    RecordingDisplay, RichDisplay)


def run_source(source: str, *, strict: bool = False) -> list:
    """Run program text headless and return the lines it printed.

    Full pipeline: Lexer -> Parser -> code block -> Interpreter.
    """
    out = RecordingOutput()
    vm = VirtualMachine(output=out, display=NullDisplay(), strict=strict)
    vm.execute_source(source)
    return out.lines
