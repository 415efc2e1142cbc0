"""
Opcode table shared by the parser (encoding) and the interpreter (dispatch).
"""

import enum
from typing import Dict


class Opcode(enum.IntEnum):
    STDOUT = 0x00
    LDI = 0x01
    JUMP = 0x02
    ADD = 0x17
    ADDV = 0x18
    DRAW = 0x19
    BLINK = 0x20
    PRINTR = 0x21


# Number of arguments each opcode is encoded with
ARITY: Dict[Opcode, int] = {
    Opcode.STDOUT: 1,
    Opcode.LDI: 2,
    Opcode.JUMP: 1,
    Opcode.ADD: 2,
    Opcode.ADDV: 2,
    Opcode.DRAW: 1,
    Opcode.BLINK: 1,
    Opcode.PRINTR: 0,
}

MNEMONICS = frozenset(op.name for op in Opcode)
