"""
Single-line parser for Susan assembly.

Pulls tokens from a Lexer one at a time, checks them against the grammar of
the instruction named by the first token, and encodes the line as one
bytecode Instruction:

    STDOUT REG              -> Unary(STDOUT, reg)
    LDI REG COMMA INT       -> Binary(LDI, reg, literal)
    JUMP INT                -> Unary(JUMP, target)
    ADD REG COMMA REG       -> Binary(ADD, reg1, reg2)
    ADDV REG COMMA REG      -> Binary(ADDV, reg1, reg2)
    DRAW SHAPE              -> Unary(DRAW, shape)
    BLINK SHAPE             -> Unary(BLINK, shape)
    PRINTR                  -> Nullary(PRINTR)

The first failure ends the line. Lexer errors come out unchanged; every
error raised from here carries ``.instruction``, an ErrorInstruction that
wraps it.
"""

from __future__ import annotations
import functools
from typing import Callable, Dict, Tuple

from .errors import SusanError, UnexpectedTokenError, UnknownInstructionError
from .instructions import ErrorInstruction, Instruction, make_instruction
from .lexer import Lexer, Token, TokenType
from .opcodes import Opcode

__all__ = ['Parser', 'parse_line']

Operands = Tuple[int, ...]


def _error_instruction(method):
    """Attach an ErrorInstruction to any SusanError leaving ``method``."""
    @functools.wraps(method)
    def wrapper(*args, **kwargs):
        try:
            return method(*args, **kwargs)
        except SusanError as err:
            err.instruction = ErrorInstruction(err)
            raise
    return wrapper


class Parser:
    """Recursive-descent parser for one line, with one token of lookahead."""

    @_error_instruction
    def __init__(self, source: str):
        self.source = source
        self.lexer = Lexer(source)
        self.current: Token = self.lexer.next_token()

    # ── Helpers ─────────────────────────────

    def advance(self, expected: TokenType) -> Token:
        """Consume the lookahead if it is ``expected`` and pull the next token.

        Returns the consumed token.
        """
        tok = self.current
        if tok.type is not expected:
            raise UnexpectedTokenError(expected.name, tok.type.name)
        self.current = self.lexer.next_token()
        return tok

    def _register(self) -> int:
        return self.advance(TokenType.REG).value

    # ── Operand grammars ────────────────────
    # Each reader consumes what follows the mnemonic and returns the
    # operands in encoding order.

    def _no_operands(self) -> Operands:
        return ()

    def _one_register(self) -> Operands:
        return (self._register(),)

    def _register_pair(self) -> Operands:
        r1 = self._register()
        self.advance(TokenType.COMMA)
        return (r1, self._register())

    def _register_literal(self) -> Operands:
        reg = self._register()
        self.advance(TokenType.COMMA)
        return (reg, self.advance(TokenType.INT).value)

    def _literal(self) -> Operands:
        return (self.advance(TokenType.INT).value,)

    def _shape(self) -> Operands:
        return (self.advance(TokenType.SHAPE).value,)

    def _rules(self) -> Dict[TokenType, Tuple[Opcode, Callable[[], Operands]]]:
        return {
            TokenType.STDOUT: (Opcode.STDOUT, self._one_register),
            TokenType.LDI: (Opcode.LDI, self._register_literal),
            TokenType.JUMP: (Opcode.JUMP, self._literal),
            TokenType.ADD: (Opcode.ADD, self._register_pair),
            TokenType.ADDV: (Opcode.ADDV, self._register_pair),
            TokenType.DRAW: (Opcode.DRAW, self._shape),
            TokenType.BLINK: (Opcode.BLINK, self._shape),
            TokenType.PRINTR: (Opcode.PRINTR, self._no_operands),
        }

    # ── Public API ──────────────────────────

    @_error_instruction
    def parse_instruction(self) -> Instruction:
        """Parse the instruction at the lookahead and return its bytecode."""
        rule = self._rules().get(self.current.type)
        if rule is None:
            raise UnknownInstructionError(f"invalid instruction: {self.current!r}")
        opcode, operands = rule
        self.advance(self.current.type)
        return make_instruction(opcode, *operands())

    @_error_instruction
    def parse_line(self) -> Instruction:
        """Like parse_instruction, but the line must end after the instruction."""
        instr = self.parse_instruction()
        if self.current.type is not TokenType.EOF:
            raise UnexpectedTokenError(TokenType.EOF.name, self.current.type.name)
        return instr


def parse_line(source: str, strict: bool = False) -> Instruction:
    """Parse one source line into an Instruction."""
    p = Parser(source)
    return p.parse_line() if strict else p.parse_instruction()
