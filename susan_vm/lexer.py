"""
Lexer / Tokenizer for Susan assembly.

Works on a single source line at a time. Tokens are produced on demand by
``next_token()`` so the parser can stop at the first bad character without
scanning the rest of the line.

Lexical rules:
  - Whitespace separates tokens and never reaches the parser.
  - ``r``/``R`` starts a register and must follow a delimiter (space, comma)
    or the start of the line. The index is exactly one digit.
  - A digit starts an integer literal, which must follow a delimiter.
  - ``$`` starts a shape name (lowercase), which must follow a delimiter.
  - An uppercase run is a command word and must be a known mnemonic.
  - Every other lowercase letter is a case error; every other punctuation
    or symbol character is invalid.
"""

from __future__ import annotations
import enum
import string
import unicodedata
from dataclasses import dataclass
from typing import Iterator, List

from .config import (DELIMITERS, INT32_MAX, INT32_MIN, MAX_COMMAND_LENGTH,
                     MAX_SHAPE_LENGTH, SHAPES)
from .errors import (CaseError, CommandLengthError, DelimiterError,
                     IntegerOverflowError, IntegerUnderflowError,
                     InvalidCharacterError, MissingRegisterIndexError,
                     MissingShapeError, RegisterRangeError, ShapeLengthError,
                     UnknownCommandError, UnknownShapeError,
                     UnrecognizedSymbolError)
from .opcodes import MNEMONICS

__all__ = ['Lexer', 'Token', 'TokenType', 'EOF_CHAR']


# ──────────────────────────────────────────────
# Token types
# ──────────────────────────────────────────────

class TokenType(enum.Enum):
    INT = "INT"
    REG = "REG"
    COMMA = "COMMA"
    SHAPE = "SHAPE"

    # Commands
    STDOUT = "STDOUT"
    LDI = "LDI"
    JUMP = "JUMP"
    ADD = "ADD"
    ADDV = "ADDV"
    DRAW = "DRAW"
    BLINK = "BLINK"
    PRINTR = "PRINTR"

    # Special
    EOF = "EOF"


# ──────────────────────────────────────────────
# Token data class
# ──────────────────────────────────────────────

@dataclass(frozen=True)
class Token:
    type: TokenType
    value: int = 0
    pos: int = 0

    def __repr__(self):
        return f"Token({self.type.name}, {self.value}, @{self.pos})"


EOF_CHAR = "\0"
DIGITS = string.digits
LOWER = string.ascii_lowercase
UPPER = string.ascii_uppercase


def _is_symbol(ch: str) -> bool:
    """Unicode punctuation (P*) or symbol (S*) category."""
    return unicodedata.category(ch)[0] in "PS"


# ──────────────────────────────────────────────
# Lexer
# ──────────────────────────────────────────────

class Lexer:
    """Tokenizes one line of Susan source."""

    def __init__(self, source: str):
        self.source = source
        self.pos = 0
        self.current = source[0] if source else EOF_CHAR

    # ── Cursor helpers ──────────────────────

    def _advance(self) -> None:
        self.pos += 1
        if self.pos < len(self.source):
            self.current = self.source[self.pos]
        else:
            self.current = EOF_CHAR

    def _skip_whitespace(self) -> None:
        while self.current != EOF_CHAR and self.current.isspace():
            self._advance()

    def _delimited(self) -> bool:
        """True if the character just before the cursor is a space or comma."""
        return self.pos > 0 and self.source[self.pos - 1] in DELIMITERS

    def _read_digits(self) -> str:
        start = self.pos
        while self.current != EOF_CHAR and self.current in DIGITS:
            self._advance()
        return self.source[start:self.pos]

    # ── Token readers ───────────────────────

    def _read_register(self) -> Token:
        start = self.pos
        if self.pos > 0 and not self._delimited():
            raise DelimiterError("unexpected REG (missing delimiter)", start)
        self._advance()  # 'r' / 'R'
        if self.current not in DIGITS:
            raise MissingRegisterIndexError("missing register index", start)
        digits = self._read_digits()
        if len(digits) > 1:
            raise RegisterRangeError(
                f"register indices must be between 0 and 9 (got r{digits})", start)
        return Token(TokenType.REG, int(digits), start)

    def _read_integer(self) -> Token:
        start = self.pos
        if not self._delimited():
            raise DelimiterError("unexpected INT (missing delimiter)", start)
        digits = self._read_digits().lstrip("0") or "0"
        if len(digits) > len(str(INT32_MAX)):
            raise IntegerOverflowError(
                f"integer overflow: {len(digits)}-digit literal > {INT32_MAX}", start)
        value = int(digits)
        if value > INT32_MAX:
            raise IntegerOverflowError(f"integer overflow: {value} > {INT32_MAX}", start)
        if value < INT32_MIN:
            raise IntegerUnderflowError(f"integer underflow: {value} < {INT32_MIN}", start)
        return Token(TokenType.INT, value, start)

    def _read_shape(self) -> Token:
        start = self.pos
        if not self._delimited():
            raise DelimiterError("shape declaration must be preceded by ' ' or ','", start)
        self._advance()  # '$'
        chars: List[str] = []
        while self.current != EOF_CHAR and self.current in LOWER:
            if len(chars) >= MAX_SHAPE_LENGTH:
                raise ShapeLengthError(
                    f"invalid shape: max length reached ({MAX_SHAPE_LENGTH})", start)
            chars.append(self.current)
            self._advance()
        name = "".join(chars)
        if not name:
            raise MissingShapeError("missing shape after '$'", start)
        if name not in SHAPES:
            raise UnknownShapeError(f"invalid shape: '{name}'", start)
        return Token(TokenType.SHAPE, SHAPES[name], start)

    def _read_command(self) -> Token:
        start = self.pos
        chars: List[str] = []
        while self.current != EOF_CHAR and self.current in UPPER:
            if len(chars) >= MAX_COMMAND_LENGTH:
                raise CommandLengthError(
                    f"invalid command: max length reached ({MAX_COMMAND_LENGTH})", start)
            chars.append(self.current)
            self._advance()
        word = "".join(chars)
        if word not in MNEMONICS:
            # 'Dr22', 'A1DD': the word runs straight into an operand
            if self.current in DIGITS + "rR":
                raise DelimiterError(
                    f"'{word}{self.current}' is missing a delimiter", self.pos)
            raise UnknownCommandError(f"undefined: '{word}'", start)
        return Token(TokenType[word], 0, start)

    # ── Public API ──────────────────────────

    def next_token(self) -> Token:
        """Return the next token on the line, or EOF once it is exhausted."""
        while self.current != EOF_CHAR:
            ch = self.current

            if ch.isspace():
                self._skip_whitespace()
                continue

            if ch in "rR":
                return self._read_register()

            if ch in DIGITS:
                return self._read_integer()

            if ch == ",":
                start = self.pos
                self._advance()
                return Token(TokenType.COMMA, 0, start)

            if ch == "$":
                return self._read_shape()

            if ch in LOWER:
                raise CaseError(f"input is case sensitive: invalid '{ch}'", self.pos)

            if ch in UPPER:
                return self._read_command()

            if _is_symbol(ch):
                raise InvalidCharacterError(f"invalid character: '{ch}'", self.pos)

            raise UnrecognizedSymbolError(f"unrecognized symbol {ch!r}", self.pos)

        return Token(TokenType.EOF, 0, self.pos)

    def __iter__(self) -> Iterator[Token]:
        """Yield tokens up to and including EOF."""
        while True:
            tok = self.next_token()
            yield tok
            if tok.type is TokenType.EOF:
                return

    def tokenize(self) -> List[Token]:
        """Tokenize the rest of the line and return the tokens, EOF last."""
        return list(self)
