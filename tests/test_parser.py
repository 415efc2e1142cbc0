"""
Parser tests for the Susan VM.

Each instruction grammar is checked with accepted lines and with the
malformed variants that must be rejected, then the encoded bytecode is
checked against the operands written in the source.
"""
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest
from susan_vm.parser import Parser, parse_line
from susan_vm.lexer import TokenType
from susan_vm.opcodes import ARITY, Opcode
from susan_vm.instructions import (
    BinaryInstruction, ErrorInstruction, NullaryInstruction, UnaryInstruction,
    make_instruction,
)
from susan_vm.errors import (
    SusanError, LexError, ParseError, DelimiterError, InvalidCharacterError,
    UnexpectedTokenError, UnknownInstructionError,
)


VALID = [
    "STDOUT r1",
    "LDI r1,3",
    "LDI r1 , 3 ",
    "LDI r8, 89",
    "JUMP 4",
    "ADD r1,r2",
    "  ADD R1,   R2 ",
    "ADDV r1,r2",
    "  ADDV R1,   R2 ",
    "DRAW $heart",
    "DRAW $bird",
    "BLINK $heart",
    "BLINK $bird",
    "PRINTR",
]

INVALID = [
    # STDOUT REG
    "STDOUTr1", "STDOUT3", "STDOUT 3", " r1 STDOUT", " ,STDOUT", "STDOUT,",
    # LDI REG COMMA INT
    "LDI , 3", "LDIr1, 3", "LDI r1 3", "LDI r1, ", "LDI 3, r1", " 3LDI r1,3",
    # JUMP INT
    "JUMP r4", "JUMP4", "JUMP , 4", "JUMP ", " 4 JUMP",
    # ADD REG COMMA REG
    "ADDr1, r2", "ADD r1 r2", "ADD rr2, r1", "ADD , r2", "ADD r1 ,",
    " r1 ADD , r2", "ADD 1,r2", "ADD r1, 2", "ADD 1, 22", " $ADD r1,r2",
    # ADDV REG COMMA REG
    "ADDV , r2", "ADDV r1 r2", "ADDV r1 ,", " r1 ADDV , r2", "ADDV 1,r2",
    "ADDV r1, 2", "ADDV 1, 22", " $ADDV r1,r2",
    # DRAW / BLINK SHAPE
    "DRAW $hi", "DRAW", "BLINK", "DRAW$heart", "BLINK$heart", "DRAW $HEART",
    # nothing at all
    "",
]


def _parse(source: str):
    return Parser(source).parse_instruction()


class TestGrammar:
    @pytest.mark.parametrize("source", VALID)
    def test_valid(self, source):
        instr = _parse(source)
        assert not instr.is_error

    @pytest.mark.parametrize("source", INVALID)
    def test_invalid(self, source):
        with pytest.raises(SusanError):
            _parse(source)

    def test_unexpected_kind(self):
        with pytest.raises(UnexpectedTokenError) as exc:
            _parse("STDOUT 3")
        assert exc.value.expected == "REG"
        assert exc.value.got == "INT"

    def test_missing_operand_sees_eof(self):
        with pytest.raises(UnexpectedTokenError) as exc:
            _parse("JUMP ")
        assert exc.value.got == "EOF"

    @pytest.mark.parametrize("source", [" r1 STDOUT", " ,STDOUT", " 3LDI r1,3", ""])
    def test_unknown_instruction(self, source):
        with pytest.raises(UnknownInstructionError):
            _parse(source)

    def test_lexer_error_passes_through_unchanged(self):
        with pytest.raises(DelimiterError):
            _parse("LDIr1, 3")

    def test_first_token_error_raised_by_constructor(self):
        with pytest.raises(InvalidCharacterError):
            Parser("&")


class TestEncoding:
    def test_stdout(self):
        assert _parse("STDOUT r7") == UnaryInstruction(Opcode.STDOUT, 7)

    def test_ldi(self):
        instr = _parse("LDI r3,42")
        assert isinstance(instr, BinaryInstruction)
        assert (instr.opcode, instr.arg1, instr.arg2) == (Opcode.LDI, 3, 42)

    def test_ldi_max_literal(self):
        assert _parse("LDI r9, 2147483647").arg2 == 2147483647

    def test_jump(self):
        instr = _parse("JUMP 12")
        assert (instr.opcode, instr.arg1, instr.arg2) == (Opcode.JUMP, 12, 0)

    def test_add_and_addv(self):
        assert _parse("ADD r1,r2") == BinaryInstruction(Opcode.ADD, 1, 2)
        assert _parse("ADDV r4,r5") == BinaryInstruction(Opcode.ADDV, 4, 5)

    def test_shapes(self):
        assert _parse("DRAW $heart") == UnaryInstruction(Opcode.DRAW, 1)
        assert _parse("BLINK $bird") == UnaryInstruction(Opcode.BLINK, 2)

    def test_printr(self):
        instr = _parse("PRINTR")
        assert isinstance(instr, NullaryInstruction)
        assert (instr.opcode, instr.arg1, instr.arg2) == (Opcode.PRINTR, 0, 0)

    @pytest.mark.parametrize("source", VALID)
    def test_operand_count_matches_arity(self, source):
        instr = _parse(source)
        assert len(instr.args) == ARITY[Opcode(instr.opcode)]

    def test_args_in_encoding_order(self):
        assert _parse("LDI r3,42").args == (3, 42)
        assert _parse("JUMP 7").args == (7,)
        assert _parse("PRINTR").args == ()

    @pytest.mark.parametrize("source", VALID)
    def test_source_round_trip(self, source):
        """Rendering the bytecode back to source reparses to the same bytecode."""
        instr = _parse(source)
        assert _parse(instr.to_source()) == instr


class TestMakeInstruction:
    @pytest.mark.parametrize("opcode,args,cls", [
        (Opcode.PRINTR, (), NullaryInstruction),
        (Opcode.STDOUT, (4,), UnaryInstruction),
        (Opcode.DRAW, (2,), UnaryInstruction),
        (Opcode.ADD, (1, 2), BinaryInstruction),
    ])
    def test_variant_follows_arity(self, opcode, args, cls):
        instr = make_instruction(opcode, *args)
        assert type(instr) is cls
        assert instr.opcode == opcode
        assert instr.args == args

    @pytest.mark.parametrize("opcode,args", [
        (Opcode.LDI, (1,)),
        (Opcode.PRINTR, (1,)),
        (Opcode.JUMP, ()),
        (Opcode.STDOUT, (1, 2)),
    ])
    def test_wrong_argument_count(self, opcode, args):
        with pytest.raises(ValueError):
            make_instruction(opcode, *args)

    def test_unknown_opcode(self):
        with pytest.raises(ValueError):
            make_instruction(0x99, 1)


class TestErrorInstruction:
    def test_syntax_error_carries_error_instruction(self):
        with pytest.raises(ParseError) as exc:
            _parse("LDI r1 3")
        instr = exc.value.instruction
        assert isinstance(instr, ErrorInstruction)
        assert instr.cause is exc.value
        assert (instr.opcode, instr.arg1, instr.arg2) == (0, 0, 0)
        assert instr.is_error

    def test_lex_error_carries_error_instruction(self):
        with pytest.raises(LexError) as exc:
            _parse("ADD r1, r12")
        assert isinstance(exc.value.instruction, ErrorInstruction)

    def test_constructor_error_carries_error_instruction(self):
        with pytest.raises(LexError) as exc:
            Parser("add r1,r2")
        assert exc.value.instruction.cause is exc.value


class TestAdvance:
    def test_returns_consumed_token(self):
        p = Parser("JUMP 3")
        assert p.advance(TokenType.JUMP).type is TokenType.JUMP
        tok = p.advance(TokenType.INT)
        assert tok.value == 3
        assert p.current.type is TokenType.EOF

    def test_mismatch_leaves_lookahead(self):
        p = Parser("JUMP 3")
        with pytest.raises(UnexpectedTokenError):
            p.advance(TokenType.LDI)
        assert p.current.type is TokenType.JUMP


class TestStrict:
    def test_trailing_tokens_ignored_by_default(self):
        assert parse_line("STDOUT r1 r2") == UnaryInstruction(Opcode.STDOUT, 1)

    def test_trailing_tokens_rejected_when_strict(self):
        with pytest.raises(UnexpectedTokenError) as exc:
            parse_line("STDOUT r1 r2", strict=True)
        assert exc.value.expected == "EOF"

    def test_strict_accepts_clean_line(self):
        assert parse_line("LDI r1 , 3 ", strict=True) == BinaryInstruction(Opcode.LDI, 1, 3)

    def test_trailing_garbage_is_still_lexed(self):
        """The lookahead after the last operand is always lexed."""
        with pytest.raises(LexError):
            parse_line("STDOUT r1 x")
