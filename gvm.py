#!/usr/bin/env python3
"""
gvm: Susan virtual machine CLI

Usage:
    python gvm.py run <program> [--render headless|console|animated] [--delay S]
    python gvm.py tokens <program>
    python gvm.py listing <program>
    python gvm.py shell

Examples:
    python gvm.py run tests/testdata/add.susan
    python gvm.py run shapes.susan --render animated --delay 0.05
    python gvm.py listing jump.susan
    python gvm.py -vv run add.susan --log-file logs/gvm.log
"""

import argparse
import logging
import sys
from typing import List, Optional

from susan_vm import __version__
from susan_vm.config import DEFAULT_RENDER_PROFILE, RENDER_PROFILES
from susan_vm.errors import (LexError, LoadError, ParseError, SusanError,
                             SusanRuntimeError)
from susan_vm.lexer import Lexer
from susan_vm.log_setup import level_from_verbosity, setup_logging
from susan_vm.machine import VirtualMachine, read_lines
from susan_vm.shell import Shell
from susan_vm.sinks import ConsoleOutput, display_for_profile

log = logging.getLogger("susan_vm.cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gvm",
        description="Virtual machine for the Susan assembly language",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="Render profiles: " + ", ".join(
            f"{name} ({p['description']})" for name, p in RENDER_PROFILES.items()),
    )
    parser.add_argument("--version", action="version", version=f"gvm {__version__}")
    parser.add_argument("--render", default=DEFAULT_RENDER_PROFILE,
                        choices=list(RENDER_PROFILES.keys()),
                        help=f"How shapes and visual add are shown (default: {DEFAULT_RENDER_PROFILE})")
    parser.add_argument("--delay", type=float, default=None,
                        help="Seconds between stars in visual add (overrides profile)")
    parser.add_argument("--strict", action="store_true",
                        help="Reject trailing tokens after an instruction")
    parser.add_argument("--verbose", "-v", action="count", default=0,
                        help="Increase log verbosity (-v, -vv)")
    parser.add_argument("--quiet", "-q", action="store_true",
                        help="Only log errors")
    parser.add_argument("--log-file", default=None,
                        help="Also write a DEBUG log to this file")

    sub = parser.add_subparsers(dest="command", metavar="command")

    p_run = sub.add_parser("run", help="Execute a Susan program")
    p_run.add_argument("program", help="Program file, one instruction per line")

    p_tok = sub.add_parser("tokens", help="Dump the token stream of each line")
    p_tok.add_argument("program")

    p_lst = sub.add_parser("listing", help="Print the bytecode listing")
    p_lst.add_argument("program")

    sub.add_parser("shell", help="Interactive 'run FILE' / 'exit' loop")
    return parser


def _make_vm_factory(args):
    def make_vm() -> VirtualMachine:
        return VirtualMachine(output=ConsoleOutput(),
                              display=display_for_profile(args.render, args.delay),
                              strict=args.strict)
    return make_vm


def cmd_run(args) -> int:
    _make_vm_factory(args)().execute(args.program)
    return 0


def cmd_tokens(args) -> int:
    for line_num, line in enumerate(read_lines(args.program)):
        try:
            tokens = Lexer(line).tokenize()
        except LexError as err:
            raise err.locate(line_num, line)
        print(f"{line_num:4d}: " + " ".join(repr(t) for t in tokens))
    return 0


def cmd_listing(args) -> int:
    vm = VirtualMachine(strict=args.strict)
    vm.parse_instructions(read_lines(args.program))
    print(f"{'ADDR':>4}  {'OPCODE':<6}  {'ARG1':>11}  {'ARG2':>11}  SOURCE")
    print("-" * 60)
    for addr, instr in enumerate(vm.code):
        print(f"{addr:>4}  {instr.opcode:#06x}  {instr.arg1:>11}  {instr.arg2:>11}  "
              f"{instr.to_source()}")
    print(f"\nR0 (bound) = {len(vm.code)}")
    return 0


def cmd_shell(args) -> int:
    return Shell(make_vm=_make_vm_factory(args)).loop()


COMMANDS = {
    "run": cmd_run,
    "tokens": cmd_tokens,
    "listing": cmd_listing,
    "shell": cmd_shell,
}


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not args.command:
        parser.print_help()
        return 1

    setup_logging(console_level=level_from_verbosity(args.verbose, args.quiet),
                  log_file=args.log_file)
    log.debug("command=%s render=%s strict=%s", args.command, args.render, args.strict)

    try:
        return COMMANDS[args.command](args)
    except LoadError as e:
        print(f"Load error: {e}", file=sys.stderr)
        return 1
    except LexError as e:
        print(f"Lexer error: {e}", file=sys.stderr)
        return 1
    except ParseError as e:
        print(f"Syntax error: {e}", file=sys.stderr)
        return 1
    except SusanRuntimeError as e:
        print(f"Runtime error: {e}", file=sys.stderr)
        return 1
    except SusanError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        print(f"Internal VM error: {e}", file=sys.stderr)
        if args.verbose:
            import traceback
            traceback.print_exc()
        return 2


if __name__ == "__main__":
    sys.exit(main())
