"""
Interactive shell: ``run FILE`` executes a program, ``exit`` leaves.

A failed run is reported and the shell keeps going; only end of input or
``exit`` ends the loop.
"""

from __future__ import annotations
import logging
import os
import sys
from typing import IO, Callable, Optional

from .errors import SusanError
from .machine import VirtualMachine

log = logging.getLogger(__name__)

PROMPT = ">> "
WELCOME = "Welcome! Use 'run [filename]' to execute a Susan program or EXIT to exit."
STDIN_CLOSED = "gvm: error reading from STDIN channel: exiting program."


class Shell:
    def __init__(self, make_vm: Callable[[], VirtualMachine] = VirtualMachine,
                 stdin: Optional[IO[str]] = None, stdout: Optional[IO[str]] = None):
        self.make_vm = make_vm
        self.stdin = stdin or sys.stdin
        self.stdout = stdout or sys.stdout
        self.runs = 0
        self.failures = 0

    def _say(self, msg: str) -> None:
        print(msg, file=self.stdout)

    def handle(self, line: str) -> bool:
        """Process one command line. Returns False when the shell should exit."""
        parts = line.split()
        if not parts:
            return True
        if parts[0].upper() == "EXIT":
            return False
        if parts[0] != "run":
            self._say("gvm: invalid input: use 'run [filename]' to execute program or EXIT to exit.")
            return True
        if len(parts) < 2:
            self._say("gvm: missing filename")
            return True
        if len(parts) > 2:
            self._say("gvm: too many arguments")
            return True

        filename = parts[1]
        if not os.path.exists(filename):
            self._say(f"gvm: file not found in directory: {filename}")
            return True

        self.runs += 1
        try:
            self.make_vm().execute(filename)
        except SusanError as err:
            self.failures += 1
            log.debug("run %d failed", self.runs, exc_info=True)
            self._say(str(err))
        return True

    def loop(self) -> int:
        """Read commands until EXIT or end of input."""
        self._say(WELCOME)
        while True:
            self.stdout.write(PROMPT)
            self.stdout.flush()
            line = self.stdin.readline()
            if not line:
                self._say(STDIN_CLOSED)
                break
            if not self.handle(line):
                break
        return 0
