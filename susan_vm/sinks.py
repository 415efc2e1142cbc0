"""
Output and display collaborators used by the interpreter.

    OutputSink    STDOUT values and PRINTR register dumps
    DisplaySink   DRAW / BLINK shapes and the ADDV visual add

Rendering never touches machine state: the interpreter has already
written the registers by the time a sink is called.
"""

from __future__ import annotations
import sys
import time
from typing import IO, Dict, List, Optional, Tuple

from rich.console import Console
from rich.text import Text

from .config import RENDER_PROFILES, SHAPE_NAMES

__all__ = ['OutputSink', 'ConsoleOutput', 'RecordingOutput',
           'DisplaySink', 'NullDisplay', 'RecordingDisplay', 'RichDisplay',
           'display_for_profile']


# ──────────────────────────────────────────────
# Text output
# ──────────────────────────────────────────────

class OutputSink:
    def emit(self, value: int) -> None:
        raise NotImplementedError

    def emit_register(self, index: int, value: int) -> None:
        raise NotImplementedError


class ConsoleOutput(OutputSink):
    """Plain text, one value per line."""

    def __init__(self, stream: Optional[IO[str]] = None):
        self.stream = stream

    def emit(self, value: int) -> None:
        print(f"{value}", file=self.stream or sys.stdout)

    def emit_register(self, index: int, value: int) -> None:
        print(f"R{index}: {value}", file=self.stream or sys.stdout)


class RecordingOutput(OutputSink):
    """Keeps everything emitted; ``lines`` matches what ConsoleOutput prints."""

    def __init__(self):
        self.values: List[int] = []
        self.registers: List[Tuple[int, int]] = []
        self.lines: List[str] = []

    def emit(self, value: int) -> None:
        self.values.append(value)
        self.lines.append(f"{value}")

    def emit_register(self, index: int, value: int) -> None:
        self.registers.append((index, value))
        self.lines.append(f"R{index}: {value}")


# ──────────────────────────────────────────────
# Shapes and visual add
# ──────────────────────────────────────────────

class DisplaySink:
    def draw(self, shape: int, blink: bool) -> None:
        raise NotImplementedError

    def visual_add(self, a: int, b: int, total: int) -> None:
        raise NotImplementedError


class NullDisplay(DisplaySink):
    """Headless default: shapes and visual add are dropped."""

    def draw(self, shape: int, blink: bool) -> None:
        pass

    def visual_add(self, a: int, b: int, total: int) -> None:
        pass


class RecordingDisplay(DisplaySink):
    def __init__(self):
        self.events: List[tuple] = []

    def draw(self, shape: int, blink: bool) -> None:
        self.events.append(("draw", SHAPE_NAMES[shape], blink))

    def visual_add(self, a: int, b: int, total: int) -> None:
        self.events.append(("visual_add", a, b, total))


HEART = r"""
   .-"-. .-"-.
  |     '     |
   \         /
    '.     .'
      '. .'
        '
"""

BIRD = r"""
        \\
        (o>
     \\_//)
      \_/_)
       _|_
"""

ART: Dict[str, str] = {"heart": HEART, "bird": BIRD}


class RichDisplay(DisplaySink):
    """Colored ASCII art and star arithmetic on a rich Console.

    ``delay`` is the pause between stars in visual add; 0 prints at once.
    """

    def __init__(self, console: Optional[Console] = None,
                 colors: Optional[Dict[str, str]] = None, delay: float = 0.0):
        self.console = console or Console(highlight=False)
        self.colors = colors or RENDER_PROFILES["console"]["colors"]
        self.delay = delay

    def draw(self, shape: int, blink: bool) -> None:
        name = SHAPE_NAMES[shape]
        style = self.colors.get(name, "")
        if blink:
            style = f"{style} blink".strip()
        self.console.print(Text(ART[name], style=style))

    def _stars(self, count: int, style: str) -> None:
        for _ in range(max(count, 0)):
            self.console.print(Text("* ", style=style), end="")
            if self.delay:
                time.sleep(self.delay)

    def visual_add(self, a: int, b: int, total: int) -> None:
        self.console.print(f"{a} + {b} ", end="")
        self._stars(a, self.colors.get("left", ""))
        self.console.print("+ ", end="")
        self._stars(b, self.colors.get("right", ""))
        self.console.print("= ", end="")
        self._stars(total, self.colors.get("total", ""))
        self.console.print()


def display_for_profile(name: str, delay: Optional[float] = None,
                        console: Optional[Console] = None) -> DisplaySink:
    """Build the display sink a render profile asks for."""
    profile = RENDER_PROFILES[name]
    if profile["display"] == "null":
        return NullDisplay()
    return RichDisplay(console=console, colors=profile.get("colors"),
                       delay=profile["delay"] if delay is None else delay)
