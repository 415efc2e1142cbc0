"""
Machine constants and render profiles for the Susan VM.

Everything tunable lives here as plain module data so the lexer,
interpreter and CLI agree on the same limits.
"""

from typing import Dict


# ──────────────────────────────────────────────
# Register file
# ──────────────────────────────────────────────

NUM_REGISTERS = 10        # R0..R9
BOUND_REGISTER = 0        # R0 holds the code length, read-only at run time

INT32_MIN = -2**31
INT32_MAX = 2**31 - 1


# ──────────────────────────────────────────────
# Lexical limits
# ──────────────────────────────────────────────

MAX_COMMAND_LENGTH = 10   # longest uppercase word the lexer will collect
MAX_SHAPE_LENGTH = 6      # longest name after '$'
DELIMITERS = " ,"

# Shape name -> shape id carried in the SHAPE token / DRAW / BLINK argument
SHAPES: Dict[str, int] = {
    "heart": 1,
    "bird": 2,
}
SHAPE_NAMES: Dict[int, str] = {v: k for k, v in SHAPES.items()}


# ──────────────────────────────────────────────
# Runtime limits
# ──────────────────────────────────────────────

VISUAL_ADD_LIMIT = 10     # ADDV refuses operands above this


# ──────────────────────────────────────────────
# Render profiles (selected with gvm --render)
# ──────────────────────────────────────────────

RENDER_PROFILES = {
    "headless": {
        "display": "null",
        "delay": 0.0,
        "description": "Values only, shapes and visual add are silent",
    },
    "console": {
        "display": "rich",
        "delay": 0.0,
        "colors": {"heart": "red", "bird": "blue",
                   "left": "red", "right": "blue", "total": "green"},
        "description": "Colored shapes and stars, no animation",
    },
    "animated": {
        "display": "rich",
        "delay": 0.1,
        "colors": {"heart": "red", "bird": "blue",
                   "left": "red", "right": "blue", "total": "green"},
        "description": "Colored output, one star at a time",
    },
}

DEFAULT_RENDER_PROFILE = "console"
