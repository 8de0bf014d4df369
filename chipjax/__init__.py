"""CHIP-8 interpreter built on JAX."""

from chipjax.state import (
    EmulatorState, create_state, load_program, load_rom, set_key, set_keypad, clear_display_dirty,
)
from chipjax.emulator import StepEvents, execute, fetch, step, run, tick_timers
from chipjax.decode import DecodedInstruction, Op, decode, disassemble
from chipjax.errors import Chip8Error, ProgramTooLarge, UnknownOpcode
from chipjax.machine import Chip8
from chipjax.constants import *
from chipjax.rendering import chip8_display_to_rgb, create_color_scheme, display_to_text

__all__ = [
    "EmulatorState",
    "create_state",
    "load_program",
    "load_rom",
    "set_key",
    "set_keypad",
    "clear_display_dirty",
    "StepEvents",
    "fetch",
    "execute",
    "step",
    "run",
    "tick_timers",
    "DecodedInstruction",
    "Op",
    "decode",
    "disassemble",
    "Chip8Error",
    "ProgramTooLarge",
    "UnknownOpcode",
    "Chip8",
    "PROGRAM_START",
    "FONT_START",
    "SCREEN_WIDTH",
    "SCREEN_HEIGHT",
    "MAX_PROGRAM_SIZE",
    "chip8_display_to_rgb",
    "create_color_scheme",
    "display_to_text",
]
