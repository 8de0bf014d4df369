"""CHIP-8 emulator state structures."""

from typing import Sequence, Union

import jax
import jax.numpy as jnp
from flax.struct import dataclass, PyTreeNode, field

from chipjax.constants import (
    PROGRAM_START, MAX_PROGRAM_SIZE, FONT_START, FONT_DATA, SCREEN_WIDTH, SCREEN_HEIGHT,
    STACK_SIZE, MEMORY_SIZE, NUM_KEYS, NUM_REGISTERS,
)
from chipjax.errors import ProgramTooLarge


@dataclass
class StackState:
    """Stack state for subroutine calls."""
    data: jnp.ndarray = field(default_factory=lambda: jnp.zeros(STACK_SIZE, dtype=jnp.uint16))
    pointer: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))


class EmulatorState(PyTreeNode):
    """Main CHIP-8 emulator state.

    The display is indexed ``display[x, y]``. ``couple_timers`` is static
    configuration: when True, timers count down once per executed instruction,
    otherwise the host is expected to call ``tick_timers`` at 60 Hz.
    """
    rng: jax.random.PRNGKey
    memory: jnp.ndarray = field(default_factory=lambda: jnp.zeros(MEMORY_SIZE, dtype=jnp.uint8))
    pc: jnp.ndarray = field(default_factory=lambda: jnp.astype(PROGRAM_START, jnp.uint16))
    display: jnp.ndarray = field(default_factory=lambda: jnp.zeros((SCREEN_WIDTH, SCREEN_HEIGHT), dtype=jnp.bool_))
    display_dirty: jnp.ndarray = field(default_factory=lambda: jnp.ones((), dtype=jnp.bool_))
    stack: StackState = field(default_factory=lambda: StackState())
    delay_timer: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))
    sound_timer: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))
    keypad: jnp.ndarray = field(default_factory=lambda: jnp.zeros(NUM_KEYS, dtype=jnp.bool_))
    V: jnp.ndarray = field(default_factory=lambda: jnp.zeros(NUM_REGISTERS, dtype=jnp.uint8))
    I: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint16))
    couple_timers: bool = field(pytree_node=False, default=True)


def create_state(rng: jax.random.PRNGKey = jax.random.PRNGKey(0), couple_timers: bool = True) -> EmulatorState:
    """Create initial emulator state with font data loaded."""
    state = EmulatorState(rng, couple_timers=couple_timers)
    font = jnp.array(FONT_DATA, dtype=jnp.uint8)
    return state.replace(memory=state.memory.at[FONT_START:FONT_START + len(FONT_DATA)].set(font))


def load_program(state: EmulatorState, program: Union[bytes, bytearray, Sequence[int]]) -> EmulatorState:
    """Copy program bytes into memory starting at 0x200.

    Raises:
        ProgramTooLarge: if the program does not fit below 0x1000.
    """
    if len(program) > MAX_PROGRAM_SIZE:
        raise ProgramTooLarge(len(program), MAX_PROGRAM_SIZE)
    program_array = jnp.array(list(program), dtype=jnp.uint8)
    new_memory = state.memory.at[PROGRAM_START:PROGRAM_START + len(program)].set(program_array)
    return state.replace(memory=new_memory)


def load_rom(state: EmulatorState, filename: str) -> EmulatorState:
    """Load ROM file into CHIP-8 memory starting at 0x200."""
    with open(filename, 'rb') as f:
        rom_data = f.read()
    return load_program(state, rom_data)


def set_key(state: EmulatorState, key: int, pressed: bool) -> EmulatorState:
    """Set the pressed state of a single hex key."""
    if not 0 <= key < NUM_KEYS:
        raise ValueError(f"Key index must be in 0..{NUM_KEYS - 1}, got {key}")
    return state.replace(keypad=state.keypad.at[key].set(bool(pressed)))


def set_keypad(state: EmulatorState, keys: Sequence[bool]) -> EmulatorState:
    """Replace the whole keypad with 16 pressed flags."""
    if len(keys) != NUM_KEYS:
        raise ValueError(f"Expected {NUM_KEYS} key flags, got {len(keys)}")
    return state.replace(keypad=jnp.array(keys, dtype=jnp.bool_))


def clear_display_dirty(state: EmulatorState) -> EmulatorState:
    """Mark the display as presented."""
    return state.replace(display_dirty=jnp.zeros((), dtype=jnp.bool_))
