"""CHIP-8 miscellaneous instructions (Fxxx)."""

import jax.numpy as jnp
from chipjax.state import EmulatorState
from chipjax.decode import DecodedInstruction
from chipjax.constants import FONT_START, FONT_GLYPH_SIZE, ADDRESS_MASK, FLAG_REGISTER, NUM_REGISTERS


def execute_get_delay_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX07 - Set VX to delay timer value."""
    return state.replace(V=state.V.at[instruction.x].set(state.delay_timer))


def execute_set_delay_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX15 - Set delay timer to VX."""
    return state.replace(delay_timer=state.V[instruction.x])


def execute_set_sound_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX18 - Set sound timer to VX."""
    return state.replace(sound_timer=state.V[instruction.x])


def execute_add_to_index(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX1E - Add VX to I register.

    VF reports whether the sum left the 12-bit address space. I itself keeps
    the full 16-bit sum.
    """
    total = jnp.astype(state.I, jnp.int32) + jnp.astype(state.V[instruction.x], jnp.int32)
    overflow_flag = jnp.astype(total > ADDRESS_MASK, jnp.uint8)
    return state.replace(
        I=jnp.astype(total & 0xFFFF, jnp.uint16),
        V=state.V.at[FLAG_REGISTER].set(overflow_flag)
    )


def execute_wait_for_key(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX0A - Wait for key press.

    Without a pressed key the program counter is rewound onto this instruction
    so the next step executes it again. Otherwise VX gets the lowest pressed key.
    """
    any_pressed = jnp.any(state.keypad)
    pressed_key = jnp.astype(jnp.argmax(state.keypad), jnp.uint8)
    return state.replace(
        V=state.V.at[instruction.x].set(jnp.where(any_pressed, pressed_key, state.V[instruction.x])),
        pc=jnp.where(any_pressed, state.pc, state.pc - 2),
    )


def execute_font_character(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX29 - Set I to location of sprite for digit VX."""
    font_address = FONT_START + jnp.astype(state.V[instruction.x], jnp.uint16) * FONT_GLYPH_SIZE
    return state.replace(I=jnp.astype(font_address, jnp.uint16))


def execute_bcd_conversion(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX33 - Store BCD representation of VX at I, I+1, I+2."""
    value = state.V[instruction.x]

    digits = jnp.array([
        value // 100,
        (value // 10) % 10,
        value % 10
    ], dtype=jnp.uint8)

    indices = (jnp.arange(3) + jnp.astype(state.I, jnp.int32)) & ADDRESS_MASK
    return state.replace(memory=state.memory.at[indices].set(digits))


def _register_window(state: EmulatorState, instruction: DecodedInstruction):
    register_mask = jnp.arange(NUM_REGISTERS) <= instruction.x
    indices = (jnp.astype(state.I, jnp.int32) + jnp.arange(NUM_REGISTERS)) & ADDRESS_MASK
    next_index = jnp.astype((jnp.astype(state.I, jnp.int32) + instruction.x + 1) & 0xFFFF, jnp.uint16)
    return register_mask, indices, next_index


def execute_store_registers(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX55 - Store V0 through VX in memory starting at I, then I += X + 1."""
    register_mask, indices, next_index = _register_window(state, instruction)
    new_values = jnp.where(register_mask, state.V, state.memory[indices])
    return state.replace(memory=state.memory.at[indices].set(new_values), I=next_index)


def execute_load_registers(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX65 - Load V0 through VX from memory starting at I, then I += X + 1."""
    register_mask, indices, next_index = _register_window(state, instruction)
    new_V = jnp.where(register_mask, state.memory[indices], state.V)
    return state.replace(V=new_V, I=next_index)
