"""Main CHIP-8 emulator execution engine."""

from functools import partial

import jax
import jax.lax
import jax.numpy as jnp
from chex import dataclass

from chipjax.state import EmulatorState
from chipjax.decode import DecodedInstruction, Op, decode
from chipjax.constants import ADDRESS_MASK
from chipjax.instructions.system import no_op, execute_clear_screen, execute_return
from chipjax.instructions.control_flow import (
    execute_jump, execute_call, execute_skip_if_equal_immediate,
    execute_skip_if_not_equal_immediate, execute_skip_if_equal_register,
    execute_skip_if_not_equal_register, execute_jump_with_offset,
    execute_skip_if_key, execute_skip_if_not_key
)
from chipjax.instructions.alu import (
    execute_alu_set, execute_alu_or, execute_alu_and, execute_alu_xor, execute_alu_add,
    execute_alu_sub_xy, execute_alu_shift_right, execute_alu_sub_yx, execute_alu_shift_left
)
from chipjax.instructions.memory import execute_set, execute_add, execute_set_index, execute_random
from chipjax.instructions.display import execute_display
from chipjax.instructions.misc import (
    execute_get_delay_timer, execute_wait_for_key, execute_set_delay_timer,
    execute_set_sound_timer, execute_add_to_index, execute_font_character,
    execute_bcd_conversion, execute_store_registers, execute_load_registers
)

# Indexed by Op value
HANDLERS = {
    Op.CLS: execute_clear_screen,
    Op.RET: execute_return,
    Op.JP: execute_jump,
    Op.CALL: execute_call,
    Op.SE_IMM: execute_skip_if_equal_immediate,
    Op.SNE_IMM: execute_skip_if_not_equal_immediate,
    Op.SE_REG: execute_skip_if_equal_register,
    Op.LD_IMM: execute_set,
    Op.ADD_IMM: execute_add,
    Op.LD_REG: execute_alu_set,
    Op.OR: execute_alu_or,
    Op.AND: execute_alu_and,
    Op.XOR: execute_alu_xor,
    Op.ADD_REG: execute_alu_add,
    Op.SUB: execute_alu_sub_xy,
    Op.SHR: execute_alu_shift_right,
    Op.SUBN: execute_alu_sub_yx,
    Op.SHL: execute_alu_shift_left,
    Op.SNE_REG: execute_skip_if_not_equal_register,
    Op.LD_I: execute_set_index,
    Op.JP_V0: execute_jump_with_offset,
    Op.RND: execute_random,
    Op.DRW: execute_display,
    Op.SKP: execute_skip_if_key,
    Op.SKNP: execute_skip_if_not_key,
    Op.LD_VX_DT: execute_get_delay_timer,
    Op.LD_VX_K: execute_wait_for_key,
    Op.LD_DT_VX: execute_set_delay_timer,
    Op.LD_ST_VX: execute_set_sound_timer,
    Op.ADD_I_VX: execute_add_to_index,
    Op.LD_F_VX: execute_font_character,
    Op.LD_B_VX: execute_bcd_conversion,
    Op.LD_MEM_VX: execute_store_registers,
    Op.LD_VX_MEM: execute_load_registers,
    Op.UNKNOWN: no_op,
}

_BRANCHES = [HANDLERS[op] for op in Op]


@dataclass(frozen=True)
class StepEvents:
    """Observable side effects of one ``step`` call.

    Attributes:
        address: Address the instruction was fetched from
        instruction: Raw 16-bit opcode
        unknown_opcode: Opcode did not decode; it was skipped
        waiting: FX0A found no pressed key; the step changed nothing
        tone: Sound timer went from 1 to 0 during this step
    """
    address: jnp.ndarray
    instruction: jnp.ndarray
    unknown_opcode: jnp.ndarray
    waiting: jnp.ndarray
    tone: jnp.ndarray


def execute_decoded(state: EmulatorState, decoded_instruction: DecodedInstruction) -> EmulatorState:
    """Dispatch an already decoded instruction."""
    return jax.lax.switch(decoded_instruction.kind, _BRANCHES, state, decoded_instruction)


def execute(state: EmulatorState, instruction: int) -> EmulatorState:
    """Execute single CHIP-8 instruction."""
    return execute_decoded(state, decode(instruction))


def _pack_u16(high: jnp.uint8, low: jnp.uint8) -> jnp.uint16:
    """Pack two bytes into uint16."""
    return (high.astype(jnp.uint16) << 8) | low.astype(jnp.uint16)


def fetch(state: EmulatorState) -> tuple[EmulatorState, jnp.uint16]:
    """Fetch next instruction from memory."""
    address = jnp.astype(state.pc, jnp.int32) & ADDRESS_MASK
    instruction = _pack_u16(state.memory[address], state.memory[(address + 1) & ADDRESS_MASK])
    return state.replace(pc=state.pc + 2), instruction


def tick_timers(state: EmulatorState) -> tuple[EmulatorState, jnp.ndarray]:
    """Count both timers down by one; report a tone when sound goes 1 -> 0."""
    tone = state.sound_timer == 1
    return state.replace(
        delay_timer=jnp.where(state.delay_timer > 0, state.delay_timer - 1, state.delay_timer),
        sound_timer=jnp.where(state.sound_timer > 0, state.sound_timer - 1, state.sound_timer),
    ), tone


def _no_tick(state: EmulatorState) -> tuple[EmulatorState, jnp.ndarray]:
    return state, jnp.zeros((), dtype=jnp.bool_)


@jax.jit
def step(state: EmulatorState) -> tuple[EmulatorState, StepEvents]:
    """Run one fetch-decode-execute cycle.

    When the state couples timers to instructions they tick after every
    executed instruction, but not while FX0A is still waiting for a key.
    """
    address = state.pc
    state, instruction = fetch(state)
    decoded_instruction = decode(instruction)
    state = execute_decoded(state, decoded_instruction)

    waiting = (decoded_instruction.kind == int(Op.LD_VX_K)) & ~jnp.any(state.keypad)

    if state.couple_timers:
        state, tone = jax.lax.cond(waiting, _no_tick, tick_timers, state)
    else:
        tone = jnp.zeros((), dtype=jnp.bool_)

    return state, StepEvents(
        address=address,
        instruction=instruction,
        unknown_opcode=decoded_instruction.kind == int(Op.UNKNOWN),
        waiting=waiting,
        tone=tone,
    )


def _scan_step(state, _):
    return step(state)


@partial(jax.jit, static_argnums=1)
def run(state: EmulatorState, num_steps: int) -> tuple[EmulatorState, StepEvents]:
    """Run ``num_steps`` steps, returning the final state and stacked events."""
    return jax.lax.scan(_scan_step, state, length=num_steps)
