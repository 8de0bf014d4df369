"""CHIP-8 ALU operations (8xxx).

Each operation maps ``(vx, vy)`` to ``(result, flag)``. Operations that
define a flag write VF after the result, so ``8FY4`` and friends leave the
flag rather than the arithmetic result in VF.
"""

import jax.numpy as jnp
from chipjax.state import EmulatorState
from chipjax.decode import DecodedInstruction
from chipjax.constants import FLAG_REGISTER


def _no_flag():
    return jnp.zeros((), dtype=jnp.uint8)


def alu_set(vx: jnp.ndarray, vy: jnp.ndarray) -> tuple[jnp.ndarray, jnp.ndarray]:
    """8XY0 - Set: VX = VY."""
    return vy, _no_flag()


def alu_or(vx: jnp.ndarray, vy: jnp.ndarray) -> tuple[jnp.ndarray, jnp.ndarray]:
    """8XY1 - Binary OR: VX |= VY."""
    return vx | vy, _no_flag()


def alu_and(vx: jnp.ndarray, vy: jnp.ndarray) -> tuple[jnp.ndarray, jnp.ndarray]:
    """8XY2 - Binary AND: VX &= VY."""
    return vx & vy, _no_flag()


def alu_xor(vx: jnp.ndarray, vy: jnp.ndarray) -> tuple[jnp.ndarray, jnp.ndarray]:
    """8XY3 - Logical XOR: VX ^= VY."""
    return vx ^ vy, _no_flag()


def alu_add(vx: jnp.ndarray, vy: jnp.ndarray) -> tuple[jnp.ndarray, jnp.ndarray]:
    """8XY4 - Add: VX += VY, VF = carry."""
    result = jnp.astype(vx, jnp.int32) + jnp.astype(vy, jnp.int32)
    carry = jnp.astype(result > 0xFF, jnp.uint8)
    return jnp.astype(result & 0xFF, jnp.uint8), carry


def alu_sub_xy(vx: jnp.ndarray, vy: jnp.ndarray) -> tuple[jnp.ndarray, jnp.ndarray]:
    """8XY5 - Subtract: VX -= VY, VF = 1 when there is no borrow."""
    no_borrow = jnp.astype(vx >= vy, jnp.uint8)
    result = (jnp.astype(vx, jnp.int32) - jnp.astype(vy, jnp.int32)) & 0xFF
    return jnp.astype(result, jnp.uint8), no_borrow


def alu_shift_right(vx: jnp.ndarray, vy: jnp.ndarray) -> tuple[jnp.ndarray, jnp.ndarray]:
    """8XY6 - Shift right: VX >>= 1, VF = old bit 0."""
    shifted_bit = jnp.astype(vx & 1, jnp.uint8)
    return jnp.astype(vx >> 1, jnp.uint8), shifted_bit


def alu_sub_yx(vx: jnp.ndarray, vy: jnp.ndarray) -> tuple[jnp.ndarray, jnp.ndarray]:
    """8XY7 - Subtract: VX = VY - VX, VF = 1 when there is no borrow."""
    return alu_sub_xy(vy, vx)


def alu_shift_left(vx: jnp.ndarray, vy: jnp.ndarray) -> tuple[jnp.ndarray, jnp.ndarray]:
    """8XYE - Shift left: VX <<= 1, VF = old bit 7."""
    shifted_bit = jnp.astype((vx >> 7) & 1, jnp.uint8)
    result = (jnp.astype(vx, jnp.int32) << 1) & 0xFF
    return jnp.astype(result, jnp.uint8), shifted_bit


def make_alu_instruction(operation, sets_flag: bool):
    """Factory for 8XYN instructions."""
    def alu_instruction(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
        vx = state.V[instruction.x]
        vy = state.V[instruction.y]
        result, flag = operation(vx, vy)
        new_V = state.V.at[instruction.x].set(result)
        if sets_flag:
            new_V = new_V.at[FLAG_REGISTER].set(flag)
        return state.replace(V=new_V)
    alu_instruction.__doc__ = operation.__doc__
    return alu_instruction


execute_alu_set = make_alu_instruction(alu_set, sets_flag=False)
execute_alu_or = make_alu_instruction(alu_or, sets_flag=False)
execute_alu_and = make_alu_instruction(alu_and, sets_flag=False)
execute_alu_xor = make_alu_instruction(alu_xor, sets_flag=False)
execute_alu_add = make_alu_instruction(alu_add, sets_flag=True)
execute_alu_sub_xy = make_alu_instruction(alu_sub_xy, sets_flag=True)
execute_alu_shift_right = make_alu_instruction(alu_shift_right, sets_flag=True)
execute_alu_sub_yx = make_alu_instruction(alu_sub_yx, sets_flag=True)
execute_alu_shift_left = make_alu_instruction(alu_shift_left, sets_flag=True)
