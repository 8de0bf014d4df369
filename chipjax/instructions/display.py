"""CHIP-8 display operations."""

import jax.numpy as jnp
from chipjax.state import EmulatorState
from chipjax.decode import DecodedInstruction
from chipjax.constants import SCREEN_WIDTH, SCREEN_HEIGHT, SPRITE_WIDTH, ADDRESS_MASK, FLAG_REGISTER

NUM_PIXELS = SCREEN_WIDTH * SCREEN_HEIGHT

# Pre-computed sprite grid: up to 15 rows of 8 pixels
rows = jnp.arange(16)[:, None]
cols = jnp.arange(SPRITE_WIDTH)[None, :]


def execute_display(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """DXYN - Draw sprite at (VX, VY) with height N.

    Pixels are addressed in the flat row-major buffer as
    ``x + col + (y + row) * SCREEN_WIDTH``. The start position is not wrapped;
    a sprite running off the right edge continues on the next row and pixels
    past the end of the buffer are dropped.
    """
    sprite_x = jnp.astype(state.V[instruction.x], jnp.int32)
    sprite_y = jnp.astype(state.V[instruction.y], jnp.int32)

    sprite_bytes = state.memory[(jnp.astype(state.I, jnp.int32) + rows) & ADDRESS_MASK]
    bits = (jnp.astype(sprite_bytes, jnp.int32) >> (SPRITE_WIDTH - 1 - cols)) & 1

    pixel_index = sprite_x + cols + (sprite_y + rows) * SCREEN_WIDTH
    draw = (rows < instruction.n) & (bits == 1) & (pixel_index < NUM_PIXELS)

    sprite = jnp.zeros(NUM_PIXELS, dtype=jnp.bool_).at[
        jnp.where(draw, pixel_index, NUM_PIXELS)
    ].set(True, mode="drop")

    # display is (x, y); its transpose flattens to y * SCREEN_WIDTH + x
    flat_display = state.display.T.reshape(-1)
    collision = jnp.any(flat_display & sprite)
    new_display = (flat_display ^ sprite).reshape(SCREEN_HEIGHT, SCREEN_WIDTH).T

    return state.replace(
        display=new_display,
        display_dirty=jnp.ones((), dtype=jnp.bool_),
        V=state.V.at[FLAG_REGISTER].set(jnp.astype(collision, jnp.uint8)),
    )
