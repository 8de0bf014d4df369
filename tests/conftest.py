"""Test configuration and fixtures for chipjax tests."""

import pytest
import jax
import jax.numpy as jnp
from chipjax import create_state, load_program, Chip8
from chipjax.logging import EmulatorLogger


@pytest.fixture
def fresh_state():
    """Provide a fresh emulator state for each test."""
    return create_state()


@pytest.fixture
def quiet_logger():
    """Logger that only prints warnings and above."""
    return EmulatorLogger(log_level="WARNING", use_colors=False, show_timestamps=False)


@pytest.fixture
def machine(quiet_logger):
    """Provide an initialized Chip8 machine."""
    return Chip8(logger=quiet_logger)


def setup_sprite_in_memory(state, address, sprite_bytes):
    """Helper to put sprite data in memory."""
    return state.replace(
        memory=state.memory.at[address:address+len(sprite_bytes)].set(
            jnp.array(sprite_bytes, dtype=jnp.uint8)
        )
    )


def state_with_program(program, **kwargs):
    """Fresh state with program bytes loaded at 0x200."""
    return load_program(create_state(**kwargs), program)


def states_equal(a, b) -> bool:
    """Compare every leaf of two emulator states."""
    leaves_a, tree_a = jax.tree.flatten(a)
    leaves_b, tree_b = jax.tree.flatten(b)
    return tree_a == tree_b and all(
        bool(jnp.array_equal(x, y)) for x, y in zip(leaves_a, leaves_b)
    )
