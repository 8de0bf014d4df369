"""Tests for miscellaneous instructions (Fxxx)."""

import pytest
import jax.numpy as jnp
from chipjax import execute, set_key, FONT_DATA


class TestTimers:
    """Test timer-related instructions."""

    def test_misc_timer_instructions(self, fresh_state):
        """Test timer set and get operations."""
        state = fresh_state

        state = execute(state, 0x6030)  # V0 = 48
        state = execute(state, 0xF015)  # Set delay timer to V0
        assert state.delay_timer == 48

        state = execute(state, 0x6120)  # V1 = 32
        state = execute(state, 0xF118)  # Set sound timer to V1
        assert state.sound_timer == 32

        state = execute(state, 0xF207)  # V2 = delay timer
        assert state.V[2] == 48


class TestBCD:
    """Test BCD conversion."""

    @pytest.mark.parametrize("value,digits", [
        (156, (1, 5, 6)),
        (0, (0, 0, 0)),
        (255, (2, 5, 5)),
        (9, (0, 0, 9)),
        (40, (0, 4, 0)),
    ])
    def test_bcd_conversion(self, fresh_state, value, digits):
        state = execute(fresh_state, 0x6000 | value)
        state = execute(state, 0xA300)
        state = execute(state, 0xF033)

        assert tuple(int(d) for d in state.memory[0x300:0x303]) == digits
        assert state.I == 0x300

    def test_bcd_wraps_at_end_of_memory(self, fresh_state):
        state = execute(fresh_state, 0x60FF)
        state = execute(state, 0xAFFF)
        state = execute(state, 0xF033)

        assert state.memory[0xFFF] == 2
        assert state.memory[0x000] == 5
        assert state.memory[0x001] == 5


class TestIndexArithmetic:
    """FX1E and FX29."""

    def test_add_to_index(self, fresh_state):
        state = execute(fresh_state, 0xA100)
        state = execute(state, 0x6320)
        state = execute(state, 0xF31E)

        assert state.I == 0x120
        assert state.V[15] == 0

    def test_add_to_index_overflow_flag(self, fresh_state):
        """I keeps carrying past 0xFFF and VF reports it."""
        state = execute(fresh_state, 0xAFFF)
        state = execute(state, 0x6301)
        state = execute(state, 0xF31E)

        assert state.I == 0x1000
        assert state.V[15] == 1

    def test_add_to_index_from_vf(self, fresh_state):
        """VF as the operand is read before the flag is written."""
        state = execute(fresh_state, 0xA010)
        state = execute(state, 0x6F05)
        state = execute(state, 0xFF1E)

        assert state.I == 0x015
        assert state.V[15] == 0

    @pytest.mark.parametrize("digit", [0x0, 0x7, 0xA, 0xF])
    def test_font_character(self, fresh_state, digit):
        state = execute(fresh_state, 0x6400 | digit)
        state = execute(state, 0xF429)

        assert state.I == digit * 5
        glyph = [int(b) for b in state.memory[int(state.I):int(state.I) + 5]]
        assert glyph == FONT_DATA[digit * 5:digit * 5 + 5]


class TestRegisterStoreLoad:
    """FX55 and FX65."""

    def test_store_registers(self, fresh_state):
        state = fresh_state.replace(V=jnp.arange(16, dtype=jnp.uint8) + 1)
        state = execute(state, 0xA400)

        state = execute(state, 0xF355)

        assert [int(b) for b in state.memory[0x400:0x405]] == [1, 2, 3, 4, 0]
        assert state.I == 0x404

    def test_load_registers(self, fresh_state):
        memory = fresh_state.memory.at[0x500:0x510].set(jnp.arange(16, dtype=jnp.uint8) + 0x10)
        state = fresh_state.replace(memory=memory)
        state = execute(state, 0xA500)

        state = execute(state, 0xF265)

        assert [int(v) for v in state.V[:4]] == [0x10, 0x11, 0x12, 0]
        assert state.I == 0x503

    def test_store_and_load_all_registers(self, fresh_state):
        values = jnp.array([0xAA, 0x55] * 8, dtype=jnp.uint8)
        state = fresh_state.replace(V=values)
        state = execute(state, 0xA600)
        state = execute(state, 0xFF55)
        assert state.I == 0x610

        state = state.replace(V=jnp.zeros(16, dtype=jnp.uint8))
        state = execute(state, 0xA600)
        state = execute(state, 0xFF65)

        assert jnp.array_equal(state.V, values)
        assert state.I == 0x610

    def test_store_wraps_at_end_of_memory(self, fresh_state):
        state = fresh_state.replace(V=fresh_state.V.at[0].set(0x11).at[1].set(0x22))
        state = execute(state, 0xAFFF)

        state = execute(state, 0xF155)

        assert state.memory[0xFFF] == 0x11
        assert state.memory[0x000] == 0x22


class TestWaitForKey:
    """FX0A executed directly."""

    def test_wait_without_key_rewinds_pc(self, fresh_state):
        state = fresh_state.replace(pc=fresh_state.pc + 2)  # as after fetch

        state = execute(state, 0xF30A)

        assert state.pc == 0x200
        assert state.V[3] == 0

    def test_wait_records_lowest_pressed_key(self, fresh_state):
        state = set_key(fresh_state, 0xB, True)
        state = set_key(state, 0x4, True)
        state = state.replace(pc=state.pc + 2)

        state = execute(state, 0xF30A)

        assert state.V[3] == 0x4
        assert state.pc == 0x202
