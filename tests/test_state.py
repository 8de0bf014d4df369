"""Tests for state creation and program loading."""

import pytest
import jax.numpy as jnp
from chipjax import (
    create_state, load_program, load_rom, set_key, set_keypad, clear_display_dirty,
    ProgramTooLarge, FONT_DATA, MAX_PROGRAM_SIZE,
)


class TestInitialState:

    def test_font_loaded(self, fresh_state):
        assert [int(b) for b in fresh_state.memory[:80]] == FONT_DATA

    def test_everything_else_zeroed(self, fresh_state):
        state = fresh_state
        assert state.pc == 0x200
        assert state.I == 0
        assert jnp.all(state.memory[80:] == 0)
        assert jnp.all(state.V == 0)
        assert jnp.all(state.stack.data == 0)
        assert state.stack.pointer == 0
        assert state.delay_timer == 0
        assert state.sound_timer == 0
        assert not jnp.any(state.display)
        assert not jnp.any(state.keypad)

    def test_display_starts_dirty(self, fresh_state):
        assert fresh_state.display_dirty

    def test_shapes(self, fresh_state):
        assert fresh_state.memory.shape == (4096,)
        assert fresh_state.display.shape == (64, 32)
        assert fresh_state.keypad.shape == (16,)


class TestLoadProgram:

    def test_bytes_placed_at_0x200(self, fresh_state):
        program = bytes([0x60, 0x05, 0x70, 0x03, 0xFF])
        state = load_program(fresh_state, program)

        for i, byte in enumerate(program):
            assert state.memory[0x200 + i] == byte
        assert state.memory[0x205] == 0

    def test_largest_program_fits(self, fresh_state):
        program = bytes([0xAB]) * MAX_PROGRAM_SIZE
        state = load_program(fresh_state, program)

        assert MAX_PROGRAM_SIZE == 3584
        assert jnp.all(state.memory[0x200:] == 0xAB)

    def test_too_large_program_rejected(self, fresh_state):
        with pytest.raises(ProgramTooLarge) as excinfo:
            load_program(fresh_state, bytes(MAX_PROGRAM_SIZE + 1))

        assert excinfo.value.size == MAX_PROGRAM_SIZE + 1
        assert excinfo.value.limit == MAX_PROGRAM_SIZE
        assert jnp.all(fresh_state.memory[0x200:] == 0)

    def test_empty_program(self, fresh_state):
        state = load_program(fresh_state, b"")
        assert jnp.array_equal(state.memory, fresh_state.memory)

    def test_load_rom_from_file(self, fresh_state, tmp_path):
        rom = tmp_path / "test.ch8"
        rom.write_bytes(bytes([0x12, 0x00]))

        state = load_rom(fresh_state, str(rom))

        assert state.memory[0x200] == 0x12
        assert state.memory[0x201] == 0x00


class TestKeysAndFlags:

    def test_set_key(self, fresh_state):
        state = set_key(fresh_state, 0xF, True)
        assert state.keypad[0xF]
        state = set_key(state, 0xF, False)
        assert not state.keypad[0xF]

    @pytest.mark.parametrize("key", [-1, 16])
    def test_set_key_out_of_range(self, fresh_state, key):
        with pytest.raises(ValueError):
            set_key(fresh_state, key, True)

    def test_set_keypad(self, fresh_state):
        keys = [i % 2 == 0 for i in range(16)]
        state = set_keypad(fresh_state, keys)
        assert [bool(k) for k in state.keypad] == keys

    def test_set_keypad_wrong_length(self, fresh_state):
        with pytest.raises(ValueError):
            set_keypad(fresh_state, [True] * 15)

    def test_clear_display_dirty(self, fresh_state):
        assert not clear_display_dirty(fresh_state).display_dirty
