"""Tests for control flow instructions."""

import pytest
from chipjax import execute, set_key


class TestJump:
    """Test jump instructions."""

    def test_execute_jump(self, fresh_state):
        """Test 1NNN - Jump to address."""
        state = execute(fresh_state, 0x1ABC)
        assert state.pc == 0xABC

    def test_jump_does_not_push(self, fresh_state):
        """1NNN leaves the stack alone."""
        state = execute(fresh_state, 0x1300)
        assert state.stack.pointer == 0

    def test_call_pushes_return_address(self, fresh_state):
        """2NNN pushes the current pc and jumps."""
        state = fresh_state.replace(pc=fresh_state.pc + 2)  # as after fetch
        state = execute(state, 0x2400)
        assert state.pc == 0x400
        assert state.stack.pointer == 1
        assert state.stack.data[0] == 0x202


class TestSkipInstructions:
    """Test all skip instruction variants."""

    def test_skip_if_equal_immediate_true(self, fresh_state):
        """3XNN - Should skip when VX == NN."""
        state = fresh_state.replace(V=fresh_state.V.at[5].set(0x42))
        initial_pc = state.pc

        state = execute(state, 0x3542)
        assert state.pc == initial_pc + 2

    def test_skip_if_equal_immediate_false(self, fresh_state):
        """3XNN - Should not skip when VX != NN."""
        state = fresh_state.replace(V=fresh_state.V.at[5].set(0x41))
        initial_pc = state.pc

        state = execute(state, 0x3542)
        assert state.pc == initial_pc

    def test_skip_if_not_equal_immediate_true(self, fresh_state):
        """4XNN - Should skip when VX != NN."""
        state = fresh_state.replace(V=fresh_state.V.at[3].set(0x10))
        initial_pc = state.pc

        state = execute(state, 0x4320)
        assert state.pc == initial_pc + 2

    def test_skip_if_not_equal_immediate_false(self, fresh_state):
        """4XNN - Should not skip when VX == NN."""
        state = fresh_state.replace(V=fresh_state.V.at[3].set(0x20))
        initial_pc = state.pc

        state = execute(state, 0x4320)
        assert state.pc == initial_pc

    def test_skip_if_equal_register_true(self, fresh_state):
        """5XY0 - Should skip when VX == VY."""
        state = fresh_state
        state = state.replace(V=state.V.at[1].set(0x55))
        state = state.replace(V=state.V.at[2].set(0x55))
        initial_pc = state.pc

        state = execute(state, 0x5120)
        assert state.pc == initial_pc + 2

    def test_skip_if_equal_register_false(self, fresh_state):
        """5XY0 - Should not skip when VX != VY."""
        state = fresh_state
        state = state.replace(V=state.V.at[1].set(0x55))
        state = state.replace(V=state.V.at[2].set(0x44))
        initial_pc = state.pc

        state = execute(state, 0x5120)
        assert state.pc == initial_pc

    def test_skip_if_not_equal_register_true(self, fresh_state):
        """9XY0 - Should skip when VX != VY."""
        state = fresh_state
        state = state.replace(V=state.V.at[7].set(0xAA))
        state = state.replace(V=state.V.at[8].set(0xBB))
        initial_pc = state.pc

        state = execute(state, 0x9780)
        assert state.pc == initial_pc + 2

    def test_skip_if_not_equal_register_false(self, fresh_state):
        """9XY0 - Should not skip when VX == VY."""
        state = fresh_state
        state = state.replace(V=state.V.at[7].set(0xCC))
        state = state.replace(V=state.V.at[8].set(0xCC))
        initial_pc = state.pc

        state = execute(state, 0x9780)
        assert state.pc == initial_pc

    def test_skip_boundary_values(self, fresh_state):
        """Test skip instructions with boundary values."""
        state = fresh_state.replace(V=fresh_state.V.at[0].set(0xFF))
        initial_pc = state.pc

        state = execute(state, 0x30FF)
        assert state.pc == initial_pc + 2


class TestKeySkips:
    """EX9E / EXA1 key tests."""

    def test_skip_if_key_pressed(self, fresh_state):
        state = set_key(fresh_state, 0xA, True)
        state = state.replace(V=state.V.at[2].set(0xA))

        assert execute(state, 0xE29E).pc == 0x202
        assert execute(state, 0xE2A1).pc == 0x200

    def test_skip_if_key_not_pressed(self, fresh_state):
        state = fresh_state.replace(V=fresh_state.V.at[2].set(0xA))

        assert execute(state, 0xE29E).pc == 0x200
        assert execute(state, 0xE2A1).pc == 0x202

    def test_key_index_uses_low_nibble(self, fresh_state):
        """VX above 0xF selects key VX & 0xF."""
        state = set_key(fresh_state, 0x3, True)
        state = state.replace(V=state.V.at[2].set(0x13))

        assert execute(state, 0xE29E).pc == 0x202


class TestJumpWithOffset:
    """BNNN jump."""

    def test_jump_with_offset(self, fresh_state):
        """BNNN - Jump with V0 offset."""
        state = execute(fresh_state, 0x6010)  # V0 = 0x10
        state = execute(state, 0x6230)  # V2 = 0x30, ignored
        state = execute(state, 0xB250)
        assert state.pc == 0x260

    def test_jump_with_offset_past_address_space(self, fresh_state):
        """BNNN keeps the full sum; fetch masks it later."""
        state = execute(fresh_state, 0x60FF)
        state = execute(state, 0xBFFF)
        assert state.pc == 0x10FE
