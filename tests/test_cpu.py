"""
Opcode Semantics Tests
======================

Each opcode is applied through ``execute`` on a bare Machine, no host and
no scheduler involved. The program counter is set to 0x202 beforehand, as
if the instruction at 0x200 had just been fetched.
"""

import random

import pytest

from chip8 import (Effect, Machine, OutOfBounds, StackOverflow, StackUnderflow,
                   decode, execute)


@pytest.fixture
def m():
    machine = Machine()
    machine.registers.pc = 0x202
    return machine


def run(machine, raw, rng=None):
    return execute(decode(raw, 0x200), machine, rng or random.Random(0))


# =============================================================================
# Flow control
# =============================================================================

class TestFlow:

    def test_sys_ignored(self, m):
        assert run(m, 0x0123) is None
        assert m.registers.pc == 0x202

    def test_jump(self, m):
        run(m, 0x1ABC)
        assert m.registers.pc == 0xABC

    def test_call_and_return(self, m):
        run(m, 0x2400)
        assert m.registers.pc == 0x400
        assert m.registers.depth == 1
        m.registers.pc = 0x402
        run(m, 0x00EE)
        assert m.registers.pc == 0x202
        assert m.registers.depth == 0

    def test_return_empty_stack(self, m):
        with pytest.raises(StackUnderflow):
            run(m, 0x00EE)

    def test_seventeenth_call(self, m):
        for _ in range(16):
            run(m, 0x2300)
        with pytest.raises(StackOverflow):
            run(m, 0x2300)

    def test_jump_plus_v0(self, m):
        m.registers.v[0] = 0x10
        run(m, 0xB300)
        assert m.registers.pc == 0x310

    def test_jump_plus_v0_masks_to_12_bits(self, m):
        m.registers.v[0] = 0xFF
        run(m, 0xBFFF)
        assert m.registers.pc == (0xFFF + 0xFF) & 0xFFF

    def test_odd_jump_target_kept(self, m):
        run(m, 0x1203)
        assert m.registers.pc == 0x203

    def test_odd_jump_plus_v0_kept(self, m):
        m.registers.v[0] = 1
        run(m, 0xB300)
        assert m.registers.pc == 0x301

    def test_execute_updates_machine_in_place(self, m):
        regs = m.registers
        run(m, 0x6A07)
        assert m.registers is regs
        assert regs.v[0xA] == 7


# =============================================================================
# Conditional skips
# =============================================================================

class TestSkips:

    @pytest.mark.parametrize("raw,vx,skipped", [
        (0x3142, 0x42, True),
        (0x3142, 0x41, False),
        (0x4142, 0x42, False),
        (0x4142, 0x41, True),
    ])
    def test_immediate(self, m, raw, vx, skipped):
        m.registers.v[1] = vx
        run(m, raw)
        assert m.registers.pc == (0x204 if skipped else 0x202)

    @pytest.mark.parametrize("raw,vy,skipped", [
        (0x5120, 7, True),
        (0x5120, 8, False),
        (0x9120, 7, False),
        (0x9120, 8, True),
    ])
    def test_registers(self, m, raw, vy, skipped):
        m.registers.v[1] = 7
        m.registers.v[2] = vy
        run(m, raw)
        assert m.registers.pc == (0x204 if skipped else 0x202)

    def test_skip_if_key_pressed(self, m):
        m.registers.v[4] = 0xB
        run(m, 0xE49E)
        assert m.registers.pc == 0x202
        m.keypad.set_key(0xB, True)
        run(m, 0xE49E)
        assert m.registers.pc == 0x204

    def test_skip_if_key_not_pressed(self, m):
        m.registers.v[4] = 0xB
        run(m, 0xE4A1)
        assert m.registers.pc == 0x204
        m.keypad.set_key(0xB, True)
        run(m, 0xE4A1)
        assert m.registers.pc == 0x204

    def test_key_index_uses_low_nibble(self, m):
        m.registers.v[4] = 0x13
        m.keypad.set_key(0x3, True)
        run(m, 0xE49E)
        assert m.registers.pc == 0x204


# =============================================================================
# Loads and ALU
# =============================================================================

class TestAlu:

    def test_load_immediate(self, m):
        run(m, 0x6A7F)
        assert m.registers.v[0xA] == 0x7F

    def test_add_immediate_wraps_without_flag(self, m):
        m.registers.v[2] = 0xFF
        m.registers.v[0xF] = 0
        run(m, 0x7202)
        assert m.registers.v[2] == 1
        assert m.registers.v[0xF] == 0

    def test_copy(self, m):
        m.registers.v[3] = 0x99
        run(m, 0x8130)
        assert m.registers.v[1] == 0x99

    @pytest.mark.parametrize("raw,expected", [
        (0x8121, 0b1110),
        (0x8122, 0b1000),
        (0x8123, 0b0110),
    ])
    def test_bitwise(self, m, raw, expected):
        m.registers.v[1] = 0b1100
        m.registers.v[2] = 0b1010
        run(m, raw)
        assert m.registers.v[1] == expected

    def test_add_with_carry_scenario(self, m):
        """5 + 250 = 255, no carry; then 255 + 10 wraps to 9 with carry."""
        v = m.registers.v
        v[0], v[1] = 5, 250
        run(m, 0x8014)
        assert (v[0], v[0xF]) == (255, 0)
        v[2] = 10
        run(m, 0x8024)
        assert (v[0], v[0xF]) == (9, 1)

    def test_sub_no_borrow(self, m):
        v = m.registers.v
        v[1], v[2] = 10, 3
        run(m, 0x8125)
        assert (v[1], v[0xF]) == (7, 1)

    def test_sub_borrow(self, m):
        v = m.registers.v
        v[1], v[2] = 3, 10
        run(m, 0x8125)
        assert (v[1], v[0xF]) == (0xF9, 0)

    def test_sub_equal_is_no_borrow(self, m):
        v = m.registers.v
        v[1], v[2] = 4, 4
        run(m, 0x8125)
        assert (v[1], v[0xF]) == (0, 1)

    def test_subn(self, m):
        v = m.registers.v
        v[1], v[2] = 3, 10
        run(m, 0x8127)
        assert (v[1], v[0xF]) == (7, 1)
        v[1], v[2] = 10, 3
        run(m, 0x8127)
        assert (v[1], v[0xF]) == (0xF9, 0)

    def test_shift_right(self, m):
        v = m.registers.v
        v[5] = 0b101
        run(m, 0x8506)
        assert (v[5], v[0xF]) == (0b10, 1)
        run(m, 0x8506)
        assert (v[5], v[0xF]) == (0b1, 0)

    def test_shift_left(self, m):
        v = m.registers.v
        v[5] = 0x81
        run(m, 0x850E)
        assert (v[5], v[0xF]) == (0x02, 1)
        run(m, 0x850E)
        assert (v[5], v[0xF]) == (0x04, 0)

    def test_flag_register_as_destination_keeps_flag(self, m):
        v = m.registers.v
        v[0xF], v[1] = 200, 100
        run(m, 0x8F14)
        assert v[0xF] == 1

    def test_random_masked(self, m):
        for _ in range(50):
            run(m, 0xC30F)
            assert 0 <= m.registers.v[3] <= 0x0F

    def test_random_zero_mask(self, m):
        run(m, 0xC300)
        assert m.registers.v[3] == 0

    def test_random_uses_given_rng(self, m):
        run(m, 0xC3FF, random.Random(42))
        first = m.registers.v[3]
        run(m, 0xC3FF, random.Random(42))
        assert m.registers.v[3] == first


# =============================================================================
# Index register and memory
# =============================================================================

class TestIndex:

    def test_load_index(self, m):
        run(m, 0xA2F0)
        assert m.registers.i == 0x2F0

    def test_add_index(self, m):
        m.registers.i = 0xFFE
        m.registers.v[1] = 5
        m.registers.v[0xF] = 0
        run(m, 0xF11E)
        assert m.registers.i == 0x1003
        assert m.registers.v[0xF] == 0

    @pytest.mark.parametrize("digit", range(16))
    def test_font_address(self, m, digit):
        m.registers.v[2] = digit
        run(m, 0xF229)
        assert m.registers.i == digit * 5

    def test_bcd(self, m):
        m.registers.i = 0x300
        m.registers.v[7] = 254
        run(m, 0xF733)
        assert m.memory.read_block(0x300, 3) == bytes([2, 5, 4])

    def test_bcd_small(self, m):
        m.registers.i = 0x300
        m.registers.v[7] = 7
        run(m, 0xF733)
        assert m.memory.read_block(0x300, 3) == bytes([0, 0, 7])

    def test_store_registers(self, m):
        m.registers.i = 0x400
        m.registers.v[:4] = [1, 2, 3, 4]
        run(m, 0xF255)
        assert m.memory.read_block(0x400, 4) == bytes([1, 2, 3, 0])
        assert m.registers.i == 0x400

    def test_load_registers(self, m):
        m.memory.write(0x400, 9)
        m.memory.write(0x401, 8)
        m.registers.i = 0x400
        run(m, 0xF165)
        assert m.registers.v[:3] == [9, 8, 0]
        assert m.registers.i == 0x400

    def test_store_past_end_of_memory(self, m):
        m.registers.i = 0xFFE
        with pytest.raises(OutOfBounds):
            run(m, 0xF355)

    def test_bcd_past_end_of_memory(self, m):
        m.registers.i = 0xFFF
        with pytest.raises(OutOfBounds):
            run(m, 0xF033)


# =============================================================================
# Display, timers, keys
# =============================================================================

class TestDevices:

    def test_clear_screen(self, m):
        m.framebuffer.draw(0, 0, b"\xFF")
        assert run(m, 0x00E0) is Effect.DISPLAY
        assert not m.framebuffer.snapshot().any()

    def test_draw_font_digit(self, m):
        m.registers.v[0] = 0
        m.registers.v[1] = 0
        m.registers.i = 0  # glyph "0"
        assert run(m, 0xD015) is Effect.DISPLAY
        assert m.registers.v[0xF] == 0
        assert m.framebuffer.snapshot()[0, :4].tolist() == [1, 1, 1, 1]

    def test_draw_twice_sets_collision(self, m):
        m.registers.i = 5
        run(m, 0xD015)
        run(m, 0xD015)
        assert m.registers.v[0xF] == 1
        assert not m.framebuffer.snapshot().any()

    def test_draw_zero_rows(self, m):
        m.registers.v[0xF] = 1
        run(m, 0xD010)
        assert m.registers.v[0xF] == 0
        assert not m.framebuffer.snapshot().any()

    def test_draw_past_end_of_memory(self, m):
        m.registers.i = 0xFFD
        with pytest.raises(OutOfBounds):
            run(m, 0xD015)

    def test_delay_timer(self, m):
        m.registers.v[3] = 42
        run(m, 0xF315)
        assert m.timers.delay == 42
        m.timers.tick()
        run(m, 0xF407)
        assert m.registers.v[4] == 41

    def test_sound_timer(self, m):
        m.registers.v[3] = 2
        run(m, 0xF318)
        assert m.timers.sound == 2
        assert m.timers.sound_active

    def test_wait_for_key_arms_keypad(self, m):
        assert run(m, 0xF30A) is Effect.AWAIT_KEY
        assert m.keypad.waiting
        assert m.keypad.target == 3
        assert m.registers.pc == 0x202
