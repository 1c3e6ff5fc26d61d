"""DXYN sprite drawing: XOR composition, clipping and the collision flag."""
import pytest

from chipvm.decoder import decode
from chipvm.errors import AddressOutOfRange


def draw(executor, state, opcode):
    executor.execute(decode(opcode), state, state.memory)


def lit_cells(display):
    return {(x, y) for y in range(display.height) for x in range(display.width)
            if display.get(x, y)}


class TestDraw:
    def test_left_half_row(self, executor, state):
        state.I = 0x300
        state.memory.write_byte(0x300, 0xF0)
        draw(executor, state, 0xD001)
        assert lit_cells(state.display) == {(0, 0), (1, 0), (2, 0), (3, 0)}
        assert state.V[0xF] == 0
        assert state.display.dirty

    def test_position_from_registers(self, executor, state):
        state.I = 0x300
        state.memory.write_byte(0x300, 0x81)
        state.memory.write_byte(0x301, 0x18)
        state.V[2], state.V[3] = 10, 4
        draw(executor, state, 0xD232)
        assert lit_cells(state.display) == {(10, 4), (17, 4), (13, 5), (14, 5)}

    def test_start_position_wraps(self, executor, state):
        state.I = 0x300
        state.memory.write_byte(0x300, 0x80)
        state.V[0], state.V[1] = 64 + 5, 32 + 2
        draw(executor, state, 0xD011)
        assert lit_cells(state.display) == {(5, 2)}

    def test_draw_twice_restores_and_flags(self, executor, state):
        state.I = 0x300
        for i, b in enumerate([0xF0, 0x90, 0xF0]):
            state.memory.write_byte(0x300 + i, b)
        state.V[0], state.V[1] = 20, 10
        before = list(state.display.pixels)
        draw(executor, state, 0xD013)
        assert state.V[0xF] == 0
        draw(executor, state, 0xD013)
        assert state.display.pixels == before
        assert state.V[0xF] == 1

    def test_collision_flag_cleared_at_start(self, executor, state):
        state.I = 0x300
        state.memory.write_byte(0x300, 0x80)
        state.V[0xF] = 1
        draw(executor, state, 0xD011)
        assert state.V[0xF] == 0

    def test_collision_set_once_not_cleared_mid_draw(self, executor, state):
        state.I = 0x300
        state.memory.write_byte(0x300, 0xC0)
        state.memory.write_byte(0x301, 0xC0)
        state.display.xor(0, 0)
        draw(executor, state, 0xD012)
        assert state.V[0xF] == 1
        assert lit_cells(state.display) == {(1, 0), (0, 1), (1, 1)}

    def test_clips_right_edge(self, executor, state):
        state.I = 0x300
        state.memory.write_byte(0x300, 0xFF)
        state.memory.write_byte(0x301, 0xFF)
        state.V[0], state.V[1] = 60, 0
        draw(executor, state, 0xD012)
        assert lit_cells(state.display) == {(x, y) for x in range(60, 64) for y in (0, 1)}

    def test_clips_bottom_edge(self, executor, state):
        state.I = 0x300
        for i in range(4):
            state.memory.write_byte(0x300 + i, 0x80)
        state.V[0], state.V[1] = 0, 30
        draw(executor, state, 0xD014)
        assert lit_cells(state.display) == {(0, 30), (0, 31)}

    def test_zero_rows_draws_nothing(self, executor, state):
        state.I = 0x300
        state.memory.write_byte(0x300, 0xFF)
        draw(executor, state, 0xD010)
        assert state.display.lit() == 0

    def test_font_glyph(self, executor, state):
        state.V[0] = 0x0
        draw(executor, state, 0xF029)
        draw(executor, state, 0xD115)
        # glyph "0": F0 90 90 90 F0
        assert state.display.lit() == 4 + 2 + 2 + 2 + 4
        assert state.display.get(0, 0) and state.display.get(3, 4)
        assert not state.display.get(1, 2)


class TestFaultingDraw:
    def test_sprite_past_end_of_memory_changes_nothing(self, executor, state):
        state.I = 0xFFF
        state.memory.write_byte(0xFFF, 0xFF)
        state.V[0xF] = 1
        state.display.dirty = False
        with pytest.raises(AddressOutOfRange):
            draw(executor, state, 0xD012)
        assert state.display.lit() == 0
        assert state.V[0xF] == 1
        assert not state.display.dirty

    def test_clipped_rows_are_not_fetched(self, executor, state):
        # only the first row is on screen, so reading stops at 0xFFF
        state.I = 0xFFF
        state.memory.write_byte(0xFFF, 0x80)
        state.V[0], state.V[1] = 0, 31
        draw(executor, state, 0xD013)
        assert lit_cells(state.display) == {(0, 31)}
