"""Opcode field extraction and disassembly."""
import pytest

from chipvm.decoder import decode, disassemble


class TestDecode:
    def test_fields_of_draw(self):
        inst = decode(0xD12F)
        assert inst.opcode == 0xD12F
        assert inst.family == 0xD
        assert inst.x == 0x1
        assert inst.y == 0x2
        assert inst.n == 0xF
        assert inst.nn == 0x2F
        assert inst.nnn == 0x12F

    @pytest.mark.parametrize("opcode", [0x0000, 0xFFFF, 0x8AB4, 0x1234, 0xABCD, 0x00EE])
    def test_fields_match_masks(self, opcode):
        inst = decode(opcode)
        assert inst.nnn == opcode & 0x0FFF
        assert inst.nn == opcode & 0x00FF
        assert inst.n == opcode & 0x000F
        assert inst.x == (opcode >> 8) & 0x0F
        assert inst.y == (opcode >> 4) & 0x0F

    def test_every_opcode_decodes(self):
        for opcode in range(0x10000):
            inst = decode(opcode)
            assert (inst.family << 12) | inst.nnn == opcode
            assert (inst.x << 8) | inst.nn == inst.nnn
            assert (inst.y << 4) | inst.n == inst.nn

    def test_instruction_is_immutable(self):
        inst = decode(0x6A3C)
        with pytest.raises(AttributeError):
            inst.x = 1


class TestDisassemble:
    @pytest.mark.parametrize("opcode, text", [
        (0x00E0, "CLS"),
        (0x00EE, "RET"),
        (0x12F0, "JP 0x2f0"),
        (0x22F0, "CALL 0x2f0"),
        (0x6A3C, "LD VA, 0x3c"),
        (0xA200, "LD I, 0x200"),
        (0xD015, "DRW V0, V1, 5"),
        (0x8AB4, "ADD VA, VB"),
        (0x8AB6, "SHR VA, VB"),
        (0xE19E, "SKP V1"),
        (0xF233, "LD B, V2"),
        (0xF565, "LD V5, [I]"),
    ])
    def test_mnemonics(self, opcode, text):
        assert disassemble(decode(opcode)) == text

    @pytest.mark.parametrize("opcode", [0x0123, 0x5121, 0x800F, 0xE100, 0xF0FF])
    def test_unknown(self, opcode):
        assert disassemble(decode(opcode)).startswith("UNKNOWN")
