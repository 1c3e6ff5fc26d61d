"""Opcode decoding and disassembly."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Instruction:
    opcode: int
    nnn: int  # 12-bit address
    nn: int   # 8-bit immediate
    n: int    # 4-bit immediate
    x: int    # register index
    y: int    # register index

    @property
    def family(self) -> int:
        """Top nibble, the primary dispatch key."""
        return (self.opcode >> 12) & 0xF


def decode(opcode: int) -> Instruction:
    opcode &= 0xFFFF
    return Instruction(
        opcode=opcode,
        nnn=opcode & 0x0FFF,
        nn=opcode & 0x00FF,
        n=opcode & 0x000F,
        x=(opcode >> 8) & 0x0F,
        y=(opcode >> 4) & 0x0F,
    )


_ALU_MNEMONICS = {
    0x0: "LD", 0x1: "OR", 0x2: "AND", 0x3: "XOR",
    0x4: "ADD", 0x5: "SUB", 0x6: "SHR", 0x7: "SUBN", 0xE: "SHL",
}

_F_FORMS = {
    0x07: "LD V{x:X}, DT",
    0x0A: "LD V{x:X}, K",
    0x15: "LD DT, V{x:X}",
    0x18: "LD ST, V{x:X}",
    0x1E: "ADD I, V{x:X}",
    0x29: "LD F, V{x:X}",
    0x33: "LD B, V{x:X}",
    0x55: "LD [I], V{x:X}",
    0x65: "LD V{x:X}, [I]",
}


def disassemble(inst: Instruction) -> str:
    """Mnemonic text for one instruction, e.g. ``DRW V0, V1, 5``."""
    f, x, y = inst.family, inst.x, inst.y
    if inst.opcode == 0x00E0:
        return "CLS"
    if inst.opcode == 0x00EE:
        return "RET"
    if f == 0x1:
        return f"JP {inst.nnn:#05x}"
    if f == 0x2:
        return f"CALL {inst.nnn:#05x}"
    if f == 0x3:
        return f"SE V{x:X}, {inst.nn:#04x}"
    if f == 0x4:
        return f"SNE V{x:X}, {inst.nn:#04x}"
    if f == 0x5 and inst.n == 0:
        return f"SE V{x:X}, V{y:X}"
    if f == 0x6:
        return f"LD V{x:X}, {inst.nn:#04x}"
    if f == 0x7:
        return f"ADD V{x:X}, {inst.nn:#04x}"
    if f == 0x8 and inst.n in _ALU_MNEMONICS:
        return f"{_ALU_MNEMONICS[inst.n]} V{x:X}, V{y:X}"
    if f == 0x9 and inst.n == 0:
        return f"SNE V{x:X}, V{y:X}"
    if f == 0xA:
        return f"LD I, {inst.nnn:#05x}"
    if f == 0xB:
        return f"JP V0, {inst.nnn:#05x}"
    if f == 0xC:
        return f"RND V{x:X}, {inst.nn:#04x}"
    if f == 0xD:
        return f"DRW V{x:X}, V{y:X}, {inst.n}"
    if f == 0xE and inst.nn == 0x9E:
        return f"SKP V{x:X}"
    if f == 0xE and inst.nn == 0xA1:
        return f"SKNP V{x:X}"
    if f == 0xF and inst.nn in _F_FORMS:
        return _F_FORMS[inst.nn].format(x=x)
    return f"UNKNOWN {inst.opcode:#06x}"
