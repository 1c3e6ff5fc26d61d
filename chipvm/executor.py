"""
Opcode semantics for the classic CHIP-8 instruction set.

Dispatch is table driven: the top nibble selects a handler, and the 0x0,
0x8, 0xE and 0xF families sub-dispatch on the low nibble or low byte.
Anything not in the tables raises UnimplementedOpcode.

Notes:
- PC has already been advanced past the instruction when a handler runs.
- FX55 / FX65 leave I alone unless legacy_store is set, in which case
  I is incremented by X + 1 (original COSMAC VIP quirk).
- DXYN clips at the screen edges; the start position wraps.
- Handlers validate every address before mutating state, so a faulting
  instruction leaves the machine as it found it.
"""
from __future__ import annotations

import random
from typing import Callable, Dict, Optional

from .constants import FONT_ADDRESS, FONT_GLYPH_SIZE
from .decoder import Instruction
from .errors import UnimplementedOpcode
from .machine import MachineState
from .memory import Memory

Handler = Callable[[Instruction, MachineState, Memory], None]


class Executor:
    def __init__(self, legacy_store: bool = False,
                 rng: Optional[random.Random] = None):
        self.legacy_store = legacy_store
        self.rng = rng or random.Random()

        self._families: Dict[int, Handler] = {
            0x0: self._sys,
            0x1: self._jp,
            0x2: self._call,
            0x3: self._se_byte,
            0x4: self._sne_byte,
            0x5: self._se_reg,
            0x6: self._ld_byte,
            0x7: self._add_byte,
            0x8: self._alu,
            0x9: self._sne_reg,
            0xA: self._ld_i,
            0xB: self._jp_v0,
            0xC: self._rnd,
            0xD: self._drw,
            0xE: self._keys,
            0xF: self._misc,
        }
        self._sys_ops: Dict[int, Handler] = {
            0x00E0: self._cls,
            0x00EE: self._ret,
        }
        self._alu_ops: Dict[int, Handler] = {
            0x0: self._alu_ld,
            0x1: self._alu_or,
            0x2: self._alu_and,
            0x3: self._alu_xor,
            0x4: self._alu_add,
            0x5: self._alu_sub,
            0x6: self._alu_shr,
            0x7: self._alu_subn,
            0xE: self._alu_shl,
        }
        self._key_ops: Dict[int, Handler] = {
            0x9E: self._skp,
            0xA1: self._sknp,
        }
        self._misc_ops: Dict[int, Handler] = {
            0x07: self._ld_vx_dt,
            0x0A: self._ld_vx_k,
            0x15: self._ld_dt_vx,
            0x18: self._ld_st_vx,
            0x1E: self._add_i_vx,
            0x29: self._ld_f_vx,
            0x33: self._ld_b_vx,
            0x55: self._store_regs,
            0x65: self._load_regs,
        }

    def execute(self, inst: Instruction, state: MachineState,
                memory: Optional[Memory] = None) -> None:
        if memory is None:
            memory = state.memory
        self._families[inst.family](inst, state, memory)

    @staticmethod
    def _sub_dispatch(table: Dict[int, Handler], key: int, inst: Instruction,
                      state: MachineState, memory: Memory) -> None:
        handler = table.get(key)
        if handler is None:
            raise UnimplementedOpcode(inst.opcode)
        handler(inst, state, memory)

    @staticmethod
    def _skip_if(state: MachineState, cond: bool) -> None:
        if cond:
            state.pc = (state.pc + 2) & 0xFFFF

    # =============== 0x0 family ===============
    def _sys(self, inst, state, memory):
        # 0NNN (RCA 1802 call) is not supported
        self._sub_dispatch(self._sys_ops, inst.opcode, inst, state, memory)

    def _cls(self, inst, state, memory):  # 00E0
        state.display.clear()

    def _ret(self, inst, state, memory):  # 00EE
        state.pc = state.stack.pop()

    # =============== Flow control ===============
    def _jp(self, inst, state, memory):  # 1NNN
        state.pc = inst.nnn

    def _call(self, inst, state, memory):  # 2NNN
        state.stack.push(state.pc)
        state.pc = inst.nnn

    def _jp_v0(self, inst, state, memory):  # BNNN
        state.pc = (inst.nnn + state.V[0]) & 0xFFF

    def _se_byte(self, inst, state, memory):  # 3XNN
        self._skip_if(state, state.V[inst.x] == inst.nn)

    def _sne_byte(self, inst, state, memory):  # 4XNN
        self._skip_if(state, state.V[inst.x] != inst.nn)

    def _se_reg(self, inst, state, memory):  # 5XY0
        if inst.n != 0:
            raise UnimplementedOpcode(inst.opcode)
        self._skip_if(state, state.V[inst.x] == state.V[inst.y])

    def _sne_reg(self, inst, state, memory):  # 9XY0
        if inst.n != 0:
            raise UnimplementedOpcode(inst.opcode)
        self._skip_if(state, state.V[inst.x] != state.V[inst.y])

    # =============== Registers ===============
    def _ld_byte(self, inst, state, memory):  # 6XNN
        state.V[inst.x] = inst.nn

    def _add_byte(self, inst, state, memory):  # 7XNN, VF untouched
        state.V[inst.x] = (state.V[inst.x] + inst.nn) & 0xFF

    def _ld_i(self, inst, state, memory):  # ANNN
        state.I = inst.nnn

    def _rnd(self, inst, state, memory):  # CXNN
        state.V[inst.x] = self.rng.randint(0, 255) & inst.nn

    # =============== 0x8 family: ALU ===============
    # VF is written after the result so that X == F keeps the flag.
    def _alu(self, inst, state, memory):
        self._sub_dispatch(self._alu_ops, inst.n, inst, state, memory)

    def _alu_ld(self, inst, state, memory):  # 8XY0
        state.V[inst.x] = state.V[inst.y]

    def _alu_or(self, inst, state, memory):  # 8XY1
        state.V[inst.x] |= state.V[inst.y]

    def _alu_and(self, inst, state, memory):  # 8XY2
        state.V[inst.x] &= state.V[inst.y]

    def _alu_xor(self, inst, state, memory):  # 8XY3
        state.V[inst.x] ^= state.V[inst.y]

    def _alu_add(self, inst, state, memory):  # 8XY4
        total = state.V[inst.x] + state.V[inst.y]
        state.V[inst.x] = total & 0xFF
        state.V[0xF] = 1 if total > 0xFF else 0

    def _alu_sub(self, inst, state, memory):  # 8XY5
        vx, vy = state.V[inst.x], state.V[inst.y]
        state.V[inst.x] = (vx - vy) & 0xFF
        state.V[0xF] = 1 if vx >= vy else 0

    def _alu_shr(self, inst, state, memory):  # 8XY6
        vx = state.V[inst.x]
        state.V[inst.x] = vx >> 1
        state.V[0xF] = vx & 0x1

    def _alu_subn(self, inst, state, memory):  # 8XY7
        vx, vy = state.V[inst.x], state.V[inst.y]
        state.V[inst.x] = (vy - vx) & 0xFF
        state.V[0xF] = 1 if vy >= vx else 0

    def _alu_shl(self, inst, state, memory):  # 8XYE
        vx = state.V[inst.x]
        state.V[inst.x] = (vx << 1) & 0xFF
        state.V[0xF] = (vx >> 7) & 0x1

    # =============== Display ===============
    def _drw(self, inst, state, memory):  # DXYN
        display = state.display
        x0 = state.V[inst.x] % display.width
        y0 = state.V[inst.y] % display.height
        # rows below the bottom edge are clipped and never fetched
        sprites = memory.read_block(state.I, min(inst.n, display.height - y0))
        state.V[0xF] = 0
        for row, sprite in enumerate(sprites):
            py = y0 + row
            for col in range(8):
                px = x0 + col
                if px >= display.width:
                    break
                if (sprite >> (7 - col)) & 1:
                    if display.xor(px, py):
                        state.V[0xF] = 1
        display.dirty = True

    # =============== 0xE family: keypad ===============
    def _keys(self, inst, state, memory):
        self._sub_dispatch(self._key_ops, inst.nn, inst, state, memory)

    def _skp(self, inst, state, memory):  # EX9E
        self._skip_if(state, state.keypad.is_pressed(state.V[inst.x]))

    def _sknp(self, inst, state, memory):  # EXA1
        self._skip_if(state, not state.keypad.is_pressed(state.V[inst.x]))

    # =============== 0xF family ===============
    def _misc(self, inst, state, memory):
        self._sub_dispatch(self._misc_ops, inst.nn, inst, state, memory)

    def _ld_vx_dt(self, inst, state, memory):  # FX07
        state.V[inst.x] = state.delay_timer

    def _ld_vx_k(self, inst, state, memory):  # FX0A
        key = state.keypad.first_pressed()
        if key is None:
            # stall: run this instruction again next cycle
            state.pc = (state.pc - 2) & 0xFFFF
        else:
            state.V[inst.x] = key

    def _ld_dt_vx(self, inst, state, memory):  # FX15
        state.set_delay_timer(state.V[inst.x])

    def _ld_st_vx(self, inst, state, memory):  # FX18
        state.set_sound_timer(state.V[inst.x])

    def _add_i_vx(self, inst, state, memory):  # FX1E
        state.I = (state.I + state.V[inst.x]) & 0xFFFF

    def _ld_f_vx(self, inst, state, memory):  # FX29
        state.I = FONT_ADDRESS + (state.V[inst.x] & 0xF) * FONT_GLYPH_SIZE

    def _ld_b_vx(self, inst, state, memory):  # FX33
        val = state.V[inst.x]
        memory.check_range(state.I, 3)
        memory.write_byte(state.I, val // 100)
        memory.write_byte(state.I + 1, (val // 10) % 10)
        memory.write_byte(state.I + 2, val % 10)

    def _store_regs(self, inst, state, memory):  # FX55
        memory.check_range(state.I, inst.x + 1)
        for i in range(inst.x + 1):
            memory.write_byte(state.I + i, state.V[i])
        if self.legacy_store:
            state.I = (state.I + inst.x + 1) & 0xFFFF

    def _load_regs(self, inst, state, memory):  # FX65
        memory.check_range(state.I, inst.x + 1)
        for i in range(inst.x + 1):
            state.V[i] = memory.read_byte(state.I + i)
        if self.legacy_store:
            state.I = (state.I + inst.x + 1) & 0xFFFF
