"""
Flat, bounds-checked CHIP-8 memory.

Layout (classic 4K machine):
  0x000-0x1FF  reserved for the interpreter; the font table lives here
  0x200-...    loaded program, followed by scratch space

Every access is checked: an address outside the buffer raises
AddressOutOfRange instead of wrapping.
"""
from __future__ import annotations

from .constants import FONT_ADDRESS, FONTSET, MEM_SIZE, START_ADDRESS
from .errors import AddressOutOfRange, ProgramTooLarge


class Memory:
    def __init__(self, capacity: int = MEM_SIZE):
        if capacity <= START_ADDRESS:
            raise ValueError(f"capacity must exceed {START_ADDRESS:#x}")
        self.capacity = capacity
        self._mem = bytearray(capacity)

    def __len__(self) -> int:
        return self.capacity

    @property
    def max_program_size(self) -> int:
        return self.capacity - START_ADDRESS

    def _check(self, addr: int) -> None:
        if not 0 <= addr < self.capacity:
            raise AddressOutOfRange(addr, self.capacity)

    # =============== Byte access ===============
    def read_byte(self, addr: int) -> int:
        self._check(addr)
        return self._mem[addr]

    def write_byte(self, addr: int, value: int) -> None:
        self._check(addr)
        self._mem[addr] = value & 0xFF

    def read_word(self, addr: int) -> int:
        """Read a big-endian 16-bit opcode."""
        hi = self.read_byte(addr)
        lo = self.read_byte(addr + 1)
        return (hi << 8) | lo

    def check_range(self, addr: int, length: int) -> None:
        """Raise AddressOutOfRange unless addr..addr+length-1 is all in memory."""
        if length:
            self._check(addr)
            self._check(addr + length - 1)

    def read_block(self, addr: int, length: int) -> bytes:
        self.check_range(addr, length)
        return bytes(self._mem[addr:addr + length])

    # =============== Loading ===============
    def load_font(self, font: bytes = FONTSET, addr: int = FONT_ADDRESS) -> None:
        end = addr + len(font)
        if end > START_ADDRESS:
            raise AddressOutOfRange(end - 1, START_ADDRESS)
        self._mem[addr:end] = font

    def load_program(self, data: bytes) -> int:
        """Copy a ROM image to 0x200 and return its size in bytes."""
        if len(data) > self.max_program_size:
            raise ProgramTooLarge(len(data), self.max_program_size)
        end = START_ADDRESS + len(data)
        self._mem[START_ADDRESS:end] = data
        return len(data)

    def clear(self) -> None:
        self._mem = bytearray(self.capacity)
