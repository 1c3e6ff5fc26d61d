"""Fault kinds raised by the CHIP-8 core.

Every fault is fatal to the cycle that raised it. The interpreter stamps
``pc`` and ``opcode`` on the exception before re-raising it to the host.
"""
from __future__ import annotations

from typing import Optional


class Chip8Error(Exception):
    """Base class for all machine faults."""

    def __init__(self, message: str):
        super().__init__(message)
        self.pc: Optional[int] = None
        self.opcode: Optional[int] = None

    def __str__(self) -> str:
        msg = super().__str__()
        if self.pc is not None and self.opcode is not None:
            msg = f"{msg} (opcode {self.opcode:04X} at PC {self.pc:03X})"
        elif self.pc is not None:
            msg = f"{msg} (at PC {self.pc:03X})"
        return msg


class ProgramTooLarge(Chip8Error):
    def __init__(self, size: int, limit: int):
        super().__init__(f"ROM is too large for memory: {size} bytes, max {limit}")
        self.size = size
        self.limit = limit


class AddressOutOfRange(Chip8Error):
    def __init__(self, address: int, capacity: int):
        super().__init__(f"Address {address:#05x} outside memory of {capacity} bytes")
        self.address = address
        self.capacity = capacity


class StackOverflow(Chip8Error):
    def __init__(self, capacity: int):
        super().__init__(f"Stack overflow on CALL (depth {capacity})")
        self.capacity = capacity


class StackUnderflow(Chip8Error):
    def __init__(self):
        super().__init__("Stack underflow on RET")


class UnimplementedOpcode(Chip8Error):
    def __init__(self, opcode: int):
        super().__init__(f"Unknown opcode: {opcode:04X}")
        self.opcode = opcode


class PixelOutOfRange(Chip8Error):
    def __init__(self, x: int, y: int, width: int, height: int):
        super().__init__(f"Pixel ({x}, {y}) outside {width}x{height} display")
        self.x = x
        self.y = y
