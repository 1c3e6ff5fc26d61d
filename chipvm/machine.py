"""
Machine state for one CHIP-8 instance.

A MachineState owns its Memory, registers, call stack, timers, keypad and
framebuffer. Nothing here is global: every emulated machine is a separate
instance and the executor receives it explicitly.
"""
from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Iterator, List, Optional

from .constants import (NUM_KEYS, NUM_REGISTERS, SCREEN_H, SCREEN_W,
                        STACK_DEPTH, START_ADDRESS)
from .errors import PixelOutOfRange, StackOverflow, StackUnderflow
from .memory import Memory


class RunState(enum.Enum):
    RUNNING = "running"
    PAUSED = "paused"
    HALTED = "halted"


class CallStack:
    """Bounded LIFO of return addresses."""

    def __init__(self, capacity: int = STACK_DEPTH):
        self.capacity = capacity
        self._entries: List[int] = []

    def __len__(self) -> int:
        return len(self._entries)

    def push(self, addr: int) -> None:
        if len(self._entries) >= self.capacity:
            raise StackOverflow(self.capacity)
        self._entries.append(addr)

    def pop(self) -> int:
        if not self._entries:
            raise StackUnderflow()
        return self._entries.pop()

    def peek(self) -> Optional[int]:
        return self._entries[-1] if self._entries else None

    def clear(self) -> None:
        self._entries.clear()


class Framebuffer:
    """Monochrome pixel grid, row-major, origin top-left."""

    def __init__(self, width: int = SCREEN_W, height: int = SCREEN_H):
        self.width = width
        self.height = height
        self.pixels: List[bool] = [False] * (width * height)
        # set by CLS/DRW, cleared by whoever presents the frame
        self.dirty = True

    def clear(self) -> None:
        self.pixels = [False] * (self.width * self.height)
        self.dirty = True

    def _check(self, x: int, y: int) -> None:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise PixelOutOfRange(x, y, self.width, self.height)

    def get(self, x: int, y: int) -> bool:
        self._check(x, y)
        return self.pixels[y * self.width + x]

    def xor(self, x: int, y: int) -> bool:
        """Flip pixel (x, y) and report whether it was turned off."""
        self._check(x, y)
        idx = y * self.width + x
        was_on = self.pixels[idx]
        self.pixels[idx] = not was_on
        return was_on

    def rows(self) -> Iterator[List[bool]]:
        for y in range(self.height):
            yield self.pixels[y * self.width:(y + 1) * self.width]

    def lit(self) -> int:
        return sum(self.pixels)


class Keypad:
    """16-key hexadecimal keypad, written by the host input layer."""

    def __init__(self):
        self.keys: List[bool] = [False] * NUM_KEYS

    def press(self, key: int) -> None:
        self.keys[key & 0xF] = True

    def release(self, key: int) -> None:
        self.keys[key & 0xF] = False

    def set(self, key: int, is_down: bool) -> None:
        self.keys[key & 0xF] = is_down

    def is_pressed(self, key: int) -> bool:
        return self.keys[key & 0xF]

    def first_pressed(self) -> Optional[int]:
        for i, down in enumerate(self.keys):
            if down:
                return i
        return None

    def clear(self) -> None:
        self.keys = [False] * NUM_KEYS


@dataclass
class MachineState:
    memory: Memory = field(default_factory=Memory)
    V: List[int] = field(default_factory=lambda: [0] * NUM_REGISTERS)  # registers V0..VF
    I: int = 0
    pc: int = START_ADDRESS
    stack: CallStack = field(default_factory=CallStack)
    delay_timer: int = 0
    sound_timer: int = 0
    display: Framebuffer = field(default_factory=Framebuffer)
    keypad: Keypad = field(default_factory=Keypad)
    run_state: RunState = RunState.RUNNING

    def __post_init__(self):
        self.memory.load_font()

    def reset(self) -> None:
        """Back to power-on state. The loaded program is discarded."""
        self.memory.clear()
        self.memory.load_font()
        self.V = [0] * NUM_REGISTERS
        self.I = 0
        self.pc = START_ADDRESS
        self.stack.clear()
        self.delay_timer = 0
        self.sound_timer = 0
        self.display.clear()
        self.keypad.clear()
        self.run_state = RunState.RUNNING

    def load_program(self, data: bytes) -> int:
        return self.memory.load_program(data)

    # =============== Timers ===============
    def set_delay_timer(self, value: int) -> None:
        self.delay_timer = value & 0xFF

    def set_sound_timer(self, value: int) -> None:
        self.sound_timer = value & 0xFF

    def tick_timers(self) -> None:
        """Called by the host at 60 Hz, never by the executor."""
        if self.delay_timer > 0:
            self.delay_timer -= 1
        if self.sound_timer > 0:
            self.sound_timer -= 1

    @property
    def beeping(self) -> bool:
        return self.sound_timer > 0
