"""CHIP-8 virtual machine core."""
from .decoder import Instruction, decode, disassemble
from .errors import (AddressOutOfRange, Chip8Error, PixelOutOfRange, ProgramTooLarge,
                     StackOverflow, StackUnderflow, UnimplementedOpcode)
from .executor import Executor
from .interpreter import Interpreter
from .machine import CallStack, Framebuffer, Keypad, MachineState, RunState
from .memory import Memory

__version__ = "0.1.0"

__all__ = [
    "AddressOutOfRange", "CallStack", "Chip8Error", "Executor", "Framebuffer",
    "Instruction", "Interpreter", "Keypad", "MachineState", "Memory",
    "PixelOutOfRange",
    "ProgramTooLarge", "RunState", "StackOverflow", "StackUnderflow",
    "UnimplementedOpcode", "decode", "disassemble",
]
