import random

import pytest

from chipvm import Executor, Interpreter, MachineState


def assemble(*opcodes):
    """Pack 16-bit opcodes into big-endian ROM bytes."""
    out = bytearray()
    for op in opcodes:
        out += bytes([(op >> 8) & 0xFF, op & 0xFF])
    return bytes(out)


@pytest.fixture
def state():
    return MachineState()


@pytest.fixture
def executor():
    return Executor(rng=random.Random(1234))


@pytest.fixture
def interp(state, executor):
    return Interpreter(state, executor, trace=None)


@pytest.fixture
def load(interp):
    def _load(*opcodes):
        interp.load_program(assemble(*opcodes))
        return interp
    return _load
