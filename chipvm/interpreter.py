"""
Fetch-decode-execute loop.

The interpreter owns no semantics of its own: it fetches two bytes at PC,
advances PC, decodes, hands the instruction to the executor and reports
what happened. Any fault halts the machine and is re-raised with the
faulting PC and opcode attached.
"""
from __future__ import annotations

import logging
from typing import Callable, Optional

from .decoder import Instruction, decode, disassemble
from .errors import Chip8Error
from .executor import Executor
from .machine import MachineState, RunState

logger = logging.getLogger(__name__)

TraceHook = Callable[[int, Instruction], None]


def log_trace(pc: int, inst: Instruction) -> None:
    """Default trace sink: one DEBUG line per executed instruction."""
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("Address: 0x%04X, Opcode: 0x%04X Desc: %s",
                     pc, inst.opcode, disassemble(inst))


class Interpreter:
    def __init__(self, state: Optional[MachineState] = None,
                 executor: Optional[Executor] = None,
                 trace: Optional[TraceHook] = log_trace):
        self.state = state or MachineState()
        self.executor = executor or Executor()
        self.trace = trace
        self.fault: Optional[Chip8Error] = None
        self.cycles = 0

    # =============== Run state ===============
    @property
    def run_state(self) -> RunState:
        return self.state.run_state

    @property
    def halted(self) -> bool:
        return self.state.run_state is RunState.HALTED

    def toggle_pause(self) -> RunState:
        if self.state.run_state is RunState.RUNNING:
            self.state.run_state = RunState.PAUSED
            logger.info("Paused")
        elif self.state.run_state is RunState.PAUSED:
            self.state.run_state = RunState.RUNNING
            logger.info("Resumed")
        return self.state.run_state

    def halt(self) -> None:
        if not self.halted:
            logger.info("Halted after %d cycles", self.cycles)
        self.state.run_state = RunState.HALTED

    def load_program(self, data: bytes) -> int:
        """Reset the machine to power-on state and load a new ROM."""
        self.state.reset()
        self.cycles = 0
        self.fault = None
        size = self.state.load_program(data)
        logger.info("ROM loaded (%d bytes)", size)
        return size

    def tick_timers(self) -> None:
        """60 Hz timer tick from the host. Timers stay frozen unless RUNNING."""
        if self.state.run_state is RunState.RUNNING:
            self.state.tick_timers()

    # =============== Core cycle ===============
    def step(self) -> bool:
        """Run one cycle if RUNNING. Returns True when an instruction ran."""
        state = self.state
        if state.run_state is not RunState.RUNNING:
            return False

        pc = state.pc
        opcode = None
        try:
            opcode = state.memory.read_word(pc)
            state.pc = (pc + 2) & 0xFFFF
            inst = decode(opcode)
            if self.trace is not None:
                self.trace(pc, inst)
            self.executor.execute(inst, state, state.memory)
        except Chip8Error as err:
            # leave PC on the faulting instruction
            state.pc = pc
            err.pc = pc
            if opcode is not None:
                err.opcode = opcode
            self.fault = err
            state.run_state = RunState.HALTED
            logger.error("Fault: %s", err)
            raise
        self.cycles += 1
        return True

    def run(self, poll: Optional[Callable[["Interpreter"], None]] = None,
            present: Optional[Callable[["Interpreter"], None]] = None,
            max_cycles: Optional[int] = None) -> None:
        """Cooperative loop: poll, maybe step, present, until HALTED.

        ``poll`` and ``present`` are called once per iteration even while
        paused. ``max_cycles`` halts the machine after that many executed
        instructions.
        """
        while not self.halted:
            if poll is not None:
                poll(self)
                if self.halted:
                    break
            self.step()
            if present is not None:
                present(self)
            if max_cycles is not None and self.cycles >= max_cycles:
                self.halt()
