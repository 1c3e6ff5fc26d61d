"""
Command line entry point.

Run:
  chipvm path/to/rom [--scale 20] [--clock 700] [--tone 440] [--fg FFFFFF] [--bg 000000]
"""
from __future__ import annotations

import logging
import sys
import time
from pathlib import Path
from typing import List, Optional

from .config import Config, parse_args
from .errors import Chip8Error
from .executor import Executor
from .interpreter import Interpreter
from .machine import MachineState

logger = logging.getLogger(__name__)


def build_interpreter(config: Config, rom: bytes) -> Interpreter:
    """Create a machine with ``rom`` loaded. Raises ProgramTooLarge."""
    interp = Interpreter(MachineState(), Executor(legacy_store=config.legacy_store))
    interp.load_program(rom)
    return interp


def run_frontend(interp: Interpreter, config: Config) -> None:
    from .frontend import Frontend

    frontend = Frontend(config)
    display = interp.state.display
    frontend.open(display.width, display.height)

    last_timer_tick = time.perf_counter()
    timer_period = 1.0 / config.timer_hz

    try:
        while not interp.halted:
            frontend.handle_events(interp)
            if interp.halted:
                break

            # Run CPU cycles for this frame
            for _ in range(config.cycles_per_frame):
                if not interp.step():
                    break

            # Timer update at ~60 Hz
            now = time.perf_counter()
            if now - last_timer_tick >= timer_period:
                interp.tick_timers()
                last_timer_tick = now

            frontend.play_sound_if_needed(interp)
            frontend.render(interp)
            frontend.tick(config.timer_hz)
    finally:
        frontend.close()


def main(argv: Optional[List[str]] = None) -> int:
    rom_path, config = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if config.verbose else logging.INFO,
        format="[%(levelname)s] %(message)s")

    try:
        rom = Path(rom_path).read_bytes()
    except OSError as e:
        logger.error("ROM file %s is invalid or does not exist: %s", rom_path, e)
        return 1

    try:
        interp = build_interpreter(config, rom)
    except Chip8Error as e:
        logger.error("Could not load %s: %s", rom_path, e)
        return 1

    try:
        run_frontend(interp, config)
    except Chip8Error:
        # already logged by the interpreter
        return 1
    except KeyboardInterrupt:
        print("\nExiting.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
