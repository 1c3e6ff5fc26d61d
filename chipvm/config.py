"""Runtime configuration and command line parsing."""
from __future__ import annotations

import argparse
from dataclasses import dataclass
from typing import List, Optional, Tuple

Color = Tuple[int, int, int]


@dataclass
class Config:
    scale: int = 20
    clock_hz: int = 700
    timer_hz: int = 60
    tone_hz: int = 440
    fg_color: Color = (255, 255, 255)
    bg_color: Color = (0, 0, 0)
    # if True, FX55/FX65 increment I (original quirk)
    legacy_store: bool = False
    verbose: bool = False

    @property
    def cycles_per_frame(self) -> int:
        return max(1, self.clock_hz // self.timer_hz)


def parse_color(text: str) -> Color:
    """Parse ``RRGGBB`` or ``#RRGGBB`` into an RGB tuple."""
    value = text.lstrip("#")
    if len(value) != 6:
        raise argparse.ArgumentTypeError(f"invalid color {text!r}, expected RRGGBB")
    try:
        rgb = int(value, 16)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid color {text!r}, expected RRGGBB")
    return (rgb >> 16) & 0xFF, (rgb >> 8) & 0xFF, rgb & 0xFF


def positive_int(text: str) -> int:
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"{text!r} is not an integer")
    if value <= 0:
        raise argparse.ArgumentTypeError(f"{value} must be positive")
    return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="chipvm", description="CHIP-8 virtual machine")
    parser.add_argument("rom", help="Path to CHIP-8 ROM")
    parser.add_argument("--scale", type=positive_int, default=Config.scale,
                        help="Pixel scale factor (default %(default)s)")
    parser.add_argument("--clock", type=positive_int, default=Config.clock_hz,
                        help="CPU clock in Hz (default %(default)s)")
    parser.add_argument("--tone", type=positive_int, default=Config.tone_hz,
                        help="Beep tone frequency in Hz")
    parser.add_argument("--fg", type=parse_color, default=Config.fg_color,
                        help="Foreground color as RRGGBB (default FFFFFF)")
    parser.add_argument("--bg", type=parse_color, default=Config.bg_color,
                        help="Background color as RRGGBB (default 000000)")
    parser.add_argument("--legacy-store", action="store_true",
                        help="Use original FX55/FX65 quirk (I increments)")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Trace every instruction")
    return parser


def parse_args(argv: Optional[List[str]] = None) -> Tuple[str, Config]:
    args = build_parser().parse_args(argv)
    config = Config(
        scale=args.scale,
        clock_hz=args.clock,
        tone_hz=args.tone,
        fg_color=args.fg,
        bg_color=args.bg,
        legacy_store=args.legacy_store,
        verbose=args.verbose,
    )
    return args.rom, config
