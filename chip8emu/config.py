"""Runtime configuration.

Everything here is resolved once, from the command line, before the machine
is built. There is no reconfiguration while a program runs.
"""

import argparse
from dataclasses import dataclass
from typing import Optional, Tuple

from .constants import TIMER_HZ
from .errors import ConfigError

Color = Tuple[int, int, int, int]

DEFAULT_INSTR_RATE = 700
DEFAULT_SCALE = 10
DEFAULT_FOREGROUND: Color = (255, 255, 255, 255)  # white
DEFAULT_BACKGROUND: Color = (0, 0, 0, 255)        # black


@dataclass
class Config:
    rom_path: str
    instr_rate: int = DEFAULT_INSTR_RATE   # instructions per second
    scale: int = DEFAULT_SCALE             # window pixels per CHIP-8 pixel
    foreground: Color = DEFAULT_FOREGROUND
    background: Color = DEFAULT_BACKGROUND
    seed: Optional[int] = None             # None = seeded from the clock
    debug: bool = False
    show_stats: bool = False

    def __post_init__(self):
        # below one instruction per frame the CPU would never run
        if self.instr_rate < TIMER_HZ:
            raise ConfigError(
                f"instruction rate must be at least {TIMER_HZ}/s, got {self.instr_rate}"
            )
        if self.scale <= 0:
            raise ConfigError(f"scale factor must be positive, got {self.scale}")

    @property
    def instructions_per_frame(self) -> int:
        return self.instr_rate // TIMER_HZ


def parse_color(text: str) -> Color:
    """Parse ``RRGGBB`` or ``RRGGBBAA`` (optionally prefixed with ``#`` or ``0x``)."""
    value = text.strip().lower()
    for prefix in ("#", "0x"):
        if value.startswith(prefix):
            value = value[len(prefix):]
            break
    if len(value) == 6:
        value += "ff"
    if len(value) != 8:
        raise ConfigError(f"Invalid color {text!r}, expected RRGGBB or RRGGBBAA")
    try:
        rgba = int(value, 16)
    except ValueError as e:
        raise ConfigError(f"Invalid color {text!r}") from e
    return ((rgba >> 24) & 0xFF, (rgba >> 16) & 0xFF, (rgba >> 8) & 0xFF, rgba & 0xFF)


def _color_arg(text):
    try:
        return parse_color(text)
    except ConfigError as e:
        raise argparse.ArgumentTypeError(str(e)) from e


def build_parser():
    parser = argparse.ArgumentParser(prog="chip8emu", description="CHIP-8 emulator")
    parser.add_argument("rom", help="path to the CHIP-8 program image")
    parser.add_argument("-r", "--rate", type=int, default=DEFAULT_INSTR_RATE,
                        help="instructions per second (default: %(default)s)")
    parser.add_argument("-s", "--scale", type=int, default=DEFAULT_SCALE,
                        help="window pixels per CHIP-8 pixel (default: %(default)s)")
    parser.add_argument("--fg", type=_color_arg, default=DEFAULT_FOREGROUND,
                        help="foreground color, RRGGBB[AA] (default: ffffff)")
    parser.add_argument("--bg", type=_color_arg, default=DEFAULT_BACKGROUND,
                        help="background color, RRGGBB[AA] (default: 000000)")
    parser.add_argument("--seed", type=int, default=None,
                        help="random seed for CXNN (default: time based)")
    parser.add_argument("--debug", action="store_true",
                        help="log every instruction (F1 toggles at runtime)")
    parser.add_argument("--show-stats", action="store_true",
                        help="draw FPS and cycles/s in the window")
    return parser


def parse_args(argv=None) -> Config:
    args = build_parser().parse_args(argv)
    return Config(
        rom_path=args.rom,
        instr_rate=args.rate,
        scale=args.scale,
        foreground=args.fg,
        background=args.bg,
        seed=args.seed,
        debug=args.debug,
        show_stats=args.show_stats,
    )
