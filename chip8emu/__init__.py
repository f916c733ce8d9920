"""CHIP-8 virtual machine: interpreter core plus a pyglet front-end."""

from .cpu import Interpreter, decode
from .driver import Driver
from .errors import (
    Chip8Error, ConfigError, RomLoadError, StackOverflowError, StackUnderflowError,
)
from .machine import KeyWait, Machine, State

__version__ = "0.1.0"

__all__ = [
    "Chip8Error", "ConfigError", "Driver", "Interpreter", "KeyWait", "Machine",
    "RomLoadError", "StackOverflowError", "StackUnderflowError", "State", "decode",
]
