# CHIP8 Virtual Machine state:
# Memory - 4096 bytes: the fonts (0x000-0x04F) and the inputted ROM (0x200 upward).
# Registers - V0..VF (VF doubles as the carry/borrow/collision flag), I, PC, stack + SP.
# Timers - delay and sound, both count down at 60Hz.
# Output - 64x32 display (array of pixels that are either on or off).
# Input - 16 key states, written by the front-end and read by the interpreter.

import enum
import random
import time

import numpy as np

from .constants import (
    DISPLAY_HEIGHT, DISPLAY_SIZE, DISPLAY_WIDTH, KEY_COUNT, MEMORY_SIZE,
    PROGRAM_START, REGISTER_COUNT, STACK_SIZE,
)
from .loader import load_font, load_program


class State(enum.Enum):
    RUNNING = "running"
    PAUSED = "paused"
    HALTED = "halted"


class KeyWait(enum.Enum):
    """Progress of a pending FX0A (wait for key) instruction."""
    AWAITING_PRESS = 0
    AWAITING_RELEASE = 1


class Machine:

    def __init__(self, program=b"", seed=None):
        self.program = bytes(program)
        self.seed = time.time_ns() if seed is None else seed
        self.reset()

    def reset(self):
        # ---- CPU state ----
        self.memory = bytearray(MEMORY_SIZE)
        self.V = [0] * REGISTER_COUNT
        self.I = 0
        self.pc = PROGRAM_START
        self.stack = np.zeros(STACK_SIZE, dtype=np.uint16)
        self.sp = 0
        self.delay_timer = 0
        self.sound_timer = 0

        # ---- I/O ----
        self.display = np.zeros(DISPLAY_SIZE, dtype=bool)
        self.keypad = np.zeros(KEY_COUNT, dtype=bool)
        self.should_draw = True

        # FX0A spans several steps; the captured key lives here between them
        self.key_wait = KeyWait.AWAITING_PRESS
        self.wait_key = None

        self.rng = random.Random(self.seed)
        self.state = State.RUNNING

        load_font(self.memory)
        load_program(self.memory, self.program)

    # ---- Input ----
    def press(self, key):
        self.keypad[key & 0xF] = True

    def release(self, key):
        self.keypad[key & 0xF] = False

    # ---- Output ----
    def pixel(self, x, y):
        return bool(self.display[(y % DISPLAY_HEIGHT) * DISPLAY_WIDTH + (x % DISPLAY_WIDTH)])

    def screen(self):
        """Display as a (rows, columns) view; index [y, x]."""
        return self.display.reshape(DISPLAY_HEIGHT, DISPLAY_WIDTH)

    def __repr__(self):
        return (f"Machine(pc=0x{self.pc:03X}, I=0x{self.I:03X}, sp={self.sp}, "
                f"state={self.state.value})")
