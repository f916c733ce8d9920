# Execution driver: one frame = a fixed batch of instructions, then one timer tick.
# Pacing (sleeping to 60Hz), drawing and input polling belong to the front-end.

from . import timers
from .logger import logger
from .machine import State


class Driver:

    def __init__(self, machine, interpreter, instructions_per_frame):
        self.machine = machine
        self.interpreter = interpreter
        self.instructions_per_frame = instructions_per_frame

    def run_frame(self):
        """Run one frame's worth of instructions followed by a single timer tick.

        Returns the number of instructions executed; 0 while paused or halted.
        Stack overflow/underflow propagate to the caller.
        """
        m = self.machine
        if m.state is not State.RUNNING:
            return 0

        for _ in range(self.instructions_per_frame):
            self.interpreter.step(m)

        timers.tick(m)
        return self.instructions_per_frame

    def toggle_pause(self):
        m = self.machine
        if m.state is State.RUNNING:
            m.state = State.PAUSED
            logger.info("==Paused==")
        elif m.state is State.PAUSED:
            m.state = State.RUNNING
            logger.info("==Resumed==")
        return m.state

    def halt(self):
        self.machine.state = State.HALTED
