# pyglet front-end: owns the window, the 60Hz frame clock, keyboard input and the beep.
# We subclass pyglet.window.Window and override the event handlers we need.
# The machine itself never touches pyglet; this module only reads the display and
# sound timer and writes the keypad.

import pyglet
from pyglet.media import synthesis
from pyglet.window import key

from . import timers
from .audio import Beeper
from .constants import DISPLAY_HEIGHT, DISPLAY_WIDTH, TIMER_HZ
from .errors import Chip8Error
from .logger import logger, toggle_logs
from .render import render_frame

#map binding keys
#   1 2 3 C        1 2 3 4
#   4 5 6 D   <-   Q W E R
#   7 8 9 E        A S D F
#   A 0 B F        Z X C V
keymap = {
    key._1: 0x1, key._2: 0x2, key._3: 0x3, key._4: 0xC,
    key.Q: 0x4, key.W: 0x5, key.E: 0x6, key.R: 0xD,
    key.A: 0x7, key.S: 0x8, key.D: 0x9, key.F: 0xE,
    key.Z: 0xA, key.X: 0x0, key.C: 0xB, key.V: 0xF,
}


class Chip8Window(pyglet.window.Window):

    def __init__(self, driver, config):
        self.window_width = DISPLAY_WIDTH * config.scale
        self.window_height = DISPLAY_HEIGHT * config.scale
        super().__init__(
            width=self.window_width,
            height=self.window_height,
            caption="CHIP-8 Emulator",
            vsync=False
        )

        self.driver = driver
        self.machine = driver.machine
        self.config = config
        self.exit_code = 0

        # creating ImageData once and updating it in place every frame
        self.image = pyglet.image.ImageData(
            self.window_width,
            self.window_height,
            'RGBA',
            self._frame_bytes()
        )

        self.beeper = Beeper(self._make_beep)

        # Performance tracking
        self.show_stats = config.show_stats
        self._fps_counter = 0
        self._last_cycles = 0
        self.fps_label = pyglet.text.Label(
            "FPS: 0", font_size=12, x=5, y=self.window_height - 15,
            anchor_x='left', anchor_y='center', color=(255, 0, 0, 255)
        )
        self.cps_label = pyglet.text.Label(
            "Cycles/s: 0", font_size=12, x=5, y=self.window_height - 30,
            anchor_x='left', anchor_y='center', color=(255, 0, 0, 255)
        )

        # Schedule the loops
        pyglet.clock.schedule_interval(self._frame, 1.0 / TIMER_HZ)
        if self.show_stats:
            pyglet.clock.schedule_interval(self._update_bench, 1.0)

    # ---- frame (60Hz): instructions, then one timer tick, then audio ----
    def _frame(self, dt):
        try:
            self.driver.run_frame()
        except Chip8Error as e:
            logger.error("Emulation error: %s", e)
            self.driver.halt()
            self.exit_code = 1
            self.close()
            return

        self.beeper.update(timers.sound_active(self.machine))

    def _update_bench(self, dt):
        self.fps_label.text = f"FPS: {self._fps_counter / dt:.1f}"
        cycles = self.driver.interpreter.cycles
        self.cps_label.text = f"Cycles/s: {int((cycles - self._last_cycles) / dt)}"
        self._fps_counter = 0
        self._last_cycles = cycles

    # ---- sound ----
    def _make_beep(self, finished, duration=0.2, frequency=440):
        wave = synthesis.Sine(duration=duration, frequency=frequency, sample_rate=44100)
        player = pyglet.media.Player()
        player.queue(wave)
        player.on_eos = lambda: finished(player)
        return player

    # ---- Drawing ----
    def _frame_bytes(self):
        return render_frame(
            self.machine.screen(), self.config.foreground, self.config.background, self.config.scale
        )

    def on_draw(self):
        self.clear()

        if self.machine.should_draw:
            self.image.set_data('RGBA', self.window_width * 4, self._frame_bytes())
            self.machine.should_draw = False
        self.image.blit(0, 0)

        if self.show_stats:
            self.fps_label.draw()
            self.cps_label.draw()
        self._fps_counter += 1

    # ---- Input ----
    def on_key_press(self, symbol, modifiers):
        #@Override
        if symbol == key.ESCAPE:
            self.close()
        elif symbol == key.SPACE:
            self.driver.toggle_pause()
        elif symbol == key.F1:
            toggle_logs()
        elif symbol in keymap:
            self.machine.press(keymap[symbol])

    def on_key_release(self, symbol, modifiers):
        #@Override
        if symbol in keymap:
            self.machine.release(keymap[symbol])

    def close(self):
        pyglet.clock.unschedule(self._frame)
        pyglet.clock.unschedule(self._update_bench)
        self.beeper.stop()
        super().close()
