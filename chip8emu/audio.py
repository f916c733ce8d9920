# Beep control: one tone at a time, on while the sound timer is non-zero.
# The player itself comes from the front-end (pyglet), so this stays headless.


class Beeper:

    def __init__(self, make_player):
        self.make_player = make_player
        self.player = None

    def update(self, active):
        if active:
            if self.player is None:
                self.player = self.make_player(self._finished)
                self.player.play()
        else:
            self.stop()

    def stop(self):
        if self.player is not None:
            player, self.player = self.player, None
            player.pause()
            player.delete()

    def _finished(self, player):
        # the tone ran out on its own; a still-running timer starts a new one
        if self.player is player:
            self.player = None
        player.delete()
