# ---- timers ----
# Delay and sound timers count down once per 60Hz tick, independent of CPU speed.


def tick(m):
    if m.delay_timer > 0:
        m.delay_timer -= 1
    if m.sound_timer > 0:
        m.sound_timer -= 1


def sound_active(m):
    return m.sound_timer > 0
