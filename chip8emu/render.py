# Framebuffer -> pixels. Kept free of pyglet so it can be used (and tested) headless.

import numpy as np


def render_frame(screen, foreground, background, scale):
    """Turn the (32, 64) boolean screen into scaled RGBA bytes, bottom row first."""
    fg = np.array(foreground, dtype=np.uint8)
    bg = np.array(background, dtype=np.uint8)
    # pyglet images start at the bottom-left corner
    small = np.where(screen[::-1, :, None], fg, bg).astype(np.uint8)
    if scale != 1:
        small = np.repeat(np.repeat(small, scale, axis=0), scale, axis=1)
    return small.tobytes()
