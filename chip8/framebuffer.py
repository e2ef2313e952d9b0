# Output - 64x32 display (array of pixels in the on or off state (0 || 1)).
# Sprites are XORed on; any pixel turned off by a draw is a collision.

import numpy as np

from .config import HEIGHT, MAX_SPRITE_ROWS, WIDTH


class Framebuffer:
    """Monochrome pixel grid, indexed ``pixels[y, x]``."""

    def __init__(self, width=WIDTH, height=HEIGHT):
        self.width = width
        self.height = height
        self.pixels = np.zeros((height, width), dtype=np.uint8)
        self.dirty = True

    def clear(self):
        self.pixels[:] = 0
        self.dirty = True

    def draw(self, x, y, sprite):
        """XOR ``sprite`` (one byte per row, MSB leftmost) at (x, y).

        Every pixel wraps around the screen edges. Returns True if any
        pixel went from set to clear.
        """
        collision = False
        for row, line in enumerate(bytes(sprite[:MAX_SPRITE_ROWS])):
            if line == 0:
                continue
            py = (y + row) % self.height
            for bit in range(8):
                if line & (0x80 >> bit):
                    px = (x + bit) % self.width
                    if self.pixels[py, px]:
                        collision = True
                    self.pixels[py, px] ^= 1
        self.dirty = True
        return collision

    def pixel(self, x, y):
        return int(self.pixels[y % self.height, x % self.width])

    def snapshot(self):
        """Read-only copy of the grid for the renderer."""
        view = self.pixels.copy()
        view.flags.writeable = False
        return view

    def mark_clean(self):
        self.dirty = False

    def __str__(self):
        return "\n".join("".join("#" if p else "." for p in row) for row in self.pixels)
