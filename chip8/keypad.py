# Input - store key input states and check these per cycle.
# The hex keypad has 16 keys, 0x0-0xF. Fx0A arms a wait that only a fresh
# press (not-pressed -> pressed) can satisfy; a key held before the wait
# started does not count.

import numpy as np

from .config import KEY_COUNT


class Keypad:

    def __init__(self):
        self.keys = np.zeros(KEY_COUNT, dtype=np.uint8)
        self.waiting = False
        self.target = None      # register Fx0A stores the key into
        self.captured = None

    def reset(self):
        self.keys[:] = 0
        self.cancel_wait()

    def _check(self, index):
        if not 0 <= index < KEY_COUNT:
            raise ValueError("key index out of range: %r" % (index,))

    def is_pressed(self, index):
        self._check(index)
        return bool(self.keys[index])

    def set_key(self, index, pressed):
        """Record a key transition from the input collaborator.

        Returns the key index when this press ended a pending wait,
        otherwise None.
        """
        self._check(index)
        was_pressed = bool(self.keys[index])
        self.keys[index] = 1 if pressed else 0
        if self.waiting and pressed and not was_pressed and self.captured is None:
            self.captured = index
            return index
        return None

    def release_all(self):
        self.keys[:] = 0

    def begin_wait(self, register):
        self.waiting = True
        self.target = register
        self.captured = None

    def cancel_wait(self):
        self.waiting = False
        self.target = None
        self.captured = None

    def take_captured(self):
        """Finish a wait: return ``(register, key)`` or None if no key yet."""
        if not self.waiting or self.captured is None:
            return None
        result = (self.target, self.captured)
        self.cancel_wait()
        return result
