# Two 8-bit countdown registers. tick() is called at TIMER_HZ by the host,
# on its own schedule, no matter how fast instructions are executed.


class TimerUnit:

    def __init__(self):
        self._delay = 0
        self._sound = 0

    def reset(self):
        self._delay = 0
        self._sound = 0

    @property
    def delay(self):
        return self._delay

    @delay.setter
    def delay(self, value):
        self._delay = value & 0xFF

    @property
    def sound(self):
        return self._sound

    @sound.setter
    def sound(self, value):
        self._sound = value & 0xFF

    @property
    def sound_active(self):
        """Nonzero sound timer means the buzzer is on."""
        return self._sound > 0

    def tick(self):
        if self._delay > 0:
            self._delay -= 1
        if self._sound > 0:
            self._sound -= 1
