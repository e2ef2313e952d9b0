# Two clocks, one loop: the host hands over elapsed wall time and gets back
# how many CPU steps and how many 60 Hz timer ticks are due. Each cadence
# keeps its own accumulator, so changing the CPU speed never changes how
# fast the timers (and the buzzer) run down.

import logging

from .config import CPU_HZ, MAX_CPU_HZ, MIN_CPU_HZ, TIMER_HZ

logger = logging.getLogger(__name__)

# float slack so that 60 calls of 1/60 s add up to 60 ticks, not 59
EPSILON = 1e-9


class Scheduler:

    def __init__(self, cpu_hz=CPU_HZ, timer_hz=TIMER_HZ, max_dt=None):
        self.cpu_hz = self._clamp(cpu_hz)
        self.timer_hz = timer_hz
        self.max_dt = max_dt    # cap on catch-up work per call
        self._cpu_time = 0.0
        self._timer_time = 0.0

    @staticmethod
    def _clamp(hz):
        return max(MIN_CPU_HZ, min(MAX_CPU_HZ, int(hz)))

    def set_cpu_hz(self, hz):
        self.cpu_hz = self._clamp(hz)
        logger.info("CPU speed: %d Hz", self.cpu_hz)
        return self.cpu_hz

    def advance(self, dt):
        """Add ``dt`` seconds; return ``(steps_due, ticks_due)``."""
        dt = max(dt, 0.0)
        if self.max_dt is not None:
            dt = min(dt, self.max_dt)

        self._cpu_time += dt
        steps = int(self._cpu_time * self.cpu_hz + EPSILON)
        self._cpu_time -= steps / self.cpu_hz

        self._timer_time += dt
        ticks = int(self._timer_time * self.timer_hz + EPSILON)
        self._timer_time -= ticks / self.timer_hz
        return steps, ticks

    def reset(self):
        self._cpu_time = 0.0
        self._timer_time = 0.0
