# We're subclassing pyglet (that'll handle graphics, sound output, and keyboard handling)
# and overriding whatever def we need from there. The window holds no emulation
# logic: it feeds keys into the Chip8 engine, runs the steps and timer ticks the
# Scheduler says are due, and draws the framebuffer snapshot.

import logging
import random
import sys

import numpy as np
import pyglet
from pyglet.media import synthesis
from pyglet.window import key

from .config import (CPU_HZ, CPU_HZ_STEP, HEIGHT, SCALE, TIMER_HZ, WIDTH,
                     WINDOW_HEIGHT, WINDOW_WIDTH)
from .cpu import Chip8, State
from .errors import Chip8Error
from .scheduler import Scheduler

logger = logging.getLogger(__name__)

# Key mapping - maps physical keyboard keys to CHIP-8 keypad
keymap = {
    key._1: 0x1, key._2: 0x2, key._3: 0x3, key._4: 0xC,
    key.Q: 0x4, key.W: 0x5, key.E: 0x6, key.R: 0xD,
    key.A: 0x7, key.S: 0x8, key.D: 0x9, key.F: 0xE,
    key.Z: 0xA, key.X: 0x0, key.C: 0xB, key.V: 0xF,
}

MAX_FRAME_TIME = 0.25


def _label(text, y):
    return pyglet.text.Label(
        text,
        font_size=12,
        x=5,
        y=y,
        anchor_x='left',
        anchor_y='center',
        color=(255, 255, 255, 255)
    )


class Emulator(pyglet.window.Window):

    def __init__(self, chip8, cpu_hz=CPU_HZ, caption="CHIP-8 Emulator"):
        super().__init__(WINDOW_WIDTH, WINDOW_HEIGHT, caption=caption, vsync=False)
        self.chip8 = chip8
        self.scheduler = Scheduler(cpu_hz, TIMER_HZ, max_dt=MAX_FRAME_TIME)

        # 64x32 RGBA buffer, upscaled with numpy.repeat before each blit
        self._small_framebuf = np.zeros((HEIGHT, WIDTH, 4), dtype=np.uint8)
        self._small_framebuf[..., 3] = 255
        self.image = pyglet.image.ImageData(
            WINDOW_WIDTH, WINDOW_HEIGHT, 'RGBA',
            bytes(WINDOW_WIDTH * WINDOW_HEIGHT * 4))

        # Performance tracking
        self._fps_counter = 0
        self._cps_counter = 0
        self.fps_label = _label("FPS: 0", WINDOW_HEIGHT - 15)
        self.cps_label = _label("Cycles/s: 0", WINDOW_HEIGHT - 30)
        self.status_label = _label("", WINDOW_HEIGHT - 45)

        self.sound_playing = False

        pyglet.clock.schedule(self._update)
        pyglet.clock.schedule_interval(self._update_bench, 1.0)

    # ---- Emulation ----
    def _update(self, dt):
        steps, ticks = self.scheduler.advance(dt)
        if self.chip8.can_step and steps:
            before = self.chip8.cycles
            try:
                self.chip8.run(steps)
            except Chip8Error as e:
                # the engine is HALTED now; keep the last frame on screen
                self.status_label.text = "HALTED: %s" % e
            self._cps_counter += self.chip8.cycles - before
        for _ in range(ticks):
            self.chip8.tick_timers()
        self._update_sound()

    def _update_bench(self, dt):
        self.fps_label.text = f"FPS: {self._fps_counter / dt:.1f}"
        self.cps_label.text = f"Cycles/s: {int(self._cps_counter / dt)}"
        self._fps_counter = 0
        self._cps_counter = 0

    # ---- sound ----
    def _update_sound(self):
        if self.chip8.sound_active:
            # Play beep only if it hasn't started yet
            if not self.sound_playing:
                self._play_beep()
        else:
            self.sound_playing = False

    def _play_beep(self, duration=0.2, frequency=440, pitch_variation=15):
        freq = frequency + random.randint(-pitch_variation, pitch_variation)
        wave = synthesis.Sine(duration=duration, frequency=freq, sample_rate=44100)
        player = pyglet.media.Player()
        player.queue(wave)
        player.play()
        self.sound_playing = True

        def on_eos():
            self.sound_playing = False
            player.delete()

        player.on_eos = on_eos

    # ---- Drawing ----
    def on_draw(self):
        self.clear()
        fb = self.chip8.framebuffer
        if fb.dirty:
            # pyglet's origin is bottom-left, so flip the rows
            pixels = np.flipud(fb.snapshot()) * 255
            self._small_framebuf[..., :3] = pixels[..., None]
            scaled = np.repeat(np.repeat(self._small_framebuf, SCALE, axis=0), SCALE, axis=1)
            self.image.set_data('RGBA', WINDOW_WIDTH * 4, scaled.tobytes())
            fb.mark_clean()
        self.image.blit(0, 0)

        self.fps_label.draw()
        self.cps_label.draw()
        if self.chip8.state is State.PAUSED:
            self.status_label.text = "PAUSED"
        elif self.chip8.state is not State.HALTED:
            self.status_label.text = ""
        self.status_label.draw()
        self._fps_counter += 1

    # ---- Input ----
    def on_key_press(self, symbol, modifiers):
        #@Override
        if symbol == key.ESCAPE:
            self.close()
        elif symbol in keymap:
            self.chip8.set_key(keymap[symbol], True)
        elif symbol == key.P:
            self.chip8.toggle_pause()
        elif symbol in (key.PLUS, key.EQUAL, key.NUM_ADD):
            self.scheduler.set_cpu_hz(self.scheduler.cpu_hz + CPU_HZ_STEP)
        elif symbol in (key.MINUS, key.NUM_SUBTRACT):
            self.scheduler.set_cpu_hz(self.scheduler.cpu_hz - CPU_HZ_STEP)
        elif symbol == key.F5:
            self.chip8.reset()
            self.scheduler.reset()
        elif symbol == key.F1:
            chip8_logger = logging.getLogger("chip8")
            debug = chip8_logger.getEffectiveLevel() > logging.DEBUG
            chip8_logger.setLevel(logging.DEBUG if debug else logging.INFO)
            logger.info("Debug logging %s", "on" if debug else "off")

    def on_key_release(self, symbol, modifiers):
        #@Override
        if symbol in keymap:
            self.chip8.set_key(keymap[symbol], False)

    def on_deactivate(self):
        # keys released while the window is unfocused never reach us
        self.chip8.keypad.release_all()


USAGE = "Usage: chip8 <rom-file> [cpu-hz]"


# ---- Entry point ----
def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    if not 1 <= len(argv) <= 2:
        print(USAGE)
        return 1
    rom = argv[0]
    cpu_hz = CPU_HZ
    if len(argv) == 2:
        try:
            cpu_hz = int(argv[1])
        except ValueError:
            print(USAGE)
            return 1

    try:
        with open(rom, "rb") as f:
            data = f.read()
    except OSError as e:
        logger.error("Cannot read ROM %s: %s", rom, e)
        return 1

    chip8 = Chip8()
    try:
        chip8.load(data)
    except Chip8Error as e:
        logger.error("Cannot load ROM %s: %s", rom, e)
        return 1

    logger.info("Loading ROM: %s", rom)
    Emulator(chip8, cpu_hz)
    pyglet.app.run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
