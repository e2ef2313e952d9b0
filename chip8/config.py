# CHIP-8 machine constants and host defaults.
# Memory - 4096 bytes: fonts at 0x000, programs from 0x200.
# Display - 64x32 monochrome pixels, upscaled by SCALE on the host window.

# ---- Display ----
WIDTH, HEIGHT = 64, 32
SCALE = 10
WINDOW_WIDTH, WINDOW_HEIGHT = WIDTH * SCALE, HEIGHT * SCALE

# ---- Clocks ----
CPU_HZ = 500          # instructions per second
MIN_CPU_HZ = 50
MAX_CPU_HZ = 2000
CPU_HZ_STEP = 50
TIMER_HZ = 60         # delay/sound timers, never tied to CPU_HZ

# ---- Memory map ----
MEMORY_SIZE = 4096
FONT_START = 0x000
FONT_HEIGHT = 5
PROGRAM_START = 0x200
PROGRAM_CAPACITY = MEMORY_SIZE - PROGRAM_START

STACK_DEPTH = 16
REGISTER_COUNT = 16
KEY_COUNT = 16
MAX_SPRITE_ROWS = 15

# set fonts (binary pixel patterns)
FONTSET = [
    0xF0, 0x90, 0x90, 0x90, 0xF0,  # 0
    0x20, 0x60, 0x20, 0x20, 0x70,  # 1
    0xF0, 0x10, 0xF0, 0x80, 0xF0,  # 2
    0xF0, 0x10, 0xF0, 0x10, 0xF0,  # 3
    0x90, 0x90, 0xF0, 0x10, 0x10,  # 4
    0xF0, 0x80, 0xF0, 0x10, 0xF0,  # 5
    0xF0, 0x80, 0xF0, 0x90, 0xF0,  # 6
    0xF0, 0x10, 0x20, 0x40, 0x40,  # 7
    0xF0, 0x90, 0xF0, 0x90, 0xF0,  # 8
    0xF0, 0x90, 0xF0, 0x10, 0xF0,  # 9
    0xF0, 0x90, 0xF0, 0x90, 0x90,  # A
    0xE0, 0x90, 0xE0, 0x90, 0xE0,  # B
    0xF0, 0x80, 0x80, 0x80, 0xF0,  # C
    0xE0, 0x90, 0x90, 0x90, 0xE0,  # D
    0xF0, 0x80, 0xF0, 0x80, 0xF0,  # E
    0xF0, 0x80, 0xF0, 0x80, 0x80   # F
] #notice 80 bytes
