"""CHIP-8 interpreter core with a pyglet front end (``chip8.app``)."""

from .cpu import Chip8, Effect, Machine, State, execute
from .decode import Instruction, Op, decode, disassemble, mnemonic
from .errors import (CapacityExceeded, Chip8Error, OutOfBounds, StackOverflow,
                     StackUnderflow, UnknownOpcode)
from .framebuffer import Framebuffer
from .keypad import Keypad
from .memory import Memory
from .registers import RegisterFile
from .scheduler import Scheduler
from .timers import TimerUnit

__version__ = "0.1.0"
