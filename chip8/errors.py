"""Errors raised by the CHIP-8 core.

Every error here is fatal to the running program: the engine moves to
HALTED and the host has to load (or reset) a program to continue.
"""


class Chip8Error(Exception):
    """Base class for all emulator errors."""


class CapacityExceeded(Chip8Error):
    """Program is larger than the space between 0x200 and the end of memory."""

    def __init__(self, size, capacity):
        self.size = size
        self.capacity = capacity
        super().__init__(
            "program is %d bytes, only %d fit in memory" % (size, capacity))


class OutOfBounds(Chip8Error):
    """Memory access outside 0x000-0xFFF."""

    def __init__(self, address):
        self.address = address
        super().__init__("memory address out of bounds: 0x%03X" % address)


class StackOverflow(Chip8Error):
    def __init__(self, address=None):
        self.address = address
        super().__init__("stack overflow on CALL")


class StackUnderflow(Chip8Error):
    def __init__(self):
        super().__init__("stack underflow on RET")


class UnknownOpcode(Chip8Error):
    """Bit pattern outside the 35-opcode table."""

    def __init__(self, address, raw):
        self.address = address
        self.raw = raw
        super().__init__("unknown opcode 0x%04X at 0x%03X" % (raw, address))
