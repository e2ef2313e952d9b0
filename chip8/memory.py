# Memory - can hold up to 4096 bytes which includes: the fonts and the inputted ROM.
# Every access from a decoded instruction goes through read()/write() so a
# malformed program can only ever raise OutOfBounds.

import logging

from .config import FONT_START, FONTSET, MEMORY_SIZE, PROGRAM_CAPACITY, PROGRAM_START
from .errors import CapacityExceeded, OutOfBounds

logger = logging.getLogger(__name__)


class Memory:
    """Flat 4 KiB byte store holding the font set and the loaded program."""

    def __init__(self):
        self.data = bytearray(MEMORY_SIZE)
        self.reset()

    def reset(self):
        self.data[:] = bytes(MEMORY_SIZE)
        self.data[FONT_START:FONT_START + len(FONTSET)] = bytes(FONTSET)

    def __len__(self):
        return len(self.data)

    # ---- Load ROM ----
    def load(self, program):
        """Copy ``program`` to 0x200.

        Raises CapacityExceeded (and writes nothing) when it does not fit.
        The rest of the program area is cleared so a reload leaves no
        bytes from the previous ROM behind.
        """
        program = bytes(program)
        if len(program) > PROGRAM_CAPACITY:
            raise CapacityExceeded(len(program), PROGRAM_CAPACITY)
        self.data[PROGRAM_START:] = program + bytes(PROGRAM_CAPACITY - len(program))
        logger.info("Loaded %d bytes at 0x%03X", len(program), PROGRAM_START)

    def read(self, address):
        if not 0 <= address < MEMORY_SIZE:
            raise OutOfBounds(address)
        return self.data[address]

    def write(self, address, value):
        if not 0 <= address < MEMORY_SIZE:
            raise OutOfBounds(address)
        self.data[address] = value & 0xFF

    def read_word(self, address):
        # opcodes are stored big-endian
        return self.read(address) << 8 | self.read(address + 1)

    def read_block(self, address, length):
        return bytes(self.read(address + i) for i in range(length))

    def dump(self, start=0, length=MEMORY_SIZE, width=8):
        """Hex listing of ``length`` bytes from ``start``, ``width`` per line."""
        lines = []
        for base in range(start, start + length, width):
            row = self.read_block(base, min(width, start + length - base))
            lines.append("%03X: %s" % (base, " ".join("%02X" % b for b in row)))
        return "\n".join(lines)
