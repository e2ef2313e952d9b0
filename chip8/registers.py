# 16 general purpose 8-bit registers (VF doubles as the carry/collision flag),
# the 16-bit index register I, the program counter and a 16 entry call stack.

import numpy as np

from .config import PROGRAM_START, REGISTER_COUNT, STACK_DEPTH
from .errors import StackOverflow, StackUnderflow

FLAG = 0xF


class RegisterFile:

    def __init__(self):
        self.v = [0] * REGISTER_COUNT
        self.i = 0
        self.pc = PROGRAM_START
        self.stack = np.zeros(STACK_DEPTH, dtype=np.uint16)
        self.sp = 0

    def reset(self):
        self.v[:] = [0] * REGISTER_COUNT
        self.i = 0
        self.pc = PROGRAM_START
        self.stack[:] = 0
        self.sp = 0

    def get(self, index):
        return self.v[index]

    def set(self, index, value):
        self.v[index] = value & 0xFF

    @property
    def depth(self):
        return self.sp

    def push(self, address):
        if self.sp >= STACK_DEPTH:
            raise StackOverflow(address)
        self.stack[self.sp] = address
        self.sp += 1

    def pop(self):
        if self.sp == 0:
            raise StackUnderflow()
        self.sp -= 1
        return int(self.stack[self.sp])

    def dump(self):
        regs = " ".join("V%X=%02X" % (n, value) for n, value in enumerate(self.v))
        return "PC=%03X I=%03X SP=%d %s" % (self.pc, self.i, self.sp, regs)
