# CPU - fetch, decode and execute one instruction per step.
# execute() applies a decoded Instruction to a Machine and reports what the
# host needs to know (redraw, key wait); Chip8 wraps it in the
# RUNNING / PAUSED / AWAITING_KEY / HALTED state machine.

import logging
import random
from enum import Enum

from .config import FONT_HEIGHT, FONT_START
from .decode import Op, decode
from .errors import Chip8Error
from .framebuffer import Framebuffer
from .keypad import Keypad
from .memory import Memory
from .registers import FLAG, RegisterFile
from .timers import TimerUnit

logger = logging.getLogger(__name__)


class State(Enum):
    RUNNING = "running"
    PAUSED = "paused"
    AWAITING_KEY = "awaiting_key"
    HALTED = "halted"


class Effect(Enum):
    DISPLAY = "display"      # framebuffer changed
    AWAIT_KEY = "await_key"  # Fx0A armed the keypad wait


class Machine:
    """Every piece of CHIP-8 state, owned by a single Chip8 engine."""

    def __init__(self):
        self.memory = Memory()
        self.registers = RegisterFile()
        self.keypad = Keypad()
        self.framebuffer = Framebuffer()
        self.timers = TimerUnit()

    def reset(self):
        self.memory.reset()
        self.registers.reset()
        self.keypad.reset()
        self.framebuffer.clear()
        self.timers.reset()


def _skip(regs, condition):
    if condition:
        regs.pc += 2


def execute(ins, machine, rng=random):
    """Apply one decoded instruction to ``machine``.

    The program counter has already been advanced past ``ins``; jumps,
    calls and skips overwrite or bump it from there. Returns an Effect or
    None. Memory and stack errors propagate as Chip8Error subclasses.
    The machine is updated in place rather than copied.
    """
    regs = machine.registers
    mem = machine.memory
    v = regs.v
    x, y = ins.x, ins.y
    op = ins.op

    if op is Op.SYS:
        # 0nnn is ignored on modern interpreters
        pass

    elif op is Op.CLS:
        machine.framebuffer.clear()
        return Effect.DISPLAY

    elif op is Op.RET:
        regs.pc = regs.pop()

    elif op is Op.JP:
        regs.pc = ins.nnn

    elif op is Op.CALL:
        regs.push(regs.pc)
        regs.pc = ins.nnn

    elif op is Op.SE_VX_KK:
        _skip(regs, v[x] == ins.kk)

    elif op is Op.SNE_VX_KK:
        _skip(regs, v[x] != ins.kk)

    elif op is Op.SE_VX_VY:
        _skip(regs, v[x] == v[y])

    elif op is Op.LD_VX_KK:
        v[x] = ins.kk

    elif op is Op.ADD_VX_KK:
        # no carry flag for the immediate add
        v[x] = (v[x] + ins.kk) & 0xFF

    elif op is Op.LD_VX_VY:
        v[x] = v[y]

    elif op is Op.OR:
        v[x] |= v[y]

    elif op is Op.AND:
        v[x] &= v[y]

    elif op is Op.XOR:
        v[x] ^= v[y]

    # The flag is written last, so VF as Vx ends up holding the flag.
    elif op is Op.ADD_VX_VY:
        total = v[x] + v[y]
        v[x] = total & 0xFF
        v[FLAG] = 1 if total > 0xFF else 0

    elif op is Op.SUB:
        no_borrow = v[x] >= v[y]
        v[x] = (v[x] - v[y]) & 0xFF
        v[FLAG] = 1 if no_borrow else 0

    elif op is Op.SHR:
        carry = v[x] & 1
        v[x] >>= 1
        v[FLAG] = carry

    elif op is Op.SUBN:
        no_borrow = v[y] >= v[x]
        v[x] = (v[y] - v[x]) & 0xFF
        v[FLAG] = 1 if no_borrow else 0

    elif op is Op.SHL:
        carry = (v[x] >> 7) & 1
        v[x] = (v[x] << 1) & 0xFF
        v[FLAG] = carry

    elif op is Op.SNE_VX_VY:
        _skip(regs, v[x] != v[y])

    elif op is Op.LD_I:
        regs.i = ins.nnn

    elif op is Op.JP_V0:
        regs.pc = (ins.nnn + v[0]) & 0xFFF

    elif op is Op.RND:
        v[x] = rng.getrandbits(8) & ins.kk

    elif op is Op.DRW:
        sprite = mem.read_block(regs.i, ins.n)
        collision = machine.framebuffer.draw(v[x], v[y], sprite)
        v[FLAG] = 1 if collision else 0
        return Effect.DISPLAY

    elif op is Op.SKP:
        _skip(regs, machine.keypad.is_pressed(v[x] & 0xF))

    elif op is Op.SKNP:
        _skip(regs, not machine.keypad.is_pressed(v[x] & 0xF))

    elif op is Op.LD_VX_DT:
        v[x] = machine.timers.delay

    elif op is Op.LD_VX_K:
        machine.keypad.begin_wait(x)
        return Effect.AWAIT_KEY

    elif op is Op.LD_DT_VX:
        machine.timers.delay = v[x]

    elif op is Op.LD_ST_VX:
        machine.timers.sound = v[x]

    elif op is Op.ADD_I_VX:
        regs.i = (regs.i + v[x]) & 0xFFFF

    elif op is Op.LD_F_VX:
        regs.i = FONT_START + (v[x] & 0xF) * FONT_HEIGHT

    elif op is Op.LD_B_VX:
        value = v[x]
        mem.write(regs.i, value // 100)
        mem.write(regs.i + 1, (value // 10) % 10)
        mem.write(regs.i + 2, value % 10)

    elif op is Op.LD_I_VX:
        for n in range(x + 1):
            mem.write(regs.i + n, v[n])

    elif op is Op.LD_VX_I:
        for n in range(x + 1):
            v[n] = mem.read(regs.i + n)

    return None


class Chip8:
    """The execution engine.

    The host calls step() at the configured CPU rate and tick_timers() at
    60 Hz; the two are never coupled. Key transitions come in through
    set_key(). All of it is expected to run on one thread.
    """

    def __init__(self, rng=None):
        self.machine = Machine()
        self.rng = rng if rng is not None else random.Random()
        self.state = State.HALTED
        self.error = None
        self.cycles = 0
        self.program = b""
        self._resume_state = State.RUNNING

    # ---- shortcuts for the host ----
    @property
    def memory(self):
        return self.machine.memory

    @property
    def registers(self):
        return self.machine.registers

    @property
    def keypad(self):
        return self.machine.keypad

    @property
    def framebuffer(self):
        return self.machine.framebuffer

    @property
    def timers(self):
        return self.machine.timers

    @property
    def sound_active(self):
        return self.machine.timers.sound_active

    @property
    def can_step(self):
        return self.state in (State.RUNNING, State.AWAITING_KEY)

    # ---- Load ROM ----
    def load(self, program):
        """Reset the machine and load ``program`` at 0x200.

        CapacityExceeded leaves the engine exactly as it was.
        """
        program = bytes(program)
        # validate before the reset so a failed load doesn't wipe anything
        self.machine.memory.load(program)
        self.machine.reset()
        self.machine.memory.load(program)
        self.program = program
        self.error = None
        self.cycles = 0
        self.state = State.RUNNING
        self._resume_state = State.RUNNING

    def reset(self):
        logger.info("Restarting program")
        self.load(self.program)

    # ---- Cycle ----
    def fetch(self):
        regs = self.machine.registers
        return decode(self.machine.memory.read_word(regs.pc), regs.pc)

    def step(self):
        """Run one scheduling quantum worth of CPU work.

        Returns the Effect of the executed instruction (or None). Raises the
        Chip8Error that halted the engine.
        """
        if self.state is State.AWAITING_KEY:
            self._finish_wait()
            return None
        if self.state is not State.RUNNING:
            return None

        regs = self.machine.registers
        try:
            ins = self.fetch()
            regs.pc += 2
            logger.debug("%03X: %04X %s", ins.address, ins.raw, ins)
            effect = execute(ins, self.machine, self.rng)
        except Chip8Error as e:
            self._halt(e)
            raise
        self.cycles += 1

        if effect is Effect.AWAIT_KEY:
            self.state = State.AWAITING_KEY
            logger.debug("Waiting for key into V%X", ins.x)
        return effect

    def run(self, steps):
        """Call step() up to ``steps`` times; returns True if the display changed."""
        drawn = False
        for _ in range(steps):
            if self.state is not State.RUNNING:
                if self.state is State.AWAITING_KEY:
                    self._finish_wait()
                if self.state is not State.RUNNING:
                    break
                continue
            if self.step() is Effect.DISPLAY:
                drawn = True
        return drawn

    def _halt(self, error):
        self.state = State.HALTED
        self.error = error
        logger.error("Emulation halted: %s", error)
        logger.debug("%s", self.machine.registers.dump())

    def _finish_wait(self):
        done = self.machine.keypad.take_captured()
        if done is None:
            return False
        register, key = done
        self.machine.registers.set(register, key)
        logger.debug("Key %X pressed, V%X = %X", key, register, key)
        if self.state is State.PAUSED:
            self._resume_state = State.RUNNING
        else:
            self.state = State.RUNNING
        return True

    # ---- timers ----
    def tick_timers(self):
        # runs in every state; pausing only stops instruction steps
        self.machine.timers.tick()

    # ---- Input ----
    def set_key(self, index, pressed):
        if self.machine.keypad.set_key(index, pressed) is not None:
            self._finish_wait()

    # ---- Speed/pause control ----
    def pause(self):
        if self.state in (State.RUNNING, State.AWAITING_KEY):
            self._resume_state = self.state
            self.state = State.PAUSED
            logger.info("Paused")

    def resume(self):
        if self.state is State.PAUSED:
            self.state = self._resume_state
            logger.info("Resumed")

    def toggle_pause(self):
        if self.state is State.PAUSED:
            self.resume()
        else:
            self.pause()
