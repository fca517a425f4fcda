# CHIP8 machine state:
# Memory - 4096 bytes holding the reserved interpreter area, the font and the ROM.
# Registers - V0..VF (VF doubles as the carry/borrow/collision flag) and I.
# Stack - 16 return addresses with an explicit stack pointer.
# Timers - delay and sound, counted down at 60Hz by the scheduler.
# Output - 64x32 framebuffer of on/off pixels.
# Input - 16 key hex keypad.
import logging

import numpy as np

from .decoder import decode
from .errors import RomLoadError, StackOverflowError, StackUnderflowError

log = logging.getLogger(__name__)

MEMORY_SIZE = 4096
ENTRY_POINT = 0x200     # ROMs are loaded here, everything below is reserved
FONT_BASE = 0x50
STACK_DEPTH = 16
WIDTH, HEIGHT = 64, 32
MAX_ROM_SIZE = MEMORY_SIZE - ENTRY_POINT

# 16 glyphs, 5 bytes each
FONTSET = bytes([
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
    0xF0, 0x80, 0xF0, 0x80, 0x80,  # F
])


class Machine:
    """Complete mutable state of one CHIP8 run.

    Created once per run with a program image; ``reset()`` brings it back to
    the exact cold-boot state with the same program loaded.
    """

    def __init__(self, rom=b""):
        rom = bytes(rom)
        if len(rom) > MAX_ROM_SIZE:
            raise RomLoadError("ROM is too big: %d bytes (max %d)" % (len(rom), MAX_ROM_SIZE))
        self.rom = rom
        self.reset()

    def reset(self):
        self.memory = bytearray(MEMORY_SIZE)
        self.V = [0] * 16
        self.I = 0
        self.pc = ENTRY_POINT
        self.stack = [0] * STACK_DEPTH
        self.sp = 0
        self.delay_timer = 0
        self.sound_timer = 0
        self.framebuffer = np.zeros(WIDTH * HEIGHT, dtype=bool)
        self.keypad = np.zeros(16, dtype=bool)
        self.current_instruction = decode(0)
        # key held down during an FX0A wait, None when not waiting on a release
        self.waiting_key = None
        self.draw_flag = True

        self.memory[FONT_BASE:FONT_BASE + len(FONTSET)] = FONTSET
        self.memory[ENTRY_POINT:ENTRY_POINT + len(self.rom)] = self.rom
        log.debug("Machine reset, %d byte program at 0x%03X", len(self.rom), ENTRY_POINT)

    # ---- stack ----
    def push(self, address):
        if self.sp >= STACK_DEPTH:
            raise StackOverflowError("Stack overflow on CALL at 0x%03X" % ((self.pc - 2) & 0xFFFF))
        self.stack[self.sp] = address
        self.sp += 1

    def pop(self):
        if self.sp == 0:
            raise StackUnderflowError("Stack underflow on RET at 0x%03X" % ((self.pc - 2) & 0xFFFF))
        self.sp -= 1
        return self.stack[self.sp]

    # ---- display ----
    def clear_screen(self):
        self.framebuffer.fill(False)
        self.draw_flag = True

    def pixel(self, x, y):
        return bool(self.framebuffer[y * WIDTH + x])

    # ---- input ----
    def press_key(self, key):
        self.keypad[key & 0xF] = True

    def release_key(self, key):
        self.keypad[key & 0xF] = False

    def lowest_pressed_key(self):
        pressed = np.flatnonzero(self.keypad)
        if pressed.size == 0:
            return None
        return int(pressed[0])

    # ---- timers ----
    def tick_timers(self):
        if self.delay_timer > 0:
            self.delay_timer -= 1
        if self.sound_timer > 0:
            self.sound_timer -= 1
