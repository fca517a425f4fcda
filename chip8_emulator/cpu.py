# CPU - CowGods CHIP8 Technical reference http://devernay.free.fr/hacks/chip8/C8TECH10.HTM#0.0
# One call to cycle() fetches, decodes and executes exactly one instruction.
# The PC is advanced past the fetched instruction *before* its handler runs, so
# jumps and calls simply overwrite it and CALL pushes the return address.
import logging
import random

from .decoder import decode, describe
from .errors import UnknownOpcodeError
from .machine import FONT_BASE, WIDTH, HEIGHT

log = logging.getLogger(__name__)


class CPU:
    def __init__(self, machine, rng=None):
        self.machine = machine
        self.rng = rng if rng is not None else random.Random()
        self.cycle_count = 0
        self.setup_funcmap()

    # ---- Cycle ----
    def cycle(self):
        m = self.machine
        address = m.pc

        # Fetch, big-endian
        opcode = (m.memory[address & 0xFFF] << 8) | m.memory[(address + 1) & 0xFFF]
        inst = decode(opcode)
        m.current_instruction = inst
        m.pc = (address + 2) & 0xFFFF

        if log.isEnabledFor(logging.DEBUG):
            log.debug("PC: 0x%03X  OPCODE: %04X  %s", address, opcode, describe(inst))

        self.funcmap[inst.group](inst)
        self.cycle_count += 1

    def _unknown(self, inst):
        raise UnknownOpcodeError(inst.opcode, (self.machine.pc - 2) & 0xFFFF)

    def _skip(self, condition):
        if condition:
            self.machine.pc = (self.machine.pc + 2) & 0xFFFF

    # ---- Opcode function map ----
    def setup_funcmap(self):
        # high nibble -> handler
        self.funcmap = {
            0x0: self._0nnn,  # 00E0 / 00EE / 0nnn - clear screen, return, SYS (ignored)
            0x1: self._1nnn,  # 1nnn - jump
            0x2: self._2nnn,  # 2nnn - call subroutine
            0x3: self._3xkk,  # 3xkk - skip if Vx == kk
            0x4: self._4xkk,  # 4xkk - skip if Vx != kk
            0x5: self._5xy0,  # 5xy0 - skip if Vx == Vy
            0x6: self._6xkk,  # 6xkk - Vx = kk
            0x7: self._7xkk,  # 7xkk - Vx += kk, no carry
            0x8: self._8xxx,  # 8xy0..8xyE - ALU
            0x9: self._9xy0,  # 9xy0 - skip if Vx != Vy
            0xA: self._Annn,  # Annn - I = nnn
            0xB: self._Bnnn,  # Bnnn - jump to nnn + V0
            0xC: self._Cxkk,  # Cxkk - Vx = random & kk
            0xD: self._Dxyn,  # Dxyn - draw sprite
            0xE: self._Exxx,  # Ex9E / ExA1 - key skips
            0xF: self._Fxxx,  # Fx07..Fx65 - timers, memory, I, key wait
        }
        # low nibble of 8xy_
        self.alu_funcmap = {
            0x0: self._8xy0,
            0x1: self._8xy1,
            0x2: self._8xy2,
            0x3: self._8xy3,
            0x4: self._8xy4,
            0x5: self._8xy5,
            0x6: self._8xy6,
            0x7: self._8xy7,
            0xE: self._8xyE,
        }
        # low byte of Ex__ / Fx__
        self.key_funcmap = {
            0x9E: self._Ex9E,
            0xA1: self._ExA1,
        }
        self.misc_funcmap = {
            0x07: self._Fx07,
            0x0A: self._Fx0A,
            0x15: self._Fx15,
            0x18: self._Fx18,
            0x1E: self._Fx1E,
            0x29: self._Fx29,
            0x33: self._Fx33,
            0x55: self._Fx55,
            0x65: self._Fx65,
        }

    # ---- Opcode Handlers ----

    def _0nnn(self, inst):
        if inst.opcode == 0x00E0:
            self._00E0(inst)
        elif inst.opcode == 0x00EE:
            self._00EE(inst)
        else:
            # machine code routines don't exist here
            log.debug("SYS call ignored (%04X)", inst.opcode)

    def _00E0(self, inst):
        self.machine.clear_screen()

    def _00EE(self, inst):
        self.machine.pc = self.machine.pop()

    def _1nnn(self, inst):
        self.machine.pc = inst.nnn

    def _2nnn(self, inst):
        self.machine.push(self.machine.pc)
        self.machine.pc = inst.nnn

    def _3xkk(self, inst):
        self._skip(self.machine.V[inst.x] == inst.nn)

    def _4xkk(self, inst):
        self._skip(self.machine.V[inst.x] != inst.nn)

    def _5xy0(self, inst):
        if inst.n != 0:
            log.warning("Malformed opcode %04X ignored", inst.opcode)
            return
        V = self.machine.V
        self._skip(V[inst.x] == V[inst.y])

    def _6xkk(self, inst):
        self.machine.V[inst.x] = inst.nn

    def _7xkk(self, inst):
        V = self.machine.V
        V[inst.x] = (V[inst.x] + inst.nn) & 0xFF

    # 8xy_ - the flag is always written last so it wins when x is F
    def _8xxx(self, inst):
        self.alu_funcmap.get(inst.n, self._unknown)(inst)

    def _8xy0(self, inst):
        V = self.machine.V
        V[inst.x] = V[inst.y]

    # logic ops reset VF (original COSMAC VIP behaviour)
    def _8xy1(self, inst):
        V = self.machine.V
        V[inst.x] |= V[inst.y]
        V[0xF] = 0

    def _8xy2(self, inst):
        V = self.machine.V
        V[inst.x] &= V[inst.y]
        V[0xF] = 0

    def _8xy3(self, inst):
        V = self.machine.V
        V[inst.x] ^= V[inst.y]
        V[0xF] = 0

    def _8xy4(self, inst):
        V = self.machine.V
        total = V[inst.x] + V[inst.y]
        V[inst.x] = total & 0xFF
        V[0xF] = 1 if total > 0xFF else 0

    def _8xy5(self, inst):
        V = self.machine.V
        no_borrow = 1 if V[inst.y] <= V[inst.x] else 0
        V[inst.x] = (V[inst.x] - V[inst.y]) & 0xFF
        V[0xF] = no_borrow

    # shifts take their source from Vy
    def _8xy6(self, inst):
        V = self.machine.V
        source = V[inst.y]
        V[inst.x] = source >> 1
        V[0xF] = source & 1

    def _8xy7(self, inst):
        V = self.machine.V
        # Vy compared against Vx before it is overwritten
        no_borrow = 1 if V[inst.x] <= V[inst.y] else 0
        V[inst.x] = (V[inst.y] - V[inst.x]) & 0xFF
        V[0xF] = no_borrow

    def _8xyE(self, inst):
        V = self.machine.V
        source = V[inst.y]
        V[inst.x] = (source << 1) & 0xFF
        V[0xF] = (source >> 7) & 1

    def _9xy0(self, inst):
        if inst.n != 0:
            log.warning("Malformed opcode %04X ignored", inst.opcode)
            return
        V = self.machine.V
        self._skip(V[inst.x] != V[inst.y])

    def _Annn(self, inst):
        self.machine.I = inst.nnn

    def _Bnnn(self, inst):
        self.machine.pc = inst.nnn + self.machine.V[0]

    def _Cxkk(self, inst):
        self.machine.V[inst.x] = self.rng.getrandbits(8) & inst.nn

    def _Dxyn(self, inst):
        m = self.machine
        fb = m.framebuffer
        # only the starting coordinate wraps, the sprite itself is clipped
        start_x = m.V[inst.x] % WIDTH
        y = m.V[inst.y] % HEIGHT
        m.V[0xF] = 0

        for row in range(inst.n):
            sprite = m.memory[(m.I + row) & 0xFFF]
            x = start_x
            for bit in range(7, -1, -1):
                sprite_bit = bool(sprite & (1 << bit))
                index = y * WIDTH + x
                pixel = bool(fb[index])
                if sprite_bit and pixel:
                    m.V[0xF] = 1
                fb[index] = pixel ^ sprite_bit
                x += 1
                if x >= WIDTH:
                    break
            y += 1
            if y >= HEIGHT:
                break

        m.draw_flag = True

    def _Exxx(self, inst):
        self.key_funcmap.get(inst.nn, self._unknown)(inst)

    def _Ex9E(self, inst):
        m = self.machine
        self._skip(m.keypad[m.V[inst.x] & 0xF])

    def _ExA1(self, inst):
        m = self.machine
        self._skip(not m.keypad[m.V[inst.x] & 0xF])

    def _Fxxx(self, inst):
        self.misc_funcmap.get(inst.nn, self._unknown)(inst)

    def _Fx07(self, inst):
        self.machine.V[inst.x] = self.machine.delay_timer

    def _Fx0A(self, inst):
        # Wait for a key press and its release without blocking: the PC is
        # rewound so this instruction runs again next cycle until done.
        m = self.machine
        if m.waiting_key is None:
            m.waiting_key = m.lowest_pressed_key()
            m.pc = (m.pc - 2) & 0xFFFF
        elif m.keypad[m.waiting_key]:
            m.pc = (m.pc - 2) & 0xFFFF
        else:
            m.V[inst.x] = m.waiting_key
            m.waiting_key = None

    def _Fx15(self, inst):
        self.machine.delay_timer = self.machine.V[inst.x]

    def _Fx18(self, inst):
        self.machine.sound_timer = self.machine.V[inst.x]

    def _Fx1E(self, inst):
        m = self.machine
        m.I = (m.I + m.V[inst.x]) & 0xFFFF

    def _Fx29(self, inst):
        m = self.machine
        m.I = FONT_BASE + (m.V[inst.x] & 0xF) * 5

    def _Fx33(self, inst):
        m = self.machine
        value = m.V[inst.x]
        m.memory[m.I & 0xFFF] = value // 100
        m.memory[(m.I + 1) & 0xFFF] = (value // 10) % 10
        m.memory[(m.I + 2) & 0xFFF] = value % 10

    def _Fx55(self, inst):
        m = self.machine
        for i in range(inst.x + 1):
            m.memory[(m.I + i) & 0xFFF] = m.V[i]

    def _Fx65(self, inst):
        m = self.machine
        for i in range(inst.x + 1):
            m.V[i] = m.memory[(m.I + i) & 0xFFF]
