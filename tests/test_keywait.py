from chip8_emulator.machine import Machine
from chip8_emulator.scheduler import Scheduler

from .helpers import program

IPS = 64
PERIOD = 1.0 / IPS


def waiting_machine():
    # 0x200: LD V3, K / 0x202: JP 0x202
    m = Machine(program(0xF30A, 0x1202))
    m.V[3] = 0x77
    return m, Scheduler(m, IPS)


def test_no_progress_without_a_key():
    m, s = waiting_machine()
    for _ in range(10):
        s.advance(PERIOD)
        assert m.pc == 0x200
    assert m.V[3] == 0x77
    assert s.cpu.cycle_count == 10


def test_press_then_release_stores_key_once():
    m, s = waiting_machine()
    s.advance(PERIOD)

    m.press_key(0x9)
    m.press_key(0x5)
    s.advance(PERIOD)
    assert m.pc == 0x200
    assert m.waiting_key == 0x5

    # a lower key showing up does not change the held key
    m.press_key(0x2)
    m.release_key(0x9)
    s.advance(PERIOD)
    assert m.pc == 0x200
    assert m.waiting_key == 0x5
    assert m.V[3] == 0x77

    m.release_key(0x5)
    s.advance(PERIOD)
    assert m.V[3] == 0x5
    assert m.pc == 0x202
    assert m.waiting_key is None

    m.V[3] = 0
    s.advance(PERIOD * 4)
    assert m.pc == 0x202
    assert m.V[3] == 0


def test_timers_keep_running_while_waiting():
    m, s = waiting_machine()
    m.delay_timer = 3
    s.advance(0.25)
    s.advance(0.25)
    assert m.pc == 0x200
    assert m.delay_timer == 1


def test_reset_forgets_held_key():
    m, s = waiting_machine()
    m.press_key(0x4)
    s.advance(PERIOD)
    assert m.waiting_key == 0x4
    m.reset()
    assert m.waiting_key is None
    assert not m.keypad.any()
