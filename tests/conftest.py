import random

import pytest

from chip8_emulator.cpu import CPU
from chip8_emulator.machine import Machine

from .helpers import FakeClock, program


@pytest.fixture
def machine():
    return Machine()


@pytest.fixture
def load():
    """Build a machine running the given opcodes, plus a CPU with a seeded RNG."""
    def _load(*opcodes):
        m = Machine(program(*opcodes))
        return m, CPU(m, random.Random(1234))
    return _load


@pytest.fixture
def clock():
    return FakeClock()
