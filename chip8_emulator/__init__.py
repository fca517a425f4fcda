from .config import Config
from .cpu import CPU
from .decoder import Instruction, decode, describe
from .errors import Chip8Error, RomLoadError, StackOverflowError, StackUnderflowError, UnknownOpcodeError
from .machine import Machine
from .scheduler import Scheduler

__version__ = "1.0.0"
