"""CHIP-8 virtual machine package."""

from chipvm.state import EmulatorState, StackState, create_state
from chipvm.emulator import (
    execute, fetch, cycle, run_cycles, tick_timers, set_key,
    install_fontset, load_program, load_rom
)
from chipvm.decode import DecodedInstruction, decode, disassemble
from chipvm.errors import (
    Chip8Error, CapacityExceeded, ExecutionFault,
    StackUnderflow, StackOverflow, UnknownInstruction
)
from chipvm.interpreter import Interpreter
from chipvm.constants import *

__all__ = [
    "EmulatorState",
    "StackState",
    "create_state",
    "fetch",
    "execute",
    "cycle",
    "run_cycles",
    "tick_timers",
    "set_key",
    "install_fontset",
    "load_program",
    "load_rom",
    "DecodedInstruction",
    "decode",
    "disassemble",
    "Chip8Error",
    "CapacityExceeded",
    "ExecutionFault",
    "StackUnderflow",
    "StackOverflow",
    "UnknownInstruction",
    "Interpreter",
    "PROGRAM_START",
    "FONT_START",
    "SCREEN_WIDTH",
    "SCREEN_HEIGHT",
]
