"""Main CHIP-8 emulator execution engine."""

from functools import partial
from typing import Union

import jax
import jax.lax
import jax.numpy as jnp
from chipvm.state import EmulatorState, create_stack
from chipvm.decode import decode
from chipvm.errors import CapacityExceeded
from chipvm.constants import (
    PROGRAM_START, PROGRAM_CAPACITY, FONT_START, FONT_END, ADDRESS_MASK,
    NUM_KEYS, NO_KEY, FAULT_NONE
)
from chipvm.instructions.system import execute_system_instruction
from chipvm.instructions.control_flow import (
    execute_jump, execute_call, execute_skip_if_equal_immediate,
    execute_skip_if_not_equal_immediate, execute_skip_if_equal_register,
    execute_skip_if_not_equal_register, execute_jump_with_offset, execute_skip_if_key
)
from chipvm.instructions.alu import execute_alu_operation
from chipvm.instructions.memory import execute_set, execute_add, execute_set_index, execute_random
from chipvm.instructions.display import execute_display
from chipvm.instructions.misc import execute_misc_instruction

INSTRUCTION_FAMILIES = [
    execute_system_instruction,
    execute_jump,
    execute_call,
    execute_skip_if_equal_immediate,
    execute_skip_if_not_equal_immediate,
    execute_skip_if_equal_register,
    execute_set,
    execute_add,
    execute_alu_operation,
    execute_skip_if_not_equal_register,
    execute_set_index,
    execute_jump_with_offset,
    execute_random,
    execute_display,
    execute_skip_if_key,
    execute_misc_instruction,
]


def execute(state: EmulatorState, instruction: int) -> EmulatorState:
    """Execute single CHIP-8 instruction.

    ``pc`` is expected to already point past the instruction (see ``fetch``).
    """
    decoded_instruction = decode(instruction)
    return jax.lax.switch(decoded_instruction.opcode, INSTRUCTION_FAMILIES, state, decoded_instruction)


def _pack_u16(high: jnp.uint8, low: jnp.uint8) -> jnp.uint16:
    """Pack two bytes into uint16."""
    return (high.astype(jnp.uint16) << 8) | low.astype(jnp.uint16)


def fetch(state: EmulatorState) -> tuple[EmulatorState, jnp.uint16]:
    """Fetch next instruction from memory and advance the program counter."""
    pc = jnp.astype(state.pc, jnp.int32)
    instruction = _pack_u16(state.memory[pc & ADDRESS_MASK], state.memory[(pc + 1) & ADDRESS_MASK])
    return state.replace(pc=state.pc + 2, opcode=instruction), instruction


def tick_timers(state: EmulatorState) -> EmulatorState:
    """Count both timers down by one; beep when the sound timer runs out."""
    return state.replace(
        delay_timer=jnp.where(state.delay_timer > 0, state.delay_timer - 1, state.delay_timer),
        sound_timer=jnp.where(state.sound_timer > 0, state.sound_timer - 1, state.sound_timer),
        beep=state.sound_timer == 1,
    )


def clear_key_latch(state: EmulatorState) -> EmulatorState:
    return state.replace(last_key=jnp.full((), NO_KEY, dtype=jnp.int32))


def _advance(state: EmulatorState) -> EmulatorState:
    next_state, instruction = fetch(state)
    next_state = execute(next_state, instruction)
    next_state = clear_key_latch(tick_timers(next_state))

    return jax.lax.cond(
        next_state.fault != FAULT_NONE,
        lambda: state.replace(fault=next_state.fault, opcode=next_state.opcode),
        lambda: next_state,
    )


def cycle(state: EmulatorState) -> EmulatorState:
    """Run one fetch-decode-execute cycle followed by a timer tick.

    A faulting instruction leaves the state as it was before the cycle apart from
    ``fault`` and ``opcode``. A faulted state no longer changes.
    """
    return jax.lax.cond(state.fault != FAULT_NONE, lambda s: s, _advance, state)


def run_cycle(state, _):
    state = cycle(state)
    return state, None


@partial(jax.jit, static_argnums=1)
def run_cycles(state: EmulatorState, n: int) -> EmulatorState:
    """Run ``n`` cycles, stopping early (in effect) on the first fault."""
    state, _ = jax.lax.scan(run_cycle, state, length=n)
    return state


def set_key(state: EmulatorState, key: int, pressed: bool) -> EmulatorState:
    """Update one keypad slot. A press also latches the key for FX0A."""
    if not 0 <= key < NUM_KEYS:
        raise ValueError(f"Key index must be in [0, {NUM_KEYS - 1}], got {key}")
    last_key = jnp.full((), key, dtype=jnp.int32) if pressed else state.last_key
    return state.replace(keypad=state.keypad.at[key].set(bool(pressed)), last_key=last_key)


def _as_byte_array(data: Union[bytes, bytearray, list]) -> jnp.ndarray:
    return jnp.array(list(data), dtype=jnp.uint8)


def install_fontset(state: EmulatorState, fontset: bytes) -> EmulatorState:
    """Copy a font blob into the font region of memory."""
    capacity = FONT_END - FONT_START
    if len(fontset) > capacity:
        raise CapacityExceeded("Fontset ROM", capacity, len(fontset))
    if len(fontset) == 0:
        return state
    new_memory = state.memory.at[FONT_START:FONT_START + len(fontset)].set(_as_byte_array(fontset))
    return state.replace(memory=new_memory)


def load_program(state: EmulatorState, rom: bytes) -> EmulatorState:
    """Load ROM data into CHIP-8 memory starting at 0x200.

    Resets the program counter, index register, call stack and fault code.
    Registers, timers, keys and the display keep their values.
    """
    if len(rom) > PROGRAM_CAPACITY:
        raise CapacityExceeded("Game ROM", PROGRAM_CAPACITY, len(rom))
    new_memory = state.memory
    if len(rom) > 0:
        new_memory = new_memory.at[PROGRAM_START:PROGRAM_START + len(rom)].set(_as_byte_array(rom))
    return state.replace(
        memory=new_memory,
        pc=jnp.asarray(PROGRAM_START, dtype=jnp.uint16),
        I=jnp.zeros((), dtype=jnp.uint16),
        stack=create_stack(),
        fault=jnp.full((), FAULT_NONE, dtype=jnp.int32),
    )


def load_rom(state: EmulatorState, filename: str) -> EmulatorState:
    """Load a ROM file into CHIP-8 memory starting at 0x200."""
    with open(filename, 'rb') as f:
        rom_data = f.read()
    return load_program(state, rom_data)
