"""CHIP-8 miscellaneous instructions (Fxxx)."""

import jax
import jax.lax
import jax.numpy as jnp
from chipvm.state import EmulatorState
from chipvm.decode import DecodedInstruction
from chipvm.constants import FONT_START, ADDRESS_MASK, NUM_REGISTERS, NO_KEY
from chipvm.instructions.system import execute_unknown


def execute_get_delay_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX07 - Set VX to delay timer value."""
    return state.replace(V=state.V.at[instruction.x].set(state.delay_timer))


def execute_set_delay_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX15 - Set delay timer to VX."""
    return state.replace(delay_timer=state.V[instruction.x])


def execute_set_sound_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX18 - Set sound timer to VX."""
    return state.replace(sound_timer=state.V[instruction.x])


def execute_add_to_index(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX1E - Add VX to I register, wrapping at 16 bits."""
    new_i = (jnp.astype(state.I, jnp.int32) + jnp.astype(state.V[instruction.x], jnp.int32)) & 0xFFFF
    return state.replace(I=jnp.astype(new_i, jnp.uint16))


def execute_wait_for_key(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX0A - Wait for key press.

    Nothing latched means the instruction runs again next cycle.
    """
    def key_pressed_action(state):
        return state.replace(
            V=state.V.at[instruction.x].set(jnp.astype(state.last_key, jnp.uint8)),
            last_key=jnp.full((), NO_KEY, dtype=jnp.int32),
        )

    def wait_action(state):
        return state.replace(pc=state.pc - 2)

    return jax.lax.cond(state.last_key != NO_KEY, key_pressed_action, wait_action, state)


def execute_font_character(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX29 - Set I to location of sprite for digit VX."""
    font_address = FONT_START + jnp.astype(state.V[instruction.x], jnp.int32) * 5
    return state.replace(I=jnp.astype(font_address, jnp.uint16))


def execute_bcd_conversion(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX33 - Store BCD representation of VX at I, I+1, I+2."""
    value = state.V[instruction.x]

    digits = jnp.array([
        value // 100,
        (value // 10) % 10,
        value % 10
    ], dtype=jnp.uint8)

    indices = (jnp.astype(state.I, jnp.int32) + jnp.arange(3)) & ADDRESS_MASK
    return state.replace(memory=state.memory.at[indices].set(digits))


def _register_block(state: EmulatorState, instruction: DecodedInstruction):
    """Mask of V0..VX, their memory addresses starting at I, and I advanced past them."""
    register_mask = jnp.arange(NUM_REGISTERS) <= instruction.x
    addresses = (jnp.astype(state.I, jnp.int32) + jnp.arange(NUM_REGISTERS)) & ADDRESS_MASK
    next_i = (jnp.astype(state.I, jnp.int32) + instruction.x + 1) & 0xFFFF
    return register_mask, addresses, jnp.astype(next_i, jnp.uint16)


def execute_store_registers(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX55 - Store V0 through VX in memory starting at I."""
    register_mask, addresses, next_i = _register_block(state, instruction)
    new_memory_values = jnp.where(register_mask, state.V, state.memory[addresses])
    return state.replace(memory=state.memory.at[addresses].set(new_memory_values), I=next_i)


def execute_load_registers(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX65 - Load V0 through VX from memory starting at I."""
    register_mask, addresses, next_i = _register_block(state, instruction)
    new_V = jnp.where(register_mask, state.memory[addresses], state.V)
    return state.replace(V=new_V, I=next_i)


MISC_OPERATIONS = {
    0x07: execute_get_delay_timer,
    0x0A: execute_wait_for_key,
    0x15: execute_set_delay_timer,
    0x18: execute_set_sound_timer,
    0x1E: execute_add_to_index,
    0x29: execute_font_character,
    0x33: execute_bcd_conversion,
    0x55: execute_store_registers,
    0x65: execute_load_registers,
}


def execute_misc_instruction(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """Dispatch misc instructions on the low byte."""
    codes = list(MISC_OPERATIONS)
    branch = jnp.select(
        [instruction.nn == code for code in codes],
        list(range(len(codes))),
        len(codes),
    )
    return jax.lax.switch(
        branch,
        list(MISC_OPERATIONS.values()) + [execute_unknown],
        state, instruction
    )
