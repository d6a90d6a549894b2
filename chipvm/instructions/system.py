"""CHIP-8 system instructions (0x0xxx)."""

import jax
import jax.lax
import jax.numpy as jnp
from chipvm.state import EmulatorState
from chipvm.decode import DecodedInstruction
from chipvm.constants import FAULT_STACK_UNDERFLOW, FAULT_UNKNOWN_INSTRUCTION
from chipvm.stack import pop


def no_op(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """0000 - No operation."""
    return state


def fault_if(state: EmulatorState, condition, code: int) -> EmulatorState:
    """Record fault ``code`` when ``condition`` holds."""
    return state.replace(fault=jnp.where(condition, jnp.int32(code), state.fault))


def execute_unknown(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """Any encoding without a defined meaning."""
    return fault_if(state, True, FAULT_UNKNOWN_INSTRUCTION)


def execute_clear_screen(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """00E0 - Clear display."""
    return state.replace(
        display=jnp.zeros_like(state.display),
        redraw=jnp.ones((), dtype=jnp.bool_),
    )


def execute_return(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """00EE - Return from subroutine."""
    stack, address, underflow = pop(state.stack)
    state = state.replace(stack=stack, pc=jnp.where(underflow, state.pc, address))
    return fault_if(state, underflow, FAULT_STACK_UNDERFLOW)


def execute_system_instruction(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """Dispatch system instructions."""
    branch = jnp.select(
        [instruction.nnn == 0x000, instruction.nnn == 0x0E0, instruction.nnn == 0x0EE],
        [0, 1, 2],
        3,
    )
    return jax.lax.switch(
        branch,
        [no_op, execute_clear_screen, execute_return, execute_unknown],
        state, instruction
    )
