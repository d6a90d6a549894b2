"""CHIP-8 control flow instructions."""

import jax
import jax.lax
import jax.numpy as jnp
from chipvm.state import EmulatorState
from chipvm.decode import DecodedInstruction
from chipvm.constants import FAULT_STACK_OVERFLOW
from chipvm.stack import push
from chipvm.instructions.system import fault_if, execute_unknown


def execute_jump(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """1NNN - Jump to address NNN."""
    return state.replace(pc=jnp.astype(instruction.nnn, jnp.uint16))


def execute_call(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """2NNN - Call subroutine at NNN."""
    stack, overflow = push(state.stack, state.pc)
    target = jnp.astype(instruction.nnn, jnp.uint16)
    state = state.replace(stack=stack, pc=jnp.where(overflow, state.pc, target))
    return fault_if(state, overflow, FAULT_STACK_OVERFLOW)


def make_skip_instruction(condition_fn):
    """Factory for skip instructions."""
    def skip_instruction(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
        condition = condition_fn(state, instruction)
        return jax.lax.cond(
            condition,
            lambda s: s.replace(pc=s.pc + 2),
            lambda s: s,
            state
        )
    return skip_instruction


def require_zero_low_nibble(instruction_fn):
    """5XY0/9XY0 are only defined with a zero low nibble."""
    def checked_instruction(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
        return jax.lax.cond(
            instruction.n == 0,
            instruction_fn,
            execute_unknown,
            state, instruction
        )
    return checked_instruction


execute_skip_if_equal_immediate = make_skip_instruction(
    lambda state, inst: state.V[inst.x] == inst.nn
)

execute_skip_if_not_equal_immediate = make_skip_instruction(
    lambda state, inst: state.V[inst.x] != inst.nn
)

execute_skip_if_equal_register = require_zero_low_nibble(make_skip_instruction(
    lambda state, inst: state.V[inst.x] == state.V[inst.y]
))

execute_skip_if_not_equal_register = require_zero_low_nibble(make_skip_instruction(
    lambda state, inst: state.V[inst.x] != state.V[inst.y]
))


def execute_jump_with_offset(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """BNNN - Jump to address NNN + V0."""
    jump_address = instruction.nnn + jnp.astype(state.V[0], jnp.int32)
    return state.replace(pc=jnp.astype(jump_address, jnp.uint16))


execute_skip_if_key_pressed = make_skip_instruction(
    lambda state, inst: state.keypad[state.V[inst.x] & 0xF]
)

execute_skip_if_key_not_pressed = make_skip_instruction(
    lambda state, inst: ~state.keypad[state.V[inst.x] & 0xF]
)


def execute_skip_if_key(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """EX9E/EXA1 - Skip if key VX pressed/not pressed."""
    branch = jnp.select([instruction.nn == 0x9E, instruction.nn == 0xA1], [0, 1], 2)
    return jax.lax.switch(
        branch,
        [execute_skip_if_key_pressed, execute_skip_if_key_not_pressed, execute_unknown],
        state, instruction
    )
