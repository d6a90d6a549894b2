"""CHIP-8 ALU operations (8xxx).

Every operation works on int32 copies of VX, VY and VF and returns
``(result, flag, writes_flag)``. The dispatcher stores the result in VX first and
the flag in VF last, so ``8FY4`` and friends end with the flag in VF.
"""

import jax
import jax.lax
import jax.numpy as jnp
from chipvm.state import EmulatorState
from chipvm.decode import DecodedInstruction
from chipvm.constants import FLAG_REGISTER, FAULT_UNKNOWN_INSTRUCTION
from chipvm.instructions.system import fault_if

KEEP_FLAG = jnp.zeros((), dtype=jnp.bool_)
WRITE_FLAG = jnp.ones((), dtype=jnp.bool_)


def alu_set(vx, vy, vf):
    """8XY0 - Set: VX = VY."""
    return vy, vf, KEEP_FLAG


def alu_or(vx, vy, vf):
    """8XY1 - Binary OR: VX |= VY."""
    return vx | vy, vf, KEEP_FLAG


def alu_and(vx, vy, vf):
    """8XY2 - Binary AND: VX &= VY."""
    return vx & vy, vf, KEEP_FLAG


def alu_xor(vx, vy, vf):
    """8XY3 - Logical XOR: VX ^= VY."""
    return vx ^ vy, vf, KEEP_FLAG


def alu_add(vx, vy, vf):
    """8XY4 - Add: VX += VY, VF = carry."""
    result = vx + vy
    return result & 0xFF, jnp.astype(result > 0xFF, jnp.int32), WRITE_FLAG


def alu_sub_xy(vx, vy, vf):
    """8XY5 - Subtract: VX -= VY, VF = 1 when there is no borrow."""
    return (vx - vy) & 0xFF, jnp.astype(vx >= vy, jnp.int32), WRITE_FLAG


def alu_shift_right(vx, vy, vf):
    """8XY6 - Shift right: VX = VY >> 1, VF = old LSB of VY."""
    return vy >> 1, vy & 0x01, WRITE_FLAG


def alu_sub_yx(vx, vy, vf):
    """8XY7 - Subtract: VX = VY - VX, VF = 1 when there is no borrow."""
    return (vy - vx) & 0xFF, jnp.astype(vy >= vx, jnp.int32), WRITE_FLAG


def alu_shift_left(vx, vy, vf):
    """8XYE - Shift left: VX = VY << 1, VF = old MSB of VY as 0 or 1."""
    return (vy << 1) & 0xFF, (vy >> 7) & 0x01, WRITE_FLAG


def alu_undefined(vx, vy, vf):
    """Undefined ALU operation."""
    return vx, vf, KEEP_FLAG


ALU_OPERATIONS = [
    alu_set, alu_or, alu_and, alu_xor, alu_add,
    alu_sub_xy, alu_shift_right, alu_sub_yx, alu_shift_left,
    alu_undefined,
]
UNDEFINED_BRANCH = len(ALU_OPERATIONS) - 1

# Low nibble -> branch in ALU_OPERATIONS
ALU_BRANCHES = jnp.array([0, 1, 2, 3, 4, 5, 6, 7, 9, 9, 9, 9, 9, 9, 8, 9], dtype=jnp.int32)


def execute_alu_operation(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """8XYN - ALU operations dispatcher."""
    vx = jnp.astype(state.V[instruction.x], jnp.int32)
    vy = jnp.astype(state.V[instruction.y], jnp.int32)
    vf = jnp.astype(state.V[FLAG_REGISTER], jnp.int32)

    branch = ALU_BRANCHES[instruction.n]
    result, flag, writes_flag = jax.lax.switch(
        branch,
        ALU_OPERATIONS,
        vx, vy, vf
    )

    new_V = state.V.at[instruction.x].set(jnp.astype(result, jnp.uint8))
    new_V = jnp.where(writes_flag, new_V.at[FLAG_REGISTER].set(jnp.astype(flag, jnp.uint8)), new_V)
    state = state.replace(V=new_V)
    return fault_if(state, branch == UNDEFINED_BRANCH, FAULT_UNKNOWN_INSTRUCTION)
