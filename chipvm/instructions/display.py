"""CHIP-8 display operations."""

import jax.numpy as jnp
from chipvm.state import EmulatorState
from chipvm.decode import DecodedInstruction
from chipvm.constants import SCREEN_WIDTH, SCREEN_HEIGHT, ADDRESS_MASK, FLAG_REGISTER

# Pre-computed coordinate grids for display operations
xx, yy = jnp.meshgrid(jnp.arange(SCREEN_WIDTH), jnp.arange(SCREEN_HEIGHT), indexing='ij')


def sprite_offsets(state: EmulatorState, origin_x, origin_y):
    """Column and row of every screen cell relative to the sprite origin.

    With ``sprite_wrap`` the offsets are taken modulo the screen size, so cells
    left of or above the origin receive the part of the sprite that runs off the
    opposite edge. Without it those cells get negative offsets and are never drawn.
    """
    col_offset = xx - origin_x
    row_offset = yy - origin_y
    if state.sprite_wrap:
        col_offset = col_offset % SCREEN_WIDTH
        row_offset = row_offset % SCREEN_HEIGHT
    return col_offset, row_offset


def execute_display(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """DXYN - Draw 8xN sprite from memory at I to (VX, VY), VF = collision."""
    origin_x = jnp.astype(state.V[instruction.x], jnp.int32) % SCREEN_WIDTH
    origin_y = jnp.astype(state.V[instruction.y], jnp.int32) % SCREEN_HEIGHT
    col_offset, row_offset = sprite_offsets(state, origin_x, origin_y)

    in_sprite = (col_offset >= 0) & (col_offset < 8) & (row_offset >= 0) & (row_offset < instruction.n)

    addresses = (jnp.astype(state.I, jnp.int32) + jnp.clip(row_offset, 0, 15)) & ADDRESS_MASK
    sprite_bytes = jnp.astype(state.memory[addresses], jnp.int32)
    sprite_bits = (sprite_bytes >> (7 - jnp.clip(col_offset, 0, 7))) & 1
    sprite = (sprite_bits == 1) & in_sprite

    collision = jnp.any(state.display & sprite)
    return state.replace(
        display=state.display ^ sprite,
        V=state.V.at[FLAG_REGISTER].set(jnp.astype(collision, jnp.uint8)),
        redraw=jnp.ones((), dtype=jnp.bool_),
    )
