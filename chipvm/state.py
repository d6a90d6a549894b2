"""CHIP-8 emulator state structures."""

import jax
import jax.numpy as jnp
from flax.struct import dataclass, PyTreeNode, field

from chipvm.constants import (
    MEMORY_SIZE, FONT_START, PROGRAM_START, FONT_DATA, SCREEN_WIDTH, SCREEN_HEIGHT,
    STACK_SIZE, NUM_REGISTERS, NUM_KEYS, NO_KEY, FAULT_NONE
)


@dataclass(frozen=True)
class StackState:
    """Stack state for subroutine calls."""
    data: jnp.ndarray
    pointer: jnp.ndarray


class EmulatorState(PyTreeNode):
    """Main CHIP-8 emulator state.

    The display is indexed ``[x, y]``. ``last_key`` holds the key latched since the
    last cycle, or ``NO_KEY``. ``fault`` is a fault code from ``chipvm.constants``;
    anything other than ``FAULT_NONE`` means the program has stopped.
    """
    rng: jax.Array
    memory: jnp.ndarray
    pc: jnp.ndarray
    I: jnp.ndarray
    V: jnp.ndarray
    stack: StackState
    display: jnp.ndarray
    keypad: jnp.ndarray
    last_key: jnp.ndarray
    delay_timer: jnp.ndarray
    sound_timer: jnp.ndarray
    opcode: jnp.ndarray
    redraw: jnp.ndarray
    beep: jnp.ndarray
    fault: jnp.ndarray
    sprite_wrap: bool = field(pytree_node=False, default=False)


def create_stack() -> StackState:
    """Create an empty call stack."""
    return StackState(
        data=jnp.zeros(STACK_SIZE, dtype=jnp.uint16),
        pointer=jnp.zeros((), dtype=jnp.int32),
    )


def create_state(rng: jax.Array = None, sprite_wrap: bool = False) -> EmulatorState:
    """Create initial emulator state with font data loaded."""
    if rng is None:
        rng = jax.random.PRNGKey(0)
    memory = jnp.zeros(MEMORY_SIZE, dtype=jnp.uint8)
    return EmulatorState(
        rng=rng,
        memory=memory.at[FONT_START:FONT_START + len(FONT_DATA)].set(FONT_DATA),
        pc=jnp.asarray(PROGRAM_START, dtype=jnp.uint16),
        I=jnp.zeros((), dtype=jnp.uint16),
        V=jnp.zeros(NUM_REGISTERS, dtype=jnp.uint8),
        stack=create_stack(),
        display=jnp.zeros((SCREEN_WIDTH, SCREEN_HEIGHT), dtype=jnp.bool_),
        keypad=jnp.zeros(NUM_KEYS, dtype=jnp.bool_),
        last_key=jnp.full((), NO_KEY, dtype=jnp.int32),
        delay_timer=jnp.zeros((), dtype=jnp.uint8),
        sound_timer=jnp.zeros((), dtype=jnp.uint8),
        opcode=jnp.zeros((), dtype=jnp.uint16),
        redraw=jnp.zeros((), dtype=jnp.bool_),
        beep=jnp.zeros((), dtype=jnp.bool_),
        fault=jnp.full((), FAULT_NONE, dtype=jnp.int32),
        sprite_wrap=sprite_wrap,
    )
