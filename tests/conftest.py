"""Test configuration and fixtures for CHIP-8 interpreter tests."""

import pytest
import jax.numpy as jnp
from chipvm import create_state, Interpreter, PROGRAM_START


@pytest.fixture
def fresh_state():
    """Provide a fresh emulator state for each test."""
    return create_state()


@pytest.fixture
def wrap_state():
    """Provide a fresh state that wraps sprites around the screen edges."""
    return create_state(sprite_wrap=True)


@pytest.fixture
def interpreter():
    """Provide an interpreter with nothing loaded."""
    return Interpreter(seed=0)


def setup_sprite_in_memory(state, address, sprite_bytes):
    """Helper to put sprite data in memory."""
    return state.replace(
        memory=state.memory.at[address:address+len(sprite_bytes)].set(
            jnp.array(sprite_bytes, dtype=jnp.uint8)
        )
    )


def assemble(*words):
    """Big-endian program image from 16-bit instruction words."""
    return b"".join(word.to_bytes(2, "big") for word in words)


def setup_program(state, *words, address=PROGRAM_START):
    """Helper to put instruction words in memory."""
    return setup_sprite_in_memory(state, address, list(assemble(*words)))
