"""Tests for display operations (DXYN)."""

import pytest
import jax.numpy as jnp
from chipvm import execute
from conftest import setup_sprite_in_memory


class TestBasicSprites:
    """Test basic sprite drawing."""

    def test_basic_sprite_draw(self, fresh_state):
        """Test basic sprite drawing without collision."""
        state = fresh_state

        # Simple 2x2 box sprite
        sprite = [0xC0, 0xC0]  # 11000000, 11000000
        state = setup_sprite_in_memory(state, 0x300, sprite)

        state = execute(state, 0x600A)  # V0 = 10
        state = execute(state, 0x6105)  # V1 = 5
        state = execute(state, 0xA300)  # I = 0x300

        state = execute(state, 0xD012)

        assert state.display[10, 5] == 1  # Top-left
        assert state.display[11, 5] == 1  # Top-right
        assert state.display[10, 6] == 1  # Bottom-left
        assert state.display[11, 6] == 1  # Bottom-right
        assert state.display[12, 5] == 0  # Outside sprite
        assert jnp.sum(state.display) == 4

        assert state.V[15] == 0
        assert state.redraw

    def test_collision_detection(self, fresh_state):
        """Test collision flag when sprite overlaps existing pixels."""
        state = fresh_state

        sprite = [0x80]  # 10000000
        state = setup_sprite_in_memory(state, 0x400, sprite)

        state = execute(state, 0x6014)  # V0 = 20
        state = execute(state, 0x610A)  # V1 = 10
        state = execute(state, 0xA400)  # I = 0x400

        # Draw first time - no collision
        state = execute(state, 0xD011)
        assert state.display[20, 10] == 1
        assert state.V[15] == 0

        # Draw again at same location
        state = execute(state, 0xD011)
        assert state.display[20, 10] == 0  # Pixel erased by XOR
        assert state.V[15] == 1

    def test_xor_behavior(self, fresh_state):
        """Drawing the same 8x1 sprite twice clears every touched cell."""
        state = fresh_state

        sprite = [0xF0]  # 11110000
        state = setup_sprite_in_memory(state, 0x500, sprite)

        state = execute(state, 0x6008)  # V0 = 8
        state = execute(state, 0x610F)  # V1 = 15
        state = execute(state, 0xA500)  # I = 0x500

        state = execute(state, 0xD011)
        for x in range(8, 12):
            assert state.display[x, 15] == 1
        assert state.V[15] == 0

        state = execute(state, 0xD011)
        assert jnp.sum(state.display) == 0
        assert state.V[15] == 1

    def test_flag_is_cleared_before_drawing(self, fresh_state):
        """A stale VF does not leak into a collision-free draw."""
        state = setup_sprite_in_memory(fresh_state, 0x300, [0xFF])
        state = state.replace(V=state.V.at[15].set(1))
        state = execute(state, 0xA300)

        state = execute(state, 0xD001)
        assert state.V[15] == 0

    def test_zero_height_sprite(self, fresh_state):
        """DXY0 draws nothing."""
        state = setup_sprite_in_memory(fresh_state, 0x300, [0xFF])
        state = execute(state, 0xA300)

        state = execute(state, 0xD000)
        assert jnp.sum(state.display) == 0
        assert state.V[15] == 0

    def test_font_glyph(self, fresh_state):
        """Draw the built-in '0' glyph."""
        state = execute(fresh_state, 0x6000)  # V0 = 0
        state = execute(state, 0xF029)  # I = glyph for V0
        state = execute(state, 0xD005)

        # 0xF0 0x90 0x90 0x90 0xF0
        assert jnp.sum(state.display[0:4, 0]) == 4
        assert state.display[0, 1] == 1
        assert state.display[1, 1] == 0
        assert state.display[3, 1] == 1
        assert jnp.sum(state.display) == 14


class TestEdges:
    """Origins wrap, sprite pixels past the edge follow the sprite_wrap policy."""

    def test_origin_wraps(self, fresh_state):
        state = setup_sprite_in_memory(fresh_state, 0x300, [0x80])
        state = execute(state, 0x6045)  # V0 = 69 -> x = 5
        state = execute(state, 0x6122)  # V1 = 34 -> y = 2
        state = execute(state, 0xA300)

        state = execute(state, 0xD011)
        assert state.display[5, 2] == 1
        assert jnp.sum(state.display) == 1

    def test_clip_right_edge(self, fresh_state):
        state = setup_sprite_in_memory(fresh_state, 0x300, [0xFF])
        state = execute(state, 0x603C)  # V0 = 60
        state = execute(state, 0xA300)

        state = execute(state, 0xD011)
        assert jnp.sum(state.display[60:64, 0]) == 4
        assert jnp.sum(state.display[0:4, 0]) == 0

    def test_clip_bottom_edge(self, fresh_state):
        state = setup_sprite_in_memory(fresh_state, 0x300, [0x80, 0x80, 0x80])
        state = execute(state, 0x611E)  # V1 = 30
        state = execute(state, 0xA300)

        state = execute(state, 0xD013)
        assert state.display[0, 30] == 1
        assert state.display[0, 31] == 1
        assert state.display[0, 0] == 0

    def test_wrap_right_edge(self, wrap_state):
        state = setup_sprite_in_memory(wrap_state, 0x300, [0xFF])
        state = execute(state, 0x603C)  # V0 = 60
        state = execute(state, 0xA300)

        state = execute(state, 0xD011)
        assert jnp.sum(state.display[60:64, 0]) == 4
        assert jnp.sum(state.display[0:4, 0]) == 4
        assert jnp.sum(state.display) == 8

    def test_wrap_bottom_edge(self, wrap_state):
        state = setup_sprite_in_memory(wrap_state, 0x300, [0x80, 0x80, 0x80])
        state = execute(state, 0x611E)  # V1 = 30
        state = execute(state, 0xA300)

        state = execute(state, 0xD013)
        assert state.display[0, 30] == 1
        assert state.display[0, 31] == 1
        assert state.display[0, 0] == 1

    def test_wrapped_collision(self, wrap_state):
        state = setup_sprite_in_memory(wrap_state, 0x300, [0xFF])
        state = state.replace(display=state.display.at[1, 0].set(True))
        state = execute(state, 0x603C)  # V0 = 60
        state = execute(state, 0xA300)

        state = execute(state, 0xD011)
        assert state.display[1, 0] == 0
        assert state.V[15] == 1
