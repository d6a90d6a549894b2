"""CHIP-8 frame conversion for the headless runner."""

from typing import Tuple

import jax.numpy as jnp
import numpy as np
from PIL import Image

from chipvm.constants import SCREEN_WIDTH, SCREEN_HEIGHT


def _as_pixels(display: jnp.ndarray) -> np.ndarray:
    """Boolean ``(height, width)`` pixels from a ``(64, 32)`` state display."""
    pixels = np.array(display, dtype=np.bool_)
    if pixels.shape != (SCREEN_WIDTH, SCREEN_HEIGHT):
        raise ValueError(
            f"Expected display shape ({SCREEN_WIDTH}, {SCREEN_HEIGHT}), got {pixels.shape}"
        )
    # State layout (64 width, 32 height) -> image layout (32 height, 64 width)
    return pixels.T


def chip8_display_to_rgb(
    display: jnp.ndarray,
    scale: int = 8,
    on_color: Tuple[int, int, int] = (255, 255, 255),
    off_color: Tuple[int, int, int] = (0, 0, 0),
) -> np.ndarray:
    """Convert CHIP-8 boolean display to RGB array with optional upscaling.

    Args:
        display: Boolean array of shape (64, 32) representing CHIP-8 display
        scale: Upscaling factor for better visibility (default: 8x)
        on_color: RGB color for "on" pixels (default: white)
        off_color: RGB color for "off" pixels (default: black)

    Returns:
        RGB array of shape (height*scale, width*scale, 3) with uint8 values
    """
    if scale < 1:
        raise ValueError(f"Scale must be a positive integer, got {scale}")
    pixels = _as_pixels(display)
    height, width = pixels.shape

    rgb_frame = np.zeros((height, width, 3), dtype=np.uint8)

    rgb_frame[pixels] = on_color
    rgb_frame[~pixels] = off_color

    # Apply upscaling using nearest neighbor interpolation
    if scale > 1:
        rgb_frame = np.repeat(np.repeat(rgb_frame, scale, axis=0), scale, axis=1)

    return rgb_frame


def create_color_scheme(
    scheme: str = "white",
) -> Tuple[Tuple[int, int, int], Tuple[int, int, int]]:
    """Get predefined color schemes for CHIP-8 rendering.

    Args:
        scheme: Color scheme name ("white", "classic", "amber", "blue", "retro")

    Returns:
        Tuple of (on_color, off_color) as RGB tuples
    """
    schemes = {
        "white": ((255, 255, 255), (0, 0, 0)),  # White on black
        "classic": ((0, 255, 0), (0, 0, 0)),  # Green on black
        "amber": ((255, 176, 0), (0, 0, 0)),  # Amber on black
        "blue": ((0, 255, 255), (0, 0, 64)),  # Cyan on dark blue
        "retro": ((255, 255, 0), (64, 0, 64)),  # Yellow on purple
    }

    if scheme not in schemes:
        raise ValueError(
            f"Unknown color scheme '{scheme}'. Available: {list(schemes.keys())}"
        )

    return schemes[scheme]


def display_to_ascii(display: jnp.ndarray, on: str = "#", off: str = ".") -> str:
    """Render the display as 32 lines of 64 characters."""
    pixels = _as_pixels(display)
    return "\n".join("".join(on if cell else off for cell in row) for row in pixels)


def save_frame(
    display: jnp.ndarray,
    filename: str,
    scale: int = 8,
    color_scheme: str = "white",
) -> None:
    """Save the display as an image file (format taken from the extension)."""
    on_color, off_color = create_color_scheme(color_scheme)
    rgb = chip8_display_to_rgb(display, scale=scale, on_color=on_color, off_color=off_color)
    Image.fromarray(rgb).save(filename)
