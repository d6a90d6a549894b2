"""CHIP-8 instruction decoding."""

import jax.numpy as jnp
from chex import dataclass


@dataclass(frozen=True)
class DecodedInstruction:
    """Decoded CHIP-8 instruction with extracted operands.

    Operand fields are int32 scalars so they can index arrays and drive
    ``jax.lax.switch`` directly.
    """
    raw: jnp.ndarray
    opcode: jnp.ndarray  # First nibble
    x: jnp.ndarray       # Second nibble (VX register)
    y: jnp.ndarray       # Third nibble (VY register)
    n: jnp.ndarray       # Fourth nibble (4-bit immediate)
    nn: jnp.ndarray      # Last byte (8-bit immediate)
    nnn: jnp.ndarray     # Last 12 bits (12-bit address)


def decode(instruction) -> DecodedInstruction:
    """Decode 16-bit instruction into components."""
    raw = jnp.astype(jnp.asarray(instruction), jnp.uint16)
    word = jnp.astype(raw, jnp.int32)
    return DecodedInstruction(
        raw=raw,
        opcode=(word & 0xF000) >> 12,
        x=(word & 0x0F00) >> 8,
        y=(word & 0x00F0) >> 4,
        n=word & 0x000F,
        nn=word & 0x00FF,
        nnn=word & 0x0FFF,
    )


_FIXED = {
    0x0000: "NOP",
    0x00E0: "CLS",
    0x00EE: "RET",
}

_ALU = {
    0x0: "LD V{x:X}, V{y:X}",
    0x1: "OR V{x:X}, V{y:X}",
    0x2: "AND V{x:X}, V{y:X}",
    0x3: "XOR V{x:X}, V{y:X}",
    0x4: "ADD V{x:X}, V{y:X}",
    0x5: "SUB V{x:X}, V{y:X}",
    0x6: "SHR V{x:X}, V{y:X}",
    0x7: "SUBN V{x:X}, V{y:X}",
    0xE: "SHL V{x:X}, V{y:X}",
}

_MISC = {
    0x07: "LD V{x:X}, DT",
    0x0A: "LD V{x:X}, K",
    0x15: "LD DT, V{x:X}",
    0x18: "LD ST, V{x:X}",
    0x1E: "ADD I, V{x:X}",
    0x29: "LD F, V{x:X}",
    0x33: "LD B, V{x:X}",
    0x55: "LD [I], V{x:X}",
    0x65: "LD V{x:X}, [I]",
}

_FAMILIES = {
    0x1: "JP {nnn:03X}",
    0x2: "CALL {nnn:03X}",
    0x3: "SE V{x:X}, {nn:02X}",
    0x4: "SNE V{x:X}, {nn:02X}",
    0x6: "LD V{x:X}, {nn:02X}",
    0x7: "ADD V{x:X}, {nn:02X}",
    0xA: "LD I, {nnn:03X}",
    0xB: "JP V0, {nnn:03X}",
    0xC: "RND V{x:X}, {nn:02X}",
    0xD: "DRW V{x:X}, V{y:X}, {n:X}",
}


def disassemble(instruction: int) -> str:
    """Return a mnemonic for a 16-bit instruction, or ``???`` if it is not valid."""
    instruction = int(instruction) & 0xFFFF
    family = instruction >> 12
    operands = dict(
        x=(instruction >> 8) & 0xF,
        y=(instruction >> 4) & 0xF,
        n=instruction & 0xF,
        nn=instruction & 0xFF,
        nnn=instruction & 0xFFF,
    )

    if family == 0x0:
        template = _FIXED.get(instruction)
    elif family in (0x5, 0x9):
        template = None if operands["n"] else ("SE" if family == 0x5 else "SNE") + " V{x:X}, V{y:X}"
    elif family == 0x8:
        template = _ALU.get(operands["n"])
    elif family == 0xE:
        template = {0x9E: "SKP V{x:X}", 0xA1: "SKNP V{x:X}"}.get(operands["nn"])
    elif family == 0xF:
        template = _MISC.get(operands["nn"])
    else:
        template = _FAMILIES[family]

    if template is None:
        return "???"
    return template.format(**operands)
