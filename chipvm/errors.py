"""Exceptions raised by the CHIP-8 interpreter."""

from chipvm.constants import (
    FAULT_NONE, FAULT_STACK_UNDERFLOW, FAULT_STACK_OVERFLOW, FAULT_UNKNOWN_INSTRUCTION
)


class Chip8Error(Exception):
    """Base class for all interpreter errors."""


class CapacityExceeded(Chip8Error):
    """A font or program image does not fit in its memory region.

    Recoverable: the interpreter state is left as it was before the load.
    """

    def __init__(self, what: str, capacity: int, size: int):
        self.what = what
        self.capacity = capacity
        self.size = size
        super().__init__(f"{what} exceeds maximum size (cap: {capacity}, len: {size})")


class ExecutionFault(Chip8Error):
    """An instruction could not be executed. The program cannot continue."""

    description = "execution fault"

    def __init__(self, opcode: int, pc: int):
        self.opcode = opcode
        self.pc = pc
        super().__init__(f"{self.description} (opcode {opcode:04X} at {pc:04X})")


class StackUnderflow(ExecutionFault):
    description = "Couldn't pop from stack (stack is empty)"


class StackOverflow(ExecutionFault):
    description = "Couldn't push into stack (stack has exceeded maximum size)"


class UnknownInstruction(ExecutionFault):
    description = "Unknown instruction"


FAULT_EXCEPTIONS = {
    FAULT_STACK_UNDERFLOW: StackUnderflow,
    FAULT_STACK_OVERFLOW: StackOverflow,
    FAULT_UNKNOWN_INSTRUCTION: UnknownInstruction,
}


def raise_for_fault(fault: int, opcode: int, pc: int) -> None:
    """Raise the exception matching a fault code, if any."""
    if fault == FAULT_NONE:
        return
    try:
        exception_type = FAULT_EXCEPTIONS[fault]
    except KeyError:
        raise ValueError(f"Unknown fault code {fault}") from None
    raise exception_type(opcode, pc)
