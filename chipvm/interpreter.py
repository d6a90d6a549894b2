"""Stateful host-facing wrapper around the functional CHIP-8 core."""

from typing import Optional

import jax
import jax.numpy as jnp
import numpy as np

from chipvm.state import EmulatorState, create_state
from chipvm.errors import raise_for_fault
from chipvm.constants import FAULT_NONE, PROGRAM_START
from chipvm.emulator import cycle, run_cycles, load_program, set_key
from chipvm.logging import ConsoleLogger, format_trace

_jit_cycle = jax.jit(cycle)


class Interpreter:
    """CHIP-8 interpreter holding the current emulator state.

    The host loads a program, then alternates ``set_key`` calls with ``step``
    and reads ``framebuffer`` and ``beep`` after each step. Execution faults are
    raised as ``ExecutionFault`` subclasses and keep being raised until the host
    calls ``load`` or ``reset``.

    Example:
        ```python
        interpreter = Interpreter(seed=0)
        interpreter.load(rom_bytes)
        while running:
            interpreter.set_key(0x5, True)
            interpreter.step()
            frame = interpreter.framebuffer
        ```
    """

    def __init__(
        self,
        seed: int = 0,
        sprite_wrap: bool = False,
        logger: Optional[ConsoleLogger] = None,
        trace: bool = False,
    ):
        """
        Args:
            seed: Seed of the random source used by CXNN
            sprite_wrap: Wrap sprites around screen edges instead of clipping them
            logger: Console logger, a quiet default one is created if omitted
            trace: Log a debug trace line after every ``step``
        """
        self.seed = seed
        self.sprite_wrap = sprite_wrap
        self.logger = logger or ConsoleLogger(log_level="WARNING")
        self.trace = trace
        self._state = self._fresh_state()

    def _fresh_state(self) -> EmulatorState:
        return create_state(jax.random.PRNGKey(self.seed), sprite_wrap=self.sprite_wrap)

    @property
    def state(self) -> EmulatorState:
        """Current emulator state."""
        return self._state

    def reset(self) -> None:
        """Discard everything, including the loaded program."""
        self._state = self._fresh_state()
        self.logger.debug("Interpreter reset")

    def load(self, rom: bytes) -> int:
        """Load a program image at 0x200.

        Returns:
            Number of bytes loaded

        Raises:
            CapacityExceeded: if the image does not fit; the state is unchanged
        """
        self._state = load_program(self._state, rom)
        self.logger.info(f"Loaded program ({len(rom)} bytes) at {PROGRAM_START:04X}")
        return len(rom)

    def _commit(self, state: EmulatorState) -> None:
        self._state = state
        fault = int(state.fault)
        if fault != FAULT_NONE:
            opcode, pc = int(state.opcode), int(state.pc)
            self.logger.error(f"Execution stopped at {pc:04X} (opcode {opcode:04X}, fault code {fault})")
            raise_for_fault(fault, opcode, pc)

    def step(self) -> None:
        """Execute exactly one instruction and tick the timers."""
        self._commit(_jit_cycle(self._state))
        if self.trace and self.logger.is_enabled_for("DEBUG"):
            self.logger.debug(format_trace(self._state))

    def run(self, n: int) -> None:
        """Execute ``n`` cycles in one compiled loop.

        Keys cannot change during the run, and ``beep`` only reflects the last cycle.
        """
        self._commit(run_cycles(self._state, n))

    def set_key(self, index: int, pressed: bool) -> None:
        """Report a key press or release for key ``index`` (0-15)."""
        self._state = set_key(self._state, index, pressed)

    @property
    def framebuffer(self) -> np.ndarray:
        """Display as a ``(32, 64)`` boolean array, row-major, origin top-left."""
        return np.asarray(self._state.display).T

    @property
    def beep(self) -> bool:
        """True on the step where the sound timer ran out."""
        return bool(self._state.beep)

    def should_redraw(self) -> bool:
        return bool(self._state.redraw)

    def clear_redraw_flag(self) -> None:
        self._state = self._state.replace(redraw=jnp.zeros((), dtype=jnp.bool_))

    @property
    def opcode(self) -> int:
        return int(self._state.opcode)

    @property
    def program_counter(self) -> int:
        return int(self._state.pc)

    @property
    def index(self) -> int:
        return int(self._state.I)

    @property
    def stack_pointer(self) -> int:
        return int(self._state.stack.pointer)

    @property
    def stack(self) -> list[int]:
        return [int(address) for address in self._state.stack.data]

    @property
    def registers(self) -> list[int]:
        return [int(value) for value in self._state.V]

    @property
    def delay_timer(self) -> int:
        return int(self._state.delay_timer)

    @property
    def sound_timer(self) -> int:
        return int(self._state.sound_timer)

    @property
    def memory(self) -> np.ndarray:
        return np.asarray(self._state.memory)

    @property
    def fault(self) -> int:
        return int(self._state.fault)
