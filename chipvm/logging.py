"""Console logging utilities for the CHIP-8 interpreter.

Provides a small leveled console logger and the per-cycle debug trace used by
the interpreter and the headless runner.
"""

import time
import sys
from typing import Optional

from tqdm import tqdm

from chipvm.decode import disassemble
from chipvm.state import EmulatorState


class ConsoleLogger:
    """Leveled console logger with optional colors and elapsed-time stamps."""

    def __init__(
        self,
        name: str = "chipvm",
        log_level: str = "INFO",
        use_colors: bool = True,
        show_timestamps: bool = True,
    ):
        self.name = name
        self.log_level = log_level.upper()
        self.use_colors = (
            use_colors and hasattr(sys.stdout, "isatty") and sys.stdout.isatty()
        )
        self.show_timestamps = show_timestamps
        self.start_time = time.time()

        self.colors = (
            {
                "DEBUG": "\033[36m",
                "INFO": "\033[32m",
                "WARNING": "\033[33m",
                "ERROR": "\033[31m",
                "CRITICAL": "\033[35m",
                "RESET": "\033[0m"
            }
            if self.use_colors
            else {
                k: ""
                for k in ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL", "RESET"]
            }
        )

        self.level_order = {
            "DEBUG": 0,
            "INFO": 1,
            "WARNING": 2,
            "ERROR": 3,
            "CRITICAL": 4,
        }
        if self.log_level not in self.level_order:
            raise ValueError(
                f"Unknown log level '{log_level}'. Available: {list(self.level_order)}"
            )

    def is_enabled_for(self, level: str) -> bool:
        """Check if message should be logged based on current log level."""
        return self.level_order.get(level.upper(), 1) >= self.level_order[self.log_level]

    def _format_message(self, level: str, message: str) -> str:
        """Format log message with timestamp, level, and colors."""
        timestamp = (
            f"[{time.time() - self.start_time:8.2f}s]" if self.show_timestamps else ""
        )
        level_str = f"[{level:>8s}]"
        name_str = f"[{self.name}]"

        if self.use_colors:
            color = self.colors.get(level.upper(), "")
            reset = self.colors["RESET"]
            level_str = f"{color}{level_str}{reset}"

        return f"{timestamp}{level_str}{name_str} {message}"

    def log(self, level: str, message: str):
        """Log a message at the specified level."""
        if self.is_enabled_for(level):
            # tqdm.write keeps an active progress bar intact
            tqdm.write(self._format_message(level, message), file=sys.stdout)

    def debug(self, message: str):
        self.log("DEBUG", message)

    def info(self, message: str):
        self.log("INFO", message)

    def warning(self, message: str):
        self.log("WARNING", message)

    def error(self, message: str):
        self.log("ERROR", message)

    def critical(self, message: str):
        self.log("CRITICAL", message)


def format_trace(state: EmulatorState) -> str:
    """Render opcode, PC, I, SP, stack and registers of a state.

    Example::

        OP: 00E0 (CLS) | PC: 0202 | I: 0000 | SP: 00
        S:  0000 0000 ...
        V:  00 00 ...
    """
    opcode = int(state.opcode)
    header = (
        f"OP: {opcode:04X} ({disassemble(opcode)}) | PC: {int(state.pc):04X} | "
        f"I: {int(state.I):04X} | SP: {int(state.stack.pointer):02X}"
    )
    stack = " ".join(f"{int(address):04X}" for address in state.stack.data)
    registers = " ".join(f"{int(value):02X}" for value in state.V)
    return f"{header}\nS:  {stack}\nV:  {registers}"


def progress_bar(total: int, desc: Optional[str] = None, **kwargs) -> tqdm:
    """Progress bar for a run of ``total`` cycles."""
    if desc is None:
        desc = f"Running ({total:,} cycles)"
    for kwarg in ("total", "unit"):
        kwargs.pop(kwarg, None)
    return tqdm(total=total, desc=desc, unit="cycle", **kwargs)
