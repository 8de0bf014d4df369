"""Console logging utilities for the chipjax host side.

The interpreter core is pure and jitted, so it never logs. The ``Chip8``
facade and the pygame frontend turn ``StepEvents`` into log lines through
the loggers defined here.
"""

import time
import sys
from typing import Any, Dict

from chipjax.decode import disassemble


class ConsoleLogger:
    """Flexible console logger with levels, colors and elapsed-time stamps."""

    def __init__(
        self,
        name: str = "chipjax",
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

    def _should_log(self, level: str) -> bool:
        """Check if message should be logged based on current log level."""
        return self.level_order.get(level.upper(), 1) >= self.level_order.get(
            self.log_level, 1
        )

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
        if self._should_log(level):
            formatted = self._format_message(level, message)
            print(formatted, flush=True)

    def debug(self, message: str):
        """Log debug message."""
        self.log("DEBUG", message)

    def info(self, message: str):
        """Log info message."""
        self.log("INFO", message)

    def warning(self, message: str):
        """Log warning message."""
        self.log("WARNING", message)

    def error(self, message: str):
        """Log error message."""
        self.log("ERROR", message)

    def critical(self, message: str):
        """Log critical message."""
        self.log("CRITICAL", message)


class EmulatorLogger(ConsoleLogger):
    """Logger for interpreter sessions with event counters."""

    def __init__(self, name: str = "chipjax", **kwargs):
        super().__init__(name, **kwargs)
        self.unknown_opcodes = 0
        self.tones = 0

    def log_program_loaded(self, source: str, size: int):
        self.info(f"Loaded {size} bytes from {source}")

    def log_unknown_opcode(self, error: Exception):
        self.unknown_opcodes += 1
        self.warning(str(error))

    def log_tone(self, address: int):
        self.tones += 1
        self.debug(f"Tone at 0x{address:03X}")

    def log_instruction(self, address: int, instruction: int):
        self.debug(f"0x{address:03X}: {instruction:04X}  {disassemble(instruction)}")

    def log_session_end(self, stats: Dict[str, Any]):
        """Log a summary when the host loop stops."""
        elapsed = time.time() - self.start_time
        self.info("=" * 40)
        self.info(f"Session ended after {elapsed:.1f}s")
        for key, value in stats.items():
            self.info(f"  {key}: {value}")
        self.info(f"  unknown opcodes: {self.unknown_opcodes}")
        self.info(f"  tones: {self.tones}")
        self.info("=" * 40)
