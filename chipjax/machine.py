"""Host-facing CHIP-8 machine.

``Chip8`` owns a single ``EmulatorState`` and drives the pure core on behalf
of a host loop. It is not thread safe: key updates, display reads and
``step`` calls must be serialized by the caller.
"""

from typing import Callable, Optional, Sequence, Union

import jax
import numpy as np

from chipjax import emulator
from chipjax.state import (
    EmulatorState, create_state, load_program, set_key, set_keypad, clear_display_dirty,
)
from chipjax.errors import UnknownOpcode
from chipjax.logging import EmulatorLogger


class Chip8:
    """Stateful wrapper around the functional interpreter core."""

    def __init__(
        self,
        seed: int = 0,
        couple_timers: bool = True,
        strict: bool = False,
        on_tone: Optional[Callable[[], None]] = None,
        logger: Optional[EmulatorLogger] = None,
        trace: bool = False,
    ):
        """Create and initialize a machine.

        Args:
            seed: Seed for the CXNN random number generator
            couple_timers: Tick timers once per step (faithful) instead of
                leaving them to ``tick_timers`` driven by the host at 60 Hz
            strict: Raise ``UnknownOpcode`` instead of logging and skipping
            on_tone: Called once for every tone event
            logger: Logger for load, tone and unknown-opcode events
            trace: Log every executed instruction at debug level
        """
        self.seed = seed
        self.couple_timers = couple_timers
        self.strict = strict
        self.on_tone = on_tone
        self.logger = logger or EmulatorLogger()
        self.trace = trace
        self.steps = 0
        self.initialize()

    def initialize(self):
        """Reset every part of the machine and reload the font."""
        self.state: EmulatorState = create_state(
            jax.random.PRNGKey(self.seed), couple_timers=self.couple_timers
        )
        self.steps = 0

    def load_program(self, program: Union[bytes, bytearray, Sequence[int]], source: str = "<bytes>"):
        """Copy a program to 0x200. Raises ``ProgramTooLarge`` and keeps memory unchanged on failure."""
        self.state = load_program(self.state, program)
        self.logger.log_program_loaded(source, len(program))

    def load_rom(self, path: str):
        """Load a program file from disk."""
        with open(path, 'rb') as f:
            program = f.read()
        self.load_program(program, source=path)

    def step(self) -> emulator.StepEvents:
        """Execute one instruction and report its events to the host."""
        if self.trace:
            pc = int(self.state.pc)
            self.logger.log_instruction(pc, self.peek_instruction(pc))
        self.state, events = emulator.step(self.state)
        self.steps += 1
        if bool(events.unknown_opcode):
            self._report_unknown_opcode(int(events.instruction), int(events.address))
        if bool(events.tone):
            self._report_tone(int(events.address))
        return events

    def run(self, num_steps: int) -> emulator.StepEvents:
        """Execute ``num_steps`` instructions in one compiled loop.

        In strict mode the batch is replayed up to and including the first
        unknown opcode, so the machine stops there like ``step`` does.
        """
        start = self.state
        state, events = emulator.run(start, num_steps)
        unknown = np.asarray(events.unknown_opcode)
        if self.strict and unknown.any():
            num_steps = int(np.argmax(unknown)) + 1
            state, events = emulator.run(start, num_steps)
            unknown = np.asarray(events.unknown_opcode)
        self.state = state
        self.steps += num_steps
        tone = np.asarray(events.tone)
        for i in np.flatnonzero(unknown | tone):
            if unknown[i]:
                self._report_unknown_opcode(int(events.instruction[i]), int(events.address[i]))
            if tone[i]:
                self._report_tone(int(events.address[i]))
        return events

    def tick_timers(self) -> bool:
        """Count timers down once; meant for a host-driven 60 Hz tick."""
        self.state, tone = emulator.tick_timers(self.state)
        if bool(tone):
            self._report_tone(int(self.state.pc))
        return bool(tone)

    def _report_unknown_opcode(self, opcode: int, address: int):
        error = UnknownOpcode(opcode, address)
        if self.strict:
            raise error
        self.logger.log_unknown_opcode(error)

    def _report_tone(self, address: int):
        self.logger.log_tone(address)
        if self.on_tone is not None:
            self.on_tone()

    def peek_instruction(self, address: int) -> int:
        memory = self.state.memory
        return (int(memory[address & 0xFFF]) << 8) | int(memory[(address + 1) & 0xFFF])

    def press_key(self, key: int):
        self.state = set_key(self.state, key, True)

    def release_key(self, key: int):
        self.state = set_key(self.state, key, False)

    def set_keys(self, keys: Sequence[bool]):
        """Replace all 16 key flags at once."""
        self.state = set_keypad(self.state, keys)

    @property
    def display(self) -> np.ndarray:
        """Pixel grid of shape (64, 32), indexed ``[x, y]``."""
        return np.asarray(self.state.display)

    @property
    def display_dirty(self) -> bool:
        return bool(self.state.display_dirty)

    def consume_display(self) -> np.ndarray:
        """Return the pixel grid and mark it as presented."""
        display = self.display
        self.state = clear_display_dirty(self.state)
        return display

    @property
    def delay_timer(self) -> int:
        return int(self.state.delay_timer)

    @property
    def sound_timer(self) -> int:
        return int(self.state.sound_timer)

    @property
    def pc(self) -> int:
        return int(self.state.pc)

    @property
    def I(self) -> int:
        return int(self.state.I)

    @property
    def V(self) -> np.ndarray:
        return np.asarray(self.state.V)
