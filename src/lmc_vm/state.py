"""MachineState: Immutable state representation for LMC-VM.

State Components:
    - Memory: 100 mailboxes (addresses 00-99), each holding one integer
    - Accumulator: The single arithmetic register
    - PC: Program counter (address of the next instruction)
    - Halted: Set by HLT
    - Fault: Addressing fault message (None while the machine is healthy)
    - Cycle count: Total executed instructions

All state mutations return new state objects. Memory is held as a tuple,
so a new state only copies it when a cell actually changes.
"""

from dataclasses import dataclass, field, replace
from typing import Dict, Iterable, Optional, Tuple


MEMORY_SIZE = 100


def _empty_memory() -> Tuple[int, ...]:
    return (0,) * MEMORY_SIZE


@dataclass(frozen=True)
class MachineState:
    """Immutable LMC state representation.

    Attributes:
        memory: Tuple of MEMORY_SIZE cell values
        accumulator: Accumulator value
        pc: Program counter
        halted: Whether the machine has executed HLT
        fault: Addressing fault message, None if no fault occurred
        cycle_count: Number of executed instructions
    """
    memory: Tuple[int, ...] = field(default_factory=_empty_memory)
    accumulator: int = 0
    pc: int = 0
    halted: bool = False
    fault: Optional[str] = None
    cycle_count: int = 0

    @property
    def is_stopped(self) -> bool:
        """True when the machine halted or hit an addressing fault."""
        return self.halted or self.fault is not None

    def snapshot(self) -> dict:
        """Create a snapshot of the registers for tracing.

        Returns:
            Dictionary with accumulator, pc, halted, fault and cycle_count
        """
        return {
            "accumulator": self.accumulator,
            "pc": self.pc,
            "halted": self.halted,
            "fault": self.fault,
            "cycle_count": self.cycle_count,
            # Memory excluded; STA is the only instruction that writes it
        }

    def validate(self) -> bool:
        """Validate state integrity.

        Checks:
            - Memory has exactly MEMORY_SIZE integer cells
            - Accumulator is an integer
            - PC and cycle count are non-negative

        Returns:
            True if state is valid, False otherwise
        """
        if len(self.memory) != MEMORY_SIZE:
            return False
        if not all(isinstance(cell, int) for cell in self.memory):
            return False
        if not isinstance(self.accumulator, int):
            return False
        if self.pc < 0 or self.cycle_count < 0:
            return False
        return True

    def read(self, address: int) -> int:
        """Get the value of a mailbox.

        Raises:
            IndexError: If address is outside 0..99
        """
        if not 0 <= address < MEMORY_SIZE:
            raise IndexError(f"Invalid address: {address}")
        return self.memory[address]

    def store(self, address: int, value: int) -> "MachineState":
        """Create new state with one mailbox overwritten.

        Raises:
            IndexError: If address is outside 0..99
        """
        if not 0 <= address < MEMORY_SIZE:
            raise IndexError(f"Invalid address: {address}")
        cells = list(self.memory)
        cells[address] = value
        return replace(self, memory=tuple(cells))

    def load_cells(self, values: Iterable[int], start_address: int = 0) -> "MachineState":
        """Create new state with values copied into memory.

        Copying starts at start_address and stops silently at the end of
        memory.

        Args:
            values: Cell values in load order
            start_address: First mailbox to write (0-99)

        Raises:
            ValueError: If start_address is outside 0..99
        """
        if not 0 <= start_address < MEMORY_SIZE:
            raise ValueError(f"Start address out of range: {start_address}")
        cells = list(self.memory)
        address = start_address
        for value in values:
            if address >= MEMORY_SIZE:
                break
            cells[address] = int(value)
            address += 1
        return replace(self, memory=tuple(cells))

    def set_accumulator(self, value: int) -> "MachineState":
        return replace(self, accumulator=value)

    def increment_pc(self) -> "MachineState":
        """Create new state with PC incremented by 1."""
        return replace(self, pc=self.pc + 1)

    def set_pc(self, new_pc: int) -> "MachineState":
        """Create new state with new PC value (branch target)."""
        return replace(self, pc=new_pc)

    def set_halted(self, halted: bool = True) -> "MachineState":
        return replace(self, halted=halted)

    def set_fault(self, message: Optional[str]) -> "MachineState":
        """Create new state with the addressing fault recorded (or cleared)."""
        return replace(self, fault=message)

    def increment_cycle(self) -> "MachineState":
        return replace(self, cycle_count=self.cycle_count + 1)

    def nonzero_memory(self) -> Dict[int, int]:
        """Get all non-zero mailboxes.

        Returns:
            Dictionary of address to value, in address order
        """
        return {address: value for address, value in enumerate(self.memory) if value != 0}

    def __str__(self) -> str:
        """Human-readable state representation."""
        if self.halted:
            status = "HALTED"
        elif self.fault is not None:
            status = f"FAULT ({self.fault})"
        else:
            status = ""
        return f"[Cycle {self.cycle_count}] PC={self.pc:02d} ACC={self.accumulator} {status}".rstrip()


def create_initial_state(program: Optional[Iterable[int]] = None, start_address: int = 0) -> MachineState:
    """Create initial machine state, optionally with a program loaded.

    Args:
        program: Cell values to load
        start_address: First mailbox of the program

    Returns:
        Fresh MachineState
    """
    state = MachineState()
    if program is not None:
        state = state.load_cells(program, start_address)
    return state
