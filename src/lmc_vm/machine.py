"""LMC: Execution engine for the Little Man Computer.

This module implements the LMC-VM execution pipeline:
    MEMORY -> FETCH -> DECODE -> KEY -> REGISTRY -> EXECUTE -> STATE

One engine covers every machine variant; the differences between them
(word width, overflow, BRP's notion of positive, what INP does when the
queue is empty) are constructor configuration.
"""

import logging
from collections import deque
from dataclasses import dataclass
from typing import Deque, Dict, Iterable, List, Optional, Tuple, Union

from .channels import InputProvider, IOChannels
from .decoder import DecodeResult, Decoder
from .registry import LMCRegistry
from .state import MEMORY_SIZE, MachineState
from .word import WordPolicy, get_word_policy

logger = logging.getLogger(__name__)


@dataclass
class ExecutionTraceEntry:
    """Single entry in the execution trace.

    Attributes:
        cycle: Cycle number the step ran in (0-indexed)
        address: PC the instruction was fetched from
        instruction: Raw cell value (None for an addressing fault)
        decode_result: Result from the decoder (None for an addressing fault)
        pre_state: State before execution
        post_state: State after execution
        error: Diagnostic if the step hit a recoverable or addressing fault
    """
    cycle: int
    address: int
    instruction: Optional[int]
    decode_result: Optional[DecodeResult]
    pre_state: dict
    post_state: dict
    error: Optional[str] = None

    @property
    def key(self) -> Optional[str]:
        if self.decode_result is None:
            return None
        return self.decode_result.key.value


class LMC:
    """Little Man Computer with a configurable word policy.

    Attributes:
        word: Overflow policy (decimal, int32, int64 or custom)
        decoder: Stateless instruction decoder
        channels: Input queue and output log
        registry: Opcode primitives bound to word and channels
        state: Current machine state
        trace: Most recent execution trace entries (at most trace_limit)
        max_cycles: Cycle limit for run(), None for unlimited
        record_trace: Whether step() appends to trace
    """

    DEFAULT_TRACE_LIMIT = 10000

    def __init__(
        self,
        word: Union[str, WordPolicy] = "decimal",
        input_provider: Optional[InputProvider] = None,
        max_cycles: Optional[int] = None,
        record_trace: bool = True,
        trace_limit: Optional[int] = DEFAULT_TRACE_LIMIT
    ):
        """Initialize the machine.

        Args:
            word: Word policy or its name ("decimal", "int32", "int64")
            input_provider: Called by INP when the input queue is empty.
                None reports the starvation and leaves the accumulator as is.
            max_cycles: Cycle limit for run(); None runs until HLT or fault
            record_trace: Keep an ExecutionTraceEntry per step
            trace_limit: Number of most recent entries kept; None keeps all
        """
        self.word = get_word_policy(word)
        self.decoder = Decoder()
        self.channels = IOChannels(input_provider)
        self.registry = LMCRegistry(self.word, self.channels)
        self.state = MachineState()
        self.trace_limit = trace_limit
        self.trace: Deque[ExecutionTraceEntry] = deque(maxlen=trace_limit)
        self.max_cycles = max_cycles
        self.record_trace = record_trace

    # =========================================================================
    # Program and I/O setup
    # =========================================================================

    def load_program(self, values: Iterable[int], start_address: int = 0) -> None:
        """Copy cell values into memory.

        Values are stored as given, so a cell that matches no opcode still
        decodes to UNKNOWN. Anything past mailbox 99 is dropped. Registers,
        I/O channels and the rest of memory are kept.

        Args:
            values: Cell values in load order
            start_address: First mailbox to write (0-99)

        Raises:
            ValueError: If start_address is outside 0..99
        """
        cells = [int(value) for value in values]
        self.state = self.state.load_cells(cells, start_address)
        logger.debug("Loaded %d cells at %02d", len(cells), start_address)

    def reset(self) -> None:
        """Restore the initial state and clear the I/O channels and trace."""
        self.state = MachineState()
        self.channels.clear()
        self.trace.clear()

    def add_input(self, value: int) -> None:
        self.channels.add_input(value)

    def add_inputs(self, *values) -> None:
        """Queue several inputs: add_inputs(5, 3) or add_inputs([5, 3])."""
        self.channels.add_inputs(*values)

    def get_output(self) -> Tuple[int, ...]:
        """Snapshot of the output log."""
        return self.channels.get_output()

    # =========================================================================
    # Execution
    # =========================================================================

    def step(self) -> ExecutionTraceEntry:
        """Execute a single instruction cycle.

        Performs: FETCH -> DECODE -> EXECUTE

        Returns:
            ExecutionTraceEntry with full cycle information

        Raises:
            RuntimeError: If the machine is halted
        """
        if self.state.halted:
            raise RuntimeError("Machine is halted")

        pc = self.state.pc
        pre_state = self.state.snapshot()

        # FAULT CHECK: PC must name a mailbox before anything is fetched
        if not 0 <= pc < MEMORY_SIZE:
            message = f"Program counter out of bounds: {pc}"
            logger.error(message)
            self.state = self.state.set_fault(message)
            return self._record(ExecutionTraceEntry(
                cycle=self.state.cycle_count,
                address=pc,
                instruction=None,
                decode_result=None,
                pre_state=pre_state,
                post_state=self.state.snapshot(),
                error=message
            ))

        # FETCH
        instruction = self.state.read(pc)

        # DECODE
        decode_result = self.decoder.decode(instruction)

        # EXECUTE
        cycle = self.state.cycle_count
        self.state, note = self.registry.execute(
            self.state,
            decode_result.key,
            decode_result.params
        )
        logger.debug(
            "PC=%02d %03d %-7s ACC=%d",
            pc, instruction, self.decoder.disassemble(instruction), self.state.accumulator
        )

        return self._record(ExecutionTraceEntry(
            cycle=cycle,
            address=pc,
            instruction=instruction,
            decode_result=decode_result,
            pre_state=pre_state,
            post_state=self.state.snapshot(),
            error=note
        ))

    def _record(self, entry: ExecutionTraceEntry) -> ExecutionTraceEntry:
        if self.record_trace:
            self.trace.append(entry)
        return entry

    def run(self, max_cycles: Optional[int] = None) -> List[ExecutionTraceEntry]:
        """Run until HLT or an addressing fault.

        Args:
            max_cycles: Override the instance cycle limit (None keeps it)

        Returns:
            Execution trace (most recent trace_limit entries)

        Raises:
            RuntimeError: If a cycle limit is set and reached first
        """
        limit = max_cycles if max_cycles is not None else self.max_cycles

        while not self.state.is_stopped:
            if limit is not None and self.state.cycle_count >= limit:
                raise RuntimeError(f"Max cycles ({limit}) exceeded")
            self.step()

        if self.state.halted:
            logger.info("Halted after %d cycles", self.state.cycle_count)
        return list(self.trace)

    # =========================================================================
    # Accessors
    # =========================================================================

    def get_accumulator(self) -> int:
        return self.state.accumulator

    def get_pc(self) -> int:
        return self.state.pc

    def get_cycle_count(self) -> int:
        return self.state.cycle_count

    def is_halted(self) -> bool:
        return self.state.halted

    def is_faulted(self) -> bool:
        """True after an addressing fault (the machine is stopped, not halted)."""
        return self.state.fault is not None

    def get_fault(self) -> Optional[str]:
        return self.state.fault

    def get_memory(self, address: int) -> int:
        """Get the value of one mailbox.

        Raises:
            IndexError: If address is outside 0..99
        """
        return self.state.read(address)

    def dump_memory(self) -> Dict[int, int]:
        """Get all non-zero mailboxes."""
        return self.state.nonzero_memory()

    def get_trace(self) -> List[ExecutionTraceEntry]:
        return list(self.trace)

    def print_trace(self) -> None:
        """Print execution trace in human-readable format."""
        print("=" * 70)
        print("LMC-VM EXECUTION TRACE")
        print("=" * 70)

        for entry in self.trace:
            status = "OK" if not entry.error else f"ERROR: {entry.error}"
            print(f"\n[Cycle {entry.cycle}] {status}")
            if entry.instruction is None:
                print(f"  PC: {entry.address}")
                continue
            print(f"  Instruction: {entry.address:02d}: {entry.instruction:03d}"
                  f" ({self.decoder.disassemble(entry.instruction)})")

            pre_acc = entry.pre_state["accumulator"]
            post_acc = entry.post_state["accumulator"]
            if pre_acc != post_acc:
                print(f"  ACC: {pre_acc} -> {post_acc}")

            pre_pc = entry.pre_state["pc"]
            post_pc = entry.post_state["pc"]
            if post_pc != pre_pc + 1:
                print(f"  PC: {pre_pc} -> {post_pc}")

        print("\n" + "=" * 70)
        print("FINAL STATE")
        print("=" * 70)
        print(f"  Word: {self.word}")
        print(f"  Accumulator: {self.get_accumulator()}")
        print(f"  PC: {self.get_pc()}")
        print(f"  Cycles: {self.get_cycle_count()}")
        print(f"  Halted: {self.is_halted()}")
        if self.is_faulted():
            print(f"  Fault: {self.get_fault()}")
        print(f"  Output: {list(self.get_output())}")

    def get_summary(self) -> Dict:
        """Get execution summary.

        Returns:
            Dictionary with execution statistics and final state
        """
        return {
            "word": self.word.name,
            "cycles": self.get_cycle_count(),
            "halted": self.is_halted(),
            "fault": self.get_fault(),
            "accumulator": self.get_accumulator(),
            "pc": self.get_pc(),
            "output": list(self.get_output()),
            "pending_inputs": list(self.channels.pending_inputs()),
            "memory": self.dump_memory(),
            "trace_length": len(self.trace),
            "errors": [e.error for e in self.trace if e.error],
        }
