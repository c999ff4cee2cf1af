"""LMCRegistry: Opcode primitives for LMC-VM.

This module implements the registry pattern for LMC operations: each opcode
key maps to a primitive that transforms machine state in a predictable,
auditable way.

Registry Keys:
    HLT: Stop execution
    ADD: Add mailbox to accumulator (word policy applied)
    SUB: Subtract mailbox from accumulator (word policy applied)
    STA: Store accumulator in mailbox
    LDA: Load mailbox into accumulator
    BRA: Branch always
    BRZ: Branch if accumulator is zero
    BRP: Branch if accumulator is positive (word policy decides)
    INP: Read the next input into the accumulator
    OUT: Append accumulator to the output log
    UNKNOWN: Report and skip an undecodable instruction

Each primitive has the shape (MachineState, params) -> (MachineState, note).
The note is None on success, or a diagnostic for a recoverable problem
(unknown instruction, input starvation).
"""

import logging
from typing import Any, Callable, Dict, Optional, Tuple

from .channels import IOChannels
from .decoder import Opcode
from .state import MachineState
from .word import WordPolicy

logger = logging.getLogger(__name__)

Outcome = Tuple[MachineState, Optional[str]]
Primitive = Callable[[MachineState, Dict[str, Any]], Outcome]


class LMCRegistry:
    """Registry of LMC primitives bound to one machine's word and channels.

    The registry is frozen after initialization to ensure no runtime
    modifications can occur.

    Attributes:
        word: Overflow policy used by ADD/SUB/BRP/INP
        channels: Input queue and output log used by INP/OUT
    """

    def __init__(self, word: WordPolicy, channels: IOChannels):
        self.word = word
        self.channels = channels
        self._primitives: Dict[Opcode, Primitive] = {}
        self._frozen = False
        self._register_all_primitives()
        self.freeze()

    def _register_all_primitives(self) -> None:
        # Data movement
        self.register(Opcode.LDA, self._op_lda)
        self.register(Opcode.STA, self._op_sta)

        # Arithmetic
        self.register(Opcode.ADD, self._op_add)
        self.register(Opcode.SUB, self._op_sub)

        # Control flow
        self.register(Opcode.BRA, self._op_bra)
        self.register(Opcode.BRZ, self._op_brz)
        self.register(Opcode.BRP, self._op_brp)

        # I/O
        self.register(Opcode.INP, self._op_inp)
        self.register(Opcode.OUT, self._op_out)

        # Special
        self.register(Opcode.HLT, self._op_hlt)
        self.register(Opcode.UNKNOWN, self._op_unknown)

    def register(self, key: Opcode, handler: Primitive) -> None:
        """Register a primitive operation.

        Raises:
            RuntimeError: If registry is frozen
            ValueError: If key already registered
        """
        if self._frozen:
            raise RuntimeError("Cannot register primitives: registry is frozen")
        if key in self._primitives:
            raise ValueError(f"Primitive already registered: {key}")
        self._primitives[key] = handler

    def freeze(self) -> None:
        self._frozen = True

    def is_frozen(self) -> bool:
        return self._frozen

    def get_valid_keys(self) -> set:
        return set(self._primitives.keys())

    def execute(self, state: MachineState, key: Opcode, params: Dict[str, Any]) -> Outcome:
        """Execute a registered primitive.

        Args:
            state: Current machine state
            key: Operation key
            params: Operation parameters

        Returns:
            (new state, diagnostic note or None)

        Raises:
            KeyError: If key not in registry
        """
        if key not in self._primitives:
            raise KeyError(f"Unknown operation key: {key}")

        new_state, note = self._primitives[key](state, params)

        # Always count the cycle, including HLT and UNKNOWN
        return new_state.increment_cycle(), note

    # =========================================================================
    # Data Movement Primitives
    # =========================================================================

    def _op_lda(self, state: MachineState, params: Dict[str, Any]) -> Outcome:
        """LDA addr - Load mailbox into accumulator."""
        value = state.read(params["addr"])
        return state.set_accumulator(value).increment_pc(), None

    def _op_sta(self, state: MachineState, params: Dict[str, Any]) -> Outcome:
        """STA addr - Store accumulator in mailbox (value unchanged)."""
        new_state = state.store(params["addr"], state.accumulator)
        return new_state.increment_pc(), None

    # =========================================================================
    # Arithmetic Primitives
    # =========================================================================

    def _op_add(self, state: MachineState, params: Dict[str, Any]) -> Outcome:
        """ADD addr - accumulator = word.add(accumulator, memory[addr])."""
        result = self.word.add(state.accumulator, state.read(params["addr"]))
        return state.set_accumulator(result).increment_pc(), None

    def _op_sub(self, state: MachineState, params: Dict[str, Any]) -> Outcome:
        """SUB addr - accumulator = word.sub(accumulator, memory[addr])."""
        result = self.word.sub(state.accumulator, state.read(params["addr"]))
        return state.set_accumulator(result).increment_pc(), None

    # =========================================================================
    # Control Flow Primitives
    # =========================================================================

    def _op_bra(self, state: MachineState, params: Dict[str, Any]) -> Outcome:
        """BRA addr - Unconditional branch; the target replaces PC."""
        return state.set_pc(params["addr"]), None

    def _op_brz(self, state: MachineState, params: Dict[str, Any]) -> Outcome:
        """BRZ addr - Branch if accumulator is zero, else PC+1."""
        if state.accumulator == 0:
            return state.set_pc(params["addr"]), None
        return state.increment_pc(), None

    def _op_brp(self, state: MachineState, params: Dict[str, Any]) -> Outcome:
        """BRP addr - Branch if the word policy calls the accumulator positive."""
        if self.word.is_positive(state.accumulator):
            return state.set_pc(params["addr"]), None
        return state.increment_pc(), None

    # =========================================================================
    # I/O Primitives
    # =========================================================================

    def _op_inp(self, state: MachineState, params: Dict[str, Any]) -> Outcome:
        """INP - Read the next input; on starvation the accumulator is kept."""
        value = self.channels.read()
        if value is None:
            logger.warning("No input available at PC=%02d, accumulator unchanged", state.pc)
            return state.increment_pc(), "No input available"
        return state.set_accumulator(self.word.fit(value)).increment_pc(), None

    def _op_out(self, state: MachineState, params: Dict[str, Any]) -> Outcome:
        """OUT - Append accumulator to the output log."""
        self.channels.write(state.accumulator)
        return state.increment_pc(), None

    # =========================================================================
    # Special Primitives
    # =========================================================================

    def _op_hlt(self, state: MachineState, params: Dict[str, Any]) -> Outcome:
        """HLT - Stop execution; PC stays on the HLT cell."""
        return state.set_halted(True), None

    def _op_unknown(self, state: MachineState, params: Dict[str, Any]) -> Outcome:
        """UNKNOWN - Report the value and continue with the next cell."""
        raw = params.get("raw")
        logger.warning("Unknown instruction %s at PC=%02d, skipped", raw, state.pc)
        return state.increment_pc(), f"Unknown instruction: {raw}"
