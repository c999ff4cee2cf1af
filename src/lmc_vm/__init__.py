"""LMC-VM: Little Man Computer virtual machine.

This package implements the Little Man Computer, a decimal
single-accumulator von Neumann machine with 100 mailboxes used to teach
machine-level execution.

Architecture:
    MEMORY -> FETCH -> DECODE -> KEY -> REGISTRY -> EXECUTE -> STATE
               |         |        |        |           |
           [PC-based] [Layered] [Opcode] [Primitives] [Immutable]
                      [decode]           [+ word]     Audit Trail

Modules:
    word: WordPolicy overflow strategies (decimal, int32, int64)
    state: MachineState dataclass for immutable state management
    decoder: Numeric instruction decoder
    channels: Input queue, output log and input providers
    registry: Opcode primitives (HLT, ADD, SUB, ...)
    machine: Main LMC orchestrator
    loader: Program file parsing
    samples: Ready-to-run sample programs
"""

__version__ = "0.1.0"
__author__ = "LMC-VM Project"

from .word import WordPolicy, DECIMAL, INT32, INT64, get_word_policy
from .state import MachineState
from .decoder import Decoder, DecodeResult, Opcode
from .channels import IOChannels, prompt_input, constant_input
from .registry import LMCRegistry
from .machine import LMC, ExecutionTraceEntry
from .loader import parse_program, load_program_file
from .samples import SAMPLES, get_sample

__all__ = [
    "WordPolicy", "DECIMAL", "INT32", "INT64", "get_word_policy",
    "MachineState",
    "Decoder", "DecodeResult", "Opcode",
    "IOChannels", "prompt_input", "constant_input",
    "LMCRegistry",
    "LMC", "ExecutionTraceEntry",
    "parse_program", "load_program_file",
    "SAMPLES", "get_sample",
]
