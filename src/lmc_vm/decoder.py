"""Decoder: Numeric instruction decoder for LMC-VM.

Maps a raw mailbox value to an opcode key and its parameters. Decoding is
layered and pure:

    1. Exact-match codes:  000 HLT, 901 INP, 902 OUT
    2. Digit-sliced codes: hundreds digit selects the opcode,
                           low two digits are the operand address
           1xx ADD   2xx SUB   3xx STA   5xx LDA
           6xx BRA   7xx BRZ   8xx BRP
    3. Anything else decodes to UNKNOWN

The same value always decodes the same way regardless of the machine's
word policy.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional


class Opcode(str, Enum):
    """Operation keys emitted by the decoder."""
    HLT = "HLT"
    ADD = "ADD"
    SUB = "SUB"
    STA = "STA"
    LDA = "LDA"
    BRA = "BRA"
    BRZ = "BRZ"
    BRP = "BRP"
    INP = "INP"
    OUT = "OUT"
    UNKNOWN = "UNKNOWN"

    def __str__(self) -> str:
        return self.value


# Layer 1: whole-value codes, checked first
EXACT_CODES: Dict[int, Opcode] = {
    0: Opcode.HLT,
    901: Opcode.INP,
    902: Opcode.OUT,
}

# Layer 2: hundreds digit -> opcode taking an address operand
SLICED_CODES: Dict[int, Opcode] = {
    1: Opcode.ADD,
    2: Opcode.SUB,
    3: Opcode.STA,
    5: Opcode.LDA,
    6: Opcode.BRA,
    7: Opcode.BRZ,
    8: Opcode.BRP,
}

ADDRESS_SPACE = 100


@dataclass
class DecodeResult:
    """Result of instruction decode operation.

    Attributes:
        key: Operation key
        params: Operation parameters ({"addr": n} for addressed opcodes)
        valid: Whether decode succeeded
        error: Error message if decode failed
        raw_instruction: Original cell value
    """
    key: Opcode
    params: Dict = field(default_factory=dict)
    valid: bool = True
    error: Optional[str] = None
    raw_instruction: int = 0

    @property
    def address(self) -> Optional[int]:
        return self.params.get("addr")


class Decoder:
    """Stateless decoder for three-digit LMC instructions.

    STA is also known as STO in some LMC dialects; both are 3xx.
    """

    def decode(self, instruction: int) -> DecodeResult:
        """Decode a cell value to operation key and parameters.

        Args:
            instruction: Raw mailbox value (e.g. 590)

        Returns:
            DecodeResult; invalid values decode to UNKNOWN with valid=False
        """
        if instruction in EXACT_CODES:
            return DecodeResult(EXACT_CODES[instruction], {}, True, raw_instruction=instruction)

        if instruction >= 0:
            opcode = SLICED_CODES.get(instruction // 100)
            if opcode is not None:
                return DecodeResult(
                    opcode,
                    {"addr": instruction % ADDRESS_SPACE},
                    True,
                    raw_instruction=instruction
                )

        return DecodeResult(
            Opcode.UNKNOWN,
            {"raw": instruction},
            False,
            error=f"Unknown instruction: {instruction}",
            raw_instruction=instruction
        )

    def disassemble(self, instruction: int) -> str:
        """Render a cell value as a mnemonic.

        Returns:
            Text such as "LDA 05" or "OUT"; undecodable values render as data
            ("DAT 999")
        """
        result = self.decode(instruction)
        if not result.valid:
            return f"DAT {instruction}"
        if result.address is None:
            return result.key.value
        return f"{result.key.value} {result.address:02d}"


def decode(instruction: int) -> DecodeResult:
    """Decode a single value with a shared stateless decoder."""
    return _DECODER.decode(instruction)


_DECODER = Decoder()
