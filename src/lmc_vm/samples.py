"""Sample programs for LMC-VM.

Each sample is a pre-encoded program plus the data mailboxes and inputs it
expects. Data lives from mailbox 90 upwards so it stays clear of the code.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple


@dataclass(frozen=True)
class SampleProgram:
    """A ready-to-run program.

    Attributes:
        name: Catalog key
        description: One-line summary
        program: Cell values loaded from mailbox 00
        data: Extra mailboxes to preset (address -> value)
        inputs: Values queued for INP
        word: Suggested word policy
    """
    name: str
    description: str
    program: Tuple[int, ...]
    data: Dict[int, int] = field(default_factory=dict)
    inputs: Tuple[int, ...] = ()
    word: str = "decimal"

    def load_into(self, machine, inputs: Optional[List[int]] = None) -> None:
        """Reset the machine and load program, data and inputs.

        Args:
            machine: LMC instance
            inputs: Replace the sample's default inputs
        """
        machine.reset()
        machine.load_program(self.program)
        for address, value in sorted(self.data.items()):
            machine.load_program([value], address)
        machine.add_inputs(list(self.inputs if inputs is None else inputs))


SAMPLES: Dict[str, SampleProgram] = {}


def _sample(sample: SampleProgram) -> None:
    SAMPLES[sample.name] = sample


_sample(SampleProgram(
    name="add",
    description="Add two input numbers and output the sum",
    program=(
        901,    # 00 INP
        390,    # 01 STA 90
        901,    # 02 INP
        190,    # 03 ADD 90
        902,    # 04 OUT
        0,      # 05 HLT
    ),
    inputs=(5, 3),
))

_sample(SampleProgram(
    name="add-large",
    description="Add two numbers that only fit a 64-bit word",
    program=(901, 390, 901, 190, 902, 0),
    inputs=(5000000000000000000, 2000000000000000000),
    word="int64",
))

_sample(SampleProgram(
    name="countdown",
    description="Count down from mailbox 90 to 0 using BRP",
    program=(
        590,    # 00 LDA 90
        902,    # 01 OUT
        291,    # 02 SUB 91
        390,    # 03 STA 90
        800,    # 04 BRP 00
        0,      # 05 HLT
    ),
    data={90: 10, 91: 1},
    word="int32",
))

_sample(SampleProgram(
    name="countdown-zero",
    description="Self-modifying loop that rewrites mailbox 00 until BRZ fires",
    program=(
        505,    # 00 LDA 05
        902,    # 01 OUT
        200,    # 02 SUB 00
        300,    # 03 STA 00
        700,    # 04 BRZ 00
        600,    # 05 BRA 00
        0,      # 06 HLT
        5,      # 07 DAT
        1,      # 08 DAT
    ),
))

_sample(SampleProgram(
    name="max3",
    description="Output the largest of three inputs",
    program=(
        901,    # 00 INP
        390,    # 01 STA 90   max
        901,    # 02 INP
        391,    # 03 STA 91
        590,    # 04 LDA 90
        291,    # 05 SUB 91
        809,    # 06 BRP 09   max >= second
        591,    # 07 LDA 91
        390,    # 08 STA 90
        901,    # 09 INP
        391,    # 10 STA 91
        590,    # 11 LDA 90
        291,    # 12 SUB 91
        816,    # 13 BRP 16   max >= third
        591,    # 14 LDA 91
        390,    # 15 STA 90
        590,    # 16 LDA 90
        902,    # 17 OUT
        0,      # 18 HLT
    ),
    inputs=(3, 9, 4),
))

_sample(SampleProgram(
    name="multiply",
    description="Multiply two inputs by repeated addition",
    program=(
        901,    # 00 INP
        390,    # 01 STA 90   multiplicand
        901,    # 02 INP
        391,    # 03 STA 91   counter
        591,    # 04 LDA 91
        713,    # 05 BRZ 13
        592,    # 06 LDA 92
        190,    # 07 ADD 90
        392,    # 08 STA 92   result
        591,    # 09 LDA 91
        295,    # 10 SUB 95
        391,    # 11 STA 91
        604,    # 12 BRA 04
        592,    # 13 LDA 92
        902,    # 14 OUT
        0,      # 15 HLT
    ),
    data={92: 0, 95: 1},
    inputs=(6, 7),
))

_sample(SampleProgram(
    name="fibonacci",
    description="Output the first N Fibonacci numbers",
    program=(
        901,    # 00 INP
        391,    # 01 STA 91   counter
        591,    # 02 LDA 91
        716,    # 03 BRZ 16
        593,    # 04 LDA 93
        902,    # 05 OUT
        194,    # 06 ADD 94
        396,    # 07 STA 96   next
        594,    # 08 LDA 94
        393,    # 09 STA 93   prev = curr
        596,    # 10 LDA 96
        394,    # 11 STA 94   curr = next
        591,    # 12 LDA 91
        295,    # 13 SUB 95
        391,    # 14 STA 91
        602,    # 15 BRA 02
        0,      # 16 HLT
    ),
    data={93: 0, 94: 1, 95: 1},
    inputs=(10,),
    word="int64",
))

_sample(SampleProgram(
    name="step",
    description="Load mailbox 03 and output it",
    program=(
        503,    # 00 LDA 03
        902,    # 01 OUT
        0,      # 02 HLT
        42,     # 03 DAT
    ),
))


def get_sample(name: str) -> SampleProgram:
    """Look up a sample by name.

    Raises:
        KeyError: If no sample has that name
    """
    if name not in SAMPLES:
        raise KeyError(f"Unknown sample: {name!r} (available: {', '.join(SAMPLES)})")
    return SAMPLES[name]
