"""WordPolicy: Accumulator width and overflow handling for LMC-VM.

Every ADD/SUB result is computed on the mathematical integer first and then
passed through the machine's word policy. One configurable class covers all
supported variants:

    DECIMAL: 0..999, wraparound (mod 1000), BRP positive when < 500
    INT32:   signed 32-bit, clamped at the bounds, BRP positive when >= 0
    INT64:   signed 64-bit, clamped at the bounds, BRP positive when >= 0

A policy is selected once per machine and never changes afterwards.
"""

from dataclasses import dataclass
from typing import Dict, Optional, Union


@dataclass(frozen=True)
class WordPolicy:
    """Overflow strategy applied to arithmetic results.

    Attributes:
        name: Policy name (e.g. "decimal", "int32")
        minimum: Smallest storable value
        maximum: Largest storable value
        wraparound: Reduce out-of-range values modulo the range size (True)
            or clamp them at the nearest bound (False)
        positive_limit: Exclusive upper bound for BRP's "positive" test.
            None means any non-negative value is positive.
    """
    name: str
    minimum: int
    maximum: int
    wraparound: bool = False
    positive_limit: Optional[int] = None

    def __post_init__(self):
        if self.minimum > self.maximum:
            raise ValueError(f"Invalid word range: {self.minimum}..{self.maximum}")

    @property
    def modulus(self) -> int:
        """Number of distinct storable values."""
        return self.maximum - self.minimum + 1

    def fit(self, value: int) -> int:
        """Bring an arbitrary integer into the storable range.

        Args:
            value: Mathematical result

        Returns:
            Wrapped or clamped value within [minimum, maximum]
        """
        if self.wraparound:
            return (value - self.minimum) % self.modulus + self.minimum
        return max(self.minimum, min(self.maximum, value))

    def add(self, a: int, b: int) -> int:
        """ADD: accumulator + cell, then fitted."""
        return self.fit(a + b)

    def sub(self, a: int, b: int) -> int:
        """SUB: accumulator - cell, then fitted.

        For the decimal word a negative difference gets 1000 added, which is
        the same residue as (a - b) mod 1000.
        """
        return self.fit(a - b)

    def is_positive(self, value: int) -> bool:
        """Condition tested by BRP."""
        if self.positive_limit is not None:
            return self.minimum <= value < self.positive_limit
        return value >= 0

    def __str__(self) -> str:
        mode = "wrap" if self.wraparound else "clamp"
        return f"{self.name} [{self.minimum}..{self.maximum}, {mode}]"


def signed_word(bits: int, name: Optional[str] = None) -> WordPolicy:
    """Build a clamping policy over the signed range of the given width.

    Args:
        bits: Word width in bits (>= 2)
        name: Policy name (defaults to "int<bits>")

    Returns:
        WordPolicy clamping to [-(2**(bits-1)), 2**(bits-1) - 1]
    """
    if bits < 2:
        raise ValueError(f"Word width must be at least 2 bits, got {bits}")
    return WordPolicy(
        name=name or f"int{bits}",
        minimum=-(2 ** (bits - 1)),
        maximum=(2 ** (bits - 1)) - 1,
        wraparound=False,
    )


DECIMAL = WordPolicy(name="decimal", minimum=0, maximum=999, wraparound=True, positive_limit=500)
INT32 = signed_word(32)
INT64 = signed_word(64)

WORD_POLICIES: Dict[str, WordPolicy] = {
    "decimal": DECIMAL,
    "lmc": DECIMAL,
    "original": DECIMAL,
    "int32": INT32,
    "32": INT32,
    "int64": INT64,
    "64": INT64,
}


def get_word_policy(word: Union[str, WordPolicy]) -> WordPolicy:
    """Resolve a policy name (case insensitive) or pass a policy through.

    Raises:
        ValueError: If the name is not a known policy
    """
    if isinstance(word, WordPolicy):
        return word
    key = str(word).strip().lower()
    if key not in WORD_POLICIES:
        raise ValueError(
            f"Unknown word policy: {word!r} (expected one of {', '.join(sorted(WORD_POLICIES))})"
        )
    return WORD_POLICIES[key]
