"""I/O channels for LMC-VM.

The input queue feeds INP and the output log collects OUT. When the queue
runs dry, INP asks an optional input provider (a zero-argument callable
returning an int, or None when nothing is available). Keeping terminal
reads behind a provider leaves the engine itself free of console I/O.
"""

import logging
import sys
from collections import deque
from typing import Callable, Deque, Iterable, List, Optional, TextIO, Tuple, Union

logger = logging.getLogger(__name__)

InputProvider = Callable[[], Optional[int]]


class IOChannels:
    """Input queue and output log owned by one machine.

    Attributes:
        input_provider: Fallback used by read() when the queue is empty
    """

    def __init__(self, input_provider: Optional[InputProvider] = None):
        self._inputs: Deque[int] = deque()
        self._outputs: List[int] = []
        self.input_provider = input_provider

    def add_input(self, value: int) -> None:
        self._inputs.append(int(value))

    def add_inputs(self, *values: Union[int, Iterable[int]]) -> None:
        """Queue several inputs: add_inputs(1, 2, 3) or add_inputs([1, 2, 3])."""
        if len(values) == 1 and not isinstance(values[0], int):
            values = tuple(values[0])
        for value in values:
            self.add_input(value)

    def read(self) -> Optional[int]:
        """Take the next input value.

        Returns:
            Next queued value, else the provider's value, else None
        """
        if self._inputs:
            return self._inputs.popleft()
        if self.input_provider is None:
            return None
        return self.input_provider()

    def write(self, value: int) -> None:
        self._outputs.append(value)

    def get_output(self) -> Tuple[int, ...]:
        """Snapshot of the output log."""
        return tuple(self._outputs)

    def pending_inputs(self) -> Tuple[int, ...]:
        return tuple(self._inputs)

    def clear(self) -> None:
        """Drop queued inputs and recorded outputs (provider is kept)."""
        self._inputs.clear()
        self._outputs.clear()


# =============================================================================
# Input providers
# =============================================================================

def prompt_input(
    prompt: str = "INPUT required: ",
    stream: Optional[TextIO] = None,
    default: int = 0
) -> InputProvider:
    """Build a provider that blocks on a terminal read.

    An unparsable reply is reported and replaced by `default`. End of input
    yields None so the machine treats it as starvation.

    Args:
        prompt: Text written before each read
        stream: Text stream to read from (default: sys.stdin)
        default: Value used when the reply is not an integer
    """
    def provider() -> Optional[int]:
        source = stream if stream is not None else sys.stdin
        sys.stdout.write(prompt)
        sys.stdout.flush()
        line = source.readline()
        if not line:
            logger.warning("Input stream closed while waiting for INP")
            return None
        try:
            return int(line.strip())
        except ValueError:
            logger.warning("Invalid input %r, using %d", line.strip(), default)
            return default

    return provider


def constant_input(value: int) -> InputProvider:
    """Build a provider that always answers with the same value."""
    def provider() -> Optional[int]:
        return value

    return provider
