"""Program loading for LMC-VM.

Program files hold one instruction per line, in load order from mailbox 00:

    // add two numbers
    901
    390
    901
    190
    902
    000

Blank lines and lines starting with // are skipped. Lines that are not
integers are skipped with a warning.
"""

import logging
import re
from pathlib import Path
from typing import List, Union

logger = logging.getLogger(__name__)

COMMENT_PREFIX = "//"


def parse_program(source: str) -> List[int]:
    """Parse program text into cell values.

    Args:
        source: Program text, one integer per line

    Returns:
        List of cell values
    """
    program: List[int] = []

    for line_no, line in enumerate(source.splitlines(), start=1):
        line = line.strip()
        if not line or line.startswith(COMMENT_PREFIX):
            continue
        try:
            program.append(int(line))
        except ValueError:
            logger.warning("Line %d: skipping unparsable instruction %r", line_no, line)

    return program


def load_program_file(path: Union[str, Path]) -> List[int]:
    """Read and parse a program file.

    Raises:
        FileNotFoundError: If the file does not exist
    """
    path = Path(path)
    program = parse_program(path.read_text())
    logger.info("Loaded %d instructions from %s", len(program), path)
    return program


def parse_values(text: str) -> List[int]:
    """Parse an inline list of integers ("901,390; 902 000").

    Raises:
        ValueError: If any token is not an integer
    """
    tokens = [token for token in re.split(r"[\s,;]+", text.strip()) if token]
    values = []
    for token in tokens:
        try:
            values.append(int(token))
        except ValueError:
            raise ValueError(f"Invalid value: {token!r}") from None
    return values
