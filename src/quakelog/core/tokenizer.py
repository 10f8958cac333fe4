"""
Line Tokenizer

Splits a raw log line into its clock text and the remaining content.
Lines that do not start with a clock (blank separators, engine chatter
without a timestamp, a bare clock) are filtered out by returning None.
"""

import re
from typing import Optional

# "0:00 InitGame: ..." / " 20:37 ClientBegin: 2"
LINE_PATTERN = re.compile(r"^(\d{1,2}:\d{2})\s+(.+)$", re.ASCII)


def tokenize_line(line: str) -> Optional[tuple[str, str]]:
    """
    Split a log line into ``(timestamp, content)``.

    Args:
        line: One raw line of the log, with or without its newline

    Returns:
        The verbatim clock text and the rest of the line, or None when the
        line does not carry an event
    """
    line = line.strip()
    if not line:
        return None

    match = LINE_PATTERN.match(line)
    if match is None:
        return None

    return match.group(1), match.group(2)
