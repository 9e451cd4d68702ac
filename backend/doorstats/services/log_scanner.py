"""Reading launch events out of Synchronet syslog files."""

import gzip
import logging
import re
import zlib
from datetime import datetime
from pathlib import Path
from typing import Iterator, Optional, Tuple, Union

logger = logging.getLogger(__name__)

LAUNCH_PATTERN = re.compile(
    r"synchronet: term Node \d+ <\S+> running external program: (.+)"
)

# 2024-03-01T10:15:42.123456-05:00, fraction optional and cut to microseconds
TIMESTAMP_PATTERN = re.compile(
    r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(\.\d+)?[+-]\d{2}:\d{2}"
)

READ_ERRORS = (OSError, EOFError, zlib.error)


def open_log(path: Union[str, Path]):
    """Open a log file as text, transparently decompressing ``.gz`` files."""
    path = Path(path)
    if path.name.endswith(".gz"):
        return gzip.open(path, "rt", encoding="utf-8", errors="replace")
    return open(path, "r", encoding="utf-8", errors="replace")


def scan_log_file(path: Union[str, Path]) -> Iterator[Tuple[str, str]]:
    """Yield ``(line, game_name)`` for every launch event in one log file.

    Lines that do not look like a launch are skipped. A file that cannot be
    opened or stops decompressing midway is logged and abandoned; events
    already yielded from it stand.
    """
    try:
        with open_log(path) as handle:
            for raw_line in handle:
                line = raw_line.rstrip("\r\n")
                match = LAUNCH_PATTERN.search(line)
                if match:
                    yield line, match.group(1)
    except READ_ERRORS as e:
        logger.error(f"Error reading log file {path}: {e}")


def parse_timestamp(line: str) -> Optional[datetime]:
    """Parse the leading timestamp field of a syslog line.

    The offset written in the log is kept, so month and year reflect the
    wall clock of the machine that wrote the line.
    """
    token = line.split(" ", 1)[0]
    match = TIMESTAMP_PATTERN.fullmatch(token)
    if not match:
        logger.warning(f"Error parsing time: {token!r}")
        return None

    fraction = match.group(1)
    if fraction:
        token = token[:match.start(1)] + fraction[:7] + token[match.end(1):]
        layout = "%Y-%m-%dT%H:%M:%S.%f%z"
    else:
        layout = "%Y-%m-%dT%H:%M:%S%z"
    try:
        return datetime.strptime(token, layout)
    except ValueError as e:
        logger.warning(f"Error parsing time: {e}")
        return None


def event_period(timestamp: datetime) -> Tuple[str, str]:
    """Return the ``(year, month)`` aggregation keys for a timestamp."""
    return timestamp.strftime("%Y"), MONTH_NAMES[timestamp.month - 1]


# Independent of the process locale, unlike %B
MONTH_NAMES = (
    "january", "february", "march", "april", "may", "june",
    "july", "august", "september", "october", "november", "december",
)
