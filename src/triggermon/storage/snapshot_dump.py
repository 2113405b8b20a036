"""
Pre-trigger dump files.

A dump file holds the serialized snapshots of one history buffer in
chronological order, one per line, uncompressed. The file content depends only
on the snapshots, so dumping an unchanged buffer twice yields identical bytes.
"""

import logging
from pathlib import Path
from typing import Iterable, List

logger = logging.getLogger(__name__)

RECORD_SEPARATOR = b"\n"


def dump_file_name(kind: str, timestamp: str) -> str:
    """Name of the dump file for a collector kind: ``<kind>_<timestamp>.bin``."""
    return f"{kind}_{timestamp}.bin"


def write_snapshot_dump(path: Path, payloads: Iterable[bytes]) -> int:
    """
    Write serialized snapshots to a dump file.

    Args:
        path: Destination file; must not exist yet
        payloads: Serialized snapshots, oldest first

    Returns:
        Number of snapshots written

    Raises:
        ValueError: If a payload contains the record separator
        OSError: If the file cannot be created or written
    """
    count = 0
    with open(path, "xb") as f:
        for payload in payloads:
            if RECORD_SEPARATOR in payload:
                raise ValueError(f"Serialized snapshot #{count} contains a newline")
            f.write(payload)
            f.write(RECORD_SEPARATOR)
            count += 1
    logger.debug(f"Wrote {count} snapshots to {path}")
    return count


def read_snapshot_dump(path: Path) -> List[bytes]:
    """
    Read the serialized snapshots back from a dump file.

    Args:
        path: Dump file written by `write_snapshot_dump`

    Returns:
        Serialized snapshots, oldest first
    """
    data = Path(path).read_bytes()
    return [line for line in data.split(RECORD_SEPARATOR) if line]
