"""
Storage for captured data.

- Pre-trigger dump files: raw serialized snapshots, uncompressed
- Post-trigger recording output: Parquet tables and JSON metadata
"""

from .base import DataStorage
from .factory import create_storage
from .parquet_storage import ParquetStorage
from .snapshot_dump import dump_file_name, read_snapshot_dump, write_snapshot_dump

__all__ = [
    "DataStorage",
    "ParquetStorage",
    "create_storage",
    "dump_file_name",
    "read_snapshot_dump",
    "write_snapshot_dump",
]
