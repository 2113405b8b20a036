"""
Factory for creating storage instances.
"""

import logging
from typing import Optional

from ..models.config import StorageConfig
from .base import DataStorage
from .parquet_storage import ParquetStorage

logger = logging.getLogger(__name__)


def create_storage(storage_config: Optional[StorageConfig] = None) -> DataStorage:
    """
    Create the storage used for recorder output.

    Args:
        storage_config: Storage settings; defaults are used when None

    Returns:
        DataStorage instance
    """
    storage_config = storage_config or StorageConfig()
    logger.debug(f"Creating ParquetStorage with compression: {storage_config.compression}")
    return ParquetStorage(compression=storage_config.compression)
