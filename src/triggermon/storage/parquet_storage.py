"""
Parquet storage implementation using Polars.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import polars as pl

from ..models.config import ParquetCompression
from .base import DataStorage, PathLike

logger = logging.getLogger(__name__)


class ParquetStorage(DataStorage):
    """
    Parquet storage for recorder output.

    DataFrames are written as Parquet with the configured compression;
    metadata dictionaries are written as indented JSON.
    """

    def __init__(self, compression: ParquetCompression = "snappy"):
        """
        Initialize Parquet storage with specified compression.

        Args:
            compression: Compression algorithm to use
        """
        self.compression = compression
        logger.debug(f"Initialized ParquetStorage with compression: {compression}")

    def save_dataframe(self, df: pl.DataFrame, path: PathLike) -> None:
        """
        Save a Polars DataFrame to Parquet format.

        Args:
            df: Polars DataFrame to save
            path: File path to save to
        """
        try:
            Path(path).parent.mkdir(parents=True, exist_ok=True)
            df.write_parquet(path, compression=self.compression)
            logger.debug(f"Saved DataFrame with {len(df)} rows to {path}")
        except Exception as e:
            logger.error(f"Failed to save DataFrame to {path}: {e}")
            raise

    def load_dataframe(self, path: PathLike, columns: Optional[List[str]] = None) -> pl.DataFrame:
        """
        Load a Polars DataFrame from Parquet format.

        Args:
            path: File path to load from
            columns: Optional list of columns to load (for column pruning)

        Returns:
            Loaded Polars DataFrame
        """
        try:
            if columns:
                df = pl.read_parquet(path, columns=columns)
            else:
                df = pl.read_parquet(path)
            logger.debug(f"Loaded DataFrame with {len(df)} rows from {path}")
            return df
        except Exception as e:
            logger.error(f"Failed to load DataFrame from {path}: {e}")
            raise

    def save_dict(self, data: Dict[str, Any], path: PathLike) -> None:
        """
        Save dictionary data to JSON format.

        Args:
            data: Dictionary data to save
            path: File path to save to
        """
        try:
            Path(path).parent.mkdir(parents=True, exist_ok=True)
            with open(path, 'w', encoding='utf-8') as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            logger.debug(f"Saved dictionary data to {path}")
        except Exception as e:
            logger.error(f"Failed to save dictionary to {path}: {e}")
            raise

