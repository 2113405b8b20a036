"""
Abstract base class for data storage implementations.

This module defines the DataStorage interface used by the recorder to persist
post-trigger data: tabular samples as DataFrames and small metadata documents
as dictionaries.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import polars as pl

PathLike = Union[str, Path]


class DataStorage(ABC):
    """Abstract base class for data storage implementations."""

    @abstractmethod
    def save_dataframe(self, df: pl.DataFrame, path: PathLike) -> None:
        """
        Save a Polars DataFrame to the specified path.

        Args:
            df: Polars DataFrame to save
            path: File path to save to
        """
        pass

    @abstractmethod
    def load_dataframe(
        self, path: PathLike, columns: Optional[List[str]] = None
    ) -> pl.DataFrame:
        """
        Load a Polars DataFrame from the specified path.

        Args:
            path: File path to load from
            columns: Optional list of columns to load (for column pruning)

        Returns:
            Loaded Polars DataFrame
        """
        pass

    @abstractmethod
    def save_dict(self, data: Dict[str, Any], path: PathLike) -> None:
        """
        Save dictionary data to the specified path.

        Args:
            data: Dictionary data to save
            path: File path to save to
        """
        pass
