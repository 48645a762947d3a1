from __future__ import annotations

from typing import Literal, Optional

from ..config import get_config
from .backends.csv_backend import CsvDataAccess
from .backends.sql_backend import SqlDataAccess
from .interface import DataAccess


def get_data_access(kind: Optional[Literal["csv", "sql"]] = None) -> DataAccess:
    config = get_config()
    kind = kind or config.data_backend
    if kind == "csv":
        # Reads from configured CSV folder
        return CsvDataAccess(data_dir=config.data_dir)
    if kind == "sql":
        # Shares the process-wide database handle
        return SqlDataAccess()
    raise ValueError(f"Unknown data access kind: {kind}")
