"""
Export tools for sampled broadening results.

This module provides exporters for common data formats:
- CSV: Broadening tables and parameter scans with configurable columns
- JSON: Structured results for downstream tools

All exporters follow the Exporter ABC interface and preserve metadata
including timestamps, version info, and the model parameters.

Example
-------
>>> from dbroad.io.exporters import create_exporter
>>> from dbroad.kinematics import DopplerBroadening, sample_broadening
>>> model = DopplerBroadening(1.0, 0.5, d_theta_deg=0.1, d_beta=0.01)
>>> table = sample_broadening(model)
>>>
>>> exporter = create_exporter("csv")
>>> exporter.export(table, "broadening.csv", metadata=model.to_dict())
>>>
>>> exporter = create_exporter("json", indent=2)
>>> exporter.export(table, "broadening.json", metadata=model.to_dict())
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Union
import json

import numpy as np
import pandas as pd

from dbroad.core.logging_config import get_logger

logger = get_logger("io.exporters")

# Package version for metadata
try:
    from dbroad import __version__
except ImportError:
    __version__ = "unknown"


# --- Type aliases ---
PathLike = Union[str, Path]
ExportData = Union[pd.DataFrame, Dict[str, Any]]


@dataclass
class ExportMetadata:
    """
    Metadata for exported data.

    Attributes
    ----------
    timestamp : str
        ISO format timestamp of export
    version : str
        dbroad package version
    format : str
        Export format (csv, json)
    source_type : str
        Type of source data (DataFrame, dict)
    parameters : Dict[str, Any]
        Model parameters used
    """

    timestamp: str
    version: str
    format: str
    source_type: str
    parameters: Dict[str, Any]

    @classmethod
    def create(
        cls,
        format: str,
        source_type: str,
        parameters: Optional[Dict[str, Any]] = None,
    ) -> "ExportMetadata":
        """Create metadata with current timestamp and version."""
        return cls(
            timestamp=datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            version=__version__,
            format=format,
            source_type=source_type,
            parameters=parameters or {},
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "timestamp": self.timestamp,
            "version": self.version,
            "format": self.format,
            "source_type": self.source_type,
            "parameters": self.parameters,
        }


class Exporter(ABC):
    """
    Abstract base class for data exporters.

    All exporters must implement the export() method to write data
    to the specified format.

    Subclasses
    ----------
    CSVExporter : Export to CSV format
    JSONExporter : Export to JSON format
    """

    @abstractmethod
    def export(
        self,
        data: ExportData,
        path: PathLike,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> None:
        """
        Export data to file.

        Parameters
        ----------
        data : ExportData
            Broadening table (DataFrame) or dict of equal-length columns
        path : PathLike
            Output file path
        metadata : Dict[str, Any], optional
            Additional metadata to include, typically ``model.to_dict()``

        Raises
        ------
        ValueError
            If data format is not supported
        """
        pass

    @abstractmethod
    def get_format(self) -> str:
        """Return the export format name (csv, json)."""
        pass

    def _normalize_data(self, data: ExportData) -> pd.DataFrame:
        """
        Normalize input data to a DataFrame.

        Parameters
        ----------
        data : ExportData
            DataFrame or dict of columns

        Returns
        -------
        pd.DataFrame
            Table to export
        """
        if isinstance(data, pd.DataFrame):
            return data
        elif isinstance(data, dict):
            try:
                return pd.DataFrame({k: np.atleast_1d(v) for k, v in data.items()})
            except ValueError as e:
                raise ValueError(f"Columns must have equal length: {e}") from e
        else:
            raise ValueError(f"Unsupported data type: {type(data).__name__}")

    def _get_source_type(self, data: ExportData) -> str:
        """Get the type name of the source data."""
        if isinstance(data, dict):
            return "dict"
        return type(data).__name__


class CSVExporter(Exporter):
    """
    Export broadening tables to CSV format.

    Parameters
    ----------
    columns : List[str], optional
        Column names to export (default: all available)
    delimiter : str
        Field delimiter (default: ",")
    include_header : bool
        Include column header row (default: True)
    include_metadata : bool
        Include metadata as comment lines (default: True)
    float_format : str
        Format string for floating point numbers (default: "%.6g")

    Example
    -------
    >>> exporter = CSVExporter(columns=["theta_deg", "total_broadening"])
    >>> exporter.export(table, "total.csv")
    """

    def __init__(
        self,
        columns: Optional[List[str]] = None,
        delimiter: str = ",",
        include_header: bool = True,
        include_metadata: bool = True,
        float_format: str = "%.6g",
    ):
        self.columns = columns
        self.delimiter = delimiter
        self.include_header = include_header
        self.include_metadata = include_metadata
        self.float_format = float_format

    def get_format(self) -> str:
        return "csv"

    def export(
        self,
        data: ExportData,
        path: PathLike,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Export data to CSV file, metadata as leading '#' comment lines."""
        path = Path(path)
        table = self._normalize_data(data)
        source_type = self._get_source_type(data)

        export_meta = ExportMetadata.create(
            format="csv",
            source_type=source_type,
            parameters=metadata,
        )

        lines = []

        if self.include_metadata:
            lines.append("# dbroad Export")
            lines.append(f"# Timestamp: {export_meta.timestamp}")
            lines.append(f"# Version: {export_meta.version}")
            lines.append(f"# Source: {export_meta.source_type}")
            if metadata:
                for key, value in metadata.items():
                    lines.append(f"# {key}: {value}")
            lines.append("#")

        lines.extend(self._table_lines(table))

        with open(path, "w") as f:
            f.write("\n".join(lines))
            f.write("\n")

        logger.info(f"Exported {source_type} to CSV: {path}")

    def _table_lines(self, table: pd.DataFrame) -> List[str]:
        """Format table rows as CSV lines."""
        if self.columns:
            missing = [c for c in self.columns if c not in table.columns]
            if missing:
                raise ValueError(f"Columns not in table: {missing}")
            columns = list(self.columns)
        else:
            columns = list(table.columns)

        lines = []
        if self.include_header:
            lines.append(self.delimiter.join(columns))

        for row in table[columns].itertuples(index=False):
            lines.append(self.delimiter.join(self._format_value(v) for v in row))

        return lines

    def _format_value(self, value: Any) -> str:
        if isinstance(value, (float, np.floating)):
            return self.float_format % value
        return str(value)


class JSONExporter(Exporter):
    """
    Export broadening tables to JSON format.

    The table is written column-wise under "data", next to a "metadata"
    block. NaN and Inf values are written as strings.

    Parameters
    ----------
    indent : int, optional
        JSON indentation level (default: 2)
    sort_keys : bool
        Sort dictionary keys (default: False, keeps column order)
    allow_nan : bool
        Write NaN as "NaN" instead of null (default: True)
    """

    def __init__(
        self,
        indent: Optional[int] = 2,
        sort_keys: bool = False,
        allow_nan: bool = True,
    ):
        self.indent = indent
        self.sort_keys = sort_keys
        self.allow_nan = allow_nan

    def get_format(self) -> str:
        return "json"

    def export(
        self,
        data: ExportData,
        path: PathLike,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Export data to JSON file."""
        path = Path(path)
        table = self._normalize_data(data)
        source_type = self._get_source_type(data)

        export_meta = ExportMetadata.create(
            format="json",
            source_type=source_type,
            parameters=metadata,
        )

        output = {
            "metadata": export_meta.to_dict(),
            "data": {col: self._column_to_json(table[col].to_numpy()) for col in table.columns},
        }

        with open(path, "w") as f:
            json.dump(output, f, indent=self.indent, sort_keys=self.sort_keys)

        logger.info(f"Exported {source_type} to JSON: {path}")

    def _column_to_json(self, values: np.ndarray) -> List[Any]:
        return [self._convert_for_json(v) for v in values.tolist()]

    def _convert_for_json(self, value: Any) -> Any:
        """Convert a single value for JSON serialization."""
        if isinstance(value, float):
            if np.isnan(value):
                return "NaN" if self.allow_nan else None
            elif np.isinf(value):
                return "Infinity" if value > 0 else "-Infinity"
        return value


# --- Factory Function ---


def create_exporter(
    format: str,
    **kwargs,
) -> Exporter:
    """
    Factory function to create exporters by format name.

    Parameters
    ----------
    format : str
        Export format: "csv", "json"
    **kwargs
        Format-specific options passed to exporter constructor

    Returns
    -------
    Exporter
        Configured exporter instance

    Raises
    ------
    ValueError
        If format is not supported
    """
    format_lower = format.lower()

    if format_lower == "csv":
        return CSVExporter(**kwargs)
    elif format_lower == "json":
        return JSONExporter(**kwargs)
    else:
        supported = ["csv", "json"]
        raise ValueError(
            f"Unsupported export format: '{format}'. " f"Supported formats: {supported}"
        )


# --- Convenience functions ---


def export_to_csv(
    data: ExportData,
    path: PathLike,
    metadata: Optional[Dict[str, Any]] = None,
    **kwargs,
) -> None:
    """
    Convenience function to export data to CSV.

    Parameters
    ----------
    data : ExportData
        Data to export
    path : PathLike
        Output file path
    metadata : dict, optional
        Metadata written as comment lines
    **kwargs
        Options passed to CSVExporter
    """
    CSVExporter(**kwargs).export(data, path, metadata=metadata)


def export_to_json(
    data: ExportData,
    path: PathLike,
    metadata: Optional[Dict[str, Any]] = None,
    **kwargs,
) -> None:
    """
    Convenience function to export data to JSON.

    Parameters
    ----------
    data : ExportData
        Data to export
    path : PathLike
        Output file path
    metadata : dict, optional
        Metadata stored under "metadata.parameters"
    **kwargs
        Options passed to JSONExporter
    """
    JSONExporter(**kwargs).export(data, path, metadata=metadata)
