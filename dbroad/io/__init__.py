"""
Input/output utilities.

This module provides:
- CSV read/write of sampled broadening tables
- Export tools for broadening results with metadata (CSV, JSON)
"""

from dbroad.io.table import load_broadening_table, save_broadening_table
from dbroad.io.exporters import (
    Exporter,
    CSVExporter,
    JSONExporter,
    ExportMetadata,
    create_exporter,
    export_to_csv,
    export_to_json,
)

__all__ = [
    # Table I/O
    "load_broadening_table",
    "save_broadening_table",
    # Exporters
    "Exporter",
    "CSVExporter",
    "JSONExporter",
    "ExportMetadata",
    "create_exporter",
    "export_to_csv",
    "export_to_json",
]
