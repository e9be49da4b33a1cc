"""
I/O utilities for sampled broadening tables.
"""

import pandas as pd
from pathlib import Path
from typing import Union

from dbroad.core.logging_config import get_logger
from dbroad.kinematics.functions import COMPONENT_TITLES

logger = get_logger("io.table")


def load_broadening_table(file_path: Union[str, Path]) -> pd.DataFrame:
    """
    Load a broadening table from CSV.

    Comment lines starting with '#' (export metadata) are skipped.

    Parameters
    ----------
    file_path : str or Path
        Path to CSV file

    Returns
    -------
    pd.DataFrame
        Table with at least a 'theta_deg' column and one broadening column
    """
    file_path = Path(file_path)

    if not file_path.exists():
        raise FileNotFoundError(f"Broadening table not found: {file_path}")

    df = pd.read_csv(file_path, comment="#")

    if "theta_deg" not in df.columns:
        raise ValueError("Could not find 'theta_deg' column in broadening table")

    if not any(name in df.columns for name in COMPONENT_TITLES):
        raise ValueError(
            f"Broadening table must contain at least one of: {list(COMPONENT_TITLES)}"
        )

    logger.info(f"Loaded broadening table from {file_path}: {len(df)} rows")
    return df


def save_broadening_table(file_path: Union[str, Path], table: pd.DataFrame) -> None:
    """
    Save a broadening table to CSV, or whitespace separated text otherwise.

    Parameters
    ----------
    file_path : str or Path
        Output file path
    table : pd.DataFrame
        Table from ``sample_broadening`` or ``scan_parameter``
    """
    file_path = Path(file_path)

    if file_path.suffix.lower() == ".csv":
        table.to_csv(file_path, index=False)
    else:
        table.to_csv(file_path, index=False, sep=" ")

    logger.info(f"Saved broadening table to {file_path}")
