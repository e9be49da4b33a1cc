"""
Sampling and batch evaluation of broadening models over angle grids.
"""

import os
from concurrent.futures import ThreadPoolExecutor, ProcessPoolExecutor, as_completed
from typing import List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from dbroad.core.constants import ANGLE_MIN_DEG, ANGLE_MAX_DEG, DEFAULT_N_POINTS
from dbroad.core.logging_config import get_logger
from dbroad.kinematics.broadening import DopplerBroadening, PARAMETER_NAMES
from dbroad.kinematics.functions import COMPONENT_TITLES

logger = get_logger("kinematics.sampling")

# Column order of a sampled broadening table
TABLE_COLUMNS = ["theta_deg", "shifted_energy_MeV"] + list(COMPONENT_TITLES)


def angle_grid(
    theta_min: float = ANGLE_MIN_DEG,
    theta_max: float = ANGLE_MAX_DEG,
    n_points: int = DEFAULT_N_POINTS,
) -> np.ndarray:
    """
    Evenly spaced grid of polar angles.

    Parameters
    ----------
    theta_min : float
        First angle in degrees (default: 0)
    theta_max : float
        Last angle in degrees (default: 180)
    n_points : int
        Number of points including both ends (default: 100)

    Returns
    -------
    array
        Angles in degrees
    """
    if n_points < 2:
        raise ValueError("n_points must be at least 2")
    if theta_max <= theta_min:
        raise ValueError("theta_max must be greater than theta_min")

    return np.linspace(theta_min, theta_max, int(n_points))


def sample_broadening(
    model: DopplerBroadening, angles: Optional[Sequence[float]] = None
) -> pd.DataFrame:
    """
    Tabulate the shifted energy and all broadening terms of a model.

    Parameters
    ----------
    model : DopplerBroadening
        Model to evaluate
    angles : sequence of float, optional
        Angles in degrees. If None, uses ``angle_grid()``.

    Returns
    -------
    pd.DataFrame
        Columns: theta_deg, shifted_energy_MeV, energy_broadening,
        solid_angle_broadening, beta_broadening, total_broadening
    """
    theta = angle_grid() if angles is None else np.atleast_1d(np.asarray(angles, dtype=float))

    table = {
        "theta_deg": theta,
        "shifted_energy_MeV": model.shifted_energy(theta),
    }
    for name, function in model.components().items():
        table[name] = function(theta)

    return pd.DataFrame(table, columns=TABLE_COLUMNS)


def evaluate_batch(
    models: List[DopplerBroadening],
    angles: Optional[Sequence[float]] = None,
    n_workers: Optional[int] = None,
    use_processes: bool = False,
) -> List[pd.DataFrame]:
    """
    Tabulate several models in parallel.

    Parameters
    ----------
    models : List[DopplerBroadening]
        Models to evaluate
    angles : sequence of float, optional
        Angles in degrees shared by all models. If None, uses ``angle_grid()``.
    n_workers : int, optional
        Number of worker threads/processes. If None, uses CPU count.
    use_processes : bool
        If True, use processes instead of threads

    Returns
    -------
    List[pd.DataFrame]
        One table per model, in the order of ``models``
    """
    if not models:
        return []

    if n_workers is None:
        n_workers = os.cpu_count() or 1

    theta = angle_grid() if angles is None else np.atleast_1d(np.asarray(angles, dtype=float))

    logger.info(f"Evaluating {len(models)} models on {len(theta)} angles with {n_workers} workers")

    executor_class = ProcessPoolExecutor if use_processes else ThreadPoolExecutor

    completed = {}
    with executor_class(max_workers=n_workers) as executor:
        futures = {
            executor.submit(sample_broadening, model, theta): i for i, model in enumerate(models)
        }

        for future in as_completed(futures):
            idx = futures[future]
            try:
                completed[idx] = future.result()
            except Exception as e:
                logger.error(f"Error evaluating model {idx} ({models[idx]!r}): {e}")
                raise

    return [completed[i] for i in range(len(models))]


def scan_parameter(
    base_model: DopplerBroadening,
    parameter: str,
    values: Sequence[float],
    angles: Optional[Sequence[float]] = None,
    n_workers: Optional[int] = None,
) -> pd.DataFrame:
    """
    Tabulate a model while stepping one of its parameters.

    Parameters
    ----------
    base_model : DopplerBroadening
        Model providing the fixed parameters
    parameter : str
        Name of the parameter to vary, one of the constructor arguments
    values : sequence of float
        Values taken by the parameter
    angles : sequence of float, optional
        Angles in degrees. If None, uses ``angle_grid()``.
    n_workers : int, optional
        Number of worker threads

    Returns
    -------
    pd.DataFrame
        Long-format table with the varied parameter as first column
    """
    if parameter not in PARAMETER_NAMES:
        raise ValueError(
            f"Unknown parameter: {parameter}. Must be one of: {list(PARAMETER_NAMES)}"
        )
    if len(values) == 0:
        raise ValueError("At least one parameter value is required")

    models = [base_model.with_parameters(**{parameter: value}) for value in values]
    tables = evaluate_batch(models, angles=angles, n_workers=n_workers)

    for value, table in zip(values, tables):
        table.insert(0, parameter, float(value))

    logger.info(f"Scanned {parameter} over {len(values)} values")
    return pd.concat(tables, ignore_index=True)


def peak_broadening(
    model: DopplerBroadening,
    component: str = "total_broadening",
    angles: Optional[Sequence[float]] = None,
) -> Tuple[float, float]:
    """
    Angle at which a broadening term is largest on the sampled grid.

    Parameters
    ----------
    model : DopplerBroadening
        Model to evaluate
    component : str
        One of 'energy_broadening', 'solid_angle_broadening',
        'beta_broadening', 'total_broadening'
    angles : sequence of float, optional
        Angles in degrees. If None, uses ``angle_grid()``.

    Returns
    -------
    theta_deg : float
        Angle of the maximum in degrees
    value : float
        Broadening at that angle
    """
    if component not in COMPONENT_TITLES:
        raise ValueError(
            f"Unknown component: {component}. Must be one of: {list(COMPONENT_TITLES)}"
        )

    table = sample_broadening(model, angles)
    idx = table[component].idxmax()
    return float(table.at[idx, "theta_deg"]), float(table.at[idx, component])
