"""
Doppler broadening kinematics.

This module provides:
- Closed-form broadening terms as functions of detector polar angle
- The DopplerBroadening model holding one validated parameter set
- Named broadening functions with display titles
- Sampling, batch evaluation and parameter scans over angle grids
"""

from dbroad.kinematics.formulas import (
    doppler_shift,
    energy_broadening,
    solid_angle_broadening,
    beta_broadening,
    total_broadening,
    emission_broadening,
)
from dbroad.kinematics.functions import BroadeningFunction, COMPONENT_TITLES
from dbroad.kinematics.broadening import DopplerBroadening, PARAMETER_NAMES
from dbroad.kinematics.sampling import (
    angle_grid,
    sample_broadening,
    evaluate_batch,
    scan_parameter,
    peak_broadening,
)

__all__ = [
    # Formulas
    "doppler_shift",
    "energy_broadening",
    "solid_angle_broadening",
    "beta_broadening",
    "total_broadening",
    "emission_broadening",
    # Model
    "DopplerBroadening",
    "PARAMETER_NAMES",
    "BroadeningFunction",
    "COMPONENT_TITLES",
    # Sampling
    "angle_grid",
    "sample_broadening",
    "evaluate_batch",
    "scan_parameter",
    "peak_broadening",
]
