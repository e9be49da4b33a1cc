"""
Unit conversion utilities for dbroad.

Provides functions to convert between the angle and energy units used when
describing a detector setup, and to derive the beta of a beam from its
kinetic energy.
"""

import numpy as np
from typing import Union

# ============================================================================
# Angle Conversions
# ============================================================================

_ANGLE_TO_RAD = {
    "rad": 1.0,
    "mrad": 1.0e-3,
    "deg": np.pi / 180.0,
}

_ANGLE_ALIASES = {
    "rad": "rad",
    "radian": "rad",
    "radians": "rad",
    "mrad": "mrad",
    "deg": "deg",
    "degree": "deg",
    "degrees": "deg",
    "°": "deg",
}


def convert_angle(
    value: Union[float, np.ndarray], from_unit: str, to_unit: str
) -> Union[float, np.ndarray]:
    """
    Convert angle between units.

    Parameters
    ----------
    value : float or array
        Angle value(s) to convert
    from_unit : str
        Source unit: 'deg', 'rad', 'mrad'
    to_unit : str
        Target unit: 'deg', 'rad', 'mrad'

    Returns
    -------
    float or array
        Converted angle value(s)

    Examples
    --------
    >>> convert_angle(180.0, 'deg', 'rad')
    3.141592653589793
    >>> convert_angle(1.0, 'mrad', 'deg')
    0.05729577951308232
    """
    src = _ANGLE_ALIASES.get(from_unit.lower())
    if src is None:
        raise ValueError(f"Unknown source unit: {from_unit}")

    dst = _ANGLE_ALIASES.get(to_unit.lower())
    if dst is None:
        raise ValueError(f"Unknown target unit: {to_unit}")

    return value * _ANGLE_TO_RAD[src] / _ANGLE_TO_RAD[dst]


# ============================================================================
# Energy Conversions
# ============================================================================


def convert_energy(
    value: Union[float, np.ndarray], from_unit: str, to_unit: str
) -> Union[float, np.ndarray]:
    """
    Convert energy between units.

    Parameters
    ----------
    value : float or array
        Energy value(s) to convert
    from_unit : str
        Source unit: 'J', 'eV', 'keV', 'MeV'
    to_unit : str
        Target unit: 'J', 'eV', 'keV', 'MeV'

    Returns
    -------
    float or array
        Converted energy value(s)

    Examples
    --------
    >>> convert_energy(1332.5, 'keV', 'MeV')
    1.3325
    """
    from dbroad.core.constants import EV_TO_J, KEV_TO_EV, MEV_TO_EV

    # Normalize to eV
    if from_unit.lower() == "ev":
        ev = value
    elif from_unit.lower() == "kev":
        ev = value * KEV_TO_EV
    elif from_unit.lower() == "mev":
        ev = value * MEV_TO_EV
    elif from_unit.lower() == "j":
        ev = value / EV_TO_J
    else:
        raise ValueError(f"Unknown source unit: {from_unit}")

    # Convert from eV
    if to_unit.lower() == "ev":
        return ev
    elif to_unit.lower() == "kev":
        return ev / KEV_TO_EV
    elif to_unit.lower() == "mev":
        return ev / MEV_TO_EV
    elif to_unit.lower() == "j":
        return ev * EV_TO_J
    else:
        raise ValueError(f"Unknown target unit: {to_unit}")


# ============================================================================
# Beam Kinematics
# ============================================================================


def gamma_factor(beta: Union[float, np.ndarray]) -> Union[float, np.ndarray]:
    """
    Lorentz factor for a given beta.

    Parameters
    ----------
    beta : float or array
        Velocity as a fraction of the speed of light, |beta| < 1

    Returns
    -------
    float or array
        gamma = 1 / sqrt(1 - beta^2)
    """
    beta_arr = np.asarray(beta, dtype=float)
    if np.any(np.abs(beta_arr) >= 1.0):
        raise ValueError("|beta| must be less than 1")

    gamma = 1.0 / np.sqrt(1.0 - beta_arr**2)
    return float(gamma) if gamma.ndim == 0 else gamma


def beta_from_kinetic_energy(
    kinetic_MeV_per_u: Union[float, np.ndarray],
) -> Union[float, np.ndarray]:
    """
    Beta of a beam from its kinetic energy per nucleon.

    Parameters
    ----------
    kinetic_MeV_per_u : float or array
        Kinetic energy per atomic mass unit in MeV/u

    Returns
    -------
    float or array
        beta = sqrt(1 - 1/gamma^2) with gamma = 1 + T / (u c^2)

    Examples
    --------
    >>> round(beta_from_kinetic_energy(100.0), 4)
    0.4295
    """
    from dbroad.core.constants import AMU_MEV

    kinetic = np.asarray(kinetic_MeV_per_u, dtype=float)
    if np.any(kinetic < 0):
        raise ValueError("Kinetic energy must be non-negative")

    gamma = 1.0 + kinetic / AMU_MEV
    beta = np.sqrt(1.0 - 1.0 / gamma**2)
    return float(beta) if beta.ndim == 0 else beta
