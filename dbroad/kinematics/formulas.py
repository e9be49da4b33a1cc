"""
Closed-form Doppler broadening terms.

A gamma ray of energy E emitted from a frame moving with velocity beta (in
units of c) is detected at polar angle theta with the shifted energy

    E' = E (1 - beta^2) / (1 - beta cos(theta))

The spread of the detected energy, divided by E', is built from the intrinsic
detector resolution at E' and the propagated uncertainty of each quantity
entering the shift:

    dE'/E' = sqrt( (dE_int/E')^2 + (dE'/dE dE/E')^2
                   + (dE'/dtheta dtheta/E')^2 + (dE'/dbeta dbeta/E')^2 )

The energy derivative term reduces to dE/E, independent of angle, and is kept
out of ``total_broadening``; ``emission_broadening`` returns it on its own.

All functions take angles in degrees and broadcast over numpy arrays.
"""

import numpy as np
from typing import Union

from dbroad.core.constants import DEG_TO_RAD

ArrayLike = Union[float, np.ndarray]


def doppler_shift(theta_deg: ArrayLike, energy_MeV: float, beta: float) -> np.ndarray:
    """
    Shifted gamma-ray energy seen at polar angle theta.

    Parameters
    ----------
    theta_deg : float or array
        Polar angle of the detector in degrees
    energy_MeV : float
        Emitted gamma-ray energy in MeV
    beta : float
        Velocity of the frame of reference as a fraction of c

    Returns
    -------
    array
        E' = E (1 - beta^2) / (1 - beta cos(theta)) in MeV
    """
    angle_rad = np.asarray(theta_deg, dtype=float) * DEG_TO_RAD
    return energy_MeV * (1.0 - beta**2) / (1.0 - beta * np.cos(angle_rad))


def energy_broadening(
    theta_deg: ArrayLike, energy_MeV: float, beta: float, resolution_const: float
) -> np.ndarray:
    """
    Intrinsic resolution evaluated at the Doppler shifted energy.

    Parameters
    ----------
    theta_deg : float or array
        Polar angle of the detector in degrees
    energy_MeV : float
        Emitted gamma-ray energy in MeV
    beta : float
        Velocity of the frame of reference as a fraction of c
    resolution_const : float
        Constant of the const/sqrt(E) resolution function in sqrt(MeV)

    Returns
    -------
    array
        dE_int/E' = const / sqrt(E')
    """
    return resolution_const / np.sqrt(doppler_shift(theta_deg, energy_MeV, beta))


def solid_angle_broadening(theta_deg: ArrayLike, beta: float, d_theta_rad: float) -> np.ndarray:
    """
    Broadening from the opening angle of the detector.

    Parameters
    ----------
    theta_deg : float or array
        Polar angle of the detector in degrees
    beta : float
        Velocity of the frame of reference as a fraction of c
    d_theta_rad : float
        Opening angle of the detector in radians

    Returns
    -------
    array
        dE'/dtheta dtheta/E' = beta sin(theta) / (1 - beta cos(theta)) dtheta
    """
    angle_rad = np.asarray(theta_deg, dtype=float) * DEG_TO_RAD
    return d_theta_rad * beta * np.sin(angle_rad) / (1.0 - beta * np.cos(angle_rad))


def beta_broadening(theta_deg: ArrayLike, beta: float, d_beta: float) -> np.ndarray:
    """
    Broadening from the width of the beta distribution.

    Parameters
    ----------
    theta_deg : float or array
        Polar angle of the detector in degrees
    beta : float
        Velocity of the frame of reference as a fraction of c
    d_beta : float
        Width of the beta distribution

    Returns
    -------
    array
        dE'/dbeta dbeta/E' = |cos(theta) - beta| / ((1 - beta^2)(1 - beta cos(theta))) dbeta
    """
    cos_theta = np.cos(np.asarray(theta_deg, dtype=float) * DEG_TO_RAD)
    return d_beta * np.abs(cos_theta - beta) / ((1.0 - beta**2) * (1.0 - beta * cos_theta))


def total_broadening(
    theta_deg: ArrayLike,
    energy_MeV: float,
    beta: float,
    d_theta_rad: float,
    resolution_const: float,
    d_beta: float,
) -> np.ndarray:
    """
    Quadrature sum of the energy, opening angle and beta broadening.

    Parameters
    ----------
    theta_deg : float or array
        Polar angle of the detector in degrees
    energy_MeV : float
        Emitted gamma-ray energy in MeV
    beta : float
        Velocity of the frame of reference as a fraction of c
    d_theta_rad : float
        Opening angle of the detector in radians
    resolution_const : float
        Constant of the const/sqrt(E) resolution function in sqrt(MeV)
    d_beta : float
        Width of the beta distribution

    Returns
    -------
    array
        Total dE'/E'

    Notes
    -----
    The emitted energy term (dE'/dE dE/E')^2 is omitted. It equals
    (dE/E)^2 at every angle; add ``emission_broadening`` in quadrature if the
    line width of the source matters.
    """
    return np.sqrt(
        energy_broadening(theta_deg, energy_MeV, beta, resolution_const) ** 2
        + solid_angle_broadening(theta_deg, beta, d_theta_rad) ** 2
        + beta_broadening(theta_deg, beta, d_beta) ** 2
    )


def emission_broadening(energy_MeV: float, d_energy_MeV: float) -> float:
    """
    Broadening from the uncertainty of the emitted energy.

    Parameters
    ----------
    energy_MeV : float
        Emitted gamma-ray energy in MeV
    d_energy_MeV : float
        Uncertainty of the emitted energy in MeV

    Returns
    -------
    float
        dE'/dE dE/E' = dE/E, the same at every angle
    """
    return d_energy_MeV / energy_MeV
