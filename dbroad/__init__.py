"""
dbroad: Doppler broadening of gamma-ray detector energy resolution

A small Python library for estimating how the Doppler shift of gamma rays
emitted from a moving frame of reference degrades the energy resolution of a
detector placed at a given polar angle. The broadening is split into the
intrinsic resolution at the shifted energy, the opening angle of the detector
and the spread of beta values, and combined in quadrature.
"""

__version__ = "0.1.0"
__author__ = "Karl Smith"

# Core imports for convenience
from dbroad.core import constants
from dbroad.core import units
from dbroad.kinematics.broadening import DopplerBroadening

__all__ = [
    "constants",
    "units",
    "DopplerBroadening",
]
