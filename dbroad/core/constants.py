"""
Physical constants and defaults for dbroad calculations.

Energies are in MeV and angles in degrees unless otherwise specified.
"""

import numpy as np

# ============================================================================
# Fundamental Constants
# ============================================================================

# Speed of light
C_LIGHT = 2.99792458e8  # m/s

# Atomic mass unit energy equivalent
AMU_MEV = 931.49410242  # MeV/c^2

# Elementary charge
E_CHARGE = 1.602176634e-19  # C

# ============================================================================
# Conversion Factors
# ============================================================================

# Angle conversions
DEG_TO_RAD = np.pi / 180.0
RAD_TO_DEG = 180.0 / np.pi
MRAD_TO_RAD = 1.0e-3

# Energy conversions
EV_TO_J = E_CHARGE  # 1 eV = E_CHARGE J
KEV_TO_EV = 1.0e3
MEV_TO_EV = 1.0e6

# ============================================================================
# Evaluation Domain
# ============================================================================

# Polar angle of the detector relative to the frame direction
ANGLE_MIN_DEG = 0.0
ANGLE_MAX_DEG = 180.0

# Number of samples used when a broadening function is drawn or tabulated
DEFAULT_N_POINTS = 100

# ============================================================================
# Numerical Constants
# ============================================================================

# Small number for numerical stability
EPSILON = np.finfo(np.float64).eps
