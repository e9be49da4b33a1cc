"""
Pytest configuration and shared fixtures for dbroad tests.

This module provides:
- Reference models with hand-checked values
- Sample configuration dictionaries and temporary config files
"""

import os
import logging
import pytest
import numpy as np
import tempfile
from pathlib import Path

from dbroad.kinematics.broadening import DopplerBroadening


@pytest.fixture(autouse=True)
def _reset_warning_capture():
    """Undo logging.captureWarnings between tests so state does not leak."""
    yield
    logging.captureWarnings(False)


@pytest.fixture
def reference_model():
    """Model with E=1 MeV, beta=0.5 used for hand-computed checks."""
    return DopplerBroadening(
        energy_MeV=1.0,
        beta=0.5,
        d_theta_deg=0.1,
        resolution_const=1.0,
        d_beta=0.01,
    )


@pytest.fixture
def rest_frame_model():
    """Model with no frame motion (beta=0)."""
    return DopplerBroadening(
        energy_MeV=1.332,
        beta=0.0,
        d_theta_deg=5.0,
        resolution_const=0.03,
        d_beta=0.02,
    )


@pytest.fixture
def polar_angles():
    """Fine grid covering the full polar range."""
    return np.linspace(0.0, 180.0, 361)


@pytest.fixture
def sample_config_dict():
    """Create a sample configuration dictionary."""
    return {
        "broadening": {
            "energy_MeV": 1.0,
            "beta": 0.5,
            "d_theta_deg": 0.1,
            "resolution_const": 1.0,
            "d_beta": 0.01,
        },
        "sampling": {
            "theta_min_deg": 0.0,
            "theta_max_deg": 180.0,
            "n_points": 37,
        },
    }


@pytest.fixture
def temp_config_file(sample_config_dict):
    """Create a temporary YAML config file."""
    import yaml

    config_fd, config_path = tempfile.mkstemp(suffix=".yaml")
    os.close(config_fd)  # Close file descriptor to prevent leaks

    with open(config_path, "w") as f:
        yaml.dump(sample_config_dict, f)

    yield config_path

    Path(config_path).unlink()
