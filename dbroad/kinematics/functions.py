"""
Named broadening functions of the detector angle.
"""

from dataclasses import dataclass
from typing import Callable, Tuple, Union
import numpy as np

from dbroad.core.constants import ANGLE_MIN_DEG, ANGLE_MAX_DEG, DEFAULT_N_POINTS

# Component name -> display title, in drawing order of the individual terms
COMPONENT_TITLES = {
    "energy_broadening": "Energy Broadening",
    "solid_angle_broadening": "Solid Angle Broadening",
    "beta_broadening": "Beta Broadening",
    "total_broadening": "Total Broadening",
}


@dataclass(frozen=True)
class BroadeningFunction:
    """
    A broadening term bound to one set of model parameters.

    Attributes
    ----------
    name : str
        Component name, e.g. 'total_broadening'
    title : str
        Display title, e.g. 'Total Broadening'
    func : callable
        Maps angle(s) in degrees to dE/E
    domain : Tuple[float, float]
        Angle range in degrees over which the function is drawn
    """

    name: str
    title: str
    func: Callable[[Union[float, np.ndarray]], Union[float, np.ndarray]]
    domain: Tuple[float, float] = (ANGLE_MIN_DEG, ANGLE_MAX_DEG)

    def __call__(self, theta_deg: Union[float, np.ndarray]) -> Union[float, np.ndarray]:
        return self.func(theta_deg)

    def sample(self, n_points: int = DEFAULT_N_POINTS) -> Tuple[np.ndarray, np.ndarray]:
        """
        Evaluate the function on an even grid spanning its domain.

        Parameters
        ----------
        n_points : int
            Number of grid points, at least 2

        Returns
        -------
        theta_deg : array
            Grid of angles in degrees
        values : array
            Function values on the grid
        """
        if n_points < 2:
            raise ValueError("n_points must be at least 2")

        theta = np.linspace(self.domain[0], self.domain[1], n_points)
        return theta, np.asarray(self.func(theta), dtype=float)
