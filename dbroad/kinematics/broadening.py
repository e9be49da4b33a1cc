"""
Doppler broadening model for a gamma-ray detector.
"""

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Callable, Dict, Union
import math
import warnings

import numpy as np

from dbroad.core.constants import ANGLE_MIN_DEG, ANGLE_MAX_DEG, DEG_TO_RAD
from dbroad.core.errors import DomainWarning, InvalidParameterError, find_stack_level
from dbroad.core.logging_config import get_logger
from dbroad.kinematics import formulas
from dbroad.kinematics.functions import BroadeningFunction, COMPONENT_TITLES

logger = get_logger("kinematics.broadening")

ArrayLike = Union[float, np.ndarray]

# Constructor parameters, in positional order
PARAMETER_NAMES = ("energy_MeV", "beta", "d_theta_deg", "resolution_const", "d_beta")


def _check_domain(theta_deg: np.ndarray) -> None:
    """Warn if any angle lies outside the polar range or is NaN."""
    outside = (theta_deg < ANGLE_MIN_DEG) | (theta_deg > ANGLE_MAX_DEG) | np.isnan(theta_deg)
    if np.any(outside):
        warnings.warn(
            f"{int(np.count_nonzero(outside))} angle(s) outside "
            f"[{ANGLE_MIN_DEG:g}, {ANGLE_MAX_DEG:g}] deg; results are not physical",
            DomainWarning,
            stacklevel=find_stack_level(),
        )


@dataclass(frozen=True)
class DopplerBroadening:
    """
    Change in energy resolution due to energy shift, opening angle and
    spread of beta values, as a function of detector polar angle.

    Doppler broadening is caused by the Doppler shift of a gamma ray emitted
    from a moving frame of reference. The shift depends on the emitted energy
    E, the speed of the frame beta and the polar angle theta of the detector
    relative to the direction of the frame:

        E' = E (1 - beta^2) / (1 - beta cos(theta))

    The intrinsic resolution of the detector is modelled as const/sqrt(E').
    The total broadening adds in quadrature the intrinsic resolution at E',
    the broadening from the opening angle of the detector and the broadening
    from the width of the beta distribution.

    Attributes
    ----------
    energy_MeV : float
        Energy of the emitted gamma ray in MeV
    beta : float
        Velocity of the frame of reference as a fraction of c
    d_theta_deg : float
        Angular coverage (opening angle) of the detector in degrees
    resolution_const : float
        Constant of the const/sqrt(E) resolution term in sqrt(MeV)
    d_beta : float
        Width of the beta distribution
    d_theta_rad : float
        Opening angle in radians, derived from d_theta_deg

    Notes
    -----
    The total omits the uncertainty of the emitted energy, dE/E. It is the
    same at every angle and is available from ``emission_broadening`` to be
    added in quadrature by the caller.

    Angles outside 0-180 deg are evaluated but issue a DomainWarning.

    Examples
    --------
    >>> model = DopplerBroadening(1.0, 0.5, d_theta_deg=0.1, d_beta=0.01)
    >>> round(model.shifted_energy(60.0), 12)
    1.0
    >>> round(model.energy_broadening(60.0), 12)
    1.0
    """

    energy_MeV: float
    beta: float
    d_theta_deg: float = 0.0
    resolution_const: float = 1.0
    d_beta: float = 0.0
    d_theta_rad: float = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        for name in PARAMETER_NAMES:
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float, np.number)):
                raise InvalidParameterError(f"{name} must be a number, got {value!r}")
            if not math.isfinite(value):
                raise InvalidParameterError(f"{name} must be finite, got {value}")
            object.__setattr__(self, name, float(value))

        if self.energy_MeV <= 0:
            raise InvalidParameterError("Gamma-ray energy must be positive")

        if abs(self.beta) >= 1:
            raise InvalidParameterError("|beta| must be less than 1")

        if self.d_theta_deg < 0:
            raise InvalidParameterError("Detector opening angle must be non-negative")

        if self.resolution_const < 0:
            raise InvalidParameterError("Resolution constant must be non-negative")

        if self.d_beta < 0:
            raise InvalidParameterError("Beta distribution width must be non-negative")

        object.__setattr__(self, "d_theta_rad", self.d_theta_deg * DEG_TO_RAD)

        if abs(self.beta) > 0.9:
            logger.debug(f"beta={self.beta:.3f} is close to 1; broadening is very sensitive to it")

    # ------------------------------------------------------------------
    # Construction helpers
    # ------------------------------------------------------------------

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "DopplerBroadening":
        """
        Build a model from a configuration dictionary.

        Parameters
        ----------
        config : dict
            Dictionary with a 'broadening' section

        Returns
        -------
        DopplerBroadening
            Model instance
        """
        from dbroad.core.config import get_broadening_parameters

        return cls(**get_broadening_parameters(config))

    @classmethod
    def from_file(cls, config_path: Union[str, Path]) -> "DopplerBroadening":
        """
        Load a model from a YAML or JSON configuration file.

        Parameters
        ----------
        config_path : str or Path
            Path to configuration file

        Returns
        -------
        DopplerBroadening
            Model instance
        """
        from dbroad.core.config import load_config

        model = cls.from_config(load_config(config_path))
        logger.info(f"Created {model!r} from {config_path}")
        return model

    @classmethod
    def from_kinetic_energy(
        cls,
        energy_MeV: float,
        kinetic_MeV_per_u: float,
        d_theta_deg: float = 0.0,
        resolution_const: float = 1.0,
        d_beta: float = 0.0,
    ) -> "DopplerBroadening":
        """
        Build a model for a beam given by its kinetic energy per nucleon.

        Parameters
        ----------
        energy_MeV : float
            Energy of the emitted gamma ray in MeV
        kinetic_MeV_per_u : float
            Kinetic energy of the beam in MeV/u, converted to beta
        d_theta_deg, resolution_const, d_beta : float
            As for the constructor
        """
        from dbroad.core.units import beta_from_kinetic_energy

        return cls(
            energy_MeV,
            beta_from_kinetic_energy(kinetic_MeV_per_u),
            d_theta_deg=d_theta_deg,
            resolution_const=resolution_const,
            d_beta=d_beta,
        )

    def with_parameters(self, **changes: float) -> "DopplerBroadening":
        """Return a new, validated model with some parameters replaced."""
        unknown = set(changes) - set(PARAMETER_NAMES)
        if unknown:
            raise ValueError(f"Unknown model parameters: {sorted(unknown)}")
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, float]:
        """Model parameters as a plain dictionary (constructor keywords)."""
        return {name: getattr(self, name) for name in PARAMETER_NAMES}

    # ------------------------------------------------------------------
    # Evaluation
    # ------------------------------------------------------------------

    def _evaluate(self, func: Callable[[np.ndarray], np.ndarray], theta_deg: ArrayLike) -> ArrayLike:
        theta = np.asarray(theta_deg, dtype=float)
        _check_domain(theta)
        result = func(theta)
        return float(result) if np.ndim(result) == 0 else result

    def shifted_energy(self, theta_deg: ArrayLike) -> ArrayLike:
        """
        Doppler shifted gamma-ray energy in MeV.

        E' = E (1 - beta^2) / (1 - beta cos(theta))
        """
        return self._evaluate(
            lambda t: formulas.doppler_shift(t, self.energy_MeV, self.beta), theta_deg
        )

    def energy_broadening(self, theta_deg: ArrayLike) -> ArrayLike:
        """
        Intrinsic resolution expected at the shifted energy.

        dE_int/E' = const / sqrt(E')
        """
        return self._evaluate(
            lambda t: formulas.energy_broadening(
                t, self.energy_MeV, self.beta, self.resolution_const
            ),
            theta_deg,
        )

    def solid_angle_broadening(self, theta_deg: ArrayLike) -> ArrayLike:
        """
        Broadening due to the opening angle of the detector.

        beta sin(theta) / (1 - beta cos(theta)) dtheta
        """
        return self._evaluate(
            lambda t: formulas.solid_angle_broadening(t, self.beta, self.d_theta_rad), theta_deg
        )

    def beta_broadening(self, theta_deg: ArrayLike) -> ArrayLike:
        """
        Broadening due to the width of the beta distribution.

        |cos(theta) - beta| / ((1 - beta^2)(1 - beta cos(theta))) dbeta
        """
        return self._evaluate(
            lambda t: formulas.beta_broadening(t, self.beta, self.d_beta), theta_deg
        )

    def total_broadening(self, theta_deg: ArrayLike) -> ArrayLike:
        """
        Energy, opening angle and beta broadening added in quadrature.

        The emitted energy uncertainty is not included, see
        ``emission_broadening``.
        """
        return self._evaluate(
            lambda t: formulas.total_broadening(
                t,
                self.energy_MeV,
                self.beta,
                self.d_theta_rad,
                self.resolution_const,
                self.d_beta,
            ),
            theta_deg,
        )

    def emission_broadening(self, d_energy_MeV: float) -> float:
        """
        Angle independent broadening dE/E from the emitted energy uncertainty.

        Parameters
        ----------
        d_energy_MeV : float
            Uncertainty of the emitted gamma-ray energy in MeV

        Returns
        -------
        float
            dE/E, to be added in quadrature with ``total_broadening`` if needed
        """
        if d_energy_MeV < 0:
            raise InvalidParameterError("Energy uncertainty must be non-negative")
        return formulas.emission_broadening(self.energy_MeV, d_energy_MeV)

    # ------------------------------------------------------------------
    # Named functions
    # ------------------------------------------------------------------

    def _function(self, name: str) -> BroadeningFunction:
        return BroadeningFunction(name=name, title=COMPONENT_TITLES[name], func=getattr(self, name))

    def get_energy_broadening(self) -> BroadeningFunction:
        """Energy broadening as a function of polar angle in degrees."""
        return self._function("energy_broadening")

    def get_solid_angle_broadening(self) -> BroadeningFunction:
        """Opening angle broadening as a function of polar angle in degrees."""
        return self._function("solid_angle_broadening")

    def get_beta_broadening(self) -> BroadeningFunction:
        """Beta distribution broadening as a function of polar angle in degrees."""
        return self._function("beta_broadening")

    def get_total_broadening(self) -> BroadeningFunction:
        """Total broadening as a function of polar angle in degrees."""
        return self._function("total_broadening")

    def components(self) -> Dict[str, BroadeningFunction]:
        """All four broadening functions keyed by name, total last."""
        return {name: self._function(name) for name in COMPONENT_TITLES}
