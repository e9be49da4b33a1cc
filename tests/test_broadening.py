"""
Tests for the Doppler broadening model.
"""

import dataclasses
import warnings
from pathlib import Path

import numpy as np
import pytest

from dbroad.core.errors import DomainWarning, InvalidParameterError
from dbroad.kinematics.broadening import DopplerBroadening, PARAMETER_NAMES
from dbroad.kinematics.functions import BroadeningFunction
from dbroad.kinematics.sampling import sample_broadening


# ---------------------------------------------------------------------------
# Construction and validation
# ---------------------------------------------------------------------------


def test_model_creation_defaults():
    """Test that optional parameters take their documented defaults."""
    model = DopplerBroadening(2.0, 0.1)
    assert model.energy_MeV == 2.0
    assert model.beta == 0.1
    assert model.d_theta_deg == 0.0
    assert model.resolution_const == 1.0
    assert model.d_beta == 0.0
    assert model.d_theta_rad == 0.0


def test_opening_angle_stored_in_radians(reference_model):
    """Test that the opening angle is converted to radians."""
    assert reference_model.d_theta_rad == pytest.approx(0.1 * np.pi / 180.0, rel=1e-12)


def test_parameters_coerced_to_float():
    """Test that integer and numpy inputs become plain floats."""
    model = DopplerBroadening(1, np.float32(0.25), d_theta_deg=2)
    assert type(model.energy_MeV) is float
    assert type(model.beta) is float
    assert type(model.d_theta_deg) is float


@pytest.mark.parametrize(
    "kwargs, match",
    [
        ({"energy_MeV": 0.0, "beta": 0.5}, "energy must be positive"),
        ({"energy_MeV": -1.0, "beta": 0.5}, "energy must be positive"),
        ({"energy_MeV": 1.0, "beta": 1.0}, "beta"),
        ({"energy_MeV": 1.0, "beta": -1.0}, "beta"),
        ({"energy_MeV": 1.0, "beta": 0.5, "d_theta_deg": -0.1}, "opening angle"),
        ({"energy_MeV": 1.0, "beta": 0.5, "resolution_const": -1.0}, "Resolution constant"),
        ({"energy_MeV": 1.0, "beta": 0.5, "d_beta": -0.01}, "Beta distribution width"),
        ({"energy_MeV": float("nan"), "beta": 0.5}, "finite"),
        ({"energy_MeV": 1.0, "beta": float("inf")}, "finite"),
        ({"energy_MeV": "1.0", "beta": 0.5}, "must be a number"),
        ({"energy_MeV": 1.0, "beta": True}, "must be a number"),
    ],
)
def test_invalid_parameters(kwargs, match):
    """Test that unphysical parameters are rejected at construction."""
    with pytest.raises(InvalidParameterError, match=match):
        DopplerBroadening(**kwargs)


def test_invalid_parameter_is_value_error():
    """Test that InvalidParameterError can be caught as ValueError."""
    with pytest.raises(ValueError):
        DopplerBroadening(1.0, 2.0)


def test_negative_beta_allowed():
    """Test that a frame moving away (beta < 0) is valid."""
    model = DopplerBroadening(1.0, -0.3)
    assert model.shifted_energy(0.0) == pytest.approx((1 - 0.09) / 1.3, rel=1e-12)


def test_model_is_immutable(reference_model):
    """Test that parameters cannot be reassigned."""
    with pytest.raises(dataclasses.FrozenInstanceError):
        reference_model.beta = 0.1


def test_model_equality_and_hash():
    """Test value semantics of the model."""
    a = DopplerBroadening(1.0, 0.5, d_theta_deg=0.1)
    b = DopplerBroadening(1.0, 0.5, d_theta_deg=0.1)
    assert a == b
    assert hash(a) == hash(b)
    assert a != DopplerBroadening(1.0, 0.4, d_theta_deg=0.1)


def test_with_parameters(reference_model):
    """Test replacing parameters returns a new validated model."""
    faster = reference_model.with_parameters(beta=0.6, d_theta_deg=1.0)
    assert faster.beta == 0.6
    assert faster.d_theta_rad == pytest.approx(np.deg2rad(1.0))
    assert faster.energy_MeV == reference_model.energy_MeV
    assert reference_model.beta == 0.5

    with pytest.raises(InvalidParameterError):
        reference_model.with_parameters(beta=1.5)


def test_with_parameters_unknown(reference_model):
    """Test that unknown parameter names are rejected."""
    with pytest.raises(ValueError, match="Unknown model parameters"):
        reference_model.with_parameters(d_theta_rad=0.1)


def test_to_dict_round_trip(reference_model):
    """Test that to_dict gives constructor keywords."""
    params = reference_model.to_dict()
    assert list(params) == list(PARAMETER_NAMES)
    assert DopplerBroadening(**params) == reference_model


def test_from_config(sample_config_dict):
    """Test building a model from a configuration dictionary."""
    model = DopplerBroadening.from_config(sample_config_dict)
    assert model.energy_MeV == 1.0
    assert model.beta == 0.5
    assert model.d_beta == 0.01


def test_from_config_defaults():
    """Test that optional config fields fall back to defaults."""
    model = DopplerBroadening.from_config({"broadening": {"energy_MeV": 0.5, "beta": 0.2}})
    assert model.d_theta_deg == 0.0
    assert model.resolution_const == 1.0
    assert model.d_beta == 0.0


def test_from_file(temp_config_file):
    """Test loading a model from a YAML file."""
    model = DopplerBroadening.from_file(temp_config_file)
    assert model.d_theta_deg == 0.1


def test_from_kinetic_energy():
    """Test building a model from beam kinetic energy per nucleon."""
    from dbroad.core.units import beta_from_kinetic_energy

    model = DopplerBroadening.from_kinetic_energy(1.0, 100.0, d_theta_deg=2.0)
    assert model.beta == pytest.approx(beta_from_kinetic_energy(100.0))
    assert model.d_theta_deg == 2.0


# ---------------------------------------------------------------------------
# Hand-computed values
# ---------------------------------------------------------------------------


def test_shifted_energy_forward(reference_model):
    """E=1, beta=0.5 at 0 deg: 0.75 / 0.5 = 1.5."""
    assert reference_model.shifted_energy(0.0) == pytest.approx(1.5, rel=1e-12)


def test_shifted_energy_backward(reference_model):
    """E=1, beta=0.5 at 180 deg: 0.75 / 1.5 = 0.5."""
    assert reference_model.shifted_energy(180.0) == pytest.approx(0.5, rel=1e-12)


def test_reference_scenario_at_60_degrees(reference_model):
    """E' = 0.75 / 0.75 = 1 at 60 deg, so the energy term is const / 1."""
    assert reference_model.shifted_energy(60.0) == pytest.approx(1.0, rel=1e-12)
    assert reference_model.energy_broadening(60.0) == pytest.approx(1.0, rel=1e-12)

    # cos(60) == beta, so the beta term vanishes
    assert reference_model.beta_broadening(60.0) == pytest.approx(0.0, abs=1e-15)

    expected_solid = reference_model.d_theta_rad * 0.5 * np.sin(np.pi / 3) / 0.75
    assert reference_model.solid_angle_broadening(60.0) == pytest.approx(expected_solid, rel=1e-12)


def test_beta_broadening_hand_value(reference_model):
    """At 90 deg: 0.01 * |0 - 0.5| / (0.75 * 1) = 1/150."""
    assert reference_model.beta_broadening(90.0) == pytest.approx(0.01 * 0.5 / 0.75, rel=1e-9)


def test_solid_angle_zero_at_ends(reference_model):
    """Test the opening angle term vanishes along the beam axis."""
    assert reference_model.solid_angle_broadening(0.0) == 0.0
    assert reference_model.solid_angle_broadening(180.0) == pytest.approx(0.0, abs=1e-15)


# ---------------------------------------------------------------------------
# Properties over the domain
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("beta", [0.0, 0.05, 0.3, 0.5, 0.9, 0.99])
def test_components_non_negative(beta, polar_angles):
    """Test all broadening terms are non-negative for beta in [0, 1)."""
    model = DopplerBroadening(1.0, beta, d_theta_deg=3.0, resolution_const=0.05, d_beta=0.01)
    for name, function in model.components().items():
        values = function(polar_angles)
        assert np.all(values >= 0), name
        assert np.all(np.isfinite(values)), name


@pytest.mark.parametrize("beta", [0.0, 0.2, 0.5, 0.8])
def test_total_is_quadrature_sum(beta, polar_angles):
    """Test total^2 equals the sum of the squared components."""
    model = DopplerBroadening(0.662, beta, d_theta_deg=2.0, resolution_const=0.03, d_beta=0.02)
    total = model.total_broadening(polar_angles)
    expected = (
        model.energy_broadening(polar_angles) ** 2
        + model.solid_angle_broadening(polar_angles) ** 2
        + model.beta_broadening(polar_angles) ** 2
    )
    np.testing.assert_allclose(total**2, expected, rtol=1e-9)


def test_rest_frame(rest_frame_model, polar_angles):
    """With beta=0 there is no shift and no opening angle broadening."""
    np.testing.assert_allclose(
        rest_frame_model.shifted_energy(polar_angles), rest_frame_model.energy_MeV, rtol=1e-12
    )
    np.testing.assert_array_equal(rest_frame_model.solid_angle_broadening(polar_angles), 0.0)
    np.testing.assert_allclose(
        rest_frame_model.beta_broadening(polar_angles),
        rest_frame_model.d_beta * np.abs(np.cos(np.deg2rad(polar_angles))),
        rtol=1e-12,
        atol=1e-18,
    )


def test_energy_broadening_increases_with_resolution_const(reference_model, polar_angles):
    """Test a larger resolution constant widens the energy term everywhere."""
    wider = reference_model.with_parameters(resolution_const=2.0)
    assert np.all(
        wider.energy_broadening(polar_angles) > reference_model.energy_broadening(polar_angles)
    )


def test_beta_broadening_increases_with_spread(reference_model, polar_angles):
    """Test a larger beta spread widens the beta term wherever cos(theta) != beta."""
    wider = reference_model.with_parameters(d_beta=0.05)
    mask = np.abs(np.cos(np.deg2rad(polar_angles)) - reference_model.beta) > 1e-9
    assert np.all(
        wider.beta_broadening(polar_angles)[mask]
        > reference_model.beta_broadening(polar_angles)[mask]
    )


def test_forward_angles_less_broadened_by_energy_term(reference_model):
    """Blue shifted energies at forward angles give a smaller const/sqrt(E')."""
    assert reference_model.energy_broadening(0.0) < reference_model.energy_broadening(180.0)


# ---------------------------------------------------------------------------
# Emission energy term
# ---------------------------------------------------------------------------


def test_emission_broadening(reference_model):
    """Test the emitted energy term is dE/E."""
    assert reference_model.emission_broadening(0.002) == pytest.approx(0.002)

    model = DopplerBroadening(4.0, 0.3)
    assert model.emission_broadening(0.01) == pytest.approx(0.0025)


def test_emission_broadening_not_in_total():
    """Test the total is unchanged whatever the emitted energy uncertainty."""
    model = DopplerBroadening(1.0, 0.3, d_theta_deg=1.0, resolution_const=0.0, d_beta=0.0)
    model.emission_broadening(0.5)
    expected = model.solid_angle_broadening(45.0)
    assert model.total_broadening(45.0) == pytest.approx(expected, rel=1e-12)


def test_emission_broadening_negative(reference_model):
    """Test that a negative energy uncertainty is rejected."""
    with pytest.raises(InvalidParameterError):
        reference_model.emission_broadening(-0.1)


# ---------------------------------------------------------------------------
# Evaluation interface
# ---------------------------------------------------------------------------


def test_scalar_input_returns_float(reference_model):
    """Test scalar angles give plain floats."""
    for name in ["shifted_energy", "energy_broadening", "total_broadening"]:
        assert isinstance(getattr(reference_model, name)(30.0), float)


def test_array_input_returns_array(reference_model):
    """Test array angles give arrays of the same shape."""
    angles = np.array([[0.0, 45.0], [90.0, 180.0]])
    result = reference_model.total_broadening(angles)
    assert isinstance(result, np.ndarray)
    assert result.shape == angles.shape


def test_list_input(reference_model):
    """Test plain lists are accepted."""
    result = reference_model.beta_broadening([0.0, 90.0])
    assert result.shape == (2,)


def test_domain_warning_outside_range(reference_model):
    """Test that angles outside 0-180 deg warn but still evaluate."""
    with pytest.warns(DomainWarning, match="outside"):
        value = reference_model.total_broadening(-30.0)
    assert np.isfinite(value)

    with pytest.warns(DomainWarning):
        reference_model.energy_broadening(np.array([90.0, 270.0]))


def test_domain_warning_value_matches_formula(reference_model):
    """Test out-of-range evaluation follows the formulas unchanged."""
    with pytest.warns(DomainWarning):
        value = reference_model.shifted_energy(360.0)
    assert value == pytest.approx(reference_model.shifted_energy(0.0), rel=1e-12)


def test_domain_warning_nan_angle(reference_model):
    """Test that NaN angles warn like out-of-range angles."""
    with pytest.warns(DomainWarning, match="1 angle"):
        result = reference_model.total_broadening(np.array([45.0, np.nan]))
    assert np.isnan(result[1])


@pytest.mark.parametrize(
    "evaluate",
    [
        lambda model: model.total_broadening(200.0),
        lambda model: model.get_total_broadening()(200.0),
        lambda model: sample_broadening(model, [90.0, 200.0]),
    ],
    ids=["method", "named_function", "table"],
)
def test_domain_warning_points_at_caller(reference_model, evaluate):
    """Test the warning is attributed to the calling module."""
    with pytest.warns(DomainWarning) as record:
        evaluate(reference_model)
    assert Path(record[0].filename).name == Path(__file__).name


def test_no_warning_inside_range(reference_model, polar_angles):

    """Test that in-range evaluation is silent."""
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        reference_model.total_broadening(polar_angles)


# ---------------------------------------------------------------------------
# Named functions
# ---------------------------------------------------------------------------


def test_named_functions(reference_model):
    """Test the getters return titled functions over 0-180 deg."""
    expected = {
        "get_energy_broadening": "Energy Broadening",
        "get_solid_angle_broadening": "Solid Angle Broadening",
        "get_beta_broadening": "Beta Broadening",
        "get_total_broadening": "Total Broadening",
    }
    for getter, title in expected.items():
        function = getattr(reference_model, getter)()
        assert isinstance(function, BroadeningFunction)
        assert function.title == title
        assert function.domain == (0.0, 180.0)


def test_named_function_matches_method(reference_model, polar_angles):
    """Test calling a named function is the same as calling the method."""
    function = reference_model.get_total_broadening()
    np.testing.assert_array_equal(
        function(polar_angles), reference_model.total_broadening(polar_angles)
    )


def test_components_order(reference_model):
    """Test components lists the three terms followed by the total."""
    assert list(reference_model.components()) == [
        "energy_broadening",
        "solid_angle_broadening",
        "beta_broadening",
        "total_broadening",
    ]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
