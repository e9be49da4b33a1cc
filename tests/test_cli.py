"""
Tests for the command-line interface.
"""

import io
import json
import logging
import sys
import tempfile
from pathlib import Path

import numpy as np
import pandas as pd
import pytest
import yaml

from dbroad import __version__
from dbroad.cli.main import main


@pytest.fixture(autouse=True)
def reset_logging():
    """Leave the root logger as it was."""
    yield
    logging.captureWarnings(False)
    for handler in logging.root.handlers[:]:
        logging.root.removeHandler(handler)


def run_cli(monkeypatch, *args):
    """Run the CLI with the given arguments."""
    monkeypatch.setattr(sys, "argv", ["dbroad", *args])
    main()


def test_version(monkeypatch, capsys):
    """Test --version."""
    with pytest.raises(SystemExit) as exc:
        run_cli(monkeypatch, "--version")
    assert exc.value.code == 0
    assert __version__ in capsys.readouterr().out


def test_no_command(monkeypatch, capsys):
    """Test that no command prints help and fails."""
    with pytest.raises(SystemExit) as exc:
        run_cli(monkeypatch)
    assert exc.value.code == 1
    assert "evaluate" in capsys.readouterr().out


def test_evaluate_stdout(monkeypatch, capsys):
    """Test evaluate prints a CSV table."""
    run_cli(
        monkeypatch,
        "evaluate",
        "--energy", "1.0",
        "--beta", "0.5",
        "--d-theta", "0.1",
        "--d-beta", "0.01",
        "--angles", "0", "60", "180",
    )
    table = pd.read_csv(io.StringIO(capsys.readouterr().out))

    assert list(table["theta_deg"]) == [0.0, 60.0, 180.0]
    np.testing.assert_allclose(table["shifted_energy_MeV"], [1.5, 1.0, 0.5], rtol=1e-5)
    assert "total_broadening" in table.columns


def test_evaluate_grid(monkeypatch, capsys):
    """Test the grid flags."""
    run_cli(
        monkeypatch,
        "evaluate",
        "--energy", "1.0",
        "--beta", "0.2",
        "--theta-min", "10",
        "--theta-max", "50",
        "--n-points", "5",
    )
    table = pd.read_csv(io.StringIO(capsys.readouterr().out))
    np.testing.assert_allclose(table["theta_deg"], [10.0, 20.0, 30.0, 40.0, 50.0])


def test_evaluate_emission_column(monkeypatch, capsys):
    """Test --d-energy adds the emission term as its own column."""
    run_cli(
        monkeypatch,
        "evaluate",
        "--energy", "2.0",
        "--beta", "0.1",
        "--d-energy", "0.002",
        "--angles", "90",
    )
    table = pd.read_csv(io.StringIO(capsys.readouterr().out))
    assert table["emission_broadening"].iloc[0] == pytest.approx(1e-3)


def test_evaluate_json_output(monkeypatch, capsys):
    """Test --output with a .json suffix."""
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "out.json"
        run_cli(
            monkeypatch,
            "evaluate",
            "--energy", "1.0",
            "--beta", "0.5",
            "--n-points", "7",
            "--output", str(path),
        )
        with open(path) as f:
            output = json.load(f)

    assert "saved to" in capsys.readouterr().out
    assert len(output["data"]["theta_deg"]) == 7
    assert output["metadata"]["parameters"]["beta"] == 0.5


def test_evaluate_from_config(monkeypatch, capsys, temp_config_file, sample_config_dict):
    """Test model and grid read from --config."""
    run_cli(monkeypatch, "evaluate", "--config", str(temp_config_file))
    table = pd.read_csv(io.StringIO(capsys.readouterr().out))
    assert len(table) == sample_config_dict["sampling"]["n_points"]


def test_evaluate_flag_overrides_config(monkeypatch, capsys):
    """Test that flags take precedence over the config file."""
    config = {"broadening": {"energy_MeV": 1.0, "beta": 0.3}}
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "config.yaml"
        with open(path, "w") as f:
            yaml.dump(config, f)

        run_cli(
            monkeypatch, "evaluate", "--config", str(path), "--beta", "0.0", "--angles", "0"
        )

    table = pd.read_csv(io.StringIO(capsys.readouterr().out))
    assert table["shifted_energy_MeV"].iloc[0] == pytest.approx(1.0)


def test_evaluate_missing_parameters(monkeypatch):
    """Test that a missing beta is an error."""
    with pytest.raises(SystemExit) as exc:
        run_cli(monkeypatch, "evaluate", "--energy", "1.0")
    assert exc.value.code == 1


def test_evaluate_invalid_parameter(monkeypatch):
    """Test that an unphysical beta is an error."""
    with pytest.raises(SystemExit) as exc:
        run_cli(monkeypatch, "evaluate", "--energy", "1.0", "--beta", "1.5")
    assert exc.value.code == 1


def test_scan(monkeypatch, capsys):
    """Test a beta scan without --beta."""
    run_cli(
        monkeypatch,
        "scan",
        "beta", "0.1", "0.2", "0.3",
        "--energy", "1.0",
        "--angles", "0", "90",
        "--workers", "2",
    )
    table = pd.read_csv(io.StringIO(capsys.readouterr().out))

    assert table.columns[0] == "beta"
    assert len(table) == 6
    assert sorted(table["beta"].unique()) == [0.1, 0.2, 0.3]


def test_scan_metadata_records_values(monkeypatch):
    """Test the scan file lists every value of the scanned parameter."""
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "scan.json"
        run_cli(
            monkeypatch,
            "scan",
            "d_beta", "0.0", "0.01", "0.02",
            "--energy", "1.0",
            "--beta", "0.3",
            "--angles", "90",
            "--output", str(path),
        )
        with open(path) as f:
            output = json.load(f)

    parameters = output["metadata"]["parameters"]
    assert parameters["d_beta"] == [0.0, 0.01, 0.02]
    assert parameters["beta"] == 0.3
    assert output["data"]["d_beta"] == [0.0, 0.01, 0.02]


def test_scan_unknown_parameter(monkeypatch):

    """Test argparse rejects unknown scan parameters."""
    with pytest.raises(SystemExit) as exc:
        run_cli(monkeypatch, "scan", "gamma", "1.0", "--energy", "1.0", "--beta", "0.1")
    assert exc.value.code == 2


def test_plot_html(monkeypatch, capsys):
    """Test plot writes an HTML file."""
    pytest.importorskip("plotly")

    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "fig.html"
        run_cli(
            monkeypatch,
            "plot",
            "--energy", "1.0",
            "--beta", "0.5",
            "--n-points", "20",
            "--output", str(path),
        )
        assert path.exists()
        assert "Total Broadening" in path.read_text()

    assert "Figure saved to" in capsys.readouterr().out


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
