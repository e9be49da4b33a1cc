"""
Example usage of the Doppler broadening model.

This demonstrates building a model, evaluating the broadening terms,
scanning the frame velocity and exporting the results.
"""

from pathlib import Path

import numpy as np

from dbroad.core.logging_config import setup_logging
from dbroad.io import export_to_csv
from dbroad.kinematics import (
    DopplerBroadening,
    angle_grid,
    peak_broadening,
    sample_broadening,
    scan_parameter,
)

# Setup logging
setup_logging()


def example_single_model():
    """Example: Evaluating one model."""
    print("\n=== Single Model Example ===")

    # 1.332 MeV line from a beam at 100 MeV/u, 5 deg crystals
    model = DopplerBroadening.from_kinetic_energy(
        energy_MeV=1.332,
        kinetic_MeV_per_u=100.0,
        d_theta_deg=5.0,
        resolution_const=0.03,
        d_beta=0.01,
    )
    print(f"Model: {model}")

    for theta in [0.0, 45.0, 90.0, 135.0, 180.0]:
        print(
            f"theta = {theta:5.1f} deg: E' = {model.shifted_energy(theta):.4f} MeV, "
            f"dE/E = {model.total_broadening(theta):.4f}"
        )

    theta, value = peak_broadening(model, "solid_angle_broadening")
    print(f"Opening angle term peaks at {theta:.1f} deg ({value:.4f})")


def example_components():
    """Example: Using the named broadening functions."""
    print("\n=== Components Example ===")

    model = DopplerBroadening(1.0, 0.5, d_theta_deg=0.1, d_beta=0.01)
    for function in model.components().values():
        theta, values = function.sample()
        print(f"{function.title:>24}: max {np.max(values):.4f} at {theta[np.argmax(values)]:.1f} deg")


def example_scan(output_dir: Path):
    """Example: Scanning beta and exporting."""
    print("\n=== Scan Example ===")

    model = DopplerBroadening(1.0, 0.1, d_theta_deg=2.0, resolution_const=0.03)
    table = scan_parameter(model, "beta", [0.1, 0.2, 0.3, 0.4], angles=angle_grid(n_points=37))
    print(table.groupby("beta")["total_broadening"].max())

    output_dir.mkdir(exist_ok=True)
    export_to_csv(table, output_dir / "beta_scan.csv", metadata=model.to_dict())
    export_to_csv(sample_broadening(model), output_dir / "broadening.csv")
    print(f"Tables written to {output_dir}")


def example_plot(output_dir: Path):
    """Example: Plotting the curves."""
    print("\n=== Plot Example ===")

    from dbroad.visualization import HAS_PLOTLY

    if not HAS_PLOTLY:
        print("plotly not installed, skipping")
        return

    from dbroad.visualization import plot_broadening, save_figure

    fig = plot_broadening(DopplerBroadening(1.0, 0.5, d_theta_deg=0.1, d_beta=0.01))
    save_figure(fig, str(output_dir / "broadening.html"))
    print(f"Figure written to {output_dir / 'broadening.html'}")


if __name__ == "__main__":
    output = Path("dbroad_output")
    example_single_model()
    example_components()
    example_scan(output)
    example_plot(output)
