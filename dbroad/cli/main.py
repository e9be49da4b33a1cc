"""
Main CLI entry point for dbroad.
"""

import argparse
import sys
from pathlib import Path

from dbroad.core.logging_config import setup_logging, get_logger

logger = get_logger("cli.main")

# CLI flag destination -> model parameter
MODEL_ARGUMENTS = {
    "energy": "energy_MeV",
    "beta": "beta",
    "d_theta": "d_theta_deg",
    "resolution_const": "resolution_const",
    "d_beta": "d_beta",
}


def _load_cli_config(args) -> dict:
    """Load the optional configuration file named by --config."""
    from dbroad.core.config import load_config

    if getattr(args, "config", None) is None:
        return {}

    logger.info(f"Loading configuration from {args.config}")
    return load_config(args.config)


def build_model(args, config: dict):
    """
    Build a model from the config file, overridden by command-line flags.

    Raises
    ------
    ValueError
        If energy or beta are given neither in the config nor as flags
    """
    from dbroad.core.config import BROADENING_FIELDS
    from dbroad.kinematics.broadening import DopplerBroadening

    params = {}
    if "broadening" in config:
        params.update(config["broadening"])

    for flag, name in MODEL_ARGUMENTS.items():
        value = getattr(args, flag, None)
        if value is not None:
            params[name] = value

    missing = [
        name for name, default in BROADENING_FIELDS.items() if default is None and name not in params
    ]
    if missing:
        raise ValueError(
            f"Missing model parameters: {missing}. "
            "Give them with --energy/--beta or in the 'broadening' section of --config"
        )

    return DopplerBroadening.from_config({"broadening": params})


def build_angles(args, config: dict):
    """Angles from --angles, else the sampling grid from flags and config."""
    import numpy as np
    from dbroad.core.config import get_sampling_parameters
    from dbroad.kinematics.sampling import angle_grid

    if getattr(args, "angles", None):
        return np.asarray(args.angles, dtype=float)

    sampling = get_sampling_parameters(config)
    for flag, name in [
        ("theta_min", "theta_min_deg"),
        ("theta_max", "theta_max_deg"),
        ("n_points", "n_points"),
    ]:
        value = getattr(args, flag, None)
        if value is not None:
            sampling[name] = value

    return angle_grid(sampling["theta_min_deg"], sampling["theta_max_deg"], sampling["n_points"])


def _write_table(table, output, metadata) -> None:
    """Write a table to --output (CSV or JSON), or as CSV to stdout."""
    from dbroad.io.exporters import create_exporter

    if output:
        output_path = Path(output)
        fmt = "json" if output_path.suffix.lower() == ".json" else "csv"
        create_exporter(fmt).export(table, output_path, metadata=metadata)
        print(f"Broadening table saved to {output_path}")
    else:
        print(table.to_csv(index=False, float_format="%.6g"), end="")


def evaluate_cmd(args):
    """Evaluate the broadening terms on an angle grid."""
    from dbroad.kinematics.sampling import sample_broadening

    config = _load_cli_config(args)
    model = build_model(args, config)
    angles = build_angles(args, config)

    logger.info(f"Evaluating {model!r} at {len(angles)} angles")
    table = sample_broadening(model, angles)

    if args.d_energy is not None:
        # Angle independent, reported next to the total rather than folded into it
        emission = model.emission_broadening(args.d_energy)
        logger.info(f"Emission broadening dE/E = {emission:.6g} (not included in total)")
        table["emission_broadening"] = emission

    _write_table(table, args.output, model.to_dict())
    logger.info("Evaluation complete")


def plot_cmd(args):
    """Plot the broadening curves to an HTML or image file."""
    from dbroad.visualization.plots import plot_broadening, save_figure

    config = _load_cli_config(args)
    model = build_model(args, config)

    n_points = args.n_points
    if n_points is None:
        from dbroad.core.config import get_sampling_parameters

        n_points = get_sampling_parameters(config)["n_points"]

    fig = plot_broadening(model, n_points=n_points, title=args.title)
    save_figure(fig, args.output)
    print(f"Figure saved to {args.output}")


def scan_cmd(args):
    """Tabulate the broadening while stepping one model parameter."""
    from dbroad.kinematics.sampling import scan_parameter

    config = _load_cli_config(args)
    # The scanned parameter does not have to be given otherwise
    setattr(args, _flag_for(args.parameter), args.values[0])
    model = build_model(args, config)
    angles = build_angles(args, config)

    table = scan_parameter(
        model, args.parameter, args.values, angles=angles, n_workers=args.workers
    )
    metadata = model.to_dict()
    metadata[args.parameter] = list(args.values)
    _write_table(table, args.output, metadata)

    logger.info("Scan complete")


def _flag_for(parameter: str) -> str:
    for flag, name in MODEL_ARGUMENTS.items():
        if name == parameter:
            return flag
    raise ValueError(
        f"Unknown parameter: {parameter}. Must be one of: {list(MODEL_ARGUMENTS.values())}"
    )


def _add_model_arguments(parser: argparse.ArgumentParser) -> None:
    """Model parameter flags shared by all commands."""
    parser.add_argument(
        "--config", type=str, default=None, help="Path to configuration file (YAML or JSON)"
    )
    parser.add_argument("--energy", type=float, default=None, help="Emitted gamma energy in MeV")
    parser.add_argument(
        "--beta", type=float, default=None, help="Speed of the frame as a fraction of c"
    )
    parser.add_argument(
        "--d-theta",
        type=float,
        default=None,
        help="Angular coverage of the detector in degrees (default: 0)",
    )
    parser.add_argument(
        "--resolution-const",
        type=float,
        default=None,
        help="Constant of the const/sqrt(E) resolution in sqrt(MeV) (default: 1)",
    )
    parser.add_argument(
        "--d-beta", type=float, default=None, help="Width of the beta distribution (default: 0)"
    )


def _add_grid_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--angles", type=float, nargs="+", default=None, help="Explicit angles in degrees"
    )
    parser.add_argument("--theta-min", type=float, default=None, help="First angle (default: 0)")
    parser.add_argument("--theta-max", type=float, default=None, help="Last angle (default: 180)")
    parser.add_argument(
        "--n-points", type=int, default=None, help="Number of grid points (default: 100)"
    )


def main():
    """Main CLI entry point."""
    from dbroad import __version__

    parser = argparse.ArgumentParser(
        description="dbroad: Doppler broadening of gamma-ray energy resolution",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="INFO",
        help="Set logging level (default: INFO)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Evaluation command
    evaluate_parser = subparsers.add_parser(
        "evaluate", help="Tabulate broadening terms versus detector angle"
    )
    _add_model_arguments(evaluate_parser)
    _add_grid_arguments(evaluate_parser)
    evaluate_parser.add_argument(
        "--d-energy",
        type=float,
        default=None,
        help="Emitted energy uncertainty in MeV, reported as a separate column",
    )
    evaluate_parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Output file path, .csv or .json (default: print CSV to stdout)",
    )
    evaluate_parser.set_defaults(func=evaluate_cmd)

    # Plot command
    plot_parser = subparsers.add_parser("plot", help="Plot broadening curves to a file")
    _add_model_arguments(plot_parser)
    plot_parser.add_argument(
        "--n-points", type=int, default=None, help="Samples per curve (default: 100)"
    )
    plot_parser.add_argument("--title", type=str, default=None, help="Figure title")
    plot_parser.add_argument(
        "--output",
        type=str,
        default="broadening.html",
        help="Output file, .html or an image format (default: broadening.html)",
    )
    plot_parser.set_defaults(func=plot_cmd)

    # Parameter scan command
    scan_parser = subparsers.add_parser(
        "scan", help="Tabulate broadening while stepping one model parameter"
    )
    scan_parser.add_argument(
        "parameter", type=str, choices=list(MODEL_ARGUMENTS.values()), help="Parameter to vary"
    )
    scan_parser.add_argument("values", type=float, nargs="+", help="Parameter values")
    _add_model_arguments(scan_parser)
    _add_grid_arguments(scan_parser)
    scan_parser.add_argument(
        "--workers", type=int, default=None, help="Worker threads (default: CPU count)"
    )
    scan_parser.add_argument(
        "--output", type=str, default=None, help="Output file path, .csv or .json"
    )
    scan_parser.set_defaults(func=scan_cmd)

    args = parser.parse_args()

    # Setup logging
    setup_logging(level=args.log_level)

    # Execute command
    if args.command is None:
        parser.print_help()
        sys.exit(1)

    try:
        args.func(args)
    except Exception as e:
        logger.error(f"Error executing command: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
