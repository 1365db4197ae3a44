#!/usr/bin/env python3
"""
Gray-Scott Simulation Runner

Runs one reaction-diffusion simulation and prints the final activator field
as a bordered text block. Options override values from an optional JSON or
TOML parameter file.
"""

import argparse
import sys

from rd_sim import GrayScottSimulator, config_from_dict, render, utils
from rd_sim.gray_scott import SCHEME_NAMES

# Option name -> config key
OVERRIDES = {
    "width": "width",
    "height": "height",
    "iterations": "iterations",
    "seed_patch": "seed_patch_size",
    "scheme": "scheme",
    "F": "F",
    "k": "k",
    "dt": "dt",
    "Da": "Da",
    "Ds": "Ds",
}


def build_parser():
    parser = argparse.ArgumentParser(
        description="Run a Gray-Scott reaction-diffusion simulation",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--config", default=None, help="JSON or TOML parameter file")
    parser.add_argument("--width", type=int, default=None, help="grid width (default: 100)")
    parser.add_argument("--height", type=int, default=None, help="grid height (default: 100)")
    parser.add_argument(
        "--iterations", type=int, default=None, help="number of steps (default: 100000)"
    )
    parser.add_argument(
        "--seed-patch",
        dest="seed_patch",
        type=int,
        default=None,
        help="side of the activator seed square at the origin (default: 10)",
    )
    parser.add_argument(
        "--scheme",
        choices=sorted(SCHEME_NAMES),
        default=None,
        help="update scheme (default: jacobi)",
    )
    parser.add_argument("--F", type=float, default=None, help="feed rate")
    parser.add_argument("--k", type=float, default=None, help="kill rate")
    parser.add_argument("--dt", type=float, default=None, help="time step")
    parser.add_argument("--Da", type=float, default=None, help="activator diffusion rate")
    parser.add_argument("--Ds", type=float, default=None, help="substrate diffusion rate")
    parser.add_argument("--out", default=None, help="write the snapshot to this file")
    parser.add_argument("--verbose", action="store_true", help="print progress to stderr")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)

    config = utils.load_params(args.config) if args.config else {}
    for option, key in OVERRIDES.items():
        value = getattr(args, option)
        if value is not None:
            config[key] = value
    if args.verbose:
        config["verbose"] = True

    try:
        sim_config = config_from_dict(config)
    except (TypeError, ValueError) as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 2

    simulator = GrayScottSimulator(sim_config)
    field = simulator.run()
    text = render(sim_config.width, sim_config.height, field)

    if args.out:
        utils.write_snapshot(args.out, text)
        if sim_config.verbose:
            print(
                f"Snapshot saved to {args.out} ({simulator.elapsed:.2f}s)",
                file=sys.stderr,
            )
    else:
        sys.stdout.write(text)

    return 0


if __name__ == "__main__":
    sys.exit(main())
