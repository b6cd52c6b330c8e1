"""
Command-line entry point.

Usage:
    jax-swe config.json [--verbose] [--log-file run.log]
"""

import argparse
import json
import logging
from typing import Optional, Sequence

import jax
from pydantic import ValidationError

from .config import SimulationConfig
from .exceptions import SimulationError
from .integrate import Simulation
from .logging_config import setup_logging
from .solvers import (
    UniformMesh, RusanovFlux, ZeroFlux, LakeAtRest, DamBreak, ExponentialDecay
)

logger = logging.getLogger(__name__)


def build_simulation(config: SimulationConfig) -> Simulation:
    """Build the mesh, physics and flux named in `config` and bind them."""
    mesh = UniformMesh(config.mesh.x_min, config.mesh.x_max, config.mesh.n_cells)

    case = config.case
    if case.name == "lake_at_rest":
        physics = LakeAtRest(mesh, depth=case.depth)
    elif case.name == "dam_break":
        physics = DamBreak(mesh, h_left=case.h_left, h_right=case.h_right, x_dam=case.x_dam)
    else:
        physics = ExponentialDecay(mesh, rate=case.rate, initial_time=config.initial_time)

    if config.flux == "Rusanov":
        flux = RusanovFlux(gravity=config.gravity)
    else:
        flux = ZeroFlux()

    return Simulation(config, mesh, physics, flux)


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        "jax-swe", description="Integrate the 1D Saint-Venant equations in time."
    )
    parser.add_argument("config", type=str, help="JSON configuration file")
    parser.add_argument("--verbose", action="store_true", help="Log every snapshot")
    parser.add_argument("--log-file", type=str, default=None, help="Also log to this file")
    args = parser.parse_args(argv)

    setup_logging(logging.DEBUG if args.verbose else logging.INFO, args.log_file)
    jax.config.update("jax_enable_x64", True)

    try:
        config = SimulationConfig.from_file(args.config)
        config.results_dir.mkdir(parents=True, exist_ok=True)
        result = build_simulation(config).run()
    except (SimulationError, ValidationError, json.JSONDecodeError, OSError) as exc:
        logger.error("Run aborted: %s", exc)
        return 1

    logger.info("Finished at t = %g after %d steps", result.final_time, result.n_steps)
    return 0
