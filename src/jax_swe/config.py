"""Pydantic v2 configuration for Saint-Venant time integration runs.

Provides validated, typed configuration for the time loop, output cadence,
probes and the reference mesh/physics/flux choices used by the CLI.
Supports JSON I/O and cross-field validation.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, model_validator

# Probe samples are taken this many times per snapshot interval
PROBES_PER_SAVE = 10


class ProbeConfig(BaseModel):
    """A point sampled during the run."""

    reference: int | str = Field(..., description="Identifier used in the probe file name")
    position: float = Field(..., description="Target coordinate [m]")


class MeshConfig(BaseModel):
    """Uniform cell-centred mesh."""

    x_min: float = Field(0.0, description="Left end of the domain [m]")
    x_max: float = Field(1.0, description="Right end of the domain [m]")
    n_cells: int = Field(100, gt=0, description="Number of cells")

    @model_validator(mode="after")
    def check_bounds(self) -> MeshConfig:
        if self.x_max <= self.x_min:
            raise ValueError("x_max must be greater than x_min")
        return self


class CaseConfig(BaseModel):
    """Reference test case and its parameters."""

    name: Literal["lake_at_rest", "dam_break", "exponential_decay"] = Field(
        "lake_at_rest", description="Physics of the run"
    )
    depth: float = Field(1.0, gt=0, description="Still-water depth (lake_at_rest) [m]")
    h_left: float = Field(2.0, gt=0, description="Upstream depth (dam_break) [m]")
    h_right: float = Field(1.0, gt=0, description="Downstream depth (dam_break) [m]")
    x_dam: float | None = Field(None, description="Dam position, defaults to mid-domain [m]")
    rate: float = Field(1.0, ge=0, description="Decay rate (exponential_decay) [1/s]")


class SimulationConfig(BaseModel):
    """Top-level run configuration."""

    time_step: float = Field(..., gt=0, description="Time step [s]")
    initial_time: float = Field(0.0, description="Initial time [s]")
    final_time: float = Field(..., description="Time horizon [s]")
    save_frequency: int = Field(..., ge=1, description="Steps between snapshots")
    save_final_time_only: bool = Field(False, description="Only write the final snapshot")
    is_test_case: bool = Field(
        False, description="Compare against the exact solution at the end of the run"
    )
    results_dir: Path = Field(Path("results"), description="Output directory")
    probes: list[ProbeConfig] = Field(default_factory=list)
    gravity: float = Field(9.81, gt=0, description="Gravitational acceleration [m/s^2]")
    dx: float | None = Field(
        None, gt=0, description="Spacing used to scale error norms, defaults to the mesh spacing"
    )

    scheme: Literal["ExplicitEuler", "RK2"] = Field("RK2", description="Time scheme")
    flux: Literal["Rusanov", "Zero"] = Field("Rusanov", description="Numerical flux")
    case: CaseConfig = Field(default_factory=CaseConfig)
    mesh: MeshConfig = Field(default_factory=MeshConfig)

    @model_validator(mode="after")
    def validate_time(self) -> SimulationConfig:
        if self.final_time < self.initial_time:
            raise ValueError("final_time must not be smaller than initial_time")
        return self

    @model_validator(mode="after")
    def validate_probes(self) -> SimulationConfig:
        if self.probes and self.save_frequency < PROBES_PER_SAVE:
            raise ValueError(
                f"save_frequency must be at least {PROBES_PER_SAVE} when probes are "
                f"configured (probe cadence is save_frequency // {PROBES_PER_SAVE}), "
                f"got {self.save_frequency}"
            )
        references = [p.reference for p in self.probes]
        if len(set(references)) != len(references):
            raise ValueError("probe references must be unique")
        return self

    @property
    def probe_frequency(self) -> int:
        """Steps between probe samples."""
        return self.save_frequency // PROBES_PER_SAVE

    # --- I/O helpers ---

    @classmethod
    def from_file(cls, path: str | Path) -> SimulationConfig:
        """Load configuration from a JSON file."""
        path = Path(path)
        with path.open() as f:
            data = json.load(f)
        return cls(**data)

    def to_json(self, path: str | Path | None = None) -> str:
        """Serialize to JSON string, optionally writing to file."""
        out = self.model_dump_json(indent=2)
        if path is not None:
            Path(path).write_text(out)
        return out
