"""Data utilities for JAX-SWE package."""

# Snapshot and probe I/O
from .readwrite import (
    SNAPSHOT_HEADER,
    first_invalid_cell,
    derived_quantities,
    save_snapshot,
    save_topography,
    append_probe_sample,
    load_snapshot,
    load_probe,
)

__all__ = [
    "SNAPSHOT_HEADER",
    "first_invalid_cell",
    "derived_quantities",
    "save_snapshot",
    "save_topography",
    "append_probe_sample",
    "load_snapshot",
    "load_probe",
]
