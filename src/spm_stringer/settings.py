"""Solver settings for the stringer engine (stable defaults)."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class StringerSettings:
    """Element-level controls.

    num_substeps:
        Strain sub-steps used by :meth:`NonlinearStringer.analysis`.
    strain_tol / max_iterations:
        Brent root finder controls for the cracked branch.
    zero_force_tol:
        Forces with ``|N| <= zero_force_tol`` are treated as zero.
    unreinforced_strain_limit:
        Upper strain bracket for the cracked branch when there is no steel.
    fd_step:
        Step of the central difference used for the local flexibility.
    """

    num_substeps: int = 5
    strain_tol: float = 1e-4
    max_iterations: int = 1000
    zero_force_tol: float = 1e-6
    unreinforced_strain_limit: float = 3e-3
    fd_step: float = 1e-8
    debug: bool = False

    def __post_init__(self) -> None:
        if int(self.num_substeps) < 1:
            raise ValueError(f"num_substeps must be >= 1 (got {self.num_substeps})")
        if float(self.strain_tol) <= 0.0:
            raise ValueError("strain_tol must be positive")
        if int(self.max_iterations) < 1:
            raise ValueError("max_iterations must be >= 1")
        if float(self.fd_step) <= 0.0:
            raise ValueError("fd_step must be positive")
        if float(self.unreinforced_strain_limit) <= 0.0:
            raise ValueError("unreinforced_strain_limit must be positive")


@dataclass(frozen=True)
class AnalysisSettings:
    """Load-path controls for :class:`~spm_stringer.analysis.StringerAnalysis`."""

    max_subdiv: int = 8
    max_total_substeps: int = 2000
    debug_substeps: bool = False

    def __post_init__(self) -> None:
        if int(self.max_subdiv) < 0:
            raise ValueError("max_subdiv must be >= 0")
        if int(self.max_total_substeps) < 1:
            raise ValueError("max_total_substeps must be >= 1")


DEFAULT_SETTINGS = StringerSettings()
