"""Per-step monitored values of one stringer."""

from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import List

import numpy as np
import pandas as pd

from spm_stringer.stringer import NonlinearStringer


COLUMNS = ("load_factor", "min_strain", "max_strain", "min_force", "max_force", "max_crack")


@dataclass(frozen=True)
class StringerOutput:
    load_factor: float
    min_strain: float
    max_strain: float
    min_force: float
    max_force: float
    max_crack: float


class StringerMonitor:
    """Record strains, forces and crack openings of a stringer after each
    converged load step."""

    def __init__(self, stringer: NonlinearStringer):
        self.stringer = stringer
        self.values: List[StringerOutput] = []

    @property
    def number(self) -> int:
        return self.stringer.number

    def add_monitored_value(self, load_factor: float) -> StringerOutput:
        s = self.stringer
        eps = s.strains
        N1, N3 = s.generalized_forces
        out = StringerOutput(
            load_factor=float(load_factor),
            min_strain=float(np.min(eps)),
            max_strain=float(np.max(eps)),
            min_force=float(min(N1, N3)),
            max_force=float(max(N1, N3)),
            max_crack=float(np.max(s.crack_openings)),
        )
        self.values.append(out)
        return out

    def __len__(self) -> int:
        return len(self.values)

    def as_array(self) -> np.ndarray:
        """(n_steps, 6) array in :data:`COLUMNS` order."""
        if not self.values:
            return np.zeros((0, len(COLUMNS)), dtype=float)
        return np.array([[getattr(v, c) for c in COLUMNS] for v in self.values], dtype=float)

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame([asdict(v) for v in self.values], columns=list(COLUMNS))
