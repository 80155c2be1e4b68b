"""Integration-point state of a nonlinear stringer.

Each stringer carries four integration points (IPs), one per interpolation
sample along its length. An IP owns the irreversible cracking / yielding
flags of its cross-section and the last converged (strain, flexibility)
pair, which is returned whenever a new evaluation produces NaN.

The flags are ratchets: once set they never go back to False.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass
class IntegrationPoint:
    """History variables at one stringer cross-section.

    cracking_strain:
        Strain at which concrete cracks in tension.
    yield_strain:
        Steel yield strain; ``None`` when the stringer has no reinforcement
        (yielding is then never detected by strain).
    last_strain:
        Last computed generalized strain pair ``(e, de)``.
    """

    cracking_strain: float
    yield_strain: Optional[float] = None
    cracked: bool = False
    yielded: bool = False
    last_strain: Tuple[float, float] = (0.0, 0.0)

    def copy(self) -> "IntegrationPoint":
        """Independent copy (trial/commit workflow)."""
        return IntegrationPoint(
            cracking_strain=float(self.cracking_strain),
            yield_strain=None if self.yield_strain is None else float(self.yield_strain),
            cracked=bool(self.cracked),
            yielded=bool(self.yielded),
            last_strain=(float(self.last_strain[0]), float(self.last_strain[1])),
        )

    # ------------------------------------------------------------------
    # state transitions
    # ------------------------------------------------------------------

    def verify_cracked(self, strain: float) -> bool:
        if not self.cracked and strain >= self.cracking_strain:
            self.cracked = True
        return self.cracked

    def verify_yielding(self, strain: float) -> bool:
        if self.yield_strain is None:
            return self.yielded
        if not self.yielded and abs(strain) >= self.yield_strain:
            self.yielded = True
        return self.yielded

    def mark_yielded(self) -> None:
        self.yielded = True

    # ------------------------------------------------------------------
    # composite states
    # ------------------------------------------------------------------

    @property
    def uncracked(self) -> bool:
        # a section yielded in compression is no longer linear in tension
        return not self.cracked and not self.yielded

    @property
    def cracked_and_not_yielding(self) -> bool:
        return self.cracked and not self.yielded

    @property
    def cracked_and_yielding(self) -> bool:
        return self.cracked and self.yielded
