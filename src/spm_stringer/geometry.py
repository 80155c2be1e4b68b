"""Stringer geometry (plane, straight segments).

Purely geometric; no material or assembly dependencies.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Tuple

import numpy as np


@dataclass(frozen=True)
class CrossSection:
    """Rectangular stringer cross-section [mm]."""

    width: float
    height: float

    def __post_init__(self) -> None:
        if self.width <= 0.0 or self.height <= 0.0:
            raise ValueError(f"Cross-section dimensions must be positive (got {self.width} x {self.height})")

    @property
    def area(self) -> float:
        return float(self.width * self.height)

    @property
    def min_dimension(self) -> float:
        return float(min(self.width, self.height))


@dataclass(frozen=True)
class StringerGeometry:
    """Straight stringer from ``initial_point`` to ``end_point``."""

    initial_point: Tuple[float, float]
    end_point: Tuple[float, float]
    cross_section: CrossSection

    def __post_init__(self) -> None:
        object.__setattr__(self, "initial_point", (float(self.initial_point[0]), float(self.initial_point[1])))
        object.__setattr__(self, "end_point", (float(self.end_point[0]), float(self.end_point[1])))
        if self.length <= 1e-12:
            raise ValueError(f"Zero-length stringer between {self.initial_point} and {self.end_point}")

    def p0(self) -> np.ndarray:
        return np.array(self.initial_point, dtype=float)

    def p1(self) -> np.ndarray:
        return np.array(self.end_point, dtype=float)

    @property
    def length(self) -> float:
        return float(np.linalg.norm(self.p1() - self.p0()))

    @property
    def angle(self) -> float:
        """Angle to the x axis [rad], in (-pi, pi]."""
        dx, dy = self.p1() - self.p0()
        return float(math.atan2(dy, dx))

    @property
    def center_point(self) -> Tuple[float, float]:
        c = 0.5 * (self.p0() + self.p1())
        return float(c[0]), float(c[1])

    @property
    def direction_cosines(self) -> Tuple[float, float]:
        """(l, m) = (cos, sin) of the stringer angle."""
        v = (self.p1() - self.p0()) / self.length
        return float(v[0]), float(v[1])

    def divide(self, n: int) -> List["StringerGeometry"]:
        """Split into ``n`` collinear stringers of equal length."""
        n = int(n)
        if n < 1:
            raise ValueError(f"divide() needs n >= 1 (got {n})")
        pts = np.linspace(self.p0(), self.p1(), n + 1)
        return [
            StringerGeometry(
                (float(pts[i, 0]), float(pts[i, 1])),
                (float(pts[i + 1, 0]), float(pts[i + 1, 1])),
                self.cross_section,
            )
            for i in range(n)
        ]
