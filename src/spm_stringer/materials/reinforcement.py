"""Longitudinal reinforcement of a stringer (bilinear steel)."""

from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class SteelParameters:
    """Steel parameters.

    fy:  yield stress [MPa]
    Es:  elastic modulus [MPa]
    esu: ultimate strain (positive)
    Eh:  hardening modulus [MPa] (0 = perfectly plastic)
    """

    fy: float = 500.0
    Es: float = 200000.0
    esu: float = 0.01
    Eh: float = 0.0

    def __post_init__(self) -> None:
        if self.fy <= 0.0 or self.Es <= 0.0:
            raise ValueError("Steel fy and Es must be positive")
        if self.esu <= self.fy / self.Es:
            raise ValueError("Ultimate strain esu must exceed the yield strain fy/Es")
        if self.Eh < 0.0:
            raise ValueError("Hardening modulus Eh must be non-negative")

    @property
    def ey(self) -> float:
        return float(self.fy / self.Es)

    @property
    def fu(self) -> float:
        """Stress at the ultimate strain."""
        return float(self.fy + self.Eh * (self.esu - self.ey))


def steel_bilinear_stress(eps: float, steel: SteelParameters):
    """Return (sigma, tangent) for a symmetric bilinear steel law.

    Hardening stops at ``esu``; beyond it the stress stays at ``fu``.
    """
    E = float(steel.Es)
    eps_y = steel.ey
    if abs(eps) <= eps_y:
        return E * eps, E
    sign = 1.0 if eps >= 0.0 else -1.0
    if abs(eps) >= steel.esu:
        return sign * steel.fu, 0.0
    return sign * (steel.fy + steel.Eh * (abs(eps) - eps_y)), float(steel.Eh)


class UniaxialReinforcement:
    """Bars of a stringer, smeared over the concrete area."""

    def __init__(
        self,
        number_of_bars: int,
        bar_diameter: float,
        steel: SteelParameters = SteelParameters(),
        concrete_area: float = 0.0,
    ):
        if int(number_of_bars) < 1:
            raise ValueError(f"number_of_bars must be >= 1 (got {number_of_bars})")
        if bar_diameter <= 0.0:
            raise ValueError(f"bar_diameter must be positive (got {bar_diameter})")
        self.number_of_bars = int(number_of_bars)
        self.bar_diameter = float(bar_diameter)
        self.steel = steel
        self.concrete_area = float(concrete_area)

    @property
    def area(self) -> float:
        """Steel area As [mm²]."""
        return self.number_of_bars * math.pi * self.bar_diameter**2 / 4.0

    @property
    def ratio(self) -> float:
        """Reinforcement ratio As / Ac (0 when the concrete area is unknown)."""
        if self.concrete_area <= 0.0:
            return 0.0
        return self.area / self.concrete_area

    @property
    def stiffness(self) -> float:
        """EsAs [N]."""
        return float(self.steel.Es) * self.area

    @property
    def yield_force(self) -> float:
        """Nyr = fy As [N] (positive)."""
        return float(self.steel.fy) * self.area

    @property
    def yield_strain(self) -> float:
        return self.steel.ey

    def stress(self, strain: float) -> float:
        s, _ = steel_bilinear_stress(float(strain), self.steel)
        return float(s)

    def force(self, strain: float) -> float:
        return self.stress(strain) * self.area

    def __repr__(self) -> str:
        return (
            f"UniaxialReinforcement({self.number_of_bars} x {self.bar_diameter:.4g} mm, "
            f"As={self.area:.5g} mm², fy={self.steel.fy:.4g})"
        )
