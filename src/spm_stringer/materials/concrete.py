"""Uniaxial concrete for stringer cross-sections.

The law is the one used by smeared-crack membrane theories reduced to one
axis:

    σ(ε) = Ec ε                                 0 <= ε <= εcr
    σ(ε) = ft / (1 + sqrt(ct ε))                ε > εcr      (tension stiffening)
    σ(ε) = -fc [2 (ε/εc) - (ε/εc)²]             εc·2 < ε < 0  (Hognestad parabola)
    σ(ε) = 0                                    ε <= 2 εc

with ``ct = 500`` for the MCFT (Vecchio & Collins / Bentz) and
``ct = 2.2 m`` for the DSFM (Vecchio 2000), where ``m = φ / (4 ρ)`` [mm].

Sign convention: tension positive. ``fc`` is a positive magnitude, ``εc``
and ``εcu`` are negative.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional, TYPE_CHECKING

from spm_stringer.materials.properties import (
    ec2_concrete,
    mcft_elastic_modulus,
    mcft_tensile_strength,
    parabola_peak_strain,
)

if TYPE_CHECKING:
    from spm_stringer.materials.reinforcement import UniaxialReinforcement


MCFT_TENSION_STIFFENING = 500.0


class ConstitutiveModel(Enum):
    MCFT = "mcft"
    DSFM = "dsfm"

    @classmethod
    def read(cls, value) -> "ConstitutiveModel":
        """Normalize a model selector (enum or string alias)."""
        if isinstance(value, ConstitutiveModel):
            return value
        key = (str(value) if value is not None else "mcft").strip().lower()
        aliases = {
            "mcft": cls.MCFT,
            "modified-compression-field": cls.MCFT,
            "modified_compression_field": cls.MCFT,
            "collins": cls.MCFT,
            "dsfm": cls.DSFM,
            "disturbed-stress-field": cls.DSFM,
            "disturbed_stress_field": cls.DSFM,
            "vecchio": cls.DSFM,
        }
        if key not in aliases:
            raise ValueError(f"Unknown constitutive model '{value}'. Use 'mcft' or 'dsfm'.")
        return aliases[key]


@dataclass(frozen=True)
class ConcreteParameters:
    """Concrete parameters [MPa].

    Only ``fc`` is required; the rest default to the MCFT expressions:
    ``ft = 0.33 sqrt(fc)``, ``Ec = 3320 sqrt(fc) + 6900``, ``ec = -2 fc / Ec``.
    """

    fc: float
    ft: Optional[float] = None
    Ec: Optional[float] = None
    ec: Optional[float] = None
    ecu: float = -0.0035

    def __post_init__(self) -> None:
        if self.fc <= 0.0:
            raise ValueError("Compressive strength fc must be positive")
        # frozen: fill defaults through object.__setattr__
        if self.ft is None:
            object.__setattr__(self, "ft", float(mcft_tensile_strength(self.fc)))
        if self.Ec is None:
            object.__setattr__(self, "Ec", float(mcft_elastic_modulus(self.fc)))
        if self.Ec <= 0.0:
            raise ValueError("Elastic modulus Ec must be positive")
        if self.ft < 0.0:
            raise ValueError("Tensile strength ft must be non-negative")
        if self.ec is None:
            object.__setattr__(self, "ec", float(parabola_peak_strain(self.fc, self.Ec)))
        if self.ec >= 0.0:
            raise ValueError("Peak strain ec must be negative")
        if self.ecu >= self.ec:
            raise ValueError("Ultimate strain ecu must be smaller (more compressive) than ec")

    @property
    def ecr(self) -> float:
        """Cracking strain."""
        return float(self.ft / self.Ec)

    @classmethod
    def from_class(cls, concrete_class: str, ecu: float = -0.0035) -> "ConcreteParameters":
        """Build parameters from a class string such as ``"C30/37"`` (fib MC2010)."""
        props = ec2_concrete(concrete_class)
        f_cm = float(props["f_cm"])
        E_ci = float(props["E_ci"])
        return cls(fc=f_cm, ft=float(props["f_ctm"]), Ec=E_ci, ecu=ecu)


class UniaxialConcrete:
    """Concrete of a stringer cross-section (net area, steel excluded)."""

    def __init__(
        self,
        parameters: ConcreteParameters,
        area: float,
        model=ConstitutiveModel.MCFT,
        reinforcement: Optional["UniaxialReinforcement"] = None,
    ):
        if area <= 0.0:
            raise ValueError(f"Concrete area must be positive (got {area})")
        self.parameters = parameters
        self.area = float(area)
        self.model = ConstitutiveModel.read(model)
        self.tension_stiffening = self._tension_stiffening(self.model, reinforcement)

    @staticmethod
    def _tension_stiffening(model: ConstitutiveModel, reinforcement) -> float:
        if model is ConstitutiveModel.DSFM and reinforcement is not None:
            phi = float(reinforcement.bar_diameter)
            rho = float(reinforcement.ratio)
            if phi > 0.0 and rho > 0.0:
                m = phi / (4.0 * rho)
                return 2.2 * m
        return MCFT_TENSION_STIFFENING

    # parameters (short names as in the literature)
    @property
    def fc(self) -> float:
        return float(self.parameters.fc)

    @property
    def ft(self) -> float:
        return float(self.parameters.ft)

    @property
    def Ec(self) -> float:
        return float(self.parameters.Ec)

    @property
    def ec(self) -> float:
        return float(self.parameters.ec)

    @property
    def ecu(self) -> float:
        return float(self.parameters.ecu)

    @property
    def ecr(self) -> float:
        return self.parameters.ecr

    @property
    def stiffness(self) -> float:
        """Axial stiffness EcAc [N]."""
        return self.Ec * self.area

    @property
    def max_force(self) -> float:
        """Crushing force Nc = -fc Ac [N] (negative)."""
        return -self.fc * self.area

    def stress(self, strain: float) -> float:
        e = float(strain)
        if e >= 0.0:
            if e <= self.ecr:
                return self.Ec * e
            return self.ft / (1.0 + math.sqrt(self.tension_stiffening * e))

        x = e / self.ec
        if x >= 2.0:
            return 0.0
        return -self.fc * (2.0 * x - x * x)

    def force(self, strain: float) -> float:
        return self.stress(strain) * self.area

    def __repr__(self) -> str:
        return (
            f"UniaxialConcrete(model={self.model.name}, fc={self.fc:.4g}, ft={self.ft:.4g}, "
            f"Ec={self.Ec:.5g}, area={self.area:.5g})"
        )
