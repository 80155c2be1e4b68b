"""Axial capacities of a reinforced-concrete stringer section."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

from spm_stringer.materials.concrete import UniaxialConcrete
from spm_stringer.materials.reinforcement import UniaxialReinforcement


@dataclass(frozen=True)
class SectionCapacities:
    """Derived section constants (computed once per stringer).

    Forces in N, compression negative:

    - ``axial_stiffness``     t1 = EcAc + EsAs
    - ``stiffness_ratio``     xi = EsAs / EcAc
    - ``cracking_force``      Nr = ft Ac (1 + xi) / sqrt(1 + xi)
    - ``yield_force``         Nyr = fy As
    - ``max_compressive_force`` Nt = max(Nc (1 + xi)², Nc - Nyr), or Nc
      without reinforcement (Nc = -fc Ac)
    """

    axial_stiffness: float
    stiffness_ratio: float
    cracking_force: float
    yield_force: float
    max_compressive_force: float
    concrete_max_force: float
    concrete_stiffness: float
    cracking_strain: float
    yield_strain: Optional[float]
    peak_strain: float
    ultimate_strain: float

    @property
    def reinforced(self) -> bool:
        return self.yield_strain is not None

    @classmethod
    def from_materials(
        cls,
        concrete: UniaxialConcrete,
        reinforcement: Optional[UniaxialReinforcement] = None,
    ) -> "SectionCapacities":
        EcAc = concrete.stiffness
        EsAs = reinforcement.stiffness if reinforcement is not None else 0.0
        xi = EsAs / EcAc
        Nc = concrete.max_force
        Nyr = reinforcement.yield_force if reinforcement is not None else 0.0

        if reinforcement is None:
            Nt = Nc
        else:
            Nt = max(Nc * (1.0 + xi) ** 2, Nc - Nyr)

        Nr = concrete.ft * concrete.area * (1.0 + xi) / math.sqrt(1.0 + xi)

        return cls(
            axial_stiffness=float(EcAc + EsAs),
            stiffness_ratio=float(xi),
            cracking_force=float(Nr),
            yield_force=float(Nyr),
            max_compressive_force=float(Nt),
            concrete_max_force=float(Nc),
            concrete_stiffness=float(EcAc),
            cracking_strain=float(concrete.ecr),
            yield_strain=None if reinforcement is None else float(reinforcement.yield_strain),
            peak_strain=float(concrete.ec),
            ultimate_strain=float(concrete.ecu),
        )
