"""Force-to-strain relations of a stringer cross-section.

Given an axial force ``N`` at an integration point, return the generalized
strain pair ``(e, de)`` where ``de = d(strain)/d(force)`` is the section
flexibility. The relation is piecewise and depends on the cracking / yielding
history stored in the :class:`~spm_stringer.integration_point.IntegrationPoint`.

Regimes (tension positive, ``t1 = EcAc + EsAs``, ``xi = EsAs/EcAc``):

Tension
  1. uncracked:             e = N / t1
  2. cracked, not yielding: root of  N(e) = N  in [ecr, ey]
  3. yielding:              e = ey + (N - Nyr) / t1

Compression (MCFT closed forms, parabolic concrete)
  - not crushed (N > Nt):   e = ec (1 + xi - sqrt((1 + xi)² - N / Nc))
  - crushing (N <= Nt):     strain at Nt plus (N - Nt) / t1

Regime changes detected during an evaluation are resolved in the same call.
"""

from __future__ import annotations

import math
from typing import Optional, Tuple

from spm_stringer.integration_point import IntegrationPoint
from spm_stringer.materials.concrete import ConstitutiveModel, UniaxialConcrete
from spm_stringer.materials.reinforcement import UniaxialReinforcement
from spm_stringer.root_solver import ForceStrainSolver
from spm_stringer.section import SectionCapacities
from spm_stringer.settings import DEFAULT_SETTINGS, StringerSettings


StrainPair = Tuple[float, float]


def _sqrt(x: float) -> float:
    # arguments vanish at the capacity limits; clip round-off below zero
    return math.sqrt(max(x, 0.0))


class StressStrainRelations:
    """Base relations: dispatch, zero-force identity and the tension branch."""

    model: ConstitutiveModel = ConstitutiveModel.MCFT

    def __init__(
        self,
        concrete: UniaxialConcrete,
        reinforcement: Optional[UniaxialReinforcement] = None,
        settings: StringerSettings = DEFAULT_SETTINGS,
    ):
        self.concrete = concrete
        self.reinforcement = reinforcement
        self.settings = settings
        self.capacities = SectionCapacities.from_materials(concrete, reinforcement)
        self.solver = ForceStrainSolver(
            self.section_force,
            strain_tol=settings.strain_tol,
            max_iterations=settings.max_iterations,
            fd_step=settings.fd_step,
        )

    def section_force(self, strain: float) -> float:
        """Total section force (concrete + steel) at ``strain``."""
        n = self.concrete.force(strain)
        if self.reinforcement is not None:
            n += self.reinforcement.force(strain)
        return float(n)

    # ------------------------------------------------------------------

    def stringer_strain(self, force: float, ip: IntegrationPoint) -> StrainPair:
        """Return ``(e, de)`` for ``force`` and update the IP history."""
        N = float(force)
        if math.isnan(N):
            return ip.last_strain

        if abs(N) <= self.settings.zero_force_tol:
            result = (0.0, 1.0 / self.capacities.axial_stiffness)
        elif N > 0.0:
            result = self.tension(N, ip)
        else:
            result = self.compression(N, ip)

        e, de = float(result[0]), float(result[1])
        if math.isnan(e):
            if self.settings.debug:
                print(f"[material] NaN strain for N={N:.6g}, keeping last {ip.last_strain}")
            return ip.last_strain

        ip.last_strain = (e, de)
        return ip.last_strain

    # ------------------------------------------------------------------
    # tension
    # ------------------------------------------------------------------

    def tension(self, N: float, ip: IntegrationPoint) -> StrainPair:
        cap = self.capacities
        t1 = cap.axial_stiffness

        if ip.uncracked:
            e = N / t1
            if not ip.verify_cracked(e):
                return e, 1.0 / t1
            if self.settings.debug:
                print(f"[material] cracked at N={N:.6g} (e={e:.4e})")

        if ip.cracked_and_not_yielding:
            upper = cap.yield_strain if cap.reinforced else self.settings.unreinforced_strain_limit
            res = self.solver.solve(N, cap.cracking_strain, upper)
            if res is None:
                # no root below the yield strain: the section is yielding
                ip.mark_yielded()
            elif not ip.verify_yielding(res[0]):
                return res
            if self.settings.debug:
                print(f"[material] yielding at N={N:.6g}")

        return self._yielding_tension(N)

    def _yielding_tension(self, N: float) -> StrainPair:
        cap = self.capacities
        t1 = cap.axial_stiffness
        ey = cap.yield_strain if cap.reinforced else 0.0
        return ey + (N - cap.yield_force) / t1, 1.0 / t1

    # ------------------------------------------------------------------
    # compression
    # ------------------------------------------------------------------

    def compression(self, N: float, ip: IntegrationPoint) -> StrainPair:
        raise NotImplementedError


class MCFTRelations(StressStrainRelations):
    """Closed-form compression branches (Modified Compression Field Theory)."""

    model = ConstitutiveModel.MCFT

    def _steel_yields(self, e: float, ip: IntegrationPoint) -> bool:
        ip.verify_yielding(e)
        cap = self.capacities
        return cap.reinforced and e < -cap.yield_strain

    def compression(self, N: float, ip: IntegrationPoint) -> StrainPair:
        if N > self.capacities.max_compressive_force:
            return self._not_crushed(N, ip)
        return self._crushing(N, ip)

    def _not_crushed(self, N: float, ip: IntegrationPoint) -> StrainPair:
        cap = self.capacities
        xi = cap.stiffness_ratio
        Nc = cap.concrete_max_force
        ec = cap.peak_strain

        t2 = _sqrt((1.0 + xi) ** 2 - N / Nc)
        e = ec * (1.0 + xi - t2)

        if self._steel_yields(e, ip):
            t2 = _sqrt(1.0 - (N + cap.yield_force) / Nc)
            e = ec * (1.0 - t2)

        if t2 <= 0.0:
            # at Nt the tangent of the crushing branch applies
            return e, 1.0 / cap.axial_stiffness
        return e, 1.0 / (cap.concrete_stiffness * t2)

    def _crushing(self, N: float, ip: IntegrationPoint) -> StrainPair:
        cap = self.capacities
        xi = cap.stiffness_ratio
        Nc = cap.concrete_max_force
        Nt = cap.max_compressive_force
        ec = cap.peak_strain
        t1 = cap.axial_stiffness

        e_t = ec * (1.0 + xi - _sqrt((1.0 + xi) ** 2 - Nt / Nc))
        if self._steel_yields(e_t, ip):
            e_t = ec * (1.0 - _sqrt(1.0 - (cap.yield_force + Nt) / Nc))

        if self.settings.debug:
            print(f"[material] crushing branch at N={N:.6g} (Nt={Nt:.6g})")
        return e_t + (N - Nt) / t1, 1.0 / t1


class DSFMRelations(StressStrainRelations):
    """Disturbed Stress Field Model: compression solved numerically."""

    model = ConstitutiveModel.DSFM

    def compression(self, N: float, ip: IntegrationPoint) -> StrainPair:
        res = self.solver.solve(N, self.capacities.ultimate_strain, 0.0)
        if res is None:
            return ip.last_strain
        ip.verify_yielding(res[0])
        return res


_RELATIONS = {
    ConstitutiveModel.MCFT: MCFTRelations,
    ConstitutiveModel.DSFM: DSFMRelations,
}


def relations_for(
    model,
    concrete: UniaxialConcrete,
    reinforcement: Optional[UniaxialReinforcement] = None,
    settings: StringerSettings = DEFAULT_SETTINGS,
) -> StressStrainRelations:
    """Return the relations variant for ``model`` (enum or string alias)."""
    key = ConstitutiveModel.read(model)
    cls = _RELATIONS.get(key)
    if cls is None:
        raise ValueError(f"No stress-strain relations wired for model '{key}'")
    return cls(concrete, reinforcement, settings)
