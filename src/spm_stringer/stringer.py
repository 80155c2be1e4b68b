"""Stringer elements (linear and nonlinear).

A stringer is a 3-node axial element of a stringer-panel model. Grips 1 and 3
are the end nodes, grip 2 is the mid node. Each node has 2 DoFs (x, y), so the
element is addressed by 6 global DoFs and has 3 local (axial) displacements.

The nonlinear element follows the flexibility formulation: the normal forces
``N1`` (grip 1) and ``N3`` (grip 3) vary linearly along the stringer and the
generalized strains ``e1 = u2 - u1`` and ``e3 = u3 - u2`` are integrated from
4 sampled sections. Forces are found incrementally: the strain increment from
the last committed state is split into sub-steps and each sub-step is
solved with the current 2x2 flexibility.

Trial / commit
--------------
:meth:`NonlinearStringer.analysis` never touches the committed state. It works
on copies of the committed integration points and stores the result as the
trial state. :meth:`NonlinearStringer.results` commits the trial state.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

import numpy as np

from spm_stringer.events import ElementState, EventLog, StateChange
from spm_stringer.geometry import CrossSection, StringerGeometry
from spm_stringer.integration_point import IntegrationPoint
from spm_stringer.materials.concrete import ConcreteParameters, ConstitutiveModel, UniaxialConcrete
from spm_stringer.materials.properties import crack_spacing
from spm_stringer.materials.reinforcement import UniaxialReinforcement
from spm_stringer.relations import relations_for
from spm_stringer.settings import DEFAULT_SETTINGS, StringerSettings


# Compatibility (local axial strains at grips 1, 2, 3 from local displacements)
_B_BAR = np.array([[-1.0, 1.0, 0.0], [0.0, -1.0, 1.0]], dtype=float)

FORCE_TOL = 1e-3


class ForceState(Enum):
    UNLOADED = "unloaded"
    PURE_TENSION = "pure tension"
    PURE_COMPRESSION = "pure compression"
    COMBINED = "combined"


class Stringer:
    """Linear-elastic stringer.

    Parameters
    ----------
    number:
        Element number (used in events and reports).
    grips:
        Node numbers ``(n1, n2, n3)``, 1-based.
    geometry:
        :class:`~spm_stringer.geometry.StringerGeometry`.
    concrete:
        :class:`~spm_stringer.materials.concrete.ConcreteParameters`.
    model:
        Constitutive model selector (``"mcft"`` or ``"dsfm"``).
    reinforcement:
        Optional :class:`~spm_stringer.materials.reinforcement.UniaxialReinforcement`.
    """

    def __init__(
        self,
        number: int,
        grips: Sequence[int],
        geometry: StringerGeometry,
        concrete: ConcreteParameters,
        model=ConstitutiveModel.MCFT,
        reinforcement: Optional[UniaxialReinforcement] = None,
        settings: StringerSettings = DEFAULT_SETTINGS,
    ):
        grips = tuple(int(g) for g in grips)
        if len(grips) != 3:
            raise ValueError(f"A stringer needs 3 grips (got {len(grips)})")
        if min(grips) < 1:
            raise ValueError(f"Grip numbers are 1-based (got {grips})")

        self.number = int(number)
        self.grips: Tuple[int, int, int] = grips
        self.geometry = geometry
        self.concrete_parameters = concrete
        self.model = ConstitutiveModel.read(model)
        self.settings = settings

        gross = geometry.cross_section.area
        if reinforcement is not None and reinforcement.concrete_area <= 0.0:
            reinforcement = UniaxialReinforcement(
                reinforcement.number_of_bars,
                reinforcement.bar_diameter,
                reinforcement.steel,
                concrete_area=gross,
            )
        self.reinforcement = reinforcement

        self.concrete = UniaxialConcrete(concrete, self.concrete_area, self.model, reinforcement)

        self._local_displacements = np.zeros(3, dtype=float)
        self._local_forces = np.zeros(3, dtype=float)

    # ------------------------------------------------------------------
    # construction helpers
    # ------------------------------------------------------------------

    @classmethod
    def from_nodes(
        cls,
        number: int,
        nodes: Mapping[int, Sequence[float]],
        grip1_position: Sequence[float],
        grip3_position: Sequence[float],
        cross_section: CrossSection,
        concrete: ConcreteParameters,
        model=ConstitutiveModel.MCFT,
        reinforcement: Optional[UniaxialReinforcement] = None,
        settings: StringerSettings = DEFAULT_SETTINGS,
        tol: float = 1e-6,
    ):
        """Build a stringer from node positions ``{node_number: (x, y)}``.

        The mid node is looked up at the midpoint of the two grips.
        """
        p1 = np.asarray(grip1_position, dtype=float)
        p3 = np.asarray(grip3_position, dtype=float)
        n1 = _node_at(nodes, p1, tol)
        n2 = _node_at(nodes, 0.5 * (p1 + p3), tol)
        n3 = _node_at(nodes, p3, tol)
        geometry = StringerGeometry(tuple(p1), tuple(p3), cross_section)
        return cls(number, (n1, n2, n3), geometry, concrete, model, reinforcement, settings)

    def to_linear(self) -> "Stringer":
        return Stringer(
            self.number,
            self.grips,
            self.geometry,
            self.concrete_parameters,
            self.model,
            self.reinforcement,
            self.settings,
        )

    # ------------------------------------------------------------------
    # geometry / DoFs
    # ------------------------------------------------------------------

    @property
    def length(self) -> float:
        return self.geometry.length

    @property
    def concrete_area(self) -> float:
        return self.geometry.cross_section.area

    @property
    def dof_index(self) -> np.ndarray:
        """Global DoF indices ``[2n-2, 2n-1]`` of each grip."""
        return np.array([d for n in self.grips for d in (2 * n - 2, 2 * n - 1)], dtype=int)

    @property
    def transformation_matrix(self) -> np.ndarray:
        l, m = self.geometry.direction_cosines
        return np.array(
            [
                [l, m, 0.0, 0.0, 0.0, 0.0],
                [0.0, 0.0, l, m, 0.0, 0.0],
                [0.0, 0.0, 0.0, 0.0, l, m],
            ],
            dtype=float,
        )

    def local_displacements(self, global_displacements) -> np.ndarray:
        """Axial displacements of grips 1..3 from the global vector."""
        u = np.asarray(global_displacements, dtype=float).reshape(-1)
        dofs = self.dof_index
        if u.size <= int(dofs.max()):
            raise ValueError(
                f"Stringer {self.number}: displacement vector has {u.size} entries, needs at least {int(dofs.max()) + 1}"
            )
        return self.transformation_matrix @ u[dofs]

    def set_displacements(self, global_displacements) -> None:
        self._local_displacements = self.local_displacements(global_displacements)

    # ------------------------------------------------------------------
    # stiffness / forces
    # ------------------------------------------------------------------

    @property
    def local_stiffness(self) -> np.ndarray:
        k = self.concrete.stiffness / (3.0 * self.length)
        return k * np.array([[7.0, -8.0, 1.0], [-8.0, 16.0, -8.0], [1.0, -8.0, 7.0]], dtype=float)

    @property
    def global_stiffness(self) -> np.ndarray:
        T = self.transformation_matrix
        return T.T @ self.local_stiffness @ T

    @property
    def local_forces(self) -> np.ndarray:
        return self._local_forces.copy()

    @property
    def global_forces(self) -> np.ndarray:
        return self.transformation_matrix.T @ self.local_forces

    @property
    def normal_forces(self) -> Tuple[float, float]:
        """(N1, N3), tension positive."""
        f = self.local_forces
        return float(-f[0]), float(f[2])

    def calculate_forces(self, global_displacements=None) -> np.ndarray:
        if global_displacements is not None:
            self.set_displacements(global_displacements)
        f = self.local_stiffness @ self._local_displacements
        f[np.abs(f) < FORCE_TOL] = 0.0
        self._local_forces = f
        return self.local_forces

    @property
    def force_state(self) -> ForceState:
        N1, N3 = self.normal_forces
        if abs(N1) <= FORCE_TOL and abs(N3) <= FORCE_TOL:
            return ForceState.UNLOADED
        if N1 >= 0.0 and N3 >= 0.0:
            return ForceState.PURE_TENSION
        if N1 <= 0.0 and N3 <= 0.0:
            return ForceState.PURE_COMPRESSION
        return ForceState.COMBINED

    @property
    def max_force(self) -> float:
        return float(np.max(np.abs(self.local_forces)))

    def __repr__(self) -> str:
        return f"{type(self).__name__}(number={self.number}, grips={self.grips}, L={self.length:.5g})"


class NonlinearStringer(Stringer):
    """Stringer with MCFT / DSFM sections at 4 integration points."""

    def __init__(
        self,
        number: int,
        grips: Sequence[int],
        geometry: StringerGeometry,
        concrete: ConcreteParameters,
        model=ConstitutiveModel.MCFT,
        reinforcement: Optional[UniaxialReinforcement] = None,
        settings: StringerSettings = DEFAULT_SETTINGS,
        event_log: Optional[EventLog] = None,
    ):
        super().__init__(number, grips, geometry, concrete, model, reinforcement, settings)

        self.relations = relations_for(self.model, self.concrete, self.reinforcement, settings)
        self.capacities = self.relations.capacities
        self.event_log = event_log if event_log is not None else EventLog()

        cap = self.capacities
        self._ips: List[IntegrationPoint] = [
            IntegrationPoint(cracking_strain=cap.cracking_strain, yield_strain=cap.yield_strain)
            for _ in range(4)
        ]

        # committed state
        self._forces: Tuple[float, float] = (0.0, 0.0)
        self._gen_strains: Tuple[float, float] = (0.0, 0.0)
        self._flexibility = self.initial_flexibility()

        # trial state (None = same as committed)
        self._trial: Optional[Dict] = None

        self._max_plastic = self._max_plastic_strain()
        self.ductility_exceeded = False
        self._flags = self._state_flags()

    @property
    def concrete_area(self) -> float:
        gross = self.geometry.cross_section.area
        if self.reinforcement is None:
            return gross
        return gross - self.reinforcement.area

    @property
    def integration_points(self) -> List[IntegrationPoint]:
        """Committed integration points."""
        return self._ips

    # ------------------------------------------------------------------
    # flexibility formulation
    # ------------------------------------------------------------------

    def initial_flexibility(self) -> np.ndarray:
        de11 = self.length / (3.0 * self.capacities.axial_stiffness)
        de12 = 0.5 * de11
        return np.array([[de11, de12], [de12, de11]], dtype=float)

    def gen_strains(
        self, forces: Tuple[float, float], ips: Optional[List[IntegrationPoint]] = None
    ) -> Tuple[Tuple[float, float], np.ndarray]:
        """Generalized strains ``(e1, e3)`` and flexibility for ``(N1, N3)``.

        Integrates the section relations sampled at 4 equally spaced points
        (forces interpolated linearly between the grips). Without ``ips`` the
        committed integration points are evaluated on copies.
        """
        if ips is None:
            ips = [ip.copy() for ip in self._ips]
        N1, N3 = float(forces[0]), float(forces[1])
        N = (N1, (2.0 * N1 + N3) / 3.0, (N1 + 2.0 * N3) / 3.0, N3)

        e = np.empty(4, dtype=float)
        d = np.empty(4, dtype=float)
        for i, (n, ip) in enumerate(zip(N, ips)):
            e[i], d[i] = self.relations.stringer_strain(n, ip)

        L = self.length
        e1 = L * (3.0 * e[0] + 6.0 * e[1] + 3.0 * e[2]) / 24.0
        e3 = L * (3.0 * e[1] + 6.0 * e[2] + 3.0 * e[3]) / 24.0

        de11 = L * (3.0 * d[0] + 4.0 * d[1] + d[2]) / 24.0
        de12 = L * (d[1] + d[2]) / 12.0
        de22 = L * (d[1] + 4.0 * d[2] + 3.0 * d[3]) / 24.0
        F = np.array([[de11, de12], [de12, de22]], dtype=float)
        return (float(e1), float(e3)), F

    def plastic_force(self, N: float) -> float:
        """Clamp a normal force to ``[Nt, Nyr]`` (NaN passes through)."""
        cap = self.capacities
        if N < cap.max_compressive_force:
            return cap.max_compressive_force
        if N > cap.yield_force:
            return cap.yield_force
        return N

    def analysis(self, global_displacements=None, num_substeps: Optional[int] = None) -> Tuple[float, float]:
        """Trial forces ``(N1, N3)`` for the given global displacements.

        The committed state is not modified; call :meth:`results` to commit.
        Non-convergence yields NaN forces (see :attr:`trial_converged`).
        """
        n = self.settings.num_substeps if num_substeps is None else int(num_substeps)
        if n < 1:
            raise ValueError(f"num_substeps must be >= 1 (got {num_substeps})")

        if global_displacements is not None:
            ul = self.local_displacements(global_displacements)
        elif self._trial is not None:
            ul = self._trial["ul"].copy()
        else:
            ul = self._local_displacements.copy()

        ips = [ip.copy() for ip in self._ips]
        N1, N3 = self._forces
        e1i, e3i = self._gen_strains

        # target generalized strains
        e1 = ul[1] - ul[0]
        e3 = ul[2] - ul[1]
        de1 = (e1 - e1i) / n
        de3 = (e3 - e3i) / n

        (g1, g3), F = self.gen_strains((N1, N3), ips)

        for i in range(n):
            if np.isnan(g1) or np.isnan(g3):
                break

            d = F[0, 0] * F[1, 1] - F[0, 1] * F[1, 0]
            dN1 = (F[1, 1] * de1 - F[0, 1] * de3) / d
            dN3 = (-F[0, 1] * de1 + F[0, 0] * de3) / d

            if not (np.isfinite(dN1) and np.isfinite(dN3)):
                if self.settings.debug:
                    print(f"[stringer] #{self.number} singular flexibility at substep {i + 1}/{n} (det={d:.3e})")
                N1 = N3 = float("nan")
                break

            N1 += dN1
            N3 += dN3
            (g1, g3), F = self.gen_strains((N1, N3), ips)

        N1 = self.plastic_force(N1)
        N3 = self.plastic_force(N3)

        if self.settings.debug:
            print(
                f"[stringer] #{self.number} analysis: e=({e1:.4e},{e3:.4e})  "
                f"N=({N1:.6g},{N3:.6g})  substeps={n}"
            )

        self._trial = {
            "ips": ips,
            "forces": (float(N1), float(N3)),
            "gen_strains": (float(g1), float(g3)),
            "F": F,
            "ul": np.asarray(ul, dtype=float).copy(),
        }
        return self._trial["forces"]

    @property
    def trial_converged(self) -> bool:
        if self._trial is None:
            return True
        N1, N3 = self._trial["forces"]
        g1, g3 = self._trial["gen_strains"]
        return bool(np.all(np.isfinite([N1, N3, g1, g3])))

    def clear_iterations(self) -> None:
        """Discard the trial state."""
        self._trial = None

    def results(self, load_step: Optional[int] = None) -> List[StateChange]:
        """Commit the trial state and return the new state changes."""
        if self._trial is None:
            return []
        if not self.trial_converged:
            raise RuntimeError(
                f"Stringer {self.number}: cannot commit a non-converged trial state "
                f"(N={self._trial['forces']})"
            )

        t = self._trial
        self._ips = t["ips"]
        self._forces = t["forces"]
        self._gen_strains = t["gen_strains"]
        self._flexibility = t["F"]
        self._local_displacements = t["ul"]
        self._trial = None

        eput, epuc = self._max_plastic
        ep = self.plastic_strains
        if any(e > eput for e in ep) or any(e < epuc for e in ep):
            self.ductility_exceeded = True

        # reported states stay latched through unloading
        events = []
        for state, now in self._state_flags().items():
            if now and not self._flags[state]:
                ev = StateChange(self.number, state, load_step)
                self.event_log.emit(ev)
                events.append(ev)
                self._flags[state] = True
        return events

    # ------------------------------------------------------------------
    # forces / stiffness
    # ------------------------------------------------------------------

    @property
    def generalized_forces(self) -> Tuple[float, float]:
        """Committed (N1, N3)."""
        return self._forces

    @property
    def generalized_strains(self) -> Tuple[float, float]:
        """Committed (e1, e3)."""
        return self._gen_strains

    @property
    def flexibility(self) -> np.ndarray:
        return self._flexibility.copy()

    @staticmethod
    def _local_forces_from(forces: Tuple[float, float]) -> np.ndarray:
        N1, N3 = forces
        return np.array([-N1, N1 - N3, N3], dtype=float)

    @staticmethod
    def _stiffness_from(F: np.ndarray) -> np.ndarray:
        return _B_BAR.T @ np.linalg.inv(F) @ _B_BAR

    @property
    def local_forces(self) -> np.ndarray:
        return self._local_forces_from(self._forces)

    @property
    def trial_local_forces(self) -> np.ndarray:
        if self._trial is None:
            return self.local_forces
        return self._local_forces_from(self._trial["forces"])

    @property
    def trial_global_forces(self) -> np.ndarray:
        return self.transformation_matrix.T @ self.trial_local_forces

    @property
    def local_stiffness(self) -> np.ndarray:
        return self._stiffness_from(self._flexibility)

    @property
    def trial_local_stiffness(self) -> np.ndarray:
        if self._trial is None:
            return self.local_stiffness
        return self._stiffness_from(self._trial["F"])

    @property
    def trial_global_stiffness(self) -> np.ndarray:
        T = self.transformation_matrix
        return T.T @ self.trial_local_stiffness @ T

    def calculate_forces(self, global_displacements=None) -> np.ndarray:
        """Run :meth:`analysis` and return the trial local forces."""
        self.analysis(global_displacements)
        return self.trial_local_forces

    # ------------------------------------------------------------------
    # post-processing
    # ------------------------------------------------------------------

    @property
    def strains(self) -> np.ndarray:
        """Axial strains at grips 1, 2, 3 (quadratic displacement field)."""
        B = np.array([[-3.0, 4.0, -1.0], [-1.0, 0.0, 1.0], [1.0, -4.0, 3.0]], dtype=float) / self.length
        return B @ self._local_displacements

    @property
    def crack_spacing(self) -> float:
        if self.reinforcement is None:
            return crack_spacing(None, None)
        return crack_spacing(self.reinforcement.bar_diameter, self.reinforcement.ratio)

    @property
    def crack_openings(self) -> np.ndarray:
        """Crack openings [mm] at grips 1, 2, 3 (zero in compression)."""
        sm = self.crack_spacing
        out = np.zeros(3, dtype=float)
        for i, e in enumerate(self.strains):
            if e > 1e-9:
                out[i] = e * sm
        return out

    @property
    def plastic_strains(self) -> Tuple[float, float]:
        """Plastic generalized strains at the two ends [mm]."""
        L = self.length
        ey = self.capacities.yield_strain
        ec = self.capacities.peak_strain
        out = []
        for ip in (self._ips[0], self._ips[-1]):
            e = float(ip.last_strain[0])
            if ey is not None and e > ey:
                out.append(L / 8.0 * (e - ey))
            elif e < ec:
                out.append(L / 8.0 * (e - ec))
            else:
                out.append(0.0)
        return out[0], out[1]

    def _max_plastic_strain(self) -> Tuple[float, float]:
        cap = self.capacities
        esu = self.reinforcement.steel.esu if self.reinforcement is not None else 0.01
        eput = 0.3 * esu * self.length

        ec = cap.peak_strain
        lim = ec if cap.yield_strain is None else max(ec, -cap.yield_strain)
        epuc = (cap.ultimate_strain - lim) * self.geometry.cross_section.min_dimension
        return float(eput), float(epuc)

    @property
    def max_plastic_strain(self) -> Tuple[float, float]:
        """(tension, compression) plastic strain limits [mm]."""
        return self._max_plastic

    # ------------------------------------------------------------------
    # state flags
    # ------------------------------------------------------------------

    @property
    def concrete_cracked(self) -> bool:
        return any(ip.cracked for ip in self._ips)

    @property
    def steel_yielded(self) -> bool:
        return any(ip.yielded for ip in self._ips)

    @property
    def concrete_yielded(self) -> bool:
        return float(np.min(self.strains)) <= self.capacities.peak_strain

    @property
    def concrete_crushed(self) -> bool:
        return float(np.min(self.strains)) <= self.capacities.ultimate_strain

    def _state_flags(self) -> Dict[ElementState, bool]:
        return {
            ElementState.CONCRETE_CRACKED: self.concrete_cracked,
            ElementState.CONCRETE_YIELDED: self.concrete_yielded,
            ElementState.CONCRETE_CRUSHED: self.concrete_crushed,
            ElementState.STEEL_YIELDED: self.steel_yielded,
        }


def _node_at(nodes: Mapping[int, Sequence[float]], position: np.ndarray, tol: float) -> int:
    for number, pos in nodes.items():
        if float(np.linalg.norm(np.asarray(pos, dtype=float) - position)) <= tol:
            return int(number)
    raise ValueError(f"No node at position ({position[0]:.6g}, {position[1]:.6g})")
