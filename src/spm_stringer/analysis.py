"""Displacement-controlled load path for a set of nonlinear stringers.

The global displacement field is scaled as ``u = lambda * u_ref``. Each load
step is attempted for every stringer; when any stringer returns a
non-converged trial state the step is bisected (stack based, like the
adaptive substepping of the crack solvers). Converged sub-steps are committed
and their state changes reported.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence

import numpy as np

from spm_stringer.events import ElementState, EventLog, StateChange
from spm_stringer.monitor import StringerMonitor
from spm_stringer.settings import AnalysisSettings
from spm_stringer.stringer import NonlinearStringer


class StringerAnalysis:
    """Drive a list of :class:`NonlinearStringer` along a proportional path.

    Parameters
    ----------
    stringers:
        Elements to analyse. They share one :class:`EventLog`.
    reference_displacements:
        Global displacement vector at load factor 1.
    settings:
        :class:`~spm_stringer.settings.AnalysisSettings`.
    """

    def __init__(
        self,
        stringers: Sequence[NonlinearStringer],
        reference_displacements,
        settings: AnalysisSettings = AnalysisSettings(),
    ):
        if not stringers:
            raise ValueError("StringerAnalysis needs at least one stringer")
        self.stringers = list(stringers)
        self.reference_displacements = np.asarray(reference_displacements, dtype=float).reshape(-1)
        self.settings = settings

        self.event_log = EventLog()
        for s in self.stringers:
            s.event_log = self.event_log
            # size check up front
            s.local_displacements(self.reference_displacements)

        self.monitors: Dict[int, StringerMonitor] = {s.number: StringerMonitor(s) for s in self.stringers}
        self.history: List[dict] = []
        self.events: List[StateChange] = []
        self.load_factor = 0.0
        self.stopped_early = False
        self.stop_reason: Optional[str] = None

    # ------------------------------------------------------------------

    def _try_step(self, load_factor: float) -> bool:
        u = load_factor * self.reference_displacements
        ok = True
        for s in self.stringers:
            s.analysis(u)
            if not s.trial_converged:
                ok = False
        if not ok:
            for s in self.stringers:
                s.clear_iterations()
        return ok

    def _commit(self, step: int, lvl: int, load_factor: float) -> dict:
        for s in self.stringers:
            s.results(step)
        events = self.event_log.drain()
        self.events.extend(events)
        self.load_factor = float(load_factor)

        for m in self.monitors.values():
            m.add_monitored_value(load_factor)

        rec = {
            "step": int(step),
            "substep_level": int(lvl),
            "load_factor": float(load_factor),
            "forces": {s.number: s.generalized_forces for s in self.stringers},
            "cracked": [e.element for e in events if e.state is ElementState.CONCRETE_CRACKED],
            "yielded": [e.element for e in events if e.state is ElementState.STEEL_YIELDED],
            "crushed": [e.element for e in events if e.state is ElementState.CONCRETE_CRUSHED],
            "events": events,
        }
        self.history.append(rec)
        for e in events:
            print(f"[event] {e.describe()}")
        return rec

    def run(self, load_factors: Sequence[float]) -> List[dict]:
        """Follow ``load_factors`` (increasing or not) and return the history."""
        total_substeps = 0
        max_subdiv = int(self.settings.max_subdiv)

        for istep, lam1 in enumerate(load_factors, start=1):
            if self.stopped_early:
                break
            lam0 = self.load_factor
            stack = [(0, lam0, float(lam1))]

            while stack:
                lvl, la, lb = stack.pop()
                total_substeps += 1
                if self.settings.debug_substeps:
                    print(f"[substep] step={istep:03d} lvl={lvl:02d} lambda={la:.5g} -> {lb:.5g}")
                if total_substeps > self.settings.max_total_substeps:
                    raise RuntimeError(
                        "Anti-hang guardrail triggered: max_total_substeps exceeded.\n"
                        f"step={istep}, lambda0={la:.6e}, lambda1={lb:.6e}, lvl={lvl}"
                    )

                if self._try_step(lb):
                    self._commit(istep, lvl, lb)
                    continue

                if lvl >= max_subdiv:
                    self.stopped_early = True
                    self.stop_reason = (
                        f"no convergence at step {istep} (lambda={lb:.6g}) after {lvl} subdivisions; "
                        f"last converged lambda={self.load_factor:.6g}"
                    )
                    print(f"[analysis] stopped: {self.stop_reason}")
                    stack.clear()
                    break

                lm = 0.5 * (la + lb)
                stack.append((lvl + 1, lm, lb))
                stack.append((lvl + 1, la, lm))

        return self.history

    def monitor(self, number: int) -> StringerMonitor:
        return self.monitors[int(number)]
