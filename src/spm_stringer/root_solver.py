"""Bracketed force-strain inversion (Brent's method)."""

from __future__ import annotations

from typing import Callable, Optional, Tuple

import numpy as np
from scipy.optimize import brentq


def central_difference(fun: Callable[[float], float], x: float, h: float = 1e-8) -> float:
    """Second-order central difference of ``fun`` at ``x``."""
    return float((fun(x + h) - fun(x - h)) / (2.0 * h))


class ForceStrainSolver:
    """Invert a section force function ``N(e)``.

    Parameters
    ----------
    force:
        Callable returning the total section force [N] for a strain.
    strain_tol:
        Absolute strain tolerance of the root search.
    max_iterations:
        Hard iteration cap of the root search.
    fd_step:
        Step of the central difference used for the flexibility.
    """

    def __init__(
        self,
        force: Callable[[float], float],
        strain_tol: float = 1e-4,
        max_iterations: int = 1000,
        fd_step: float = 1e-8,
    ):
        self.force = force
        self.strain_tol = float(strain_tol)
        self.max_iterations = int(max_iterations)
        self.fd_step = float(fd_step)

    def solve(self, target: float, lower: float, upper: float) -> Optional[Tuple[float, float]]:
        """Return ``(strain, flexibility)`` with ``force(strain) = target``.

        ``None`` when the bracket does not change sign, the iteration cap is
        hit, or the derivative at the root is zero / not finite.
        """
        a, b = (float(lower), float(upper)) if lower <= upper else (float(upper), float(lower))

        def residual(e: float) -> float:
            return float(target) - float(self.force(e))

        ra = residual(a)
        rb = residual(b)
        if not (np.isfinite(ra) and np.isfinite(rb)):
            return None
        if ra * rb > 0.0:
            return None

        try:
            e = brentq(residual, a, b, xtol=self.strain_tol, maxiter=self.max_iterations)
        except (ValueError, RuntimeError):
            return None

        d = central_difference(self.force, e, self.fd_step)
        if not np.isfinite(d) or d == 0.0:
            return None
        return float(e), float(1.0 / d)
