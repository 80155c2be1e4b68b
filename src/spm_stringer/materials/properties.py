"""
Material Properties Module

Formulas for the basic concrete and steel properties used by the stringer
materials. All values in MPa unless noted.
"""

import re

import numpy as np


def parse_concrete_class(concrete_class: str):
    """
    Split a Eurocode class string into characteristic strengths.

    Example: "C30/37" -> (30.0, 37.0)
    """
    m = re.match(r"\s*C\s*(\d+(?:\.\d+)?)\s*/\s*(\d+(?:\.\d+)?)\s*$", concrete_class, flags=re.I)
    if not m:
        raise ValueError(f"Unsupported concrete class '{concrete_class}'. Expected e.g. 'C30/37'.")
    return float(m.group(1)), float(m.group(2))


def ec2_concrete(concrete_class: str, alpha_E: float = 1.0):
    """
    Basic fib MC2010 properties of a class string such as "C30/37".

    f_cm = f_ck + 8 MPa. The tensile strength switches from the power law to
    the logarithmic law above C50. ``alpha_E`` scales the modulus for the
    aggregate type (1.0 for quartzite).

    Returns a dict with f_ck, f_cm, f_ctm, E_ci (tangent) and E_c (secant).
    """
    f_ck, _ = parse_concrete_class(concrete_class)
    f_cm = f_ck + 8.0

    if f_ck > 50.0:
        f_ctm = 2.12 * np.log(1.0 + 0.1 * f_cm)
    else:
        f_ctm = 0.3 * f_ck ** (2.0 / 3.0)

    E_ci = 21500.0 * alpha_E * (f_cm / 10.0) ** (1.0 / 3.0)
    E_c = min(0.8 + 0.2 * f_cm / 88.0, 1.0) * E_ci

    return {
        "class": concrete_class.strip(),
        "f_ck": f_ck,
        "f_cm": f_cm,
        "E_ci": float(E_ci),
        "E_c": float(E_c),
        "f_ctm": float(f_ctm),
    }


def mcft_tensile_strength(f_c):
    """Cracking stress used by the MCFT (Vecchio & Collins): 0.33 sqrt(fc)."""
    return 0.33 * np.sqrt(f_c)


def mcft_elastic_modulus(f_c):
    """Initial modulus used by the MCFT: 3320 sqrt(fc) + 6900."""
    return 3320.0 * np.sqrt(f_c) + 6900.0


def parabola_peak_strain(f_c, E_c):
    """
    Peak strain of the Hognestad parabola whose initial tangent is E_c.

    Returns a negative (compressive) strain.
    """
    return -2.0 * f_c / E_c


def crack_spacing(bar_diameter, ratio):
    """
    Average crack spacing [mm] according to Kaklauskas (2019):

        sm = 21 mm + 0.155 phi / rho

    Falls back to 21 mm when there is no reinforcement.
    """
    if bar_diameter is None or ratio is None or bar_diameter <= 0.0 or ratio <= 0.0:
        return 21.0
    return 21.0 + 0.155 * bar_diameter / ratio
