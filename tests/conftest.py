"""
Pytest configuration for spm-stringer tests.

Automatically adds src/ to sys.path so tests can import spm_stringer
without PYTHONPATH, and provides the stringer fixtures shared by the tests.
"""

import math
import os
import sys

import pytest

repo_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
src_path = os.path.join(repo_root, 'src')

if src_path not in sys.path:
    sys.path.insert(0, src_path)


from spm_stringer.geometry import CrossSection, StringerGeometry  # noqa: E402
from spm_stringer.materials import (  # noqa: E402
    ConcreteParameters,
    SteelParameters,
    UniaxialReinforcement,
)
from spm_stringer.stringer import NonlinearStringer  # noqa: E402


def bar_diameter_for_area(area, number_of_bars=1):
    """Bar diameter giving a total steel area ``area`` [mm²]."""
    return math.sqrt(4.0 * area / (number_of_bars * math.pi))


@pytest.fixture
def concrete30():
    return ConcreteParameters(fc=30.0)


@pytest.fixture
def bars_4phi10():
    return UniaxialReinforcement(4, 10.0, SteelParameters(), concrete_area=1.0e4)


@pytest.fixture
def make_stringer(concrete30):
    """Horizontal 1000 mm stringer, 100 x 100 mm, grips (1, 2, 3)."""

    def _make(reinforced=True, model="mcft", settings=None, number=1, **kw):
        geom = StringerGeometry((0.0, 0.0), (1000.0, 0.0), CrossSection(100.0, 100.0))
        reinf = UniaxialReinforcement(4, 10.0, SteelParameters()) if reinforced else None
        extra = {} if settings is None else {"settings": settings}
        return NonlinearStringer(number, (1, 2, 3), geom, concrete30, model, reinf, **extra, **kw)

    return _make


def axial_displacements(d):
    """Global displacements (6 DoFs) stretching a horizontal stringer by ``d``."""
    return [0.0, 0.0, 0.5 * d, 0.0, d, 0.0]
