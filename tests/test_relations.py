"""Force-to-strain relations (MCFT / DSFM) at one integration point."""

import math

import numpy as np
import pytest

from conftest import bar_diameter_for_area
from spm_stringer.integration_point import IntegrationPoint
from spm_stringer.materials import (
    ConcreteParameters,
    SteelParameters,
    UniaxialConcrete,
    UniaxialReinforcement,
)
from spm_stringer.relations import DSFMRelations, MCFTRelations, relations_for
from spm_stringer.settings import StringerSettings


def fresh_ip(rel):
    cap = rel.capacities
    return IntegrationPoint(cracking_strain=cap.cracking_strain, yield_strain=cap.yield_strain)


def reinforced_relations(model="mcft", settings=StringerSettings()):
    p = ConcreteParameters(fc=30.0)
    bars = UniaxialReinforcement(4, 10.0, SteelParameters(), concrete_area=1.0e4)
    concrete = UniaxialConcrete(p, 1.0e4 - bars.area, model, bars)
    return relations_for(model, concrete, bars, settings)


def test_factory_selects_variant():
    assert isinstance(reinforced_relations("mcft"), MCFTRelations)
    assert isinstance(reinforced_relations("DSFM"), DSFMRelations)
    with pytest.raises(ValueError):
        reinforced_relations("mcft-2d")


def test_zero_force_identity():
    rel = reinforced_relations()
    ip = fresh_ip(rel)
    t1 = rel.capacities.axial_stiffness

    for N in (0.0, 1e-7, -1e-6):
        e, de = rel.stringer_strain(N, ip)
        assert e == 0.0
        assert de == pytest.approx(1.0 / t1)
    assert ip.uncracked and not ip.yielded


def test_nan_force_returns_last_converged():
    rel = reinforced_relations()
    ip = fresh_ip(rel)
    first = rel.stringer_strain(1000.0, ip)

    assert rel.stringer_strain(float("nan"), ip) == first
    assert ip.last_strain == first


def test_unreinforced_uncracked_scenario():
    # EA = 1e7 with cracking strain 0.6: N = 5e6 stays uncracked
    p = ConcreteParameters(fc=30.0, ft=6.0e6, Ec=1.0e7)
    concrete = UniaxialConcrete(p, area=1.0)
    rel = MCFTRelations(concrete)
    ip = fresh_ip(rel)

    e, de = rel.stringer_strain(5.0e6, ip)

    assert e == pytest.approx(0.5)
    assert de == pytest.approx(1.0e-7)
    assert ip.uncracked
    assert ip.last_strain == (e, de)


def test_reinforced_yield_scenario():
    # Nyr = 2e5 (400 mm² at 500 MPa), N = 3e5: no root below ey, section yields
    p = ConcreteParameters(fc=30.0)
    bars = UniaxialReinforcement(1, bar_diameter_for_area(400.0), SteelParameters(), concrete_area=1.0e4)
    concrete = UniaxialConcrete(p, 1.0e4, "mcft", bars)
    rel = MCFTRelations(concrete, bars)
    cap = rel.capacities
    assert cap.yield_force == pytest.approx(2.0e5)

    # the cracked branch really has no root
    assert rel.solver.solve(3.0e5, cap.cracking_strain, cap.yield_strain) is None

    ip = fresh_ip(rel)
    e, de = rel.stringer_strain(3.0e5, ip)

    assert ip.cracked and ip.yielded
    assert e == pytest.approx(cap.yield_strain + (3.0e5 - cap.yield_force) / cap.axial_stiffness)
    assert de == pytest.approx(1.0 / cap.axial_stiffness)


def test_cracked_branch_inverts_section_force():
    rel = reinforced_relations(settings=StringerSettings(strain_tol=1e-12))
    cap = rel.capacities
    ip = fresh_ip(rel)

    N = 0.5 * cap.yield_force
    e, de = rel.stringer_strain(N, ip)

    assert ip.cracked_and_not_yielding
    assert cap.cracking_strain < e < cap.yield_strain
    assert rel.section_force(e) == pytest.approx(N, rel=1e-6)
    assert de > 0.0


def test_continuity_at_cracking():
    rel = reinforced_relations(settings=StringerSettings(strain_tol=1e-12))
    cap = rel.capacities
    N_cr = cap.axial_stiffness * cap.cracking_strain

    ip_below = fresh_ip(rel)
    e_below, _ = rel.stringer_strain(N_cr * (1.0 - 1e-9), ip_below)
    ip_above = fresh_ip(rel)
    e_above, _ = rel.stringer_strain(N_cr * (1.0 + 1e-9), ip_above)

    assert ip_below.uncracked
    assert ip_above.cracked
    assert abs(e_above - e_below) <= 1e-4


def test_cracked_state_skips_uncracked_branch():
    rel = reinforced_relations(settings=StringerSettings(strain_tol=1e-12))
    cap = rel.capacities
    ip = fresh_ip(rel)
    ip.verify_cracked(1.0)

    # small tension on a cracked section is carried mostly by steel
    N = 0.2 * cap.cracking_force
    e, _ = rel.stringer_strain(N, ip)
    assert e >= cap.cracking_strain


def test_mcft_compression_inverts_parabola():
    rel = reinforced_relations()
    ip = fresh_ip(rel)
    N = -1.0e5

    e, de = rel.stringer_strain(N, ip)

    assert e < 0.0
    assert not ip.yielded
    assert rel.section_force(e) == pytest.approx(N, rel=1e-9)
    # flexibility = 1 / tangent of the section force
    h = 1e-9
    tangent = (rel.section_force(e + h) - rel.section_force(e - h)) / (2 * h)
    assert de == pytest.approx(1.0 / tangent, rel=1e-4)


def test_compression_continuous_at_crushing_force():
    for reinforced in (True, False):
        if reinforced:
            rel = reinforced_relations()
        else:
            rel = MCFTRelations(UniaxialConcrete(ConcreteParameters(fc=30.0), 1.0e4))
        Nt = rel.capacities.max_compressive_force

        e_crushed, de_crushed = rel.stringer_strain(Nt, fresh_ip(rel))
        e_intact, _ = rel.stringer_strain(Nt * (1.0 - 1e-9), fresh_ip(rel))

        assert abs(e_crushed - e_intact) <= 1e-6, f"reinforced={reinforced}"
        assert de_crushed == pytest.approx(1.0 / rel.capacities.axial_stiffness)


def test_crushing_branch_is_linear_beyond_nt():
    rel = reinforced_relations()
    cap = rel.capacities
    Nt = cap.max_compressive_force

    e1, _ = rel.stringer_strain(Nt, fresh_ip(rel))
    e2, _ = rel.stringer_strain(Nt - 1.0e4, fresh_ip(rel))
    assert e2 - e1 == pytest.approx(-1.0e4 / cap.axial_stiffness)


def test_compression_yielding_sets_flag():
    rel = reinforced_relations()
    cap = rel.capacities
    ip = fresh_ip(rel)

    e, _ = rel.stringer_strain(cap.max_compressive_force * 1.05, ip)
    assert e < cap.peak_strain
    assert ip.yielded
    assert not ip.cracked
    assert not ip.uncracked


def test_tension_after_compression_yield_uses_yielding_branch():
    rel = reinforced_relations()
    cap = rel.capacities
    ip = fresh_ip(rel)
    rel.stringer_strain(cap.max_compressive_force * 1.05, ip)
    assert ip.yielded and not ip.cracked

    N = 1000.0
    e, de = rel.stringer_strain(N, ip)

    assert e == pytest.approx(cap.yield_strain + (N - cap.yield_force) / cap.axial_stiffness)
    assert de == pytest.approx(1.0 / cap.axial_stiffness)
    # far from the uncracked closed form
    assert e > 100.0 * N / cap.axial_stiffness


def test_dsfm_compression_matches_closed_form():
    settings = StringerSettings(strain_tol=1e-12)
    mcft = reinforced_relations("mcft", settings)
    dsfm = reinforced_relations("dsfm", settings)
    N = -1.0e5

    e_m, de_m = mcft.stringer_strain(N, fresh_ip(mcft))
    e_d, de_d = dsfm.stringer_strain(N, fresh_ip(dsfm))

    assert e_d == pytest.approx(e_m, abs=1e-9)
    assert de_d == pytest.approx(de_m, rel=1e-4)


def test_dsfm_compression_beyond_capacity_keeps_last():
    dsfm = reinforced_relations("dsfm")
    ip = fresh_ip(dsfm)
    last = dsfm.stringer_strain(-1.0e5, ip)

    # far beyond the section capacity: no root in [ecu, 0]
    assert dsfm.stringer_strain(-1.0e7, ip) == last


def test_tension_flexibility_is_positive_and_finite():
    rel = reinforced_relations()
    ip = fresh_ip(rel)
    for N in np.linspace(1.0e3, 2.0 * rel.capacities.yield_force, 15):
        e, de = rel.stringer_strain(N, ip)
        assert math.isfinite(e) and math.isfinite(de)
        assert de > 0.0
