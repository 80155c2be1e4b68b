"""Ratchet behaviour of the integration-point state."""

import numpy as np

from spm_stringer.integration_point import IntegrationPoint


def test_flags_start_false():
    ip = IntegrationPoint(cracking_strain=1e-4, yield_strain=2.5e-3)
    assert ip.uncracked
    assert not ip.cracked_and_not_yielding
    assert not ip.cracked_and_yielding
    assert ip.last_strain == (0.0, 0.0)


def test_verify_cracked_is_irreversible():
    ip = IntegrationPoint(cracking_strain=1e-4, yield_strain=2.5e-3)

    assert not ip.verify_cracked(0.5e-4)
    assert ip.verify_cracked(1e-4)
    # smaller or compressive strains keep the flag
    assert ip.verify_cracked(0.0)
    assert ip.verify_cracked(-1e-3)
    assert ip.cracked_and_not_yielding


def test_verify_yielding_tension_and_compression():
    ip = IntegrationPoint(cracking_strain=1e-4, yield_strain=2.5e-3)
    assert not ip.verify_yielding(2.0e-3)
    assert ip.verify_yielding(-2.5e-3)
    assert ip.verify_yielding(0.0)
    # yielded in compression without cracking
    assert not ip.uncracked
    assert not ip.cracked_and_not_yielding

    ip.verify_cracked(1.0)
    assert ip.cracked_and_yielding


def test_unreinforced_never_yields_by_strain():
    ip = IntegrationPoint(cracking_strain=1e-4, yield_strain=None)
    assert not ip.verify_yielding(1.0)
    assert not ip.verify_yielding(-1.0)

    ip.mark_yielded()
    assert ip.yielded


def test_ratchet_under_random_strain_history():
    rng = np.random.default_rng(0)
    ip = IntegrationPoint(cracking_strain=1e-4, yield_strain=2.5e-3)

    cracked_prev, yielded_prev = False, False
    for e in rng.uniform(-4e-3, 4e-3, size=200):
        ip.verify_cracked(e)
        ip.verify_yielding(e)
        assert ip.cracked or not cracked_prev, "cracked flag reverted"
        assert ip.yielded or not yielded_prev, "yielded flag reverted"
        cracked_prev, yielded_prev = ip.cracked, ip.yielded

    assert ip.cracked and ip.yielded


def test_copy_is_independent():
    ip = IntegrationPoint(cracking_strain=1e-4, yield_strain=2.5e-3, last_strain=(1e-5, 2e-9))
    cp = ip.copy()
    cp.verify_cracked(1.0)
    cp.last_strain = (1.0, 1.0)

    assert ip.uncracked
    assert ip.last_strain == (1e-5, 2e-9)
    assert cp.cracking_strain == ip.cracking_strain
    assert cp.yield_strain == ip.yield_strain
