"""Load-path driver, monitors and run summaries."""

import numpy as np
import pytest

from spm_stringer.analysis import StringerAnalysis
from spm_stringer.events import EventLog
from spm_stringer.geometry import CrossSection, StringerGeometry
from spm_stringer.materials import ConcreteParameters, UniaxialReinforcement
from spm_stringer.monitor import COLUMNS, StringerMonitor
from spm_stringer.settings import AnalysisSettings
from spm_stringer.stringer import NonlinearStringer
from spm_stringer.utils.run_info import print_run_header, print_stringer_state, print_stringer_summary


def two_stringers():
    section = CrossSection(100.0, 100.0)
    concrete = ConcreteParameters(fc=30.0)
    s1 = NonlinearStringer(
        1, (1, 2, 3), StringerGeometry((0.0, 0.0), (1000.0, 0.0), section), concrete,
        reinforcement=UniaxialReinforcement(4, 10.0),
    )
    s2 = NonlinearStringer(
        2, (3, 4, 5), StringerGeometry((1000.0, 0.0), (2000.0, 0.0), section), concrete,
        reinforcement=UniaxialReinforcement(4, 10.0),
    )
    return s1, s2


def uniform_stretch(eps, xs=(0.0, 500.0, 1000.0, 1500.0, 2000.0)):
    u = np.zeros(2 * len(xs))
    u[0::2] = eps * np.asarray(xs)
    return u


class FakeStringer:
    """Converges only for load increments up to ``max_jump``."""

    def __init__(self, number, max_jump):
        self.number = number
        self.max_jump = max_jump
        self.event_log = EventLog()
        self.committed = 0.0
        self.trial = None
        self.generalized_forces = (0.0, 0.0)
        self.strains = np.zeros(3)
        self.crack_openings = np.zeros(3)

    def local_displacements(self, u):
        return np.asarray(u[:3], dtype=float)

    def analysis(self, u):
        lam = float(u[0])
        self.trial = lam if abs(lam - self.committed) <= self.max_jump + 1e-12 else float("nan")

    @property
    def trial_converged(self):
        return self.trial is None or not np.isnan(self.trial)

    def clear_iterations(self):
        self.trial = None

    def results(self, load_step=None):
        if self.trial is not None:
            self.committed = self.trial
            self.generalized_forces = (self.trial, self.trial)
        self.trial = None
        return []


def test_driver_commits_each_step_and_reports_cracking():
    s1, s2 = two_stringers()
    ana = StringerAnalysis([s1, s2], uniform_stretch(1.0e-3))

    history = ana.run([0.25, 0.5, 1.0])

    assert [h["step"] for h in history] == [1, 2, 3]
    assert [h["load_factor"] for h in history] == [0.25, 0.5, 1.0]
    assert sorted(history[0]["cracked"]) == [1, 2]
    assert history[1]["cracked"] == [] and history[2]["cracked"] == []
    assert not ana.stopped_early
    assert ana.load_factor == 1.0
    assert s1.event_log is ana.event_log is s2.event_log
    assert len(ana.event_log) == 0

    N1, N3 = history[-1]["forces"][1]
    assert N1 > 0.0 and N3 > 0.0


def test_monitor_records_each_converged_step():
    s1, s2 = two_stringers()
    ana = StringerAnalysis([s1, s2], uniform_stretch(1.0e-3))
    ana.run([0.5, 1.0])

    mon = ana.monitor(1)
    arr = mon.as_array()
    assert arr.shape == (2, len(COLUMNS))
    assert np.allclose(arr[:, 0], [0.5, 1.0])
    assert np.allclose(arr[:, 1], [0.5e-3, 1.0e-3])
    assert np.all(arr[:, 5] > 0.0)

    df = mon.to_frame()
    assert list(df.columns) == list(COLUMNS)
    assert len(df) == 2
    assert df["max_crack"].iloc[-1] > df["max_crack"].iloc[0]


def test_empty_monitor():
    s1, _ = two_stringers()
    mon = StringerMonitor(s1)
    assert mon.as_array().shape == (0, len(COLUMNS))
    assert mon.to_frame().empty


def test_driver_bisects_non_converged_steps():
    fakes = [FakeStringer(1, 0.3), FakeStringer(2, 0.3)]
    ana = StringerAnalysis(fakes, np.ones(3))

    history = ana.run([1.0])

    assert [h["load_factor"] for h in history] == pytest.approx([0.25, 0.5, 0.75, 1.0])
    assert all(h["step"] == 1 for h in history)
    assert all(h["substep_level"] == 2 for h in history)
    assert not ana.stopped_early


def test_driver_stops_when_bisection_is_exhausted():
    fakes = [FakeStringer(1, 0.3)]
    ana = StringerAnalysis(fakes, np.ones(3), AnalysisSettings(max_subdiv=1))

    history = ana.run([1.0, 2.0])

    assert history == []
    assert ana.stopped_early
    assert "step 1" in ana.stop_reason
    assert ana.load_factor == 0.0
    assert fakes[0].committed == 0.0


def test_driver_substep_guardrail():
    fakes = [FakeStringer(1, 0.01)]
    ana = StringerAnalysis(fakes, np.ones(3), AnalysisSettings(max_subdiv=10, max_total_substeps=5))
    with pytest.raises(RuntimeError):
        ana.run([1.0])


def test_driver_input_validation():
    with pytest.raises(ValueError):
        StringerAnalysis([], np.zeros(6))
    s1, s2 = two_stringers()
    with pytest.raises(ValueError):
        StringerAnalysis([s1, s2], np.zeros(6))
    with pytest.raises(ValueError):
        AnalysisSettings(max_total_substeps=0)


def test_run_info_prints(capsys):
    s1, s2 = two_stringers()
    StringerAnalysis([s1, s2], uniform_stretch(1.0e-3)).run([1.0])

    print_run_header("stringers")
    print_stringer_summary(s1)
    print_stringer_state(s1)
    print_stringer_summary(NonlinearStringer(
        3, (1, 2, 3), StringerGeometry((0.0, 0.0), (1000.0, 0.0), CrossSection(100.0, 100.0)),
        ConcreteParameters(fc=30.0),
    ))

    out = capsys.readouterr().out
    assert "[run] stringers" in out
    assert "[section]" in out
    assert "cracked=yes" in out
    assert "reinforcement: none" in out
    assert "[event]" in out
