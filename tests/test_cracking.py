"""Tests for the cracking moment and minimum reinforcement.

Benchmark, 300x500 mm, C30 (f_ctm = 2.90 MPa), 4 bars of 20 mm at 450 mm:
  W    = 300 * 500^2 / 6          = 12.5e6 mm^3
  M_cr ~ f_ctm * W                ~ 36 kNm (a little more with the bars)
  k    = 1 - (500 - 300) * 0.35 / 500 = 0.86
"""

import types

import pytest

from frc_section.analysis.cross_section_analysis import CrossSectionAnalysis
from frc_section.analysis.parameters import SectionForces
from frc_section.exceptions import NumericalDegeneracyError
from frc_section.materials.concrete import Concrete
from frc_section.materials.fibres import FibreReinforcement
from frc_section.materials.steel import ReinforcingSteel
from frc_section.section.cross_section import CrossSection
from frc_section.section.geometry import RectangularSection
from frc_section.section.rebar import RebarLayer, Reinforcement


@pytest.fixture
def beam():
    shape = RectangularSection(b=300, h=500)
    reinf = Reinforcement.from_layers(
        shape, ReinforcingSteel(f_yk=500), [RebarLayer(depth=450, n_bars=4, bar_diameter=20)]
    )
    return CrossSection.from_shape(shape, Concrete(f_ck=30), reinforcement=reinf, n_layers=50)


@pytest.fixture
def weak_frc():
    return CrossSection.from_shape(
        RectangularSection(b=300, h=500), Concrete(f_ck=30),
        fibres=FibreReinforcement(f_R1k=0.5, f_R3k=0.3), n_layers=50,
    )


class TestCrackingMoment:
    def test_scenario(self, beam):
        cr = CrossSectionAnalysis(beam).cracking_moment(SectionForces(N=0, Mz=150))
        assert cr.behavior == "bending"
        assert 25 < cr.M_cr < 60
        assert cr.kappa_cr < 0
        assert cr.A_st == pytest.approx(beam.steel_area)
        assert 60_000 < cr.A_ct < 75_000

    def test_hogging_sign(self, beam):
        cr = CrossSectionAnalysis(beam).cracking_moment(SectionForces(N=0, Mz=-10))
        assert cr.kappa_cr > 0
        assert cr.M_cr < 0
        assert cr.A_st == 0.0

    def test_height_factor_raises_moment(self, beam):
        analysis = CrossSectionAnalysis(beam)
        plain = analysis.cracking_moment(SectionForces(N=0, Mz=1))
        factored = analysis.cracking_moment(SectionForces(N=0, Mz=1), with_height_factor=True)
        assert factored.M_cr > plain.M_cr

    def test_does_not_touch_owner_state(self, beam):
        analysis = CrossSectionAnalysis(beam)
        analysis.cracking_moment(SectionForces(N=0, Mz=1))
        assert analysis.result is None

    def test_flat_probe_state(self, beam, monkeypatch):
        flat = types.SimpleNamespace(sig_c_avg=-2.0, sig_c_max=-2.0)
        monkeypatch.setattr(CrossSectionAnalysis, "solve_with_curvature", lambda self, forces, kappa: flat)
        with pytest.raises(NumericalDegeneracyError):
            CrossSectionAnalysis(beam).cracking_moment(SectionForces(N=-500, Mz=0))


class TestMinimumReinforcement:
    def test_scenario_verified(self, beam):
        m = CrossSectionAnalysis(beam).minimum_reinforcement(SectionForces(N=0, Mz=150))
        assert m.k == pytest.approx(0.86)
        assert m.k_c == pytest.approx(0.4)
        assert 0 < m.As_min < m.A_st
        assert m.verified

    def test_admissible_stress(self, beam):
        analysis = CrossSectionAnalysis(beam)
        default = analysis.minimum_reinforcement(SectionForces(N=0, Mz=150))
        low = analysis.minimum_reinforcement(SectionForces(N=0, Mz=150), sigma_s=250)
        assert low.As_min == pytest.approx(2 * default.As_min)

    def test_unreinforced_weak_fibres(self, weak_frc):
        m = CrossSectionAnalysis(weak_frc).minimum_reinforcement(SectionForces(N=0, Mz=10))
        assert m.A_st == 0.0
        assert m.As_min > 0
        assert not m.verified
