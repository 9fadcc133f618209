"""Tests for the ultimate moment capacity search.

Hand estimate, 300x500 mm, C30, 4 bars of 20 mm at d = 450 mm, ULS:
  T    = 1257 * 435       = 547 kN (more with strain hardening)
  x    ~ 547e3 / (0.81 * 20 * 300) ~ 113 mm
  M_Rd ~ 547 * (450 - 0.42 * 113) / 1000 ~ 220 kNm
"""

import pytest

from frc_section.analysis.capacity import (
    CapacityCache,
    CapacityResult,
    cache_key,
    seed_curvature,
)
from frc_section.analysis.cross_section_analysis import CrossSectionAnalysis
from frc_section.analysis.parameters import LimitState, SectionForces
from frc_section.materials.concrete import Concrete
from frc_section.materials.steel import ReinforcingSteel
from frc_section.section.cross_section import CrossSection
from frc_section.section.geometry import RectangularSection
from frc_section.section.rebar import RebarLayer, Reinforcement


def _section(layers):
    shape = RectangularSection(b=300, h=500)
    reinf = Reinforcement.from_layers(shape, ReinforcingSteel(f_yk=500), layers)
    return CrossSection.from_shape(shape, Concrete(f_ck=30), reinforcement=reinf, n_layers=50)


@pytest.fixture
def beam():
    return _section([RebarLayer(depth=450, n_bars=4, bar_diameter=20)])


@pytest.fixture
def symmetric_beam():
    return _section([
        RebarLayer(depth=50, n_bars=4, bar_diameter=20),
        RebarLayer(depth=450, n_bars=4, bar_diameter=20),
    ])


class TestUltimateCapacity:
    def test_plausible_capacity(self, beam):
        cap = CrossSectionAnalysis(beam).ultimate_capacity(SectionForces(N=0, Mz=150))
        assert cap.converged
        assert 190 < cap.Mrd < 260
        assert cap.kappa < 0
        assert cap.UR_M == pytest.approx(150 / cap.Mrd)

    def test_independent_of_applied_moment(self, beam):
        cap_1 = CrossSectionAnalysis(beam).ultimate_capacity(SectionForces(N=0, Mz=1))
        cap_1000 = CrossSectionAnalysis(beam).ultimate_capacity(SectionForces(N=0, Mz=1000))
        assert cap_1.Mrd == pytest.approx(cap_1000.Mrd, rel=0.01)

    def test_state_at_capacity_is_fully_utilized(self, beam):
        analysis = CrossSectionAnalysis(beam)
        cap = analysis.ultimate_capacity(SectionForces(N=0, Mz=150), update_state=True)
        assert analysis.result.kappa == cap.kappa
        assert analysis.result.UR_total == pytest.approx(1.0, abs=0.02)

    def test_symmetric_section(self, symmetric_beam):
        analysis = CrossSectionAnalysis(symmetric_beam)
        sagging = analysis.ultimate_capacity(SectionForces(N=0, Mz=1))
        hogging = analysis.ultimate_capacity(SectionForces(N=0, Mz=-1))
        assert sagging.Mrd > 0
        assert sagging.Mrd == pytest.approx(-hogging.Mrd, rel=0.01)

    def test_compression_raises_capacity(self, symmetric_beam):
        analysis = CrossSectionAnalysis(symmetric_beam)
        pure = analysis.ultimate_capacity(SectionForces(N=0, Mz=1))
        compressed = analysis.ultimate_capacity(SectionForces(N=-500, Mz=1))
        assert compressed.Mrd > pure.Mrd


class TestCapacityCache:
    def test_second_call_does_no_iterations(self, beam):
        analysis = CrossSectionAnalysis(beam)
        first = analysis.ultimate_capacity(SectionForces(N=0, Mz=150))
        second = analysis.ultimate_capacity(SectionForces(N=0, Mz=100))
        assert first.iterations > 0
        assert second.iterations == 0
        assert second.Mrd == first.Mrd
        assert second.UR_M == pytest.approx(100 / first.Mrd)

    def test_sign_is_part_of_key(self, beam):
        analysis = CrossSectionAnalysis(beam)
        analysis.ultimate_capacity(SectionForces(N=0, Mz=150))
        assert (0, -1, LimitState.ULS) not in analysis._capacity_cache
        assert (0, 1, LimitState.ULS) in analysis._capacity_cache

    def test_keys_do_not_collide(self):
        cache = CapacityCache()
        stored = CapacityResult(Mrd=100.0, kappa=-1e-5, N=15, iterations=7)
        cache.put(SectionForces(N=15, Mz=-1), stored)
        assert cache.get(SectionForces(N=1, Mz=5)) is None
        assert cache.get(SectionForces(N=15, Mz=-3)) is not None
        assert cache_key(SectionForces(N=15, Mz=-1)) != cache_key(SectionForces(N=1, Mz=5))
        assert len(cache) == 1

    def test_zero_moment_counts_as_sagging(self):
        assert cache_key(SectionForces(N=0, Mz=0)) == (0, 1, LimitState.ULS)

    def test_limit_state_is_part_of_key(self):
        cache = CapacityCache()
        cache.put(SectionForces(N=0, Mz=1, limit_state=LimitState.SLS), CapacityResult(80.0, -1e-5, 0, 9))
        assert cache.get(SectionForces(N=0, Mz=1, limit_state=LimitState.ULS)) is None
        assert cache.get(SectionForces(N=0, Mz=2, limit_state=LimitState.SLS)).Mrd == 80.0

    def test_limit_states_cached_separately(self, beam):
        analysis = CrossSectionAnalysis(beam)
        sls = analysis.ultimate_capacity(SectionForces(N=0, Mz=1, limit_state=LimitState.SLS))
        uls = analysis.ultimate_capacity(SectionForces(N=0, Mz=1, limit_state=LimitState.ULS))
        assert uls.iterations > 0
        assert len(analysis._capacity_cache) == 2
        assert uls.Mrd != sls.Mrd


class TestCapacityResult:
    def test_utilization(self):
        cap = CapacityResult(Mrd=200.0, kappa=-1e-5, N=0, iterations=5)
        assert cap.utilization(100) == 0.5
        assert cap.to_dict()["Mrd"] == 200.0

    def test_zero_capacity(self):
        cap = CapacityResult(Mrd=0.0, kappa=0.0, N=0, iterations=5)
        assert cap.utilization(10) == float("inf")
        assert cap.utilization(0) == 0.0


class TestSeed:
    def test_sign_against_moment(self, beam):
        assert seed_curvature(beam, SectionForces(N=0, Mz=10)) == pytest.approx(-7.2e-4 / 500)
        assert seed_curvature(beam, SectionForces(N=0, Mz=-10)) == pytest.approx(7.2e-4 / 500)

    def test_floor_under_compression(self, beam):
        kappa = seed_curvature(beam, SectionForces(N=-10_000, Mz=10, limit_state=LimitState.ULS))
        assert kappa == pytest.approx(-1e-10)
