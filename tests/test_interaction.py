"""Tests for axial limits and the N-M interaction diagram."""

import pytest

from frc_section.analysis.cross_section_analysis import CrossSectionAnalysis
from frc_section.analysis.capacity import CapacityResult
from frc_section.analysis.interaction import AXIAL_REDUCTION, InteractionDiagram, axial_capacity
from frc_section.analysis.parameters import AnalysisParameters, LimitState
from frc_section.exceptions import InvalidInputError, NumericalDegeneracyError
from frc_section.materials.concrete import Concrete
from frc_section.materials.steel import ReinforcingSteel
from frc_section.section.cross_section import CrossSection
from frc_section.section.geometry import RectangularSection
from frc_section.section.rebar import RebarLayer, Reinforcement


@pytest.fixture
def beam():
    shape = RectangularSection(b=300, h=500)
    reinf = Reinforcement.from_layers(
        shape, ReinforcingSteel(f_yk=500),
        [RebarLayer(depth=50, n_bars=2, bar_diameter=20),
         RebarLayer(depth=450, n_bars=4, bar_diameter=20)],
    )
    return CrossSection.from_shape(shape, Concrete(f_ck=30), reinforcement=reinf, n_layers=50)


class TestAxialCapacity:
    def test_uls(self, beam):
        A_s = beam.steel_area
        f_cd = beam.concrete.f_cd(1.5)
        N_min, N_max = axial_capacity(beam, LimitState.ULS)
        assert N_max == pytest.approx(AXIAL_REDUCTION * A_s * 500 / 1.15 / 1000)
        assert N_min == pytest.approx(-AXIAL_REDUCTION * (150_000 * f_cd + A_s * 500 / 1.15) / 1000)

    def test_sls(self, beam):
        A_s = beam.steel_area
        f_cd = beam.concrete.f_cd(1.0)
        N_min, N_max = axial_capacity(beam, LimitState.SLS)
        assert N_max == pytest.approx(AXIAL_REDUCTION * A_s * 200 / 1000)
        assert N_min == pytest.approx(-AXIAL_REDUCTION * (150_000 * 0.6 * f_cd + A_s * 500) / 1000)

    def test_unreinforced(self):
        section = CrossSection.from_shape(RectangularSection(b=300, h=500), Concrete(f_ck=30), n_layers=50)
        N_min, N_max = axial_capacity(section)
        assert N_max == 0.0
        assert N_min < 0

    def test_max_and_min(self, beam):
        analysis = CrossSectionAnalysis(beam)
        N_min, N_max = analysis.axial_capacity()
        assert analysis.max_axial_capacity() == N_max
        assert analysis.max_axial_capacity(which="min") == N_min
        with pytest.raises(InvalidInputError):
            analysis.max_axial_capacity(which="both")


class TestDiagram:
    def test_levels(self, beam):
        analysis = CrossSectionAnalysis(beam, AnalysisParameters(max_iterations=100))
        diagram = analysis.n_m_diagram(div_N=2)
        assert len(diagram.N) + len(diagram.failed_levels) == 2 * 3
        assert len(diagram.N) == len(diagram.M)
        assert len(diagram.sagging) + len(diagram.hogging) == len(diagram.N)

    def test_branch_order(self, beam):
        analysis = CrossSectionAnalysis(beam, AnalysisParameters(max_iterations=100))
        diagram = analysis.n_m_diagram(div_N=2)
        sagging_N = [n for n, _ in diagram.sagging]
        hogging_N = [n for n, _ in diagram.hogging]
        assert sagging_N == sorted(sagging_N)
        assert hogging_N == sorted(hogging_N, reverse=True)
        assert all(diagram.N_min <= n <= diagram.N_max for n in diagram.N)

    def test_does_not_touch_owner_state(self, beam):
        analysis = CrossSectionAnalysis(beam, AnalysisParameters(max_iterations=100))
        analysis.n_m_diagram(div_N=2)
        assert analysis.result is None
        assert len(analysis._capacity_cache) == 0

    def test_invalid_division(self, beam):
        with pytest.raises(InvalidInputError):
            CrossSectionAnalysis(beam).n_m_diagram(div_N=0)

    def test_symmetric_section_mirrors(self):
        shape = RectangularSection(b=300, h=500)
        reinf = Reinforcement.from_layers(
            shape, ReinforcingSteel(f_yk=500),
            [RebarLayer(depth=50, n_bars=4, bar_diameter=20),
             RebarLayer(depth=450, n_bars=4, bar_diameter=20)],
        )
        section = CrossSection.from_shape(shape, Concrete(f_ck=30), reinforcement=reinf, n_layers=50)
        diagram = CrossSectionAnalysis(section).n_m_diagram(div_N=2)
        mid = diagram.N_min + (diagram.N_max - diagram.N_min) / 2
        sagging = dict(diagram.sagging)
        hogging = dict(diagram.hogging)
        assert sagging[mid] > 0
        assert sagging[mid] == pytest.approx(-hogging[mid], rel=0.02)


def _fake_capacity(failing_level=None):
    def ultimate_capacity(self, forces, update_state=False):
        if failing_level is not None and forces.N == failing_level:
            raise NumericalDegeneracyError("singular")
        Mrd = forces.moment_sign * (500.0 - abs(forces.N) / 10.0)
        return CapacityResult(Mrd=Mrd, kappa=0.0, N=forces.N, iterations=1)
    return ultimate_capacity


class TestDiagramLevels:
    def test_end_levels_are_exact(self, beam, monkeypatch):
        monkeypatch.setattr(CrossSectionAnalysis, "ultimate_capacity", _fake_capacity())
        diagram = CrossSectionAnalysis(beam).n_m_diagram(div_N=7)
        assert diagram.sagging[0][0] == diagram.N_min
        assert diagram.sagging[-1][0] == diagram.N_max
        assert diagram.hogging[0][0] == diagram.N_max
        assert diagram.hogging[-1][0] == diagram.N_min
        assert all(diagram.N_min <= n <= diagram.N_max for n in diagram.N)

    def test_hogging_mirrors_sagging(self, beam, monkeypatch):
        monkeypatch.setattr(CrossSectionAnalysis, "ultimate_capacity", _fake_capacity())
        diagram = CrossSectionAnalysis(beam).n_m_diagram(div_N=4)
        assert len(diagram.sagging) == len(diagram.hogging) == 5
        assert [(n, -m) for n, m in reversed(diagram.hogging)] == diagram.sagging
        assert diagram.failed_levels == []

    def test_failed_level_is_skipped(self, beam, monkeypatch):
        N_min, N_max = axial_capacity(beam)
        failing = N_min + (N_max - N_min) * 1 / 4
        monkeypatch.setattr(CrossSectionAnalysis, "ultimate_capacity", _fake_capacity(failing))
        diagram = CrossSectionAnalysis(beam).n_m_diagram(div_N=4)
        assert diagram.failed_levels == [failing, failing]
        assert failing not in [n for n, _ in diagram.sagging]
        assert failing not in [n for n, _ in diagram.hogging]
        assert len(diagram.N) == 8
        assert diagram.to_dict()["failed_levels"] == [failing, failing]


class TestDiagramResult:
    def test_add(self):
        diagram = InteractionDiagram()
        diagram.add(-100.0, 150.0, diagram.sagging)
        diagram.add(-100.0, -140.0, diagram.hogging)
        assert diagram.N == [-100.0, -100.0]
        assert diagram.M == [150.0, -140.0]
        assert diagram.sagging == [(-100.0, 150.0)]
        assert diagram.to_dict()["M"] == [150.0, -140.0]
