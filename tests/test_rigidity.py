"""Tests for section rigidity and the linear strain-plane solve.

A plain 300x500 rectangle with a uniform modulus E:
  R_A  = E * 150000
  R_Bz = 0 (symmetric about the reference axis)
  R_Iz = E * b h^3 / 12 (minus the midpoint-rule error)
"""

import pytest

from frc_section.analysis.parameters import AnalysisParameters, SectionForces
from frc_section.analysis.rigidity import (
    Rigidity,
    StrainPlane,
    compute_rigidity,
    strain_from_curvature,
    strain_from_forces,
)
from frc_section.exceptions import NumericalDegeneracyError
from frc_section.materials.concrete import Concrete
from frc_section.section.cross_section import CrossSection
from frc_section.section.geometry import RectangularSection

E = 30_000.0


@pytest.fixture
def plain():
    shape = RectangularSection(b=300, h=500)
    return CrossSection.from_shape(shape, Concrete(f_ck=30), n_layers=100)


@pytest.fixture
def rigidity(plain):
    return compute_rigidity(plain, [E] * len(plain.slices), [])


class TestRigidity:
    def test_sums(self, rigidity):
        assert rigidity.R_A == pytest.approx(E * 150_000)
        assert rigidity.R_Bz == pytest.approx(0, abs=1e-3 * E)
        assert rigidity.R_Iz == pytest.approx(E * 300 * 500 ** 3 / 12, rel=1e-3)

    def test_pure_axial(self, rigidity):
        plane = strain_from_forces(rigidity, N=-1500, Mz=0)
        assert plane.eps_ref == pytest.approx(-1500e3 / (E * 150_000))
        assert plane.kappa_z == pytest.approx(0, abs=1e-15)
        assert plane.M is None

    def test_pure_bending(self, rigidity):
        plane = strain_from_forces(rigidity, N=0, Mz=100)
        assert plane.eps_ref == pytest.approx(0, abs=1e-12)
        assert plane.kappa_z == pytest.approx(100e6 / rigidity.R_Iz)

    def test_biaxial_matches_uniaxial_when_symmetric(self, plain):
        # Three columns give a non-zero R_Iy
        slices = RectangularSection(b=300, h=500).discretise(100, 3)
        section = CrossSection(plain.shape, plain.concrete, plain.fibres, plain.reinforcement, slices)
        r = compute_rigidity(section, [E] * len(slices), [])
        plane = strain_from_forces(r, N=-100, Mz=50, My=10)
        assert plane.kappa_z == pytest.approx(50e6 / r.R_Iz, rel=1e-6)
        assert plane.kappa_y == pytest.approx(10e6 / r.R_Iy, rel=1e-6)

    def test_curvature_mode_moment(self, rigidity):
        kappa = -1e-6
        plane = strain_from_curvature(rigidity, N=0, kappa=kappa)
        assert plane.kappa_z == kappa
        assert plane.M == pytest.approx(rigidity.R_Iz * kappa * 1e-6, rel=1e-6)

    def test_strain_at_point(self):
        plane = StrainPlane(eps_ref=1e-4, kappa_z=-1e-6, kappa_y=2e-7)
        assert plane.strain(100, 50) == pytest.approx(1e-4 - 1e-4 + 1e-5)

    def test_singular_system(self):
        with pytest.raises(NumericalDegeneracyError):
            strain_from_forces(Rigidity(0, 0, 0, 0, 0, 0), N=10, Mz=10)

    def test_singular_biaxial(self):
        with pytest.raises(NumericalDegeneracyError):
            strain_from_forces(Rigidity(0, 0, 0, 0, 0, 0), N=10, Mz=10, My=5)

    def test_zero_axial_rigidity(self):
        with pytest.raises(NumericalDegeneracyError):
            strain_from_curvature(Rigidity(0, 0, 0, 1, 1, 0), N=10, kappa=1e-6)


class TestParameters:
    def test_defaults(self):
        p = AnalysisParameters()
        assert p.code.value == "fib"
        assert p.max_iterations == 1000
        assert p.crack_limit == 0.3

    def test_forces_roundtrip(self):
        f = SectionForces(N=-100, Mz=50, limit_state="SLS", cot_theta=2.0)
        f2 = SectionForces.from_dict(f.to_dict())
        assert f2 == f
