"""Tests for material constitutive models.

Hand-check values for C30:
  f_ctm = 0.3 * 30^(2/3)      = 2.896 MPa
  E_cm  = 22000 * (38/10)^0.3 = 32837 MPa
  f_cd  = 30 / 1.5            = 20 MPa
"""

import math

import pytest

from frc_section.exceptions import InvalidInputError
from frc_section.materials.concrete import Concrete, ConcreteCurve
from frc_section.materials.fibres import FibreReinforcement
from frc_section.materials.steel import DuctilityClass, ReinforcingSteel


class TestConcrete:
    def test_derived_properties(self):
        c = Concrete(f_ck=30)
        assert c.f_cm == 38
        assert c.f_ctm == pytest.approx(2.896, rel=1e-3)
        assert c.f_ctk == pytest.approx(0.7 * c.f_ctm)
        assert c.E_cm == pytest.approx(32837, rel=1e-3)
        assert c.eps_cu3 == pytest.approx(0.0035)
        assert c.eps_c2 == pytest.approx(0.002)

    def test_high_strength_tensile(self):
        c = Concrete(f_ck=60)
        assert c.f_ctm == pytest.approx(2.12 * math.log(7.8))
        assert c.eps_cu3 < 0.0035

    def test_design_strengths(self):
        c = Concrete(f_ck=30)
        assert c.f_cd(1.5) == pytest.approx(20.0)
        assert c.f_ctd(1.5) == pytest.approx(c.f_ctk / 1.5)
        assert c.f_cd(1.5, alpha=0.8) == pytest.approx(16.0)

    def test_parabolic_curve(self):
        c = Concrete(f_ck=30)
        assert c.stress(-0.002, 1.5) == pytest.approx(-20.0)
        assert c.stress(-0.003, 1.5) == pytest.approx(-20.0)
        assert c.stress(-0.001, 1.5) == pytest.approx(-15.0)  # 1 - (1 - 0.5)^2
        assert c.stress(0.0, 1.5) == 0.0

    def test_elastic_curve(self):
        c = Concrete(f_ck=30)
        assert c.stress(-1e-4, curve=ConcreteCurve.ELASTIC) == pytest.approx(-1e-4 * c.E_cm)
        assert c.stress(1e-4, curve="elastic") == pytest.approx(1e-4 * c.E_cm)

    def test_block_curve(self):
        c = Concrete(f_ck=30)
        assert c.stress(-0.0005, 1.5, ConcreteCurve.BLOCK) == 0.0
        assert c.stress(-0.002, 1.5, ConcreteCurve.BLOCK) == pytest.approx(-20.0)

    def test_creep_reduces_modulus(self):
        c = Concrete(f_ck=30, creep=1.0)
        assert c.Ec_eff == pytest.approx(c.E_cm / 2.0)

    def test_elastic_never_cracks(self):
        c = Concrete(f_ck=30)
        assert c.eps_cr(1.5, 1.5, ConcreteCurve.ELASTIC) == 1.0e10

    def test_invalid(self):
        with pytest.raises(InvalidInputError):
            Concrete(f_ck=0)
        with pytest.raises(ValueError):
            Concrete(f_ck=30, curve="cubic")

    def test_dict_roundtrip(self):
        c = Concrete(f_ck=35, curve=ConcreteCurve.BILINEAR, D_lower=16)
        c2 = Concrete.from_dict(c.to_dict())
        assert c2.f_ck == 35
        assert c2.curve == ConcreteCurve.BILINEAR
        assert c2.D_lower == 16


class TestReinforcingSteel:
    def test_elastic(self):
        s = ReinforcingSteel(f_yk=500)
        assert s.stress(0.001) == pytest.approx(200.0)
        assert s.stress(-0.001) == pytest.approx(-200.0)

    def test_yield_plateau_in_compression(self):
        s = ReinforcingSteel(f_yk=500)
        assert s.stress(-0.01, 1.15) == pytest.approx(-500 / 1.15)

    def test_hardening_reaches_f_ud(self):
        s = ReinforcingSteel(f_yk=500)
        assert s.eps_ud == pytest.approx(0.063)
        assert s.stress(s.eps_ud, 1.15) == pytest.approx(1.08 * 500 / 1.15)

    def test_no_hardening(self):
        s = ReinforcingSteel(f_yk=500, strain_hardening=False)
        f_yd = 500 / 1.15
        assert s.stress(0.02, 1.15) == pytest.approx(f_yd + (0.02 - f_yd / 200_000) * 10.0)

    def test_ductility_class(self):
        s = ReinforcingSteel(f_yk=500, ductility_class="A")
        assert s.ductility_class == DuctilityClass.A
        assert s.eps_ud == pytest.approx(0.9 * 0.025)

    def test_invalid(self):
        with pytest.raises(InvalidInputError):
            ReinforcingSteel(f_yk=-1)


class TestFibres:
    def test_none(self):
        f = FibreReinforcement.none()
        assert not f.has_fibres
        assert f.f_Ftsk == 0.0
        assert f.f_Ftuk == 0.0

    def test_fib_strengths(self):
        f = FibreReinforcement(f_R1k=3.0, f_R3k=2.5)
        assert f.f_Ftsk == pytest.approx(1.35)
        # 1.35 - 1.5 / 2.5 * (0.65 * 3 - 0.5 * 2.5)
        assert f.f_Ftuk_at(1.5) == pytest.approx(0.93)
        assert f.has_fibres

    def test_ec_strengths(self):
        f = FibreReinforcement(f_R1k=3.0, f_R3k=2.5, code="EC")
        assert f.f_Ftsk == pytest.approx(1.2)
        assert f.f_Ftuk == pytest.approx(0.57 * 2.5 - 0.26 * 3.0)

    def test_mean_defaults_to_characteristic(self):
        f = FibreReinforcement(f_R1k=3.0, f_R3k=2.5)
        assert f.f_R1 == 3.0
        assert f.kG <= 0.9

    def test_bridging_stress_linear(self):
        f = FibreReinforcement(f_R1k=3.0, f_R3k=2.5)
        assert f.bridging_stress(0.5) == pytest.approx(f.f_Ftsd(1.0))
        assert f.bridging_stress(2.5) == pytest.approx(f.f_Ftud(1.0))
        assert f.bridging_stress(100.0) >= 0.0

    def test_residual_class(self):
        assert FibreReinforcement(f_R1k=2.5, f_R3k=2.5).residual_class == "2.5c"
        assert FibreReinforcement.none().residual_class == "none"

    def test_invalid(self):
        with pytest.raises(InvalidInputError):
            FibreReinforcement(f_R1k=3.0, k=3.0)
        with pytest.raises(InvalidInputError):
            FibreReinforcement(f_R1k=-1.0)
        with pytest.raises(InvalidInputError):
            FibreReinforcement(code="ACI")
