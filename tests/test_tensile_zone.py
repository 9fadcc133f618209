"""Tests for the effective tensile zone and crack width.

Benchmark bottom zone, 300x500 mm, 4 bars of 20 mm at 450 mm, x = 150 mm:
  h_ct   = max(40 + 0.51 * 20, min(250, 350 / 3, 2.5 * 50)) = 116.7 mm
  A_c,eff = 12 slices of 10 mm * 300 mm                    = 36000 mm^2
  rho_tc = 1256.6 / 36000                                   = 0.0349
"""

import math
import pytest

from frc_section.analysis.codes import Eurocode2, FibModelCode2010, Watts, get_code
from frc_section.analysis.tensile_zone import NO_STEEL_EQ_DIA, crack_width, tensile_zone
from frc_section.exceptions import InvalidInputError
from frc_section.materials.concrete import Concrete
from frc_section.materials.fibres import FibreReinforcement
from frc_section.materials.steel import ReinforcingSteel
from frc_section.section.cross_section import CrossSection
from frc_section.section.geometry import RectangularSection
from frc_section.section.rebar import RebarLayer, Reinforcement

FIB = FibModelCode2010()
EC = Eurocode2()


@pytest.fixture
def beam():
    shape = RectangularSection(b=300, h=500)
    reinf = Reinforcement.from_layers(
        shape, ReinforcingSteel(f_yk=500), [RebarLayer(depth=450, n_bars=4, bar_diameter=20)]
    )
    return CrossSection.from_shape(shape, Concrete(f_ck=30), reinforcement=reinf, n_layers=50)


@pytest.fixture
def plain():
    return CrossSection.from_shape(RectangularSection(b=300, h=500), Concrete(f_ck=30), n_layers=50)


class TestTensileZone:
    def test_bottom_zone(self, beam):
        zone = tensile_zone(beam, 150.0, "bottom", FIB)
        assert zone.h_ct == pytest.approx(350 / 3)
        assert zone.A_c_eff == pytest.approx(36_000)
        assert zone.A_s_eff == pytest.approx(400 * math.pi)
        assert zone.d_eff == pytest.approx(450)
        assert zone.eq_dia == pytest.approx(20)
        assert zone.rho_tc == pytest.approx(400 * math.pi / 36_000)
        assert zone.alpha_e == pytest.approx(200_000 / beam.concrete.E_cm)

    def test_cover_governs_shallow_zone(self, beam):
        # Neutral axis close to the tension face
        zone = tensile_zone(beam, 480.0, "bottom", FIB)
        assert zone.h_ct == pytest.approx(40 + 0.51 * 20)

    def test_top_zone_without_bars(self, beam):
        zone = tensile_zone(beam, 350.0, "top", FIB)
        assert zone.A_s_eff == 0.0
        assert zone.d == pytest.approx(125)
        assert zone.eq_dia == NO_STEEL_EQ_DIA
        assert zone.s_max == 500
        assert zone.l_cs == 500

    def test_fib_spacing_with_steel(self, beam):
        zone = tensile_zone(beam, 150.0, "bottom", FIB)
        f_ctm = beam.concrete.f_ctm
        expected = 40 + 0.25 * f_ctm / (1.8 * f_ctm) * 20 / zone.rho_tc
        assert zone.s_max == pytest.approx(expected, rel=1e-6)
        assert zone.l_cs == pytest.approx(min(expected, 500))

    def test_ec_unreinforced_spacing(self, plain):
        zone = tensile_zone(plain, 200.0, "bottom", EC)
        assert zone.s_max == pytest.approx(1.3 * 300)
        assert zone.l_cs == zone.s_max

    def test_ec_spacing_with_steel(self, beam):
        zone = tensile_zone(beam, 150.0, "bottom", EC)
        expected = 3.4 * 40 + 0.8 * 0.5 * 0.425 * 20 / zone.rho_tc
        assert zone.s_max == pytest.approx(expected)

    def test_dk_na_k3(self):
        assert EC.k3(40, "DK NA") == pytest.approx(3.4 * (25 / 40) ** (2 / 3))
        assert EC.k3(20, "DK NA") == 3.4
        assert EC.k3(0, "DK NA") == 3.4
        assert EC.k3(40, "") == 3.4

    def test_watts_unreinforced_uses_tension_depth(self, plain):
        zone = tensile_zone(plain, 200.0, "bottom", Watts())
        assert zone.s_max == pytest.approx(300)

    def test_fibres_with_steel_fib(self):
        shape = RectangularSection(b=300, h=500)
        reinf = Reinforcement.from_layers(
            shape, ReinforcingSteel(f_yk=500), [RebarLayer(depth=450, n_bars=4, bar_diameter=20)]
        )
        frc = CrossSection.from_shape(
            shape, Concrete(f_ck=30), reinforcement=reinf,
            fibres=FibreReinforcement(f_R1k=3.0, f_R3k=2.5, l_f=60), n_layers=50,
        )
        plain_zone = tensile_zone(frc, 150.0, "bottom", FIB)
        assert plain_zone.f_Ftsk == pytest.approx(1.35)
        assert plain_zone.s_max >= 60


class TestCrackWidth:
    def test_unreinforced_uses_concrete_strain(self, plain):
        zone = tensile_zone(plain, 200.0, "bottom", FIB)
        crack = crack_width(zone, 0.0, 1e-3, 0.0, 0.3, FIB)
        assert crack.eps_dif == pytest.approx(1e-3)
        assert crack.s_rmax == pytest.approx(2 * 500)
        assert crack.w_k == pytest.approx(1.0)
        assert crack.UR_crack == pytest.approx(1.0 / 0.3)

    def test_ec_strain_difference_floor(self, beam):
        zone = tensile_zone(beam, 150.0, "bottom", EC)
        crack = crack_width(zone, 20.0, 0.0, 0.0, 0.3, EC)
        assert crack.eps_dif == pytest.approx(0.6 * 20.0 / 200_000)

    def test_ec_steel_stress(self, beam):
        zone = tensile_zone(beam, 150.0, "bottom", EC)
        sigma_s = 250.0
        crack = crack_width(zone, sigma_s, 0.0, 0.0, 0.3, EC)
        expected = (
            sigma_s / 200_000
            - 0.4 * zone.f_ctm / (200_000 * zone.rho_tc) * (1 + zone.alpha_e * zone.rho_tc)
        )
        assert crack.eps_dif == pytest.approx(expected)
        assert crack.w_k == pytest.approx(zone.s_max * expected)

    def test_fib_bounded_transfer_stress(self, beam):
        zone = tensile_zone(beam, 150.0, "bottom", FIB)
        crack = crack_width(zone, 250.0, 0.0, 0.0, 0.3, FIB)
        sigma_sr = min(250.0, zone.f_ctm * (1 + zone.alpha_e * zone.rho_tc) / zone.rho_tc)
        assert crack.eps_dif == pytest.approx((250.0 - 0.4 * sigma_sr) / 200_000)
        assert crack.s_rmax == pytest.approx(2 * zone.s_max)


class TestCodeLookup:
    def test_lookup(self):
        assert isinstance(get_code("fib"), FibModelCode2010)
        assert isinstance(get_code("EC"), Eurocode2)
        assert isinstance(get_code("Watts"), Watts)

    def test_unknown(self):
        with pytest.raises(InvalidInputError):
            get_code("ACI")
