"""
Design-code rules for crack spacing, crack width and shear.

One strategy object per code:

  - ``FibModelCode2010``  fib Model Code 2010, 7.6.4 (cracking) and 7.7.3 (shear)
  - ``Eurocode2``         EN 1992-1-1 7.3.4 and prEN 1992-1-1 Annex L (FRC)
  - ``Watts``             bond-slip spacing model; fib for everything else

Crack spacing returns (s_max, l_cs) where l_cs is the characteristic
length over which the crack opening of a cracked slice is smeared.
The characteristic crack spacing is s_r,max = crack_spacing_factor * s_max.
"""

from __future__ import annotations

import math
import sys
from dataclasses import dataclass
from typing import Callable, Dict, Tuple

from frc_section.analysis.parameters import DesignCodeName, DK_NA, PartialFactors
from frc_section.exceptions import InvalidInputError

# Reinforcement ratio below which a tensile zone counts as unreinforced
MIN_RHO = 1.0e-10
_EPS = sys.float_info.epsilon


@dataclass(frozen=True)
class SpacingInputs:
    """Tensile-zone quantities feeding the crack spacing formulas.

    ``x`` is the neutral axis depth measured from the compression face.
    """

    h: float
    x: float
    cover: float
    outer_dia: float
    outer_spacing: float
    eq_dia: float
    rho: float
    has_steel: bool
    f_ctm: float
    f_Ftsk: float
    l_f: float
    national_annex: str = ""

    @property
    def tension_depth(self) -> float:
        """h - x clamped to the section."""
        return min(max(self.h - self.x, 0.0), self.h)


@dataclass(frozen=True)
class ShearInputs:
    """Section quantities feeding the concrete/fibre shear contribution."""

    concrete: object
    gamma: PartialFactors
    d: float
    z: float
    rho: float
    sig_cp: float
    d_dg: float
    f_Ftuk: float
    f_Ftud: float
    f_yd: float
    A_w: float
    national_annex: str
    compressed_area: Callable[[], float]


class DesignCode:
    """Base strategy; subclasses implement the code-specific formulas."""

    name: DesignCodeName
    crack_spacing_factor = 1.0

    def crack_spacing(self, inp: SpacingInputs) -> Tuple[float, float]:
        raise NotImplementedError

    def strain_difference(self, zone, sigma_s: float, eps_sh: float) -> float:
        raise NotImplementedError

    def shear_fibre_strength(self, fibres) -> float:
        raise NotImplementedError

    def concrete_shear_stress(self, inp: ShearInputs) -> Tuple[float, float]:
        """(tau_cf, eta_ss) when minimum flexural reinforcement is present."""
        raise NotImplementedError

    def unreinforced_shear_stress(self, inp: ShearInputs) -> float:
        """tau_cf when minimum flexural reinforcement is not present."""
        raise NotImplementedError

    def strut_crushing_stress(self, f_ck: float, f_cd: float, cot_theta: float,
                              national_annex: str = "") -> float:
        raise NotImplementedError


class FibModelCode2010(DesignCode):
    name = DesignCodeName.FIB
    crack_spacing_factor = 2.0

    # Long-term loading, stabilised cracking
    beta = 0.4
    eta_r = 1.0

    def crack_spacing(self, inp: SpacingInputs) -> Tuple[float, float]:
        if not inp.has_steel:
            return inp.h, inp.h
        tau_bms = 1.8 * inp.f_ctm
        f_Ftsm = inp.f_Ftsk / 0.7
        s_max = max(
            inp.l_f,
            inp.cover + 0.25 * (inp.f_ctm - f_Ftsm) / tau_bms * inp.eq_dia / (inp.rho + _EPS),
        )
        return s_max, min(s_max, inp.h)

    def strain_difference(self, zone, sigma_s: float, eps_sh: float) -> float:
        f_Ftsm = zone.f_Ftsk / 0.7
        sigma_sr = min(sigma_s, (zone.f_ctm - f_Ftsm) * (1.0 + zone.alpha_e * zone.rho_tc) / zone.rho_tc)
        return (sigma_s - self.beta * sigma_sr + self.eta_r * eps_sh * zone.E_s) / zone.E_s

    def shear_fibre_strength(self, fibres) -> float:
        # Residual strength at 1.5 mm crack opening
        return fibres.f_Ftuk_at(1.5)

    def concrete_shear_stress(self, inp: ShearInputs) -> Tuple[float, float]:
        c = inp.concrete
        if inp.f_Ftuk > 0:
            k = min(2.0, 1.0 + math.sqrt(200.0 / inp.d))
            tau = (
                0.18 / inp.gamma.c * k
                * (100.0 * inp.rho * (1.0 + 7.5 * inp.f_Ftuk / c.f_ctk) * c.f_ck) ** (1.0 / 3.0)
                + 0.15 * inp.sig_cp
            ) * (inp.d / inp.z)
            return tau, 1.0
        k_v = 180.0 / (1000.0 + 1.25 * inp.z)
        return k_v * math.sqrt(c.f_ck) / inp.gamma.c, 1.0

    def unreinforced_shear_stress(self, inp: ShearInputs) -> float:
        return inp.f_Ftuk / inp.gamma.m

    def strut_crushing_stress(self, f_ck: float, f_cd: float, cot_theta: float,
                              national_annex: str = "") -> float:
        k_c = 0.55 * min(1.0, (30.0 / f_ck) ** (1.0 / 3.0))
        return k_c * f_cd / (cot_theta + 1.0 / cot_theta)


class Watts(FibModelCode2010):
    name = DesignCodeName.WATTS

    def crack_spacing(self, inp: SpacingInputs) -> Tuple[float, float]:
        depth = inp.tension_depth
        if not inp.has_steel:
            return depth, depth
        s_max = max(
            inp.l_f,
            (inp.f_ctm - inp.f_Ftsk) * inp.eq_dia / (4.0 * inp.f_ctm * (inp.rho + _EPS)),
        )
        return s_max, min(s_max, depth)


class Eurocode2(DesignCode):
    name = DesignCodeName.EC
    crack_spacing_factor = 1.0

    k1 = 0.8    # high bond bars
    k2 = 0.5    # bending
    k4 = 0.425
    k_t = 0.4   # long-term loading

    def k3(self, cover: float, national_annex: str) -> float:
        if national_annex == DK_NA and cover > 0:
            return min(3.4, 3.4 * (25.0 / cover) ** (2.0 / 3.0))
        return 3.4

    def crack_spacing(self, inp: SpacingInputs) -> Tuple[float, float]:
        if inp.f_Ftsk == 0:
            wide = inp.outer_spacing > 5.0 * (inp.cover + inp.outer_dia / 2.0)
            if wide or not inp.has_steel or inp.rho < MIN_RHO:
                s_max = 1.3 * inp.tension_depth
            else:
                s_max = (
                    self.k3(inp.cover, inp.national_annex) * inp.cover
                    + self.k1 * self.k2 * self.k4 * inp.eq_dia / inp.rho
                )
            return s_max, s_max
        if inp.rho < MIN_RHO:
            return inp.h, inp.h
        s_max = (2.0 * inp.cover + 0.28 * inp.eq_dia / (inp.rho + _EPS)) * (1.0 - inp.f_Ftsk / inp.f_ctm)
        return s_max, min(0.75 * s_max, inp.h)

    def strain_difference(self, zone, sigma_s: float, eps_sh: float) -> float:
        return max(
            sigma_s / zone.E_s
            - self.k_t * zone.f_ctm / (zone.E_s * zone.rho_tc) * (1.0 + zone.rho_tc * zone.alpha_e)
            + eps_sh,
            0.6 * sigma_s / zone.E_s + eps_sh,
        )

    def shear_fibre_strength(self, fibres) -> float:
        return fibres.f_Ftsk

    def concrete_shear_stress(self, inp: ShearInputs) -> Tuple[float, float]:
        c = inp.concrete
        size = (100.0 * inp.rho * c.f_ck * inp.d_dg / inp.d) ** (1.0 / 3.0)
        eta = 1.0
        eta_ss = 1.0
        if inp.f_Ftuk > 0:
            eta = max(0.4, 1.0 / (1.0 + 0.43 * inp.f_Ftuk ** 2.85))
            eta_ss = 0.75
            tau = eta * 0.6 / inp.gamma.c * size + inp.f_Ftud
        else:
            tau = 0.66 / inp.gamma.v * size
        v_min = 0.0
        if inp.f_yd > 0:
            v_min = 11.0 / inp.gamma.v * math.sqrt(c.f_ck / inp.f_yd * inp.d_dg / inp.d)
        return max(eta * v_min + inp.f_Ftud, tau), eta_ss

    def unreinforced_shear_stress(self, inp: ShearInputs) -> float:
        if inp.f_Ftud > 0:
            return inp.f_Ftud
        # Plain concrete, EN 1992-1-1 12.6.3
        c = inp.concrete
        alpha = c.alpha_ct if inp.national_annex == DK_NA else 0.8
        f_ctd_pl = c.f_ctd(inp.gamma.ct, alpha)
        f_cd_pl = c.f_cd(inp.gamma.c, alpha)
        sig_lim = f_cd_pl - 2.0 * math.sqrt(f_ctd_pl * (f_ctd_pl + f_cd_pl))
        radicand = f_ctd_pl ** 2 + inp.sig_cp * f_ctd_pl
        if inp.sig_cp >= sig_lim:
            radicand -= ((inp.sig_cp - sig_lim) / 2.0) ** 2
        tau = math.sqrt(max(radicand, 0.0))
        return tau * inp.compressed_area() / (1.5 * inp.A_w)

    def strut_crushing_stress(self, f_ck: float, f_cd: float, cot_theta: float,
                              national_annex: str = "") -> float:
        if national_annex == DK_NA:
            nu = max(0.45, 0.7 * (1.0 - f_ck / 200.0))
        else:
            nu = 0.6 * (1.0 - f_ck / 250.0)
        return nu * f_cd / (cot_theta + 1.0 / cot_theta)


_CODES: Dict[DesignCodeName, DesignCode] = {
    DesignCodeName.FIB: FibModelCode2010(),
    DesignCodeName.EC: Eurocode2(),
    DesignCodeName.WATTS: Watts(),
}


def get_code(name) -> DesignCode:
    """Return the strategy for a code name ("fib", "EC", "Watts")."""
    try:
        return _CODES[DesignCodeName(name)]
    except ValueError as exc:
        raise InvalidInputError(f"Unknown design code: {name!r}") from exc
