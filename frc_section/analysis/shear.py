"""
Shear capacity of a solved section (fib MC2010 7.7.3 / EN 1992-1-1 6.2, Annex L).

The flexural state supplies the stringer positions: the web between the
compression and tension resultants (lever arm z) carries the shear
stress, so V_Rd = tau_Rd * b_w * z with

    tau_Rd = min(tau_max, tau_cf + tau_s)

  tau_cf  concrete + fibre contribution (code strategy)
  tau_s   stirrups, eta_ss * rho_w * f_ywd * cot(theta)
  tau_max strut crushing
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import List, Tuple

from loguru import logger

from frc_section.analysis.codes import ShearInputs, get_code
from frc_section.analysis.parameters import SectionForces, partial_factors
from frc_section.exceptions import InvalidInputError, UnsupportedFeatureError
from frc_section.materials.steel import DuctilityClass
from frc_section.section.geometry import CircularSection, StirrupLayout

# Shear reinforcement ratio below which stirrups are ignored
MIN_RHO_W = 1.0e-5

# Default strut inclination without stirrups
DEFAULT_COT_THETA = 1.0


@dataclass(frozen=True)
class ShearResult:
    V_Rd: float
    UR_v: float
    UR_total: float
    tau_Rd: float
    tau_cf: float
    tau_s: float
    tau_max: float
    cot_theta: float
    bw: float
    d: float
    z: float
    A_w: float
    rho: float
    rho_w: float
    sig_cp: float
    d_dg: float
    f_Ftuk: float
    f_Ftud: float
    active_stirrups: bool
    minimum_shear_reinforcement: bool
    minimum_reinforcement_verified: bool
    direction: str = "Z"
    shear_area: List[Tuple[float, float]] = field(default_factory=list)
    stirrups: StirrupLayout = field(default_factory=StirrupLayout)

    def to_dict(self) -> dict:
        return {
            "V_Rd": self.V_Rd,
            "UR_v": self.UR_v,
            "UR_total": self.UR_total,
            "tau_Rd": self.tau_Rd,
            "tau_cf": self.tau_cf,
            "tau_s": self.tau_s,
            "tau_max": self.tau_max,
            "cot_theta": self.cot_theta,
            "bw": self.bw,
            "d": self.d,
            "z": self.z,
            "A_w": self.A_w,
            "rho": self.rho,
            "rho_w": self.rho_w,
            "sig_cp": self.sig_cp,
            "active_stirrups": self.active_stirrups,
            "minimum_reinforcement_verified": self.minimum_reinforcement_verified,
            "shear_area": [list(p) for p in self.shear_area],
        }


def _web_width(shape, cg_comp, cg_tens, cover: float) -> float:
    if isinstance(shape, CircularSection) and cg_comp is not None and cg_tens is not None:
        return shape.recompute_shear_width(cg_comp, cg_tens, cover)
    return shape.shear_width


def shear_capacity(analysis, forces: SectionForces, direction: str = "Z") -> ShearResult:
    """Shear resistance for ``forces`` on a CrossSectionAnalysis.

    The analysis is re-solved in moment mode first when its last solve
    was for different forces.
    """
    if direction == "Y":
        raise UnsupportedFeatureError("Shear in the y direction is not supported")

    if analysis.result is None or analysis.forces != forces:
        logger.debug("Re-solving with the shear load case before the shear check")
        analysis.solve_with_moment(forces)
    result = analysis.result

    section = analysis.section
    params = analysis.params
    shape = section.shape
    reinf = section.reinforcement
    stirrups = reinf.stirrups
    concrete = section.concrete
    fibres = section.fibres
    code = get_code(params.code)
    gamma = partial_factors(forces.limit_state, params.national_annex)

    A_sw = stirrups.area if stirrups is not None else 0.0
    s_w = stirrups.spacing if stirrups is not None else 1.0
    stirrup_dia = stirrups.diameter if stirrups is not None else 0.0
    stirrup_cover = stirrups.cover if stirrups is not None else 0.0

    cover = stirrup_cover + stirrup_dia / 2.0 if A_sw > 0 else 0.0
    bw = _web_width(shape, result.cg_comp, result.cg_tens, cover)
    d = result.zone.d_eff
    z = result.lever_arm if result.lever_arm > 0 else 0.9 * d

    As = sum(b.area for b, sig in zip(section.bars, result.sig_s) if sig > 0)

    shear_area: List[Tuple[float, float]] = []
    if result.cg_comp is not None and result.cg_tens is not None:
        if isinstance(shape, CircularSection):
            shear_area = shape.shear_area(result.cg_comp, result.cg_tens, direction, cover)
        else:
            shear_area = shape.shear_area(result.cg_comp, result.cg_tens, direction)
    layout = shape.stirrup_layout(stirrup_dia, stirrup_cover, stirrup_cover)

    f_Ftuk = code.shear_fibre_strength(fibres)
    f_Ftud = fibres.f_Ftud(gamma.m)
    if forces.N > 0:
        # Fibres carrying axial tension are not available for shear
        f_Ftuk = 0.0
        f_Ftud = 0.0

    active = True
    if A_sw > 0 and s_w > round(0.75 * d, 1):
        A_sw = 0.0
        active = False
        bw = _web_width(shape, result.cg_comp, result.cg_tens, 0.0)

    if bw <= 0:
        raise InvalidInputError(f"Shear web width must be positive, got {bw}")
    rho_w = A_sw / (bw * s_w)
    A_w = bw * z

    f_ck = concrete.f_ck
    d_fact = (60.0 / f_ck) ** 4 if f_ck > 60 else 1.0
    d_dg = min(40.0, 16.0 + concrete.D_lower * d_fact)
    rho = As / (bw * d)
    sig_cp = -forces.N * 1000.0 / section.gross_area

    steel = reinf.material
    if steel is None and stirrups is not None:
        steel = stirrups.material
    f_yk = steel.f_yk if steel is not None else 0.0
    f_yd = steel.f_yd(gamma.s) if steel is not None else 0.0

    min_shear = round(f_Ftuk + rho_w * f_yk, 2) >= round(0.08 * math.sqrt(f_ck), 2)
    if not min_shear:
        f_Ftuk = 0.0
        f_Ftud = 0.0
        rho_w = 0.0
        active = False

    def compressed_area() -> float:
        sub = analysis.spawn(rely_on_concrete_tension=False)
        plain = sub.solve_with_moment(forces)
        return sum(s.area for s, sig in zip(section.slices, plain.sig_c) if sig < 0)

    inputs = ShearInputs(
        concrete=concrete,
        gamma=gamma,
        d=d,
        z=z,
        rho=rho,
        sig_cp=sig_cp,
        d_dg=d_dg,
        f_Ftuk=f_Ftuk,
        f_Ftud=f_Ftud,
        f_yd=f_yd,
        A_w=A_w,
        national_annex=params.national_annex,
        compressed_area=compressed_area,
    )

    verified = analysis.minimum_reinforcement(forces).verified
    eta_ss = 1.0
    if verified:
        tau_cf, eta_ss = code.concrete_shear_stress(inputs)
    else:
        tau_cf = code.unreinforced_shear_stress(inputs)

    cot_theta = forces.cot_theta or DEFAULT_COT_THETA
    tau_s = 0.0
    if rho_w > MIN_RHO_W:
        if forces.cot_theta is None:
            V_Ed = abs(forces.Vz)
            if V_Ed > 0:
                cot_theta = max(1.0, min(2.5, 2.5 - 0.1 * forces.N / V_Ed))
            else:
                cot_theta = 2.5
            if stirrups.material.ductility_class == DuctilityClass.A:
                cot_theta = max(1.0, 0.8 * cot_theta)
        tau_s = eta_ss * rho_w * stirrups.material.f_yd(gamma.s) * cot_theta

    tau_max = code.strut_crushing_stress(f_ck, concrete.f_cd(gamma.c), cot_theta, params.national_annex)
    tau_Rd = min(tau_max, tau_cf + tau_s)
    V_Rd = tau_Rd * A_w / 1000.0

    V_Ed = abs(forces.Vz)
    if V_Rd > 0:
        UR_v = V_Ed / V_Rd
    else:
        UR_v = math.inf if V_Ed > 0 else 0.0

    return ShearResult(
        V_Rd=V_Rd,
        UR_v=UR_v,
        UR_total=max(result.UR_total, UR_v),
        tau_Rd=tau_Rd,
        tau_cf=tau_cf,
        tau_s=tau_s,
        tau_max=tau_max,
        cot_theta=cot_theta,
        bw=bw,
        d=d,
        z=z,
        A_w=A_w,
        rho=rho,
        rho_w=rho_w,
        sig_cp=sig_cp,
        d_dg=d_dg,
        f_Ftuk=f_Ftuk,
        f_Ftud=f_Ftud,
        active_stirrups=active,
        minimum_shear_reinforcement=min_shear,
        minimum_reinforcement_verified=verified,
        direction=direction,
        shear_area=shear_area,
        stirrups=layout,
    )
