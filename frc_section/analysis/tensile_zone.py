"""
Effective tensile zone and characteristic crack width.

The effective tension area extends h_ct from the tension face:

    h_ct = max(c + 0.51 phi, min(h/2, (h - x)/3, 2.5 (h - d)))

The bars inside it define A_s,eff, the area-weighted depth d_eff and the
equivalent diameter phi_eq = sum(n phi^2) / sum(n phi). Crack spacing and
the strain difference come from the design-code strategy.
"""

from __future__ import annotations

from dataclasses import dataclass, asdict

from frc_section.analysis.codes import MIN_RHO, DesignCode, SpacingInputs

# Equivalent diameter of an unreinforced tensile zone
NO_STEEL_EQ_DIA = 0.1


@dataclass(frozen=True)
class TensileZone:
    face: str
    h_ct: float
    A_c_eff: float
    A_s_eff: float
    d: float
    d_eff: float
    eq_dia: float
    rho_tc: float
    E_s: float
    E_cm: float
    alpha_e: float
    f_ctm: float
    f_Ftsk: float
    f_Ftuk: float
    l_f: float
    cover: float
    s_max: float
    l_cs: float

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class CrackWidth:
    eps_dif: float
    s_rmax: float
    w_k: float
    UR_crack: float

    def to_dict(self) -> dict:
        return asdict(self)


def tensile_zone(section, x: float, face: str, code: DesignCode, national_annex: str = "") -> TensileZone:
    """Effective tensile zone for a neutral axis at depth ``x`` from the top.

    Parameters
    ----------
    section : CrossSection
    x : float
        Neutral axis depth below the top face (mm); may lie outside the
        section or be infinite.
    face : str
        "top" or "bottom", the face in tension.
    code : DesignCode
    national_annex : str
    """
    h = section.height
    reinf = section.reinforcement
    if face == "top":
        cover = reinf.cover_top
        outer_dia = reinf.outer_dia_top
        outer_spacing = reinf.outer_spacing_top
        d = h - (reinf.d_top or 0.75 * h)
        x = h - x
    else:
        cover = reinf.cover_bot
        outer_dia = reinf.outer_dia_bot
        outer_spacing = reinf.outer_spacing_bot
        d = reinf.d_bot or 0.75 * h

    h_ct = max(cover + 0.51 * outer_dia, min(h / 2.0, (h - x) / 3.0, 2.5 * (h - d)))

    ref_z = section.ref_z
    if face == "top":
        A_c_eff = sum(s.area for s in section.slices if ref_z + s.z >= h - h_ct)
    else:
        A_c_eff = sum(s.area for s in section.slices if ref_z + s.z <= h_ct)

    A_s_eff = 0.0
    d_sum = 0.0
    sq_sum = 0.0
    lin_sum = 0.0
    for b in section.bars:
        inside = b.depth <= h_ct if face == "top" else h - b.depth <= h_ct
        if inside:
            A_s_eff += b.area
            d_sum += b.area * b.depth
            sq_sum += b.diameter ** 2
            lin_sum += b.diameter

    if A_s_eff > 0:
        d_eff = d_sum / A_s_eff
        eq_dia = sq_sum / lin_sum
    else:
        d_eff = d
        eq_dia = NO_STEEL_EQ_DIA
    rho_tc = A_s_eff / A_c_eff if A_c_eff > 0 else 0.0

    concrete = section.concrete
    fibres = section.fibres
    E_s = reinf.E_s
    spacing_inputs = SpacingInputs(
        h=h,
        x=x,
        cover=cover,
        outer_dia=outer_dia,
        outer_spacing=outer_spacing,
        eq_dia=eq_dia,
        rho=rho_tc,
        has_steel=A_s_eff > 0 and rho_tc >= MIN_RHO,
        f_ctm=concrete.f_ctm,
        f_Ftsk=fibres.f_Ftsk,
        l_f=fibres.l_f,
        national_annex=national_annex,
    )
    s_max, l_cs = code.crack_spacing(spacing_inputs)

    return TensileZone(
        face=face,
        h_ct=h_ct,
        A_c_eff=A_c_eff,
        A_s_eff=A_s_eff,
        d=d,
        d_eff=d_eff,
        eq_dia=eq_dia,
        rho_tc=rho_tc,
        E_s=E_s,
        E_cm=concrete.E_cm,
        alpha_e=E_s / concrete.E_cm,
        f_ctm=concrete.f_ctm,
        f_Ftsk=fibres.f_Ftsk,
        f_Ftuk=fibres.f_Ftuk,
        l_f=fibres.l_f,
        cover=cover,
        s_max=s_max,
        l_cs=l_cs,
    )


def crack_width(
    zone: TensileZone,
    sigma_s_eq: float,
    eps_c_max: float,
    eps_sh: float,
    crack_limit: float,
    code: DesignCode,
) -> CrackWidth:
    """Characteristic crack width w_k = s_r,max * (eps_sm - eps_cm).

    Without steel in the tensile zone the strain difference is the
    maximum concrete strain.
    """
    if zone.rho_tc < MIN_RHO:
        eps_dif = eps_c_max + eps_sh
    else:
        eps_dif = code.strain_difference(zone, sigma_s_eq, eps_sh)
    s_rmax = code.crack_spacing_factor * zone.s_max
    w_k = s_rmax * eps_dif
    return CrackWidth(eps_dif=eps_dif, s_rmax=s_rmax, w_k=w_k, UR_crack=w_k / crack_limit)
