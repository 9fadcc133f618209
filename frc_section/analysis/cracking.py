"""
Cracking moment and minimum reinforcement (EN 1992-1-1 7.3.2).

Cracking moment
---------------
An uncracked linear-elastic state at a tiny curvature is scaled so that
the extreme tensile stress reaches f_ct (optionally times the height
factor). Scaling is about the average stress so that an axial force is
kept:

    kappa_cr = kappa_1 * (f_ct * hf - sig_avg) / (sig_max - sig_avg)

The state is then re-solved with mean material values ("Real").

Minimum reinforcement
---------------------
    A_s,min = k * k_c * (f_ct,eff - 0.45 f_R1) * A_ct / sigma_s
"""

from __future__ import annotations

from dataclasses import dataclass, asdict, replace
from typing import Optional

from frc_section.analysis.parameters import LimitState, SectionForces
from frc_section.analysis.stress_state import height_factor
from frc_section.exceptions import NumericalDegeneracyError
from frc_section.materials.concrete import ConcreteCurve

# Curvature magnitude of the linear probe state (1/mm)
PROBE_CURVATURE = 1.0e-10

# Bars with a stress above this (MPa) count as tension reinforcement
TENSION_BAR_STRESS = -1.0


@dataclass(frozen=True)
class CrackingMoment:
    M_cr: float
    kappa_cr: float
    A_ct: float
    A_st: float
    behavior: str

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class MinimumReinforcement:
    As_min: float
    A_st: float
    k: float
    k_c: float
    verified: bool

    def to_dict(self) -> dict:
        return asdict(self)


def cracking_moment(
    analysis,
    forces: SectionForces,
    f_ct: Optional[float] = None,
    with_height_factor: bool = False,
) -> CrackingMoment:
    """Moment at first cracking for the axial force of ``forces``.

    Parameters
    ----------
    analysis : CrossSectionAnalysis
        Owner; a linear-elastic sub-analysis is spawned from it.
    forces : SectionForces
        N and the sign of Mz are used.
    f_ct : float, optional
        Tensile strength at cracking. Default: f_ctm.
    with_height_factor : bool
        Multiply f_ct by max(1, 1.6 - h/1000).
    """
    section = analysis.section
    if f_ct is None:
        f_ct = section.concrete.f_ctm
    hf = height_factor(section.height) if with_height_factor else 1.0

    sub = analysis.spawn(rely_on_concrete_tension=True, concrete_curve=ConcreteCurve.ELASTIC)
    probe_forces = SectionForces(
        N=forces.N, Mz=forces.Mz, My=forces.My, limit_state=LimitState.SLS, eps_sh=0.0
    )

    kappa = -PROBE_CURVATURE * forces.moment_sign
    probe = sub.solve_with_curvature(probe_forces, kappa)
    spread = probe.sig_c_max - probe.sig_c_avg
    if spread == 0:
        raise NumericalDegeneracyError("Linear probe state has no stress gradient to scale")
    factor = (f_ct * hf - probe.sig_c_avg) / spread
    kappa = factor * kappa

    state = sub.solve_with_curvature(replace(probe_forces, limit_state=LimitState.REAL), kappa)

    behavior = "pure tension" if state.sig_c_min > 0 else "bending"
    A_ct = sum(s.area for s, sig in zip(section.slices, state.sig_c) if sig >= 0)
    A_st = sum(b.area for b, sig in zip(section.bars, state.sig_s) if sig >= TENSION_BAR_STRESS)

    return CrackingMoment(M_cr=state.Mz, kappa_cr=kappa, A_ct=A_ct, A_st=A_st, behavior=behavior)


def minimum_reinforcement(
    analysis,
    forces: SectionForces,
    sigma_s: Optional[float] = None,
) -> MinimumReinforcement:
    """EN 1992-1-1 (7.1) with the fibre residual strength deducted.

    Parameters
    ----------
    analysis : CrossSectionAnalysis
    forces : SectionForces
    sigma_s : float, optional
        Admissible steel stress. Default: f_yk (500 MPa without steel).
    """
    section = analysis.section
    steel = section.reinforcement.material
    if sigma_s is None:
        sigma_s = steel.f_yk if steel is not None else 500.0

    f_ct_eff = section.concrete.f_ctm
    cracking = cracking_moment(analysis, forces, f_ct_eff)

    h = section.height
    h_star = min(h, 1000.0)
    k = max(0.65, min(1.0, 1.0 - (h - 300.0) * 0.35 / 500.0))

    k1 = 1.5
    if forces.N > 0:
        k1 = 2.0 / 3.0 * h_star / h

    # Mean compressive stress, compression positive (MPa)
    sigma_c = -forces.N * 1000.0 / section.gross_area

    if cracking.behavior == "bending":
        k_c = min(1.0, 0.4 * (1.0 - sigma_c / (k1 * (h / h_star) * f_ct_eff)))
    else:
        k_c = 1.0

    f_Ftsm = 0.45 * section.fibres.f_R1
    As_min = k * k_c * (f_ct_eff - f_Ftsm) * cracking.A_ct / sigma_s

    return MinimumReinforcement(
        As_min=As_min,
        A_st=cracking.A_st,
        k=k,
        k_c=k_c,
        verified=cracking.A_st >= As_min,
    )
