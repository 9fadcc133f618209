"""
Slice and bar stresses for a given strain plane.

Concrete slices crack once their strain exceeds

    eps_cr = f_ctd / E_eqv * max(1, 1.6 - h/1000)

A cracked slice opens COD = (eps - eps_cr) * l_cs, where l_cs is the
characteristic crack length of the tensile zone, and transfers the
fibre bridging stress at that opening (zero for plain concrete).

The secant stiffness sigma / eps of every slice and bar is returned so
that the next iteration can rebuild the section rigidity. A zero strain
maps to the initial modulus.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple

from frc_section.analysis.parameters import AnalysisParameters, PartialFactors
from frc_section.analysis.rigidity import StrainPlane
from frc_section.materials.concrete import ConcreteCurve, UNCRACKABLE_STRAIN


@dataclass(frozen=True)
class StressState:
    """Per-slice and per-bar material state of one iteration."""

    eps_c: List[float]
    sig_c: List[float]
    E_c: List[float]
    cracked: List[bool]
    cod: List[float]
    eps_s: List[float]
    sig_s: List[float]
    E_s: List[float]

    @classmethod
    def initial(cls, section) -> "StressState":
        """Unstressed state with mean concrete modulus and steel E_s."""
        n_c = len(section.slices)
        n_s = len(section.bars)
        E_s = section.reinforcement.E_s
        return cls(
            eps_c=[0.0] * n_c,
            sig_c=[0.0] * n_c,
            E_c=[section.concrete.E_cm] * n_c,
            cracked=[False] * n_c,
            cod=[0.0] * n_c,
            eps_s=[0.0] * n_s,
            sig_s=[0.0] * n_s,
            E_s=[E_s] * n_s,
        )


def height_factor(h: float) -> float:
    """Size effect on the tensile strength, max(1, 1.6 - h/1000)."""
    return max(1.0, 1.6 - h / 1000.0)


def cracking_strain(section, params: AnalysisParameters, gamma: PartialFactors) -> float:
    if not params.rely_on_concrete_tension:
        return 0.0
    if params.concrete_curve == ConcreteCurve.ELASTIC:
        return UNCRACKABLE_STRAIN
    concrete = section.concrete
    return (
        concrete.f_ctd(gamma.ct)
        / concrete.E_eqv(gamma.c, params.concrete_curve)
        * height_factor(section.height)
    )


def update_stress_state(
    section,
    plane: StrainPlane,
    l_cs: float,
    params: AnalysisParameters,
    gamma: PartialFactors,
) -> StressState:
    """Evaluate the material laws on every slice and bar."""
    concrete = section.concrete
    fibres = section.fibres
    curve = params.concrete_curve
    eps_cr = cracking_strain(section, params, gamma)
    has_fibres = fibres.has_fibres
    Ec_eff = concrete.Ec_eff

    eps_c, sig_c, E_c, cracked, cod = [], [], [], [], []
    for s in section.slices:
        eps = plane.strain(s.z, s.y)
        if eps > eps_cr:
            w = (eps - eps_cr) * l_cs
            if has_fibres:
                sig = min(fibres.bridging_stress(w, gamma.m), concrete.stress(eps, gamma.c, curve))
            else:
                sig = 0.0
            E = sig / eps
            is_cracked = True
        else:
            w = 0.0
            sig = concrete.stress(eps, gamma.c, curve)
            E = Ec_eff if eps == 0 else sig / eps
            is_cracked = False
        eps_c.append(eps)
        sig_c.append(sig)
        E_c.append(E)
        cracked.append(is_cracked)
        cod.append(w)

    steel = section.reinforcement.material
    E_steel = section.reinforcement.E_s
    eps_s, sig_s, E_s = [], [], []
    for b in section.bars:
        eps = plane.strain(b.z, b.y)
        sig = steel.stress(eps, gamma.s, params.strain_hardening)
        eps_s.append(eps)
        sig_s.append(sig)
        E_s.append(E_steel if eps == 0 else sig / eps)

    return StressState(
        eps_c=eps_c, sig_c=sig_c, E_c=E_c, cracked=cracked, cod=cod,
        eps_s=eps_s, sig_s=sig_s, E_s=E_s,
    )


def internal_forces(section, state: StressState) -> Tuple[float, float, float]:
    """(N kN, Mz kNm, My kNm) of a stress state, internal sign."""
    return section.integrate_forces(state.sig_c, state.sig_s)
