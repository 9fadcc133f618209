"""
Utilization ratios of a converged stress state.

  UR_cc    concrete compression: strain / eps_cu3, or stress / 0.6 f_ck in SLS
  UR_ct    fibre concrete tension: strain / eps_lim with
           eps_lim = min(0.02, COD_lim / l_cs)
  UR_s     reinforcement strain / eps_ud
  UR_crack crack width / crack limit (SLS, reinforced tensile zone only)
"""

from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Optional, Sequence

from frc_section.analysis.parameters import LimitState, PartialFactors
from frc_section.analysis.tensile_zone import CrackWidth, TensileZone

# Crack opening limits for fibre tension (mm)
ULTIMATE_COD = 2.5
MEAN_STATE_COD = 4.5
MAX_TENSILE_STRAIN = 0.02


@dataclass(frozen=True)
class Utilization:
    UR_cc: float
    UR_ct: float
    UR_s: float
    UR_crack: float

    @property
    def UR_total(self) -> float:
        return max(self.UR_cc, self.UR_ct, self.UR_s, self.UR_crack)

    @property
    def is_ok(self) -> bool:
        return round(self.UR_total, 2) <= 1.0

    def to_dict(self) -> dict:
        d = asdict(self)
        d["UR_total"] = self.UR_total
        return d


def evaluate_utilization(
    section,
    eps_c: Sequence[float],
    eps_s: Sequence[float],
    zone: TensileZone,
    crack: Optional[CrackWidth],
    limit_state: LimitState,
    gamma: PartialFactors,
    concrete_curve,
    crack_limit: float,
) -> Utilization:
    concrete = section.concrete

    if limit_state == LimitState.SLS:
        limit = -0.6 * concrete.f_ck
        UR_cc = max(concrete.stress(e, gamma.c, concrete_curve) / limit for e in eps_c)
    else:
        UR_cc = max(e / -concrete.eps_cu3 for e in eps_c)

    UR_ct = 0.0
    if section.fibres.f_Ftsk != 0:
        if limit_state == LimitState.REAL:
            eps_lim = _strain_limit(MEAN_STATE_COD, zone.l_cs)
        else:
            cod_lim = ULTIMATE_COD
            if limit_state == LimitState.SLS and zone.A_s_eff == 0:
                cod_lim = crack_limit
            eps_lim = min(MAX_TENSILE_STRAIN, _strain_limit(cod_lim, zone.l_cs))
        UR_ct = max(e / eps_lim for e in eps_c)

    UR_crack = 0.0
    if zone.A_s_eff != 0 and limit_state == LimitState.SLS and crack is not None:
        UR_crack = crack.UR_crack

    steel = section.reinforcement.material
    UR_s = 0.0
    if eps_s and steel is not None:
        UR_s = max(e / steel.eps_ud for e in eps_s)

    return Utilization(UR_cc=UR_cc, UR_ct=UR_ct, UR_s=UR_s, UR_crack=UR_crack)


def _strain_limit(cod: float, l_cs: float) -> float:
    if l_cs <= 0:
        return float("inf")
    return cod / l_cs
