"""
Analysis configuration: limit states, design codes, applied forces and
partial factors.

Partial factors (gamma_c, gamma_ct, gamma_s, gamma_m, gamma_v):

  limit state   c      ct     s      m      v
  SLS           1.0    1.0    1.0    1.0    1.0
  ULS           1.5    1.5    1.15   1.5    1.4
  ULS (DK NA)   1.45   1.7    1.2    1.5    1.4
  ALS           1.2    1.2    1.0    1.2    1.2
  Real          25/33  0.7    1.0    0.7    1.0

"Real" is the mean-value state used for cracking loads: the factors
below unity lift characteristic strengths to mean strengths.
"""

from __future__ import annotations

from dataclasses import dataclass, asdict
from enum import Enum
from typing import Optional

from frc_section.exceptions import InvalidInputError
from frc_section.materials.concrete import ConcreteCurve


class LimitState(Enum):
    SLS = "SLS"
    ULS = "ULS"
    ALS = "ALS"
    REAL = "Real"


class DesignCodeName(Enum):
    FIB = "fib"
    EC = "EC"
    WATTS = "Watts"


DK_NA = "DK NA"


@dataclass(frozen=True)
class PartialFactors:
    c: float
    ct: float
    s: float
    m: float
    v: float


def partial_factors(limit_state: LimitState, national_annex: str = "") -> PartialFactors:
    """Return the material partial factors for a limit state."""
    limit_state = LimitState(limit_state)
    if limit_state == LimitState.SLS:
        return PartialFactors(c=1.0, ct=1.0, s=1.0, m=1.0, v=1.0)
    if limit_state == LimitState.ULS:
        if national_annex == DK_NA:
            return PartialFactors(c=1.45, ct=1.7, s=1.2, m=1.5, v=1.4)
        return PartialFactors(c=1.5, ct=1.5, s=1.15, m=1.5, v=1.4)
    if limit_state == LimitState.ALS:
        return PartialFactors(c=1.2, ct=1.2, s=1.0, m=1.2, v=1.2)
    return PartialFactors(c=25.0 / 33.0, ct=0.7, s=1.0, m=0.7, v=1.0)


@dataclass(frozen=True)
class SectionForces:
    """Applied section forces.

    Parameters
    ----------
    N : float
        Axial force in kN, tension positive.
    Mz : float
        Bending moment in kNm, positive for sagging (tension at bottom).
    My : float
        Moment about the vertical axis in kNm.
    Vz, Vy : float
        Shear forces in kN.
    T : float
        Torsion in kNm.
    limit_state : LimitState
    cot_theta : float, optional
        Strut inclination override, 0.5 <= cot_theta <= 3.
    eps_sh : float
        Shrinkage strain (positive value reduces crack closure).
    """

    N: float = 0.0
    Mz: float = 0.0
    My: float = 0.0
    Vz: float = 0.0
    Vy: float = 0.0
    T: float = 0.0
    limit_state: LimitState = LimitState.ULS
    cot_theta: Optional[float] = None
    eps_sh: float = 0.0

    def __post_init__(self) -> None:
        if isinstance(self.limit_state, str):
            object.__setattr__(self, "limit_state", LimitState(self.limit_state))

    @property
    def moment_sign(self) -> int:
        """+1 for sagging or zero moment, -1 for hogging."""
        return 1 if self.Mz >= 0 else -1

    def to_dict(self) -> dict:
        d = asdict(self)
        d["limit_state"] = self.limit_state.value
        return d

    @classmethod
    def from_dict(cls, d: dict) -> "SectionForces":
        return cls(
            N=d.get("N", 0.0),
            Mz=d.get("Mz", 0.0),
            My=d.get("My", 0.0),
            Vz=d.get("Vz", 0.0),
            Vy=d.get("Vy", 0.0),
            T=d.get("T", 0.0),
            limit_state=LimitState(d.get("limit_state", "ULS")),
            cot_theta=d.get("cot_theta"),
            eps_sh=d.get("eps_sh", 0.0),
        )


@dataclass(frozen=True)
class AnalysisParameters:
    """Solver and code settings shared by every solve of an analysis.

    Parameters
    ----------
    code : DesignCodeName
        Crack spacing / crack width / shear rules.
    national_annex : str
        "" or "DK NA".
    rely_on_concrete_tension : bool
        Let uncracked concrete carry tension up to f_ctd.
    concrete_curve : ConcreteCurve
        Compression curve used by the solver.
    strain_hardening : bool
        Inclined top branch for reinforcing steel.
    max_iterations : int
        Cap on inner equilibrium iterations per solve.
    crack_limit : float
        Allowable characteristic crack width w_max (mm).
    """

    code: DesignCodeName = DesignCodeName.FIB
    national_annex: str = ""
    rely_on_concrete_tension: bool = False
    concrete_curve: ConcreteCurve = ConcreteCurve.PARABOLIC
    strain_hardening: bool = True
    max_iterations: int = 1000
    crack_limit: float = 0.3

    def __post_init__(self) -> None:
        try:
            object.__setattr__(self, "code", DesignCodeName(self.code))
            object.__setattr__(self, "concrete_curve", ConcreteCurve(self.concrete_curve))
        except ValueError as exc:
            raise InvalidInputError(str(exc)) from exc
        if self.max_iterations < 1:
            raise InvalidInputError(f"max_iterations must be >= 1, got {self.max_iterations}")
        if self.crack_limit <= 0:
            raise InvalidInputError(f"crack_limit must be positive, got {self.crack_limit}")

    def to_dict(self) -> dict:
        return {
            "code": self.code.value,
            "national_annex": self.national_annex,
            "rely_on_concrete_tension": self.rely_on_concrete_tension,
            "concrete_curve": self.concrete_curve.value,
            "strain_hardening": self.strain_hardening,
            "max_iterations": self.max_iterations,
            "crack_limit": self.crack_limit,
        }

    @classmethod
    def from_dict(cls, d: dict) -> "AnalysisParameters":
        return cls(
            code=d.get("code", "fib"),
            national_annex=d.get("national_annex", ""),
            rely_on_concrete_tension=d.get("rely_on_concrete_tension", False),
            concrete_curve=d.get("concrete_curve", "parabolic"),
            strain_hardening=d.get("strain_hardening", True),
            max_iterations=d.get("max_iterations", 1000),
            crack_limit=d.get("crack_limit", 0.3),
        )
