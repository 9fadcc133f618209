"""
Concrete constitutive model to EN 1992-1-1.

Strength and deformation properties follow Table 3.1; design strengths
are taken at a partial factor supplied by the caller, so one material
instance serves every limit state.

Compression curves:
  - Parabola-rectangle (3.1.7, fig. 3.3) - "parabolic"
  - Bi-linear (3.1.7, fig. 3.4) - "bi-linear"
  - Rectangular stress block (3.1.7(3)) - "block"
  - Sargin nonlinear curve for structural analysis (3.1.5) - "complex"
  - Linear elastic - "elastic"

Tension:
  - Parabolic / bi-linear: linear with the equivalent modulus E_eqv
  - Block / complex: the compression curve mirrored
  - Elastic: linear with Ec_eff, never cracks

Sign convention:
  - Compression is NEGATIVE strain / stress
  - Tension is POSITIVE strain / stress
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from frc_section.exceptions import InvalidInputError


class ConcreteCurve(Enum):
    PARABOLIC = "parabolic"
    BILINEAR = "bi-linear"
    BLOCK = "block"
    COMPLEX = "complex"
    ELASTIC = "elastic"


class CementClass(Enum):
    S = "S"
    N = "N"
    R = "R"


# Coefficient s of EN 1992-1-1 (3.2)
_CEMENT_S = {CementClass.S: 0.38, CementClass.N: 0.25, CementClass.R: 0.20}

# Cracking strain used for the elastic curve: it never cracks
UNCRACKABLE_STRAIN = 1.0e10


@dataclass
class Concrete:
    """EN 1992 concrete defined by its characteristic strength.

    Parameters
    ----------
    f_ck : float
        Characteristic cylinder strength in MPa (e.g. 30.0).
    curve : ConcreteCurve
        Default stress-strain curve, used when ``stress`` is called
        without an explicit curve.
    cement_class : CementClass
        Cement class S / N / R for time-dependent strength.
    age : float
        Reference age in days. Strengths other than at 28 days are
        scaled with beta_cc(t).
    alpha_cc, alpha_ct : float
        Long-term coefficients on compressive / tensile design strength.
    creep : float
        Creep coefficient; reduces the effective modulus Ec_eff.
    D_lower : float
        Smallest aggregate size in mm (shear, d_dg).
    national_annex : str
        National annex tag, e.g. "DK NA". Informational on the material.
    """

    f_ck: float
    curve: ConcreteCurve = ConcreteCurve.PARABOLIC
    cement_class: CementClass = CementClass.N
    age: float = 28.0
    alpha_cc: float = 1.0
    alpha_ct: float = 1.0
    creep: float = 0.0
    D_lower: float = 8.0
    national_annex: str = ""

    # Derived quantities (computed in __post_init__)
    f_cm: float = field(init=False)
    f_ctm: float = field(init=False)
    f_ctk: float = field(init=False)
    E_cm: float = field(init=False)
    eps_c1: float = field(init=False)
    eps_cu1: float = field(init=False)
    eps_c2: float = field(init=False)
    eps_cu2: float = field(init=False)
    n: float = field(init=False)
    eps_c3: float = field(init=False)
    eps_cu3: float = field(init=False)

    def __post_init__(self) -> None:
        if self.f_ck <= 0:
            raise InvalidInputError(f"f_ck must be positive, got {self.f_ck}")
        if self.age <= 0:
            raise InvalidInputError(f"age must be positive, got {self.age}")
        if self.creep < 0:
            raise InvalidInputError(f"creep must be non-negative, got {self.creep}")
        if isinstance(self.curve, str):
            self.curve = ConcreteCurve(self.curve)
        if isinstance(self.cement_class, str):
            self.cement_class = CementClass(self.cement_class)

        fck = self.f_ck
        self.f_cm = fck + 8.0
        if fck <= 50:
            self.f_ctm = 0.3 * fck ** (2.0 / 3.0)
        else:
            self.f_ctm = 2.12 * math.log(1.0 + self.f_cm / 10.0)
        self.f_ctk = 0.7 * self.f_ctm
        self.E_cm = 22000.0 * (self.f_cm / 10.0) ** 0.3

        # Table 3.1 strains, stored as absolute values
        self.eps_c1 = min(0.7 * self.f_cm ** 0.31, 2.8) / 1000.0
        self.eps_cu1 = min(3.5, 2.8 + 27.0 * ((98.0 - self.f_cm) / 100.0) ** 4) / 1000.0
        self.eps_c2 = (2.0 + 0.085 * max(0.0, fck - 50.0) ** 0.53) / 1000.0
        self.eps_cu2 = min(3.5, 2.6 + 35.0 * ((90.0 - fck) / 100.0) ** 4) / 1000.0
        self.n = min(2.0, 1.4 + 23.4 * ((90.0 - fck) / 100.0) ** 4)
        self.eps_c3 = max(1.75, 1.75 + 0.55 * ((fck - 50.0) / 40.0)) / 1000.0
        self.eps_cu3 = min(3.5, 2.6 + 35.0 * ((90.0 - fck) / 100.0) ** 4) / 1000.0

    @property
    def name(self) -> str:
        return f"C{self.f_ck:g}"

    @property
    def Ec_eff(self) -> float:
        """Effective modulus including creep."""
        return self.E_cm / (1.0 + self.creep)

    # ------------------------------------------------------------------
    # Time-dependent strength (EN 1992-1-1 3.1.2)
    # ------------------------------------------------------------------
    def beta_cc(self, days: float) -> float:
        s = _CEMENT_S[self.cement_class]
        return math.exp(s * (1.0 - math.sqrt(28.0 / days)))

    def f_cm_at(self, days: float) -> float:
        return self.f_cm * self.beta_cc(days)

    def f_ctm_at(self, days: float) -> float:
        alpha = 2.0 / 3.0 if days >= 28 else 1.0
        return self.f_ctm * self.beta_cc(days) ** alpha

    # ------------------------------------------------------------------
    # Design values
    # ------------------------------------------------------------------
    def f_cd(self, gamma: float, alpha: Optional[float] = None) -> float:
        """Design compressive strength alpha_cc * f_ck / gamma_c."""
        alpha = self.alpha_cc if alpha is None else alpha
        fck = self.f_ck if self.age == 28 else self.f_cm_at(self.age) - 8.0
        return alpha * fck / gamma

    def f_ctd(self, gamma: float, alpha: Optional[float] = None) -> float:
        """Design tensile strength alpha_ct * f_ctk,0.05 / gamma_ct."""
        alpha = self.alpha_ct if alpha is None else alpha
        fctk = self.f_ctk if self.age == 28 else 0.7 * self.f_ctm_at(self.age)
        return alpha * fctk / gamma

    def E_eqv(self, gamma: float, curve: Optional[ConcreteCurve] = None) -> float:
        """Initial slope of the design curve, used for the tension branch."""
        curve = self._curve(curve)
        if curve == ConcreteCurve.PARABOLIC:
            return self.n * self.f_cd(gamma) / self.eps_c2
        if curve == ConcreteCurve.BILINEAR:
            return self.f_cd(gamma) / self.eps_c3
        return self.Ec_eff

    def eps_cr(self, gamma_c: float, gamma_ct: float, curve: Optional[ConcreteCurve] = None) -> float:
        """Cracking strain f_ctd / E_eqv."""
        curve = self._curve(curve)
        if curve == ConcreteCurve.ELASTIC:
            return UNCRACKABLE_STRAIN
        return self.f_ctd(gamma_ct) / self.E_eqv(gamma_c, curve)

    # ------------------------------------------------------------------
    # Stress-strain relationship
    # ------------------------------------------------------------------
    def stress(self, strain: float, gamma: float = 1.0, curve: Optional[ConcreteCurve] = None) -> float:
        """Return stress (MPa) for a given strain.

        Compression is negative, tension is positive.
        """
        curve = self._curve(curve)
        if curve == ConcreteCurve.PARABOLIC:
            return self._parabolic(strain, gamma)
        if curve == ConcreteCurve.BILINEAR:
            return self._bilinear(strain, gamma)
        if curve == ConcreteCurve.BLOCK:
            if strain > 0:
                return -self._block(-strain, gamma)
            return self._block(strain, gamma)
        if curve == ConcreteCurve.COMPLEX:
            if strain > 0:
                return -self._sargin(-strain)
            return self._sargin(strain)
        return strain * self.Ec_eff

    def _curve(self, curve: Optional[ConcreteCurve]) -> ConcreteCurve:
        if curve is None:
            return self.curve
        if isinstance(curve, str):
            return ConcreteCurve(curve)
        return curve

    def _parabolic(self, eps: float, gamma: float) -> float:
        if eps > 0:
            return eps * self.E_eqv(gamma, ConcreteCurve.PARABOLIC)
        if eps > -self.eps_c2:
            return -self.f_cd(gamma) * (1.0 - (1.0 + eps / self.eps_c2) ** self.n)
        return -self.f_cd(gamma)

    def _bilinear(self, eps: float, gamma: float) -> float:
        if eps > 0:
            return eps * self.E_eqv(gamma, ConcreteCurve.BILINEAR)
        if eps > -self.eps_c3:
            return self.f_cd(gamma) * eps / self.eps_c3
        return -self.f_cd(gamma)

    def _block(self, eps: float, gamma: float) -> float:
        # lambda = 0.8: no stress over the top 20 % of the ultimate strain
        if eps > -0.2 * self.eps_cu3:
            return 0.0
        return -self.f_cd(gamma)

    def _sargin(self, eps: float) -> float:
        """EN 1992-1-1 (3.14), mean values."""
        k = 1.05 * self.E_cm * self.eps_c1 / self.f_cm
        eta = -eps / self.eps_c1
        return -self.f_cm * (k * eta - eta * eta) / (1.0 + eta * (k - 2.0))

    # ------------------------------------------------------------------
    # Serialization helpers
    # ------------------------------------------------------------------
    def to_dict(self) -> dict:
        return {
            "type": "concrete",
            "f_ck": self.f_ck,
            "curve": self.curve.value,
            "cement_class": self.cement_class.value,
            "age": self.age,
            "alpha_cc": self.alpha_cc,
            "alpha_ct": self.alpha_ct,
            "creep": self.creep,
            "D_lower": self.D_lower,
            "national_annex": self.national_annex,
        }

    @classmethod
    def from_dict(cls, d: dict) -> "Concrete":
        return cls(
            f_ck=d["f_ck"],
            curve=ConcreteCurve(d.get("curve", "parabolic")),
            cement_class=CementClass(d.get("cement_class", "N")),
            age=d.get("age", 28.0),
            alpha_cc=d.get("alpha_cc", 1.0),
            alpha_ct=d.get("alpha_ct", 1.0),
            creep=d.get("creep", 0.0),
            D_lower=d.get("D_lower", 8.0),
            national_annex=d.get("national_annex", ""),
        )
