"""
Fibre residual-strength model for fibre-reinforced concrete (FRC).

Residual flexural strengths f_R1..f_R4 from EN 14651 beam tests are
converted to uniaxial residual tensile strengths:

  fib Model Code 2010 (5.6.4, linear model):
      f_Fts = 0.45 f_R1
      f_Ftu(w) = f_Fts - w / w_u,max * (f_Fts - 0.5 f_R3 + 0.2 f_R1)
  EN 1992-1-1 Annex L:
      f_Fts = 0.40 f_R1
      f_Ftu = 0.57 f_R3 - 0.26 f_R1

The post-cracking bridging stress is linear in crack opening between
the serviceability opening w_s and the ultimate opening w_u.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from frc_section.exceptions import InvalidInputError

# Bridging stress floor; keeps cracked fibre slices at non-zero stiffness
MIN_BRIDGING_STRESS = 1.0e-10

# Maximum crack opening used for f_Ftu in the fib linear model (mm)
FIB_W_U_MAX = 2.5


@dataclass
class FibreReinforcement:
    """Fibre addition described by its residual flexural strengths.

    Parameters
    ----------
    f_R1k, f_R2k, f_R3k, f_R4k : float
        Characteristic residual flexural strengths in MPa.
    f_R1, f_R2, f_R3, f_R4 : float, optional
        Mean residual flexural strengths in MPa. Default: equal to the
        characteristic values.
    code : str
        "fib" or "EC"; selects the f_Fts / f_Ftu conversion.
    k : float
        Orientation factor (0.5 <= k <= 2).
    kG : float
        Requested factor for statically indeterminate members; capped
        at 90 % of the mean-to-characteristic ratio.
    l_f : float
        Fibre length in mm (lower bound on crack spacing).
    w_s, w_u : float
        Crack openings (mm) at f_Fts and f_Ftu.
    name : str
        Product label.
    """

    f_R1k: float = 0.0
    f_R2k: float = 0.0
    f_R3k: float = 0.0
    f_R4k: float = 0.0
    f_R1: Optional[float] = None
    f_R2: Optional[float] = None
    f_R3: Optional[float] = None
    f_R4: Optional[float] = None
    code: str = "fib"
    k: float = 1.0
    kG: float = 1.0
    l_f: float = 40.0
    w_s: float = 0.5
    w_u: float = 2.5
    name: str = ""

    kG_max: float = field(init=False)

    def __post_init__(self) -> None:
        for label in ("f_R1k", "f_R2k", "f_R3k", "f_R4k"):
            if getattr(self, label) < 0:
                raise InvalidInputError(f"{label} must be non-negative, got {getattr(self, label)}")
        if not 0.5 <= self.k <= 2.0:
            raise InvalidInputError(f"orientation factor k must be in [0.5, 2], got {self.k}")
        if self.w_u <= self.w_s:
            raise InvalidInputError(f"w_u ({self.w_u}) must exceed w_s ({self.w_s})")
        if self.code not in ("fib", "EC", "Watts"):
            raise InvalidInputError(f"Unknown fibre code: {self.code!r}")
        if self.f_R1 is None:
            self.f_R1 = self.f_R1k
        if self.f_R2 is None:
            self.f_R2 = self.f_R2k
        if self.f_R3 is None:
            self.f_R3 = self.f_R3k
        if self.f_R4 is None:
            self.f_R4 = self.f_R4k

        pairs = [
            (self.f_R1, self.f_R1k),
            (self.f_R2, self.f_R2k),
            (self.f_R3, self.f_R3k),
            (self.f_R4, self.f_R4k),
        ]
        ratios = [0.9 * mean / char for mean, char in pairs if char > 0]
        self.kG_max = min(ratios) if ratios else 1.0
        self.kG = min(self.kG, self.kG_max)

    @classmethod
    def none(cls, code: str = "fib") -> "FibreReinforcement":
        """Plain concrete: no residual strength."""
        return cls(code=code, name="none")

    @property
    def has_fibres(self) -> bool:
        return self.f_Ftsk != 0

    # ------------------------------------------------------------------
    # Residual tensile strengths
    # ------------------------------------------------------------------
    @property
    def f_Ftsk(self) -> float:
        if self.code == "fib":
            return self.k * 0.45 * self.f_R1k
        return self.k * 0.4 * self.f_R1k

    @property
    def f_Ftuk(self) -> float:
        if self.code == "fib":
            return self.f_Ftuk_at(self.w_u)
        return self.k * (0.57 * self.f_R3k - 0.26 * self.f_R1k)

    def f_Ftuk_at(self, crack_width: float) -> float:
        """fib MC2010 (5.6-3): residual strength at a given ultimate crack width."""
        return self.k * max(
            0.0,
            0.45 * self.f_R1k
            - crack_width / FIB_W_U_MAX * (0.65 * self.f_R1k - 0.5 * self.f_R3k),
        )

    def f_Ftsd(self, gamma: float) -> float:
        return self.f_Ftsk * self.kG / gamma

    def f_Ftud(self, gamma: float) -> float:
        return self.f_Ftuk * self.kG / gamma

    @property
    def residual_class(self) -> str:
        """fib MC2010 5.6.3 toughness class, e.g. "2.5c"."""
        if self.f_R1k <= 0:
            return "none"
        ratio = self.f_R3k / self.f_R1k
        strength = f"{round(self.f_R1k, 1):g}"
        if ratio < 0.5:
            return "unclassified"
        for limit, letter in ((0.7, "a"), (0.9, "b"), (1.1, "c"), (1.3, "d")):
            if ratio < limit:
                return strength + letter
        return strength + "e"

    # ------------------------------------------------------------------
    # Bridging law
    # ------------------------------------------------------------------
    def bridging_stress(self, cod: float, gamma: float = 1.0) -> float:
        """Residual tensile stress (MPa) at crack opening ``cod`` (mm)."""
        if self.code == "fib":
            f_1 = self.f_Ftsd(gamma)
            f_3 = self.f_Ftud(gamma)
        else:
            f_1 = 0.37 * self.f_R1k * self.kG / gamma
            f_3 = max(
                MIN_BRIDGING_STRESS,
                (0.57 * self.f_R3k - 0.26 * self.f_R1k) * self.kG / gamma,
            )
        stress = f_1 + (cod - self.w_s) / (self.w_u - self.w_s) * (f_3 - f_1)
        return max(MIN_BRIDGING_STRESS, stress)

    def to_dict(self) -> dict:
        return {
            "type": "fibres",
            "name": self.name,
            "code": self.code,
            "f_R1k": self.f_R1k,
            "f_R2k": self.f_R2k,
            "f_R3k": self.f_R3k,
            "f_R4k": self.f_R4k,
            "f_R1": self.f_R1,
            "f_R2": self.f_R2,
            "f_R3": self.f_R3,
            "f_R4": self.f_R4,
            "k": self.k,
            "kG": self.kG,
            "l_f": self.l_f,
            "w_s": self.w_s,
            "w_u": self.w_u,
        }

    @classmethod
    def from_dict(cls, d: dict) -> "FibreReinforcement":
        return cls(
            f_R1k=d.get("f_R1k", 0.0),
            f_R2k=d.get("f_R2k", 0.0),
            f_R3k=d.get("f_R3k", 0.0),
            f_R4k=d.get("f_R4k", 0.0),
            f_R1=d.get("f_R1"),
            f_R2=d.get("f_R2"),
            f_R3=d.get("f_R3"),
            f_R4=d.get("f_R4"),
            code=d.get("code", "fib"),
            k=d.get("k", 1.0),
            kG=d.get("kG", 1.0),
            l_f=d.get("l_f", 40.0),
            w_s=d.get("w_s", 0.5),
            w_u=d.get("w_u", 2.5),
            name=d.get("name", ""),
        )
