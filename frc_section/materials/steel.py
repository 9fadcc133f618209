"""
Reinforcing steel constitutive model to EN 1992-1-1 3.2.

Supports:
  - Inclined top branch (strain hardening) up to f_ud at eps_ud
  - Horizontal top branch with a small residual slope

Ductility classes follow Annex C (characteristic values):

  class   eps_uk   k = f_uk / f_yk
  A       2.5 %    1.05
  B       7.0 %    1.08
  C       7.5 %    1.15

Sign convention: tension positive, compression negative.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from frc_section.exceptions import InvalidInputError


class DuctilityClass(Enum):
    A = "A"
    B = "B"
    C = "C"


_DUCTILITY = {
    DuctilityClass.A: (0.025, 1.05),
    DuctilityClass.B: (0.070, 1.08),
    DuctilityClass.C: (0.075, 1.15),
}

# Slope (MPa) of the horizontal branch; keeps the secant stiffness positive
PLASTIC_RESIDUAL_SLOPE = 10.0


@dataclass
class ReinforcingSteel:
    """Reinforcing steel bar material.

    Parameters
    ----------
    f_yk : float
        Characteristic yield stress in MPa.
    ductility_class : DuctilityClass
        Annex C ductility class. Default B.
    strain_hardening : bool
        Use the inclined top branch. When False the top branch is
        horizontal.
    E_s : float
        Elastic modulus in MPa (default 200000).
    """

    f_yk: float
    ductility_class: DuctilityClass = DuctilityClass.B
    strain_hardening: bool = True
    E_s: float = 200_000.0

    eps_uk: float = field(init=False)
    f_uk: float = field(init=False)

    def __post_init__(self) -> None:
        if self.f_yk <= 0:
            raise InvalidInputError(f"f_yk must be positive, got {self.f_yk}")
        if self.E_s <= 0:
            raise InvalidInputError(f"E_s must be positive, got {self.E_s}")
        if isinstance(self.ductility_class, str):
            self.ductility_class = DuctilityClass(self.ductility_class)
        self.eps_uk, k = _DUCTILITY[self.ductility_class]
        self.f_uk = k * self.f_yk

    @property
    def name(self) -> str:
        return f"B{self.f_yk:g}{self.ductility_class.value}"

    @property
    def eps_ud(self) -> float:
        """Design ultimate strain, 0.9 * eps_uk (recommended value)."""
        return 0.9 * self.eps_uk

    @property
    def eps_yk(self) -> float:
        return self.f_yk / self.E_s

    def f_yd(self, gamma: float) -> float:
        return self.f_yk / gamma

    def f_ud(self, gamma: float) -> float:
        return self.f_uk / gamma

    def eps_yd(self, gamma: float) -> float:
        return self.f_yd(gamma) / self.E_s

    def stress(self, strain: float, gamma: float = 1.0, strain_hardening: bool | None = None) -> float:
        """Return stress (MPa) for a given strain at partial factor gamma."""
        if strain_hardening is None:
            strain_hardening = self.strain_hardening
        if strain_hardening:
            return self._hardening(strain, gamma)
        return self._plastic(strain, gamma)

    def _hardening(self, eps: float, gamma: float) -> float:
        f_yd = self.f_yd(gamma)
        eps_yd = self.eps_yd(gamma)
        if eps <= -eps_yd:
            return -f_yd
        if eps <= eps_yd:
            return eps * self.E_s
        # Hardening slope also used beyond eps_ud
        slope = (self.f_ud(gamma) - f_yd) / (self.eps_ud - eps_yd)
        return f_yd + (eps - eps_yd) * slope

    def _plastic(self, eps: float, gamma: float) -> float:
        magnitude = min(
            abs(eps) * self.E_s,
            self.f_yd(gamma) + (abs(eps) - self.eps_yd(gamma)) * PLASTIC_RESIDUAL_SLOPE,
        )
        return magnitude if eps >= 0 else -magnitude

    def to_dict(self) -> dict:
        return {
            "type": "reinforcing_steel",
            "f_yk": self.f_yk,
            "ductility_class": self.ductility_class.value,
            "strain_hardening": self.strain_hardening,
            "E_s": self.E_s,
        }

    @classmethod
    def from_dict(cls, d: dict) -> "ReinforcingSteel":
        return cls(
            f_yk=d["f_yk"],
            ductility_class=DuctilityClass(d.get("ductility_class", "B")),
            strain_hardening=d.get("strain_hardening", True),
            E_s=d.get("E_s", 200_000.0),
        )
