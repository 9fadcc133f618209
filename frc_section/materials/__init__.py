"""Material constitutive models to EN 1992 and fib Model Code 2010."""

from frc_section.materials.concrete import CementClass, Concrete, ConcreteCurve
from frc_section.materials.fibres import FibreReinforcement
from frc_section.materials.steel import DuctilityClass, ReinforcingSteel

__all__ = [
    "CementClass",
    "Concrete",
    "ConcreteCurve",
    "DuctilityClass",
    "FibreReinforcement",
    "ReinforcingSteel",
]
