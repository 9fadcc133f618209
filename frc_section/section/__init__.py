"""Cross-section definition and discretisation."""

from frc_section.section.geometry import (
    RectangularSection,
    TeeSection,
    TrapezoidSection,
    CircularSection,
    ConcreteSlice,
    StirrupLayout,
)
from frc_section.section.rebar import RebarBar, RebarLayer, Reinforcement, Stirrups
from frc_section.section.cross_section import CrossSection

__all__ = [
    "RectangularSection",
    "TeeSection",
    "TrapezoidSection",
    "CircularSection",
    "ConcreteSlice",
    "StirrupLayout",
    "RebarBar",
    "RebarLayer",
    "Reinforcement",
    "Stirrups",
    "CrossSection",
]
