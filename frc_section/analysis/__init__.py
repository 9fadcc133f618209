"""Sectional analysis engines to EN 1992 and fib Model Code 2010."""

from frc_section.analysis.parameters import (
    AnalysisParameters,
    DesignCodeName,
    LimitState,
    PartialFactors,
    SectionForces,
    partial_factors,
)
from frc_section.analysis.equilibrium import (
    AnalysisResult,
    AnalysisStatus,
    IterationRecord,
    SolveMode,
    find_stress_state,
)
from frc_section.analysis.capacity import CapacityResult
from frc_section.analysis.cracking import CrackingMoment, MinimumReinforcement
from frc_section.analysis.shear import ShearResult
from frc_section.analysis.moment_curvature import MomentCurvatureResult, MomentCurvaturePoint
from frc_section.analysis.interaction import InteractionDiagram
from frc_section.analysis.cross_section_analysis import CrossSectionAnalysis

__all__ = [
    "AnalysisParameters",
    "DesignCodeName",
    "LimitState",
    "PartialFactors",
    "SectionForces",
    "partial_factors",
    "AnalysisResult",
    "AnalysisStatus",
    "IterationRecord",
    "SolveMode",
    "find_stress_state",
    "CapacityResult",
    "CrackingMoment",
    "MinimumReinforcement",
    "ShearResult",
    "MomentCurvatureResult",
    "MomentCurvaturePoint",
    "InteractionDiagram",
    "CrossSectionAnalysis",
]
