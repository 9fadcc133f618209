"""
CrossSectionAnalysis: the entry point tying the solvers together.

An analysis owns an immutable section and parameter set plus the state
of its last solve (forces, mode, result, shear). Every operation that
needs a different parameter set or a scratch state runs on a fresh
instance from :meth:`CrossSectionAnalysis.spawn`, so nested solves never
share mutable state with their owner.

Example
-------
>>> analysis = CrossSectionAnalysis(section)
>>> result = analysis.solve_with_moment(SectionForces(N=0, Mz=150))
>>> capacity = analysis.ultimate_capacity(SectionForces(N=0, Mz=150))
"""

from __future__ import annotations

from dataclasses import replace
from typing import Optional, Tuple

from frc_section.analysis.capacity import CapacityCache, CapacityResult, find_capacity
from frc_section.analysis.cracking import (
    CrackingMoment,
    MinimumReinforcement,
    cracking_moment,
    minimum_reinforcement,
)
from frc_section.analysis.equilibrium import AnalysisResult, SolveMode, find_stress_state
from frc_section.analysis.interaction import InteractionDiagram, axial_capacity, n_m_diagram
from frc_section.analysis.moment_curvature import MomentCurvatureResult, moment_curvature
from frc_section.analysis.parameters import AnalysisParameters, LimitState, SectionForces
from frc_section.analysis.shear import ShearResult, shear_capacity
from frc_section.exceptions import InvalidInputError
from frc_section.section.cross_section import CrossSection


class CrossSectionAnalysis:
    """Nonlinear analysis of one cross-section.

    Parameters
    ----------
    section : CrossSection
        Discretised section with its materials.
    params : AnalysisParameters, optional
        Design code and solver options. Default: ``AnalysisParameters()``.
    trace : bool
        Record the inner iterations of every solve on the result.
    """

    def __init__(
        self,
        section: CrossSection,
        params: Optional[AnalysisParameters] = None,
        trace: bool = False,
    ) -> None:
        self.section = section
        self.params = params if params is not None else AnalysisParameters()
        self.trace = trace

        self.forces: Optional[SectionForces] = None
        self.mode: Optional[SolveMode] = None
        self.kappa: Optional[float] = None
        self.result: Optional[AnalysisResult] = None
        self.shear: Optional[ShearResult] = None
        self._capacity_cache = CapacityCache()

    def __repr__(self) -> str:
        return (
            f"CrossSectionAnalysis(section={self.section.shape_name}, "
            f"code={self.params.code.value}, forces={self.forces})"
        )

    # ------------------------------------------------------------------
    # Sub-analyses
    # ------------------------------------------------------------------
    def spawn(self, **overrides) -> "CrossSectionAnalysis":
        """Fresh analysis of the same section, optionally with other parameters."""
        params = replace(self.params, **overrides) if overrides else self.params
        return CrossSectionAnalysis(self.section, params)

    def copy(self, copy_stress_state: bool = False) -> "CrossSectionAnalysis":
        """New instance with the same section, parameters and last forces.

        With ``copy_stress_state`` the last solve (and shear check) is
        repeated on the copy.
        """
        other = CrossSectionAnalysis(self.section, self.params, self.trace)
        other.forces = self.forces
        if copy_stress_state and self.forces is not None:
            if self.mode == SolveMode.CURVATURE:
                other.solve_with_curvature(self.forces, self.kappa)
            else:
                other.solve_with_moment(self.forces)
            if self.shear is not None:
                other.shear_capacity(self.forces, self.shear.direction)
        return other

    # ------------------------------------------------------------------
    # Equilibrium
    # ------------------------------------------------------------------
    def _solve(self, forces: SectionForces, mode: SolveMode, kappa: Optional[float]) -> AnalysisResult:
        result = find_stress_state(
            self.section, forces, self.params, mode=mode, kappa=kappa, trace=self.trace
        )
        self.forces = forces
        self.mode = mode
        self.kappa = kappa
        self.result = result
        self.shear = None
        return result

    def solve_with_moment(self, forces: SectionForces) -> AnalysisResult:
        """Stress state in equilibrium with (N, Mz, My)."""
        return self._solve(forces, SolveMode.MOMENT, None)

    def solve_with_curvature(self, forces: SectionForces, kappa: float) -> AnalysisResult:
        """Stress state at axial force N and prescribed curvature (1/mm, internal sign)."""
        return self._solve(forces, SolveMode.CURVATURE, kappa)

    @property
    def is_ok(self) -> bool:
        return round(self.UR_total, 2) <= 1.0

    @property
    def UR_total(self) -> float:
        if self.result is None:
            return 0.0
        if self.shear is not None:
            return self.shear.UR_total
        return self.result.UR_total

    # ------------------------------------------------------------------
    # Capacities
    # ------------------------------------------------------------------
    def ultimate_capacity(
        self, forces: SectionForces, update_state: bool = False
    ) -> CapacityResult:
        """Moment capacity at the axial force of ``forces``.

        Results are cached per (N, sign of Mz, limit state). With
        ``update_state`` this analysis is left in the state at capacity.
        """
        capacity = self._capacity_cache.get(forces)
        if capacity is None:
            sub = self.spawn()
            capacity = find_capacity(sub.solve_with_curvature, self.section, forces)
            self._capacity_cache.put(forces, capacity)
        if update_state:
            self.solve_with_curvature(forces, capacity.kappa)
        return capacity

    def shear_capacity(self, forces: SectionForces, direction: str = "Z") -> ShearResult:
        self.shear = None
        result = shear_capacity(self, forces, direction)
        self.shear = result
        return result

    def cracking_moment(
        self,
        forces: SectionForces,
        f_ct: Optional[float] = None,
        with_height_factor: bool = False,
    ) -> CrackingMoment:
        return cracking_moment(self, forces, f_ct, with_height_factor)

    def minimum_reinforcement(
        self, forces: SectionForces, sigma_s: Optional[float] = None
    ) -> MinimumReinforcement:
        return minimum_reinforcement(self, forces, sigma_s)

    def moment_curvature(
        self, forces: SectionForces, max_curvature: float = 0.0
    ) -> MomentCurvatureResult:
        return moment_curvature(self, forces, max_curvature)

    def axial_capacity(self, limit_state: LimitState = LimitState.ULS) -> Tuple[float, float]:
        """(N_min, N_max) in kN."""
        return axial_capacity(self.section, limit_state, self.params.national_annex)

    def max_axial_capacity(self, limit_state: LimitState = LimitState.ULS, which: str = "max") -> float:
        N_min, N_max = self.axial_capacity(limit_state)
        if which == "max":
            return N_max
        if which == "min":
            return N_min
        raise InvalidInputError(f"which must be 'max' or 'min', got {which!r}")

    def n_m_diagram(
        self, div_N: int = 10, limit_state: LimitState = LimitState.ULS
    ) -> InteractionDiagram:
        return n_m_diagram(self, div_N, limit_state)
