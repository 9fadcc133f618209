"""
Moment-curvature sweep by curvature-controlled equilibrium solves.

Algorithm:
==========

  1. Step size: the cracking curvature for the design tensile strength
     f_ctd (with the height factor), a tenth of it in SLS.
  2. Sweep kappa = 0, dk, 2 dk, ... up to kappa_max, default 12e-3 / h,
     solving the section at the axial force of the load case.
  3. Stop at the first state whose utilization exceeds unity, or when
     a solve fails.

Points are stored as magnitudes (|kappa|, |M|) so that sagging and
hogging sweeps plot in the same quadrant.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from loguru import logger

from frc_section.analysis.cracking import cracking_moment
from frc_section.analysis.parameters import LimitState, SectionForces, partial_factors
from frc_section.exceptions import FrcSectionError

# Default sweep limit, kappa_max = DEFAULT_CURVATURE_STRAIN / h
DEFAULT_CURVATURE_STRAIN = 12.0e-3

# Step refinement in SLS
SLS_STEP_DIVISOR = 10.0


@dataclass
class MomentCurvaturePoint:
    """A single point on the moment-curvature response."""

    curvature: float  # 1/mm, magnitude
    moment: float  # kNm, magnitude
    UR_total: float
    cmod: float  # mm

    @property
    def curvature_per_m(self) -> float:
        return self.curvature * 1000.0


@dataclass
class MomentCurvatureResult:
    """Moment-curvature response of one load case."""

    points: List[MomentCurvaturePoint] = field(default_factory=list)
    axial_load: float = 0.0  # kN
    step: float = 0.0  # 1/mm
    max_curvature: float = 0.0  # 1/mm
    iterations: int = 0
    stop_reason: str = ""

    @property
    def curvatures(self) -> List[float]:
        return [p.curvature for p in self.points]

    @property
    def moments(self) -> List[float]:
        return [p.moment for p in self.points]

    @property
    def utilizations(self) -> List[float]:
        return [p.UR_total for p in self.points]

    @property
    def cmods(self) -> List[float]:
        return [p.cmod for p in self.points]

    @property
    def peak_moment(self) -> float:
        return max(self.moments, default=0.0)

    def to_dict(self) -> dict:
        """Serialize; curvature in mrad/m (1/mm x 1e6), moment in kNm."""
        return {
            "moment_curvature": {
                "x_axis": "curvature",
                "y_axis": "moment",
                "data": [
                    {
                        "curvature": p.curvature * 1e6,  # mrad/m
                        "moment": p.moment,
                        "UR_total": p.UR_total,
                        "cmod": p.cmod,
                    }
                    for p in self.points
                ],
            },
            "summary": {
                "axial_load": self.axial_load,
                "peak_moment": self.peak_moment,
                "step_1_per_mm": self.step,
                "max_curvature_1_per_mm": self.max_curvature,
                "iterations": self.iterations,
                "stop_reason": self.stop_reason or None,
            },
        }


def moment_curvature(
    analysis, forces: SectionForces, max_curvature: float = 0.0
) -> MomentCurvatureResult:
    """Sweep the curvature of ``forces`` from zero towards failure.

    Parameters
    ----------
    analysis : CrossSectionAnalysis
        Owner; the sweep runs on one spawned sub-analysis.
    forces : SectionForces
        N and the limit state are applied; the sign of Mz picks the
        bending direction.
    max_curvature : float
        Sweep limit (1/mm, magnitude). 0 selects 12e-3 / h.

    Returns
    -------
    MomentCurvatureResult
    """
    section = analysis.section
    if max_curvature == 0:
        max_curvature = DEFAULT_CURVATURE_STRAIN / section.height

    gamma = partial_factors(forces.limit_state, analysis.params.national_annex)
    f_ct = section.concrete.f_ctd(gamma.ct)
    step = cracking_moment(analysis, forces, f_ct, with_height_factor=True).kappa_cr
    if forces.limit_state == LimitState.SLS:
        step /= SLS_STEP_DIVISOR

    n_steps = abs(round(max_curvature / step)) if step != 0 else 0
    result = MomentCurvatureResult(
        axial_load=forces.N, step=abs(step), max_curvature=max_curvature
    )
    sub = analysis.spawn()

    i = 0
    for i in range(n_steps + 1):
        kappa = i * step
        if i == 0:
            result.points.append(MomentCurvaturePoint(0.0, 0.0, 0.0, 0.0))
            continue
        try:
            state = sub.solve_with_curvature(forces, kappa)
        except FrcSectionError as exc:
            logger.warning("Moment-curvature sweep stopped at kappa={:.3e}: {}", kappa, exc)
            result.stop_reason = type(exc).__name__
            break
        if not state.is_ok:
            result.stop_reason = "utilization"
            break
        result.points.append(MomentCurvaturePoint(
            curvature=abs(kappa),
            moment=abs(state.Mz),
            UR_total=state.UR_total,
            cmod=state.cmod,
        ))

    result.iterations = i
    return result
