"""
Axial capacity limits and N-M interaction diagrams.

The diagram walks div_N + 1 axial levels between the pure compression
and pure tension limits and evaluates the moment capacity at each level
twice: sagging while N ascends, hogging while N descends. The result
is a closed polygon in the (N, Mrd) plane.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Tuple

from loguru import logger

from frc_section.analysis.parameters import LimitState, SectionForces, partial_factors
from frc_section.exceptions import FrcSectionError, InvalidInputError

# Reduction applied to the squash loads
AXIAL_REDUCTION = 0.99

# Concrete stress limit factor in SLS
SLS_CONCRETE_FACTOR = 0.6

# Steel stress used for the SLS tension limit (MPa)
SLS_STEEL_STRESS = 200.0

# Moment magnitude used to pick the bending direction (kNm)
PROBE_MOMENT = 0.01


@dataclass
class InteractionDiagram:
    """N-M interaction points, sagging branch first."""

    N: List[float] = field(default_factory=list)
    M: List[float] = field(default_factory=list)
    sagging: List[Tuple[float, float]] = field(default_factory=list)
    hogging: List[Tuple[float, float]] = field(default_factory=list)
    N_min: float = 0.0
    N_max: float = 0.0
    failed_levels: List[float] = field(default_factory=list)

    def add(self, N: float, Mrd: float, branch: List[Tuple[float, float]]) -> None:
        self.N.append(N)
        self.M.append(Mrd)
        branch.append((N, Mrd))

    def to_dict(self) -> dict:
        return {
            "N": list(self.N),
            "M": list(self.M),
            "N_min": self.N_min,
            "N_max": self.N_max,
            "failed_levels": list(self.failed_levels),
        }


def axial_capacity(
    section, limit_state: LimitState = LimitState.ULS, national_annex: str = ""
) -> Tuple[float, float]:
    """Compression and tension limits (N_min, N_max) in kN."""
    gamma = partial_factors(limit_state, national_annex)
    steel = section.reinforcement.material
    A_s = section.steel_area
    f_yd = steel.f_yd(gamma.s) if steel is not None else 0.0

    f_cd = section.concrete.f_cd(gamma.c)
    if limit_state == LimitState.SLS:
        f_cd *= SLS_CONCRETE_FACTOR
        N_max = AXIAL_REDUCTION / 1000.0 * A_s * SLS_STEEL_STRESS
    else:
        N_max = AXIAL_REDUCTION / 1000.0 * A_s * f_yd

    N_min = -AXIAL_REDUCTION / 1000.0 * (section.gross_area * f_cd + A_s * f_yd)
    return N_min, N_max


def n_m_diagram(
    analysis, div_N: int = 10, limit_state: LimitState = LimitState.ULS
) -> InteractionDiagram:
    """Moment capacities over the admissible axial range.

    Levels where the capacity search fails are skipped and listed in
    ``failed_levels``.
    """
    if div_N < 1:
        raise InvalidInputError(f"div_N must be >= 1, got {div_N}")
    N_min, N_max = axial_capacity(analysis.section, limit_state, analysis.params.national_annex)
    diagram = InteractionDiagram(N_min=N_min, N_max=N_max)
    sub = analysis.spawn()

    # Both ends exact so no level leaves [N_min, N_max]
    levels = [N_min + (N_max - N_min) * i / div_N for i in range(div_N)] + [N_max]
    for sign, branch, order in (
        (1.0, diagram.sagging, levels),
        (-1.0, diagram.hogging, list(reversed(levels))),
    ):
        for N in order:
            forces = SectionForces(N=N, Mz=sign * PROBE_MOMENT, limit_state=limit_state)
            try:
                capacity = sub.ultimate_capacity(forces)
            except FrcSectionError as exc:
                logger.warning("N-M diagram: no capacity at N={:.1f} kN: {}", N, exc)
                diagram.failed_levels.append(N)
                continue
            diagram.add(N, capacity.Mrd, branch)

    return diagram
