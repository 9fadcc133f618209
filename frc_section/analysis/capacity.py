"""
Ultimate moment capacity by a secant search over curvature.

The moment capacity M_Rd at a given axial force is the moment of the
curvature-controlled state whose total utilization is exactly one.
With F(kappa) = log10(UR_total(kappa)):

  1. seed kappa_0 = max(1e-10, (7.2e-4 + eps_N) / h), signed against Mz
  2. two bootstrap steps kappa *= 1.01
  3. secant steps kappa <- kappa - F / F'
  4. stop when |F| <= 0.005 (UR within ~1.2 % of unity)

The logarithm makes F nearly linear in kappa near failure.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, asdict, replace
from typing import Callable, Dict, Tuple

from loguru import logger

from frc_section.analysis.equilibrium import AnalysisResult
from frc_section.analysis.parameters import LimitState, SectionForces

MAX_CAPACITY_ITERATIONS = 200
CAPACITY_TOL = 0.005
BOOTSTRAP_FACTOR = 1.01
BOOTSTRAP_STEPS = 2

# Strain offset of the seed curvature (about half the yield strain of B500)
SEED_STRAIN = 7.2e-4
MIN_SEED_CURVATURE = 1.0e-10

# Floor for log10 of the utilization
_MIN_UR = 1.0e-12

CacheKey = Tuple[float, int, LimitState]


@dataclass(frozen=True)
class CapacityResult:
    """Moment capacity at one axial force.

    Parameters
    ----------
    Mrd : float
        Design moment capacity (kNm, user sign).
    kappa : float
        Curvature of the state at capacity (1/mm, internal sign).
    N : float
        Axial force (kN).
    iterations : int
        Equilibrium solves spent; 0 for a cached result.
    converged : bool
        False when the search hit its iteration cap.
    UR_M : float
        Applied moment over capacity for the requesting forces.
    """

    Mrd: float
    kappa: float
    N: float
    iterations: int
    converged: bool = True
    UR_M: float = 0.0

    def utilization(self, Mz: float) -> float:
        if self.Mrd == 0:
            return math.inf if Mz != 0 else 0.0
        return Mz / self.Mrd

    def to_dict(self) -> dict:
        return asdict(self)


def cache_key(forces: SectionForces) -> CacheKey:
    return (forces.N, forces.moment_sign, forces.limit_state)


def seed_curvature(section, forces: SectionForces) -> float:
    eps = forces.N * 1000.0 / (section.gross_area * section.concrete.E_cm)
    return max(MIN_SEED_CURVATURE, (SEED_STRAIN + eps) / section.height) * -forces.moment_sign


def find_capacity(
    solve: Callable[[SectionForces, float], AnalysisResult],
    section,
    forces: SectionForces,
    max_iterations: int = MAX_CAPACITY_ITERATIONS,
) -> CapacityResult:
    """Secant search for the curvature at UR_total = 1.

    Parameters
    ----------
    solve : callable
        ``solve(forces, kappa)`` returning a curvature-controlled
        AnalysisResult, normally bound to a fresh sub-analysis.
    section : CrossSection
    forces : SectionForces
    max_iterations : int
    """
    kappa_0 = seed_curvature(section, forces)
    kappa = kappa_0
    prev_kappa = 0.0
    F = 1.0
    iterations = 0
    converged = False
    result = None

    while True:
        result = solve(forces, kappa)
        iterations += 1

        prev_F = F
        F = math.log10(max(result.UR_total, _MIN_UR))
        F_prime = (F - prev_F) / (kappa - prev_kappa)
        prev_kappa = kappa

        if iterations <= BOOTSTRAP_STEPS or F_prime == 0:
            kappa = kappa * BOOTSTRAP_FACTOR
        else:
            kappa = prev_kappa - F / F_prime

        # Stay on the tension face of the seed
        if math.copysign(1.0, kappa) != math.copysign(1.0, kappa_0):
            kappa = -kappa

        if abs(F) <= CAPACITY_TOL:
            converged = True
            break
        if iterations >= max_iterations:
            logger.warning(
                "Moment capacity not found after {} iterations (N={}), UR={:.3f}",
                iterations, forces.N, result.UR_total,
            )
            break

    Mrd = result.Mz
    logger.info(
        "Mrd={:.2f} kNm at N={} kN ({} iterations)", Mrd, forces.N, iterations
    )
    capacity = CapacityResult(
        Mrd=Mrd, kappa=prev_kappa, N=forces.N, iterations=iterations, converged=converged
    )
    return replace(capacity, UR_M=capacity.utilization(forces.Mz))


class CapacityCache:
    """Per-analysis memo of capacity results keyed by (N, sign(Mz), limit state)."""

    def __init__(self) -> None:
        self._store: Dict[CacheKey, CapacityResult] = {}

    def __contains__(self, key: CacheKey) -> bool:
        return key in self._store

    def __len__(self) -> int:
        return len(self._store)

    def get(self, forces: SectionForces):
        """Cached result re-targeted to ``forces``, or None."""
        stored = self._store.get(cache_key(forces))
        if stored is None:
            return None
        return replace(stored, iterations=0, UR_M=stored.utilization(forces.Mz))

    def put(self, forces: SectionForces, result: CapacityResult) -> None:
        self._store[cache_key(forces)] = result
