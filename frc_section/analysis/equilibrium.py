"""
Cross-section equilibrium by secant-stiffness iteration.

Algorithm
---------
Starting from the uncracked stiffness (E_cm for concrete, E_s for bars):

  inner loop, until |R_A - R_A_old| <= 1 N:
    1. Rebuild the rigidity from the current secant moduli.
    2. Solve the strain plane for the target forces (or the prescribed
       curvature).
    3. Locate the neutral axis and the tensile zone; take l_cs.
    4. Re-evaluate the material laws -> new secant moduli.

  outer loop, until internal and applied forces agree within 0.001:
    5. Integrate the internal forces.
    6. In moment mode re-target the solve to the internal forces.
    7. Re-solve the plane, zone and stresses once.

The converged state is post-processed into centroids, crack width and
utilization ratios. A solve that exceeds ``max_iterations`` is reported
through ``AnalysisResult.status``; ``raise_for_status`` turns that into
a ConvergenceError.

Sign convention:
  - User Mz positive = sagging (tension at the bottom face)
  - Internally Mz_int = sum(A sigma z), so sagging gives Mz_int < 0 and a
    negative curvature
  - Positive axial force / stress / strain = tension
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

from loguru import logger

from frc_section.analysis.codes import get_code
from frc_section.analysis.parameters import (
    AnalysisParameters,
    SectionForces,
    partial_factors,
)
from frc_section.analysis.rigidity import (
    Rigidity,
    StrainPlane,
    compute_rigidity,
    strain_from_curvature,
    strain_from_forces,
)
from frc_section.analysis.stress_state import StressState, internal_forces, update_stress_state
from frc_section.analysis.tensile_zone import CrackWidth, TensileZone, crack_width, tensile_zone
from frc_section.analysis.utilization import Utilization, evaluate_utilization
from frc_section.exceptions import ConvergenceError, InvalidInputError

# Sentinel for utilizations and crack width of a non-converged solve
NOT_CONVERGED = 999.0

# Bar stress (MPa) above which a bar counts towards the tension resultant
TENSION_STRESS_THRESHOLD = 50.0

# Rigidity self-consistency tolerance on R_A (N)
RIGIDITY_TOL = 1.0

# Equilibrium tolerance on N (kN) and M (kNm)
FORCE_TOL = 0.001

# Admissible range of the strut inclination cot(theta)
COT_THETA_RANGE = (0.5, 3.0)

# Curvatures below this (1/mm) are treated as zero for the neutral axis
ZERO_CURVATURE = 1.0e-15


class SolveMode(Enum):
    MOMENT = "moment"
    CURVATURE = "curvature"


class AnalysisStatus(Enum):
    CONVERGED = "converged"
    MAX_ITERATIONS_EXCEEDED = "max_iterations_exceeded"


@dataclass(frozen=True)
class IterationRecord:
    """One inner iteration of a traced solve."""

    iteration: int
    R_A: float
    eps_ref: float
    kappa_z: float
    x: float
    l_cs: float


@dataclass(frozen=True)
class AnalysisResult:
    """Outcome of one equilibrium solve.

    Forces are in kN / kNm with the user sign (``Mz`` positive sagging);
    ``N_int`` / ``Mz_int`` / ``My_int`` are the internal resultants with
    the internal sign as checked against the applied forces.
    """

    forces: SectionForces
    mode: SolveMode
    status: AnalysisStatus
    iterations: int
    eps_ref: float
    kappa: Optional[float]
    kappa_y: float
    x: float
    tensile_face: str
    N: float
    Mz: float
    N_int: float
    Mz_int: float
    My_int: float
    state: StressState
    zone: TensileZone
    crack: Optional[CrackWidth]
    utilization: Optional[Utilization]
    UR_cc: float
    UR_ct: float
    UR_s: float
    UR_crack: float
    UR_total: float
    w_k: float
    cg_comp: Optional[float]
    cg_tens: Optional[float]
    lever_arm: float
    C: float
    T: float
    cmod: float
    eps_c_min: float
    eps_c_max: float
    sig_c_min: float
    sig_c_max: float
    sig_c_avg: float
    eps_s_max: float
    sig_s_max: float
    sigma_s_eq: float
    trace: Tuple[IterationRecord, ...] = field(default_factory=tuple)

    @property
    def converged(self) -> bool:
        return self.status == AnalysisStatus.CONVERGED

    @property
    def is_ok(self) -> bool:
        return round(self.UR_total, 2) <= 1.0

    @property
    def eps_c(self) -> List[float]:
        return self.state.eps_c

    @property
    def sig_c(self) -> List[float]:
        return self.state.sig_c

    @property
    def eps_s(self) -> List[float]:
        return self.state.eps_s

    @property
    def sig_s(self) -> List[float]:
        return self.state.sig_s

    @property
    def cracked(self) -> List[bool]:
        return self.state.cracked

    def raise_for_status(self) -> "AnalysisResult":
        if not self.converged:
            raise ConvergenceError(
                f"No equilibrium after {self.iterations} iterations "
                f"(N={self.forces.N}, Mz={self.forces.Mz})",
                iterations=self.iterations,
            )
        return self

    def to_dict(self) -> dict:
        return {
            "status": self.status.value,
            "iterations": self.iterations,
            "mode": self.mode.value,
            "forces": self.forces.to_dict(),
            "strain_plane": {
                "eps_ref": self.eps_ref,
                "kappa_z": self.kappa,
                "kappa_y": self.kappa_y,
            },
            "neutral_axis": self.x,
            "tensile_face": self.tensile_face,
            "N": self.N,
            "Mz": self.Mz,
            "stringers": {
                "cg_comp": self.cg_comp,
                "cg_tens": self.cg_tens,
                "lever_arm": self.lever_arm,
                "C": self.C,
                "T": self.T,
            },
            "extremes": {
                "eps_c_min": self.eps_c_min,
                "eps_c_max": self.eps_c_max,
                "sig_c_min": self.sig_c_min,
                "sig_c_max": self.sig_c_max,
                "sig_c_avg": self.sig_c_avg,
                "eps_s_max": self.eps_s_max,
                "sig_s_max": self.sig_s_max,
            },
            "tensile_zone": self.zone.to_dict(),
            "crack_width": self.crack.to_dict() if self.crack else None,
            "cmod": self.cmod,
            "w_k": self.w_k,
            "utilization": {
                "UR_cc": self.UR_cc,
                "UR_ct": self.UR_ct,
                "UR_s": self.UR_s,
                "UR_crack": self.UR_crack,
                "UR_total": self.UR_total,
                "is_ok": self.is_ok,
            },
        }


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------
def neutral_axis_depth(section, plane: StrainPlane) -> float:
    """Depth of zero strain below the top face (mm), possibly outside the section."""
    if abs(plane.kappa_z) < ZERO_CURVATURE:
        return float("inf") if plane.eps_ref <= 0 else float("-inf")
    return section.height - section.ref_z + plane.eps_ref / plane.kappa_z


def _solve_plane(
    rigidity: Rigidity,
    mode: SolveMode,
    N: float,
    Mz: float,
    My: float,
    kappa: Optional[float],
) -> StrainPlane:
    if mode == SolveMode.CURVATURE:
        return strain_from_curvature(rigidity, N, kappa)
    return strain_from_forces(rigidity, N, Mz, My)


def _centroid(pairs: List[Tuple[float, float]]) -> Tuple[float, Optional[float]]:
    """Resultant and its lever for (force, z) pairs."""
    total = sum(f for f, _ in pairs)
    if total == 0:
        return 0.0, None
    return total, sum(f * z for f, z in pairs) / total


# ---------------------------------------------------------------------------
# Solver
# ---------------------------------------------------------------------------
def find_stress_state(
    section,
    forces: SectionForces,
    params: AnalysisParameters,
    mode: SolveMode = SolveMode.MOMENT,
    kappa: Optional[float] = None,
    trace: bool = False,
) -> AnalysisResult:
    """Find the strain plane in equilibrium with ``forces``.

    Parameters
    ----------
    section : CrossSection
    forces : SectionForces
        Applied forces. In curvature mode only N (and Vz with cot_theta)
        is applied; the moment follows from the prescribed curvature.
    params : AnalysisParameters
    mode : SolveMode
        MOMENT solves for (N, Mz, My); CURVATURE holds kappa_z fixed.
    kappa : float, optional
        Prescribed curvature (1/mm, internal sign) for CURVATURE mode.
    trace : bool
        Record every inner iteration on ``AnalysisResult.trace``.
    """
    gamma = partial_factors(forces.limit_state, params.national_annex)
    code = get_code(params.code)
    curvature_mode = mode == SolveMode.CURVATURE
    if curvature_mode and kappa is None:
        raise InvalidInputError("A curvature is required in curvature mode")

    N_ext = forces.N
    if forces.cot_theta is not None:
        lo, hi = COT_THETA_RANGE
        if not lo <= forces.cot_theta <= hi:
            raise InvalidInputError(
                f"cot_theta must lie in [{lo}, {hi}], got {forces.cot_theta}"
            )
        N_ext += forces.cot_theta * abs(forces.Vz)
    Mz_ext = -forces.Mz
    My_ext = forces.My

    N_org = N_ext
    Mz_org = Mz_ext
    My_org = My_ext
    biaxial = My_org != 0

    if curvature_mode:
        Mz_ext = 0.0
        face = "top" if kappa > 0 else "bottom"
    else:
        face = "top" if Mz_ext > 0 else "bottom"

    state = StressState.initial(section)
    rigidity = compute_rigidity(section, state.E_c, state.E_s)

    plane = _solve_plane(rigidity, mode, N_ext, Mz_ext, My_ext, kappa)
    if curvature_mode:
        Mz_org = plane.M
    x = neutral_axis_depth(section, plane)
    zone = tensile_zone(section, x, face, code, params.national_annex)
    state = update_stress_state(section, plane, zone.l_cs, params, gamma)

    iterations = 0
    converged = True
    records: List[IterationRecord] = []
    N_int = Mz_int = My_int = 0.0

    while True:
        while True:
            R_A_old = rigidity.R_A
            rigidity = compute_rigidity(section, state.E_c, state.E_s)
            plane = _solve_plane(rigidity, mode, N_ext, Mz_ext, My_ext, kappa)
            if curvature_mode:
                Mz_org = plane.M
            x = neutral_axis_depth(section, plane)
            zone = tensile_zone(section, x, face, code, params.national_annex)
            state = update_stress_state(section, plane, zone.l_cs, params, gamma)
            iterations += 1

            if trace:
                records.append(IterationRecord(
                    iteration=iterations,
                    R_A=rigidity.R_A,
                    eps_ref=plane.eps_ref,
                    kappa_z=plane.kappa_z,
                    x=x,
                    l_cs=zone.l_cs,
                ))
            if iterations > params.max_iterations:
                converged = False
                break
            if abs(rigidity.R_A - R_A_old) <= RIGIDITY_TOL:
                break

        if not converged:
            logger.warning(
                "Equilibrium not found after {} iterations (N={}, Mz={})",
                params.max_iterations, forces.N, forces.Mz,
            )
            N_int, Mz_int, My_int = internal_forces(section, state)
            break

        N_int, Mz_int, My_int = internal_forces(section, state)
        if not curvature_mode:
            N_ext, Mz_ext, My_ext = N_int, Mz_int, My_int

        plane = _solve_plane(rigidity, mode, N_ext, Mz_ext, My_ext, kappa)
        if curvature_mode:
            Mz_org = plane.M
        x = neutral_axis_depth(section, plane)
        zone = tensile_zone(section, x, face, code, params.national_annex)
        state = update_stress_state(section, plane, zone.l_cs, params, gamma)

        unbalanced = (
            abs(N_int - N_org) > FORCE_TOL
            or abs(Mz_int - Mz_org) > FORCE_TOL
            or (biaxial and abs(My_int - My_org) > FORCE_TOL)
        )
        if not unbalanced:
            break

    return _collect(
        section, forces, params, mode, gamma, code, plane, x, face, zone, state,
        iterations, converged, N_org, N_int, Mz_int, My_int, tuple(records),
    )


def _collect(
    section, forces, params, mode, gamma, code, plane, x, face, zone, state,
    iterations, converged, N_org, N_int, Mz_int, My_int, records,
) -> AnalysisResult:
    h_s = section.height - section.ref_z - zone.d_eff
    sigma_s_eq = (plane.eps_ref + plane.kappa_z * h_s) * zone.E_s

    slices = section.slices
    bars = section.bars
    comp = [(-sig * s.area, s.z) for s, sig in zip(slices, state.sig_c) if sig < 0]
    comp += [(-sig * b.area, b.z) for b, sig in zip(bars, state.sig_s) if sig < 0]
    C_total, cg_comp = _centroid(comp)

    tens = [(sig * b.area, b.z) for b, sig in zip(bars, state.sig_s) if sig > TENSION_STRESS_THRESHOLD]
    T_total, cg_tens = _centroid(tens)
    if T_total == 0:
        tens = [(sig * s.area, s.z) for s, sig in zip(slices, state.sig_c) if sig > 0]
        T_total, cg_tens = _centroid(tens)

    if cg_comp is not None and cg_tens is not None:
        lever_arm = abs(cg_comp - cg_tens)
    else:
        lever_arm = 0.0

    A_c_total = section.gross_area
    sig_c_avg = sum(sig * s.area for s, sig in zip(slices, state.sig_c)) / A_c_total
    eps_c_max = max(state.eps_c)

    crack = None
    utilization = None
    if converged:
        crack = crack_width(zone, sigma_s_eq, eps_c_max, forces.eps_sh, params.crack_limit, code)
        utilization = evaluate_utilization(
            section, state.eps_c, state.eps_s, zone, crack,
            forces.limit_state, gamma, params.concrete_curve, params.crack_limit,
        )
        urs = (utilization.UR_cc, utilization.UR_ct, utilization.UR_s,
               utilization.UR_crack, utilization.UR_total)
        w_k = crack.w_k
        status = AnalysisStatus.CONVERGED
    else:
        urs = (NOT_CONVERGED,) * 5
        w_k = NOT_CONVERGED
        status = AnalysisStatus.MAX_ITERATIONS_EXCEEDED

    logger.debug(
        "{} solve: {} after {} iterations, x={:.1f}, UR={:.3f}",
        mode.value, status.value, iterations, x, urs[4],
    )

    return AnalysisResult(
        forces=forces,
        mode=mode,
        status=status,
        iterations=iterations,
        eps_ref=plane.eps_ref,
        kappa=plane.kappa_z if converged else None,
        kappa_y=plane.kappa_y,
        x=x,
        tensile_face=face,
        N=N_org,
        Mz=-Mz_int,
        N_int=N_int,
        Mz_int=Mz_int,
        My_int=My_int,
        state=state,
        zone=zone,
        crack=crack,
        utilization=utilization,
        UR_cc=urs[0],
        UR_ct=urs[1],
        UR_s=urs[2],
        UR_crack=urs[3],
        UR_total=urs[4],
        w_k=w_k,
        cg_comp=cg_comp,
        cg_tens=cg_tens,
        lever_arm=lever_arm,
        C=C_total / 1000.0,
        T=T_total / 1000.0,
        cmod=max(state.cod) if state.cod else 0.0,
        eps_c_min=min(state.eps_c),
        eps_c_max=eps_c_max,
        sig_c_min=min(state.sig_c),
        sig_c_max=max(state.sig_c),
        sig_c_avg=sig_c_avg,
        eps_s_max=max(state.eps_s) if state.eps_s else 0.0,
        sig_s_max=max(state.sig_s) if state.sig_s else 0.0,
        sigma_s_eq=sigma_s_eq,
        trace=records,
    )
