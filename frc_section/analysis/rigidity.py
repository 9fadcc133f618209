"""
Secant rigidity of the section and the linear strain-plane solve.

With a secant modulus E_i on every slice and bar, the section behaves
linearly for the current iteration:

    N  = R_A  * eps + R_Bz * kz + R_By * ky
    Mz = R_Bz * eps + R_Iz * kz + R_Izy * ky
    My = R_By * eps + R_Izy * kz + R_Iy * ky

where R_A = sum(A E), R_Bz = sum(A E z), R_Iz = sum(A E z^2), etc.

Units: forces enter in kN / kNm and are scaled to N / Nmm here.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from frc_section.exceptions import NumericalDegeneracyError

# Relative size of a determinant below which the system is singular
DEGENERACY_TOL = 1.0e-12


@dataclass(frozen=True)
class Rigidity:
    R_A: float
    R_Bz: float
    R_By: float
    R_Iz: float
    R_Iy: float
    R_Izy: float


@dataclass(frozen=True)
class StrainPlane:
    """Linear strain field eps(z, y) = eps_ref + kappa_z * z + kappa_y * y.

    ``M`` is the consistent moment (kNm, internal sign) of a
    curvature-controlled solve, None otherwise.
    """

    eps_ref: float
    kappa_z: float
    kappa_y: float = 0.0
    M: Optional[float] = None

    def strain(self, z: float, y: float = 0.0) -> float:
        return self.eps_ref + self.kappa_z * z + self.kappa_y * y


def compute_rigidity(section, E_c: Sequence[float], E_s: Sequence[float]) -> Rigidity:
    """Weighted sums of slice and bar secant stiffnesses."""
    R_A = R_Bz = R_By = R_Iz = R_Iy = R_Izy = 0.0
    for s, E in zip(section.slices, E_c):
        ae = s.area * E
        R_A += ae
        R_Bz += ae * s.z
        R_By += ae * s.y
        R_Iz += ae * s.z * s.z
        R_Iy += ae * s.y * s.y
        R_Izy += ae * s.y * s.z
    for b, E in zip(section.bars, E_s):
        ae = b.area * E
        R_A += ae
        R_Bz += ae * b.z
        R_By += ae * b.y
        R_Iz += ae * b.z * b.z
        R_Iy += ae * b.y * b.y
        R_Izy += ae * b.y * b.z
    return Rigidity(R_A, R_Bz, R_By, R_Iz, R_Iy, R_Izy)


def _check_det(det: float, *terms: float) -> None:
    scale = max(abs(t) for t in terms)
    if scale == 0.0 or abs(det) <= DEGENERACY_TOL * scale:
        raise NumericalDegeneracyError(f"Singular rigidity system (det={det:.3e})")


def strain_from_forces(r: Rigidity, N: float, Mz: float, My: float = 0.0) -> StrainPlane:
    """Strain plane carrying N (kN), Mz and My (kNm, internal sign)."""
    n = N * 1e3
    mz = Mz * 1e6
    my = My * 1e6

    if My == 0:
        det = r.R_A * r.R_Iz - r.R_Bz ** 2
        _check_det(det, r.R_A * r.R_Iz, r.R_Bz ** 2)
        eps = (r.R_Iz * n - r.R_Bz * mz) / det
        kz = (r.R_A * mz - r.R_Bz * n) / det
        return StrainPlane(eps_ref=eps, kappa_z=kz)

    terms = (
        r.R_Iz * r.R_By ** 2,
        2.0 * r.R_By * r.R_Bz * r.R_Izy,
        r.R_Iy * r.R_Bz ** 2,
        r.R_A * r.R_Izy ** 2,
        r.R_A * r.R_Iy * r.R_Iz,
    )
    det = terms[0] - terms[1] + terms[2] + terms[3] - terms[4]
    _check_det(det, *terms)
    factor = 1.0 / det

    eps = factor * (
        (r.R_Izy ** 2 - r.R_Iy * r.R_Iz) * n
        + (r.R_By * r.R_Iz - r.R_Bz * r.R_Izy) * my
        + (r.R_Bz * r.R_Iy - r.R_By * r.R_Izy) * mz
    )
    ky = factor * (
        (r.R_By * r.R_Iz - r.R_Bz * r.R_Izy) * n
        + (r.R_Bz ** 2 - r.R_A * r.R_Iz) * my
        - (r.R_By * r.R_Bz - r.R_A * r.R_Izy) * mz
    )
    kz = factor * (
        (r.R_Bz * r.R_Iy - r.R_By * r.R_Izy) * n
        - (r.R_By * r.R_Bz - r.R_A * r.R_Izy) * my
        + (r.R_By ** 2 - r.R_A * r.R_Iy) * mz
    )
    return StrainPlane(eps_ref=eps, kappa_z=kz, kappa_y=ky)


def strain_from_curvature(r: Rigidity, N: float, kappa: float) -> StrainPlane:
    """Strain plane with prescribed curvature kappa carrying N (kN).

    The returned plane carries the consistent moment M (kNm).
    """
    if r.R_A <= 0:
        raise NumericalDegeneracyError(f"Non-positive axial rigidity R_A={r.R_A:.3e}")
    n = N * 1e3
    eps = (n - r.R_Bz * kappa) / r.R_A
    M = (r.R_Iz * kappa - (r.R_Bz ** 2 * kappa - n * r.R_Bz) / r.R_A) * 1e-6
    return StrainPlane(eps_ref=eps, kappa_z=kappa, M=M)
