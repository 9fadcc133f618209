"""
CrossSection: the assembled fibre-reinforced concrete cross-section.

Aggregates concrete slices, the fibre material and the reinforcement
into one object that the analysis engine operates on. The section is
never mutated during analysis; sub-analyses share it.

Key responsibilities:
  - Hold geometry + material assignments
  - Compute gross properties (area, centroid, Ig)
  - Integrate slice and bar stresses into section forces
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from frc_section.materials.concrete import Concrete
from frc_section.materials.fibres import FibreReinforcement
from frc_section.section.geometry import ConcreteSlice, _SectionShape
from frc_section.section.rebar import RebarBar, Reinforcement


@dataclass
class CrossSection:
    """Fibre-reinforced concrete cross-section.

    Build one from a shape, materials and reinforcement:

        shape = RectangularSection(b=300, h=500)
        steel = ReinforcingSteel(f_yk=500)
        reinf = Reinforcement.from_layers(shape, steel, [RebarLayer(450, 4, 20)])
        xs = CrossSection.from_shape(shape, Concrete(f_ck=30), reinf, n_layers=100)

    Parameters
    ----------
    shape : _SectionShape
    concrete : Concrete
    fibres : FibreReinforcement
    reinforcement : Reinforcement
    slices : list of ConcreteSlice
    """

    shape: _SectionShape
    concrete: Concrete
    fibres: FibreReinforcement
    reinforcement: Reinforcement
    slices: List[ConcreteSlice] = field(default_factory=list)

    # ------------------------------------------------------------------
    # Constructors
    # ------------------------------------------------------------------
    @classmethod
    def from_shape(
        cls,
        shape: _SectionShape,
        concrete: Concrete,
        reinforcement: Optional[Reinforcement] = None,
        fibres: Optional[FibreReinforcement] = None,
        n_layers: int = 100,
        n_columns: int = 1,
    ) -> "CrossSection":
        """Create a CrossSection by discretising a shape into slices."""
        return cls(
            shape=shape,
            concrete=concrete,
            fibres=fibres if fibres is not None else FibreReinforcement.none(),
            reinforcement=reinforcement if reinforcement is not None else Reinforcement.none(),
            slices=shape.discretise(n_layers, n_columns),
        )

    # ------------------------------------------------------------------
    # Geometry
    # ------------------------------------------------------------------
    @property
    def height(self) -> float:
        return self.shape.height

    @property
    def ref_z(self) -> float:
        return self.shape.ref_z

    @property
    def shape_name(self) -> str:
        return self.shape.shape

    @property
    def bars(self) -> List[RebarBar]:
        return self.reinforcement.bars

    @property
    def gross_area(self) -> float:
        """Gross concrete area (ignoring reinforcement)."""
        return sum(s.area for s in self.slices)

    @property
    def steel_area(self) -> float:
        return self.reinforcement.total_area

    @property
    def centroid_z(self) -> float:
        """Height of the gross concrete centroid above the reference axis."""
        total_A = self.gross_area
        if total_A == 0:
            return 0.0
        return sum(s.area * s.z for s in self.slices) / total_A

    @property
    def gross_moment_of_inertia(self) -> float:
        """Gross (uncracked, unreinforced) moment of inertia about the centroid."""
        zc = self.centroid_z
        return sum(s.area * (s.z - zc) ** 2 for s in self.slices)

    # ------------------------------------------------------------------
    # Force integration
    # ------------------------------------------------------------------
    def integrate_forces(
        self, sig_c: Sequence[float], sig_s: Sequence[float]
    ) -> Tuple[float, float, float]:
        """Sum slice and bar stresses into section forces.

        Parameters
        ----------
        sig_c : sequence of float
            Concrete stresses (MPa), one per slice.
        sig_s : sequence of float
            Bar stresses (MPa), one per bar.

        Returns
        -------
        N : float  - axial force (kN), tension positive
        Mz : float - moment about the reference axis (kNm), internal sign
        My : float - moment about the vertical axis (kNm)
        """
        N = 0.0
        Mz = 0.0
        My = 0.0
        for s, sig in zip(self.slices, sig_c):
            f = s.area * sig
            N += f
            Mz += f * s.z
            My += f * s.y
        for b, sig in zip(self.bars, sig_s):
            f = b.area * sig
            N += f
            Mz += f * b.z
            My += f * b.y
        return N / 1e3, Mz / 1e6, My / 1e6

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------
    def to_dict(self) -> dict:
        return {
            "shape": self.shape_name,
            "height": self.height,
            "n_slices": len(self.slices),
            "concrete": self.concrete.to_dict(),
            "fibres": self.fibres.to_dict(),
            "reinforcement": self.reinforcement.to_dict(),
        }
