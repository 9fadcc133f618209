"""
Section geometry definitions and concrete slice discretisation.

The section is cut into horizontal strips, and each strip into
``n_columns`` equal columns, giving concrete slices with:
  - area : strip thickness * column width
  - z    : height above the reference axis (positive up)
  - y    : horizontal offset from the section's vertical axis

The reference axis sits at mid-height (ref_z = h / 2 above the bottom
face) for every shape, so z = h_from_bottom - ref_z.

Supported section shapes:
  - Rectangular
  - Tee (flange on top)
  - Trapezoid
  - Circular
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import List, Tuple

from frc_section.exceptions import InvalidInputError


@dataclass(frozen=True)
class ConcreteSlice:
    """A single concrete fibre.

    Attributes
    ----------
    area : float
        Slice area (mm^2).
    z : float
        Height of the slice centroid above the reference axis (mm).
    y : float
        Horizontal offset of the slice centroid (mm).
    """

    area: float
    z: float
    y: float


@dataclass
class StirrupLayout:
    """Stirrup centreline for drawing: straight legs and corner bends.

    ``lines`` holds (y0, z0, y1, z1) tuples; ``bends`` holds
    (y_c, z_c, radius, angle_start, angle_end) tuples. Coordinates are
    relative to the section centre.
    """

    lines: List[Tuple[float, float, float, float]] = field(default_factory=list)
    bends: List[Tuple[float, float, float, float, float]] = field(default_factory=list)


class _SectionShape:
    """Base class for section shapes - provides slice generation."""

    shape = "generic"

    def width_at(self, h: float) -> float:
        """Return section width at height h above the bottom face."""
        raise NotImplementedError

    @property
    def height(self) -> float:
        raise NotImplementedError

    @property
    def ref_z(self) -> float:
        return self.height / 2.0

    @property
    def shear_width(self) -> float:
        """Web width b_w for shear in the z direction."""
        raise NotImplementedError

    @property
    def shear_width_y(self) -> float:
        """Web width for shear in the y direction."""
        return self.height

    @property
    def stirrup_width(self) -> float:
        """Outer width of the stirrup cage."""
        return self.shear_width

    def discretise(self, n_layers: int = 100, n_columns: int = 1) -> List[ConcreteSlice]:
        """Slice the section into n_layers strips of n_columns slices each."""
        if n_layers < 1 or n_columns < 1:
            raise InvalidInputError(
                f"n_layers and n_columns must be >= 1, got {n_layers}, {n_columns}"
            )
        h = self.height
        t = h / n_layers
        slices = []
        for i in range(n_layers):
            h_mid = (i + 0.5) * t
            w = self.width_at(h_mid)
            if w <= 0:
                continue
            dy = w / n_columns
            for j in range(n_columns):
                y = -w / 2.0 + (j + 0.5) * dy
                slices.append(ConcreteSlice(area=dy * t, z=h_mid - self.ref_z, y=y))
        return slices

    def shear_area(self, cg_comp: float, cg_tens: float, direction: str = "Z") -> List[Tuple[float, float]]:
        """Corner points (y, z) of the shear area between the stringers."""
        if direction == "Z":
            b = self.shear_width / 2.0
            return [(-b, cg_comp), (b, cg_comp), (b, cg_tens), (-b, cg_tens)]
        b = self.shear_width_y / 2.0
        return [(cg_comp, -b), (cg_tens, -b), (cg_tens, b), (cg_comp, b)]

    def stirrup_layout(self, diameter: float, cover_top: float, cover_bot: float) -> StirrupLayout:
        """Rectangular closed stirrup inside the given covers."""
        layout = StirrupLayout()
        if diameter <= 0:
            return layout
        cover_sides = min(cover_top, cover_bot)
        top = self.height / 2.0 - cover_top - diameter / 2.0
        bot = -(self.height / 2.0 - cover_bot - diameter / 2.0)
        right = self.stirrup_width / 2.0 - cover_sides - diameter / 2.0
        left = -right
        r = 2.0 * diameter
        layout.lines.extend([
            (left + r, top, right - r, top),
            (left + r, bot, right - r, bot),
            (left, bot + r, left, top - r),
            (right, bot + r, right, top - r),
        ])
        layout.bends.extend([
            (left + r, top - r, r, -math.pi, -math.pi / 2.0),
            (right - r, top - r, r, -math.pi / 2.0, 0.0),
            (right - r, bot + r, r, 0.0, math.pi / 2.0),
            (left + r, bot + r, r, math.pi / 2.0, math.pi),
        ])
        return layout


@dataclass
class RectangularSection(_SectionShape):
    """Simple rectangular cross-section.

    Parameters
    ----------
    b : float  - width (mm)
    h : float  - total height (mm)
    """

    b: float
    h: float

    shape = "rectangular"

    def __post_init__(self) -> None:
        if self.b <= 0 or self.h <= 0:
            raise InvalidInputError(f"b and h must be positive, got b={self.b}, h={self.h}")

    @property
    def height(self) -> float:
        return self.h

    @property
    def shear_width(self) -> float:
        return self.b

    def width_at(self, h: float) -> float:
        if 0 <= h <= self.h:
            return self.b
        return 0.0


@dataclass
class TeeSection(_SectionShape):
    """Tee section with the flange on top.

    Parameters
    ----------
    bw : float - web width
    hw : float - web height (below flange)
    bf : float - flange width
    hf : float - flange thickness
    """

    bw: float
    hw: float
    bf: float
    hf: float

    shape = "tee"

    def __post_init__(self) -> None:
        if min(self.bw, self.hw, self.bf, self.hf) <= 0:
            raise InvalidInputError("Tee dimensions must be positive")

    @property
    def height(self) -> float:
        return self.hw + self.hf

    @property
    def shear_width(self) -> float:
        return min(self.bf, self.bw)

    def width_at(self, h: float) -> float:
        if h < 0 or h > self.height:
            return 0.0
        if h <= self.hw:
            return self.bw
        return self.bf


@dataclass
class TrapezoidSection(_SectionShape):
    """Trapezoidal section with linearly varying width.

    Parameters
    ----------
    b_top : float - width at the top face
    b_bot : float - width at the bottom face
    h : float     - total height
    """

    b_top: float
    b_bot: float
    h: float

    shape = "trapezoid"

    def __post_init__(self) -> None:
        if self.h <= 0 or self.b_top < 0 or self.b_bot < 0 or max(self.b_top, self.b_bot) <= 0:
            raise InvalidInputError("Trapezoid needs h > 0 and a positive width")

    @property
    def height(self) -> float:
        return self.h

    @property
    def shear_width(self) -> float:
        return min(self.b_top, self.b_bot)

    def width_at(self, h: float) -> float:
        if h < 0 or h > self.h:
            return 0.0
        return self.b_bot + (self.b_top - self.b_bot) * h / self.h


@dataclass
class CircularSection(_SectionShape):
    """Circular cross-section.

    Parameters
    ----------
    diameter : float - outer diameter (mm)
    """

    diameter: float

    shape = "circular"

    def __post_init__(self) -> None:
        if self.diameter <= 0:
            raise InvalidInputError(f"diameter must be positive, got {self.diameter}")

    @property
    def height(self) -> float:
        return self.diameter

    @property
    def radius(self) -> float:
        return self.diameter / 2.0

    @property
    def shear_width(self) -> float:
        """Default effective web width before the stringers are known."""
        return 0.6 * self.diameter

    @property
    def shear_width_y(self) -> float:
        return self.shear_width

    def width_at(self, h: float) -> float:
        return self.chord_width(h - self.radius)

    def chord_width(self, distance: float, radius: float | None = None) -> float:
        """Width of the circle of ``radius`` at ``distance`` from the centre."""
        r = self.radius if radius is None else radius
        if abs(distance) >= r:
            return 0.0
        return 2.0 * math.sqrt(r * r - distance * distance)

    def recompute_shear_width(self, cg_comp: float, cg_tens: float, cover: float = 0.0) -> float:
        """Web width from the chords at the compression and tension stringers.

        The tension chord is taken on the circle through the stirrup
        (radius minus ``cover``).
        """
        w_comp = self.chord_width(cg_comp)
        w_tens = self.chord_width(cg_tens, self.radius - cover)
        return min(w_comp, w_tens)

    def shear_area(self, cg_comp: float, cg_tens: float, direction: str = "Z",
                   cover: float = 0.0) -> List[Tuple[float, float]]:
        b = self.recompute_shear_width(cg_comp, cg_tens, cover) / 2.0
        if direction == "Z":
            return [(-b, cg_comp), (b, cg_comp), (b, cg_tens), (-b, cg_tens)]
        return [(cg_comp, -b), (cg_tens, -b), (cg_tens, b), (cg_comp, b)]

    def stirrup_layout(self, diameter: float, cover_top: float, cover_bot: float) -> StirrupLayout:
        layout = StirrupLayout()
        if diameter > 0:
            r = self.radius - cover_top - diameter / 2.0
            layout.bends.append((0.0, 0.0, r, 0.0, 2.0 * math.pi))
        return layout
