"""
Reinforcing bar definitions.

Bars can be specified as:
  - Layers (a row of equal bars at a given depth), spread over the width
  - A ring of equal bars in a circular section

Convention: ``depth`` is measured DOWN from the top face; ``z`` is the
height above the reference axis (mid-height), so z = h - depth - ref_z.

Per-face values (cover, outer bar diameter and spacing, effective depth)
are derived from the outermost layer of each face and feed the crack
spacing formulas.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import List, Optional

from frc_section.exceptions import InvalidInputError
from frc_section.materials.steel import ReinforcingSteel


@dataclass(frozen=True)
class RebarBar:
    """A single reinforcing bar.

    Parameters
    ----------
    z : float
        Height above the reference axis (mm).
    y : float
        Horizontal offset from the vertical axis (mm).
    area : float
        Bar area (mm^2).
    diameter : float
        Bar diameter (mm).
    depth : float
        Distance from the top face (mm).
    """

    z: float
    y: float
    area: float
    diameter: float
    depth: float


@dataclass
class RebarLayer:
    """A layer of reinforcing bars.

    Parameters
    ----------
    depth : float
        Depth of the bar centres below the top face (mm).
    n_bars : int
        Number of bars.
    bar_diameter : float
        Diameter of each bar (mm).
    spacing : float, optional
        Centre spacing (mm). Default: bars spread evenly with a side
        cover equal to the face cover.
    """

    depth: float
    n_bars: int
    bar_diameter: float
    spacing: Optional[float] = None

    def __post_init__(self) -> None:
        if self.n_bars < 1 or self.bar_diameter <= 0:
            raise InvalidInputError(
                f"Layer needs n_bars >= 1 and a positive diameter, got {self.n_bars}, {self.bar_diameter}"
            )

    @property
    def bar_area(self) -> float:
        return math.pi / 4.0 * self.bar_diameter ** 2

    @property
    def total_area(self) -> float:
        return self.n_bars * self.bar_area

    def bar_spacing(self, width: float, edge: float) -> float:
        """Centre spacing within ``width`` when bars sit ``edge`` from the sides."""
        if self.spacing is not None:
            return self.spacing
        if self.n_bars == 1:
            return width
        return max(0.0, width - 2.0 * edge) / (self.n_bars - 1)

    def to_bars(self, height: float, ref_z: float, width: float) -> List[RebarBar]:
        """Place the bars of this layer across a section of the given width."""
        edge = min(self.depth, height - self.depth)
        s = self.bar_spacing(width, edge)
        z = height - self.depth - ref_z
        y0 = -0.5 * s * (self.n_bars - 1) if self.n_bars > 1 else 0.0
        return [
            RebarBar(z=z, y=y0 + i * s, area=self.bar_area,
                     diameter=self.bar_diameter, depth=self.depth)
            for i in range(self.n_bars)
        ]


@dataclass
class Stirrups:
    """Transverse reinforcement.

    Parameters
    ----------
    diameter : float
        Stirrup bar diameter (mm).
    spacing : float
        Longitudinal spacing (mm).
    material : ReinforcingSteel
        Stirrup steel.
    legs : int
        Number of vertical legs crossing a shear crack.
    cover : float
        Nominal cover to the stirrup (mm).
    """

    diameter: float
    spacing: float
    material: ReinforcingSteel
    legs: int = 2
    cover: float = 0.0

    def __post_init__(self) -> None:
        if self.diameter < 0 or self.spacing <= 0 or self.legs < 0:
            raise InvalidInputError("Stirrups need diameter >= 0, spacing > 0 and legs >= 0")

    @property
    def area(self) -> float:
        """Area of all legs at one stirrup position (mm^2)."""
        return self.legs * math.pi / 4.0 * self.diameter ** 2


@dataclass
class Reinforcement:
    """Longitudinal bars plus optional stirrups and per-face layout values.

    ``d_top`` / ``d_bot`` are the area-weighted depths of the top and
    bottom bar groups (None when the face has no bars). ``cover_top`` /
    ``cover_bot`` are the cover layers to the outermost bars, stirrups
    included.
    """

    bars: List[RebarBar] = field(default_factory=list)
    material: Optional[ReinforcingSteel] = None
    stirrups: Optional[Stirrups] = None
    cover_top: float = 0.0
    cover_bot: float = 0.0
    outer_dia_top: float = 0.0
    outer_dia_bot: float = 0.0
    outer_spacing_top: float = 0.0
    outer_spacing_bot: float = 0.0
    d_top: Optional[float] = None
    d_bot: Optional[float] = None

    # ------------------------------------------------------------------
    # Constructors
    # ------------------------------------------------------------------
    @classmethod
    def none(cls, stirrups: Optional[Stirrups] = None) -> "Reinforcement":
        """Unreinforced section (fibres and/or plain concrete only)."""
        cover = stirrups.cover + stirrups.diameter if stirrups else 0.0
        return cls(stirrups=stirrups, cover_top=cover, cover_bot=cover)

    @classmethod
    def from_layers(
        cls,
        shape,
        material: ReinforcingSteel,
        layers: List[RebarLayer],
        stirrups: Optional[Stirrups] = None,
    ) -> "Reinforcement":
        """Build the bar list and face values from layers of a prismatic section.

        Layers above mid-height belong to the top face, the rest to the
        bottom face.
        """
        h = shape.height
        ref_z = shape.ref_z
        reinf = cls.none(stirrups)
        reinf.material = material

        for layer in layers:
            if not 0 < layer.depth < h:
                raise InvalidInputError(f"Layer depth {layer.depth} outside section height {h}")
            reinf.bars.extend(layer.to_bars(h, ref_z, shape.width_at(h - layer.depth)))

        top = [lay for lay in layers if lay.depth < h / 2.0]
        bot = [lay for lay in layers if lay.depth >= h / 2.0]

        if top:
            outer = min(top, key=lambda lay: lay.depth)
            width = shape.width_at(h - outer.depth)
            reinf.cover_top = outer.depth - outer.bar_diameter / 2.0
            reinf.outer_dia_top = outer.bar_diameter
            reinf.outer_spacing_top = outer.bar_spacing(width, outer.depth)
            reinf.d_top = _weighted_depth(top)
        if bot:
            outer = max(bot, key=lambda lay: lay.depth)
            width = shape.width_at(h - outer.depth)
            reinf.cover_bot = h - outer.depth - outer.bar_diameter / 2.0
            reinf.outer_dia_bot = outer.bar_diameter
            reinf.outer_spacing_bot = outer.bar_spacing(width, h - outer.depth)
            reinf.d_bot = _weighted_depth(bot)
        return reinf

    @classmethod
    def circular(
        cls,
        shape,
        material: ReinforcingSteel,
        n_bars: int,
        diameter: float,
        cover: float,
        stirrups: Optional[Stirrups] = None,
    ) -> "Reinforcement":
        """Ring of ``n_bars`` equal bars inside a circular section.

        ``cover`` is the nominal cover to the outermost steel (stirrup
        when present).
        """
        if n_bars < 1 or diameter <= 0:
            raise InvalidInputError("Circular layout needs n_bars >= 1 and a positive diameter")
        cover_layer = cover + (stirrups.diameter if stirrups else 0.0)
        R = shape.height / 2.0
        r = R - cover_layer - diameter / 2.0
        if r <= 0:
            raise InvalidInputError(f"Bars do not fit: cover {cover_layer} in radius {R}")
        area = math.pi / 4.0 * diameter ** 2
        bars = []
        for i in range(n_bars):
            angle = 2.0 * math.pi * i / n_bars
            z = r * math.sin(angle)
            bars.append(RebarBar(z=z, y=r * math.cos(angle), area=area,
                                 diameter=diameter, depth=R - z))

        half = [b for b in bars if b.z <= 0] or bars
        d = sum(b.area * b.depth for b in half) / sum(b.area for b in half)
        spacing = 2.0 * math.pi * r / n_bars
        return cls(
            bars=bars,
            material=material,
            stirrups=stirrups,
            cover_top=cover_layer,
            cover_bot=cover_layer,
            outer_dia_top=diameter,
            outer_dia_bot=diameter,
            outer_spacing_top=spacing,
            outer_spacing_bot=spacing,
            d_top=shape.height - d,
            d_bot=d,
        )

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------
    @property
    def total_area(self) -> float:
        return sum(b.area for b in self.bars)

    @property
    def E_s(self) -> float:
        return self.material.E_s if self.material is not None else 200_000.0

    def to_dict(self) -> dict:
        return {
            "material": self.material.to_dict() if self.material else None,
            "bars": [
                {"z": b.z, "y": b.y, "area": b.area, "diameter": b.diameter, "depth": b.depth}
                for b in self.bars
            ],
            "stirrups": (
                {
                    "diameter": self.stirrups.diameter,
                    "spacing": self.stirrups.spacing,
                    "legs": self.stirrups.legs,
                    "cover": self.stirrups.cover,
                    "material": self.stirrups.material.to_dict(),
                }
                if self.stirrups else None
            ),
            "d_top": self.d_top,
            "d_bot": self.d_bot,
        }


def _weighted_depth(layers: List[RebarLayer]) -> float:
    return sum(lay.total_area * lay.depth for lay in layers) / sum(lay.total_area for lay in layers)
