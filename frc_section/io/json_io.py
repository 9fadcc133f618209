"""
JSON input/output for frc-section.

The JSON format is designed for inclusion in automated workflows
(design checks over many load cases, parameter studies).

Input JSON schema:
==================
{
  "section": {"shape": "rectangular", "b": 300, "h": 500},
  "concrete": {"f_ck": 30, "curve": "parabolic", "D_lower": 8},
  "fibres": {"f_R1k": 2.5, "f_R3k": 2.0, "l_f": 50},
  "steel": {"f_yk": 500, "ductility_class": "B"},
  "layers": [
    {"depth": 450, "n_bars": 4, "diameter": 20}
  ],
  "circular_bars": {"n_bars": 8, "diameter": 16, "cover": 30},
  "stirrups": {"diameter": 8, "spacing": 200, "legs": 2, "cover": 25},
  "analysis": {"code": "fib", "national_annex": "", "n_layers": 100},
  "load_cases": [
    {"N": 0, "Mz": 150, "Vz": 80, "limit_state": "ULS"}
  ]
}

``layers`` applies to prismatic shapes and ``circular_bars`` to the
circular shape. The fibre code defaults to the analysis code.

Output JSON schema:
===================
{
  "metadata": {"version": ..., "timestamp": ..., "generator": ..., ...},
  "units": {...},
  "section_properties": {...},
  "results": {...}   // from the result objects' to_dict()
}
"""

from __future__ import annotations

import datetime
import json
import math
from pathlib import Path
from typing import Any, Dict, List, Tuple

from frc_section.analysis.parameters import AnalysisParameters, SectionForces
from frc_section.exceptions import InvalidInputError
from frc_section.materials.concrete import Concrete
from frc_section.materials.fibres import FibreReinforcement
from frc_section.materials.steel import ReinforcingSteel
from frc_section.section.cross_section import CrossSection
from frc_section.section.geometry import (
    CircularSection,
    RectangularSection,
    TeeSection,
    TrapezoidSection,
)
from frc_section.section.rebar import RebarLayer, Reinforcement, Stirrups


def _parse_shape(sd: Dict[str, Any]):
    shape_type = sd.get("shape", "rectangular").lower()
    if shape_type == "circular":
        return CircularSection(diameter=sd.get("diameter", sd.get("d", 500)))
    if shape_type in ("tee", "t"):
        return TeeSection(
            bw=sd.get("bw", 300),
            hw=sd.get("hw", 400),
            bf=sd.get("bf", 600),
            hf=sd.get("hf", 100),
        )
    if shape_type == "trapezoid":
        return TrapezoidSection(
            b_top=sd.get("b_top", 300),
            b_bot=sd.get("b_bot", 300),
            h=sd.get("h", 500),
        )
    if shape_type == "rectangular":
        return RectangularSection(b=sd.get("b", 300), h=sd.get("h", 500))
    raise InvalidInputError(f"Unknown section shape: {shape_type!r}")


def load_json_input(
    filepath: str | Path,
) -> Tuple[CrossSection, AnalysisParameters, List[SectionForces]]:
    """Load a JSON input file.

    Returns
    -------
    (section, params, load_cases)
    """
    filepath = Path(filepath)
    with open(filepath) as f:
        data = json.load(f)

    ad = data.get("analysis", {})
    params = AnalysisParameters.from_dict(ad)

    concrete = Concrete.from_dict(data.get("concrete", {"f_ck": 30.0}))

    fd = data.get("fibres")
    if fd is not None:
        fd = dict(fd)
        fd.setdefault("code", params.code.value)
        fibres = FibreReinforcement.from_dict(fd)
    else:
        fibres = FibreReinforcement.none(params.code.value)

    shape = _parse_shape(data.get("section", {}))

    steel_d = data.get("steel", {"f_yk": 500.0})
    steel = ReinforcingSteel.from_dict(steel_d)

    stirrups = None
    sd = data.get("stirrups")
    if sd is not None:
        stirrup_steel = ReinforcingSteel.from_dict({**steel_d, **sd.get("material", {})})
        stirrups = Stirrups(
            diameter=sd["diameter"],
            spacing=sd["spacing"],
            material=stirrup_steel,
            legs=sd.get("legs", 2),
            cover=sd.get("cover", 0.0),
        )

    if isinstance(shape, CircularSection) and "circular_bars" in data:
        cb = data["circular_bars"]
        reinforcement = Reinforcement.circular(
            shape, steel, cb["n_bars"], cb["diameter"], cb.get("cover", 30.0), stirrups
        )
    elif data.get("layers"):
        layers = [
            RebarLayer(
                depth=ld["depth"],
                n_bars=ld["n_bars"],
                bar_diameter=ld["diameter"],
                spacing=ld.get("spacing"),
            )
            for ld in data["layers"]
        ]
        reinforcement = Reinforcement.from_layers(shape, steel, layers, stirrups)
    else:
        reinforcement = Reinforcement.none(stirrups)

    section = CrossSection.from_shape(
        shape,
        concrete,
        reinforcement=reinforcement,
        fibres=fibres,
        n_layers=ad.get("n_layers", 100),
        n_columns=ad.get("n_columns", 1),
    )

    load_cases = [SectionForces.from_dict(lc) for lc in data.get("load_cases", [])]
    return section, params, load_cases


def save_json_output(
    result_dict: Dict[str, Any],
    filepath: str | Path,
    input_file: str = "",
    analysis_type: str = "stress_state",
    section_props: Dict[str, Any] | None = None,
    computation_time: float | None = None,
) -> None:
    """Save analysis results to a JSON file.

    Produces the output envelope with metadata, units,
    section_properties, and results.
    """
    from frc_section import __version__

    output = {
        "metadata": {
            "version": "1.0.0",
            "timestamp": datetime.datetime.now(datetime.timezone.utc).isoformat(),
            "generator": f"frc-section v{__version__}",
            "analysis_type": analysis_type,
            "input_source": {
                "format": "frc_section_json",
                "file": input_file,
            },
        },
        "units": {
            "length": "mm",
            "force": "kN",
            "stress": "MPa",
            "moment": "kNm",
            "strain": "-",
            "curvature": "1/mm",
            "crack_width": "mm",
        },
        "section_properties": section_props or {},
        "results": _sanitise(result_dict),
    }

    if computation_time is not None:
        output["metadata"]["computation_time"] = computation_time

    filepath = Path(filepath)
    with open(filepath, "w") as f:
        json.dump(output, f, indent=2, default=_json_default)


def _sanitise(obj):
    """Replace non-finite floats, which json.dump would emit as bare NaN / Infinity."""
    if isinstance(obj, float) and (math.isnan(obj) or math.isinf(obj)):
        return str(obj)
    if isinstance(obj, dict):
        return {k: _sanitise(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [_sanitise(v) for v in obj]
    return obj


def _json_default(obj):
    """Handle non-serializable types."""
    if hasattr(obj, "to_dict"):
        return _sanitise(obj.to_dict())
    if hasattr(obj, "value"):
        return obj.value
    raise TypeError(f"Object of type {type(obj)} is not JSON serializable")
