"""Input/output: JSON load cases and result envelopes."""

from frc_section.io.json_io import load_json_input, save_json_output

__all__ = ["load_json_input", "save_json_output"]
