"""
frc-section: nonlinear analysis of RC / FRC cross-sections
==========================================================

Layered (fibre) sectional analysis of reinforced and fibre-reinforced
concrete cross-sections to EN 1992 (EC) and fib Model Code 2010, built
around a secant-stiffness equilibrium solver.

Currently implements:
  - Force- and curvature-controlled equilibrium solves (N, Mz)
  - Effective tension zone, crack spacing and design crack width
    (fib / EC / Watts)
  - Utilization ratios for concrete, fibres, reinforcement and cracks
  - Ultimate moment capacity search with per-analysis caching
  - Shear capacity (fib MC2010 / EN 1992)
  - Cracking moment, minimum reinforcement, moment-curvature sweeps
    and N-M interaction diagrams
  - JSON input/output

The package logs through loguru but stays silent until
:func:`frc_section.log.configure_logging` is called.
"""

from loguru import logger

__version__ = "0.1.0"

logger.disable("frc_section")
