"""Exception hierarchy for frc-section."""

from __future__ import annotations


class FrcSectionError(Exception):
    """Base class for all frc-section errors."""


class InvalidInputError(FrcSectionError, ValueError):
    """A material, geometry or load input is outside its valid range."""


class NumericalDegeneracyError(FrcSectionError):
    """The section rigidity system is singular (e.g. fully cracked, no steel)."""


class UnsupportedFeatureError(FrcSectionError, NotImplementedError):
    """The requested combination of options is not implemented."""


class ConvergenceError(FrcSectionError):
    """An iterative solve hit its iteration cap.

    Solvers report non-convergence through the status of their result;
    this is raised only when a caller asks for it explicitly.
    """

    def __init__(self, message: str, iterations: int = 0) -> None:
        super().__init__(message)
        self.iterations = iterations
