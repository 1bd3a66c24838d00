from __future__ import annotations


class ProjectionConfigError(ValueError):
    """Base class for projection / discretization misconfiguration."""


class InvalidDimensionError(ProjectionConfigError):
    pass


class CellDimensionMismatchError(ProjectionConfigError):
    pass


class DegenerateScaleError(ProjectionConfigError):
    pass


class NotConfiguredError(ProjectionConfigError):
    """Raised when coordinates are requested before cell dimensions are set up."""


class InvalidCellDimensionError(ProjectionConfigError):
    """A cell width is zero, negative or not finite."""
