"""
Custom exception hierarchy for clearer error handling.
Validation errors are raised before any model is built; solver errors carry
the backend's native status so callers can see what the solver reported.
"""
class SspError(Exception):
    """Base class for SSP-related errors."""

class ConfigError(SspError):
    pass

class InvalidInstance(SspError):
    """Non-binary matrix, all-zero row/column, or bad magazine capacity."""

class DataLoadError(SspError):
    pass

class FormulationError(SspError):
    pass

class SolverError(SspError):
    """Base for failures reported by (or while starting) the external solver."""

    def __init__(self, message, status=None, summary=None):
        super().__init__(message)
        self.status = status
        self.summary = dict(summary or {})

class SolverUnavailable(SolverError):
    pass

class Infeasible(SolverError):
    pass

class NoSolutionFound(SolverError):
    """Solver stopped (e.g. at the time limit) without a feasible incumbent."""

class Unbounded(SolverError):
    """Solver reported an unbounded objective; not expected for binary models."""
