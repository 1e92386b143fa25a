"""
Exception hierarchy for TrifocalEstimation.

Only structural problems are raised. Solver non-convergence is reported
through SolveStatus on the returned SolutionSet and a ground-truth mismatch
is reported as a boolean by the prober.
"""


class TrifocalEstimationError(Exception):
    """Base class for all TrifocalEstimation errors"""


class ShapeMismatchError(TrifocalEstimationError, ValueError):
    """Correspondence input does not hold exactly 3 views of 3 points"""

    def __init__(self, message: str, expected=None, actual=None):
        super().__init__(message)
        self.expected = expected
        self.actual = actual


class FeatureLoadingError(TrifocalEstimationError):
    """A per-view feature file is missing or cannot be parsed"""

    def __init__(self, message: str, view_id=None, path=None):
        super().__init__(message)
        self.view_id = view_id
        self.path = path
