from .exceptions import (
    TrifocalEstimationError,
    ShapeMismatchError,
    FeatureLoadingError
)

__all__ = [
    'TrifocalEstimationError',
    'ShapeMismatchError',
    'FeatureLoadingError',
]
