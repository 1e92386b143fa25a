from .helpers import (
    keypoints_from_feat_rows,
    keypoints_to_array,
    orientation_to_tangent
)
from .calibration import Intrinsics
from .trifocal_model import (
    TrifocalModel,
    SolutionSet,
    SolveStatus,
    IDENTITY_CAMERA,
    NUM_VIEWS
)

__all__ = [
    # Enumerations
    'SolveStatus',

    # Classes
    'Intrinsics',
    'TrifocalModel',
    'SolutionSet',

    # Constants
    'IDENTITY_CAMERA',
    'NUM_VIEWS',

    # Utilities
    'keypoints_from_feat_rows',
    'keypoints_to_array',
    'orientation_to_tangent',
]
