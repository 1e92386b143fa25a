"""
Build the per-view correspondence matrices of a three-view track.
"""

from typing import List, Sequence

import numpy as np

from TrifocalEstimation.core.exceptions import ShapeMismatchError
from TrifocalEstimation.core.interfaces import IFeaturesProvider
from TrifocalEstimation.core.structures import NUM_VIEWS, orientation_to_tangent


def extract_xy_orientation(provider: IFeaturesProvider,
                           view_ids: Sequence,
                           feature_ids: Sequence[Sequence[int]]) -> List[np.ndarray]:
    """
    Gather x, y and orientation tangent of matched features, in pixel units.

    Args:
        provider: Provider holding oriented features
        view_ids: The three view identifiers, in view order 0, 1, 2
        feature_ids: feature_ids[v][p] is the feature index of point p in view v

    Returns:
        Three (4, N) matrices: rows x, y, cos(orientation), sin(orientation)

    Raises:
        ShapeMismatchError: If not exactly three views with the same point count
        KeyError: If a view has no oriented features
    """
    if len(view_ids) != NUM_VIEWS or len(feature_ids) != NUM_VIEWS:
        raise ShapeMismatchError(
            f"Expected {NUM_VIEWS} views, got {len(view_ids)} views and "
            f"{len(feature_ids)} feature id lists",
            expected=NUM_VIEWS, actual=(len(view_ids), len(feature_ids))
        )

    num_points = len(feature_ids[0])
    if any(len(ids) != num_points for ids in feature_ids):
        raise ShapeMismatchError(
            "Every view must list the same number of features",
            expected=num_points, actual=[len(ids) for ids in feature_ids]
        )

    pxdatum = []
    for view_id, ids in zip(view_ids, feature_ids):
        keypoints = provider.get_oriented_features(view_id)
        if not keypoints:
            raise KeyError(f"No oriented features for view {view_id}")

        d = np.zeros((4, num_points))
        for ip, feature_id in enumerate(ids):
            kp = keypoints[feature_id]
            d[0, ip], d[1, ip] = kp.pt
            d[2:, ip] = orientation_to_tangent(kp.angle)
        pxdatum.append(d)

    return pxdatum
