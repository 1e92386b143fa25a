"""
Reprojection error of a trifocal model on one point correspondence.

The point is triangulated from view 0 and the view with the wider baseline,
then reprojected into the remaining view. Tangent rows of the bearings are
accepted but not used.
"""

import logging
from typing import Sequence, Tuple

import numpy as np

from TrifocalEstimation.core.exceptions import ShapeMismatchError
from TrifocalEstimation.core.structures import Intrinsics, NUM_VIEWS, TrifocalModel
from TrifocalEstimation.algorithms.geometry.triangulation import triangulate_dlt, project
from TrifocalEstimation.logger import get_logger

logger = get_logger("trifocal.error")


def select_triangulation_views(model: TrifocalModel) -> Tuple[int, int]:
    """
    Pick the view paired with view 0 for triangulation, and the scoring view.

    Only the baselines 0-1 and 0-2 are compared.
    TODO: measure all pairwise translation distances, including 1-2.

    Returns:
        (pair_view, third_view)
    """
    if np.sum(model[1][:, 3] ** 2) > np.sum(model[2][:, 3] ** 2):
        return 1, 2
    return 2, 1


def _bearing_matrix(bearings: Sequence[np.ndarray]) -> np.ndarray:
    """3x3: each column is x, y, 1"""
    if len(bearings) != NUM_VIEWS:
        raise ShapeMismatchError(
            f"Expected {NUM_VIEWS} bearings, got {len(bearings)}",
            expected=NUM_VIEWS, actual=len(bearings)
        )

    bearing = np.ones((3, NUM_VIEWS))
    for v, b in enumerate(bearings):
        b = np.asarray(b, dtype=float).ravel()
        if b.size < 2:
            raise ShapeMismatchError(
                f"Bearing of view {v} needs at least x, y; got {b.size} values",
                expected=2, actual=b.size
            )
        bearing[:2, v] = b[:2]
    return bearing


def reprojection_error(model: TrifocalModel,
                       bearings: Sequence[np.ndarray],
                       px_bearings: Sequence[np.ndarray],
                       intrinsics: Intrinsics) -> float:
    """
    Squared reprojection error of one correspondence under a model.

    Args:
        model: Candidate trifocal model
        bearings: Three normalized bearings (x, y[, tangent_x, tangent_y])
        px_bearings: The same bearings in pixel units
        intrinsics: Calibration used to express the reprojection in pixels

    Returns:
        Squared distance, in normalized units, between the reprojection and
        the observed bearing of the third view. Infinite when the point
        cannot be reprojected (zero depth or degenerate triangulation).
    """
    bearing = _bearing_matrix(bearings)

    pair_view, third_view = select_triangulation_views(model)
    triangulated_homg = triangulate_dlt(
        model[0], bearing[:, 0], model[pair_view], bearing[:, pair_view]
    )

    # Only the third view is scored
    p_reprojected = project(model[third_view], triangulated_homg)

    if logger.isEnabledFor(logging.DEBUG):
        p_reprojected_pix = intrinsics.apply_intrinsics(p_reprojected)
        observed_pix = np.asarray(px_bearings[third_view], dtype=float).ravel()[:2]
        logger.debug(
            f"Third view {third_view}: reprojected {p_reprojected_pix} px, "
            f"observed {observed_pix} px"
        )

    residual = p_reprojected - bearing[:2, third_view]
    err = float(residual @ residual)
    if not np.isfinite(err):
        logger.debug(f"Point cannot be reprojected into view {third_view}")
        return float('inf')
    return err
