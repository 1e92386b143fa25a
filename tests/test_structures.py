"""
Tests for calibration, trifocal model and solution set structures.
"""

import numpy as np
import pytest

from TrifocalEstimation.core.exceptions import ShapeMismatchError
from TrifocalEstimation.core.structures import (
    IDENTITY_CAMERA,
    Intrinsics,
    SolutionSet,
    SolveStatus,
    TrifocalModel
)


def test_intrinsics_from_matrix():
    K = Intrinsics.from_matrix([[1000.0, 0.5, 320.0], [0.0, 900.0, 240.0]])

    assert K.fx == 1000.0
    assert K.skew == 0.5
    np.testing.assert_array_equal(K.matrix3x3[2], [0.0, 0.0, 1.0])


def test_intrinsics_rejects_bad_matrix():
    with pytest.raises(ShapeMismatchError):
        Intrinsics.from_matrix(np.eye(4))


def test_invert_intrinsics_inverts_apply(intrinsics):
    point = np.array([0.05, -0.03])
    np.testing.assert_allclose(
        intrinsics.invert_intrinsics(intrinsics.apply_intrinsics(point)), point, atol=1e-12
    )


def test_tangents_stay_unit(intrinsics):
    tangent = intrinsics.invert_intrinsics_tgt(np.array([3.0, 4.0]))
    assert np.linalg.norm(tangent) == pytest.approx(1.0)

    skewed = Intrinsics(fx=800.0, fy=600.0, cx=0.0, cy=0.0, skew=10.0)
    tangent = np.array([0.6, 0.8])
    np.testing.assert_allclose(
        skewed.invert_intrinsics_tgt(skewed.apply_intrinsics_tgt(tangent)), tangent, atol=1e-12
    )


def test_normalize_datum_matches_scene(scene):
    for pxdatum, datum in zip(scene.pixel_datum(), scene.normalized_datum()):
        np.testing.assert_allclose(scene.intrinsics.normalize_datum(pxdatum), datum, atol=1e-12)


def test_normalize_datum_positions_only(intrinsics):
    assert intrinsics.normalize_datum(np.ones((2, 5))).shape == (2, 5)
    with pytest.raises(ShapeMismatchError):
        intrinsics.normalize_datum(np.ones((3, 5)))


def test_model_is_read_only(ground_truth):
    with pytest.raises(ValueError):
        ground_truth[1][0, 0] = 2.0


def test_model_validates_shapes():
    with pytest.raises(ShapeMismatchError):
        TrifocalModel((IDENTITY_CAMERA, IDENTITY_CAMERA))
    with pytest.raises(ShapeMismatchError):
        TrifocalModel((IDENTITY_CAMERA, IDENTITY_CAMERA, np.eye(3)))


def test_model_accessors(ground_truth):
    assert len(ground_truth) == 3
    assert ground_truth.has_identity_reference()
    np.testing.assert_array_equal(ground_truth.rotation(2), ground_truth[2][:, :3])
    np.testing.assert_array_equal(ground_truth.translation(1), ground_truth[1][:, 3])


def test_model_equality_and_hash(ground_truth):
    copy = TrifocalModel(tuple(P.copy() for P in ground_truth))
    assert copy == ground_truth
    assert hash(copy) == hash(ground_truth)


def test_scene_points_in_front_of_cameras(scene):
    assert np.all(scene.depths() > 0)


def test_random_scene_is_reproducible():
    from TrifocalEstimation.data import SyntheticTrifocalScene

    first = SyntheticTrifocalScene.random(seed=3)
    second = SyntheticTrifocalScene.random(seed=3)

    assert first.ground_truth == second.ground_truth
    assert first.ground_truth.has_identity_reference()


def test_failed_solution_set():
    solutions = SolutionSet.failed(attempts=5)

    assert solutions.status == SolveStatus.SOLVE_FAILED
    assert solutions.solve_failed
    assert len(solutions) == 0
    assert list(solutions) == []
