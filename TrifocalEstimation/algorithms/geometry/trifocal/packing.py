"""
Data marshalling between correspondence matrices, the solver buffers and
camera matrices.

The solver stores each relative camera of a solution as a (4, 3) block whose
rows 0-2 are the rotation rows and row 3 the translation. Camera matrices
here are (3, 4) [R | t]. The two layouts are not interchangeable by reshape,
so every conversion copies element by element.
"""

from typing import Tuple

import numpy as np

from TrifocalEstimation.core.exceptions import ShapeMismatchError
from TrifocalEstimation.core.structures import IDENTITY_CAMERA, NUM_VIEWS, TrifocalModel


NUM_POINTS = 3
NUM_COORDS_2D = 2


def _check_datum(datum: np.ndarray, view: int) -> np.ndarray:
    datum = np.asarray(datum, dtype=float)
    if datum.ndim != 2 or datum.shape != (4, NUM_POINTS):
        raise ShapeMismatchError(
            f"Correspondence matrix of view {view} must be 4x{NUM_POINTS} "
            f"(x, y, tangent_x, tangent_y per point), got {datum.shape}",
            expected=(4, NUM_POINTS), actual=datum.shape
        )
    return datum


def pack_correspondences(datum_0: np.ndarray,
                         datum_1: np.ndarray,
                         datum_2: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """
    Pack three correspondence matrices into the solver input buffers.

    Args:
        datum_0, datum_1, datum_2: (4, 3) matrices, one per view; rows are
            x, y, tangent_x, tangent_y and columns are the three points

    Returns:
        positions: (3 views, 3 points, 2)
        tangents: (3 views, 3 points, 2)

    Raises:
        ShapeMismatchError: If any matrix is not 4x3
    """
    data = [_check_datum(d, v) for v, d in enumerate((datum_0, datum_1, datum_2))]

    positions = np.empty((NUM_VIEWS, NUM_POINTS, NUM_COORDS_2D))
    tangents = np.empty((NUM_VIEWS, NUM_POINTS, NUM_COORDS_2D))

    for v, datum in enumerate(data):
        for ip in range(NUM_POINTS):
            positions[v, ip, 0] = datum[0, ip]
            positions[v, ip, 1] = datum[1, ip]
            tangents[v, ip, 0] = datum[2, ip]
            tangents[v, ip, 1] = datum[3, ip]

    return positions, tangents


def solver_block_to_camera(block: np.ndarray) -> np.ndarray:
    """
    Convert one (4, 3) solver block into a (3, 4) camera matrix.

    Rotation rows are copied in place; the translation row becomes column 3.
    """
    block = np.asarray(block, dtype=float)
    if block.shape != (4, 3):
        raise ShapeMismatchError(
            f"Solver camera block must be 4x3, got {block.shape}",
            expected=(4, 3), actual=block.shape
        )

    camera = np.zeros((3, 4))
    for ir in range(3):
        for ic in range(3):
            camera[ir, ic] = block[ir, ic]
    for r in range(3):
        camera[r, 3] = block[3, r]
    return camera


def camera_to_solver_block(camera: np.ndarray) -> np.ndarray:
    """Inverse of solver_block_to_camera"""
    camera = np.asarray(camera, dtype=float)
    if camera.shape != (3, 4):
        raise ShapeMismatchError(
            f"Camera matrix must be 3x4, got {camera.shape}",
            expected=(3, 4), actual=camera.shape
        )

    block = np.zeros((4, 3))
    for ir in range(3):
        for ic in range(3):
            block[ir, ic] = camera[ir, ic]
    for r in range(3):
        block[3, r] = camera[r, 3]
    return block


def solution_to_model(solution: np.ndarray) -> TrifocalModel:
    """
    Build a TrifocalModel from one (2, 4, 3) solver solution.

    Camera 0 is [I | 0]; cameras 1 and 2 come from the two blocks.
    """
    solution = np.asarray(solution, dtype=float)
    if solution.shape != (NUM_VIEWS - 1, 4, 3):
        raise ShapeMismatchError(
            f"Solver solution must be ({NUM_VIEWS - 1}, 4, 3), got {solution.shape}",
            expected=(NUM_VIEWS - 1, 4, 3), actual=solution.shape
        )

    cameras = [IDENTITY_CAMERA.copy()]
    for v in range(1, NUM_VIEWS):
        cameras.append(solver_block_to_camera(solution[v - 1]))
    return TrifocalModel(tuple(cameras))


def model_to_solution(model: TrifocalModel) -> np.ndarray:
    """(2, 4, 3) solver layout of the relative cameras of a model"""
    return np.stack([camera_to_solver_block(model[v]) for v in range(1, NUM_VIEWS)])
