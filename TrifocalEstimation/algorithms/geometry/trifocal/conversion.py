"""
Quaternion-translation form of a trifocal model.

Layout of the 14-vector: [q1(4), q2(4), t1(3), t2(3)] with scalar-first
quaternions (w, x, y, z). View 0 is always [I | 0] and is left out.
"""

import numpy as np
from scipy.spatial.transform import Rotation

from TrifocalEstimation.core.exceptions import ShapeMismatchError
from TrifocalEstimation.core.interfaces import QUAT_TRANSLATION_SIZE
from TrifocalEstimation.core.structures import TrifocalModel

from .packing import model_to_solution


def rotm2quat(R: np.ndarray) -> np.ndarray:
    """Rotation matrix -> unit quaternion (w, x, y, z)"""
    x, y, z, w = Rotation.from_matrix(np.asarray(R, dtype=float)).as_quat()
    return np.array([w, x, y, z])


def quat2rotm(q: np.ndarray) -> np.ndarray:
    """Quaternion (w, x, y, z), not necessarily unit -> rotation matrix"""
    w, x, y, z = np.asarray(q, dtype=float)
    return Rotation.from_quat([x, y, z, w]).as_matrix()


def model_to_quat_translation(model: TrifocalModel) -> np.ndarray:
    """
    Convert a trifocal model to quaternion-translation form.

    Assumes model[0] is [I | 0].

    Args:
        model: Trifocal model

    Returns:
        (14,) array [q1, q2, t1, t2]
    """
    tt_qt = np.zeros(QUAT_TRANSLATION_SIZE)
    tt_qt[0:4] = rotm2quat(model.rotation(1))
    tt_qt[4:8] = rotm2quat(model.rotation(2))
    for i in range(3):
        tt_qt[8 + i] = model[1][i, 3]
        tt_qt[8 + 3 + i] = model[2][i, 3]
    return tt_qt


def quat_translation_to_model(tt_qt: np.ndarray) -> TrifocalModel:
    """
    Build a trifocal model from its quaternion-translation form.

    Raises:
        ShapeMismatchError: If the vector does not have 14 entries
    """
    tt_qt = np.asarray(tt_qt, dtype=float).ravel()
    if tt_qt.size != QUAT_TRANSLATION_SIZE:
        raise ShapeMismatchError(
            f"Quaternion-translation vector must have {QUAT_TRANSLATION_SIZE} entries, "
            f"got {tt_qt.size}",
            expected=QUAT_TRANSLATION_SIZE, actual=tt_qt.size
        )

    return TrifocalModel.from_relative_poses(
        quat2rotm(tt_qt[0:4]), tt_qt[8:11],
        quat2rotm(tt_qt[4:8]), tt_qt[11:14]
    )


def quat_translation_to_solver_block(tt_qt: np.ndarray) -> np.ndarray:
    """Quaternion-translation form -> (2, 4, 3) relative cameras in solver layout"""
    return model_to_solution(quat_translation_to_model(tt_qt))
