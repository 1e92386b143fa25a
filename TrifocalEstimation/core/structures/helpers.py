import cv2
import numpy as np
from typing import List, Sequence


def keypoints_from_feat_rows(rows: np.ndarray) -> List[cv2.KeyPoint]:
    """
    Convert rows of a scale/orientation feature file to cv2.KeyPoint objects.

    Args:
        rows: (N, 4) array of x, y, scale, orientation (radians)

    Returns:
        List of cv2.KeyPoint objects (angle stored in degrees)
    """
    return [
        cv2.KeyPoint(
            x=float(row[0]),
            y=float(row[1]),
            size=float(row[2]),
            angle=float(np.degrees(row[3]) % 360.0)
        )
        for row in rows
    ]


def keypoints_to_array(keypoints: Sequence[cv2.KeyPoint]) -> np.ndarray:
    """
    Convert keypoints back to an (N, 4) array of x, y, scale, orientation (radians).

    Args:
        keypoints: List of cv2.KeyPoint objects

    Returns:
        (N, 4) float array
    """
    if len(keypoints) == 0:
        return np.empty((0, 4))
    return np.array([
        [kp.pt[0], kp.pt[1], kp.size, np.radians(kp.angle)]
        for kp in keypoints
    ], dtype=float)


def orientation_to_tangent(angle_deg: float) -> np.ndarray:
    """Unit tangent direction (cos a, sin a) for a keypoint angle in degrees"""
    angle = np.radians(angle_deg)
    return np.array([np.cos(angle), np.sin(angle)])
