import numpy as np


def triangulate_dlt(P1: np.ndarray,
                    x1: np.ndarray,
                    P2: np.ndarray,
                    x2: np.ndarray) -> np.ndarray:
    """
    Triangulate one 3D point using the Direct Linear Transform (DLT) method.

    Args:
        P1, P2: Camera projection matrices (3x4)
        x1, x2: Homogeneous image points (3,) in the frame of P1 and P2

    Returns:
        Homogeneous 3D point (4,), unit norm
    """
    x1 = np.asarray(x1, dtype=float)
    x2 = np.asarray(x2, dtype=float)

    # Each view gives us 2 equations of x cross (P X) = 0
    A = np.array([
        x1[0] * P1[2, :] - x1[2] * P1[0, :],
        x1[1] * P1[2, :] - x1[2] * P1[1, :],
        x2[0] * P2[2, :] - x2[2] * P2[0, :],
        x2[1] * P2[2, :] - x2[2] * P2[1, :]
    ])

    # Solve using SVD
    _, _, Vt = np.linalg.svd(A)
    return Vt[-1, :]


def project(P: np.ndarray, X_hom: np.ndarray) -> np.ndarray:
    """
    Project a homogeneous 3D point and dehomogenize to a 2D point.

    A point with zero depth in the camera projects to (inf, inf).
    """
    x = P @ np.asarray(X_hom, dtype=float)
    if x[2] == 0:
        return np.full(2, np.inf)
    return x[:2] / x[2]
