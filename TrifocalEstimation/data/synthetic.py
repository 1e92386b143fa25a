"""
Synthetic three-view scenes with known ground truth.

A scene is three 3D points, each with a 3D tangent direction, seen by three
calibrated cameras with camera 0 at [I | 0]. Projecting it gives noiseless
point+tangent correspondences for solver and error-model tests.
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple

import numpy as np
from scipy.spatial.transform import Rotation

from TrifocalEstimation.core.structures import Intrinsics, NUM_VIEWS, TrifocalModel
from TrifocalEstimation.algorithms.geometry.trifocal import model_to_quat_translation


# Calibration of the synthetic dataset (pixels)
DEFAULT_INTRINSICS = Intrinsics(
    fx=2584.9325098195013197,
    fy=2584.7918606057692159,
    cx=249.77137587221417903,
    cy=278.31267937919352562
)


def _project_point_and_tangent(P: np.ndarray,
                               X: np.ndarray,
                               T: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """Normalized image point and unit image tangent of a 3D point+direction"""
    Y = P[:, :3] @ X + P[:, 3]
    dY = P[:, :3] @ T
    x = Y[:2] / Y[2]
    # derivative of the perspective division along the 3D tangent
    dx = (dY[:2] - x * dY[2]) / Y[2]
    return x, dx / np.linalg.norm(dx)


@dataclass(frozen=True)
class SyntheticTrifocalScene:
    """
    Ground-truth trifocal configuration and the points it observes.

    Attributes:
        ground_truth: Trifocal model, camera 0 = [I | 0]
        intrinsics: Calibration shared by the three views
        points_3d: (3, 3) array, one 3D point per column (view 0 frame)
        tangents_3d: (3, 3) array, one unit 3D direction per column
    """

    ground_truth: TrifocalModel
    intrinsics: Intrinsics
    points_3d: np.ndarray
    tangents_3d: np.ndarray

    @classmethod
    def default(cls) -> 'SyntheticTrifocalScene':
        """Fixed scene used by the test suite"""
        R1 = Rotation.from_euler('xyz', [5.0, -10.0, 3.0], degrees=True).as_matrix()
        R2 = Rotation.from_euler('xyz', [-4.0, 12.0, -2.0], degrees=True).as_matrix()
        C1 = np.array([1.0, 0.1, 0.2])
        C2 = np.array([-0.8, 0.3, 0.1])

        points_3d = np.array([
            [0.3, -0.4, 0.1],
            [-0.2, 0.1, 0.35],
            [5.0, 4.5, 5.5]
        ])
        tangents_3d = np.array([
            [1.0, 0.1, -0.5],
            [0.2, 1.0, 0.5],
            [0.1, -0.2, 0.3]
        ])

        return cls.from_camera_centers(R1, C1, R2, C2, points_3d, tangents_3d)

    @classmethod
    def random(cls,
               seed: Optional[int] = None,
               intrinsics: Intrinsics = DEFAULT_INTRINSICS,
               max_angle_deg: float = 15.0,
               depth_range: Tuple[float, float] = (4.0, 8.0)) -> 'SyntheticTrifocalScene':
        """
        Random scene with all points in front of the three cameras.

        Args:
            seed: Random seed for reproducibility
            intrinsics: Calibration of the three views
            max_angle_deg: Bound on each Euler angle of views 1 and 2
            depth_range: Depth range of the points in view 0
        """
        rng = np.random.default_rng(seed)

        R1, R2 = (
            Rotation.from_euler('xyz', rng.uniform(-max_angle_deg, max_angle_deg, 3),
                                degrees=True).as_matrix()
            for _ in range(2)
        )
        C1 = rng.uniform(-1.0, 1.0, 3)
        C2 = rng.uniform(-1.0, 1.0, 3)

        depths = rng.uniform(depth_range[0], depth_range[1], NUM_VIEWS)
        points_3d = np.vstack([
            rng.uniform(-0.1, 0.1, (2, NUM_VIEWS)) * depths,
            depths
        ])
        tangents_3d = rng.normal(size=(3, NUM_VIEWS))
        tangents_3d /= np.linalg.norm(tangents_3d, axis=0)

        return cls.from_camera_centers(R1, C1, R2, C2, points_3d, tangents_3d, intrinsics)

    @classmethod
    def from_camera_centers(cls,
                            R1: np.ndarray, C1: np.ndarray,
                            R2: np.ndarray, C2: np.ndarray,
                            points_3d: np.ndarray,
                            tangents_3d: np.ndarray,
                            intrinsics: Intrinsics = DEFAULT_INTRINSICS) -> 'SyntheticTrifocalScene':
        """Build a scene from camera orientations and centers in the view 0 frame"""
        ground_truth = TrifocalModel.from_relative_poses(R1, -R1 @ C1, R2, -R2 @ C2)

        tangents_3d = np.asarray(tangents_3d, dtype=float)
        tangents_3d = tangents_3d / np.linalg.norm(tangents_3d, axis=0)

        return cls(
            ground_truth=ground_truth,
            intrinsics=intrinsics,
            points_3d=np.asarray(points_3d, dtype=float),
            tangents_3d=tangents_3d
        )

    # ========================================================================
    # DERIVED DATA
    # ========================================================================

    @property
    def ground_truth_quat(self) -> np.ndarray:
        """Ground truth in quaternion-translation form"""
        return model_to_quat_translation(self.ground_truth)

    def depths(self) -> np.ndarray:
        """(3 views, 3 points) depth of every point in every camera"""
        X_hom = np.vstack([self.points_3d, np.ones((1, self.points_3d.shape[1]))])
        return np.array([(P @ X_hom)[2] for P in self.ground_truth])

    def normalized_datum(self) -> List[np.ndarray]:
        """Three (4, 3) matrices x, y, tangent_x, tangent_y in normalized units"""
        datum = []
        for P in self.ground_truth:
            d = np.zeros((4, self.points_3d.shape[1]))
            for ip in range(self.points_3d.shape[1]):
                x, dx = _project_point_and_tangent(P, self.points_3d[:, ip], self.tangents_3d[:, ip])
                d[:2, ip] = x
                d[2:, ip] = dx
            datum.append(d)
        return datum

    def pixel_datum(self) -> List[np.ndarray]:
        """Three (4, 3) matrices in pixel units"""
        pxdatum = []
        for d in self.normalized_datum():
            px = np.zeros_like(d)
            for ip in range(d.shape[1]):
                px[:2, ip] = self.intrinsics.apply_intrinsics(d[:2, ip])
                px[2:, ip] = self.intrinsics.apply_intrinsics_tgt(d[2:, ip])
            pxdatum.append(px)
        return pxdatum

    def bearings(self, point_index: int) -> Tuple[List[np.ndarray], List[np.ndarray]]:
        """
        Normalized and pixel bearings of one point in the three views,
        with the normalized ones recovered from pixels through the calibration.
        """
        pxdatum = self.pixel_datum()
        px_bearings = [d[:, point_index] for d in pxdatum]
        bearings = [self.intrinsics.normalize_datum(d)[:, point_index] for d in pxdatum]
        return bearings, px_bearings
