"""
Pinhole intrinsics in the compact 2x3 form used by the trifocal solver.

    K = [[fx, skew, cx],
         [ 0,   fy, cy]]

The implicit third row is [0, 0, 1].
"""

import numpy as np
from dataclasses import dataclass
from typing import Sequence, Union

from ..exceptions import ShapeMismatchError


@dataclass(frozen=True)
class Intrinsics:
    """Fixed calibration mapping normalized coordinates to pixels and back"""

    fx: float
    fy: float
    cx: float
    cy: float
    skew: float = 0.0

    @classmethod
    def from_matrix(cls, K: Union[np.ndarray, Sequence[Sequence[float]]]) -> 'Intrinsics':
        """
        Build from a 2x3 or 3x3 calibration matrix.

        Raises:
            ShapeMismatchError: If K is neither 2x3 nor 3x3
        """
        K = np.asarray(K, dtype=float)
        if K.shape not in ((2, 3), (3, 3)):
            raise ShapeMismatchError(
                f"Calibration must be 2x3 or 3x3, got {K.shape}",
                expected=(2, 3), actual=K.shape
            )
        return cls(fx=float(K[0, 0]), fy=float(K[1, 1]),
                   cx=float(K[0, 2]), cy=float(K[1, 2]),
                   skew=float(K[0, 1]))

    @property
    def matrix(self) -> np.ndarray:
        """2x3 calibration matrix"""
        return np.array([[self.fx, self.skew, self.cx],
                         [0.0, self.fy, self.cy]])

    @property
    def matrix3x3(self) -> np.ndarray:
        """Full 3x3 calibration matrix"""
        return np.vstack([self.matrix, [0.0, 0.0, 1.0]])

    def invert_intrinsics(self, pixel: np.ndarray) -> np.ndarray:
        """Pixel point -> normalized (unit focal length) point"""
        u, v = float(pixel[0]), float(pixel[1])
        y = (v - self.cy) / self.fy
        x = (u - self.cx - self.skew * y) / self.fx
        return np.array([x, y])

    def invert_intrinsics_tgt(self, pixel_tangent: np.ndarray) -> np.ndarray:
        """Pixel tangent direction -> unit tangent in normalized coordinates"""
        tu, tv = float(pixel_tangent[0]), float(pixel_tangent[1])
        ty = tv / self.fy
        tx = (tu - self.skew * ty) / self.fx
        tangent = np.array([tx, ty])
        norm = np.linalg.norm(tangent)
        return tangent / norm if norm > 0 else tangent

    def apply_intrinsics(self, normalized: np.ndarray) -> np.ndarray:
        """Normalized point -> pixel point"""
        x, y = float(normalized[0]), float(normalized[1])
        return np.array([self.fx * x + self.skew * y + self.cx,
                         self.fy * y + self.cy])

    def apply_intrinsics_tgt(self, tangent: np.ndarray) -> np.ndarray:
        """Normalized tangent -> unit tangent in pixel coordinates"""
        tx, ty = float(tangent[0]), float(tangent[1])
        pixel_tangent = np.array([self.fx * tx + self.skew * ty, self.fy * ty])
        norm = np.linalg.norm(pixel_tangent)
        return pixel_tangent / norm if norm > 0 else pixel_tangent

    def normalize_datum(self, pxdatum: np.ndarray) -> np.ndarray:
        """
        Convert a pixel correspondence matrix to normalized units.

        Args:
            pxdatum: (2, N) or (4, N) matrix, rows x, y[, tangent_x, tangent_y]

        Returns:
            Matrix of the same shape in normalized units
        """
        pxdatum = np.asarray(pxdatum, dtype=float)
        if pxdatum.ndim != 2 or pxdatum.shape[0] not in (2, 4):
            raise ShapeMismatchError(
                f"Correspondence matrix must have 2 or 4 rows, got shape {pxdatum.shape}",
                expected=(4, 3), actual=pxdatum.shape
            )

        datum = np.empty_like(pxdatum)
        for ip in range(pxdatum.shape[1]):
            datum[:2, ip] = self.invert_intrinsics(pxdatum[:2, ip])
            if pxdatum.shape[0] == 4:
                datum[2:, ip] = self.invert_intrinsics_tgt(pxdatum[2:, ip])
        return datum
