"""
Reading and writing of per-view feature files.

One feature per line, whitespace separated:
    x y                         point features
    x y scale orientation       oriented features (orientation in radians)
"""

from pathlib import Path
from typing import Union

import numpy as np

from TrifocalEstimation.core.exceptions import FeatureLoadingError


def read_feat_file(path: Union[str, Path]) -> np.ndarray:
    """
    Load a feature file.

    Args:
        path: Feature file path

    Returns:
        (N, 2) or (N, 4) float array

    Raises:
        FeatureLoadingError: If the file is missing, unreadable or malformed
    """
    path = Path(path)
    if not path.is_file():
        raise FeatureLoadingError(f"Feature file not found: {path}", path=str(path))

    try:
        rows = np.loadtxt(path, dtype=float, ndmin=2)
    except OSError as e:
        raise FeatureLoadingError(f"Cannot read feature file {path}: {e}", path=str(path)) from e
    except ValueError as e:
        raise FeatureLoadingError(f"Invalid feature file {path}: {e}", path=str(path)) from e

    if rows.size == 0:
        return np.empty((0, 2))

    if rows.shape[1] not in (2, 4):
        raise FeatureLoadingError(
            f"Feature file {path} must have 2 or 4 columns, got {rows.shape[1]}",
            path=str(path)
        )
    return rows


def write_feat_file(path: Union[str, Path], rows: np.ndarray):
    """
    Save features to a feature file.

    Args:
        path: Output path (parent directories are created)
        rows: (N, 2) or (N, 4) array
    """
    rows = np.asarray(rows, dtype=float)
    if rows.ndim != 2 or rows.shape[1] not in (2, 4):
        raise ValueError(f"Features must be (N, 2) or (N, 4), got {rows.shape}")

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    np.savetxt(path, rows, fmt='%.10f')
