"""
Shared fixtures for the trifocal test suite.

Every fixture builds its own value; the ground truth is never shared state.
"""

import pytest

from TrifocalEstimation.algorithms.geometry.trifocal import MockMinimalSolver
from TrifocalEstimation.data.synthetic import SyntheticTrifocalScene


@pytest.fixture
def scene():
    """Fixed noiseless synthetic scene"""
    return SyntheticTrifocalScene.default()


@pytest.fixture
def ground_truth(scene):
    return scene.ground_truth


@pytest.fixture
def intrinsics(scene):
    return scene.intrinsics


@pytest.fixture
def pxdatum(scene):
    """x, y, orientation across 3 views in pixel units; pxdatum[view](coord, point)"""
    return scene.pixel_datum()


@pytest.fixture
def datum(scene, pxdatum):
    """Same as pxdatum, converted to normalized units through the calibration"""
    return [scene.intrinsics.normalize_datum(d) for d in pxdatum]


@pytest.fixture
def make_mock_solver(ground_truth):
    """Factory for mock solvers hiding the scene's ground truth"""
    def _make(**kwargs):
        kwargs.setdefault('seed', 0)
        return MockMinimalSolver(ground_truth, **kwargs)
    return _make
