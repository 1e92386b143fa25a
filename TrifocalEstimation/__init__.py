"""
TrifocalEstimation - Three-point trifocal solve-and-verify core

Minimal three-view relative pose from three point+tangent correspondences:
pack, solve through an external polynomial solver, score, and certify
against ground truth.
"""

from .logger import setup_logger, get_logger, set_level

__version__ = "1.0.0"
__all__ = [
    "setup_logger",
    "get_logger",
    "set_level",
]
