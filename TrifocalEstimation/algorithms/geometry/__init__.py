"""
Geometry algorithms: linear triangulation and the trifocal minimal solver.
"""

from .triangulation import triangulate_dlt, project
from .trifocal import (
    TrifocalSolver,
    MockMinimalSolver,
    pack_correspondences,
    reprojection_error,
    probe_solutions,
    model_to_quat_translation,
    quat_translation_to_model
)

__all__ = [
    'triangulate_dlt',
    'project',
    'TrifocalSolver',
    'MockMinimalSolver',
    'pack_correspondences',
    'reprojection_error',
    'probe_solutions',
    'model_to_quat_translation',
    'quat_translation_to_model',
]
