"""
Three-point trifocal solve-and-verify module

Components:
- pack_correspondences: correspondence matrices -> solver input buffers
- TrifocalSolver: bounded-retry solver invoker producing a SolutionSet
- reprojection_error: wider-baseline triangulate-and-reproject score
- model_to_quat_translation / quat_translation_to_model: comparison form
- probe_solutions: symmetry-aware ground-truth search
- MockMinimalSolver: stand-in for the external polynomial solver

Usage:
    from TrifocalEstimation.algorithms.geometry.trifocal import TrifocalSolver

    solver = TrifocalSolver(minimal_solver)
    solutions = solver.solve(datum[0], datum[1], datum[2])

    found, index = solver.probe(solutions, ground_truth)
    if found:
        err = solver.error(solutions[index], bearings, px_bearings, K)
"""

from .packing import (
    pack_correspondences,
    solver_block_to_camera,
    camera_to_solver_block,
    solution_to_model,
    model_to_solution
)

from .conversion import (
    rotm2quat,
    quat2rotm,
    model_to_quat_translation,
    quat_translation_to_model,
    quat_translation_to_solver_block
)

from .error import (
    reprojection_error,
    select_triangulation_views
)

from .probing import probe_solutions, DEFAULT_PROBE_TOLERANCE
from .solver import TrifocalSolver
from .mock_solver import MockMinimalSolver


__all__ = [
    # Packing
    'pack_correspondences',
    'solver_block_to_camera',
    'camera_to_solver_block',
    'solution_to_model',
    'model_to_solution',

    # Conversion
    'rotm2quat',
    'quat2rotm',
    'model_to_quat_translation',
    'quat_translation_to_model',
    'quat_translation_to_solver_block',

    # Scoring
    'reprojection_error',
    'select_triangulation_views',

    # Probing
    'probe_solutions',
    'DEFAULT_PROBE_TOLERANCE',

    # Solvers
    'TrifocalSolver',
    'MockMinimalSolver',
]
