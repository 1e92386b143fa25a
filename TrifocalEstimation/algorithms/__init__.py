from .geometry import (
    TrifocalSolver,
    MockMinimalSolver,
    pack_correspondences,
    reprojection_error,
    probe_solutions
)

__all__ = [
    'TrifocalSolver',
    'MockMinimalSolver',
    'pack_correspondences',
    'reprojection_error',
    'probe_solutions',
]
