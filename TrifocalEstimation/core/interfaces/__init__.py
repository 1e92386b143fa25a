"""
Core interfaces for dependency injection.

This module defines the abstract base classes (contracts) for the external
collaborators of the trifocal core:
- IMinimalSolver: the polynomial-system solver, consumed as a black box
- IFeaturesProvider: per-view feature loading

Usage:
    from TrifocalEstimation.core.interfaces import IMinimalSolver, RawSolverOutput

    class MySolver(IMinimalSolver):
        max_solutions = 312

        def solve(self, positions, tangents):
            # Your implementation
            pass
"""

from .base_solver import (
    IMinimalSolver,
    RawSolverOutput,
    quat_translation_distance,
    probe_all_solutions_quat,
    QUAT_TRANSLATION_SIZE
)

from .base_provider import (
    IFeaturesProvider,
    ValidationResult
)


__all__ = [
    # Solver
    'IMinimalSolver',
    'RawSolverOutput',
    'quat_translation_distance',
    'probe_all_solutions_quat',
    'QUAT_TRANSLATION_SIZE',

    # Provider
    'IFeaturesProvider',
    'ValidationResult',
]
