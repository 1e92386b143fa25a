"""
Three-point position+tangent trifocal solver.

Wraps an external minimal solver (IMinimalSolver) with a bounded retry
policy and converts its raw output into TrifocalModels.
"""

from typing import Optional, Sequence

import numpy as np

from TrifocalEstimation.config import TrifocalSolverConfig
from TrifocalEstimation.core.exceptions import ShapeMismatchError
from TrifocalEstimation.core.interfaces import IMinimalSolver, RawSolverOutput
from TrifocalEstimation.core.structures import (
    Intrinsics,
    SolutionSet,
    SolveStatus,
    TrifocalModel
)
from TrifocalEstimation.logger import get_logger

from .error import reprojection_error
from .packing import pack_correspondences, solution_to_model
from .probing import probe_solutions

logger = get_logger("trifocal.solver")


class TrifocalSolver:
    """
    Solve-and-score kernel for three point+tangent correspondences.

    Example:
        >>> solver = TrifocalSolver(minimal_solver)
        >>> solutions = solver.solve(datum[0], datum[1], datum[2])
        >>> if solutions.solve_failed:
        ...     print("Abandon this triple")
        >>> for model in solutions:
        ...     err = solver.error(model, bearings, px_bearings, K)
    """

    def __init__(self,
                 minimal_solver: IMinimalSolver,
                 config: Optional[TrifocalSolverConfig] = None):
        """
        Args:
            minimal_solver: External polynomial solver
            config: Retry budget and tolerances
        """
        self.minimal_solver = minimal_solver
        self.config = config or TrifocalSolverConfig()

        if self.config.max_solve_tries <= 0:
            raise ValueError("max_solve_tries must be positive")

    def solve(self,
              datum_0: np.ndarray,
              datum_1: np.ndarray,
              datum_2: np.ndarray) -> SolutionSet:
        """
        Solve for the candidate trifocal models of one correspondence triple.

        Args:
            datum_0, datum_1, datum_2: (4, 3) normalized correspondence
                matrices (x, y, tangent_x, tangent_y per point)

        Returns:
            SolutionSet in solver slot order. Empty with status SOLVE_FAILED
            if the solver did not converge within max_solve_tries.

        Raises:
            ShapeMismatchError: If the input is not 3 views of 3 points, or the
                solver output does not match the solver's capacity
        """
        # pack into solver's representation
        positions, tangents = pack_correspondences(datum_0, datum_1, datum_2)

        raw: Optional[RawSolverOutput] = None
        attempts = 0
        for attempts in range(1, self.config.max_solve_tries + 1):
            raw = self.minimal_solver.solve(positions, tangents)
            if raw is not None:
                break
            logger.warning(
                f"Minimal solver failed to converge "
                f"(attempt {attempts}/{self.config.max_solve_tries}), retrying"
            )

        if raw is None:
            logger.error(f"Solve failed after {attempts} attempts")
            return SolutionSet.failed(attempts)

        solutions = self._unpack(raw)
        solutions.attempts = attempts

        logger.info(
            f"Solver returned {len(solutions)} solutions "
            f"(capacity {raw.capacity}, {attempts} attempt(s))"
        )
        return solutions

    def _unpack(self, raw: RawSolverOutput) -> SolutionSet:
        """Convert every valid solver slot to a TrifocalModel, view 0 = [I | 0]"""
        if raw.capacity != self.minimal_solver.max_solutions:
            raise ShapeMismatchError(
                f"Solver returned {raw.capacity} slots, expected its capacity "
                f"of {self.minimal_solver.max_solutions}",
                expected=self.minimal_solver.max_solutions, actual=raw.capacity
            )

        models = []
        slot_ids = []
        for slot, solution in raw.valid_blocks():
            models.append(solution_to_model(solution))
            slot_ids.append(slot)

        return SolutionSet(models=models, status=SolveStatus.SUCCESS, slot_ids=slot_ids)

    def error(self,
              model: TrifocalModel,
              bearings: Sequence[np.ndarray],
              px_bearings: Sequence[np.ndarray],
              intrinsics: Intrinsics) -> float:
        """Squared reprojection error of one correspondence (see reprojection_error)"""
        return reprojection_error(model, bearings, px_bearings, intrinsics)

    def probe(self,
              solutions: SolutionSet,
              ground_truth: TrifocalModel):
        """Locate the ground truth among solutions using the solver's comparison"""
        return probe_solutions(
            solutions, ground_truth,
            solver=self.minimal_solver,
            tolerance=self.config.probe_tolerance
        )

    def is_inlier(self, err: float) -> bool:
        return err < self.config.max_error
