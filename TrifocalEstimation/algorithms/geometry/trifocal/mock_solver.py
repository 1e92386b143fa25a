"""
Mock minimal solver for testing and prototyping.

Behaves like the external polynomial solver from the caller's point of view:
fixed-capacity output buffer, valid solutions scattered over its slots,
randomized non-convergence, and the true configuration returned under an
arbitrary member of the solver's symmetry group.
"""

from typing import Optional

import numpy as np
from scipy.spatial.transform import Rotation

from TrifocalEstimation.core.exceptions import ShapeMismatchError
from TrifocalEstimation.core.interfaces import IMinimalSolver, RawSolverOutput
from TrifocalEstimation.core.structures import TrifocalModel
from TrifocalEstimation.logger import get_logger

from .packing import NUM_COORDS_2D, NUM_POINTS, model_to_solution

logger = get_logger("trifocal.mock_solver")


class MockMinimalSolver(IMinimalSolver):
    """
    Mock solver serving a known ground-truth configuration.

    Useful for:
    - Unit testing the retry policy and the unpacking
    - Testing the prober without the real solver
    - Exercising SOLVE_FAILED handling
    """

    def __init__(self,
                 ground_truth: TrifocalModel,
                 capacity: int = 312,
                 num_real_solutions: int = 20,
                 failures_before_success: int = 0,
                 include_ground_truth: bool = True,
                 seed: Optional[int] = None):
        """
        Initialize mock solver.

        Args:
            ground_truth: Configuration hidden among the solutions
            capacity: Number of solution slots in the output buffer
            num_real_solutions: Valid solutions returned per successful attempt
            failures_before_success: Leading attempts that fail to converge
                (a negative value makes every attempt fail)
            include_ground_truth: Hide the ground truth in one valid slot
            seed: Random seed for reproducibility
        """
        if not 1 <= num_real_solutions <= capacity:
            raise ValueError(
                f"num_real_solutions must be in [1, {capacity}], got {num_real_solutions}"
            )

        self.ground_truth = ground_truth
        self.capacity = capacity
        self.num_real_solutions = num_real_solutions
        self.failures_before_success = failures_before_success
        self.include_ground_truth = include_ground_truth
        self.rng = np.random.default_rng(seed)

        self.calls = 0
        self.last_ground_truth_slot: Optional[int] = None

    @property
    def max_solutions(self) -> int:
        return self.capacity

    def solve(self,
              positions: np.ndarray,
              tangents: np.ndarray) -> Optional[RawSolverOutput]:
        expected = (3, NUM_POINTS, NUM_COORDS_2D)
        if np.shape(positions) != expected or np.shape(tangents) != expected:
            raise ShapeMismatchError(
                f"Solver input must be {expected}, got {np.shape(positions)} "
                f"and {np.shape(tangents)}",
                expected=expected, actual=(np.shape(positions), np.shape(tangents))
            )

        self.calls += 1
        if self.failures_before_success < 0 or self.calls <= self.failures_before_success:
            logger.debug(f"Mock solver attempt {self.calls}: no convergence")
            return None

        cameras = np.zeros((self.capacity, 2, 4, 3))
        solution_ids = np.sort(
            self.rng.choice(self.capacity, size=self.num_real_solutions, replace=False)
        )

        for slot in solution_ids:
            cameras[slot] = self._random_solution()

        self.last_ground_truth_slot = None
        if self.include_ground_truth:
            slot = int(self.rng.choice(solution_ids))
            cameras[slot] = self._symmetric_ground_truth()
            self.last_ground_truth_slot = slot

        return RawSolverOutput(
            cameras=cameras,
            solution_ids=solution_ids,
            num_solutions=self.num_real_solutions
        )

    def _random_solution(self) -> np.ndarray:
        """Decoy solution with random rotations and translations"""
        solution = np.zeros((2, 4, 3))
        rotvecs = self.rng.uniform(-np.pi, np.pi, (2, 3)) / np.sqrt(3)
        rotations = Rotation.from_rotvec(rotvecs).as_matrix()
        for v in range(2):
            solution[v, :3, :] = rotations[v]
            solution[v, 3, :] = self.rng.normal(size=3)
        return solution

    def _symmetric_ground_truth(self) -> np.ndarray:
        """Ground truth with its translations scaled by a random nonzero factor"""
        solution = model_to_solution(self.ground_truth)
        scale = self.rng.uniform(0.5, 2.0) * self.rng.choice([-1.0, 1.0])
        solution[:, 3, :] *= scale
        return solution
