"""
Base interface for external minimal-problem solvers.

The trifocal core never solves the polynomial system itself. It consumes a
solver through this contract: given packed points and tangents, return the
valid slots of a fixed-capacity solution buffer, or None when the solver did
not converge on this attempt.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from ..exceptions import ShapeMismatchError


# [q1(4), q2(4), t1(3), t2(3)]
QUAT_TRANSLATION_SIZE = 14


@dataclass
class RawSolverOutput:
    """
    Solution buffer returned by a successful solver attempt.

    Attributes:
        cameras: (capacity, 2, 4, 3) array. For every slot and for views 1 and 2,
                 rows 0-2 hold the rotation rows and row 3 the translation.
        solution_ids: Indices of the valid slots, in solver order
        num_solutions: Number of valid slots
    """
    cameras: np.ndarray
    solution_ids: np.ndarray
    num_solutions: int

    def __post_init__(self):
        self.cameras = np.asarray(self.cameras, dtype=float)
        self.solution_ids = np.asarray(self.solution_ids, dtype=int).ravel()

        if self.cameras.ndim != 4 or self.cameras.shape[1:] != (2, 4, 3):
            raise ShapeMismatchError(
                f"Solver cameras must be (capacity, 2, 4, 3), got {self.cameras.shape}",
                expected=(None, 2, 4, 3), actual=self.cameras.shape
            )
        if self.num_solutions > len(self.solution_ids):
            raise ShapeMismatchError(
                f"{self.num_solutions} solutions reported but only "
                f"{len(self.solution_ids)} slot ids given",
                expected=self.num_solutions, actual=len(self.solution_ids)
            )
        valid_ids = self.solution_ids[:self.num_solutions]
        if len(valid_ids) and (np.min(valid_ids) < 0 or np.max(valid_ids) >= self.capacity):
            raise ShapeMismatchError(
                f"Slot ids must lie in [0, {self.capacity}), got {valid_ids.tolist()}",
                expected=self.capacity, actual=valid_ids.tolist()
            )

    @property
    def capacity(self) -> int:
        return self.cameras.shape[0]

    def valid_blocks(self):
        """Yield (slot_id, (2, 4, 3) block) for every valid solution"""
        for s in range(self.num_solutions):
            slot = int(self.solution_ids[s])
            yield slot, self.cameras[slot]


class IMinimalSolver(ABC):
    """
    Abstract interface for the three-point position+tangent trifocal solver.

    Implementations wrap a numerical (homotopy continuation) solver whose
    convergence is randomized: a single call may fail without that being an
    error, and callers retry with a bounded budget.
    """

    # ========================================================================
    # CORE SOLVE METHOD (Required)
    # ========================================================================

    @property
    @abstractmethod
    def max_solutions(self) -> int:
        """Fixed capacity of the solution buffer"""
        pass

    @abstractmethod
    def solve(self,
              positions: np.ndarray,
              tangents: np.ndarray) -> Optional[RawSolverOutput]:
        """
        Run one solver attempt.

        Args:
            positions: (3 views, 3 points, 2) normalized point positions
            tangents: (3 views, 3 points, 2) normalized unit tangents

        Returns:
            RawSolverOutput on convergence, None if this attempt failed
        """
        pass

    # ========================================================================
    # SOLUTION COMPARISON (Optional override)
    # ========================================================================

    def probe_all_solutions_quat(self,
                                 cameras_quat: np.ndarray,
                                 gt_quat: np.ndarray,
                                 tolerance: float = 1e-4) -> Tuple[bool, Optional[int]]:
        """
        Find the ground truth among candidate solutions in quaternion-translation form.

        Two solutions are the same geometry when they agree up to the sign of
        each quaternion, and up to a common nonzero scale (sign included) of
        the stacked translations [t1, t2].

        Args:
            cameras_quat: (N, 14) candidates
            gt_quat: (14,) ground truth
            tolerance: Maximum allowed distance

        Returns:
            (found, index of the first matching candidate or None)
        """
        return probe_all_solutions_quat(cameras_quat, gt_quat, tolerance)


def _unit(v: np.ndarray) -> np.ndarray:
    norm = np.linalg.norm(v)
    return v / norm if norm > 0 else v


def _sign_invariant_distance(a: np.ndarray, b: np.ndarray) -> float:
    return float(min(np.linalg.norm(a - b), np.linalg.norm(a + b)))


def quat_translation_distance(a: np.ndarray, b: np.ndarray) -> float:
    """
    Distance between two 14-vectors modulo the solver symmetry group.

    Returns the largest of the per-view quaternion distances and the distance
    between the unit-normalized stacked translations.
    """
    a = np.asarray(a, dtype=float).ravel()
    b = np.asarray(b, dtype=float).ravel()
    if a.size != QUAT_TRANSLATION_SIZE or b.size != QUAT_TRANSLATION_SIZE:
        raise ShapeMismatchError(
            f"Quaternion-translation vectors must have {QUAT_TRANSLATION_SIZE} entries",
            expected=QUAT_TRANSLATION_SIZE, actual=(a.size, b.size)
        )

    d_q1 = _sign_invariant_distance(_unit(a[0:4]), _unit(b[0:4]))
    d_q2 = _sign_invariant_distance(_unit(a[4:8]), _unit(b[4:8]))
    d_t = _sign_invariant_distance(_unit(a[8:14]), _unit(b[8:14]))

    return max(d_q1, d_q2, d_t)


def probe_all_solutions_quat(cameras_quat: np.ndarray,
                             gt_quat: np.ndarray,
                             tolerance: float = 1e-4) -> Tuple[bool, Optional[int]]:
    """First candidate within `tolerance` of the ground truth (see quat_translation_distance)"""
    cameras_quat = np.asarray(cameras_quat, dtype=float).reshape(-1, QUAT_TRANSLATION_SIZE)
    gt_quat = np.asarray(gt_quat, dtype=float).ravel()

    for index, candidate in enumerate(cameras_quat):
        if quat_translation_distance(candidate, gt_quat) < tolerance:
            return True, index

    return False, None
