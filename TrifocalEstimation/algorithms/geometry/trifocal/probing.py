"""
Ground-truth probing of a solution set.

Used to certify a solver run on synthetic data: the ground truth and every
candidate go to quaternion-translation form and the solver's own comparison
routine decides equality up to its known symmetries.
"""

from typing import Iterable, Optional, Tuple

import numpy as np

from TrifocalEstimation.core.interfaces import (
    IMinimalSolver,
    QUAT_TRANSLATION_SIZE,
    probe_all_solutions_quat
)
from TrifocalEstimation.core.structures import TrifocalModel
from TrifocalEstimation.logger import get_logger

from .conversion import model_to_quat_translation

logger = get_logger("trifocal.probing")

DEFAULT_PROBE_TOLERANCE = 1e-4


def probe_solutions(solutions: Iterable[TrifocalModel],
                    ground_truth: TrifocalModel,
                    solver: Optional[IMinimalSolver] = None,
                    tolerance: Optional[float] = None) -> Tuple[bool, Optional[int]]:
    """
    Find the ground-truth model among candidate solutions.

    Args:
        solutions: Candidate models (a SolutionSet or any sequence)
        ground_truth: Reference model
        solver: Solver whose comparison routine is used (default comparison if None)
        tolerance: Match tolerance in quaternion-translation space

    Returns:
        (found, index into solutions or None)
    """
    solutions = list(solutions)
    tolerance = DEFAULT_PROBE_TOLERANCE if tolerance is None else tolerance

    gt_quat = model_to_quat_translation(ground_truth)
    cameras_quat = np.zeros((len(solutions), QUAT_TRANSLATION_SIZE))
    for s, model in enumerate(solutions):
        cameras_quat[s] = model_to_quat_translation(model)

    if solver is not None:
        found, index = solver.probe_all_solutions_quat(cameras_quat, gt_quat, tolerance)
    else:
        found, index = probe_all_solutions_quat(cameras_quat, gt_quat, tolerance)

    if found:
        logger.info(f"Ground truth found at solution {index} of {len(solutions)}")
    else:
        logger.info(f"Ground truth not among {len(solutions)} solutions")

    return found, index
