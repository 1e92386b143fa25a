"""
Tests for the solver invoker: retry policy, unpacking and failure reporting.
"""

import logging

import numpy as np
import pytest

from TrifocalEstimation.algorithms.geometry.trifocal import TrifocalSolver
from TrifocalEstimation.config import TrifocalSolverConfig
from TrifocalEstimation.core.exceptions import ShapeMismatchError
from TrifocalEstimation.core.interfaces import IMinimalSolver, RawSolverOutput
from TrifocalEstimation.core.structures import SolveStatus


class CountingSolver(IMinimalSolver):
    """Solver returning a fixed buffer after a number of failed attempts"""

    def __init__(self, raw, failures=0):
        self.raw = raw
        self.failures = failures
        self.calls = 0

    @property
    def max_solutions(self):
        return self.raw.capacity

    def solve(self, positions, tangents):
        self.calls += 1
        if self.calls <= self.failures:
            return None
        return self.raw


@pytest.fixture
def raw_output():
    """Capacity 5, valid slots 3 and 1 in that order"""
    cameras = np.zeros((5, 2, 4, 3))
    for slot in range(5):
        cameras[slot, :, :3, :] = np.eye(3)
        cameras[slot, :, 3, :] = slot
    return RawSolverOutput(cameras=cameras, solution_ids=[3, 1, 0, 0, 0], num_solutions=2)


def test_every_solution_has_identity_reference(datum, make_mock_solver):
    solver = TrifocalSolver(make_mock_solver(num_real_solutions=30))
    solutions = solver.solve(*datum)

    assert solutions.status == SolveStatus.SUCCESS
    assert len(solutions) == 30
    for model in solutions:
        assert model.has_identity_reference()


def test_solutions_follow_slot_order(datum, raw_output):
    """Only the first num_solutions ids are read, in solver order"""
    solutions = TrifocalSolver(CountingSolver(raw_output)).solve(*datum)

    assert solutions.slot_ids == [3, 1]
    np.testing.assert_array_equal(solutions[0].translation(1), [3.0, 3.0, 3.0])
    np.testing.assert_array_equal(solutions[1].translation(2), [1.0, 1.0, 1.0])
    assert solutions.slot_of(1) == 1
    assert solutions.slot_of(5) is None


def test_retries_until_convergence(datum, raw_output):
    minimal = CountingSolver(raw_output, failures=3)
    solutions = TrifocalSolver(minimal).solve(*datum)

    assert not solutions.solve_failed
    assert solutions.attempts == 4
    assert minimal.calls == 4


def test_exhausted_retries_report_solve_failed(datum, raw_output):
    """Five failures in a row give an empty SOLVE_FAILED set, not an exception"""
    minimal = CountingSolver(raw_output, failures=5)
    solutions = TrifocalSolver(minimal).solve(*datum)

    assert solutions.solve_failed
    assert solutions.status == SolveStatus.SOLVE_FAILED
    assert len(solutions) == 0
    assert not solutions
    assert minimal.calls == 5
    assert solutions.attempts == 5


def test_retry_budget_from_config(datum, make_mock_solver):
    minimal = make_mock_solver(failures_before_success=-1)
    solver = TrifocalSolver(minimal, TrifocalSolverConfig(max_solve_tries=2))

    assert solver.solve(*datum).solve_failed
    assert minimal.calls == 2


def test_invalid_retry_budget(make_mock_solver):
    with pytest.raises(ValueError):
        TrifocalSolver(make_mock_solver(), TrifocalSolverConfig(max_solve_tries=0))


def test_shape_mismatch_before_solving(datum, make_mock_solver):
    minimal = make_mock_solver()
    with pytest.raises(ShapeMismatchError):
        TrifocalSolver(minimal).solve(datum[0], datum[1][:, :2], datum[2])
    assert minimal.calls == 0


def test_raw_output_rejects_out_of_range_slot():
    with pytest.raises(ShapeMismatchError):
        RawSolverOutput(cameras=np.zeros((4, 2, 4, 3)), solution_ids=[4], num_solutions=1)


def test_raw_output_rejects_wrong_block_shape():
    with pytest.raises(ShapeMismatchError):
        RawSolverOutput(cameras=np.zeros((4, 2, 3, 4)), solution_ids=[0], num_solutions=1)


def test_inlier_threshold(make_mock_solver):
    solver = TrifocalSolver(make_mock_solver())
    assert solver.is_inlier(1e-6)
    assert not solver.is_inlier(1e-2)


def test_failed_attempts_are_logged(datum, raw_output, caplog):
    minimal = CountingSolver(raw_output, failures=2)
    with caplog.at_level(logging.WARNING, logger="TrifocalEstimation"):
        TrifocalSolver(minimal).solve(*datum)

    warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
    assert len(warnings) == 2


def test_raw_output_rejects_negative_slot():
    """Slot -1 would silently read the last slot of the buffer"""
    with pytest.raises(ShapeMismatchError):
        RawSolverOutput(cameras=np.zeros((4, 2, 4, 3)), solution_ids=[0, -1], num_solutions=2)


def test_ids_past_num_solutions_are_not_checked():
    raw = RawSolverOutput(cameras=np.zeros((4, 2, 4, 3)), solution_ids=[2, -1], num_solutions=1)
    assert [slot for slot, _ in raw.valid_blocks()] == [2]


def test_output_capacity_must_match_solver(datum, raw_output):
    """A buffer of another size than the solver's capacity is rejected"""

    class WrongCapacitySolver(CountingSolver):
        @property
        def max_solutions(self):
            return 312

    with pytest.raises(ShapeMismatchError):
        TrifocalSolver(WrongCapacitySolver(raw_output)).solve(*datum)
