"""
Trifocal model and solution set.

A TrifocalModel is three 3x4 camera matrices expressed in the frame of
view 0, so camera 0 is always [I | 0].
"""

import numpy as np
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, List, Optional, Tuple

from ..exceptions import ShapeMismatchError


NUM_VIEWS = 3
IDENTITY_CAMERA = np.hstack([np.eye(3), np.zeros((3, 1))])


def _readonly(array: np.ndarray) -> np.ndarray:
    array = np.array(array, dtype=float)
    array.setflags(write=False)
    return array


@dataclass(frozen=True)
class TrifocalModel:
    """
    Ordered triple of camera matrices, one per view.

    Attributes:
        cameras: Tuple of three (3, 4) read-only arrays [R | t]
    """

    cameras: Tuple[np.ndarray, np.ndarray, np.ndarray]

    def __post_init__(self):
        if len(self.cameras) != NUM_VIEWS:
            raise ShapeMismatchError(
                f"Trifocal model needs {NUM_VIEWS} cameras, got {len(self.cameras)}",
                expected=NUM_VIEWS, actual=len(self.cameras)
            )
        cameras = tuple(_readonly(P) for P in self.cameras)
        for P in cameras:
            if P.shape != (3, 4):
                raise ShapeMismatchError(
                    f"Camera matrix must be 3x4, got {P.shape}",
                    expected=(3, 4), actual=P.shape
                )
        object.__setattr__(self, 'cameras', cameras)

    @classmethod
    def from_relative_poses(cls,
                            R1: np.ndarray, t1: np.ndarray,
                            R2: np.ndarray, t2: np.ndarray) -> 'TrifocalModel':
        """Build a model with camera 0 = [I | 0] and the given relative poses"""
        P1 = np.hstack([np.asarray(R1, dtype=float), np.asarray(t1, dtype=float).reshape(3, 1)])
        P2 = np.hstack([np.asarray(R2, dtype=float), np.asarray(t2, dtype=float).reshape(3, 1)])
        return cls((IDENTITY_CAMERA, P1, P2))

    def __getitem__(self, view: int) -> np.ndarray:
        return self.cameras[view]

    def __len__(self) -> int:
        return NUM_VIEWS

    def __iter__(self) -> Iterator[np.ndarray]:
        return iter(self.cameras)

    def rotation(self, view: int) -> np.ndarray:
        return self.cameras[view][:, :3]

    def translation(self, view: int) -> np.ndarray:
        return self.cameras[view][:, 3]

    def has_identity_reference(self) -> bool:
        """Camera 0 equals [I | 0] exactly"""
        return bool(np.array_equal(self.cameras[0], IDENTITY_CAMERA))

    def __eq__(self, other) -> bool:
        if not isinstance(other, TrifocalModel):
            return NotImplemented
        return all(np.array_equal(a, b) for a, b in zip(self.cameras, other.cameras))

    def __hash__(self):
        return hash(tuple(P.tobytes() for P in self.cameras))

    def __repr__(self):
        return (f"TrifocalModel(t1={np.round(self.translation(1), 4).tolist()}, "
                f"t2={np.round(self.translation(2), 4).tolist()})")


class SolveStatus(Enum):
    """Outcome of one solver invocation"""
    SUCCESS = "success"
    SOLVE_FAILED = "solve_failed"


@dataclass
class SolutionSet:
    """
    Candidate models returned by one solve, in solver slot order.

    Attributes:
        models: Candidate trifocal models
        status: SUCCESS, or SOLVE_FAILED when every attempt failed to converge
        attempts: Number of solver attempts used
        slot_ids: Solver slot index each model was read from
    """

    models: List[TrifocalModel] = field(default_factory=list)
    status: SolveStatus = SolveStatus.SUCCESS
    attempts: int = 0
    slot_ids: List[int] = field(default_factory=list)

    @classmethod
    def failed(cls, attempts: int) -> 'SolutionSet':
        return cls(models=[], status=SolveStatus.SOLVE_FAILED, attempts=attempts)

    @property
    def solve_failed(self) -> bool:
        return self.status == SolveStatus.SOLVE_FAILED

    def __len__(self) -> int:
        return len(self.models)

    def __iter__(self) -> Iterator[TrifocalModel]:
        return iter(self.models)

    def __getitem__(self, index: int) -> TrifocalModel:
        return self.models[index]

    def __bool__(self) -> bool:
        return len(self.models) > 0

    def slot_of(self, index: int) -> Optional[int]:
        """Solver slot of the model at `index`, if recorded"""
        if index < len(self.slot_ids):
            return self.slot_ids[index]
        return None
