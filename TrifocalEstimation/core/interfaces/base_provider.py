"""
Base interface for per-view feature providers.

A features provider loads the detected features of every view of a dataset
and serves them keyed by view identifier. Point features carry a position
only; oriented features carry a position, a scale and an orientation.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Mapping
from dataclasses import dataclass, field

import numpy as np


@dataclass
class ValidationResult:
    """
    Result of provider validation.

    Attributes:
        is_valid: Whether validation passed
        errors: List of error messages
        warnings: List of warning messages
        stats: Dictionary of validation statistics
    """
    is_valid: bool = True
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    stats: Dict[str, Any] = field(default_factory=dict)

    def __bool__(self) -> bool:
        """Allow truthiness check"""
        return self.is_valid and len(self.errors) == 0

    def add_error(self, message: str):
        """Add an error message"""
        self.errors.append(message)
        self.is_valid = False

    def add_warning(self, message: str):
        """Add a warning message"""
        self.warnings.append(message)


class IFeaturesProvider(ABC):
    """
    Abstract interface for feature providers.

    Two stores exist side by side: `feats_per_view` holds plain point
    features as (N, 2) arrays, `oriented_feats_per_view` holds oriented
    features as lists of cv2.KeyPoint. A provider fills one or the other.
    """

    def __init__(self):
        self.feats_per_view: Dict[Any, np.ndarray] = {}
        self.oriented_feats_per_view: Dict[Any, list] = {}

    # ========================================================================
    # CORE DATA ACCESS METHODS (Required)
    # ========================================================================

    @abstractmethod
    def load(self,
             view_paths: Mapping[Any, str],
             feat_directory: str,
             store_as_oriented: bool = False) -> bool:
        """
        Load the features of every view.

        Args:
            view_paths: view_id -> image path
            feat_directory: Directory holding one feature file per image
            store_as_oriented: Keep scale and orientation of every feature

        Returns:
            bool: True if every view was loaded, False if any view failed
        """
        pass

    # ========================================================================
    # QUERY METHODS
    # ========================================================================

    def has_oriented_features(self) -> bool:
        return len(self.oriented_feats_per_view) > 0

    def get_features(self, view_id) -> np.ndarray:
        """
        Point positions of a view as an (N, 2) array.

        Unknown views return an empty (0, 2) array.
        """
        if view_id in self.feats_per_view:
            return self.feats_per_view[view_id]
        if view_id in self.oriented_feats_per_view:
            keypoints = self.oriented_feats_per_view[view_id]
            return np.array([kp.pt for kp in keypoints], dtype=float).reshape(-1, 2)
        return np.empty((0, 2))

    def get_oriented_features(self, view_id) -> list:
        """Oriented features of a view (empty list for unknown views)"""
        return self.oriented_feats_per_view.get(view_id, [])

    def get_view_ids(self) -> List[Any]:
        return sorted(set(self.feats_per_view) | set(self.oriented_feats_per_view))

    def validate(self) -> ValidationResult:
        """
        Validate the loaded features.

        Returns:
            ValidationResult: errors for views without features
        """
        result = ValidationResult()
        counts = {}
        for view_id in self.get_view_ids():
            count = len(self.get_features(view_id))
            counts[view_id] = count
            if count == 0:
                result.add_warning(f"View {view_id} has no features")

        if not counts:
            result.add_error("No features loaded")

        result.stats['features_per_view'] = counts
        return result

    # ========================================================================
    # CONTEXT MANAGER SUPPORT (Optional)
    # ========================================================================

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        pass
