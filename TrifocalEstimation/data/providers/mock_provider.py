"""
Mock features provider for testing and prototyping.

File: TrifocalEstimation/data/providers/mock_provider.py
"""

from typing import Any, Mapping, Optional

import numpy as np

from TrifocalEstimation.core.interfaces import IFeaturesProvider
from TrifocalEstimation.core.structures import keypoints_from_feat_rows
from TrifocalEstimation.data.synthetic import SyntheticTrifocalScene


class MockFeaturesProvider(IFeaturesProvider):
    """
    Serves the projections of a synthetic scene as oriented features.

    View v holds the scene points as features 0..2, followed by
    `num_distractors` random features.
    """

    def __init__(self,
                 scene: SyntheticTrifocalScene,
                 num_distractors: int = 0,
                 image_size=(640, 480),
                 seed: Optional[int] = None):
        """
        Initialize mock provider.

        Args:
            scene: Synthetic scene to project
            num_distractors: Random features appended to every view
            image_size: Range of the random features (width, height)
            seed: Random seed for reproducibility
        """
        super().__init__()
        self.scene = scene
        self.num_distractors = num_distractors
        self.image_size = image_size
        self.rng = np.random.default_rng(seed)

    def load(self,
             view_paths: Mapping[Any, str] = None,
             feat_directory: str = '',
             store_as_oriented: bool = True) -> bool:
        """Generate the features of views 0, 1, 2 (paths are ignored)"""
        for view_id, pxdatum in enumerate(self.scene.pixel_datum()):
            angles = np.arctan2(pxdatum[3], pxdatum[2])
            rows = np.column_stack([
                pxdatum[0], pxdatum[1], np.ones(pxdatum.shape[1]), angles
            ])

            if self.num_distractors:
                distractors = np.column_stack([
                    self.rng.uniform(0, self.image_size[0], self.num_distractors),
                    self.rng.uniform(0, self.image_size[1], self.num_distractors),
                    np.ones(self.num_distractors),
                    self.rng.uniform(-np.pi, np.pi, self.num_distractors)
                ])
                rows = np.vstack([rows, distractors])

            if store_as_oriented:
                self.oriented_feats_per_view[view_id] = keypoints_from_feat_rows(rows)
            else:
                self.feats_per_view[view_id] = rows[:, :2].copy()

        return True
