"""
Folder-Based Features Provider

Implements IFeaturesProvider for a directory holding one feature file per
image.

Expected Input Structure:
    feat_directory/
    ├── frame_00001.feat         # features of image frame_00001.png
    ├── frame_00030.feat
    └── ...

File: TrifocalEstimation/data/providers/folder_provider.py
"""

import threading
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Any, Dict, Mapping

from TrifocalEstimation.config import DEFAULT_CONFIG, merge_configs
from TrifocalEstimation.core.exceptions import FeatureLoadingError
from TrifocalEstimation.core.interfaces import IFeaturesProvider
from TrifocalEstimation.core.structures import keypoints_from_feat_rows
from TrifocalEstimation.data.io import read_feat_file
from TrifocalEstimation.logger import get_logger

logger = get_logger("providers.folder")


class FolderFeaturesProvider(IFeaturesProvider):
    """
    Provider loading feature files in parallel, one view per task.

    The first view that fails to load aborts the whole load: views not yet
    started are skipped and load() returns False. Views finished before the
    failure stay in the per-view maps.
    """

    def __init__(self,
                 feature_extension: str = '.feat',
                 num_workers: int = 4):
        """
        Initialize provider.

        Args:
            feature_extension: Extension of the feature files
            num_workers: Number of loader threads
        """
        super().__init__()
        if num_workers <= 0:
            raise ValueError("num_workers must be positive")

        self.feature_extension = feature_extension
        self.num_workers = num_workers

        self._lock = threading.Lock()
        self._continue = True

    @classmethod
    def from_config(cls, config: Dict[str, Any], **overrides) -> 'FolderFeaturesProvider':
        """
        Build from the 'features' section of a configuration (see DEFAULT_CONFIG).

        Keyword arguments take precedence over the configuration.
        """
        features = merge_configs(DEFAULT_CONFIG, config)['features']
        kwargs = {
            'feature_extension': features['feature_extension'],
            'num_workers': int(features['num_workers']),
        }
        kwargs.update(overrides)
        return cls(**kwargs)

    def feature_file_for(self, image_path: str, feat_directory: str) -> Path:
        """Feature file of an image: <feat_directory>/<image basename><extension>"""
        return Path(feat_directory) / (Path(image_path).stem + self.feature_extension)

    def load(self,
             view_paths: Mapping[Any, str],
             feat_directory: str,
             store_as_oriented: bool = False) -> bool:
        """
        Load the features of every view.

        Args:
            view_paths: view_id -> image path
            feat_directory: Directory holding the feature files
            store_as_oriented: Keep features as oriented cv2.KeyPoint lists

        Returns:
            bool: True if every view was loaded
        """
        self._continue = True
        logger.info(f"Loading features of {len(view_paths)} views from {feat_directory}")

        with ThreadPoolExecutor(max_workers=self.num_workers) as executor:
            futures = [
                executor.submit(self._load_view, view_id, image_path,
                                feat_directory, store_as_oriented)
                for view_id, image_path in view_paths.items()
            ]
            for future in futures:
                future.result()

        if self._continue:
            logger.info(f"✓ Loaded features for {len(view_paths)} views")
        else:
            logger.error("Feature loading aborted")

        return self._continue

    def _load_view(self,
                   view_id,
                   image_path: str,
                   feat_directory: str,
                   store_as_oriented: bool):
        with self._lock:
            if not self._continue:
                return

        feat_file = self.feature_file_for(image_path, feat_directory)
        try:
            rows = read_feat_file(feat_file)
            if store_as_oriented and len(rows) and rows.shape[1] != 4:
                raise FeatureLoadingError(
                    f"Feature file {feat_file} has no scale/orientation columns",
                    view_id=view_id, path=str(feat_file)
                )
        except FeatureLoadingError as e:
            logger.error(f"Invalid feature files for the view: {image_path} ({e})")
            with self._lock:
                self._continue = False
            return

        with self._lock:
            if store_as_oriented:
                self.oriented_feats_per_view[view_id] = keypoints_from_feat_rows(rows)
            else:
                self.feats_per_view[view_id] = rows[:, :2].copy()
