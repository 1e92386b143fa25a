"""
Data access: feature providers, feature files, synthetic scenes.
"""

from .synthetic import SyntheticTrifocalScene, DEFAULT_INTRINSICS
from .correspondences import extract_xy_orientation
from .providers import (
    IFeaturesProvider,
    FolderFeaturesProvider,
    MockFeaturesProvider,
    create_provider
)

__all__ = [
    'SyntheticTrifocalScene',
    'DEFAULT_INTRINSICS',
    'extract_xy_orientation',
    'IFeaturesProvider',
    'FolderFeaturesProvider',
    'MockFeaturesProvider',
    'create_provider',
]
