"""
Feature providers for per-view feature access.

Available Providers:
    - FolderFeaturesProvider: Read one feature file per image from a directory
    - MockFeaturesProvider: Serve the projections of a synthetic scene

Usage:
    from TrifocalEstimation.data.providers import FolderFeaturesProvider

    provider = FolderFeaturesProvider(num_workers=4)
    ok = provider.load({0: 'frame_00001.png', 1: 'frame_00030.png'},
                       './features/', store_as_oriented=True)
"""

from typing import Any, Dict, Optional

from TrifocalEstimation.core.interfaces import IFeaturesProvider, ValidationResult

from .folder_provider import FolderFeaturesProvider
from .mock_provider import MockFeaturesProvider

__all__ = [
    # Interface (re-export for convenience)
    'IFeaturesProvider',
    'ValidationResult',

    # Provider implementations
    'FolderFeaturesProvider',
    'MockFeaturesProvider',

    # Factory
    'create_provider',
]


def create_provider(provider_type: str = 'folder',
                    config: Optional[Dict[str, Any]] = None,
                    **kwargs) -> IFeaturesProvider:
    """
    Create a features provider by name.

    Args:
        provider_type: 'folder' or 'mock'
        config: Configuration whose 'features' section sets up a folder provider
        **kwargs: Provider constructor arguments (override the configuration)

    Returns:
        IFeaturesProvider instance
    """
    providers = {
        'folder': FolderFeaturesProvider,
        'mock': MockFeaturesProvider,
    }
    if provider_type not in providers:
        raise ValueError(
            f"Unknown provider type '{provider_type}'. "
            f"Available: {', '.join(providers)}"
        )

    if provider_type == 'folder' and config is not None:
        return FolderFeaturesProvider.from_config(config, **kwargs)
    return providers[provider_type](**kwargs)
