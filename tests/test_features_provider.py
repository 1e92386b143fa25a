"""
Tests for feature files, features providers and correspondence extraction.
"""

import numpy as np
import pytest

from TrifocalEstimation.core.exceptions import FeatureLoadingError, ShapeMismatchError
from TrifocalEstimation.core.structures import keypoints_to_array
from TrifocalEstimation.data import (
    FolderFeaturesProvider,
    MockFeaturesProvider,
    create_provider,
    extract_xy_orientation
)
from TrifocalEstimation.data.io import feat_io, read_feat_file, write_feat_file


@pytest.fixture
def oriented_rows():
    """Three oriented features: x, y, scale, orientation (radians)"""
    return np.array([
        [10.0, 20.0, 1.5, 0.0],
        [30.5, 40.25, 2.0, np.pi / 2],
        [50.0, 60.0, 3.0, -np.pi / 4]
    ])


@pytest.fixture
def feat_directory(tmp_path, oriented_rows):
    """Feature directory with one file per image of a three-view dataset"""
    for v, name in enumerate(['frame_00001', 'frame_00030', 'frame_00060']):
        write_feat_file(tmp_path / f'{name}.feat', oriented_rows + v)
    return tmp_path


@pytest.fixture
def view_paths():
    return {0: 'images/frame_00001.png', 1: 'images/frame_00030.png', 2: 'images/frame_00060.png'}


def test_read_write_feat_file(tmp_path, oriented_rows):
    path = tmp_path / 'sub' / 'a.feat'
    write_feat_file(path, oriented_rows)
    np.testing.assert_allclose(read_feat_file(path), oriented_rows, atol=1e-9)


def test_read_missing_feat_file(tmp_path):
    with pytest.raises(FeatureLoadingError):
        read_feat_file(tmp_path / 'missing.feat')


def test_read_malformed_feat_file(tmp_path):
    path = tmp_path / 'bad.feat'
    path.write_text("1.0 2.0 3.0\n4.0 5.0 6.0\n")
    with pytest.raises(FeatureLoadingError):
        read_feat_file(path)


def test_feature_file_naming():
    provider = FolderFeaturesProvider()
    assert provider.feature_file_for('images/frame_00001.png', 'feats').name == 'frame_00001.feat'


def test_load_point_features(feat_directory, view_paths, oriented_rows):
    provider = FolderFeaturesProvider(num_workers=2)

    assert provider.load(view_paths, str(feat_directory))
    assert provider.get_view_ids() == [0, 1, 2]
    np.testing.assert_allclose(provider.get_features(2), oriented_rows[:, :2] + 2, atol=1e-9)
    assert not provider.has_oriented_features()


def test_load_oriented_features(feat_directory, view_paths, oriented_rows):
    provider = FolderFeaturesProvider()

    assert provider.load(view_paths, str(feat_directory), store_as_oriented=True)
    keypoints = provider.get_oriented_features(0)

    assert len(keypoints) == 3
    assert keypoints[1].angle == pytest.approx(90.0, abs=1e-4)
    assert keypoints[2].angle == pytest.approx(315.0, abs=1e-4)
    np.testing.assert_allclose(keypoints_to_array(keypoints)[:, :3], oriented_rows[:, :3], atol=1e-4)


def test_missing_view_aborts_load(feat_directory, view_paths):
    """One unreadable view makes the whole load fail"""
    paths = dict(view_paths)
    paths[3] = 'images/frame_09999.png'

    provider = FolderFeaturesProvider(num_workers=1)
    assert not provider.load(paths, str(feat_directory))
    assert 3 not in provider.get_view_ids()


def test_oriented_load_needs_orientation_column(tmp_path):
    write_feat_file(tmp_path / 'a.feat', np.ones((4, 2)))
    provider = FolderFeaturesProvider()
    assert not provider.load({0: 'a.png'}, str(tmp_path), store_as_oriented=True)


def test_unknown_view_is_empty(feat_directory, view_paths):
    provider = FolderFeaturesProvider()
    provider.load(view_paths, str(feat_directory))

    assert provider.get_features(42).shape == (0, 2)
    assert provider.get_oriented_features(42) == []


def test_validate(feat_directory, view_paths):
    provider = FolderFeaturesProvider()
    assert not provider.validate()

    provider.load(view_paths, str(feat_directory))
    result = provider.validate()
    assert result
    assert result.stats['features_per_view'] == {0: 3, 1: 3, 2: 3}


def test_create_provider():
    assert isinstance(create_provider('folder', num_workers=1), FolderFeaturesProvider)
    with pytest.raises(ValueError):
        create_provider('database')


def test_extract_from_scene_projections(scene):
    """Pixel matrices gathered from keypoints normalize back to the scene data"""
    provider = MockFeaturesProvider(scene, num_distractors=5, seed=0)
    assert provider.load()

    pxdatum = extract_xy_orientation(provider, [0, 1, 2], [[0, 1, 2]] * 3)

    for d, expected in zip(pxdatum, scene.normalized_datum()):
        assert d.shape == (4, 3)
        datum = scene.intrinsics.normalize_datum(d)
        np.testing.assert_allclose(datum[:2], expected[:2], atol=1e-6)
        np.testing.assert_allclose(datum[2:], expected[2:], atol=1e-5)


def test_extract_respects_feature_ids(scene):
    provider = MockFeaturesProvider(scene, num_distractors=3, seed=1)
    provider.load()

    pxdatum = extract_xy_orientation(provider, [0, 1, 2], [[2, 0], [2, 0], [2, 0]])
    reference = scene.pixel_datum()

    np.testing.assert_allclose(pxdatum[1][:2, 0], reference[1][:2, 2], atol=1e-3)
    np.testing.assert_allclose(pxdatum[1][:2, 1], reference[1][:2, 0], atol=1e-3)


def test_extract_needs_three_views(scene):
    provider = MockFeaturesProvider(scene)
    provider.load()

    with pytest.raises(ShapeMismatchError):
        extract_xy_orientation(provider, [0, 1], [[0], [0]])
    with pytest.raises(ShapeMismatchError):
        extract_xy_orientation(provider, [0, 1, 2], [[0], [0, 1], [0]])


def test_extract_without_oriented_features(scene):
    provider = MockFeaturesProvider(scene)
    provider.load(store_as_oriented=False)

    with pytest.raises(KeyError):
        extract_xy_orientation(provider, [0, 1, 2], [[0]] * 3)


def test_provider_from_config_features_section(tmp_path, oriented_rows):
    """The 'features' section picks the file extension and worker count"""
    write_feat_file(tmp_path / 'frame_00001.txt', oriented_rows)
    config = {'features': {'feature_extension': '.txt', 'num_workers': 2}}

    provider = create_provider('folder', config=config)

    assert provider.feature_extension == '.txt'
    assert provider.num_workers == 2
    assert provider.load({0: 'frame_00001.png'}, str(tmp_path))
    assert len(provider.get_features(0)) == 3


def test_provider_arguments_override_config():
    provider = FolderFeaturesProvider.from_config({'features': {'num_workers': 2}}, num_workers=6)

    assert provider.num_workers == 6
    assert provider.feature_extension == '.feat'


def test_unreadable_feat_file(tmp_path, oriented_rows, monkeypatch):
    """An I/O error while reading is a loading error, not a crash"""
    path = tmp_path / 'frame_00001.feat'
    write_feat_file(path, oriented_rows)

    def _denied(*args, **kwargs):
        raise PermissionError(13, 'Permission denied', str(path))

    monkeypatch.setattr(feat_io.np, 'loadtxt', _denied)

    with pytest.raises(FeatureLoadingError):
        read_feat_file(path)

    provider = FolderFeaturesProvider()
    assert not provider.load({0: 'frame_00001.png'}, str(tmp_path))
    assert provider.get_view_ids() == []
