"""Pytest fixtures for wagtail-asset-volumes tests."""

from unittest import mock

import pytest
from PIL import Image

from wagtail_asset_volumes.volumes.local import LocalVolume


@pytest.fixture(autouse=True)
def scratch_paths(settings, tmp_path):
    """Point every local scratch directory at the test's tmp_path."""
    settings.WAGTAIL_ASSET_VOLUMES = {
        **settings.WAGTAIL_ASSET_VOLUMES,
        "TEMP_PATH": str(tmp_path / "scratch"),
        "TEMP_UPLOADS_PATH": str(tmp_path / "uploads"),
        "IMAGE_SOURCE_PATH": str(tmp_path / "image-sources"),
    }
    return tmp_path


@pytest.fixture
def make_image(tmp_path):
    """Factory writing a solid color image file and returning its path."""

    def _make(name="photo.jpg", size=(800, 600), color=(200, 30, 30), directory=None):
        directory = directory or tmp_path / "incoming"
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / name
        Image.new("RGB", size, color).save(path)
        return path

    return _make


@pytest.fixture
def make_file(tmp_path):
    """Factory writing a small binary file and returning its path."""

    def _make(name="notes.txt", content=b"hello volume", directory=None):
        directory = directory or tmp_path / "incoming"
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / name
        path.write_bytes(content)
        return path

    return _make


@pytest.fixture
def local_volume(tmp_path):
    """LocalVolume rooted in a fresh directory."""
    return LocalVolume(tmp_path / "volume")


@pytest.fixture
def volume(db, tmp_path):
    """Volume record backed by a LocalVolume under tmp_path."""
    from wagtail_asset_volumes.models import Volume

    return Volume.objects.create(
        name="Local",
        handle="local",
        backend="wagtail_asset_volumes.volumes.local.LocalVolume",
        options={"root": str(tmp_path / "volume"), "url": "/media/local/"},
    )


@pytest.fixture
def other_volume(db, tmp_path):
    """A second local Volume record, for cross-volume operations."""
    from wagtail_asset_volumes.models import Volume

    return Volume.objects.create(
        name="Archive",
        handle="archive",
        backend="wagtail_asset_volumes.volumes.local.LocalVolume",
        options={"root": str(tmp_path / "archive")},
    )


@pytest.fixture
def root_folder(volume):
    """Root folder of the local volume."""
    from wagtail_asset_volumes.models import VolumeFolder

    return VolumeFolder.objects.create(volume=volume, name="Local", path="")


@pytest.fixture
def make_folder(db):
    """Factory creating a VolumeFolder record below a parent."""
    from wagtail_asset_volumes.models import VolumeFolder

    def _make(parent, name):
        return VolumeFolder.objects.create(
            parent=parent,
            volume=parent.volume,
            name=name,
            path=f"{parent.path}{name}/",
        )

    return _make


@pytest.fixture
def asset_service(db):
    """AssetService wired to the real ORM repository and volumes."""
    from wagtail_asset_volumes.assets import AssetService

    return AssetService()


@pytest.fixture
def mock_repository():
    """Mock record store with no assets and no folders."""
    repository = mock.Mock()
    repository.find_asset.return_value = None
    repository.get_folder_by_id.return_value = None
    return repository
