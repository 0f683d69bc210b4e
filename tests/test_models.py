"""Tests for wagtail_asset_volumes.models module.

Note: DB constraint tests (unique folder/filename, CASCADE) require
@pytest.mark.django_db. Non-DB tests use unsaved model instances only.
"""

import pytest
from django.db import IntegrityError

from wagtail_asset_volumes.models import Asset, TransformMode, VolumeFolder


class TestAssetProperties:
    """Tests for computed Asset properties on unsaved instances."""

    def test_get_uri_joins_folder_path(self):
        """get_uri() joins the folder path and filename.

        Purpose: Verify volume paths for nested and root folders.
        Category: Normal case
        Target: Asset.get_uri()
        Technique: Equivalence partitioning
        Test data: Folder "photos/2024/" and root folder ""
        """
        nested = Asset(filename="cat.jpg", folder=VolumeFolder(pk=1, path="photos/2024/"))
        root = Asset(filename="cat.jpg", folder=VolumeFolder(pk=2, path=""))

        assert nested.get_uri() == "photos/2024/cat.jpg"
        assert nested.get_uri("dog.jpg") == "photos/2024/dog.jpg"
        assert root.get_uri() == "cat.jpg"

    def test_extension_and_mime_type(self):
        """extension and mime_type come from the filename.

        Purpose: Verify lowercase extension and guessed MIME type.
        Category: Normal case
        Target: Asset.extension, Asset.mime_type
        Technique: Equivalence partitioning
        Test data: PHOTO.JPG and a file without an extension
        """
        assert Asset(filename="PHOTO.JPG").extension == "jpg"
        assert Asset(filename="PHOTO.JPG").mime_type == "image/jpeg"
        assert Asset(filename="README").mime_type == "application/octet-stream"

    @pytest.mark.parametrize(
        "kind,focal_point,expected",
        [
            pytest.param("image", None, {"x": 0.5, "y": 0.5}, id="image-default-centre"),
            pytest.param("image", "0.2500;0.7500", {"x": 0.25, "y": 0.75}, id="image-stored"),
            pytest.param("pdf", "0.2;0.2", None, id="non-image"),
        ],
    )
    def test_get_focal_point(self, kind, focal_point, expected):
        """get_focal_point() parses the stored "x;y" value.

        Purpose: Verify defaults and non-image handling.
        Category: Normal case
        Target: Asset.get_focal_point()
        Technique: Equivalence partitioning
        Test data: Default, stored and non-image focal points
        """
        asset = Asset(filename="x", kind=kind, focal_point=focal_point)

        assert asset.get_focal_point() == expected

    def test_transient_fields_default(self):
        """Pending operation attributes start empty.

        Purpose: Verify new instances have no pending file operation.
        Category: Normal case
        Target: Asset transient attributes
        Technique: Equivalence partitioning
        Test data: Fresh Asset instance
        """
        asset = Asset(filename="x.txt")

        assert asset.new_location is None
        assert asset.temp_file_path is None
        assert asset.avoid_filename_conflicts is False
        assert asset.keep_file_on_delete is False
        assert asset.kind == "unknown"


class TestTransformMode:
    def test_choices(self):
        """TransformMode has crop, fit and stretch.

        Purpose: Guard the stored mode values.
        Category: Normal case
        Target: TransformMode.choices
        Technique: Equivalence partitioning
        Test data: TransformMode values
        """
        assert set(TransformMode.values) == {"crop", "fit", "stretch"}


@pytest.mark.django_db
class TestAssetConstraints:
    def test_folder_filename_is_unique(self, root_folder):
        """Two assets cannot share a filename in one folder.

        Purpose: Verify the (folder, filename) unique constraint.
        Category: Error case
        Target: Asset Meta.constraints
        Technique: Error guessing
        Test data: Two a.txt records in the root folder
        """
        Asset.objects.create(folder=root_folder, volume=root_folder.volume, filename="a.txt")

        with pytest.raises(IntegrityError):
            Asset.objects.create(folder=root_folder, volume=root_folder.volume, filename="a.txt")

    def test_folder_delete_cascades_to_assets(self, root_folder, make_folder):
        """Deleting a folder deletes its subfolders and assets.

        Purpose: Verify CASCADE from folders to children and assets.
        Category: Normal case
        Target: VolumeFolder.parent, Asset.folder
        Technique: State transition
        Test data: Folder with a subfolder holding an asset record
        """
        parent = make_folder(root_folder, "docs")
        child = make_folder(parent, "old")
        Asset.objects.create(folder=child, volume=child.volume, filename="a.txt")

        parent.delete()

        assert not VolumeFolder.objects.filter(pk=child.pk).exists()
        assert not Asset.objects.exists()
