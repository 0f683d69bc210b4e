"""Tests for helper modules: utils, paths and files."""

from unittest import mock

import pytest

from wagtail_asset_volumes.files import get_file_info, get_file_kind_by_extension, is_extension_allowed
from wagtail_asset_volumes.paths import PathService
from wagtail_asset_volumes.utils import get_extension, import_class, join_path, remove_file


class TestJoinPath:
    @pytest.mark.parametrize(
        "folder_path,filename,expected",
        [
            pytest.param("photos/", "a.jpg", "photos/a.jpg", id="trailing-slash"),
            pytest.param("photos", "a.jpg", "photos/a.jpg", id="no-trailing-slash"),
            pytest.param("", "a.jpg", "a.jpg", id="root-folder"),
            pytest.param(None, "a.jpg", "a.jpg", id="no-folder"),
        ],
    )
    def test_join_path(self, folder_path, filename, expected):
        """join_path() builds volume paths.

        Purpose: Verify folder and filename joining for every folder form.
        Category: Normal case
        Target: join_path(folder_path, filename)
        Technique: Equivalence partitioning
        Test data: Folder paths with and without slash, root and None
        """
        assert join_path(folder_path, filename) == expected


class TestHelpers:
    def test_get_extension(self):
        """get_extension() lowercases and strips the dot.

        Purpose: Verify extension extraction.
        Category: Normal case
        Target: get_extension(filename)
        Technique: Equivalence partitioning
        Test data: Mixed case, double extension and no extension
        """
        assert get_extension("Photo.JPG") == "jpg"
        assert get_extension("archive.tar.gz") == "gz"
        assert get_extension("README") == ""

    def test_import_class(self):
        """import_class() loads a class from a dotted path.

        Purpose: Verify dotted path loading.
        Category: Normal case
        Target: import_class(dotted_path)
        Technique: Equivalence partitioning
        Test data: PathService dotted path
        """
        assert import_class("wagtail_asset_volumes.paths.PathService") is PathService

    def test_remove_file_ignores_missing(self, tmp_path):
        """remove_file() ignores files that are already gone.

        Purpose: Verify cleanup is idempotent.
        Category: Edge case
        Target: remove_file(path)
        Technique: Error guessing
        Test data: Missing path
        """
        remove_file(tmp_path / "missing.tmp")

    def test_remove_file_logs_os_errors(self, tmp_path):
        """remove_file() logs instead of raising on OS errors.

        Purpose: Verify cleanup failures do not mask the original outcome.
        Category: Error case
        Target: remove_file(path)
        Technique: Fault injection
        Test data: Path.unlink raising PermissionError
        """
        with mock.patch("pathlib.Path.unlink", side_effect=PermissionError("denied")):
            with mock.patch("wagtail_asset_volumes.utils.logger") as logger:
                remove_file(tmp_path / "locked.tmp")

        logger.warning.assert_called_once()


class TestPathService:
    def test_paths_come_from_settings(self, scratch_paths):
        """Configured directories are created and returned.

        Purpose: Verify settings-driven scratch locations.
        Category: Normal case
        Target: PathService.get_temp_path(), get_image_source_path()
        Technique: Equivalence partitioning
        Test data: Paths under tmp_path
        """
        paths = PathService()

        assert paths.get_temp_path() == scratch_paths / "scratch"
        assert paths.get_image_source_path().is_dir()

    def test_temp_file_paths_are_unique(self):
        """make_temp_file_path() keeps the extension and never repeats.

        Purpose: Verify concurrent operations get distinct scratch paths.
        Category: Normal case
        Target: PathService.make_temp_file_path(filename)
        Technique: Equivalence partitioning
        Test data: Same filename requested twice
        """
        paths = PathService()

        first = paths.make_temp_file_path("photo.jpg")
        second = paths.make_temp_file_path("photo.jpg")

        assert first != second
        assert first.suffix == second.suffix == ".jpg"
        assert first.name.startswith("photo")


class TestFileKinds:
    @pytest.mark.parametrize(
        "filename,expected",
        [
            pytest.param("a.JPG", "image", id="image"),
            pytest.param("a.pdf", "pdf", id="pdf"),
            pytest.param("a.mp4", "video", id="video"),
            pytest.param("a.xyz", "unknown", id="unknown"),
            pytest.param("README", "unknown", id="no-extension"),
        ],
    )
    def test_get_file_kind_by_extension(self, filename, expected):
        """Files are classified by extension.

        Purpose: Verify the built-in kind table.
        Category: Normal case
        Target: get_file_kind_by_extension(filename)
        Technique: Equivalence partitioning
        Test data: Known and unknown extensions
        """
        assert get_file_kind_by_extension(filename) == expected

    def test_file_kinds_setting_overrides_table(self, settings):
        """FILE_KINDS replaces the built-in table.

        Purpose: Verify kind classification is configurable.
        Category: Normal case
        Target: get_file_kind_by_extension(filename)
        Technique: Equivalence partitioning
        Test data: FILE_KINDS mapping "raw" to ["cr2"]
        """
        settings.WAGTAIL_ASSET_VOLUMES = {
            **settings.WAGTAIL_ASSET_VOLUMES,
            "FILE_KINDS": {"raw": ["cr2"]},
        }

        assert get_file_kind_by_extension("shot.cr2") == "raw"
        assert get_file_kind_by_extension("shot.jpg") == "unknown"

    def test_any_extension_allowed_by_default(self):
        """Without ALLOWED_FILE_EXTENSIONS every extension is allowed.

        Purpose: Verify the permissive default.
        Category: Normal case
        Target: is_extension_allowed(filename)
        Technique: Equivalence partitioning
        Test data: Executable extension
        """
        assert is_extension_allowed("tool.exe") is True

    def test_get_file_info_for_image(self, make_image):
        """get_file_info() measures images and their size on disk.

        Purpose: Verify metadata used after file operations.
        Category: Normal case
        Target: get_file_info(path, filename)
        Technique: Equivalence partitioning
        Test data: 30x20 PNG stored under a different name
        """
        path = make_image("upload.png", (30, 20))

        info = get_file_info(path, "final.png")

        assert info.kind == "image"
        assert (info.width, info.height) == (30, 20)
        assert info.size == path.stat().st_size
        assert info.date_modified.tzinfo is not None
