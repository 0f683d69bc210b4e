"""Tests for the clear_asset_transforms and move_asset_folder management commands.

Verifies asset and folder resolution, the --all / --asset-ids / --dry-run /
--force / --merge flags, and output messaging.
"""

from __future__ import annotations

from io import StringIO
from unittest import mock

import pytest
from django.core.management import call_command
from django.core.management.base import CommandError

from wagtail_asset_volumes.management.commands.clear_asset_transforms import (
    Command as ClearTransformsCommand,
)
from wagtail_asset_volumes.models import Asset, TransformIndex, VolumeFolder

pytestmark = pytest.mark.django_db


@pytest.fixture
def photos(asset_service, root_folder, make_image):
    """Two uploaded photos; only the first has a generated transform."""
    first = asset_service.upload_asset(make_image("a.jpg", (80, 60)), root_folder, "a.jpg").value
    second = asset_service.upload_asset(make_image("b.jpg", (80, 60)), root_folder, "b.jpg").value
    asset_service.transforms.ensure_transform(first, {"width": 20})
    return first, second


class TestClearAssetTransformsCommand:
    def _run_command(self, **options):
        """Helper to run the command with captured output."""
        cmd = ClearTransformsCommand()
        cmd.stdout = StringIO()
        cmd.stderr = StringIO()
        cmd.style = mock.Mock()
        cmd.style.SUCCESS = lambda x: x
        defaults = {
            "asset_ids": None,
            "clear_all": False,
            "dry_run": False,
        }
        defaults.update(options)
        cmd.handle(**defaults)
        return cmd.stdout.getvalue(), cmd.stderr.getvalue()

    def test_default_clears_indexed_assets(self, photos):
        """Without flags only assets with indexed transforms are cleared.

        Purpose: Verify the default selection and the index cleanup.
        Category: Normal case
        Target: Command.handle()
        Technique: Equivalence partitioning
        Test data: Two photos, one with a transform
        """
        first, _ = photos

        stdout, stderr = self._run_command()

        assert f"Cleared: {first.pk} - a.jpg" in stdout
        assert "Cleared: 1, Errors: 0" in stdout
        assert not TransformIndex.objects.exists()
        assert stderr == ""

    def test_all_clears_every_image(self, photos):
        """--all selects every image asset.

        Purpose: Verify --all ignores the transform index.
        Category: Normal case
        Target: Command.handle(clear_all=True)
        Technique: Equivalence partitioning
        Test data: Two photos
        """
        stdout, _ = self._run_command(clear_all=True)

        assert "Cleared: 2, Errors: 0" in stdout

    def test_dry_run_deletes_nothing(self, photos):
        """--dry-run reports without deleting.

        Purpose: Verify the index survives a dry run.
        Category: Normal case
        Target: Command.handle(dry_run=True)
        Technique: Equivalence partitioning
        Test data: Two photos, one with a transform
        """
        stdout, _ = self._run_command(dry_run=True)

        assert "[DRY RUN] Would clear" in stdout
        assert "[DRY RUN] Done. Cleared: 1" in stdout
        assert TransformIndex.objects.count() == 1

    def test_failure_is_reported_and_counted(self, photos):
        """Errors for one asset are reported and the run continues.

        Purpose: Verify per-asset error handling.
        Category: Error case
        Target: Command.handle(asset_ids=[...])
        Technique: Fault injection
        Test data: TransformCache raising for every asset
        """
        first, second = photos

        with mock.patch("wagtail_asset_volumes.transforms.TransformCache") as cache_cls:
            cache_cls.return_value.delete_all_transform_data.side_effect = RuntimeError("boom")
            stdout, stderr = self._run_command(asset_ids=[first.pk, second.pk])

        assert f"ERROR: {first.pk} - a.jpg" in stderr
        assert "Cleared: 0, Errors: 2" in stdout


class TestMoveAssetFolderCommand:
    @pytest.fixture
    def tree(self, asset_service, root_folder, make_folder, make_file):
        a = make_folder(root_folder, "A")
        c = make_folder(root_folder, "C")
        asset_service.upload_asset(make_file("one.txt", b"1"), a, "one.txt")
        return a, c

    def test_moves_folder(self, tree):
        """The command moves the folder and its assets.

        Purpose: Verify the full move through call_command().
        Category: Normal case
        Target: Command.handle(folder_id, parent_id)
        Technique: Equivalence partitioning
        Test data: A/one.txt moved into C/
        """
        a, c = tree
        out = StringIO()

        call_command("move_asset_folder", folder_id=a.pk, parent_id=c.pk, stdout=out)

        assert "Moved: 1, Conflicts: 0" in out.getvalue()
        assert Asset.objects.select_related("folder").get().get_uri() == "C/A/one.txt"
        assert not VolumeFolder.objects.filter(pk=a.pk).exists()

    def test_dry_run_changes_nothing(self, tree):
        """--dry-run lists the assets without moving them.

        Purpose: Verify no folder is created in a dry run.
        Category: Normal case
        Target: Command.handle(dry_run=True)
        Technique: Equivalence partitioning
        Test data: A/one.txt, destination C/
        """
        a, c = tree
        out = StringIO()
        count = VolumeFolder.objects.count()

        call_command(
            "move_asset_folder", folder_id=a.pk, parent_id=c.pk, dry_run=True, stdout=out
        )

        assert "[DRY RUN] Would move: " in out.getvalue()
        assert VolumeFolder.objects.count() == count

    def test_conflict_raises_command_error(self, tree, make_folder):
        """A same-named destination folder aborts without --force or --merge.

        Purpose: Verify the conflict is surfaced as a CommandError.
        Category: Error case
        Target: Command.handle(folder_id, parent_id)
        Technique: Decision table (conflict, no resolution flag)
        Test data: Existing C/A/
        """
        a, c = tree
        make_folder(c, "A")

        with pytest.raises(CommandError, match="already exists"):
            call_command("move_asset_folder", folder_id=a.pk, parent_id=c.pk)

    def test_unknown_folder_raises_command_error(self, tree):
        """An unknown folder id aborts the command.

        Purpose: Verify argument validation.
        Category: Error case
        Target: Command.handle(folder_id)
        Technique: Error guessing
        Test data: Folder id 999
        """
        _, c = tree

        with pytest.raises(CommandError, match="does not exist"):
            call_command("move_asset_folder", folder_id=999, parent_id=c.pk)
