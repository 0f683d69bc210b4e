"""Management command to move a folder, with its subfolders and assets."""

from __future__ import annotations

import logging

from django.core.management.base import BaseCommand, CommandError, CommandParser

from wagtail_asset_volumes.models import VolumeFolder

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = "Move an asset folder, its subfolders and assets under another folder."

    def add_arguments(self, parser: CommandParser) -> None:
        parser.add_argument("--folder-id", type=int, required=True, help="Folder to move.")
        parser.add_argument(
            "--parent-id", type=int, required=True, help="Folder to move it into."
        )
        group = parser.add_mutually_exclusive_group()
        group.add_argument(
            "--force",
            action="store_true",
            help="Delete a same-named folder at the destination before moving.",
        )
        group.add_argument(
            "--merge",
            action="store_true",
            help="Merge into a same-named folder at the destination.",
        )
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Show what would be moved without changing anything.",
        )

    def handle(self, **options: object) -> None:
        from wagtail_asset_volumes.assets import AssetService
        from wagtail_asset_volumes.folders import FolderService
        from wagtail_asset_volumes.results import FolderConflict

        folder = self._get_folder(options["folder_id"])  # type: ignore[arg-type]
        new_parent = self._get_folder(options["parent_id"])  # type: ignore[arg-type]
        force = bool(options.get("force"))
        merge = bool(options.get("merge"))

        asset_service = AssetService()
        folders = FolderService(asset_service.repository, asset_service.volumes)

        if options.get("dry_run"):
            tree = folders.get_all_descendant_folders(folder)
            assets = folders.repository.find_assets_in_folders(tree.keys())
            self.stdout.write(
                f"[DRY RUN] Would move {folder.path} to {new_parent.path}{folder.name}/: "
                f"{len(tree)} folder(s), {len(assets)} asset(s)"
            )
            for asset in assets:
                self.stdout.write(f"  [DRY RUN] Would move: {asset.pk} - {asset.get_uri()}")
            return

        result = folders.move_folder(folder, new_parent, force=force, merge=merge)
        if isinstance(result, FolderConflict):
            raise CommandError(f"{result.message}. Use --force or --merge.")

        plan = result.value
        self.stdout.write(
            f"Moving {len(plan.transfers)} asset(s) into folder {plan.new_folder_id}..."
        )
        moved = 0
        conflicts = 0
        for entry, outcome in zip(plan.transfers, folders.execute_transfer_plan(plan, asset_service)):
            if outcome.is_conflict:
                logger.warning("Could not move asset %d: %s", entry.asset_id, outcome.message)
                self.stderr.write(f"  CONFLICT: {entry.asset_id} - {entry.relative_path}")
                conflicts += 1
            else:
                self.stdout.write(f"  Moved: {entry.asset_id} - {entry.relative_path}")
                moved += 1

        self.stdout.write(
            self.style.SUCCESS(f"\nDone. Moved: {moved}, Conflicts: {conflicts}")
        )

    def _get_folder(self, folder_id: int) -> VolumeFolder:
        folder = VolumeFolder.objects.filter(pk=folder_id).first()
        if folder is None:
            raise CommandError(f"Folder {folder_id} does not exist")
        return folder
