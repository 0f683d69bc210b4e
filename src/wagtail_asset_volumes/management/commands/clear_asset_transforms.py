"""Management command to delete generated transforms of assets."""

from __future__ import annotations

import logging

from django.core.management.base import BaseCommand, CommandParser

from wagtail_asset_volumes.models import Asset

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = "Delete generated image transforms so they are regenerated on next use."

    def add_arguments(self, parser: CommandParser) -> None:
        parser.add_argument(
            "--asset-ids",
            nargs="+",
            type=int,
            help="Specific asset IDs to clear. If omitted, clears all assets with indexed transforms.",
        )
        parser.add_argument(
            "--all",
            action="store_true",
            dest="clear_all",
            help="Clear transform data for ALL image assets (not just those with indexed transforms).",
        )
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Show what would be cleared without deleting anything.",
        )

    def handle(self, **options: object) -> None:
        from wagtail_asset_volumes.transforms import TransformCache

        asset_ids = options.get("asset_ids")
        clear_all = options.get("clear_all")
        dry_run = options.get("dry_run")

        assets = self._resolve_assets(asset_ids, clear_all)  # type: ignore[arg-type]
        self.stdout.write(f"Clearing transforms for {len(assets)} asset(s)...")

        cache = TransformCache()
        cleared = 0
        errors = 0
        for asset in assets:
            if dry_run:
                self.stdout.write(
                    f"  [DRY RUN] Would clear: {asset.pk} - {asset.filename}"
                )
                cleared += 1
                continue

            try:
                cache.delete_all_transform_data(asset)
                self.stdout.write(f"  Cleared: {asset.pk} - {asset.filename}")
                cleared += 1
            except Exception:
                logger.exception("Failed to clear transforms for asset %d", asset.pk)
                self.stderr.write(f"  ERROR: {asset.pk} - {asset.filename}")
                errors += 1

        prefix = "[DRY RUN] " if dry_run else ""
        self.stdout.write(
            self.style.SUCCESS(f"\n{prefix}Done. Cleared: {cleared}, Errors: {errors}")
        )

    def _resolve_assets(
        self, asset_ids: list[int] | None, clear_all: bool | None
    ) -> list[Asset]:
        """Resolve the set of assets to clear based on CLI arguments."""
        from wagtail_asset_volumes.models import TransformIndex

        qs = Asset.objects.select_related("folder").order_by("pk")
        if asset_ids:
            return list(qs.filter(pk__in=asset_ids))

        if clear_all:
            return list(qs.filter(kind="image"))

        # Default: only assets that have generated transforms
        indexed_ids = TransformIndex.objects.values_list("asset_id", flat=True).distinct()
        return list(qs.filter(pk__in=indexed_ids))
