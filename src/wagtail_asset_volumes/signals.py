"""Signal handlers for wagtail-asset-volumes.

Deleting an ``Asset`` record removes its file from the volume along with any
generated transforms. The handler runs on ``pre_delete`` so the transform
index rows, which cascade with the asset, can still be read.
"""

from __future__ import annotations

import logging
from typing import Any

from django.db.models.signals import pre_delete

from .models import Asset

logger = logging.getLogger(__name__)


def on_asset_pre_delete(sender: type, instance: Asset, **kwargs: Any) -> None:
    """Delete the physical file and transforms of an asset being deleted."""
    from .assets import AssetService

    logger.info("Deleting files of asset %s: %s", instance.pk, instance.filename)
    AssetService().delete_asset_files(instance)


pre_delete.connect(
    on_asset_pre_delete,
    sender=Asset,
    dispatch_uid="wagtail_asset_volumes.on_asset_pre_delete",
)
