"""Initial migration for wagtail-asset-volumes."""

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Volume",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                ("name", models.CharField(max_length=255)),
                ("handle", models.SlugField(max_length=255, unique=True)),
                (
                    "backend",
                    models.CharField(
                        blank=True,
                        default="",
                        help_text="Dotted path of the volume backend class. Blank uses DEFAULT_VOLUME_BACKEND.",
                        max_length=255,
                    ),
                ),
                ("options", models.JSONField(blank=True, default=dict)),
                ("url", models.CharField(blank=True, default="", max_length=2048)),
            ],
        ),
        migrations.CreateModel(
            name="VolumeFolder",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                ("name", models.CharField(max_length=255)),
                (
                    "path",
                    models.CharField(blank=True, db_index=True, default="", max_length=1024),
                ),
                (
                    "parent",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="children",
                        to="wagtail_asset_volumes.volumefolder",
                    ),
                ),
                (
                    "volume",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="folders",
                        to="wagtail_asset_volumes.volume",
                    ),
                ),
            ],
            options={
                "ordering": ["path"],
            },
        ),
        migrations.CreateModel(
            name="Asset",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                ("filename", models.CharField(max_length=255)),
                ("kind", models.CharField(default="unknown", max_length=50)),
                ("width", models.PositiveIntegerField(blank=True, null=True)),
                ("height", models.PositiveIntegerField(blank=True, null=True)),
                ("size", models.BigIntegerField(blank=True, null=True)),
                ("focal_point", models.CharField(blank=True, max_length=20, null=True)),
                ("date_modified", models.DateTimeField(blank=True, null=True)),
                ("date_created", models.DateTimeField(auto_now_add=True)),
                ("date_updated", models.DateTimeField(auto_now=True)),
                (
                    "folder",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="assets",
                        to="wagtail_asset_volumes.volumefolder",
                    ),
                ),
                (
                    "volume",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="assets",
                        to="wagtail_asset_volumes.volume",
                    ),
                ),
            ],
            options={
                "constraints": [
                    models.UniqueConstraint(
                        fields=("folder", "filename"),
                        name="wagtail_asset_volumes_unique_folder_filename",
                    )
                ],
            },
        ),
        migrations.CreateModel(
            name="AssetTransform",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                ("name", models.CharField(max_length=255)),
                ("handle", models.SlugField(max_length=255, unique=True)),
                ("width", models.PositiveIntegerField(blank=True, null=True)),
                ("height", models.PositiveIntegerField(blank=True, null=True)),
                (
                    "mode",
                    models.CharField(
                        choices=[("crop", "Crop"), ("fit", "Fit"), ("stretch", "Stretch")],
                        default="crop",
                        max_length=7,
                    ),
                ),
                ("position", models.CharField(default="center-center", max_length=50)),
                ("quality", models.PositiveSmallIntegerField(blank=True, null=True)),
                ("format", models.CharField(blank=True, default="", max_length=10)),
            ],
        ),
        migrations.CreateModel(
            name="TransformIndex",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                ("location", models.CharField(max_length=255)),
                ("filename", models.CharField(max_length=255)),
                ("format", models.CharField(blank=True, default="", max_length=10)),
                ("file_exists", models.BooleanField(default=False)),
                ("date_indexed", models.DateTimeField(auto_now=True)),
                (
                    "asset",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="transform_indexes",
                        to="wagtail_asset_volumes.asset",
                    ),
                ),
                (
                    "volume",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="+",
                        to="wagtail_asset_volumes.volume",
                    ),
                ),
            ],
            options={
                "unique_together": {("asset", "location")},
            },
        ),
    ]
