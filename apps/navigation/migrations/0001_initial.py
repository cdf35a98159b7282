import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="LegacyNavigationItem",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("slug", models.CharField(blank=True, default="", max_length=255)),
                ("labels", models.JSONField(blank=True, default=dict)),
                ("external_url", models.URLField(blank=True, max_length=500, null=True)),
                ("order", models.IntegerField(default=0)),
                (
                    "parent",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="children",
                        to="navigation.legacynavigationitem",
                    ),
                ),
            ],
            options={
                "verbose_name": "Legacy navigation item",
                "verbose_name_plural": "Legacy navigation items",
                "ordering": ("order", "id"),
            },
        ),
        migrations.CreateModel(
            name="Page",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("group_id", models.CharField(blank=True, db_index=True, max_length=64, null=True)),
                ("order", models.IntegerField(default=0)),
                ("locale", models.CharField(max_length=10)),
                ("slug", models.CharField(blank=True, max_length=255, null=True)),
                ("external_url", models.URLField(blank=True, max_length=500, null=True)),
                ("route_path", models.CharField(blank=True, max_length=255, null=True)),
                ("route_override", models.CharField(blank=True, max_length=255, null=True)),
                ("nav_label", models.CharField(blank=True, max_length=255, null=True)),
                (
                    "kind",
                    models.CharField(
                        choices=[
                            ("PAGE", "Page"),
                            ("LINK", "External link"),
                            ("FOLDER", "Folder"),
                            ("ROUTE", "Route-backed page"),
                        ],
                        default="PAGE",
                        max_length=16,
                    ),
                ),
                ("visible", models.BooleanField(default=True)),
                ("access_role", models.CharField(blank=True, max_length=64, null=True)),
                ("title", models.CharField(blank=True, default="", max_length=255)),
                ("published", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "parent",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="children",
                        to="navigation.page",
                    ),
                ),
            ],
            options={
                "verbose_name": "Navigation page",
                "verbose_name_plural": "Navigation pages",
                "ordering": ("locale", "order", "id"),
                "indexes": [models.Index(fields=["locale", "parent"], name="navigation_locale_parent_idx")],
                "constraints": [
                    models.UniqueConstraint(fields=("slug", "locale"), name="navigation_page_slug_locale_uniq"),
                    models.UniqueConstraint(fields=("group_id", "locale"), name="navigation_page_group_locale_uniq"),
                ],
            },
        ),
    ]
