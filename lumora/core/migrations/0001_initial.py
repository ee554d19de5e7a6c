"""
Initial Lumora schema: brands, topics, content items, generations,
cameos and focus sessions.
"""

from django.db import migrations, models
import django.db.models.deletion
import uuid


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Brand",
            fields=[
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("name", models.CharField(max_length=255)),
                ("mission", models.TextField(blank=True, null=True)),
                ("voice_tone", models.TextField(blank=True, null=True)),
                ("target_audience", models.TextField(blank=True, null=True)),
                ("visual_lexicon", models.TextField(blank=True, null=True)),
                ("dos", models.JSONField(blank=True, default=list)),
                ("donts", models.JSONField(blank=True, default=list)),
                ("proof_points", models.JSONField(blank=True, default=list)),
                ("cta_library", models.JSONField(blank=True, default=list)),
                ("negative_prompts", models.JSONField(blank=True, default=list)),
                ("platform_constraints", models.JSONField(blank=True, default=dict)),
            ],
            options={
                "db_table": "brands",
                "indexes": [
                    models.Index(fields=["-created_at"], name="idx_brands_created"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Topic",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("label", models.CharField(max_length=255)),
                ("weight", models.IntegerField(default=1)),
                ("min_frequency", models.IntegerField(blank=True, null=True)),
                ("max_frequency", models.IntegerField(blank=True, null=True)),
                ("examples", models.JSONField(blank=True, default=list)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "brand",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="topics",
                        to="core.brand",
                    ),
                ),
            ],
            options={
                "db_table": "topics",
                "indexes": [
                    models.Index(fields=["brand", "-weight"], name="idx_topics_brand_weight"),
                ],
            },
        ),
        migrations.CreateModel(
            name="ContentItem",
            fields=[
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("date_target", models.DateField()),
                ("platform", models.CharField(max_length=50)),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("idea", "Idea"),
                            ("prompted", "Prompted"),
                            ("generated", "Generated"),
                            ("enhanced", "Enhanced"),
                            ("qc", "QC"),
                            ("scheduled", "Scheduled"),
                            ("published", "Published"),
                        ],
                        default="idea",
                        max_length=20,
                    ),
                ),
                ("notes", models.TextField(blank=True, null=True)),
                ("attachments", models.JSONField(blank=True, null=True)),
                ("blocker_reason", models.TextField(blank=True, null=True)),
                ("files", models.JSONField(blank=True, null=True)),
                (
                    "brand",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="content_items",
                        to="core.brand",
                    ),
                ),
            ],
            options={
                "db_table": "content_items",
                "indexes": [
                    models.Index(fields=["brand", "date_target"], name="idx_content_brand_date"),
                    models.Index(fields=["brand", "status"], name="idx_content_brand_status"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Generation",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("prompt_text", models.TextField()),
                ("title", models.TextField()),
                ("description", models.TextField()),
                ("tags", models.JSONField(blank=True, default=list)),
                ("thumbnail_brief", models.TextField(blank=True, null=True)),
                ("model_params", models.JSONField(blank=True, null=True)),
                ("critique_score", models.FloatField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "content_item",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="generations",
                        to="core.contentitem",
                    ),
                ),
            ],
            options={
                "db_table": "generations",
                "indexes": [
                    models.Index(
                        fields=["content_item", "created_at"],
                        name="idx_generations_item_created",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="Cameo",
            fields=[
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("name", models.CharField(max_length=255)),
                ("description", models.TextField(blank=True, default="")),
                ("visual_description", models.TextField(blank=True, default="")),
                ("reference_images", models.JSONField(blank=True, null=True)),
                ("usage_notes", models.TextField(blank=True, null=True)),
                (
                    "brand",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="cameos",
                        to="core.brand",
                    ),
                ),
            ],
            options={
                "db_table": "cameos",
            },
        ),
        migrations.CreateModel(
            name="FocusSession",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("duration_minutes", models.PositiveIntegerField()),
                ("started_at", models.DateTimeField()),
                ("ended_at", models.DateTimeField()),
                ("notes", models.TextField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "brand",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="focus_sessions",
                        to="core.brand",
                    ),
                ),
            ],
            options={
                "db_table": "focus_sessions",
                "indexes": [
                    models.Index(fields=["-started_at"], name="idx_focus_started"),
                ],
            },
        ),
    ]
