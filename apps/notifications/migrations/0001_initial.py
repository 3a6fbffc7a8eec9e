import uuid
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Notification",
            fields=[
                ("id",            models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("type",          models.CharField(choices=[("missing_total_liters", "Missing total liters"), ("missing_extra_fuel", "Missing extra fuel"), ("both", "Missing total and extra"), ("unlinked_export_do", "Unlinked return order"), ("info", "Info"), ("warning", "Warning")], max_length=24)),
                ("title",         models.CharField(max_length=160)),
                ("message",       models.TextField()),
                ("related_model", models.CharField(max_length=40)),
                ("related_id",    models.CharField(max_length=64)),
                ("metadata",      models.JSONField(blank=True, default=dict)),
                ("recipients",    models.JSONField(default=list)),
                ("status",        models.CharField(choices=[("pending", "Pending"), ("resolved", "Resolved"), ("dismissed", "Dismissed")], default="pending", max_length=10)),
                ("is_read",       models.BooleanField(default=False)),
                ("read_by",       models.JSONField(blank=True, default=list)),
                ("resolved_at",   models.DateTimeField(blank=True, null=True)),
                ("resolved_by",   models.CharField(blank=True, max_length=60)),
                ("created_by",    models.CharField(blank=True, max_length=60)),
                ("created_at",    models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["related_model", "related_id", "status"], name="notif_related_status_idx"),
                    models.Index(fields=["status", "created_at"], name="notif_status_created_idx"),
                ],
            },
        ),
    ]
