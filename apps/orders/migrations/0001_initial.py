import django.db.models.deletion
import django.utils.timezone
import uuid
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="DeliveryOrder",
            fields=[
                ("id",                  models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("sn",                  models.PositiveIntegerField()),
                ("order_number",        models.CharField(max_length=20, unique=True)),
                ("order_date",          models.DateField(default=django.utils.timezone.localdate)),
                ("order_kind",          models.CharField(choices=[("DO", "Delivery Order"), ("SDO", "Special Delivery Order")], default="DO", max_length=3)),
                ("direction",           models.CharField(choices=[("IMPORT", "Import (going)"), ("EXPORT", "Export (return)")], max_length=6)),
                ("client_name",         models.CharField(blank=True, max_length=120)),
                ("truck_no",            models.CharField(db_index=True, max_length=20)),
                ("trailer_no",          models.CharField(blank=True, max_length=20)),
                ("driver_name",         models.CharField(blank=True, max_length=120)),
                ("loading_point",       models.CharField(max_length=80)),
                ("destination",         models.CharField(max_length=80)),
                ("tonnages",            models.DecimalField(blank=True, decimal_places=2, max_digits=8, null=True)),
                ("is_cancelled",        models.BooleanField(default=False)),
                ("cancelled_at",        models.DateTimeField(blank=True, null=True)),
                ("cancellation_reason", models.CharField(blank=True, max_length=255)),
                ("cancelled_by",        models.CharField(blank=True, max_length=60)),
                ("is_deleted",          models.BooleanField(default=False)),
                ("deleted_at",          models.DateTimeField(blank=True, null=True)),
                ("created_by",          models.CharField(blank=True, max_length=60)),
                ("created_at",          models.DateTimeField(auto_now_add=True)),
                ("updated_at",          models.DateTimeField(auto_now=True)),
                ("last_edited_at",      models.DateTimeField(blank=True, null=True)),
                ("last_edited_by",      models.CharField(blank=True, max_length=60)),
            ],
            options={
                "ordering": ["-order_date", "-sn"],
            },
        ),
        migrations.CreateModel(
            name="DeliveryOrderEdit",
            fields=[
                ("id",        models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("field",     models.CharField(max_length=40)),
                ("old_value", models.CharField(blank=True, max_length=255)),
                ("new_value", models.CharField(blank=True, max_length=255)),
                ("reason",    models.CharField(blank=True, max_length=255)),
                ("edited_by", models.CharField(blank=True, max_length=60)),
                ("edited_at", models.DateTimeField(auto_now_add=True)),
                ("order",     models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="edit_history", to="orders.deliveryorder")),
            ],
            options={
                "ordering": ["edited_at", "id"],
            },
        ),
        migrations.AddIndex(
            model_name="deliveryorder",
            index=models.Index(fields=["order_kind", "order_date"], name="orders_kind_date_idx"),
        ),
        migrations.AddIndex(
            model_name="deliveryorder",
            index=models.Index(fields=["truck_no", "direction"], name="orders_truck_direction_idx"),
        ),
    ]
