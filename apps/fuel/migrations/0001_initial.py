import django.core.validators
import django.db.models.deletion
import uuid
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="RouteConfig",
            fields=[
                ("id",                   models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("route_name",           models.CharField(max_length=120, unique=True)),
                ("origin",               models.CharField(blank=True, max_length=80)),
                ("destination",          models.CharField(max_length=80)),
                ("destination_aliases",  models.JSONField(blank=True, default=list)),
                ("default_total_liters", models.DecimalField(decimal_places=2, max_digits=10,
                                                             validators=[django.core.validators.MinValueValidator(0)])),
                ("is_active",            models.BooleanField(default=True)),
                ("created_at",           models.DateTimeField(auto_now_add=True)),
                ("updated_at",           models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["route_name"],
                "indexes": [models.Index(fields=["destination"], name="fuel_route_destination_idx")],
            },
        ),
        migrations.CreateModel(
            name="TruckBatch",
            fields=[
                ("id",           models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("truck_suffix", models.CharField(max_length=10, unique=True)),
                ("extra_liters", models.DecimalField(decimal_places=2, max_digits=8,
                                                     validators=[django.core.validators.MinValueValidator(0)])),
                ("created_at",   models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "ordering": ["truck_suffix"],
                "verbose_name_plural": "truck batches",
            },
        ),
        migrations.CreateModel(
            name="FuelLedger",
            fields=[
                ("id",                    models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("truck_no",              models.CharField(db_index=True, max_length=20)),
                ("going_do_number",       models.CharField(db_index=True, max_length=20)),
                ("return_do_number",      models.CharField(blank=True, db_index=True, max_length=20)),
                ("from_location",         models.CharField(blank=True, max_length=80)),
                ("to_location",           models.CharField(blank=True, max_length=80)),
                ("original_going_from",   models.CharField(blank=True, max_length=80)),
                ("original_going_to",     models.CharField(blank=True, max_length=80)),
                ("start_location",        models.CharField(blank=True, max_length=80)),
                ("journey_date",          models.DateField(blank=True, null=True)),
                ("total_liters",          models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True)),
                ("extra_liters",          models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True)),
                ("return_liters_added",   models.DecimalField(decimal_places=2, default=0, max_digits=10)),
                ("mmsa_yard",             models.DecimalField(decimal_places=2, default=0, max_digits=10)),
                ("tanga_yard",            models.DecimalField(decimal_places=2, default=0, max_digits=10)),
                ("dar_yard",              models.DecimalField(decimal_places=2, default=0, max_digits=10)),
                ("dar_going",             models.DecimalField(decimal_places=2, default=0, max_digits=10)),
                ("moro_going",            models.DecimalField(decimal_places=2, default=0, max_digits=10)),
                ("mbeya_going",           models.DecimalField(decimal_places=2, default=0, max_digits=10)),
                ("tdm_going",             models.DecimalField(decimal_places=2, default=0, max_digits=10)),
                ("zambia_going",          models.DecimalField(decimal_places=2, default=0, max_digits=10)),
                ("congo_fuel",            models.DecimalField(decimal_places=2, default=0, max_digits=10)),
                ("zambia_return",         models.DecimalField(decimal_places=2, default=0, max_digits=10)),
                ("tunduma_return",        models.DecimalField(decimal_places=2, default=0, max_digits=10)),
                ("mbeya_return",          models.DecimalField(decimal_places=2, default=0, max_digits=10)),
                ("moro_return",           models.DecimalField(decimal_places=2, default=0, max_digits=10)),
                ("dar_return",            models.DecimalField(decimal_places=2, default=0, max_digits=10)),
                ("tanga_return",          models.DecimalField(decimal_places=2, default=0, max_digits=10)),
                ("balance",               models.DecimalField(decimal_places=2, default=0, max_digits=10)),
                ("journey_status",        models.CharField(choices=[("active", "Active"), ("queued", "Queued"), ("completed", "Completed"), ("cancelled", "Cancelled")], default="active", max_length=10)),
                ("queue_order",           models.PositiveIntegerField(blank=True, null=True)),
                ("activated_at",          models.DateTimeField(blank=True, null=True)),
                ("completed_at",          models.DateTimeField(blank=True, null=True)),
                ("is_locked",             models.BooleanField(default=False)),
                ("pending_config_reason",  models.CharField(choices=[("none", "None"), ("missing_total_liters", "Missing total liters"), ("missing_extra_fuel", "Missing extra fuel"), ("both", "Missing total and extra")], default="none", max_length=20)),
                ("is_cancelled",          models.BooleanField(default=False)),
                ("cancelled_at",          models.DateTimeField(blank=True, null=True)),
                ("cancellation_reason",   models.CharField(blank=True, max_length=255)),
                ("cancelled_by",          models.CharField(blank=True, max_length=60)),
                ("is_deleted",            models.BooleanField(default=False)),
                ("deleted_at",            models.DateTimeField(blank=True, null=True)),
                ("created_by",            models.CharField(blank=True, max_length=60)),
                ("created_at",            models.DateTimeField(auto_now_add=True)),
                ("updated_at",            models.DateTimeField(auto_now=True)),
                ("waiting_behind",        models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL,
                                                            related_name="waiting_ledgers", to="fuel.fuelledger")),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["truck_no", "journey_status"], name="fuel_ledger_truck_status_idx"),
                    models.Index(fields=["is_locked"], name="fuel_ledger_locked_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        condition=models.Q(("is_deleted", False), ("journey_status", "active")),
                        fields=("truck_no",),
                        name="fuel_ledger_one_active_per_truck",
                    ),
                ],
            },
        ),
    ]
