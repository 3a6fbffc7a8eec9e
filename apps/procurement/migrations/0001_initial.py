import django.core.validators
import uuid
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="LPOEntry",
            fields=[
                ("id",              models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("lpo_no",          models.CharField(db_index=True, max_length=20)),
                ("entry_date",      models.DateField()),
                ("station",         models.CharField(max_length=60)),
                ("do_number",       models.CharField(db_index=True, default="NIL", max_length=20)),
                ("truck_no",        models.CharField(max_length=20)),
                ("liters",          models.DecimalField(decimal_places=2, max_digits=10,
                                                        validators=[django.core.validators.MinValueValidator(0)])),
                ("price_per_liter", models.DecimalField(decimal_places=2, max_digits=10,
                                                        validators=[django.core.validators.MinValueValidator(0)])),
                ("destinations",    models.CharField(blank=True, max_length=120)),
                ("is_deleted",      models.BooleanField(default=False)),
                ("deleted_at",      models.DateTimeField(blank=True, null=True)),
                ("created_at",      models.DateTimeField(auto_now_add=True)),
                ("updated_at",      models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "LPO entry",
                "verbose_name_plural": "LPO entries",
                "ordering": ["-entry_date", "lpo_no"],
            },
        ),
    ]
