import uuid
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("auth", "0012_alter_user_first_name_max_length"),
    ]

    operations = [
        migrations.CreateModel(
            name="Operator",
            fields=[
                ("password",     models.CharField(max_length=128, verbose_name="password")),
                ("last_login",   models.DateTimeField(blank=True, null=True, verbose_name="last login")),
                ("is_superuser", models.BooleanField(
                    default=False,
                    help_text="Designates that this user has all permissions without explicitly assigning them.",
                    verbose_name="superuser status",
                )),
                ("id",           models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("username",     models.CharField(max_length=60, unique=True)),
                ("full_name",    models.CharField(blank=True, max_length=120)),
                ("email",        models.EmailField(blank=True, max_length=254)),
                ("role",         models.CharField(
                    choices=[
                        ("super_admin", "Super Admin"),
                        ("admin", "Admin"),
                        ("manager", "Manager"),
                        ("supervisor", "Supervisor"),
                        ("clerk", "Clerk"),
                        ("fuel_order_maker", "Fuel Order Maker"),
                        ("driver", "Driver"),
                        ("viewer", "Viewer"),
                    ],
                    default="viewer",
                    max_length=20,
                )),
                ("station",      models.CharField(blank=True, max_length=60)),
                ("is_active",    models.BooleanField(default=True)),
                ("is_staff",     models.BooleanField(default=False)),
                ("created_at",   models.DateTimeField(auto_now_add=True)),
                ("groups",       models.ManyToManyField(
                    blank=True,
                    help_text="The groups this user belongs to. A user will get all permissions granted to each of their groups.",
                    related_name="user_set",
                    related_query_name="user",
                    to="auth.group",
                    verbose_name="groups",
                )),
                ("user_permissions", models.ManyToManyField(
                    blank=True,
                    help_text="Specific permissions for this user.",
                    related_name="user_set",
                    related_query_name="user",
                    to="auth.permission",
                    verbose_name="user permissions",
                )),
            ],
            options={"verbose_name": "Operator"},
        ),
        migrations.AddIndex(
            model_name="operator",
            index=models.Index(fields=["role"], name="auth_operator_role_idx"),
        ),
    ]
