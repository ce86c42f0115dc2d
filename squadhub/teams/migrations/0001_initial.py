import uuid

from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Team",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("name", models.CharField(max_length=255)),
                ("tag", models.CharField(blank=True, max_length=10)),
                ("game", models.CharField(default="valorant", max_length=50)),
                (
                    "category",
                    models.CharField(
                        choices=[("21L", "21L"), ("21GC", "21GC"), ("21ACA", "21 ACA")],
                        help_text="Tryout category this team recruits for",
                        max_length=10,
                        unique=True,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["name"],
            },
        ),
    ]
