from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="ScheduledEvent",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("hook", models.CharField(max_length=191, unique=True)),
                ("next_run", models.DateTimeField(db_index=True)),
                (
                    "recurrence",
                    models.CharField(
                        choices=[
                            ("hourly", "hourly"),
                            ("twicedaily", "twicedaily"),
                            ("daily", "daily"),
                            ("weekly", "weekly"),
                        ],
                        max_length=20,
                    ),
                ),
                ("last_run", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "ordering": ["next_run"],
            },
        ),
    ]
