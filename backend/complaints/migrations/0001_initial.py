import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Complaint",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, verbose_name="Created At")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="Updated At")),
                ("title", models.CharField(max_length=255, verbose_name="Title")),
                ("description", models.TextField(verbose_name="Description")),
                ("location", models.CharField(max_length=255, verbose_name="Location")),
                ("category", models.CharField(db_index=True, max_length=100, verbose_name="Category")),
                ("image_url", models.URLField(blank=True, max_length=1024, null=True, verbose_name="Image URL")),
                (
                    "image_public_id",
                    models.CharField(
                        blank=True,
                        help_text="Object key on the media host; used to delete the image.",
                        max_length=512,
                        null=True,
                        verbose_name="Image Public ID",
                    ),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("PENDING", "Pending"),
                            ("IN_PROGRESS", "In Progress"),
                            ("RESOLVED", "Resolved"),
                            ("REOPENED", "Reopened"),
                        ],
                        db_index=True,
                        default="PENDING",
                        max_length=20,
                        verbose_name="Status",
                    ),
                ),
                (
                    "assigned_to",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="assigned_complaints",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="Assigned Worker",
                    ),
                ),
                (
                    "student",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="complaints",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="Student",
                    ),
                ),
            ],
            options={
                "verbose_name": "Complaint",
                "verbose_name_plural": "Complaints",
                "ordering": ["-created_at", "-id"],
                "indexes": [
                    models.Index(fields=["student", "-created_at"], name="complaints__student_4f2a1c_idx"),
                    models.Index(fields=["assigned_to", "-created_at"], name="complaints__assigne_9b7d3e_idx"),
                ],
            },
        ),
    ]
