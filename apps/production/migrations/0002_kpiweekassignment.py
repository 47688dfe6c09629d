import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):
    dependencies = [
        ("production", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="KPIWeekAssignment",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("week_index", models.PositiveIntegerField(verbose_name="Week index")),
                ("day_amounts", models.JSONField(default=dict, verbose_name="Day amounts")),
                ("day_titles", models.JSONField(blank=True, default=dict, verbose_name="Day titles")),
                ("day_results", models.JSONField(blank=True, default=dict, verbose_name="Day results")),
                ("accepted", models.BooleanField(default=False, verbose_name="Accepted")),
                ("accepted_at", models.DateTimeField(blank=True, null=True, verbose_name="Accepted at")),
                (
                    "accepted_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="kpi_assignments_accepted",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="Accepted by",
                    ),
                ),
                (
                    "assignee",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="kpi_assignments",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="Assignee",
                    ),
                ),
                (
                    "created_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="kpi_assignments_created",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="Created by",
                    ),
                ),
                (
                    "kpi",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="assignments",
                        to="production.chainkpi",
                        verbose_name="KPI",
                    ),
                ),
                (
                    "step",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="assignments",
                        to="production.productionchainstep",
                        verbose_name="Step",
                    ),
                ),
            ],
            options={
                "verbose_name": "KPI week assignment",
                "verbose_name_plural": "KPI week assignments",
                "db_table": "production_kpi_week_assignment",
                "ordering": ["kpi", "week_index", "step__step_order"],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("kpi", "week_index", "step"), name="production_kpi_assignment_unique_step"
                    )
                ],
            },
        ),
    ]
