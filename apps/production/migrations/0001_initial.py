import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("hrm", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="ProductionChain",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("name", models.CharField(max_length=255, verbose_name="Name")),
                ("description", models.TextField(blank=True, verbose_name="Description")),
                (
                    "status",
                    models.CharField(
                        choices=[("active", "Active"), ("inactive", "Inactive")],
                        db_index=True,
                        default="active",
                        max_length=20,
                        verbose_name="Status",
                    ),
                ),
                (
                    "created_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="production_chains_created",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="Created by",
                    ),
                ),
            ],
            options={
                "verbose_name": "Production chain",
                "verbose_name_plural": "Production chains",
                "db_table": "production_chain",
                "ordering": ["-created_at"],
            },
        ),
        migrations.CreateModel(
            name="ProductionChainStep",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "step_order",
                    models.PositiveIntegerField(
                        help_text="Position of the step in the chain, starting at 1", verbose_name="Step order"
                    ),
                ),
                ("title", models.CharField(blank=True, max_length=255, verbose_name="Title")),
                (
                    "chain",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="steps",
                        to="production.productionchain",
                        verbose_name="Chain",
                    ),
                ),
                (
                    "department",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="production_chain_steps",
                        to="hrm.department",
                        verbose_name="Department",
                    ),
                ),
            ],
            options={
                "verbose_name": "Production chain step",
                "verbose_name_plural": "Production chain steps",
                "db_table": "production_chain_step",
                "ordering": ["chain", "step_order"],
                "constraints": [
                    models.UniqueConstraint(fields=("chain", "step_order"), name="production_chain_step_unique_order")
                ],
            },
        ),
        migrations.CreateModel(
            name="ChainKPI",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("total_value", models.PositiveIntegerField(verbose_name="Total value")),
                ("start_date", models.DateField(verbose_name="Start date")),
                ("end_date", models.DateField(verbose_name="End date")),
                ("unit_label", models.CharField(default="products", max_length=50, verbose_name="Unit label")),
                ("note", models.TextField(blank=True, verbose_name="Note")),
                ("weeks", models.JSONField(default=list, help_text="Week/day quota tree", verbose_name="Weeks")),
                ("version", models.PositiveIntegerField(default=1, verbose_name="Version")),
                ("is_accumulated", models.BooleanField(default=False, verbose_name="Accumulated")),
                ("accumulated_at", models.DateTimeField(blank=True, null=True, verbose_name="Accumulated at")),
                (
                    "chain",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="kpis",
                        to="production.productionchain",
                        verbose_name="Chain",
                    ),
                ),
                (
                    "created_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="chain_kpis_created",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="Created by",
                    ),
                ),
            ],
            options={
                "verbose_name": "Chain KPI",
                "verbose_name_plural": "Chain KPIs",
                "db_table": "production_chain_kpi",
                "ordering": ["-start_date"],
                "indexes": [
                    models.Index(fields=["chain", "start_date", "end_date"], name="production_kpi_period_idx")
                ],
            },
        ),
        migrations.CreateModel(
            name="KPICompletion",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "kind",
                    models.CharField(choices=[("week", "Week"), ("day", "Day")], max_length=10, verbose_name="Kind"),
                ),
                (
                    "week_index",
                    models.PositiveIntegerField(
                        blank=True, help_text="Set for week completions", null=True, verbose_name="Week index"
                    ),
                ),
                (
                    "date",
                    models.DateField(blank=True, help_text="Set for day completions", null=True, verbose_name="Date"),
                ),
                ("recorded_at", models.DateTimeField(default=django.utils.timezone.now, verbose_name="Recorded at")),
                (
                    "kpi",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="completions",
                        to="production.chainkpi",
                        verbose_name="KPI",
                    ),
                ),
                (
                    "recorded_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="kpi_completions",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="Recorded by",
                    ),
                ),
            ],
            options={
                "verbose_name": "KPI completion",
                "verbose_name_plural": "KPI completions",
                "db_table": "production_kpi_completion",
                "ordering": ["recorded_at", "id"],
                "constraints": [
                    models.UniqueConstraint(
                        condition=models.Q(("kind", "week")),
                        fields=("kpi", "week_index"),
                        name="production_kpi_completion_unique_week",
                    ),
                    models.UniqueConstraint(
                        condition=models.Q(("kind", "day")),
                        fields=("kpi", "date"),
                        name="production_kpi_completion_unique_day",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(
                            models.Q(("date__isnull", True), ("kind", "week"), ("week_index__isnull", False)),
                            models.Q(("date__isnull", False), ("kind", "day"), ("week_index__isnull", True)),
                            _connector="OR",
                        ),
                        name="production_kpi_completion_ref_matches_kind",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="ChainRun",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("current_step_order", models.PositiveIntegerField(default=1, verbose_name="Current step order")),
                (
                    "status",
                    models.CharField(
                        choices=[("in_progress", "In progress"), ("completed", "Completed")],
                        db_index=True,
                        default="in_progress",
                        max_length=20,
                        verbose_name="Status",
                    ),
                ),
                ("completed_at", models.DateTimeField(blank=True, null=True, verbose_name="Completed at")),
                (
                    "chain",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="runs",
                        to="production.productionchain",
                        verbose_name="Chain",
                    ),
                ),
                (
                    "started_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="chain_runs_started",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="Started by",
                    ),
                ),
            ],
            options={
                "verbose_name": "Chain run",
                "verbose_name_plural": "Chain runs",
                "db_table": "production_chain_run",
                "ordering": ["-created_at"],
            },
        ),
        migrations.CreateModel(
            name="ChainTask",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("title", models.CharField(max_length=255, verbose_name="Title")),
                (
                    "status",
                    models.CharField(
                        choices=[("pending", "Pending"), ("in_progress", "In progress"), ("completed", "Completed")],
                        db_index=True,
                        default="pending",
                        max_length=20,
                        verbose_name="Status",
                    ),
                ),
                ("completed_at", models.DateTimeField(blank=True, null=True, verbose_name="Completed at")),
                (
                    "assignee",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="chain_tasks",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="Assignee",
                    ),
                ),
                (
                    "department",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="chain_tasks",
                        to="hrm.department",
                        verbose_name="Department",
                    ),
                ),
                (
                    "run",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="tasks",
                        to="production.chainrun",
                        verbose_name="Run",
                    ),
                ),
                (
                    "step",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="tasks",
                        to="production.productionchainstep",
                        verbose_name="Step",
                    ),
                ),
            ],
            options={
                "verbose_name": "Chain task",
                "verbose_name_plural": "Chain tasks",
                "db_table": "production_chain_task",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["assignee", "status"], name="production_task_assignee_idx")
                ],
            },
        ),
    ]
