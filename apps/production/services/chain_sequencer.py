"""Chain step sequencer.

Moves a chain run from one step's department to the next. Each step produces one
``ChainTask`` (``PENDING -> IN_PROGRESS -> COMPLETED``); completing the task of step
``n`` creates the task of step ``n + 1`` or finishes the run.
"""

import logging

from django.conf import settings
from django.contrib.auth import get_user_model
from django.db import transaction
from django.utils import timezone
from django.utils.module_loading import import_string
from django.utils.translation import gettext as _

from apps.production.constants import FIRST_STEP_ORDER, ChainRunStatus, ChainTaskStatus
from apps.production.exceptions import ChainStateError, NoAssigneeError
from apps.production.models import ChainRun, ChainTask, ProductionChain, ProductionChainStep

logger = logging.getLogger(__name__)


def earliest_member_selector(department, step):
    """Pick the active department member who joined first."""
    return get_user_model().objects.members_of(department).first()


def get_assignee_selector():
    return import_string(settings.PRODUCTION_ASSIGNEE_SELECTOR)


class ChainStepSequencer:
    @staticmethod
    def _assign(run: ChainRun, step: ProductionChainStep) -> ChainTask:
        assignee = get_assignee_selector()(step.department, step)
        if assignee is None:
            raise NoAssigneeError(department_id=step.department_id, step_order=step.step_order)
        title = step.title or _("%(chain)s - step %(step_order)s") % {
            "chain": run.chain.name,
            "step_order": step.step_order,
        }
        return ChainTask.objects.create(
            run=run,
            step=step,
            department_id=step.department_id,
            assignee=assignee,
            title=title,
        )

    @staticmethod
    @transaction.atomic
    def start(chain: ProductionChain, started_by=None) -> ChainRun:
        """Open a run at the first step of ``chain``."""
        if not chain.is_active:
            raise ChainStateError(_("Chain %(chain_id)s is inactive"), chain_id=chain.pk)
        first_step = chain.steps.filter(step_order=FIRST_STEP_ORDER).select_related("department").first()
        if first_step is None:
            raise ChainStateError(_("Chain %(chain_id)s has no steps"), chain_id=chain.pk)

        run = ChainRun.objects.create(chain=chain, current_step_order=FIRST_STEP_ORDER, started_by=started_by)
        task = ChainStepSequencer._assign(run, first_step)
        logger.info("Started run %s of chain %s, task %s assigned to %s", run.pk, chain.pk, task.pk, task.assignee_id)
        return run

    @staticmethod
    def begin(task: ChainTask) -> ChainTask:
        """Move a pending task to in progress."""
        if task.status != ChainTaskStatus.PENDING:
            raise ChainStateError(
                _("Task %(task_id)s is %(status)s, only pending tasks can be started"),
                task_id=task.pk,
                status=task.status,
            )
        task.status = ChainTaskStatus.IN_PROGRESS
        task.save(update_fields=["status", "updated_at"])
        return task

    @staticmethod
    @transaction.atomic
    def advance(task: ChainTask) -> ChainRun:
        """Complete an in-progress ``task`` and hand the run over to the next step.

        Raises ``NoAssigneeError`` when the next department has nobody to receive the
        work; the transaction is rolled back so ``task`` stays open and can be retried.
        """
        task = ChainTask.objects.select_for_update().select_related("run__chain", "step").get(pk=task.pk)
        run = task.run
        if task.status == ChainTaskStatus.COMPLETED or run.status == ChainRunStatus.COMPLETED:
            raise ChainStateError(_("Task %(task_id)s is already completed"), task_id=task.pk)
        if task.status != ChainTaskStatus.IN_PROGRESS:
            raise ChainStateError(
                _("Task %(task_id)s is %(status)s, only tasks in progress can be completed"),
                task_id=task.pk,
                status=task.status,
            )

        now = timezone.now()
        task.status = ChainTaskStatus.COMPLETED
        task.completed_at = now
        task.save(update_fields=["status", "completed_at", "updated_at"])

        successor = (
            run.chain.steps.filter(step_order__gt=task.step.step_order)
            .select_related("department")
            .order_by("step_order")
            .first()
        )
        if successor is None:
            run.status = ChainRunStatus.COMPLETED
            run.completed_at = now
            run.save(update_fields=["status", "completed_at", "updated_at"])
            logger.info("Run %s of chain %s completed", run.pk, run.chain_id)
            return run

        next_task = ChainStepSequencer._assign(run, successor)
        run.current_step_order = successor.step_order
        run.save(update_fields=["current_step_order", "updated_at"])
        logger.info(
            "Run %s advanced to step %s, task %s assigned to %s",
            run.pk,
            successor.step_order,
            next_task.pk,
            next_task.assignee_id,
        )
        return run
