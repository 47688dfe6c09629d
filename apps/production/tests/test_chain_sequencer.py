import pytest
from django.contrib.auth import get_user_model

from apps.production.constants import ChainRunStatus, ChainTaskStatus
from apps.production.exceptions import ChainStateError, NoAssigneeError
from apps.production.models import ChainRun, ChainTask
from apps.production.services import ChainStepSequencer, ProductionChainService
from apps.production.services.chain_sequencer import earliest_member_selector

User = get_user_model()


def work_on(task):
    ChainStepSequencer.begin(task)
    return ChainStepSequencer.advance(task)


@pytest.mark.django_db
class TestChainStepSequencer:
    def test_start_assigns_first_department(self, chain, cutter, superuser):
        run = ChainStepSequencer.start(chain, started_by=superuser)

        task = run.tasks.get()
        assert run.current_step_order == 1
        assert run.status == ChainRunStatus.IN_PROGRESS
        assert task.assignee == cutter
        assert task.department.code == "CUT"
        assert task.title == "Cut fabric"
        assert task.status == ChainTaskStatus.PENDING

    def test_default_task_title(self, cutting, sewing, cutter):
        chain = ProductionChainService.create(name="Bag line", steps=[{"department": cutting}, {"department": sewing}])

        run = ChainStepSequencer.start(chain)

        assert run.tasks.get().title == "Bag line - step 1"

    def test_advance_hands_over_to_next_department(self, chain, cutter, sewer):
        run = ChainStepSequencer.start(chain)
        first = run.tasks.get()

        run = work_on(first)

        first.refresh_from_db()
        assert first.status == ChainTaskStatus.COMPLETED
        assert first.completed_at is not None
        assert run.current_step_order == 2
        assert run.tasks.get(step__step_order=2).assignee == sewer

    def test_last_step_completes_run(self, chain, cutter, sewer):
        run = ChainStepSequencer.start(chain)
        run = work_on(run.tasks.get())

        run = work_on(run.tasks.get(step__step_order=2))

        assert run.status == ChainRunStatus.COMPLETED
        assert run.completed_at is not None
        assert run.tasks.count() == 2

    def test_missing_assignee_keeps_task_open(self, chain, cutter):
        run = ChainStepSequencer.start(chain)
        task = run.tasks.get()
        ChainStepSequencer.begin(task)

        with pytest.raises(NoAssigneeError) as exc_info:
            ChainStepSequencer.advance(task)

        assert exc_info.value.params["step_order"] == 2
        task.refresh_from_db()
        run.refresh_from_db()
        assert task.status == ChainTaskStatus.IN_PROGRESS
        assert run.current_step_order == 1
        assert run.tasks.count() == 1

    def test_missing_assignee_on_start_creates_nothing(self, chain):
        with pytest.raises(NoAssigneeError):
            ChainStepSequencer.start(chain)

        assert not ChainRun.objects.exists()

    def test_inactive_chain_cannot_start(self, chain, cutter):
        chain.status = "inactive"
        chain.save()

        with pytest.raises(ChainStateError):
            ChainStepSequencer.start(chain)

    def test_completed_task_cannot_advance_twice(self, chain, cutter, sewer):
        run = ChainStepSequencer.start(chain)
        task = run.tasks.get()
        work_on(task)

        with pytest.raises(ChainStateError):
            ChainStepSequencer.advance(task)

    def test_pending_task_must_be_started_first(self, chain, cutter, sewer):
        run = ChainStepSequencer.start(chain)
        task = run.tasks.get()

        with pytest.raises(ChainStateError) as exc_info:
            ChainStepSequencer.advance(task)

        assert exc_info.value.params["status"] == ChainTaskStatus.PENDING
        task.refresh_from_db()
        run.refresh_from_db()
        assert task.status == ChainTaskStatus.PENDING
        assert run.current_step_order == 1
        assert run.tasks.count() == 1

    def test_begin(self, chain, cutter):
        task = ChainStepSequencer.start(chain).tasks.get()

        ChainStepSequencer.begin(task)

        assert ChainTask.objects.get(pk=task.pk).status == ChainTaskStatus.IN_PROGRESS
        with pytest.raises(ChainStateError):
            ChainStepSequencer.begin(task)

    def test_assignee_selector_is_configurable(self, chain, cutter, settings):
        settings.PRODUCTION_ASSIGNEE_SELECTOR = "apps.production.tests.test_chain_sequencer.nobody"

        with pytest.raises(NoAssigneeError):
            ChainStepSequencer.start(chain)


def nobody(department, step):
    return None


@pytest.mark.django_db
def test_earliest_member_selector_skips_inactive_members(cutting):
    User.objects.create_user(username="gone", email="gone@example.com", department=cutting, is_active=False)
    first = User.objects.create_user(username="first", email="first@example.com", department=cutting)
    User.objects.create_user(username="second", email="second@example.com", department=cutting)

    assert earliest_member_selector(cutting, None) == first
