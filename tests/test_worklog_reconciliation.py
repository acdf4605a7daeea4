import pytest

from app.exceptions import (
    AuthorizationError,
    CapacityExceeded,
    ComponentLocked,
    MustUseStatusTransition,
    ValidationError,
)
from models.work_item import LIVE_ISSUE_KIND, TASK_KIND
from schemas.work_item import ComponentSpec, WorkItemCreate, WorkItemUpdate
from services import clock
from services.work_item_service import WorkItemService


@pytest.fixture
def service(db, org, effort_table):
    return WorkItemService(db, TASK_KIND)


@pytest.fixture
def task(service, as_caller):
    """A task for employee 21 with one 15-hour component."""
    return service.create_item(
        as_caller(20),
        WorkItemCreate(
            assigned_employee_id=21,
            title="Settlement report",
            components=[ComponentSpec(type="Feature", complexity="Medium", count=3)],
        ),
    )


def component_of(task):
    return task.components[0]


def test_create_prices_components_and_sets_owner(task):
    component = component_of(task)

    assert component.total_hours == 15
    assert task.workload_hours == 15
    assert task.status == "Pending"
    assert task.manager_id == 10


def test_create_for_invisible_assignee_rejected(service, as_caller):
    payload = WorkItemCreate(assigned_employee_id=30, title="Other team work")

    with pytest.raises(AuthorizationError):
        service.create_item(as_caller(10), payload)


def test_employee_can_self_assign(service, as_caller):
    item = service.create_item(as_caller(22), WorkItemCreate(assigned_employee_id=22, title="Own task"))

    assert item.assigned_employee_id == 22


def test_completing_tops_up_remaining_hours(service, task):
    component = component_of(task)
    service.record_worklog(component.id, 21, 10, clock.today())

    component, item = service.apply_component_status(component.id, "Live", 20)

    logs = service.list_worklogs(component.id)
    auto = [log for log in logs if log.is_auto]
    assert service.worklogs.sum_hours(component.id) == 15
    assert len(auto) == 1
    assert auto[0].hours_logged == 5
    assert auto[0].employee_id == 21
    assert component.completed_at is not None
    assert item.status == "Completed"
    assert item.completed_at is not None


def test_completing_without_logs_fills_whole_capacity(service, task):
    component, _ = service.apply_component_status(component_of(task).id, "Preprod_Signoff", 20)

    assert service.worklogs.sum_hours(component.id) == 15


def test_reopening_deletes_logs(service, task):
    component = component_of(task)
    service.record_worklog(component.id, 21, 10, clock.today())
    service.apply_component_status(component.id, "Live", 20)

    component, item = service.apply_component_status(component.id, "Under_Development", 20)

    assert service.list_worklogs(component.id) == []
    assert component.completed_at is None
    assert item.status == "WIP"
    assert item.completed_at is None


def test_completed_to_completed_keeps_completion_time(service, task):
    component, _ = service.apply_component_status(component_of(task).id, "Preprod_Signoff", 20)
    first = component.completed_at

    component, _ = service.apply_component_status(component.id, "Live", 20)

    assert component.completed_at == first
    assert len(service.list_worklogs(component.id)) == 1


def test_record_rejects_non_positive_hours(service, task):
    with pytest.raises(ValidationError):
        service.record_worklog(component_of(task).id, 21, 0, clock.today())


def test_record_rejects_over_capacity(service, task):
    component = component_of(task)
    service.record_worklog(component.id, 21, 10, clock.today())

    with pytest.raises(CapacityExceeded) as exc:
        service.record_worklog(component.id, 21, 6, clock.today())
    assert "remaining 5.0 hours" in exc.value.detail


def test_record_rejects_overrun_hidden_by_rounding(service, task):
    component = component_of(task)
    service.record_worklog(component.id, 21, 10, clock.today())

    with pytest.raises(CapacityExceeded):
        service.record_worklog(component.id, 21, 5.004, clock.today())

    assert service.worklogs.sum_hours(component.id) <= component.total_hours
    assert component.status == "Under_Development"
    assert task.status == "WIP"


def test_record_just_below_capacity_stays_in_progress(service, task):
    component = component_of(task)
    service.record_worklog(component.id, 21, 10, clock.today())

    service.record_worklog(component.id, 21, 4.996, clock.today())

    assert component.status == "Under_Development"
    assert component.completed_at is None


def test_edit_rejects_overrun_hidden_by_rounding(service, task):
    component = component_of(task)
    service.record_worklog(component.id, 21, 10, clock.today())
    log = service.record_worklog(component.id, 21, 2, clock.today())

    with pytest.raises(CapacityExceeded):
        service.edit_worklog(log.id, 5.004, clock.today())
    assert log.hours_logged == 2


def test_repricing_below_fractional_logged_hours_rejected(service, task, as_caller):
    component = component_of(task)
    service.record_worklog(component.id, 21, 4.004, clock.today())

    with pytest.raises(CapacityExceeded):
        service.update_item(
            as_caller(20),
            task.id,
            WorkItemUpdate(
                components=[ComponentSpec(id=component.id, type="Feature", complexity="Simple", count=2)]
            ),
        )


def test_record_on_completed_component_is_locked(service, task):
    component, _ = service.apply_component_status(component_of(task).id, "Live", 20)

    with pytest.raises(ComponentLocked):
        service.record_worklog(component.id, 21, 1, clock.today())


def test_partial_log_moves_component_in_progress(service, task):
    component = component_of(task)

    service.record_worklog(component.id, 21, 4, clock.today())

    assert component.status == "Under_Development"
    assert task.status == "WIP"


def test_log_filling_capacity_completes_component(service, task):
    component = component_of(task)

    service.record_worklog(component.id, 21, 15, clock.today())

    assert component.status == "Live"
    assert component.completed_at is not None
    assert task.status == "Completed"


def test_edit_to_exact_capacity_requires_status_transition(service, task):
    component = component_of(task)
    service.record_worklog(component.id, 21, 10, clock.today())
    log = service.record_worklog(component.id, 21, 2, clock.today())

    with pytest.raises(MustUseStatusTransition):
        service.edit_worklog(log.id, 5, clock.today())
    with pytest.raises(CapacityExceeded):
        service.edit_worklog(log.id, 6, clock.today())

    edited = service.edit_worklog(log.id, 4, clock.today(), "rework")
    assert edited.hours_logged == 4
    assert component.status == "Under_Development"


def test_edit_on_completed_component_is_locked(service, task):
    component = component_of(task)
    log = service.record_worklog(component.id, 21, 10, clock.today())
    service.apply_component_status(component.id, "Live", 20)

    with pytest.raises(ComponentLocked):
        service.edit_worklog(log.id, 1, clock.today())


def test_edit_rejects_non_positive_hours(service, task):
    log = service.record_worklog(component_of(task).id, 21, 3, clock.today())

    with pytest.raises(ValidationError):
        service.edit_worklog(log.id, -1, clock.today())


def test_deleting_only_log_returns_to_pending(service, task):
    log = service.record_worklog(component_of(task).id, 21, 5, clock.today())

    component, item = service.delete_worklog(log.id)

    assert component.status == "Pending"
    assert item.status == "Pending"


def test_deleting_log_from_full_component_reopens_it(service, task):
    component = component_of(task)
    service.record_worklog(component.id, 21, 10, clock.today())
    log = service.record_worklog(component.id, 21, 5, clock.today())

    component, item = service.delete_worklog(log.id)

    assert component.status == "Under_Development"
    assert component.completed_at is None
    assert item.status == "WIP"


def test_update_reprices_and_removes_components(service, task, as_caller):
    component = component_of(task)

    item = service.update_item(
        as_caller(20),
        task.id,
        WorkItemUpdate(
            title="Settlement report v2",
            components=[
                ComponentSpec(id=component.id, type="Feature", complexity="Simple", count=2),
                ComponentSpec(type="Report", complexity="Complex", count=1),
            ],
        ),
    )

    assert item.title == "Settlement report v2"
    assert [c.total_hours for c in item.components] == [4, 4]
    assert item.workload_hours == 8

    item = service.update_item(as_caller(20), task.id, WorkItemUpdate(components=[]))
    assert item.components == []
    assert item.status == "Pending"


def test_repricing_below_logged_hours_rejected(service, task, as_caller):
    component = component_of(task)
    service.record_worklog(component.id, 21, 10, clock.today())

    with pytest.raises(CapacityExceeded):
        service.update_item(
            as_caller(20),
            task.id,
            WorkItemUpdate(
                components=[ComponentSpec(id=component.id, type="Feature", complexity="Simple", count=1)]
            ),
        )


def test_growing_completed_component_tops_up(service, task, as_caller):
    component, _ = service.apply_component_status(component_of(task).id, "Live", 20)

    service.update_item(
        as_caller(20),
        task.id,
        WorkItemUpdate(
            components=[ComponentSpec(id=component.id, type="Feature", complexity="Medium", count=4)]
        ),
    )

    assert service.worklogs.sum_hours(component.id) == 20


def test_list_items_respects_visibility(service, task, as_caller):
    assert [i.id for i in service.list_items(as_caller(21))] == [task.id]
    assert service.list_items(as_caller(22)) == []
    assert service.list_items(as_caller(31)) == []


def test_live_issues_use_their_own_tables(db, org, effort_table, as_caller):
    service = WorkItemService(db, LIVE_ISSUE_KIND)
    issue = service.create_item(
        as_caller(20),
        WorkItemCreate(
            assigned_employee_id=22,
            title="Refund job failing",
            components=[ComponentSpec(type="Feature", complexity="Simple")],
        ),
    )

    log = service.record_worklog(issue.components[0].id, 22, 2, clock.today())

    assert log.component_id == issue.components[0].id
    assert issue.status == "Completed"
    assert WorkItemService(db, TASK_KIND).list_items(as_caller(22)) == []
