from core.api_client import ApiClient
from core.query_cache import MutationResult, QueryKey, TASK_BOARD_POLICY
from core.status import ASSIGNMENT_FLOW, AssignmentStatus, InvalidTransition
from core.time_utils import format_api_datetime, now_local, sort_key_datetime
from models.assignment import Assignment

ACTIVE_STATUSES = (AssignmentStatus.PENDING.value, AssignmentStatus.IN_PROGRESS.value)
_STATUS_ORDER = {AssignmentStatus.PENDING.value: 0, AssignmentStatus.IN_PROGRESS.value: 1}


def my_assignments_key(staff_id, status: str | None = None) -> QueryKey:
    return QueryKey.build("myAssignments", staff_id, status=status)


def my_active_assignments_key(staff_id) -> QueryKey:
    return QueryKey.build("myActiveAssignments", staff_id)


def sort_tasks(tasks: list[Assignment]) -> list[Assignment]:
    """Earliest start first; on ties Pending comes before In Progress."""
    return sorted(
        tasks,
        key=lambda a: (sort_key_datetime(a.assignment_start_datetime), _STATUS_ORDER.get(a.status, 2)),
    )


def fetch_my_tasks(api: ApiClient, status: str | None = None) -> list[Assignment]:
    # The server scopes /my-tasks to the staff id in the bearer token
    rows = api.get("/assignment/my-tasks", params={"status": status}) or []
    return sort_tasks([Assignment.model_validate(r) for r in rows])


def fetch_my_active_tasks(api: ApiClient) -> list[Assignment]:
    return [t for t in fetch_my_tasks(api) if t.status in ACTIVE_STATUSES]


def my_tasks(ctx, staff_id, status: str | None = None):
    return ctx.cache.fetch(
        my_assignments_key(staff_id, status),
        lambda: fetch_my_tasks(ctx.api, status),
        policy=TASK_BOARD_POLICY,
        enabled=staff_id is not None,
    )


def my_active_tasks(ctx, staff_id):
    return ctx.cache.fetch(
        my_active_assignments_key(staff_id),
        lambda: fetch_my_active_tasks(ctx.api),
        policy=TASK_BOARD_POLICY,
        enabled=staff_id is not None,
    )


def status_payload(target: AssignmentStatus, now=None) -> dict:
    payload = {"status": target.value}
    if target is AssignmentStatus.COMPLETED:
        payload["end_datetime"] = format_api_datetime(now or now_local())
    return payload


def change_status(ctx, task: Assignment, target, staff_id) -> MutationResult:
    try:
        target = ASSIGNMENT_FLOW.validate(task.status, target)
    except InvalidTransition as e:
        return MutationResult(ok=False, error=str(e))

    return ctx.cache.mutate(
        f"assignment_status:{task.assignment_id}",
        lambda: ctx.api.put(f"/assignment/{task.assignment_id}/status", json=status_payload(target)),
        invalidate=[
            QueryKey.build("myAssignments", staff_id),
            my_active_assignments_key(staff_id),
        ],
        fallback_message=f"Failed to update task {task.assignment_id} status.",
    )


def create_assignment(ctx, values: dict) -> MutationResult:
    role, staff_id = values["staff"]
    payload = {
        "patient_id": int(values["patient_id"]),
        "room_id": int(values["room_id"]) if values.get("room_id") not in (None, "") else None,
        "task_description": values["task_description"].strip(),
        "assignment_start_datetime": format_api_datetime(values.get("assignment_start_datetime")),
        "assignment_end_datetime": format_api_datetime(values.get("assignment_end_datetime")),
        "status": AssignmentStatus.PENDING.value,
    }
    payload["nurse_id" if role == "Nurse" else "ward_boy_id"] = int(staff_id)
    return ctx.cache.mutate(
        "create_assignment",
        lambda: ctx.api.post("/assignment", json=payload),
        invalidate=[QueryKey.build("myAssignments"), QueryKey.build("myActiveAssignments")],
        fallback_message="Failed to create assignment.",
    )
