import streamlit as st

from core.helpers import page_shell, render_footer, show_query_error
from core.query_cache import TASK_BOARD_POLICY
from core.status import AssignmentStatus
from services import assignment_service
from views.widgets import profile_not_linked, render_task_board

# Page config is set globally in app.py

ctx = page_shell("/assignments/my-tasks")

staff_id = ctx.user.linked_staff_id
if staff_id is None:
    profile_not_linked(ctx.user.role)
    st.stop()

status = st.selectbox(
    "Status",
    [s.value for s in AssignmentStatus],
    index=None,
    placeholder="All statuses",
)


@st.fragment(run_every=TASK_BOARD_POLICY.refetch_interval)
def task_list():
    result = assignment_service.my_tasks(ctx, staff_id, status)
    if show_query_error(result, "My Tasks"):
        return
    tasks = result.data or []
    st.caption(f"{len(tasks)} task(s)")
    render_task_board(ctx, tasks, staff_id, "my_tasks", "No tasks assigned to you.")


task_list()

render_footer()
