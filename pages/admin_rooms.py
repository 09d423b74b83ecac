import streamlit as st

from core.helpers import page_shell, render_footer, show_query_error
from services import room_service

# Page config is set globally in app.py

ctx = page_shell("/admin/rooms")

result = room_service.list_rooms(ctx)
if show_query_error(result, "Rooms"):
    st.stop()

rooms = result.data or []
total_beds = sum(r.capacity for r in rooms)
c1, c2, c3 = st.columns(3)
c1.metric("Rooms", len(rooms))
c2.metric("Occupied Beds", room_service.occupied_beds(rooms))
c3.metric("Free Beds", max(0, total_beds - room_service.occupied_beds(rooms)))

st.dataframe(
    [
        {
            "Room": r.room_number,
            "Type": r.room_type or "General",
            "Capacity": r.capacity,
            "Occupied": r.current_occupancy,
            "Status": "Full" if r.is_full else "Available",
        }
        for r in rooms
    ],
    use_container_width=True,
    hide_index=True,
)

render_footer()
