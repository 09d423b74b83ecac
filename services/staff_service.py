from dataclasses import dataclass

from core.api_client import ApiClient
from core.query_cache import QueryKey, REFERENCE_POLICY, STATS_POLICY
from core.time_utils import today_str
from models.staff import Doctor, Nurse, WardBoy
from models.user import SystemUser
from services.room_service import fetch_rooms, occupied_beds


def active_doctors_key() -> QueryKey:
    return QueryKey.build("activeDoctors")


def fetch_active_doctors(api: ApiClient) -> list[Doctor]:
    rows = api.get("/doctor", params={"is_active": "true"}) or []
    return [Doctor.model_validate(r) for r in rows]


def fetch_active_nurses(api: ApiClient) -> list[Nurse]:
    rows = api.get("/nurse", params={"is_active": "true"}) or []
    return [Nurse.model_validate(r) for r in rows]


def fetch_active_ward_boys(api: ApiClient) -> list[WardBoy]:
    rows = api.get("/wardboy", params={"is_active": "true"}) or []
    return [WardBoy.model_validate(r) for r in rows]


def fetch_users(api: ApiClient) -> list[SystemUser]:
    rows = api.get("/users") or []
    return [SystemUser.model_validate(r) for r in rows]


def active_doctors(ctx):
    """Doctor picker; reference data, cached for 10 minutes without refocus."""
    return ctx.cache.fetch(active_doctors_key(), lambda: fetch_active_doctors(ctx.api), policy=REFERENCE_POLICY)


def active_nurses(ctx):
    return ctx.cache.fetch(QueryKey.build("activeNurses"), lambda: fetch_active_nurses(ctx.api),
                           policy=REFERENCE_POLICY)


def active_ward_boys(ctx):
    return ctx.cache.fetch(QueryKey.build("activeWardBoys"), lambda: fetch_active_ward_boys(ctx.api),
                           policy=REFERENCE_POLICY)


def list_users(ctx):
    return ctx.cache.fetch(QueryKey.build("users"), lambda: fetch_users(ctx.api))


# ------------------------------------------
# Admin dashboard counters
# ------------------------------------------
@dataclass
class AdminStats:
    total_users: int = 0
    total_patients: int = 0
    total_doctors: int = 0
    total_nurses: int = 0
    total_ward_boys: int = 0
    total_rooms: int = 0
    occupied_beds: int = 0
    appointments_today: int = 0
    active_admissions: int = 0


def fetch_admin_stats(api: ApiClient) -> AdminStats:
    today = today_str()
    rooms = fetch_rooms(api)
    return AdminStats(
        total_users=len(api.get("/users") or []),
        total_patients=len(api.get("/patient") or []),
        total_doctors=len(fetch_active_doctors(api)),
        total_nurses=len(fetch_active_nurses(api)),
        total_ward_boys=len(fetch_active_ward_boys(api)),
        total_rooms=len(rooms),
        occupied_beds=occupied_beds(rooms),
        appointments_today=len(api.get("/appointment", params={"dateFrom": today, "dateTo": today}) or []),
        active_admissions=len(api.get("/admission", params={"status": "active"}) or []),
    )


def admin_stats(ctx):
    return ctx.cache.fetch(QueryKey.build("adminStats"), lambda: fetch_admin_stats(ctx.api), policy=STATS_POLICY)
