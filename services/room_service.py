from core.api_client import ApiClient
from core.query_cache import QueryKey
from models.admission import Room


def rooms_key() -> QueryKey:
    return QueryKey.build("rooms")


def available_rooms_key() -> QueryKey:
    return QueryKey.build("availableRooms")


def fetch_rooms(api: ApiClient) -> list[Room]:
    rows = api.get("/room", params={"is_active": "true"}) or []
    return [Room.model_validate(r) for r in rows]


def list_rooms(ctx):
    return ctx.cache.fetch(rooms_key(), lambda: fetch_rooms(ctx.api))


def room_choices(ctx):
    """Active rooms for the admission form; full rooms are listed but not selectable."""
    return ctx.cache.fetch(available_rooms_key(), lambda: fetch_rooms(ctx.api))


def occupied_beds(rooms: list[Room]) -> int:
    return sum(r.current_occupancy or 0 for r in rooms)
