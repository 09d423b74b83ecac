from datetime import date, datetime, timezone

API_DATETIME_FORMAT = "%Y-%m-%dT%H:%M:%S"
API_DATE_FORMAT = "%Y-%m-%d"


def now_local() -> datetime:
    """Naive local wall-clock time, the same clock the forms submit in."""
    return datetime.now().replace(microsecond=0)


def today_str() -> str:
    return date.today().strftime(API_DATE_FORMAT)


def format_api_datetime(dt: datetime | None) -> str | None:
    """Serialize a datetime the way the API expects (no offset, seconds precision)."""
    if dt is None:
        return None
    return dt.strftime(API_DATETIME_FORMAT)


def format_api_date(d: date | datetime | None) -> str | None:
    if d is None:
        return None
    return d.strftime(API_DATE_FORMAT)


def parse_api_datetime(value) -> datetime | None:
    """Parse an ISO-ish timestamp from the API; returns None when unparseable."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    text = str(value).replace("Z", "+00:00")
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def display_datetime(value) -> str:
    dt = parse_api_datetime(value)
    if dt is None:
        return "—"
    return dt.strftime("%b %d, %Y %H:%M")


def display_date(value) -> str:
    dt = parse_api_datetime(value)
    if dt is None:
        return "—"
    return dt.strftime("%b %d, %Y")


def sort_key_datetime(value) -> float:
    """Sort helper: unparseable timestamps sort first."""
    dt = parse_api_datetime(value)
    if dt is None:
        return float("-inf")
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.timestamp()
