from dataclasses import dataclass

from core.api_client import ApiClient
from core.query_cache import QueryKey, REFERENCE_POLICY, STATS_POLICY
from core.time_utils import format_api_date
from models.bill import Bill, HospitalService

PAYMENT_STATUSES = ("Pending", "Partially Paid", "Paid", "Overdue", "Cancelled")
PAYMENT_METHODS = ("Cash", "Card", "Insurance", "Bank Transfer")


def bills_key(payment_status: str | None = None) -> QueryKey:
    return QueryKey.build("bills", paymentStatus=payment_status)


def bill_key(bill_id) -> QueryKey:
    return QueryKey.build("bill", int(bill_id))


def _parse(rows) -> list[Bill]:
    return [Bill.model_validate(r) for r in rows or []]


def fetch_bills(api: ApiClient, payment_status: str | None = None, limit=None, newest_first=False) -> list[Bill]:
    params = {"paymentStatus": payment_status, "limit": limit}
    if newest_first:
        params.update(sortBy="bill_date", order="DESC")
    return _parse(api.get("/bill", params=params))


def fetch_bill(api: ApiClient, bill_id) -> Bill:
    return Bill.model_validate(api.get(f"/bill/{int(bill_id)}"))


def list_bills(ctx, payment_status: str | None = None):
    return ctx.cache.fetch(bills_key(payment_status), lambda: fetch_bills(ctx.api, payment_status))


def load_bill(ctx, bill_id):
    return ctx.cache.fetch(bill_key(bill_id), lambda: fetch_bill(ctx.api, bill_id), enabled=bill_id is not None)


def recent_pending_bills(ctx, limit: int = 5):
    return ctx.cache.fetch(
        QueryKey.build("bills", "recent", paymentStatus="Pending", limit=limit),
        lambda: fetch_bills(ctx.api, "Pending", limit=limit, newest_first=True),
    )


def list_services(ctx):
    def fetch():
        return [HospitalService.model_validate(r) for r in ctx.api.get("/service") or []]
    return ctx.cache.fetch(QueryKey.build("services"), fetch, policy=REFERENCE_POLICY)


# ------------------------------------------
# Billing dashboard counters
# ------------------------------------------
@dataclass
class BillingStats:
    pending_bills: int = 0
    overdue_bills: int = 0
    payments_today: float = 0.0
    total_outstanding: float = 0.0


def total_outstanding(bills: list[Bill]) -> float:
    return round(sum(b.outstanding for b in bills), 2)


def fetch_billing_stats(api: ApiClient) -> BillingStats:
    pending = fetch_bills(api, "Pending")
    overdue = fetch_bills(api, "Overdue")
    summary = api.get("/payment/summary") or {}
    return BillingStats(
        pending_bills=len(pending),
        overdue_bills=len(overdue),
        payments_today=float(summary.get("totalAmountToday") or 0),
        total_outstanding=total_outstanding(pending),
    )


def billing_stats(ctx):
    return ctx.cache.fetch(QueryKey.build("billingStats"), lambda: fetch_billing_stats(ctx.api), policy=STATS_POLICY)


# ------------------------------------------
# Mutations
# ------------------------------------------
def generate_bill(ctx, values: dict):
    payload = {
        "patient_id": int(values["patient_id"]),
        "total_amount": round(float(values["total_amount"]), 2),
        "bill_date": format_api_date(values.get("bill_date")),
        "due_date": format_api_date(values.get("due_date")),
    }
    return ctx.cache.mutate(
        "generate_bill",
        lambda: ctx.api.post("/bill", json=payload),
        invalidate=[QueryKey.build("bills"), QueryKey.build("billingStats")],
        fallback_message="Failed to generate bill.",
    )


def record_payment(ctx, values: dict):
    bill_id = int(values["bill_id"])
    payload = {
        "bill_id": bill_id,
        "amount": round(float(values["amount"]), 2),
        "payment_method": values["payment_method"],
    }
    return ctx.cache.mutate(
        f"record_payment:{bill_id}",
        lambda: ctx.api.post("/payment", json=payload),
        invalidate=[QueryKey.build("bills"), bill_key(bill_id), QueryKey.build("billingStats")],
        fallback_message="Failed to record payment.",
    )
