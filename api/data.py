"""GET /api/data: unified read endpoint."""

from datetime import date

from fastapi import APIRouter, Query, Request

from api.base import success_response, to_json, to_json_list
from utils.timezone import days_between


VALID_TYPES = {"invoices", "customers", "products"}


def create_data_router(services: dict) -> APIRouter:
    router = APIRouter()

    workspace = services["workspace"]
    invoice_svc = services["invoice"]
    reminder_svc = services["reminder"]
    customer_svc = services["customer"]
    product_svc = services["product"]
    summary_svc = services["summary"]

    def respond(request: Request, data) -> dict:
        request_id = getattr(request.state, "request_id", None)
        return success_response(data, request_id).model_dump(mode="json")

    # -------------------------------------------------------------------------
    # Convenience routes (must be registered before the generic /data route)
    # -------------------------------------------------------------------------

    @router.get("/data/status")
    async def status(request: Request):
        return respond(request, {
            "dataSourceAvailable": workspace.data_source_available,
            "localReminderTracking": workspace.degraded_mode.local_tracking,
        })

    @router.get("/data/reminders")
    async def reminders(request: Request):
        today = reminder_svc.today()
        data = []
        for invoice in reminder_svc.candidates():
            last_sent = reminder_svc.last_sent(invoice)
            entry = to_json(invoice)
            entry["lastSent"] = last_sent.isoformat() if last_sent else None
            entry["sentToday"] = last_sent == today
            entry["daysUntilDue"] = days_between(today, invoice.due_date)
            data.append(entry)
        return respond(request, data)

    @router.get("/data/activity")
    async def activity(request: Request):
        return respond(request, reminder_svc.activity())

    @router.get("/data/summary")
    async def summary(request: Request, insights: bool = Query(False)):
        figures = summary_svc.summary()
        data = {
            "revenue": str(figures.revenue),
            "outstanding": str(figures.outstanding),
            "paidCount": figures.paid_count,
            "overdueCount": figures.overdue_count,
            "totalCount": figures.total_count,
        }
        if insights:
            data["insights"] = summary_svc.insights()
        return respond(request, data)

    @router.get("/data/calendar")
    async def calendar(
        request: Request,
        start: date | None = Query(None),
        end: date | None = Query(None),
    ):
        days = summary_svc.group_by_due_date(start, end)
        return respond(request, [
            {
                "date": day.day.isoformat(),
                "total": str(day.total),
                "balanceDue": str(day.balance_due),
                "hasOverdue": day.has_overdue,
                "invoices": to_json_list(day.invoices),
            }
            for day in days
        ])

    # -------------------------------------------------------------------------
    # Generic data endpoint
    # -------------------------------------------------------------------------

    @router.get("/data")
    async def get_data(
        request: Request,
        type: str | None = Query(None),
        id: str | None = Query(None),
        q: str | None = Query(None),
    ):
        if type is None:
            raise ValueError("'type' query parameter is required")

        if type not in VALID_TYPES:
            raise ValueError(f"Unknown type '{type}'. Valid types: {', '.join(sorted(VALID_TYPES))}")

        if type == "invoices":
            if q and not id:
                return respond(request, to_json_list(invoice_svc.search(q)))
            return respond(request, _handle_collection(invoice_svc, "Invoice", id))

        if type == "customers":
            return respond(request, _handle_collection(customer_svc, "Customer", id))

        if type == "products":
            return respond(request, _handle_collection(product_svc, "Product", id))

    return router


def _handle_collection(service, label: str, id: str | None):
    if id:
        entity = service.get_by_id(id)
        if entity is None:
            raise ValueError(f"{label} {id} not found")
        return to_json(entity)

    return to_json_list(service.list_all())
