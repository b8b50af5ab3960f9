"""POST /api/actions: unified mutation endpoint."""

from dataclasses import asdict

from fastapi import APIRouter, Request
from pydantic import BaseModel

from api.base import success_response, to_json
from core.models import (
    CustomerCreate, CustomerUpdate,
    InvoiceCreate,
    ProductCreate, ProductUpdate,
)


class ActionRequest(BaseModel):
    domain: str
    action: str
    data: dict = {}


def create_actions_router(services: dict) -> APIRouter:
    router = APIRouter()

    handlers = {
        "invoice": InvoiceHandler(services["invoice"], services["reminder"], services["drafting"]),
        "reminder": ReminderHandler(services["reminder"]),
        "customer": CustomerHandler(services["customer"]),
        "product": ProductHandler(services["product"], services["drafting"]),
        "workspace": WorkspaceHandler(services["workspace"]),
    }

    @router.post("/actions")
    async def perform_action(request: Request, body: ActionRequest):
        handler = handlers.get(body.domain)
        if handler is None:
            raise ValueError(
                f"Unknown domain '{body.domain}'. "
                f"Valid domains: {', '.join(sorted(handlers.keys()))}"
            )

        if body.action not in handler.ALLOWED_ACTIONS:
            raise ValueError(
                f"Action '{body.action}' not allowed on '{body.domain}'. "
                f"Allowed: {', '.join(sorted(handler.ALLOWED_ACTIONS))}"
            )

        method = getattr(handler, f"_handle_{body.action}")
        result = method(dict(body.data))
        request_id = getattr(request.state, "request_id", None)
        return success_response(result, request_id).model_dump(mode="json")

    return router


def _require(data: dict, key: str):
    value = data.get(key)
    if value is None or value == "":
        raise ValueError(f"'{key}' is required")
    return value


# =============================================================================
# HANDLER CLASSES
# =============================================================================


class InvoiceHandler:
    ALLOWED_ACTIONS = {"create", "record_payment", "delete", "send_reminder", "draft_notes"}

    def __init__(self, service, reminders, drafting):
        self.service = service
        self.reminders = reminders
        self.drafting = drafting

    def _handle_create(self, data: dict):
        invoice = self.service.create(InvoiceCreate(**data))
        return to_json(invoice)

    def _handle_record_payment(self, data: dict):
        invoice = self.service.record_payment(_require(data, "id"), _require(data, "amount"))
        return to_json(invoice)

    def _handle_delete(self, data: dict):
        self.service.delete(_require(data, "id"))
        return {"deleted": True}

    def _handle_send_reminder(self, data: dict):
        dispatch = self.reminders.send_manual_reminder(_require(data, "id"))
        return {
            "invoiceId": dispatch.invoice_id,
            "recipient": dispatch.recipient,
            "message": dispatch.message,
            "trackedLocally": dispatch.tracked_locally,
        }

    def _handle_draft_notes(self, data: dict):
        notes = self.drafting.draft_invoice_notes(
            data.get("customerName", ""),
            data.get("itemsDescription", ""),
        )
        return {"notes": notes}


class ReminderHandler:
    ALLOWED_ACTIONS = {"scan"}

    def __init__(self, service):
        self.service = service

    def _handle_scan(self, data: dict):
        report = asdict(self.service.run_automatic_scan())
        report["day"] = report["day"].isoformat()
        report["localTracking"] = report.pop("local_tracking")
        return report


class CustomerHandler:
    ALLOWED_ACTIONS = {"create", "update", "delete"}

    def __init__(self, service):
        self.service = service

    def _handle_create(self, data: dict):
        customer = self.service.create(CustomerCreate(**data))
        return to_json(customer)

    def _handle_update(self, data: dict):
        customer_id = _require(data, "id")
        data.pop("id")
        customer = self.service.update(customer_id, CustomerUpdate(**data))
        return to_json(customer)

    def _handle_delete(self, data: dict):
        self.service.delete(_require(data, "id"))
        return {"deleted": True}


class ProductHandler:
    ALLOWED_ACTIONS = {"create", "update", "delete", "draft_description"}

    def __init__(self, service, drafting):
        self.service = service
        self.drafting = drafting

    def _handle_create(self, data: dict):
        product = self.service.create(ProductCreate(**data))
        return to_json(product)

    def _handle_update(self, data: dict):
        product_id = _require(data, "id")
        data.pop("id")
        product = self.service.update(product_id, ProductUpdate(**data))
        return to_json(product)

    def _handle_delete(self, data: dict):
        self.service.delete(_require(data, "id"))
        return {"deleted": True}

    def _handle_draft_description(self, data: dict):
        return {"description": self.drafting.draft_product_description(_require(data, "name"))}


class WorkspaceHandler:
    ALLOWED_ACTIONS = {"refresh"}

    def __init__(self, workspace):
        self.workspace = workspace

    def _handle_refresh(self, data: dict):
        self.workspace.refresh()
        status = self.workspace.status()
        return {
            "dataSourceAvailable": status["data_source_available"],
            "localReminderTracking": status["local_reminder_tracking"],
        }
