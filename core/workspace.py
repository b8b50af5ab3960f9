"""
Workspace: the loaded collections and the services that operate on them.

Wires the services around one record store and one event bus, loads
products, invoices and customers, and tracks whether the data source is
usable. A missing table anywhere marks the whole data source unavailable
and empties every collection, so the UI shows setup instructions instead of
partial data.
"""

import logging
from datetime import date
from typing import Callable

from clients.email_client import EmailGatewayClient
from clients.llm_client import LLMClient
from clients.postgres_client import PostgresClient
from clients.record_store import PostgresRecordStore, RecordStore, SchemaMissingError
from clients.vault_client import VaultError, get_database_url, get_email_config
from core.config import BillingConfig
from core.degraded_mode import DegradedModeController
from core.event_bus import EventBus
from core.handlers.payment_receipt_handler import handle_payment_recorded
from core.handlers.reminder_email_handler import handle_reminder_sent
from core.services.customer_service import CustomerService
from core.services.drafting_service import DraftingService
from core.services.invoice_service import InvoiceService
from core.services.product_service import ProductService
from core.services.reminder_service import ReminderService
from core.services.summary_service import SummaryService

logger = logging.getLogger(__name__)


class Workspace:
    """All billing services over one store."""

    def __init__(
        self,
        store: RecordStore,
        config: BillingConfig | None = None,
        llm: LLMClient | None = None,
        email_client: EmailGatewayClient | None = None,
        clock: Callable[[], date] | None = None,
        event_bus: EventBus | None = None,
    ):
        self.store = store
        self.config = config or BillingConfig()
        self.event_bus = event_bus or EventBus()
        self.data_source_available = True

        self.degraded_mode = DegradedModeController(self.event_bus)
        self.drafting = DraftingService(llm, self.config)
        self.invoices = InvoiceService(store, self.event_bus, self.config, clock)
        self.customers = CustomerService(store)
        self.products = ProductService(store)
        self.reminders = ReminderService(
            self.invoices,
            self.degraded_mode,
            self.drafting,
            self.event_bus,
            self.config,
        )
        self.summary = SummaryService(self.invoices, self.drafting)

        if email_client is not None:
            self.event_bus.subscribe(
                "ReminderSent",
                handle_reminder_sent(email_client, self.config.company_name),
            )
            self.event_bus.subscribe(
                "PaymentRecorded",
                handle_payment_recorded(
                    email_client, self.config.company_name, self.config.currency_symbol
                ),
            )

    def refresh(self, seed: bool = True) -> bool:
        """
        Load every collection from the store.

        Args:
            seed: Insert the starter catalogue when the product table is empty

        Returns:
            Whether the data source is available

        Raises:
            StoreError: Failures other than a missing table propagate
        """
        try:
            self.products.refresh()
            self.invoices.refresh()
            self.customers.refresh()
        except SchemaMissingError as e:
            logger.error(f"Data source unavailable, tables missing: {e}")
            self._set_available(False)
            self.products.clear()
            self.invoices.clear()
            self.customers.clear()
            return False

        self._set_available(True)
        if seed and not self.products.list_all():
            self.products.seed_catalog()
        return True

    def _set_available(self, available: bool) -> None:
        self.data_source_available = available
        self.reminders.data_source_available = available

    def status(self) -> dict:
        return {
            "data_source_available": self.data_source_available,
            "local_reminder_tracking": self.degraded_mode.local_tracking,
        }

    def services(self) -> dict:
        """Service map consumed by the API router factories."""
        return {
            "workspace": self,
            "invoice": self.invoices,
            "reminder": self.reminders,
            "customer": self.customers,
            "product": self.products,
            "summary": self.summary,
            "drafting": self.drafting,
        }


def build_workspace(config: BillingConfig | None = None) -> Workspace:
    """
    Workspace backed by Postgres with secrets from Vault.

    The database is required. The LLM and email gateway are optional: when
    their secrets are missing the workspace runs with template text and no
    outgoing email.
    """
    config = config or BillingConfig()
    store = PostgresRecordStore(PostgresClient(get_database_url()))

    try:
        llm = LLMClient(model=config.llm_model)
    except (VaultError, PermissionError, KeyError, ValueError) as e:
        logger.warning(f"LLM unavailable, using template text: {e}")
        llm = None

    try:
        email_client = EmailGatewayClient(**get_email_config())
    except (VaultError, PermissionError, KeyError, ValueError) as e:
        logger.warning(f"Email gateway unavailable, reminders will not be emailed: {e}")
        email_client = None

    workspace = Workspace(store, config, llm=llm, email_client=email_client)
    workspace.refresh()
    return workspace
