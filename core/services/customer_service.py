"""
Customer service for CRUD operations.

Customers are independent of invoices: an invoice keeps its own copy of the
contact details, so updating or deleting a customer never touches invoices.
"""

import logging
from uuid import uuid4

from clients.record_store import RecordStore
from core.models import Customer, CustomerCreate, CustomerUpdate
from utils.timezone import now_utc

logger = logging.getLogger(__name__)

_ENTITY = "customer"


class CustomerService:
    """Service for customer operations."""

    def __init__(self, store: RecordStore):
        self.store = store
        self._customers: list[Customer] = []

    def refresh(self) -> list[Customer]:
        """
        Reload customers from the store, ordered by name.

        Raises:
            SchemaMissingError: If the customers table does not exist
        """
        rows = self.store.get(_ENTITY)
        self._customers = [Customer.model_validate(row) for row in rows]
        return self.list_all()

    def clear(self) -> None:
        self._customers = []

    def list_all(self) -> list[Customer]:
        return list(self._customers)

    def get_by_id(self, customer_id: str) -> Customer | None:
        return next((c for c in self._customers if c.id == customer_id), None)

    def create(self, data: CustomerCreate) -> Customer:
        """
        Create a new customer.

        Args:
            data: Customer creation data

        Returns:
            Created customer
        """
        now = now_utc()
        customer = Customer(
            id=str(uuid4()),
            created_at=now,
            updated_at=now,
            **data.model_dump(),
        )

        self.store.insert(_ENTITY, customer.to_record())
        self._customers.append(customer)
        self._customers.sort(key=lambda c: c.name.lower())

        logger.info(f"Customer created: {customer.name}")
        return customer

    def update(self, customer_id: str, data: CustomerUpdate) -> Customer:
        """
        Update customer fields.

        Args:
            customer_id: Customer ID
            data: Fields to update (only fields that were set are changed)

        Returns:
            Updated customer

        Raises:
            ValueError: If customer not found
        """
        current = self.get_by_id(customer_id)
        if current is None:
            raise ValueError(f"Customer {customer_id} not found")

        updates = data.model_dump(exclude_unset=True)
        if updates.get("name", "") is None:
            del updates["name"]
        if not updates:
            return current

        updates["updated_at"] = now_utc()
        updated = current.model_copy(update=updates)
        record = updated.to_record()

        self.store.update(_ENTITY, customer_id, {k: record[k] for k in updates})

        index = self._customers.index(current)
        self._customers[index] = updated
        self._customers.sort(key=lambda c: c.name.lower())
        return updated

    def delete(self, customer_id: str) -> None:
        """
        Delete a customer. Their invoices are left as they are.

        Raises:
            ValueError: If customer not found
        """
        current = self.get_by_id(customer_id)
        if current is None:
            raise ValueError(f"Customer {customer_id} not found")

        self.store.delete(_ENTITY, customer_id)
        self._customers.remove(current)
        logger.info(f"Customer deleted: {current.name}")
