"""Core domain models."""

from core.models.invoice import (
    CAMEL_CASE,
    PAID_TOLERANCE,
    Company,
    Invoice,
    InvoiceCreate,
    InvoiceItem,
    PaymentStatus,
    compute_balance,
    payment_status,
)
from core.models.customer import Customer, CustomerCreate, CustomerUpdate, Gender
from core.models.product import Product, ProductCreate, ProductUpdate

__all__ = [
    # Invoice
    "Invoice", "InvoiceCreate", "InvoiceItem", "PaymentStatus", "Company",
    "compute_balance", "payment_status", "PAID_TOLERANCE", "CAMEL_CASE",
    # Customer
    "Customer", "CustomerCreate", "CustomerUpdate", "Gender",
    # Product
    "Product", "ProductCreate", "ProductUpdate",
]
