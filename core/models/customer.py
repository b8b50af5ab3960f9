"""Customer (contact) domain models.

Invoices copy the customer's contact details when they are issued, so
nothing here cascades to invoices.
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field, EmailStr, field_validator

from core.models.invoice import CAMEL_CASE


class Gender(str, Enum):
    MALE = "Male"
    FEMALE = "Female"
    OTHER = "Other"


class CustomerCreate(BaseModel):
    """Data required to create a customer."""

    model_config = CAMEL_CASE

    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr | None = None
    phone: str | None = Field(None, max_length=50)
    gender: Gender | None = None
    address: str | None = Field(None, max_length=500)
    city: str | None = Field(None, max_length=100)
    postal_code: str | None = Field(None, max_length=20)
    country: str | None = Field(None, max_length=100)
    company: str | None = Field(None, max_length=255)
    notes: str | None = Field(None, max_length=10000)
    tags: list[str] = Field(default_factory=list)
    created_by: str | None = None

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Customer name must not be blank")
        return v.strip()

    @field_validator("email", mode="before")
    @classmethod
    def empty_email_is_none(cls, v):
        # The builder form posts "" for an untouched email box
        return v or None


class CustomerUpdate(BaseModel):
    """Data that can be updated on a customer. All fields optional."""

    model_config = CAMEL_CASE

    name: str | None = Field(None, min_length=1, max_length=255)
    email: EmailStr | None = None
    phone: str | None = Field(None, max_length=50)
    gender: Gender | None = None
    address: str | None = Field(None, max_length=500)
    city: str | None = Field(None, max_length=100)
    postal_code: str | None = Field(None, max_length=20)
    country: str | None = Field(None, max_length=100)
    company: str | None = Field(None, max_length=255)
    notes: str | None = Field(None, max_length=10000)
    tags: list[str] | None = None


class Customer(BaseModel):
    """Full customer entity as stored."""

    model_config = CAMEL_CASE

    id: str
    name: str
    email: str | None = None
    phone: str | None = None
    gender: Gender | None = None
    address: str | None = None
    city: str | None = None
    postal_code: str | None = None
    country: str | None = None
    company: str | None = None
    notes: str | None = None
    tags: list[str] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime
    created_by: str | None = None

    @field_validator("tags", mode="before")
    @classmethod
    def null_tags_are_empty(cls, v):
        return v or []

    @property
    def display_address(self) -> str:
        """Single-line postal address for documents."""
        parts = [p for p in [self.address, self.city, self.postal_code, self.country] if p]
        return ", ".join(parts)

    def to_record(self) -> dict:
        return self.model_dump(mode="json")
