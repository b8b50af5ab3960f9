"""Product catalogue models.

Prices are per unit (square metre, piece, hour) and kept as Decimal.
"""

from decimal import Decimal

from pydantic import BaseModel, Field

from core.models.invoice import CAMEL_CASE


class ProductCreate(BaseModel):
    """Data required to create a catalogue entry."""

    model_config = CAMEL_CASE

    id: str | None = Field(None, max_length=50)  # supplier code, generated when absent
    name: str = Field(..., min_length=1, max_length=255)
    description: str = Field("", max_length=1000)
    price: Decimal = Field(..., ge=0)
    unit: str = Field("pcs", min_length=1, max_length=20)
    category: str = Field("General", max_length=100)


class ProductUpdate(BaseModel):
    """Data that can be updated on a product. All fields optional."""

    model_config = CAMEL_CASE

    name: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = Field(None, max_length=1000)
    price: Decimal | None = Field(None, ge=0)
    unit: str | None = Field(None, min_length=1, max_length=20)
    category: str | None = Field(None, max_length=100)


class Product(BaseModel):
    """Full product entity as stored."""

    model_config = CAMEL_CASE

    id: str
    name: str
    description: str = ""
    price: Decimal
    unit: str
    category: str = "General"

    def to_record(self) -> dict:
        return self.model_dump(mode="json")
