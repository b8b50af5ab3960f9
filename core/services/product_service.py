"""
Product service for the glass and mirror catalogue.

Prices are per unit (mostly square metres). Invoice lines copy the price at
the time they are built, so repricing a product never changes an invoice.
"""

import logging
from decimal import Decimal
from uuid import uuid4

from clients.record_store import RecordStore
from core.models import Product, ProductCreate, ProductUpdate

logger = logging.getLogger(__name__)

_ENTITY = "product"

# (supplier code, name, price per sqm, category)
STARTER_CATALOG = (
    ("04P", "4MM CLEAR POLISHED", "27.06", "Clear Glass"),
    ("06", "6MM CLEAR", "33.20", "Clear Glass"),
    ("06P", "6MM CLEAR POLISHED", "37.30", "Clear Glass"),
    ("10P", "10MM CLEAR POLISHED", "54.48", "Clear Glass"),
    ("B06P", "6MM TINTED POL", "44.91", "Tinted"),
    ("COG06", "6mm COG TOUGH", "24.64", "Toughened"),
    ("T04", "4mm CLEAR TOUGH", "30.12", "Toughened"),
    ("T06", "6mm CLEAR TOUGH", "39.80", "Toughened"),
    ("TOW06", "6MM LOW IRON TOUGH", "47.09", "Toughened"),
    ("L084", "8.4MM LAMINATED", "67.44", "Laminated"),
    ("LAM6.8A", "6.8MM TEGO ACOUS LAM", "93.23", "Laminated"),
    ("P041", "4mm OBSCURE GROUP 1", "41.68", "Obscure"),
    ("PYR07GRD", "7MM PYROGUARD", "185.00", "Fire Resistant"),
    ("SOW6MM", "6MM SILVER LOW IRON", "63.43", "Mirrors"),
    ("S06BLACKANTQPOL", "6MM BLACK ANTIQUE MIRROR POL", "149.44", "Mirrors"),
    ("W07CAST", "7mm WIRED CAST GLASS", "60.03", "Wired"),
)


def starter_products() -> list[Product]:
    return [
        Product(
            id=code,
            name=name,
            description=f"Code: {code} - Single",
            price=Decimal(price),
            unit="sqm",
            category=category,
        )
        for code, name, price, category in STARTER_CATALOG
    ]


class ProductService:
    """Service for product catalogue operations."""

    def __init__(self, store: RecordStore):
        self.store = store
        self._products: list[Product] = []

    def refresh(self) -> list[Product]:
        """
        Reload products from the store, ordered by name.

        Raises:
            SchemaMissingError: If the products table does not exist
        """
        rows = self.store.get(_ENTITY)
        self._products = [Product.model_validate(row) for row in rows]
        return self.list_all()

    def clear(self) -> None:
        self._products = []

    def list_all(self) -> list[Product]:
        return list(self._products)

    def get_by_id(self, product_id: str) -> Product | None:
        return next((p for p in self._products if p.id == product_id), None)

    def seed_catalog(self) -> int:
        """
        Insert the starter catalogue when no products are loaded.

        Returns:
            Number of products inserted (0 if the catalogue was not empty)
        """
        if self._products:
            return 0

        products = starter_products()
        for product in products:
            self.store.insert(_ENTITY, product.to_record())

        logger.info(f"Empty catalogue seeded with {len(products)} products")
        return len(self.refresh())

    def create(self, data: ProductCreate) -> Product:
        """
        Add a product to the catalogue.

        Raises:
            ValueError: If a product with the same code already exists
        """
        product_id = data.id or str(uuid4())
        if self.get_by_id(product_id) is not None:
            raise ValueError(f"Product {product_id} already exists")

        product = Product(**data.model_dump(exclude={"id"}), id=product_id)
        self.store.insert(_ENTITY, product.to_record())

        self._products.append(product)
        self._products.sort(key=lambda p: p.name.lower())
        logger.info(f"Product created: {product.name}")
        return product

    def update(self, product_id: str, data: ProductUpdate) -> Product:
        """
        Update product fields.

        Raises:
            ValueError: If product not found
        """
        current = self.get_by_id(product_id)
        if current is None:
            raise ValueError(f"Product {product_id} not found")

        updates = data.model_dump(exclude_none=True)
        if not updates:
            return current

        updated = current.model_copy(update=updates)
        record = updated.to_record()
        self.store.update(_ENTITY, product_id, {k: record[k] for k in updates})

        self._products[self._products.index(current)] = updated
        self._products.sort(key=lambda p: p.name.lower())
        return updated

    def delete(self, product_id: str) -> None:
        """
        Remove a product. Invoice lines that used it keep their copy.

        Raises:
            ValueError: If product not found
        """
        current = self.get_by_id(product_id)
        if current is None:
            raise ValueError(f"Product {product_id} not found")

        self.store.delete(_ENTITY, product_id)
        self._products.remove(current)
        logger.info(f"Product deleted: {current.name}")
