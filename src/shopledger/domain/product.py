"""Product (inventory) domain service."""

import logging
from decimal import Decimal
from typing import Optional

from shopledger.database.base import Database
from shopledger.domain import validation
from shopledger.domain.counters import CounterAdjuster, select_counter_adjuster
from shopledger.domain.entities import Product as ProductEntity
from shopledger.domain.errors import (
    ConflictError,
    DependencyError,
    NotFoundError,
    ValidationError,
    duplicate_sku,
    product_delete_blocked,
    product_not_found,
)

logger = logging.getLogger(__name__)


class ProductService:
    """Service for managing products and manual stock adjustments."""

    def __init__(self, db: Database, counters: Optional[CounterAdjuster] = None):
        """Initialize product service.

        Args:
            db: Database instance
            counters: Counter adjuster; picked by capability detection if omitted
        """
        self.db = db
        self.counters = counters or select_counter_adjuster(db)

    def create_product(
        self,
        sku: str,
        name: str,
        description: Optional[str] = None,
        unit_price: Decimal = Decimal("0"),
        price: Decimal = Decimal("0"),
        stock_level: int = 0,
        reorder_level: int = 10,
    ) -> int:
        """Create a new product.

        Args:
            sku: Unique stock keeping unit
            name: Display name
            description: Optional description
            unit_price: Latest cost price
            price: Selling price
            stock_level: Units on hand
            reorder_level: Low-stock threshold

        Returns:
            Product ID

        Raises:
            ValidationError: If a field is missing or out of range
            ConflictError: If the SKU already exists
        """
        sku = validation.required_text(sku, "SKU")
        name = validation.required_text(name, "Product name")
        unit_price = validation.non_negative_money(unit_price, "Unit price")
        price = validation.non_negative_money(price, "Price")
        stock_level = validation.non_negative_quantity(stock_level, "Stock level")
        reorder_level = validation.non_negative_quantity(reorder_level, "Reorder level")

        if self.db.get_product_by_sku(sku) is not None:
            raise ConflictError(duplicate_sku(sku))

        return self.db.create_product(
            sku=sku,
            name=name,
            description=description,
            unit_price=unit_price,
            price=price,
            stock_level=stock_level,
            reorder_level=reorder_level,
        )

    def get_product(self, product_id: int) -> Optional[ProductEntity]:
        """Get product by ID.

        Returns:
            Product entity or None if not found
        """
        return self.db.get_product(product_id)

    def get_product_by_sku(self, sku: str) -> Optional[ProductEntity]:
        """Get product by SKU."""
        return self.db.get_product_by_sku(sku)

    def require_product(self, product_id: int) -> ProductEntity:
        """Get product by ID or raise NotFoundError."""
        product = self.db.get_product(product_id)
        if product is None:
            raise NotFoundError(product_not_found(product_id))
        return product

    def list_products(self) -> list[ProductEntity]:
        """List all products ordered by name."""
        return self.db.list_products()

    def list_low_stock(self) -> list[ProductEntity]:
        """List products at or below their reorder level, lowest stock first."""
        products = [p for p in self.db.list_products() if p.stock_level <= p.reorder_level]
        return sorted(products, key=lambda p: (p.stock_level, p.name))

    def update_product(
        self,
        product_id: int,
        sku: Optional[str] = None,
        name: Optional[str] = None,
        description: Optional[str] = None,
        unit_price: Optional[Decimal] = None,
        price: Optional[Decimal] = None,
        reorder_level: Optional[int] = None,
    ) -> None:
        """Update product fields.

        Stock level is not editable here; use adjust_stock.

        Raises:
            NotFoundError: If product doesn't exist
            ConflictError: If the new SKU belongs to another product
            ValidationError: If a value is out of range
        """
        self.require_product(product_id)

        if sku is not None:
            sku = validation.required_text(sku, "SKU")
            existing = self.db.get_product_by_sku(sku)
            if existing is not None and existing.id != product_id:
                raise ConflictError(duplicate_sku(sku))
        if name is not None:
            name = validation.required_text(name, "Product name")
        if unit_price is not None:
            unit_price = validation.non_negative_money(unit_price, "Unit price")
        if price is not None:
            price = validation.non_negative_money(price, "Price")
        if reorder_level is not None:
            reorder_level = validation.non_negative_quantity(reorder_level, "Reorder level")

        self.db.update_product(
            product_id,
            sku=sku,
            name=name,
            description=description,
            unit_price=unit_price,
            price=price,
            reorder_level=reorder_level,
        )

    def adjust_stock(self, product_id: int, delta: int) -> int:
        """Manually adjust a product's stock level.

        Args:
            product_id: Product ID
            delta: Signed number of units to add

        Returns:
            New stock level

        Raises:
            NotFoundError: If product doesn't exist
            ValidationError: If delta is zero or not a whole number
        """
        if isinstance(delta, bool) or not isinstance(delta, int) or delta == 0:
            raise ValidationError("Stock adjustment must be a non-zero whole number")
        self.require_product(product_id)

        new_level = self.counters.adjust_product_stock(product_id, delta)
        logger.info("Adjusted stock of product %s by %+d to %d", product_id, delta, new_level)
        return new_level

    def delete_product(self, product_id: int) -> None:
        """Delete a product no order or purchase refers to.

        Raises:
            NotFoundError: If product doesn't exist
            DependencyError: If order or purchase lines reference the product
        """
        self.require_product(product_id)

        line_count = self.db.get_product_line_count(product_id)
        if line_count > 0:
            raise DependencyError(product_delete_blocked(product_id, line_count))

        self.db.delete_product(product_id)
