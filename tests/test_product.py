"""Tests for the product service."""

import pytest
from decimal import Decimal

from shopledger.domain.entities import (
    OrderDraft,
    OrderLineDraft,
    PurchaseDraft,
    PurchaseLineDraft,
    StockStatus,
)
from shopledger.domain.errors import (
    ConflictError,
    DependencyError,
    NotFoundError,
    ValidationError,
)


def test_create_product(product_service):
    """Test creating a product."""
    product_id = product_service.create_product(
        sku="SUGAR-1", name="Sugar 1kg", unit_price=Decimal("40"), price=Decimal("48"), stock_level=30
    )

    product = product_service.get_product(product_id)
    assert product.sku == "SUGAR-1"
    assert product.price == Decimal("48")
    assert product.stock_level == 30
    assert product.reorder_level == 10
    assert product_service.get_product_by_sku("SUGAR-1").id == product_id


def test_duplicate_sku(product_service, sample_products):
    """Test SKUs are unique."""
    with pytest.raises(ConflictError, match="RICE-5"):
        product_service.create_product(sku="RICE-5", name="Another Rice")


def test_update_to_existing_sku(product_service, sample_products):
    """Test a product cannot take another product's SKU."""
    with pytest.raises(ConflictError):
        product_service.update_product(sample_products["OIL-1"].id, sku="RICE-5")


def test_negative_price_rejected(product_service):
    """Test prices cannot be negative."""
    with pytest.raises(ValidationError, match="Price"):
        product_service.create_product(sku="X", name="X", price=Decimal("-1"))


def test_update_product(product_service, sample_products):
    """Test updating prices and reorder level."""
    oil = sample_products["OIL-1"]
    product_service.update_product(oil.id, price=Decimal("150"), reorder_level=15)

    updated = product_service.get_product(oil.id)
    assert updated.price == Decimal("150")
    assert updated.reorder_level == 15
    assert updated.stock_level == 50


def test_adjust_stock(product_service, sample_products):
    """Test manual stock adjustments in both directions."""
    rice = sample_products["RICE-5"]

    assert product_service.adjust_stock(rice.id, 5) == 25
    assert product_service.adjust_stock(rice.id, -30) == -5
    assert product_service.get_product(rice.id).stock_level == -5


@pytest.mark.parametrize("delta", [0, 1.5, True])
def test_adjust_stock_rejects_invalid_delta(product_service, sample_products, delta):
    """Test the delta must be a non-zero whole number."""
    with pytest.raises(ValidationError):
        product_service.adjust_stock(sample_products["RICE-5"].id, delta)


def test_adjust_stock_missing_product(product_service):
    """Test adjusting a missing product fails."""
    with pytest.raises(NotFoundError):
        product_service.adjust_stock(999, 1)


def test_stock_status(product_service, sample_products):
    """Test the stock badge follows stock and reorder level."""
    rice = sample_products["RICE-5"]
    assert rice.stock_status == StockStatus.IN_STOCK

    product_service.adjust_stock(rice.id, -15)
    assert product_service.get_product(rice.id).stock_status == StockStatus.LOW_STOCK

    product_service.adjust_stock(rice.id, -5)
    assert product_service.get_product(rice.id).stock_status == StockStatus.OUT_OF_STOCK


def test_list_low_stock(product_service, sample_products):
    """Test low stock lists products at or below reorder level, lowest first."""
    product_service.adjust_stock(sample_products["RICE-5"].id, -15)
    product_service.adjust_stock(sample_products["OIL-1"].id, -48)

    low = product_service.list_low_stock()
    assert [p.sku for p in low] == ["OIL-1", "RICE-5"]


def test_delete_product(product_service, sample_products):
    """Test deleting an unused product."""
    product_service.delete_product(sample_products["OIL-1"].id)

    assert product_service.get_product(sample_products["OIL-1"].id) is None


def test_delete_product_used_by_order(product_service, order_service, sample_customer, sample_products):
    """Test a product on an order cannot be deleted."""
    oil = sample_products["OIL-1"]
    order_service.create_order(
        OrderDraft(
            customer_id=sample_customer.id,
            lines=[OrderLineDraft(product_id=oil.id, quantity=1, unit_price=oil.price)],
        )
    )

    with pytest.raises(DependencyError):
        product_service.delete_product(oil.id)


def test_delete_product_used_by_purchase(product_service, purchase_service, sample_products):
    """Test a product on a purchase cannot be deleted."""
    rice = sample_products["RICE-5"]
    purchase_service.record_purchase(
        PurchaseDraft(
            supplier_name="Metro Wholesale",
            lines=[PurchaseLineDraft(product_id=rice.id, quantity=1, unit_cost=Decimal("370"))],
        )
    )

    with pytest.raises(DependencyError, match="1 order or purchase line"):
        product_service.delete_product(rice.id)
