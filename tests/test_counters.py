"""Tests for balance and stock counter adjustment."""

import warnings
import pytest
from decimal import Decimal

from shopledger.database.base import AtomicIncrementError
from shopledger.domain.counters import (
    AtomicCounterAdjuster,
    ReadModifyWriteAdjuster,
    select_counter_adjuster,
)
from shopledger.domain.customer import CustomerService
from shopledger.domain.entities import OrderDraft, OrderLineDraft
from shopledger.domain.errors import DegradedConsistencyWarning, NotFoundError
from shopledger.domain.order import OrderService
from shopledger.domain.product import ProductService


def test_atomic_adjuster_selected_when_supported(temp_db):
    """Test the store's atomic increments are used when available."""
    assert temp_db.supports_atomic_increment()
    assert isinstance(select_counter_adjuster(temp_db), AtomicCounterAdjuster)


def test_read_modify_write_selected_when_disabled(rmw_db):
    """Test the fallback is chosen when atomic increments are switched off."""
    assert not rmw_db.supports_atomic_increment()
    assert isinstance(select_counter_adjuster(rmw_db), ReadModifyWriteAdjuster)


def test_atomic_adjust_does_not_warn(temp_db, sample_customer):
    """Test atomic adjustments raise no degraded-consistency warning."""
    adjuster = AtomicCounterAdjuster(temp_db)

    with warnings.catch_warnings():
        warnings.simplefilter("error", DegradedConsistencyWarning)
        assert adjuster.adjust_customer_balance(sample_customer.id, Decimal("-120.50")) == Decimal("-120.50")
        assert adjuster.adjust_customer_balance(sample_customer.id, Decimal("20.50")) == Decimal("-100")

    assert temp_db.get_customer(sample_customer.id).balance == Decimal("-100")


def test_atomic_stock_adjust(temp_db, sample_products):
    """Test stock increments return the new level."""
    rice = sample_products["RICE-5"]
    adjuster = AtomicCounterAdjuster(temp_db)

    assert adjuster.adjust_product_stock(rice.id, -3) == 17
    assert adjuster.adjust_product_stock(rice.id, 5) == 22
    assert temp_db.get_product(rice.id).stock_level == 22


def test_atomic_adjust_missing_row(temp_db):
    """Test incrementing a missing customer raises NotFoundError."""
    with pytest.raises(NotFoundError):
        AtomicCounterAdjuster(temp_db).adjust_customer_balance(999, Decimal("1"))


def test_read_modify_write_warns(temp_db, sample_products):
    """Test every fallback adjustment emits a warning."""
    rice = sample_products["RICE-5"]
    adjuster = ReadModifyWriteAdjuster(temp_db)

    with pytest.warns(DegradedConsistencyWarning, match="product"):
        assert adjuster.adjust_product_stock(rice.id, -4) == 16

    assert temp_db.get_product(rice.id).stock_level == 16


def test_read_modify_write_missing_row(temp_db):
    """Test the fallback raises NotFoundError for a missing product."""
    with pytest.raises(NotFoundError):
        ReadModifyWriteAdjuster(temp_db).adjust_product_stock(999, 1)


def test_atomic_failure_falls_back(temp_db, sample_customer, monkeypatch):
    """Test a failing increment statement is retried as read-modify-write."""

    def broken_increment(customer_id, delta):
        raise AtomicIncrementError("RETURNING not supported")

    monkeypatch.setattr(temp_db, "increment_customer_balance", broken_increment)
    adjuster = AtomicCounterAdjuster(temp_db)

    with pytest.warns(DegradedConsistencyWarning):
        new_balance = adjuster.adjust_customer_balance(sample_customer.id, Decimal("25"))

    assert new_balance == Decimal("25")
    assert temp_db.get_customer(sample_customer.id).balance == Decimal("25")


def test_workflows_on_read_modify_write_store(rmw_db):
    """Test order and payment workflows give the same results without atomic increments."""
    customer_id = CustomerService(rmw_db).create_customer(name="Asha Traders")
    products = ProductService(rmw_db)
    product_id = products.create_product(
        sku="RICE-5", name="Basmati Rice 5kg", price=Decimal("450"), stock_level=20
    )
    orders = OrderService(rmw_db)

    with pytest.warns(DegradedConsistencyWarning):
        order = orders.create_order(
            OrderDraft(
                customer_id=customer_id,
                lines=[OrderLineDraft(product_id=product_id, quantity=2, unit_price=Decimal("450"))],
            )
        )
        orders.allocate_payment(customer_id, Decimal("1000"))

    assert products.get_product(product_id).stock_level == 18
    assert orders.get_order(order.id).amount_paid == Decimal("900")
    assert rmw_db.get_customer(customer_id).balance == Decimal("100")
