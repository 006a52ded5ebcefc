"""Tests for payment status derivation and FIFO allocation planning."""

import pytest
from datetime import datetime
from decimal import Decimal

from shopledger.domain.entities import Order, PaymentStatus
from shopledger.domain.payment import derive_payment_status, plan_fifo_allocation


def _order(order_id, total, paid="0", created_at=None):
    return Order(
        id=order_id,
        customer_id=1,
        customer_name="Asha Traders",
        customer_address=None,
        salesman_id=None,
        discount=Decimal("0"),
        total=Decimal(total),
        amount_paid=Decimal(paid),
        payment_status=derive_payment_status(Decimal(paid), Decimal(total)),
        payment_mode=None,
        status="Pending",
        created_at=created_at or datetime(2024, 1, order_id),
    )


@pytest.mark.parametrize(
    "paid, total, expected",
    [
        ("0", "100", PaymentStatus.UNPAID),
        ("40", "100", PaymentStatus.PARTIAL),
        ("100", "100", PaymentStatus.PAID),
        ("0", "0", PaymentStatus.PAID),
    ],
)
def test_derive_payment_status(paid, total, expected):
    """Test payment status follows amount paid against total."""
    assert derive_payment_status(Decimal(paid), Decimal(total)) == expected


def test_fifo_settles_oldest_order_first():
    """Test a payment fills the oldest order before the next one."""
    orders = [_order(1, "100"), _order(2, "50")]

    applications, remaining = plan_fifo_allocation(orders, Decimal("120"))

    assert [(a.order_id, a.applied) for a in applications] == [
        (1, Decimal("100")),
        (2, Decimal("20")),
    ]
    assert applications[0].payment_status == PaymentStatus.PAID
    assert applications[1].payment_status == PaymentStatus.PARTIAL
    assert applications[1].new_amount_paid == Decimal("20")
    assert remaining == Decimal("0")


def test_fifo_sorts_by_creation_time_not_input_order():
    """Test orders are sorted by creation time before allocation."""
    newer = _order(1, "100", created_at=datetime(2024, 3, 1))
    older = _order(2, "100", created_at=datetime(2024, 2, 1))

    applications, _ = plan_fifo_allocation([newer, older], Decimal("60"))

    assert [a.order_id for a in applications] == [2]


def test_fifo_ties_broken_by_id():
    """Test orders created at the same instant are settled by id."""
    same_time = datetime(2024, 1, 1, 12, 0)
    orders = [_order(7, "10", created_at=same_time), _order(3, "10", created_at=same_time)]

    applications, _ = plan_fifo_allocation(orders, Decimal("15"))

    assert [(a.order_id, a.applied) for a in applications] == [
        (3, Decimal("10")),
        (7, Decimal("5")),
    ]


def test_fifo_overpayment_leaves_remainder():
    """Test money beyond everything owed is returned as remainder."""
    orders = [_order(1, "100", paid="70"), _order(2, "50")]

    applications, remaining = plan_fifo_allocation(orders, Decimal("200"))

    assert sum(a.applied for a in applications) == Decimal("80")
    assert remaining == Decimal("120")
    assert all(a.payment_status == PaymentStatus.PAID for a in applications)


def test_fifo_skips_orders_with_nothing_owed():
    """Test fully paid orders receive nothing."""
    orders = [_order(1, "100", paid="100"), _order(2, "50")]

    applications, remaining = plan_fifo_allocation(orders, Decimal("30"))

    assert [a.order_id for a in applications] == [2]
    assert remaining == Decimal("0")


def test_fifo_with_no_orders():
    """Test the whole payment remains when nothing is outstanding."""
    applications, remaining = plan_fifo_allocation([], Decimal("75"))

    assert applications == []
    assert remaining == Decimal("75")


def test_fifo_never_exceeds_amount_owed():
    """Test no order is paid beyond its total."""
    orders = [_order(1, "33.33"), _order(2, "66.67"), _order(3, "10")]

    applications, remaining = plan_fifo_allocation(orders, Decimal("99.99"))

    by_id = {o.id: o for o in orders}
    for app in applications:
        assert app.new_amount_paid <= by_id[app.order_id].total
    assert sum(a.applied for a in applications) + remaining == Decimal("99.99")
