"""Payment status derivation and FIFO payment allocation.

These functions are pure: they only compute what should be written. The
order service turns their output into ledger writes.
"""

from decimal import Decimal
from typing import Iterable

from shopledger.domain.entities import Order, PaymentApplication, PaymentStatus

ZERO = Decimal("0")


def derive_payment_status(amount_paid: Decimal, total: Decimal) -> PaymentStatus:
    """Derive the payment status of an order from what was paid.

    Paid when ``amount_paid >= total`` (this includes zero-total orders),
    Partial when something but not everything was paid, Unpaid otherwise.
    """
    if amount_paid >= total:
        return PaymentStatus.PAID
    if amount_paid > ZERO:
        return PaymentStatus.PARTIAL
    return PaymentStatus.UNPAID


def plan_fifo_allocation(
    orders: Iterable[Order], amount: Decimal
) -> tuple[list[PaymentApplication], Decimal]:
    """Spread a lump payment over outstanding orders, oldest first.

    Orders are settled strictly in creation order (ties broken by id). Each
    order receives ``min(remaining, owed)``. Orders that are already paid
    off are skipped.

    Args:
        orders: Outstanding orders of one customer
        amount: Payment received

    Returns:
        Tuple of (applications, remaining). ``remaining`` is the part of the
        payment not absorbed by any order and becomes balance credit. The
        applied amounts plus ``remaining`` always equal ``amount``.
    """
    remaining = amount
    applications: list[PaymentApplication] = []

    for order in sorted(orders, key=lambda o: (o.created_at, o.id)):
        if remaining <= ZERO:
            break

        owed = order.total - order.amount_paid
        if owed <= ZERO:
            continue

        applied = min(remaining, owed)
        new_amount_paid = order.amount_paid + applied
        applications.append(
            PaymentApplication(
                order_id=order.id,
                applied=applied,
                new_amount_paid=new_amount_paid,
                payment_status=derive_payment_status(new_amount_paid, order.total),
            )
        )
        remaining -= applied

    return applications, remaining
