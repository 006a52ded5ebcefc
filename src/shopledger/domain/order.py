"""Order domain service: order lifecycle and payment allocation.

Each workflow touches the orders table, customer balances and product
stock. The store commits every write on its own, so every workflow runs
under a WorkflowJournal and reports a mid-sequence failure as
PartialWriteError.

Balance convention: billing an order subtracts its total from the
customer's balance and payments add to it, so a negative balance is money
owed.
"""

import logging
from collections import defaultdict
from datetime import date
from decimal import Decimal
from typing import Any, Optional

from shopledger.database.base import Database
from shopledger.domain import validation
from shopledger.domain.counters import CounterAdjuster, select_counter_adjuster
from shopledger.domain.entities import (
    Order as OrderEntity,
    OrderDraft,
    OrderLineDraft,
    OrderStatus,
    OrderUpdate,
    PaymentAllocation,
    PaymentStatus,
)
from shopledger.domain.errors import (
    NotFoundError,
    ValidationError,
    customer_not_found,
    order_not_found,
    product_not_found,
)
from shopledger.domain.journal import WorkflowJournal
from shopledger.domain.payment import derive_payment_status, plan_fifo_allocation

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


class OrderService:
    """Service for creating, changing, deleting and settling orders."""

    def __init__(self, db: Database, counters: Optional[CounterAdjuster] = None):
        """Initialize order service.

        Args:
            db: Database instance
            counters: Counter adjuster; picked by capability detection if omitted
        """
        self.db = db
        self.counters = counters or select_counter_adjuster(db)

    # Queries
    def get_order(self, order_id: int) -> Optional[OrderEntity]:
        """Get order by ID, lines included.

        Returns:
            Order entity or None if not found
        """
        return self.db.get_order(order_id)

    def require_order(self, order_id: int) -> OrderEntity:
        """Get order by ID or raise NotFoundError."""
        order = self.db.get_order(order_id)
        if order is None:
            raise NotFoundError(order_not_found(order_id))
        return order

    def list_orders(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        customer_id: Optional[int] = None,
    ) -> list[OrderEntity]:
        """List orders, newest first."""
        return self.db.list_orders(
            start_date=start_date, end_date=end_date, customer_id=customer_id
        )

    def list_outstanding_orders(self, customer_id: int) -> list[OrderEntity]:
        """List a customer's orders that are not fully paid, oldest first."""
        return self.db.list_outstanding_orders(customer_id)

    # Create
    def _validate_lines(self, lines: list[OrderLineDraft]) -> None:
        if not lines:
            raise ValidationError("An order needs at least one line item")

        for index, line in enumerate(lines, start=1):
            if line.product_id is None:
                raise ValidationError(f"Line {index}: product is required")
            validation.positive_quantity(line.quantity, f"Line {index} quantity")
            validation.non_negative_quantity(line.free_quantity, f"Line {index} free quantity")
            validation.non_negative_money(line.unit_price, f"Line {index} unit price")
            validation.non_negative_money(
                line.effective_selling_price, f"Line {index} selling price"
            )

        for product_id in {line.product_id for line in lines}:
            if self.db.get_product(product_id) is None:
                raise NotFoundError(product_not_found(product_id))

    def create_order(self, draft: OrderDraft) -> OrderEntity:
        """Create an order, debit stock and bill the customer.

        Steps: insert header, insert lines, debit ``quantity + free_quantity``
        per product, apply ``amount_paid - total`` to the customer balance.

        Args:
            draft: Order input

        Returns:
            The persisted order

        Raises:
            ValidationError: If the draft is incomplete or amounts are out of range
            NotFoundError: If the customer or a product doesn't exist
            PartialWriteError: If a step after the header insert failed
        """
        if draft.customer_id is None:
            raise ValidationError("Customer is required")
        lines = list(draft.lines)
        self._validate_lines(lines)

        discount = validation.non_negative_money(draft.discount, "Discount")
        amount_paid = validation.non_negative_money(draft.amount_paid, "Amount paid")
        payment_mode = validation.payment_mode(draft.payment_mode)

        subtotal = sum(
            (line.quantity * line.effective_selling_price for line in lines), ZERO
        )
        if discount > subtotal:
            raise ValidationError(
                f"Discount {discount} cannot exceed the order subtotal {subtotal}"
            )
        total = subtotal - discount
        if amount_paid > total:
            raise ValidationError(
                f"Amount paid {amount_paid} cannot exceed the order total {total}"
            )

        customer = self.db.get_customer(draft.customer_id)
        if customer is None:
            raise NotFoundError(customer_not_found(draft.customer_id))

        stock_debits: dict[int, int] = defaultdict(int)
        for line in lines:
            stock_debits[line.product_id] += line.quantity + line.free_quantity
        balance_change = amount_paid - total

        journal = WorkflowJournal.begin(
            self.db,
            "create_order",
            {
                "customer_id": customer.id,
                "total": total,
                "amount_paid": amount_paid,
                "stock_debits": dict(stock_debits),
                "balance_change": balance_change,
            },
        )

        with journal.step("insert_order") as step:
            order_id = self.db.create_order(
                customer_id=customer.id,
                customer_name=customer.name,
                customer_address=customer.address,
                salesman_id=draft.salesman_id,
                discount=discount,
                total=total,
                amount_paid=amount_paid,
                payment_status=derive_payment_status(amount_paid, total).value,
                payment_mode=payment_mode,
                status=OrderStatus.PENDING.value,
                created_at=draft.created_at,
            )
            step.entity_id = order_id

        with journal.step("insert_lines"):
            self.db.add_order_lines(order_id, lines)

        for product_id, quantity in stock_debits.items():
            with journal.step(f"debit_stock:{product_id}"):
                self.counters.adjust_product_stock(product_id, -quantity)

        if balance_change != ZERO:
            with journal.step("adjust_balance"):
                self.counters.adjust_customer_balance(customer.id, balance_change)

        journal.complete()
        logger.info(
            "Created order %s for customer %s (total %s, paid %s)",
            order_id,
            customer.id,
            total,
            amount_paid,
        )
        return self.require_order(order_id)

    # Update
    def _resolve_update(
        self, order: OrderEntity, changes: OrderUpdate
    ) -> tuple[dict[str, Any], Decimal]:
        """Validate a sparse update against the current order.

        Returns:
            Tuple of (fields to persist, balance delta)
        """
        new_total = order.total
        if changes.total is not None:
            new_total = validation.non_negative_money(changes.total, "Total")

        new_paid = order.amount_paid
        if changes.amount_paid is not None:
            new_paid = validation.non_negative_money(changes.amount_paid, "Amount paid")

        if new_paid > new_total:
            raise ValidationError(
                f"Amount paid {new_paid} cannot exceed the order total {new_total}"
            )

        fields: dict[str, Any] = {
            "status": validation.order_status(changes.status),
            "payment_mode": validation.payment_mode(changes.payment_mode),
            "customer_name": changes.customer_name,
            "customer_address": changes.customer_address,
        }

        derived = derive_payment_status(new_paid, new_total)
        if changes.payment_status is not None:
            try:
                requested = PaymentStatus(changes.payment_status)
            except ValueError:
                raise ValidationError(f"Invalid payment status '{changes.payment_status}'")
            if requested != derived:
                raise ValidationError(
                    f"Payment status {requested.value} does not match amount paid "
                    f"{new_paid} of total {new_total} ({derived.value})"
                )
        if (
            changes.total is not None
            or changes.amount_paid is not None
            or changes.payment_status is not None
        ):
            fields["payment_status"] = derived.value
        if changes.total is not None:
            fields["total"] = new_total
        if changes.amount_paid is not None:
            fields["amount_paid"] = new_paid

        # Old values are read before anything is overwritten
        delta = (new_paid - order.amount_paid) - (new_total - order.total)
        return fields, delta

    def _apply_update(
        self,
        journal: WorkflowJournal,
        order: OrderEntity,
        fields: dict[str, Any],
        balance_delta: Decimal,
    ) -> None:
        if balance_delta != ZERO:
            with journal.step(f"adjust_balance:{order.id}"):
                self.counters.adjust_customer_balance(order.customer_id, balance_delta)

        with journal.step(f"update_order:{order.id}"):
            self.db.update_order(order.id, **fields)

    def update_order(self, order_id: int, changes: OrderUpdate) -> None:
        """Apply a sparse change to an order.

        When the amount paid changes, ``new - old`` is applied to the
        customer balance before the new value is saved. A total change is
        billed the same way, so deleting the order later still reverses
        exactly what was charged. Payment status is always re-derived.

        Args:
            order_id: Order ID
            changes: Fields to change

        Raises:
            NotFoundError: If order doesn't exist
            ValidationError: If the resulting amounts or statuses are invalid
            PartialWriteError: If the balance moved but the order update failed
        """
        order = self.require_order(order_id)
        if changes.is_empty():
            return

        fields, balance_delta = self._resolve_update(order, changes)

        journal = WorkflowJournal.begin(
            self.db,
            "update_order",
            {
                "order_id": order.id,
                "customer_id": order.customer_id,
                "old_amount_paid": order.amount_paid,
                "old_total": order.total,
                "fields": fields,
                "balance_delta": balance_delta,
            },
        )
        self._apply_update(journal, order, fields, balance_delta)
        journal.complete()

    # Delete
    def delete_order(self, order_id: int) -> None:
        """Delete an order and reverse its effects.

        Restores ``quantity + free_quantity`` per line to stock and adds
        ``total - amount_paid`` back to the customer balance.

        Raises:
            NotFoundError: If order doesn't exist
            PartialWriteError: If the order was deleted but a reversal failed
        """
        order = self.require_order(order_id)

        restocks: dict[int, int] = defaultdict(int)
        for line in order.lines:
            restocks[line.product_id] += line.stock_quantity
        refund = order.total - order.amount_paid

        journal = WorkflowJournal.begin(
            self.db,
            "delete_order",
            {
                "order_id": order.id,
                "customer_id": order.customer_id,
                "total": order.total,
                "amount_paid": order.amount_paid,
                "restocks": dict(restocks),
            },
        )

        with journal.step("delete_order") as step:
            self.db.delete_order(order.id)
            step.entity_id = order.id

        for product_id, quantity in restocks.items():
            with journal.step(f"restore_stock:{product_id}"):
                self.counters.adjust_product_stock(product_id, quantity)

        if refund != ZERO:
            with journal.step("refund_balance"):
                self.counters.adjust_customer_balance(order.customer_id, refund)

        journal.complete()
        logger.info("Deleted order %s (refunded %s to customer %s)", order.id, refund, order.customer_id)

    # Payments
    def allocate_payment(self, customer_id: int, amount: Decimal) -> PaymentAllocation:
        """Settle a lump payment against a customer's orders, oldest first.

        Each order receives ``min(remaining, owed)`` through the same path
        as update_order; fully paid orders are also marked Completed.
        Whatever is left after the last outstanding order is credited to
        the customer balance.

        Args:
            customer_id: Paying customer
            amount: Payment received

        Returns:
            The allocation: per-order applications and the credited remainder

        Raises:
            ValidationError: If amount is not positive
            NotFoundError: If customer doesn't exist
            PartialWriteError: If some but not all of the payment was recorded
        """
        amount = validation.positive_money(amount, "Payment amount")
        if self.db.get_customer(customer_id) is None:
            raise NotFoundError(customer_not_found(customer_id))

        outstanding = self.db.list_outstanding_orders(customer_id)
        applications, remaining = plan_fifo_allocation(outstanding, amount)
        orders_by_id = {order.id: order for order in outstanding}

        journal = WorkflowJournal.begin(
            self.db,
            "allocate_payment",
            {
                "customer_id": customer_id,
                "amount": amount,
                "applications": [
                    {"order_id": app.order_id, "applied": app.applied}
                    for app in applications
                ],
                "credit": remaining,
            },
        )

        for app in applications:
            order = orders_by_id[app.order_id]
            changes = OrderUpdate(
                amount_paid=app.new_amount_paid,
                payment_status=app.payment_status,
                status=(
                    OrderStatus.COMPLETED.value
                    if app.payment_status == PaymentStatus.PAID
                    else None
                ),
            )
            fields, balance_delta = self._resolve_update(order, changes)
            self._apply_update(journal, order, fields, balance_delta)

        if remaining > ZERO:
            with journal.step("credit_balance"):
                self.counters.adjust_customer_balance(customer_id, remaining)

        journal.complete()
        logger.info(
            "Allocated payment of %s for customer %s across %d orders, credited %s",
            amount,
            customer_id,
            len(applications),
            remaining,
        )
        return PaymentAllocation(
            customer_id=customer_id,
            amount=amount,
            applications=tuple(applications),
            credited=remaining,
        )
